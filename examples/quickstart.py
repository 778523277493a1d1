"""dbgate quickstart — expose a SQLite database to an agent behind the write gate."""

import asyncio

from dbgate import DatabaseToolset, ExecutionGateway, ResourceRegistry, SQLiteConnector


async def ask(message: str) -> bool:
    return input(f"{message}\n[y/N] ").strip().lower() == "y"


async def main() -> None:
    registry = ResourceRegistry()
    registry.register("scratch", SQLiteConnector(":memory:", allow_writes=True))

    toolset = DatabaseToolset(registry, gateway=ExecutionGateway(registry, confirmation_callback=ask))
    for sql in ("CREATE TABLE notes (body TEXT)", "INSERT INTO notes VALUES ('hi')", "SELECT * FROM notes"):
        result = await toolset.execute(
            "database/executeSql", {"databaseName": "scratch", "sqlQuery": sql}
        )
        print(("ERROR " if result.is_error else "") + result.content)


asyncio.run(main())
