"""
dbgate CLI

Command-line interface for inspecting and querying configured databases.

Commands:
    dbgate list                      — Show available databases
    dbgate schema NAME               — Show table definitions
    dbgate exec NAME "SQL" [--yes]   — Execute a statement

Writes are confirmed interactively unless --yes is given. Databases
configured with allow_writes=false refuse writes regardless.
"""

from __future__ import annotations

import asyncio
import json

import click

from dbgate.config import build_registry, load_config
from dbgate.context import describe_available_resources
from dbgate.exceptions import DbGateError
from dbgate.gateway import ExecutionGateway
from dbgate.inspector import SchemaInspector
from dbgate.logging import configure_logging
from dbgate.registry import ResourceRegistry


def _confirm(message: str) -> bool:
    return click.confirm(message, default=False)


async def _close_all(registry: ResourceRegistry) -> None:
    for connector in registry.connectors():
        await connector.close()


def _run(registry: ResourceRegistry, coro) -> object:
    async def runner():
        try:
            return await coro
        finally:
            await _close_all(registry)

    try:
        return asyncio.run(runner())
    except DbGateError as e:
        raise click.ClickException(str(e)) from e


@click.group()
@click.version_option(version="0.1.0", prog_name="dbgate")
@click.option("--config", "config_path", type=click.Path(dir_okay=False), default=None,
              help="JSON config file (defaults to $DBGATE_CONFIG)")
@click.option("--log-level", default="WARNING", show_default=True, help="Log level")
@click.option("--json-logs", is_flag=True, help="Emit logs as JSON")
@click.pass_context
def app(ctx: click.Context, config_path: str | None, log_level: str, json_logs: bool) -> None:
    """dbgate — named databases behind a write-safety gate"""
    configure_logging(level=log_level, json_output=json_logs)
    try:
        ctx.obj = build_registry(load_config(config_path))
    except (OSError, ValueError, TypeError, DbGateError) as e:
        raise click.ClickException(f"Invalid configuration: {e}") from e


@app.command("list")
@click.pass_obj
def list_databases(registry: ResourceRegistry) -> None:
    """Show the databases available for querying."""
    click.echo(describe_available_resources(registry))


@app.command()
@click.argument("name")
@click.pass_obj
def schema(registry: ResourceRegistry, name: str) -> None:
    """Show the table definitions of database NAME."""
    tables = _run(registry, SchemaInspector(registry).describe_schema(name))
    for table, definition in tables.items():
        click.echo(f"-- {table}")
        click.echo(f"{definition};" if definition else "")


@app.command("exec")
@click.argument("name")
@click.argument("sql")
@click.option("--yes", "-y", is_flag=True, help="Skip the write confirmation prompt")
@click.pass_obj
def exec_sql(registry: ResourceRegistry, name: str, sql: str, yes: bool) -> None:
    """Execute SQL against database NAME and print rows as JSON lines."""
    gateway = ExecutionGateway(registry, confirmation_callback=None if yes else _confirm)
    result = _run(registry, gateway.execute_query(name, sql))
    for row in result.rows:
        click.echo(json.dumps(row, default=str))
    click.echo(f"({len(result.rows)} rows)", err=True)


def cli() -> None:
    """Main CLI entry point."""
    app()


if __name__ == "__main__":
    cli()
