# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""CLI entry point for inspecting a store (sqlstore command).

Commands:
    tables: List model tables with row count and current sequence value
        (store from SQLSTORE_* when no name is given)
    rows: Show the rows of one table
"""

from __future__ import annotations

import asyncio
import re
from typing import Any

import click
from rich.console import Console
from rich.table import Table

from .config import config_from_env
from .errors import SqlStoreError
from .model import ID_COLUMN
from .store import Store

console = Console()

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def _print_rows(
    rows: list[dict[str, Any]], title: str | None = None, caption: str | None = None
) -> None:
    """Print rows as a rich table."""
    if not rows:
        console.print("[dim]No rows.[/dim]")
        return
    table = Table(
        title=title, caption=caption or None, show_header=True, header_style="bold cyan"
    )
    keys = list(rows[0].keys())
    for key in keys:
        table.add_column(key)
    for row in rows:
        table.add_row(*["" if row.get(k) is None else str(row.get(k)) for k in keys])
    console.print(table)


async def list_tables(store: Store) -> list[dict[str, Any]]:
    """Return name, row count and sequence value for every model table."""
    async with store.transaction(read_only=True) as tx:
        names = await tx.fetch_all(
            "SELECT name FROM sqlite_master WHERE type = 'table' "
            "AND name NOT LIKE 'sqlite_%' ORDER BY name"
        )
        result = []
        for entry in names:
            name = entry["name"]
            count = await tx.fetch_one(f'SELECT COUNT(*) AS cnt FROM "{name}"')
            seq = await tx.fetch_one(
                f"SELECT seq FROM {store.adapter.sequence_table} WHERE name = ?", [name]
            )
            result.append({
                "table": name,
                "rows": count["cnt"] if count else 0,
                "sequence": seq["seq"] if seq else None,
            })
    return result


async def list_rows(
    store: Store, table: str, limit: int | None = None, order: str | None = None
) -> list[dict[str, Any]]:
    """Return the rows of one table, ordered by ID unless told otherwise."""
    if not _IDENTIFIER.match(table):
        raise click.BadParameter(f"Invalid table name: {table!r}", param_hint="TABLE")
    sql = f"SELECT * FROM {table} ORDER BY {order or ID_COLUMN}"
    if limit:
        sql += f" LIMIT {int(limit)}"
    async with store.transaction(read_only=True) as tx:
        return await tx.fetch_all(sql)


def _run(coro_factory: Any, store_name: str) -> Any:
    async def runner() -> Any:
        store = Store(store_name)
        try:
            return await coro_factory(store)
        finally:
            await store.close()

    try:
        return asyncio.run(runner())
    except SqlStoreError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise SystemExit(1) from exc


@click.group()
@click.version_option(package_name="genro-sqlstore")
def main() -> None:
    """Inspect sqlstore databases."""
    pass


@main.command("tables")
@click.argument("store_name", required=False)
def tables_cmd(store_name: str | None) -> None:
    """List tables with row count and sequence value.

    Without STORE_NAME the store comes from the SQLSTORE_* environment and
    its description is shown as caption.
    """
    caption = None
    if store_name is None:
        config = config_from_env()
        store_name, caption = config.store_name, config.description
    _print_rows(_run(list_tables, store_name), title=store_name, caption=caption)


@main.command("rows")
@click.argument("store_name")
@click.argument("table")
@click.option("--limit", "-n", type=int, default=None, help="Maximum rows to show")
@click.option("--order", default=None, help="ORDER BY expression (default: ID)")
def rows_cmd(store_name: str, table: str, limit: int | None, order: str | None) -> None:
    """Show the rows of TABLE."""
    rows = _run(lambda store: list_rows(store, table, limit, order), store_name)
    _print_rows(rows, title=table)


if __name__ == "__main__":
    main()
