"""Command line entry points for snapsql."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, List, Optional

import typer

from .adapters.base import AdapterConfig
from .errors import AdapterError
from .persistence import Database

app = typer.Typer(
    name="snapsql",
    help="PostgreSQL-dialect SQL over a snapshot-persisted SQLite database.",
    no_args_is_help=True,
)


def _config(snapshot: Optional[str]) -> AdapterConfig:
    if snapshot:
        return AdapterConfig.from_env(snapshot_path=snapshot, source="cli")
    return AdapterConfig.from_env()


def _coerce(value: str) -> Any:
    """Interpret a parameter as a JSON scalar when it parses as one, else as text."""
    try:
        parsed = json.loads(value)
    except ValueError:
        return value
    if isinstance(parsed, (dict, list)):
        return value
    return parsed


@app.command("init-db")
def init_db(
    schema: Path = typer.Option(
        ..., "--schema", exists=True, dir_okay=False, readable=True, help="Schema DDL file."
    ),
    snapshot: Optional[str] = typer.Option(
        None, "--snapshot", help="Snapshot file path (defaults to $SQLITE_PATH)."
    ),
) -> None:
    """Apply the schema file to the snapshot database."""
    config = _config(snapshot)
    try:
        with Database(config, flush_on_exit=False) as database:
            count = database.bootstrap(schema)
    except AdapterError as exc:
        typer.echo(f"Schema bootstrap failed: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    typer.echo(f"Database initialized ({count} statements) at {config.descriptive_label()}")


@app.command()
def query(
    sql: str = typer.Argument(..., help="Statement using $1, $2, ... placeholders."),
    params: Optional[List[str]] = typer.Argument(None, help="Positional parameter values."),
    snapshot: Optional[str] = typer.Option(
        None, "--snapshot", help="Snapshot file path (defaults to $SQLITE_PATH)."
    ),
) -> None:
    """Execute one statement and print the resulting rows as JSON."""
    values = [_coerce(value) for value in params or []]
    try:
        with Database(_config(snapshot), flush_on_exit=False) as database:
            result = database.execute(sql, values)
    except AdapterError as exc:
        typer.echo(f"Query failed: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    typer.echo(json.dumps(result.rows, default=str))


def main() -> None:
    app()


if __name__ == "__main__":
    main()
