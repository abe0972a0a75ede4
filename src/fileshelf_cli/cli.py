from __future__ import annotations

import logging
from pathlib import Path

import typer

from fileshelf import load_config
from fileshelf.config import AppConfig, default_config
from fileshelf.errors import FileShelfError
from fileshelf.schemas import FileSummary
from fileshelf.service import FileService

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

app = typer.Typer(help="fileshelf CLI")
debug_app = typer.Typer(help="Debug commands")
app.add_typer(debug_app, name="debug")

_DB_PATH_OPTION = typer.Option(
    None,
    "--db-path",
    help="SQLite DB file path. Overrides storage.db_path from the config.",
)
_CONFIG_OPTION = typer.Option(
    None,
    "--config",
    help="Config file path (JSON or YAML).",
    exists=True,
    dir_okay=False,
    readable=True,
)


@app.command("upload")
def upload(
    path: Path = typer.Argument(
        ...,
        help="File to store.",
        exists=True,
        dir_okay=False,
        readable=True,
    ),
    name: str | None = typer.Option(None, "--name", help="Stored file name. Defaults to the path's name."),
    mime: str | None = typer.Option(None, "--mime", help="MIME type. Guessed from the name when omitted."),
    db_path: Path | None = _DB_PATH_OPTION,
    config_path: Path | None = _CONFIG_OPTION,
) -> None:
    """Store a file and print its assigned id."""
    service = _build_service(config_path, db_path)
    try:
        persisted = service.upload_path(path, name=name, mime=mime)
    except (ValueError, FileShelfError) as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1) from exc

    typer.echo(
        f"stored id={persisted.id} name={persisted.name} "
        f"mime={persisted.mime} size={persisted.size}"
    )


@app.command("load")
def load(
    file_id: int = typer.Option(..., "--id", help="Persisted file id.", min=1),
    db_path: Path | None = _DB_PATH_OPTION,
    config_path: Path | None = _CONFIG_OPTION,
) -> None:
    """Check that a file exists, then print its metadata."""
    service = _build_service(config_path, db_path)
    try:
        result = service.load(file_id)
    except FileShelfError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1) from exc

    if not result.found:
        typer.echo(f"not found id={file_id}", err=True)
        raise typer.Exit(code=1)

    typer.echo(f"found id={result.id} name={result.name} mime={result.mime} size={result.size}")


@app.command("exists")
def exists(
    file_id: int = typer.Option(..., "--id", help="Persisted file id. Any integer is accepted."),
    db_path: Path | None = _DB_PATH_OPTION,
    config_path: Path | None = _CONFIG_OPTION,
) -> None:
    """Print whether a file with the given id is stored."""
    service = _build_service(config_path, db_path)
    try:
        found = service.lookup.exists(file_id)
    except FileShelfError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1) from exc

    typer.echo(f"exists id={file_id} {str(found).lower()}")


@app.command("list")
def list_files(
    limit: int | None = typer.Option(None, "--limit", help="Show at most N files.", min=1),
    db_path: Path | None = _DB_PATH_OPTION,
    config_path: Path | None = _CONFIG_OPTION,
) -> None:
    """List stored files, newest first."""
    service = _build_service(config_path, db_path)
    try:
        summaries = service.store.list_files(limit=limit)
    except FileShelfError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1) from exc

    typer.echo(_render_file_table(summaries))
    typer.echo(f"total={len(summaries)}")


@debug_app.command("storage")
def debug_storage(
    db_path: Path | None = _DB_PATH_OPTION,
    config_path: Path | None = _CONFIG_OPTION,
) -> None:
    """Run storage and cache smoke test."""
    service = _build_service(config_path, db_path)

    try:
        stored = service.upload(b"smoke_ok", name="debug-storage.txt")
        found = service.lookup.exists(stored.id)
        first = service.lookup.get(stored.id)
        second = service.lookup.get(stored.id)
    except FileShelfError as exc:
        typer.echo(f"storage smoke test failed: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    if not found or first.data != b"smoke_ok" or second != first:
        typer.echo("storage smoke test failed", err=True)
        raise typer.Exit(code=1)

    typer.echo("storage ok")


def _build_service(config_path: Path | None, db_path: Path | None) -> FileService:
    config = _load_app_config(config_path)
    logging.basicConfig(level=config.logging.level, format=LOG_FORMAT)
    try:
        return FileService.from_config(config, db_path=db_path)
    except (ValueError, FileShelfError) as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1) from exc


def _load_app_config(config_path: Path | None) -> AppConfig:
    if config_path is None:
        return default_config()
    try:
        return load_config(config_path)
    except ValueError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1) from exc


def _render_file_table(summaries: list[FileSummary]) -> str:
    if not summaries:
        return "no files stored"

    headers = ("id", "name", "mime", "size")
    rows = [
        (
            str(summary.id),
            _truncate(summary.name, limit=60),
            summary.mime,
            str(summary.size),
        )
        for summary in summaries
    ]

    widths = [
        max(len(headers[column]), *(len(row[column]) for row in rows))
        for column in range(len(headers))
    ]

    def _line(values: tuple[str, str, str, str]) -> str:
        return " | ".join(
            value.ljust(widths[index]) for index, value in enumerate(values)
        )

    divider = "-+-".join("-" * width for width in widths)
    body = [_line(headers), divider]
    body.extend(_line(row) for row in rows)
    return "\n".join(body)


def _truncate(text: str, *, limit: int) -> str:
    if len(text) <= limit:
        return text
    return f"{text[: limit - 3]}..."


def main() -> None:
    """CLI entrypoint."""
    app()


if __name__ == "__main__":
    main()
