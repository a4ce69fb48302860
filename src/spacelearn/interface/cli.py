"""SpaceLearn CLI: log learning entries and review the ones that are due."""

import asyncio
import json
import logging
import sys
from collections.abc import Awaitable, Callable
from datetime import datetime
from pathlib import Path
from typing import Annotated, Any, TypeVar

import typer
from pydantic import ValidationError as PydanticValidationError

from spacelearn.application.config import AppConfig, resolve_config
from spacelearn.application.factory import open_service
from spacelearn.application.learning_service import LearningService
from spacelearn.domain.errors import SpaceLearnError
from spacelearn.domain.models import Difficulty, LearningEntry
from spacelearn.infrastructure.adapters.codec import entry_to_record

T = TypeVar("T")

# ---------------------------------------------------------------------------
# Root app
# ---------------------------------------------------------------------------

app = typer.Typer(
    help="spacelearn: log what you learn, review it on a spaced schedule.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

config_app = typer.Typer(help="Manage spacelearn configuration.")
app.add_typer(config_app, name="config")

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s:%(name)s:%(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)

LOG_LEVELS = {0: logging.WARNING, 1: logging.INFO}

DAY_FORMATS = ["%Y-%m-%d"]

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _resolve_with_overrides(ctx: typer.Context | None = None, **overrides: Any) -> AppConfig:
    if ctx is not None and ctx.obj:
        overrides.setdefault("verbose", ctx.obj.get("verbose"))
        overrides.setdefault("backend", ctx.obj.get("backend"))
        overrides.setdefault("data_file", ctx.obj.get("data_file"))
    try:
        return resolve_config(overrides)
    except PydanticValidationError as e:
        typer.secho(f"Error: invalid configuration: {e}", fg="red", err=True)
        raise typer.Exit(1) from e


def _run(config: AppConfig, action: Callable[[LearningService], Awaitable[T]]) -> T:
    """Open the configured store, run ``action`` against it, and report domain errors."""

    async def runner() -> T:
        service = await open_service(config)
        try:
            return await action(service)
        finally:
            await service.close()

    try:
        return asyncio.run(runner())
    except SpaceLearnError as e:
        typer.secho(f"Error: {e}", fg="red", err=True)
        raise typer.Exit(1) from e


def _format_entry(entry: LearningEntry, max_step: int) -> str:
    line = f"{entry.label}  [step {entry.step}/{max_step}]  {entry.content}"
    if entry.tags:
        line += "  " + " ".join(f"#{t}" for t in entry.tags)
    return line


def _echo_entries(entries: list[LearningEntry], max_step: int, json_output: bool) -> None:
    if json_output:
        typer.echo(json.dumps([entry_to_record(e) for e in entries], indent=2, ensure_ascii=False))
        return
    for entry in entries:
        typer.echo(_format_entry(entry, max_step))


# ---------------------------------------------------------------------------
# Global callback
# ---------------------------------------------------------------------------


@app.callback()
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Increase verbosity. Repeat for more detail."
        ),
    ] = 0,
    quiet: Annotated[bool, typer.Option("--quiet", "-q", help="Only log warnings.")] = False,
    backend: Annotated[
        str | None, typer.Option(help="Entry store: memory, json, supabase.")
    ] = None,
    data_file: Annotated[
        Path | None, typer.Option(help="Entry file for the json backend.")
    ] = None,
):
    """Global settings for spacelearn."""
    level = 0 if quiet else 1 + verbose
    logging.getLogger().setLevel(LOG_LEVELS.get(level, logging.DEBUG))
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = level
    ctx.obj["backend"] = backend
    ctx.obj["data_file"] = data_file


# ---------------------------------------------------------------------------
# Entry commands
# ---------------------------------------------------------------------------


@app.command()
def add(
    ctx: typer.Context,
    content: Annotated[str, typer.Argument(help="What you learned.")],
    context: Annotated[
        str | None, typer.Option("--context", "-c", help="Where or why you learned it.")
    ] = None,
    tags: Annotated[
        list[str] | None, typer.Option("--tag", "-t", help="Tag the entry. Repeatable.")
    ] = None,
):
    """[bold green]Log[/bold green] a new learning entry."""
    config = _resolve_with_overrides(ctx)
    entry = _run(config, lambda s: s.add_entry(content, context, tags))
    typer.secho(f"Saved {entry.label}.", fg="green")


@app.command("list")
def list_cmd(
    ctx: typer.Context,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """List every entry, newest first."""
    config = _resolve_with_overrides(ctx)

    async def action(service: LearningService) -> list[LearningEntry]:
        return service.entries

    entries = _run(config, action)
    _echo_entries(entries, config.policy().max_step, json_output)


@app.command()
def due(
    ctx: typer.Context,
    today: Annotated[
        datetime | None,
        typer.Option(formats=DAY_FORMATS, help="Evaluate as of this day instead of today."),
    ] = None,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """Show the entries due for review."""
    config = _resolve_with_overrides(ctx)

    async def action(service: LearningService) -> list[LearningEntry]:
        return service.due_entries(today.date() if today else None)

    entries = _run(config, action)
    if json_output:
        _echo_entries(entries, config.policy().max_step, json_output=True)
        return
    if not entries:
        typer.secho("Nothing to review.", fg="green")
        return
    typer.secho(f"Due for review: {len(entries)}", fg="yellow")
    _echo_entries(entries, config.policy().max_step, json_output=False)


@app.command("today")
def today_cmd(
    ctx: typer.Context,
    day: Annotated[
        datetime | None, typer.Option(formats=DAY_FORMATS, help="Day to show. Defaults to today.")
    ] = None,
):
    """Show the entries logged on a given day."""
    config = _resolve_with_overrides(ctx)

    async def action(service: LearningService) -> list[LearningEntry]:
        return service.entries_created_on(day.date() if day else None)

    entries = _run(config, action)
    if not entries:
        typer.echo("Nothing logged.")
        return
    _echo_entries(entries, config.policy().max_step, json_output=False)


@app.command()
def review(
    ctx: typer.Context,
    ref: Annotated[str, typer.Argument(help="Entry id, label (#0007) or number.")],
    questions: Annotated[
        list[str] | None, typer.Option("--question", help="Self-quiz question. Repeatable.")
    ] = None,
    answers: Annotated[
        list[str] | None, typer.Option("--answer", help="Answer to a question. Repeatable.")
    ] = None,
    difficulty: Annotated[
        Difficulty | None, typer.Option(case_sensitive=False, help="How hard it felt.")
    ] = None,
):
    """[bold green]Complete[/bold green] a review and advance the entry."""
    config = _resolve_with_overrides(ctx)

    async def action(service: LearningService) -> LearningEntry:
        entry = service.find(ref)
        return await service.complete_review(entry.id, questions, answers, difficulty)

    entry = _run(config, action)
    typer.secho(
        f"Reviewed {entry.label}: now at step {entry.step}/{config.policy().max_step}.",
        fg="green",
    )


@app.command()
def edit(
    ctx: typer.Context,
    ref: Annotated[str, typer.Argument(help="Entry id, label (#0007) or number.")],
    content: Annotated[str | None, typer.Option(help="New content.")] = None,
    context: Annotated[
        str | None, typer.Option(help="New context. Pass an empty string to clear.")
    ] = None,
    tags: Annotated[
        list[str] | None, typer.Option("--tag", "-t", help="Replace tags. Repeatable.")
    ] = None,
):
    """Edit an entry's text or tags. Its schedule is not touched."""
    config = _resolve_with_overrides(ctx)

    async def action(service: LearningService) -> LearningEntry:
        entry = service.find(ref)
        return await service.edit_entry(entry.id, content, context, tags)

    entry = _run(config, action)
    typer.secho(f"Updated {entry.label}.", fg="green")


@app.command()
def delete(
    ctx: typer.Context,
    ref: Annotated[str, typer.Argument(help="Entry id, label (#0007) or number.")],
    force: Annotated[bool, typer.Option("--force", "-f", help="Skip confirmation.")] = False,
):
    """[bold red]Delete[/bold red] an entry and its review history."""
    config = _resolve_with_overrides(ctx)

    async def action(service: LearningService) -> LearningEntry:
        entry = service.find(ref)
        if not force:
            typer.confirm(f"Delete {entry.label} ({entry.content[:40]})?", abort=True)
        await service.delete_entry(entry.id)
        return entry

    entry = _run(config, action)
    typer.secho(f"Deleted {entry.label}.", fg="green")


@app.command()
def serve(
    port: Annotated[int, typer.Option(help="Port to bind the server to.")] = 8787,
    host: Annotated[str, typer.Option(help="Host to bind the server to.")] = "127.0.0.1",
    reload: Annotated[bool, typer.Option(help="Enable auto-reload.")] = False,
):
    """Run the HTTP API."""
    import uvicorn

    uvicorn.run("spacelearn.server:app", host=host, port=port, reload=reload)


# ---------------------------------------------------------------------------
# Config subgroup
# ---------------------------------------------------------------------------


@config_app.command("show")
def config_show(ctx: typer.Context):
    """Display final resolved configuration."""
    config = _resolve_with_overrides(ctx)
    d = {k: str(v) if isinstance(v, Path) else v for k, v in config.model_dump().items()}
    if d.get("supabase_key"):
        d["supabase_key"] = "***"
    typer.echo(json.dumps(d, indent=2))
