"""lexivault CLI — library, review sessions, missions and progress."""

import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Annotated

import typer

from lexivault.application.config import AppConfig, resolve_config
from lexivault.application.engagement import ACHIEVEMENTS, progress_story, streak_rank
from lexivault.application.factory import get_study_service
from lexivault.application.sessions import RecoverySession, ReviewSession
from lexivault.application.study_service import StudyService
from lexivault.domain.errors import LexivaultError

# ---------------------------------------------------------------------------
# Root app
# ---------------------------------------------------------------------------

app = typer.Typer(
    help="lexivault: spaced-repetition vocabulary trainer.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

collection_app = typer.Typer(help="Group items into collections.", no_args_is_help=True)
app.add_typer(collection_app, name="collection")

config_app = typer.Typer(help="Manage lexivault configuration.", no_args_is_help=True)
app.add_typer(config_app, name="config")

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logger = logging.getLogger(__name__)


def _setup_logging(verbose: int) -> None:
    level = logging.WARNING if verbose <= 1 else logging.INFO if verbose == 2 else logging.DEBUG
    logging.basicConfig(
        level=level,
        format="%(levelname)s:%(name)s:%(message)s",
        stream=sys.stderr,
    )


# ---------------------------------------------------------------------------
# Global callback
# ---------------------------------------------------------------------------


@app.callback()
def main_callback(
    ctx: typer.Context,
    data_dir: Annotated[
        Path | None, typer.Option(help="Directory holding the JSON stores.")
    ] = None,
    backend: Annotated[str | None, typer.Option(help="Store backend: json, memory.")] = None,
    timezone: Annotated[
        str | None, typer.Option(help="IANA time zone for day boundaries.")
    ] = None,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Increase verbosity. Repeat for more detail."
        ),
    ] = 1,
):
    """Global settings for lexivault."""
    ctx.ensure_object(dict)
    ctx.obj["overrides"] = {
        "data_dir": data_dir,
        "backend": backend,
        "timezone": timezone,
        "verbose": verbose,
    }
    _setup_logging(verbose)


def _config(ctx: typer.Context) -> AppConfig:
    overrides = (ctx.obj or {}).get("overrides", {})
    return resolve_config(overrides)


def _service(ctx: typer.Context) -> StudyService:
    return get_study_service(_config(ctx))


def _run(coro) -> None:
    try:
        asyncio.run(coro)
    except LexivaultError as e:
        typer.secho(f"Error: {e}", fg="red", err=True)
        raise typer.Exit(1) from e


# ---------------------------------------------------------------------------
# Library
# ---------------------------------------------------------------------------


@app.command()
def add(
    ctx: typer.Context,
    term: Annotated[str, typer.Argument(help="Word or phrase to learn.")],
    definition: Annotated[str, typer.Argument(help="Its meaning.")],
    example: Annotated[str, typer.Option(help="Example sentence.")] = "",
    ipa: Annotated[str | None, typer.Option(help="Phonetic transcription.")] = None,
    tag: Annotated[list[str] | None, typer.Option(help="Tag (repeatable).")] = None,
):
    """[bold green]Add[/bold green] a new item. It is due immediately."""
    service = _service(ctx)

    async def run():
        result = await service.add_item(
            term, definition, example=example, ipa=ipa, tags=tuple(tag or ())
        )
        if not result.ok:
            typer.secho(f'"{term}" is already in your library.', fg="yellow")
            raise typer.Exit(1)
        typer.secho(f'Added "{result.item.term}".', fg="green")

    _run(run())


@app.command()
def due(ctx: typer.Context):
    """List items due now."""
    service = _service(ctx)

    async def run():
        items = await service.due_items()
        if not items:
            typer.echo("Nothing due. Come back later!")
            return
        typer.echo(f"{len(items)} item(s) due:")
        for item in items:
            typer.echo(f"  [{item.status.value:<8}] {item.term}")

    _run(run())


# ---------------------------------------------------------------------------
# Sessions
# ---------------------------------------------------------------------------


async def _flip_loop(service: StudyService, session: ReviewSession) -> None:
    while session.current is not None:
        item = session.current
        typer.echo("")
        typer.secho(item.term, bold=True)
        typer.prompt("Press Enter to reveal", default="", show_default=False)
        typer.echo(f"  {item.definition}")
        if item.example:
            typer.echo(f"  e.g. {item.example}")

        answer = typer.prompt("Did you know it? [y/n/q]", default="y").strip().lower()
        if answer.startswith("q"):
            await service.cancel(session)
            break
        await service.answer(session, answer.startswith("y"))


def _summary(session: ReviewSession) -> None:
    answered = len(session.results)
    if session.cancelled:
        typer.secho(f"Session stopped after {answered} item(s).", fg="yellow")
    else:
        typer.secho(
            f"Session complete! {session.correct_count}/{answered} recalled.", fg="green"
        )


@app.command()
def review(ctx: typer.Context):
    """Flip-card review of everything due now."""
    service = _service(ctx)

    async def run():
        session = await service.start_review()
        if not session.queue:
            typer.echo("Nothing due. Come back later!")
            return
        await _flip_loop(service, session)
        _summary(session)

    _run(run())


@app.command()
def mission(ctx: typer.Context):
    """Flip-card review of today's mission."""
    service = _service(ctx)

    async def run():
        await service.refresh_mission()
        if not service.mission_available():
            typer.echo("No open mission today.")
            return
        session = await service.start_mission()
        await _flip_loop(service, session)
        _summary(session)

    _run(run())


async def _quiz_loop(service: StudyService, session: RecoverySession) -> None:
    while session.current_question is not None:
        question = session.current_question
        typer.echo("")
        typer.secho(question.definition, bold=True)
        for number, option in enumerate(question.options, start=1):
            typer.echo(f"  {number}. {option}")

        raw = typer.prompt("Your answer (number, q to quit)").strip()
        if raw.lower() == "q":
            await service.cancel(session)
            break
        choice = raw
        if raw.isdigit() and 1 <= int(raw) <= len(question.options):
            choice = question.options[int(raw) - 1]

        result = await service.choose(session, choice)
        if result.knew_it:
            typer.secho("Correct!", fg="green")
        else:
            typer.secho(f"It was: {question.correct_answer}", fg="red")


@app.command()
def quiz(ctx: typer.Context):
    """Multiple-choice recovery quiz over today's mission."""
    service = _service(ctx)

    async def run():
        await service.refresh_mission()
        if not service.mission_available():
            typer.echo("No open mission today.")
            return
        session = await service.start_recovery()
        await _quiz_loop(service, session)
        if session.cancelled:
            typer.secho("Quiz abandoned; nothing was recorded.", fg="yellow")
        else:
            _summary(session)

    _run(run())


# ---------------------------------------------------------------------------
# Progress
# ---------------------------------------------------------------------------


@app.command()
def stats(ctx: typer.Context):
    """Show streaks, mastery and achievements."""
    service = _service(ctx)

    async def run():
        await service.ensure_loaded()
        s = service.state.stats
        rank = streak_rank(s.streak)
        typer.echo(f"Items:          {len(service.state.items)}")
        typer.echo(f"Mastered:       {s.mastered_count}")
        typer.echo(f"Streak:         {s.streak} ({rank.title})")
        typer.echo(f"Longest streak: {s.longest_streak}")
        if s.daily_mission:
            status = "done" if s.daily_mission.completed else "open"
            typer.echo(
                f"Mission:        {s.daily_mission.date} "
                f"({len(s.daily_mission.item_ids)} items, {status})"
            )
        unlocked = set(s.unlocked_achievements)
        typer.echo("Achievements:")
        for achievement in ACHIEVEMENTS:
            mark = "x" if achievement.id in unlocked else " "
            typer.echo(f"  [{mark}] {achievement.title}: {achievement.description}")

    _run(run())


@app.command()
def story(ctx: typer.Context):
    """Tell the story of your progress so far."""
    service = _service(ctx)

    async def run():
        state = await service.ensure_loaded()
        for paragraph in progress_story(state.stats, state.items, state.history, service.now()):
            typer.echo(paragraph.replace("**", ""))

    _run(run())


@app.command()
def serve(
    host: Annotated[str, typer.Option(help="Bind address.")] = "127.0.0.1",
    port: Annotated[int, typer.Option(help="Bind port.")] = 8777,
):
    """Run the HTTP API."""
    import uvicorn

    uvicorn.run("lexivault.server:app", host=host, port=port)


# ---------------------------------------------------------------------------
# Collection subgroup
# ---------------------------------------------------------------------------


@collection_app.command("create")
def collection_create(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Collection name.")],
    icon: Annotated[str, typer.Option(help="Emoji icon.")] = "📚",
):
    """Create an empty collection."""
    service = _service(ctx)

    async def run():
        collection = await service.create_collection(name, icon)
        typer.echo(collection.id)

    _run(run())


@collection_app.command("add")
def collection_add(
    ctx: typer.Context,
    collection_id: Annotated[str, typer.Argument(help="Target collection ID.")],
    item_ids: Annotated[list[str], typer.Argument(help="Item IDs to add.")],
):
    """Add items to a collection."""
    service = _service(ctx)

    async def run():
        collection = await service.add_to_collection(collection_id, item_ids)
        typer.echo(f"{collection.name}: {len(collection.item_ids)} item(s)")

    _run(run())


# ---------------------------------------------------------------------------
# Config subgroup
# ---------------------------------------------------------------------------


@config_app.command("show")
def config_show(ctx: typer.Context):
    """Display final resolved configuration."""
    config = _config(ctx)
    d = {k: str(v) if isinstance(v, Path) else v for k, v in config.model_dump().items()}
    typer.echo(json.dumps(d, indent=2))


if __name__ == "__main__":
    app()
