"""mastery CLI: drives the engine against a JSON state file."""

import json
import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Annotated

import typer
from pydantic import ValidationError
from pydantic_settings import SettingsError

from mastery.application.config import EngineConfig, resolve_config
from mastery.application.engine import ActivityResult, MasteryEngine
from mastery.application.stats import StudyStatsService
from mastery.domain.errors import MasteryError
from mastery.domain.models import Flashcard
from mastery.domain.ports import Clock
from mastery.infrastructure.clock import FixedClock, SystemClock
from mastery.infrastructure.repository import MasteryRepository
from mastery.infrastructure.stores import JsonFileStore

# ---------------------------------------------------------------------------
# Root app
# ---------------------------------------------------------------------------

app = typer.Typer(
    help="mastery: XP, streaks and spaced-repetition flashcards for your studies.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s:%(name)s:%(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Subgroups
# ---------------------------------------------------------------------------

task_app = typer.Typer(help="Task events.", no_args_is_help=True)
focus_app = typer.Typer(help="Focus timer events.", no_args_is_help=True)
xp_app = typer.Typer(help="Experience points.", no_args_is_help=True)
card_app = typer.Typer(help="Flashcards and reviews.", no_args_is_help=True)
config_app = typer.Typer(help="Manage mastery configuration.", no_args_is_help=True)

app.add_typer(task_app, name="task")
app.add_typer(focus_app, name="focus")
app.add_typer(xp_app, name="xp")
app.add_typer(card_app, name="card")
app.add_typer(config_app, name="config")


# ---------------------------------------------------------------------------
# Global callback
# ---------------------------------------------------------------------------


@app.callback()
def main_callback(
    ctx: typer.Context,
    state_file: Annotated[
        Path | None, typer.Option(help="State file. Defaults to 'state_file' in config.")
    ] = None,
    at: Annotated[
        datetime | None,
        typer.Option(help="Pretend the current time is this instant (replays and testing)."),
    ] = None,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Increase verbosity. Repeat for more detail."
        ),
    ] = 0,
):
    """Global settings for mastery."""
    ctx.ensure_object(dict)
    ctx.obj["state_file"] = state_file
    ctx.obj["at"] = at
    ctx.obj["verbose"] = verbose


def _config(ctx: typer.Context) -> EngineConfig:
    """Resolve config with CLI overrides; invalid settings exit with code 1."""
    obj = ctx.obj or {}
    try:
        config = resolve_config(
            {
                "state_file": obj.get("state_file"),
                # 0 means no -v given, so the configured verbosity applies
                "verbose": obj.get("verbose") or None,
            }
        )
    except (ValidationError, SettingsError) as e:
        typer.secho(f"Error: invalid configuration: {e}", fg="red", err=True)
        raise typer.Exit(1)

    if config.verbose >= 2:
        logging.getLogger("mastery").setLevel(logging.DEBUG)
    return config


def _clock(ctx: typer.Context) -> Clock:
    at = (ctx.obj or {}).get("at")
    if at is None:
        return SystemClock()
    # Naive --at values are interpreted in local time
    return FixedClock(at if at.tzinfo else at.astimezone())


@contextmanager
def _engine(ctx: typer.Context) -> Iterator[MasteryEngine]:
    """Load state, yield an engine over it, save on success, report engine errors."""
    config = _config(ctx)
    repo = MasteryRepository(JsonFileStore(config.state_file), config.state_key)
    try:
        with repo.session() as state:
            yield MasteryEngine(_clock(ctx), state, config)
    except MasteryError as e:
        logger.debug(f"Command failed: {e!r}")
        typer.secho(f"Error: {e}", fg="red", err=True)
        raise typer.Exit(1)


def _report_activity(result: ActivityResult) -> None:
    typer.echo(f"+{result.xp_awarded} XP (total {result.experience_after.total_xp})")
    if result.streak is not None:
        typer.echo(f"Streak: {result.streak.current_streak} day(s)")
    if result.leveled_up:
        after = result.experience_after
        typer.secho(f"Level up! You are now level {after.level} ({after.title}).", fg="green")
    _report_achievements(result)


def _report_achievements(result: ActivityResult) -> None:
    for achievement in result.new_achievements:
        typer.secho(
            f"Achievement unlocked: {achievement.name} (+{achievement.xp_reward} XP)",
            fg="yellow",
        )


def _card_line(card: Flashcard) -> str:
    return (
        f"{card.id}  {card.subject.value:<11} {card.difficulty.value:<6} "
        f"due {card.due_date.isoformat()}  every {card.interval}d  "
        f"{card.accuracy:>3}%  {card.question}"
    )


# ---------------------------------------------------------------------------
# Root commands
# ---------------------------------------------------------------------------


@app.command()
def status(
    ctx: typer.Context,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """Show level, streak and review queue at a glance."""
    with _engine(ctx) as engine:
        snap = engine.snapshot()

    if json_output:
        typer.echo(
            json.dumps(
                {
                    "total_xp": snap.experience.total_xp,
                    "level": snap.experience.level,
                    "title": snap.experience.title,
                    "progress_to_next_level": round(snap.experience.progress_to_next_level, 2),
                    "current_streak": snap.display_streak,
                    "longest_streak": snap.streak.longest_streak,
                    "last_activity_date": (
                        snap.streak.last_activity_date.isoformat()
                        if snap.streak.last_activity_date
                        else None
                    ),
                    "total_cards": snap.total_cards,
                    "due_cards": snap.due_count,
                    "accuracy": snap.overall_accuracy,
                    "achievements": snap.unlocked_achievements,
                },
                indent=2,
            )
        )
        return

    exp = snap.experience
    typer.echo(
        f"Level {exp.level} {exp.title}  XP {exp.total_xp} "
        f"({exp.xp_into_level}/{exp.xp_for_next_level}, "
        f"{exp.progress_to_next_level:.1f}% to level {exp.level + 1})"
    )
    typer.echo(f"Streak: {snap.display_streak} day(s) (longest {snap.streak.longest_streak})")
    typer.echo(
        f"Cards: {snap.total_cards} total, {snap.due_count} due, "
        f"accuracy {snap.overall_accuracy}%"
    )
    typer.echo(f"Achievements: {len(snap.unlocked_achievements)}")


@app.command()
def stats(ctx: typer.Context):
    """Per-subject mastery and the cards that need the most work."""
    with _engine(ctx) as engine:
        today = engine.clock.today()
        service = StudyStatsService(engine.scheduler)
        rows = service.subject_mastery(today)
        weak = service.weak_cards(today)

    if not rows:
        typer.secho("No cards yet.", fg="yellow")
        return

    for row in rows:
        typer.echo(
            f"{row.subject.value:<11} cards {row.total_cards:>3}  due {row.due_cards:>3}  "
            f"mastered {row.mastered_cards:>3}  accuracy {row.accuracy:>3}%"
        )

    if weak:
        typer.secho(f"\nWeak cards: {len(weak)}", fg="yellow")
        for card in weak:
            typer.echo(
                f"  {card.card_id}  {card.accuracy}% accuracy, "
                f"{card.recent_lapses} recent lapse(s)"
            )


@app.command()
def achievements(ctx: typer.Context):
    """List achievements with progress."""
    with _engine(ctx) as engine:
        total_xp = engine.ledger.total_xp
        streak = engine.state.streak.current_streak
        tracker = engine.achievements
        lines = [
            (a, tracker.is_unlocked(a.id), tracker.progress(a, total_xp, streak))
            for a in tracker.catalogue
        ]

    for achievement, unlocked, progress in lines:
        mark = "x" if unlocked else " "
        typer.echo(
            f"[{mark}] {achievement.name:<18} {achievement.rarity.value:<9} "
            f"{progress:5.1f}%  {achievement.description}"
        )


# ---------------------------------------------------------------------------
# Activity subgroups
# ---------------------------------------------------------------------------


@task_app.command("done")
def task_done(ctx: typer.Context):
    """Record a completed task."""
    with _engine(ctx) as engine:
        result = engine.complete_task()
    _report_activity(result)


@focus_app.command("done")
def focus_done(ctx: typer.Context):
    """Record a completed focus session."""
    with _engine(ctx) as engine:
        result = engine.complete_focus_session()
    _report_activity(result)


@xp_app.command("add")
def xp_add(
    ctx: typer.Context,
    amount: Annotated[int, typer.Argument(help="XP to add (non-negative).")],
):
    """Grant XP directly."""
    with _engine(ctx) as engine:
        result = engine.grant_xp(amount)
    after = result.experience_after
    typer.echo(f"XP {after.total_xp} (level {after.level})")
    if result.leveled_up:
        typer.secho(f"Level up! You are now level {after.level} ({after.title}).", fg="green")
    _report_achievements(result)


@xp_app.command("reset")
def xp_reset(
    ctx: typer.Context,
    force: Annotated[bool, typer.Option("--force", "-f", help="Skip confirmation.")] = False,
):
    """Reset XP to zero."""
    if not force:
        typer.confirm("Reset all XP to zero?", abort=True)
    with _engine(ctx) as engine:
        engine.reset_xp()
    typer.echo("XP reset.")


# ---------------------------------------------------------------------------
# Card subgroup
# ---------------------------------------------------------------------------


@card_app.command("add")
def card_add(
    ctx: typer.Context,
    question: Annotated[str, typer.Argument(help="Question text.")],
    answer: Annotated[str, typer.Argument(help="Answer text.")],
    subject: Annotated[str, typer.Option("--subject", "-s", help="Subject name.")],
    difficulty: Annotated[
        str, typer.Option("--difficulty", "-d", help="easy, medium or hard.")
    ] = "medium",
):
    """Create a flashcard (due immediately)."""
    with _engine(ctx) as engine:
        card = engine.add_card(question, answer, subject, difficulty)
    typer.echo(card.id)


@card_app.command("delete")
def card_delete(
    ctx: typer.Context,
    card_id: Annotated[str, typer.Argument(help="Card id.")],
):
    """Permanently delete a flashcard and its history."""
    with _engine(ctx) as engine:
        engine.delete_card(card_id)
    typer.echo(f"Deleted {card_id}")


@card_app.command("list")
def card_list(
    ctx: typer.Context,
    subject: Annotated[str | None, typer.Option("--subject", "-s", help="Filter by subject.")] = None,
):
    """List flashcards in creation order."""
    with _engine(ctx) as engine:
        cards = engine.get_cards_by_subject(subject) if subject else engine.scheduler.cards
    if not cards:
        typer.secho("No cards found.", fg="yellow")
        return
    for card in cards:
        typer.echo(_card_line(card))


@card_app.command("due")
def card_due(
    ctx: typer.Context,
    subject: Annotated[str | None, typer.Option("--subject", "-s", help="Filter by subject.")] = None,
):
    """List cards due for review, oldest first."""
    with _engine(ctx) as engine:
        cards = engine.get_due_cards(subject)
    if not cards:
        typer.secho("Nothing due.", fg="green")
        return
    for card in cards:
        typer.echo(_card_line(card))


@card_app.command("review")
def card_review(
    ctx: typer.Context,
    card_id: Annotated[str, typer.Argument(help="Card id.")],
    correct: Annotated[
        bool, typer.Option("--correct/--incorrect", help="Whether you recalled the answer.")
    ],
):
    """Record a review outcome and reschedule the card."""
    with _engine(ctx) as engine:
        outcome = engine.review_card(card_id, correct)
    card = outcome.card
    typer.echo(f"Next review {card.due_date.isoformat()} (every {card.interval}d)")
    _report_activity(outcome.activity)


@card_app.command("accuracy")
def card_accuracy(
    ctx: typer.Context,
    card_id: Annotated[
        str | None, typer.Argument(help="Card id. Omit for overall accuracy.")
    ] = None,
):
    """Show accuracy for one card or across all cards."""
    with _engine(ctx) as engine:
        accuracy = engine.get_accuracy(card_id)
    typer.echo(f"{accuracy}%")


# ---------------------------------------------------------------------------
# Config subgroup
# ---------------------------------------------------------------------------


@config_app.command("show")
def config_show(ctx: typer.Context):
    """Display final resolved configuration."""
    config = _config(ctx)
    typer.echo(json.dumps(config.model_dump(mode="json"), indent=2, sort_keys=True))


def main():
    app()
