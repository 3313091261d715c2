"""Command line interface for HabitPulse."""

from __future__ import annotations

import functools
from pathlib import Path
from typing import Optional

import click

from .config import BaseConfig
from .constants import ALL_CATEGORIES, HABIT_CATEGORIES, category_emoji, category_label
from .context import AppContext, create_app_context
from .errors import HabitPulseError
from .logging_config import setup_logging
from .models.habit import Habit
from .services.export import default_export_filename, export_habit_stats_csv, export_snapshot_json
from .services.formatting import format_short_date, format_streak
from .services.habit_store import HabitStore

LEVEL_MARKS = {"high": "#", "medium": "+", "low": ".", "none": " "}


def _handle_errors(func):
    """Report engine errors as click errors (message on stderr, exit code 1)."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except HabitPulseError as exc:
            raise click.ClickException(str(exc)) from exc

    return wrapper


def _resolve_id(store: HabitStore, ref: str) -> str:
    """Accept a full habit id or an unambiguous prefix of one."""

    if not ref or store.get_habit(ref) is not None:
        return ref
    matches = [h.id for h in store.habits if h.id.startswith(ref)]
    if len(matches) == 1:
        return matches[0]
    if len(matches) > 1:
        raise click.ClickException(f"Habit id prefix {ref!r} is ambiguous")
    return ref


def _habit_line(app: AppContext, habit: Habit) -> str:
    done = app.store.is_completed_today(habit.id)
    parts = [
        f"[{'x' if done else ' '}]",
        habit.name,
        f"({category_label(habit.category)})",
    ]
    if habit.streak > 0:
        parts.append(f"streak {format_streak(habit.streak)}")
    parts.append(f"since {format_short_date(habit.created_at)}")
    parts.append(f"id {habit.id[:8]}")
    return "  ".join(parts)


def _default_output(app: AppContext, suffix: str) -> Path:
    return Path(app.config.DATA_DIR) / "exports" / default_export_filename(app.clock.now(), suffix=suffix)


@click.group()
@click.option("--memory", is_flag=True, default=False, help="Use a throwaway in-memory store")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Echo log records to stderr")
@click.pass_context
@_handle_errors
def cli(ctx: click.Context, memory: bool, verbose: bool) -> None:
    """Track daily habits, streaks and completion rates."""

    if isinstance(ctx.obj, AppContext):
        return
    try:
        config = BaseConfig()
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc
    if memory:
        config.STORAGE_BACKEND = "memory"
    setup_logging(config, console=verbose)
    ctx.obj = create_app_context(config)


@cli.command("add")
@click.argument("name")
@click.option(
    "--category",
    "-c",
    type=click.Choice(HABIT_CATEGORIES),
    default="other",
    show_default=True,
)
@click.pass_obj
@_handle_errors
def add_command(app: AppContext, name: str, category: str) -> None:
    """Add a habit."""

    habit = app.store.add_habit(name, category)
    click.echo(f"Added {habit.name} ({category_label(habit.category)}) id {habit.id}")


@cli.command("list")
@click.option(
    "--category",
    "-c",
    type=click.Choice([ALL_CATEGORIES, *HABIT_CATEGORIES]),
    default=ALL_CATEGORIES,
    show_default=True,
)
@click.option("--grouped", is_flag=True, default=False, help="Group habits by category")
@click.pass_obj
@_handle_errors
def list_command(app: AppContext, category: str, grouped: bool) -> None:
    """List habits with today's completion state."""

    if not app.store.habits:
        click.echo("No habits yet. Add your first habit with `habitpulse add`.")
        return

    if grouped:
        groups = app.queries.grouped()
        if category != ALL_CATEGORIES:
            groups = {k: v for k, v in groups.items() if k == category}
        if not groups:
            click.echo("No habits in this category")
            return
        for name, habits in groups.items():
            count = f"{len(habits)} habit{'' if len(habits) == 1 else 's'}"
            click.echo(f"{category_emoji(name)} {category_label(name)} ({count})")
            for habit in habits:
                click.echo(f"  {_habit_line(app, habit)}")
        return

    habits = app.queries.filtered(category)
    if not habits:
        click.echo("No habits in this category")
        return
    for habit in habits:
        click.echo(_habit_line(app, habit))

    progress = app.stats.today_progress()
    click.echo(f"{progress.completed} / {progress.total} completed")


@cli.command("toggle")
@click.argument("habit_id")
@click.pass_obj
@_handle_errors
def toggle_command(app: AppContext, habit_id: str) -> None:
    """Mark a habit done (or not done) for today."""

    resolved = _resolve_id(app.store, habit_id)
    completed = app.store.toggle_habit(resolved)
    habit = app.store.get_habit(resolved)
    if completed:
        click.echo(f"Completed {habit.name} (streak {format_streak(habit.streak)})")
    else:
        click.echo(f"Marked {habit.name} as not done today")


@cli.command("delete")
@click.argument("habit_id")
@click.option("--yes", "-y", is_flag=True, default=False, help="Skip the confirmation prompt")
@click.pass_obj
@_handle_errors
def delete_command(app: AppContext, habit_id: str, yes: bool) -> None:
    """Delete a habit and its history."""

    resolved = _resolve_id(app.store, habit_id)
    habit = app.store.get_habit(resolved)
    if habit is None:
        click.echo(f"No habit with id {habit_id}; nothing deleted.")
        return
    if not yes:
        click.confirm("Are you sure you want to delete this habit?", abort=True)
    app.store.delete_habit(resolved)
    click.echo(f"Deleted {habit.name}")


@cli.command("stats")
@click.pass_obj
@_handle_errors
def stats_command(app: AppContext) -> None:
    """Show today's progress and overall statistics."""

    progress = app.stats.today_progress()
    summary = app.stats.summary()
    click.echo(f"Today: {progress.completed}/{progress.total} ({progress.percent}%)")
    click.echo(f"Current streak: {summary.current_streak}")
    click.echo(f"Longest streak: {summary.longest_streak}")
    click.echo(f"Completion rate: {summary.completion_rate}%")
    click.echo(f"Total completed: {summary.total_completed}")


@cli.command("week")
@click.pass_obj
@_handle_errors
def week_command(app: AppContext) -> None:
    """Show completion for the last seven days."""

    for day in app.stats.week_series():
        bar = "#" * (day.percent // 10)
        click.echo(
            f"{day.day_label} {day.day_of_month:>2}  {bar:<10} {day.percent:>3}%  ({day.completed}/{day.total})"
        )


@cli.command("habits-stats")
@click.pass_obj
@_handle_errors
def habits_stats_command(app: AppContext) -> None:
    """Show completion percentage and streak per habit."""

    stats = app.stats.per_habit_stats()
    if not stats:
        click.echo("Add habits to see performance stats")
        return
    for stat in stats:
        click.echo(
            f"{stat.name} ({category_label(stat.category)}): {stat.percent}%  streak {stat.streak}"
        )


@cli.command("calendar")
@click.option("--year", type=int, default=None)
@click.option("--month", type=click.IntRange(1, 12), default=None)
@click.pass_obj
@_handle_errors
def calendar_command(app: AppContext, year: Optional[int], month: Optional[int]) -> None:
    """Show a month of completion levels (# high, + medium, . low, * today)."""

    days = app.stats.calendar_month(year, month)
    first = days[0].date
    click.echo(first.strftime("%Y-%m"))
    click.echo(" ".join(f"{name:<3}" for name in ("Mo", "Tu", "We", "Th", "Fr", "Sa", "Su")).rstrip())
    cells = ["   "] * first.weekday()
    for day in days:
        mark = "*" if day.is_today else LEVEL_MARKS[day.level]
        cells.append(f"{day.date.day:>2}{mark}")
    for i in range(0, len(cells), 7):
        click.echo(" ".join(cells[i:i + 7]).rstrip())


@cli.command("export")
@click.option("--output", "-o", type=click.Path(dir_okay=False, path_type=Path), default=None)
@click.pass_obj
@_handle_errors
def export_command(app: AppContext, output: Optional[Path]) -> None:
    """Export habits and history as a JSON snapshot."""

    path = export_snapshot_json(
        snapshot=app.store.export_snapshot(),
        output_path=output or _default_output(app, "json"),
    )
    click.echo(f"Export written: {path}")


@cli.command("export-csv")
@click.option("--output", "-o", type=click.Path(dir_okay=False, path_type=Path), default=None)
@click.pass_obj
@_handle_errors
def export_csv_command(app: AppContext, output: Optional[Path]) -> None:
    """Export per-habit statistics as CSV."""

    path = export_habit_stats_csv(
        stats=app.stats.per_habit_stats(),
        output_path=output or _default_output(app, "csv"),
    )
    click.echo(f"Export written: {path}")


@cli.command("chart")
@click.option("--output", "-o", type=click.Path(dir_okay=False, path_type=Path), default=None)
@click.pass_obj
@_handle_errors
def chart_command(app: AppContext, output: Optional[Path]) -> None:
    """Render the last seven days as a PNG bar chart."""

    from .services.reports import export_week_png

    path = export_week_png(
        series=app.stats.week_series(),
        output_path=output or _default_output(app, "png"),
    )
    click.echo(f"Chart written: {path}")


def main() -> None:
    cli()


if __name__ == "__main__":  # pragma: no cover
    main()
