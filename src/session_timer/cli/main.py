"""Main CLI interface for Session Timer."""

import asyncio
import functools
import json
import logging
from pathlib import Path
from typing import Awaitable, List, Optional, TypeVar

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from session_timer import __version__
from session_timer.config import HOME_ENV_VAR, TimerConfig
from session_timer.core.breakdown import breakdown as daily_breakdown
from session_timer.core.clock import AsyncioTickScheduler, TimerClock, format_time
from session_timer.core.errors import ConfigError, SessionTimerError
from session_timer.core.periods import summarize
from session_timer.core.recorder import SessionRecorder
from session_timer.core.storage import JsonFileKeyValueStore
from session_timer.core.store import ConfirmCallback, SessionSetStore
from session_timer.models.period import SessionSummaryPeriod
from session_timer.models.session import SavedSessionSet

console = Console()
logger = logging.getLogger("session_timer")

T = TypeVar("T")

STOPWATCH_HELP = (
    "[bold]s[/bold] start/stop  [bold]r[/bold] reset  [bold]v[/bold] save batch  "
    "[bold]Enter[/bold] show time  [bold]q[/bold] quit"
)


def _configure_logging(verbose: bool) -> None:
    handler = RichHandler(console=Console(stderr=True), show_path=False)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.handlers = [handler]
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


def _confirm_callback(yes: bool) -> ConfirmCallback:
    """Prompt on a worker thread so the event loop keeps delivering ticks."""
    if yes:
        return lambda message: True

    async def ask(message: str) -> bool:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(
            None, functools.partial(click.confirm, message, default=False)
        )

    return ask


def _build_store(config: TimerConfig, yes: bool = False) -> SessionSetStore:
    """Create a SessionSetStore backed by files in the data directory."""
    return SessionSetStore(
        JsonFileKeyValueStore(config.storage_dir),
        key=config.sets_key,
        confirm=_confirm_callback(yes),
        name_format=config.name_format,
    )


def _run(coro: Awaitable[T]) -> T:
    """Run a coroutine, turning core errors into a clean CLI abort."""
    try:
        return asyncio.run(coro)
    except SessionTimerError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise click.Abort() from e


async def _load_sets(store: SessionSetStore) -> List[SavedSessionSet]:
    return await store.load_or_empty()


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--data-dir",
    type=click.Path(file_okay=False, path_type=Path),
    envvar=HOME_ENV_VAR,
    default=None,
    help="Directory holding config.json and saved sessions",
)
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
@click.pass_context
def main(ctx: click.Context, data_dir: Optional[Path], verbose: bool):
    """Session Timer - stopwatch sessions and bi-weekly summaries."""
    _configure_logging(verbose)
    try:
        ctx.obj = TimerConfig.load(data_dir)
    except ConfigError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise click.Abort() from e


@main.command()
@click.pass_obj
def init(config: TimerConfig):
    """Create the data directory and config.json."""
    if config.config_file.exists():
        console.print(f"[yellow]Already initialized: {config.config_file}[/yellow]")
        return

    config_file = config.save()
    config.storage_dir.mkdir(parents=True, exist_ok=True)
    console.print(f"[green]✅ Initialized Session Timer in {config_file.parent}[/green]")


@main.command()
@click.pass_obj
def stopwatch(config: TimerConfig):
    """Run the stopwatch interactively."""
    _run(_stopwatch_loop(config, _build_store(config)))


def _read_command() -> str:
    return click.get_text_stream("stdin").readline()


async def _stopwatch_loop(config: TimerConfig, store: SessionSetStore) -> None:
    await store.load_or_empty()
    clock = TimerClock(AsyncioTickScheduler(), tick_ms=config.tick_ms)
    recorder = SessionRecorder()
    loop = asyncio.get_running_loop()

    console.print(STOPWATCH_HELP)
    while True:
        line = await loop.run_in_executor(None, _read_command)
        if not line:
            # EOF
            clock.reset()
            break

        command = line.strip().lower()
        if command == "s":
            if clock.is_running:
                session = recorder.stop_clock(clock)
                if session is None:
                    console.print("[yellow]Stopped at 00:00.00, nothing recorded[/yellow]")
                else:
                    console.print(
                        f"Stopped at [cyan]{format_time(session.duration)}[/cyan] "
                        f"({len(recorder)} in batch, "
                        f"total {format_time(recorder.total_time())})"
                    )
            else:
                clock.start()
                console.print(f"Running from {format_time(clock.elapsed_ms)}")
        elif command == "r":
            clock.reset()
            recorder.reset()
            console.print("Reset to 00:00.00, batch cleared")
        elif command == "v":
            if clock.is_running:
                recorder.stop_clock(clock)
            if not recorder.batch:
                console.print("[yellow]Nothing to save[/yellow]")
                continue
            saved = await store.save(recorder.batch)
            if saved is not None:
                recorder.reset()
                clock.reset()
                console.print(
                    f"[green]Saved {saved.name} "
                    f"({format_time(saved.total_time)})[/green]"
                )
        elif command == "q":
            clock.reset()
            break
        elif command == "":
            console.print(format_time(clock.elapsed_ms))
        else:
            console.print(f"[red]Unknown command: {command}[/red]")
            console.print(STOPWATCH_HELP)


@main.command()
@click.argument("durations", nargs=-1, required=True, type=click.IntRange(min=0))
@click.option("--yes", "-y", is_flag=True, help="Save without asking")
@click.pass_obj
def record(config: TimerConfig, durations: tuple, yes: bool):
    """Save already measured DURATIONS (milliseconds) as one session set."""
    recorder = SessionRecorder()
    for duration in durations:
        recorder.record_stop(duration)

    if not recorder.batch:
        console.print("[yellow]Nothing to save: every duration was zero[/yellow]")
        return

    store = _build_store(config, yes)
    saved = _run(_save_batch(store, recorder))
    if saved is None:
        console.print("[yellow]Not saved[/yellow]")
        return

    console.print(
        f"[green]Saved {saved.name}: {saved.session_count} session(s), "
        f"total {format_time(saved.total_time)}[/green]"
    )
    console.print(f"[bold]ID:[/bold] {saved.id}")


async def _save_batch(
    store: SessionSetStore, recorder: SessionRecorder
) -> Optional[SavedSessionSet]:
    await store.load_or_empty()
    saved = await store.save(recorder.batch)
    if saved is not None:
        recorder.reset()
    return saved


@main.command()
@click.pass_obj
def sets(config: TimerConfig):
    """List saved session sets."""
    saved_sets = _run(_load_sets(_build_store(config)))

    if not saved_sets:
        console.print("[yellow]No saved sessions found[/yellow]")
        return

    table = Table(title="Saved Sessions")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Name", style="green")
    table.add_column("Sessions", style="yellow")
    table.add_column("Total", style="blue", no_wrap=True)
    table.add_column("Created", style="magenta", no_wrap=True)

    for saved in reversed(saved_sets):
        table.add_row(
            str(saved.id),
            saved.name,
            str(saved.session_count),
            format_time(saved.total_time),
            saved.created_at.strftime("%Y-%m-%d %H:%M"),
        )

    console.print(table)


@main.command()
@click.argument("set_id", type=int)
@click.option("--yes", "-y", is_flag=True, help="Delete without asking")
@click.pass_obj
def delete(config: TimerConfig, set_id: int, yes: bool):
    """Delete the saved session set SET_ID."""
    store = _build_store(config, yes)
    deleted = _run(_delete_set(store, set_id))
    if deleted:
        console.print(f"[green]Deleted session set {set_id}[/green]")
    elif store.get(set_id) is None:
        console.print(f"[yellow]No session set with ID {set_id}[/yellow]")
    else:
        console.print("[yellow]Not deleted[/yellow]")


async def _delete_set(store: SessionSetStore, set_id: int) -> bool:
    await store.load_or_empty()
    return await store.delete(set_id)


@main.command()
@click.pass_obj
def periods(config: TimerConfig):
    """Show bi-weekly summaries, most recent first."""
    summary = summarize(_run(_load_sets(_build_store(config))))

    if not summary:
        console.print("[yellow]No saved sessions found[/yellow]")
        return

    table = Table(title="Bi-weekly Summary")
    table.add_column("#", style="cyan", no_wrap=True)
    table.add_column("Period", style="green")
    table.add_column("Sets", style="yellow")
    table.add_column("Sessions", style="yellow")
    table.add_column("Total", style="blue", no_wrap=True)

    for index, period in enumerate(summary):
        table.add_row(
            str(index),
            period.label,
            str(period.set_count),
            str(period.session_count),
            format_time(period.total_time),
        )

    console.print(table)


@main.command()
@click.argument("index", type=click.IntRange(min=0), default=0)
@click.option("--json", "as_json", is_flag=True, help="Print JSON for reporting tools")
@click.pass_obj
def breakdown(config: TimerConfig, index: int, as_json: bool):
    """Show per-day totals for period INDEX (0 is the most recent)."""
    summary = summarize(_run(_load_sets(_build_store(config))))

    if not summary:
        console.print("[yellow]No saved sessions found[/yellow]")
        return
    if index >= len(summary):
        console.print(
            f"[red]Error: no period {index}; there are {len(summary)} period(s)[/red]"
        )
        raise click.Abort()

    period = summary[index]
    days = daily_breakdown(period)

    if as_json:
        click.echo(json.dumps(_breakdown_report(period, days), indent=2))
        return

    table = Table(title=period.label)
    table.add_column("Date", style="magenta", no_wrap=True)
    table.add_column("Total", style="blue", no_wrap=True)
    for day in days:
        table.add_row(day.day.isoformat(), format_time(day.total_ms))
    console.print(table)
    console.print(
        f"[bold]Total:[/bold] {format_time(period.total_time)} "
        f"across {period.session_count} session(s)"
    )


def _breakdown_report(period: SessionSummaryPeriod, days: list) -> dict:
    return {
        "period": period.label,
        "startDate": period.start_date.isoformat(),
        "endDate": period.end_date.isoformat(),
        "totalTime": period.total_time,
        "sessionCount": period.session_count,
        "days": [
            {"date": day.day.isoformat(), "totalTime": day.total_ms} for day in days
        ],
    }


if __name__ == "__main__":
    main()
