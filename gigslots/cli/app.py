"""
Main CLI application using Typer.
"""

import asyncio
import logging
from pathlib import Path
from typing import List, Optional, Annotated

import pendulum
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from ..config import AppConfig, load_config
from ..adapters.availability_client import AvailabilityClient
from ..adapters.mock_availability_client import MockAvailabilityClient
from ..domain.calendar_grid import MonthWindow, month_grid
from ..domain.date_range_selector import DateRangeSelector, SelectionMode
from ..domain.exceptions import GigSlotsError
from ..domain.models import AvailabilitySnapshot, weekday_name
from ..services.booking_service import BookingService

app = typer.Typer(
    name="gigslots",
    help="Find bookable slots and manage freelancer availability",
    add_completion=False
)

console = Console()

ConfigOption = Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")]
MockOption = Annotated[bool, typer.Option("--mock", help="Use bundled mock data instead of the API.")]


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show log output.")] = False,
):
    """gigslots command line interface."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def _build_client(config: AppConfig, mock: bool):
    if mock:
        return MockAvailabilityClient(timezone=config.timezone)
    return AvailabilityClient(
        base_url=config.api_base_url,
        timezone=config.timezone,
        timeout=config.request_timeout
    )


def _build_service(config: AppConfig, mock: bool) -> BookingService:
    return BookingService(
        availability_client=_build_client(config, mock),
        timezone=config.timezone,
        window_days=config.booking.window_days,
        default_duration_minutes=config.booking.default_duration_minutes,
    )


def _load_snapshot(service: BookingService, freelancer_id: str) -> AvailabilitySnapshot:
    snapshot = asyncio.run(service.load(freelancer_id))
    return snapshot or AvailabilitySnapshot()


def _parse_date(value: str, tz: str):
    try:
        return pendulum.from_format(value, "YYYY-MM-DD", tz=tz).date()
    except ValueError as e:
        console.print(f"[red]Error parsing date {value!r}: {e}[/red]")
        raise typer.Exit(1)


def _unbookable_reason(service: BookingService, snapshot: AvailabilitySnapshot, target, today) -> Optional[str]:
    if target < today:
        return "date is in the past"
    if target > today.add(days=service.window_days):
        return f"outside the {service.window_days}-day booking window"
    if snapshot.is_paused(target):
        return "freelancer has paused this date"
    if not service.is_date_bookable(snapshot, target, today):
        return "freelancer does not work on this day"
    return None


@app.command()
def slots(
    freelancer_id: Annotated[str, typer.Argument(help="Freelancer profile or user id")],
    date: Annotated[Optional[str], typer.Option("--date", "-d", help="Date (YYYY-MM-DD). Defaults to tomorrow.")] = None,
    config_file: ConfigOption = None,
    mock: MockOption = False,
):
    """
    List bookable one-hour slots of a freelancer for a date.

    Examples:

        gigslots slots fl-coach-01 --date 2026-10-26

        gigslots slots fl-coach-01 --mock
    """
    try:
        config = load_config(config_file)
        tz = config.timezone
        service = _build_service(config, mock)

        today = pendulum.today(tz).date()
        target = _parse_date(date, tz) if date else today.add(days=1)
        snapshot = _load_snapshot(service, freelancer_id)

        reason = _unbookable_reason(service, snapshot, target, today)
        if reason:
            console.print(f"[yellow]⚠ {target.format('ddd, MMM D, YYYY')} is not bookable: {reason}.[/yellow]")
            return

        found = service.slots_for(snapshot, target, now=pendulum.now(tz))

        if not found:
            console.print(
                f"[yellow]⚠ No bookable slots on {weekday_name(target).capitalize()}, "
                f"{target.format('MMM D, YYYY')}.[/yellow]"
            )
            return

        console.print(
            f"\n[bold green]✓ {len(found)} slot(s) on {target.format('ddd, MMM D, YYYY')}:[/bold green]\n"
        )
        for slot in found:
            console.print(f"  {slot.label}")
        console.print()

    except (FileNotFoundError, ValueError, GigSlotsError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def dates(
    freelancer_id: Annotated[str, typer.Argument(help="Freelancer profile or user id")],
    days: Annotated[Optional[int], typer.Option("--days", help="How many days ahead to offer")] = None,
    config_file: ConfigOption = None,
    mock: MockOption = False,
):
    """
    Show the dates a client can book, starting tomorrow.
    """
    try:
        config = load_config(config_file)
        tz = config.timezone
        service = _build_service(config, mock)
        snapshot = _load_snapshot(service, freelancer_id)

        today = pendulum.today(tz).date()
        bookable = service.bookable_dates(snapshot, today, days=days)

        if not bookable:
            console.print("[yellow]⚠ No bookable dates in the booking window.[/yellow]")
            return

        table = Table(title="Bookable dates", show_header=True, header_style="bold cyan")
        table.add_column("Date", style="bold yellow")
        table.add_column("Day")
        table.add_column("Slots", justify="right")

        for day in bookable:
            table.add_row(
                day.format("MMM D"),
                day.format("ddd"),
                str(len(service.slots_for(snapshot, day))),
            )

        console.print()
        console.print(table)
        console.print()

    except (FileNotFoundError, ValueError, GigSlotsError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def hours(
    freelancer_id: Annotated[Optional[str], typer.Argument(help="Freelancer id. Omit to show the configured defaults.")] = None,
    config_file: ConfigOption = None,
    mock: MockOption = False,
):
    """
    Summarize a freelancer's weekly working hours.
    """
    try:
        config = load_config(config_file)

        if freelancer_id is None:
            weekly = config.weekly_availability()
        else:
            weekly = _load_snapshot(_build_service(config, mock), freelancer_id).weekly

        console.print(f"\n{weekly.working_hours_text()}\n")

    except (FileNotFoundError, ValueError, GigSlotsError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def calendar(
    month: Annotated[Optional[str], typer.Option("--month", "-m", help="Month (YYYY-MM). Defaults to the current month.")] = None,
    months: Annotated[Optional[int], typer.Option("--months", help="Number of months to render. Defaults to calendar.initial_months.")] = None,
    config_file: ConfigOption = None,
):
    """
    Render Monday-first month grids.
    """
    try:
        config = load_config(config_file)
        tz = config.timezone
        today = pendulum.today(tz).date()

        if month:
            start = _parse_date(f"{month}-01", tz)
        else:
            start = today.start_of("month")

        window = MonthWindow(
            start,
            initial_months=months or config.calendar.initial_months,
            months_per_page=config.calendar.months_per_page,
            scroll_threshold_px=config.calendar.scroll_threshold_px,
        )

        for shown in window.months:
            table = Table(title=shown.format("MMMM YYYY"), show_header=True, header_style="bold cyan")
            for header in ("M", "T", "W", "T", "F", "S", "S"):
                table.add_column(header, justify="right")
            for week in month_grid(shown):
                table.add_row(*[
                    "" if day is None
                    else f"[bold magenta]{day.day}[/bold magenta]" if day == today
                    else str(day.day)
                    for day in week
                ])
            console.print(table)

    except (FileNotFoundError, ValueError, GigSlotsError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def pause(
    clicks: Annotated[List[str], typer.Argument(help="Dates clicked in order (YYYY-MM-DD). Two new dates in a row pause the whole range.")],
    window_end: Annotated[Optional[str], typer.Option("--until", help="Last date of the availability window (YYYY-MM-DD)")] = None,
    save: Annotated[bool, typer.Option("--save", help="Submit the paused dates to the API.")] = False,
    config_file: ConfigOption = None,
    mock: MockOption = False,
):
    """
    Toggle paused dates the way the calendar does and show the result.
    """
    try:
        config = load_config(config_file)
        tz = config.timezone
        today = pendulum.today(tz).date()

        selector = DateRangeSelector(
            mode=SelectionMode.PAUSE,
            start_date=today,
            end_date=_parse_date(window_end, tz) if window_end else None,
            today=today,
        )
        selector.open()

        for value in clicks:
            clicked = _parse_date(value, tz)
            if not selector.click(clicked):
                console.print(f"[yellow]Skipping {value}: not selectable[/yellow]")

        if not selector.can_apply:
            console.print("[yellow]⚠ No dates paused.[/yellow]")
            return

        paused = selector.apply()
        console.print(f"\n[bold]{selector.summary()}:[/bold] {', '.join(d.to_date_string() for d in paused)}")

        if save:
            _build_client(config, mock).save_paused_dates(paused)
            console.print("[green]✓ Paused dates saved[/green]")
        console.print()

    except (FileNotFoundError, ValueError, GigSlotsError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def extend(
    start: Annotated[str, typer.Argument(help="Window start (YYYY-MM-DD)")],
    end: Annotated[str, typer.Argument(help="Window end (YYYY-MM-DD)")],
    save: Annotated[bool, typer.Option("--save", help="Submit the window to the API.")] = False,
    config_file: ConfigOption = None,
    mock: MockOption = False,
):
    """
    Choose an availability window; the dates may be given in either order.
    """
    try:
        config = load_config(config_file)
        tz = config.timezone

        selector = DateRangeSelector(mode=SelectionMode.SELECT, today=pendulum.today(tz).date())
        selector.open()
        for value in (start, end):
            if not selector.click(_parse_date(value, tz)):
                console.print(f"[red]Error: {value} is in the past.[/red]")
                raise typer.Exit(1)

        summary = selector.summary()
        chosen = selector.apply()
        console.print(f"\n[bold]{summary}[/bold]")

        if save:
            _build_client(config, mock).save_availability_window(chosen.start, chosen.end)
            console.print("[green]✓ Availability window saved[/green]")
        console.print()

    except (FileNotFoundError, ValueError, GigSlotsError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]gigslots[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
