"""
Selection state machine behind the availability calendar.

Two mutually exclusive modes are supported:

- ``SelectionMode.SELECT``: choose a contiguous start/end range with two
  clicks (or drag the end date). With ``fixed_start`` the start never moves
  and clicks only extend the end.
- ``SelectionMode.PAUSE``: toggle a scattered set of paused dates. Clicking an
  unpaused date pauses it and starts a range; clicking a second date pauses
  every date in between.

All dates are immutable ``pendulum.Date`` values, so no time-of-day
normalization is needed anywhere.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, FrozenSet, Iterable, Optional

import pendulum
from pendulum import Date

from .calendar_grid import days_between
from .exceptions import IncompleteSelectionError

OpenChangeCallback = Callable[[bool], None]


class SelectionMode(str, Enum):
    SELECT = "select"
    PAUSE = "pause"


class SelectState(str, Enum):
    EMPTY = "empty"
    START_CHOSEN = "start_chosen"
    RANGE_COMPLETE = "range_complete"


@dataclass(frozen=True)
class DateRange:
    """A committed, inclusive date range."""
    start: Date
    end: Date

    def days(self) -> int:
        return days_between(self.start, self.end)

    def to_payload(self) -> dict:
        return {
            "startDate": self.start.to_date_string(),
            "endDate": self.end.to_date_string(),
        }


class DateRangeSelector:
    """
    Calendar selection state for one open/close cycle of the calendar.

    The caller owns the modal state: ``on_open_change`` is invoked with
    ``True``/``False`` whenever the selector is opened or closed.

    A reversed opened-with range is swapped. Without an explicit ``today``
    the current date in ``timezone`` decides what counts as the past.
    """

    def __init__(
        self,
        mode: SelectionMode = SelectionMode.SELECT,
        start_date: Optional[Date] = None,
        end_date: Optional[Date] = None,
        paused_dates: Iterable[Date] = (),
        fixed_start: bool = False,
        today: Optional[Date] = None,
        on_open_change: Optional[OpenChangeCallback] = None,
        timezone: str = "Asia/Kolkata"
    ):
        if start_date is not None and end_date is not None and end_date < start_date:
            start_date, end_date = end_date, start_date

        self.mode = SelectionMode(mode)
        self.fixed_start = fixed_start
        self.today = today or pendulum.today(timezone).date()
        self._on_open_change = on_open_change
        self.is_open = False

        # Select mode; also the availability window in pause mode
        self._initial_start = start_date
        self._initial_end = end_date
        self.start: Optional[Date] = start_date
        self.end: Optional[Date] = end_date
        self.tentative_end: Optional[Date] = None
        self.dragging = False

        # Pause mode
        self._initial_paused: FrozenSet[Date] = frozenset(paused_dates)
        self.paused: set = set(self._initial_paused)
        self.selection_start: Optional[Date] = None

    # -- lifecycle ---------------------------------------------------------

    def open(self) -> None:
        """
        Open the calendar.

        Select mode starts again from the values it was created with; pause
        mode keeps edits made before a previous close.
        """
        if self.mode is SelectionMode.SELECT:
            self._reset_select()
        self._set_open(True)

    def cancel(self):
        """
        Close without committing and return the opened-with selection.
        """
        if self.mode is SelectionMode.SELECT:
            self._reset_select()
            result = self._initial_range()
        else:
            self.selection_start = None
            result = sorted(self._initial_paused)
        self._set_open(False)
        return result

    @property
    def can_apply(self) -> bool:
        if self.mode is SelectionMode.SELECT:
            return self.start is not None and self.end is not None
        return bool(self.paused)

    def apply(self):
        """
        Commit the selection and close.

        Returns a DateRange in select mode or the sorted paused dates in
        pause mode.

        Raises:
            IncompleteSelectionError: If the selection cannot be applied yet
        """
        if not self.can_apply:
            raise IncompleteSelectionError(
                "Select start and end dates" if self.mode is SelectionMode.SELECT
                else "Select at least one date to pause"
            )

        if self.mode is SelectionMode.SELECT:
            result = DateRange(start=self.start, end=self.end or self.start)
            self._initial_start, self._initial_end = result.start, result.end
        else:
            result = sorted(self.paused)
            self._initial_paused = frozenset(self.paused)
            self.selection_start = None

        self._set_open(False)
        return result

    # -- pointer events ----------------------------------------------------

    def is_selectable(self, date: Date) -> bool:
        """A cell is selectable when it is not in the past (and, when pausing, in the window)."""
        if date < self.today:
            return False

        if self.mode is SelectionMode.PAUSE:
            return self._in_window(date) or date in self.paused

        return True

    def click(self, date: Date) -> bool:
        """
        Handle a click on a calendar cell.

        Returns True if the click changed the selection, False if it was ignored.
        """
        if not self.is_selectable(date):
            return False

        if self.mode is SelectionMode.PAUSE:
            self._toggle_paused(date)
            return True

        return self._select(date)

    def hover(self, date: Date) -> None:
        """Pointer moved over a cell: preview the range or resize while dragging."""
        if self.mode is not SelectionMode.SELECT or self.start is None:
            return

        if self.dragging:
            if date > self.start and date >= self.today:
                self.end = date
            return

        if self.end is None:
            self.tentative_end = date if date > self.start else None

    def press(self, date: Date) -> bool:
        """Pointer pressed on a cell; pressing the end date starts a drag."""
        if (
            self.mode is SelectionMode.SELECT
            and not self.fixed_start
            and self.end is not None
            and date == self.end
        ):
            self.dragging = True
        return self.dragging

    def release(self) -> None:
        """Pointer released anywhere; the dragged end becomes the committed end."""
        self.dragging = False
        self.tentative_end = None

    # -- queries -----------------------------------------------------------

    @property
    def state(self) -> SelectState:
        if self.start is None:
            return SelectState.EMPTY
        if self.end is None:
            return SelectState.START_CHOSEN
        return SelectState.RANGE_COMPLETE

    def is_selected(self, date: Date) -> bool:
        if self.mode is SelectionMode.PAUSE:
            return date in self.paused
        return date == self.start or date == self.end

    def is_in_range(self, date: Date) -> bool:
        """True for dates inside the (possibly previewed) range."""
        if self.mode is SelectionMode.PAUSE or self.start is None:
            return False

        end = self.end or self.tentative_end
        if end is None or end == self.start:
            return False

        return self.start <= date <= end

    @property
    def days_selected(self) -> int:
        if self.mode is SelectionMode.PAUSE:
            return len(self.paused)
        if self.start is None or self.end is None:
            return 0
        return days_between(self.start, self.end)

    def summary(self) -> str:
        """Footer text describing the current selection."""
        if self.mode is SelectionMode.PAUSE:
            count = len(self.paused)
            return f"{count} {'date' if count == 1 else 'dates'} paused"

        if self.start is None:
            return "Select start and end dates"
        if self.end is None:
            return f"{self.start.format('MMM D, YYYY')} - Select end date"

        days = self.days_selected
        return (
            f"{self.start.format('MMM D, YYYY')} - {self.end.format('MMM D, YYYY')} "
            f"({days} {'day' if days == 1 else 'days'} selected)"
        )

    def paused_payload(self) -> dict:
        return {"pausedDates": [date.to_date_string() for date in sorted(self.paused)]}

    # -- internals ---------------------------------------------------------

    def _select(self, date: Date) -> bool:
        if self.fixed_start and self.start is not None:
            if date <= self.start:
                return False
            self.end = date
            self.tentative_end = None
            return True

        if self.start is None or self.end is not None:
            self.start = date
            self.end = None
        elif date > self.start:
            self.end = date
        else:
            self.start, self.end = date, self.start

        self.tentative_end = None
        return True

    def _toggle_paused(self, date: Date) -> None:
        if date in self.paused:
            self.paused.discard(date)
            if self.selection_start == date:
                self.selection_start = None
            return

        if self.selection_start is None:
            self.paused.add(date)
            self.selection_start = date
            return

        first, last = sorted((self.selection_start, date))
        current = first
        while current <= last:
            self.paused.add(current)
            current = current.add(days=1)
        self.selection_start = None

    def _in_window(self, date: Date) -> bool:
        if self._initial_start is not None and date < self._initial_start:
            return False
        if self._initial_end is not None and date > self._initial_end:
            return False
        return True

    def _initial_range(self) -> Optional[DateRange]:
        if self._initial_start is None:
            return None
        return DateRange(start=self._initial_start, end=self._initial_end or self._initial_start)

    def _reset_select(self) -> None:
        self.start = self._initial_start
        self.end = self._initial_end
        self.tentative_end = None
        self.dragging = False

    def _set_open(self, is_open: bool) -> None:
        self.is_open = is_open
        if self._on_open_change is not None:
            self._on_open_change(is_open)

