"""
Month grid layout and lazy month pagination for the availability calendar.
"""

from typing import List, Optional

from pendulum import Date

Week = List[Optional[Date]]


def month_grid(month: Date) -> List[Week]:
    """
    Lay out a month as Monday-first weeks.

    Cells before the 1st and after the last day of the month are ``None``.
    """
    first_day = month.start_of("month")
    leading_blanks = first_day.weekday()  # 0=Monday
    days_in_month = first_day.days_in_month

    total_cells = -(-(leading_blanks + days_in_month) // 7) * 7

    cells: List[Optional[Date]] = []
    for index in range(total_cells):
        day_number = index - leading_blanks + 1
        if 1 <= day_number <= days_in_month:
            cells.append(first_day.set(day=day_number))
        else:
            cells.append(None)

    return [cells[i:i + 7] for i in range(0, total_cells, 7)]


def days_between(start: Date, end: Date) -> int:
    """Number of calendar days from start to end, both inclusive."""
    return abs(end.diff(start).in_days()) + 1


class MonthWindow:
    """
    The list of months rendered by the calendar.

    Starts with the months spanning the requested dates (never before
    ``minimum``) and only ever grows by appending months at the end.
    """

    def __init__(
        self,
        start: Date,
        end: Optional[Date] = None,
        minimum: Optional[Date] = None,
        initial_months: int = 6,
        months_per_page: int = 3,
        scroll_threshold_px: int = 100
    ):
        if minimum is not None and start < minimum:
            start = minimum

        self.months_per_page = months_per_page
        self.scroll_threshold_px = scroll_threshold_px

        first = start.start_of("month")
        last = (end or start).start_of("month")
        if last < first:
            last = first

        self._months: List[Date] = []
        current = first
        while current <= last or len(self._months) < initial_months:
            self._months.append(current)
            current = current.add(months=1)

    @property
    def months(self) -> List[Date]:
        return list(self._months)

    def load_more(self, count: Optional[int] = None) -> List[Date]:
        """Append ``count`` further months and return the newly added ones."""
        count = self.months_per_page if count is None else count
        last = self._months[-1]
        added = [last.add(months=i) for i in range(1, count + 1)]
        self._months.extend(added)
        return added

    def on_scroll(self, remaining_px: float) -> List[Date]:
        """Load more months when the scroll position is near the bottom."""
        if remaining_px < self.scroll_threshold_px:
            return self.load_more()
        return []

    def contains(self, date: Date) -> bool:
        month = date.start_of("month")
        return month in self._months
