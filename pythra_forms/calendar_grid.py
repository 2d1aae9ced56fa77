# pythra_forms/calendar_grid.py
"""
Month grids for calendar widgets.

Months are zero-based here (0 = January) because the calendar widgets keep
their view cursor that way; `datetime.date` months are one-based.
"""
from dataclasses import dataclass, replace
from datetime import date, timedelta
from typing import List, Optional

WEEKDAYS = "Sun Mon Tue Wed Thu Fri Sat".split(" ")
MONTHS = "JAN FEB MAR APR MAY JUN JUL AUG SEP OCT NOV DEC".split(" ")


@dataclass(frozen=True)
class DateCell:
    date: date
    offset: bool = False     # outside the displayed month
    disabled: bool = False
    today: bool = False
    selected: bool = False
    hidden: bool = False     # offset cell blanked by hideOffset

    def css_classes(self) -> List[str]:
        classes = []
        if self.today:
            classes.append("today")
        if self.selected:
            classes.append("selected")
        if self.offset:
            classes.append("offSet")
        if self.disabled:
            classes.append("disabled")
        return classes


CalendarGrid = List[List[DateCell]]


def _check_month(month: int):
    if not isinstance(month, int) or isinstance(month, bool):
        raise TypeError(f"month must be an int, got {type(month).__name__}")
    if not 0 <= month <= 11:
        raise ValueError(f"month must be between 0 and 11, got {month}")


def month_dates(year: int, month: int) -> CalendarGrid:
    """
    Return the weeks needed to show ``month`` of ``year``, Sunday first.

    The first row starts on the Sunday on or before the 1st, the last row
    ends on the Saturday on or after the last day, so the grid holds only
    whole weeks (4 to 6 of them).
    """
    _check_month(month)
    first = date(year, month + 1, 1)
    # date.weekday(): Monday == 0 ... Sunday == 6
    start = first - timedelta(days=(first.weekday() + 1) % 7)

    cells: List[DateCell] = []
    current = start
    while True:
        covered = current > first and current.month != first.month
        if covered and len(cells) % 7 == 0:
            break
        cells.append(DateCell(date=current, offset=current.month != first.month))
        current += timedelta(days=1)

    return [cells[i:i + 7] for i in range(0, len(cells), 7)]


def classify_cells(grid: CalendarGrid,
                   today: date,
                   selected: Optional[date] = None,
                   disablePast: bool = False,
                   hideOffset: bool = False) -> CalendarGrid:
    """
    Apply the rendering policy to a grid from `month_dates`:

    * ``disabled``: ``disablePast`` is set and the date is before ``today``
    * ``today``: the date is ``today``
    * ``selected``: the date is ``selected``
    * ``hidden``: ``hideOffset`` is set and the cell is an offset cell

    Comparisons are by calendar day; pass dates, not datetimes.
    """
    return [
        [
            replace(
                cell,
                disabled=disablePast and cell.date < today,
                today=cell.date == today,
                selected=selected is not None and cell.date == selected,
                hidden=hideOffset and cell.offset,
            )
            for cell in week
        ]
        for week in grid
    ]
