# pythra_forms/datepicker.py
import logging
from datetime import date
from typing import Any, Callable, Dict, Optional

from .base import Widget, Key
from .calendar_grid import MONTHS, WEEKDAYS, CalendarGrid, DateCell, classify_cells, month_dates
from .classlist import Decoration
from .config import Config
from .controllers import ModelBinding
from .dateformat import format_date, try_parse_date
from .events import Event
from .field import Field, Input
from .popup import POSITIONS, Popup, PopupBinder, PopupRegistry
from .schema import AttributeSchema, is_boolean, is_in, is_instance, is_pattern, is_string, required
from .state import State, StatefulWidget, StatelessWidget
from .widgets import (
    Button, Column, Container, Grid, Icon, Table, TableBody, TableCell,
    TableHead, TableHeaderCell, TableRow,
)

logger = logging.getLogger(__name__)


class WeekBar(StatelessWidget):
    def build(self) -> Widget:
        return TableHead(children=[
            TableRow(children=[TableHeaderCell(data=day) for day in WEEKDAYS])
        ])


class MonthDateGrid(StatelessWidget):
    """
    The ``<tbody>`` of the calendar. Cells come pre-classified (see
    `calendar_grid.classify_cells`); hidden cells render empty and disabled
    cells are not selectable.
    """
    def __init__(self, cells: CalendarGrid, setDate: Callable[[date, Event], None], key: Optional[Key] = None):
        super().__init__(key=key)
        self.cells = cells
        self.setDate = setDate

    def buildCell(self, cell: DateCell) -> Widget:
        if cell.hidden:
            return TableCell(data="")
        onClick = None
        if not cell.disabled:
            onClick = lambda event, selected=cell.date: self.setDate(selected, event)
        return TableCell(
            data=cell.date.day,
            cssClass=" ".join(cell.css_classes()),
            attrs={"data-date": cell.date.isoformat()},
            onClick=onClick,
        )

    def build(self) -> Widget:
        return TableBody(children=[
            TableRow(cssClass="center aligned", children=[self.buildCell(cell) for cell in week])
            for week in self.cells
        ])


class DatePickerWidget(StatelessWidget):
    """The calendar panel shown inside the date picker's popup."""

    CSS = """
    div table.ui.table > tbody > tr > td, div table.ui.table > thead > tr > th { padding: .78571429em !important; }
    div table.ui.table > tbody td { cursor: pointer; font-weight: bold; }
    div table.ui.table > tbody td.offSet { font-weight: normal; color: grey; }
    div table.ui.table > tbody td.disabled { cursor: default; opacity: .45; }
    div table.ui.table > tbody td.today { background-color: orange !important; color: white; }
    div table.ui.table > tbody td.selected { background-color: blue !important; color: white; }
    div .prev-month, div .next-month { cursor: pointer; }
    """

    def __init__(self,
                 viewYear: int,
                 viewMonth: int,
                 cells: CalendarGrid,
                 setDate: Callable[[date, Event], None],
                 prevMonth: Callable[[Event], None],
                 nextMonth: Callable[[Event], None],
                 goToToday: Optional[Callable[[Event], None]] = None,
                 clear: Optional[Callable[[Event], None]] = None,
                 key: Optional[Key] = None):
        super().__init__(key=key)
        self.viewYear = viewYear
        self.viewMonth = viewMonth
        self.cells = cells
        self.setDate = setDate
        self.prevMonth = prevMonth
        self.nextMonth = nextMonth
        self.goToToday = goToToday
        self.clear = clear

    def build(self) -> Widget:
        footer = [
            Button("Today", onClick=self.goToToday, cssClass="mini basic go-today") if self.goToToday else None,
            Button("Clear", onClick=self.clear, cssClass="mini basic clear-date") if self.clear else None,
        ]
        return Container(cssClass="date-picker", children=[
            Grid(children=[
                Column(width=3, onClick=self.prevMonth, children=[
                    Icon("chevron left", cssClass="prev-month", color="blue"),
                ]),
                Column(width=10, textAlignment="center", children=[
                    Container(cssClass="mth-year", data=f"{MONTHS[self.viewMonth]} {self.viewYear}"),
                ]),
                Column(width=3, textAlignment="right", onClick=self.nextMonth, children=[
                    Icon("chevron right", cssClass="next-month", color="blue"),
                ]),
            ]),
            Table(veryBasic=True, size="small", children=[
                WeekBar(),
                MonthDateGrid(cells=self.cells, setDate=self.setDate),
            ]),
            Container(cssClass="date-picker-footer", children=footer) if any(footer) else None,
        ])


class DatePicker(StatefulWidget):
    """
    A read-only text field that opens a calendar popup.

    The selected date lives in ``model`` as a string formatted with
    ``format``; the widget only keeps which month it is showing. Browsing
    months never touches the model, selecting a day writes it.

    :param model: `ModelBinding` holding the formatted date (required).
    :param format: Date pattern, see `dateformat`; defaults to
        ``datepicker.format`` from the config, else ``"YYYY-MM-DD"``.
    :param disablePast: Days before today cannot be selected.
    :param hideOffset: Leading/trailing days of neighbouring months render blank.
    :param popupRegistry: Registry to open the popup in; the framework's one
        when omitted.
    """
    attrSchema = AttributeSchema({
        "format": [required(True), is_pattern()],
        "disablePast": [required(False), is_boolean()],
        "hideOffset": [required(False), is_boolean()],
        "model": [required(True), is_instance(ModelBinding)],
        "popupPosition": [required(False), is_in(POSITIONS)],
        "displayPopup": [required(False), is_string()],
        "hidePopup": [required(False), is_string()],
    })

    def __init__(self,
                 model: Optional[ModelBinding] = None,
                 key: Optional[Key] = None,
                 format: Optional[str] = None,
                 disablePast: Optional[bool] = None,
                 hideOffset: Optional[bool] = None,
                 label: Optional[str] = None,
                 placeholder: Optional[str] = None,
                 name: Optional[str] = None,
                 help: Optional[str] = None,
                 fluid: bool = False,
                 required: bool = False,
                 popupPosition: Optional[str] = None,
                 popupRegistry: Optional[PopupRegistry] = None):
        super().__init__(key=key)
        self.label = label
        self.placeholder = placeholder
        self.name = name
        self.help = help
        self.fluid = fluid
        self.required = required
        self.popupRegistry = popupRegistry
        self.given = {
            "model": model,
            "format": format,
            "disablePast": disablePast,
            "hideOffset": hideOffset,
            "popupPosition": popupPosition,
        }

    builtinDefaults = {
        "format": "YYYY-MM-DD",
        "disablePast": False,
        "hideOffset": False,
        "popupPosition": "bottom left",
        "displayPopup": "click",
        "hidePopup": "click",
    }

    def getDefaultAttrs(self) -> Dict[str, Any]:
        """The built-in defaults, overridden by the ``datepicker`` and ``popup`` config sections."""
        defaults = dict(self.builtinDefaults)
        config = Config()
        for section in ("datepicker", "popup"):
            for name, value in config.section(section).items():
                if name in defaults:
                    defaults[name] = value
        return defaults

    def resolveAttrs(self) -> Dict[str, Any]:
        """The attributes to render with: given values over defaults, invalid ones reset."""
        schema = AttributeSchema(self.attrSchema.fields, defaults=self.getDefaultAttrs())
        return schema.resolve(self.given, owner=self.__class__.__name__, fallbacks=self.builtinDefaults)

    def createState(self) -> 'DatePickerState':
        return DatePickerState()


class DatePickerState(State):
    """
    The view cursor of a `DatePicker`: ``viewYear`` and ``viewMonth``
    (0-11), plus ``lastSeenModelValue``, the raw model value the cursor was
    last synchronised with.
    """
    def __init__(self):
        super().__init__()
        self.viewYear: Optional[int] = None
        self.viewMonth: Optional[int] = None
        self.lastSeenModelValue = ""
        self.attrs: Dict[str, Any] = {}
        self.field: Optional[Field] = None
        self._fallbackModel = ModelBinding()

    # ----- attributes -----
    @property
    def model(self) -> ModelBinding:
        return self.attrs.get("model") or self._fallbackModel

    @property
    def format(self) -> str:
        return self.attrs["format"]

    def _loadAttrs(self):
        self.attrs = self.get_widget().resolveAttrs()

    # ----- lifecycle -----
    def initState(self):
        self._loadAttrs()
        self.model.add_listener(self._onModelChanged)
        self.lastSeenModelValue = self.model.get()
        self.setViewMonthYear(self.getViewDate())

    def didUpdateWidget(self, oldWidget: DatePicker):
        if oldWidget is not self.get_widget():
            previousModel = self.model
            self._loadAttrs()
            if self.model is not previousModel:
                previousModel.remove_listener(self._onModelChanged)
                self.model.add_listener(self._onModelChanged)

        if self.modelHasChanged(self.model.get()):
            self.setViewMonthYear(self.getViewDate())

    def dispose(self):
        self.model.remove_listener(self._onModelChanged)

    def _onModelChanged(self):
        self.setState()

    # ----- model synchronisation -----
    def modelHasChanged(self, newValue: str) -> bool:
        if self.lastSeenModelValue != newValue:
            self.lastSeenModelValue = newValue
            return True
        return False

    def today(self) -> date:
        return date.today()

    def selectedDate(self) -> Optional[date]:
        """The model value as a date, or None when it is empty or unparsable."""
        return try_parse_date(self.model.get(), self.format)

    def getViewDate(self) -> date:
        return self.selectedDate() or self.today()

    def setViewMonthYear(self, value: date):
        self.viewYear = value.year
        self.viewMonth = value.month - 1

    # ----- actions -----
    def prevMonth(self, event: Optional[Event] = None):
        if event is not None:
            event.stopPropagation()
        if self.viewMonth == 0:
            self.viewYear -= 1
            self.viewMonth = 11
        else:
            self.viewMonth -= 1
        self.setState()

    def nextMonth(self, event: Optional[Event] = None):
        if event is not None:
            event.stopPropagation()
        if self.viewMonth == 11:
            self.viewYear += 1
            self.viewMonth = 0
        else:
            self.viewMonth += 1
        self.setState()

    def goToToday(self, event: Optional[Event] = None):
        if event is not None:
            event.stopPropagation()
        self.setViewMonthYear(self.today())
        self.setState()

    def setDate(self, newDate: date, event: Optional[Event] = None):
        """Write ``newDate`` to the model and show its month. The event keeps bubbling."""
        logger.debug("Selecting %s", newDate)
        self.setViewMonthYear(newDate)
        self.model.set(format_date(newDate, self.format))
        self.setState()

    def clear(self, event: Optional[Event] = None):
        if event is not None:
            event.stopPropagation()
        self.model.set("")
        self.setState()

    # ----- rendering -----
    def cells(self) -> CalendarGrid:
        return classify_cells(
            month_dates(self.viewYear, self.viewMonth),
            today=self.today(),
            selected=self.selectedDate(),
            disablePast=self.attrs["disablePast"],
            hideOffset=self.attrs["hideOffset"],
        )

    def buildField(self) -> Field:
        widget = self.get_widget()
        return Field(
            label=widget.label,
            help=widget.help,
            required=widget.required,
            input=Input(
                name=widget.name,
                type="text",
                value=self.model.get(),
                placeholder=widget.placeholder,
                readOnly=True,
                fluid=widget.fluid,
                append=Decoration.icon("calendar"),
            ),
        )

    def build(self) -> Widget:
        widget = self.get_widget()
        self.field = self.buildField()
        return PopupBinder(
            anchor=self.field,
            popup=Popup(
                DatePickerWidget(
                    viewYear=self.viewYear,
                    viewMonth=self.viewMonth,
                    cells=self.cells(),
                    setDate=self.setDate,
                    prevMonth=self.prevMonth,
                    nextMonth=self.nextMonth,
                    goToToday=self.goToToday,
                    clear=self.clear,
                ),
                position=self.attrs["popupPosition"],
            ),
            displayPopup=self.attrs["displayPopup"],
            hidePopup=self.attrs["hidePopup"],
            popupRegistry=widget.popupRegistry,
        )
