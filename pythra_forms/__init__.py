# pythra_forms/__init__.py

"""
Pythra Forms

Form widgets for the Pythra widget model: inputs composed with icon, label
and action decorations, labelled fields bound to a model, popups, and a date
picker built on a pure calendar-grid generator.
"""

__version__ = "0.1.0"

# --- Core Framework Classes ---
from .core import Framework
from .config import Config, get_config

# --- Base Widget and State Management ---
from .base import Widget, Key
from .state import State, StatefulWidget, StatelessWidget
from .controllers import ModelBinding
from .events import Event

# --- Class lists and attribute validation ---
from .classlist import Decoration, DecorationKind, composition_classes, get_class_list
from .schema import (
    AttributeSchema, SchemaViolation, Validator,
    required, is_string, is_boolean, is_pattern, is_callable, is_instance, is_in,
)

# --- Dates ---
from .calendar_grid import DateCell, WEEKDAYS, MONTHS, month_dates, classify_cells
from .dateformat import DateFormatError, format_date, parse_date, parse_datetime, try_parse_date

# --- Widgets ---
from .widgets import (
    Element, Container, Text, Icon, Label, FieldLabel, Button, TextInput,
    Grid, Column, Table, TableHead, TableBody, TableRow, TableHeaderCell, TableCell,
)
from .field import Input, Field
from .popup import Popup, PopupBinder, PopupRegistry
from .datepicker import DatePicker, DatePickerState, DatePickerWidget, MonthDateGrid, WeekBar
