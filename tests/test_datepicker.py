# tests/test_datepicker.py
import os
import tempfile
import unittest
from datetime import date

from pythra_forms.config import Config
from pythra_forms.controllers import ModelBinding
from pythra_forms.core import Framework
from pythra_forms.datepicker import DatePicker, DatePickerState
from pythra_forms.field import Field
from pythra_forms.popup import Popup, PopupRegistry
from pythra_forms.widgets import Column, Container, Icon, TableCell, TextInput


def _flatten(grid):
    return [cell for week in grid for cell in week]


class DatePickerTestCase(unittest.TestCase):

    def mount(self, value="2024-02-15", **kwargs):
        self.model = ModelBinding(value)
        self.registry = PopupRegistry()
        self.framework = Framework(popupRegistry=self.registry)
        kwargs.setdefault("format", "YYYY-MM-DD")
        self.framework.set_root(DatePicker(model=self.model, **kwargs))
        self.state = self.framework.get_state()
        return self.state

    def cursor(self):
        return (self.state.viewYear, self.state.viewMonth)


class TestDatePickerState(DatePickerTestCase):

    def test_initial_sync_from_model(self):
        state = self.mount(disablePast=True)
        self.assertIsInstance(state, DatePickerState)
        self.assertEqual(self.cursor(), (2024, 1))

        cells = _flatten(state.cells())
        self.assertEqual([c.date for c in cells if c.selected], [date(2024, 2, 15)])
        today = date.today()
        for cell in cells:
            self.assertEqual(cell.disabled, cell.date < today, cell.date)
        offsets = [c.date for c in cells if c.offset]
        self.assertTrue(offsets)
        self.assertTrue(all(d.month in (1, 3) for d in offsets))

    def test_empty_model_shows_today(self):
        state = self.mount(value="")
        today = date.today()
        self.assertEqual(self.cursor(), (today.year, today.month - 1))
        self.assertFalse(any(c.selected for c in _flatten(state.cells())))

    def test_unparsable_model_is_no_selection(self):
        state = self.mount(value="15.02.2024")
        today = date.today()
        self.assertEqual(self.cursor(), (today.year, today.month - 1))
        self.assertFalse(any(c.selected for c in _flatten(state.cells())))

    def test_next_month_twelve_times_wraps_year(self):
        state = self.mount()
        for _ in range(12):
            state.nextMonth()
        self.assertEqual(self.cursor(), (2025, 1))
        self.assertEqual(self.model.get(), "2024-02-15")

    def test_previous_month_from_january(self):
        state = self.mount(value="2024-01-10")
        state.prevMonth()
        self.assertEqual(self.cursor(), (2023, 11))

    def test_set_date_writes_model_and_moves_cursor(self):
        state = self.mount()
        state.setDate(date(2024, 3, 10))
        self.assertEqual(self.model.get(), "2024-03-10")
        self.assertEqual(self.cursor(), (2024, 2))

    def test_set_date_uses_format(self):
        state = self.mount(value="15/02/2024", format="DD/MM/YYYY")
        self.assertEqual(self.cursor(), (2024, 1))
        state.setDate(date(2024, 3, 10))
        self.assertEqual(self.model.get(), "10/03/2024")

    def test_external_model_change_resyncs_cursor(self):
        self.mount()
        self.model.set("2023-07-04")
        self.assertEqual(self.cursor(), (2023, 6))
        self.assertEqual([c.date for c in _flatten(self.state.cells()) if c.selected], [date(2023, 7, 4)])

    def test_browsing_does_not_resync_without_model_change(self):
        state = self.mount()
        state.nextMonth()
        self.framework.request_redraw()
        self.assertEqual(self.cursor(), (2024, 2))

    def test_go_to_today_and_clear(self):
        state = self.mount()
        state.goToToday()
        today = date.today()
        self.assertEqual(self.cursor(), (today.year, today.month - 1))
        self.assertEqual(self.model.get(), "2024-02-15")

        state.clear()
        self.assertEqual(self.model.get(), "")
        self.assertFalse(any(c.selected for c in _flatten(state.cells())))

    def test_hide_offset(self):
        state = self.mount(hideOffset=True)
        cells = _flatten(state.cells())
        self.assertEqual([c.hidden for c in cells], [c.offset for c in cells])

    def test_missing_model_is_logged_not_raised(self):
        framework = Framework()
        with self.assertLogs("pythra_forms.schema", level="WARNING") as logs:
            framework.set_root(DatePicker())
        self.assertTrue(any("'model' is required" in line for line in logs.output))
        state = framework.get_state()
        self.assertIsInstance(state.model, ModelBinding)
        state.setDate(date(2024, 5, 1))
        self.assertEqual(state.model.get(), "2024-05-01")

    def test_invalid_attribute_falls_back_to_default(self):
        with self.assertLogs("pythra_forms.schema", level="WARNING"):
            state = self.mount(format=42)
        self.assertEqual(state.format, "YYYY-MM-DD")

    def test_empty_format_falls_back_to_default(self):
        with self.assertLogs("pythra_forms.schema", level="WARNING") as logs:
            state = self.mount(format="")
        self.assertTrue(any("'format' should be a non-empty date pattern" in line for line in logs.output))
        self.assertEqual(state.format, "YYYY-MM-DD")
        self.assertEqual(self.cursor(), (2024, 1))
        state.setDate(date(2024, 3, 9))
        self.assertEqual(self.model.get(), "2024-03-09")

    def test_unknown_popup_position_falls_back_to_default(self):
        with self.assertLogs("pythra_forms.schema", level="WARNING") as logs:
            state = self.mount(popupPosition="sideways")
        self.assertTrue(any("'popupPosition' should be one of" in line for line in logs.output))
        self.assertEqual(state.attrs["popupPosition"], "bottom left")

    def test_field_is_composed(self):
        state = self.mount(label="Due", name="due")
        self.assertIsInstance(state.field, Field)
        self.assertEqual(state.field.input.getClassList(), ["ui", "right icon", "input"])
        self.assertTrue(state.field.input.readOnly)
        self.assertEqual(state.field.input.value, "2024-02-15")

    def test_dispose_removes_model_listener(self):
        self.mount()
        self.framework.set_root(Container())
        self.assertFalse(self.state.mounted)
        self.model.set("2020-01-01")
        self.assertEqual(self.cursor(), (2024, 1))


class TestDatePickerConfig(unittest.TestCase):

    def setUp(self):
        handle, self.path = tempfile.mkstemp(suffix=".yaml")
        with os.fdopen(handle, "w") as fh:
            fh.write("datepicker:\n  format: DD.MM.YYYY\n  hideOffset: true\n")
        Config().reload(config_file=self.path)

    def tearDown(self):
        Config().reload(config_file="forms.yaml")
        os.remove(self.path)

    def test_defaults_come_from_config(self):
        model = ModelBinding("15.02.2024")
        framework = Framework()
        framework.set_root(DatePicker(model=model))
        state = framework.get_state()
        self.assertEqual(state.format, "DD.MM.YYYY")
        self.assertTrue(state.attrs["hideOffset"])
        self.assertEqual((state.viewYear, state.viewMonth), (2024, 1))

    def test_given_attributes_win(self):
        framework = Framework()
        framework.set_root(DatePicker(model=ModelBinding(), format="YYYY-MM-DD", hideOffset=False))
        state = framework.get_state()
        self.assertEqual(state.format, "YYYY-MM-DD")
        self.assertFalse(state.attrs["hideOffset"])


class TestDatePickerInvalidConfig(unittest.TestCase):

    def setUp(self):
        handle, self.path = tempfile.mkstemp(suffix=".yaml")
        with os.fdopen(handle, "w") as fh:
            fh.write("datepicker:\n  format: 123\n  popupPosition: sideways\n")
        Config().reload(config_file=self.path)

    def tearDown(self):
        Config().reload(config_file="forms.yaml")
        os.remove(self.path)

    def test_bad_config_defaults_give_way_to_built_ins(self):
        model = ModelBinding("2024-02-15")
        framework = Framework()
        with self.assertLogs("pythra_forms.schema", level="WARNING") as logs:
            framework.set_root(DatePicker(model=model))
        self.assertTrue(any("default for 'format' is invalid" in line for line in logs.output))
        state = framework.get_state()
        self.assertEqual(state.format, "YYYY-MM-DD")
        self.assertEqual(state.attrs["popupPosition"], "bottom left")
        self.assertEqual((state.viewYear, state.viewMonth), (2024, 1))
        state.setDate(date(2024, 2, 20))
        self.assertEqual(model.get(), "2024-02-20")


class TestDatePickerEvents(DatePickerTestCase):

    def open(self):
        self.framework.dispatch(self.framework.find(TextInput)[0], "click")

    def is_open(self):
        return bool(self.framework.find(Popup))

    def test_click_on_input_opens_calendar(self):
        self.mount()
        self.assertFalse(self.is_open())
        self.open()
        self.assertTrue(self.is_open())
        self.assertTrue(self.framework.find(Container, cssClass="mth-year", data="FEB 2024"))

    def test_previous_keeps_popup_open(self):
        self.mount()
        self.open()
        self.framework.dispatch(self.framework.find(Icon, cssClass="prev-month")[0], "click")
        self.assertTrue(self.is_open())
        self.assertEqual(self.cursor(), (2024, 0))
        self.assertTrue(self.framework.find(Container, cssClass="mth-year", data="JAN 2024"))

    def test_next_keeps_popup_open(self):
        self.mount()
        self.open()
        self.framework.dispatch(self.framework.find(Column, cssClass="right aligned")[0], "click")
        self.assertTrue(self.is_open())
        self.assertEqual(self.cursor(), (2024, 2))

    def test_day_click_writes_model_and_closes(self):
        self.mount()
        self.open()
        input_id = self.framework.find(TextInput)[0]
        self.framework.dispatch(self.framework.find(TableCell, data=20)[0], "click")
        self.assertEqual(self.model.get(), "2024-02-20")
        self.assertFalse(self.is_open())

        updates = [p for p in self.framework.last_result.patches if p.action == "UPDATE" and p.html_id == input_id]
        self.assertEqual(len(updates), 1)
        self.assertEqual(updates[0].data["props"]["attrs"]["value"], "2024-02-20")

    def test_disabled_day_is_not_selectable(self):
        self.mount(disablePast=True)
        self.open()
        cell_id = self.framework.find(TableCell, cssClass="disabled", data=20)[0]
        self.assertEqual(self.framework.props_of(cell_id)["events"], [])
        self.framework.dispatch(cell_id, "click")
        self.assertEqual(self.model.get(), "2024-02-15")

    def test_cell_classes_in_render(self):
        self.mount()
        self.open()
        self.assertEqual(len(self.framework.find(TableCell, cssClass="selected")), 1)
        self.assertEqual(len(self.framework.find(TableCell, cssClass="offSet")), 6)
        html = self.framework.render_html()
        self.assertIn('data-date="2024-02-15"', html)
        self.assertIn("Sun", html)

    def test_hidden_offset_cells_render_empty(self):
        self.mount(hideOffset=True)
        self.open()
        self.assertEqual(self.framework.find(TableCell, cssClass="offSet"), [])
        self.assertEqual(len(self.framework.find(TableCell, data="")), 6)

    def test_stylesheet(self):
        self.mount()
        self.assertNotIn("td.today", self.framework.stylesheet())
        self.open()
        css = self.framework.stylesheet()
        self.assertIn("td.today", css)
        self.assertIn(".ui.popup.visible", css)

    def test_two_pickers_share_one_open_popup(self):
        first, second = ModelBinding("2024-02-15"), ModelBinding("2023-05-01")
        framework = Framework()
        framework.set_root(Container(children=[DatePicker(model=first), DatePicker(model=second)]))
        inputs = framework.find(TextInput)
        framework.dispatch(inputs[0], "click")
        framework.dispatch(inputs[1], "click")
        self.assertEqual(len(framework.find(Popup)), 1)
        self.assertTrue(framework.find(Container, cssClass="mth-year", data="MAY 2023"))


if __name__ == '__main__':
    unittest.main()
