# tests/test_field.py
import unittest

from pythra_forms.classlist import Decoration
from pythra_forms.controllers import ModelBinding
from pythra_forms.core import Framework
from pythra_forms.field import Field, Input
from pythra_forms.widgets import Container, FieldLabel, Icon, Label, TextInput


class TestInput(unittest.TestCase):

    def test_plain_input(self):
        built = Input(name="q").build()
        self.assertIsInstance(built, Container)
        self.assertEqual(built.cssClass, "ui input")
        self.assertEqual(len(built.get_children()), 1)
        self.assertIsInstance(built.get_children()[0], TextInput)

    def test_decorations_surround_input(self):
        widget = Input(prepend=Decoration.icon("search"), append=Decoration.label(".com"))
        built = widget.build()
        self.assertEqual(built.cssClass, "ui left icon right labeled input")
        kinds = [type(child) for child in built.get_children()]
        self.assertEqual(kinds, [Icon, TextInput, Label])

    def test_hidden_and_disabled_tokens(self):
        self.assertEqual(Input(type="hidden", disabled=True).getClassList(), ["ui", "hidden", "disabled", "input"])
        self.assertEqual(Input(fluid=True).getClassList(), ["ui", "fluid", "input"])

    def test_input_attributes(self):
        text_input = Input(name="q", value="abc", placeholder="Search", readOnly=True).build().get_children()[0]
        attrs = text_input.render_props()["attrs"]
        self.assertEqual(attrs["name"], "q")
        self.assertEqual(attrs["value"], "abc")
        self.assertEqual(attrs["placeholder"], "Search")
        self.assertIs(attrs["readonly"], True)
        self.assertIs(attrs["disabled"], False)

    def test_bad_attribute_is_logged(self):
        with self.assertLogs("pythra_forms.schema", level="WARNING") as logs:
            Input(fluid="yes")
        self.assertIn("'fluid' should be a boolean", logs.output[0])

    def test_bad_decoration_is_dropped(self):
        with self.assertLogs("pythra_forms.schema", level="WARNING") as logs:
            widget = Input(name="q", prepend="icon")
        self.assertIn("'prepend' should be an instance of Decoration", logs.output[0])
        self.assertIsNone(widget.prepend)
        framework = Framework()
        framework.set_root(widget)
        self.assertEqual(len(framework.find(TextInput)), 1)
        self.assertEqual(len(framework.find(Container, cssClass="ui input")), 1)

    def test_handler_that_is_not_callable_is_dropped(self):
        with self.assertLogs("pythra_forms.schema", level="WARNING") as logs:
            widget = Input(onInput="update", onClick=print)
        self.assertIn("'onInput' should be callable", logs.output[0])
        self.assertIsNone(widget.onInput)
        self.assertIs(widget.onClick, print)


class TestField(unittest.TestCase):

    def test_class_list(self):
        field = Field(Input(disabled=True), required=True, errors=["Required"])
        self.assertEqual(field.getClassList(), ["required", "error", "disabled", "field"])
        self.assertEqual(Field(Input()).getClassList(), ["field"])

    def test_children(self):
        field = Field(Input(name="email"), label="Email", help="We never share it", errors=["Invalid", "Taken"])
        children = field.build().get_children()
        self.assertIsInstance(children[0], FieldLabel)
        self.assertEqual(children[0].attrs["for"], "email")
        self.assertIsInstance(children[1], Input)
        self.assertEqual(children[2].cssClass, "help")
        self.assertEqual([c.data for c in children[3:]], ["Invalid", "Taken"])
        self.assertEqual(children[3].class_list(), ["ui", "label", "pointing", "red", "basic"])

    def test_model_receives_typed_value(self):
        model = ModelBinding()
        framework = Framework()
        framework.set_root(Field(Input(name="email"), label="Email", model=model))
        input_id = framework.find(TextInput)[0]
        framework.dispatch(input_id, "input", "me@example.com")
        self.assertEqual(model.get(), "me@example.com")

    def test_own_on_input_wins_over_model(self):
        seen = []
        model = ModelBinding("x")
        field = Field(Input(onInput=seen.append), model=model)
        field.input.onInput("typed")
        self.assertEqual(seen, ["typed"])
        self.assertEqual(model.get(), "x")

    def test_rendered_html(self):
        framework = Framework()
        framework.set_root(Field(Input(name="email", value="a&b"), label="Email"))
        html = framework.render_html()
        self.assertIn('<label', html)
        self.assertIn('for="email"', html)
        self.assertIn('value="a&amp;b"', html)
        self.assertIn('class="ui input"', html)

    def test_type_checks(self):
        with self.assertRaises(TypeError):
            Field("not an input")
        with self.assertRaises(TypeError):
            Field(Input(), model="not a model")


if __name__ == '__main__':
    unittest.main()
