# tests/test_classlist.py
import unittest

from pythra_forms.classlist import (
    Decoration, DecorationKind, composition_classes, decoration_kind, get_class_list,
)
from pythra_forms.widgets import Button, Icon, Label


class TestGetClassList(unittest.TestCase):

    def test_no_decorations_gives_base_tokens_only(self):
        self.assertEqual(get_class_list({}), ["ui", "input"])

    def test_prepended_icon(self):
        attrs = {"prepend": Decoration.icon("search")}
        self.assertEqual(" ".join(get_class_list(attrs)), "ui left icon input")

    def test_appended_icon(self):
        attrs = {"append": Decoration.icon("calendar")}
        self.assertEqual(" ".join(get_class_list(attrs)), "ui right icon input")

    def test_icon_on_both_sides_is_one_combined_token(self):
        classes = get_class_list({"prepend": Decoration.icon("user"), "append": Decoration.icon("checkmark")})
        self.assertIn("left right icon", classes)
        self.assertNotIn("left icon", classes)
        self.assertNotIn("right icon", classes)

    def test_families_combine(self):
        attrs = {"prepend": Decoration.label("http://"), "append": Decoration.action("Go")}
        self.assertEqual(get_class_list(attrs), ["ui", "left labeled", "right action", "input"])

    def test_label_on_both_sides(self):
        attrs = {"prepend": DecorationKind.LABEL, "append": DecorationKind.LABEL}
        self.assertEqual(get_class_list(attrs), ["ui", "left right labeled", "input"])

    def test_fluid_comes_before_suffix(self):
        attrs = {"append": DecorationKind.ICON, "fluid": True}
        self.assertEqual(" ".join(get_class_list(attrs)), "ui right icon fluid input")

    def test_prefix_and_suffix_override(self):
        self.assertEqual(get_class_list({}, prefix=("ui", "mini"), suffix=("action", "input")),
                         ["ui", "mini", "action", "input"])

    def test_tokens_are_not_duplicated(self):
        self.assertEqual(get_class_list({}, prefix=("ui", "input"), suffix=("input",)), ["ui", "input"])


class TestDecoration(unittest.TestCase):

    def test_factories_tag_their_widgets(self):
        icon = Decoration.icon("calendar")
        self.assertIs(icon.kind, DecorationKind.ICON)
        self.assertIsInstance(icon.widget, Icon)

        label = Decoration.label("kg")
        self.assertIs(label.kind, DecorationKind.LABEL)
        self.assertIsInstance(label.widget, Label)

        action = Decoration.action("Search")
        self.assertIs(action.kind, DecorationKind.ACTION)
        self.assertIsInstance(action.widget, Button)

    def test_decoration_kind_rejects_other_values(self):
        self.assertIsNone(decoration_kind(None))
        with self.assertRaises(TypeError):
            decoration_kind("icon")

    def test_composition_classes_order_follows_families(self):
        self.assertEqual(
            composition_classes(DecorationKind.ACTION, DecorationKind.ICON),
            ["right icon", "left action"],
        )


if __name__ == '__main__':
    unittest.main()
