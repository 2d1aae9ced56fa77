# pythra_forms/field.py
from typing import Callable, List, Optional

from .base import Widget, Key
from .classlist import Decoration, get_class_list
from .controllers import ModelBinding
from .events import Event
from .schema import AttributeSchema, is_boolean, is_callable, is_instance, is_string, required
from .state import StatelessWidget
from .widgets import Container, FieldLabel, Label, TextInput


class Input(StatelessWidget):
    """
    An ``<input>`` with optional decorations before and after it.

    Renders ``div.ui.<composition>.input`` with the children in the order
    prepend, input, append. The composition classes come from
    `classlist.get_class_list`, so an icon on both sides gives
    ``"ui left right icon input"``.
    """
    attrSchema = AttributeSchema(
        {
            "type": [required(False), is_string()],
            "fluid": [required(False), is_boolean()],
            "prepend": [required(False), is_instance(Decoration)],
            "append": [required(False), is_instance(Decoration)],
            "onInput": [required(False), is_callable()],
            "onClick": [required(False), is_callable()],
        },
        defaults={"type": "text", "fluid": False},
    )

    def __init__(self,
                 key: Optional[Key] = None,
                 name: Optional[str] = None,
                 type: str = "text",
                 value: Optional[str] = "",
                 placeholder: Optional[str] = None,
                 readOnly: bool = False,
                 disabled: bool = False,
                 fluid: bool = False,
                 prepend: Optional[Decoration] = None,
                 append: Optional[Decoration] = None,
                 onInput: Optional[Callable[[str], None]] = None,
                 onClick: Optional[Callable[[Event], None]] = None):
        super().__init__(key=key)
        # Invalid attributes are logged and dropped to their default (or None).
        attrs = self.attrSchema.resolve(
            {"type": type, "fluid": fluid, "prepend": prepend, "append": append,
             "onInput": onInput, "onClick": onClick},
            owner=self.__class__.__name__,
        )
        self.name = name
        self.type = attrs["type"]
        self.value = value
        self.placeholder = placeholder
        self.readOnly = readOnly
        self.disabled = disabled
        self.fluid = attrs["fluid"]
        self.prepend = attrs.get("prepend")
        self.append = attrs.get("append")
        self.onInput = attrs.get("onInput")
        self.onClick = attrs.get("onClick")

    def getClassList(self) -> List[str]:
        classes = get_class_list({"prepend": self.prepend, "append": self.append, "fluid": self.fluid})
        if self.type == "hidden":
            classes.insert(-1, "hidden")
        if self.disabled:
            classes.insert(-1, "disabled")
        return classes

    def build(self) -> Widget:
        return Container(
            cssClass=" ".join(self.getClassList()),
            children=[
                self.prepend.widget if self.prepend else None,
                TextInput(
                    name=self.name,
                    type=self.type,
                    value=self.value,
                    placeholder=self.placeholder,
                    readOnly=self.readOnly,
                    disabled=self.disabled,
                    onInput=self.onInput,
                    onClick=self.onClick,
                ),
                self.append.widget if self.append else None,
            ],
        )


class Field(StatelessWidget):
    """
    A labelled form field around an `Input`.

    When a ``model`` is given and the input has no ``onInput`` of its own,
    typing writes straight into the model.

    :param label: Text of the ``<label>``; omitted when None.
    :param input: The `Input` to wrap.
    :param help: Help text shown under the input.
    :param errors: Validation messages; any message adds the ``error`` class.
    :param required: Adds the ``required`` class (Semantic UI shows an asterisk).
    """
    def __init__(self,
                 input: Input,
                 key: Optional[Key] = None,
                 label: Optional[str] = None,
                 model: Optional[ModelBinding] = None,
                 help: Optional[str] = None,
                 errors: Optional[List[str]] = None,
                 required: bool = False):
        super().__init__(key=key)
        if not isinstance(input, Input):
            raise TypeError("Field requires an Input instance.")
        if model is not None and not isinstance(model, ModelBinding):
            raise TypeError("Field model must be a ModelBinding instance.")
        self.input = input
        self.label = label
        self.model = model
        self.help = help
        self.errors = list(errors or [])
        self.required = required

        if self.model is not None and self.input.onInput is None:
            self.input.onInput = self.model.set

    def getClassList(self) -> List[str]:
        classes = []
        if self.required:
            classes.append("required")
        if self.errors:
            classes.append("error")
        if self.input.disabled:
            classes.append("disabled")
        classes.append("field")
        return classes

    def build(self) -> Widget:
        children: List[Optional[Widget]] = [
            FieldLabel(self.label, forName=self.input.name) if self.label is not None else None,
            self.input,
        ]
        if self.help:
            children.append(Container(cssClass="help", data=self.help))
        for message in self.errors:
            children.append(Label(message, cssClass="pointing red basic"))
        return Container(cssClass=" ".join(self.getClassList()), children=children)
