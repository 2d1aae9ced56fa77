# pythra_forms/widgets.py
"""
Leaf elements: each renders exactly one HTML element with Semantic UI style
class names. Composite form widgets (`field.Input`, `field.Field`,
`datepicker.DatePicker`) are built out of these.
"""
import html
from typing import Any, Callable, Dict, List, Optional, Set, Tuple

from .base import Widget, Key
from .events import Event

_VOID_TAGS = {"input", "br", "img", "hr"}

_WIDTH_WORDS = [
    "", "one", "two", "three", "four", "five", "six", "seven", "eight",
    "nine", "ten", "eleven", "twelve", "thirteen", "fourteen", "fifteen", "sixteen",
]


def _split_classes(value: Optional[str]) -> List[str]:
    return value.split() if value else []


class Element(Widget):
    """
    A single HTML element.

    :param children: Child widgets, rendered inside the element.
    :param cssClass: Extra classes, appended after the element's base classes.
    :param data: Text content, escaped and rendered before the children.
    :param attrs: Extra HTML attributes. ``True`` renders a bare attribute,
        ``False``/``None`` omits it.
    :param onClick: Click handler, called with the `Event`.
    :param handlers: Further handlers keyed by event name.
    """
    tag: str = "div"
    baseClasses: Tuple[str, ...] = ()

    def __init__(self,
                 children: Optional[List[Widget]] = None,
                 key: Optional[Key] = None,
                 cssClass: Optional[str] = None,
                 data: Optional[Any] = None,
                 attrs: Optional[Dict[str, Any]] = None,
                 onClick: Optional[Callable[[Event], None]] = None,
                 handlers: Optional[Dict[str, Callable[[Event], None]]] = None):
        super().__init__(key=key, children=children)
        self.cssClass = cssClass
        self.data = data
        self.attrs = dict(attrs or {})
        self.handlers = dict(handlers or {})
        if onClick is not None:
            self.handlers["click"] = onClick

    def class_list(self) -> List[str]:
        classes = []
        for token in list(self.baseClasses) + _split_classes(self.cssClass):
            if token not in classes:
                classes.append(token)
        return classes

    def get_handlers(self) -> Dict[str, Callable[[Event], None]]:
        return self.handlers

    def render_props(self) -> Dict[str, Any]:
        return {
            'tag': self.tag,
            'css_class': " ".join(self.class_list()),
            'attrs': self.attrs,
            'data': None if self.data is None else str(self.data),
            'events': sorted(self.handlers),
        }

    def get_required_css_classes(self) -> Set[str]:
        return set(self.class_list())

    def generate_html(self, html_id: str, props: Dict[str, Any], inner_html: str = "") -> str:
        tag = props.get('tag', self.tag)
        parts = [f'id="{html.escape(html_id, quote=True)}"']
        if props.get('css_class'):
            parts.append(f'class="{html.escape(props["css_class"], quote=True)}"')
        for name, value in props.get('attrs', {}).items():
            if value is None or value is False:
                continue
            if value is True:
                parts.append(name)
            else:
                parts.append(f'{name}="{html.escape(str(value), quote=True)}"')
        opening = f"<{tag} {' '.join(parts)}>"
        if tag in _VOID_TAGS:
            return opening
        text = html.escape(props['data']) if props.get('data') is not None else ""
        return f"{opening}{text}{inner_html}</{tag}>"


class Container(Element):
    tag = "div"


class Text(Element):
    tag = "span"

    def __init__(self, data: Any, key: Optional[Key] = None, cssClass: Optional[str] = None, **kwargs):
        super().__init__(key=key, cssClass=cssClass, data=data, **kwargs)


class Icon(Element):
    """
    A font icon, e.g. ``Icon("chevron left", color="blue")`` renders
    ``<i class="chevron left blue icon">``.
    """
    tag = "i"

    def __init__(self, name: str, key: Optional[Key] = None, color: Optional[str] = None,
                 cssClass: Optional[str] = None, **kwargs):
        if not isinstance(name, str) or not name:
            raise TypeError("Icon requires an icon name, e.g. Icon('calendar').")
        self.name = name
        self.color = color
        classes = " ".join(c for c in (cssClass, name, color, "icon") if c)
        super().__init__(key=key, cssClass=classes, **kwargs)


class Label(Element):
    tag = "div"
    baseClasses = ("ui", "label")

    def __init__(self, text: Any, key: Optional[Key] = None, cssClass: Optional[str] = None, **kwargs):
        super().__init__(key=key, cssClass=cssClass, data=text, **kwargs)


class FieldLabel(Element):
    """The ``<label>`` of a form field."""
    tag = "label"

    def __init__(self, text: Any, key: Optional[Key] = None, forName: Optional[str] = None, **kwargs):
        super().__init__(key=key, data=text, attrs={"for": forName}, **kwargs)


class Button(Element):
    tag = "button"
    baseClasses = ("ui", "button")

    def __init__(self, text: Any, key: Optional[Key] = None, onClick: Optional[Callable[[Event], None]] = None,
                 cssClass: Optional[str] = None, **kwargs):
        super().__init__(key=key, cssClass=cssClass, data=text, onClick=onClick,
                         attrs={"type": "button"}, **kwargs)


class TextInput(Element):
    """
    The raw ``<input>`` element. ``onInput`` is called with the new string
    value carried in the event payload.
    """
    tag = "input"

    def __init__(self,
                 key: Optional[Key] = None,
                 name: Optional[str] = None,
                 type: str = "text",
                 value: Optional[str] = "",
                 placeholder: Optional[str] = None,
                 readOnly: bool = False,
                 disabled: bool = False,
                 onInput: Optional[Callable[[str], None]] = None,
                 onClick: Optional[Callable[[Event], None]] = None,
                 cssClass: Optional[str] = None):
        handlers = {}
        if onInput is not None:
            handlers["input"] = lambda event: onInput(event.payload if event.payload is not None else "")
        super().__init__(
            key=key,
            cssClass=cssClass,
            attrs={
                "type": type,
                "name": name,
                "value": "" if value is None else value,
                "placeholder": placeholder,
                "readonly": bool(readOnly),
                "disabled": bool(disabled),
            },
            onClick=onClick,
            handlers=handlers,
        )


class Grid(Element):
    baseClasses = ("ui", "grid")


class Column(Element):
    """A grid column; ``width`` is in sixteenths, ``textAlignment`` e.g. 'center'."""

    def __init__(self, children: Optional[List[Widget]] = None, key: Optional[Key] = None,
                 width: Optional[int] = None, textAlignment: Optional[str] = None,
                 cssClass: Optional[str] = None, **kwargs):
        classes = []
        if width is not None:
            if not 1 <= width <= 16:
                raise ValueError(f"Column width must be between 1 and 16, got {width}")
            classes += [_WIDTH_WORDS[width], "wide"]
        if textAlignment:
            classes += [textAlignment, "aligned"]
        classes.append("column")
        if cssClass:
            classes.append(cssClass)
        super().__init__(children=children, key=key, cssClass=" ".join(classes), **kwargs)


class Table(Element):
    tag = "table"
    baseClasses = ("ui",)

    def __init__(self, children: Optional[List[Widget]] = None, key: Optional[Key] = None,
                 veryBasic: bool = False, size: Optional[str] = None, cssClass: Optional[str] = None, **kwargs):
        classes = []
        if veryBasic:
            classes += ["very", "basic"]
        if size:
            classes.append(size)
        classes.append("table")
        if cssClass:
            classes.append(cssClass)
        super().__init__(children=children, key=key, cssClass=" ".join(classes), **kwargs)


class TableHead(Element):
    tag = "thead"


class TableBody(Element):
    tag = "tbody"


class TableRow(Element):
    tag = "tr"


class TableHeaderCell(Element):
    tag = "th"


class TableCell(Element):
    tag = "td"
