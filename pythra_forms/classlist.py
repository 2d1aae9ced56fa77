# pythra_forms/classlist.py
"""
Structural class names for input-like widgets.

The classes follow the Semantic UI input vocabulary: what is attached to the
left or right of an input decides whether it is an ``icon``, ``labeled`` or
``action`` input. The classes are matched by string equality in the
stylesheet, so spelling and word order are part of the contract
(``"left right icon"``, never ``"right left icon"``).
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, List, Mapping, Optional, Sequence, Union, TYPE_CHECKING

if TYPE_CHECKING:
    from .base import Widget


class DecorationKind(Enum):
    ICON = "icon"
    LABEL = "labeled"
    ACTION = "action"


@dataclass
class Decoration:
    """
    Something rendered before (prepend) or after (append) an input, tagged
    with what kind of thing it is.
    """
    kind: DecorationKind
    widget: Optional['Widget'] = None

    @classmethod
    def icon(cls, name: str, **kwargs) -> 'Decoration':
        from .widgets import Icon
        return cls(DecorationKind.ICON, Icon(name, **kwargs))

    @classmethod
    def label(cls, text: str, **kwargs) -> 'Decoration':
        from .widgets import Label
        return cls(DecorationKind.LABEL, Label(text, **kwargs))

    @classmethod
    def action(cls, text: str, onClick: Optional[Callable] = None, **kwargs) -> 'Decoration':
        from .widgets import Button
        return cls(DecorationKind.ACTION, Button(text, onClick=onClick, **kwargs))


DecorationLike = Union[Decoration, DecorationKind, None]


def decoration_kind(value: DecorationLike) -> Optional[DecorationKind]:
    """Return the kind of a decoration, or None when nothing is attached."""
    if value is None:
        return None
    if isinstance(value, DecorationKind):
        return value
    if isinstance(value, Decoration):
        return value.kind
    raise TypeError(f"Expected a Decoration or DecorationKind, got {type(value).__name__}.")


def composition_classes(prepend: DecorationLike = None, append: DecorationLike = None) -> List[str]:
    """
    The side-dependent classes for one prepend/append pair, one per family.
    A family present on both sides yields the combined ``"left right ..."``
    class instead of the two single-sided ones.
    """
    left = decoration_kind(prepend)
    right = decoration_kind(append)
    classes: List[str] = []
    for kind in DecorationKind:
        on_left = left is kind
        on_right = right is kind
        if on_left and on_right:
            classes.append(f"left right {kind.value}")
        elif on_left:
            classes.append(f"left {kind.value}")
        elif on_right:
            classes.append(f"right {kind.value}")
    return classes


def get_class_list(attrs: Mapping[str, Any],
                   prefix: Sequence[str] = ("ui",),
                   suffix: Sequence[str] = ("input",)) -> List[str]:
    """
    Return the ordered, duplicate-free class list for an input-like widget.

    :param attrs: composition attributes: ``prepend``, ``append`` (each a
        `Decoration`, a `DecorationKind` or None) and ``fluid`` (bool).
    :param prefix: classes placed first (``"ui"`` by default).
    :param suffix: classes placed last (``"input"`` by default).

    >>> " ".join(get_class_list({"prepend": DecorationKind.ICON}))
    'ui left icon input'
    """
    classes = list(prefix)
    classes.extend(composition_classes(attrs.get("prepend"), attrs.get("append")))
    if attrs.get("fluid"):
        classes.append("fluid")
    classes.extend(suffix)

    seen = set()
    ordered = []
    for token in classes:
        if token not in seen:
            seen.add(token)
            ordered.append(token)
    return ordered
