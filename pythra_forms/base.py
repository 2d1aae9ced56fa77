# pythra_forms/base.py
import uuid
import logging
from typing import Any, Dict, List, Optional, Set, Union

logger = logging.getLogger(__name__)


class Key:
    """
    A unique identifier for a widget to help distinguish it across rebuilds.

    :param value: Any hashable value to uniquely represent the widget.
    """
    def __init__(self, value):
        self.value = value

    def __eq__(self, other):
        return isinstance(other, Key) and self.value == other.value

    def __hash__(self):
        """
        Return a hash for the key. Converts mutable types like lists to hashable ones.
        """
        return hash(make_hashable(self.value))

    def __repr__(self):
        return f"Key({self.value!r})"


def make_hashable(value):
    """
    Converts a given value to a hashable representation, useful for comparing
    render props between two builds.

    :param value: Any value or object exposing ``to_tuple()``.
    :return: A hashable version of the value.
    """
    if hasattr(value, 'to_tuple'):
        return value.to_tuple()
    elif isinstance(value, (str, int, float, bool, tuple, Key, type(None))):
        return value
    elif isinstance(value, (list, set, frozenset)):
        return tuple(make_hashable(v) for v in value)
    elif isinstance(value, dict):
        return tuple(sorted((k, make_hashable(v)) for k, v in value.items()))
    try:
        hash(value)
        return value
    except TypeError:
        logger.warning("Cannot make type %s hashable, falling back to str().", type(value))
        return str(value)


class Widget:
    """
    The base class for all widgets in the framework.

    Every visual element inherits from `Widget`. Renderable elements describe
    themselves through `render_props()` and `generate_html()`; composite widgets
    (see `state.StatelessWidget` and `state.StatefulWidget`) build other widgets.

    :param key: Optional Key to uniquely identify this widget among its siblings.
    :param children: Optional list of child widgets.

    :attr CSS: Class-level stylesheet text collected by the framework for every
        widget class present in the tree.
    """
    CSS: str = ""

    def __init__(self, key: Optional[Key] = None, children: Optional[List['Widget']] = None):
        if key is not None and not isinstance(key, Key):
            raise TypeError(f"{self.__class__.__name__} key must be a Key instance, got {type(key).__name__}.")
        self.key = key
        self._children: List['Widget'] = [c for c in (children or []) if c is not None]
        # Internal ID, only used for debugging output
        self._internal_id: str = str(uuid.uuid4())

    def get_unique_id(self) -> Union[Key, str]:
        """
        Returns a unique identifier for the widget (Key if set, else internal UUID).
        """
        return self.key if self.key is not None else self._internal_id

    def get_children(self) -> List['Widget']:
        return self._children

    def get_handlers(self) -> Dict[str, Any]:
        """
        Event handlers attached to the element this widget renders, keyed by
        event name (``"click"``, ``"input"``, ...).
        """
        return {}

    def render_props(self) -> Dict[str, Any]:
        """
        Return a dictionary of properties relevant for rendering/diffing.

        Subclasses override this to return the values the reconciler compares to
        decide whether an UPDATE patch is needed.
        """
        return {}

    def get_required_css_classes(self) -> Set[str]:
        """
        Return the set of CSS class names this widget renders with.
        """
        return set()

    def generate_html(self, html_id: str, props: Dict[str, Any], inner_html: str) -> str:
        """
        Return the HTML for this element, with ``inner_html`` already rendered
        for its children.
        """
        raise NotImplementedError(f"{self.__class__.__name__} is not a renderable element.")

    def __repr__(self):
        return f"{self.__class__.__name__}(key={self.key})"
