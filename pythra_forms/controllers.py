# pythra_forms/controllers.py
from typing import Callable, List, Optional


class ModelBinding:
    """
    A read/write holder for a form value, owned by the host application.

    Widgets read the value with `get()` and write it with `set()`; they never
    keep their own copy as the source of truth. Listeners are called whenever
    the value actually changes, whoever changed it.

    :param value: The initial value this binding should have.
    """
    def __init__(self, value: Optional[str] = ""):
        self._value = "" if value is None else value
        self._listeners: List[Callable[[], None]] = []

    def get(self) -> str:
        """Returns the current value."""
        return self._value

    def set(self, new_value: Optional[str]):
        """Sets the value and notifies all listeners of the change."""
        if new_value is None:
            new_value = ""
        if self._value != new_value:
            self._value = new_value
            self._notify_listeners()

    @property
    def value(self) -> str:
        return self.get()

    @value.setter
    def value(self, new_value: str):
        self.set(new_value)

    def add_listener(self, listener: Callable[[], None]):
        """Register a closure to be called when the value changes."""
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_listener(self, listener: Callable[[], None]):
        """Remove a previously registered closure."""
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify_listeners(self):
        # Copy: a listener may unsubscribe itself while being notified.
        for listener in list(self._listeners):
            listener()

    def clear(self):
        """Clears the value."""
        self.set("")

    def __repr__(self):
        return f"ModelBinding(value='{self._value}')"
