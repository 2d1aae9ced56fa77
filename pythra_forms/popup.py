# pythra_forms/popup.py
import logging
from typing import Any, Optional

from .base import Widget, Key
from .events import Event
from .state import State, StatefulWidget
from .widgets import Container, Element

logger = logging.getLogger(__name__)

# Positions the popup CSS lays out.
POSITIONS = ("bottom left", "bottom right", "top left", "top right")


class PopupRegistry:
    """
    Tracks the one popup that may be open at a time.

    Create one per application (the `Framework` owns a default one) and pass
    it to every widget that opens popups. Opening a popup while another is
    open closes the other one first; closing a popup that is not the open one
    does nothing.
    """
    def __init__(self):
        self._current: Optional[Any] = None

    @property
    def current(self) -> Optional[Any]:
        return self._current

    def open(self, popup: Any):
        if popup is None:
            raise TypeError("PopupRegistry.open() requires a popup instance.")
        if self._current is not None and self._current is not popup:
            logger.debug("Closing %r: %r is opening", self._current, popup)
        self._current = popup

    def close(self, popup: Optional[Any] = None):
        """Close ``popup``, or whichever popup is open when called without one."""
        if popup is None or popup is self._current:
            self._current = None
        else:
            logger.debug("Ignoring close of %r, it is not the open popup", popup)

    def is_open(self, popup: Any) -> bool:
        return popup is not None and self._current is popup

    def toggle(self, popup: Any) -> bool:
        """Open ``popup`` if it is closed, close it if it is open. Returns the new open state."""
        if self.is_open(popup):
            self.close(popup)
            return False
        self.open(popup)
        return True


class Popup(Element):
    """
    The overlay box itself: ``div.ui.popup.<position>.transition.visible``.
    """
    baseClasses = ("ui", "popup")

    CSS = """
    .ui.popup.visible { display: block; position: absolute; z-index: 1900; }
    .ui.popup.bottom.left { top: 100%; left: 0; }
    .ui.popup.bottom.right { top: 100%; right: 0; }
    .ui.popup.top.left { bottom: 100%; left: 0; }
    .ui.popup.top.right { bottom: 100%; right: 0; }
    .popup-binder { position: relative; display: inline-block; }
    """

    def __init__(self, child: Widget, key: Optional[Key] = None, position: str = "bottom left"):
        self.position = position
        super().__init__(children=[child], key=key, cssClass=f"{position} transition visible")


class PopupBinder(StatefulWidget):
    """
    Binds a popup to an anchor.

    ``displayPopup`` and ``hidePopup`` name the events that show and hide the
    popup. When they are the same event (the default, ``"click"``) the event
    toggles: a second click on the anchor closes its own popup. The handlers
    sit on the binder's root element, so events bubbling out of the popup
    content reach them too unless a handler stops propagation.

    Interactions outside the open binder close it; that is handled by the
    `Framework` when it dispatches events.
    """
    def __init__(self,
                 anchor: Widget,
                 popup: Popup,
                 key: Optional[Key] = None,
                 displayPopup: str = "click",
                 hidePopup: str = "click",
                 popupRegistry: Optional[PopupRegistry] = None):
        super().__init__(key=key)
        if not isinstance(popup, Popup):
            raise TypeError("PopupBinder requires a Popup instance.")
        if popupRegistry is not None and not isinstance(popupRegistry, PopupRegistry):
            raise TypeError("popupRegistry must be a PopupRegistry instance.")
        self.anchor = anchor
        self.popup = popup
        self.displayPopup = displayPopup
        self.hidePopup = hidePopup
        self.popupRegistry = popupRegistry

    def createState(self) -> '_PopupBinderState':
        return _PopupBinderState()


class _PopupBinderState(State):

    @property
    def registry(self) -> PopupRegistry:
        widget = self.get_widget()
        if widget is not None and widget.popupRegistry is not None:
            return widget.popupRegistry
        if self.framework is None:
            raise RuntimeError("PopupBinder has no registry: pass popupRegistry or mount it in a Framework.")
        return self.framework.popup_registry

    def isOpen(self) -> bool:
        return self.registry.is_open(self)

    def containsSlot(self, slot: Optional[str]) -> bool:
        """True if ``slot`` is this binder's slot or lies below it."""
        if slot is None or self._slot is None:
            return False
        return slot == self._slot or slot.startswith(self._slot + "/")

    def open(self):
        self.registry.open(self)
        self.setState()

    def close(self):
        self.registry.close(self)
        self.setState()

    def _onDisplay(self, event: Event):
        widget = self.get_widget()
        if widget.displayPopup == widget.hidePopup:
            self.registry.toggle(self)
        else:
            self.registry.open(self)
        self.setState()

    def _onHide(self, event: Event):
        self.close()

    def dispose(self):
        if self.framework is not None or self.get_widget().popupRegistry is not None:
            self.registry.close(self)

    def build(self) -> Widget:
        widget = self.get_widget()
        handlers = {widget.displayPopup: self._onDisplay}
        if widget.hidePopup != widget.displayPopup:
            handlers[widget.hidePopup] = self._onHide
        return Container(
            cssClass="popup-binder",
            handlers=handlers,
            children=[widget.anchor, widget.popup if self.isOpen() else None],
        )
