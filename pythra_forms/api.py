# pythra_forms/api.py
import logging
from typing import TYPE_CHECKING

from PySide6.QtCore import QObject, Signal, Slot

if TYPE_CHECKING:
    from .core import Framework

logger = logging.getLogger(__name__)


class Api(QObject):
    """
    The object a webview channel exposes to JavaScript.

    The page reports interactions as ``(html_id, event_name)`` pairs and input
    changes as ``(html_id, value)``; each redraw's patches are emitted on
    `patchesReady` as plain dicts for the page to apply.
    """
    patchesReady = Signal(list)

    def __init__(self, framework: 'Framework', parent=None):
        super().__init__(parent)
        self.framework = framework
        framework.add_patch_listener(self._emit_patches)

    def _emit_patches(self, patches):
        self.patchesReady.emit([
            {"action": p.action, "html_id": p.html_id, "data": _serializable(p.data)} for p in patches
        ])

    @Slot(str, str, result=str)
    def on_event(self, html_id, event_name):
        try:
            delivered = self.framework.dispatch(html_id, event_name)
        except Exception:
            logger.exception("Error handling '%s' on %s", event_name, html_id)
            return f"Event '{event_name}' on {html_id} failed."
        if not delivered:
            return f"Element '{html_id}' not found."
        return f"Event '{event_name}' on {html_id} handled."

    @Slot(str, str, result=None)
    def on_input(self, html_id, value):
        """
        Slot for 'oninput' events from input elements; the new value travels
        as the event payload.
        """
        try:
            self.framework.dispatch(html_id, "input", value)
        except Exception:
            logger.exception("Error handling input on %s", html_id)


def _serializable(data):
    """Drop values a web channel cannot carry (callables, widget objects)."""
    if isinstance(data, dict):
        return {k: _serializable(v) for k, v in data.items() if not callable(v)}
    if isinstance(data, (list, tuple)):
        return [_serializable(v) for v in data]
    if isinstance(data, (str, int, float, bool)) or data is None:
        return data
    return str(data)
