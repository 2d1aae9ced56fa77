# pythra_forms/state.py
import logging
from typing import Optional, TYPE_CHECKING

from .base import Widget, Key

if TYPE_CHECKING:
    from .core import Framework

logger = logging.getLogger(__name__)


class StatefulWidget(Widget):
    """
    A widget that has mutable state managed by a State object.

    The widget itself is an immutable configuration that is re-created on every
    build of its parent. The framework keeps one `State` per tree slot and hands
    it the newest configuration on each rebuild, so the state survives while
    the widget instances come and go.
    """

    def __init__(self, key: Optional[Key] = None):
        super().__init__(key=key)

    def createState(self) -> 'State':
        """Create the mutable state for this widget."""
        raise NotImplementedError(f"{self.__class__.__name__} must implement createState()")


class StatelessWidget(Widget):
    """
    A widget that describes part of the user interface by building other widgets.

    The building process depends only on the configuration held by the widget
    itself (its constructor parameters).
    """
    def __init__(self, key: Optional[Key] = None):
        super().__init__(key=key)

    def build(self) -> Optional[Widget]:
        """
        Describes the part of the user interface represented by this widget.
        """
        raise NotImplementedError(
            f"{self.__class__.__name__} must implement the build() method."
        )


class State:
    """
    Manages the mutable state for a StatefulWidget.

    Lifecycle, driven by `Framework`:

    * ``initState()`` once, when the state is first mounted at a tree slot.
    * ``didUpdateWidget(oldWidget)`` before every later rebuild, after the new
      widget configuration has been attached. This is the pre-update check.
    * ``build()`` on every render.
    * ``dispose()`` once, when the slot disappears from the tree.

    Handlers mutate the state and then call ``setState()`` to request a redraw.
    """
    def __init__(self):
        self._widget: Optional[StatefulWidget] = None
        self.framework: Optional['Framework'] = None
        self._slot: Optional[str] = None
        self.mounted = False

    def _set_widget(self, widget: StatefulWidget):
        """Internal method to attach the newest widget configuration."""
        self._widget = widget

    def _mount(self, widget: StatefulWidget, framework: 'Framework', slot: str):
        self._set_widget(widget)
        self.framework = framework
        self._slot = slot
        self.mounted = True

    @property
    def widget(self) -> Optional[StatefulWidget]:
        return self._widget

    def get_widget(self) -> Optional[StatefulWidget]:
        """Returns the current widget configuration for this state."""
        return self._widget

    def initState(self):
        """
        Called once when this state object is inserted into the tree.

        This is the right place for one-time initialization, such as
        subscribing to controllers.
        """
        pass

    def didUpdateWidget(self, oldWidget: StatefulWidget):
        """
        Called before every rebuild of an already mounted state. ``oldWidget``
        is the previous configuration; ``self.widget`` is already the new one
        (they may be the same object when the state rebuilds itself).
        """
        pass

    def dispose(self):
        """
        Called when this state object is removed from the tree permanently.

        Subclasses should release anything acquired in `initState`, such as
        controller listeners.
        """
        pass

    def build(self) -> Optional[Widget]:
        """Describes the part of the user interface represented by this state."""
        raise NotImplementedError(f"{self.__class__.__name__} must implement build()")

    def setState(self):
        """Notify the framework that the internal state of this object has changed."""
        if not self.mounted:
            logger.debug("setState() called on unmounted %s, ignoring.", self.__class__.__name__)
            return

        if self.framework:
            logger.debug("setState triggered for %s (slot %s)", self.__class__.__name__, self._slot)
            self.framework.request_redraw(self)
        else:
            logger.warning("setState failed for %s: Framework not available.", self.__class__.__name__)
