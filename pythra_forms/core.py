# pythra_forms/core.py
import logging
import textwrap
from typing import Callable, Dict, List, Optional, Set, TYPE_CHECKING

from PySide6.QtCore import QCoreApplication, QTimer

from .base import Widget
from .config import Config
from .events import Event
from .popup import PopupRegistry
from .reconciler import Patch, Reconciler, ReconciliationResult, RenderNode
from .state import State, StatefulWidget, StatelessWidget

if TYPE_CHECKING:
    from .api import Api

logger = logging.getLogger(__name__)

ROOT_SLOT = "root"


class Framework:
    """
    Owns the widget tree, the states of stateful widgets, redraw scheduling,
    event dispatch and the popup registry shared by the widgets it renders.

    **Slots.** Every node of the built tree has a slot: its parent's slot plus
    either its key (``k:<value>``) or its position and type
    (``<index>:<TypeName>``). A `State` lives as long as its slot keeps holding
    a widget of the same type.

    **Redraws.** Handlers mutate state and call ``State.setState()``, which
    lands in `request_redraw`. During a dispatch the requests are coalesced and
    flushed once the handler chain is done; outside a dispatch they are
    scheduled on the Qt event loop when a Qt application exists, and flushed
    immediately otherwise. Every redraw rebuilds the tree from the root.

    :param popupRegistry: registry for the popups of this application; a new
        one is created when omitted.
    :param config: configuration; the `Config` singleton when omitted.
    """

    def __init__(self, popupRegistry: Optional[PopupRegistry] = None, config: Optional[Config] = None,
                 root_html_id: str = "root-container"):
        if popupRegistry is not None and not isinstance(popupRegistry, PopupRegistry):
            raise TypeError("popupRegistry must be a PopupRegistry instance.")
        self.popup_registry = popupRegistry if popupRegistry is not None else PopupRegistry()
        self.config = config if config is not None else Config()
        self.reconciler = Reconciler()
        self.root_widget: Optional[Widget] = None
        self.root_html_id = root_html_id
        self._api: Optional['Api'] = None

        self._states: Dict[str, State] = {}
        self._tree: Optional[RenderNode] = None
        self._nodes_by_slot: Dict[str, RenderNode] = {}
        self._rendered_types: List[type] = []
        self._slot_by_html_id: Dict[str, str] = {}

        # State Management / Redraw Control
        self._redraw_requested: bool = False
        self._pending_state_updates: Set[State] = set()
        self._dispatch_depth = 0
        self._building = False
        self.redraw_count = 0
        self.last_result: Optional[ReconciliationResult] = None
        self._patch_listeners: List[Callable[[List[Patch]], None]] = []

    @property
    def api(self) -> 'Api':
        """The Qt bridge object exposed to the webview."""
        if self._api is None:
            from .api import Api
            self._api = Api(self)
        return self._api

    # ----- mounting and rendering -----
    def set_root(self, widget: Widget) -> ReconciliationResult:
        """Sets the root widget and performs the initial render."""
        if not isinstance(widget, Widget):
            raise TypeError(f"Root must be a Widget, got {type(widget).__name__}.")
        if self.root_widget is not None:
            self._dispose_states(set(self._states))
            self.reconciler.clear_all_contexts()
        self.root_widget = widget
        return self._process_redraw()

    def add_patch_listener(self, listener: Callable[[List[Patch]], None]):
        """Register a callable receiving the patches of every redraw."""
        if listener not in self._patch_listeners:
            self._patch_listeners.append(listener)

    def remove_patch_listener(self, listener: Callable[[List[Patch]], None]):
        if listener in self._patch_listeners:
            self._patch_listeners.remove(listener)

    def request_redraw(self, state: Optional[State] = None):
        """Called by State.setState (or directly) to schedule a redraw."""
        if state is not None:
            self._pending_state_updates.add(state)
        if self._building:
            # The tree being built already reads the latest state.
            return
        if self.root_widget is None:
            return
        if self._dispatch_depth > 0:
            self._redraw_requested = True
            return
        if QCoreApplication.instance() is not None:
            if not self._redraw_requested:
                self._redraw_requested = True
                QTimer.singleShot(0, self._process_redraw)
            return
        self._process_redraw()

    def _process_redraw(self) -> Optional[ReconciliationResult]:
        self._redraw_requested = False
        if self.root_widget is None:
            logger.warning("Redraw requested before a root widget was set.")
            return None
        visited: Set[str] = set()
        self._building = True
        self._rendered_types = []
        try:
            tree = self._build(self.root_widget, ROOT_SLOT, visited, None)
        finally:
            self._building = False
        self._dispose_states(set(self._states) - visited)
        pending = len(self._pending_state_updates)
        self._pending_state_updates.clear()

        previous_map = self.reconciler.get_map_for_context("main")
        result = self.reconciler.reconcile(previous_map, tree, self.root_html_id)
        self.reconciler.context_maps["main"] = result.new_rendered_map

        self._tree = tree
        self._nodes_by_slot = {n.slot: n for n in tree.iter_tree()} if tree else {}
        self._slot_by_html_id = {data["html_id"]: slot for slot, data in result.new_rendered_map.items()}
        self.redraw_count += 1
        self.last_result = result
        logger.debug("Redraw #%d: %d pending states, %d patches", self.redraw_count, pending, len(result.patches))

        for listener in list(self._patch_listeners):
            listener(result.patches)
        return result

    def _child_slot(self, parent_slot: str, index: int, widget: Widget) -> str:
        if widget.key is not None:
            return f"{parent_slot}/k:{widget.key.value!r}"
        return f"{parent_slot}/{index}:{type(widget).__name__}"

    def _build(self, widget: Optional[Widget], slot: str, visited: Set[str],
               parent: Optional[RenderNode]) -> Optional[RenderNode]:
        if widget is None:
            return None
        if type(widget) not in self._rendered_types:
            self._rendered_types.append(type(widget))

        if isinstance(widget, StatefulWidget):
            state = self._states.get(slot)
            if state is not None and type(state.get_widget()) is type(widget):
                old_widget = state.get_widget()
                state._set_widget(widget)
                state.didUpdateWidget(old_widget)
            else:
                if state is not None:
                    self._dispose_states({slot})
                state = widget.createState()
                state._mount(widget, self, slot)
                self._states[slot] = state
                state.initState()
            visited.add(slot)
            built = state.build()
            return self._build(built, self._child_slot(slot, 0, built), visited, parent) if built else None

        if isinstance(widget, StatelessWidget):
            built = widget.build()
            return self._build(built, self._child_slot(slot, 0, built), visited, parent) if built else None

        node = RenderNode(slot=slot, widget=widget, parent=parent)
        for index, child in enumerate(widget.get_children()):
            child_node = self._build(child, self._child_slot(slot, index, child), visited, node)
            if child_node is not None:
                node.children.append(child_node)
        return node

    def _dispose_states(self, slots: Set[str]):
        for slot in slots:
            state = self._states.pop(slot, None)
            if state is None:
                continue
            state.dispose()
            state.mounted = False

    def get_state(self, slot: str = ROOT_SLOT) -> Optional[State]:
        """The mounted state at ``slot`` (the root state by default)."""
        return self._states.get(slot)

    def states_of_type(self, state_type: type) -> List[State]:
        return [s for s in self._states.values() if isinstance(s, state_type)]

    # ----- events -----
    def dispatch(self, html_id: str, event_name: str, payload=None) -> bool:
        """
        Deliver ``event_name`` to the element rendered as ``html_id``.

        An open popup whose binder does not contain the target is closed
        first. The event then bubbles from the target to the root, calling
        each element's handler for ``event_name`` until one stops propagation.
        Returns False when ``html_id`` is unknown.
        """
        slot = self._slot_by_html_id.get(html_id)
        if slot is None:
            logger.warning("Dispatch of '%s' to unknown element %s ignored.", event_name, html_id)
            return False

        event = Event(name=event_name, target=html_id, payload=payload)
        self._dispatch_depth += 1
        try:
            self._dismiss_popup_outside(slot)
            node = self._nodes_by_slot.get(slot)
            while node is not None and not event.propagation_stopped:
                handler = node.widget.get_handlers().get(event_name)
                if handler is not None:
                    event.handled_by.append(self.reconciler.get_map_for_context("main")[node.slot]["html_id"])
                    handler(event)
                node = node.parent
        finally:
            self._dispatch_depth -= 1

        if self._dispatch_depth == 0 and (self._redraw_requested or self._pending_state_updates):
            self._process_redraw()
        return True

    def _dismiss_popup_outside(self, slot: str):
        current = self.popup_registry.current
        if current is None:
            return
        contains = getattr(current, "containsSlot", None)
        if contains is not None and contains(slot):
            return
        logger.debug("Interaction at %s is outside the open popup, closing it.", slot)
        self.popup_registry.close(current)
        self.request_redraw()

    # ----- queries -----
    def render_html(self) -> str:
        """The HTML of the whole current tree."""
        if self._tree is None:
            return ""
        return self.reconciler.render_html(self._tree, self.reconciler.get_map_for_context("main"))

    def stylesheet(self) -> str:
        """The CSS of every widget class built in the last redraw, composites included."""
        seen = []
        for widget_type in self._rendered_types:
            for cls in widget_type.__mro__:
                if cls.__dict__.get("CSS") and cls not in seen:
                    seen.append(cls)
        return "\n".join(textwrap.dedent(cls.CSS).strip() for cls in seen)

    def find(self, widget_type: Optional[type] = None, cssClass: Optional[str] = None, data=None) -> List[str]:
        """
        html ids of rendered elements, in document order, filtered by element
        type, by a class that must be present and by text content.
        """
        if self._tree is None:
            return []
        rendered = self.reconciler.get_map_for_context("main")
        wanted = set(cssClass.split()) if cssClass else set()
        found = []
        for node in self._tree.iter_tree():
            if widget_type is not None and not isinstance(node.widget, widget_type):
                continue
            props = rendered[node.slot]["props"]
            if wanted and not wanted <= set(props.get("css_class", "").split()):
                continue
            if data is not None and props.get("data") != str(data):
                continue
            found.append(rendered[node.slot]["html_id"])
        return found

    def props_of(self, html_id: str) -> Dict:
        slot = self._slot_by_html_id.get(html_id)
        if slot is None:
            raise KeyError(html_id)
        return self.reconciler.get_map_for_context("main")[slot]["props"]
