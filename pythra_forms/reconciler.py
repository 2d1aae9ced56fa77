# pythra_forms/reconciler.py
"""
Reconciler: turns two successive render trees into DOM patches.

The framework builds composite widgets down to a tree of `RenderNode`s, each
wrapping one renderable element and identified by its slot (see
`core.Framework`). The reconciler compares that tree with the map recorded for
the previous render and emits:

- INSERT: a new subtree (its full HTML) under ``parent_html_id``
- REMOVE: a subtree that is gone
- UPDATE: an element whose render props changed
- MOVE: a keyed element that changed position among its siblings
- REPLACE: an element whose tag or widget type changed at the same slot
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Literal, Optional, Tuple

from .base import Widget

logger = logging.getLogger(__name__)


class IDGenerator:
    def __init__(self):
        self._count = 0

    def next_id(self) -> str:
        self._count += 1
        return f"fw_id_{self._count}"


PatchAction = Literal["INSERT", "REMOVE", "UPDATE", "MOVE", "REPLACE"]


@dataclass
class Patch:
    action: PatchAction
    html_id: str
    data: Dict[str, Any]


NodeData = Dict[str, Any]


@dataclass(eq=False)
class RenderNode:
    slot: str
    widget: Widget
    children: List['RenderNode'] = field(default_factory=list)
    parent: Optional['RenderNode'] = None

    def get_unique_id(self) -> str:
        return self.slot

    def get_children(self) -> List['RenderNode']:
        return self.children

    def render_props(self) -> Dict[str, Any]:
        return self.widget.render_props()

    def iter_tree(self):
        yield self
        for child in self.children:
            yield from child.iter_tree()


@dataclass
class ReconciliationResult:
    patches: List[Patch] = field(default_factory=list)
    new_rendered_map: Dict[str, NodeData] = field(default_factory=dict)
    active_css_classes: set = field(default_factory=set)
    registered_callbacks: Dict[Tuple[str, str], Callable] = field(default_factory=dict)


class Reconciler:
    def __init__(self):
        self.context_maps: Dict[str, Dict[str, NodeData]] = {"main": {}}
        self.id_generator = IDGenerator()

    def get_map_for_context(self, context_key: str) -> Dict[str, NodeData]:
        return self.context_maps.setdefault(context_key, {})

    def clear_context(self, context_key: str):
        if context_key in self.context_maps:
            del self.context_maps[context_key]

    def clear_all_contexts(self):
        """Resets all stored render maps."""
        self.context_maps.clear()
        self.context_maps['main'] = {}

    def reconcile(
        self,
        previous_map: Dict[str, NodeData],
        new_root: Optional[RenderNode],
        parent_html_id: str,
    ) -> ReconciliationResult:
        """
        Compares a new render tree with the previous map and generates patches.
        """
        result = ReconciliationResult()

        old_root_key = None
        for key, data in previous_map.items():
            if data.get("parent_html_id") == parent_html_id and data.get("parent_key") is None:
                old_root_key = key
                break

        if new_root is None:
            if old_root_key is not None:
                result.patches.append(Patch("REMOVE", previous_map[old_root_key]["html_id"], {}))
            return result

        if old_root_key is not None and old_root_key != new_root.get_unique_id():
            result.patches.append(Patch("REMOVE", previous_map[old_root_key]["html_id"], {}))
            old_root_key = None

        self._diff_node_recursive(old_root_key, new_root, parent_html_id, None, result, previous_map)
        logger.debug("Reconciled %d nodes into %d patches", len(result.new_rendered_map), len(result.patches))
        return result

    def _diff_node_recursive(self, old_node_key, node: RenderNode, parent_html_id, parent_key, result, previous_map):
        """Compares a node with its previous version."""
        old_data = previous_map.get(old_node_key) if old_node_key is not None else None

        if old_data is None:
            self._insert_node_recursive(node, parent_html_id, parent_key, result)
            return

        new_props = node.render_props()
        new_type = type(node.widget).__name__

        if old_data.get("widget_type") != new_type or old_data["props"].get("tag") != new_props.get("tag"):
            self._insert_node_recursive(node, parent_html_id, parent_key, result, emit=False)
            result.patches.append(Patch("REPLACE", old_data["html_id"], {
                "new_html": self.render_html(node, result.new_rendered_map),
                "new_html_id": result.new_rendered_map[node.slot]["html_id"],
                "new_props": new_props,
            }))
            return

        html_id = old_data["html_id"]
        self._collect_details(node, html_id, new_props, result)
        prop_changes = self._diff_props(old_data.get("props", {}), new_props)
        if prop_changes:
            result.patches.append(Patch("UPDATE", html_id, {
                "props": new_props,
                "old_props": old_data.get("props", {}),
                "changes": prop_changes,
            }))

        result.new_rendered_map[node.slot] = {
            "html_id": html_id,
            "widget_type": new_type,
            "props": new_props,
            "parent_html_id": parent_html_id,
            "parent_key": parent_key,
            "children_keys": [c.get_unique_id() for c in node.get_children()],
        }

        self._diff_children_recursive(
            old_data.get("children_keys", []), node.get_children(), html_id, node.slot, result, previous_map
        )

    def _insert_node_recursive(self, node: RenderNode, parent_html_id, parent_key, result, before_id=None, emit=True):
        """
        Registers ``node`` and its subtree under fresh html ids. Only the
        subtree root gets an INSERT patch; its HTML contains the descendants.
        """
        html_id = self.id_generator.next_id()
        new_props = node.render_props()
        self._collect_details(node, html_id, new_props, result)
        result.new_rendered_map[node.slot] = {
            "html_id": html_id,
            "widget_type": type(node.widget).__name__,
            "props": new_props,
            "parent_html_id": parent_html_id,
            "parent_key": parent_key,
            "children_keys": [c.get_unique_id() for c in node.get_children()],
        }
        for child in node.get_children():
            self._insert_node_recursive(child, html_id, node.slot, result, emit=False)

        if emit:
            result.patches.append(Patch("INSERT", html_id, {
                "html": self.render_html(node, result.new_rendered_map),
                "parent_html_id": parent_html_id,
                "props": new_props,
                "before_id": before_id,
            }))

    def _diff_children_recursive(self, old_children_keys, new_children, parent_html_id, parent_key, result, previous_map):
        """Diffs a list of child nodes by slot."""
        if not old_children_keys and not new_children:
            return

        new_keys = {child.get_unique_id() for child in new_children}
        old_keys = [key for key in old_children_keys if key in previous_map]

        for key in old_keys:
            if key not in new_keys:
                result.patches.append(Patch("REMOVE", previous_map[key]["html_id"], {}))

        old_key_to_index = {key: i for i, key in enumerate(old_keys)}
        last_placed_old_idx = -1

        for i, child in enumerate(new_children):
            key = child.get_unique_id()
            if key in old_key_to_index:
                self._diff_node_recursive(key, child, parent_html_id, parent_key, result, previous_map)
                old_idx = old_key_to_index[key]
                if old_idx < last_placed_old_idx:
                    before_id = self._find_next_stable_html_id(i + 1, new_children, old_key_to_index, previous_map)
                    result.patches.append(Patch("MOVE", result.new_rendered_map[key]["html_id"], {
                        "parent_html_id": parent_html_id, "before_id": before_id,
                    }))
                last_placed_old_idx = max(last_placed_old_idx, old_idx)
            else:
                before_id = self._find_next_stable_html_id(i + 1, new_children, old_key_to_index, previous_map)
                self._insert_node_recursive(child, parent_html_id, parent_key, result, before_id=before_id)

    def _find_next_stable_html_id(self, start_index, new_children, old_key_map, previous_map):
        """html id of the first following sibling that was already rendered, or None."""
        for j in range(start_index, len(new_children)):
            key = new_children[j].get_unique_id()
            if key in old_key_map:
                return previous_map[key]["html_id"]
        return None

    def _collect_details(self, node: RenderNode, html_id: str, props: Dict, result: ReconciliationResult):
        """Collects CSS classes and event callbacks."""
        result.active_css_classes.update(node.widget.get_required_css_classes())
        for event_name, handler in node.widget.get_handlers().items():
            result.registered_callbacks[(html_id, event_name)] = handler

    def _diff_props(self, old_props: Dict, new_props: Dict) -> Optional[Dict]:
        changes = {}
        for key in set(old_props.keys()) | set(new_props.keys()):
            old_val, new_val = old_props.get(key), new_props.get(key)
            if old_val != new_val:
                changes[key] = new_val
        return changes if changes else None

    def render_html(self, node: RenderNode, rendered_map: Dict[str, NodeData]) -> str:
        """Render ``node`` and its subtree using the html ids in ``rendered_map``."""
        data = rendered_map[node.slot]
        inner = "".join(self.render_html(child, rendered_map) for child in node.get_children())
        return node.widget.generate_html(data["html_id"], data["props"], inner)
