# pythra_forms/events.py

from dataclasses import dataclass, field
from typing import Any, List, Optional


@dataclass
class Event:
    """
    An interaction delivered by `Framework.dispatch`.

    The event bubbles from its target element up through the element's
    ancestors until a handler calls `stopPropagation()`.
    """
    name: str
    target: Optional[str] = None  # html id of the element the event was fired on
    payload: Any = None
    propagation_stopped: bool = False
    handled_by: List[str] = field(default_factory=list)

    def stopPropagation(self):
        self.propagation_stopped = True
