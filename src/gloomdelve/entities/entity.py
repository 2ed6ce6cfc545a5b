from __future__ import annotations

import copy
import logging
from typing import TYPE_CHECKING, Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple

from .capabilities import ActHook, Capability

if TYPE_CHECKING:
    from ..world.map import Map

logger = logging.getLogger(__name__)


class Entity:
    """A positioned object whose behaviour comes from its capabilities.

    Construction copies the display fields, sets every extra template
    attribute, then applies each capability in order: its defaults are set
    unless the template gave a value (a later capability overrides an earlier
    one), its ``init`` hook runs, and its ``act`` hook and listeners are
    registered. Two templates with the same capability list get the same
    behaviour without sharing a class.
    """

    def __init__(
        self,
        props: Optional[Mapping[str, Any]] = None,
        capabilities: Iterable[Capability] = (),
    ) -> None:
        props = dict(props or {})
        self.name: str = props.pop("name", "")
        self.glyph: str = props.pop("glyph", " ")
        self.foreground: str = props.pop("foreground", "white")
        self.background: str = props.pop("background", "black")
        self.x: int = props.pop("x", 0)
        self.y: int = props.pop("y", 0)
        self.z: int = props.pop("z", 0)
        self.map: Optional["Map"] = None

        self._capabilities: List[Capability] = []
        self._acts: List[ActHook] = []
        self._listeners: Dict[str, List[Callable[..., Any]]] = {}

        self._apply_props(props)
        for capability in capabilities:
            self.attach(capability, props)

    def _apply_props(self, props: Mapping[str, Any]) -> None:
        for key, value in props.items():
            setattr(self, key, copy.deepcopy(value))

    def attach(self, capability: Capability, props: Optional[Mapping[str, Any]] = None) -> None:
        props = props or {}
        for key, default in capability.defaults.items():
            if key not in props:
                setattr(self, key, copy.deepcopy(default))
        self._capabilities.append(capability)
        if capability.init is not None:
            capability.init(self, props)
        if capability.act is not None:
            self._acts.append(capability.act)
        for event, handler in capability.listeners.items():
            self._listeners.setdefault(event, []).append(handler)

    # ---- Capability queries ---------------------------------------------
    @property
    def capabilities(self) -> Tuple[str, ...]:
        return tuple(c.name for c in self._capabilities)

    def has_capability(self, name: str) -> bool:
        return any(c.name == name for c in self._capabilities)

    @property
    def is_actor(self) -> bool:
        return bool(self._acts)

    def act(self) -> None:
        for hook in list(self._acts):
            hook(self)

    def raise_event(self, event: str, *args: Any) -> List[Any]:
        """Call every listener registered for ``event``; returns their results."""
        return [handler(self, *args) for handler in list(self._listeners.get(event, ()))]

    # ---- Position --------------------------------------------------------
    @property
    def position(self) -> Tuple[int, int, int]:
        return self.x, self.y, self.z

    def set_position(self, x: int, y: int, z: int) -> None:
        old = self.position
        self.x, self.y, self.z = x, y, z
        if self.map is not None:
            self.map.update_entity_position(self, old)

    def draw(self) -> None:
        if self.map is not None and self.map.display is not None:
            self.map.display.draw(self.x, self.y, self.glyph, self.foreground, self.background)

    def describe(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, pos={self.position})"
