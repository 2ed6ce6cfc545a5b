from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Callable, Dict, Iterable, List, Mapping, Optional

from ..errors import UnknownCapabilityError

if TYPE_CHECKING:
    from .entity import Entity

logger = logging.getLogger(__name__)

InitHook = Callable[["Entity", Mapping[str, Any]], None]
ActHook = Callable[["Entity"], None]


@dataclass(frozen=True)
class Capability:
    """A named bundle of default attributes and behaviour hooks.

    Attributes:
        name: Registry key, also what ``Entity.has_capability`` checks.
        defaults: Attributes set on the owner when neither the template nor an
            earlier capability provided them. Values are deep-copied per entity.
        init: Called once after defaults are applied, with the template props.
        act: Called whenever the owner is given a turn by the scheduler.
        listeners: Event name -> handler(owner, *args) for ``raise_event``.
    """

    name: str
    defaults: Mapping[str, Any] = field(default_factory=dict)
    init: Optional[InitHook] = None
    act: Optional[ActHook] = None
    listeners: Mapping[str, Callable[..., Any]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Capability.name must be a non-empty string")
        object.__setattr__(self, "defaults", MappingProxyType(dict(self.defaults)))
        object.__setattr__(self, "listeners", MappingProxyType(dict(self.listeners)))


class CapabilityRegistry:
    """In-memory lookup of capabilities by name."""

    def __init__(self, capabilities: Optional[Iterable[Capability]] = None) -> None:
        self._capabilities: Dict[str, Capability] = {}
        for cap in capabilities or ():
            self.register(cap)

    def register(self, capability: Capability) -> None:
        if capability.name in self._capabilities:
            raise ValueError(f"Duplicate capability: {capability.name}")
        self._capabilities[capability.name] = capability
        logger.debug("Registered capability '%s'", capability.name)

    def get(self, name: str) -> Capability:
        try:
            return self._capabilities[name]
        except KeyError as e:
            raise UnknownCapabilityError(f"Unknown capability: {name}") from e

    def has(self, name: str) -> bool:
        return name in self._capabilities

    def resolve(self, names: Iterable[str]) -> List[Capability]:
        """Look up every name, in order; fails on the first unknown one."""
        return [self.get(n) for n in names]

    def names(self) -> List[str]:
        return sorted(self._capabilities)
