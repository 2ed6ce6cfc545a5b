from __future__ import annotations

import json
import logging
import random
from dataclasses import dataclass, field
from functools import lru_cache
from importlib import resources
from pathlib import Path
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Type

import yaml
from jsonschema import Draft7Validator

from ..errors import TemplateValidationError, UnknownTemplateError
from .behaviours import default_capabilities
from .being import Being
from .capabilities import CapabilityRegistry
from .entity import Entity
from .items import Item

logger = logging.getLogger(__name__)

DISPLAY_FIELDS = ("name", "glyph", "foreground", "background")


@lru_cache(maxsize=1)
def template_validator() -> Draft7Validator:
    text = resources.files("gloomdelve.data").joinpath("schemas/template.schema.json").read_text(encoding="utf-8")
    return Draft7Validator(json.loads(text))


@dataclass(frozen=True)
class Template:
    """Read-only description of an entity or item kind.

    ``attributes`` holds every other key of the definition (stats such as
    ``health`` or ``attack``, and capability settings such as
    ``sight_radius``). ``spawn`` marks templates eligible for random spawning.
    """

    id: str
    name: str
    glyph: str
    foreground: str = "white"
    background: str = "black"
    capabilities: Tuple[str, ...] = ()
    spawn: bool = True
    attributes: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "capabilities", tuple(self.capabilities))
        object.__setattr__(self, "attributes", MappingProxyType(dict(self.attributes)))

    @classmethod
    def from_dict(cls, template_id: str, data: Mapping[str, Any]) -> "Template":
        data = dict(data)
        known = {k: data.pop(k) for k in DISPLAY_FIELDS if k in data}
        return cls(
            id=template_id,
            capabilities=tuple(data.pop("capabilities", ())),
            spawn=bool(data.pop("spawn", True)),
            attributes=data,
            **known,
        )

    def props(self) -> Dict[str, Any]:
        props = {k: getattr(self, k) for k in DISPLAY_FIELDS}
        props.update(self.attributes)
        return props


def being_or_entity(template: Template) -> Type[Entity]:
    """Templates carrying the health-bearing capability become Beings."""
    return Being if "destructible" in template.capabilities else Entity


class TemplateRepository:
    """Templates keyed by id, and the factory that turns them into objects.

    Every capability a template names is resolved before anything is
    constructed, so an unknown name fails the whole creation instead of
    producing a half-built entity.
    """

    def __init__(
        self,
        name: str,
        factory: Callable[[Template], Type[Entity]],
        capabilities: Optional[CapabilityRegistry] = None,
    ) -> None:
        self.name = name
        self._factory = factory
        self.capabilities = capabilities or default_capabilities()
        self._templates: Dict[str, Template] = {}

    def __contains__(self, template_id: str) -> bool:
        return template_id in self._templates

    def keys(self) -> List[str]:
        return list(self._templates)

    def define(self, template_id: str, data: Mapping[str, Any]) -> Template:
        errors = sorted(template_validator().iter_errors(dict(data)), key=lambda e: list(e.path))
        if errors:
            raise TemplateValidationError(f"Invalid {self.name} template '{template_id}'", errors)
        if template_id in self._templates:
            raise ValueError(f"Duplicate {self.name} template: {template_id}")
        template = Template.from_dict(template_id, data)
        # Fail at registration time on capabilities nobody registered
        self.capabilities.resolve(template.capabilities)
        self._templates[template_id] = template
        logger.debug("Defined %s template '%s' with %s", self.name, template_id, template.capabilities)
        return template

    def get(self, template_id: str) -> Template:
        try:
            return self._templates[template_id]
        except KeyError as e:
            raise UnknownTemplateError(f"Unknown {self.name} template: {template_id}") from e

    def create(self, template_id: str, **overrides: Any) -> Entity:
        template = self.get(template_id)
        capabilities = self.capabilities.resolve(template.capabilities)
        props = template.props()
        props.update(overrides)
        return self._factory(template)(props, capabilities)

    def create_random(self, rng: random.Random) -> Entity:
        candidates = [tid for tid, t in self._templates.items() if t.spawn]
        if not candidates:
            raise UnknownTemplateError(f"No spawnable {self.name} templates")
        return self.create(rng.choice(candidates))

    def load(self, definitions: Mapping[str, Mapping[str, Any]]) -> None:
        for template_id, data in definitions.items():
            self.define(template_id, data)

    def load_yaml(self, path: Path) -> None:
        with path.open("r", encoding="utf-8") as f:
            self.load(yaml.safe_load(f) or {})
        logger.info("Loaded %d %s templates from %s", len(self._templates), self.name, path)

    def load_resource(self, resource: str) -> None:
        text = resources.files("gloomdelve.data").joinpath(resource).read_text(encoding="utf-8")
        self.load(yaml.safe_load(text) or {})
        logger.debug("Loaded %s templates from package resource %s", self.name, resource)


def entity_repository(capabilities: Optional[CapabilityRegistry] = None) -> TemplateRepository:
    repo = TemplateRepository("entity", being_or_entity, capabilities)
    repo.load_resource("entities.yaml")
    return repo


def item_repository(capabilities: Optional[CapabilityRegistry] = None) -> TemplateRepository:
    repo = TemplateRepository("item", lambda _template: Item, capabilities)
    repo.load_resource("items.yaml")
    return repo
