from __future__ import annotations

from .entity import Entity


class Item(Entity):
    """Something that lies on the floor or sits in an inventory slot."""

    def describe(self) -> str:
        if self.has_capability("edible") and 0 < self.consumptions < self.max_consumptions:
            return f"partly eaten {self.name}"
        return self.name

    def describe_a(self) -> str:
        text = self.describe()
        return f"{'an' if text[:1].lower() in 'aeiou' else 'a'} {text}"

    def describe_the(self) -> str:
        return f"the {self.describe()}"
