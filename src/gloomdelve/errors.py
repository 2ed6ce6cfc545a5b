from __future__ import annotations

from typing import List, Optional

from jsonschema import ValidationError


class GloomdelveError(Exception):
    """Base exception for the Gloomdelve project."""


class UnknownTemplateError(GloomdelveError, KeyError):
    """Raised when an entity or item template id is not registered."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else "unknown template"


class UnknownCapabilityError(GloomdelveError, KeyError):
    """Raised when a template names a capability that was never registered."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else "unknown capability"


class TemplateValidationError(GloomdelveError, ValueError):
    """Raised when template data fails schema validation."""

    def __init__(self, message: str, errors: Optional[List[ValidationError]] = None):
        super().__init__(message)
        self.errors = errors or []

    def to_human(self) -> str:
        parts = [str(self)]
        for e in self.errors:
            path = "/".join(str(p) for p in e.path) or "<root>"
            parts.append(f" - at {path}: {e.message}")
        return "\n".join(parts)


class SettingsError(GloomdelveError):
    """Raised when a settings file cannot be parsed."""
