"""Exception types raised while resolving component themes."""

from __future__ import annotations

from typing import Sequence


class ComponentThemesError(RuntimeError):
    """Base class for errors surfaced to callers of ``render``."""


class ConfigurationError(ComponentThemesError):
    """Raised when a theme or page configuration cannot be used."""


class NoTemplateFoundError(ConfigurationError):
    """Raised when neither the requested slug nor a fallback template exists."""

    def __init__(self, slug: str, *, templates_defined: bool = True) -> None:
        if templates_defined:
            message = f"No template found matching '{slug}' and no 404 or home templates were defined in the theme."
        else:
            message = f"No template found matching '{slug}' and no templates were defined in the theme."
        super().__init__(message)
        self.slug = slug
        self.templates_defined = templates_defined


class InvalidThemeError(ConfigurationError):
    """Raised when a theme property has an unusable shape."""


class InvalidConfigError(ConfigurationError):
    """Raised when a component config fails validation."""


class ThemeError(ComponentThemesError):
    """Raised when a theme cannot be loaded from disk or validated."""


class ResolutionCycleError(ComponentThemesError):
    """Raised when template or partial indirection loops back on itself."""

    kind = "reference"

    def __init__(self, chain: Sequence[str]) -> None:
        self.chain = tuple(chain)
        path = " -> ".join(f"'{name}'" for name in self.chain)
        super().__init__(f"Cyclic {self.kind} reference detected: {path}")


class TemplateCycleError(ResolutionCycleError):
    kind = "template"


class PartialCycleError(ResolutionCycleError):
    kind = "partial"
