"""Theme merging and loading utilities for component themes."""

from __future__ import annotations

import json
import logging
from importlib import resources
from pathlib import Path
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..errors import ThemeError

logger = logging.getLogger(__name__)

MANIFEST_FILENAME = "theme.json"
DEFAULT_THEME_NAME = "default"

Theme = dict[str, Any]


def _has_string_keys(value: Any) -> bool:
    return isinstance(value, Mapping) and any(isinstance(key, str) for key in value)


def merge_theme_property(key: str, first: Mapping[str, Any], second: Mapping[str, Any]) -> Any:
    """Combine a single theme property following the override policy."""
    value1 = first.get(key)
    value2 = second.get(key)
    if value1 is None:
        return value2
    if value2 is None:
        return value1
    if not _has_string_keys(value1) or not _has_string_keys(value2):
        return value2
    # One level deep: nested templates/partials are replaced, not merged.
    return {**value1, **value2}


def merge_themes(first: Mapping[str, Any], second: Mapping[str, Any]) -> Theme:
    """Merge two theme definitions; ``second`` takes precedence.

    Keys defined in only one theme are copied through. When both themes define
    a key as a keyed mapping the entries are merged shallowly with ``second``
    winning conflicts; any other pairing is replaced by ``second``'s value.
    """
    keys = list(dict.fromkeys([*first.keys(), *second.keys()]))
    return {key: merge_theme_property(key, first, second) for key in keys}


class ThemeManifest(BaseModel):
    """Structured representation of a ``theme.json`` manifest."""

    model_config = ConfigDict(extra="allow")

    name: str | None = Field(default=None)
    slug: str | None = Field(default=None)
    templates: dict[str, dict[str, Any]] | None = Field(default=None)
    partials: dict[str, dict[str, Any]] | None = Field(default=None)

    def to_theme(self) -> Theme:
        return self.model_dump(exclude_unset=True)


def parse_theme(data: Any, *, source: str = "theme") -> Theme:
    """Validate a JSON theme payload and return it as a plain mapping."""
    if not isinstance(data, Mapping):
        raise ThemeError(f"Theme definition in {source} must be an object.")
    try:
        return ThemeManifest.model_validate(dict(data)).to_theme()
    except ValidationError as exc:
        raise ThemeError(f"Theme validation failed for {source}: {exc}") from exc


def load_theme_file(path: Path) -> Theme:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ThemeError(f"Failed to load theme at {path}: {exc}") from exc
    return parse_theme(data, source=str(path))


def load_default_theme() -> Theme:
    """Return the theme bundled with the package."""
    resource = resources.files(__name__).joinpath(DEFAULT_THEME_NAME, MANIFEST_FILENAME)
    data = json.loads(resource.read_text(encoding="utf-8"))
    return parse_theme(data, source=f"bundled theme '{DEFAULT_THEME_NAME}'")


class ThemeLoader:
    """Load an active theme layered over a fallback theme."""

    def __init__(
        self,
        *,
        themes_root: Path | None,
        active_theme: str = DEFAULT_THEME_NAME,
        fallback_theme: str = DEFAULT_THEME_NAME,
    ) -> None:
        self._themes_root = themes_root
        self._active_theme = active_theme or DEFAULT_THEME_NAME
        self._fallback_theme = fallback_theme or DEFAULT_THEME_NAME
        self._theme: Theme | None = None
        self._load()

    @property
    def theme(self) -> Theme:
        assert self._theme is not None  # pragma: no cover - construction guarantees
        return self._theme

    @property
    def active_theme(self) -> str:
        return self._active_theme

    def available_themes(self) -> list[str]:
        names = {DEFAULT_THEME_NAME}
        if self._themes_root is not None and self._themes_root.exists():
            names.update(
                entry.name for entry in self._themes_root.iterdir() if (entry / MANIFEST_FILENAME).exists()
            )
        return sorted(names)

    def _load(self) -> None:
        if self._themes_root is not None and not self._themes_root.exists():
            raise ThemeError(f"Themes root '{self._themes_root}' does not exist.")

        fallback = self._load_theme(self._fallback_theme)
        active = fallback if self._active_theme == self._fallback_theme else self._load_theme(self._active_theme)

        if active is None:
            if fallback is None:
                raise ThemeError(
                    f"Neither active theme '{self._active_theme}' nor fallback '{self._fallback_theme}' could be loaded."
                )
            logger.warning(
                "Active theme '%s' not available. Falling back to '%s'.",
                self._active_theme,
                self._fallback_theme,
            )
            self._theme = fallback
        elif fallback is None or active is fallback:
            self._theme = active
        else:
            self._theme = merge_themes(fallback, active)

    def _load_theme(self, theme_name: str) -> Theme | None:
        if self._themes_root is not None:
            manifest_path = self._themes_root / theme_name / MANIFEST_FILENAME
            if manifest_path.exists():
                return load_theme_file(manifest_path)
            logger.debug("Theme manifest not found at %s", manifest_path)
        if theme_name == DEFAULT_THEME_NAME:
            return load_default_theme()
        return None


def build_theme_loader(
    *,
    themes_root: Path | None,
    active_theme: str = DEFAULT_THEME_NAME,
    fallback_theme: str = DEFAULT_THEME_NAME,
) -> ThemeLoader:
    """Construct a ThemeLoader with helpful error reporting."""
    try:
        return ThemeLoader(
            themes_root=themes_root,
            active_theme=active_theme,
            fallback_theme=fallback_theme,
        )
    except ThemeError:
        raise
    except Exception as exc:  # pragma: no cover
        raise ThemeError(f"Unexpected error loading theme '{active_theme}': {exc}") from exc
