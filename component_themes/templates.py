"""Resolve page templates registered on a theme."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Sequence

from .errors import InvalidThemeError, NoTemplateFoundError, TemplateCycleError
from .models import ComponentConfig

logger = logging.getLogger(__name__)

FALLBACK_SLUGS = ("404", "home")


def _templates_for(theme: Mapping[str, Any], slug: str) -> Mapping[str, Any]:
    templates = theme.get("templates")
    if templates is None:
        raise NoTemplateFoundError(slug, templates_defined=False)
    if not isinstance(templates, Mapping):
        raise InvalidThemeError(f"Theme 'templates' must be an object, got {type(templates).__name__}.")
    return templates


def _find_entry(templates: Mapping[str, Any], slug: str, requested: str) -> tuple[str, Any]:
    # A null entry counts as absent.
    if templates.get(slug) is not None:
        return slug, templates[slug]
    for fallback in FALLBACK_SLUGS:
        if templates.get(fallback) is not None:
            logger.debug("No template for '%s'; falling back to '%s'.", slug, fallback)
            return fallback, templates[fallback]
    raise NoTemplateFoundError(requested)


def resolve_template(theme: Mapping[str, Any], slug: str) -> ComponentConfig:
    """Return the concrete page config registered for ``slug``.

    Unknown slugs fall back to the ``404`` template and then ``home``. Entries
    that point at another template are followed until a concrete config is
    found; a slug reached twice raises ``TemplateCycleError``.
    """
    config, _ = follow_template(theme, slug)
    return config


def follow_template(
    theme: Mapping[str, Any],
    slug: str,
    chain: Sequence[str] = (),
) -> tuple[ComponentConfig, tuple[str, ...]]:
    """Resolve ``slug`` and return the config with the extended slug chain.

    ``chain`` holds slugs already being expanded further up the page tree.
    """
    templates = _templates_for(theme, slug)
    requested = slug
    visited = list(chain)
    while True:
        found_slug, entry = _find_entry(templates, slug, requested)
        if found_slug in visited:
            raise TemplateCycleError([*visited, found_slug])
        visited.append(found_slug)
        config = ComponentConfig.parse(entry)
        if config.template is None:
            return config, tuple(visited)
        slug = config.template


def expand_template(config: ComponentConfig, theme: Mapping[str, Any]) -> ComponentConfig:
    """Swap a template reference for the template it names."""
    if config.template is None:
        return config
    return resolve_template(theme, config.template)
