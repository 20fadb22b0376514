"""Entry points composing template resolution, tree building and rendering."""

from __future__ import annotations

from typing import Any, Mapping

from markupsafe import Markup

from .api import ApiDataStore, ApiDataWrapper
from .builder import TreeBuilder
from .components import Node
from .errors import InvalidThemeError
from .models import ComponentConfig, ComponentData
from .registry import ComponentRegistry, default_registry
from .renderer import HtmlRenderer
from .templates import resolve_template
from .themes import merge_themes

PageConfig = ComponentConfig | Mapping[str, Any]


def _theme_partials(theme: Mapping[str, Any]) -> Mapping[str, Any]:
    partials = theme.get("partials") or {}
    if not isinstance(partials, Mapping):
        raise InvalidThemeError(f"Theme 'partials' must be an object, got {type(partials).__name__}.")
    return partials


def build_tree(
    theme: Mapping[str, Any],
    page: PageConfig,
    data: ComponentData | None = None,
    *,
    registry: ComponentRegistry | None = None,
    api: ApiDataWrapper | None = None,
) -> Node:
    """Resolve ``page`` against ``theme`` into a render-ready node tree.

    The theme's partials shadow registered partials for this build only.
    """
    base = registry if registry is not None else default_registry
    scoped = base.overlay(partials=_theme_partials(theme))
    builder = TreeBuilder(scoped, api=api, theme=theme)
    return builder.build(page, data or {})


def render(
    theme: Mapping[str, Any],
    page: PageConfig,
    data: ComponentData | None = None,
    *,
    registry: ComponentRegistry | None = None,
    api: ApiDataWrapper | None = None,
    renderer: HtmlRenderer | None = None,
) -> Markup:
    """Render ``page`` with ``theme`` to HTML."""
    node = build_tree(theme, page, data, registry=registry, api=api)
    return (renderer or HtmlRenderer()).render(node)


class ComponentThemesBuilder:
    """Bundle a registry, API data store and renderer behind one object."""

    def __init__(
        self,
        *,
        registry: ComponentRegistry | None = None,
        api: ApiDataStore | None = None,
        renderer: HtmlRenderer | None = None,
    ) -> None:
        self.registry = registry if registry is not None else default_registry
        self.api = api if api is not None else ApiDataStore()
        self.renderer = renderer or HtmlRenderer()

    def build(self, theme: Mapping[str, Any], page: PageConfig, data: ComponentData | None = None) -> Node:
        return build_tree(theme, page, data, registry=self.registry, api=self.api)

    def render(self, theme: Mapping[str, Any], page: PageConfig, data: ComponentData | None = None) -> Markup:
        return self.renderer.render(self.build(theme, page, data))

    def make_component_with(self, config: PageConfig, child_props: ComponentData | None = None) -> Node:
        return TreeBuilder(self.registry, api=self.api).make_component_with(config, child_props)

    def get_template_for_slug(self, theme: Mapping[str, Any], slug: str) -> ComponentConfig:
        return resolve_template(theme, slug)

    def merge_themes(self, first: Mapping[str, Any], second: Mapping[str, Any]) -> dict[str, Any]:
        return merge_themes(first, second)

    def get_component_api_data(self) -> dict[str, Any]:
        return self.api.get_api()
