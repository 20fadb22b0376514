"""Recursive resolution of component configs into ``Node`` trees."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping

from .api import ApiDataWrapper
from .components import ComponentImpl, Node, NotFoundComponent
from .models import ComponentConfig, ComponentData
from .partials import substitute_partial
from .registry import ComponentRegistry, default_registry
from .templates import follow_template

logger = logging.getLogger(__name__)

ID_PREFIX = "ct-"


def generate_id(config: ComponentConfig) -> str:
    """Derive a stable id from the config's canonical serialization."""
    return f"{ID_PREFIX}{config.content_hash()}"


def build_class_name(component_type: str | None, component_id: str | None) -> str:
    return " ".join([component_type or "", component_id or ""])


def compose_props(
    props: Mapping[str, Any],
    data: Mapping[str, Any],
    *,
    component_id: str,
    class_name: str,
    child_props: ComponentData,
) -> dict[str, Any]:
    """Merge node props in precedence order.

    Config props are overridden by the per-id component data, which is in turn
    overridden by the derived ``componentId``, ``className`` and ``child_props``.
    """
    derived = {
        "componentId": component_id,
        "className": class_name,
        "child_props": child_props,
    }
    return {**props, **data, **derived}


@dataclass(frozen=True, slots=True)
class _Path:
    """Partial names and template slugs expanded on the way to a node."""

    partials: tuple[str, ...] = ()
    templates: tuple[str, ...] = ()


class TreeBuilder:
    """Turn component configs into fully resolved ``Node`` trees."""

    def __init__(
        self,
        registry: ComponentRegistry | None = None,
        *,
        api: ApiDataWrapper | None = None,
        theme: Mapping[str, Any] | None = None,
    ) -> None:
        self._registry = registry if registry is not None else default_registry
        self._api = api
        self._theme = theme if theme is not None else {}

    @property
    def registry(self) -> ComponentRegistry:
        return self._registry

    def build(
        self,
        config: ComponentConfig | Mapping[str, Any],
        component_data: ComponentData | None = None,
    ) -> Node:
        return self._build(ComponentConfig.parse(config), component_data or {}, _Path())

    def make_component_with(
        self,
        config: ComponentConfig | Mapping[str, Any],
        child_props: ComponentData | None = None,
    ) -> Node:
        """Build a sub-tree for a component that manages its own children."""
        return self.build(config, child_props)

    def _build(self, config: ComponentConfig, component_data: ComponentData, path: _Path) -> Node:
        config, path = self._dereference(config, path)

        if config.component_type is None:
            name = config.id if config.id is not None else config.canonical_json()
            logger.warning("Component config has no componentType: %s", name)
            return Node(component=NotFoundComponent(name=name), props={"componentType": name})

        component = self._registry.lookup_component(config.component_type)
        children = tuple(self._build(child, component_data, path) for child in config.children)

        component_id = config.id if config.id is not None else generate_id(config)
        props = compose_props(
            config.props,
            component_data.get(component_id) or {},
            component_id=component_id,
            class_name=build_class_name(config.component_type, component_id),
            child_props=component_data,
        )
        props = self._wrap_api_data(component, props, config.component_type)
        return Node(component=component, props=props, children=children)

    def _dereference(self, config: ComponentConfig, path: _Path) -> tuple[ComponentConfig, _Path]:
        while True:
            if config.partial is not None:
                config, partials = substitute_partial(config, self._registry, path.partials)
                path = _Path(partials=partials, templates=path.templates)
            elif config.template is not None:
                config, templates = follow_template(self._theme, config.template, path.templates)
                path = _Path(partials=path.partials, templates=templates)
            else:
                return config, path

    def _wrap_api_data(
        self,
        component: ComponentImpl,
        props: dict[str, Any],
        component_type: str,
    ) -> Mapping[str, Any]:
        endpoints = component.required_api_endpoints
        if not endpoints:
            return props
        if self._api is None:
            logger.debug("Component '%s' requires API data but no wrapper is configured.", component_type)
            return props
        context = props.get("context") or {}
        return self._api.wrap(props, context, endpoints, component_type)
