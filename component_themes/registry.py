"""Registries mapping component types and partial names to implementations."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Sequence

from .builtins import ERROR_COMPONENT_TYPE, register_builtin_components
from .components import ComponentImpl, NotFoundComponent, as_component_impl
from .models import ComponentConfig

logger = logging.getLogger(__name__)


def missing_partial_config(name: str) -> ComponentConfig:
    """Config rendered in place of a partial that was never registered."""
    return ComponentConfig(
        component_type=ERROR_COMPONENT_TYPE,
        props={"message": f"I could not find the partial '{name}'"},
    )


class ComponentRegistry:
    """Process-wide lookup tables for components and partials.

    Registration is insert-or-replace. Lookups never raise: unknown component
    types resolve to a ``NotFoundComponent`` and unknown partials to an
    ``ErrorComponent`` config naming the missing partial.
    """

    def __init__(self, *, parent: "ComponentRegistry | None" = None) -> None:
        self._components: dict[str, ComponentImpl] = {}
        self._partials: dict[str, ComponentConfig] = {}
        self._parent = parent

    def register_component(
        self,
        type_name: str,
        impl: Any,
        *,
        required_api_endpoints: Sequence[str] = (),
    ) -> ComponentImpl:
        component = as_component_impl(type_name, impl, required_api_endpoints=required_api_endpoints)
        if type_name in self._components:
            logger.debug("Replacing registered component '%s'.", type_name)
        self._components[type_name] = component
        return component

    def unregister_component(self, type_name: str) -> None:
        self._components.pop(type_name, None)

    def register_partial(self, name: str, config: ComponentConfig | Mapping[str, Any]) -> ComponentConfig:
        partial = ComponentConfig.parse(config)
        if name in self._partials:
            logger.debug("Replacing registered partial '%s'.", name)
        self._partials[name] = partial
        return partial

    def unregister_partial(self, name: str) -> None:
        self._partials.pop(name, None)

    def register_partials(self, partials: Mapping[str, ComponentConfig | Mapping[str, Any]]) -> None:
        for name, config in partials.items():
            self.register_partial(name, config)

    def has_component(self, type_name: str) -> bool:
        if type_name in self._components:
            return True
        return self._parent is not None and self._parent.has_component(type_name)

    def has_partial(self, name: str) -> bool:
        if name in self._partials:
            return True
        return self._parent is not None and self._parent.has_partial(name)

    def lookup_component(self, type_name: str) -> ComponentImpl:
        component = self._find_component(type_name)
        if component is None:
            logger.warning("Component type '%s' is not registered.", type_name)
            return NotFoundComponent(name=type_name)
        return component

    def lookup_partial(self, name: str) -> ComponentConfig:
        partial = self._find_partial(name)
        if partial is None:
            logger.warning("Partial '%s' is not registered.", name)
            return missing_partial_config(name)
        return partial

    def component_types(self) -> list[str]:
        names = set(self._components)
        if self._parent is not None:
            names.update(self._parent.component_types())
        return sorted(names)

    def partial_names(self) -> list[str]:
        names = set(self._partials)
        if self._parent is not None:
            names.update(self._parent.partial_names())
        return sorted(names)

    def overlay(self, *, partials: Mapping[str, Any] | None = None) -> "ComponentRegistry":
        """Return a child registry layered over this one.

        Entries registered on the child shadow the parent; the parent is never
        modified, so a render can apply theme partials without touching shared
        state.
        """
        child = ComponentRegistry(parent=self)
        if partials:
            child.register_partials(partials)
        return child

    def clear(self) -> None:
        self._components.clear()
        self._partials.clear()

    def _find_component(self, type_name: str) -> ComponentImpl | None:
        component = self._components.get(type_name)
        if component is None and self._parent is not None:
            return self._parent._find_component(type_name)
        return component

    def _find_partial(self, name: str) -> ComponentConfig | None:
        partial = self._partials.get(name)
        if partial is None and self._parent is not None:
            return self._parent._find_partial(name)
        return partial


def create_registry(*, include_builtins: bool = True) -> ComponentRegistry:
    registry = ComponentRegistry()
    if include_builtins:
        register_builtin_components(registry)
    return registry


default_registry = create_registry()


def register_component(type_name: str, impl: Any, *, required_api_endpoints: Iterable[str] = ()) -> ComponentImpl:
    """Register ``impl`` under ``type_name`` on the default registry."""
    return default_registry.register_component(
        type_name, impl, required_api_endpoints=tuple(required_api_endpoints)
    )


def register_partial(name: str, config: ComponentConfig | Mapping[str, Any]) -> ComponentConfig:
    """Register a partial config on the default registry."""
    return default_registry.register_partial(name, config)
