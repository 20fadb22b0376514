"""Component implementation variants and the resolved ``Node`` tree."""

from __future__ import annotations

import inspect
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, ClassVar, Iterator, Mapping, Sequence

from markupsafe import Markup

RenderFunction = Callable[[Mapping[str, Any], Markup], str]
PropsMapper = Callable[[Mapping[str, Any]], Mapping[str, Any]]

PARENT_MAPPER_ATTRIBUTE = "__ct_map_parent_props__"


class ComponentKind(Enum):
    """Closed set of component implementation variants."""

    FUNCTION = "function"
    CLASS = "class"
    TAG = "tag"
    NOT_FOUND = "not_found"


class Component:
    """Base class for stateful components.

    Subclasses implement ``render`` and may declare ``required_api_endpoints``
    to have their props routed through the API data wrapper before rendering.
    """

    required_api_endpoints: ClassVar[Sequence[str]] = ()

    def __init__(self, props: Mapping[str, Any], children: Sequence[Markup] = ()) -> None:
        self.props = props
        self.children = list(children)

    def get_prop(self, key: str, default: Any = None) -> Any:
        value = self.props.get(key)
        return default if value is None else value

    def render_children(self) -> Markup:
        return Markup("").join(self.children)

    def render(self) -> str:
        raise NotImplementedError


@dataclass(frozen=True, slots=True)
class FunctionComponent:
    """Stateless renderer called as ``func(props, children)``."""

    name: str
    func: RenderFunction
    required_api_endpoints: tuple[str, ...] = ()
    map_parent_props: PropsMapper | None = None

    @property
    def kind(self) -> ComponentKind:
        return ComponentKind.FUNCTION


@dataclass(frozen=True, slots=True)
class ClassComponent:
    """Stateful component descriptor wrapping a ``Component`` subclass."""

    name: str
    cls: type[Component]

    @property
    def kind(self) -> ComponentKind:
        return ComponentKind.CLASS

    @property
    def required_api_endpoints(self) -> tuple[str, ...]:
        return tuple(self.cls.required_api_endpoints or ())


@dataclass(frozen=True, slots=True)
class TagComponent:
    """Raw markup renderer producing a single HTML element."""

    tag: str
    required_api_endpoints: tuple[str, ...] = ()

    @property
    def name(self) -> str:
        return self.tag

    @property
    def kind(self) -> ComponentKind:
        return ComponentKind.TAG


@dataclass(frozen=True, slots=True)
class NotFoundComponent:
    """Diagnostic sentinel used when a component cannot be resolved."""

    name: str
    required_api_endpoints: tuple[str, ...] = ()

    @property
    def kind(self) -> ComponentKind:
        return ComponentKind.NOT_FOUND

    @property
    def message(self) -> str:
        return f"Could not find component '{self.name}'"


ComponentImpl = FunctionComponent | ClassComponent | TagComponent | NotFoundComponent
COMPONENT_VARIANTS = (FunctionComponent, ClassComponent, TagComponent, NotFoundComponent)


def props_from_parent(map_props: PropsMapper) -> Callable[[RenderFunction], RenderFunction]:
    """Mark a render function as reading props from its nearest ancestor node."""

    def decorator(func: RenderFunction) -> RenderFunction:
        setattr(func, PARENT_MAPPER_ATTRIBUTE, map_props)
        return func

    return decorator


def as_component_impl(
    type_name: str,
    impl: Any,
    *,
    required_api_endpoints: Sequence[str] = (),
) -> ComponentImpl:
    """Pick the implementation variant for ``impl`` at registration time."""
    endpoints = tuple(required_api_endpoints)
    if isinstance(impl, COMPONENT_VARIANTS):
        return impl
    if isinstance(impl, str):
        if not impl:
            raise TypeError(f"Tag name for component '{type_name}' must not be empty.")
        return TagComponent(tag=impl, required_api_endpoints=endpoints)
    if inspect.isclass(impl):
        if not issubclass(impl, Component):
            raise TypeError(f"Component class for '{type_name}' must subclass Component, got {impl.__name__}.")
        if endpoints:
            raise TypeError(
                f"Component class for '{type_name}' declares endpoints via required_api_endpoints, not at registration."
            )
        return ClassComponent(name=type_name, cls=impl)
    if callable(impl):
        return FunctionComponent(
            name=type_name,
            func=impl,
            required_api_endpoints=endpoints,
            map_parent_props=getattr(impl, PARENT_MAPPER_ATTRIBUTE, None),
        )
    raise TypeError(f"Cannot register {impl!r} as component '{type_name}'.")


@dataclass(frozen=True, slots=True)
class Node:
    """Resolved, render-ready unit of a page tree."""

    component: ComponentImpl
    props: Mapping[str, Any] = field(default_factory=dict)
    children: tuple["Node", ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.props, MappingProxyType):
            object.__setattr__(self, "props", MappingProxyType(dict(self.props)))
        if not isinstance(self.children, tuple):
            object.__setattr__(self, "children", tuple(self.children))

    @property
    def kind(self) -> ComponentKind:
        return self.component.kind

    @property
    def is_not_found(self) -> bool:
        return self.component.kind is ComponentKind.NOT_FOUND

    @property
    def component_id(self) -> str | None:
        return self.props.get("componentId")

    @property
    def class_name(self) -> str | None:
        return self.props.get("className")

    def walk(self) -> Iterator["Node"]:
        """Yield this node and its descendants depth-first."""
        yield self
        for child in self.children:
            yield from child.walk()

    def to_dict(self) -> dict[str, Any]:
        props = {key: value for key, value in self.props.items() if key != "child_props"}
        return {
            "component": self.component.name,
            "kind": self.kind.value,
            "props": props,
            "children": [child.to_dict() for child in self.children],
        }
