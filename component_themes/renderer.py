"""HTML rendering backend for resolved component trees."""

from __future__ import annotations

import logging
import re
from typing import Any, Mapping

from markupsafe import Markup

from .components import (
    ClassComponent,
    FunctionComponent,
    Node,
    NotFoundComponent,
    TagComponent,
)

logger = logging.getLogger(__name__)

NOT_FOUND_TEMPLATE = "Could not find component '{}'"
RESERVED_PROPS = frozenset({"class", "className", "componentId", "child_props", "context", "children"})
ATTRIBUTE_NAME = re.compile(r"[A-Za-z_:][-A-Za-z0-9_:.]*")


def _parent_mapped_props(
    component: FunctionComponent,
    props: Mapping[str, Any],
    parent_props: Mapping[str, Any],
) -> Mapping[str, Any]:
    if component.map_parent_props is None:
        return props
    mapped = component.map_parent_props(parent_props) or {}
    return {**props, **{key: value for key, value in mapped.items() if value is not None}}


def render_tag_attributes(props: Mapping[str, Any]) -> Markup:
    """Render string props as HTML attributes.

    Keys that are not valid attribute names are skipped.
    """
    parts = []
    for key, value in props.items():
        if key in RESERVED_PROPS or not isinstance(value, str):
            continue
        if not ATTRIBUTE_NAME.fullmatch(key):
            logger.debug("Skipping prop %r: not a valid attribute name.", key)
            continue
        parts.append(Markup(' {}="{}"').format(key, value))
    return Markup("").join(parts)


class HtmlRenderer:
    """Render ``Node`` trees to HTML markup."""

    def render(self, node: Node) -> Markup:
        return self._render(node, {})

    def _render(self, node: Node, parent_props: Mapping[str, Any]) -> Markup:
        rendered = [self._render(child, node.props) for child in node.children]
        children = Markup("").join(rendered)
        component = node.component
        if isinstance(component, FunctionComponent):
            props = _parent_mapped_props(component, node.props, parent_props)
            return Markup(component.func(props, children))
        if isinstance(component, ClassComponent):
            instance = component.cls(node.props, rendered)
            return Markup(instance.render())
        if isinstance(component, TagComponent):
            return self._render_tag(component, node.props, children)
        if isinstance(component, NotFoundComponent):
            return Markup(NOT_FOUND_TEMPLATE).format(component.name)
        raise TypeError(f"Unsupported component variant: {type(component).__name__}")

    def _render_tag(self, component: TagComponent, props: Mapping[str, Any], children: Markup) -> Markup:
        return Markup('<{tag} class="{class_name}"{attributes}>{children}</{tag}>').format(
            tag=Markup(component.tag),
            class_name=props.get("className") or "",
            attributes=render_tag_attributes(props),
            children=children,
        )


def render_node(node: Node) -> Markup:
    return HtmlRenderer().render(node)
