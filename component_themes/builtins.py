"""Components registered on every registry created with built-ins."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Mapping

from jinja2 import Environment, select_autoescape
from markupsafe import Markup

from .components import props_from_parent

if TYPE_CHECKING:
    from .registry import ComponentRegistry

ERROR_COMPONENT_TYPE = "ErrorComponent"

_environment = Environment(
    autoescape=select_autoescape(default_for_string=True, default=True),
    trim_blocks=True,
    lstrip_blocks=True,
)

_TEMPLATES = {
    ERROR_COMPONENT_TYPE: _environment.from_string("<p>{{ message }}</p>"),
    "TextWidget": _environment.from_string(
        '<div class="{{ className }}">{{ text or "This is a text widget with no data!" }}</div>'
    ),
    "PostBody": _environment.from_string('<article class="{{ className }}">{{ children }}</article>'),
    "PostContent": _environment.from_string(
        '<div class="{{ className }}"><div class="PostContent__content">{{ content }}</div></div>'
    ),
    "PostDate": _environment.from_string('<span class="{{ className }}">{{ date or "No date" }}</span>'),
}

TAG_ALIASES = {
    "Row": "div",
    "Header": "header",
    "Footer": "footer",
}


def _render(name: str, props: Mapping[str, Any], children: Markup, **extra: Any) -> str:
    context = {**props, "children": children, **extra}
    return _TEMPLATES[name].render(context)


def error_component(props: Mapping[str, Any], children: Markup) -> str:
    return _render(ERROR_COMPONENT_TYPE, props, children)


def text_widget(props: Mapping[str, Any], children: Markup) -> str:
    """A block of text."""
    return _render("TextWidget", props, children)


def post_body(props: Mapping[str, Any], children: Markup) -> str:
    """Container that hands its post fields to descendants."""
    return _render("PostBody", props, children)


def _convert_newlines(content: str) -> Markup:
    # Post content is trusted HTML authored in the CMS.
    return Markup(content.replace("\n", "<br />"))


@props_from_parent(lambda parent: {"content": parent.get("content")})
def post_content(props: Mapping[str, Any], children: Markup) -> str:
    """The content of a post, rendered as html. Use inside a PostBody."""
    content = props.get("content") or "No content"
    return _render("PostContent", props, children, content=_convert_newlines(str(content)))


@props_from_parent(lambda parent: {"date": parent.get("date")})
def post_date(props: Mapping[str, Any], children: Markup) -> str:
    """The date for a post. Use inside a PostBody."""
    return _render("PostDate", props, children)


def register_builtin_components(registry: "ComponentRegistry") -> None:
    registry.register_component(ERROR_COMPONENT_TYPE, error_component)
    registry.register_component("TextWidget", text_widget)
    registry.register_component("PostBody", post_body)
    registry.register_component("PostContent", post_content)
    registry.register_component("PostDate", post_date)
    for type_name, tag in TAG_ALIASES.items():
        registry.register_component(type_name, tag)
