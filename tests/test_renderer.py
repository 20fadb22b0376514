from __future__ import annotations

from typing import Any, Mapping

import pytest
from markupsafe import Markup

from component_themes.builder import TreeBuilder
from component_themes.components import Component, Node, props_from_parent
from component_themes.registry import create_registry
from component_themes.renderer import HtmlRenderer, render_tag_attributes


class Card(Component):
    def render(self) -> str:
        return Markup('<section class="{}"><h2>{}</h2>{}</section>').format(
            self.get_prop("className"),
            self.get_prop("title", "Untitled"),
            self.render_children(),
        )


def _render(page: Mapping[str, Any], data: Mapping[str, Any] | None = None) -> str:
    registry = create_registry()
    registry.register_component("Card", Card)
    node = TreeBuilder(registry).build(page, data)
    return HtmlRenderer().render(node)


def test_tag_component_renders_children_and_string_attributes() -> None:
    html = _render(
        {
            "id": "layout",
            "componentType": "Row",
            "props": {"role": "main", "count": 3},
            "children": [{"id": "t", "componentType": "TextWidget", "props": {"text": "hi"}}],
        }
    )

    assert html == '<div class="Row layout" role="main"><div class="TextWidget t">hi</div></div>'


def test_tag_attributes_are_escaped_and_reserved_props_skipped() -> None:
    attributes = render_tag_attributes(
        {"title": 'say "hi" <now>', "className": "x", "componentId": "y", "child_props": {}}
    )

    assert attributes == ' title="say &#34;hi&#34; &lt;now&gt;"'


def test_component_data_keys_cannot_inject_attributes() -> None:
    html = _render(
        {"id": "hero", "componentType": "Row"},
        {"hero": {"x onmouseover=alert(1) y": "v", "data-kind": "banner"}},
    )

    assert html == '<div class="Row hero" data-kind="banner"></div>'
    assert "onmouseover" not in html


def test_class_prop_does_not_duplicate_class_attribute() -> None:
    html = _render({"id": "hero", "componentType": "Row", "props": {"class": "extra"}})

    assert html.count("class=") == 1
    assert html == '<div class="Row hero"></div>'


def test_tag_attribute_names_are_validated() -> None:
    attributes = render_tag_attributes(
        {"aria-label": "ok", "xml:lang": "en", "1bad": "x", "bad\n": "x", "a b": "x", "": "x"}
    )

    assert attributes == ' aria-label="ok" xml:lang="en"'


def test_text_widget_escapes_text() -> None:
    html = _render({"id": "t", "componentType": "TextWidget", "props": {"text": "<b>bold</b>"}})

    assert "&lt;b&gt;bold&lt;/b&gt;" in html


def test_text_widget_placeholder_when_text_missing() -> None:
    html = _render({"id": "t", "componentType": "TextWidget"})

    assert "This is a text widget with no data!" in html


def test_class_component_receives_rendered_children() -> None:
    html = _render(
        {
            "id": "card",
            "componentType": "Card",
            "props": {"title": "News"},
            "children": [{"id": "body", "componentType": "TextWidget", "props": {"text": "story"}}],
        }
    )

    assert html == (
        '<section class="Card card"><h2>News</h2><div class="TextWidget body">story</div></section>'
    )


def test_post_components_read_fields_from_post_body() -> None:
    page = {
        "id": "postBody",
        "componentType": "PostBody",
        "children": [
            {"id": "postDate", "componentType": "PostDate"},
            {"id": "postContent", "componentType": "PostContent"},
        ],
    }
    data = {"postBody": {"date": "2024-01-01", "content": "Hello\nWorld"}}

    html = _render(page, data)

    assert '<span class="PostDate postDate">2024-01-01</span>' in html
    assert '<div class="PostContent__content">Hello<br />World</div>' in html
    assert html.startswith('<article class="PostBody postBody">')


def test_post_components_show_placeholders_outside_post_body() -> None:
    html = _render(
        {
            "id": "row",
            "componentType": "Row",
            "children": [
                {"id": "postDate", "componentType": "PostDate"},
                {"id": "postContent", "componentType": "PostContent"},
            ],
        }
    )

    assert "No date" in html
    assert "No content" in html


def test_custom_function_component_maps_parent_props() -> None:
    @props_from_parent(lambda parent: {"label": parent.get("title")})
    def caption(props: Mapping[str, Any], children: Markup) -> str:
        return Markup("<figcaption>{}</figcaption>").format(props.get("label"))

    registry = create_registry()
    registry.register_component("Card", Card)
    registry.register_component("Caption", caption)
    node = TreeBuilder(registry).build(
        {
            "id": "card",
            "componentType": "Card",
            "props": {"title": "Sunset"},
            "children": [{"id": "caption", "componentType": "Caption", "props": {"label": "own"}}],
        }
    )

    assert "<figcaption>Sunset</figcaption>" in HtmlRenderer().render(node)


def test_not_found_component_escapes_name() -> None:
    html = _render({"id": "x", "componentType": "<script>"})

    assert html == "Could not find component '&lt;script&gt;'"


def test_unknown_component_variant_is_rejected() -> None:
    node = Node(component=object())  # type: ignore[arg-type]

    with pytest.raises(TypeError, match="Unsupported component variant"):
        HtmlRenderer().render(node)
