from __future__ import annotations

import copy
import json
from pathlib import Path

import pytest

from component_themes.errors import ThemeError
from component_themes.themes import (
    ThemeLoader,
    build_theme_loader,
    load_default_theme,
    merge_themes,
    parse_theme,
)


@pytest.fixture
def themes() -> tuple[dict, dict]:
    first = {
        "name": "First Theme",
        "slug": "first",
        "templates": {
            "firstTemplate": {"id": "helloWorld", "componentType": "TextWidget", "props": {"text": "first text"}},
            "mergingTemplate": {"id": "toBeOverwritten", "componentType": "TextWidget"},
        },
    }
    second = {
        "name": "Second Theme",
        "partials": {},
        "templates": {
            "secondTemplate": {"id": "helloWorld", "componentType": "TextWidget", "props": {"text": "second text"}},
            "mergingTemplate": {"id": "overwriter", "componentType": "TextWidget"},
        },
    }
    return first, second


def _write_theme(root: Path, name: str, data: dict) -> None:
    theme_dir = root / name
    theme_dir.mkdir(parents=True, exist_ok=True)
    (theme_dir / "theme.json").write_text(json.dumps(data), encoding="utf-8")


def test_merge_includes_keys_of_both_themes(themes: tuple[dict, dict]) -> None:
    merged = merge_themes(*themes)

    assert set(merged) == {"name", "slug", "partials", "templates"}


def test_merge_keeps_templates_from_both_themes(themes: tuple[dict, dict]) -> None:
    merged = merge_themes(*themes)

    assert {"firstTemplate", "secondTemplate", "mergingTemplate"} <= set(merged["templates"])


def test_merge_overwrites_scalars_with_second_theme(themes: tuple[dict, dict]) -> None:
    assert merge_themes(*themes)["name"] == "Second Theme"


def test_merge_overwrites_mapping_entries_one_level_deep(themes: tuple[dict, dict]) -> None:
    merged = merge_themes(*themes)

    assert merged["templates"]["mergingTemplate"] == {"id": "overwriter", "componentType": "TextWidget"}


def test_merge_replaces_when_either_side_is_not_a_mapping() -> None:
    merged = merge_themes(
        {"styles": ["a.css"], "templates": {"home": {}}, "meta": {"a": 1}},
        {"styles": ["b.css"], "templates": "broken", "meta": {}},
    )

    assert merged["styles"] == ["b.css"]
    assert merged["templates"] == "broken"
    assert merged["meta"] == {}


def test_merge_treats_none_as_absent() -> None:
    merged = merge_themes({"name": "Base", "partials": {"a": {}}}, {"name": None, "partials": None})

    assert merged["name"] == "Base"
    assert merged["partials"] == {"a": {}}


def test_merge_does_not_mutate_inputs(themes: tuple[dict, dict]) -> None:
    first, second = themes
    before = (copy.deepcopy(first), copy.deepcopy(second))

    merge_themes(first, second)

    assert (first, second) == before


def test_parse_theme_rejects_non_mapping_templates() -> None:
    with pytest.raises(ThemeError):
        parse_theme({"templates": ["home"]})


def test_parse_theme_keeps_extra_properties_and_omits_unset() -> None:
    theme = parse_theme({"name": "X", "colors": {"primary": "#000"}})

    assert theme == {"name": "X", "colors": {"primary": "#000"}}


def test_default_theme_is_bundled() -> None:
    theme = load_default_theme()

    assert theme["slug"] == "default"
    assert {"home", "404"} <= set(theme["templates"])
    assert {"header", "footer"} <= set(theme["partials"])


def test_loader_merges_active_theme_over_fallback(tmp_path: Path) -> None:
    _write_theme(tmp_path, "dark", {"name": "Dark", "templates": {"home": {"id": "darkHome", "componentType": "Row"}}})

    loader = ThemeLoader(themes_root=tmp_path, active_theme="dark")

    theme = loader.theme
    assert theme["name"] == "Dark"
    assert theme["templates"]["home"]["id"] == "darkHome"
    assert "404" in theme["templates"]
    assert "footer" in theme["partials"]


def test_loader_falls_back_when_active_theme_missing(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    loader = ThemeLoader(themes_root=tmp_path, active_theme="ghost")

    assert loader.theme["slug"] == "default"
    assert "Falling back" in caplog.text


def test_loader_prefers_default_theme_on_disk(tmp_path: Path) -> None:
    _write_theme(tmp_path, "default", {"name": "Local Default", "templates": {}})

    loader = ThemeLoader(themes_root=tmp_path)

    assert loader.theme == {"name": "Local Default", "templates": {}}


def test_loader_lists_available_themes(tmp_path: Path) -> None:
    _write_theme(tmp_path, "dark", {"name": "Dark"})
    (tmp_path / "not-a-theme").mkdir()

    loader = ThemeLoader(themes_root=tmp_path, active_theme="dark")

    assert loader.available_themes() == ["dark", "default"]


def test_loader_requires_existing_root(tmp_path: Path) -> None:
    with pytest.raises(ThemeError):
        build_theme_loader(themes_root=tmp_path / "missing")


def test_loader_fails_when_no_theme_loads(tmp_path: Path) -> None:
    with pytest.raises(ThemeError):
        ThemeLoader(themes_root=tmp_path, active_theme="ghost", fallback_theme="phantom")


def test_loader_reports_invalid_json(tmp_path: Path) -> None:
    theme_dir = tmp_path / "broken"
    theme_dir.mkdir()
    (theme_dir / "theme.json").write_text("{not json", encoding="utf-8")

    with pytest.raises(ThemeError):
        ThemeLoader(themes_root=tmp_path, active_theme="broken")
