"""Resolve declarative component theme pages into render-ready node trees."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version as load_pkg_version
from pathlib import Path
import tomllib

from .builder import TreeBuilder, compose_props, generate_id
from .components import Component, Node, props_from_parent
from .errors import (
    ComponentThemesError,
    ConfigurationError,
    NoTemplateFoundError,
    PartialCycleError,
    TemplateCycleError,
)
from .models import ComponentConfig
from .registry import ComponentRegistry, create_registry, register_component, register_partial
from .render import ComponentThemesBuilder, build_tree, render
from .templates import resolve_template
from .themes import merge_themes

__all__ = [
    "__version__",
    "Component",
    "ComponentConfig",
    "ComponentRegistry",
    "ComponentThemesBuilder",
    "ComponentThemesError",
    "ConfigurationError",
    "NoTemplateFoundError",
    "Node",
    "PartialCycleError",
    "TemplateCycleError",
    "TreeBuilder",
    "build_tree",
    "compose_props",
    "create_registry",
    "generate_id",
    "merge_themes",
    "props_from_parent",
    "register_component",
    "register_partial",
    "render",
    "resolve_template",
]


def _read_local_project_version() -> str:
    """Read the project version from pyproject.toml when the package is uninstalled."""
    pyproject = Path(__file__).resolve().parent.parent / "pyproject.toml"
    try:
        data = tomllib.loads(pyproject.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return "0.0.0"
    return data.get("project", {}).get("version", "0.0.0")


try:
    __version__ = load_pkg_version("component-themes")
except PackageNotFoundError:
    __version__ = _read_local_project_version()
