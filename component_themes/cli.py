"""CLI entrypoints for component theme rendering."""

from __future__ import annotations

import importlib
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, Any

import typer
from rich.console import Console
from rich.logging import RichHandler

from .api import ApiDataStore
from .config import CONFIG_FILENAME, Config, load_config
from .errors import ComponentThemesError, ConfigurationError
from .models import ComponentConfig
from .partials import expand_partials
from .registry import default_registry
from .render import build_tree, render
from .templates import expand_template
from .themes import Theme, build_theme_loader, load_theme_file, merge_themes

console = Console()
app = typer.Typer(help="Resolve component theme pages into rendered HTML.")

ConfigPathOption = Annotated[
    str,
    typer.Option("--config", "-c", help="Path to configuration file or project directory."),
]
PageArgument = Annotated[
    str,
    typer.Argument(..., help="Template slug, or path to a JSON page config."),
]
DataOption = Annotated[
    Path | None,
    typer.Option("--data", "-d", help="JSON file mapping component ids to prop overrides."),
]


@dataclass(slots=True)
class RenderContext:
    """Theme and collaborators prepared from the project configuration."""

    config: Config
    theme: Theme
    api: ApiDataStore


@app.callback()
def main(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show resolution diagnostics."),
    ] = False,
) -> None:
    """Configure logging for all commands."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@app.command("render")
def render_command(
    page: PageArgument,
    config_path: ConfigPathOption = CONFIG_FILENAME,
    data_path: DataOption = None,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write HTML here instead of printing it."),
    ] = None,
) -> None:
    """Render a page to HTML."""
    context = _prepare(config_path)
    page_config = _load_page(page)
    data = _load_component_data(data_path)
    try:
        html = render(context.theme, page_config, data, registry=default_registry, api=context.api)
    except ComponentThemesError as exc:
        console.print(f"[bold red]Render failed[/]: {exc}")
        raise typer.Exit(code=1) from exc

    if output is None:
        typer.echo(str(html))
        return

    target = output if output.is_absolute() else context.config.output_dir / output
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(str(html), encoding="utf-8")
    console.print(f"[bold green]Rendered[/]: {target}")


@app.command()
def tree(
    page: PageArgument,
    config_path: ConfigPathOption = CONFIG_FILENAME,
    data_path: DataOption = None,
    expand: Annotated[
        bool,
        typer.Option("--expand", help="Print the expanded config instead of the resolved node tree."),
    ] = False,
) -> None:
    """Show how a page resolves against the active theme."""
    context = _prepare(config_path)
    page_config = _load_page(page)
    try:
        if expand:
            config = expand_template(page_config, context.theme)
            registry = default_registry.overlay(partials=context.theme.get("partials") or {})
            payload: dict[str, Any] = expand_partials(config, registry).to_dict()
        else:
            data = _load_component_data(data_path)
            node = build_tree(context.theme, page_config, data, registry=default_registry, api=context.api)
            payload = node.to_dict()
    except ComponentThemesError as exc:
        console.print(f"[bold red]Resolution failed[/]: {exc}")
        raise typer.Exit(code=1) from exc
    console.print_json(data=payload, default=str)


@app.command()
def merge(
    first: Annotated[Path, typer.Argument(..., help="Base theme JSON file.")],
    second: Annotated[Path, typer.Argument(..., help="Theme JSON file whose values take precedence.")],
) -> None:
    """Merge two theme files and print the result."""
    try:
        merged = merge_themes(load_theme_file(first), load_theme_file(second))
    except ComponentThemesError as exc:
        console.print(f"[bold red]Merge failed[/]: {exc}")
        raise typer.Exit(code=1) from exc
    console.print_json(data=merged)


@app.command()
def themes(config_path: ConfigPathOption = CONFIG_FILENAME) -> None:
    """List themes available to the project."""
    config = _load(config_path)
    try:
        loader = build_theme_loader(
            themes_root=config.themes_dir,
            active_theme=config.active_theme,
            fallback_theme=config.fallback_theme,
        )
    except ComponentThemesError as exc:
        console.print(f"[bold red]Theme error[/]: {exc}")
        raise typer.Exit(code=1) from exc
    for name in loader.available_themes():
        marker = " [bold green](active)[/]" if name == config.active_theme else ""
        console.print(f"- {name}{marker}")


def _prepare(config_path: str) -> RenderContext:
    config = _load(config_path)
    try:
        _import_component_modules(config.component_modules)
        loader = build_theme_loader(
            themes_root=config.themes_dir,
            active_theme=config.active_theme,
            fallback_theme=config.fallback_theme,
        )
        api = ApiDataStore.from_file(config.api_data_path) if config.api_data_path else ApiDataStore()
    except ComponentThemesError as exc:
        console.print(f"[bold red]Setup failed[/]: {exc}")
        raise typer.Exit(code=1) from exc
    return RenderContext(config=config, theme=loader.theme, api=api)


def _import_component_modules(modules: list[str]) -> None:
    for name in modules:
        try:
            importlib.import_module(name)
        except ImportError as exc:
            raise ConfigurationError(f"Unable to import component module '{name}': {exc}") from exc


def _load_page(page: str) -> ComponentConfig:
    candidate = Path(page)
    if candidate.suffix != ".json":
        return ComponentConfig(template=page)
    try:
        data = json.loads(candidate.read_text(encoding="utf-8"))
        return ComponentConfig.parse(data)
    except (OSError, json.JSONDecodeError) as exc:
        raise typer.BadParameter(f"Cannot read page config {candidate}: {exc}") from exc
    except ComponentThemesError as exc:
        raise typer.BadParameter(str(exc)) from exc


def _load_component_data(path: Path | None) -> dict[str, Any]:
    if path is None:
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise typer.BadParameter(f"Cannot read component data {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise typer.BadParameter(f"Component data {path} must be an object keyed by component id.")
    return data


def _load(path: str) -> Config:
    try:
        return load_config(path)
    except FileNotFoundError as exc:
        raise typer.BadParameter(f"Config file not found: {path}") from exc
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc
