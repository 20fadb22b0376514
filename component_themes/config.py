from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator

CONFIG_FILENAME = "component-themes.yml"


class Config(BaseModel):
    project_name: str = Field(default="Component Themes Project")
    themes_dir: Path | None = Field(
        default=None,
        description="Directory holding one folder per theme, each with a theme.json manifest.",
    )
    active_theme: str = Field(default="default")
    fallback_theme: str = Field(
        default="default",
        description="Theme merged underneath the active theme; 'default' is bundled with the package.",
    )
    output_dir: Path = Field(default=Path("site"))
    component_modules: list[str] = Field(
        default_factory=list,
        description="Python modules imported before rendering so they can register components.",
    )
    api_data_path: Path | None = Field(
        default=None,
        description="Optional JSON file mapping API endpoints to response payloads.",
    )

    @field_validator("output_dir", mode="before")
    def _ensure_path(cls, value: Any) -> Path:
        return Path(value)

    @field_validator("themes_dir", "api_data_path", mode="before")
    def _ensure_optional_path(cls, value: Any) -> Path | None:
        if value is None or value == "":
            return None
        return Path(value)

    @field_validator("component_modules", mode="before")
    def _ensure_module_list(cls, value: Any) -> list[str]:
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        return list(value)


def load_config(path: str | Path) -> Config:
    """Load configuration and resolve relative paths based on the config location.

    The ``path`` argument may point to a file (e.g., ``/site/component-themes.yml``)
    or a directory containing that file. All relative paths inside the
    configuration are interpreted relative to the directory holding the config file.
    """
    candidate = Path(path)
    data: dict[str, Any] = {}
    base_dir: Path
    if candidate.is_dir():
        # A project directory without a config file runs with defaults.
        config_file = candidate / CONFIG_FILENAME
        if config_file.exists():
            with config_file.open("r", encoding="utf-8") as handle:
                data = yaml.safe_load(handle) or {}
        base_dir = candidate.resolve()
    else:
        if not candidate.exists():
            raise FileNotFoundError(candidate)
        with candidate.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle) or {}
        base_dir = candidate.parent.resolve()

    if not isinstance(data, dict):
        raise ValueError(f"Configuration {candidate} must contain a mapping at the top level.")

    cfg = Config(**data)

    def _abs_required(value: Path) -> Path:
        return value if value.is_absolute() else (base_dir / value).resolve()

    def _abs_optional(value: Path | None) -> Path | None:
        if value is None:
            return None
        return _abs_required(value)

    cfg.output_dir = _abs_required(cfg.output_dir)
    cfg.themes_dir = _abs_optional(cfg.themes_dir)
    cfg.api_data_path = _abs_optional(cfg.api_data_path)
    return cfg
