"""Pydantic model describing authoring-time component configs."""

from __future__ import annotations

import hashlib
import json
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import InvalidConfigError

ComponentData = Mapping[str, Mapping[str, Any]]


class ComponentConfig(BaseModel):
    """Declarative description of one node in a page tree.

    A config is either a partial reference, a template reference, or a concrete
    component description. Keys outside the known fields are preserved so that
    diagnostics and derived ids reflect exactly what the author wrote.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow", frozen=True)

    component_type: str | None = Field(default=None, alias="componentType")
    partial: str | None = Field(default=None)
    template: str | None = Field(default=None)
    id: str | None = Field(default=None)
    props: dict[str, Any] = Field(default_factory=dict)
    children: list["ComponentConfig"] = Field(default_factory=list)

    @classmethod
    def parse(cls, value: "ComponentConfig | Mapping[str, Any]") -> "ComponentConfig":
        """Accept either a config model or a JSON-like mapping."""
        if isinstance(value, ComponentConfig):
            return value
        if not isinstance(value, Mapping):
            raise InvalidConfigError(f"Component config must be an object, got {type(value).__name__}.")
        try:
            return cls.model_validate(dict(value))
        except ValidationError as exc:
            raise InvalidConfigError(f"Invalid component config: {exc}") from exc

    @property
    def is_partial_reference(self) -> bool:
        return self.partial is not None

    @property
    def is_template_reference(self) -> bool:
        return self.template is not None

    def with_id(self, component_id: str) -> "ComponentConfig":
        return self.model_copy(update={"id": component_id})

    def to_dict(self) -> dict[str, Any]:
        data = self.model_dump(by_alias=True, exclude_none=True)
        if not data.get("props"):
            data.pop("props", None)
        if self.children:
            data["children"] = [child.to_dict() for child in self.children]
        else:
            data.pop("children", None)
        return data

    def canonical_json(self) -> str:
        return json.dumps(self.to_dict(), sort_keys=True, separators=(",", ":"), ensure_ascii=False)

    def content_hash(self) -> str:
        return hashlib.md5(self.canonical_json().encode("utf-8")).hexdigest()
