"""API data wrapper used for components that declare required endpoints."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Mapping, Protocol, Sequence

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

API_DATA_PROP = "api_data"


class ApiDataWrapper(Protocol):
    def wrap(
        self,
        props: Mapping[str, Any],
        context: Mapping[str, Any],
        required_endpoints: Sequence[str],
        component_type: str,
    ) -> Mapping[str, Any]:
        ...


class ApiDataStore:
    """In-memory endpoint responses injected into component props.

    Wrapped props gain an ``api_data`` mapping of endpoint to response (``None``
    when the store has no response). Endpoints requested during a build are
    remembered so the data can be shipped alongside the rendered page.
    """

    def __init__(self, responses: Mapping[str, Any] | None = None) -> None:
        self._responses: dict[str, Any] = dict(responses or {})
        self._requested: dict[str, Any] = {}

    @classmethod
    def from_file(cls, path: Path) -> "ApiDataStore":
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise ConfigurationError(f"Failed to load API data from {path}: {exc}") from exc
        if not isinstance(data, dict):
            raise ConfigurationError(f"API data file {path} must contain an object keyed by endpoint.")
        return cls(data)

    def set_response(self, endpoint: str, data: Any) -> None:
        self._responses[endpoint] = data

    def wrap(
        self,
        props: Mapping[str, Any],
        context: Mapping[str, Any],
        required_endpoints: Sequence[str],
        component_type: str,
    ) -> dict[str, Any]:
        api_data = dict(props.get(API_DATA_PROP) or {})
        for endpoint in required_endpoints:
            if endpoint not in self._responses:
                logger.debug("No API data for endpoint '%s' requested by %s.", endpoint, component_type)
            value = self._responses.get(endpoint)
            api_data.setdefault(endpoint, value)
            self._requested[endpoint] = value
        return {**props, API_DATA_PROP: api_data}

    def get_api(self) -> dict[str, Any]:
        """Endpoints requested so far with the data that was supplied for them."""
        return dict(self._requested)
