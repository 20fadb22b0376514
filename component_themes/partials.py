"""Substitute partial references with the configs they name."""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

from .errors import PartialCycleError
from .models import ComponentConfig

if TYPE_CHECKING:
    from .registry import ComponentRegistry


def substitute_partial(
    config: ComponentConfig,
    registry: "ComponentRegistry",
    chain: Sequence[str] = (),
) -> tuple[ComponentConfig, tuple[str, ...]]:
    """Replace ``config`` while it is a partial reference.

    The whole node is replaced, so the partial's own props and children take
    over. ``chain`` lists partial names already being expanded on the current
    path; meeting one of them again raises ``PartialCycleError``.
    """
    active = list(chain)
    while config.partial is not None:
        name = config.partial
        if name in active:
            raise PartialCycleError([*active, name])
        active.append(name)
        config = registry.lookup_partial(name)
    return config, tuple(active)


def expand_partials(
    config: ComponentConfig,
    registry: "ComponentRegistry",
    chain: Sequence[str] = (),
) -> ComponentConfig:
    """Expand every partial reference in the tree rooted at ``config``."""
    expanded, active = substitute_partial(config, registry, chain)
    if not expanded.children:
        return expanded
    children = [expand_partials(child, registry, active) for child in expanded.children]
    return expanded.model_copy(update={"children": children})
