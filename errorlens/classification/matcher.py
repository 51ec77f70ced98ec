"""Structural classification of raw error payloads against the shape registry."""

import logging
from dataclasses import dataclass
from typing import Any

from errorlens.classification.registry import (
    DEFAULT_REGISTRY,
    ErrorShape,
    ShapeRegistry,
    UNKNOWN_SHAPE,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MatchResult:
    """Outcome of classifying one payload.

    Attributes:
        shape_id: Id of the matched shape, or "unknown".
        matched_shape: The matched shape, or None when nothing matched.
    """

    shape_id: str
    matched_shape: ErrorShape | None

    @property
    def is_unknown(self) -> bool:
        return self.matched_shape is None


UNKNOWN_MATCH = MatchResult(shape_id=UNKNOWN_SHAPE.id, matched_shape=None)


def classify(value: Any, registry: ShapeRegistry | None = None) -> MatchResult:
    """Find the first registered shape that ``value`` structurally satisfies.

    Shapes are tried in registry priority order, then the generic catch-all.
    Never raises.

    Args:
        value: Raw payload of any type, including None.
        registry: Registry to match against (defaults to the built-in one).

    Returns:
        MatchResult for the winning shape, or UNKNOWN_MATCH.
    """
    registry = registry or DEFAULT_REGISTRY

    for shape in registry.shapes_in_priority_order():
        if shape.matches(value):
            logger.debug("Payload matched shape %s", shape.id)
            return MatchResult(shape_id=shape.id, matched_shape=shape)

    if registry.generic.matches(value):
        logger.debug("Payload matched generic catch-all")
        return MatchResult(shape_id=registry.generic.id, matched_shape=registry.generic)

    logger.debug("Payload matched no shape")
    return UNKNOWN_MATCH
