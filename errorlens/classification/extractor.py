"""Field extraction from classified error payloads.

Two entry points:
- extract_auto: classify first, then extract with the winning shape.
- extract_by_hint: start from a caller-supplied shape id.

A hint is only honoured when the payload carries the hinted shape's
required fields and no higher-priority shape also matches. Otherwise the
hint is stale or wrong and extraction falls back to extract_auto, so both
paths always agree.

A hint does not skip detection. Even a correct hint runs the hinted
shape's test plus the test of every shape ahead of it, so a hint saves
work only for shapes near the front of the registry (SAP costs one test).
Speed is traded for agreement with auto-detect.
"""

import logging
from dataclasses import asdict, dataclass
from typing import Any

from errorlens.classification.matcher import classify
from errorlens.classification.paths import read_text
from errorlens.classification.registry import (
    DEFAULT_REGISTRY,
    ErrorShape,
    FieldRule,
    ShapeRegistry,
    UNKNOWN_SHAPE,
)

logger = logging.getLogger(__name__)

AUTO = "auto"


@dataclass(frozen=True)
class ExtractedInfo:
    """Normalized fields pulled from an error payload. No field is ever empty."""

    message: str
    code: str
    details: str
    source: str
    type: str

    def to_dict(self) -> dict[str, str]:
        return asdict(self)


def _apply_rule(value: Any, field_rule: FieldRule) -> str:
    for path in field_rule.paths:
        text = read_text(value, path)
        if text is not None:
            return text
    return field_rule.fallback


def extract_with_shape(value: Any, shape: ErrorShape) -> ExtractedInfo:
    """Apply ``shape``'s extraction rules to ``value`` without testing it."""
    return ExtractedInfo(
        message=_apply_rule(value, shape.message),
        code=_apply_rule(value, shape.code),
        details=_apply_rule(value, shape.details),
        source=_apply_rule(value, shape.source),
        type=shape.error_type.value,
    )


def extract_auto(value: Any, registry: ShapeRegistry | None = None) -> ExtractedInfo:
    """Classify ``value`` and extract its fields.

    Args:
        value: Raw payload of any type.
        registry: Registry to classify against.

    Returns:
        ExtractedInfo; unrecognized payloads get the unknown fallbacks.
    """
    match = classify(value, registry)
    return extract_with_shape(value, match.matched_shape or UNKNOWN_SHAPE)


def extract_by_hint(
    value: Any,
    hint: str | None,
    registry: ShapeRegistry | None = None,
) -> ExtractedInfo:
    """Extract using the shape named by ``hint``, falling back to auto-detect.

    The hinted shape's test runs first, then the tests of every shape
    ahead of it in the registry.

    Args:
        value: Raw payload of any type.
        hint: Shape id or error type name; None or "auto" means auto-detect.
        registry: Registry the hint is looked up in.

    Returns:
        ExtractedInfo identical to extract_auto(value) whenever the hint
        does not describe the payload.
    """
    registry = registry or DEFAULT_REGISTRY
    if hint is None or (isinstance(hint, str) and hint.strip().lower() == AUTO):
        return extract_auto(value, registry)

    shape = registry.get(hint)
    if shape is None:
        logger.debug("Unregistered hint %r, auto-detecting", hint)
        return extract_auto(value, registry)

    if not shape.matches(value):
        logger.debug("Payload does not conform to hinted shape %s, auto-detecting", shape.id)
        return extract_auto(value, registry)

    # Overlapping shapes: a higher-priority match means the hint is wrong.
    for earlier in registry.preceding(shape):
        if earlier.matches(value):
            logger.debug("Hint %s preempted by shape %s, auto-detecting", shape.id, earlier.id)
            return extract_auto(value, registry)

    return extract_with_shape(value, shape)
