"""Registry of recognized upstream error shapes.

Each upstream system reports failures in its own nested format. This module
declares one ErrorShape per format:
- SAP: OData error nested under a gateway wrapper
- SF: Salesforce/Apex error list
- RAML: RAML-defined API error
- GATEWAY: any other ``errorMessage`` wrapper (loose)

Shapes overlap structurally, so the registry order is the tie-break: the
first shape whose requirements hold wins. The ``generic`` catch-all sits
outside the ordered list and is consulted only after every shape fails.

Adding a new upstream system means adding a shape here and nothing else.
"""

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from errorlens.classification.paths import Path, parse_path, read_path


class ErrorType(str, Enum):
    """Taxonomy of classified upstream errors."""

    RAML = "RAML_ERROR"
    SAP = "SAP_ERROR"
    SF = "SF_ERROR"
    GATEWAY = "GATEWAY_ERROR"
    UNKNOWN = "UNKNOWN_ERROR"


NO_DETAILS = "No additional details available"
UNKNOWN_MESSAGE = "Unknown error occurred"


@dataclass(frozen=True)
class Requirement:
    """A path that must resolve to a value of ``kind``.

    Attributes:
        path: Parsed path segments.
        kind: One of "text" (non-blank str), "mapping" or "list".
    """

    path: Path
    kind: str = "text"

    def holds(self, value: Any) -> bool:
        found = read_path(value, self.path)
        if self.kind == "text":
            return isinstance(found, str) and bool(found.strip())
        if self.kind == "mapping":
            return isinstance(found, Mapping)
        if self.kind == "list":
            return isinstance(found, Sequence) and not isinstance(found, (str, bytes))
        return False


@dataclass(frozen=True)
class FieldRule:
    """Ordered candidate paths for one extracted field plus its fallback."""

    paths: tuple[Path, ...]
    fallback: str


@dataclass(frozen=True)
class ErrorShape:
    """Named structural pattern plus extraction rules for one upstream format.

    Attributes:
        id: Unique shape identifier, also accepted as a hint.
        error_type: Classification reported for payloads of this shape.
        requires: Requirements that must all hold.
        any_of: Alternatives of which at least one must hold (if given).
        message: Rule for the human-readable message.
        code: Rule for the machine error code.
        details: Rule for supplementary details.
        source: Rule for the originating system label.
    """

    id: str
    error_type: ErrorType
    requires: tuple[Requirement, ...]
    message: FieldRule
    code: FieldRule
    details: FieldRule
    source: FieldRule
    any_of: tuple[Requirement, ...] = field(default=())

    @property
    def source_label(self) -> str:
        return self.source.fallback

    def matches(self, value: Any) -> bool:
        """Return True when ``value`` satisfies this shape's structural test.

        Extra, unrelated fields never prevent a match.
        """
        if not self.requires and not self.any_of:
            return False
        if not all(req.holds(value) for req in self.requires):
            return False
        if self.any_of:
            return any(req.holds(value) for req in self.any_of)
        return True


def require(dotted: str, kind: str = "text") -> Requirement:
    return Requirement(parse_path(dotted), kind)


def rule(*dotted: str, fallback: str) -> FieldRule:
    return FieldRule(tuple(parse_path(p) for p in dotted), fallback)


_SAP_ERROR = "errorMessage.error.message.error"
_SF_ERROR = "errorMessage.error[0]"
_RAML_ERROR = "errorMessage.error"

SAP_SHAPE = ErrorShape(
    id="SAP",
    error_type=ErrorType.SAP,
    requires=(require(f"{_SAP_ERROR}.message.value"),),
    message=rule(f"{_SAP_ERROR}.message.value", fallback="SAP error"),
    # SAP_ERROR doubles as the sentinel code mapped to 502
    code=rule(f"{_SAP_ERROR}.code", fallback="SAP_ERROR"),
    details=rule(
        f"{_SAP_ERROR}.innererror.errordetails[0].message",
        f"{_SAP_ERROR}.innererror.transactionid",
        fallback=NO_DETAILS,
    ),
    source=rule(
        f"{_SAP_ERROR}.innererror.application.service_id",
        fallback="SAP",
    ),
)

SF_SHAPE = ErrorShape(
    id="SF",
    error_type=ErrorType.SF,
    requires=(
        require("errorMessage.error", "list"),
        require(f"{_SF_ERROR}.message"),
        require(f"{_SF_ERROR}.errorCode"),
    ),
    message=rule(f"{_SF_ERROR}.message", fallback="Salesforce error"),
    code=rule(f"{_SF_ERROR}.errorCode", fallback="SF_ERROR"),
    details=rule(f"{_SF_ERROR}.fields[0]", fallback=NO_DETAILS),
    source=rule(fallback="Salesforce"),
)

RAML_SHAPE = ErrorShape(
    id="RAML",
    error_type=ErrorType.RAML,
    requires=(require(f"{_RAML_ERROR}.errorDescription"),),
    message=rule(f"{_RAML_ERROR}.errorDescription", fallback="RAML error"),
    code=rule(f"{_RAML_ERROR}.errorType", fallback="RAML_ERROR"),
    details=rule(f"{_RAML_ERROR}.message", fallback=NO_DETAILS),
    source=rule(f"{_RAML_ERROR}.source", fallback="RAML API"),
)

# Loose: also matches SAP/SF/RAML payloads missing their deepest field.
GATEWAY_SHAPE = ErrorShape(
    id="GATEWAY",
    error_type=ErrorType.GATEWAY,
    requires=(require("errorMessage", "mapping"),),
    message=rule(
        "errorMessage.error.message",
        "errorMessage.error.description",
        "errorMessage.error",
        "errorMessage.message",
        "errorMessage.description",
        fallback="API Gateway error",
    ),
    code=rule(
        "errorMessage.error.errorType",
        "errorMessage.error.code",
        "errorMessage.errorType",
        "errorMessage.code",
        fallback="GATEWAY_ERROR",
    ),
    details=rule(
        "errorMessage.error.details",
        "errorMessage.details",
        fallback=NO_DETAILS,
    ),
    source=rule("errorMessage.source", fallback="API Gateway"),
)

GENERIC_SHAPE = ErrorShape(
    id="generic",
    error_type=ErrorType.UNKNOWN,
    requires=(),
    any_of=(
        require(""),
        require("message"),
        require("error"),
        require("description"),
    ),
    message=rule("", "message", "error", "description", fallback=UNKNOWN_MESSAGE),
    code=rule(
        "errorCode",
        "code",
        "errorType",
        "errorType.identifier",
        fallback="UNKNOWN_ERROR",
    ),
    details=rule("detailedDescription", "details", fallback=NO_DETAILS),
    source=rule("source", "errorType.namespace", fallback="Unknown"),
)

# Never matched structurally; supplies the fallbacks for unrecognized input.
UNKNOWN_SHAPE = ErrorShape(
    id="unknown",
    error_type=ErrorType.UNKNOWN,
    requires=(),
    message=rule(fallback=UNKNOWN_MESSAGE),
    code=rule(fallback="UNKNOWN_ERROR"),
    details=rule(fallback=NO_DETAILS),
    source=rule(fallback="Unknown"),
)


class ShapeRegistry:
    """Ordered, immutable collection of error shapes."""

    def __init__(self, shapes: Iterable[ErrorShape], generic: ErrorShape = GENERIC_SHAPE) -> None:
        self._shapes = tuple(shapes)
        self._generic = generic
        self._by_key: dict[str, ErrorShape] = {}
        self._position: dict[str, int] = {}

        # Ids are compared upper-cased, the way hints are looked up.
        for position, shape in enumerate((*self._shapes, generic)):
            key = shape.id.upper()
            if key in self._by_key or key == UNKNOWN_SHAPE.id.upper():
                raise ValueError(f"Duplicate or reserved shape id: {shape.id}")
            self._position[key] = position
            self._by_key[key] = shape
        # Error type names are aliases; the first shape registered for a type owns it.
        for shape in (*self._shapes, generic):
            self._by_key.setdefault(shape.error_type.value, shape)

    @property
    def generic(self) -> ErrorShape:
        return self._generic

    def shapes_in_priority_order(self) -> tuple[ErrorShape, ...]:
        """Return shapes most specific first; the matcher's tie-break order."""
        return self._shapes

    def ids(self) -> list[str]:
        return [shape.id for shape in self._shapes] + [self._generic.id]

    def get(self, hint: Any) -> ErrorShape | None:
        """Look up a shape by id or error type name, case-insensitively.

        Args:
            hint: Shape id such as "SAP", or type name such as "SAP_ERROR".

        Returns:
            The registered shape, or None for anything unrecognized.
        """
        if not isinstance(hint, str):
            return None
        return self._by_key.get(hint.strip().upper())

    def preceding(self, shape: ErrorShape) -> tuple[ErrorShape, ...]:
        """Shapes that take precedence over ``shape`` when both match."""
        position = self._position.get(shape.id.upper())
        if position is None:
            return self._shapes
        return self._shapes[:position]


DEFAULT_REGISTRY = ShapeRegistry([SAP_SHAPE, SF_SHAPE, RAML_SHAPE, GATEWAY_SHAPE])
