"""Safe nested-path reading over loosely structured payloads.

Paths are written in dotted form with optional list indexes, e.g.
``errorMessage.error[0].message``. Reading a path never raises: a missing
key, an out-of-range index or an intermediate value of the wrong type all
produce the ``ABSENT`` sentinel.
"""

import re
from collections.abc import Mapping, Sequence
from typing import Any

Path = tuple[str | int, ...]

ROOT: Path = ()

_SEGMENT_PATTERN = re.compile(r"([^.\[\]]+)|\[(\d+)\]")


class _Absent:
    """Marker for a path that did not resolve."""

    _instance = None

    def __new__(cls) -> "_Absent":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "ABSENT"

    def __bool__(self) -> bool:
        return False


ABSENT = _Absent()


def parse_path(dotted: str) -> Path:
    """Parse a dotted path string into key/index segments.

    Args:
        dotted: Path such as ``"errorMessage.error[0].errorCode"``.
            An empty string is the root path.

    Returns:
        Tuple of segments; strings are mapping keys, ints are list indexes.
    """
    segments: list[str | int] = []
    for key, index in _SEGMENT_PATTERN.findall(dotted):
        segments.append(int(index) if index else key)
    return tuple(segments)


def read_path(value: Any, path: Path) -> Any:
    """Walk ``path`` through ``value`` without raising.

    Args:
        value: Arbitrary payload (mapping, sequence, scalar or None).
        path: Parsed path segments.

    Returns:
        The value at the path, or ABSENT if any segment fails to resolve.
    """
    node = value
    for segment in path:
        try:
            if isinstance(segment, int):
                if not _is_list_like(node) or segment >= len(node):
                    return ABSENT
                node = node[segment]
            else:
                if not isinstance(node, Mapping) or segment not in node:
                    return ABSENT
                node = node[segment]
        except (KeyError, IndexError, TypeError):
            return ABSENT
    return node


def read_text(value: Any, path: Path) -> str | None:
    """Read a non-blank string at ``path``, or None."""
    found = read_path(value, path)
    if isinstance(found, str) and found.strip():
        return found
    return None


def _is_list_like(node: Any) -> bool:
    return isinstance(node, Sequence) and not isinstance(node, (str, bytes, bytearray))
