"""Secret redaction for raw upstream payloads and extracted messages.

Upstream error payloads routinely echo request headers, session ids and
credentials. Anything leaving the engine through logs or HTTP responses
goes through these helpers first. Sensitive keys are matched as
case-insensitive substrings.
"""

import re
from collections.abc import Mapping
from typing import Any

REDACTED = "***REDACTED***"

SENSITIVE_KEY_PATTERNS = frozenset({
    "secret", "token", "authorization", "api_key", "apikey", "password",
    "credential", "client_id", "client_secret", "session_id", "sessionid",
    "cookie",
})

# Keys whose whole value is hidden, whatever its type
_OPAQUE_KEYS = frozenset({"headers", "credentials"})

_KEYWORDS = "|".join(sorted(SENSITIVE_KEY_PATTERNS, key=len, reverse=True))
_INLINE_SECRET = re.compile(
    r"(?i)"
    r"Authorization\s*:\s*Bearer\s+\S+"
    r'|"(?:' + _KEYWORDS + r')"\s*:\s*"[^"]*"'
    r'|(?:' + _KEYWORDS + r')\s*[=:]\s*"[^"]*"'
    r"|(?:" + _KEYWORDS + r")\s*[=:]\s*\S+"
)


def is_sensitive_key(key: Any) -> bool:
    if not isinstance(key, str):
        return False
    lowered = key.lower()
    return any(pattern in lowered for pattern in SENSITIVE_KEY_PATTERNS)


def redact_payload(value: Any) -> Any:
    """Return a redacted copy of ``value``; the input is never mutated.

    Mappings are rebuilt as dicts, lists and tuples as lists, strings are
    scrubbed of inline secrets, other scalars pass through.
    """
    if isinstance(value, Mapping):
        result = {}
        for key, item in value.items():
            if (isinstance(key, str) and key.lower() in _OPAQUE_KEYS) or is_sensitive_key(key):
                result[key] = REDACTED
            else:
                result[key] = redact_payload(item)
        return result
    if isinstance(value, (list, tuple)):
        return [redact_payload(item) for item in value]
    if isinstance(value, str):
        return redact_text(value)
    return value


def redact_text(text: str | None, max_length: int = 2000) -> str | None:
    """Scrub inline secrets from free text and cap its length.

    Args:
        text: Message to scrub (None passes through).
        max_length: Maximum length of the result.

    Returns:
        Scrubbed, possibly truncated text, or None.
    """
    if text is None:
        return None
    scrubbed = _INLINE_SECRET.sub(REDACTED, text)
    if len(scrubbed) > max_length:
        scrubbed = scrubbed[:max_length - 3] + "..."
    return scrubbed
