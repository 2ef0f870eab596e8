"""Error taxonomy for AI provider calls and the retry classifier."""

from __future__ import annotations

import enum
from typing import Optional

NON_RETRYABLE_STATUS_CODES = frozenset({400, 401, 403, 429, 529})

# Only consulted for errors that carry no structured kind/status.
NON_RETRYABLE_PATTERNS = (
    "400",
    "401",
    "403",
    "429",
    "529",
    "RESOURCE_EXHAUSTED",
    "quota",
    "Invalid API key",
    "not configured",
)

# Provider bodies that mean "stop asking" whatever the status code says.
TERMINAL_BODY_PATTERNS = ("RESOURCE_EXHAUSTED", "quota", "Invalid API key")

QUOTA_PATTERNS = ("429", "quota", "RESOURCE_EXHAUSTED", "rate limit")


class ErrorKind(str, enum.Enum):
    DISABLED = "disabled"
    UNCONFIGURED = "unconfigured"
    TIMEOUT = "timeout"
    TRANSPORT = "transport"
    HTTP_ERROR = "http_error"
    EMPTY_RESPONSE = "empty_response"
    PARSE_ERROR = "parse_error"
    NON_RETRYABLE = "non_retryable"
    EXHAUSTED_RETRIES = "exhausted_retries"
    UNKNOWN = "unknown"


RETRYABLE_KINDS = frozenset(
    {ErrorKind.TIMEOUT, ErrorKind.TRANSPORT, ErrorKind.EMPTY_RESPONSE, ErrorKind.PARSE_ERROR}
)


class ProviderError(RuntimeError):
    """Raised inside a single provider attempt."""

    def __init__(self, message: str, kind: ErrorKind = ErrorKind.UNKNOWN, status_code: Optional[int] = None):
        super().__init__(message)
        self.kind = kind
        self.status_code = status_code

    @property
    def message(self) -> str:
        return str(self)


def _contains_any(text: str, patterns) -> bool:
    lowered = text.lower()
    return any(pattern.lower() in lowered for pattern in patterns)


def is_non_retryable(error: ProviderError) -> bool:
    """Decide on kind and status first; free text is the last resort."""
    if error.kind == ErrorKind.UNCONFIGURED:
        return True
    if error.kind == ErrorKind.HTTP_ERROR:
        if error.status_code in NON_RETRYABLE_STATUS_CODES:
            return True
        return _contains_any(error.message, TERMINAL_BODY_PATTERNS)
    if error.kind in RETRYABLE_KINDS:
        return False
    return _contains_any(error.message, NON_RETRYABLE_PATTERNS)


def is_quota_error(message: Optional[str]) -> bool:
    if not message:
        return False
    return _contains_any(message, QUOTA_PATTERNS)
