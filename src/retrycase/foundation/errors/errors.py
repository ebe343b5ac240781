"""Error codes and exception classification.

Maps arbitrary exceptions onto a small set of coarse categories so callers
can express retry conditions without enumerating exception types.
"""

from __future__ import annotations

from enum import StrEnum
from functools import lru_cache


class ErrorCode(StrEnum):
    """Coarse failure categories used for code-based retry decisions."""
    TIMEOUT = "TIMEOUT"
    NETWORK_ERROR = "NETWORK_ERROR"
    RATE_LIMITED = "RATE_LIMITED"
    CREDENTIALS_INVALID = "CREDENTIALS_INVALID"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    NOT_FOUND = "NOT_FOUND"
    PARSE_ERROR = "PARSE_ERROR"
    INVALID_ARGUMENT = "INVALID_ARGUMENT"
    INVALID_OPERATION = "INVALID_OPERATION"
    UNKNOWN = "UNKNOWN"


# Transient categories that usually succeed when repeated
TRANSIENT_CODES: frozenset[ErrorCode] = frozenset({
    ErrorCode.TIMEOUT,
    ErrorCode.NETWORK_ERROR,
    ErrorCode.RATE_LIMITED,
})

# Pattern -> code, checked in insertion order (first hit wins)
_PATTERN_CODES: dict[str, ErrorCode] = {
    "timeout": ErrorCode.TIMEOUT,
    "timed out": ErrorCode.TIMEOUT,
    "connection": ErrorCode.NETWORK_ERROR,
    "network": ErrorCode.NETWORK_ERROR,
    "ratelimit": ErrorCode.RATE_LIMITED,
    "rate limit": ErrorCode.RATE_LIMITED,
    "too many requests": ErrorCode.RATE_LIMITED,
    "credential": ErrorCode.CREDENTIALS_INVALID,
    "auth": ErrorCode.CREDENTIALS_INVALID,
    "permission": ErrorCode.PERMISSION_DENIED,
    "forbidden": ErrorCode.PERMISSION_DENIED,
    "denied": ErrorCode.PERMISSION_DENIED,
    "notfound": ErrorCode.NOT_FOUND,
    "not found": ErrorCode.NOT_FOUND,
    "lookup": ErrorCode.NOT_FOUND,
    "parse": ErrorCode.PARSE_ERROR,
    "json": ErrorCode.PARSE_ERROR,
    "decode": ErrorCode.PARSE_ERROR,
    "value": ErrorCode.INVALID_ARGUMENT,
    "argument": ErrorCode.INVALID_ARGUMENT,
    "runtime": ErrorCode.INVALID_OPERATION,
    "invalidoperation": ErrorCode.INVALID_OPERATION,
}
_PATTERN_KEYS = tuple(_PATTERN_CODES.keys())


@lru_cache(maxsize=256)
def _classify_cached(exc_key: str) -> ErrorCode:
    haystack = exc_key.lower()
    for pattern in _PATTERN_KEYS:
        if pattern in haystack:
            return _PATTERN_CODES[pattern]
    return ErrorCode.UNKNOWN


def classify_exception(exc: BaseException) -> ErrorCode:
    """Map exception to error code via pattern matching on type name and message.

    Example:
        >>> classify_exception(TimeoutError("upstream"))
        <ErrorCode.TIMEOUT: 'TIMEOUT'>
        >>> classify_exception(ConnectionResetError())
        <ErrorCode.NETWORK_ERROR: 'NETWORK_ERROR'>
    """
    return _classify_cached(f"{type(exc).__name__} {exc}")
