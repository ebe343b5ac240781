"""Failure classifiers decide which exceptions are worth retrying.

Example:
    >>> FailureClassifier.of(TimeoutError).matches(TimeoutError())
    True
    >>> FailureClassifier.codes(ErrorCode.NETWORK_ERROR).matches(ConnectionResetError())
    True
    >>> (FailureClassifier.of(KeyError) | FailureClassifier.of(IndexError)).matches(IndexError())
    True
"""

from __future__ import annotations

from typing import Callable

from retrycase.foundation.errors import TRANSIENT_CODES, ErrorCode, classify_exception

Predicate = Callable[[BaseException], bool]


class FailureClassifier:
    """Stateless predicate over a raised exception.

    Build with ``any()``, ``of()``, ``codes()``, ``transient()`` or ``where()``; combine with
    ``|``. Instances are immutable and safe to share.
    """

    __slots__ = ("_predicate", "_label")

    def __init__(self, predicate: Predicate, label: str) -> None:
        object.__setattr__(self, "_predicate", predicate)
        object.__setattr__(self, "_label", label)

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __copy__(self) -> FailureClassifier:
        return self

    def __deepcopy__(self, memo: dict[int, object]) -> FailureClassifier:
        return self

    @classmethod
    def any(cls) -> FailureClassifier:
        """Every ``Exception`` is retryable."""
        return cls(lambda exc: isinstance(exc, Exception), "Exception")

    @classmethod
    def of(cls, *types: type[BaseException]) -> FailureClassifier:
        """Retry exceptions that are instances of any of ``types``."""
        if not types:
            raise ValueError("FailureClassifier.of() needs at least one exception type")
        for t in types:
            if not (isinstance(t, type) and issubclass(t, BaseException)):
                raise TypeError(f"Expected an exception type, got {t!r}")
        return cls(lambda exc: isinstance(exc, types), "|".join(t.__name__ for t in types))

    @classmethod
    def codes(cls, *codes: ErrorCode | str) -> FailureClassifier:
        """Retry exceptions whose ``classify_exception`` code is in ``codes``."""
        if not codes:
            raise ValueError("FailureClassifier.codes() needs at least one error code")
        wanted = frozenset(ErrorCode(c) for c in codes)
        return cls(lambda exc: classify_exception(exc) in wanted, "|".join(sorted(c.value for c in wanted)))

    @classmethod
    def transient(cls) -> FailureClassifier:
        """Retry failures whose code is in ``TRANSIENT_CODES``."""
        return cls.codes(*TRANSIENT_CODES)

    @classmethod
    def where(cls, predicate: Predicate, label: str | None = None) -> FailureClassifier:
        """Retry exceptions for which ``predicate`` returns True."""
        return cls(predicate, label or getattr(predicate, "__name__", "predicate"))

    @classmethod
    def coerce(cls, value: object) -> FailureClassifier:
        """Accept the shorthand forms RetryPolicy allows for ``classifier``."""
        match value:
            case None:
                return cls.any()
            case FailureClassifier():
                return value
            case ErrorCode():
                return cls.codes(value)
            case type() if issubclass(value, BaseException):
                return cls.of(value)
            case tuple() | list() | frozenset() | set() if value and all(isinstance(v, ErrorCode) for v in value):
                return cls.codes(*value)
            case tuple() | list() if value:
                return cls.of(*value)
            case _ if callable(value):
                return cls.where(value)  # type: ignore[arg-type]
        raise TypeError(f"Cannot build a FailureClassifier from {value!r}")

    @property
    def label(self) -> str:
        return self._label

    def matches(self, exc: BaseException) -> bool:
        return bool(self._predicate(exc))

    __call__ = matches

    def __or__(self, other: FailureClassifier) -> FailureClassifier:
        if not isinstance(other, FailureClassifier):
            return NotImplemented
        a, b = self._predicate, other._predicate
        return FailureClassifier(lambda exc: a(exc) or b(exc), f"{self._label}|{other._label}")

    def __repr__(self) -> str:
        return f"FailureClassifier({self._label})"


ANY_FAILURE = FailureClassifier.any()
