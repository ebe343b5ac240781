"""Decorator form of execute_with_retry."""

from __future__ import annotations

from functools import wraps
from typing import Any, Callable, ParamSpec, TypeVar, overload

from .executor import DEFAULT_POLICY, execute_with_retry
from .policy import RetryPolicy

P = ParamSpec("P")
T = TypeVar("T")


@overload
def retry(policy: Callable[P, T], /) -> Callable[P, T]: ...
@overload
def retry(policy: RetryPolicy | None = None, /, **options: Any) -> Callable[[Callable[P, T]], Callable[P, T]]: ...


def retry(policy: Any = None, /, **options: Any) -> Any:
    """Retry every call of the decorated function.

    Accepts a ready RetryPolicy or the keyword options of ``RetryPolicy.of``.
    Bare ``@retry`` uses the default policy (any Exception, 2 attempts).

    Example:
        >>> @retry(on=ConnectionError, attempts=3, delay=0.2)
        ... def fetch_quote(symbol: str) -> float:
        ...     return client.quote(symbol)
        >>>
        >>> @retry(RetryPolicy.of(on=PermissionError, reload=client))
        ... def upload(path: str) -> None:
        ...     client.put(path)
    """
    if callable(policy) and not isinstance(policy, RetryPolicy):
        if options:
            raise TypeError("retry() options cannot be combined with a decorated function")
        return retry()(policy)
    if policy is not None and options:
        raise TypeError("Pass either a RetryPolicy or keyword options, not both")
    resolved: RetryPolicy = policy if policy is not None else (RetryPolicy.of(**options) if options else DEFAULT_POLICY)

    def decorator(func: Callable[P, T]) -> Callable[P, T]:
        @wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            return execute_with_retry(lambda: func(*args, **kwargs), resolved)

        wrapper.retry_policy = resolved  # type: ignore[attr-defined]
        return wrapper

    return decorator
