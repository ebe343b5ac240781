"""Terminal failure value returned by the non-raising retry entry point.

Uses a frozen Pydantic model so failures serialize cleanly for logs and
reports while still carrying the original exception object.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, NoReturn

from pydantic import BaseModel, ConfigDict, Field, computed_field

from .errors import ErrorCode, classify_exception

FailureSource = Literal["operation", "reload"]


class Failure(BaseModel):
    """The failure surfaced once retrying stopped.

    Attributes:
        message: ``str()`` of the exception (type name when empty)
        category: Exception type name, the discriminator classifiers act on
        error_code: Coarse category from ``classify_exception``
        attempts: How many times the operation was invoked
        source: Whether the operation or the reload hook raised
        exception: The original exception object (never serialized)
    """

    model_config = ConfigDict(
        frozen=True,
        arbitrary_types_allowed=True,
        extra="forbid",
        revalidate_instances="never",
        json_schema_extra={
            "title": "Retry Failure",
            "examples": [{
                "message": "service unavailable",
                "category": "ConnectionError",
                "error_code": "NETWORK_ERROR",
                "attempts": 3,
                "source": "operation",
            }],
        },
    )

    message: Annotated[str, Field(min_length=1)]
    category: Annotated[str, Field(min_length=1)]
    error_code: ErrorCode = ErrorCode.UNKNOWN
    attempts: Annotated[int, Field(ge=1)] = 1
    source: FailureSource = "operation"
    exception: BaseException = Field(exclude=True, repr=False)

    @computed_field
    @property
    def from_reload(self) -> bool:
        """Whether the reload hook, not the operation, produced this failure."""
        return self.source == "reload"

    @classmethod
    def from_exception(cls, exc: BaseException, *, attempts: int = 1, source: FailureSource = "operation") -> Failure:
        category = type(exc).__name__
        return cls(
            message=str(exc) or category,
            category=category,
            error_code=classify_exception(exc),
            attempts=attempts,
            source=source,
            exception=exc,
        )

    def reraise(self) -> NoReturn:
        """Raise the original exception object."""
        raise self.exception

    def __hash__(self) -> int:
        return hash((self.category, self.message, self.attempts, self.source))

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Failure):
            return NotImplemented
        return self.exception is other.exception and self.attempts == other.attempts and self.source == other.source

    def __str__(self) -> str:
        where = " in reload hook" if self.from_reload else ""
        return f"{self.category}{where} after {self.attempts} attempt(s): {self.message} [{self.error_code}]"
