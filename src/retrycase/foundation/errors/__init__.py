"""Error handling for retrycase.

- ErrorCode / classify_exception: coarse failure categories
- Failure: terminal failure value with the original exception attached
- Result / Ok / Err: non-raising outcome type
"""

from .errors import TRANSIENT_CODES, ErrorCode, classify_exception
from .result import Err, Ok, Result
from .types import Failure, FailureSource

__all__ = [
    "ErrorCode", "TRANSIENT_CODES", "classify_exception",
    "Failure", "FailureSource",
    "Result", "Ok", "Err",
]
