"""Recovery targets refreshed between attempts."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class Reloadable(Protocol):
    """Object that can re-initialize itself before a retry.

    Typical use is re-reading settings that may have changed since the object
    was created, such as rotated credentials or connection strings. The
    executor calls ``reload()`` once per retry and never creates or disposes
    the target.
    """

    def reload(self) -> None: ...
