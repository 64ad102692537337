"""Minimal listener registry shared by the store and the attendee change feed."""
from __future__ import annotations
from typing import Any, Callable, Generic, TypeVar

T = TypeVar("T")


class Subscription:
    """Handle returned by ``subscribe``; release it with ``close()`` or ``with``."""

    def __init__(self, release: Callable[[], None]) -> None:
        self._release: Callable[[], None] | None = release

    @property
    def closed(self) -> bool:
        return self._release is None

    def close(self) -> None:
        if self._release is not None:
            release, self._release = self._release, None
            release()

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


class Listeners(Generic[T]):
    """Ordered set of callbacks, each registered through a ``Subscription``.

    Callbacks run synchronously in registration order.
    """

    def __init__(self) -> None:
        self._callbacks: list[Callable[[T], None]] = []

    def __len__(self) -> int:
        return len(self._callbacks)

    def add(self, callback: Callable[[T], None]) -> Subscription:
        self._callbacks.append(callback)
        return Subscription(lambda: self._remove(callback))

    def _remove(self, callback: Callable[[T], None]) -> None:
        for i, registered in enumerate(self._callbacks):
            if registered is callback:
                del self._callbacks[i]
                return

    def emit(self, value: T) -> None:
        for callback in list(self._callbacks):
            callback(value)
