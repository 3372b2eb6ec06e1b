"""Simple synchronous state container driven by a reducer."""

from __future__ import annotations

from typing import Any, Callable, Generic, TypeVar

S = TypeVar("S")


class Store(Generic[S]):
    """Holds one state value and replaces it only through ``dispatch``.

    Subscribers are called synchronously in registration order with the new
    state. Once closed, further actions are dropped.
    """

    def __init__(self, reducer: Callable[[S, Any], S], initial: S) -> None:
        self._reducer = reducer
        self._state = initial
        self._subscribers: list[Callable[[S], None]] = []
        self._closed = False

    @property
    def state(self) -> S:
        return self._state

    @property
    def closed(self) -> bool:
        return self._closed

    def subscribe(self, handler: Callable[[S], None]) -> None:
        self._subscribers.append(handler)

    def dispatch(self, action: Any) -> S:
        if self._closed:
            return self._state
        self._state = self._reducer(self._state, action)
        for handler in self._subscribers:
            handler(self._state)
        return self._state

    def close(self) -> None:
        self._closed = True
        self._subscribers.clear()
