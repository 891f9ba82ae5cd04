from __future__ import annotations

from enum import Enum
from typing import Awaitable, Callable, Generic, Optional, TypeVar

T = TypeVar("T")


class HandleState(str, Enum):
    ABSENT = "absent"
    PRESENT = "present"


class LazyHandle(Generic[T]):
    """Owned reference to one external resource, created on first request."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._value: Optional[T] = None
        self._state = HandleState.ABSENT

    @property
    def state(self) -> HandleState:
        return self._state

    @property
    def present(self) -> bool:
        return self._state is HandleState.PRESENT

    @property
    def value(self) -> Optional[T]:
        return self._value

    async def get_or_create(self, factory: Callable[[], Awaitable[T]]) -> T:
        if self.present:
            return self._value  # type: ignore[return-value]
        return self.set(await factory())

    def set(self, value: T) -> T:
        self._value = value
        self._state = HandleState.PRESENT
        return value

    def clear(self) -> None:
        self._value = None
        self._state = HandleState.ABSENT

    def discard(self, value: T) -> None:
        # A late event from an old resource must not drop its replacement.
        if self._value is value:
            self.clear()

    def __repr__(self) -> str:
        return f"LazyHandle({self.name!r}, state={self._state.value})"
