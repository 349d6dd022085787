"""
Single-entity state container with change notification.

EntityStore holds at most one value of some domain type and tells its
subscribers about every mutation. It is constructed explicitly and passed
around by reference (see backend.state.session.AppSession); there is no
module-level instance.

Notification contract:
- set() and clear() always notify, even when nothing changed.
- update() on an absent entity is a no-op and does not notify.
- Listeners are called as listener(new_value, previous_value).

The store performs no validation and no locking: it assumes a single
cooperative execution context where reads and mutations never interleave.
"""

import dataclasses
from typing import Any, Callable, Generic, List, Mapping, Optional, TypeVar

from pydantic import BaseModel

T = TypeVar("T")

Listener = Callable[[Optional[T], Optional[T]], None]


def shallow_merge(entity: T, changes: Mapping[str, Any]) -> T:
    """
    Return a copy of `entity` with the named fields replaced.

    Fields not named in `changes` are preserved. Nested values are not merged.

    Raises:
        TypeError: If the entity is not a mapping, Pydantic model or dataclass
    """
    if isinstance(entity, BaseModel):
        return entity.model_copy(update=dict(changes))
    if isinstance(entity, Mapping):
        return {**entity, **changes}  # type: ignore[return-value]
    if dataclasses.is_dataclass(entity) and not isinstance(entity, type):
        return dataclasses.replace(entity, **changes)  # type: ignore[return-value]
    raise TypeError(f"Cannot merge fields into {type(entity).__name__}")


class EntityStore(Generic[T]):
    """Holds zero or one entity of type T."""

    def __init__(self, initial: Optional[T] = None) -> None:
        self._value: Optional[T] = initial
        self._listeners: List[Listener] = []

    @property
    def current(self) -> Optional[T]:
        """The held entity, or None when absent."""
        return self._value

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a listener for every mutation.

        Returns:
            A callable that removes the listener. Calling it twice is harmless.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def set(self, value: T) -> None:
        """Replace the held entity entirely."""
        self._replace(value)

    def update(self, changes: Mapping[str, Any]) -> None:
        """Shallow-merge `changes` into the held entity. No-op when absent."""
        if self._value is None:
            return
        self._replace(shallow_merge(self._value, changes))

    def clear(self) -> None:
        """Make the entity absent."""
        self._replace(None)

    def _replace(self, value: Optional[T]) -> None:
        previous = self._value
        self._value = value
        # copy: listeners may unsubscribe while being notified
        for listener in list(self._listeners):
            listener(value, previous)
