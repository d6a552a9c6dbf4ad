from typing import Callable, Generic, List, TypeVar

import structlog

logger = structlog.get_logger()

T = TypeVar("T")


class Subscription:
    """
    Handle returned by EventEmitter.subscribe.
    Unsubscribing twice is a no-op.
    """
    def __init__(self, emitter: "EventEmitter", handler: Callable):
        self._emitter = emitter
        self._handler = handler
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def unsubscribe(self) -> None:
        if not self._active:
            return
        self._active = False
        self._emitter._remove(self._handler)


class EventEmitter(Generic[T]):
    """
    Synchronous publish/subscribe channel.
    Handlers run in subscription order on the emitting call stack.
    """
    def __init__(self, name: str = "event"):
        self._name = name
        self._handlers: List[Callable[[T], None]] = []

    def subscribe(self, handler: Callable[[T], None]) -> Subscription:
        self._handlers.append(handler)
        return Subscription(self, handler)

    def emit(self, event: T) -> None:
        # Copy so handlers may unsubscribe while being notified
        for handler in list(self._handlers):
            try:
                handler(event)
            except Exception as e:
                logger.error("event_handler_failed", emitter=self._name, error=str(e), exc_info=True)

    def _remove(self, handler: Callable[[T], None]) -> None:
        try:
            self._handlers.remove(handler)
        except ValueError:
            pass

    def __len__(self) -> int:
        return len(self._handlers)
