from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Protocol
import logging
import threading

logger = logging.getLogger(__name__)


class EventKind(str, Enum):
    RESOURCE_ADDED = "RESOURCE_ADDED"
    BOOKED = "BOOKED"
    REJECTED = "REJECTED"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"
    RESCHEDULED = "RESCHEDULED"
    DEVICE_CHANGED = "DEVICE_CHANGED"


@dataclass(frozen=True)
class BookingEvent:
    resource_name: str
    kind: EventKind
    message: str
    reservation_id: str | None = None
    payload: dict[str, Any] = field(default_factory=dict)
    occurred_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict[str, Any]:
        return {
            "resource": self.resource_name,
            "message": self.message,
            "reservation_id": self.reservation_id,
            **self.payload,
        }


class Observer(Protocol):
    def notify(self, event: BookingEvent) -> None:
        ...


class NotificationHub:
    """Synchronous, ordered fan-out of booking events.

    Observer failures are logged and swallowed so a broken subscriber never
    changes the outcome of the booking operation that triggered it. A hub
    created with a ``parent`` forwards every event to it after its own
    observers have run.
    """

    def __init__(self, parent: NotificationHub | None = None) -> None:
        self.parent = parent
        self._observers: list[Observer] = []
        self._lock = threading.Lock()

    def subscribe(self, observer: Observer) -> None:
        with self._lock:
            if observer not in self._observers:
                self._observers.append(observer)

    def unsubscribe(self, observer: Observer) -> None:
        with self._lock:
            if observer in self._observers:
                self._observers.remove(observer)

    @property
    def observers(self) -> tuple[Observer, ...]:
        with self._lock:
            return tuple(self._observers)

    def publish(self, event: BookingEvent) -> None:
        for observer in self.observers:
            try:
                observer.notify(event)
            except Exception:
                logger.exception(
                    "Observer %r failed on %s event for %s",
                    observer,
                    event.kind.value,
                    event.resource_name,
                )
        if self.parent is not None:
            self.parent.publish(event)


class LoggingObserver:
    """Write every booking event to a logger at INFO level."""

    def __init__(self, name: str = "resource_booking.events") -> None:
        self.logger = logging.getLogger(name)

    def notify(self, event: BookingEvent) -> None:
        self.logger.info("[%s] %s: %s", event.kind.value, event.resource_name, event.message)
