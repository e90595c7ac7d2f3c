from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any
from uuid import uuid4
import threading

from .booking import ConflictPolicy, Interval, IntervalOverlapPolicy
from .devices import DeviceSet
from .errors import BookingError, CapacityExceededError, ConflictDetectedError, ReservationNotFoundError
from .notifications import BookingEvent, EventKind, NotificationHub, Observer


class ReservationStatus(str, Enum):
    ACTIVE = "ACTIVE"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"


class Priority(str, Enum):
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


def as_priority(value: Priority | str) -> Priority:
    if isinstance(value, Priority):
        return value
    return Priority(value.strip().upper())


class ResourceKind(str, Enum):
    GENERIC = "GENERIC"
    ROOM = "ROOM"


@dataclass(frozen=True)
class Reservation:
    reservation_id: str
    interval: Interval
    label: str
    attendee_count: int
    status: ReservationStatus = ReservationStatus.ACTIVE
    priority: Priority = Priority.MEDIUM

    @property
    def is_active(self) -> bool:
        return self.status is ReservationStatus.ACTIVE

    def to_dict(self) -> dict[str, Any]:
        return {
            "reservation_id": self.reservation_id,
            "start": self.interval.start,
            "end": self.interval.end,
            "label": self.label,
            "attendee_count": self.attendee_count,
            "status": self.status.value,
            "priority": self.priority.value,
        }


@dataclass(frozen=True)
class ResourceSnapshot:
    name: str
    kind: ResourceKind
    capacity: int
    policy: str
    active_count: int
    reservations: tuple[Reservation, ...]
    devices: dict[str, bool] = field(default_factory=dict)

    @property
    def occupied(self) -> bool:
        return self.active_count > 0


class Resource:
    """A bookable, capacity-bounded entity.

    ``reserve``, ``cancel``, ``complete`` and ``reschedule`` run under a
    per-resource lock so the conflict check and the mutation it guards are
    one step. Events are published once the lock has been released.
    """

    def __init__(
        self,
        name: str,
        capacity: int,
        kind: ResourceKind = ResourceKind.GENERIC,
        policy: ConflictPolicy | None = None,
        devices: DeviceSet | None = None,
        hub: NotificationHub | None = None,
    ) -> None:
        if capacity < 0:
            raise ValueError("capacity must not be negative")
        self.name = name
        self.capacity = capacity
        self.kind = kind
        self.policy: ConflictPolicy = policy or IntervalOverlapPolicy()
        self.devices = devices
        self.hub = NotificationHub(parent=hub)
        self._reservations: list[Reservation] = []
        self._lock = threading.RLock()

    def subscribe(self, observer: Observer) -> None:
        self.hub.subscribe(observer)

    def reserve(
        self,
        interval: Interval,
        label: str,
        attendee_count: int,
        priority: Priority | str = Priority.MEDIUM,
    ) -> str:
        if attendee_count < 0:
            raise ValueError("attendee_count must not be negative")
        priority = as_priority(priority)

        error: BookingError | None = None
        reservation: Reservation | None = None
        with self._lock:
            conflict = self.policy.find_conflict(interval, self._active_unlocked())
            if attendee_count > self.capacity:
                error = CapacityExceededError(self.name, self.capacity, attendee_count)
            elif conflict is not None:
                error = ConflictDetectedError(self.name, conflict.label, conflict.reservation_id)
            else:
                reservation = Reservation(
                    reservation_id=str(uuid4()),
                    interval=interval,
                    label=label,
                    attendee_count=attendee_count,
                    priority=priority,
                )
                self._reservations.append(reservation)

        if error is not None:
            self._publish(
                EventKind.REJECTED,
                f"Booking {label!r} {interval.to_clock()} rejected: {error}",
                payload={"label": label, "start": interval.start, "end": interval.end},
            )
            raise error

        self._publish(
            EventKind.BOOKED,
            f"Booked {label!r} {interval.to_clock()} for {attendee_count} attendees",
            reservation,
        )
        return reservation.reservation_id

    def cancel(self, reservation_id: str) -> Reservation:
        updated = self._transition(reservation_id, ReservationStatus.CANCELLED)
        self._publish(EventKind.CANCELLED, f"Booking {updated.label!r} cancelled", updated)
        return updated

    def complete(self, reservation_id: str) -> Reservation:
        updated = self._transition(reservation_id, ReservationStatus.COMPLETED)
        self._publish(EventKind.COMPLETED, f"Booking {updated.label!r} completed", updated)
        return updated

    def reschedule(self, reservation_id: str, interval: Interval) -> Reservation:
        with self._lock:
            index = self._find_active_index(reservation_id)
            current = self._reservations[index]
            others = [row for row in self._active_unlocked() if row.reservation_id != reservation_id]
            conflict = self.policy.find_conflict(interval, others)
            if conflict is None:
                updated = replace(current, interval=interval)
                self._reservations[index] = updated

        if conflict is not None:
            self._publish(
                EventKind.REJECTED,
                f"Moving {current.label!r} to {interval.to_clock()} rejected: conflicts with {conflict.label!r}",
                current,
            )
            raise ConflictDetectedError(self.name, conflict.label, conflict.reservation_id)

        self._publish(
            EventKind.RESCHEDULED,
            f"Booking {updated.label!r} moved from {current.interval.to_clock()} to {interval.to_clock()}",
            updated,
        )
        return updated

    def list_active(self) -> list[Reservation]:
        with self._lock:
            active = self._active_unlocked()
        return sorted(active, key=lambda row: row.interval.start)

    def find_active_by_label(self, label: str) -> Reservation | None:
        wanted = label.strip().casefold()
        for reservation in self.list_active():
            if reservation.label.casefold() == wanted:
                return reservation
        return None

    def history(self) -> list[Reservation]:
        with self._lock:
            return list(self._reservations)

    def snapshot(self) -> ResourceSnapshot:
        active = self.list_active()
        return ResourceSnapshot(
            name=self.name,
            kind=self.kind,
            capacity=self.capacity,
            policy=self.policy.name,
            active_count=len(active),
            reservations=tuple(active),
            devices=self.devices.states() if self.devices is not None else {},
        )

    def _active_unlocked(self) -> list[Reservation]:
        return [row for row in self._reservations if row.is_active]

    def _find_active_index(self, reservation_id: str) -> int:
        for index, row in enumerate(self._reservations):
            if row.reservation_id == reservation_id and row.is_active:
                return index
        raise ReservationNotFoundError(self.name, reservation_id)

    def _transition(self, reservation_id: str, status: ReservationStatus) -> Reservation:
        with self._lock:
            index = self._find_active_index(reservation_id)
            updated = replace(self._reservations[index], status=status)
            self._reservations[index] = updated
        return updated

    def _publish(
        self,
        kind: EventKind,
        message: str,
        reservation: Reservation | None = None,
        payload: dict[str, Any] | None = None,
    ) -> None:
        self.hub.publish(
            BookingEvent(
                resource_name=self.name,
                kind=kind,
                message=message,
                reservation_id=reservation.reservation_id if reservation is not None else None,
                payload=payload if payload is not None else (reservation.to_dict() if reservation is not None else {}),
            )
        )
