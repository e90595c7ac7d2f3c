from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, Protocol

if TYPE_CHECKING:
    from .resources import Reservation

MINUTES_PER_DAY = 24 * 60


@dataclass(frozen=True)
class Interval:
    """Half-open time range [start, end) in minutes since midnight."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 0:
            raise ValueError("Interval start must not be negative.")
        if self.start >= self.end:
            raise ValueError("Interval start must be earlier than end.")
        if self.end > MINUTES_PER_DAY:
            raise ValueError("Interval must end no later than 24:00.")

    @staticmethod
    def from_duration(start: int, minutes: int) -> "Interval":
        if minutes <= 0:
            raise ValueError("duration must be greater than zero")
        return Interval(start, start + minutes)

    @property
    def duration(self) -> int:
        return self.end - self.start

    def overlaps(self, other: "Interval") -> bool:
        return overlaps(self, other)

    def contains(self, minute: int) -> bool:
        return self.start <= minute < self.end

    def intersection(self, other: "Interval") -> "Interval | None":
        if not overlaps(self, other):
            return None
        return Interval(max(self.start, other.start), min(self.end, other.end))

    def shifted(self, minutes: int) -> "Interval":
        return Interval(self.start + minutes, self.end + minutes)

    def to_clock(self) -> str:
        return f"{_clock(self.start)}~{_clock(self.end)}"


def _clock(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def overlaps(a: Interval, b: Interval) -> bool:
    """Return True when two intervals share at least one minute.

    Intervals are treated as half-open ranges: [start, end)
    so touching boundaries (e.g. 10:00-11:00 and 11:00-12:00) do not overlap.
    """
    return a.start < b.end and b.start < a.end


def can_reserve(interval: Interval, existing: Iterable[Interval]) -> bool:
    """Return True if the requested interval does not overlap any existing interval."""
    for other in existing:
        if overlaps(interval, other):
            return False
    return True


class ConflictPolicy(Protocol):
    name: str

    def find_conflict(self, interval: Interval, active: Iterable["Reservation"]) -> "Reservation | None":
        ...


class IntervalOverlapPolicy:
    """Reservations conflict only when their intervals overlap."""

    name = "overlap"

    def find_conflict(self, interval: Interval, active: Iterable["Reservation"]) -> "Reservation | None":
        for reservation in active:
            if overlaps(interval, reservation.interval):
                return reservation
        return None


class ExclusiveOccupancyPolicy:
    """A held reservation blocks every new booking, whatever its time."""

    name = "exclusive"

    def find_conflict(self, interval: Interval, active: Iterable["Reservation"]) -> "Reservation | None":
        return next(iter(active), None)


_POLICIES: dict[str, type] = {
    IntervalOverlapPolicy.name: IntervalOverlapPolicy,
    ExclusiveOccupancyPolicy.name: ExclusiveOccupancyPolicy,
}


def get_policy(name: str) -> ConflictPolicy:
    normalized = name.strip().lower()
    policy_type = _POLICIES.get(normalized)
    if policy_type is None:
        raise ValueError(f"Unknown conflict policy: {name!r}")
    return policy_type()
