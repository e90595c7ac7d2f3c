from .booking import ConflictPolicy, ExclusiveOccupancyPolicy, Interval, IntervalOverlapPolicy, can_reserve, get_policy, overlaps
from .devices import DeviceCommand, DeviceSet
from .errors import (
	BookingError,
	CapacityExceededError,
	ConflictDetectedError,
	DuplicateResourceError,
	ReservationNotFoundError,
	ResourceNotFoundError,
)
from .notifications import BookingEvent, EventKind, LoggingObserver, NotificationHub, Observer
from .registry import BookingRegistry
from .resources import Priority, Reservation, ReservationStatus, Resource, ResourceKind, ResourceSnapshot
from .settings import BookingSettings, ConfigurationError, SeedResource, load_settings
from .timeparse import ParsedBookingRequest, format_clock, interval_between, interval_from_clock, parse_booking_request, parse_clock
from .yaml_store import EventLogStorageError, YamlEventLog

__all__ = [
	"Interval",
	"overlaps",
	"can_reserve",
	"ConflictPolicy",
	"IntervalOverlapPolicy",
	"ExclusiveOccupancyPolicy",
	"get_policy",
	"DeviceCommand",
	"DeviceSet",
	"BookingError",
	"ResourceNotFoundError",
	"DuplicateResourceError",
	"CapacityExceededError",
	"ConflictDetectedError",
	"ReservationNotFoundError",
	"BookingEvent",
	"EventKind",
	"Observer",
	"NotificationHub",
	"LoggingObserver",
	"Reservation",
	"ReservationStatus",
	"Priority",
	"ResourceKind",
	"Resource",
	"ResourceSnapshot",
	"BookingRegistry",
	"BookingSettings",
	"SeedResource",
	"ConfigurationError",
	"load_settings",
	"ParsedBookingRequest",
	"parse_clock",
	"format_clock",
	"interval_from_clock",
	"interval_between",
	"parse_booking_request",
	"YamlEventLog",
	"EventLogStorageError",
]
