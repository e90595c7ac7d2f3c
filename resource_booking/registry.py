from __future__ import annotations

from typing import TYPE_CHECKING
import logging
import threading

from .booking import ConflictPolicy, Interval, get_policy
from .devices import DeviceSet
from .errors import DuplicateResourceError, ResourceNotFoundError
from .notifications import BookingEvent, EventKind, NotificationHub, Observer
from .resources import Priority, Reservation, Resource, ResourceKind, ResourceSnapshot, as_priority

if TYPE_CHECKING:
    from .settings import BookingSettings

logger = logging.getLogger(__name__)


def _display_name(name: str) -> str:
    display = " ".join(name.split())
    if not display:
        raise ValueError("resource name must not be empty")
    return display


def _key(name: str) -> str:
    return " ".join(name.split()).casefold()


class BookingRegistry:
    """Catalogue of bookable resources keyed by case-insensitive name.

    Build one registry per process and pass it to every caller. The
    registry lock only guards insertion into the catalogue; booking
    operations are serialized by each resource's own lock.
    """

    def __init__(
        self,
        default_policy: str = "overlap",
        kind_policies: dict[ResourceKind, str] | None = None,
    ) -> None:
        self.hub = NotificationHub()
        self.default_policy = default_policy
        self.kind_policies: dict[ResourceKind, str] = dict(kind_policies or {})
        self._resources: dict[str, Resource] = {}
        self._lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings: "BookingSettings") -> "BookingRegistry":
        registry = cls(default_policy=settings.default_policy, kind_policies=settings.kind_policies)
        if settings.event_log_path is not None:
            from .yaml_store import YamlEventLog

            registry.subscribe(YamlEventLog(settings.event_log_path))
        for seed in settings.seed_resources:
            registry.add_resource(
                seed.name,
                seed.capacity,
                kind=seed.kind,
                policy=seed.policy,
                room_type=seed.room_type,
            )
        logger.info("Registry initialized with %d resources", len(settings.seed_resources))
        return registry

    def subscribe(self, observer: Observer) -> None:
        self.hub.subscribe(observer)

    def unsubscribe(self, observer: Observer) -> None:
        self.hub.unsubscribe(observer)

    def add_resource(
        self,
        name: str,
        capacity: int,
        kind: ResourceKind = ResourceKind.GENERIC,
        policy: str | ConflictPolicy | None = None,
        room_type: str | None = None,
    ) -> Resource:
        name = _display_name(name)
        devices = None
        if room_type is not None:
            kind = ResourceKind.ROOM
            devices = DeviceSet.for_room_type(room_type)
        elif kind is ResourceKind.ROOM:
            devices = DeviceSet([])

        resource = Resource(
            name,
            capacity,
            kind=kind,
            policy=self._resolve_policy(kind, policy),
            devices=devices,
            hub=self.hub,
        )

        with self._lock:
            if _key(name) in self._resources:
                raise DuplicateResourceError(name)
            self._resources[_key(name)] = resource

        self.hub.publish(
            BookingEvent(
                resource_name=name,
                kind=EventKind.RESOURCE_ADDED,
                message=f"Resource added ({kind.value}, capacity {capacity}, policy {resource.policy.name})",
                payload={"capacity": capacity, "kind": kind.value, "policy": resource.policy.name},
            )
        )
        return resource

    def get(self, name: str) -> Resource:
        resource = self._resources.get(_key(name))
        if resource is None:
            raise ResourceNotFoundError(name)
        return resource

    def __contains__(self, name: str) -> bool:
        return _key(name) in self._resources

    def __len__(self) -> int:
        return len(self._resources)

    def book(
        self,
        name: str,
        interval: Interval,
        label: str,
        attendee_count: int,
        priority: Priority | str = Priority.MEDIUM,
    ) -> str:
        return self.get(name).reserve(interval, label, attendee_count, priority=priority)

    def cancel(self, name: str, reservation_id: str) -> Reservation:
        return self.get(name).cancel(reservation_id)

    def complete(self, name: str, reservation_id: str) -> Reservation:
        return self.get(name).complete(reservation_id)

    def reschedule(self, name: str, reservation_id: str, interval: Interval) -> Reservation:
        return self.get(name).reschedule(reservation_id, interval)

    def resource_status(self, name: str) -> ResourceSnapshot:
        return self.get(name).snapshot()

    def list_all(self) -> list[tuple[str, ResourceSnapshot]]:
        resources = sorted(self._resources.items())
        return [(resource.name, resource.snapshot()) for _, resource in resources]

    def reservations_by_priority(self, priority: Priority | str) -> list[tuple[str, Reservation]]:
        wanted = as_priority(priority)
        matches: list[tuple[str, Reservation]] = []
        for name, snapshot in self.list_all():
            matches.extend((name, row) for row in snapshot.reservations if row.priority is wanted)
        return matches

    def execute_device_commands(self, name: str, codes: str) -> tuple[list[str], list[str]]:
        resource = self._room(name)
        switched, unknown = resource.devices.execute(codes)
        if unknown:
            logger.warning("%s: unknown device commands %s", resource.name, "".join(unknown))
        if switched:
            self._publish_devices(resource, f"Turned on {', '.join(switched)}")
        return switched, unknown

    def set_room_configuration(self, name: str, on: bool) -> dict[str, bool]:
        resource = self._room(name)
        resource.devices.set_all(on)
        self._publish_devices(resource, f"All devices turned {'ON' if on else 'OFF'}")
        return resource.devices.states()

    def _room(self, name: str) -> Resource:
        resource = self.get(name)
        if resource.devices is None:
            raise ValueError(f"{resource.name} has no devices")
        return resource

    def _publish_devices(self, resource: Resource, message: str) -> None:
        resource.hub.publish(
            BookingEvent(
                resource_name=resource.name,
                kind=EventKind.DEVICE_CHANGED,
                message=message,
                payload={"devices": resource.devices.states() if resource.devices is not None else {}},
            )
        )

    def _resolve_policy(self, kind: ResourceKind, policy: str | ConflictPolicy | None) -> ConflictPolicy:
        if policy is None:
            return get_policy(self.kind_policies.get(kind, self.default_policy))
        if isinstance(policy, str):
            return get_policy(policy)
        return policy
