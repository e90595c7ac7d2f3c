import dataclasses
import unittest

from resource_booking import (
    BookingRegistry,
    BookingSettings,
    CapacityExceededError,
    ConflictDetectedError,
    DuplicateResourceError,
    EventKind,
    Interval,
    Priority,
    ReservationNotFoundError,
    ResourceKind,
    ResourceNotFoundError,
    SeedResource,
    interval_between,
)


class RecordingObserver:
    def __init__(self) -> None:
        self.events = []

    def notify(self, event) -> None:
        self.events.append(event)


class TestBookingRegistry(unittest.TestCase):
    def setUp(self) -> None:
        self.registry = BookingRegistry()

    def test_end_to_end_conference_room_flow(self) -> None:
        self.registry.add_resource("CR1", 10)

        first = self.registry.book("CR1", interval_between("09:00", "10:00"), "planning", 8)
        self.assertTrue(first)

        with self.assertRaises(ConflictDetectedError) as context:
            self.registry.book("CR1", interval_between("09:30", "09:45"), "huddle", 2)
        self.assertEqual(context.exception.conflicting_label, "planning")

        second = self.registry.book("CR1", interval_between("10:00", "11:00"), "retro", 5)
        self.assertNotEqual(first, second)
        self.assertEqual(self.registry.resource_status("CR1").active_count, 2)

    def test_duplicate_names_are_case_insensitive(self) -> None:
        self.registry.add_resource("CR1", 10)
        with self.assertRaises(DuplicateResourceError):
            self.registry.add_resource("cr1", 4)
        self.assertEqual(len(self.registry), 1)

    def test_lookup_is_case_insensitive(self) -> None:
        self.registry.add_resource("Conference A", 10)
        self.registry.book("conference a", Interval(540, 600), "sync", 3)
        self.assertIn("CONFERENCE A", self.registry)
        self.assertEqual(self.registry.resource_status("Conference A").name, "Conference A")

    def test_empty_name_rejected(self) -> None:
        with self.assertRaises(ValueError):
            self.registry.add_resource("   ", 3)

    def test_unknown_resource_fails_every_operation(self) -> None:
        with self.assertRaises(ResourceNotFoundError):
            self.registry.book("nowhere", Interval(0, 30), "x", 1)
        with self.assertRaises(ResourceNotFoundError):
            self.registry.cancel("nowhere", "id")
        with self.assertRaises(ResourceNotFoundError):
            self.registry.resource_status("nowhere")

    def test_book_propagates_resource_errors_unchanged(self) -> None:
        self.registry.add_resource("MR1", 5)
        with self.assertRaises(CapacityExceededError):
            self.registry.book("MR1", Interval(540, 600), "crowd", 6)

    def test_cancel_then_rebook_same_interval(self) -> None:
        self.registry.add_resource("MR1", 5)
        reservation_id = self.registry.book("MR1", Interval(540, 600), "sync", 3)
        self.registry.cancel("MR1", reservation_id)
        self.registry.book("MR1", Interval(540, 600), "sync again", 3)

        with self.assertRaises(ReservationNotFoundError):
            self.registry.cancel("MR1", reservation_id)

    def test_snapshot_is_read_only_copy(self) -> None:
        self.registry.add_resource("MR1", 5)
        self.registry.book("MR1", Interval(540, 600), "sync", 3)
        snapshot = self.registry.resource_status("MR1")

        with self.assertRaises(dataclasses.FrozenInstanceError):
            snapshot.capacity = 50
        with self.assertRaises(dataclasses.FrozenInstanceError):
            snapshot.reservations[0].attendee_count = 99

        self.registry.book("MR1", Interval(600, 660), "follow-up", 2)
        self.assertEqual(snapshot.active_count, 1)
        self.assertEqual(len(snapshot.reservations), 1)
        self.assertTrue(snapshot.occupied)

    def test_list_all_is_sorted_by_name(self) -> None:
        for name in ("mr2", "CR1", "Lab"):
            self.registry.add_resource(name, 4)

        names = [name for name, _ in self.registry.list_all()]
        self.assertEqual(names, ["CR1", "Lab", "mr2"])

    def test_complete_and_reschedule_delegate(self) -> None:
        self.registry.add_resource("Schedule", 1)
        exercise = self.registry.book("Schedule", Interval(420, 480), "exercise", 1)
        self.registry.book("Schedule", Interval(480, 540), "breakfast", 1)

        self.registry.reschedule("Schedule", exercise, Interval(360, 420))
        self.registry.complete("Schedule", exercise)

        active = self.registry.resource_status("Schedule").reservations
        self.assertEqual([row.label for row in active], ["breakfast"])

    def test_reservations_by_priority(self) -> None:
        self.registry.add_resource("Schedule", 1)
        self.registry.add_resource("Lab", 2)
        self.registry.book("Schedule", Interval(420, 480), "exercise", 1, priority=Priority.HIGH)
        self.registry.book("Schedule", Interval(480, 540), "breakfast", 1, priority=Priority.LOW)
        self.registry.book("Lab", Interval(600, 660), "experiment", 2, priority=Priority.HIGH)

        high = self.registry.reservations_by_priority("high")
        self.assertEqual([(name, row.label) for name, row in high], [("Lab", "experiment"), ("Schedule", "exercise")])

    def test_text_priority_booking_is_found_by_priority(self) -> None:
        self.registry.add_resource("CR1", 10)
        reservation_id = self.registry.book("CR1", Interval(540, 600), "sync", 3, priority="HIGH")

        high = self.registry.reservations_by_priority(Priority.HIGH)
        self.assertEqual([(name, row.reservation_id) for name, row in high], [("CR1", reservation_id)])
        self.assertEqual(self.registry.resource_status("CR1").active_count, 1)

    def test_names_with_extra_whitespace_match(self) -> None:
        self.registry.add_resource("  Conference   B ", 8)
        self.assertEqual(self.registry.resource_status("conference b").name, "Conference B")
        with self.assertRaises(DuplicateResourceError):
            self.registry.add_resource("CONFERENCE B", 2)

    def test_kind_policy_selects_exclusive_occupancy(self) -> None:
        registry = BookingRegistry(kind_policies={ResourceKind.ROOM: "exclusive"})
        registry.add_resource("MR1", 5, room_type="meeting")
        registry.add_resource("Desk", 1)

        registry.book("MR1", Interval(540, 600), "sync", 3)
        with self.assertRaises(ConflictDetectedError):
            registry.book("MR1", Interval(900, 960), "later", 3)

        registry.book("Desk", Interval(540, 600), "focus", 1)
        registry.book("Desk", Interval(900, 960), "focus again", 1)

    def test_explicit_policy_overrides_kind_default(self) -> None:
        self.registry.add_resource("Booth", 1, policy="exclusive")
        self.assertEqual(self.registry.resource_status("Booth").policy, "exclusive")

    def test_global_and_scoped_observers(self) -> None:
        global_observer = RecordingObserver()
        scoped_observer = RecordingObserver()
        self.registry.subscribe(global_observer)
        resource = self.registry.add_resource("CR1", 10)
        resource.subscribe(scoped_observer)
        self.registry.add_resource("MR1", 5)

        reservation_id = self.registry.book("CR1", Interval(540, 600), "sync", 3)
        self.registry.cancel("CR1", reservation_id)
        self.registry.book("MR1", Interval(540, 600), "sync", 3)

        self.assertEqual(
            [event.kind for event in global_observer.events],
            [EventKind.RESOURCE_ADDED, EventKind.RESOURCE_ADDED, EventKind.BOOKED, EventKind.CANCELLED, EventKind.BOOKED],
        )
        self.assertEqual([event.kind for event in scoped_observer.events], [EventKind.BOOKED, EventKind.CANCELLED])


class TestRoomDevices(unittest.TestCase):
    def setUp(self) -> None:
        self.registry = BookingRegistry()
        self.registry.add_resource("CR1", 10, room_type="conference")
        self.registry.add_resource("MR1", 5, room_type="meeting")

    def test_room_type_sets_kind_and_devices(self) -> None:
        status = self.registry.resource_status("CR1")
        self.assertEqual(status.kind, ResourceKind.ROOM)
        self.assertEqual(status.devices, {"Lights": False, "Air Conditioner": False, "Projector": False})

    def test_execute_device_commands(self) -> None:
        switched, unknown = self.registry.execute_device_commands("MR1", "lpx")

        self.assertEqual(switched, ["Lights"])
        self.assertEqual(unknown, ["P", "X"])
        self.assertTrue(self.registry.resource_status("MR1").devices["Lights"])

    def test_set_room_configuration(self) -> None:
        states = self.registry.set_room_configuration("CR1", True)
        self.assertTrue(all(states.values()))
        states = self.registry.set_room_configuration("CR1", False)
        self.assertFalse(any(states.values()))

    def test_generic_resource_has_no_devices(self) -> None:
        self.registry.add_resource("Desk", 1)
        with self.assertRaises(ValueError):
            self.registry.execute_device_commands("Desk", "L")

    def test_invalid_room_type(self) -> None:
        with self.assertRaises(ValueError):
            self.registry.add_resource("Gym", 20, room_type="gym")
        self.assertNotIn("Gym", self.registry)

    def test_device_commands_do_not_touch_bookings(self) -> None:
        self.registry.book("CR1", Interval(540, 600), "demo", 6)
        self.registry.set_room_configuration("CR1", True)
        self.assertEqual(self.registry.resource_status("CR1").active_count, 1)


class TestRegistryFromSettings(unittest.TestCase):
    def test_default_seed_catalogue(self) -> None:
        registry = BookingRegistry.from_settings(BookingSettings())

        self.assertEqual([name for name, _ in registry.list_all()], ["CR1", "MR1"])
        self.assertEqual(registry.resource_status("CR1").capacity, 10)
        self.assertEqual(registry.resource_status("MR1").capacity, 5)
        self.assertIn("Whiteboard", registry.resource_status("MR1").devices)

    def test_seed_policy_and_kind_policies(self) -> None:
        settings = BookingSettings(
            kind_policies={ResourceKind.ROOM: "exclusive"},
            seed_resources=(
                SeedResource("Boardroom", 12, ResourceKind.ROOM, room_type="conference"),
                SeedResource("Pod", 2, policy="exclusive"),
                SeedResource("Schedule", 1),
            ),
        )
        registry = BookingRegistry.from_settings(settings)

        self.assertEqual(registry.resource_status("Boardroom").policy, "exclusive")
        self.assertEqual(registry.resource_status("Pod").policy, "exclusive")
        self.assertEqual(registry.resource_status("Schedule").policy, "overlap")


if __name__ == "__main__":
    unittest.main()
