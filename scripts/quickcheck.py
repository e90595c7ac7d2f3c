from __future__ import annotations

import traceback

from resource_booking import (
    BookingError,
    BookingRegistry,
    LoggingObserver,
    interval_between,
    load_settings,
)
from resource_booking.logging_config import configure_logging


def main() -> int:
    print("[INFO] Resource Booking Quick Check")

    settings = load_settings()
    configure_logging(settings.log_level)
    registry = BookingRegistry.from_settings(settings)
    registry.subscribe(LoggingObserver())
    print(f"[OK] Registry seeded with {len(registry)} resources")

    if "Quick Check Room" not in registry:
        registry.add_resource("Quick Check Room", 10)

    first = registry.book("Quick Check Room", interval_between("09:00", "10:00"), "planning", 8)
    print(f"[OK] Booked 09:00~10:00: {first}")

    try:
        registry.book("Quick Check Room", interval_between("09:30", "09:45"), "huddle", 2)
    except BookingError as error:
        print(f"[OK] Overlap rejected: {error}")
    else:
        print("[ERROR] Overlapping booking was accepted.")
        return 1

    second = registry.book("Quick Check Room", interval_between("10:00", "11:00"), "retro", 5)
    print(f"[OK] Booked 10:00~11:00: {second}")

    for name, snapshot in registry.list_all():
        print(f"[OK] {name}: {snapshot.active_count} active, capacity {snapshot.capacity}, policy {snapshot.policy}")

    print("[DONE] Quick check completed successfully.")
    return 0


if __name__ == "__main__":
    try:
        raise SystemExit(main())
    except Exception:
        print("[ERROR] Quick check failed.")
        traceback.print_exc()
        raise SystemExit(1)
