from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable

LIGHTS = "Lights"
AIR_CONDITIONER = "Air Conditioner"
PROJECTOR = "Projector"
WHITEBOARD = "Whiteboard"

ROOM_TYPE_DEVICES: dict[str, tuple[str, ...]] = {
    "conference": (LIGHTS, AIR_CONDITIONER, PROJECTOR),
    "meeting": (LIGHTS, AIR_CONDITIONER, WHITEBOARD),
}


@dataclass
class Device:
    name: str
    on: bool = False


class DeviceCommand(str, Enum):
    LIGHTS_ON = "L"
    AC_ON = "A"
    PROJECTOR_ON = "P"


def _turn_on(device: Device) -> None:
    device.on = True


def _turn_off(device: Device) -> None:
    device.on = False


COMMAND_TABLE: dict[DeviceCommand, tuple[str, Callable[[Device], None]]] = {
    DeviceCommand.LIGHTS_ON: (LIGHTS, _turn_on),
    DeviceCommand.AC_ON: (AIR_CONDITIONER, _turn_on),
    DeviceCommand.PROJECTOR_ON: (PROJECTOR, _turn_on),
}


class DeviceSet:
    """Power state of the devices installed in a room."""

    def __init__(self, names: tuple[str, ...] | list[str]) -> None:
        self._devices = {name: Device(name) for name in names}

    @staticmethod
    def for_room_type(room_type: str) -> "DeviceSet":
        names = ROOM_TYPE_DEVICES.get(room_type.strip().lower())
        if names is None:
            raise ValueError(f"Invalid room type: {room_type}")
        return DeviceSet(names)

    def states(self) -> dict[str, bool]:
        return {name: device.on for name, device in self._devices.items()}

    def execute(self, codes: str) -> tuple[list[str], list[str]]:
        """Run single-letter commands; return (devices switched on, unknown codes).

        A code whose device is not installed in this room counts as unknown.
        """
        switched: list[str] = []
        unknown: list[str] = []
        for code in codes.upper():
            if code.isspace():
                continue
            try:
                device_name, action = COMMAND_TABLE[DeviceCommand(code)]
            except ValueError:
                unknown.append(code)
                continue
            device = self._devices.get(device_name)
            if device is None:
                unknown.append(code)
                continue
            action(device)
            switched.append(device_name)
        return switched, unknown

    def set_all(self, on: bool) -> None:
        action = _turn_on if on else _turn_off
        for device in self._devices.values():
            action(device)
