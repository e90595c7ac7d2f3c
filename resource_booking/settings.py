"""Runtime configuration for the booking registry.

Settings come from a YAML file (explicit path, else the file named by
``RESOURCE_BOOKING_CONFIG``) layered over built-in defaults.
``RESOURCE_BOOKING_LOG_LEVEL`` overrides the configured log level.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping
import os

import yaml

from .booking import get_policy
from .resources import ResourceKind

CONFIG_ENV = "RESOURCE_BOOKING_CONFIG"
LOG_LEVEL_ENV = "RESOURCE_BOOKING_LOG_LEVEL"


class ConfigurationError(RuntimeError):
    pass


@dataclass(frozen=True)
class SeedResource:
    name: str
    capacity: int
    kind: ResourceKind = ResourceKind.GENERIC
    room_type: str | None = None
    policy: str | None = None


DEFAULT_SEED = (
    SeedResource("CR1", 10, ResourceKind.ROOM, room_type="conference"),
    SeedResource("MR1", 5, ResourceKind.ROOM, room_type="meeting"),
)


@dataclass(frozen=True)
class BookingSettings:
    """Immutable snapshot of registry configuration."""

    default_policy: str = "overlap"
    kind_policies: dict[ResourceKind, str] = field(default_factory=dict)
    seed_resources: tuple[SeedResource, ...] = DEFAULT_SEED
    event_log_path: Path | None = None
    log_level: str = "INFO"


def load_settings(path: str | Path | None = None, env: Mapping[str, str] | None = None) -> BookingSettings:
    """Load settings from YAML and the environment, falling back to defaults."""
    if env is None:
        env = os.environ

    config_path = path or env.get(CONFIG_ENV)
    raw: dict[str, Any] = {}
    if config_path:
        raw = _read_config(Path(config_path))

    settings = _build_settings(raw)
    log_level = env.get(LOG_LEVEL_ENV)
    if log_level:
        settings = BookingSettings(
            default_policy=settings.default_policy,
            kind_policies=settings.kind_policies,
            seed_resources=settings.seed_resources,
            event_log_path=settings.event_log_path,
            log_level=log_level.strip().upper(),
        )
    return settings


def _read_config(path: Path) -> dict[str, Any]:
    try:
        payload = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as error:
        raise ConfigurationError(f"Failed to read config file: {path}") from error
    except yaml.YAMLError as error:
        raise ConfigurationError(f"Invalid YAML in config file: {path}") from error

    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ConfigurationError("top-level config YAML must be a mapping")
    return payload


def _build_settings(raw: dict[str, Any]) -> BookingSettings:
    try:
        default_policy = str(raw.get("default_policy", "overlap"))
        get_policy(default_policy)

        kind_policies: dict[ResourceKind, str] = {}
        for kind_name, policy_name in (raw.get("kind_policies") or {}).items():
            get_policy(str(policy_name))
            kind_policies[ResourceKind(str(kind_name).upper())] = str(policy_name)

        if "seed_resources" in raw:
            seed = tuple(_parse_seed(row) for row in raw["seed_resources"] or [])
        else:
            seed = DEFAULT_SEED

        event_log = raw.get("event_log_path")
        return BookingSettings(
            default_policy=default_policy,
            kind_policies=kind_policies,
            seed_resources=seed,
            event_log_path=Path(event_log) if event_log else None,
            log_level=str(raw.get("log_level", "INFO")).upper(),
        )
    except (KeyError, TypeError, ValueError, AttributeError) as error:
        raise ConfigurationError(f"Invalid booking configuration: {error}") from error


def _parse_seed(row: Any) -> SeedResource:
    if not isinstance(row, dict):
        raise TypeError("seed resource entries must be mappings")
    capacity = int(row["capacity"])
    if capacity < 0:
        raise ValueError("capacity must not be negative")
    room_type = row.get("room_type")
    policy = row.get("policy")
    if policy is not None:
        get_policy(str(policy))
    return SeedResource(
        name=str(row["name"]),
        capacity=capacity,
        kind=ResourceKind(str(row.get("kind", "ROOM" if room_type else "GENERIC")).upper()),
        room_type=str(room_type) if room_type else None,
        policy=str(policy) if policy is not None else None,
    )
