import re
from dataclasses import dataclass

from .booking import Interval

_CLOCK_RE = re.compile(r"^(?P<hour>[01]?\d|2[0-3]):(?P<minute>[0-5]\d)$")
_TIME_RE = re.compile(r"(?<!\d)(?P<time>(?:[01]?\d|2[0-3]):[0-5]\d)(?!\d)")
_RANGE_RE = re.compile(r"(?P<start>\d{1,2}:\d{2})\s*(?:~|-|to)\s*(?P<end>\d{1,2}:\d{2})")
_DURATION_RE = re.compile(r"for\s+(?P<minutes>\d+)\s*(?:min(?:ute)?s?|m)\b", re.IGNORECASE)
_ATTENDEES_RE = re.compile(r"(?P<count>\d+)\s*(?:attendees?|people|persons?|pax)\b", re.IGNORECASE)
_RESOURCE_CLEAN_RE = re.compile(r"\b(?:book|reserve|please|with|at|from)\b", re.IGNORECASE)


@dataclass(frozen=True)
class ParsedBookingRequest:
    resource: str | None
    interval: Interval
    attendee_count: int
    raw_text: str


def parse_clock(text: str) -> int:
    """Convert ``HH:MM`` 24-hour text to minutes since midnight."""
    match = _CLOCK_RE.match(text.strip())
    if not match:
        raise ValueError(f"Invalid time {text!r}. Expected format: HH:MM")
    return int(match.group("hour")) * 60 + int(match.group("minute"))


def format_clock(minutes: int) -> str:
    if minutes < 0 or minutes > 24 * 60:
        raise ValueError("minutes must be within a single day")
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def interval_from_clock(start_text: str, duration_minutes: int) -> Interval:
    return Interval.from_duration(parse_clock(start_text), duration_minutes)


def interval_between(start_text: str, end_text: str) -> Interval:
    start = parse_clock(start_text)
    end = 24 * 60 if end_text.strip() == "24:00" else parse_clock(end_text)
    if start >= end:
        raise ValueError("start time must be earlier than end time")
    return Interval(start, end)


def _extract_resource(text: str, fragments: list[str]) -> str | None:
    candidate = text
    for fragment in fragments:
        if fragment:
            candidate = candidate.replace(fragment, " ")
    candidate = _RESOURCE_CLEAN_RE.sub(" ", candidate)
    candidate = re.sub(r"\s+", " ", candidate).strip()
    return candidate or None


def parse_booking_request(text: str) -> ParsedBookingRequest:
    """Parse requests like ``CR1 09:00~10:00 8 attendees`` or ``CR1 09:00 for 60 min 8 people``."""
    if not text or not text.strip():
        raise ValueError("text must not be empty")

    attendees_match = _ATTENDEES_RE.search(text)
    attendee_count = int(attendees_match.group("count")) if attendees_match else 0

    range_match = _RANGE_RE.search(text)
    if range_match:
        interval = interval_between(range_match.group("start"), range_match.group("end"))
        fragments = [range_match.group(0)]
    else:
        time_match = _TIME_RE.search(text)
        duration_match = _DURATION_RE.search(text)
        if not (time_match and duration_match):
            raise ValueError("Could not find a time range in text. Expected 'HH:MM~HH:MM' or 'HH:MM for N min'")
        interval = interval_from_clock(time_match.group("time"), int(duration_match.group("minutes")))
        fragments = [time_match.group(0), duration_match.group(0)]

    if attendees_match:
        fragments.append(attendees_match.group(0))

    resource = _extract_resource(text, fragments)
    return ParsedBookingRequest(resource=resource, interval=interval, attendee_count=attendee_count, raw_text=text)
