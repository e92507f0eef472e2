"""Write-time normalization and validation of event records.

``normalize_event`` is called explicitly before every event write. It either
returns the canonical field values or raises ``ValidationError``; nothing is
persisted here.
"""

import re
import unicodedata
from dataclasses import asdict, dataclass
from typing import Any, Mapping, Protocol

from dateutil import parser as date_parser

from devevent.core.errors import ValidationError

REQUIRED_STRING_FIELDS = (
    "title",
    "description",
    "overview",
    "image",
    "venue",
    "location",
    "date",
    "time",
    "mode",
    "audience",
    "organizer",
)
REQUIRED_LIST_FIELDS = ("agenda", "tags")

ISO_DATE_PREFIX = re.compile(r"^(\d{4}-\d{2}-\d{2})")
TWENTY_FOUR_HOUR = re.compile(r"^([01]?\d|2[0-3]):([0-5]\d)$")
TWELVE_HOUR = re.compile(r"^(\d{1,2})(?::([0-5]\d))?\s*(am|pm)$", re.IGNORECASE)
COMBINING_MARKS = re.compile(r"[\u0300-\u036f]")
NON_SLUG_CHARS = re.compile(r"[^a-z0-9]+")


class StoredEvent(Protocol):
    title: str
    slug: str | None


@dataclass(frozen=True)
class NormalizedEvent:
    title: str
    slug: str
    description: str
    overview: str
    image: str
    venue: str
    location: str
    date: str
    time: str
    mode: str
    audience: str
    organizer: str
    agenda: list[str]
    tags: list[str]

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


def is_non_empty_string(value: Any) -> bool:
    return isinstance(value, str) and value.strip() != ""


def slugify(title: str) -> str:
    """Lowercase, hyphen-separated, ASCII-only form of ``title``."""
    slug = unicodedata.normalize("NFKD", title.strip().lower())
    slug = COMBINING_MARKS.sub("", slug)
    slug = NON_SLUG_CHARS.sub("-", slug)
    return slug.strip("-")


def normalize_date(value: str) -> str:
    """Return ``value`` as ``YYYY-MM-DD``.

    An ISO date prefix is kept verbatim. Anything else is parsed and rebuilt
    from its own calendar fields, so an offset in the input never moves the day.
    """
    trimmed = value.strip()
    match = ISO_DATE_PREFIX.match(trimmed)
    if match:
        return match.group(1)

    try:
        parsed = date_parser.parse(trimmed)
    except (ValueError, OverflowError) as e:
        raise ValidationError(f"Invalid date: {value}", field="date") from e

    return f"{parsed.year:04d}-{parsed.month:02d}-{parsed.day:02d}"


def normalize_time(value: str) -> str:
    """Return ``value`` as 24-hour ``HH:mm``; accepts ``H:mm`` or ``h[:mm] am|pm``."""
    raw = value.strip()

    match = TWENTY_FOUR_HOUR.match(raw)
    if match:
        return f"{int(match.group(1)):02d}:{match.group(2)}"

    match = TWELVE_HOUR.match(raw)
    if not match:
        raise ValidationError(f"Invalid time: {value}", field="time")

    hours = int(match.group(1))
    minutes = int(match.group(2) or "00")
    period = match.group(3).lower()

    if not 1 <= hours <= 12:
        raise ValidationError(f"Invalid time: {value}", field="time")

    if period == "pm" and hours != 12:
        hours += 12
    if period == "am" and hours == 12:
        hours = 0

    return f"{hours:02d}:{minutes:02d}"


def _require_strings(candidate: Mapping[str, Any]) -> dict[str, str]:
    values = {}
    for field in REQUIRED_STRING_FIELDS:
        value = candidate.get(field)
        if not is_non_empty_string(value):
            raise ValidationError(f"{field} is required", field=field)
        values[field] = value.strip()
    return values


def _require_list(candidate: Mapping[str, Any], field: str) -> list[str]:
    items = candidate.get(field)
    if (
        not isinstance(items, (list, tuple))
        or not items
        or not all(is_non_empty_string(item) for item in items)
    ):
        raise ValidationError(
            f"{field} must be a non-empty array of strings", field=field
        )
    return [item.strip() for item in items]


def resolve_slug(title: str, existing: StoredEvent | None = None) -> str:
    if existing is not None and existing.slug and existing.title == title:
        return existing.slug

    slug = slugify(title)
    if not slug:
        raise ValidationError(
            f"title must contain at least one letter or digit: {title}", field="title"
        )
    return slug


def normalize_event(
    candidate: Mapping[str, Any], existing: StoredEvent | None = None
) -> NormalizedEvent:
    """Validate ``candidate`` and return its canonical stored form.

    Args:
        candidate: Raw event fields, ``agenda`` and ``tags`` as lists of strings.
        existing: The stored event being updated, if any. Its slug is kept
            unless the title changed.

    Raises:
        ValidationError: On a missing field, an empty list, or an
            unparseable date or time.
    """
    values = _require_strings(candidate)
    lists = {field: _require_list(candidate, field) for field in REQUIRED_LIST_FIELDS}

    slug = resolve_slug(values["title"], existing)
    values["date"] = normalize_date(values["date"])
    values["time"] = normalize_time(values["time"])

    return NormalizedEvent(slug=slug, **values, **lists)
