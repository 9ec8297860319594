"""Shared utilities for the Ambambo Kili catalog."""

import logging
import re
from datetime import datetime, timezone

logger = logging.getLogger(__name__)

_NON_ALNUM_RE = re.compile(r'[^a-z0-9]+')

# Matches: PT3M25S, PT1H2M, PT45S, PT2H
_ISO_DURATION_RE = re.compile(r'PT(?:(\d+)H)?(?:(\d+)M)?(?:(\d+)S)?')


def slugify(text) -> str:
    """Map a display string to a URL-safe identifier.

    "Lullabies & Sleep" -> "lullabies-and-sleep"
    """
    slug = str(text).lower().replace("&", "and")
    slug = _NON_ALNUM_RE.sub("-", slug)
    return slug.strip("-")


def category_slug_collisions(names) -> dict[str, list[str]]:
    """Group category names that slugify to the same identifier.

    Only slugs shared by two or more distinct names are returned.
    """
    groups: dict[str, list[str]] = {}
    for name in names:
        bucket = groups.setdefault(slugify(name), [])
        if name not in bucket:
            bucket.append(name)
    return {slug: names for slug, names in groups.items() if len(names) > 1}


def parse_published(value) -> datetime:
    """Parse an ISO-8601 date or date-time into an aware datetime.

    Accepts a trailing "Z"; naive values are taken as UTC.
    Raises ValueError on anything else.
    """
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, str) and value.strip():
        raw = value.strip()
        if raw.endswith(("Z", "z")):
            raw = raw[:-1] + "+00:00"
        dt = datetime.fromisoformat(raw)
    else:
        raise ValueError(f"Invalid published value: {value!r}")
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def format_duration(iso_duration) -> str:
    """Format an ISO-8601 duration like "PT1H2M15S" as "1h 2m 15s".

    Returns "" when the value is missing or not a PT duration.
    """
    if not iso_duration:
        return ""
    m = _ISO_DURATION_RE.search(str(iso_duration))
    if not m:
        return ""
    hours, minutes, seconds = m.groups()
    parts = []
    if hours:
        parts.append(f"{hours}h")
    if minutes:
        parts.append(f"{minutes}m")
    if seconds:
        parts.append(f"{seconds}s")
    return " ".join(parts)


def format_date(value) -> str:
    """Format a published date for display: "5 May 2024"."""
    try:
        dt = parse_published(value)
    except ValueError:
        logger.debug("Unformattable date %r", value)
        return ""
    return f"{dt.day} {dt.strftime('%b %Y')}"
