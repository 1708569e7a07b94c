"""Per-record audit trails stored as JSON string lists on models."""

from typing import List, Optional

from django.utils import timezone

TIMESTAMP_FORMAT = '%Y-%m-%d %H:%M:%S'


def stamp(text: str, when=None) -> str:
    """Prefix ``text`` with a bracketed timestamp."""
    when = when or timezone.now()
    return f"[{when.strftime(TIMESTAMP_FORMAT)}] {text}"


def append_line(lines: Optional[List[str]], text: str, limit: Optional[int] = None) -> List[str]:
    """
    Append a stamped line to a trail, trimming the oldest lines past ``limit``.

    Returns the (possibly new) list so callers can assign it back to the field.
    """
    lines = list(lines or [])
    lines.append(stamp(text))
    if limit is not None and len(lines) > limit:
        lines = lines[-limit:]
    return lines


def recent_lines(lines: Optional[List[str]], count: int = 3) -> List[str]:
    if count <= 0:
        return []
    return list(lines or [])[-count:]
