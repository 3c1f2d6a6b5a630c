"""
Lenient timestamp parsing for feed dates.
"""

import re
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Optional

from feed_aggregation.logger import get_logger

logger = get_logger(__name__)

_ZULU_TOKENS = re.compile(r"\b(?:GMT|UTC)\b")
_LEADING_WEEKDAY = re.compile(r"^(?:Mon|Tue|Wed|Thu|Fri|Sat|Sun), ")
_RFC3339 = re.compile(
    r"^(?P<date>\d{4}-\d{2}-\d{2})[Tt ](?P<time>\d{2}:\d{2}:\d{2})"
    r"(?:\.(?P<fraction>\d+))?"
    r"(?P<offset>[Zz]|[+-]\d{2}:\d{2})$"
)

# 01 August 2025 07:00:00 +0000 (from "Fri, 01 August 2025 07:00:00 GMT")
FULL_MONTH_FORMAT = "%d %B %Y %H:%M:%S %z"

# 2025-08-26 21:29:20 +0000 (from "2025-08-26 21:29:20 UTC", as GitHub emits)
SPACED_ISO_FORMAT = "%Y-%m-%d %H:%M:%S %z"


def _preprocess(raw: str) -> str:
    text = _ZULU_TOKENS.sub("+0000", raw.strip())
    return _LEADING_WEEKDAY.sub("", text)


def _parse_rfc3339(text: str) -> datetime:
    match = _RFC3339.match(text)
    if not match:
        raise ValueError(f"not an RFC 3339 timestamp: {text!r}")

    offset = match.group("offset")
    if offset in ("Z", "z"):
        offset = "+00:00"

    fraction = match.group("fraction")
    # fromisoformat only accepts 3 or 6 fractional digits on older interpreters
    fraction = f".{fraction[:6].ljust(6, '0')}" if fraction else ""

    return datetime.fromisoformat(f"{match.group('date')}T{match.group('time')}{fraction}{offset}")


def _parse_rfc2822(text: str) -> datetime:
    parsed = parsedate_to_datetime(text)
    if parsed is None:
        raise ValueError(f"not an RFC 2822 timestamp: {text!r}")
    if parsed.tzinfo is None:
        # "-0000" means UTC with unknown local offset
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _parse_full_month(text: str) -> datetime:
    return datetime.strptime(text, FULL_MONTH_FORMAT)


def _parse_spaced_iso(text: str) -> datetime:
    return datetime.strptime(text, SPACED_ISO_FORMAT)


_PARSERS = (
    _parse_rfc3339,
    _parse_rfc2822,
    _parse_full_month,
    _parse_spaced_iso,
)


def parse_date(raw: Optional[str]) -> Optional[datetime]:
    """Parse a feed timestamp into an aware UTC datetime.

    ``GMT``/``UTC`` are rewritten to ``+0000`` and a leading ``Day, `` is
    dropped, then RFC 3339, RFC 2822, ``DD Month YYYY HH:MM:SS +HHMM`` and
    ``YYYY-MM-DD HH:MM:SS +HHMM`` are tried in that order.

    Args:
        raw: Timestamp text as found in the feed

    Returns:
        UTC datetime, or None if no format matched
    """
    if raw is None:
        return None

    text = _preprocess(raw)

    for parser in _PARSERS:
        try:
            parsed = parser(text)
        except (ValueError, TypeError, IndexError):
            continue
        return parsed.astimezone(timezone.utc)

    logger.debug(f"Failed to parse date: {raw!r} -> {text!r}")
    return None
