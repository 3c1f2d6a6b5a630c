"""Utility helpers for URLs and timestamps."""

from feed_aggregation.utils.date_utils import parse_date
from feed_aggregation.utils.url_utils import (
    domain,
    make_absolute,
    prefix,
    scheme,
    url_path,
    validate_url,
)

__all__ = [
    "parse_date",
    "scheme",
    "domain",
    "prefix",
    "make_absolute",
    "url_path",
    "validate_url",
]
