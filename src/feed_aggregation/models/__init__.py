"""Data models for feed aggregation."""

from feed_aggregation.models.digest import DayBucket, DisplayEntry
from feed_aggregation.models.feed import ContentKind, Feed, Item, RawContent, RawText

__all__ = [
    "Feed",
    "Item",
    "ContentKind",
    "RawText",
    "RawContent",
    "DayBucket",
    "DisplayEntry",
]
