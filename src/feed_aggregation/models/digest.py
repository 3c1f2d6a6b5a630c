"""
Day-bucketed view models built by the aggregation pipeline.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from feed_aggregation.models.feed import Feed, Item


@dataclass
class DisplayEntry:
    """An item as displayed within one day.

    ``count`` is the number of raw items that collapsed into this entry. Each
    collapse replaces ``item``, so it holds the oldest occurrence of the link
    that day.
    """

    feed: Feed
    item: Item
    count: int = 1
    highlighted: bool = False

    @property
    def thumbnail_url(self) -> Optional[str]:
        """Item thumbnail, falling back to the feed's logo."""
        return self.item.thumbnail_url or self.feed.logo_url


@dataclass
class DayBucket:
    """All entries for one calendar date, in first-seen order."""

    date: date
    entries: list[DisplayEntry] = field(default_factory=list)
