"""
Feed document parser.

Turns a fetched RSS/Atom body into a Feed and its Items. Document parsing is
done by feedparser; this module validates the fields every item needs and
normalizes timestamps, links and summaries.
"""

from typing import Optional

import feedparser

from feed_aggregation.core.summarizer import SummaryExtractor
from feed_aggregation.exceptions import (
    FeedFormatError,
    MissingFeedTitleError,
    MissingLinkError,
    MissingTimestampError,
    MissingTitleError,
)
from feed_aggregation.logger import get_logger
from feed_aggregation.models import ContentKind, Feed, Item, RawContent, RawText
from feed_aggregation.utils.date_utils import parse_date
from feed_aggregation.utils.url_utils import make_absolute

logger = get_logger(__name__)


class FeedDocumentParser:
    """Parser for RSS/Atom documents."""

    def __init__(self, summary_extractor: Optional[SummaryExtractor] = None):
        """Initialize feed document parser.

        Args:
            summary_extractor: Extractor used for item summaries
        """
        self.summary_extractor = summary_extractor or SummaryExtractor()

    def parse(self, feed_url: str, body: bytes) -> tuple[Feed, list[Item]]:
        """Parse a feed body.

        A single invalid entry rejects the whole feed.

        Args:
            feed_url: URL the body was fetched from
            body: Raw response body

        Returns:
            Tuple of (feed, items in document order)

        Raises:
            FeedFormatError: If the body is not a feed or lacks required fields
            ExtractionError: If summary markup is not valid UTF-8
        """
        parsed = feedparser.parse(body)

        if not parsed.get("version"):
            raise FeedFormatError("Body is not an RSS or Atom document") from parsed.get(
                "bozo_exception"
            )

        feed = self.parse_feed_info(feed_url, parsed.feed)
        items = [self.parse_entry(feed_url, entry) for entry in parsed.entries]

        logger.debug(f"Parsed feed: {feed}")
        logger.debug(f"First entry: {items[0] if items else None}")

        return feed, items

    def parse_feed_info(self, feed_url: str, raw_feed: dict) -> Feed:
        """Build the Feed from feed-level metadata.

        Args:
            feed_url: URL the feed was fetched from
            raw_feed: ``feed`` dictionary from feedparser

        Returns:
            Feed instance
        """
        title = raw_feed.get("title")
        if title is None:
            raise MissingFeedTitleError()

        return Feed(url=feed_url, title=title, logo_url=self._logo_url(raw_feed))

    def parse_entry(self, feed_url: str, raw_entry: dict) -> Item:
        """Build an Item from a feed entry.

        Args:
            feed_url: URL the feed was fetched from; base for relative links
            raw_entry: Entry dictionary from feedparser

        Returns:
            Item with absolute links
        """
        timestamp = parse_date(raw_entry.get("published")) or parse_date(raw_entry.get("updated"))
        if timestamp is None:
            raise MissingTimestampError()

        href = self._first_link(raw_entry)
        if href is None:
            raise MissingLinkError()

        title = raw_entry.get("title")
        if title is None:
            raise MissingTitleError()

        thumbnail_url = self._first_thumbnail(raw_entry)

        summary = self.summary_extractor.extract(
            href,
            raw_summary=self._raw_summary(raw_entry),
            raw_content=self._raw_content(raw_entry),
        )

        return Item(
            timestamp=timestamp,
            href=make_absolute(feed_url, href),
            title=title,
            thumbnail_url=make_absolute(feed_url, thumbnail_url) if thumbnail_url else None,
            summary=summary,
        )

    def _logo_url(self, raw_feed: dict) -> Optional[str]:
        # RSS <image><url> and itunes:image land in "image", Atom <logo> in "logo"
        image = raw_feed.get("image")
        if image and image.get("href"):
            return image["href"]
        return raw_feed.get("logo") or None

    def _first_link(self, raw_entry: dict) -> Optional[str]:
        links = [link for link in raw_entry.get("links") or [] if link.get("href")]
        for link in links:
            if link.get("rel") != "enclosure":
                return link["href"]

        # RSS items may only carry a permalink guid
        if raw_entry.get("link"):
            return raw_entry["link"]

        # An Atom entry whose only link is an enclosure
        return links[0]["href"] if links else None

    def _first_thumbnail(self, raw_entry: dict) -> Optional[str]:
        thumbnails = raw_entry.get("media_thumbnail") or []
        if not thumbnails:
            return None
        return thumbnails[0].get("url") or None

    def _raw_summary(self, raw_entry: dict) -> Optional[RawText]:
        # feedparser copies content into "summary" without a summary_detail;
        # only a real summary element has one.
        detail = raw_entry.get("summary_detail")
        if detail is None:
            return None
        return RawText(
            kind=ContentKind.from_mime_type(detail.get("type")),
            text=detail.get("value") or "",
        )

    def _raw_content(self, raw_entry: dict) -> Optional[RawContent]:
        contents = raw_entry.get("content") or []
        if not contents:
            return None
        content = contents[0]
        return RawContent(
            kind=ContentKind.from_mime_type(content.get("type")),
            body=content.get("value") or None,
        )
