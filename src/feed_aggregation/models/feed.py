"""
Feed and item models produced by the fetcher.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


@dataclass(frozen=True)
class Feed:
    """One syndication source.

    ``url`` is the URL the feed was requested from. It is used in error
    messages and as the base for resolving relative item links.
    """

    url: str
    title: str
    logo_url: Optional[str] = None


@dataclass(frozen=True)
class Item:
    """One entry of a feed.

    ``href`` and ``thumbnail_url`` are always absolute.
    """

    timestamp: datetime
    href: str
    title: str
    thumbnail_url: Optional[str] = None
    summary: Optional[str] = None


class ContentKind(Enum):
    """Kind of markup carried by a summary or content element."""

    PLAIN = "plain"
    HTML = "html"

    @classmethod
    def from_mime_type(cls, mime_type: Optional[str]) -> "ContentKind":
        """Map a MIME type to a content kind.

        HTML and XHTML are treated as markup; everything else is plain text.
        """
        essence = (mime_type or "").split(";", 1)[0].strip().lower()
        if essence in ("text/html", "application/xhtml+xml"):
            return cls.HTML
        return cls.PLAIN


@dataclass(frozen=True)
class RawText:
    """An entry's summary as found in the feed."""

    kind: ContentKind
    text: str


@dataclass(frozen=True)
class RawContent:
    """An entry's content as found in the feed; the body may be absent."""

    kind: ContentKind
    body: Optional[str] = None
