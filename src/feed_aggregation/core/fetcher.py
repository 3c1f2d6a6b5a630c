"""
RSS/Atom feed fetcher.

One GET per feed over a shared, connection-pooled httpx client. The body is
buffered in chunks so an abandoned request can stop early, then handed to the
feed document parser.
"""

import threading
import time
from dataclasses import dataclass, field
from typing import Optional

import httpx

from feed_aggregation.config import FetcherConfig, get_config
from feed_aggregation.core.parser import FeedDocumentParser
from feed_aggregation.exceptions import FetchCancelledError, TransportError
from feed_aggregation.logger import get_logger
from feed_aggregation.models import Feed, Item

logger = get_logger(__name__)


@dataclass
class FetchResult:
    """Result of a feed fetch operation."""

    feed: Feed
    items: list[Item] = field(default_factory=list)
    fetch_time_seconds: float = 0.0
    http_status: Optional[int] = None

    @property
    def entries_count(self) -> int:
        return len(self.items)


def create_http_client(config: Optional[FetcherConfig] = None) -> httpx.Client:
    """Create the shared HTTP client used for all feed fetches.

    Args:
        config: Fetcher configuration (defaults to the global config)

    Returns:
        httpx Client; the caller owns it and must close it
    """
    config = config or get_config().fetcher
    return httpx.Client(
        timeout=config.timeout_seconds,
        follow_redirects=config.follow_redirects,
        max_redirects=config.max_redirects,
    )


class FeedFetcher:
    """Fetches and parses one feed per call."""

    def __init__(
        self,
        client: httpx.Client,
        parser: Optional[FeedDocumentParser] = None,
        user_agent: Optional[str] = None,
        accept: Optional[str] = None,
        max_content_length: Optional[int] = None,
    ):
        """Initialize feed fetcher.

        Args:
            client: Shared httpx client
            parser: Feed document parser
            user_agent: User-Agent header for HTTP requests
            accept: Accept header for HTTP requests
            max_content_length: Largest body accepted, in bytes
        """
        config = get_config()

        self.client = client
        self.parser = parser or FeedDocumentParser()
        self.user_agent = user_agent or config.fetcher.user_agent
        self.accept = accept or config.fetcher.accept
        self.max_content_length = max_content_length or config.fetcher.max_content_length

    def fetch(self, url: str, cancel_event: Optional[threading.Event] = None) -> FetchResult:
        """Fetch and parse a single feed.

        Args:
            url: Feed URL
            cancel_event: Set by the caller once the result is no longer wanted

        Returns:
            FetchResult with the feed and its items

        Raises:
            TransportError: On network errors, HTTP error statuses or oversized bodies
            FeedFormatError: If the body is not a valid feed
            ExtractionError: If a summary cannot be extracted
            FetchCancelledError: If cancel_event was set
        """
        start_time = time.time()

        self._check_cancelled(url, cancel_event)
        logger.debug(f"Fetching feed: {url}")

        http_status, body = self._fetch_http(url, cancel_event)

        self._check_cancelled(url, cancel_event)
        feed, items = self.parser.parse(url, body)

        return FetchResult(
            feed=feed,
            items=items,
            fetch_time_seconds=time.time() - start_time,
            http_status=http_status,
        )

    def _fetch_http(
        self, url: str, cancel_event: Optional[threading.Event] = None
    ) -> tuple[int, bytes]:
        """Fetch URL and buffer its body.

        Args:
            url: URL to fetch
            cancel_event: Checked between body chunks

        Returns:
            Tuple of (status code, body)
        """
        headers = {
            "Accept": self.accept,
            "User-Agent": self.user_agent,
        }

        try:
            with self.client.stream("GET", url, headers=headers) as response:
                response.raise_for_status()

                chunks = []
                received = 0
                for chunk in response.iter_bytes():
                    self._check_cancelled(url, cancel_event)
                    received += len(chunk)
                    if received > self.max_content_length:
                        raise TransportError(
                            f"Response body exceeds {self.max_content_length} bytes"
                        )
                    chunks.append(chunk)

                return response.status_code, b"".join(chunks)

        except httpx.TimeoutException as e:
            raise TransportError(f"Timeout: {e}") from e

        except httpx.HTTPStatusError as e:
            raise TransportError(f"HTTP {e.response.status_code}: {e}") from e

        except httpx.HTTPError as e:
            raise TransportError(f"Request error: {e}") from e

    def _check_cancelled(self, url: str, cancel_event: Optional[threading.Event]) -> None:
        if cancel_event is not None and cancel_event.is_set():
            raise FetchCancelledError(f"Fetch of {url} cancelled")
