"""
Facade for feed aggregation operations.

Provides unified interface for turning a list of feed URLs into a day-by-day
digest.
"""

from typing import Optional, Union

import httpx

from feed_aggregation.config import Config, get_config
from feed_aggregation.exceptions import InvalidUrlError, NoUrlsError
from feed_aggregation.logger import get_logger
from feed_aggregation.models import DayBucket
from feed_aggregation.utils.url_utils import validate_url


def parse_query(raw_query: Union[str, bytes, None]) -> list[str]:
    """Split a raw query string into feed URLs.

    The query is not parsed as key/value pairs: it is split on ``&`` and every
    segment must be an absolute http(s) URL.

    Args:
        raw_query: Query string as received, without the leading ``?``

    Returns:
        Feed URLs in request order

    Raises:
        NoUrlsError: If the query string is missing or empty
        InvalidUrlError: If a segment is not a valid URL
    """
    if isinstance(raw_query, bytes):
        try:
            raw_query = raw_query.decode("utf-8")
        except UnicodeDecodeError as e:
            raise InvalidUrlError(repr(raw_query), "query string is not valid UTF-8") from e

    if not raw_query:
        raise NoUrlsError()

    urls = raw_query.split("&")
    for url in urls:
        is_valid, error = validate_url(url)
        if not is_valid:
            raise InvalidUrlError(url, error)

    return urls


class AggregatorService:
    """Facade for feed aggregation operations.

    Owns the shared HTTP client unless one is injected.
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        http_client: Optional[httpx.Client] = None,
    ):
        """Initialize aggregator service.

        Args:
            config: Override the global configuration
            http_client: Shared httpx client; created from config when omitted
        """
        from feed_aggregation.core.factories import create_aggregator
        from feed_aggregation.core.fetcher import create_http_client

        self.config = config or get_config()
        self._owns_client = http_client is None
        self._client = http_client or create_http_client(self.config.fetcher)
        self._aggregator = create_aggregator(self._client, config=self.config)
        self._logger = get_logger(__name__)

    def aggregate(self, urls: list[str]) -> list[DayBucket]:
        """Fetch feeds and build the digest.

        Args:
            urls: Feed URLs

        Returns:
            Day buckets, newest first
        """
        self._logger.debug(f"Aggregating {len(urls)} feeds")
        return self._aggregator.aggregate(urls)

    def aggregate_query(self, raw_query: Union[str, bytes, None]) -> list[DayBucket]:
        """Parse a raw query string and build the digest for its feeds.

        Args:
            raw_query: Query string as received

        Returns:
            Day buckets, newest first
        """
        return self.aggregate(parse_query(raw_query))

    def close(self) -> None:
        """Close the HTTP client if this service created it."""
        if self._owns_client:
            self._client.close()


def create_aggregator_service(
    config: Optional[Config] = None,
    http_client: Optional[httpx.Client] = None,
) -> AggregatorService:
    """Create an AggregatorService instance.

    Args:
        config: Override the global configuration
        http_client: Shared httpx client

    Returns:
        Configured AggregatorService
    """
    return AggregatorService(config=config, http_client=http_client)
