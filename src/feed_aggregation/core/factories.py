"""
Factory functions for creating core components with proper dependency injection.

All components are built from the config system, so the web layer and tests
can swap in their own configuration or HTTP client in one place.

Usage:
    from feed_aggregation.core.factories import create_aggregator
    from feed_aggregation.core.fetcher import create_http_client

    client = create_http_client()
    aggregator = create_aggregator(client)
    days = aggregator.aggregate(urls)
"""

from typing import Optional

import httpx

from feed_aggregation.config import Config, get_config
from feed_aggregation.core.aggregator import FeedAggregator
from feed_aggregation.core.fetcher import FeedFetcher
from feed_aggregation.core.parser import FeedDocumentParser
from feed_aggregation.core.summarizer import SummaryExtractor


def create_summary_extractor() -> SummaryExtractor:
    """Create a SummaryExtractor instance."""
    return SummaryExtractor()


def create_parser(summary_extractor: Optional[SummaryExtractor] = None) -> FeedDocumentParser:
    """Create a configured FeedDocumentParser instance.

    Args:
        summary_extractor: Override the summary extractor

    Returns:
        Configured FeedDocumentParser instance
    """
    return FeedDocumentParser(summary_extractor=summary_extractor or create_summary_extractor())


def create_fetcher(
    client: httpx.Client,
    config: Optional[Config] = None,
    parser: Optional[FeedDocumentParser] = None,
) -> FeedFetcher:
    """Create a configured FeedFetcher instance.

    Args:
        client: Shared httpx client
        config: Override the global configuration
        parser: Override the feed document parser

    Returns:
        Configured FeedFetcher instance
    """
    config = config or get_config()
    return FeedFetcher(
        client=client,
        parser=parser or create_parser(),
        user_agent=config.fetcher.user_agent,
        accept=config.fetcher.accept,
        max_content_length=config.fetcher.max_content_length,
    )


def create_aggregator(
    client: httpx.Client,
    config: Optional[Config] = None,
) -> FeedAggregator:
    """Create a configured FeedAggregator instance.

    Args:
        client: Shared httpx client
        config: Override the global configuration

    Returns:
        Configured FeedAggregator instance
    """
    config = config or get_config()
    return FeedAggregator(
        fetcher=create_fetcher(client, config=config),
        max_workers=config.fetcher.max_workers,
        tz=config.aggregator.get_tzinfo(),
        highlight_threshold=config.aggregator.highlight_threshold,
        drop_homepage_links=config.aggregator.drop_homepage_links,
    )
