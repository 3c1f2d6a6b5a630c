"""
Facade services for core modules.

External code (web layer, scripts) should ONLY interact with these services,
not with the fetcher, parser or aggregator classes directly.

Example:
    # Correct - Use service facade
    from feed_aggregation.core.services import AggregatorService

    service = AggregatorService()
    days = service.aggregate_query("https://a.example/feed.xml&https://b.example/feed.xml")

    # Wrong - Direct import (forbidden)
    from feed_aggregation.core.aggregator import FeedAggregator  # VIOLATION
"""

from feed_aggregation.core.services.aggregator_service import (
    AggregatorService,
    create_aggregator_service,
    parse_query,
)

__all__ = [
    # Services
    "AggregatorService",
    # Factory functions
    "create_aggregator_service",
    # Helpers
    "parse_query",
]
