"""Core business logic modules for feed aggregation.

IMPORTANT: Module Boundary Rules
=================================

External code (web layer, scripts, etc.) MUST ONLY use Service Facades.
Direct import of core module classes is FORBIDDEN.

CORRECT - Use Service Facades:
    from feed_aggregation.core.services import AggregatorService

    service = AggregatorService()
    days = service.aggregate(urls)

WRONG - Direct class import (FORBIDDEN):
    from feed_aggregation.core.fetcher import FeedFetcher  # VIOLATION
    from feed_aggregation.core.aggregator import FeedAggregator  # VIOLATION

Available Services:
    - AggregatorService: Fetch feeds and build the day-by-day digest
"""

# Service Facades (ONLY public interface for external code)
from feed_aggregation.core.services import (
    AggregatorService,
    create_aggregator_service,
    parse_query,
)

# Result types (allowed for type hints and return values)
from feed_aggregation.core.fetcher import FetchResult

__all__ = [
    # Service Facades (USE THESE)
    "AggregatorService",
    # Service factory functions
    "create_aggregator_service",
    "parse_query",
    # Result types (for type hints)
    "FetchResult",
]


# Module boundary enforcement
_forbidden_imports = {
    "FeedFetcher": "Use AggregatorService instead",
    "FeedDocumentParser": "Use AggregatorService instead",
    "SummaryExtractor": "Use AggregatorService instead",
    "FeedAggregator": "Use AggregatorService instead",
}


def __getattr__(name: str):
    """Intercept forbidden imports and provide helpful error messages."""
    if name in _forbidden_imports:
        raise ImportError(
            f"Direct import of '{name}' is forbidden. "
            f"{_forbidden_imports[name]}. "
            f"Use Service Facades from feed_aggregation.core.services instead."
        )
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
