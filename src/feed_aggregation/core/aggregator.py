"""
Aggregation pipeline.

Fetches every requested feed concurrently, merges their items into one
timeline and groups it into days for display.
"""

import threading
import time
from collections import Counter
from concurrent.futures import ThreadPoolExecutor, as_completed
from datetime import tzinfo
from typing import Iterable, Optional, Sequence

from feed_aggregation.core.fetcher import FeedFetcher, FetchResult
from feed_aggregation.exceptions import FeedFetchError, NoUrlsError
from feed_aggregation.logger import get_logger
from feed_aggregation.models import DayBucket, DisplayEntry, Feed, Item
from feed_aggregation.utils.url_utils import domain, prefix

logger = get_logger(__name__)

FeedItem = tuple[Feed, Item]

DEFAULT_HIGHLIGHT_THRESHOLD = 3


def merge_results(results: Iterable[FetchResult]) -> list[FeedItem]:
    """Flatten fetch results into (feed, item) pairs, newest first.

    The sort is stable, so items with equal timestamps keep the order in
    which their feeds were merged.
    """
    pairs = [(result.feed, item) for result in results for item in result.items]
    pairs.sort(key=lambda pair: pair[1].timestamp, reverse=True)
    return pairs


def is_homepage_link(feed: Feed, item: Item) -> bool:
    """Check whether an item only links back to its own feed's site."""
    return feed.url.startswith(prefix(item.href))


def build_day_buckets(pairs: Iterable[FeedItem], tz: Optional[tzinfo] = None) -> list[DayBucket]:
    """Group sorted (feed, item) pairs into days.

    Links repeated within a day (ignoring fragments) collapse into one entry;
    the entry keeps its first feed and takes the latest-seen item, which in
    newest-first order is the oldest one.

    Args:
        pairs: (feed, item) pairs sorted newest first
        tz: Timezone for calendar dates (None = local time)

    Returns:
        Day buckets, newest first
    """
    buckets: list[DayBucket] = []
    positions: dict[str, int] = {}

    for feed, item in pairs:
        day = item.timestamp.astimezone(tz).date()
        if not buckets or buckets[-1].date != day:
            buckets.append(DayBucket(date=day))
            positions = {}

        bucket = buckets[-1]
        key = prefix(item.href)
        index = positions.get(key)

        if index is None:
            positions[key] = len(bucket.entries)
            bucket.entries.append(DisplayEntry(feed=feed, item=item))
        else:
            entry = bucket.entries[index]
            entry.item = item
            entry.count += 1

    return buckets


def highlight_entries(bucket: DayBucket, threshold: int = DEFAULT_HIGHLIGHT_THRESHOLD) -> None:
    """Flag entries from domains that are rare within the day.

    An entry is highlighted when its domain has fewer than ``threshold``
    entries and fewer than the day's most frequent domain.
    """
    counts = Counter(domain(entry.item.href) for entry in bucket.entries)
    max_count = max(counts.values(), default=0)

    for entry in bucket.entries:
        count = counts[domain(entry.item.href)]
        entry.highlighted = count < threshold and count < max_count


class FeedAggregator:
    """Fetches a set of feeds and builds the day-by-day digest."""

    def __init__(
        self,
        fetcher: FeedFetcher,
        max_workers: int = 8,
        tz: Optional[tzinfo] = None,
        highlight_threshold: int = DEFAULT_HIGHLIGHT_THRESHOLD,
        drop_homepage_links: bool = True,
    ):
        """Initialize aggregator.

        Args:
            fetcher: Feed fetcher shared by all fetch tasks
            max_workers: Maximum number of concurrent fetches
            tz: Timezone for day bucketing (None = local time)
            highlight_threshold: Domain count below which entries may be highlighted
            drop_homepage_links: Drop items linking back to their feed's homepage
        """
        self.fetcher = fetcher
        self.max_workers = max_workers
        self.tz = tz
        self.highlight_threshold = highlight_threshold
        self.drop_homepage_links = drop_homepage_links

    def aggregate(self, urls: Sequence[str]) -> list[DayBucket]:
        """Fetch all feeds and build the digest.

        Args:
            urls: Feed URLs

        Returns:
            Day buckets, newest first

        Raises:
            NoUrlsError: If urls is empty
            FeedFetchError: If any feed fails; the cause is the original error
        """
        start_time = time.time()

        results = self.fetch_all(urls)
        pairs = merge_results(results)

        if self.drop_homepage_links:
            kept = [(feed, item) for feed, item in pairs if not is_homepage_link(feed, item)]
            if len(kept) != len(pairs):
                logger.debug(f"Dropped {len(pairs) - len(kept)} homepage links")
            pairs = kept

        buckets = build_day_buckets(pairs, tz=self.tz)
        for bucket in buckets:
            highlight_entries(bucket, threshold=self.highlight_threshold)

        slowest = max(result.fetch_time_seconds for result in results)
        logger.info(
            f"Aggregated {len(pairs)} of {sum(r.entries_count for r in results)} items "
            f"from {len(results)} feeds into {len(buckets)} days in "
            f"{time.time() - start_time:.2f}s (slowest fetch {slowest:.2f}s)"
        )

        return buckets

    def fetch_all(self, urls: Sequence[str]) -> list[FetchResult]:
        """Fetch all feeds concurrently.

        Results are returned in completion order. The first failure aborts the
        whole batch: queued fetches are cancelled and running ones stop at
        their next checkpoint.

        Args:
            urls: Feed URLs

        Returns:
            List of FetchResult instances
        """
        if not urls:
            raise NoUrlsError()

        cancel_event = threading.Event()
        executor = ThreadPoolExecutor(
            max_workers=min(self.max_workers, len(urls)),
            thread_name_prefix="feed-fetch",
        )

        try:
            futures = {
                executor.submit(self.fetcher.fetch, url, cancel_event): url for url in urls
            }

            results = []
            for future in as_completed(futures):
                url = futures[future]
                try:
                    result = future.result()
                except Exception as e:
                    logger.warning(f"Failed to fetch feed {url}: {e}")
                    raise FeedFetchError(url) from e

                logger.debug(
                    f"Fetched {result.entries_count} entries from {result.feed.title} ({url}): "
                    f"HTTP {result.http_status} in {result.fetch_time_seconds:.2f}s"
                )
                results.append(result)

            return results

        finally:
            cancel_event.set()
            executor.shutdown(wait=False, cancel_futures=True)
