"""
Feed Aggregation - merge several RSS/Atom feeds into one daily view.

Feeds are fetched concurrently, merged newest-first, grouped by day,
deduplicated by link and highlighted by source rarity.
"""

__version__ = "0.1.0"
