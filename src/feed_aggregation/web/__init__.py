"""
Web interface for feed aggregation.
"""

from feed_aggregation.web.app import create_app

__all__ = ["create_app"]
