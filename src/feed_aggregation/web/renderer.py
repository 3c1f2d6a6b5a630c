"""
HTML rendering of the aggregated digest.
"""

import secrets

from flask import render_template

from feed_aggregation.models import DayBucket


def generate_nonce() -> str:
    """Generate a fresh Content-Security-Policy nonce."""
    return secrets.token_urlsafe(16)


def render_digest(days: list[DayBucket]) -> str:
    """Render day buckets as an HTML page.

    Each response gets its own nonce, shared by the CSP meta tag and the
    inline stylesheet, so inline styles are allowed and inline scripts are not.

    Args:
        days: Day buckets, newest first

    Returns:
        HTML document
    """
    return render_template("index.html", days=days, nonce=generate_nonce())
