"""
String-level URL helpers.

These deliberately avoid full URI resolution: relative links resolve against
the root of the base URL's domain, which is what the supported feeds expect.
"""

from typing import Optional
from urllib.parse import urlparse

DEFAULT_SCHEME = "https"


def scheme(url: str) -> str:
    """Return the text before ``://``, or ``https`` if there is none."""
    head, sep, _ = url.partition("://")
    return head if sep else DEFAULT_SCHEME


def domain(url: str) -> str:
    """Return the host part of ``url``.

    Examples:
        >>> domain("https://example.com/foo/bar")
        'example.com'
        >>> domain("example.com")
        'example.com'
    """
    _, sep, rest = url.partition("://")
    if not sep:
        return url
    return rest.split("/", 1)[0]


def prefix(url: str) -> str:
    """Return ``url`` without its fragment (everything from the first ``#``)."""
    return url.split("#", 1)[0]


def make_absolute(base: str, url: str) -> str:
    """Resolve ``url`` against the scheme and domain of ``base``.

    Absolute URLs are returned unchanged. The path of ``base`` is ignored, so
    ``foo`` and ``/foo`` both resolve to ``{scheme}://{domain}/foo``.
    """
    if "://" in url:
        return url
    return f"{scheme(base)}://{domain(base)}/{url.lstrip('/')}"


def url_path(url: str) -> Optional[str]:
    """Return the path and beyond of an http(s) URL.

    Returns None for other schemes and for URLs without a path.
    """
    for known_scheme in ("http://", "https://"):
        if url.startswith(known_scheme):
            rest = url[len(known_scheme):]
            slash = rest.find("/")
            if slash < 0:
                return None
            return rest[slash:]
    return None


def validate_url(url: str) -> tuple[bool, Optional[str]]:
    """Validate a feed URL.

    Args:
        url: URL to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not url or any(c.isspace() for c in url):
        return False, "Invalid URL format"

    try:
        result = urlparse(url)
    except ValueError as e:
        return False, f"Validation error: {e}"

    if not result.scheme or not result.netloc:
        return False, "Invalid URL format"

    if result.scheme not in ("http", "https"):
        return False, f"Unsupported scheme: {result.scheme}"

    return True, None
