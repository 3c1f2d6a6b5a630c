"""
Exception hierarchy for feed aggregation.

Every failure aborts the whole aggregation and is reported at the request
boundary. Wrapped causes are chained with ``raise ... from ...`` so the
response can list them.
"""

from typing import Optional


class AggregationError(Exception):
    """Base exception for aggregation failures."""

    status_code = 500


class InputError(AggregationError):
    """Raised when the request does not describe a valid list of feeds."""

    status_code = 400


class NoUrlsError(InputError):
    """Raised when no feed URLs were provided."""

    def __init__(self, message: str = "No URLs provided in query string"):
        super().__init__(message)


class InvalidUrlError(InputError):
    """Raised when a query segment is not an absolute http(s) URL."""

    def __init__(self, url: str, reason: str):
        super().__init__(f"Invalid URL {url!r}: {reason}")
        self.url = url
        self.reason = reason


class TransportError(AggregationError):
    """Raised when a feed source cannot be reached or its body read."""

    status_code = 502


class FeedFormatError(AggregationError):
    """Raised when a body is not a feed document or lacks a required field."""

    status_code = 502


class MissingFeedTitleError(FeedFormatError):
    """Raised when the feed has no title."""

    def __init__(self, message: str = "Missing feed title"):
        super().__init__(message)


class MissingTimestampError(FeedFormatError):
    """Raised when an entry has neither a published nor an updated timestamp."""

    def __init__(self, message: str = "Missing timestamp"):
        super().__init__(message)


class MissingLinkError(FeedFormatError):
    """Raised when an entry has no link."""

    def __init__(self, message: str = "Missing link"):
        super().__init__(message)


class MissingTitleError(FeedFormatError):
    """Raised when an entry has no title."""

    def __init__(self, message: str = "Missing title"):
        super().__init__(message)


class ExtractionError(AggregationError):
    """Raised when summary markup is not valid UTF-8 or cannot be tokenized."""

    status_code = 502


class FetchCancelledError(AggregationError):
    """Raised inside a fetch task once its request has been abandoned."""


class FeedFetchError(AggregationError):
    """A feed-level failure, annotated with the feed's URL.

    The underlying error is available as ``__cause__``.
    """

    def __init__(self, url: str, message: Optional[str] = None):
        super().__init__(message or f"Failed to fetch feed {url}")
        self.url = url

    @property
    def status_code(self) -> int:
        cause = self.__cause__
        if isinstance(cause, AggregationError):
            return cause.status_code
        return 500


def error_chain(exc: BaseException) -> list[BaseException]:
    """Return ``exc`` followed by its explicit causes, innermost last."""
    chain = [exc]
    seen = {id(exc)}
    cause = exc.__cause__
    while cause is not None and id(cause) not in seen:
        chain.append(cause)
        seen.add(id(cause))
        cause = cause.__cause__
    return chain


def format_error_chain(exc: BaseException) -> str:
    """Render an error and its causes as ``Error: ...`` and ``-> ...`` lines."""
    head, *causes = error_chain(exc)
    lines = [f"Error: {head}"]
    lines.extend(f"-> {cause}" for cause in causes)
    return "\n".join(lines)
