"""Unit tests for summary extraction."""

import pytest

from feed_aggregation.core.summarizer import (
    SummaryExtractor,
    summary_from_html_body,
    summary_from_html_summary,
)
from feed_aggregation.exceptions import ExtractionError
from feed_aggregation.models import ContentKind, RawContent, RawText


class TestSummaryFromHtmlSummary:
    """Tests for the first-text heuristic."""

    def test_returns_first_text(self):
        """Test the first text node is returned, trimmed."""
        summary = summary_from_html_summary(
            """
            <div>
                <p>First paragraph.</p>
                <p>Second paragraph.</p>
            </div>
            """
        )

        assert summary == "First paragraph."

    def test_no_text(self):
        """Test markup without text yields None."""
        summary = summary_from_html_summary(
            """
            <div>
                <img title="foo">
            </div>
            """
        )

        assert summary is None

    def test_unescapes_entities(self):
        """Test entities in text are decoded."""
        summary = summary_from_html_summary(
            """
            <div>
                &lt;foo&gt;
            </div>
            """
        )

        assert summary == "<foo>"

    def test_tolerates_unclosed_tags(self):
        """Test mismatched tags do not abort parsing."""
        summary = summary_from_html_summary("<a><img src='x.png'></a><br>Text after")

        assert summary == "Text after"

    def test_skips_comments(self):
        """Test comments are not treated as text."""
        summary = summary_from_html_summary("<!-- generated --><p>Real text</p>")

        assert summary == "Real text"

    def test_accepts_utf8_bytes(self):
        """Test UTF-8 encoded markup is decoded."""
        assert summary_from_html_summary("<p>Café</p>".encode("utf-8")) == "Café"

    def test_invalid_utf8_raises(self):
        """Test markup that is not valid UTF-8 fails extraction."""
        with pytest.raises(ExtractionError):
            summary_from_html_summary(b"<p>\xff\xfe</p>")


class TestSummaryFromHtmlBody:
    """Tests for the link-title heuristic."""

    def test_matching_link(self):
        """Test an exact href match returns the title."""
        summary = summary_from_html_body(
            "https://example.com",
            """
            <div>
                <a title="Test title" href="https://example.com">First paragraph.</a>
            </div>
            """,
        )

        assert summary == "Test title"

    def test_matching_link_full_url(self):
        """Test a full URL with path matches."""
        summary = summary_from_html_body(
            "https://example.com/foobar",
            """
            <div>
                <a title="Test title" href="https://example.com/foobar">First paragraph.</a>
            </div>
            """,
        )

        assert summary == "Test title"

    def test_matching_link_path_only(self):
        """Test a root-relative link matches an absolute target."""
        summary = summary_from_html_body(
            "https://example.com/foobar",
            """
            <div>
                <a title="Test title" href="/foobar">First paragraph.</a>
            </div>
            """,
        )

        assert summary == "Test title"

    def test_matching_absolute_link_relative_target(self):
        """Test an absolute link matches a root-relative target."""
        summary = summary_from_html_body(
            "/foobar",
            '<div><a title="Test title" href="https://example.com/foobar">First</a></div>',
        )

        assert summary == "Test title"

    def test_wrong_url(self):
        """Test links to other URLs are ignored."""
        summary = summary_from_html_body(
            "https://example.com",
            """
            <div>
                <a title="Test title" href="https://example.net">First paragraph.</a>
            </div>
            """,
        )

        assert summary is None

    def test_improperly_escaped_url(self):
        """Test a raw & inside href still matches."""
        summary = summary_from_html_body(
            "https://example.com?foo&bar",
            """
            <div>
                <a title="Test title 2" href="https://example.com?foo&bar">First paragraph.</a>
            </div>
            """,
        )

        assert summary == "Test title 2"

    def test_skips_matching_link_without_title(self):
        """Test scanning continues past a matching link with no title."""
        summary = summary_from_html_body(
            "https://example.com/post",
            """
            <a href="https://example.com/post">Untitled</a>
            <a href="https://example.com/other" title="Other">Other</a>
            <a href="/post" title="Second">Second</a>
            """,
        )

        assert summary == "Second"

    def test_title_entities_decoded(self):
        """Test escaped entities in the title are decoded."""
        summary = summary_from_html_body(
            "https://example.com/post",
            '<a href="https://example.com/post" title="Fish &amp; Chips">x</a>',
        )

        assert summary == "Fish & Chips"


class TestSummaryExtractor:
    """Tests for SummaryExtractor.extract."""

    @pytest.fixture
    def extractor(self):
        return SummaryExtractor()

    def test_plain_summary_verbatim(self, extractor):
        """Test plain-text summaries are returned untouched."""
        raw = RawText(kind=ContentKind.PLAIN, text="  <b>not markup</b>  ")

        assert extractor.extract("https://example.com/a", raw_summary=raw) == "  <b>not markup</b>  "

    def test_html_summary(self, extractor):
        """Test HTML summaries use the first-text heuristic."""
        raw = RawText(kind=ContentKind.HTML, text="<p>Hello</p><p>World</p>")

        assert extractor.extract("https://example.com/a", raw_summary=raw) == "Hello"

    def test_summary_wins_over_content(self, extractor):
        """Test a summary element takes precedence over content."""
        summary = RawText(kind=ContentKind.PLAIN, text="From summary")
        content = RawContent(kind=ContentKind.PLAIN, body="From content")

        result = extractor.extract("https://example.com/a", raw_summary=summary, raw_content=content)

        assert result == "From summary"

    def test_html_summary_without_text_does_not_fall_back(self, extractor):
        """Test an empty HTML summary does not fall back to content."""
        summary = RawText(kind=ContentKind.HTML, text="<img src='x.png'>")
        content = RawContent(kind=ContentKind.PLAIN, body="From content")

        assert extractor.extract("https://example.com/a", raw_summary=summary, raw_content=content) is None

    def test_plain_content(self, extractor):
        """Test plain-text content is returned as-is."""
        content = RawContent(kind=ContentKind.PLAIN, body="Body text")

        assert extractor.extract("https://example.com/a", raw_content=content) == "Body text"

    def test_html_content(self, extractor):
        """Test HTML content uses the link-title heuristic."""
        content = RawContent(
            kind=ContentKind.HTML,
            body='<p>See <a href="/a" title="Article A">here</a></p>',
        )

        assert extractor.extract("https://example.com/a", raw_content=content) == "Article A"

    def test_content_without_body(self, extractor):
        """Test content with no body yields None."""
        content = RawContent(kind=ContentKind.HTML, body=None)

        assert extractor.extract("https://example.com/a", raw_content=content) is None

    def test_nothing(self, extractor):
        """Test no summary and no content yields None."""
        assert extractor.extract("https://example.com/a") is None
