"""
Summary extraction for feed items.

Feeds put all kinds of markup into their summary and content elements. Short
plain-text summaries are used as-is; HTML is scanned with a tolerant parser
for either its first piece of text or the title of a link back to the item.
"""

from typing import Optional, Union

from bs4 import BeautifulSoup, ParserRejectedMarkup, SoupStrainer
from bs4.element import NavigableString, PreformattedString

from feed_aggregation.exceptions import ExtractionError
from feed_aggregation.models import ContentKind, RawContent, RawText
from feed_aggregation.utils.url_utils import url_path

Markup = Union[str, bytes]

# html.parser tolerates unclosed and mismatched tags (<a><img></a>, <br>)
HTML_PARSER = "html.parser"


def _ensure_text(markup: Markup) -> str:
    """Return markup as text, rejecting anything that is not valid UTF-8."""
    if isinstance(markup, bytes):
        try:
            return markup.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ExtractionError(f"Invalid UTF-8 in markup: {e}") from e

    try:
        markup.encode("utf-8")
    except UnicodeEncodeError as e:
        raise ExtractionError(f"Invalid UTF-8 in markup: {e}") from e
    return markup


def _parse(markup: str, parse_only: Optional[SoupStrainer] = None) -> BeautifulSoup:
    try:
        return BeautifulSoup(markup, HTML_PARSER, parse_only=parse_only)
    except ParserRejectedMarkup as e:
        raise ExtractionError(f"Unable to tokenize markup: {e}") from e


def _attr_value(value) -> str:
    """Decode an attribute value.

    The tokenizer has already unescaped well-formed entities; malformed ones
    (``?foo&bar``) are left as the raw text.
    """
    if isinstance(value, (list, tuple)):
        value = " ".join(value)
    return _ensure_text(str(value))


def summary_from_html_summary(markup: Markup) -> Optional[str]:
    """Return the first non-blank text node of ``markup``, trimmed and unescaped.

    Comments, CDATA sections and declarations are not text.
    """
    soup = _parse(_ensure_text(markup))

    for node in soup.descendants:
        if not isinstance(node, NavigableString) or isinstance(node, PreformattedString):
            continue
        text = node.strip()
        if text:
            return text

    return None


def _links_to(href: str, target: str) -> bool:
    if href == target:
        return True

    # Relative links in the document, absolute target
    target_path = url_path(target)
    if target_path is not None and href == target_path:
        return True

    # Absolute links in the document, root-relative target
    href_path = url_path(href)
    return href_path is not None and href_path == target


def summary_from_html_body(item_href: str, markup: Markup) -> Optional[str]:
    """Return the ``title`` of the first link back to ``item_href``.

    Links that point at the item but carry no title are skipped; a later link
    may still have one.
    """
    soup = _parse(_ensure_text(markup), parse_only=SoupStrainer("a"))

    for anchor in soup.find_all("a"):
        href = anchor.get("href")
        if href is None or not _links_to(_attr_value(href), item_href):
            continue

        title = anchor.get("title")
        if title is not None:
            return _attr_value(title)

    return None


class SummaryExtractor:
    """Chooses a summary for an item from its summary and content elements."""

    def extract(
        self,
        href: str,
        raw_summary: Optional[RawText] = None,
        raw_content: Optional[RawContent] = None,
    ) -> Optional[str]:
        """Extract a summary for an item.

        A summary element always wins over content. Plain text is returned
        verbatim; HTML summaries yield their first text, HTML content yields
        the title of a link back to ``href``.

        Args:
            href: The item's link, as found in the feed
            raw_summary: Summary element, if any
            raw_content: Content element, if any

        Returns:
            Summary text or None

        Raises:
            ExtractionError: If HTML markup is not valid UTF-8
        """
        if raw_summary is not None:
            if raw_summary.kind is ContentKind.HTML:
                return summary_from_html_summary(raw_summary.text)
            if raw_summary.kind is ContentKind.PLAIN:
                return raw_summary.text
            raise ValueError(f"Unsupported content kind: {raw_summary.kind}")

        if raw_content is not None and raw_content.body is not None:
            if raw_content.kind is ContentKind.HTML:
                return summary_from_html_body(href, raw_content.body)
            if raw_content.kind is ContentKind.PLAIN:
                return raw_content.body
            raise ValueError(f"Unsupported content kind: {raw_content.kind}")

        return None
