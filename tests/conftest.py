"""Shared fixtures: sample feed documents and a mocked HTTP transport."""

from typing import Optional
from xml.sax.saxutils import escape

import httpx
import pytest

from feed_aggregation.config import AggregatorConfig, Config


def make_rss(
    title: str,
    items: list[dict],
    link: str = "https://example.com/",
    image_url: Optional[str] = None,
) -> bytes:
    """Build an RSS 2.0 document.

    Each item dict may carry ``title``, ``link``, ``pub_date`` and
    ``description`` (raw HTML, escaped here).
    """
    parts = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        '<rss version="2.0">',
        "<channel>",
        f"<title>{escape(title)}</title>",
        f"<link>{escape(link)}</link>",
        "<description>Test feed</description>",
    ]
    if image_url:
        parts.append(
            f"<image><url>{escape(image_url)}</url><title>{escape(title)}</title>"
            f"<link>{escape(link)}</link></image>"
        )
    for item in items:
        parts.append("<item>")
        if "title" in item:
            parts.append(f"<title>{escape(item['title'])}</title>")
        if "link" in item:
            parts.append(f"<link>{escape(item['link'])}</link>")
        if "pub_date" in item:
            parts.append(f"<pubDate>{escape(item['pub_date'])}</pubDate>")
        if "description" in item:
            parts.append(f"<description>{escape(item['description'])}</description>")
        parts.append("</item>")
    parts.extend(["</channel>", "</rss>"])
    return "\n".join(parts).encode("utf-8")


RSS_FEED = b"""<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0"
     xmlns:media="http://search.yahoo.com/mrss/"
     xmlns:content="http://purl.org/rss/1.0/modules/content/">
  <channel>
    <title>Example Blog</title>
    <link>https://blog.example.com/</link>
    <description>Posts from the example blog</description>
    <image>
      <url>https://blog.example.com/logo.png</url>
      <title>Example Blog</title>
      <link>https://blog.example.com/</link>
    </image>
    <item>
      <title>Second post</title>
      <link>/posts/2</link>
      <pubDate>Tue, 08 Apr 2025 11:03:32 +0200</pubDate>
      <description>&lt;p&gt;Hello &amp;amp; welcome&lt;/p&gt;&lt;p&gt;More text&lt;/p&gt;</description>
      <media:thumbnail url="/thumbs/2.png"/>
    </item>
    <item>
      <title>First post</title>
      <link>https://blog.example.com/posts/1</link>
      <pubDate>Thu, 07 Dec 2023 00:00:00 +0000</pubDate>
      <content:encoded><![CDATA[<p>Read <a href="/posts/1" title="The first post">more</a></p>]]></content:encoded>
    </item>
  </channel>
</rss>
"""

ATOM_FEED = b"""<?xml version="1.0" encoding="utf-8"?>
<feed xmlns="http://www.w3.org/2005/Atom">
  <title>Atom Example</title>
  <logo>https://atom.example.org/logo.png</logo>
  <link href="https://atom.example.org/"/>
  <id>urn:uuid:60a76c80-d399-11d9-b93C-0003939e0af6</id>
  <updated>2025-08-24T12:33:09.842034+00:00</updated>
  <entry>
    <title>Atom entry</title>
    <link rel="enclosure" href="https://atom.example.org/audio.mp3" type="audio/mpeg"/>
    <link rel="alternate" href="https://atom.example.org/entries/1"/>
    <id>urn:uuid:1225c695-cfb8-4ebb-aaaa-80da344efa6a</id>
    <published>2025-05-01T10:17:04.634+03:00</published>
    <updated>2025-08-24T12:33:09.842034+00:00</updated>
    <summary>Plain &lt;summary&gt; text</summary>
  </entry>
  <entry>
    <title>Updated only</title>
    <link href="https://atom.example.org/entries/2"/>
    <id>urn:uuid:1225c695-cfb8-4ebb-aaaa-80da344efa6b</id>
    <updated>2024-11-19T08:58:00Z</updated>
  </entry>
</feed>
"""

NOT_A_FEED = b"""<!DOCTYPE html>
<html><head><title>Not a feed</title></head><body><p>Hello</p></body></html>
"""


@pytest.fixture
def rss_feed() -> bytes:
    return RSS_FEED


@pytest.fixture
def atom_feed() -> bytes:
    return ATOM_FEED


@pytest.fixture
def utc_config() -> Config:
    """Configuration that buckets days in UTC."""
    return Config(aggregator=AggregatorConfig(timezone="UTC"))


@pytest.fixture
def make_client():
    """Build httpx clients backed by a dict of canned responses.

    Values are either a body (served with status 200) or a
    ``(status, body)`` tuple. Unknown URLs get a 404. Requests are recorded
    on ``client.requests``.
    """
    clients = []

    def factory(responses: dict) -> httpx.Client:
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            response = responses.get(str(request.url))
            if response is None:
                return httpx.Response(404, content=b"Not found")
            if isinstance(response, tuple):
                status, body = response
                return httpx.Response(status, content=body)
            return httpx.Response(200, content=response)

        client = httpx.Client(transport=httpx.MockTransport(handler))
        client.requests = requests
        clients.append(client)
        return client

    yield factory

    for client in clients:
        client.close()
