from __future__ import annotations

import pytest

from romfilter.errors import ParseError
from romfilter.listing.index_parser import IndexLink, parse_index_links

INDEX_HTML = """
<html><body>
<table id="list">
  <thead><tr><th>File Name</th><th>File Size</th><th>Date</th></tr></thead>
  <tbody>
    <tr><td class="link"><a href="../" title="../">Parent directory/</a></td><td class="size">-</td></tr>
    <tr><td class="link"><a href="Nintendo%20-%20Game%20Boy/" title="Nintendo - Game Boy">Nintendo - Game Boy/</a></td><td class="size">-</td></tr>
    <tr><td class="link"><a href="Super%20Game%20%28USA%29%20%28Rev%201%29.zip">Super Game (USA) (Rev 1).zip</a></td><td class="size">512 KiB</td></tr>
    <tr><td class="link"><a>No href</a></td><td class="size">-</td></tr>
    <tr><td class="size"><a href="not-a-link-cell.zip">ignored</a></td></tr>
  </tbody>
</table>
</body></html>
"""


def test_parse_index_links_skips_parent_directory() -> None:
    links = parse_index_links(INDEX_HTML)

    assert links == [
        IndexLink(name="Nintendo - Game Boy", href="Nintendo%20-%20Game%20Boy/", is_directory=True),
        IndexLink(
            name="Super Game (USA) (Rev 1).zip",
            href="Super%20Game%20%28USA%29%20%28Rev%201%29.zip",
            is_directory=False,
        ),
    ]


def test_parse_index_links_skips_first_link_even_when_not_parent() -> None:
    html = """
    <table><tbody>
      <tr><td class="link"><a href="First.zip">First.zip</a></td></tr>
      <tr><td class="link"><a href="Second.zip">Second.zip</a></td></tr>
    </tbody></table>
    """
    assert [link.name for link in parse_index_links(html)] == ["Second.zip"]


def test_parse_index_links_empty_directory() -> None:
    html = '<table><tbody><tr><td class="link"><a href="../">Parent directory/</a></td></tr></tbody></table>'
    assert parse_index_links(html) == []


def test_parse_index_links_rejects_pages_without_index_table() -> None:
    with pytest.raises(ParseError, match="file index table"):
        parse_index_links("<html><body><h1>502 Bad Gateway</h1></body></html>")
