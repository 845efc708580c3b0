"""Parse directory-index HTML into link entries."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from bs4 import BeautifulSoup

from romfilter.errors import ParseError
from romfilter.listing.url_utils import decoded_name

LINK_SELECTOR = "tbody > tr > td.link > a"


@dataclass(frozen=True)
class IndexLink:
    """One linked row of a file index."""

    name: str
    href: str
    is_directory: bool


def parse_index_links(html: str) -> List[IndexLink]:
    """Return the linked rows of an index page, without the parent-directory row.

    Raises ParseError when the page has no index table at all.
    """
    soup = BeautifulSoup(html, "html.parser")
    if soup.find("tbody") is None:
        raise ParseError("Page does not contain a file index table")

    anchors = soup.select(LINK_SELECTOR)
    links: List[IndexLink] = []
    # First row is always the parent-directory link
    for anchor in anchors[1:]:
        href = anchor.get("href")
        if not href:
            continue
        links.append(
            IndexLink(
                name=decoded_name(href),
                href=href,
                is_directory=href.endswith("/"),
            )
        )
    return links
