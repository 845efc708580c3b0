from __future__ import annotations

from pathlib import PurePosixPath
from urllib.parse import quote, unquote, urlparse


def is_absolute(href: str) -> bool:
    return href.startswith("http")


def directory_url(base_url: str, subdir: str | None = None) -> str:
    if subdir is None:
        return base_url
    return f"{base_url}{subdir}/"


def system_url(base_url: str, subdir: str, system: str) -> str:
    return f"{base_url}{subdir}/{quote(system)}/"


def join_href(listing_url: str, href: str) -> str:
    if is_absolute(href):
        return href
    return f"{listing_url}{href}"


def decoded_name(href: str) -> str:
    """Percent-decoded last path segment of an href (trailing slash ignored)."""
    segment = href.rstrip("/").split("/")[-1]
    return unquote(segment)


def filename_from_url(url: str) -> str:
    path = unquote(urlparse(url).path)
    return PurePosixPath(path).name
