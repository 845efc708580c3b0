"""Listing provider for directory-style HTTP file indexes."""

from ..errors import FetchError, ParseError
from .client import IndexClient
from .index_parser import IndexLink, parse_index_links

__all__ = ["FetchError", "IndexClient", "IndexLink", "ParseError", "parse_index_links"]
