"""Listing provider for directory-style HTTP file indexes."""

from __future__ import annotations

from typing import Callable, List, Optional

from romfilter import logger
from romfilter.config import FilterOptions, ListingConfig
from romfilter.http_service import HttpService
from romfilter.listing.index_parser import IndexLink, parse_index_links
from romfilter.listing.url_utils import (
    directory_url,
    filename_from_url,
    join_href,
    system_url,
)
from romfilter.selection.pipeline import eligible_records, select_releases
from romfilter.selection.types import CandidateEntry, ReleaseRecord


class IndexClient:
    """Lists directories and selected files of a file index."""

    def __init__(
        self,
        listing: ListingConfig,
        options: FilterOptions,
        service_factory: Optional[Callable[[ListingConfig], HttpService]] = None,
    ) -> None:
        self.listing = listing
        self.options = options
        self.base_url = listing.base_url if listing.base_url.endswith("/") else listing.base_url + "/"
        self._service_factory = service_factory or HttpService
        self._service: HttpService | None = None

    def _ensure_service(self) -> HttpService:
        if self._service is None:
            self._service = self._service_factory(self.listing)
        return self._service

    async def list_directories(self, subdir: Optional[str] = None) -> List[str]:
        """List sub-directory names at the index root or under ``subdir``."""
        url = directory_url(self.base_url, subdir)
        logger.info(f"Fetching directories from: {url}")
        links = await self._fetch_links(url)
        return [link.name for link in links if link.is_directory]

    async def list_candidates(self, system: str, subdir: str) -> List[CandidateEntry]:
        """List every file in ``subdir/system``, unfiltered."""
        url = system_url(self.base_url, subdir, system)
        logger.info(f"Fetching ROMs from: {url}")
        links = await self._fetch_links(url)
        candidates: List[CandidateEntry] = []
        for link in links:
            if link.is_directory:
                continue
            file_url = join_href(url, link.href)
            candidates.append(CandidateEntry(filename=filename_from_url(file_url), url=file_url))
        return candidates

    async def list_file_urls(self, system: str, subdir: str) -> List[str]:
        """List absolute URLs of the eligible files in ``subdir/system``."""
        candidates = await self.list_candidates(system, subdir)
        records = eligible_records(candidates, self.options)
        logger.info(f"{len(records)} eligible file(s), {len(candidates) - len(records)} filtered out")
        return [record.url for record in records]

    async def list_roms(self, system: str, subdir: str) -> List[ReleaseRecord]:
        """List eligible files, reduced to one release per title when configured."""
        candidates = await self.list_candidates(system, subdir)
        selected = select_releases(candidates, self.options)
        logger.info(f"Selected {len(selected)} of {len(candidates)} listed file(s)")
        return selected

    async def _fetch_links(self, url: str) -> List[IndexLink]:
        html = await self._ensure_service().fetch_text(url)
        return parse_index_links(html)

    async def close(self) -> None:
        """Close the underlying service."""
        if self._service is not None:
            await self._service.close()
            self._service = None

    async def __aenter__(self) -> IndexClient:
        return self

    async def __aexit__(self, *args) -> None:
        await self.close()
