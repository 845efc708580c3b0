"""Download selected releases and unpack zip archives in place."""

from __future__ import annotations

import asyncio
import shutil
import zipfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable, List, Optional

from romfilter import logger
from romfilter.config import DownloadConfig, ListingConfig
from romfilter.http_service import HttpService
from romfilter.errors import FetchError
from romfilter.selection.types import ReleaseRecord

TEXT_PREVIEW_CHARS = 500


@dataclass
class DownloadReport:
    downloaded: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    failed: List[tuple[str, str]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed


def _remove_path(path: Path) -> None:
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    else:
        path.unlink()


def extract_archive(archive: Path, download_path: Path) -> List[Path]:
    """Unpack ``archive`` so its top-level entries land directly in ``download_path``.

    Existing entries with the same name are replaced. The archive is removed
    only after every entry has been moved; on a bad archive or a failed move
    it is left in place.
    """
    staging = download_path / f".{archive.stem}.extracting"
    if staging.exists():
        shutil.rmtree(staging)
    try:
        with zipfile.ZipFile(archive) as zf:
            zf.extractall(staging)
    except (zipfile.BadZipFile, OSError):
        shutil.rmtree(staging, ignore_errors=True)
        raise

    placed: List[Path] = []
    for entry in sorted(staging.iterdir()):
        target = download_path / entry.name
        if target.exists() or target.is_symlink():
            _remove_path(target)
        shutil.move(str(entry), str(target))
        placed.append(target)
    staging.rmdir()
    # an entry named like the archive has already replaced it
    if archive not in placed:
        archive.unlink()
    return placed


class RomDownloader:
    """Sequential downloader for a list of selected releases."""

    def __init__(
        self,
        config: DownloadConfig,
        listing: ListingConfig,
        service_factory: Optional[Callable[[ListingConfig], HttpService]] = None,
    ) -> None:
        self.config = config
        self.listing = listing
        self._service_factory = service_factory or HttpService
        self._service: HttpService | None = None

    def _ensure_service(self) -> HttpService:
        if self._service is None:
            self._service = self._service_factory(self.listing)
        return self._service

    async def download_rom(self, record: ReleaseRecord, download_path: Path) -> Optional[List[Path]]:
        """Fetch one release. Returns the files placed, or None when the server sent text."""
        if record.filename in ("", ".", "..") or Path(record.filename).name != record.filename:
            logger.warning(f"Skipping {record.url!r} - no usable filename")
            return None
        download_path.mkdir(parents=True, exist_ok=True)
        dest = download_path / record.filename
        logger.info(f"Downloading {record.filename} to {dest}")

        text = await self._ensure_service().download_to(record.url, dest, chunk_size=self.config.chunk_size)
        if text is not None:
            preview = text[:TEXT_PREVIEW_CHARS]
            logger.debug(f"Received text response for {record.url}:\n{preview}")
            logger.warning(f"Skipping {record.filename} - received text response")
            return None

        if self.config.extract_archives and dest.suffix.lower() == ".zip":
            placed = await asyncio.to_thread(extract_archive, dest, download_path)
            logger.debug(f"Extracted {len(placed)} entries from {dest.name}")
            return placed
        return [dest]

    async def download_all(self, records: Iterable[ReleaseRecord], download_path: Path) -> DownloadReport:
        """Download every record in order; one failure never stops the rest."""
        items = list(records)
        report = DownloadReport()
        for idx, record in enumerate(items, start=1):
            logger.get_logger().status(f"[{idx}/{len(items)}] {record.filename}")
            try:
                placed = await self.download_rom(record, download_path)
            except (FetchError, OSError, zipfile.BadZipFile) as exc:
                logger.error(f"Failed to download {record.filename}: {exc}")
                report.failed.append((record.filename, str(exc)))
                continue
            if placed is None:
                report.skipped.append(record.filename)
            else:
                logger.info(f"Downloaded {record.filename}")
                report.downloaded.append(record.filename)
        logger.info(
            f"Downloads complete: downloaded={len(report.downloaded)}, "
            f"skipped={len(report.skipped)}, failed={len(report.failed)}"
        )
        return report

    async def close(self) -> None:
        """Close the underlying service."""
        if self._service is not None:
            await self._service.close()
            self._service = None

    async def __aenter__(self) -> RomDownloader:
        return self

    async def __aexit__(self, *args) -> None:
        await self.close()
