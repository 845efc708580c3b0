"""Download collaborator for selected releases."""

from .downloader import DownloadReport, RomDownloader, extract_archive

__all__ = ["DownloadReport", "RomDownloader", "extract_archive"]
