"""Shared data structures for the selection engine."""

from __future__ import annotations

from dataclasses import dataclass

from romfilter.selection.classifier import split_title_and_revision


@dataclass(frozen=True)
class CandidateEntry:
    """A file as listed by the index: decoded name plus absolute URL."""

    filename: str
    url: str


@dataclass(frozen=True)
class ReleaseRecord:
    """An eligible file. Title and revision are always derived from the filename."""

    filename: str
    url: str

    @property
    def canonical_title(self) -> str:
        return split_title_and_revision(self.filename)[0]

    @property
    def revision(self) -> int | None:
        return split_title_and_revision(self.filename)[1]

    @classmethod
    def from_candidate(cls, entry: CandidateEntry) -> ReleaseRecord:
        return cls(filename=entry.filename, url=entry.url)
