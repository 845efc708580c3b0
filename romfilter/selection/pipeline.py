"""Compose eligibility, classification and revision selection."""

from __future__ import annotations

from typing import Iterable, List

from romfilter import logger
from romfilter.config import FilterOptions
from romfilter.selection.eligibility import rejection_reason
from romfilter.selection.revision_selector import select_latest
from romfilter.selection.types import CandidateEntry, ReleaseRecord


def eligible_records(entries: Iterable[CandidateEntry], options: FilterOptions) -> List[ReleaseRecord]:
    records: List[ReleaseRecord] = []
    for entry in entries:
        reason = rejection_reason(entry.filename, options)
        if reason is not None:
            logger.debug(f"Skipping {entry.filename}: {reason}")
            continue
        records.append(ReleaseRecord.from_candidate(entry))
    return records


def select_releases(entries: Iterable[CandidateEntry], options: FilterOptions) -> List[ReleaseRecord]:
    """Filter listed files and keep one release per title when configured."""
    records = eligible_records(entries, options)
    selected = select_latest(records, latest_revision_only=options.latest_revision)
    logger.debug(f"Selected {len(selected)} of {len(records)} eligible file(s)")
    return selected
