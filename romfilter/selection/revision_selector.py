"""Reduce eligible releases to one per canonical title."""

from __future__ import annotations

from collections import defaultdict
from typing import Dict, Iterable, List

from romfilter.selection.types import ReleaseRecord

UNVERSIONED_RANK = -1


def group_by_title(records: Iterable[ReleaseRecord]) -> Dict[str, List[ReleaseRecord]]:
    """Group records by canonical title.

    The mapping iterates titles in lexicographic order; records within a
    group keep their input order.
    """
    groups: Dict[str, List[ReleaseRecord]] = defaultdict(list)
    for record in records:
        groups[record.canonical_title].append(record)
    return dict(sorted(groups.items()))


def _revision_rank(record: ReleaseRecord) -> int:
    revision = record.revision
    return UNVERSIONED_RANK if revision is None else revision


def select_latest(
    records: Iterable[ReleaseRecord],
    latest_revision_only: bool = True,
) -> List[ReleaseRecord]:
    """Keep the highest revision of each title, in title order.

    With ``latest_revision_only`` off the input is returned as-is. Unversioned
    files rank below any ``(Rev N)`` file; on equal revisions the first record
    listed wins.
    """
    if not latest_revision_only:
        return list(records)

    return [
        max(group, key=_revision_rank)
        for group in group_by_title(records).values()
    ]
