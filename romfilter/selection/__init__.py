"""Filename classification and release selection."""

from .classifier import extract_tags, split_title_and_revision
from .eligibility import SMART_FILTER_TAGS, is_eligible, rejection_reason
from .pipeline import select_releases
from .revision_selector import group_by_title, select_latest
from .types import CandidateEntry, ReleaseRecord

__all__ = [
    "CandidateEntry",
    "ReleaseRecord",
    "SMART_FILTER_TAGS",
    "extract_tags",
    "group_by_title",
    "is_eligible",
    "rejection_reason",
    "select_latest",
    "select_releases",
    "split_title_and_revision",
]
