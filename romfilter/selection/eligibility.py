"""Decide whether a listed file is a selection candidate at all."""

from __future__ import annotations

from romfilter.config import FilterOptions
from romfilter.selection.classifier import extract_tags

UNIVERSAL_REGION = "World"

# Exact tag matches dropped by smart filters. Arcade: some console sets carry an
# alternate arcade dump next to the retail one.
SMART_FILTER_TAGS = frozenset({
    "Beta",
    "Alpha",
    "Proto",
    "Virtual Console",
    "Aftermarket",
    "Unl",
    "Sample",
    "Promo",
    "Demo",
    "Kiosk",
    "Arcade",
})


def rejection_reason(filename: str, options: FilterOptions) -> str | None:
    """Return why ``filename`` is not a candidate, or ``None`` when it is.

    Checks run region first, then custom excludes, then smart filters.
    Only parenthesized tags are inspected, never the title text.
    """
    tags = extract_tags(filename)

    if options.region_limit:
        regions = {options.region, UNIVERSAL_REGION}
        if not any(tag in regions for tag in tags):
            return f"region is not {options.region} or {UNIVERSAL_REGION}"

    for tag in tags:
        for pattern in options.exclude_patterns:
            if pattern in tag:
                return f"tag '{tag}' matches exclude pattern '{pattern}'"

    if options.smart_filters:
        for tag in tags:
            if tag in SMART_FILTER_TAGS:
                return f"smart filter '{tag}'"

    return None


def is_eligible(filename: str, options: FilterOptions) -> bool:
    return rejection_reason(filename, options) is None
