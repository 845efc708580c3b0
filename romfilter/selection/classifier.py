"""Parse release filenames into tags, a canonical title and a revision."""

from __future__ import annotations

import re

METADATA_REGIONS = ("USA", "Europe", "World", "Japan")

# title, then leading metadata groups, an optional (Rev N), any other trailing groups, extension.
# Each metadata group must match a parenthetical in exactly one way.
_METADATA_GROUP = r"\s*\((?=[^)]*(?:Rev\s*[0-9]+|" + "|".join(METADATA_REGIONS) + r"))[^)]*\)"
_TITLE_PATTERN = re.compile(
    r"(.*?)"
    r"(?:" + _METADATA_GROUP + r")*"
    r"(?:\s*\(Rev\s*([0-9]+)\))?"
    r"(?:\s*\([^)]*\))*"
    r"(?:\.[^.]*)?"
)
_REVISION_PATTERN = re.compile(r"\(Rev\s*([0-9]+)\)")


def extract_tags(filename: str) -> list[str]:
    """Return the contents of each parenthesized group, left to right.

    Nested parentheses are not supported: an inner ``(`` restarts the
    current tag, so ``"A (x (y) z)"`` yields ``["y"]``. A ``)`` outside a
    group is ignored and an unclosed group is dropped.
    """
    tags: list[str] = []
    current: list[str] = []
    in_parentheses = False

    for char in filename:
        if char == "(":
            in_parentheses = True
            current.clear()
        elif char == ")":
            if in_parentheses:
                tags.append("".join(current))
                in_parentheses = False
        elif in_parentheses:
            current.append(char)
    return tags


def split_title_and_revision(filename: str) -> tuple[str, int | None]:
    """Split a release filename into its canonical title and revision.

    The title is everything before the trailing run of parenthesized groups
    and the extension. A group embedded in the title survives only when
    plain text follows it, e.g. ``"Game with (Parentheses) in Name (World)
    (Rev 3).zip"`` gives ``("Game with (Parentheses) in Name", 3)``.

    The revision comes from a ``(Rev N)`` group; when the trailing run has
    none, the first ``(Rev N)`` anywhere in the filename is used. Filenames
    the pattern cannot describe are returned verbatim with no revision.
    """
    match = _TITLE_PATTERN.fullmatch(filename)
    if match is None:
        return filename, None

    title = match.group(1).strip()
    if match.group(2) is not None:
        return title, int(match.group(2))

    fallback = _REVISION_PATTERN.search(filename)
    if fallback is not None:
        return title, int(fallback.group(1))
    return title, None
