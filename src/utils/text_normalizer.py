"""Whitespace normalization for reconstructed PDF text.

PDF text reconstruction produces lines joined with ``\\n`` whose spacing is
inferred from glyph geometry, so stray tabs, doubled spaces, and runs of
blank lines are common.  :func:`normalize_whitespace` is applied once per
page and keeps its line structure.  :func:`collapse_whitespace` flattens the
concatenated document to a single line, so a sentence wrapped across PDF
lines reads as one sentence.
"""

import re

# Horizontal whitespace only -- newlines carry line structure and are
# handled separately.
_HORIZONTAL_WS_RE = re.compile(r"[^\S\n]+")
_SPACE_AROUND_NEWLINE_RE = re.compile(r" ?\n ?")
_BLANK_LINES_RE = re.compile(r"\n{2,}")
_ANY_WS_RE = re.compile(r"\s+")


def normalize_whitespace(text: str) -> str:
    """Collapse whitespace runs while keeping one newline between lines.

    1. ``\\r\\n`` and ``\\r`` become ``\\n``.
    2. Runs of horizontal whitespace collapse to a single space.
    3. Spaces touching a newline are dropped.
    4. Runs of blank lines collapse to a single ``\\n``.
    5. Leading/trailing whitespace is trimmed.

    Args:
        text: Raw reconstructed text.

    Returns:
        The normalized text; ``""`` for blank input.
    """
    if not text:
        return ""
    normalized = text.replace("\r\n", "\n").replace("\r", "\n")
    normalized = _HORIZONTAL_WS_RE.sub(" ", normalized)
    normalized = _SPACE_AROUND_NEWLINE_RE.sub("\n", normalized)
    normalized = _BLANK_LINES_RE.sub("\n", normalized)
    return normalized.strip()


def collapse_whitespace(text: str) -> str:
    """Collapse every whitespace run, newlines included, to one space and trim."""
    return _ANY_WS_RE.sub(" ", text).strip()
