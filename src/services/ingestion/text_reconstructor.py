"""Reading-order text reconstruction from positioned PDF text fragments.

PDF content streams make no promise about the order in which text is
painted, so line structure has to be inferred from geometry alone:

1. **Sort** fragments top-of-page first (descending baseline y).
2. **Group** them into lines.  A fragment joins the current line when its y
   is within ``line_tolerance`` of the line's *reference* y -- the y of the
   fragment that opened the line.  The reference never moves, so a slowly
   drifting baseline cannot drag an entire paragraph into one line.
3. **Order** each line left to right and concatenate, inserting one space
   wherever the gap between the end of one fragment (``x + width``) and the
   start of the next exceeds ``space_threshold``.  The PDF does not encode
   inter-word spaces explicitly; this recovers them.
4. **Join** lines with ``\\n`` and normalise whitespace.

Every sort key ends in ``(text, width)`` so the output depends only on
geometry and content, never on the order fragments were supplied in.
"""

from __future__ import annotations

from collections.abc import Iterable

import structlog

from src.models.document import Line, PositionedTextFragment
from src.utils.text_normalizer import normalize_whitespace

logger = structlog.get_logger(logger_name=__name__)

DEFAULT_LINE_TOLERANCE = 5.0
DEFAULT_SPACE_THRESHOLD = 1.0


def _vertical_key(fragment: PositionedTextFragment) -> tuple[float, float, str, float]:
    return (-fragment.y, fragment.x, fragment.text, fragment.width)


def _horizontal_key(fragment: PositionedTextFragment) -> tuple[float, float, str, float]:
    return (fragment.x, -fragment.y, fragment.text, fragment.width)


class PageTextReconstructor:
    """Turns one page's unordered text fragments into reading-order text.

    Parameters
    ----------
    line_tolerance:
        Maximum baseline distance (exclusive) for two fragments to share a
        line, in layout units.
    space_threshold:
        Horizontal gap (exclusive) above which a space is inserted between
        neighbouring fragments.
    """

    def __init__(
        self,
        line_tolerance: float = DEFAULT_LINE_TOLERANCE,
        space_threshold: float = DEFAULT_SPACE_THRESHOLD,
    ) -> None:
        if line_tolerance <= 0:
            raise ValueError("line_tolerance must be positive")
        self._line_tolerance = line_tolerance
        self._space_threshold = space_threshold

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def reconstruct(self, fragments: Iterable[PositionedTextFragment]) -> str:
        """Return the page text in natural reading order.

        A page with no fragments yields ``""``.
        """
        lines = self.group_lines(fragments)
        if not lines:
            return ""
        text = "\n".join(self.render_line(line) for line in lines)
        return normalize_whitespace(text)

    def group_lines(self, fragments: Iterable[PositionedTextFragment]) -> list[Line]:
        """Group fragments into top-to-bottom lines, each ordered left to right."""
        ordered = sorted(fragments, key=_vertical_key)
        if not ordered:
            return []

        groups: list[tuple[float, list[PositionedTextFragment]]] = []
        reference_y: float | None = None
        for fragment in ordered:
            if reference_y is None or abs(fragment.y - reference_y) >= self._line_tolerance:
                reference_y = fragment.y
                groups.append((reference_y, [fragment]))
            else:
                groups[-1][1].append(fragment)

        lines = [
            Line(reference_y=ref_y, fragments=tuple(sorted(members, key=_horizontal_key)))
            for ref_y, members in groups
        ]
        logger.debug("page_lines_grouped", fragments=len(ordered), lines=len(lines))
        return lines

    def render_line(self, line: Line) -> str:
        """Concatenate a line's fragments, recovering inter-word spaces."""
        parts: list[str] = []
        previous_end: float | None = None
        for fragment in line.fragments:
            if previous_end is not None and fragment.x - previous_end > self._space_threshold:
                parts.append(" ")
            parts.append(fragment.text)
            previous_end = fragment.end_x
        return "".join(parts)
