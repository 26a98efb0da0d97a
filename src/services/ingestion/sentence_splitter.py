"""Heuristic sentence segmentation for the cohesion chunker.

Splits on ``.``, ``!`` or ``?`` followed by whitespace, keeping the
terminal punctuation with its sentence.  This is a boundary heuristic, not
a grammar-aware splitter, and it has two known limitations:

* abbreviations ("Dr. Smith", "e.g. this") are over-split, and
* unpunctuated text (headings, table cells, bullet lists) is under-split
  and can produce one very long "sentence".

The chunker never splits a sentence, so an under-split run simply becomes
its own oversized chunk.
"""

from __future__ import annotations

import re

_SENTENCE_BOUNDARY_RE = re.compile(r"(?<=[.!?])\s+")


class SentenceSplitter:
    """Splits document text into trimmed, non-empty sentences in order."""

    def split(self, text: str) -> list[str]:
        if not text:
            return []
        parts = _SENTENCE_BOUNDARY_RE.split(text)
        return [part.strip() for part in parts if part.strip()]
