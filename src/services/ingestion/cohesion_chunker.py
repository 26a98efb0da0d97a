"""Cohesion-maximising sentence chunker.

Partitions an ordered sentence sequence into contiguous chunks, each at most
``max_chunk_chars`` characters long (sentences joined with single spaces),
choosing boundaries that keep semantically similar neighbours together.

Cohesion of a window ``[i, j]`` is the sum of cosine similarities over every
unordered sentence pair inside it.  The chunker scans greedily forward:

    i = 0
    while i < n:
        try every window end j in (i, i + max_window_sentences) that still
        fits in max_chunk_chars; keep the window with the highest cohesion
        (first one wins ties); emit it; i = j + 1

This is a bounded-lookahead approximation of an optimal partition (which
would need a dynamic program over every split point).  ``max_window_sentences``
trades chunk quality against the O(window^2) pairwise-similarity cost per
step.  Because every sentence stays in exactly one emitted window and windows
are emitted left to right, the output is always a partition of the input.

A sentence that alone exceeds the limit becomes its own chunk; sentences are
never split.
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np
import structlog

from src.models.rag import Chunk
from src.utils.errors import InvalidChunkingInputError

logger = structlog.get_logger(logger_name=__name__)

DEFAULT_MAX_CHUNK_CHARS = 200
DEFAULT_MAX_WINDOW_SENTENCES = 10


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Return ``dot(a, b) / (|a| * |b|)``, or ``0.0`` if either norm is zero."""
    va = np.asarray(a, dtype=np.float64)
    vb = np.asarray(b, dtype=np.float64)
    if va.shape != vb.shape:
        raise ValueError(f"vector shapes differ: {va.shape} != {vb.shape}")
    norm_a = float(np.linalg.norm(va))
    norm_b = float(np.linalg.norm(vb))
    if norm_a == 0.0 or norm_b == 0.0:
        return 0.0
    return float(np.dot(va, vb) / (norm_a * norm_b))


def cohesion_score(embeddings: Sequence[Sequence[float]], start: int, end: int) -> float:
    """Sum of pairwise cosine similarities for the inclusive window ``[start, end]``."""
    total = 0.0
    for k in range(start, end):
        for m in range(k + 1, end + 1):
            total += cosine_similarity(embeddings[k], embeddings[m])
    return total


def _check_matrix(embeddings: Sequence[Sequence[float]]) -> None:
    try:
        matrix = np.asarray(embeddings, dtype=np.float64)
    except ValueError as exc:
        raise InvalidChunkingInputError(f"Embeddings are not a rectangular matrix: {exc}") from exc
    if matrix.ndim != 2:
        raise InvalidChunkingInputError(
            f"Embeddings must be a sequence of vectors, got array of shape {matrix.shape}"
        )


class CohesionChunker:
    """Greedy bounded-lookahead chunker scored by pairwise cosine similarity.

    Parameters
    ----------
    max_chunk_chars:
        Upper bound on a chunk's joined character length.
    max_window_sentences:
        Largest number of sentences considered for one chunk.
    """

    def __init__(
        self,
        max_chunk_chars: int = DEFAULT_MAX_CHUNK_CHARS,
        max_window_sentences: int = DEFAULT_MAX_WINDOW_SENTENCES,
    ) -> None:
        if max_chunk_chars <= 0:
            raise ValueError("max_chunk_chars must be a positive integer")
        if max_window_sentences < 2:
            raise ValueError("max_window_sentences must be at least 2")
        self._max_chunk_chars = max_chunk_chars
        self._max_window_sentences = max_window_sentences

    @property
    def max_chunk_chars(self) -> int:
        return self._max_chunk_chars

    def chunk(
        self,
        sentences: Sequence[str],
        embeddings: Sequence[Sequence[float]],
    ) -> list[Chunk]:
        """Partition *sentences* into cohesive chunks.

        Raises
        ------
        InvalidChunkingInputError
            If ``len(embeddings) != len(sentences)`` or the embeddings are not
            equal-length vectors.
        """
        n = len(sentences)
        if len(embeddings) != n:
            raise InvalidChunkingInputError(
                f"{n} sentences but {len(embeddings)} embeddings"
            )
        if n == 0:
            return []

        _check_matrix(embeddings)
        chunks: list[Chunk] = []
        i = 0
        while i < n:
            end = self._best_window_end(sentences, embeddings, i)
            chunks.append(
                Chunk(
                    index=len(chunks),
                    start=i,
                    end=end,
                    text=" ".join(sentences[i : end + 1]),
                )
            )
            i = end + 1

        logger.debug(
            "cohesion_chunking_complete",
            sentences=n,
            chunks=len(chunks),
            max_chunk_chars=self._max_chunk_chars,
        )
        return chunks

    def _best_window_end(
        self,
        sentences: Sequence[str],
        embeddings: Sequence[Sequence[float]],
        start: int,
    ) -> int:
        window_limit = min(start + self._max_window_sentences, len(sentences))
        best_end = start
        best_score = -np.inf
        length = len(sentences[start])
        for end in range(start + 1, window_limit):
            length += 1 + len(sentences[end])
            if length > self._max_chunk_chars:
                break
            score = cohesion_score(embeddings, start, end)
            if score > best_score:
                best_score = score
                best_end = end
        return best_end
