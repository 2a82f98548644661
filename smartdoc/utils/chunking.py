"""
Text chunking and embedding aggregation.

Long documents are split into chunks small enough for the embedding model,
each chunk is embedded separately, and the chunk vectors are averaged into a
single document vector.
"""

import re
from typing import List, Sequence

import numpy as np

from smartdoc.config import DEFAULT_MAX_CHUNK_SIZE
from smartdoc.utils.errors import DimensionMismatchError, InvalidChunkSizeError

# Runs of sentence terminators; the terminators themselves are dropped
_SENTENCE_BOUNDARY = re.compile(r"[.!?]+")


# ===============================
# CHUNKING
# ===============================
def split_into_chunks(text: str, max_chunk_size: int = DEFAULT_MAX_CHUNK_SIZE) -> List[str]:
    """
    Split text into chunks of at most max_chunk_size characters.

    Sentences are packed greedily into a buffer, each one re-terminated with
    a single ".". A sentence that is too long on its own is split on
    whitespace and its words are packed the same way. A single word longer
    than max_chunk_size is kept whole.

    Args:
        text: Text to split (may be empty)
        max_chunk_size: Maximum chunk length in characters

    Returns:
        Trimmed, non-empty chunks in document order

    Raises:
        InvalidChunkSizeError: If max_chunk_size is not positive
    """
    if max_chunk_size <= 0:
        raise InvalidChunkSizeError(f"max_chunk_size must be positive, got {max_chunk_size}")

    chunks = []
    current = ""

    for sentence in _SENTENCE_BOUNDARY.split(text):
        if not sentence.strip():
            continue
        if not current:
            sentence = sentence.lstrip()

        if len(current) + len(sentence) + 1 <= max_chunk_size:
            current += sentence + "."
            continue

        # Buffer is full: emit it and start over with this sentence
        if current:
            chunks.append(current.strip())
            current = ""
            sentence = sentence.lstrip()

        if len(sentence) + 1 <= max_chunk_size:
            current = sentence + "."
        else:
            chunks.extend(_split_words(sentence, max_chunk_size))

    if current:
        chunks.append(current.strip())

    return [chunk for chunk in chunks if chunk]


def _split_words(sentence: str, max_chunk_size: int) -> List[str]:
    """Pack the words of an overlong sentence into chunks."""
    chunks = []
    current = ""

    for word in sentence.split():
        candidate = f"{current} {word}" if current else word
        if current and len(candidate) > max_chunk_size:
            chunks.append(current)
            current = word
        else:
            current = candidate

    if current:
        chunks.append(current)

    return chunks


# ===============================
# AGGREGATION
# ===============================
def average_vectors(vectors: Sequence[Sequence[float]]) -> List[float]:
    """
    Element-wise mean of equal-length vectors.

    An empty input returns an empty vector and a single vector is returned
    as an equal copy. The first vector's length is the expected dimension.

    Raises:
        DimensionMismatchError: If any vector differs in length from the first
    """
    if len(vectors) == 0:
        return []
    if len(vectors) == 1:
        return list(vectors[0])

    dimension = len(vectors[0])
    for index, vector in enumerate(vectors):
        if len(vector) != dimension:
            raise DimensionMismatchError(expected=dimension, actual=len(vector), index=index)

    return np.mean(np.asarray(vectors, dtype=float), axis=0).tolist()
