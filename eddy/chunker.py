"""
eddy/chunker.py
---------------
Splits sanitized text into the bounded slices accepted by the
phrase-extraction service.

The service takes a batch of at most MAX_CHUNKS texts per call, each limited
in size; slicing on characters (never bytes) at CHUNK_SIZE keeps every text
well inside that limit even for multi-byte input. Anything past
CHUNK_SIZE × MAX_CHUNKS characters is dropped.

No external calls — operates entirely on local text.
"""

from typing import List

# ── Constants ──────────────────────────────────────────────────────────────────
CHUNK_SIZE = 2_500   # characters per chunk
MAX_CHUNKS = 25      # texts per extraction batch
# ──────────────────────────────────────────────────────────────────────────────


def chunk_text(
    text: str,
    chunk_size: int = CHUNK_SIZE,
    max_chunks: int = MAX_CHUNKS,
) -> List[str]:
    """
    Splits text into sequential, non-overlapping character slices.

    Joining the returned chunks reproduces `text[:chunk_size * max_chunks]`.

    Args:
        text:       Sanitized document text.
        chunk_size: Maximum number of characters per chunk.
        max_chunks: Maximum number of chunks returned; the tail is truncated.

    Returns:
        List of at most `max_chunks` chunks, in document order.

    Raises:
        ValueError: If chunk_size or max_chunks are not positive.
    """
    if chunk_size <= 0:
        raise ValueError("chunk_size must be a positive integer.")
    if max_chunks <= 0:
        raise ValueError("max_chunks must be a positive integer.")

    limit = min(len(text), chunk_size * max_chunks)
    return [text[start:start + chunk_size] for start in range(0, limit, chunk_size)]
