"""
eddy/extractor.py
-----------------
Turns one document's text into its keyword list.

    text → sanitize_text() → chunk_text() → re-sanitize each chunk
         → one batch_detect_key_phrases() call → validate → filter by score

A document is all-or-nothing: if the service reports an error for any chunk,
no phrase from any chunk is kept and ExtractionError carries every reported
message, newline-joined in response order.
"""

from typing import List

from eddy.chunker import CHUNK_SIZE, MAX_CHUNKS, chunk_text
from eddy.errors import ExtractionError
from eddy.extraction_client import ExtractionClient
from eddy.keyword_map import Keywords, normalize_keyword
from eddy.logging_config import get_logger
from eddy.sanitizer import sanitize_text
from validator.json_validator import ChunkError, ExtractionResponse, ValidationError, validate

log = get_logger(__name__)

# ── Constants ──────────────────────────────────────────────────────────────────
DEFAULT_LOCALE = "en"
MIN_SCORE      = 0.85
# ──────────────────────────────────────────────────────────────────────────────


def prepare_chunks(
    text: str,
    chunk_size: int = CHUNK_SIZE,
    max_chunks: int = MAX_CHUNKS,
) -> List[str]:
    """
    Sanitizes and chunks a document, re-sanitizing every chunk.

    Chunks left empty by re-sanitizing (a slice of bare whitespace) are not
    submitted.
    """
    chunks = chunk_text(sanitize_text(text), chunk_size=chunk_size, max_chunks=max_chunks)
    prepared = [sanitize_text(chunk) for chunk in chunks]
    return [chunk for chunk in prepared if chunk]


def coalesce_errors(errors: List[ChunkError]) -> str:
    """Joins the reported chunk error messages with newlines."""
    message = "\n".join(e["message"] for e in errors if e["message"] is not None)
    return message or f"Extraction failed for {len(errors)} chunk(s) without a message"


def process_response(response: ExtractionResponse, min_score: float = MIN_SCORE) -> List[str]:
    """
    Flattens a validated response into a keyword list.

    Args:
        response:  Validated service response.
        min_score: Phrases scoring below this are dropped; a missing score
                   counts as 0.0.

    Returns:
        Surviving phrase texts (lowercased, whitespace collapsed) in chunk
        order, duplicates included.

    Raises:
        ExtractionError: If the response reports any chunk error.
    """
    if response["errors"]:
        raise ExtractionError(coalesce_errors(response["errors"]))

    keywords: Keywords = []
    dropped = 0
    for phrases in response["results"]:
        for phrase in phrases or []:
            score = phrase["score"] if phrase["score"] is not None else 0.0
            keyword = normalize_keyword(phrase["text"] or "")
            if score < min_score or not keyword:
                dropped += 1
                continue
            keywords.append(keyword)

    log.debug("Kept %d phrase(s), dropped %d below %.2f", len(keywords), dropped, min_score)
    return keywords


def analyze_document(
    text: str,
    client: ExtractionClient,
    locale: str = DEFAULT_LOCALE,
    chunk_size: int = CHUNK_SIZE,
    max_chunks: int = MAX_CHUNKS,
    min_score: float = MIN_SCORE,
) -> List[str]:
    """
    Extracts the salient keyword phrases of one document.

    Args:
        text:       Raw document text.
        client:     Extraction client for this run.
        locale:     Language code sent with the batch.
        chunk_size: Maximum characters per chunk.
        max_chunks: Maximum chunks per batch; the rest of the text is ignored.
        min_score:  Confidence threshold for keeping a phrase.

    Returns:
        The document's keyword list (possibly empty).

    Raises:
        ExtractionError: On transport failure, malformed response, or any
                         chunk error.
    """
    chunks = prepare_chunks(text, chunk_size=chunk_size, max_chunks=max_chunks)
    if not chunks:
        log.debug("Nothing left to analyze after sanitizing")
        return []

    log.debug("Submitting %d chunk(s) for key-phrase detection", len(chunks))
    raw = client.batch_detect_key_phrases(locale, chunks)

    try:
        response = validate(raw)
    except ValidationError as exc:
        raise ExtractionError(f"Malformed extraction response: {exc}") from exc

    return process_response(response, min_score=min_score)
