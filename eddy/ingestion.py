"""
eddy/ingestion.py
-----------------
Multi-document indexing run.

    documents → analyze_document() per document → KeywordMapBuilder
              → reverse() once → Persister.save() in one transaction

A run is all-or-nothing. The first document that fails aborts it: keywords
already gathered are discarded, the map is never inverted, and the store is
not touched. Documents come from any iterable of (doc_path, text) pairs;
`iter_documents()` provides one over a directory tree.

With `workers > 1` extraction calls run on a thread pool, but results are
still added to the map by this thread alone, in document order, and only
after every document has succeeded.
"""

from concurrent.futures import FIRST_EXCEPTION, Future, ThreadPoolExecutor, wait
from pathlib import Path
from typing import Iterable, Iterator, List, Tuple, Union

from typing_extensions import TypedDict

from eddy.chunker import CHUNK_SIZE, MAX_CHUNKS
from eddy.errors import EncodingError
from eddy.extraction_client import ExtractionClient
from eddy.extractor import DEFAULT_LOCALE, MIN_SCORE, analyze_document
from eddy.keyword_map import DocPath, KeywordMapBuilder, Keywords
from eddy.logging_config import get_logger
from eddy.persister import Persister

log = get_logger(__name__)

Document = Tuple[DocPath, Union[str, bytes]]


class IndexSummary(TypedDict):
    """Outcome of a successful indexing run."""
    documents: int   # documents analyzed (including those without keywords)
    keywords:  int   # distinct keywords written
    entries:   int   # (keyword, document) entries appended to the store


# ── Document source ────────────────────────────────────────────────────────────

def decode_document(doc_path: DocPath, content: Union[str, bytes]) -> str:
    """
    Returns document content as text.

    Raises:
        EncodingError: If bytes are not valid UTF-8.
    """
    if isinstance(content, str):
        return content
    try:
        return content.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise EncodingError(f"{doc_path} is not valid UTF-8: {exc}") from exc


def iter_documents(root: Union[str, Path], suffix: str = ".md") -> Iterator[Tuple[DocPath, str]]:
    """
    Walks `root` and yields (doc_path, text) for every file ending in `suffix`.

    doc_path is the file's POSIX path relative to root, with a leading "/".
    Files are visited in sorted order.

    Raises:
        FileNotFoundError: If root is not a directory.
        EncodingError:     If a file is not valid UTF-8.
    """
    root = Path(root)
    if not root.is_dir():
        raise FileNotFoundError(f"Document directory {root} does not exist.")

    for path in sorted(root.rglob(f"*{suffix}")):
        if not path.is_file():
            continue
        doc_path = "/" + path.relative_to(root).as_posix()
        yield doc_path, decode_document(doc_path, path.read_bytes())


# ── Keyword map ────────────────────────────────────────────────────────────────

def _analyze(
    doc_path: DocPath,
    content: Union[str, bytes],
    client: ExtractionClient,
    **options,
) -> Keywords:
    keywords = analyze_document(decode_document(doc_path, content), client, **options)
    if not keywords:
        log.warning("%s → no keywords above threshold", doc_path)
    else:
        log.debug("%s → %d keyword(s)", doc_path, len(keywords))
    return keywords


def build_keyword_map(
    documents: Iterable[Document],
    client: ExtractionClient,
    workers: int = 1,
    **options,
) -> KeywordMapBuilder:
    """
    Analyzes every document and accumulates the forward keyword map.

    Args:
        documents: (doc_path, text) pairs.
        client:    Extraction client for this run.
        workers:   Number of concurrent extraction calls (1 = sequential).
        options:   Passed to analyze_document (locale, chunk_size, ...).

    Returns:
        A builder holding one entry per document, ready to be inverted.

    Raises:
        IndexingError: The first failure, after which nothing is returned.
    """
    if workers < 1:
        raise ValueError("workers must be >= 1.")

    builder = KeywordMapBuilder()

    if workers == 1:
        for doc_path, content in documents:
            builder.add(doc_path, _analyze(doc_path, content, client, **options))
        return builder

    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures: List[Tuple[DocPath, Future]] = [
            (doc_path, executor.submit(_analyze, doc_path, content, client, **options))
            for doc_path, content in documents
        ]
        done, _ = wait([future for _, future in futures], return_when=FIRST_EXCEPTION)
        for _, future in futures:
            if future in done and future.exception() is not None:
                for _, pending in futures:
                    pending.cancel()
                raise future.exception()

        for doc_path, future in futures:
            builder.add(doc_path, future.result())

    return builder


# ── Public API ─────────────────────────────────────────────────────────────────

def index_run(
    documents: Iterable[Document],
    client: ExtractionClient,
    persister: Persister,
    locale: str = DEFAULT_LOCALE,
    chunk_size: int = CHUNK_SIZE,
    max_chunks: int = MAX_CHUNKS,
    min_score: float = MIN_SCORE,
    workers: int = 1,
) -> IndexSummary:
    """
    Indexes a set of documents and commits the reverse keyword map.

    Args:
        documents:  (doc_path, text) pairs; bytes are decoded as UTF-8.
        client:     Extraction client, built once for the run.
        persister:  Store writer, built once for the run.
        locale:     Language code sent to the extraction service.
        chunk_size: Maximum characters per chunk.
        max_chunks: Maximum chunks per document.
        min_score:  Confidence threshold for keeping a phrase.
        workers:    Concurrent extraction calls.

    Returns:
        IndexSummary of the committed run.

    Raises:
        ExtractionError: A document's extraction failed; nothing was stored.
        EncodingError:   A document was not text; nothing was stored.
        StoreError:      The transaction failed; nothing was stored.
    """
    log.info("Indexing run started — workers=%d", workers)
    try:
        builder = build_keyword_map(
            documents,
            client,
            workers=workers,
            locale=locale,
            chunk_size=chunk_size,
            max_chunks=max_chunks,
            min_score=min_score,
        )
    except Exception as exc:
        log.error("Indexing run aborted before persisting — %s", exc)
        raise

    log.info("Keyword extraction complete — %d document(s)", len(builder))
    reverse_map = builder.reverse()
    entries = persister.save(reverse_map)

    log.info(
        "Indexing run complete — %d document(s), %d keyword(s), %d entries",
        len(builder), len(reverse_map), entries,
    )
    return IndexSummary(documents=len(builder), keywords=len(reverse_map), entries=entries)
