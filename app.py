"""
app.py
------
Command-line entry point for the keyword indexing pipeline.

    DOCS_DIR/**/*.md → iter_documents() → index_run() → Redis

Settings come from the environment (see eddy/config.py); the documents
directory may also be passed as the first argument. Both clients are built
once here and handed to the run.

Usage:
    python app.py [DOCS_DIR]

Exit codes:
    0 — index committed
    1 — extraction, encoding or store failure (store left untouched)
    2 — invalid configuration or missing documents directory
"""

import json
import sys
from typing import List, Optional

from pydantic import ValidationError as SettingsError

from eddy.config import Settings, load_settings
from eddy.errors import ConfigurationError, IndexingError
from eddy.extraction_client import build_extraction_client
from eddy.ingestion import IndexSummary, index_run, iter_documents
from eddy.logging_config import configure_logging, get_logger
from eddy.persister import build_persister

log = get_logger(__name__)


def run(settings: Settings) -> IndexSummary:
    """Indexes settings.docs_dir with freshly built clients."""
    client = build_extraction_client(settings)
    persister = build_persister(settings)
    return index_run(
        iter_documents(settings.docs_dir, suffix=settings.doc_suffix),
        client,
        persister,
        locale     = settings.locale,
        chunk_size = settings.chunk_size,
        max_chunks = settings.max_chunks,
        min_score  = settings.min_score,
        workers    = settings.workers,
    )


def main(argv: Optional[List[str]] = None) -> int:
    argv = sys.argv[1:] if argv is None else argv

    try:
        settings = load_settings(docs_dir=argv[0] if argv else None)
    except SettingsError as exc:
        print(f"[CONFIG ERROR] {exc}", file=sys.stderr)
        return 2

    configure_logging(settings.log_level)
    log.info("Indexing %s (*%s)", settings.docs_dir, settings.doc_suffix)

    try:
        summary = run(settings)
    except ConfigurationError as exc:
        print(f"[CONFIG ERROR] {exc}", file=sys.stderr)
        return 2
    except FileNotFoundError as exc:
        print(f"[ERROR] {exc}", file=sys.stderr)
        return 2
    except IndexingError as exc:
        print(f"[ERROR] {exc}", file=sys.stderr)
        return 1

    print(json.dumps(summary, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
