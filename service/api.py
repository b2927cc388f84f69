"""
service/api.py
--------------
FastAPI service layer for the keyword index.

Endpoints:
    GET  /health              liveness + active configuration
    POST /analyze             { "text": str }  →  { "keywords": [...] }
    POST /index               { "documents": [{ "path", "text" }] }  →  IndexSummary
    GET  /keywords/{keyword}  →  { "keyword", "documents": [...] }
    POST /events              event payload  →  handle_event() result

The extraction client and the persister are built once at startup via the
lifespan context manager and reused by every request.

Run with:
    uvicorn service.api:app --host 0.0.0.0 --port 8000
"""

from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from eddy.config import Settings, load_settings
from eddy.errors import EncodingError, ExtractionError, StoreError
from eddy.events import handle_event, parse_event
from eddy.extraction_client import ExtractionClient, build_extraction_client
from eddy.extractor import analyze_document
from eddy.ingestion import index_run
from eddy.logging_config import configure_logging, get_logger
from eddy.persister import Persister, build_persister

log = get_logger(__name__)


# ── Request models ─────────────────────────────────────────────────────────────

class AnalyzeRequest(BaseModel):
    text: str


class DocumentIn(BaseModel):
    path: str
    text: str


class IndexRequest(BaseModel):
    documents: List[DocumentIn]


# ── Service state (built once at startup) ──────────────────────────────────────

class _ServiceState:
    """In-process singleton holding the clients shared by all requests."""
    settings:  Settings
    client:    Optional[ExtractionClient]
    persister: Optional[Persister]

    def __init__(self):
        self.settings  = Settings()
        self.client    = None
        self.persister = None


_state = _ServiceState()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Builds the extraction client and persister once; releases them on shutdown."""
    _state.settings = load_settings()
    configure_logging(_state.settings.log_level)
    _state.client = build_extraction_client(_state.settings)
    _state.persister = build_persister(_state.settings)
    log.info(
        "Service startup — backend=%s persist_mode=%s",
        _state.settings.extraction_backend, _state.settings.persist_mode,
    )
    yield
    _state.client = None
    _state.persister = None
    log.info("Service shutdown — clients released")


app = FastAPI(
    title       = "Keyword Index API",
    description = "Extracts document keywords and maintains a keyword → documents index.",
    version     = "1.0.0",
    lifespan    = lifespan,
)


def _client() -> ExtractionClient:
    if _state.client is None:
        raise HTTPException(status_code=503, detail="Extraction client not initialised.")
    return _state.client


def _persister() -> Persister:
    if _state.persister is None:
        raise HTTPException(status_code=503, detail="Keyword store not initialised.")
    return _state.persister


# ── Endpoints ──────────────────────────────────────────────────────────────────

@app.get("/health", tags=["ops"])
def health_check():
    """Liveness probe — does not call the extraction service or the store."""
    return {
        "status":             "ok",
        "extraction_backend": _state.settings.extraction_backend,
        "persist_mode":       _state.settings.persist_mode,
        "ready":              _state.client is not None and _state.persister is not None,
    }


@app.post("/analyze", tags=["index"])
def analyze(request: AnalyzeRequest):
    """
    Extract the keywords of a single document without storing anything.

    Raises:
        502 Bad Gateway: if the extraction service fails or reports chunk errors
    """
    settings = _state.settings
    try:
        keywords = analyze_document(
            request.text,
            _client(),
            locale     = settings.locale,
            chunk_size = settings.chunk_size,
            max_chunks = settings.max_chunks,
            min_score  = settings.min_score,
        )
    except ExtractionError as exc:
        log.error("POST /analyze failed — %s", exc)
        raise HTTPException(status_code=502, detail=str(exc)) from exc

    return {"keywords": keywords}


@app.post("/index", tags=["index"])
def index(request: IndexRequest):
    """
    Index a batch of documents and commit their keywords in one transaction.

    Raises:
        422 Unprocessable Entity: empty or duplicate document paths
        502 Bad Gateway:          extraction failed — nothing was stored
        503 Service Unavailable:  the store transaction failed
    """
    paths = [doc.path for doc in request.documents]
    if any(not path.strip() for path in paths):
        raise HTTPException(status_code=422, detail="document paths must not be empty.")
    if len(set(paths)) != len(paths):
        raise HTTPException(status_code=422, detail="document paths must be unique.")

    settings = _state.settings
    log.info("POST /index — %d document(s)", len(paths))
    try:
        summary = index_run(
            [(doc.path, doc.text) for doc in request.documents],
            _client(),
            _persister(),
            locale     = settings.locale,
            chunk_size = settings.chunk_size,
            max_chunks = settings.max_chunks,
            min_score  = settings.min_score,
            workers    = settings.workers,
        )
    except (ExtractionError, EncodingError) as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    except StoreError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc

    return summary


@app.get("/keywords/{keyword}", tags=["index"])
def lookup(keyword: str):
    """List the documents stored under a keyword (empty if unknown)."""
    try:
        documents = _persister().lookup(keyword)
    except StoreError as exc:
        log.error("GET /keywords failed — %s", exc)
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    return {"keyword": keyword, "documents": documents}


@app.post("/events", tags=["events"])
def events(payload: Dict[str, Any]):
    """Answer URL-verification challenges and acknowledge app mentions."""
    try:
        wrapper = parse_event(payload)
    except PydanticValidationError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return handle_event(wrapper)
