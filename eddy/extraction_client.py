"""
eddy/extraction_client.py
-------------------------
Clients for the external phrase-extraction service.

Every client exposes the same call, `batch_detect_key_phrases(locale, chunks)`,
and returns the service-neutral response shape checked by
validator.json_validator:

    {"results": [[{"text": ..., "score": ...}, ...] | None, ...],
     "errors":  [{"message": ...}, ...]}

Two backends are provided:
    ComprehendExtractionClient — AWS Comprehend BatchDetectKeyPhrases (boto3)
    HttpExtractionClient       — any JSON/HTTP service speaking the shape above

A client is built once per run by `build_extraction_client()` and injected
into the pipeline, so tests substitute a fake without touching the network.
"""

from typing import Any, Dict, List, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from typing_extensions import Protocol

from eddy._http import post_json
from eddy.config import Settings
from eddy.errors import ExtractionError
from eddy.logging_config import get_logger

log = get_logger(__name__)


class ExtractionClient(Protocol):
    """Anything able to score key phrases for a batch of chunks."""

    def batch_detect_key_phrases(self, locale: str, chunks: List[str]) -> Dict[str, Any]:
        ...


# ── AWS Comprehend ─────────────────────────────────────────────────────────────

class ComprehendExtractionClient:
    """
    Key-phrase detection through AWS Comprehend.

    Comprehend reports results and errors by chunk index; results are placed
    back at their index so the neutral response stays aligned to `chunks`.
    """

    def __init__(self, client: Any = None, region: str = "us-east-1"):
        if client is None:
            session = boto3.session.Session(region_name=region)
            client = session.client("comprehend")
        self._client = client

    def batch_detect_key_phrases(self, locale: str, chunks: List[str]) -> Dict[str, Any]:
        try:
            response = self._client.batch_detect_key_phrases(
                TextList=chunks,
                LanguageCode=locale,
            )
        except (ClientError, BotoCoreError) as exc:
            raise ExtractionError(f"Comprehend request failed: {exc}") from exc

        results: List[Optional[List[Dict[str, Any]]]] = [None] * len(chunks)
        for item in response.get("ResultList") or []:
            index = item.get("Index")
            if not isinstance(index, int) or not 0 <= index < len(chunks):
                raise ExtractionError(f"Comprehend returned a result for unknown chunk {index!r}")
            results[index] = [
                {"text": phrase.get("Text"), "score": phrase.get("Score")}
                for phrase in item.get("KeyPhrases") or []
            ]

        errors = [
            {"message": error.get("ErrorMessage")}
            for error in response.get("ErrorList") or []
        ]
        return {"results": results, "errors": errors}


# ── Generic JSON/HTTP service ──────────────────────────────────────────────────

class HttpExtractionClient:
    """Posts `{"locale", "chunks"}` to a JSON endpoint and returns its body."""

    def __init__(self, url: str, timeout: int = 60):
        self.url = url
        self.timeout = timeout

    def batch_detect_key_phrases(self, locale: str, chunks: List[str]) -> Dict[str, Any]:
        try:
            return post_json(
                self.url,
                {"locale": locale, "chunks": chunks},
                timeout=self.timeout,
            )
        except (ConnectionError, RuntimeError) as exc:
            raise ExtractionError(str(exc)) from exc


def build_extraction_client(settings: Settings) -> ExtractionClient:
    """Constructs the configured extraction client (once per run)."""
    if settings.extraction_backend == "http":
        log.info("Using HTTP extraction service at %s", settings.extraction_url)
        return HttpExtractionClient(settings.extraction_url)

    log.info("Using AWS Comprehend in %s", settings.aws_region)
    return ComprehendExtractionClient(region=settings.aws_region)
