"""Shared fakes for the test suite: no network, no Redis, no AWS."""

import socket
from typing import Any, Dict, List, Optional

import pytest

from eddy.config import ENV_VARS
from eddy.errors import StoreError
from eddy.keyword_map import ReverseMap
from eddy.persister import Persister


class FakeExtractionClient:
    """
    Scores every word of every chunk as a key phrase.

    A chunk containing the `fail_on` word is reported as a chunk error instead,
    mirroring how the real service answers a batch with per-chunk failures.
    """

    def __init__(self, score: Optional[float] = 0.9, fail_on: Optional[str] = None):
        self.score = score
        self.fail_on = fail_on
        self.calls: List[Dict[str, Any]] = []

    def batch_detect_key_phrases(self, locale: str, chunks: List[str]) -> Dict[str, Any]:
        self.calls.append({"locale": locale, "chunks": list(chunks)})
        results, errors = [], []
        for i, chunk in enumerate(chunks):
            words = [w.rstrip(".?!") for w in chunk.split()]
            if self.fail_on is not None and self.fail_on in words:
                results.append(None)
                errors.append({"message": f"chunk {i} rejected"})
            else:
                results.append([{"text": w, "score": self.score} for w in words])
        return {"results": results, "errors": errors}


class InMemoryPersister(Persister):
    """Records every committed map; optionally fails like a broken store."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.saved: List[ReverseMap] = []
        self.store: Dict[str, List[str]] = {}

    def save(self, reverse_map: ReverseMap) -> int:
        if self.fail:
            raise StoreError("store unavailable")
        self.saved.append(reverse_map)
        for keyword, doc_paths in reverse_map.items():
            self.store.setdefault(keyword, []).extend(doc_paths)
        return sum(len(doc_paths) for doc_paths in reverse_map.values())

    def lookup(self, keyword: str) -> List[str]:
        return list(self.store.get(keyword, []))


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keeps the developer's environment out of Settings."""
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def fake_client():
    return FakeExtractionClient()


@pytest.fixture
def make_client():
    return FakeExtractionClient


@pytest.fixture
def persister():
    return InMemoryPersister()


@pytest.fixture
def make_persister():
    return InMemoryPersister


@pytest.fixture
def silent_url():
    """URL of a listening socket that accepts connections but never answers."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    sock.listen(8)
    yield f"http://127.0.0.1:{sock.getsockname()[1]}/key-phrases"
    sock.close()
