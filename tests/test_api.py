import pytest
from fastapi.testclient import TestClient

from eddy.config import Settings
from service import api


@pytest.fixture
def service(fake_client, persister):
    """TestClient wired to fakes; the lifespan (real clients) is not run."""
    api._state.settings = Settings()
    api._state.client = fake_client
    api._state.persister = persister
    yield TestClient(api.app)
    api._state.client = None
    api._state.persister = None


def test_health(service):
    response = service.get("/health")
    assert response.status_code == 200
    assert response.json() == {
        "status": "ok",
        "extraction_backend": "comprehend",
        "persist_mode": "append",
        "ready": True,
    }


def test_analyze(service):
    response = service.post("/analyze", json={"text": "Release train!"})
    assert response.status_code == 200
    assert response.json() == {"keywords": ["release", "train"]}


def test_analyze_extraction_failure(service, make_client):
    api._state.client = make_client(fail_on="boom")
    response = service.post("/analyze", json={"text": "boom"})
    assert response.status_code == 502
    assert "chunk 0 rejected" in response.json()["detail"]


def test_index_and_lookup(service, persister):
    response = service.post("/index", json={"documents": [
        {"path": "/a.md", "text": "foo bar"},
        {"path": "/b.md", "text": "foo"},
    ]})
    assert response.status_code == 200
    assert response.json() == {"documents": 2, "keywords": 2, "entries": 3}

    response = service.get("/keywords/foo")
    assert response.json() == {"keyword": "foo", "documents": ["/a.md", "/b.md"]}


def test_index_failure_stores_nothing(service, make_client, persister):
    api._state.client = make_client(fail_on="boom")
    response = service.post("/index", json={"documents": [
        {"path": "/a.md", "text": "fine"},
        {"path": "/b.md", "text": "boom"},
    ]})
    assert response.status_code == 502
    assert persister.saved == []


def test_index_store_failure(service, make_persister):
    api._state.persister = make_persister(fail=True)
    response = service.post("/index", json={"documents": [{"path": "/a.md", "text": "foo"}]})
    assert response.status_code == 503


@pytest.mark.parametrize("paths", [["/a.md", "/a.md"], ["  "]])
def test_index_rejects_bad_paths(service, paths):
    documents = [{"path": p, "text": "foo"} for p in paths]
    response = service.post("/index", json={"documents": documents})
    assert response.status_code == 422


def test_lookup_unknown_keyword(service):
    assert service.get("/keywords/nothing").json()["documents"] == []


def test_not_ready_without_clients(service):
    api._state.client = None
    assert service.post("/analyze", json={"text": "x"}).status_code == 503


def test_events_challenge(service):
    response = service.post("/events", json={"type": "url_verification", "challenge": "c0ffee"})
    assert response.json() == {"challenge": "c0ffee"}


def test_events_mention(service):
    response = service.post("/events", json={
        "type": "event_callback",
        "event": {"type": "app_mention", "text": "hi"},
    })
    assert response.json() == {"success": True}


def test_analyze_timeout_is_bad_gateway(service, silent_url):
    from eddy.extraction_client import HttpExtractionClient

    api._state.client = HttpExtractionClient(silent_url, timeout=1)
    response = service.post("/analyze", json={"text": "foo"})
    assert response.status_code == 502
