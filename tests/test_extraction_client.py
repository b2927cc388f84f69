from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError

from eddy.config import Settings
from eddy.errors import ExtractionError
from eddy.extraction_client import (
    ComprehendExtractionClient,
    HttpExtractionClient,
    build_extraction_client,
)


class TestComprehendExtractionClient:

    def test_maps_response_by_index(self):
        boto_client = MagicMock()
        boto_client.batch_detect_key_phrases.return_value = {
            "ResultList": [
                {"Index": 1, "KeyPhrases": [{"Text": "beta", "Score": 0.9, "BeginOffset": 0}]},
                {"Index": 0, "KeyPhrases": [{"Text": "alpha", "Score": 0.95}]},
            ],
            "ErrorList": [],
        }

        response = ComprehendExtractionClient(client=boto_client).batch_detect_key_phrases(
            "en", ["alpha", "beta"]
        )

        boto_client.batch_detect_key_phrases.assert_called_once_with(
            TextList=["alpha", "beta"], LanguageCode="en"
        )
        assert response == {
            "results": [[{"text": "alpha", "score": 0.95}], [{"text": "beta", "score": 0.9}]],
            "errors": [],
        }

    def test_failed_chunks_become_errors(self):
        boto_client = MagicMock()
        boto_client.batch_detect_key_phrases.return_value = {
            "ResultList": [{"Index": 0, "KeyPhrases": [{"Text": "alpha"}]}],
            "ErrorList": [{"Index": 1, "ErrorCode": "INTERNAL_SERVER_ERROR", "ErrorMessage": "oops"}],
        }

        response = ComprehendExtractionClient(client=boto_client).batch_detect_key_phrases(
            "en", ["alpha", "beta"]
        )

        assert response["results"] == [[{"text": "alpha", "score": None}], None]
        assert response["errors"] == [{"message": "oops"}]

    def test_unknown_index_is_rejected(self):
        boto_client = MagicMock()
        boto_client.batch_detect_key_phrases.return_value = {
            "ResultList": [{"Index": 5, "KeyPhrases": []}],
            "ErrorList": [],
        }
        with pytest.raises(ExtractionError):
            ComprehendExtractionClient(client=boto_client).batch_detect_key_phrases("en", ["a"])

    def test_client_error_is_extraction_error(self):
        boto_client = MagicMock()
        boto_client.batch_detect_key_phrases.side_effect = ClientError(
            {"Error": {"Code": "TextSizeLimitExceededException", "Message": "too big"}},
            "BatchDetectKeyPhrases",
        )
        with pytest.raises(ExtractionError, match="too big"):
            ComprehendExtractionClient(client=boto_client).batch_detect_key_phrases("en", ["a"])


class TestHttpExtractionClient:

    def test_posts_locale_and_chunks(self, monkeypatch):
        sent = {}

        def fake_post(url, payload, timeout):
            sent.update(url=url, payload=payload, timeout=timeout)
            return {"results": [[]], "errors": []}

        monkeypatch.setattr("eddy.extraction_client.post_json", fake_post)
        client = HttpExtractionClient("http://svc/key-phrases", timeout=5)

        assert client.batch_detect_key_phrases("en", ["x"]) == {"results": [[]], "errors": []}
        assert sent == {
            "url": "http://svc/key-phrases",
            "payload": {"locale": "en", "chunks": ["x"]},
            "timeout": 5,
        }

    def test_transport_failure_is_extraction_error(self, monkeypatch):
        def fake_post(url, payload, timeout):
            raise ConnectionError("unreachable")

        monkeypatch.setattr("eddy.extraction_client.post_json", fake_post)
        with pytest.raises(ExtractionError, match="unreachable"):
            HttpExtractionClient("http://svc").batch_detect_key_phrases("en", ["x"])


class TestBuildExtractionClient:

    def test_http_backend(self):
        client = build_extraction_client(Settings(extraction_backend="http", extraction_url="http://svc"))
        assert isinstance(client, HttpExtractionClient)
        assert client.url == "http://svc"

    def test_comprehend_backend_uses_region(self, monkeypatch):
        sessions = []

        class FakeSession:
            def __init__(self, region_name):
                sessions.append(region_name)

            def client(self, name):
                return MagicMock(name=name)

        monkeypatch.setattr("eddy.extraction_client.boto3.session.Session", FakeSession)
        client = build_extraction_client(Settings(aws_region="eu-west-1"))

        assert isinstance(client, ComprehendExtractionClient)
        assert sessions == ["eu-west-1"]
