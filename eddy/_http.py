"""
eddy/_http.py
-------------
HTTP transport for phrase-extraction services reached over plain JSON/HTTP.

Provides `post_json()` as the single point of control for timeouts and
transport errors. No retries: a failed call fails the indexing run.
"""

import json
import urllib.error
import urllib.request
from typing import Any, Dict

from validator.json_validator import ValidationError, validate_json_string


def post_json(
    url: str,
    payload: Dict[str, Any],
    timeout: int = 60,
) -> Dict[str, Any]:
    """
    Sends a JSON POST request and returns the decoded response body.

    Args:
        url:     Full endpoint URL.
        payload: Request body as a Python dict (will be JSON-encoded).
        timeout: Socket timeout in seconds.

    Returns:
        Parsed JSON response.

    Raises:
        ConnectionError: If the endpoint is unreachable, times out, or answers
                         with an HTTP error status.
        RuntimeError:    If the response is not a JSON object.
    """
    body = json.dumps(payload).encode("utf-8")

    request = urllib.request.Request(
        url,
        data=body,
        headers={"Content-Type": "application/json"},
        method="POST",
    )

    try:
        with urllib.request.urlopen(request, timeout=timeout) as response:
            raw = response.read().decode("utf-8")

    except urllib.error.HTTPError as exc:
        raise ConnectionError(
            f"Extraction service at {url} answered HTTP {exc.code}: {exc.reason}"
        ) from exc

    except urllib.error.URLError as exc:
        raise ConnectionError(
            f"Extraction service is not reachable at {url}. "
            f"Original error: {exc}"
        ) from exc

    except OSError as exc:
        # read timeouts surface as TimeoutError, outside URLError
        raise ConnectionError(
            f"Extraction service at {url} failed mid-request: {exc}"
        ) from exc

    except UnicodeDecodeError as exc:
        raise RuntimeError(f"Could not decode extraction response: {exc}") from exc

    try:
        return validate_json_string(raw)
    except ValidationError as exc:
        raise RuntimeError(f"Could not parse extraction response as JSON: {exc}") from exc
