"""
validator/json_validator.py
---------------------------
Schema enforcement for phrase-extraction service responses.

Defines the canonical ExtractionResponse TypedDict and validates every
service response against it before the extractor reads a single phrase.
Raises a typed ValidationError on any schema violation — a malformed
response never leaks half-parsed keywords into the index.

Shape:
    {
        "results": [ [ {"text": str, "score": float | None}, ... ] | None, ... ],
        "errors":  [ {"message": str | None}, ... ],
    }
`results` is aligned to the submitted chunks; a chunk the service could not
process is `None` and normally has a matching entry in `errors`.
"""

import json
from typing import Any, Dict, List, Optional

from typing_extensions import TypedDict

from eddy.logging_config import get_logger

log = get_logger(__name__)


# ── Schema definition ──────────────────────────────────────────────────────────

class KeyPhrase(TypedDict):
    """A single scored phrase detected in one chunk."""
    text:  Optional[str]     # phrase text as found in the chunk
    score: Optional[float]   # confidence in [0, 1]; None when not reported


class ChunkError(TypedDict):
    """A per-chunk failure reported by the service."""
    message: Optional[str]


class ExtractionResponse(TypedDict):
    """Canonical response contract of the phrase-extraction service."""
    results: List[Optional[List[KeyPhrase]]]
    errors:  List[ChunkError]


# ── Custom exception ───────────────────────────────────────────────────────────

class ValidationError(ValueError):
    """Raised when a service response fails schema validation."""


# ── Validators ─────────────────────────────────────────────────────────────────

def validate_json_string(raw: str) -> Dict[str, Any]:
    """
    Parses a JSON string and returns the decoded dict.

    Raises:
        ValidationError: If the string is not valid JSON or not an object.
    """
    try:
        decoded = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValidationError(f"Invalid JSON: {exc}") from exc
    if not isinstance(decoded, dict):
        raise ValidationError(
            f"Expected a JSON object, got {type(decoded).__name__}."
        )
    return decoded


def _validate_phrase(phrase: Any, i: int, j: int) -> KeyPhrase:
    if not isinstance(phrase, dict):
        raise ValidationError(
            f"results[{i}][{j}] must be a dict, got {type(phrase).__name__}."
        )

    text = phrase.get("text")
    if text is not None and not isinstance(text, str):
        raise ValidationError(f"results[{i}][{j}]['text'] must be a string.")

    score = phrase.get("score")
    if score is not None:
        # bool is an int subclass but never a valid confidence
        if isinstance(score, bool) or not isinstance(score, (int, float)):
            raise ValidationError(f"results[{i}][{j}]['score'] must be a number.")
        if not 0.0 <= score <= 1.0:
            raise ValidationError(
                f"results[{i}][{j}]['score'] must be within [0, 1], got {score}."
            )
        score = float(score)

    return KeyPhrase(text=text, score=score)


def validate(response: Dict[str, Any]) -> ExtractionResponse:
    """
    Validates a decoded service response against the ExtractionResponse schema.

    Checks:
      - `results` and `errors` are lists (a missing key counts as empty)
      - every result is None or a list of phrase dicts
      - phrase text is a string or absent, score a number in [0, 1] or absent
      - every error is a dict whose message is a string or absent

    Args:
        response: Dict to validate (typically a decoded JSON body).

    Returns:
        A normalized ExtractionResponse.

    Raises:
        ValidationError: If any field has the wrong type or range.
    """
    if not isinstance(response, dict):
        raise ValidationError(
            f"Response must be a dict, got {type(response).__name__}."
        )

    results = response.get("results") or []
    errors = response.get("errors") or []
    if not isinstance(results, list):
        log.error("Validation failed — 'results' is not a list")
        raise ValidationError("Response 'results' must be a list.")
    if not isinstance(errors, list):
        log.error("Validation failed — 'errors' is not a list")
        raise ValidationError("Response 'errors' must be a list.")

    validated_results: List[Optional[List[KeyPhrase]]] = []
    for i, phrases in enumerate(results):
        if phrases is None:
            validated_results.append(None)
            continue
        if not isinstance(phrases, list):
            log.error("Validation failed — results[%d] is not a list", i)
            raise ValidationError(
                f"results[{i}] must be a list or null, got {type(phrases).__name__}."
            )
        validated_results.append(
            [_validate_phrase(phrase, i, j) for j, phrase in enumerate(phrases)]
        )

    validated_errors: List[ChunkError] = []
    for i, error in enumerate(errors):
        if not isinstance(error, dict):
            log.error("Validation failed — errors[%d] is not a dict", i)
            raise ValidationError(
                f"errors[{i}] must be a dict, got {type(error).__name__}."
            )
        message = error.get("message")
        if message is not None and not isinstance(message, str):
            raise ValidationError(f"errors[{i}]['message'] must be a string.")
        validated_errors.append(ChunkError(message=message))

    log.debug(
        "Validation succeeded — results=%d errors=%d",
        len(validated_results), len(validated_errors),
    )
    return ExtractionResponse(results=validated_results, errors=validated_errors)
