"""
eddy/errors.py
--------------
Typed failures of an indexing run.

Every error aborts the run it occurs in; none is retried. Library exceptions
(botocore, redis, urllib, schema validation) are wrapped into one of these
with `raise ... from exc` so callers only need to handle `IndexingError`.
"""


class IndexingError(RuntimeError):
    """Base class for every failure that aborts an indexing run."""


class ExtractionError(IndexingError):
    """
    The phrase-extraction call failed.

    Covers transport and service failures, malformed responses, and responses
    that report per-chunk errors (the message is then the newline-joined
    chunk error messages, in response order).
    """


class StoreError(IndexingError):
    """Connection or transaction failure while talking to the keyword store."""


class EncodingError(IndexingError):
    """A document could not be decoded as text."""


class ConfigurationError(ValueError):
    """A setting was accepted by the schema but rejected by the client it configures."""
