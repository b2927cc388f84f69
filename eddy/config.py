"""
eddy/config.py
--------------
Runtime configuration for the indexing pipeline.

Defaults live on the Settings model; every field can be overridden through
the environment variable listed in ENV_VARS. Invalid values fail fast with a
pydantic ValidationError when settings are loaded, before any document is
read.
"""

import os
from pathlib import Path
from typing import Literal, Mapping, Optional

from pydantic import BaseModel, Field, field_validator

from eddy.chunker import CHUNK_SIZE, MAX_CHUNKS


class Settings(BaseModel):
    """Everything a single indexing run needs to know."""

    redis_url:          str   = "redis://127.0.0.1:6379/0"
    extraction_backend: Literal["comprehend", "http"] = "comprehend"
    extraction_url:     str   = "http://localhost:8080/key-phrases"
    aws_region:         str   = "us-east-1"
    locale:             str   = "en"
    chunk_size:         int   = Field(CHUNK_SIZE, gt=0)
    max_chunks:         int   = Field(MAX_CHUNKS, gt=0)
    min_score:          float = Field(0.85, ge=0.0, le=1.0)
    workers:            int   = Field(1, ge=1)
    persist_mode:       Literal["append", "overwrite"] = "append"
    docs_dir:           Path  = Path("docs")
    doc_suffix:         str   = ".md"
    log_level:          Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value):
        return value.upper() if isinstance(value, str) else value


# environment variable → Settings field
ENV_VARS = {
    "REDIS_URL":          "redis_url",
    "EXTRACTION_BACKEND": "extraction_backend",
    "EXTRACTION_URL":     "extraction_url",
    "AWS_REGION":         "aws_region",
    "LOCALE":             "locale",
    "CHUNK_SIZE":         "chunk_size",
    "MAX_CHUNKS":         "max_chunks",
    "MIN_SCORE":          "min_score",
    "WORKERS":            "workers",
    "PERSIST_MODE":       "persist_mode",
    "DOCS_DIR":           "docs_dir",
    "DOC_SUFFIX":         "doc_suffix",
    "LOG_LEVEL":          "log_level",
}


def load_settings(environ: Optional[Mapping[str, str]] = None, **overrides) -> Settings:
    """
    Builds Settings from the environment.

    Args:
        environ:   Mapping to read from (defaults to os.environ).
        overrides: Explicit field values; they win over the environment.

    Raises:
        pydantic.ValidationError: If a value has the wrong type or range.
    """
    environ = os.environ if environ is None else environ
    values = {
        field: environ[var]
        for var, field in ENV_VARS.items()
        if environ.get(var, "") != ""
    }
    values.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**values)
