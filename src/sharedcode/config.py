"""Runtime settings loaded from ``SHAREDCODE_*`` environment variables."""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Any, Literal

from pydantic import BaseModel, field_validator, model_validator

from sharedcode.dates.formats import DateTimeFormat
from sharedcode.enums.helpers import to_enum
from sharedcode.enums.labels import label_of, parse
from sharedcode.security.hasher import HashType

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

_ENV_FIELDS: dict[str, str] = {
    "SHAREDCODE_LOG_LEVEL": "log_level",
    "SHAREDCODE_DATE_FORMAT": "date_format",
    "SHAREDCODE_HASH_TYPE": "hash_type",
}


class Settings(BaseModel):
    """Validated defaults for logging and the CLI helpers."""

    log_level: LogLevel = "WARNING"
    date_format: DateTimeFormat = DateTimeFormat.ISO_8601
    hash_type: HashType = HashType.SHA256

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value: Any) -> Any:
        """Accept level names in any case."""
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @field_validator("date_format", mode="before")
    @classmethod
    def parse_date_format(cls, value: Any) -> Any:
        """Accept a ``DateTimeFormat`` member name such as ``short_date``."""
        if isinstance(value, str):
            return to_enum(value, DateTimeFormat)
        return value

    @field_validator("hash_type", mode="before")
    @classmethod
    def parse_hash_type(cls, value: Any) -> Any:
        """Accept a ``hashlib`` algorithm label such as ``sha256``."""
        if isinstance(value, str):
            member = parse(HashType, value.strip(), ignore_case=True)
            if member is None:
                raise ValueError(f"unknown hash type {value!r}")
            return member
        return value

    @model_validator(mode="after")
    def validate_date_format_has_pattern(self) -> "Settings":
        """Reject date formats that carry no pattern."""
        if label_of(self.date_format) is None:
            raise ValueError(f"date_format {self.date_format.name} has no pattern")
        return self


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build settings from ``environ`` (default ``os.environ``), ignoring unset variables."""
    env = os.environ if environ is None else environ
    values = {field: env[name] for name, field in _ENV_FIELDS.items() if env.get(name)}
    return Settings(**values)
