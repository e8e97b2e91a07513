"""
Configuration management for store-sanitizer.

Provides centralized, type-safe configuration with environment variable overrides
and defaults that reproduce the original remediation: unconditionally clear the
``FlutterSharedPreferences`` store on every startup.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Literal

from dotenv import load_dotenv
from pydantic import BaseModel, Field, model_validator

# Load .env file if it exists (looks in cwd and parent directories)
load_dotenv()

ENV_PREFIX = "SANITIZER_"

StoreBackendName = Literal["json", "shared_prefs", "memory"]
PolicyKind = Literal["forced", "size_threshold", "load_failure"]

_BACKEND_SUFFIXES: dict[str, str] = {"json": ".json", "shared_prefs": ".xml"}


class StoreConfig(BaseModel):
    """Location and format of the persisted key-value store."""

    name: str = Field(default="FlutterSharedPreferences", min_length=1, description="Store name")
    backend: StoreBackendName = Field(default="shared_prefs", description="Store file format")
    base_path: Path = Field(default=Path("./data"), description="Directory holding store files")

    @property
    def file_path(self) -> Path | None:
        """Backing file for file-based backends, None for the in-memory backend."""
        suffix = _BACKEND_SUFFIXES.get(self.backend)
        if suffix is None:
            return None
        return self.base_path / f"{self.name}{suffix}"


class PolicyConfig(BaseModel):
    """Health policy selection."""

    kind: PolicyKind = Field(default="forced", description="Health policy to apply")
    max_entries: int | None = Field(default=None, ge=0, description="Entry count limit")
    max_bytes: int | None = Field(default=None, ge=0, description="Serialized size limit")

    @model_validator(mode="after")
    def _check_thresholds(self) -> PolicyConfig:
        if self.kind == "size_threshold" and self.max_entries is None and self.max_bytes is None:
            raise ValueError("size_threshold policy needs max_entries or max_bytes")
        return self


class ReportingConfig(BaseModel):
    """Where sanitizer outcomes are reported."""

    log_events: bool = Field(default=True, description="Emit a structlog event per outcome")
    jsonl_path: Path | None = Field(default=None, description="Append outcomes as JSON lines")


class Config(BaseModel):
    """Root configuration for store-sanitizer."""

    enabled: bool = Field(default=True, description="Run the sanitizer at startup")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", description="Logging level"
    )
    log_format: Literal["auto", "console", "json"] = Field(
        default="auto", description="Log renderer"
    )
    store: StoreConfig = Field(default_factory=StoreConfig)
    policy: PolicyConfig = Field(default_factory=PolicyConfig)
    reporting: ReportingConfig = Field(default_factory=ReportingConfig)

    model_config = {"extra": "ignore"}

    @classmethod
    def from_env(cls) -> Config:
        """Create configuration from environment variables."""
        env = os.environ

        def _get(name: str, default: str | None = None) -> str | None:
            return env.get(f"{ENV_PREFIX}{name}", default)

        def _int(name: str) -> int | None:
            raw = _get(name)
            return int(raw) if raw not in (None, "") else None

        report_file = _get("REPORT_FILE")
        return cls(
            enabled=(_get("ENABLED", "true") or "true").lower() == "true",
            log_level=_get("LOG_LEVEL", "INFO"),  # type: ignore
            log_format=_get("LOG_FORMAT", "auto"),  # type: ignore
            store=StoreConfig(
                name=_get("STORE_NAME", "FlutterSharedPreferences"),
                backend=_get("STORE_BACKEND", "shared_prefs"),  # type: ignore
                base_path=Path(_get("STORE_PATH", "./data") or "./data"),
            ),
            policy=PolicyConfig(
                kind=_get("POLICY", "forced"),  # type: ignore
                max_entries=_int("MAX_ENTRIES"),
                max_bytes=_int("MAX_BYTES"),
            ),
            reporting=ReportingConfig(
                log_events=(_get("LOG_EVENTS", "true") or "true").lower() == "true",
                jsonl_path=Path(report_file) if report_file else None,
            ),
        )


@lru_cache(maxsize=1)
def get_config() -> Config:
    """Get cached configuration instance."""
    return Config.from_env()
