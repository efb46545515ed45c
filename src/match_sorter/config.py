"""Centralized configuration for match-sorter using Pydantic Settings."""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from match_sorter.domain.rankings import Rank, coerce_rank_value


class Settings(BaseSettings):
    """Process-wide defaults loaded from ``MATCH_SORTER_*`` environment variables.

    These seed ``MatchSorterOptions.from_settings`` and the observability
    wiring in ``match_sorter.bootstrap``. A ``match_sorter`` call never reads
    them implicitly; options passed to the call are the only input.
    """

    model_config = SettingsConfigDict(
        env_prefix="MATCH_SORTER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        extra="ignore",
        frozen=True,
    )

    # Ranking defaults
    default_threshold: float = Field(
        default=float(Rank.MATCHES),
        ge=float(Rank.NO_MATCH),
        le=float(Rank.CASE_SENSITIVE_EQUAL),
        description="Minimum rank (inclusive) for inclusion; accepts a number or a rank name such as STARTS_WITH",
    )
    keep_diacritics: bool = Field(default=False, description="Compare accented characters as-is")

    # Logging
    log_level: str = Field(default="info", description="Logging level")
    log_json: bool = Field(default=True, description="Emit structured JSON logs")

    # Instrumentation
    metrics_enabled: bool = Field(default=True, description="Record Prometheus/OpenTelemetry sort metrics")
    tracing_enabled: bool = Field(default=False, description="Install an OpenTelemetry SDK tracer provider")
    service_name: str = Field(default="match-sorter", description="service.name resource attribute")

    operation_mode: Literal["library", "service"] = Field(
        default="library",
        description="library: leave the root logger alone; service: configure root logging on bootstrap",
    )

    @field_validator("default_threshold", mode="before")
    @classmethod
    def _parse_rank_name(cls, value: object) -> object:
        return coerce_rank_value(value)
