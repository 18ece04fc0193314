"""Configuration settings using pydantic-settings."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings

ReconciliationMode = Literal["strict", "coerce"]
DisplayField = Literal["q1", "q2", "q3", "q4", "cumulative_balance"]


class CompiledReportSettings(BaseSettings):
    """Settings for building the cross-facility compiled report."""

    # "strict" rejects facility trees that deviate from the template,
    # "coerce" rebuilds them in template shape and drops unknown rows.
    reconciliation_mode: ReconciliationMode = "coerce"
    apply_computed_lines: bool = True

    # Presentation defaults used by the CLI
    display_field: DisplayField = "cumulative_balance"
    placeholder: str = "—"
    amount_decimals: int = Field(default=2, ge=0, le=6)

    model_config = {"env_prefix": "COMPILED_REPORT_"}


class LoggingSettings(BaseSettings):
    """Settings for application logging."""

    level: str = "INFO"
    structured: bool = True

    model_config = {"env_prefix": "LOG_"}


@lru_cache(maxsize=1)
def get_compiled_report_settings() -> CompiledReportSettings:
    return CompiledReportSettings()
