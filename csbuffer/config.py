"""
Configuration schema for one analyzer run.

Built by the CLI from command-line flags and handed to the runner as a
single validated, immutable object.
"""

from __future__ import annotations

from typing import Literal, Optional

import pytz
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .simulator import WATERMARK
from .transformer.time_window import AggregationMode


class AnalyzerConfig(BaseModel):
    """
    Centralized, validated configuration for one batch run.
    Directory input takes over single-file input when both are given.
    """

    model_config = ConfigDict(frozen=True)

    # === Input ===
    input_file: Optional[str] = Field(default=None, description="Single input file to process.")
    input_dir: Optional[str] = Field(
        default=None,
        description="Working directory walked recursively for input files.",
    )
    extension: str = Field(default="raw", min_length=1, description="Input file extension: raw, cs.")

    # === Output ===
    output_name: str = Field(default="output", min_length=1, description="Package file base name.")
    output_format: Literal["csv", "json", "xlsx"] = Field(default="csv")
    output_dir: str = Field(default=".", description="Directory receiving every output file.")

    # === Simulation ===
    watermark: int = Field(default=WATERMARK, gt=0, description="Buffer watermark in bytes.")
    seed: Optional[int] = Field(
        default=None,
        description="Seed for initial buffer levels; None seeds from wall-clock seconds.",
    )
    suppress_diagnostics: bool = Field(
        default=False,
        description="Drop diagnostic event categories before buffering.",
    )

    # === Aggregation ===
    primetime_only: bool = Field(default=False, description="8pm-11pm events only.")
    cumulative_primetime: bool = Field(
        default=False,
        description="8pm-11pm events only, all dates folded onto one synthetic date.",
    )
    timezone: str = Field(default="UTC", description="IANA zone for hour-of-day and date rotation.")

    # === Side logs ===
    vod_log: bool = Field(default=False, description="Create the log(s) for VOD activity.")
    sequence_log: bool = Field(default=False, description="Full events sequence log; skips packaging.")

    # === Runtime ===
    concurrency: int = Field(
        default=100,
        ge=1,
        description="Accepted for compatibility; files are processed sequentially.",
    )
    diagnostics: bool = Field(default=False, description="DEBUG trace of every line.")
    verbose: bool = Field(default=False, description="INFO-level console output.")
    log_file: Optional[str] = Field(default=None)

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, value: str) -> str:
        try:
            pytz.timezone(value)
        except pytz.UnknownTimeZoneError as e:
            raise ValueError(f"Unknown timezone: {value}") from e
        return value

    @field_validator("extension")
    @classmethod
    def _strip_dot(cls, value: str) -> str:
        return value.lstrip(".")

    @property
    def has_input(self) -> bool:
        return bool(self.input_file or self.input_dir)

    @property
    def aggregation_mode(self) -> AggregationMode:
        # primetime_only wins when both flags are set
        if self.primetime_only:
            return AggregationMode.PRIMETIME
        if self.cumulative_primetime:
            return AggregationMode.CUMULATIVE_PRIMETIME
        return AggregationMode.ALL

    @property
    def event_log_enabled(self) -> bool:
        return self.vod_log or self.sequence_log
