"""Configuration management for the bottleneck analysis engine."""

from typing import Annotated
from pydantic import Field, ValidationError, field_validator, model_validator, ConfigDict
from pydantic_settings import BaseSettings

from .errors import ConfigurationError


class AnalysisConfig(BaseSettings):
    model_config = ConfigDict(
        env_prefix="BOTTLENECK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )
    """Static options for detection and root cause analysis, read once at construction."""

    # Detection thresholds
    cpu_usage_threshold: Annotated[float, Field(description="CPU usage threshold (%)")] = 80.0
    memory_usage_threshold: Annotated[float, Field(description="Memory usage threshold (%)")] = 85.0
    response_time_threshold: Annotated[float, Field(description="Response time threshold (ms)")] = 1000.0
    throughput_threshold: Annotated[float, Field(description="Throughput threshold (req/s)")] = 100.0
    error_rate_threshold: Annotated[float, Field(description="Error rate threshold (%)")] = 5.0
    queue_size_threshold: Annotated[float, Field(description="Queue size threshold")] = 100.0
    io_latency_threshold: Annotated[float, Field(description="I/O latency threshold (ms)")] = 100.0
    network_latency_threshold: Annotated[float, Field(description="Network latency threshold (ms)")] = 200.0

    # Sampling
    analysis_window_size: Annotated[int, Field(description="Profiles in the trend window")] = 20
    min_sample_size: Annotated[int, Field(description="Historical profiles needed for statistics")] = 10
    confidence_threshold: Annotated[float, Field(description="Minimum bottleneck confidence")] = 0.6
    root_cause_confidence_threshold: Annotated[float, Field(description="Minimum rule root cause confidence")] = 0.6

    # History retention
    historical_analysis_window: Annotated[int, Field(description="Analyses kept per target")] = 100
    max_analysis_depth: Annotated[int, Field(description="Maximum analysis depth")] = 5
    max_historical_profiles: Annotated[int, Field(description="Profile buffer capacity")] = 1000
    trimmed_historical_profiles: Annotated[int, Field(description="Profiles kept after a sweep")] = 500
    baseline_max_age_days: Annotated[int, Field(description="Days before an idle baseline is evicted")] = 7
    cleanup_interval_seconds: Annotated[float, Field(description="Maintenance sweep interval")] = 3600.0

    # Feature flags
    enable_real_time_detection: Annotated[bool, Field(description="Real-time detection")] = True
    enable_statistical_analysis: Annotated[bool, Field(description="Statistical algorithms")] = True
    enable_pattern_matching: Annotated[bool, Field(description="Pattern algorithms")] = True
    enable_deep_analysis: Annotated[bool, Field(description="Pattern database matching")] = True
    enable_machine_learning: Annotated[bool, Field(description="Model-backed root causes")] = False

    # Logging
    log_level: Annotated[str, Field(description="Log level")] = "INFO"
    environment: Annotated[str, Field(description="Environment")] = "production"

    @field_validator(
        "cpu_usage_threshold",
        "memory_usage_threshold",
        "response_time_threshold",
        "throughput_threshold",
        "error_rate_threshold",
        "queue_size_threshold",
        "io_latency_threshold",
        "network_latency_threshold",
    )
    @classmethod
    def validate_threshold(cls, v: float) -> float:
        """Thresholds are used as divisors for severity ratios."""
        if v <= 0:
            raise ValueError(f"Threshold must be positive, got {v}")
        return v

    @field_validator("confidence_threshold", "root_cause_confidence_threshold")
    @classmethod
    def validate_confidence(cls, v: float) -> float:
        if not 0.0 <= v <= 1.0:
            raise ValueError(f"Confidence threshold must be within [0, 1], got {v}")
        return v

    @field_validator(
        "analysis_window_size",
        "min_sample_size",
        "historical_analysis_window",
        "max_historical_profiles",
        "trimmed_historical_profiles",
    )
    @classmethod
    def validate_window(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"Window sizes must be at least 1, got {v}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v.upper()

    @model_validator(mode="after")
    def validate_profile_buffer(self) -> "AnalysisConfig":
        if self.trimmed_historical_profiles > self.max_historical_profiles:
            raise ValueError(
                f"trimmed_historical_profiles ({self.trimmed_historical_profiles}) must not exceed "
                f"max_historical_profiles ({self.max_historical_profiles})"
            )
        return self


def load_config(**overrides) -> AnalysisConfig:
    """Load configuration from the environment, applying explicit overrides."""
    try:
        return AnalysisConfig(**overrides)
    except ValidationError as e:
        errors = e.errors()
        key = ".".join(str(part) for part in errors[0]["loc"]) or None if errors else None
        raise ConfigurationError(str(e), config_key=key) from e
