"""Pytest configuration and fixtures."""

import pytest
from typing import Dict, Iterable, Optional, Tuple
import uuid

from bottleneck_analysis.core.config import AnalysisConfig
from bottleneck_analysis.core.models import (
    PerformanceCategory,
    PerformanceMetric,
    PerformanceMetricType,
    PerformanceProfile,
    ProfileSummary,
)
from bottleneck_analysis.monitoring.metrics import MetricsCollector


CATEGORY_BY_TYPE: Dict[PerformanceMetricType, PerformanceCategory] = {
    PerformanceMetricType.CPU_USAGE: PerformanceCategory.CPU,
    PerformanceMetricType.MEMORY_USAGE: PerformanceCategory.MEMORY,
    PerformanceMetricType.DISK_IO: PerformanceCategory.IO,
    PerformanceMetricType.NETWORK_IO: PerformanceCategory.NETWORK,
    PerformanceMetricType.DATABASE_QUERY_TIME: PerformanceCategory.DATABASE,
    PerformanceMetricType.CACHE_HIT_RATE: PerformanceCategory.CACHE,
}


def build_profile(
    samples: Iterable[Tuple[PerformanceMetricType, float]] = (),
    target_id: str = "checkout-service",
    target_type: str = "service",
    duration_ms: float = 1000.0,
    performance_score: float = 100.0,
    profile_id: Optional[str] = None
) -> PerformanceProfile:
    """Build a profile from ``(metric_type, value)`` pairs."""
    metrics = [
        PerformanceMetric(
            metric_type=metric_type,
            category=CATEGORY_BY_TYPE.get(metric_type, PerformanceCategory.APPLICATION),
            value=float(value),
        )
        for metric_type, value in samples
    ]
    return PerformanceProfile(
        id=profile_id or f"profile_{uuid.uuid4().hex[:8]}",
        target_id=target_id,
        target_type=target_type,
        duration_ms=duration_ms,
        metrics=metrics,
        summary=ProfileSummary(performance_score=performance_score),
    )


def series(metric_type: PerformanceMetricType, values: Iterable[float]):
    return [(metric_type, v) for v in values]


@pytest.fixture
def profile_factory():
    """Factory for performance profiles."""
    return build_profile


@pytest.fixture
def config():
    """Default configuration, isolated from any local .env file."""
    return AnalysisConfig(_env_file=None)


@pytest.fixture
def make_config():
    """Configuration with overrides."""
    def _make(**overrides):
        return AnalysisConfig(_env_file=None, **overrides)
    return _make


@pytest.fixture
def metrics():
    return MetricsCollector()


@pytest.fixture
def cpu_profile(profile_factory):
    """Profile with CPU samples 95-98, averaging 96.5%."""
    return profile_factory(series(PerformanceMetricType.CPU_USAGE, [95, 96, 97, 98]))
