"""Base detection algorithm interface and common functionality."""

from abc import ABC, abstractmethod
from typing import List, Dict, Any, Optional, Tuple
from dataclasses import dataclass

import structlog

from ..core.config import AnalysisConfig
from ..core.models import (
    AlgorithmType,
    BottleneckSeverity,
    BottleneckType,
    PerformanceBottleneck,
    PerformanceMetricType,
    PerformanceProfile,
)
from ..history.baseline import BaselineTracker

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class DetectionState:
    """Read-only view of shared state handed to every algorithm for one profile."""
    history: Tuple[PerformanceProfile, ...]
    baselines: BaselineTracker


def calculate_severity(value: float, threshold: float) -> BottleneckSeverity:
    """Step function of value/threshold with breakpoints at 1.5x, 2x and 3x."""
    ratio = value / threshold
    if ratio > 3:
        return BottleneckSeverity.CRITICAL
    if ratio > 2:
        return BottleneckSeverity.HIGH
    if ratio > 1.5:
        return BottleneckSeverity.MEDIUM
    return BottleneckSeverity.LOW


def calculate_impact_score(current: float, baseline: float) -> float:
    if baseline == 0:
        return 0.0
    return min((current / baseline) * 50, 100.0)


_TYPE_BY_METRIC = {
    PerformanceMetricType.CPU_USAGE: (BottleneckType.CPU_BOUND, "cpu"),
    PerformanceMetricType.MEMORY_USAGE: (BottleneckType.MEMORY_BOUND, "memory"),
    PerformanceMetricType.DISK_IO: (BottleneckType.IO_BOUND, "io_subsystem"),
    PerformanceMetricType.NETWORK_IO: (BottleneckType.NETWORK_BOUND, "network"),
}


def bottleneck_type_for_metric(metric_type: PerformanceMetricType) -> BottleneckType:
    return _TYPE_BY_METRIC.get(metric_type, (BottleneckType.ALGORITHM_INEFFICIENCY, "application"))[0]


def component_for_metric(metric_type: PerformanceMetricType) -> str:
    return _TYPE_BY_METRIC.get(metric_type, (BottleneckType.ALGORITHM_INEFFICIENCY, "application"))[1]


class BaseAlgorithm(ABC):
    """Base class for all bottleneck detection algorithms.

    Subclasses set ``algorithm_id``, ``name``, ``algorithm_type`` and
    ``max_confidence`` and implement ``detect``. Algorithms must not mutate
    the profile or the shared state they are given.
    """

    algorithm_id: str = ""
    name: str = ""
    algorithm_type: AlgorithmType = AlgorithmType.THRESHOLD_BASED
    max_confidence: float = 1.0

    def __init__(self, config: AnalysisConfig, enabled: bool = True, max_confidence: Optional[float] = None):
        self.config = config
        self.enabled = enabled
        if max_confidence is not None:
            self.max_confidence = max_confidence

    @abstractmethod
    async def detect(self, profile: PerformanceProfile, state: DetectionState) -> List[PerformanceBottleneck]:
        """
        Detect bottlenecks in the given profile.

        Returns:
            Zero or more candidate bottlenecks. Confidence capping, context
            stamping, deduplication and filtering are done by the caller.
        """
        pass

    def is_enabled(self) -> bool:
        return self.enabled

    def enable(self) -> None:
        self.enabled = True

    def disable(self) -> None:
        self.enabled = False

    def describe(self) -> Dict[str, Any]:
        return {
            "id": self.algorithm_id,
            "name": self.name,
            "type": self.algorithm_type.value,
            "confidence": self.max_confidence,
            "enabled": self.enabled,
        }

    def create_bottleneck(
        self,
        profile: PerformanceProfile,
        bottleneck_type: BottleneckType,
        severity: BottleneckSeverity,
        component: str,
        operation: str,
        impact_score: float,
        confidence: float,
        percentage_of_total: float = 100.0,
        context: Optional[Dict[str, Any]] = None
    ) -> PerformanceBottleneck:
        """Create a bottleneck record for ``profile``."""
        return PerformanceBottleneck(
            profile_id=profile.id,
            type=bottleneck_type,
            severity=severity,
            component=component,
            operation=operation,
            duration_ms=profile.duration_ms,
            percentage_of_total=percentage_of_total,
            impact_score=impact_score,
            confidence=confidence,
            context=dict(context or {}),
        )
