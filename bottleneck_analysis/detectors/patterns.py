"""Heuristic pattern detection within a single profile."""

from typing import List

from .base import BaseAlgorithm, DetectionState
from ..analysis import statistics
from ..core.models import (
    AlgorithmType,
    BottleneckSeverity,
    BottleneckType,
    PerformanceBottleneck,
    PerformanceCategory,
    PerformanceMetricType,
    PerformanceProfile,
)


class LockContentionAlgorithm(BaseAlgorithm):
    """Low CPU usage combined with high response times suggests threads waiting on locks."""

    algorithm_id = "pattern_lock_contention"
    name = "Lock Contention Pattern Detection"
    algorithm_type = AlgorithmType.PATTERN_MATCHING
    max_confidence = 0.75

    max_cpu_usage = 30.0

    async def detect(self, profile: PerformanceProfile, state: DetectionState) -> List[PerformanceBottleneck]:
        cpu_values = profile.values_in_category(PerformanceCategory.CPU)
        response_times = profile.values_of_type(PerformanceMetricType.RESPONSE_TIME)
        if not cpu_values or not response_times:
            return []

        avg_cpu = statistics.mean(cpu_values)
        avg_response_time = statistics.mean(response_times)

        if avg_cpu >= self.max_cpu_usage or avg_response_time <= self.config.response_time_threshold * 2:
            return []

        return [self.create_bottleneck(
            profile,
            bottleneck_type=BottleneckType.LOCK_CONTENTION,
            severity=BottleneckSeverity.HIGH,
            component="application",
            operation="lock_contention",
            impact_score=80,
            confidence=0.7,
            context={
                "pattern_analysis": {
                    "cpu_usage": avg_cpu,
                    "response_time": avg_response_time,
                    "pattern_type": "lock_contention",
                }
            },
        )]


class ResourceStarvationAlgorithm(BaseAlgorithm):
    """High and unstable memory usage indicates memory pressure."""

    algorithm_id = "pattern_resource_starvation"
    name = "Resource Starvation Pattern Detection"
    algorithm_type = AlgorithmType.PATTERN_MATCHING
    max_confidence = 0.8

    min_peak_memory = 85.0
    min_variability = 0.3

    async def detect(self, profile: PerformanceProfile, state: DetectionState) -> List[PerformanceBottleneck]:
        memory_values = profile.values_in_category(PerformanceCategory.MEMORY)
        if not memory_values:
            return []

        peak = max(memory_values)
        variability = statistics.coefficient_of_variation(memory_values)

        if peak <= self.min_peak_memory or variability <= self.min_variability:
            return []

        return [self.create_bottleneck(
            profile,
            bottleneck_type=BottleneckType.RESOURCE_STARVATION,
            severity=BottleneckSeverity.HIGH,
            component="memory",
            operation="memory_pressure",
            impact_score=85,
            confidence=0.8,
            context={
                "pattern_analysis": {
                    "max_memory_usage": peak,
                    "memory_variability": variability,
                    "pattern_type": "resource_starvation",
                }
            },
        )]
