"""Correlation between response time and CPU usage within one profile."""

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


class CorrelationAlgorithm(BaseAlgorithm):
    algorithm_id = "correlation_analysis"
    name = "Performance Correlation Analysis"
    algorithm_type = AlgorithmType.CORRELATION_BASED
    max_confidence = 0.7

    min_correlation = 0.7

    async def detect(self, profile: PerformanceProfile, state: DetectionState) -> List[PerformanceBottleneck]:
        response_times = profile.values_of_type(PerformanceMetricType.RESPONSE_TIME)
        cpu_values = profile.values_in_category(PerformanceCategory.CPU)
        if not response_times or not cpu_values:
            return []

        correlation = statistics.pearson_correlation(response_times, cpu_values)
        strength = abs(correlation)
        if strength <= self.min_correlation:
            return []

        return [self.create_bottleneck(
            profile,
            bottleneck_type=BottleneckType.CPU_BOUND if correlation > 0 else BottleneckType.ALGORITHM_INEFFICIENCY,
            severity=BottleneckSeverity.MEDIUM,
            component="application",
            operation="correlated_performance",
            impact_score=strength * 100,
            confidence=strength,
            context={
                "correlation_analysis": {
                    "correlation_coefficient": correlation,
                    "metric_1": PerformanceMetricType.RESPONSE_TIME.value,
                    "metric_2": PerformanceMetricType.CPU_USAGE.value,
                }
            },
        )]
