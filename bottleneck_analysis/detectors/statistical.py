"""Statistical detection against the historical profile buffer."""

from typing import List

import structlog

from .base import (
    BaseAlgorithm,
    DetectionState,
    bottleneck_type_for_metric,
    component_for_metric,
)
from ..analysis import statistics
from ..core.models import (
    AlgorithmType,
    BottleneckSeverity,
    BottleneckType,
    PerformanceBottleneck,
    PerformanceMetricType,
    PerformanceProfile,
)

logger = structlog.get_logger(__name__)

OUTLIER_METRICS = (
    PerformanceMetricType.RESPONSE_TIME,
    PerformanceMetricType.CPU_USAGE,
    PerformanceMetricType.MEMORY_USAGE,
    PerformanceMetricType.THROUGHPUT,
)


class StatisticalOutlierAlgorithm(BaseAlgorithm):
    """Compare per-metric averages with the distribution of historical averages."""

    algorithm_id = "statistical_outlier"
    name = "Statistical Outlier Detection"
    algorithm_type = AlgorithmType.STATISTICAL
    max_confidence = 0.9

    z_score_threshold = 2.0

    async def detect(self, profile: PerformanceProfile, state: DetectionState) -> List[PerformanceBottleneck]:
        bottlenecks = []
        min_samples = self.config.min_sample_size

        if len(state.history) < min_samples:
            return bottlenecks

        for metric_type in OUTLIER_METRICS:
            current_values = profile.values_of_type(metric_type)
            if not current_values:
                continue

            current_avg = statistics.mean(current_values)
            # Profiles without samples of this type average 0 and are ignored.
            historical = [p.average_of_type(metric_type) for p in state.history]
            historical = [avg for avg in historical if avg > 0]
            if len(historical) < min_samples:
                continue

            hist = statistics.describe(historical)
            if hist.stddev == 0:
                continue

            z_score = abs(current_avg - hist.mean) / hist.stddev
            if z_score <= self.z_score_threshold:
                continue

            bottlenecks.append(self.create_bottleneck(
                profile,
                bottleneck_type=bottleneck_type_for_metric(metric_type),
                severity=BottleneckSeverity.HIGH if z_score > 3 else BottleneckSeverity.MEDIUM,
                component=component_for_metric(metric_type),
                operation=metric_type.value,
                impact_score=min(z_score * 20, 100.0),
                confidence=min(z_score / 3, 0.95),
                context={
                    "statistical_analysis": {
                        "z_score": z_score,
                        "historical_mean": hist.mean,
                        "historical_std_dev": hist.stddev,
                        "current_value": current_avg,
                        "sample_size": len(historical),
                    }
                },
            ))

        return bottlenecks


class TrendAnalysisAlgorithm(BaseAlgorithm):
    """Detect steadily degrading response times across recent profiles."""

    algorithm_id = "trend_analysis"
    name = "Performance Trend Analysis"
    algorithm_type = AlgorithmType.STATISTICAL
    max_confidence = 0.85

    min_slope = 0.1
    min_correlation = 0.7

    async def detect(self, profile: PerformanceProfile, state: DetectionState) -> List[PerformanceBottleneck]:
        window = self.config.analysis_window_size
        if len(state.history) < window:
            return []

        recent = state.history[-window:]
        trend = statistics.linear_trend(
            [p.average_of_type(PerformanceMetricType.RESPONSE_TIME) for p in recent]
        )

        if not (trend.slope > self.min_slope and trend.correlation > self.min_correlation):
            return []

        logger.debug(
            "Response time degradation trend",
            profile_id=profile.id,
            slope=trend.slope,
            correlation=trend.correlation,
        )
        return [self.create_bottleneck(
            profile,
            bottleneck_type=BottleneckType.ALGORITHM_INEFFICIENCY,
            severity=BottleneckSeverity.MEDIUM,
            component="application",
            operation="performance_degradation",
            impact_score=min(trend.slope * 100, 100.0),
            confidence=trend.correlation,
            context={
                "trend_analysis": {
                    "slope": trend.slope,
                    "correlation": trend.correlation,
                    "window_size": window,
                }
            },
        )]
