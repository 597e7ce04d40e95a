"""Anomaly detection against the per-target signature baseline."""

from typing import List

from .base import BaseAlgorithm, DetectionState
from ..core.models import (
    AlgorithmType,
    BottleneckType,
    PerformanceBottleneck,
    PerformanceProfile,
)
from ..history.baseline import profile_signature


class AnomalyDetectionAlgorithm(BaseAlgorithm):
    """Score the profile signature against its baseline.

    The baseline itself is updated by the detection service after all
    algorithms have run, so this algorithm only reads it.
    """

    algorithm_id = "anomaly_detection"
    name = "Anomaly Detection"
    algorithm_type = AlgorithmType.ANOMALY_DETECTION
    max_confidence = 0.85

    async def detect(self, profile: PerformanceProfile, state: DetectionState) -> List[PerformanceBottleneck]:
        signature = profile_signature(profile)
        anomaly = state.baselines.score(profile.baseline_key, signature)

        if anomaly is None or not anomaly.is_anomalous:
            return []

        return [self.create_bottleneck(
            profile,
            bottleneck_type=BottleneckType.ALGORITHM_INEFFICIENCY,
            severity=anomaly.severity,
            component="application",
            operation="anomaly_detected",
            impact_score=min(anomaly.score * 25, 100.0),
            confidence=anomaly.confidence,
            context={
                "anomaly_detection": {
                    "anomaly_score": anomaly.score,
                    "baseline_mean": anomaly.baseline_mean,
                    "baseline_variance": anomaly.baseline_variance,
                    "current_signature": signature,
                }
            },
        )]
