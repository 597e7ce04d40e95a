"""Rolling per-target signature baselines used for anomaly scoring."""

from typing import Dict, Optional, List
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from collections import deque
import math

import structlog

from ..analysis import statistics
from ..core.models import AnomalyBaseline, BottleneckSeverity, PerformanceMetricType, PerformanceProfile

logger = structlog.get_logger(__name__)

MAX_BASELINE_SAMPLES = 100
ANOMALY_THRESHOLD = 2.0
HIGH_SEVERITY_SCORE = 3.0
MAX_ANOMALY_CONFIDENCE = 0.95

# Weighted blend of metric averages forming the profile signature.
SIGNATURE_WEIGHTS = (
    (PerformanceMetricType.RESPONSE_TIME, 0.5),
    (PerformanceMetricType.CPU_USAGE, 0.3),
    (PerformanceMetricType.MEMORY_USAGE, 0.2),
)


def profile_signature(profile: PerformanceProfile) -> float:
    """Blend of response time, CPU and memory averages; missing types add 0."""
    return sum(profile.average_of_type(metric_type) * weight for metric_type, weight in SIGNATURE_WEIGHTS)


@dataclass(frozen=True)
class AnomalyScore:
    """Distance of a signature from its baseline, in standard deviations."""
    score: float
    baseline_mean: float
    baseline_variance: float
    current: float

    @property
    def is_anomalous(self) -> bool:
        return self.score > ANOMALY_THRESHOLD

    @property
    def severity(self) -> BottleneckSeverity:
        return BottleneckSeverity.HIGH if self.score > HIGH_SEVERITY_SCORE else BottleneckSeverity.MEDIUM

    @property
    def confidence(self) -> float:
        return min(self.score / 3, MAX_ANOMALY_CONFIDENCE)


class BaselineTracker:
    """Tracks one AnomalyBaseline per ``{target_type}_{target_id}`` key.

    Scoring is read-only; only ``observe`` mutates a baseline, and the
    detection service calls it once per analyzed profile.
    """

    def __init__(self, max_samples: int = MAX_BASELINE_SAMPLES):
        self.max_samples = max_samples
        self._baselines: Dict[str, AnomalyBaseline] = {}

    def __len__(self) -> int:
        return len(self._baselines)

    def __contains__(self, key: str) -> bool:
        return key in self._baselines

    def get(self, key: str) -> Optional[AnomalyBaseline]:
        return self._baselines.get(key)

    def keys(self) -> List[str]:
        return list(self._baselines.keys())

    def score(self, key: str, value: float) -> Optional[AnomalyScore]:
        """Score ``value`` against the baseline for ``key``.

        Returns None for a key that has never been observed; a first sample
        is never anomalous. Zero variance yields a score of 0.
        """
        baseline = self._baselines.get(key)
        if baseline is None:
            return None

        if baseline.variance == 0:
            score = 0.0
        else:
            score = abs(value - baseline.mean) / math.sqrt(baseline.variance)

        return AnomalyScore(
            score=score,
            baseline_mean=baseline.mean,
            baseline_variance=baseline.variance,
            current=value,
        )

    def observe(self, key: str, value: float, now: Optional[datetime] = None) -> AnomalyBaseline:
        """Append a signature to the window and recompute mean and variance."""
        now = now or datetime.now(timezone.utc)
        baseline = self._baselines.get(key)

        if baseline is None:
            baseline = AnomalyBaseline(
                samples=deque([value], maxlen=self.max_samples),
                mean=value,
                variance=0.0,
                last_updated=now,
            )
            self._baselines[key] = baseline
            logger.debug("Created anomaly baseline", baseline_key=key, signature=value)
            return baseline

        baseline.samples.append(value)
        samples = list(baseline.samples)
        baseline.mean = statistics.mean(samples)
        baseline.variance = statistics.variance(samples)
        baseline.last_updated = now
        return baseline

    def evict_stale(self, max_age: timedelta = timedelta(days=7), now: Optional[datetime] = None) -> int:
        """Remove baselines not updated within ``max_age``. Returns the count removed.

        A naive ``now`` is taken to be UTC.
        """
        now = now or datetime.now(timezone.utc)
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        cutoff = now - max_age
        stale = [key for key, baseline in self._baselines.items() if baseline.last_updated < cutoff]
        for key in stale:
            del self._baselines[key]
        if stale:
            logger.info("Evicted stale anomaly baselines", count=len(stale))
        return len(stale)

    def clear(self) -> None:
        self._baselines.clear()
