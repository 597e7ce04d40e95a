"""Bottleneck detection orchestration."""

import time
from typing import Dict, Any, List, Optional
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

import structlog

from .config import AnalysisConfig
from .errors import AlgorithmError
from .events import Observer, notify
from .models import PerformanceBottleneck, PerformanceProfile
from ..detectors.base import DetectionState
from ..detectors.registry import AlgorithmRegistry, build_default_registry
from ..history.baseline import BaselineTracker, profile_signature
from ..history.store import HistoricalStore
from ..monitoring.logging import analysis_logger
from ..monitoring.metrics import MetricsCollector

logger = structlog.get_logger(__name__)


@dataclass
class DetectionRun:
    """Outcome of one detection call, with per-algorithm diagnostics."""
    profile_id: str
    bottlenecks: List[PerformanceBottleneck] = field(default_factory=list)
    algorithm_results: Dict[str, int] = field(default_factory=dict)
    errors: List[AlgorithmError] = field(default_factory=list)
    candidate_count: int = 0
    duration_seconds: float = 0.0


class BottleneckDetectionService:
    """Runs every enabled detection algorithm over a profile.

    The service owns the profile history, the anomaly baselines and the
    per-profile result cache. Algorithms only see a read-only
    ``DetectionState``; history and baselines are updated once per call,
    after all algorithms ran.
    """

    def __init__(
        self,
        config: Optional[AnalysisConfig] = None,
        registry: Optional[AlgorithmRegistry] = None,
        history: Optional[HistoricalStore] = None,
        baselines: Optional[BaselineTracker] = None,
        metrics: Optional[MetricsCollector] = None
    ):
        self.config = config if config is not None else AnalysisConfig()
        self.registry = registry if registry is not None else build_default_registry(self.config)
        self.history = history if history is not None else HistoricalStore(
            max_profiles=self.config.max_historical_profiles,
            trimmed_profiles=self.config.trimmed_historical_profiles,
            analysis_window=self.config.historical_analysis_window,
        )
        self.baselines = baselines if baselines is not None else BaselineTracker()
        self.metrics = metrics if metrics is not None else MetricsCollector()

        self._detected: Dict[str, List[PerformanceBottleneck]] = {}

    async def analyze_profile(self, profile: PerformanceProfile) -> List[PerformanceBottleneck]:
        """Detect bottlenecks in a profile."""
        run = await self.detect(profile)
        return run.bottlenecks

    async def detect(self, profile: PerformanceProfile, observer: Optional[Observer] = None) -> DetectionRun:
        """Detect bottlenecks and return them together with diagnostics."""
        start_time = time.perf_counter()
        run = DetectionRun(profile_id=profile.id)
        state = DetectionState(history=self.history.profiles(), baselines=self.baselines)

        candidates: List[PerformanceBottleneck] = []
        for algorithm_id, algorithm in self.registry.enabled_items():
            try:
                found = list(await algorithm.detect(profile, state))
                for bottleneck in found:
                    bottleneck.confidence = min(bottleneck.confidence, algorithm.max_confidence)
                    bottleneck.context["detection_algorithm"] = algorithm_id
            except Exception as e:
                error = AlgorithmError(algorithm_id, str(e), details={"profile_id": profile.id})
                run.errors.append(error)
                analysis_logger.log_component_failure("algorithm", algorithm_id, e, profile_id=profile.id)
                self.metrics.increment_counter("algorithm_errors_total", {"algorithm": algorithm_id})
                notify(observer, "algorithm_error", algorithm_id=algorithm_id, error=error.to_dict())
                continue

            run.algorithm_results[algorithm_id] = len(found)
            candidates.extend(found)
            notify(observer, "algorithm_completed", algorithm_id=algorithm_id, bottleneck_count=len(found))

        run.candidate_count = len(candidates)
        run.bottlenecks = self._filter_by_confidence(self._deduplicate(candidates))
        self._detected[profile.id] = run.bottlenecks

        self._record_profile(profile)

        run.duration_seconds = time.perf_counter() - start_time
        self._record_metrics(run)
        analysis_logger.log_bottlenecks_detected(
            profile_id=profile.id,
            target=profile.baseline_key,
            detected=len(run.bottlenecks),
            candidates=run.candidate_count,
            duration=run.duration_seconds,
        )

        if run.bottlenecks and self.config.enable_real_time_detection:
            notify(
                observer,
                "bottlenecks_detected",
                profile_id=profile.id,
                bottlenecks=[b.to_dict() for b in run.bottlenecks],
            )

        return run

    def _deduplicate(self, bottlenecks: List[PerformanceBottleneck]) -> List[PerformanceBottleneck]:
        # First occurrence of a (type, component) pair wins; later ones are dropped.
        seen: Dict[str, PerformanceBottleneck] = {}
        for bottleneck in bottlenecks:
            if bottleneck.dedup_key not in seen:
                seen[bottleneck.dedup_key] = bottleneck
        return list(seen.values())

    def _filter_by_confidence(self, bottlenecks: List[PerformanceBottleneck]) -> List[PerformanceBottleneck]:
        return [b for b in bottlenecks if b.confidence >= self.config.confidence_threshold]

    def _record_profile(self, profile: PerformanceProfile) -> None:
        # No await between the two updates: concurrent calls for one target cannot interleave here.
        self.history.add_profile(profile)
        self.baselines.observe(profile.baseline_key, profile_signature(profile))

    def _record_metrics(self, run: DetectionRun) -> None:
        self.metrics.increment_counter("profiles_analyzed_total")
        for bottleneck in run.bottlenecks:
            self.metrics.increment_counter("bottlenecks_detected_total", {"type": bottleneck.type.value})
        self.metrics.record_histogram("analysis_duration_seconds", run.duration_seconds, {"stage": "detection"})
        self._update_gauges()

    def _update_gauges(self) -> None:
        self.metrics.set_gauge("anomaly_baselines", len(self.baselines))
        self.metrics.set_gauge("historical_profiles", self.history.profile_count)

    # Administration

    def enable_algorithm(self, algorithm_id: str) -> None:
        self.registry.enable(algorithm_id)
        logger.info("Enabled detection algorithm", algorithm=algorithm_id)

    def disable_algorithm(self, algorithm_id: str) -> None:
        self.registry.disable(algorithm_id)
        logger.info("Disabled detection algorithm", algorithm=algorithm_id)

    def get_detection_algorithms(self) -> List[Dict[str, Any]]:
        return [algorithm.describe() for _, algorithm in self.registry.items()]

    def get_detected_bottlenecks(self, profile_id: str) -> List[PerformanceBottleneck]:
        return list(self._detected.get(profile_id, []))

    def get_detection_statistics(self) -> Dict[str, Any]:
        return {
            "total_algorithms": len(self.registry),
            "enabled_algorithms": len(self.registry.enabled_items()),
            "historical_profiles": self.history.profile_count,
            "anomaly_baselines": len(self.baselines),
            "total_bottlenecks_detected": sum(len(b) for b in self._detected.values()),
        }

    def cleanup_historical_data(self, now: Optional[datetime] = None) -> Dict[str, int]:
        """Trim the profile buffer and evict baselines idle for too long."""
        now = now or datetime.now(timezone.utc)
        trimmed = self.history.trim_profiles()
        evicted = self.baselines.evict_stale(timedelta(days=self.config.baseline_max_age_days), now=now)

        self._update_gauges()
        logger.info("Historical data cleanup completed", profiles_trimmed=trimmed, baselines_evicted=evicted)
        return {"profiles_trimmed": trimmed, "baselines_evicted": evicted}

    async def shutdown(self) -> None:
        """Drop profile history, baselines and cached results."""
        self.history.clear_profiles()
        self.baselines.clear()
        self._detected.clear()
        self._update_gauges()
        logger.info("Bottleneck detection service shutdown complete")
