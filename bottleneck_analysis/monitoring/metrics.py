"""Prometheus metrics for the bottleneck analysis engine."""

from typing import Any, Dict, Optional
import threading

from prometheus_client import Counter, Histogram, Gauge, CollectorRegistry, generate_latest
import structlog

logger = structlog.get_logger(__name__)


class MetricsCollector:
    """Prometheus counters, histograms and gauges on a private registry."""

    def __init__(self, registry: Optional[CollectorRegistry] = None):
        self.registry = registry or CollectorRegistry()
        self._lock = threading.Lock()

        self.counters: Dict[str, Counter] = {}
        self.histograms: Dict[str, Histogram] = {}
        self.gauges: Dict[str, Gauge] = {}

        self._initialize_metrics()

    def _initialize_metrics(self):
        self.counters["profiles_analyzed_total"] = Counter(
            "profiles_analyzed_total",
            "Total number of performance profiles analyzed",
            registry=self.registry
        )

        self.counters["bottlenecks_detected_total"] = Counter(
            "bottlenecks_detected_total",
            "Total number of bottlenecks reported after filtering",
            ["type"],
            registry=self.registry
        )

        self.counters["algorithm_errors_total"] = Counter(
            "algorithm_errors_total",
            "Total number of detection algorithm failures",
            ["algorithm"],
            registry=self.registry
        )

        self.counters["root_causes_generated_total"] = Counter(
            "root_causes_generated_total",
            "Total number of root causes generated",
            ["category"],
            registry=self.registry
        )

        self.counters["rule_errors_total"] = Counter(
            "rule_errors_total",
            "Total number of analysis rule failures",
            ["rule"],
            registry=self.registry
        )

        self.histograms["analysis_duration_seconds"] = Histogram(
            "analysis_duration_seconds",
            "Time spent in detection and root cause analysis",
            ["stage"],
            buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 5.0],
            registry=self.registry
        )

        self.gauges["anomaly_baselines"] = Gauge(
            "anomaly_baselines",
            "Number of tracked anomaly baselines",
            registry=self.registry
        )

        self.gauges["historical_profiles"] = Gauge(
            "historical_profiles",
            "Number of profiles in the historical buffer",
            registry=self.registry
        )

    def _apply(self, family: Dict[str, Any], kind: str, name: str, labels: Optional[Dict[str, str]],
               operation: str, value: float) -> None:
        with self._lock:
            metric = family.get(name)
            if metric is None:
                logger.warning("Metric not found", metric_kind=kind, metric_name=name)
                return
            if metric._labelnames:
                metric = metric.labels(**(labels or {}))
            getattr(metric, operation)(value)

    def increment_counter(self, name: str, labels: Dict[str, str] = None, amount: float = 1) -> None:
        self._apply(self.counters, "counter", name, labels, "inc", amount)

    def record_histogram(self, name: str, value: float, labels: Dict[str, str] = None) -> None:
        self._apply(self.histograms, "histogram", name, labels, "observe", value)

    def set_gauge(self, name: str, value: float, labels: Dict[str, str] = None) -> None:
        self._apply(self.gauges, "gauge", name, labels, "set", value)

    def get_sample_value(self, name: str, labels: Dict[str, str] = None) -> Optional[float]:
        """Read back a sample, e.g. ``bottlenecks_detected_total`` with labels."""
        return self.registry.get_sample_value(name, labels or {})

    def exposition(self) -> str:
        """Prometheus text exposition of every registered metric."""
        return generate_latest(self.registry).decode("utf-8")
