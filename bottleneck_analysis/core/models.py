"""Data model for performance profiles, bottlenecks and root causes."""

from typing import Dict, Any, Optional, List, Tuple
from dataclasses import dataclass, field, fields
from datetime import datetime, timezone
from collections import deque
from enum import Enum
import uuid

from .errors import ProfileValidationError


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _clamp_unit(value: float) -> float:
    return max(0.0, min(float(value), 1.0))


def generate_id(prefix: str) -> str:
    """Generate a unique record id such as ``bottleneck_<hex>``."""
    return f"{prefix}_{uuid.uuid4().hex}"


class PerformanceMetricType(Enum):
    """Kind of a metric sample."""
    RESPONSE_TIME = "response_time"
    THROUGHPUT = "throughput"
    CPU_USAGE = "cpu_usage"
    MEMORY_USAGE = "memory_usage"
    DISK_IO = "disk_io"
    NETWORK_IO = "network_io"
    DATABASE_QUERY_TIME = "database_query_time"
    CACHE_HIT_RATE = "cache_hit_rate"
    ERROR_RATE = "error_rate"
    QUEUE_SIZE = "queue_size"
    CONNECTION_POOL_SIZE = "connection_pool_size"
    GC_TIME = "gc_time"


class PerformanceCategory(Enum):
    """Coarse grouping of metric types."""
    CPU = "cpu"
    MEMORY = "memory"
    IO = "io"
    NETWORK = "network"
    DATABASE = "database"
    CACHE = "cache"
    APPLICATION = "application"
    BUSINESS_LOGIC = "business_logic"


class BottleneckType(Enum):
    CPU_BOUND = "cpu_bound"
    MEMORY_BOUND = "memory_bound"
    IO_BOUND = "io_bound"
    NETWORK_BOUND = "network_bound"
    DATABASE_BOUND = "database_bound"
    LOCK_CONTENTION = "lock_contention"
    RESOURCE_STARVATION = "resource_starvation"
    ALGORITHM_INEFFICIENCY = "algorithm_inefficiency"
    CONFIGURATION_ISSUE = "configuration_issue"


class BottleneckSeverity(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class RootCauseCategory(Enum):
    CODE_INEFFICIENCY = "code_inefficiency"
    RESOURCE_CONTENTION = "resource_contention"
    CONFIGURATION_ERROR = "configuration_error"
    ARCHITECTURAL_ISSUE = "architectural_issue"
    DATA_ISSUE = "data_issue"
    EXTERNAL_DEPENDENCY = "external_dependency"
    INFRASTRUCTURE_LIMIT = "infrastructure_limit"


class EvidenceType(Enum):
    METRIC_CORRELATION = "metric_correlation"
    STACK_TRACE = "stack_trace"
    QUERY_PLAN = "query_plan"
    RESOURCE_UTILIZATION = "resource_utilization"
    TIMING_ANALYSIS = "timing_analysis"
    PATTERN_MATCHING = "pattern_matching"


class FixCategory(Enum):
    CODE_OPTIMIZATION = "code_optimization"
    CACHING_STRATEGY = "caching_strategy"
    DATABASE_OPTIMIZATION = "database_optimization"
    CONFIGURATION_CHANGE = "configuration_change"
    INFRASTRUCTURE_SCALING = "infrastructure_scaling"
    ARCHITECTURAL_REFACTOR = "architectural_refactor"


class ImplementationEffort(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    VERY_HIGH = "very_high"


class CodeChangeType(Enum):
    ADDITION = "addition"
    MODIFICATION = "modification"
    DELETION = "deletion"
    REFACTORING = "refactoring"


class AlgorithmType(Enum):
    """Family a detection algorithm belongs to."""
    THRESHOLD_BASED = "threshold_based"
    STATISTICAL = "statistical"
    MACHINE_LEARNING = "machine_learning"
    PATTERN_MATCHING = "pattern_matching"
    CORRELATION_BASED = "correlation_based"
    ANOMALY_DETECTION = "anomaly_detection"


def _serialize(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, (list, tuple, deque)):
        return [_serialize(v) for v in value]
    if isinstance(value, dict):
        return {k: _serialize(v) for k, v in value.items()}
    if hasattr(value, "to_dict"):
        return value.to_dict()
    return value


class _Serializable:
    """Mixin rendering dataclass records as plain dictionaries."""

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: _serialize(getattr(self, f.name)) for f in fields(self)}


@dataclass
class PerformanceMetric(_Serializable):
    """A single metric sample; ordering within a profile is arrival order."""
    metric_type: PerformanceMetricType
    category: PerformanceCategory
    value: float
    timestamp: datetime = field(default_factory=_utcnow)
    name: str = ""
    unit: str = ""
    tags: Dict[str, str] = field(default_factory=dict)


@dataclass
class ProfileSummary(_Serializable):
    performance_score: float = 100.0
    total_samples: int = 0


@dataclass
class PerformanceProfile(_Serializable):
    """Collection of metric samples captured for one target.

    Profiles are produced by an external collector and are treated as
    read-only by the detection and root cause services.
    """
    id: str
    target_id: str
    target_type: str
    duration_ms: float
    start_time: datetime = field(default_factory=_utcnow)
    metrics: List[PerformanceMetric] = field(default_factory=list)
    summary: ProfileSummary = field(default_factory=ProfileSummary)

    def __post_init__(self):
        if self.metrics is None:
            raise ProfileValidationError("Profile metrics must be a sequence", field="metrics")
        self.metrics = list(self.metrics)
        if not self.summary.total_samples:
            self.summary.total_samples = len(self.metrics)

    @property
    def baseline_key(self) -> str:
        return f"{self.target_type}_{self.target_id}"

    def metrics_of_type(self, metric_type: PerformanceMetricType) -> List[PerformanceMetric]:
        return [m for m in self.metrics if m.metric_type == metric_type]

    def metrics_in_category(self, category: PerformanceCategory) -> List[PerformanceMetric]:
        return [m for m in self.metrics if m.category == category]

    def values_of_type(self, metric_type: PerformanceMetricType) -> List[float]:
        return [m.value for m in self.metrics_of_type(metric_type)]

    def values_in_category(self, category: PerformanceCategory) -> List[float]:
        return [m.value for m in self.metrics_in_category(category)]

    def average_of_type(self, metric_type: PerformanceMetricType) -> float:
        """Average value of a metric type, 0 when the profile has none."""
        values = self.values_of_type(metric_type)
        return sum(values) / len(values) if values else 0.0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PerformanceProfile":
        """Build a profile from a collector payload."""
        try:
            metrics = [
                PerformanceMetric(
                    metric_type=PerformanceMetricType(m["metric_type"]),
                    category=PerformanceCategory(m["category"]),
                    value=float(m["value"]),
                    timestamp=_parse_timestamp(m.get("timestamp")),
                    name=m.get("name", ""),
                    unit=m.get("unit", ""),
                    tags=dict(m.get("tags", {})),
                )
                for m in data.get("metrics", [])
            ]
            summary = data.get("summary") or {}
            return cls(
                id=str(data["id"]),
                target_id=str(data["target_id"]),
                target_type=str(data["target_type"]),
                duration_ms=float(data.get("duration_ms", 0.0)),
                start_time=_parse_timestamp(data.get("start_time")),
                metrics=metrics,
                summary=ProfileSummary(
                    performance_score=float(summary.get("performance_score", 100.0)),
                    total_samples=int(summary.get("total_samples", len(metrics))),
                ),
            )
        except KeyError as e:
            raise ProfileValidationError(f"Missing profile field: {e.args[0]}", field=str(e.args[0])) from e
        except (TypeError, ValueError) as e:
            raise ProfileValidationError(f"Invalid profile payload: {e}") from e


def _parse_timestamp(value: Any) -> datetime:
    if value is None:
        return _utcnow()
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


@dataclass(frozen=True)
class Evidence(_Serializable):
    """Observation supporting a root cause. Immutable once created."""
    type: EvidenceType
    description: str
    data: Dict[str, Any] = field(default_factory=dict)
    strength: float = 0.0
    timestamp: datetime = field(default_factory=_utcnow)

    def __post_init__(self):
        object.__setattr__(self, "strength", _clamp_unit(self.strength))


@dataclass
class CodeChange(_Serializable):
    file_path: str
    change_type: CodeChangeType
    description: str
    before_code: Optional[str] = None
    after_code: Optional[str] = None


@dataclass
class FixSuggestion(_Serializable):
    title: str
    description: str
    category: FixCategory
    implementation_effort: ImplementationEffort
    expected_improvement: float
    risks: List[str] = field(default_factory=list)
    prerequisites: List[str] = field(default_factory=list)
    code_changes: List[CodeChange] = field(default_factory=list)
    id: str = field(default_factory=lambda: generate_id("fix"))


@dataclass
class ImpactAssessment(_Serializable):
    performance_impact: float
    user_experience_impact: float
    resource_cost_impact: float
    business_impact: float
    affected_operations: List[str] = field(default_factory=list)
    affected_users: int = 0

    @classmethod
    def scaled(
        cls,
        base: float,
        factors: Tuple[float, float, float, float],
        affected_operations: List[str]
    ) -> "ImpactAssessment":
        """Scale one base score into the four sub-scores, each capped at 100."""
        perf, ux, cost, business = (min(base * f, 100.0) for f in factors)
        return cls(
            performance_impact=perf,
            user_experience_impact=ux,
            resource_cost_impact=cost,
            business_impact=business,
            affected_operations=list(affected_operations),
        )


@dataclass
class RootCause(_Serializable):
    category: RootCauseCategory
    description: str
    confidence: float
    evidence: List[Evidence] = field(default_factory=list)
    fix_suggestions: List[FixSuggestion] = field(default_factory=list)
    impact_assessment: Optional[ImpactAssessment] = None
    id: str = field(default_factory=lambda: generate_id("rootcause"))

    def __post_init__(self):
        self.confidence = _clamp_unit(self.confidence)


@dataclass
class PerformanceBottleneck(_Serializable):
    """A finding produced by a detection algorithm.

    ``root_causes`` starts empty and is filled in by the root cause analyzer.
    ``context`` holds the diagnostic payload of the producing algorithm.
    """
    profile_id: str
    type: BottleneckType
    severity: BottleneckSeverity
    component: str
    operation: str
    impact_score: float
    confidence: float
    duration_ms: float = 0.0
    percentage_of_total: float = 0.0
    context: Dict[str, Any] = field(default_factory=dict)
    root_causes: List[RootCause] = field(default_factory=list)
    detected_at: datetime = field(default_factory=_utcnow)
    id: str = field(default_factory=lambda: generate_id("bottleneck"))

    def __post_init__(self):
        self.confidence = _clamp_unit(self.confidence)
        self.impact_score = max(0.0, min(float(self.impact_score), 100.0))

    @property
    def dedup_key(self) -> str:
        return f"{self.type.value}_{self.component}"


@dataclass
class AnomalyBaseline(_Serializable):
    """Rolling signature window for one target.

    ``mean`` and ``variance`` are always recomputed from ``samples``.
    """
    samples: deque = field(default_factory=lambda: deque(maxlen=100))
    mean: float = 0.0
    variance: float = 0.0
    last_updated: datetime = field(default_factory=_utcnow)


@dataclass
class HistoricalAnalysis(_Serializable):
    """Lightweight record of one root cause analysis."""
    profile_id: str
    bottleneck_id: str
    performance_score: float
    root_cause_count: int
    top_root_cause_category: RootCauseCategory
    timestamp: datetime = field(default_factory=_utcnow)
