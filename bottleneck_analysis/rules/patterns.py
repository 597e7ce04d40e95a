"""Known performance patterns matched against bottleneck types."""

from typing import Callable, Dict, List, Optional, Tuple
from dataclasses import dataclass, field

from ..core.models import (
    BottleneckType,
    FixCategory,
    FixSuggestion,
    ImplementationEffort,
    PerformanceBottleneck,
)


@dataclass(frozen=True)
class PerformancePattern:
    """A known pattern. ``indicators`` are descriptive; matching is by bottleneck type."""
    id: str
    name: str
    description: str
    matches_type: BottleneckType
    confidence: float
    indicators: Tuple[str, ...] = field(default_factory=tuple)
    fix_generator: Optional[Callable[[], List[FixSuggestion]]] = None

    def matches(self, bottleneck: PerformanceBottleneck) -> bool:
        return bottleneck.type == self.matches_type

    def fix_suggestions(self) -> List[FixSuggestion]:
        if self.fix_generator is None:
            return []
        return self.fix_generator()


def _memory_leak_pattern_fixes() -> List[FixSuggestion]:
    return [FixSuggestion(
        title="Fix memory leak",
        description="Implement proper resource cleanup to prevent memory leaks",
        category=FixCategory.CODE_OPTIMIZATION,
        implementation_effort=ImplementationEffort.HIGH,
        expected_improvement=80,
        risks=["Requires careful testing"],
        prerequisites=["Memory profiling"],
    )]


def _thread_pool_fixes() -> List[FixSuggestion]:
    return [FixSuggestion(
        title="Increase thread pool size",
        description="Configure larger thread pool to handle concurrent requests",
        category=FixCategory.CONFIGURATION_CHANGE,
        implementation_effort=ImplementationEffort.LOW,
        expected_improvement=50,
        risks=["Increased resource usage"],
        prerequisites=["Analyze current thread usage"],
    )]


def build_default_patterns() -> Dict[str, PerformancePattern]:
    patterns = [
        PerformancePattern(
            id="memory_leak_pattern",
            name="Memory Leak Pattern",
            description="Continuous memory usage increase over time",
            matches_type=BottleneckType.MEMORY_BOUND,
            confidence=0.9,
            indicators=("increasing_memory_trend", "gc_frequency_increase"),
            fix_generator=_memory_leak_pattern_fixes,
        ),
        PerformancePattern(
            id="cpu_spike_pattern",
            name="CPU Spike Pattern",
            description="Sudden CPU usage spikes",
            matches_type=BottleneckType.CPU_BOUND,
            confidence=0.8,
            indicators=("high_cpu_variance", "periodic_spikes"),
        ),
        PerformancePattern(
            id="thread_pool_exhaustion",
            name="Thread Pool Exhaustion",
            description="Thread pool running out of available threads",
            matches_type=BottleneckType.RESOURCE_STARVATION,
            confidence=0.85,
            indicators=("high_queue_size", "low_throughput", "high_response_time"),
            fix_generator=_thread_pool_fixes,
        ),
        PerformancePattern(
            id="database_connection_pool_exhaustion",
            name="Database Connection Pool Exhaustion",
            description="Database connection pool running out of connections",
            matches_type=BottleneckType.DATABASE_BOUND,
            confidence=0.9,
            indicators=("high_connection_wait_time", "database_timeout_errors"),
        ),
    ]
    return {pattern.id: pattern for pattern in patterns}
