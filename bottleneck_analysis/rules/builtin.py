"""Built-in analysis rules."""

from typing import List

from . import evidence, fixes
from .base import AnalysisCondition, AnalysisRule, ComparisonOperator, ConditionType, RuleRegistry
from ..core.models import PerformanceMetricType, RootCauseCategory

MEMORY_LEAK_WINDOW_MS = 300000


def _threshold(metric: PerformanceMetricType, value: float) -> AnalysisCondition:
    return AnalysisCondition(
        type=ConditionType.METRIC_THRESHOLD,
        operator=ComparisonOperator.GREATER_THAN,
        value=value,
        metric=metric,
    )


def build_default_rules() -> List[AnalysisRule]:
    """Fresh rule instances, so enable/disable on one service never leaks into another."""
    return [
        AnalysisRule(
            id="cpu_high_usage",
            name="High CPU Usage",
            category=RootCauseCategory.CODE_INEFFICIENCY,
            conditions=[_threshold(PerformanceMetricType.CPU_USAGE, 80)],
            description="CPU usage consistently above 80%",
            evidence_generator=evidence.cpu_evidence,
            fix_generator=fixes.cpu_fixes,
            confidence=0.85,
        ),
        AnalysisRule(
            id="memory_leak",
            name="Memory Leak Detection",
            category=RootCauseCategory.CODE_INEFFICIENCY,
            conditions=[AnalysisCondition(
                type=ConditionType.METRIC_TREND,
                operator=ComparisonOperator.GREATER_THAN,
                value=0.1,
                metric=PerformanceMetricType.MEMORY_USAGE,
                time_window_ms=MEMORY_LEAK_WINDOW_MS,
            )],
            description="Memory usage continuously increasing",
            evidence_generator=evidence.memory_leak_evidence,
            fix_generator=fixes.memory_leak_fixes,
            confidence=0.9,
        ),
        AnalysisRule(
            id="slow_queries",
            name="Slow Database Queries",
            category=RootCauseCategory.DATA_ISSUE,
            conditions=[_threshold(PerformanceMetricType.DATABASE_QUERY_TIME, 1000)],
            description="Database queries taking longer than 1 second",
            evidence_generator=evidence.slow_query_evidence,
            fix_generator=fixes.slow_query_fixes,
            confidence=0.8,
        ),
        AnalysisRule(
            id="network_latency",
            name="High Network Latency",
            category=RootCauseCategory.EXTERNAL_DEPENDENCY,
            conditions=[_threshold(PerformanceMetricType.NETWORK_IO, 200)],
            description="Network requests taking longer than expected",
            evidence_generator=evidence.network_evidence,
            fix_generator=fixes.network_fixes,
            confidence=0.75,
        ),
        AnalysisRule(
            id="disk_io_bottleneck",
            name="Disk I/O Bottleneck",
            category=RootCauseCategory.INFRASTRUCTURE_LIMIT,
            conditions=[_threshold(PerformanceMetricType.DISK_IO, 100)],
            description="Disk I/O operations taking too long",
            evidence_generator=evidence.disk_io_evidence,
            fix_generator=fixes.disk_io_fixes,
            confidence=0.8,
        ),
        AnalysisRule(
            id="lock_contention",
            name="Lock Contention",
            category=RootCauseCategory.ARCHITECTURAL_ISSUE,
            conditions=[AnalysisCondition(
                type=ConditionType.PATTERN_MATCH,
                operator=ComparisonOperator.EQUALS,
                value="lock_contention",
            )],
            description="Threads waiting for locks",
            evidence_generator=evidence.lock_contention_evidence,
            fix_generator=fixes.lock_contention_fixes,
            confidence=0.7,
        ),
        AnalysisRule(
            id="gc_overhead",
            name="Garbage Collection Overhead",
            category=RootCauseCategory.CONFIGURATION_ERROR,
            conditions=[_threshold(PerformanceMetricType.GC_TIME, 100)],
            description="Excessive garbage collection activity",
            evidence_generator=evidence.gc_evidence,
            fix_generator=fixes.gc_fixes,
            confidence=0.85,
        ),
    ]


def build_default_rule_registry() -> RuleRegistry:
    return RuleRegistry(build_default_rules())
