"""Evidence generators, one per rule domain."""

from typing import List

from ..analysis import statistics
from ..core.models import (
    Evidence,
    EvidenceType,
    PerformanceBottleneck,
    PerformanceCategory,
    PerformanceMetricType,
    PerformanceProfile,
)

CPU_SPIKE_VARIANCE = 100.0
MEMORY_GROWTH_SLOPE = 0.05
QUERY_TIMEOUT_MS = 5000.0
REQUEST_TIMEOUT_MS = 1000.0


def cpu_evidence(bottleneck: PerformanceBottleneck, profile: PerformanceProfile) -> List[Evidence]:
    evidence = []
    values = profile.values_in_category(PerformanceCategory.CPU)
    if not values:
        return evidence

    avg_cpu = statistics.mean(values)
    max_cpu = max(values)
    evidence.append(Evidence(
        type=EvidenceType.RESOURCE_UTILIZATION,
        description=f"High CPU usage detected: Average {avg_cpu:.2f}%, Peak {max_cpu:.2f}%",
        data={"avg_cpu_usage": avg_cpu, "max_cpu_usage": max_cpu, "sample_count": len(values)},
        strength=min(avg_cpu / 100, 1.0),
    ))

    cpu_variance = statistics.variance(values)
    if cpu_variance > CPU_SPIKE_VARIANCE:
        evidence.append(Evidence(
            type=EvidenceType.PATTERN_MATCHING,
            description=f"High CPU usage variability detected (variance: {cpu_variance:.2f})",
            data={"variance": cpu_variance},
            strength=0.7,
        ))

    return evidence


def memory_leak_evidence(bottleneck: PerformanceBottleneck, profile: PerformanceProfile) -> List[Evidence]:
    evidence = []
    values = profile.values_in_category(PerformanceCategory.MEMORY)
    if len(values) < 3:
        return evidence

    slope = statistics.linear_trend(values).slope
    if slope > MEMORY_GROWTH_SLOPE:
        evidence.append(Evidence(
            type=EvidenceType.TIMING_ANALYSIS,
            description=f"Memory usage increasing over time (trend: {slope * 100:.2f}% per sample)",
            data={"trend": slope, "values": values},
            strength=min(slope * 10, 1.0),
        ))

    gc_times = profile.values_of_type(PerformanceMetricType.GC_TIME)
    if gc_times:
        avg_gc = statistics.mean(gc_times)
        evidence.append(Evidence(
            type=EvidenceType.RESOURCE_UTILIZATION,
            description=f"High garbage collection activity (average: {avg_gc:.2f}ms)",
            data={"avg_gc_time": avg_gc, "gc_count": len(gc_times)},
            strength=min(avg_gc / 100, 1.0),
        ))

    return evidence


def slow_query_evidence(bottleneck: PerformanceBottleneck, profile: PerformanceProfile) -> List[Evidence]:
    evidence = []
    query_times = profile.values_of_type(PerformanceMetricType.DATABASE_QUERY_TIME)
    if not query_times:
        return evidence

    avg_query = statistics.mean(query_times)
    max_query = max(query_times)
    evidence.append(Evidence(
        type=EvidenceType.QUERY_PLAN,
        description=f"Slow database queries detected: Average {avg_query:.2f}ms, Max {max_query:.2f}ms",
        data={"avg_query_time": avg_query, "max_query_time": max_query, "query_count": len(query_times)},
        strength=min(avg_query / 1000, 1.0),
    ))

    timed_out = [t for t in query_times if t > QUERY_TIMEOUT_MS]
    if timed_out:
        evidence.append(Evidence(
            type=EvidenceType.PATTERN_MATCHING,
            description=f"{len(timed_out)} queries exceeded 5-second threshold",
            data={"slow_query_count": len(timed_out), "total_queries": len(query_times)},
            strength=len(timed_out) / len(query_times),
        ))

    return evidence


def network_evidence(bottleneck: PerformanceBottleneck, profile: PerformanceProfile) -> List[Evidence]:
    evidence = []
    latencies = profile.values_in_category(PerformanceCategory.NETWORK)
    if not latencies:
        return evidence

    avg_latency = statistics.mean(latencies)
    max_latency = max(latencies)
    evidence.append(Evidence(
        type=EvidenceType.RESOURCE_UTILIZATION,
        description=f"High network latency detected: Average {avg_latency:.2f}ms, Max {max_latency:.2f}ms",
        data={"avg_latency": avg_latency, "max_latency": max_latency, "request_count": len(latencies)},
        strength=min(avg_latency / 1000, 1.0),
    ))

    slow_requests = [v for v in latencies if v > REQUEST_TIMEOUT_MS]
    if slow_requests:
        evidence.append(Evidence(
            type=EvidenceType.PATTERN_MATCHING,
            description=f"{len(slow_requests)} requests exceeded 1-second latency threshold",
            data={"high_latency_count": len(slow_requests), "total_requests": len(latencies)},
            strength=len(slow_requests) / len(latencies),
        ))

    return evidence


def disk_io_evidence(bottleneck: PerformanceBottleneck, profile: PerformanceProfile) -> List[Evidence]:
    values = profile.values_in_category(PerformanceCategory.IO)
    if not values:
        return []

    avg_io = statistics.mean(values)
    max_io = max(values)
    return [Evidence(
        type=EvidenceType.RESOURCE_UTILIZATION,
        description=f"High disk I/O latency detected: Average {avg_io:.2f}ms, Max {max_io:.2f}ms",
        data={"avg_io_time": avg_io, "max_io_time": max_io, "io_count": len(values)},
        strength=min(avg_io / 200, 1.0),
    )]


def lock_contention_evidence(bottleneck: PerformanceBottleneck, profile: PerformanceProfile) -> List[Evidence]:
    cpu_values = profile.values_in_category(PerformanceCategory.CPU)
    response_times = profile.values_of_type(PerformanceMetricType.RESPONSE_TIME)
    if not cpu_values or not response_times:
        return []

    avg_cpu = statistics.mean(cpu_values)
    avg_response = statistics.mean(response_times)
    if avg_cpu >= 30 or avg_response <= 1000:
        return []

    return [Evidence(
        type=EvidenceType.PATTERN_MATCHING,
        description=(
            f"Lock contention pattern: Low CPU usage ({avg_cpu:.2f}%) "
            f"with high response time ({avg_response:.2f}ms)"
        ),
        data={"avg_cpu_usage": avg_cpu, "avg_response_time": avg_response},
        strength=0.8,
    )]


def gc_evidence(bottleneck: PerformanceBottleneck, profile: PerformanceProfile) -> List[Evidence]:
    gc_times = profile.values_of_type(PerformanceMetricType.GC_TIME)
    if not gc_times:
        return []

    total_gc = sum(gc_times)
    overhead = total_gc / profile.duration_ms * 100 if profile.duration_ms else 0.0
    return [Evidence(
        type=EvidenceType.RESOURCE_UTILIZATION,
        description=f"High garbage collection overhead: {overhead:.2f}% of total execution time",
        data={"total_gc_time": total_gc, "profile_duration": profile.duration_ms, "gc_overhead": overhead},
        strength=min(overhead / 10, 1.0),
    )]
