"""Threshold detection: one algorithm per resource category."""

from typing import List, Dict, Any

from .base import BaseAlgorithm, DetectionState, calculate_impact_score, calculate_severity
from ..analysis import statistics
from ..core.models import (
    AlgorithmType,
    BottleneckType,
    PerformanceBottleneck,
    PerformanceCategory,
    PerformanceProfile,
)


class ThresholdAlgorithm(BaseAlgorithm):
    """Flag a category whose mean value exceeds its configured threshold.

    Subclasses describe the category and how the resulting bottleneck is
    scored; at most one bottleneck is produced per profile.
    """

    algorithm_type = AlgorithmType.THRESHOLD_BASED
    max_confidence = 0.8

    category: PerformanceCategory
    threshold_field: str
    bottleneck_type: BottleneckType
    component: str
    operation: str
    detection_confidence: float

    @property
    def threshold(self) -> float:
        return getattr(self.config, self.threshold_field)

    async def detect(self, profile: PerformanceProfile, state: DetectionState) -> List[PerformanceBottleneck]:
        values = profile.values_in_category(self.category)
        if not values:
            return []

        average = statistics.mean(values)
        if average <= self.threshold:
            return []

        peak = max(values)
        return [self.create_bottleneck(
            profile,
            bottleneck_type=self.bottleneck_type,
            severity=calculate_severity(average, self.threshold),
            component=self.component,
            operation=self.operation,
            impact_score=calculate_impact_score(average, self.impact_baseline(peak)),
            confidence=self.detection_confidence,
            percentage_of_total=self.percentage_of_total(profile, average, peak),
            context=self.build_context(values),
        )]

    def impact_baseline(self, peak: float) -> float:
        return self.threshold

    def percentage_of_total(self, profile: PerformanceProfile, average: float, peak: float) -> float:
        if not profile.duration_ms:
            return 0.0
        return average / profile.duration_ms * 100

    def build_context(self, values: List[float]) -> Dict[str, Any]:
        return {}


class CpuThresholdAlgorithm(ThresholdAlgorithm):
    algorithm_id = "threshold_cpu"
    name = "CPU Threshold Detection"
    max_confidence = 0.9

    category = PerformanceCategory.CPU
    threshold_field = "cpu_usage_threshold"
    bottleneck_type = BottleneckType.CPU_BOUND
    component = "cpu"
    operation = "cpu_usage"
    detection_confidence = 0.9

    def impact_baseline(self, peak: float) -> float:
        return peak

    def percentage_of_total(self, profile, average, peak):
        # CPU usage is already a percentage of capacity.
        return average

    def build_context(self, values):
        avg_usage = statistics.mean(values)
        return {
            "cpu_profile": {
                "user_time_ms": avg_usage * 0.7,
                "system_time_ms": avg_usage * 0.3,
                "idle_time_ms": 100 - avg_usage,
                "cpu_usage_percentage": avg_usage,
                "context_switches": 0,
            }
        }


class MemoryThresholdAlgorithm(ThresholdAlgorithm):
    algorithm_id = "threshold_memory"
    name = "Memory Threshold Detection"

    category = PerformanceCategory.MEMORY
    threshold_field = "memory_usage_threshold"
    bottleneck_type = BottleneckType.MEMORY_BOUND
    component = "memory"
    operation = "memory_allocation"
    detection_confidence = 0.85

    def impact_baseline(self, peak: float) -> float:
        return peak

    def percentage_of_total(self, profile, average, peak):
        return average / peak * 100 if peak else 0.0

    def build_context(self, values):
        avg_usage = statistics.mean(values)
        return {
            "memory_allocation": {
                "heap_size_mb": avg_usage * 1.2,
                "used_heap_mb": avg_usage,
                "external_memory_mb": avg_usage * 0.1,
                "gc_duration_ms": 0,
                "gc_frequency": 0,
            }
        }


class IoThresholdAlgorithm(ThresholdAlgorithm):
    algorithm_id = "threshold_io"
    name = "I/O Threshold Detection"

    category = PerformanceCategory.IO
    threshold_field = "io_latency_threshold"
    bottleneck_type = BottleneckType.IO_BOUND
    component = "io_subsystem"
    operation = "disk_io"
    detection_confidence = 0.8

    def build_context(self, values):
        total = sum(values)
        return {
            "io_profile": {
                "read_operations": len(values) / 2,
                "write_operations": len(values) / 2,
                "read_bytes": 0,
                "write_bytes": 0,
                "read_time_ms": total / 2,
                "write_time_ms": total / 2,
            }
        }


class NetworkThresholdAlgorithm(ThresholdAlgorithm):
    algorithm_id = "threshold_network"
    name = "Network Threshold Detection"

    category = PerformanceCategory.NETWORK
    threshold_field = "network_latency_threshold"
    bottleneck_type = BottleneckType.NETWORK_BOUND
    component = "network"
    operation = "network_io"
    detection_confidence = 0.75

    def build_context(self, values):
        avg_latency = statistics.mean(values)
        # Estimated split of request latency into its phases.
        return {
            "network_timing": {
                "dns_lookup_ms": avg_latency * 0.1,
                "tcp_connection_ms": avg_latency * 0.15,
                "ssl_handshake_ms": avg_latency * 0.2,
                "request_sent_ms": avg_latency * 0.05,
                "waiting_ms": avg_latency * 0.4,
                "content_download_ms": avg_latency * 0.1,
            }
        }
