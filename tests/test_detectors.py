"""Tests for detection algorithms."""

import pytest

from bottleneck_analysis.core.errors import UnknownComponentError
from bottleneck_analysis.core.models import BottleneckSeverity, BottleneckType, PerformanceMetricType
from bottleneck_analysis.detectors import (
    AnomalyDetectionAlgorithm,
    CorrelationAlgorithm,
    CpuThresholdAlgorithm,
    DetectionState,
    IoThresholdAlgorithm,
    LockContentionAlgorithm,
    MemoryThresholdAlgorithm,
    NetworkThresholdAlgorithm,
    ResourceStarvationAlgorithm,
    StatisticalOutlierAlgorithm,
    TrendAnalysisAlgorithm,
    build_default_registry,
    calculate_impact_score,
    calculate_severity,
)
from bottleneck_analysis.history import BaselineTracker

from conftest import series


def empty_state(history=()):
    return DetectionState(history=tuple(history), baselines=BaselineTracker())


class TestScoring:
    """Severity breakpoints and impact scores."""

    @pytest.mark.parametrize("value,expected", [
        (96.5, BottleneckSeverity.LOW),
        (120.0, BottleneckSeverity.LOW),
        (121.0, BottleneckSeverity.MEDIUM),
        (160.0, BottleneckSeverity.MEDIUM),
        (200.0, BottleneckSeverity.HIGH),
        (240.0, BottleneckSeverity.HIGH),
        (241.0, BottleneckSeverity.CRITICAL),
    ])
    def test_severity_breakpoints(self, value, expected):
        assert calculate_severity(value, 80.0) == expected

    def test_impact_score(self):
        assert calculate_impact_score(50, 100) == pytest.approx(25.0)
        assert calculate_impact_score(500, 100) == 100.0
        assert calculate_impact_score(50, 0) == 0.0


class TestThresholdAlgorithms:
    """One threshold algorithm per resource category."""

    @pytest.mark.asyncio
    async def test_cpu_ratio_two_and_a_half_is_high(self, make_config, profile_factory):
        algorithm = CpuThresholdAlgorithm(make_config(cpu_usage_threshold=30))
        profile = profile_factory(series(PerformanceMetricType.CPU_USAGE, [75, 75]))

        bottlenecks = await algorithm.detect(profile, empty_state())

        assert len(bottlenecks) == 1
        bottleneck = bottlenecks[0]
        assert bottleneck.type == BottleneckType.CPU_BOUND
        assert bottleneck.severity == BottleneckSeverity.HIGH
        assert bottleneck.component == "cpu"
        assert bottleneck.operation == "cpu_usage"
        assert bottleneck.percentage_of_total == pytest.approx(75.0)
        assert bottleneck.impact_score == pytest.approx(50.0)
        assert bottleneck.confidence == pytest.approx(0.9)
        assert bottleneck.context["cpu_profile"]["cpu_usage_percentage"] == pytest.approx(75.0)
        assert bottleneck.root_causes == []

    @pytest.mark.asyncio
    async def test_cpu_below_threshold(self, config, profile_factory):
        algorithm = CpuThresholdAlgorithm(config)
        profile = profile_factory(series(PerformanceMetricType.CPU_USAGE, [40, 60, 80]))

        assert await algorithm.detect(profile, empty_state()) == []

    @pytest.mark.asyncio
    async def test_no_samples(self, config, profile_factory):
        for algorithm_cls in (CpuThresholdAlgorithm, MemoryThresholdAlgorithm,
                              IoThresholdAlgorithm, NetworkThresholdAlgorithm):
            assert await algorithm_cls(config).detect(profile_factory(), empty_state()) == []

    @pytest.mark.asyncio
    async def test_memory(self, config, profile_factory):
        profile = profile_factory(series(PerformanceMetricType.MEMORY_USAGE, [90, 100]))

        bottlenecks = await MemoryThresholdAlgorithm(config).detect(profile, empty_state())

        assert len(bottlenecks) == 1
        bottleneck = bottlenecks[0]
        assert bottleneck.type == BottleneckType.MEMORY_BOUND
        assert bottleneck.operation == "memory_allocation"
        assert bottleneck.percentage_of_total == pytest.approx(95.0)
        assert bottleneck.impact_score == pytest.approx(47.5)
        assert bottleneck.confidence == pytest.approx(0.85)

    @pytest.mark.asyncio
    async def test_io_measures_impact_against_threshold(self, config, profile_factory):
        profile = profile_factory(series(PerformanceMetricType.DISK_IO, [150, 250]), duration_ms=1000)

        bottlenecks = await IoThresholdAlgorithm(config).detect(profile, empty_state())

        bottleneck = bottlenecks[0]
        assert bottleneck.type == BottleneckType.IO_BOUND
        assert bottleneck.component == "io_subsystem"
        assert bottleneck.severity == BottleneckSeverity.MEDIUM
        assert bottleneck.impact_score == pytest.approx(100.0)
        assert bottleneck.percentage_of_total == pytest.approx(20.0)
        assert bottleneck.context["io_profile"]["read_time_ms"] == pytest.approx(200.0)

    @pytest.mark.asyncio
    async def test_io_zero_duration(self, config, profile_factory):
        profile = profile_factory(series(PerformanceMetricType.DISK_IO, [150]), duration_ms=0)

        bottlenecks = await IoThresholdAlgorithm(config).detect(profile, empty_state())

        assert bottlenecks[0].percentage_of_total == 0.0

    @pytest.mark.asyncio
    async def test_network(self, config, profile_factory):
        profile = profile_factory(series(PerformanceMetricType.NETWORK_IO, [300, 300]))

        bottlenecks = await NetworkThresholdAlgorithm(config).detect(profile, empty_state())

        bottleneck = bottlenecks[0]
        assert bottleneck.type == BottleneckType.NETWORK_BOUND
        assert bottleneck.severity == BottleneckSeverity.LOW
        assert bottleneck.impact_score == pytest.approx(75.0)
        assert bottleneck.confidence == pytest.approx(0.75)
        assert "network_timing" in bottleneck.context


class TestStatisticalOutlierAlgorithm:

    def history(self, profile_factory, count):
        return [
            profile_factory(series(PerformanceMetricType.CPU_USAGE, [50 + 2 * (i % 2)]))
            for i in range(count)
        ]

    @pytest.mark.asyncio
    async def test_requires_minimum_samples(self, config, profile_factory):
        algorithm = StatisticalOutlierAlgorithm(config)
        history = self.history(profile_factory, config.min_sample_size - 1)
        outlier = profile_factory(series(PerformanceMetricType.CPU_USAGE, [5000]))

        assert await algorithm.detect(outlier, empty_state(history)) == []

    @pytest.mark.asyncio
    async def test_detects_outlier(self, config, profile_factory):
        algorithm = StatisticalOutlierAlgorithm(config)
        history = self.history(profile_factory, config.min_sample_size)
        outlier = profile_factory(series(PerformanceMetricType.CPU_USAGE, [90]))

        bottlenecks = await algorithm.detect(outlier, empty_state(history))

        assert len(bottlenecks) == 1
        bottleneck = bottlenecks[0]
        assert bottleneck.type == BottleneckType.CPU_BOUND
        assert bottleneck.component == "cpu"
        assert bottleneck.severity == BottleneckSeverity.HIGH
        assert bottleneck.confidence == pytest.approx(0.95)
        assert bottleneck.impact_score == 100.0
        assert bottleneck.context["statistical_analysis"]["z_score"] == pytest.approx(39.0)

    @pytest.mark.asyncio
    async def test_constant_history_is_skipped(self, config, profile_factory):
        algorithm = StatisticalOutlierAlgorithm(config)
        history = [
            profile_factory(series(PerformanceMetricType.CPU_USAGE, [50]))
            for _ in range(config.min_sample_size)
        ]
        outlier = profile_factory(series(PerformanceMetricType.CPU_USAGE, [95]))

        assert await algorithm.detect(outlier, empty_state(history)) == []

    @pytest.mark.asyncio
    async def test_within_two_standard_deviations(self, config, profile_factory):
        algorithm = StatisticalOutlierAlgorithm(config)
        history = self.history(profile_factory, config.min_sample_size)
        profile = profile_factory(series(PerformanceMetricType.CPU_USAGE, [52]))

        assert await algorithm.detect(profile, empty_state(history)) == []


class TestTrendAnalysisAlgorithm:

    @pytest.mark.asyncio
    async def test_detects_degradation(self, make_config, profile_factory):
        algorithm = TrendAnalysisAlgorithm(make_config(analysis_window_size=5))
        history = [
            profile_factory(series(PerformanceMetricType.RESPONSE_TIME, [100 + 10 * i]))
            for i in range(5)
        ]

        bottlenecks = await algorithm.detect(profile_factory(), empty_state(history))

        assert len(bottlenecks) == 1
        bottleneck = bottlenecks[0]
        assert bottleneck.type == BottleneckType.ALGORITHM_INEFFICIENCY
        assert bottleneck.operation == "performance_degradation"
        assert bottleneck.severity == BottleneckSeverity.MEDIUM
        assert bottleneck.impact_score == 100.0
        assert bottleneck.confidence == pytest.approx(1.0)

    @pytest.mark.asyncio
    async def test_requires_full_window(self, make_config, profile_factory):
        algorithm = TrendAnalysisAlgorithm(make_config(analysis_window_size=5))
        history = [
            profile_factory(series(PerformanceMetricType.RESPONSE_TIME, [100 + 10 * i]))
            for i in range(4)
        ]

        assert await algorithm.detect(profile_factory(), empty_state(history)) == []

    @pytest.mark.asyncio
    async def test_flat_response_times(self, make_config, profile_factory):
        algorithm = TrendAnalysisAlgorithm(make_config(analysis_window_size=5))
        history = [
            profile_factory(series(PerformanceMetricType.RESPONSE_TIME, [100]))
            for _ in range(5)
        ]

        assert await algorithm.detect(profile_factory(), empty_state(history)) == []


class TestPatternAlgorithms:

    @pytest.mark.asyncio
    async def test_lock_contention(self, config, profile_factory):
        profile = profile_factory(
            series(PerformanceMetricType.CPU_USAGE, [10, 12])
            + series(PerformanceMetricType.RESPONSE_TIME, [2500, 2600])
        )

        bottlenecks = await LockContentionAlgorithm(config).detect(profile, empty_state())

        assert len(bottlenecks) == 1
        bottleneck = bottlenecks[0]
        assert bottleneck.type == BottleneckType.LOCK_CONTENTION
        assert bottleneck.severity == BottleneckSeverity.HIGH
        assert bottleneck.impact_score == 80
        assert bottleneck.confidence == pytest.approx(0.7)

    @pytest.mark.asyncio
    async def test_lock_contention_needs_twice_the_threshold(self, config, profile_factory):
        profile = profile_factory(
            series(PerformanceMetricType.CPU_USAGE, [10])
            + series(PerformanceMetricType.RESPONSE_TIME, [1500])
        )

        assert await LockContentionAlgorithm(config).detect(profile, empty_state()) == []

    @pytest.mark.asyncio
    async def test_resource_starvation(self, config, profile_factory):
        profile = profile_factory(series(PerformanceMetricType.MEMORY_USAGE, [40, 95]))

        bottlenecks = await ResourceStarvationAlgorithm(config).detect(profile, empty_state())

        assert len(bottlenecks) == 1
        bottleneck = bottlenecks[0]
        assert bottleneck.type == BottleneckType.RESOURCE_STARVATION
        assert bottleneck.component == "memory"
        assert bottleneck.operation == "memory_pressure"
        assert bottleneck.impact_score == 85
        assert bottleneck.confidence == pytest.approx(0.8)

    @pytest.mark.asyncio
    async def test_stable_high_memory_is_not_starvation(self, config, profile_factory):
        profile = profile_factory(series(PerformanceMetricType.MEMORY_USAGE, [86, 88, 90]))

        assert await ResourceStarvationAlgorithm(config).detect(profile, empty_state()) == []


class TestCorrelationAlgorithm:

    @pytest.mark.asyncio
    async def test_positive_correlation_is_cpu_bound(self, config, profile_factory):
        profile = profile_factory(
            series(PerformanceMetricType.RESPONSE_TIME, [100, 200, 300, 400])
            + series(PerformanceMetricType.CPU_USAGE, [10, 20, 30, 40])
        )

        bottlenecks = await CorrelationAlgorithm(config).detect(profile, empty_state())

        assert bottlenecks[0].type == BottleneckType.CPU_BOUND
        assert bottlenecks[0].component == "application"
        assert bottlenecks[0].confidence == pytest.approx(1.0)
        assert bottlenecks[0].impact_score == pytest.approx(100.0)

    @pytest.mark.asyncio
    async def test_negative_correlation(self, config, profile_factory):
        profile = profile_factory(
            series(PerformanceMetricType.RESPONSE_TIME, [100, 200, 300, 400])
            + series(PerformanceMetricType.CPU_USAGE, [40, 30, 20, 10])
        )

        bottlenecks = await CorrelationAlgorithm(config).detect(profile, empty_state())

        assert bottlenecks[0].type == BottleneckType.ALGORITHM_INEFFICIENCY

    @pytest.mark.asyncio
    async def test_weak_correlation(self, config, profile_factory):
        profile = profile_factory(
            series(PerformanceMetricType.RESPONSE_TIME, [100, 200, 300, 400])
            + series(PerformanceMetricType.CPU_USAGE, [20, 40, 10, 30])
        )

        assert await CorrelationAlgorithm(config).detect(profile, empty_state()) == []


class TestAnomalyDetectionAlgorithm:

    @pytest.mark.asyncio
    async def test_unknown_target(self, config, profile_factory):
        profile = profile_factory(series(PerformanceMetricType.RESPONSE_TIME, [5000]))

        assert await AnomalyDetectionAlgorithm(config).detect(profile, empty_state()) == []

    @pytest.mark.asyncio
    async def test_detects_anomaly(self, config, profile_factory):
        profile = profile_factory(series(PerformanceMetricType.RESPONSE_TIME, [80]))
        baselines = BaselineTracker()
        baselines.observe(profile.baseline_key, 10.0)
        baselines.observe(profile.baseline_key, 20.0)

        bottlenecks = await AnomalyDetectionAlgorithm(config).detect(
            profile, DetectionState(history=(), baselines=baselines)
        )

        assert len(bottlenecks) == 1
        bottleneck = bottlenecks[0]
        assert bottleneck.operation == "anomaly_detected"
        assert bottleneck.severity == BottleneckSeverity.HIGH
        assert bottleneck.impact_score == 100.0
        assert bottleneck.confidence == pytest.approx(0.95)
        assert len(baselines.get(profile.baseline_key).samples) == 2


class TestAlgorithmRegistry:

    def test_default_order(self, config):
        registry = build_default_registry(config)

        assert registry.list_algorithms() == [
            "threshold_cpu",
            "threshold_memory",
            "threshold_io",
            "threshold_network",
            "statistical_outlier",
            "trend_analysis",
            "pattern_lock_contention",
            "pattern_resource_starvation",
            "correlation_analysis",
            "anomaly_detection",
        ]

    def test_ceilings(self, config):
        registry = build_default_registry(config)
        ceilings = {aid: a.max_confidence for aid, a in registry.items()}

        assert ceilings["threshold_cpu"] == 0.9
        assert ceilings["threshold_memory"] == 0.8
        assert ceilings["statistical_outlier"] == 0.9
        assert ceilings["trend_analysis"] == 0.85
        assert ceilings["pattern_lock_contention"] == 0.75
        assert ceilings["correlation_analysis"] == 0.7
        assert ceilings["anomaly_detection"] == 0.85

    def test_feature_flags(self, make_config):
        registry = build_default_registry(
            make_config(enable_statistical_analysis=False, enable_pattern_matching=False)
        )

        assert len(registry) == 6
        assert "statistical_outlier" not in registry
        assert "pattern_lock_contention" not in registry

    def test_enable_disable(self, config):
        registry = build_default_registry(config)

        registry.disable("threshold_io")
        assert "threshold_io" not in dict(registry.enabled_items())

        registry.enable("threshold_io")
        assert "threshold_io" in dict(registry.enabled_items())

    def test_unknown_algorithm(self, config):
        registry = build_default_registry(config)

        with pytest.raises(UnknownComponentError):
            registry.disable("does_not_exist")

        with pytest.raises(KeyError):
            registry.require("does_not_exist")
