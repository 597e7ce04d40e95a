"""Bottleneck detection algorithms."""

from .base import BaseAlgorithm, DetectionState, calculate_severity, calculate_impact_score
from .threshold import (
    ThresholdAlgorithm,
    CpuThresholdAlgorithm,
    MemoryThresholdAlgorithm,
    IoThresholdAlgorithm,
    NetworkThresholdAlgorithm,
)
from .statistical import StatisticalOutlierAlgorithm, TrendAnalysisAlgorithm
from .patterns import LockContentionAlgorithm, ResourceStarvationAlgorithm
from .correlation import CorrelationAlgorithm
from .anomaly import AnomalyDetectionAlgorithm
from .registry import AlgorithmRegistry, build_default_registry

__all__ = [
    "BaseAlgorithm",
    "DetectionState",
    "calculate_severity",
    "calculate_impact_score",
    "ThresholdAlgorithm",
    "CpuThresholdAlgorithm",
    "MemoryThresholdAlgorithm",
    "IoThresholdAlgorithm",
    "NetworkThresholdAlgorithm",
    "StatisticalOutlierAlgorithm",
    "TrendAnalysisAlgorithm",
    "LockContentionAlgorithm",
    "ResourceStarvationAlgorithm",
    "CorrelationAlgorithm",
    "AnomalyDetectionAlgorithm",
    "AlgorithmRegistry",
    "build_default_registry",
]
