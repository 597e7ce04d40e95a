"""
Bottleneck Analysis - Performance Bottleneck Detection and Root Cause Scoring

This package detects performance bottlenecks in collected performance profiles
and explains them with evidence-backed root causes and fix suggestions.
"""

__version__ = "1.0.0"

from .core.config import AnalysisConfig, load_config
from .core.detection import BottleneckDetectionService, DetectionRun
from .core.events import AnalysisEvent
from .core.maintenance import MaintenanceSweeper
from .core.models import PerformanceBottleneck, PerformanceMetric, PerformanceProfile, RootCause
from .core.root_cause import RootCauseAnalysisService, RootCauseModel
from .detectors.base import BaseAlgorithm

__all__ = [
    "AnalysisConfig",
    "load_config",
    "BottleneckDetectionService",
    "DetectionRun",
    "AnalysisEvent",
    "MaintenanceSweeper",
    "PerformanceBottleneck",
    "PerformanceMetric",
    "PerformanceProfile",
    "RootCause",
    "RootCauseAnalysisService",
    "RootCauseModel",
    "BaseAlgorithm",
]
