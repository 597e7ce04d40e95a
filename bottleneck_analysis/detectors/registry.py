"""Registry for managing detection algorithm instances."""

from typing import Dict, List, Optional

import structlog

from .base import BaseAlgorithm
from ..core.config import AnalysisConfig
from ..core.errors import UnknownComponentError

logger = structlog.get_logger(__name__)


class AlgorithmRegistry:
    """Insertion-ordered registry of detection algorithms keyed by id."""

    def __init__(self):
        self._algorithms: Dict[str, BaseAlgorithm] = {}

    def register(self, algorithm: BaseAlgorithm, algorithm_id: Optional[str] = None) -> None:
        """Register an algorithm instance; re-registering an id replaces it in place."""
        algorithm_id = algorithm_id or algorithm.algorithm_id
        if not algorithm_id:
            raise ValueError("Algorithm must have an id")
        algorithm.algorithm_id = algorithm_id
        self._algorithms[algorithm_id] = algorithm
        logger.debug("Registered detection algorithm", algorithm=algorithm_id)

    def get(self, algorithm_id: str) -> Optional[BaseAlgorithm]:
        return self._algorithms.get(algorithm_id)

    def require(self, algorithm_id: str) -> BaseAlgorithm:
        algorithm = self._algorithms.get(algorithm_id)
        if algorithm is None:
            raise UnknownComponentError("detection algorithm", algorithm_id)
        return algorithm

    def enable(self, algorithm_id: str) -> None:
        self.require(algorithm_id).enable()

    def disable(self, algorithm_id: str) -> None:
        self.require(algorithm_id).disable()

    def items(self):
        return list(self._algorithms.items())

    def enabled_items(self):
        return [(aid, a) for aid, a in self._algorithms.items() if a.is_enabled()]

    def list_algorithms(self) -> List[str]:
        return list(self._algorithms.keys())

    def __len__(self) -> int:
        return len(self._algorithms)

    def __contains__(self, algorithm_id: str) -> bool:
        return algorithm_id in self._algorithms


def build_default_registry(config: AnalysisConfig) -> AlgorithmRegistry:
    """Build the built-in algorithm table once, honouring the feature flags."""
    from .threshold import (
        CpuThresholdAlgorithm,
        MemoryThresholdAlgorithm,
        IoThresholdAlgorithm,
        NetworkThresholdAlgorithm,
    )
    from .statistical import StatisticalOutlierAlgorithm, TrendAnalysisAlgorithm
    from .patterns import LockContentionAlgorithm, ResourceStarvationAlgorithm
    from .correlation import CorrelationAlgorithm
    from .anomaly import AnomalyDetectionAlgorithm

    registry = AlgorithmRegistry()
    registry.register(CpuThresholdAlgorithm(config))
    registry.register(MemoryThresholdAlgorithm(config))
    registry.register(IoThresholdAlgorithm(config))
    registry.register(NetworkThresholdAlgorithm(config))

    if config.enable_statistical_analysis:
        registry.register(StatisticalOutlierAlgorithm(config))
        registry.register(TrendAnalysisAlgorithm(config))

    if config.enable_pattern_matching:
        registry.register(LockContentionAlgorithm(config))
        registry.register(ResourceStarvationAlgorithm(config))

    registry.register(CorrelationAlgorithm(config))
    registry.register(AnomalyDetectionAlgorithm(config))

    return registry
