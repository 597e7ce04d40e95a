"""Per-target baselines and bounded historical buffers."""

from .baseline import AnomalyScore, BaselineTracker, profile_signature
from .store import HistoricalStore

__all__ = ["AnomalyScore", "BaselineTracker", "HistoricalStore", "profile_signature"]
