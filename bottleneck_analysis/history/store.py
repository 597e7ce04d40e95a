"""Bounded ring buffers of past profiles and root cause analyses."""

from typing import Dict, List, Optional, Tuple
from collections import defaultdict, deque

from ..core.models import HistoricalAnalysis, PerformanceProfile


class HistoricalStore:
    """Profile history shared by detection algorithms, plus per-target analysis history.

    The profile buffer never holds more than ``max_profiles`` entries; a
    maintenance sweep trims it further to ``trimmed_profiles``. Analysis
    buffers are capped per target at ``analysis_window``.
    """

    def __init__(self, max_profiles: int = 1000, trimmed_profiles: int = 500, analysis_window: int = 100):
        self.max_profiles = max_profiles
        self.trimmed_profiles = trimmed_profiles
        self.analysis_window = analysis_window
        self._profiles: deque = deque(maxlen=max_profiles)
        self._analyses: Dict[str, deque] = defaultdict(lambda: deque(maxlen=self.analysis_window))

    # Profiles

    def add_profile(self, profile: PerformanceProfile) -> None:
        self._profiles.append(profile)

    def profiles(self) -> Tuple[PerformanceProfile, ...]:
        """Immutable snapshot of the profile buffer, oldest first."""
        return tuple(self._profiles)

    def recent_profiles(self, count: int) -> Tuple[PerformanceProfile, ...]:
        if count <= 0:
            return ()
        return tuple(self._profiles)[-count:]

    @property
    def profile_count(self) -> int:
        return len(self._profiles)

    def trim_profiles(self) -> int:
        """Keep only the most recent ``trimmed_profiles`` once the buffer is full."""
        if len(self._profiles) < self.max_profiles:
            return 0
        removed = len(self._profiles) - self.trimmed_profiles
        for _ in range(removed):
            self._profiles.popleft()
        return removed

    # Analyses

    def add_analysis(self, target_id: str, record: HistoricalAnalysis) -> None:
        self._analyses[target_id].append(record)

    def analyses_for(self, target_id: str, last: Optional[int] = None) -> List[HistoricalAnalysis]:
        records = list(self._analyses.get(target_id, ()))
        if last is not None:
            records = records[-last:] if last > 0 else []
        return records

    @property
    def analysis_count(self) -> int:
        return sum(len(records) for records in self._analyses.values())

    def clear_profiles(self) -> None:
        self._profiles.clear()

    def clear_analyses(self) -> None:
        self._analyses.clear()

    def clear(self) -> None:
        self.clear_profiles()
        self.clear_analyses()
