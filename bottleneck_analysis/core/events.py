"""Observer notifications emitted during detection and root cause analysis."""

from typing import Any, Callable, Dict, Optional
from dataclasses import dataclass, field
from datetime import datetime, timezone

import structlog

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class AnalysisEvent:
    """One notification; ``name`` is e.g. ``algorithm_completed`` or ``rule_error``."""
    name: str
    payload: Dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


Observer = Callable[[AnalysisEvent], None]


def notify(observer: Optional[Observer], name: str, **payload) -> None:
    """Deliver an event; a failing observer is logged and otherwise ignored."""
    if observer is None:
        return
    event = AnalysisEvent(name=name, payload=payload)
    try:
        observer(event)
    except Exception as e:
        logger.warning("Observer failed", analysis_event=name, error=str(e))
