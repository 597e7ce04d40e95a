"""Structured logging configuration."""

import logging
import sys
from typing import Optional

import structlog

from ..core.config import AnalysisConfig


def setup_logging(config: Optional[AnalysisConfig] = None) -> None:
    """Setup structured logging with structlog."""
    config = config or AnalysisConfig()

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer() if config.environment != "development"
            else structlog.dev.ConsoleRenderer()
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, config.log_level.upper()),
    )


class AnalysisLogger:
    """Logger for detection and root cause analysis events."""

    def __init__(self, name: str = "analysis"):
        self.logger = structlog.get_logger(name)

    def bind(self, **kwargs) -> "AnalysisLogger":
        """Create logger with additional context."""
        new_logger = AnalysisLogger.__new__(AnalysisLogger)
        new_logger.logger = self.logger.bind(**kwargs)
        return new_logger

    def log_bottlenecks_detected(
        self,
        profile_id: str,
        target: str,
        detected: int,
        candidates: int,
        duration: float
    ):
        self.logger.info(
            "Bottlenecks detected",
            event_type="bottlenecks_detected",
            profile_id=profile_id,
            target=target,
            detected=detected,
            candidates=candidates,
            duration_seconds=duration
        )

    def log_root_causes(
        self,
        bottleneck_id: str,
        profile_id: str,
        root_causes: int,
        duration: float
    ):
        self.logger.info(
            "Root cause analysis completed",
            event_type="analysis_completed",
            bottleneck_id=bottleneck_id,
            profile_id=profile_id,
            root_causes=root_causes,
            duration_seconds=duration
        )

    def log_component_failure(self, kind: str, component_id: str, error: Exception, **kwargs):
        self.logger.error(
            "Analysis component failed",
            event_type=f"{kind}_error",
            component=component_id,
            error=str(error),
            error_type=type(error).__name__,
            **kwargs
        )


analysis_logger = AnalysisLogger()


def get_logger(name: str):
    """Get a configured logger instance."""
    return structlog.get_logger(name)
