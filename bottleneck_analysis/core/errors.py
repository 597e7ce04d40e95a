"""Custom exceptions for the bottleneck analysis engine."""

from typing import Dict, Any, Optional
from enum import Enum


class ErrorSeverity(Enum):
    """Error severity levels."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class AnalysisError(Exception):
    """Base exception for all analysis errors."""

    def __init__(
        self,
        message: str,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.severity = severity
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.__class__.__name__,
            "message": self.message,
            "severity": self.severity.value,
            "error_code": self.error_code,
            "details": self.details,
        }


class AlgorithmError(AnalysisError):
    """Raised when a detection algorithm fails."""

    def __init__(self, algorithm_id: str, message: str, **kwargs):
        self.algorithm_id = algorithm_id
        super().__init__(
            message=f"Detection algorithm '{algorithm_id}' failed: {message}",
            severity=ErrorSeverity.MEDIUM,
            **kwargs
        )


class RuleError(AnalysisError):
    """Raised when a root cause rule fails."""

    def __init__(self, rule_id: str, message: str, **kwargs):
        self.rule_id = rule_id
        super().__init__(
            message=f"Analysis rule '{rule_id}' failed: {message}",
            severity=ErrorSeverity.MEDIUM,
            **kwargs
        )


class UnknownComponentError(AnalysisError, KeyError):
    """Raised when an algorithm or rule id is not registered."""

    def __init__(self, kind: str, component_id: str):
        self.kind = kind
        self.component_id = component_id
        super().__init__(
            message=f"Unknown {kind}: {component_id}",
            severity=ErrorSeverity.LOW,
        )

    def __str__(self) -> str:
        return self.message


class ConfigurationError(AnalysisError):
    """Raised when configuration is invalid."""

    def __init__(self, message: str, config_key: Optional[str] = None, **kwargs):
        self.config_key = config_key
        super().__init__(
            message=f"Configuration error: {message}",
            severity=ErrorSeverity.CRITICAL,
            **kwargs
        )


class ProfileValidationError(AnalysisError):
    """Raised when a profile does not satisfy the basic shape contract."""

    def __init__(self, message: str, field: Optional[str] = None, **kwargs):
        self.field = field
        super().__init__(message=message, severity=ErrorSeverity.MEDIUM, **kwargs)
