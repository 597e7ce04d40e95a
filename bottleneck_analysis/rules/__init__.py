"""Root cause rules, evidence and fix generators, and the pattern database."""

from .base import (
    AnalysisCondition,
    AnalysisRule,
    ComparisonOperator,
    ConditionContext,
    ConditionType,
    RuleRegistry,
    compare,
    evaluate_condition,
)
from .builtin import build_default_rules, build_default_rule_registry
from .patterns import PerformancePattern, build_default_patterns

__all__ = [
    "AnalysisCondition",
    "AnalysisRule",
    "ComparisonOperator",
    "ConditionContext",
    "ConditionType",
    "RuleRegistry",
    "compare",
    "evaluate_condition",
    "build_default_rules",
    "build_default_rule_registry",
    "PerformancePattern",
    "build_default_patterns",
]
