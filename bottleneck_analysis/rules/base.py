"""Rule system mapping metric conditions to root causes."""

from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Union
from dataclasses import dataclass, field
from enum import Enum

import structlog

from ..analysis import statistics
from ..core.errors import UnknownComponentError
from ..core.models import (
    BottleneckType,
    Evidence,
    FixSuggestion,
    HistoricalAnalysis,
    PerformanceBottleneck,
    PerformanceMetricType,
    PerformanceProfile,
    RootCauseCategory,
)

logger = structlog.get_logger(__name__)

EvidenceGenerator = Callable[[PerformanceBottleneck, PerformanceProfile], List[Evidence]]
FixSuggestionGenerator = Callable[[PerformanceBottleneck, PerformanceProfile], List[FixSuggestion]]

MIN_TREND_SAMPLES = 3
EQUALITY_TOLERANCE = 0.01


class ConditionType(Enum):
    METRIC_THRESHOLD = "metric_threshold"
    METRIC_TREND = "metric_trend"
    METRIC_CORRELATION = "metric_correlation"
    PATTERN_MATCH = "pattern_match"
    HISTORICAL_COMPARISON = "historical_comparison"


class ComparisonOperator(Enum):
    GREATER_THAN = "gt"
    LESS_THAN = "lt"
    EQUALS = "eq"
    GREATER_THAN_OR_EQUAL = "gte"
    LESS_THAN_OR_EQUAL = "lte"
    BETWEEN = "between"


def compare(actual: float, operator: ComparisonOperator, expected: Union[float, Tuple[float, float]]) -> bool:
    """Apply a comparison operator; ``between`` takes an inclusive (low, high) pair."""
    if operator is ComparisonOperator.BETWEEN:
        low, high = expected
        return low <= actual <= high
    if operator is ComparisonOperator.GREATER_THAN:
        return actual > expected
    if operator is ComparisonOperator.LESS_THAN:
        return actual < expected
    if operator is ComparisonOperator.EQUALS:
        return abs(actual - expected) < EQUALITY_TOLERANCE
    if operator is ComparisonOperator.GREATER_THAN_OR_EQUAL:
        return actual >= expected
    if operator is ComparisonOperator.LESS_THAN_OR_EQUAL:
        return actual <= expected
    return False


@dataclass(frozen=True)
class AnalysisCondition:
    """One condition of a rule; all conditions of a rule must hold."""
    type: ConditionType
    operator: ComparisonOperator = ComparisonOperator.GREATER_THAN
    value: Any = 0.0
    metric: Optional[PerformanceMetricType] = None
    secondary_metric: Optional[PerformanceMetricType] = None
    # Informational: profiles are already bounded in time by the collector.
    time_window_ms: Optional[int] = None


@dataclass
class ConditionContext:
    """Inputs available when evaluating a condition."""
    bottleneck: PerformanceBottleneck
    profile: PerformanceProfile
    history: Sequence[HistoricalAnalysis] = ()


def evaluate_condition(condition: AnalysisCondition, ctx: ConditionContext) -> bool:
    handler = _CONDITION_HANDLERS.get(condition.type)
    if handler is None:
        return False
    return handler(condition, ctx)


def _metric_threshold(condition: AnalysisCondition, ctx: ConditionContext) -> bool:
    if condition.metric is None:
        return False
    values = ctx.profile.values_of_type(condition.metric)
    if not values:
        return False
    return compare(statistics.mean(values), condition.operator, condition.value)


def _metric_trend(condition: AnalysisCondition, ctx: ConditionContext) -> bool:
    if condition.metric is None:
        return False
    values = ctx.profile.values_of_type(condition.metric)
    if len(values) < MIN_TREND_SAMPLES:
        return False
    return abs(statistics.linear_trend(values).slope) > condition.value


def _metric_correlation(condition: AnalysisCondition, ctx: ConditionContext) -> bool:
    if condition.metric is None or condition.secondary_metric is None:
        return False
    first = ctx.profile.values_of_type(condition.metric)
    second = ctx.profile.values_of_type(condition.secondary_metric)
    if not first or not second:
        return False
    correlation = statistics.pearson_correlation(first, second)
    return compare(abs(correlation), condition.operator, condition.value)


def _pattern_match(condition: AnalysisCondition, ctx: ConditionContext) -> bool:
    return ctx.bottleneck.type == BottleneckType.LOCK_CONTENTION


def _historical_comparison(condition: AnalysisCondition, ctx: ConditionContext) -> bool:
    return len(ctx.history) > 0


_CONDITION_HANDLERS: Dict[ConditionType, Callable[[AnalysisCondition, ConditionContext], bool]] = {
    ConditionType.METRIC_THRESHOLD: _metric_threshold,
    ConditionType.METRIC_TREND: _metric_trend,
    ConditionType.METRIC_CORRELATION: _metric_correlation,
    ConditionType.PATTERN_MATCH: _pattern_match,
    ConditionType.HISTORICAL_COMPARISON: _historical_comparison,
}


@dataclass
class AnalysisRule:
    """Condition -> evidence -> fix suggestion rule."""
    id: str
    name: str
    category: RootCauseCategory
    conditions: List[AnalysisCondition]
    description: str
    evidence_generator: EvidenceGenerator
    fix_generator: FixSuggestionGenerator
    confidence: float
    enabled: bool = True

    def matches(self, ctx: ConditionContext) -> bool:
        return all(evaluate_condition(condition, ctx) for condition in self.conditions)

    def describe(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category.value,
            "conditions": [
                {
                    "type": c.type.value,
                    "operator": c.operator.value,
                    "value": c.value,
                    "metric": c.metric.value if c.metric else None,
                }
                for c in self.conditions
            ],
            "confidence": self.confidence,
            "enabled": self.enabled,
        }


class RuleRegistry:
    """Insertion-ordered registry of analysis rules."""

    def __init__(self, rules: Optional[Sequence[AnalysisRule]] = None):
        self._rules: Dict[str, AnalysisRule] = {}
        for rule in rules or ():
            self.register(rule)

    def register(self, rule: AnalysisRule) -> None:
        self._rules[rule.id] = rule
        logger.debug("Registered analysis rule", rule=rule.id)

    def get(self, rule_id: str) -> Optional[AnalysisRule]:
        return self._rules.get(rule_id)

    def require(self, rule_id: str) -> AnalysisRule:
        rule = self._rules.get(rule_id)
        if rule is None:
            raise UnknownComponentError("analysis rule", rule_id)
        return rule

    def enable(self, rule_id: str) -> None:
        self.require(rule_id).enabled = True

    def disable(self, rule_id: str) -> None:
        self.require(rule_id).enabled = False

    def rules(self) -> List[AnalysisRule]:
        return list(self._rules.values())

    def enabled_rules(self) -> List[AnalysisRule]:
        return [r for r in self._rules.values() if r.enabled]

    def __len__(self) -> int:
        return len(self._rules)

    def __contains__(self, rule_id: str) -> bool:
        return rule_id in self._rules
