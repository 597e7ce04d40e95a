"""Root cause analysis for detected bottlenecks."""

import time
from typing import Dict, Any, List, Optional, Protocol, Sequence

import structlog

from .config import AnalysisConfig
from .errors import RuleError
from .events import Observer, notify
from .models import (
    Evidence,
    EvidenceType,
    HistoricalAnalysis,
    ImpactAssessment,
    PerformanceBottleneck,
    PerformanceProfile,
    RootCause,
    RootCauseCategory,
)
from ..analysis import statistics
from ..history.store import HistoricalStore
from ..monitoring.logging import analysis_logger
from ..monitoring.metrics import MetricsCollector
from ..rules.base import AnalysisRule, ConditionContext, RuleRegistry
from ..rules.builtin import build_default_rule_registry
from ..rules.fixes import regression_fixes
from ..rules.patterns import PerformancePattern, build_default_patterns

logger = structlog.get_logger(__name__)

IMPACT_FACTORS = (1.0, 0.9, 0.7, 0.6)
REGRESSION_WINDOW = 10
REGRESSION_RATIO = 0.8
REGRESSION_CONFIDENCE = 0.8


class RootCauseModel(Protocol):
    """Pluggable predictor consulted when machine learning is enabled."""

    name: str

    async def predict(self, bottleneck: PerformanceBottleneck, profile: PerformanceProfile) -> List[RootCause]:
        ...


def assess_impact(bottleneck: PerformanceBottleneck) -> ImpactAssessment:
    return ImpactAssessment.scaled(bottleneck.impact_score, IMPACT_FACTORS, [bottleneck.operation])


class RootCauseAnalysisService:
    """Explains a bottleneck with rule, pattern and historical root causes.

    Results are kept per bottleneck id, and a summary of every analysis is
    appended to the per-target history used by regression detection.
    """

    def __init__(
        self,
        config: Optional[AnalysisConfig] = None,
        rules: Optional[RuleRegistry] = None,
        patterns: Optional[Dict[str, PerformancePattern]] = None,
        history: Optional[HistoricalStore] = None,
        metrics: Optional[MetricsCollector] = None,
        models: Optional[Sequence[RootCauseModel]] = None
    ):
        self.config = config if config is not None else AnalysisConfig()
        self.rules = rules if rules is not None else build_default_rule_registry()
        self.patterns = patterns if patterns is not None else build_default_patterns()
        self.history = history if history is not None else HistoricalStore(
            max_profiles=self.config.max_historical_profiles,
            trimmed_profiles=self.config.trimmed_historical_profiles,
            analysis_window=self.config.historical_analysis_window,
        )
        self.metrics = metrics if metrics is not None else MetricsCollector()
        self.models: List[RootCauseModel] = list(models or [])

        self._root_causes: Dict[str, List[RootCause]] = {}

    def register_model(self, model: RootCauseModel) -> None:
        self.models.append(model)
        logger.info("Registered root cause model", model=getattr(model, "name", type(model).__name__))

    async def analyze_bottleneck(
        self,
        bottleneck: PerformanceBottleneck,
        profile: PerformanceProfile,
        observer: Optional[Observer] = None
    ) -> List[RootCause]:
        """Collect root causes for ``bottleneck`` observed in ``profile``."""
        start_time = time.perf_counter()
        past_analyses = self.history.analyses_for(profile.target_id)
        ctx = ConditionContext(bottleneck=bottleneck, profile=profile, history=past_analyses)

        root_causes = self._apply_rules(ctx, observer)

        if self.config.enable_deep_analysis:
            root_causes.extend(self._match_patterns(bottleneck))

        root_causes.extend(self._compare_with_history(bottleneck, profile, past_analyses))

        if self.config.enable_machine_learning:
            root_causes.extend(await self._run_models(bottleneck, profile))

        self._root_causes[bottleneck.id] = root_causes
        self.history.add_analysis(profile.target_id, HistoricalAnalysis(
            profile_id=profile.id,
            bottleneck_id=bottleneck.id,
            performance_score=profile.summary.performance_score,
            root_cause_count=len(root_causes),
            top_root_cause_category=root_causes[0].category if root_causes else RootCauseCategory.CODE_INEFFICIENCY,
        ))

        duration = time.perf_counter() - start_time
        for root_cause in root_causes:
            self.metrics.increment_counter("root_causes_generated_total", {"category": root_cause.category.value})
        self.metrics.record_histogram("analysis_duration_seconds", duration, {"stage": "root_cause"})
        analysis_logger.log_root_causes(
            bottleneck_id=bottleneck.id,
            profile_id=profile.id,
            root_causes=len(root_causes),
            duration=duration,
        )
        notify(
            observer,
            "analysis_completed",
            bottleneck_id=bottleneck.id,
            profile_id=profile.id,
            root_causes_found=len(root_causes),
        )

        return root_causes

    def _apply_rules(self, ctx: ConditionContext, observer: Optional[Observer]) -> List[RootCause]:
        root_causes = []
        for rule in self.rules.enabled_rules():
            try:
                if not rule.matches(ctx):
                    continue
                root_cause = self._root_cause_from_rule(rule, ctx)
            except Exception as e:
                error = RuleError(rule.id, str(e), details={"bottleneck_id": ctx.bottleneck.id})
                analysis_logger.log_component_failure("rule", rule.id, e, bottleneck_id=ctx.bottleneck.id)
                self.metrics.increment_counter("rule_errors_total", {"rule": rule.id})
                notify(observer, "rule_error", rule_id=rule.id, bottleneck_id=ctx.bottleneck.id, error=error.to_dict())
                continue

            if root_cause.confidence >= self.config.root_cause_confidence_threshold:
                root_causes.append(root_cause)

            notify(
                observer,
                "rule_matched",
                rule_id=rule.id,
                bottleneck_id=ctx.bottleneck.id,
                profile_id=ctx.profile.id,
                confidence=root_cause.confidence,
            )

        return root_causes

    def _root_cause_from_rule(self, rule: AnalysisRule, ctx: ConditionContext) -> RootCause:
        return RootCause(
            category=rule.category,
            description=rule.description,
            confidence=rule.confidence,
            evidence=rule.evidence_generator(ctx.bottleneck, ctx.profile),
            fix_suggestions=rule.fix_generator(ctx.bottleneck, ctx.profile),
            impact_assessment=assess_impact(ctx.bottleneck),
        )

    def _match_patterns(self, bottleneck: PerformanceBottleneck) -> List[RootCause]:
        root_causes = []
        for pattern_id, pattern in self.patterns.items():
            if not pattern.matches(bottleneck):
                continue
            root_causes.append(RootCause(
                category=RootCauseCategory.ARCHITECTURAL_ISSUE,
                description=f"Pattern detected: {pattern.description}",
                confidence=pattern.confidence,
                evidence=[Evidence(
                    type=EvidenceType.PATTERN_MATCHING,
                    description=f"Matches known performance pattern: {pattern.name}",
                    data={"pattern_id": pattern_id, "indicators": list(pattern.indicators)},
                    strength=pattern.confidence,
                )],
                fix_suggestions=pattern.fix_suggestions(),
                impact_assessment=assess_impact(bottleneck),
            ))
        return root_causes

    def _compare_with_history(
        self,
        bottleneck: PerformanceBottleneck,
        profile: PerformanceProfile,
        past_analyses: List[HistoricalAnalysis]
    ) -> List[RootCause]:
        if not past_analyses:
            return []

        recent = past_analyses[-REGRESSION_WINDOW:]
        historical_average = statistics.mean([a.performance_score for a in recent])
        current_score = profile.summary.performance_score
        if current_score >= historical_average * REGRESSION_RATIO:
            return []

        degradation = (historical_average - current_score) / historical_average * 100 if historical_average else 0.0
        return [RootCause(
            category=RootCauseCategory.CODE_INEFFICIENCY,
            description="Performance degradation compared to historical baseline",
            confidence=REGRESSION_CONFIDENCE,
            evidence=[Evidence(
                type=EvidenceType.TIMING_ANALYSIS,
                description=(
                    f"Current performance score ({current_score}) is {degradation:.1f}% worse "
                    f"than historical average ({historical_average:.1f})"
                ),
                data={"current_score": current_score, "historical_average": historical_average},
                strength=REGRESSION_CONFIDENCE,
            )],
            fix_suggestions=regression_fixes(),
            impact_assessment=assess_impact(bottleneck),
        )]

    async def _run_models(self, bottleneck: PerformanceBottleneck, profile: PerformanceProfile) -> List[RootCause]:
        root_causes = []
        for model in self.models:
            model_name = getattr(model, "name", type(model).__name__)
            try:
                root_causes.extend(await model.predict(bottleneck, profile))
            except Exception as e:
                analysis_logger.log_component_failure("model", model_name, e, bottleneck_id=bottleneck.id)
        return root_causes

    # Administration

    def enable_rule(self, rule_id: str) -> None:
        self.rules.enable(rule_id)
        logger.info("Enabled analysis rule", rule=rule_id)

    def disable_rule(self, rule_id: str) -> None:
        self.rules.disable(rule_id)
        logger.info("Disabled analysis rule", rule=rule_id)

    def get_analysis_rules(self) -> List[Dict[str, Any]]:
        return [rule.describe() for rule in self.rules.rules()]

    def get_root_causes(self, bottleneck_id: str) -> List[RootCause]:
        return list(self._root_causes.get(bottleneck_id, []))

    def get_analysis_statistics(self) -> Dict[str, Any]:
        return {
            "total_rules": len(self.rules),
            "enabled_rules": len(self.rules.enabled_rules()),
            "analyzed_bottlenecks": len(self._root_causes),
            "total_root_causes": sum(len(c) for c in self._root_causes.values()),
            "patterns_in_database": len(self.patterns),
            "historical_analyses": self.history.analysis_count,
        }

    async def shutdown(self) -> None:
        """Drop stored root causes and analysis history."""
        self._root_causes.clear()
        self.history.clear_analyses()
        logger.info("Root cause analysis service shutdown complete")
