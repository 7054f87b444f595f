"""Score de salud del optimizador y próximas acciones recomendadas."""

from collections.abc import Sequence
from decimal import Decimal

from goal_optimizer.config.settings import OptimizerSettings, settings
from goal_optimizer.models.contribution_plan import GoalContributionPlan
from goal_optimizer.models.enums import RiskLevel, StrategyPriority
from goal_optimizer.models.gap_analysis import GoalGapAnalysis
from goal_optimizer.models.intermediate_milestone import GoalIntermediateMilestone
from goal_optimizer.models.optimization_strategy import GoalOptimizationStrategy
from goal_optimizer.utils.formatting import format_amount, round_half_up


def calculate_overall_score(
    analysis: GoalGapAnalysis | None,
    strategies: Sequence[GoalOptimizationStrategy],
    plans: Sequence[GoalContributionPlan],
    milestones: Sequence[GoalIntermediateMilestone],
    config: OptimizerSettings | None = None,
) -> int:
    """
    Score 0-100 que resume el estado de optimización de una meta.

    Parte de una base y ajusta por tamaño del gap, nivel de riesgo,
    estrategias disponibles, planes activos y progreso en hitos.
    """
    config = config or settings.optimizer
    score = config.score_base

    if analysis is not None:
        gap_pct = float(analysis.gap_percentage)
        if gap_pct < config.score_small_gap_threshold:
            score += config.score_gap_adjustment
        elif gap_pct > config.score_large_gap_threshold:
            score -= config.score_gap_adjustment

        if analysis.risk_level == RiskLevel.LOW:
            score += config.score_risk_adjustment
        elif analysis.risk_level == RiskLevel.HIGH:
            score -= config.score_risk_adjustment

    score += min(config.score_strategies_cap, len(strategies) * config.score_per_strategy)

    active_plans = sum(1 for plan in plans if plan.is_active)
    score += min(config.score_active_plans_cap, active_plans * config.score_per_active_plan)

    if milestones:
        achieved = sum(1 for milestone in milestones if milestone.is_achieved)
        score += achieved / len(milestones) * config.score_milestones_weight

    return max(0, min(100, round_half_up(score)))


def generate_next_actions(
    analysis: GoalGapAnalysis | None,
    strategies: Sequence[GoalOptimizationStrategy],
    config: OptimizerSettings | None = None,
) -> list[str]:
    """Próximas acciones en orden de generación, truncadas a `max_next_actions`."""
    config = config or settings.optimizer
    actions: list[str] = []

    if analysis is not None:
        contribution_gap = Decimal(analysis.contribution_gap)
        if contribution_gap > 0:
            actions.append(f"Aumentar aporte mensual en {format_amount(contribution_gap)}")

        if analysis.risk_level == RiskLevel.HIGH:
            actions.append("Revisar fecha objetivo o monto del objetivo")

    pending = next(
        (s for s in strategies if not s.is_applied and s.priority == StrategyPriority.HIGH),
        None,
    )
    if pending is not None:
        actions.append(f"Implementar estrategia: {pending.strategy_name}")

    if not actions:
        actions.append("Continuar con el plan actual y monitorear progreso")

    return actions[: config.max_next_actions]
