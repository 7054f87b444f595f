"""Servicios del optimizador de metas."""

from goal_optimizer.services.capital_valuation import (
    CapitalValuationSource,
    FallbackCapitalSource,
    StaticCapitalSource,
)
from goal_optimizer.services.contribution_planner import (
    PlanDraft,
    build_custom_plan,
    calculate_extra_annual_contributions,
    generate_plan_drafts,
)
from goal_optimizer.services.gap_calculator import (
    GapMetrics,
    assess_risk_level,
    calculate_gap_metrics,
    calculate_required_monthly_contribution,
)
from goal_optimizer.services.gap_details import expand_gap_details
from goal_optimizer.services.goal_optimizer_service import GoalOptimizerService
from goal_optimizer.services.milestone_generator import MilestoneDraft, generate_milestone_drafts
from goal_optimizer.services.score_aggregator import calculate_overall_score, generate_next_actions
from goal_optimizer.services.strategy_generator import (
    StrategyDraft,
    build_custom_strategy,
    generate_strategy_drafts,
)


__all__ = [
    # Orquestador
    "GoalOptimizerService",
    # Capital
    "CapitalValuationSource",
    "FallbackCapitalSource",
    "StaticCapitalSource",
    # Cálculos
    "GapMetrics",
    "assess_risk_level",
    "calculate_gap_metrics",
    "calculate_required_monthly_contribution",
    "expand_gap_details",
    "calculate_overall_score",
    "generate_next_actions",
    # Generadores
    "MilestoneDraft",
    "PlanDraft",
    "StrategyDraft",
    "build_custom_plan",
    "build_custom_strategy",
    "calculate_extra_annual_contributions",
    "generate_milestone_drafts",
    "generate_plan_drafts",
    "generate_strategy_drafts",
]
