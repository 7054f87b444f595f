"""Modelos de base de datos - Optimizador de Metas."""

from goal_optimizer.models.contribution_plan import GoalContributionPlan
from goal_optimizer.models.enums import (
    Currency,
    DifficultyLevel,
    EffortLevel,
    MilestoneType,
    PlanType,
    RiskLevel,
    StrategyPriority,
    StrategyType,
)
from goal_optimizer.models.gap_analysis import GoalGapAnalysis
from goal_optimizer.models.goal import FinancialGoal
from goal_optimizer.models.intermediate_milestone import GoalIntermediateMilestone
from goal_optimizer.models.optimization_strategy import GoalOptimizationStrategy


__all__ = [
    # Core Models
    "FinancialGoal",
    "GoalContributionPlan",
    "GoalGapAnalysis",
    "GoalIntermediateMilestone",
    "GoalOptimizationStrategy",
    # Enums
    "Currency",
    "DifficultyLevel",
    "EffortLevel",
    "MilestoneType",
    "PlanType",
    "RiskLevel",
    "StrategyPriority",
    "StrategyType",
]
