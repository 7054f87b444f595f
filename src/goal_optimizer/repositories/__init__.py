"""Repositorios para acceso a datos.

Implementan el Repository Pattern para separar la lógica de acceso
a datos de los cálculos del optimizador. Se construyen con una sesión
inyectada, nunca con un handle global.

Uso:
    ```python
    from goal_optimizer.repositories import GapAnalysisRepository

    repo = GapAnalysisRepository(db)
    latest = repo.get_latest_by_goal(goal_id)
    ```
"""

from goal_optimizer.repositories.base import BaseRepository
from goal_optimizer.repositories.goal_repository import GoalRepository
from goal_optimizer.repositories.optimizer_repositories import (
    ContributionPlanRepository,
    GapAnalysisRepository,
    MilestoneRepository,
    StrategyRepository,
)


__all__ = [
    "BaseRepository",
    "ContributionPlanRepository",
    "GapAnalysisRepository",
    "GoalRepository",
    "MilestoneRepository",
    "StrategyRepository",
]
