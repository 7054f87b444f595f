"""Repositories para los artefactos del optimizador.

Todos los lectores ordenan en la query (ORDER BY explícito) y no dependen
del orden de inserción.
"""

from uuid import UUID

from sqlalchemy import case, func, select
from sqlalchemy.orm import Session

from goal_optimizer.models.contribution_plan import GoalContributionPlan
from goal_optimizer.models.enums import PRIORITY_RANK
from goal_optimizer.models.gap_analysis import GoalGapAnalysis
from goal_optimizer.models.intermediate_milestone import GoalIntermediateMilestone
from goal_optimizer.models.optimization_strategy import GoalOptimizationStrategy
from goal_optimizer.repositories.base import BaseRepository, normalize_id


class GapAnalysisRepository(BaseRepository[GoalGapAnalysis]):
    """Repositorio de análisis de gap (historial append-only)."""

    def __init__(self, db: Session) -> None:
        super().__init__(GoalGapAnalysis, db)

    def get_latest_by_goal(self, goal_id: str | UUID) -> GoalGapAnalysis | None:
        """
        Obtiene el análisis vigente de una meta.

        Returns:
            Análisis con analysis_date más reciente (desempate por created_at, luego id) o None
        """
        stmt = (
            self._by_goal(goal_id)
            .order_by(
                self.model.analysis_date.desc(),
                self.model.created_at.desc(),
                self.model.id.desc(),
            )
            .limit(1)
        )
        return self.db.execute(stmt).scalars().first()

    def get_all_by_goal(self, goal_id: str | UUID) -> list[GoalGapAnalysis]:
        """Historial de análisis de una meta, del más reciente al más antiguo."""
        stmt = (
            self._by_goal(goal_id)
            .order_by(
                self.model.analysis_date.desc(),
                self.model.created_at.desc(),
                self.model.id.desc(),
            )
        )
        return list(self.db.execute(stmt).scalars().all())


class StrategyRepository(BaseRepository[GoalOptimizationStrategy]):
    """Repositorio de estrategias de optimización."""

    def __init__(self, db: Session) -> None:
        super().__init__(GoalOptimizationStrategy, db)

    def get_all_by_goal(self, goal_id: str | UUID) -> list[GoalOptimizationStrategy]:
        """
        Estrategias de una meta ordenadas por prioridad DESC, impacto DESC.

        La prioridad se ordena por rango (CRITICAL > HIGH > MEDIUM > LOW),
        no alfabéticamente.
        """
        priority_rank = case(PRIORITY_RANK, value=self.model.priority, else_=0)
        stmt = (
            self._by_goal(goal_id)
            .order_by(
                priority_rank.desc(),
                self.model.impact_score.desc(),
                self.model.created_at.asc(),
            )
        )
        return list(self.db.execute(stmt).scalars().all())


class ContributionPlanRepository(BaseRepository[GoalContributionPlan]):
    """Repositorio de planes de contribución."""

    def __init__(self, db: Session) -> None:
        super().__init__(GoalContributionPlan, db)

    def get_all_by_goal(self, goal_id: str | UUID) -> list[GoalContributionPlan]:
        """Planes de una meta: activos primero, luego por probabilidad de éxito DESC."""
        stmt = (
            self._by_goal(goal_id)
            .order_by(
                self.model.is_active.desc(),
                self.model.success_probability.desc(),
                self.model.created_at.asc(),
            )
        )
        return list(self.db.execute(stmt).scalars().all())

    def get_active_by_goal(self, goal_id: str | UUID) -> GoalContributionPlan | None:
        """Plan activo de una meta, si existe."""
        stmt = self._by_goal(goal_id).where(self.model.is_active.is_(True))
        return self.db.execute(stmt).scalars().first()

    def set_as_active(self, plan: GoalContributionPlan) -> int:
        """
        Establece un plan como activo (desactiva los demás de la misma meta).

        Args:
            plan: Plan a activar

        Returns:
            Cantidad de planes que se desactivaron
        """
        deactivated = 0
        for other in self.get_all_by_goal(plan.goal_id):
            if other.is_active and other.id != plan.id:
                other.deactivate()
                deactivated += 1

        plan.activate()
        self.db.flush()
        return deactivated


class MilestoneRepository(BaseRepository[GoalIntermediateMilestone]):
    """Repositorio de hitos intermedios."""

    def __init__(self, db: Session) -> None:
        super().__init__(GoalIntermediateMilestone, db)

    def get_all_by_goal(self, goal_id: str | UUID) -> list[GoalIntermediateMilestone]:
        """Hitos de una meta ordenados por milestone_order ASC."""
        stmt = (
            self._by_goal(goal_id)
            .order_by(self.model.milestone_order.asc())
        )
        return list(self.db.execute(stmt).scalars().all())

    def get_max_order(self, goal_id: str | UUID) -> int:
        """Mayor milestone_order existente de la meta (0 si no hay hitos)."""
        stmt = select(func.max(self.model.milestone_order)).where(
            self.model.goal_id == normalize_id(goal_id)
        )
        return self.db.execute(stmt).scalar() or 0
