"""Modelo de Estrategias de Optimización de metas."""

__all__ = ["GoalOptimizationStrategy"]

from datetime import UTC, datetime
from decimal import Decimal
from typing import Any
from uuid import uuid4

from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from goal_optimizer.core.database import Base
from goal_optimizer.models.enums import EffortLevel, StrategyPriority, StrategyType
from goal_optimizer.schemas.optimizer import ImplementationStep, StrategyRequirement, StrategyRisk


class GoalOptimizationStrategy(Base):
    """
    Estrategia sugerida para cerrar el gap de una meta.

    Se genera a partir del último análisis de gap. `is_applied` arranca
    en False y cambia cuando el usuario se compromete con la estrategia.
    """

    __tablename__ = "goal_optimization_strategies"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    goal_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("financial_goals.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    gap_analysis_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("goal_gap_analysis.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
        comment="Análisis del que se derivó este lote de estrategias",
    )

    strategy_name: Mapped[str] = mapped_column(String(200), nullable=False)
    strategy_type: Mapped[StrategyType] = mapped_column(String(30), nullable=False)
    priority: Mapped[StrategyPriority] = mapped_column(
        String(10),
        nullable=False,
        default=StrategyPriority.MEDIUM,
    )
    impact_score: Mapped[int] = mapped_column(Integer, nullable=False, default=75)
    effort_level: Mapped[EffortLevel] = mapped_column(
        String(10),
        nullable=False,
        default=EffortLevel.MEDIUM,
    )
    time_to_implement_days: Mapped[int] = mapped_column(Integer, nullable=False, default=7)
    estimated_time_savings_months: Mapped[int | None] = mapped_column(Integer, nullable=True)
    estimated_cost_savings: Mapped[Decimal | None] = mapped_column(Numeric(15, 2), nullable=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)

    implementation_steps: Mapped[list[dict[str, Any]] | None] = mapped_column(JSON, nullable=True)
    requirements: Mapped[list[dict[str, Any]] | None] = mapped_column(JSON, nullable=True)
    risks: Mapped[list[dict[str, Any]] | None] = mapped_column(JSON, nullable=True)

    is_applied: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    applied_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )

    def __repr__(self) -> str:
        return (
            f"<GoalOptimizationStrategy(type={self.strategy_type}, priority={self.priority}, "
            f"applied={self.is_applied})>"
        )

    @property
    def steps(self) -> list[ImplementationStep]:
        """Pasos de implementación tipados."""
        return [ImplementationStep.model_validate(s) for s in self.implementation_steps or []]

    @property
    def requirement_list(self) -> list[StrategyRequirement]:
        """Requisitos tipados."""
        return [StrategyRequirement.model_validate(r) for r in self.requirements or []]

    @property
    def risk_list(self) -> list[StrategyRisk]:
        """Riesgos tipados."""
        return [StrategyRisk.model_validate(r) for r in self.risks or []]

    def mark_as_applied(self) -> None:
        """Marca la estrategia como aplicada por el usuario."""
        self.is_applied = True
        self.applied_date = datetime.now(UTC)
