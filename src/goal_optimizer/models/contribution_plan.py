"""Modelo de Planes de Contribución optimizados."""

__all__ = ["GoalContributionPlan"]

from datetime import UTC, datetime
from decimal import Decimal
from typing import Any
from uuid import uuid4

from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from goal_optimizer.core.database import Base
from goal_optimizer.models.enums import PlanType
from goal_optimizer.schemas.optimizer import BonusContribution, SeasonalAdjustment


class GoalContributionPlan(Base):
    """
    Plan de aportes mensuales con bonos probables y ajustes estacionales.

    Solo un plan por meta debería estar activo; lo garantiza el servicio
    orquestador al activar, no el planificador.
    """

    __tablename__ = "goal_contribution_plans"

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
        comment="Análisis del que se derivó este lote de planes (nulo en planes CUSTOM)",
    )

    plan_name: Mapped[str] = mapped_column(String(100), nullable=False)
    plan_type: Mapped[PlanType] = mapped_column(String(20), nullable=False, default=PlanType.MODERATE)

    base_monthly_contribution: Mapped[Decimal] = mapped_column(Numeric(15, 2), nullable=False)
    optimized_monthly_contribution: Mapped[Decimal] = mapped_column(Numeric(15, 2), nullable=False)
    contribution_increase: Mapped[Decimal] = mapped_column(Numeric(15, 2), nullable=False)
    extra_annual_contributions: Mapped[Decimal] = mapped_column(
        Numeric(15, 2),
        nullable=False,
        default=Decimal("0"),
        comment="Suma anual esperada de bonos (monto × probabilidad)",
    )

    bonus_contributions: Mapped[list[dict[str, Any]] | None] = mapped_column(JSON, nullable=True)
    seasonal_adjustments: Mapped[list[dict[str, Any]] | None] = mapped_column(JSON, nullable=True)

    affordability_score: Mapped[int | None] = mapped_column(Integer, nullable=True)
    success_probability: Mapped[int | None] = mapped_column(Integer, nullable=True)

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)
    activated_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

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
            f"<GoalContributionPlan(type={self.plan_type}, "
            f"optimized={self.optimized_monthly_contribution}, active={self.is_active})>"
        )

    @property
    def bonuses(self) -> list[BonusContribution]:
        """Bonos tipados."""
        return [BonusContribution.model_validate(b) for b in self.bonus_contributions or []]

    @property
    def seasonal(self) -> list[SeasonalAdjustment]:
        """Ajustes estacionales tipados."""
        return [SeasonalAdjustment.model_validate(s) for s in self.seasonal_adjustments or []]

    def activate(self) -> None:
        """Marca el plan como activo."""
        self.is_active = True
        self.activated_date = datetime.now(UTC)

    def deactivate(self) -> None:
        """Marca el plan como inactivo."""
        self.is_active = False
