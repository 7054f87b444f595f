"""Modelo de Análisis de Gap entre capital actual y objetivo."""

__all__ = ["GoalGapAnalysis"]

from datetime import UTC, date, datetime
from decimal import Decimal
from typing import Any
from uuid import uuid4

from sqlalchemy import JSON, Date, DateTime, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from goal_optimizer.core.database import Base
from goal_optimizer.models.enums import RiskLevel
from goal_optimizer.schemas.optimizer import GapAnalysisDetails


class GoalGapAnalysis(Base):
    """
    Resultado de una corrida de análisis de gap.

    Las filas nunca se modifican: cada corrida agrega una nueva y la más
    reciente (por analysis_date, luego created_at) es la vigente.
    """

    __tablename__ = "goal_gap_analysis"

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
    analysis_date: Mapped[date] = mapped_column(
        Date,
        nullable=False,
        index=True,
        comment="Fecha de la corrida",
    )

    # Capital
    current_capital: Mapped[Decimal] = mapped_column(Numeric(15, 2), nullable=False)
    target_capital: Mapped[Decimal] = mapped_column(Numeric(15, 2), nullable=False)
    gap_amount: Mapped[Decimal] = mapped_column(Numeric(15, 2), nullable=False)
    gap_percentage: Mapped[Decimal] = mapped_column(
        Numeric(20, 4),
        nullable=False,
        comment="Gap (%) sobre el objetivo; negativo si el capital ya lo supera",
    )

    # Aportes
    current_monthly_contribution: Mapped[Decimal] = mapped_column(Numeric(15, 2), nullable=False)
    required_monthly_contribution: Mapped[Decimal] = mapped_column(Numeric(15, 2), nullable=False)
    contribution_gap: Mapped[Decimal] = mapped_column(Numeric(15, 2), nullable=False)

    # Tiempo
    months_remaining: Mapped[int | None] = mapped_column(
        Integer,
        nullable=True,
        comment="Nulo si la meta no tiene fecha objetivo",
    )
    projected_completion_date: Mapped[date | None] = mapped_column(
        Date,
        nullable=True,
        comment="Nulo si el aporte es cero o la proyección supera el horizonte",
    )
    deviation_from_plan: Mapped[Decimal] = mapped_column(
        Numeric(20, 4),
        nullable=False,
        default=Decimal("0"),
        comment="Desviación (%) respecto al capital esperado desde la creación",
    )
    risk_level: Mapped[RiskLevel] = mapped_column(String(10), nullable=False)

    analysis_details: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
    )

    def __repr__(self) -> str:
        return (
            f"<GoalGapAnalysis(goal={self.goal_id[:8]}, date={self.analysis_date}, "
            f"gap={self.gap_amount}, risk={self.risk_level})>"
        )

    @property
    def details(self) -> GapAnalysisDetails | None:
        """Detalles del análisis como schema tipado."""
        if self.analysis_details is None:
            return None
        return GapAnalysisDetails.model_validate(self.analysis_details)
