"""Modelo de Hitos Intermedios de metas."""

__all__ = ["GoalIntermediateMilestone"]

from datetime import UTC, date, datetime
from decimal import Decimal
from uuid import uuid4

from sqlalchemy import Boolean, Date, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from goal_optimizer.core.database import Base
from goal_optimizer.models.enums import DifficultyLevel, MilestoneType


class GoalIntermediateMilestone(Base):
    """
    Punto de control intermedio hacia una meta.

    Ejemplos:
    - "25% del Objetivo": $25,000 de $100,000
    - "Año 2": checkpoint de calendario a 24 meses
    """

    __tablename__ = "goal_intermediate_milestones"

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

    milestone_name: Mapped[str] = mapped_column(String(100), nullable=False)
    milestone_type: Mapped[MilestoneType] = mapped_column(String(20), nullable=False)
    milestone_order: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="Orden 1-based, estrictamente creciente en orden de generación",
    )

    # Objetivos del hito
    target_amount: Mapped[Decimal | None] = mapped_column(Numeric(15, 2), nullable=True)
    target_percentage: Mapped[Decimal | None] = mapped_column(Numeric(5, 2), nullable=True)
    target_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    # Progreso
    current_progress: Mapped[Decimal] = mapped_column(
        Numeric(5, 2),
        nullable=False,
        default=Decimal("0"),
        comment="Progreso reportado (0-100)",
    )
    progress_percentage: Mapped[Decimal] = mapped_column(
        Numeric(5, 2),
        nullable=False,
        default=Decimal("0"),
    )
    is_achieved: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    achieved_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    difficulty_level: Mapped[DifficultyLevel] = mapped_column(
        String(20),
        nullable=False,
        default=DifficultyLevel.MODERATE,
    )
    motivation_message: Mapped[str | None] = mapped_column(Text, nullable=True)
    auto_calculated: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

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
            f"<GoalIntermediateMilestone(order={self.milestone_order}, "
            f"name={self.milestone_name}, achieved={self.is_achieved})>"
        )

    def mark_as_achieved(self) -> None:
        """Marca el hito como alcanzado."""
        if not self.is_achieved:
            self.is_achieved = True
            self.achieved_date = datetime.now(UTC)
