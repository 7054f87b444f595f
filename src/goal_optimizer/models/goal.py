"""Modelo de Meta Financiera (entidad externa, solo lectura para el optimizador)."""

__all__ = ["FinancialGoal"]

from datetime import UTC, date, datetime
from decimal import Decimal
from uuid import uuid4

from sqlalchemy import Date, DateTime, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from goal_optimizer.core.database import Base
from goal_optimizer.models.enums import Currency


class FinancialGoal(Base):
    """
    Meta financiera del usuario.

    El optimizador solo lee estas filas: el CRUD vive en otro servicio.

    Ejemplos:
        - Retiro: $500,000 para 2045, aportando $1,000/mes al 8% anual
        - Fondo de emergencia: $15,000 sin fecha objetivo
        - Meta de rendimiento puro: sin monto objetivo
    """

    __tablename__ = "financial_goals"

    # Identificadores
    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid4()),
    )

    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        comment="Nombre de la meta (ej: Retiro anticipado)",
    )

    # Parámetros de la meta
    target_amount: Mapped[Decimal | None] = mapped_column(
        Numeric(15, 2),
        nullable=True,
        comment="Capital objetivo (nulo para metas de rendimiento puro)",
    )
    target_date: Mapped[date | None] = mapped_column(
        Date,
        nullable=True,
        comment="Fecha objetivo para alcanzar la meta",
    )
    monthly_contribution: Mapped[Decimal] = mapped_column(
        Numeric(15, 2),
        nullable=False,
        default=Decimal("0.00"),
        comment="Aporte mensual actual",
    )
    expected_return_rate: Mapped[Decimal] = mapped_column(
        Numeric(6, 2),
        nullable=False,
        default=Decimal("0.00"),
        comment="Rendimiento anual esperado en porcentaje (10 = 10%/año)",
    )
    currency: Mapped[Currency] = mapped_column(
        String(3),
        nullable=False,
        default=Currency.USD,
        comment="Moneda de la meta",
    )
    created_date: Mapped[date] = mapped_column(
        Date,
        nullable=False,
        default=date.today,
        comment="Fecha de inicio del plan original",
    )

    # Timestamps
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
        return f"<FinancialGoal(id={self.id[:8]}, name={self.name}, target={self.target_amount})>"

    @property
    def monthly_return(self) -> Decimal:
        """Rendimiento mensual como fracción (rate / 1200)."""
        return Decimal(self.expected_return_rate or 0) / Decimal(1200)

    @property
    def has_target_amount(self) -> bool:
        """True si la meta tiene un monto objetivo definido."""
        return self.target_amount is not None
