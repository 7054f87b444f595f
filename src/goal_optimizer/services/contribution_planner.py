"""Planificador de aportes: planes conservador, moderado, agresivo y personalizados.

Los planes generados cumplen:
    conservador.optimizado <= moderado.optimizado <= agresivo.optimizado
"""

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation

from goal_optimizer.core.exceptions import ValidationError
from goal_optimizer.models.enums import PlanType
from goal_optimizer.schemas.optimizer import BonusContribution, SeasonalAdjustment
from goal_optimizer.utils.formatting import to_cents


CONSERVATIVE_MULTIPLIER = Decimal("1.1")
MODERATE_MULTIPLIER = Decimal("1.25")

AGUINALDO = "aguinaldo"
EXTRA_INCOME = "extra_income"


@dataclass
class PlanDraft:
    """Plan de contribución propuesto, todavía sin persistir."""

    plan_name: str
    plan_type: PlanType
    optimized_monthly_contribution: Decimal
    bonus_contributions: list[BonusContribution] = field(default_factory=list)
    seasonal_adjustments: list[SeasonalAdjustment] = field(default_factory=list)

    @property
    def extra_annual_contributions(self) -> Decimal:
        return calculate_extra_annual_contributions(self.bonus_contributions)


def calculate_extra_annual_contributions(bonuses: list[BonusContribution]) -> Decimal:
    """
    Aportes extraordinarios esperados por año.

    Suma de cada bono ponderado por su probabilidad.
    """
    total = sum(
        (bonus.amount * Decimal(bonus.probability) / Decimal(100) for bonus in bonuses),
        Decimal("0"),
    )
    return to_cents(total)


def _bonus(month: int, amount: Decimal, source: str, probability: int) -> BonusContribution:
    return BonusContribution(
        month=month,
        amount=to_cents(amount),
        source=source,
        frequency="YEARLY",
        probability=probability,
    )


def generate_plan_drafts(
    base_contribution: Decimal,
    required_contribution: Decimal,
) -> list[PlanDraft]:
    """
    Genera los planes estándar para una meta.

    Args:
        base_contribution: Aporte mensual actual de la meta
        required_contribution: Aporte requerido según el último análisis

    Returns:
        Conservador y moderado siempre; agresivo solo si el requerido
        supera al actual
    """
    base = Decimal(base_contribution)
    required = Decimal(required_contribution)

    conservative = PlanDraft(
        plan_name="Plan Conservador",
        plan_type=PlanType.CONSERVATIVE,
        optimized_monthly_contribution=to_cents(max(base, base * CONSERVATIVE_MULTIPLIER)),
        bonus_contributions=[_bonus(12, base * Decimal("0.5"), AGUINALDO, 85)],
        seasonal_adjustments=[
            SeasonalAdjustment(
                months=[1, 2],
                adjustment_factor=Decimal("0.9"),
                reason="Gastos escolares y vacaciones",
            ),
        ],
    )

    moderate_value = to_cents(max(base * MODERATE_MULTIPLIER, (base + required) / 2))
    moderate = PlanDraft(
        plan_name="Plan Moderado",
        plan_type=PlanType.MODERATE,
        optimized_monthly_contribution=moderate_value,
        bonus_contributions=[
            _bonus(6, base * Decimal("0.5"), AGUINALDO, 85),
            _bonus(12, base, AGUINALDO, 85),
        ],
    )

    drafts = [conservative, moderate]

    if required > base:
        drafts.append(
            PlanDraft(
                plan_name="Plan Agresivo",
                plan_type=PlanType.AGGRESSIVE,
                # Nunca por debajo del moderado
                optimized_monthly_contribution=max(to_cents(required), moderate_value),
                bonus_contributions=[
                    _bonus(3, base * Decimal("0.3"), EXTRA_INCOME, 60),
                    _bonus(6, base * Decimal("0.5"), AGUINALDO, 85),
                    _bonus(9, base * Decimal("0.3"), EXTRA_INCOME, 60),
                    _bonus(12, base, AGUINALDO, 85),
                ],
            )
        )

    return drafts


def build_custom_plan(
    plan_name: str,
    optimized_monthly_contribution: Decimal,
    bonus_contributions: list[BonusContribution | dict] | None = None,
    seasonal_adjustments: list[SeasonalAdjustment | dict] | None = None,
) -> PlanDraft:
    """
    Valida y arma un plan personalizado.

    Raises:
        ValidationError: Si el nombre está vacío o el aporte no es positivo
    """
    if not plan_name or not plan_name.strip():
        raise ValidationError("El plan necesita un nombre", field="plan_name")

    try:
        optimized = Decimal(str(optimized_monthly_contribution))
    except InvalidOperation as e:
        raise ValidationError(
            "El aporte mensual optimizado no es un número válido",
            field="optimized_monthly_contribution",
        ) from e

    if not optimized.is_finite() or optimized <= 0:
        raise ValidationError(
            "El aporte mensual optimizado debe ser mayor a cero",
            field="optimized_monthly_contribution",
        )

    try:
        bonuses = [
            b if isinstance(b, BonusContribution) else BonusContribution.model_validate(b)
            for b in bonus_contributions or []
        ]
        seasonal = [
            s if isinstance(s, SeasonalAdjustment) else SeasonalAdjustment.model_validate(s)
            for s in seasonal_adjustments or []
        ]
    except ValueError as e:
        raise ValidationError(f"Bonos o ajustes estacionales inválidos: {e}") from e

    return PlanDraft(
        plan_name=plan_name.strip(),
        plan_type=PlanType.CUSTOM,
        optimized_monthly_contribution=to_cents(optimized),
        bonus_contributions=bonuses,
        seasonal_adjustments=seasonal,
    )
