"""Calculadora de gap entre el capital actual y el objetivo de una meta.

Funciones puras: reciben la meta y el capital actual y no tocan la base
de datos. Todo el dinero se maneja como Decimal.

Fórmulas principales:
- Valor futuro del capital: FV = C × (1 + r)^n
- Aporte requerido (anualidad ordinaria): PMT = (T − FV) / (((1 + r)^n − 1) / r)
- Proyección: se simula mes a mes C = C × (1 + r) + aporte
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from dateutil.relativedelta import relativedelta

from goal_optimizer.config.settings import OptimizerSettings, RiskBand, settings
from goal_optimizer.models.enums import RiskLevel
from goal_optimizer.models.goal import FinancialGoal
from goal_optimizer.utils.formatting import round_half_up


ZERO = Decimal("0")
ONE = Decimal("1")
HUNDRED = Decimal("100")


@dataclass
class GapMetrics:
    """Métricas de gap de una meta en un momento dado."""

    current_capital: Decimal
    target_capital: Decimal
    gap_amount: Decimal
    gap_percentage: Decimal
    monthly_return: Decimal
    current_monthly_contribution: Decimal
    required_monthly_contribution: Decimal
    contribution_gap: Decimal
    months_remaining: int | None
    projected_completion_date: date | None
    deviation_from_plan: Decimal
    risk_level: RiskLevel


def months_between(start: date, end: date, days_per_month: int = 30) -> int:
    """
    Meses (de `days_per_month` días) entre dos fechas, redondeados.

    Puede ser negativo si `end` es anterior a `start`.
    """
    days = (end - start).days
    return round_half_up(Decimal(days) / Decimal(days_per_month))


def monthly_rate(expected_return_rate: Decimal | float) -> Decimal:
    """Convierte un rendimiento anual en porcentaje (10 = 10%) a tasa mensual."""
    return Decimal(str(expected_return_rate)) / HUNDRED / Decimal(12)


def future_value(capital: Decimal, monthly_return: Decimal, months: int) -> Decimal:
    """Valor futuro del capital compuesto mensualmente, sin aportes."""
    return capital * (ONE + monthly_return) ** months


def calculate_required_monthly_contribution(
    current_capital: Decimal,
    target_capital: Decimal,
    monthly_return: Decimal,
    months_remaining: int,
) -> Decimal:
    """
    Aporte mensual que lleva el capital actual al objetivo en `months_remaining` meses.

    Returns:
        Aporte requerido (0 si el capital actual ya alcanza por sí solo)
    """
    if months_remaining <= 0:
        return ZERO

    if monthly_return > 0:
        still_needed = target_capital - future_value(current_capital, monthly_return, months_remaining)
        if still_needed <= 0:
            return ZERO

        annuity_factor = ((ONE + monthly_return) ** months_remaining - ONE) / monthly_return
        return still_needed / annuity_factor

    # Sin crecimiento, división simple
    return max(target_capital - current_capital, ZERO) / Decimal(months_remaining)


def simulate_months_to_target(
    current_capital: Decimal,
    target_capital: Decimal,
    monthly_contribution: Decimal,
    monthly_return: Decimal,
    horizon_months: int = 600,
) -> int | None:
    """
    Simula mes a mes hasta que el capital alcanza el objetivo.

    Returns:
        Meses necesarios, o None si el aporte es <= 0 o se agota el horizonte
    """
    if monthly_contribution <= 0:
        return None

    capital = current_capital
    months = 0
    growth = ONE + monthly_return
    while capital < target_capital and months < horizon_months:
        capital = capital * growth + monthly_contribution
        months += 1

    if capital < target_capital:
        return None
    return months


def calculate_expected_capital(
    initial_capital: Decimal,
    monthly_contribution: Decimal,
    monthly_return: Decimal,
    months: int,
) -> Decimal:
    """Capital esperado tras `months` meses de aportes y capitalización."""
    capital = initial_capital
    growth = ONE + monthly_return
    for _ in range(months):
        capital = capital * growth + monthly_contribution
    return capital


def calculate_plan_deviation(
    goal: FinancialGoal,
    current_capital: Decimal,
    today: date,
    days_per_month: int = 30,
) -> Decimal:
    """
    Desviación (%) del capital actual contra el que predice el plan original.

    El plan original arranca en cero en `created_date` y aporta el monto
    mensual de la meta con el rendimiento esperado.
    """
    months_elapsed = months_between(goal.created_date, today, days_per_month)
    if months_elapsed < 1:
        return ZERO

    expected = calculate_expected_capital(
        ZERO,
        Decimal(goal.monthly_contribution or 0),
        monthly_rate(goal.expected_return_rate or 0),
        months_elapsed,
    )
    if expected <= 0:
        return ZERO

    return (current_capital - expected) / expected * HUNDRED


def assess_risk_level(
    gap_percentage: Decimal | float,
    months_remaining: int | None,
    risk_bands: list[RiskBand] | None = None,
) -> RiskLevel:
    """
    Asigna nivel de riesgo según horizonte y tamaño del gap.

    Sin fecha objetivo se usa la banda de mayor horizonte.
    """
    bands = risk_bands or settings.optimizer.risk_bands
    gap = float(gap_percentage)

    band = bands[0]
    if months_remaining is not None:
        band = next((b for b in bands if months_remaining >= b.min_months), bands[-1])

    if gap < band.low_below:
        return RiskLevel.LOW
    if gap < band.medium_below:
        return RiskLevel.MEDIUM
    return RiskLevel.HIGH


def calculate_gap_metrics(
    goal: FinancialGoal,
    current_capital: Decimal,
    *,
    today: date | None = None,
    config: OptimizerSettings | None = None,
) -> GapMetrics:
    """
    Calcula todas las métricas de gap de una meta.

    Args:
        goal: Meta a analizar
        current_capital: Capital actual (no negativo)
        today: Fecha de referencia (hoy por defecto)
        config: Umbrales del optimizador (los de settings por defecto)

    Returns:
        GapMetrics con gap, aportes, horizonte, proyección, desviación y riesgo
    """
    config = config or settings.optimizer
    today = today or date.today()
    current_capital = Decimal(str(current_capital))

    target_capital = Decimal(goal.target_amount) if goal.target_amount is not None else ZERO
    gap_amount = target_capital - current_capital
    gap_percentage = gap_amount / target_capital * HUNDRED if target_capital > 0 else ZERO

    monthly_return = monthly_rate(goal.expected_return_rate or 0)
    current_contribution = Decimal(goal.monthly_contribution or 0)

    months_remaining: int | None = None
    required_contribution = current_contribution

    if goal.target_date:
        months_remaining = max(0, months_between(today, goal.target_date, config.days_per_month))
        if months_remaining > 0:
            required_contribution = calculate_required_monthly_contribution(
                current_capital,
                target_capital,
                monthly_return,
                months_remaining,
            )

    projected_completion_date: date | None = None
    if goal.target_amount is not None:
        months_to_target = simulate_months_to_target(
            current_capital,
            target_capital,
            current_contribution,
            monthly_return,
            config.projection_horizon_months,
        )
        if months_to_target is not None:
            projected_completion_date = today + relativedelta(months=months_to_target)

    deviation = calculate_plan_deviation(goal, current_capital, today, config.days_per_month)

    return GapMetrics(
        current_capital=current_capital,
        target_capital=target_capital,
        gap_amount=gap_amount,
        gap_percentage=gap_percentage,
        monthly_return=monthly_return,
        current_monthly_contribution=current_contribution,
        required_monthly_contribution=required_contribution,
        contribution_gap=required_contribution - current_contribution,
        months_remaining=months_remaining,
        projected_completion_date=projected_completion_date,
        deviation_from_plan=deviation,
        risk_level=assess_risk_level(gap_percentage, months_remaining, config.risk_bands),
    )
