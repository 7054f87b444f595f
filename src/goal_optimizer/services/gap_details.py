"""Diagnóstico secundario de un análisis de gap.

Deriva del GapMetrics la probabilidad de éxito, el intervalo de confianza,
los factores que explican la desviación y las recomendaciones en texto.
"""

from decimal import Decimal

from goal_optimizer.config.settings import OptimizerSettings, settings
from goal_optimizer.core.constants import (
    BASE_SUCCESS_PROBABILITY,
    CONFIDENCE_HIGH_MULTIPLIER,
    CONFIDENCE_LEVEL,
    CONFIDENCE_LOW_MULTIPLIER,
    EXPENSE_RATIO_IMPACT,
    MARKET_PERFORMANCE_WEIGHT,
    MAX_SUCCESS_PROBABILITY,
    MIN_SUCCESS_PROBABILITY,
)
from goal_optimizer.schemas.optimizer import (
    ConfidenceInterval,
    ContributingFactors,
    GapAnalysisDetails,
)
from goal_optimizer.services.gap_calculator import GapMetrics
from goal_optimizer.utils.formatting import format_amount


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def calculate_success_probability(metrics: GapMetrics) -> int:
    """
    Probabilidad heurística (%) de cumplir la meta.

    Base 70; +15 si gap% < 20, −25 si gap% > 60; +10 si quedan más de
    120 meses, −15 si quedan menos de 36. Resultado en [10, 95].
    """
    probability = BASE_SUCCESS_PROBABILITY
    gap_pct = float(metrics.gap_percentage)

    if gap_pct < 20:
        probability += 15
    elif gap_pct > 60:
        probability -= 25

    # Con 0 meses (fecha vencida) no hay horizonte que ajustar
    months = metrics.months_remaining
    if months and months > 120:
        probability += 10
    elif months and months < 36:
        probability -= 15

    return int(_clamp(probability, MIN_SUCCESS_PROBABILITY, MAX_SUCCESS_PROBABILITY))


def calculate_confidence_interval(metrics: GapMetrics) -> ConfidenceInterval:
    """Intervalo de meses: ±20% sobre los meses restantes."""
    months = metrics.months_remaining
    if not months:
        return ConfidenceInterval(low_estimate=0, high_estimate=0, confidence_level=CONFIDENCE_LEVEL)

    return ConfidenceInterval(
        low_estimate=float(months * CONFIDENCE_LOW_MULTIPLIER),
        high_estimate=float(months * CONFIDENCE_HIGH_MULTIPLIER),
        confidence_level=CONFIDENCE_LEVEL,
    )


def calculate_contributing_factors(metrics: GapMetrics) -> ContributingFactors:
    """
    Factores que explican la desviación del plan.

    - market_performance: 40% de la desviación del plan
    - contribution_consistency: qué tan lejos está el aporte actual del
      requerido, escalado a [−10, 10] (positivo si sobra aporte)
    - expense_ratio_impact: costo fijo estimado
    - timing_effects: holgura del horizonte respecto a 5 años, en [−5, 5]
    """
    base = max(metrics.current_monthly_contribution, Decimal("1"))
    consistency = _clamp(float(-metrics.contribution_gap / base * 10), -10, 10)

    timing = 0.0
    if metrics.months_remaining is not None:
        timing = _clamp((metrics.months_remaining - 60) / 12, -5, 5)

    return ContributingFactors(
        market_performance=float(metrics.deviation_from_plan) * MARKET_PERFORMANCE_WEIGHT,
        contribution_consistency=consistency,
        expense_ratio_impact=EXPENSE_RATIO_IMPACT,
        timing_effects=timing,
    )


def generate_gap_recommendations(metrics: GapMetrics) -> list[str]:
    """Recomendaciones en texto, en orden fijo."""
    recommendations: list[str] = []

    if metrics.contribution_gap > 0:
        recommendations.append(
            f"Aumentar aporte mensual en {format_amount(metrics.contribution_gap)}"
        )

    if metrics.gap_percentage > 40:
        recommendations.append("Considerar revisar la fecha objetivo o monto del objetivo")

    if metrics.months_remaining and metrics.months_remaining < 60:
        recommendations.append("Evaluar estrategias de aceleración más agresivas")

    if metrics.deviation_from_plan < -10:
        recommendations.append("Revisar estrategia de inversión actual")

    recommendations.append("Considerar aportes extraordinarios en bonificaciones")
    recommendations.append("Evaluar reducción de gastos para aumentar capacidad de ahorro")

    return recommendations


def expand_gap_details(
    metrics: GapMetrics,
    config: OptimizerSettings | None = None,
) -> GapAnalysisDetails:
    """
    Construye el diagnóstico completo de un análisis de gap.

    Args:
        metrics: Métricas calculadas por `calculate_gap_metrics`
        config: Umbrales del optimizador (los de settings por defecto)

    Returns:
        GapAnalysisDetails listo para guardarse como JSON
    """
    config = config or settings.optimizer

    safe_capital = metrics.current_capital if metrics.current_capital > 0 else Decimal("1")
    current_performance = float(metrics.monthly_return * 100)
    required_performance = float(metrics.required_monthly_contribution / safe_capital * 100)

    return GapAnalysisDetails(
        current_monthly_performance=current_performance,
        required_monthly_performance=required_performance,
        performance_gap=current_performance - required_performance,
        historical_volatility=config.historical_volatility,
        success_probability=calculate_success_probability(metrics),
        confidence_intervals=calculate_confidence_interval(metrics),
        contributing_factors=calculate_contributing_factors(metrics),
        recommendations=generate_gap_recommendations(metrics),
    )
