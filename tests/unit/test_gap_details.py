"""Tests unitarios para el diagnóstico secundario del análisis de gap."""

from datetime import date
from decimal import Decimal

import pytest

from goal_optimizer.models import RiskLevel
from goal_optimizer.services.gap_calculator import GapMetrics
from goal_optimizer.services.gap_details import (
    calculate_confidence_interval,
    calculate_contributing_factors,
    calculate_success_probability,
    expand_gap_details,
    generate_gap_recommendations,
)


def build_metrics(**overrides: object) -> GapMetrics:
    """Métricas base: gap 50%, 90 meses, sin desviación."""
    data: dict[str, object] = {
        "current_capital": Decimal("50000"),
        "target_capital": Decimal("100000"),
        "gap_amount": Decimal("50000"),
        "gap_percentage": Decimal("50"),
        "monthly_return": Decimal("0.005"),
        "current_monthly_contribution": Decimal("500"),
        "required_monthly_contribution": Decimal("500"),
        "contribution_gap": Decimal("0"),
        "months_remaining": 90,
        "projected_completion_date": date(2032, 7, 15),
        "deviation_from_plan": Decimal("0"),
        "risk_level": RiskLevel.HIGH,
    }
    data.update(overrides)
    return GapMetrics(**data)


class TestSuccessProbability:
    """Tests para la probabilidad de éxito heurística."""

    def test_base_probability(self) -> None:
        """Gap medio y horizonte medio: se queda en 70."""
        assert calculate_success_probability(build_metrics()) == 70

    def test_small_gap_long_horizon(self) -> None:
        """Gap < 20% y más de 120 meses: 70 + 15 + 10 = 95."""
        metrics = build_metrics(gap_percentage=Decimal("10"), months_remaining=150)
        assert calculate_success_probability(metrics) == 95

    def test_large_gap_short_horizon(self) -> None:
        """Gap > 60% y menos de 36 meses: 70 - 25 - 15 = 30."""
        metrics = build_metrics(gap_percentage=Decimal("80"), months_remaining=24)
        assert calculate_success_probability(metrics) == 30

    def test_no_months_skips_time_adjustment(self) -> None:
        """Sin fecha objetivo no se ajusta por tiempo."""
        metrics = build_metrics(gap_percentage=Decimal("10"), months_remaining=None)
        assert calculate_success_probability(metrics) == 85

    @pytest.mark.parametrize("gap", ["-500", "0", "10", "50", "80", "500"])
    @pytest.mark.parametrize("months", [None, 0, 12, 60, 200])
    def test_always_within_bounds(self, gap: str, months: int | None) -> None:
        """Siempre dentro de [10, 95]."""
        metrics = build_metrics(gap_percentage=Decimal(gap), months_remaining=months)
        assert 10 <= calculate_success_probability(metrics) <= 95


class TestConfidenceInterval:
    """Tests para el intervalo de confianza."""

    def test_scales_months(self) -> None:
        """100 meses: pesimista 120, optimista 80, confianza 80%."""
        interval = calculate_confidence_interval(build_metrics(months_remaining=100))
        assert interval.low_estimate == pytest.approx(120)
        assert interval.high_estimate == pytest.approx(80)
        assert interval.confidence_level == 80

    def test_zeros_without_months(self) -> None:
        """Sin meses restantes el intervalo es cero."""
        interval = calculate_confidence_interval(build_metrics(months_remaining=None))
        assert interval.low_estimate == 0
        assert interval.high_estimate == 0


class TestContributingFactors:
    """Tests para los factores de desviación (deterministas)."""

    def test_market_performance_is_weighted_deviation(self) -> None:
        """40% de la desviación del plan."""
        factors = calculate_contributing_factors(build_metrics(deviation_from_plan=Decimal("-20")))
        assert factors.market_performance == pytest.approx(-8)
        assert factors.expense_ratio_impact == -2.5

    def test_contribution_shortfall_is_negative(self) -> None:
        """Falta de aporte da consistencia negativa, acotada a -10."""
        factors = calculate_contributing_factors(
            build_metrics(contribution_gap=Decimal("100"), required_monthly_contribution=Decimal("600"))
        )
        assert factors.contribution_consistency == pytest.approx(-2)

        capped = calculate_contributing_factors(build_metrics(contribution_gap=Decimal("5000")))
        assert capped.contribution_consistency == -10

    def test_timing_effects(self) -> None:
        """Horizonte respecto a 5 años, acotado a [-5, 5]."""
        assert calculate_contributing_factors(build_metrics(months_remaining=72)).timing_effects == 1
        assert calculate_contributing_factors(build_metrics(months_remaining=0)).timing_effects == -5
        assert calculate_contributing_factors(build_metrics(months_remaining=600)).timing_effects == 5
        assert calculate_contributing_factors(build_metrics(months_remaining=None)).timing_effects == 0

    def test_is_deterministic(self) -> None:
        """Las mismas métricas producen los mismos factores."""
        metrics = build_metrics(contribution_gap=Decimal("250"), deviation_from_plan=Decimal("5"))
        assert calculate_contributing_factors(metrics) == calculate_contributing_factors(metrics)


class TestGapRecommendations:
    """Tests para las recomendaciones en texto."""

    def test_generic_recommendations_always_last(self) -> None:
        """Las dos sugerencias genéricas siempre cierran la lista."""
        recommendations = generate_gap_recommendations(
            build_metrics(gap_percentage=Decimal("10"), months_remaining=100)
        )
        assert recommendations == [
            "Considerar aportes extraordinarios en bonificaciones",
            "Evaluar reducción de gastos para aumentar capacidad de ahorro",
        ]

    def test_all_conditions(self) -> None:
        """Gap de aporte, gap grande, horizonte corto y desviación negativa."""
        recommendations = generate_gap_recommendations(
            build_metrics(
                contribution_gap=Decimal("1627.5"),
                gap_percentage=Decimal("75"),
                months_remaining=24,
                deviation_from_plan=Decimal("-15"),
            )
        )
        assert recommendations[:4] == [
            "Aumentar aporte mensual en $1,627.50",
            "Considerar revisar la fecha objetivo o monto del objetivo",
            "Evaluar estrategias de aceleración más agresivas",
            "Revisar estrategia de inversión actual",
        ]
        assert len(recommendations) == 6


class TestExpandGapDetails:
    """Tests para el diagnóstico completo."""

    def test_performance_fields(self) -> None:
        """Rendimiento mensual actual vs aporte requerido como % del capital."""
        details = expand_gap_details(build_metrics())

        assert details.current_monthly_performance == pytest.approx(0.5)
        assert details.required_monthly_performance == pytest.approx(1.0)
        assert details.performance_gap == pytest.approx(-0.5)
        assert details.historical_volatility == 0.15

    def test_zero_capital_uses_one(self) -> None:
        """Con capital cero se divide por 1."""
        details = expand_gap_details(build_metrics(current_capital=Decimal("0")))
        assert details.required_monthly_performance == pytest.approx(50000)

    def test_serializes_to_json(self) -> None:
        """Debería poder guardarse como JSON."""
        payload = expand_gap_details(build_metrics()).model_dump(mode="json")
        assert payload["confidence_intervals"]["confidence_level"] == 80
        assert isinstance(payload["recommendations"], list)
