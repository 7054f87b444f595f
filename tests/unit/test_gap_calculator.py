"""
Tests unitarios para la calculadora de gap.

Cubre:
- Conversión de fechas a meses
- Aporte requerido (anualidad) y su verificación hacia adelante
- Proyección por simulación y horizonte máximo
- Desviación contra el plan original
- Bandas de riesgo
"""

from datetime import date, timedelta
from decimal import Decimal

import pytest

from goal_optimizer.config.settings import OptimizerSettings
from goal_optimizer.models import FinancialGoal, RiskLevel
from goal_optimizer.services.gap_calculator import (
    assess_risk_level,
    calculate_expected_capital,
    calculate_gap_metrics,
    calculate_plan_deviation,
    calculate_required_monthly_contribution,
    monthly_rate,
    months_between,
    simulate_months_to_target,
)


TODAY = date(2025, 1, 15)

RISK_ORDER = {RiskLevel.LOW: 0, RiskLevel.MEDIUM: 1, RiskLevel.HIGH: 2}


def build_goal(**overrides: object) -> FinancialGoal:
    """Meta en memoria (sin persistir)."""
    data: dict[str, object] = {
        "id": "goal-test-1",
        "name": "Retiro",
        "target_amount": Decimal("100000"),
        "target_date": date(2027, 1, 15),
        "monthly_contribution": Decimal("1000"),
        "expected_return_rate": Decimal("10"),
        "created_date": TODAY,
    }
    data.update(overrides)
    return FinancialGoal(**data)


class TestMonthsBetween:
    """Tests para la conversión de días a meses."""

    def test_two_years(self) -> None:
        """730 días son 24 meses de 30 días (redondeado)."""
        assert months_between(TODAY, date(2027, 1, 15)) == 24

    def test_rounds_half_up(self) -> None:
        """45 días son 1.5 meses, redondea a 2."""
        assert months_between(TODAY, TODAY + timedelta(days=45)) == 2

    def test_negative_when_end_before_start(self) -> None:
        """Debería devolver negativo si la fecha final es anterior."""
        assert months_between(TODAY, TODAY - timedelta(days=90)) == -3


class TestRequiredMonthlyContribution:
    """Tests para el aporte requerido."""

    def test_zero_return_is_simple_division(self) -> None:
        """Sin rendimiento: (objetivo - capital) / meses."""
        required = calculate_required_monthly_contribution(
            Decimal("0"), Decimal("12000"), Decimal("0"), 12
        )
        assert required == Decimal("1000")

    def test_zero_when_capital_already_grows_to_target(self) -> None:
        """Si el capital compuesto ya alcanza el objetivo, no se requiere aporte."""
        required = calculate_required_monthly_contribution(
            Decimal("100000"), Decimal("100000"), monthly_rate(10), 12
        )
        assert required == Decimal("0")

    def test_zero_months(self) -> None:
        """Sin meses restantes no hay nada que resolver."""
        assert calculate_required_monthly_contribution(
            Decimal("0"), Decimal("1000"), monthly_rate(5), 0
        ) == Decimal("0")

    @pytest.mark.parametrize(
        ("capital", "target", "rate", "months"),
        [
            (Decimal("25000"), Decimal("100000"), Decimal("10"), 24),
            (Decimal("0"), Decimal("50000"), Decimal("7.5"), 60),
            (Decimal("1000"), Decimal("1000000"), Decimal("12"), 360),
        ],
    )
    def test_compounded_forward_reaches_target(
        self,
        capital: Decimal,
        target: Decimal,
        rate: Decimal,
        months: int,
    ) -> None:
        """El aporte requerido, capitalizado mes a mes, alcanza el objetivo."""
        r = monthly_rate(rate)
        required = calculate_required_monthly_contribution(capital, target, r, months)

        final_capital = calculate_expected_capital(capital, required, r, months)

        assert abs(final_capital - target) < Decimal("0.01")


class TestSimulateMonthsToTarget:
    """Tests para la proyección por simulación."""

    def test_no_contribution_returns_none(self) -> None:
        """Con aporte cero no hay proyección."""
        assert simulate_months_to_target(
            Decimal("100"), Decimal("1000"), Decimal("0"), monthly_rate(10)
        ) is None

    def test_horizon_cap_returns_none(self) -> None:
        """Si no se alcanza dentro del horizonte, devuelve None."""
        assert simulate_months_to_target(
            Decimal("0"), Decimal("1000000000"), Decimal("1"), Decimal("0"), 600
        ) is None

    def test_already_reached_is_zero_months(self) -> None:
        """Capital mayor o igual al objetivo: cero meses."""
        assert simulate_months_to_target(
            Decimal("2000"), Decimal("1000"), Decimal("10"), Decimal("0")
        ) == 0

    def test_exact_months_without_return(self) -> None:
        """12 aportes de 1000 llegan a 12000."""
        assert simulate_months_to_target(
            Decimal("0"), Decimal("12000"), Decimal("1000"), Decimal("0")
        ) == 12


class TestPlanDeviation:
    """Tests para la desviación contra el plan original."""

    def test_zero_when_less_than_one_month(self) -> None:
        """Con menos de un mes transcurrido no hay desviación."""
        goal = build_goal(created_date=TODAY - timedelta(days=10))
        assert calculate_plan_deviation(goal, Decimal("500"), TODAY) == Decimal("0")

    def test_behind_plan_is_negative(self) -> None:
        """12 meses de $1,000 sin rendimiento esperan $12,000; con $6,000 es -50%."""
        goal = build_goal(
            created_date=TODAY - timedelta(days=360),
            expected_return_rate=Decimal("0"),
        )
        assert calculate_plan_deviation(goal, Decimal("6000"), TODAY) == Decimal("-50")

    def test_zero_when_expected_is_zero(self) -> None:
        """Sin aportes el capital esperado es cero y la desviación también."""
        goal = build_goal(
            created_date=TODAY - timedelta(days=360),
            monthly_contribution=Decimal("0"),
        )
        assert calculate_plan_deviation(goal, Decimal("6000"), TODAY) == Decimal("0")


class TestAssessRiskLevel:
    """Tests para las bandas de riesgo."""

    @pytest.mark.parametrize(
        ("gap_pct", "months", "expected"),
        [
            (19, None, RiskLevel.LOW),
            (49, None, RiskLevel.MEDIUM),
            (50, None, RiskLevel.HIGH),
            (18, 121, RiskLevel.LOW),
            (18, 120, RiskLevel.MEDIUM),
            (39, 61, RiskLevel.MEDIUM),
            (40, 61, RiskLevel.HIGH),
            (12, 61, RiskLevel.LOW),
            (12, 60, RiskLevel.MEDIUM),
            (29, 0, RiskLevel.MEDIUM),
            (30, 24, RiskLevel.HIGH),
        ],
    )
    def test_band_boundaries(self, gap_pct: float, months: int | None, expected: RiskLevel) -> None:
        """Debería aplicar la banda según los meses restantes."""
        assert assess_risk_level(gap_pct, months) == expected

    @pytest.mark.parametrize("months", [None, 0, 24, 60, 61, 90, 120, 121, 300])
    def test_monotonic_in_gap_percentage(self, months: int | None) -> None:
        """Para meses fijos, el riesgo nunca baja cuando sube el gap."""
        levels = [RISK_ORDER[assess_risk_level(gap, months)] for gap in range(-50, 151)]
        assert levels == sorted(levels)

    def test_custom_bands(self) -> None:
        """Debería usar las bandas configuradas."""
        config = OptimizerSettings(
            risk_bands=[{"min_months": 0, "low_below": 5, "medium_below": 10}],
        )
        assert assess_risk_level(7, 24, config.risk_bands) == RiskLevel.MEDIUM


class TestCalculateGapMetrics:
    """Tests para el cálculo completo de métricas."""

    def test_two_year_goal_scenario(self) -> None:
        """$100k en 2 años al 10%, con $25k y $1k/mes: gap 75k y aporte requerido > 1k."""
        metrics = calculate_gap_metrics(build_goal(), Decimal("25000"), today=TODAY)

        assert metrics.gap_amount == Decimal("75000")
        assert metrics.gap_percentage == Decimal("75")
        assert metrics.months_remaining == 24
        assert metrics.required_monthly_contribution > Decimal("1000")
        assert metrics.contribution_gap == metrics.required_monthly_contribution - Decimal("1000")
        assert metrics.risk_level in {RiskLevel.MEDIUM, RiskLevel.HIGH}
        assert metrics.projected_completion_date is not None
        assert metrics.deviation_from_plan == Decimal("0")

    @pytest.mark.parametrize("capital", ["0", "25000", "99999.99", "100000", "150000"])
    def test_gap_plus_capital_equals_target(self, capital: str) -> None:
        """gap_amount + current_capital == target_amount para cualquier capital."""
        metrics = calculate_gap_metrics(build_goal(), Decimal(capital), today=TODAY)
        assert metrics.gap_amount + metrics.current_capital == Decimal("100000")

    def test_without_target_date(self) -> None:
        """Sin fecha objetivo: sin meses, aporte requerido = actual, proyección sí resuelve."""
        metrics = calculate_gap_metrics(build_goal(target_date=None), Decimal("25000"), today=TODAY)

        assert metrics.months_remaining is None
        assert metrics.required_monthly_contribution == Decimal("1000")
        assert metrics.contribution_gap == Decimal("0")
        assert metrics.projected_completion_date is not None
        assert metrics.projected_completion_date > TODAY

    def test_zero_contribution_has_no_projection(self) -> None:
        """Con aporte mensual cero la proyección es nula."""
        metrics = calculate_gap_metrics(
            build_goal(monthly_contribution=Decimal("0")),
            Decimal("25000"),
            today=TODAY,
        )
        assert metrics.projected_completion_date is None

    def test_projection_adds_calendar_months(self) -> None:
        """12 aportes de $1,000 sin rendimiento llegan en 12 meses calendario."""
        goal = build_goal(
            target_amount=Decimal("12000"),
            target_date=None,
            expected_return_rate=Decimal("0"),
        )
        metrics = calculate_gap_metrics(goal, Decimal("0"), today=TODAY)
        assert metrics.projected_completion_date == date(2026, 1, 15)

    def test_projection_is_today_when_already_reached(self) -> None:
        """Si el capital ya supera el objetivo la proyección es hoy."""
        metrics = calculate_gap_metrics(
            build_goal(target_amount=Decimal("20000")),
            Decimal("25000"),
            today=TODAY,
        )
        assert metrics.projected_completion_date == TODAY
        assert metrics.gap_amount == Decimal("-5000")
        assert metrics.required_monthly_contribution == Decimal("0")

    def test_past_target_date_floors_months_at_zero(self) -> None:
        """Fecha objetivo vencida: cero meses y aporte requerido = actual."""
        metrics = calculate_gap_metrics(
            build_goal(target_date=date(2024, 1, 1)),
            Decimal("25000"),
            today=TODAY,
        )
        assert metrics.months_remaining == 0
        assert metrics.required_monthly_contribution == Decimal("1000")
        assert metrics.contribution_gap == Decimal("0")

    def test_without_target_amount(self) -> None:
        """Sin monto objetivo: objetivo 0, gap% 0 y sin proyección."""
        metrics = calculate_gap_metrics(
            build_goal(target_amount=None),
            Decimal("25000"),
            today=TODAY,
        )
        assert metrics.target_capital == Decimal("0")
        assert metrics.gap_amount == Decimal("-25000")
        assert metrics.gap_percentage == Decimal("0")
        assert metrics.projected_completion_date is None

    def test_respects_configured_horizon(self) -> None:
        """Un horizonte corto deja la proyección en None."""
        config = OptimizerSettings(projection_horizon_months=6)
        metrics = calculate_gap_metrics(build_goal(), Decimal("25000"), today=TODAY, config=config)
        assert metrics.projected_completion_date is None
