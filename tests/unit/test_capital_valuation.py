"""Tests unitarios para las fuentes de capital."""

from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from goal_optimizer.services.capital_valuation import (
    CapitalValuationSource,
    FallbackCapitalSource,
    StaticCapitalSource,
)


class TestStaticCapitalSource:
    """Tests para la fuente de capital fijo."""

    def test_returns_decimal(self) -> None:
        """Debería convertir a Decimal sin perder precisión."""
        assert StaticCapitalSource(1234.56).get_current_capital() == Decimal("1234.56")

    def test_is_a_capital_source(self) -> None:
        """Cumple el contrato de fuentes de capital."""
        assert isinstance(StaticCapitalSource(0), CapitalValuationSource)


class TestFallbackCapitalSource:
    """Tests para la fuente con capital de respaldo."""

    def test_uses_valuator_when_positive(self) -> None:
        """Con valuación positiva devuelve esa valuación."""
        source = FallbackCapitalSource(lambda: Decimal("48000.50"))
        assert source.get_current_capital() == Decimal("48000.50")

    def test_default_fallback_is_25000(self) -> None:
        """Sin valuador usa el capital de respaldo configurado."""
        assert FallbackCapitalSource().get_current_capital() == Decimal("25000")

    @pytest.mark.parametrize("value", [0, -100, None])
    def test_non_positive_valuation_uses_fallback(
        self,
        value: object,
        captured_logs: list[str],
    ) -> None:
        """Valuaciones <= 0 o nulas se reemplazan y se registra un warning."""
        source = FallbackCapitalSource(lambda: value, fallback_capital=Decimal("1000"))

        assert source.get_current_capital() == Decimal("1000")
        assert any("capital de respaldo" in message for message in captured_logs)

    def test_valuator_error_uses_fallback(self, captured_logs: list[str]) -> None:
        """Errores del valuador se enmascaran con el capital de respaldo."""
        valuator = MagicMock(side_effect=ConnectionError("portfolio service down"))
        source = FallbackCapitalSource(valuator, fallback_capital=Decimal("1000"))

        assert source.get_current_capital() == Decimal("1000")
        valuator.assert_called_once()
        assert any("portfolio service down" in message for message in captured_logs)

    def test_unparseable_valuation_uses_fallback(self) -> None:
        """Una valuación no numérica se trata como error."""
        source = FallbackCapitalSource(lambda: "n/a", fallback_capital=Decimal("1000"))
        assert source.get_current_capital() == Decimal("1000")
