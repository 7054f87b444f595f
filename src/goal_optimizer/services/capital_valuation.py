"""Fuentes de capital actual para el análisis de gap.

El optimizador no valúa portafolios: recibe una fuente que le entrega el
capital actual. `FallbackCapitalSource` envuelve cualquier valuador y
usa un capital de respaldo cuando falla o devuelve un valor no positivo.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from decimal import Decimal

from goal_optimizer.config.settings import settings
from goal_optimizer.core.logging import get_logger


logger = get_logger(__name__)


class CapitalValuationSource(ABC):
    """Contrato de las fuentes de capital."""

    @abstractmethod
    def get_current_capital(self) -> Decimal:
        """Capital actual disponible para la meta (no negativo)."""


class StaticCapitalSource(CapitalValuationSource):
    """Capital fijo, útil para simulaciones y tests."""

    def __init__(self, capital: Decimal | float | int) -> None:
        self.capital = Decimal(str(capital))

    def get_current_capital(self) -> Decimal:
        return self.capital


class FallbackCapitalSource(CapitalValuationSource):
    """
    Envuelve un valuador externo con capital de respaldo.

    Cualquier error del valuador, o un valor <= 0, se reemplaza por
    `fallback_capital` (por defecto `settings.optimizer.fallback_capital`)
    y se registra un warning.

    Example:
        >>> source = FallbackCapitalSource(portfolio.get_market_value)
        >>> source.get_current_capital()
        Decimal('25000')
    """

    def __init__(
        self,
        valuator: Callable[[], Decimal | float | int | None] | None = None,
        fallback_capital: Decimal | None = None,
    ) -> None:
        self.valuator = valuator
        self.fallback_capital = (
            fallback_capital if fallback_capital is not None else settings.optimizer.fallback_capital
        )

    def get_current_capital(self) -> Decimal:
        if self.valuator is None:
            logger.warning(
                f"Sin valuador de portafolio, usando capital de respaldo: "
                f"${self.fallback_capital:,.2f}"
            )
            return self.fallback_capital

        try:
            value = self.valuator()
            capital = Decimal(str(value)) if value is not None else Decimal("0")
        except Exception as e:
            logger.warning(
                f"Error obteniendo valuación del portafolio ({e}), "
                f"usando capital de respaldo: ${self.fallback_capital:,.2f}"
            )
            return self.fallback_capital

        if not capital.is_finite() or capital <= 0:
            logger.warning(
                f"Valuación no positiva ({capital}), "
                f"usando capital de respaldo: ${self.fallback_capital:,.2f}"
            )
            return self.fallback_capital

        return capital
