"""
Enums centralizados para el optimizador de metas.

Este módulo define todos los enums usados en los modelos para garantizar
consistencia y type-safety a nivel de base de datos y aplicación.
"""

from enum import Enum


class Currency(str, Enum):
    """Monedas soportadas."""

    USD = "USD"
    ARS = "ARS"  # Pesos argentinos
    CRC = "CRC"  # Colones costarricenses
    EUR = "EUR"

    def __str__(self) -> str:
        """Retorna el valor del enum como string."""
        return self.value


class RiskLevel(str, Enum):
    """Nivel de riesgo de no alcanzar la meta."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"

    def __str__(self) -> str:
        """Retorna el valor del enum como string."""
        return self.value


class StrategyType(str, Enum):
    """Tipos de estrategia de optimización."""

    INCREASE_CONTRIBUTION = "INCREASE_CONTRIBUTION"
    IMPROVE_RETURNS = "IMPROVE_RETURNS"
    REDUCE_COSTS = "REDUCE_COSTS"
    DIVERSIFICATION = "DIVERSIFICATION"
    RISK_ADJUSTMENT = "RISK_ADJUSTMENT"
    OPPORTUNITY_CAPTURE = "OPPORTUNITY_CAPTURE"

    def __str__(self) -> str:
        """Retorna el valor del enum como string."""
        return self.value


class StrategyPriority(str, Enum):
    """Prioridad de una estrategia."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"

    @property
    def rank(self) -> int:
        """Rango numérico para ordenar (mayor = más prioritario)."""
        return PRIORITY_RANK[self.value]

    def __str__(self) -> str:
        """Retorna el valor del enum como string."""
        return self.value


PRIORITY_RANK = {"LOW": 1, "MEDIUM": 2, "HIGH": 3, "CRITICAL": 4}


class EffortLevel(str, Enum):
    """Esfuerzo requerido para implementar una estrategia."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"

    def __str__(self) -> str:
        """Retorna el valor del enum como string."""
        return self.value


class PlanType(str, Enum):
    """Tipos de plan de contribución, de menor a mayor agresividad."""

    CONSERVATIVE = "CONSERVATIVE"
    MODERATE = "MODERATE"
    AGGRESSIVE = "AGGRESSIVE"
    CUSTOM = "CUSTOM"

    def __str__(self) -> str:
        """Retorna el valor del enum como string."""
        return self.value


class MilestoneType(str, Enum):
    """Tipos de hito intermedio."""

    PERCENTAGE = "PERCENTAGE"
    AMOUNT = "AMOUNT"
    TIME_BASED = "TIME_BASED"
    PERFORMANCE = "PERFORMANCE"

    def __str__(self) -> str:
        """Retorna el valor del enum como string."""
        return self.value


class DifficultyLevel(str, Enum):
    """Dificultad percibida de un hito."""

    EASY = "EASY"
    MODERATE = "MODERATE"
    CHALLENGING = "CHALLENGING"
    AMBITIOUS = "AMBITIOUS"

    def __str__(self) -> str:
        """Retorna el valor del enum como string."""
        return self.value
