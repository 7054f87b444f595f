"""
Constantes globales del optimizador.

Valores fijos del dominio que no se exponen como configuración:
los umbrales ajustables viven en `OptimizerSettings`.
"""

from decimal import Decimal

# ============================================================================
# HITOS INTERMEDIOS
# ============================================================================

# Porcentajes del objetivo para hitos automáticos
MILESTONE_PERCENTAGES = (10, 25, 50, 75, 90)

# Máximo de hitos basados en tiempo
MAX_TIME_BASED_MILESTONES = 4

# Meses mínimos al objetivo para generar hitos por tiempo
TIME_BASED_MILESTONE_MIN_MONTHS = 12

MOTIVATION_MESSAGES = {
    10: "¡Excelente inicio! Ya tienes el 10% de tu objetivo",
    25: "¡Un cuarto del camino recorrido! Sigues por buen camino",
    50: "¡A mitad del camino! La meta está cada vez más cerca",
    75: "¡Tres cuartas partes completadas! Ya puedes ver la línea de llegada",
    90: "¡Casi llegando! Solo falta un último empujón",
}
DEFAULT_MOTIVATION_MESSAGE = "¡Sigue adelante!"
TIME_BASED_MOTIVATION_MESSAGE = "¡Mantén el rumbo hacia tu objetivo!"

# ============================================================================
# ANÁLISIS DE GAP
# ============================================================================

# Probabilidad de éxito heurística
BASE_SUCCESS_PROBABILITY = 70
MIN_SUCCESS_PROBABILITY = 10
MAX_SUCCESS_PROBABILITY = 95

# Intervalo de confianza (multiplicadores sobre meses restantes)
CONFIDENCE_LOW_MULTIPLIER = Decimal("1.2")
CONFIDENCE_HIGH_MULTIPLIER = Decimal("0.8")
CONFIDENCE_LEVEL = 80

# Impacto estimado del expense ratio sobre el retorno (%)
EXPENSE_RATIO_IMPACT = -2.5

# Peso de la desviación del plan en el factor de mercado
MARKET_PERFORMANCE_WEIGHT = 0.4

# ============================================================================
# ESTRATEGIAS Y PLANES (valores al persistir)
# ============================================================================

DEFAULT_STRATEGY_IMPACT_SCORE = 75
DEFAULT_STRATEGY_TIME_TO_IMPLEMENT_DAYS = 7
DEFAULT_STRATEGY_TIME_SAVINGS_MONTHS = 3

# Estrategias creadas por el usuario
CUSTOM_STRATEGY_TIME_TO_IMPLEMENT_DAYS = 14
CUSTOM_STRATEGY_TIME_SAVINGS_MONTHS = 2

DEFAULT_PLAN_AFFORDABILITY_SCORE = 80
DEFAULT_PLAN_SUCCESS_PROBABILITY = 85
