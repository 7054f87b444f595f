"""Generador de estrategias de optimización a partir de un análisis de gap."""

from dataclasses import dataclass, field
from decimal import Decimal

from goal_optimizer.core.constants import (
    CUSTOM_STRATEGY_TIME_SAVINGS_MONTHS,
    CUSTOM_STRATEGY_TIME_TO_IMPLEMENT_DAYS,
    DEFAULT_STRATEGY_TIME_SAVINGS_MONTHS,
    DEFAULT_STRATEGY_TIME_TO_IMPLEMENT_DAYS,
)
from goal_optimizer.core.exceptions import ValidationError
from goal_optimizer.models.enums import StrategyPriority, StrategyType
from goal_optimizer.models.gap_analysis import GoalGapAnalysis
from goal_optimizer.schemas.optimizer import ImplementationStep, StrategyRequirement, StrategyRisk
from goal_optimizer.utils.formatting import format_amount


# Gap % a partir del cual conviene rebalancear el portafolio
DIVERSIFICATION_GAP_THRESHOLD = Decimal("30")


@dataclass
class StrategyDraft:
    """Estrategia propuesta, todavía sin persistir."""

    strategy_name: str
    strategy_type: StrategyType
    priority: StrategyPriority
    description: str
    implementation_steps: list[ImplementationStep] = field(default_factory=list)
    requirements: list[StrategyRequirement] = field(default_factory=list)
    risks: list[StrategyRisk] = field(default_factory=list)
    time_to_implement_days: int = DEFAULT_STRATEGY_TIME_TO_IMPLEMENT_DAYS
    estimated_time_savings_months: int = DEFAULT_STRATEGY_TIME_SAVINGS_MONTHS


def _increase_contribution(contribution_gap: Decimal) -> StrategyDraft:
    amount = format_amount(contribution_gap)
    return StrategyDraft(
        strategy_name="Aumentar Aportes Mensuales",
        strategy_type=StrategyType.INCREASE_CONTRIBUTION,
        priority=StrategyPriority.HIGH,
        description=f"Aumentar aporte mensual en {amount} para cumplir objetivo en tiempo",
        implementation_steps=[
            ImplementationStep(
                step_number=1,
                description="Revisar presupuesto mensual para identificar áreas de ahorro",
                estimated_hours=2,
                resources_needed=["Planilla de gastos"],
                success_criteria="Identificar al menos $200 en gastos reducibles",
            ),
            ImplementationStep(
                step_number=2,
                description="Configurar transferencia automática del monto adicional",
                estimated_hours=1,
                dependencies=["Revisar presupuesto"],
                resources_needed=["Acceso a banca online"],
                success_criteria="Transferencia automática configurada y funcionando",
            ),
        ],
        requirements=[
            StrategyRequirement(
                requirement_type="FINANCIAL",
                description=f"Capacidad de ahorro adicional de {amount}/mes",
                is_met=False,
                how_to_fulfill="Revisar gastos y optimizar presupuesto",
            ),
        ],
        risks=[
            StrategyRisk(
                risk_type="FINANCIAL",
                description="Sobreesfuerzo financiero que afecte gastos esenciales",
                probability="MEDIUM",
                impact="HIGH",
                mitigation_strategy="Implementar aumento gradual en 3 meses",
            ),
        ],
    )


def _reduce_costs() -> StrategyDraft:
    return StrategyDraft(
        strategy_name="Reducir Costos de Inversión",
        strategy_type=StrategyType.REDUCE_COSTS,
        priority=StrategyPriority.MEDIUM,
        description="Optimizar comisiones y costos de operación para maximizar capital invertido",
        implementation_steps=[
            ImplementationStep(
                step_number=1,
                description="Auditar comisiones actuales de todas las posiciones",
                estimated_hours=3,
                resources_needed=["Reporte de comisiones"],
                success_criteria="Identificar oportunidades de ahorro > $50/mes",
            ),
        ],
    )


def _diversification() -> StrategyDraft:
    return StrategyDraft(
        strategy_name="Diversificación Optimizada",
        strategy_type=StrategyType.DIVERSIFICATION,
        priority=StrategyPriority.MEDIUM,
        description="Rebalancear portafolio para optimizar relación riesgo-retorno",
        implementation_steps=[
            ImplementationStep(
                step_number=1,
                description="Analizar correlaciones actuales del portafolio",
                estimated_hours=2,
                resources_needed=["Datos históricos de posiciones"],
                success_criteria="Identificar oportunidades de diversificación",
            ),
        ],
    )


def generate_strategy_drafts(analysis: GoalGapAnalysis) -> list[StrategyDraft]:
    """
    Propone estrategias según el análisis de gap.

    Reglas:
    - INCREASE_CONTRIBUTION (HIGH) si falta aporte mensual
    - REDUCE_COSTS (MEDIUM) siempre
    - DIVERSIFICATION (MEDIUM) si el gap supera el 30%

    Returns:
        Estrategias en orden de generación
    """
    drafts: list[StrategyDraft] = []

    contribution_gap = Decimal(analysis.contribution_gap)
    if contribution_gap > 0:
        drafts.append(_increase_contribution(contribution_gap))

    drafts.append(_reduce_costs())

    if Decimal(analysis.gap_percentage) > DIVERSIFICATION_GAP_THRESHOLD:
        drafts.append(_diversification())

    return drafts


def build_custom_strategy(
    strategy_name: str,
    strategy_type: StrategyType | str | None,
    description: str,
    priority: StrategyPriority | str = StrategyPriority.MEDIUM,
    implementation_steps: list[ImplementationStep | dict] | None = None,
    requirements: list[StrategyRequirement | dict] | None = None,
    risks: list[StrategyRisk | dict] | None = None,
) -> StrategyDraft:
    """
    Valida y arma una estrategia definida por el usuario.

    Nombre, tipo y descripción son obligatorios. Se implementa en 14 días
    y ahorra 2 meses por defecto.

    Raises:
        ValidationError: Si falta un campo requerido, el tipo o la prioridad
            no existen, o los pasos/requisitos/riesgos son inválidos
    """
    if not strategy_name or not strategy_name.strip():
        raise ValidationError("La estrategia necesita un nombre", field="strategy_name")

    if not strategy_type:
        raise ValidationError("La estrategia necesita un tipo", field="strategy_type")
    try:
        kind = StrategyType(strategy_type)
    except ValueError as e:
        raise ValidationError(
            f"Tipo de estrategia desconocido: {strategy_type}",
            field="strategy_type",
        ) from e

    if not description or not description.strip():
        raise ValidationError("La estrategia necesita una descripción", field="description")

    try:
        level = StrategyPriority(priority)
    except ValueError as e:
        raise ValidationError(f"Prioridad desconocida: {priority}", field="priority") from e

    try:
        steps = [
            s if isinstance(s, ImplementationStep) else ImplementationStep.model_validate(s)
            for s in implementation_steps or []
        ]
        reqs = [
            r if isinstance(r, StrategyRequirement) else StrategyRequirement.model_validate(r)
            for r in requirements or []
        ]
        risk_items = [
            r if isinstance(r, StrategyRisk) else StrategyRisk.model_validate(r)
            for r in risks or []
        ]
    except ValueError as e:
        raise ValidationError(f"Pasos, requisitos o riesgos inválidos: {e}") from e

    return StrategyDraft(
        strategy_name=strategy_name.strip(),
        strategy_type=kind,
        priority=level,
        description=description.strip(),
        implementation_steps=steps,
        requirements=reqs,
        risks=risk_items,
        time_to_implement_days=CUSTOM_STRATEGY_TIME_TO_IMPLEMENT_DAYS,
        estimated_time_savings_months=CUSTOM_STRATEGY_TIME_SAVINGS_MONTHS,
    )
