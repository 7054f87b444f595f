"""Schemas Pydantic del optimizador: payloads JSON embebidos y read-models."""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Análisis de gap
# =============================================================================


class ConfidenceInterval(BaseModel):
    """Intervalo de meses estimados para cumplir la meta."""

    low_estimate: float = Field(..., description="Estimación pesimista (meses)")
    high_estimate: float = Field(..., description="Estimación optimista (meses)")
    confidence_level: int = Field(..., ge=0, le=100, description="Nivel de confianza (%)")


class ContributingFactors(BaseModel):
    """Desglose de factores que explican la desviación del plan."""

    market_performance: float
    contribution_consistency: float
    expense_ratio_impact: float
    timing_effects: float


class GapAnalysisDetails(BaseModel):
    """Diagnóstico secundario derivado de las métricas de gap."""

    current_monthly_performance: float = Field(..., description="Rendimiento mensual esperado (%)")
    required_monthly_performance: float = Field(
        ..., description="Aporte requerido como % del capital actual"
    )
    performance_gap: float
    historical_volatility: float
    success_probability: int = Field(..., ge=0, le=100)
    confidence_intervals: ConfidenceInterval
    contributing_factors: ContributingFactors
    recommendations: list[str] = Field(default_factory=list)


# =============================================================================
# Estrategias
# =============================================================================


class ImplementationStep(BaseModel):
    """Paso de implementación de una estrategia."""

    step_number: int = Field(..., ge=1)
    description: str
    estimated_hours: float = Field(default=1, ge=0)
    dependencies: list[str] = Field(default_factory=list)
    resources_needed: list[str] = Field(default_factory=list)
    success_criteria: str


class StrategyRequirement(BaseModel):
    """Requisito para aplicar una estrategia."""

    requirement_type: str = Field(..., description="FINANCIAL, TECHNICAL, TIME o KNOWLEDGE")
    description: str
    is_met: bool = False
    how_to_fulfill: str


class StrategyRisk(BaseModel):
    """Riesgo asociado a una estrategia."""

    risk_type: str = Field(..., description="FINANCIAL, OPERATIONAL, MARKET o REGULATORY")
    description: str
    probability: str = Field(..., description="LOW, MEDIUM o HIGH")
    impact: str = Field(..., description="LOW, MEDIUM o HIGH")
    mitigation_strategy: str


# =============================================================================
# Planes de contribución
# =============================================================================


class BonusContribution(BaseModel):
    """Aporte extraordinario probable en un mes del año."""

    month: int = Field(..., ge=1, le=12, description="Mes del año (1-12)")
    amount: Decimal = Field(..., ge=0)
    source: str = Field(..., description="aguinaldo, extra_income, tax_refund, ...")
    frequency: str = Field(default="YEARLY", description="ONCE, YEARLY o VARIABLE")
    probability: int = Field(..., ge=0, le=100)


class SeasonalAdjustment(BaseModel):
    """Multiplicador del aporte en meses de gastos altos o bajos."""

    months: list[int] = Field(..., min_length=1)
    adjustment_factor: Decimal = Field(..., gt=0, description="0.9 = 10% menos")
    reason: str


# =============================================================================
# Read-models (from_attributes sobre filas ORM)
# =============================================================================


class GapAnalysisRead(BaseModel):
    """Schema de lectura de un análisis de gap."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    goal_id: str
    analysis_date: date
    current_capital: Decimal
    target_capital: Decimal
    gap_amount: Decimal
    gap_percentage: Decimal
    current_monthly_contribution: Decimal
    required_monthly_contribution: Decimal
    contribution_gap: Decimal
    months_remaining: int | None
    projected_completion_date: date | None
    deviation_from_plan: Decimal
    risk_level: str
    details: GapAnalysisDetails | None


class StrategyRead(BaseModel):
    """Schema de lectura de una estrategia."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    goal_id: str
    gap_analysis_id: str | None
    strategy_name: str
    strategy_type: str
    priority: str
    impact_score: int
    effort_level: str
    time_to_implement_days: int
    description: str
    steps: list[ImplementationStep]
    requirement_list: list[StrategyRequirement]
    risk_list: list[StrategyRisk]
    is_applied: bool
    applied_date: datetime | None


class ContributionPlanRead(BaseModel):
    """Schema de lectura de un plan de contribución."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    goal_id: str
    gap_analysis_id: str | None
    plan_name: str
    plan_type: str
    base_monthly_contribution: Decimal
    optimized_monthly_contribution: Decimal
    contribution_increase: Decimal
    extra_annual_contributions: Decimal
    bonuses: list[BonusContribution]
    seasonal: list[SeasonalAdjustment]
    affordability_score: int | None
    success_probability: int | None
    is_active: bool
    activated_date: datetime | None


class MilestoneRead(BaseModel):
    """Schema de lectura de un hito intermedio."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    goal_id: str
    milestone_name: str
    milestone_type: str
    milestone_order: int
    target_amount: Decimal | None
    target_percentage: Decimal | None
    target_date: date | None
    current_progress: Decimal
    progress_percentage: Decimal
    difficulty_level: str
    motivation_message: str | None
    is_achieved: bool
    achieved_date: datetime | None


class OptimizerSummary(BaseModel):
    """Vista compuesta del optimizador para una meta (no se persiste)."""

    goal_id: str
    gap_analysis: GapAnalysisRead | None
    optimization_strategies: list[StrategyRead]
    contribution_plans: list[ContributionPlanRead]
    milestones: list[MilestoneRead]
    overall_score: int = Field(..., ge=0, le=100)
    next_recommended_actions: list[str]


class PersonalizedRecommendation(BaseModel):
    """Recomendación accionable para el usuario."""

    priority: str = Field(..., description="LOW, MEDIUM o HIGH")
    category: str = Field(..., description="CONTRIBUTION, TIMELINE, STRATEGY, PLAN o MONITORING")
    title: str
    description: str
    impact_estimate: str
    effort_required: str
    time_frame: str
    success_probability: int = Field(..., ge=0, le=100)
    action_items: list[str] = Field(default_factory=list)
