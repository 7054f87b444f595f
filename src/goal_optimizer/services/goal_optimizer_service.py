"""Servicio orquestador del optimizador de metas.

Coordina el cálculo de gap, la generación de estrategias, planes e hitos,
su persistencia y el resumen con score de salud.
"""

from datetime import date
from decimal import Decimal

from sqlalchemy.orm import Session

from goal_optimizer.config.settings import OptimizerSettings, settings
from goal_optimizer.core.constants import (
    BASE_SUCCESS_PROBABILITY,
    DEFAULT_PLAN_AFFORDABILITY_SCORE,
    DEFAULT_PLAN_SUCCESS_PROBABILITY,
    DEFAULT_STRATEGY_IMPACT_SCORE,
)
from goal_optimizer.core.exceptions import NotFoundError, PreconditionFailedError, ValidationError
from goal_optimizer.core.logging import get_logger, log_optimizer_event
from goal_optimizer.models.contribution_plan import GoalContributionPlan
from goal_optimizer.models.enums import EffortLevel, RiskLevel, StrategyPriority, StrategyType
from goal_optimizer.models.gap_analysis import GoalGapAnalysis
from goal_optimizer.models.goal import FinancialGoal
from goal_optimizer.models.intermediate_milestone import GoalIntermediateMilestone
from goal_optimizer.models.optimization_strategy import GoalOptimizationStrategy
from goal_optimizer.repositories import (
    ContributionPlanRepository,
    GapAnalysisRepository,
    GoalRepository,
    MilestoneRepository,
    StrategyRepository,
)
from goal_optimizer.schemas.optimizer import (
    BonusContribution,
    ContributionPlanRead,
    GapAnalysisRead,
    ImplementationStep,
    MilestoneRead,
    OptimizerSummary,
    PersonalizedRecommendation,
    SeasonalAdjustment,
    StrategyRead,
    StrategyRequirement,
    StrategyRisk,
)
from goal_optimizer.services.capital_valuation import (
    CapitalValuationSource,
    FallbackCapitalSource,
)
from goal_optimizer.services.contribution_planner import (
    PlanDraft,
    build_custom_plan,
    generate_plan_drafts,
)
from goal_optimizer.services.gap_calculator import calculate_gap_metrics
from goal_optimizer.services.gap_details import expand_gap_details
from goal_optimizer.services.milestone_generator import generate_milestone_drafts
from goal_optimizer.services.score_aggregator import calculate_overall_score, generate_next_actions
from goal_optimizer.services.strategy_generator import (
    StrategyDraft,
    build_custom_strategy,
    generate_strategy_drafts,
)
from goal_optimizer.utils.formatting import format_amount, to_cents


logger = get_logger(__name__)

PERCENT_PRECISION = Decimal("0.0001")


class GoalOptimizerService:
    """
    Optimizador de metas financieras.

    Features:
    - Análisis de gap (capital actual vs objetivo, aporte requerido, riesgo)
    - Estrategias de optimización según el último análisis o definidas por el usuario
    - Planes de contribución (conservador, moderado, agresivo, personalizados)
    - Hitos intermedios por porcentaje y por tiempo
    - Resumen con score de salud y próximas acciones

    Todas las generaciones agregan filas nuevas; nada se sobrescribe.
    Cada operación que escribe hace commit al final.
    """

    def __init__(
        self,
        db: Session,
        capital_source: CapitalValuationSource | None = None,
        config: OptimizerSettings | None = None,
    ) -> None:
        """
        Inicializa el servicio.

        Args:
            db: Sesión de base de datos
            capital_source: Fuente del capital actual (con respaldo por defecto)
            config: Umbrales del optimizador (los de settings por defecto)
        """
        self.db = db
        self.capital_source = capital_source or FallbackCapitalSource()
        self.config = config or settings.optimizer

        self.goals = GoalRepository(db)
        self.gap_analyses = GapAnalysisRepository(db)
        self.strategies = StrategyRepository(db)
        self.plans = ContributionPlanRepository(db)
        self.milestones = MilestoneRepository(db)

    # ========================================================================
    # HELPERS
    # ========================================================================

    def _get_goal(self, goal_id: str) -> FinancialGoal:
        goal = self.goals.get(goal_id)
        if goal is None:
            raise NotFoundError("Meta", str(goal_id))
        return goal

    def _require_latest_analysis(self, goal_id: str) -> GoalGapAnalysis:
        analysis = self.gap_analyses.get_latest_by_goal(goal_id)
        if analysis is None:
            raise PreconditionFailedError(
                "Debe realizar un análisis de gap primero",
                code="GAP_ANALYSIS_REQUIRED",
                details={"goal_id": str(goal_id)},
            )
        return analysis

    def _save_strategy(
        self,
        goal_id: str,
        draft: StrategyDraft,
        gap_analysis_id: str | None,
    ) -> GoalOptimizationStrategy:
        return self.strategies.create(
            {
                "goal_id": goal_id,
                "gap_analysis_id": gap_analysis_id,
                "strategy_name": draft.strategy_name,
                "strategy_type": draft.strategy_type,
                "priority": draft.priority,
                "impact_score": DEFAULT_STRATEGY_IMPACT_SCORE,
                "effort_level": EffortLevel.MEDIUM,
                "time_to_implement_days": draft.time_to_implement_days,
                "estimated_time_savings_months": draft.estimated_time_savings_months,
                "estimated_cost_savings": Decimal("0"),
                "description": draft.description,
                "implementation_steps": [
                    s.model_dump(mode="json") for s in draft.implementation_steps
                ],
                "requirements": [r.model_dump(mode="json") for r in draft.requirements],
                "risks": [r.model_dump(mode="json") for r in draft.risks],
                "is_applied": False,
            }
        )

    def _save_plan(
        self,
        goal: FinancialGoal,
        draft: PlanDraft,
        gap_analysis_id: str | None,
    ) -> GoalContributionPlan:
        # El aporte base se relee de la meta al persistir
        base = to_cents(goal.monthly_contribution or 0)
        return self.plans.create(
            {
                "goal_id": goal.id,
                "gap_analysis_id": gap_analysis_id,
                "plan_name": draft.plan_name,
                "plan_type": draft.plan_type,
                "base_monthly_contribution": base,
                "optimized_monthly_contribution": draft.optimized_monthly_contribution,
                "contribution_increase": draft.optimized_monthly_contribution - base,
                "extra_annual_contributions": draft.extra_annual_contributions,
                "bonus_contributions": [b.model_dump(mode="json") for b in draft.bonus_contributions],
                "seasonal_adjustments": [
                    s.model_dump(mode="json") for s in draft.seasonal_adjustments
                ],
                "affordability_score": DEFAULT_PLAN_AFFORDABILITY_SCORE,
                "success_probability": DEFAULT_PLAN_SUCCESS_PROBABILITY,
                "is_active": False,
            }
        )

    # ========================================================================
    # ANÁLISIS DE GAP
    # ========================================================================

    def perform_gap_analysis(self, goal_id: str, *, today: date | None = None) -> GoalGapAnalysis:
        """
        Calcula y guarda un nuevo análisis de gap para la meta.

        Args:
            goal_id: ID de la meta
            today: Fecha de referencia (hoy por defecto)

        Returns:
            Análisis guardado

        Raises:
            NotFoundError: Si la meta no existe
        """
        goal = self._get_goal(goal_id)
        today = today or date.today()

        current_capital = self.capital_source.get_current_capital()
        metrics = calculate_gap_metrics(goal, current_capital, today=today, config=self.config)
        details = expand_gap_details(metrics, self.config)

        analysis = self.gap_analyses.create(
            {
                "goal_id": goal.id,
                "analysis_date": today,
                "current_capital": to_cents(metrics.current_capital),
                "target_capital": to_cents(metrics.target_capital),
                "gap_amount": to_cents(metrics.gap_amount),
                "gap_percentage": metrics.gap_percentage.quantize(PERCENT_PRECISION),
                "current_monthly_contribution": to_cents(metrics.current_monthly_contribution),
                "required_monthly_contribution": to_cents(metrics.required_monthly_contribution),
                "contribution_gap": to_cents(metrics.contribution_gap),
                "months_remaining": metrics.months_remaining,
                "projected_completion_date": metrics.projected_completion_date,
                "deviation_from_plan": metrics.deviation_from_plan.quantize(PERCENT_PRECISION),
                "risk_level": metrics.risk_level,
                "analysis_details": details.model_dump(mode="json"),
            }
        )
        self.db.commit()

        logger.info(
            f"📊 Análisis de gap para '{goal.name}': gap {format_amount(metrics.gap_amount)} "
            f"({metrics.gap_percentage:.1f}%), riesgo {metrics.risk_level}"
        )
        log_optimizer_event(
            "GAP_ANALYSIS",
            goal.id,
            f"gap={metrics.gap_amount:.2f} riesgo={metrics.risk_level}",
        )
        return analysis

    # ========================================================================
    # ESTRATEGIAS
    # ========================================================================

    def generate_optimization_strategies(self, goal_id: str) -> list[GoalOptimizationStrategy]:
        """
        Genera estrategias a partir del último análisis de gap.

        Returns:
            Estrategias creadas, en orden de generación

        Raises:
            NotFoundError: Si la meta no existe
            PreconditionFailedError: Si la meta no tiene análisis de gap
        """
        goal = self._get_goal(goal_id)
        analysis = self._require_latest_analysis(goal.id)

        created = [
            self._save_strategy(goal.id, draft, analysis.id)
            for draft in generate_strategy_drafts(analysis)
        ]
        self.db.commit()

        logger.info(f"🎯 {len(created)} estrategias generadas para '{goal.name}'")
        log_optimizer_event(
            "STRATEGIES_GENERATED",
            goal.id,
            ", ".join(s.strategy_type for s in created),
        )
        return created

    def create_custom_optimization_strategy(
        self,
        goal_id: str,
        strategy_name: str,
        strategy_type: StrategyType | str | None,
        description: str,
        priority: StrategyPriority | str = StrategyPriority.MEDIUM,
        implementation_steps: list[ImplementationStep | dict] | None = None,
        requirements: list[StrategyRequirement | dict] | None = None,
        risks: list[StrategyRisk | dict] | None = None,
    ) -> GoalOptimizationStrategy:
        """
        Crea una estrategia definida por el usuario.

        Queda asociada al último análisis de gap si la meta tiene uno.

        Raises:
            NotFoundError: Si la meta no existe
            ValidationError: Si falta nombre, tipo o descripción, o algún
                dato es inválido
        """
        goal = self._get_goal(goal_id)
        draft = build_custom_strategy(
            strategy_name,
            strategy_type,
            description,
            priority=priority,
            implementation_steps=implementation_steps,
            requirements=requirements,
            risks=risks,
        )

        latest = self.gap_analyses.get_latest_by_goal(goal.id)
        strategy = self._save_strategy(goal.id, draft, latest.id if latest else None)
        self.db.commit()

        logger.info(
            f"🛠️ Estrategia personalizada '{strategy.strategy_name}' creada para '{goal.name}'"
        )
        log_optimizer_event("CUSTOM_STRATEGY_CREATED", goal.id, strategy.strategy_name)
        return strategy

    def get_optimization_strategies(self, goal_id: str) -> list[GoalOptimizationStrategy]:
        """Estrategias de la meta por prioridad DESC, impacto DESC."""
        return self.strategies.get_all_by_goal(goal_id)

    def mark_strategy_applied(self, strategy_id: str) -> GoalOptimizationStrategy:
        """
        Marca una estrategia como aplicada.

        Raises:
            NotFoundError: Si la estrategia no existe
        """
        strategy = self.strategies.get(strategy_id)
        if strategy is None:
            raise NotFoundError("Estrategia", str(strategy_id))

        strategy.mark_as_applied()
        self.db.commit()

        logger.info(f"✅ Estrategia aplicada: {strategy.strategy_name}")
        log_optimizer_event("STRATEGY_APPLIED", strategy.goal_id, strategy.strategy_name)
        return strategy

    # ========================================================================
    # PLANES DE CONTRIBUCIÓN
    # ========================================================================

    def generate_contribution_plans(self, goal_id: str) -> list[GoalContributionPlan]:
        """
        Genera los planes estándar de la meta.

        Cada llamada agrega planes nuevos (no reemplaza los anteriores).

        Raises:
            NotFoundError: Si la meta no existe
            PreconditionFailedError: Si la meta no tiene análisis de gap
        """
        goal = self._get_goal(goal_id)
        analysis = self._require_latest_analysis(goal_id)

        drafts = generate_plan_drafts(
            Decimal(goal.monthly_contribution or 0),
            Decimal(analysis.required_monthly_contribution),
        )
        created = [self._save_plan(goal, draft, analysis.id) for draft in drafts]
        self.db.commit()

        logger.info(f"💰 {len(created)} planes de contribución generados para '{goal.name}'")
        log_optimizer_event(
            "PLANS_GENERATED",
            goal.id,
            ", ".join(f"{p.plan_type}={p.optimized_monthly_contribution}" for p in created),
        )
        return created

    def get_contribution_plans(self, goal_id: str) -> list[GoalContributionPlan]:
        """Planes de la meta: activos primero, luego por probabilidad de éxito."""
        return self.plans.get_all_by_goal(goal_id)

    def create_custom_contribution_plan(
        self,
        goal_id: str,
        plan_name: str,
        optimized_monthly_contribution: Decimal,
        bonus_contributions: list[BonusContribution | dict] | None = None,
        seasonal_adjustments: list[SeasonalAdjustment | dict] | None = None,
    ) -> GoalContributionPlan:
        """
        Crea un plan personalizado para la meta.

        Raises:
            NotFoundError: Si la meta no existe
            ValidationError: Si el nombre está vacío, el aporte no es positivo
                o los bonos/ajustes son inválidos
        """
        goal = self._get_goal(goal_id)
        draft = build_custom_plan(
            plan_name,
            optimized_monthly_contribution,
            bonus_contributions,
            seasonal_adjustments,
        )

        latest = self.gap_analyses.get_latest_by_goal(goal.id)
        plan = self._save_plan(goal, draft, latest.id if latest else None)
        self.db.commit()

        logger.info(
            f"📝 Plan personalizado '{plan.plan_name}' creado para '{goal.name}': "
            f"{format_amount(plan.optimized_monthly_contribution)}/mes"
        )
        log_optimizer_event("CUSTOM_PLAN_CREATED", goal.id, plan.plan_name)
        return plan

    def activate_contribution_plan(self, plan_id: str) -> GoalContributionPlan:
        """
        Activa un plan y desactiva los demás planes de la misma meta.

        Raises:
            NotFoundError: Si el plan no existe
        """
        plan = self.plans.get(plan_id)
        if plan is None:
            raise NotFoundError("Plan", str(plan_id))

        deactivated = self.plans.set_as_active(plan)
        self.db.commit()

        logger.info(
            f"⚡ Plan activado: {plan.plan_name} ({deactivated} plan(es) desactivado(s))"
        )
        log_optimizer_event("PLAN_ACTIVATED", plan.goal_id, plan.plan_name)
        return plan

    # ========================================================================
    # HITOS INTERMEDIOS
    # ========================================================================

    def generate_intermediate_milestones(
        self,
        goal_id: str,
        *,
        today: date | None = None,
    ) -> list[GoalIntermediateMilestone]:
        """
        Genera hitos por porcentaje y, en metas de largo plazo, por tiempo.

        El orden continúa después del último hito existente de la meta.

        Raises:
            NotFoundError: Si la meta no existe
            PreconditionFailedError: Si la meta no tiene monto objetivo
        """
        goal = self._get_goal(goal_id)
        if goal.target_amount is None:
            raise PreconditionFailedError(
                "La meta no tiene monto objetivo",
                code="TARGET_AMOUNT_REQUIRED",
                details={"goal_id": goal.id},
            )

        drafts = generate_milestone_drafts(
            Decimal(goal.target_amount),
            goal.target_date,
            today=today,
            days_per_month=self.config.days_per_month,
        )

        start_order = self.milestones.get_max_order(goal.id)
        created = [
            self.milestones.create(
                {
                    "goal_id": goal.id,
                    "milestone_name": draft.milestone_name,
                    "milestone_type": draft.milestone_type,
                    "milestone_order": start_order + index,
                    "target_amount": draft.target_amount,
                    "target_percentage": draft.target_percentage,
                    "target_date": draft.target_date,
                    "difficulty_level": draft.difficulty_level,
                    "motivation_message": draft.motivation_message,
                    "auto_calculated": True,
                }
            )
            for index, draft in enumerate(drafts, start=1)
        ]
        self.db.commit()

        logger.info(f"🏁 {len(created)} hitos generados para '{goal.name}'")
        log_optimizer_event("MILESTONES_GENERATED", goal.id, f"hitos={len(created)}")
        return created

    def get_intermediate_milestones(self, goal_id: str) -> list[GoalIntermediateMilestone]:
        """Hitos de la meta por orden ascendente."""
        return self.milestones.get_all_by_goal(goal_id)

    def update_milestone_progress(
        self,
        milestone_id: str,
        current_progress: Decimal | float | None = None,
        is_achieved: bool | None = None,
        notes: str | None = None,
    ) -> GoalIntermediateMilestone:
        """
        Actualiza el progreso de un hito.

        Args:
            milestone_id: ID del hito
            current_progress: Progreso en % (0-100); 100 marca el hito como alcanzado
            is_achieved: Fuerza el estado de alcanzado
            notes: Notas del usuario

        Raises:
            NotFoundError: Si el hito no existe
            ValidationError: Si el progreso está fuera de [0, 100]
        """
        milestone = self.milestones.get(milestone_id)
        if milestone is None:
            raise NotFoundError("Hito", str(milestone_id))

        if current_progress is not None:
            progress = Decimal(str(current_progress))
            if not progress.is_finite() or progress < 0 or progress > 100:
                raise ValidationError(
                    "El progreso debe estar entre 0 y 100",
                    field="current_progress",
                )
            milestone.current_progress = progress
            milestone.progress_percentage = progress
            if progress == 100:
                milestone.mark_as_achieved()

        if is_achieved is True:
            milestone.mark_as_achieved()
        elif is_achieved is False:
            milestone.is_achieved = False
            milestone.achieved_date = None

        if notes is not None:
            milestone.notes = notes

        self.db.commit()

        logger.info(
            f"📈 Hito '{milestone.milestone_name}' actualizado: "
            f"{milestone.progress_percentage}% (alcanzado={milestone.is_achieved})"
        )
        if milestone.is_achieved:
            log_optimizer_event("MILESTONE_ACHIEVED", milestone.goal_id, milestone.milestone_name)
        return milestone

    # ========================================================================
    # RESUMEN Y RECOMENDACIONES
    # ========================================================================

    def get_optimizer_summary(self, goal_id: str) -> OptimizerSummary:
        """
        Resumen completo del optimizador para la meta.

        Raises:
            NotFoundError: Si la meta no existe
        """
        goal = self._get_goal(goal_id)

        analysis = self.gap_analyses.get_latest_by_goal(goal.id)
        strategies = self.strategies.get_all_by_goal(goal.id)
        plans = self.plans.get_all_by_goal(goal.id)
        milestones = self.milestones.get_all_by_goal(goal.id)

        score = calculate_overall_score(analysis, strategies, plans, milestones, self.config)
        actions = generate_next_actions(analysis, strategies, self.config)

        logger.info(f"📋 Resumen del optimizador para '{goal.name}': score {score}/100")

        return OptimizerSummary(
            goal_id=goal.id,
            gap_analysis=GapAnalysisRead.model_validate(analysis) if analysis else None,
            optimization_strategies=[StrategyRead.model_validate(s) for s in strategies],
            contribution_plans=[ContributionPlanRead.model_validate(p) for p in plans],
            milestones=[MilestoneRead.model_validate(m) for m in milestones],
            overall_score=score,
            next_recommended_actions=actions,
        )

    def get_personalized_recommendations(self, goal_id: str) -> list[PersonalizedRecommendation]:
        """
        Recomendaciones accionables para la meta.

        Se derivan del último análisis, las estrategias prioritarias
        pendientes y el mejor plan disponible. Sin nada que sugerir,
        devuelve una recomendación de monitoreo.

        Raises:
            NotFoundError: Si la meta no existe
        """
        goal = self._get_goal(goal_id)
        analysis = self.gap_analyses.get_latest_by_goal(goal.id)
        recommendations: list[PersonalizedRecommendation] = []

        if analysis is None:
            recommendations.append(
                PersonalizedRecommendation(
                    priority="HIGH",
                    category="MONITORING",
                    title="Realizar Análisis de Gap",
                    description="Calcula cuánto falta para tu objetivo antes de optimizar",
                    impact_estimate="Base para todas las recomendaciones",
                    effort_required="LOW",
                    time_frame="Inmediato",
                    success_probability=BASE_SUCCESS_PROBABILITY,
                    action_items=["Ejecutar análisis de gap de la meta"],
                )
            )
            return recommendations

        details = analysis.details
        success_probability = details.success_probability if details else BASE_SUCCESS_PROBABILITY
        contribution_gap = Decimal(analysis.contribution_gap)

        if contribution_gap > 0:
            recommendations.append(
                PersonalizedRecommendation(
                    priority="HIGH",
                    category="CONTRIBUTION",
                    title="Aumentar Aporte Mensual",
                    description=(
                        f"Incrementar tu aporte mensual en {format_amount(contribution_gap)} "
                        f"para cumplir tu objetivo a tiempo"
                    ),
                    impact_estimate=f"Cierra un gap de {format_amount(analysis.gap_amount)}",
                    effort_required="MEDIUM",
                    time_frame="1-2 semanas para implementar",
                    success_probability=success_probability,
                    action_items=[
                        "Revisar presupuesto mensual",
                        "Identificar gastos reducibles",
                        "Configurar transferencia automática",
                    ],
                )
            )

        if analysis.risk_level == RiskLevel.HIGH:
            recommendations.append(
                PersonalizedRecommendation(
                    priority="HIGH",
                    category="TIMELINE",
                    title="Revisar Fecha u Objetivo",
                    description="El gap actual es alto para el tiempo restante",
                    impact_estimate=f"Gap de {float(analysis.gap_percentage):.1f}% del objetivo",
                    effort_required="LOW",
                    time_frame="Esta semana",
                    success_probability=success_probability,
                    action_items=[
                        "Evaluar extender la fecha objetivo",
                        "Evaluar reducir el monto objetivo",
                    ],
                )
            )

        for strategy in self.strategies.get_all_by_goal(goal.id):
            if strategy.is_applied or strategy.priority not in (
                StrategyPriority.HIGH,
                StrategyPriority.CRITICAL,
            ):
                continue
            recommendations.append(
                PersonalizedRecommendation(
                    priority="HIGH",
                    category="STRATEGY",
                    title=strategy.strategy_name,
                    description=strategy.description,
                    impact_estimate=(
                        f"{strategy.estimated_time_savings_months or 0} meses de aceleración"
                    ),
                    effort_required=str(strategy.effort_level),
                    time_frame=f"{strategy.time_to_implement_days} días para implementar",
                    success_probability=success_probability,
                    action_items=[step.description for step in strategy.steps],
                )
            )
            break

        plans = self.plans.get_all_by_goal(goal.id)
        if plans and not any(p.is_active for p in plans):
            best = plans[0]
            recommendations.append(
                PersonalizedRecommendation(
                    priority="MEDIUM",
                    category="PLAN",
                    title=f"Activar {best.plan_name}",
                    description=(
                        f"Aportar {format_amount(best.optimized_monthly_contribution)} al mes "
                        f"con el plan de mayor probabilidad de éxito"
                    ),
                    impact_estimate=(
                        f"{format_amount(best.extra_annual_contributions)} extra al año en bonos"
                    ),
                    effort_required="LOW",
                    time_frame="Inmediato",
                    success_probability=best.success_probability or DEFAULT_PLAN_SUCCESS_PROBABILITY,
                    action_items=[f"Activar el plan '{best.plan_name}'"],
                )
            )

        if not recommendations:
            recommendations.append(
                PersonalizedRecommendation(
                    priority="LOW",
                    category="MONITORING",
                    title="Continuar con el Plan Actual",
                    description="Tu meta va por buen camino",
                    impact_estimate="Mantener el ritmo actual",
                    effort_required="LOW",
                    time_frame="Revisión mensual",
                    success_probability=success_probability,
                    action_items=["Monitorear progreso mensualmente"],
                )
            )

        logger.info(f"💡 {len(recommendations)} recomendaciones para '{goal.name}'")
        return recommendations
