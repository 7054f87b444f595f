"""Generador de hitos intermedios de una meta."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from dateutil.relativedelta import relativedelta

from goal_optimizer.core.constants import (
    DEFAULT_MOTIVATION_MESSAGE,
    MAX_TIME_BASED_MILESTONES,
    MILESTONE_PERCENTAGES,
    MOTIVATION_MESSAGES,
    TIME_BASED_MILESTONE_MIN_MONTHS,
    TIME_BASED_MOTIVATION_MESSAGE,
)
from goal_optimizer.models.enums import DifficultyLevel, MilestoneType
from goal_optimizer.services.gap_calculator import months_between
from goal_optimizer.utils.formatting import round_half_up, to_cents


@dataclass
class MilestoneDraft:
    """Hito propuesto, todavía sin persistir."""

    milestone_name: str
    milestone_type: MilestoneType
    difficulty_level: DifficultyLevel
    motivation_message: str
    target_amount: Decimal | None = None
    target_percentage: Decimal | None = None
    target_date: date | None = None


def get_milestone_difficulty(percentage: int) -> DifficultyLevel:
    """Dificultad por tramo: <=25 fácil, <=50 moderado, <=75 desafiante, resto ambicioso."""
    if percentage <= 25:
        return DifficultyLevel.EASY
    if percentage <= 50:
        return DifficultyLevel.MODERATE
    if percentage <= 75:
        return DifficultyLevel.CHALLENGING
    return DifficultyLevel.AMBITIOUS


def get_motivation_message(percentage: int) -> str:
    return MOTIVATION_MESSAGES.get(percentage, DEFAULT_MOTIVATION_MESSAGE)


def generate_milestone_drafts(
    target_amount: Decimal,
    target_date: date | None = None,
    *,
    today: date | None = None,
    days_per_month: int = 30,
) -> list[MilestoneDraft]:
    """
    Propone hitos por porcentaje del objetivo y, si la meta es de largo
    plazo, hitos por tiempo.

    Args:
        target_amount: Monto objetivo de la meta
        target_date: Fecha objetivo (opcional)
        today: Fecha de referencia (hoy por defecto)
        days_per_month: Días por mes para convertir fechas a meses

    Returns:
        Hitos en orden de generación: porcentajes primero, luego por tiempo
    """
    today = today or date.today()
    target = Decimal(target_amount)

    drafts = [
        MilestoneDraft(
            milestone_name=f"{pct}% del Objetivo",
            milestone_type=MilestoneType.PERCENTAGE,
            difficulty_level=get_milestone_difficulty(pct),
            motivation_message=get_motivation_message(pct),
            target_amount=to_cents(target * pct / 100),
            target_percentage=Decimal(pct),
        )
        for pct in MILESTONE_PERCENTAGES
    ]

    if target_date is None:
        return drafts

    months_to_goal = months_between(today, target_date, days_per_month)
    if months_to_goal <= TIME_BASED_MILESTONE_MIN_MONTHS:
        return drafts

    intervals = min(MAX_TIME_BASED_MILESTONES, months_to_goal // 12)
    for i in range(1, intervals + 1):
        months_to_milestone = round_half_up(Decimal(months_to_goal * i) / intervals)
        drafts.append(
            MilestoneDraft(
                milestone_name=f"Año {i}",
                milestone_type=MilestoneType.TIME_BASED,
                difficulty_level=DifficultyLevel.MODERATE,
                motivation_message=TIME_BASED_MOTIVATION_MESSAGE,
                target_date=today + relativedelta(months=months_to_milestone),
            )
        )

    return drafts
