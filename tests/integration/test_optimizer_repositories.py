"""
Tests de integración para los repositorios del optimizador.

Usan SQLite en memoria y verifican que el orden lo define la query.
"""

from datetime import date, datetime
from decimal import Decimal

import pytest

from goal_optimizer.models import PlanType, RiskLevel, StrategyPriority, StrategyType
from goal_optimizer.repositories import (
    ContributionPlanRepository,
    GapAnalysisRepository,
    GoalRepository,
    MilestoneRepository,
    StrategyRepository,
)


def analysis_data(goal_id: str, analysis_date: date, gap: str = "1000") -> dict[str, object]:
    return {
        "goal_id": goal_id,
        "analysis_date": analysis_date,
        "current_capital": Decimal("0"),
        "target_capital": Decimal(gap),
        "gap_amount": Decimal(gap),
        "gap_percentage": Decimal("100"),
        "current_monthly_contribution": Decimal("0"),
        "required_monthly_contribution": Decimal("0"),
        "contribution_gap": Decimal("0"),
        "risk_level": RiskLevel.HIGH,
    }


def strategy_data(goal_id: str, name: str, priority: StrategyPriority, impact: int) -> dict[str, object]:
    return {
        "goal_id": goal_id,
        "strategy_name": name,
        "strategy_type": StrategyType.REDUCE_COSTS,
        "priority": priority,
        "impact_score": impact,
        "description": name,
    }


def plan_data(goal_id: str, name: str, success_probability: int) -> dict[str, object]:
    return {
        "goal_id": goal_id,
        "plan_name": name,
        "plan_type": PlanType.CUSTOM,
        "base_monthly_contribution": Decimal("100"),
        "optimized_monthly_contribution": Decimal("150"),
        "contribution_increase": Decimal("50"),
        "success_probability": success_probability,
    }


class TestGoalRepository:
    """Tests para GoalRepository."""

    def test_get_and_exists(self, session, make_goal) -> None:
        """Debería encontrar metas por ID."""
        goal = make_goal()
        repo = GoalRepository(session)

        assert repo.get(goal.id) is goal
        assert repo.exists(goal.id) is True
        assert repo.get("no-existe") is None


class TestGapAnalysisRepository:
    """Tests para GapAnalysisRepository."""

    def test_latest_by_analysis_date(self, session, make_goal) -> None:
        """El vigente es el de analysis_date más reciente, sin importar el orden de inserción."""
        goal = make_goal()
        repo = GapAnalysisRepository(session)

        repo.create(analysis_data(goal.id, date(2025, 3, 1), gap="3"))
        repo.create(analysis_data(goal.id, date(2025, 1, 1), gap="1"))
        session.commit()

        latest = repo.get_latest_by_goal(goal.id)
        assert latest is not None
        assert latest.analysis_date == date(2025, 3, 1)

    def test_same_day_uses_created_at(self, session, make_goal) -> None:
        """Dos análisis el mismo día: gana el último creado."""
        goal = make_goal()
        repo = GapAnalysisRepository(session)

        first = analysis_data(goal.id, date(2025, 1, 15), gap="1")
        first["created_at"] = datetime(2025, 1, 15, 9, 0)
        later = analysis_data(goal.id, date(2025, 1, 15), gap="2")
        later["created_at"] = datetime(2025, 1, 15, 18, 30)

        second = repo.create(later)
        repo.create(first)
        session.commit()

        assert repo.get_latest_by_goal(goal.id).id == second.id
        assert [a.id for a in repo.get_all_by_goal(goal.id)][0] == second.id

    def test_scoped_by_goal(self, session, make_goal) -> None:
        """Solo devuelve análisis de la meta pedida."""
        goal = make_goal()
        other = make_goal(name="Otra meta")
        repo = GapAnalysisRepository(session)

        repo.create(analysis_data(other.id, date(2025, 1, 15)))
        session.commit()

        assert repo.get_latest_by_goal(goal.id) is None
        assert repo.get_all_by_goal(goal.id) == []


class TestStrategyRepository:
    """Tests para StrategyRepository."""

    def test_orders_by_priority_rank_then_impact(self, session, make_goal) -> None:
        """CRITICAL > HIGH > MEDIUM > LOW (no alfabético), luego impacto DESC."""
        goal = make_goal()
        repo = StrategyRepository(session)

        repo.create(strategy_data(goal.id, "medium-low-impact", StrategyPriority.MEDIUM, 40))
        repo.create(strategy_data(goal.id, "low", StrategyPriority.LOW, 99))
        repo.create(strategy_data(goal.id, "critical", StrategyPriority.CRITICAL, 10))
        repo.create(strategy_data(goal.id, "medium-high-impact", StrategyPriority.MEDIUM, 90))
        repo.create(strategy_data(goal.id, "high", StrategyPriority.HIGH, 50))
        session.commit()

        names = [s.strategy_name for s in repo.get_all_by_goal(goal.id)]

        assert names == ["critical", "high", "medium-high-impact", "medium-low-impact", "low"]


class TestContributionPlanRepository:
    """Tests para ContributionPlanRepository."""

    def test_orders_active_first_then_success_probability(self, session, make_goal) -> None:
        """Activos primero, luego probabilidad de éxito DESC."""
        goal = make_goal()
        repo = ContributionPlanRepository(session)

        repo.create(plan_data(goal.id, "p60", 60))
        repo.create(plan_data(goal.id, "p90", 90))
        chosen = repo.create(plan_data(goal.id, "p10", 10))
        repo.set_as_active(chosen)
        session.commit()

        assert [p.plan_name for p in repo.get_all_by_goal(goal.id)] == ["p10", "p90", "p60"]

    def test_set_as_active_deactivates_others(self, session, make_goal) -> None:
        """Solo un plan activo por meta."""
        goal = make_goal()
        other_goal = make_goal(name="Otra meta")
        repo = ContributionPlanRepository(session)

        first = repo.create(plan_data(goal.id, "first", 80))
        second = repo.create(plan_data(goal.id, "second", 80))
        foreign = repo.create(plan_data(other_goal.id, "foreign", 80))

        assert repo.set_as_active(first) == 0
        assert repo.set_as_active(foreign) == 0
        assert repo.set_as_active(second) == 1
        session.commit()

        assert repo.get_active_by_goal(goal.id).id == second.id
        assert first.is_active is False
        assert second.activated_date is not None
        assert foreign.is_active is True


class TestMilestoneRepository:
    """Tests para MilestoneRepository."""

    @pytest.mark.parametrize("orders", [[3, 1, 2], [5, 4]])
    def test_ordered_by_milestone_order(self, session, make_goal, orders: list[int]) -> None:
        """Debería devolver hitos por milestone_order ascendente."""
        goal = make_goal()
        repo = MilestoneRepository(session)

        for order in orders:
            repo.create(
                {
                    "goal_id": goal.id,
                    "milestone_name": f"Hito {order}",
                    "milestone_type": "PERCENTAGE",
                    "milestone_order": order,
                }
            )
        session.commit()

        assert [m.milestone_order for m in repo.get_all_by_goal(goal.id)] == sorted(orders)
        assert repo.get_max_order(goal.id) == max(orders)

    def test_max_order_without_milestones(self, session, make_goal) -> None:
        """Sin hitos el máximo es 0."""
        goal = make_goal()
        assert MilestoneRepository(session).get_max_order(goal.id) == 0
