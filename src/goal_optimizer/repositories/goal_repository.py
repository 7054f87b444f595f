"""Repository para Metas Financieras."""

from sqlalchemy.orm import Session

from goal_optimizer.models.goal import FinancialGoal
from goal_optimizer.repositories.base import BaseRepository


class GoalRepository(BaseRepository[FinancialGoal]):
    """
    Repositorio de metas.

    El optimizador solo consulta metas por ID: el registro autoritativo
    lo mantiene el servicio de CRUD de metas.
    """

    def __init__(self, db: Session) -> None:
        super().__init__(FinancialGoal, db)
