"""Base Repository Pattern.

Las tablas del optimizador son append-only y casi todas cuelgan de una
meta: el repositorio base ofrece lectura por ID, alta con flush y un
`select` ya filtrado por `goal_id` que cada subclase ordena a su manera.
"""

from typing import Any, Generic, TypeVar
from uuid import UUID

from sqlalchemy import Select, select
from sqlalchemy.orm import Session

from goal_optimizer.core.database import Base


ModelType = TypeVar("ModelType", bound=Base)


def normalize_id(entity_id: str | UUID) -> str:
    """Los IDs se guardan como string de 36 caracteres."""
    return str(entity_id) if isinstance(entity_id, UUID) else entity_id


class BaseRepository(Generic[ModelType]):
    """
    Repositorio base.

    Attributes:
        model: Clase del modelo SQLAlchemy
        db: Sesión inyectada (nunca un handle global)

    Example:
        ```python
        class MilestoneRepository(BaseRepository[GoalIntermediateMilestone]):
            def __init__(self, db: Session) -> None:
                super().__init__(GoalIntermediateMilestone, db)

            def get_all_by_goal(self, goal_id: str) -> list[GoalIntermediateMilestone]:
                stmt = self._by_goal(goal_id).order_by(self.model.milestone_order)
                return list(self.db.execute(stmt).scalars().all())
        ```
    """

    def __init__(self, model: type[ModelType], db: Session) -> None:
        self.model = model
        self.db = db

    def _by_goal(self, goal_id: str | UUID) -> Select[tuple[ModelType]]:
        """`SELECT` del modelo filtrado por meta, sin orden."""
        return select(self.model).where(self.model.goal_id == normalize_id(goal_id))

    def get(self, entity_id: str | UUID) -> ModelType | None:
        """
        Obtiene una entidad por ID.

        Returns:
            Entidad encontrada o None
        """
        stmt = select(self.model).where(self.model.id == normalize_id(entity_id))
        return self.db.execute(stmt).scalar_one_or_none()

    def exists(self, entity_id: str | UUID) -> bool:
        return self.get(entity_id) is not None

    def add(self, entity: ModelType) -> ModelType:
        """Agrega una entidad construida y hace flush para obtener ID y defaults."""
        self.db.add(entity)
        self.db.flush()
        return entity

    def create(self, data: dict[str, Any]) -> ModelType:
        """
        Crea una entidad desde un diccionario de columnas.

        Nunca actualiza filas existentes: cada llamada agrega una nueva.
        """
        return self.add(self.model(**data))
