"""
Configuración de fixtures para pytest.

Este archivo contiene fixtures compartidos que pueden ser usados
en todos los tests del proyecto.

Estrategia de Testing:
- SQLite en memoria (StaticPool) por test, tablas creadas desde Base.metadata
- Fecha de referencia fija para que los cálculos de meses sean deterministas
- Capital actual inyectado con StaticCapitalSource
"""

from collections.abc import Callable, Generator
from datetime import date
from decimal import Decimal
import os
from typing import Any

import pytest
from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool


# Setup de variables de entorno ANTES de cualquier import de la app
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("DATABASE_URL", "sqlite://")


TODAY = date(2025, 1, 15)


@pytest.fixture
def today() -> date:
    """Fecha de referencia de todos los cálculos."""
    return TODAY


@pytest.fixture
def engine() -> Generator[Engine, None, None]:
    """Engine SQLite en memoria con todas las tablas creadas."""
    from goal_optimizer.core.database import Base
    import goal_optimizer.models  # noqa: F401

    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(test_engine)

    yield test_engine

    Base.metadata.drop_all(test_engine)
    test_engine.dispose()


@pytest.fixture
def session(engine: Engine) -> Generator[Session, None, None]:
    """
    Fixture de sesión de base de datos para tests.

    Cada test obtiene una base de datos limpia.
    """
    TestSession = sessionmaker(bind=engine)
    db_session = TestSession()

    yield db_session

    db_session.close()


@pytest.fixture
def make_goal(session: Session, today: date) -> Callable[..., Any]:
    """
    Fábrica de metas persistidas.

    Por defecto: $100,000 en 2 años, aportando $1,000/mes al 10% anual,
    creada el mismo día de referencia.
    """
    from goal_optimizer.models import FinancialGoal

    def _make_goal(**overrides: object) -> FinancialGoal:
        data: dict[str, object] = {
            "name": "Retiro anticipado",
            "target_amount": Decimal("100000"),
            "target_date": date(2027, 1, 15),
            "monthly_contribution": Decimal("1000"),
            "expected_return_rate": Decimal("10"),
            "created_date": today,
        }
        data.update(overrides)
        goal = FinancialGoal(**data)
        session.add(goal)
        session.commit()
        return goal

    return _make_goal


@pytest.fixture
def capital_source():
    """Capital actual fijo de $25,000."""
    from goal_optimizer.services.capital_valuation import StaticCapitalSource

    return StaticCapitalSource(Decimal("25000"))


@pytest.fixture
def service(session: Session, capital_source):
    """GoalOptimizerService con sesión de test y capital fijo."""
    from goal_optimizer.services.goal_optimizer_service import GoalOptimizerService

    return GoalOptimizerService(session, capital_source=capital_source)


@pytest.fixture
def captured_logs() -> Generator[list[str], None, None]:
    """Captura los mensajes de loguru de nivel WARNING o superior."""
    from loguru import logger

    messages: list[str] = []
    handler_id = logger.add(lambda message: messages.append(str(message)), level="WARNING")

    yield messages

    logger.remove(handler_id)
