"""
Engine, sesiones y metadata de SQLAlchemy para el optimizador.

La URL sale de `settings.get_database_url()`: PostgreSQL (psycopg) en
producción, cualquier URL de SQLAlchemy vía DATABASE_URL. Los servicios
reciben la sesión inyectada; este módulo solo la fabrica.
"""

from collections.abc import Generator
from contextlib import contextmanager
from typing import Any

from sqlalchemy import Engine, MetaData, create_engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from goal_optimizer.config.settings import settings
from goal_optimizer.core.logging import get_logger


logger = get_logger(__name__)

# Nombres estables para índices y constraints (migraciones reproducibles)
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    """Base declarativa de todos los modelos del optimizador."""

    metadata = MetaData(naming_convention=NAMING_CONVENTION)


def _engine_options(url: str) -> dict[str, Any]:
    if url.startswith("sqlite"):
        return {"echo": False}
    return {
        "echo": settings.is_development(),
        "pool_pre_ping": True,
        "pool_size": 5,
        "max_overflow": 10,
    }


def create_db_engine(database_url: str | None = None) -> Engine:
    """
    Crea un engine para la URL dada (la de settings por defecto).

    Args:
        database_url: URL alternativa, por ejemplo para scripts o tests

    Returns:
        Engine de SQLAlchemy
    """
    url = database_url or settings.get_database_url()
    dialect = url.split(":", 1)[0]
    logger.debug(f"🐘 Creando engine para {dialect}")
    return create_engine(url, **_engine_options(url))


engine = create_db_engine()

SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=True)


def get_db() -> Generator[Session, Any, None]:
    """Sesión por request, para frameworks con inyección de dependencias."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def get_session() -> Generator[Session, None, None]:
    """
    Sesión con rollback ante cualquier excepción del bloque.

    El commit lo hace cada operación del servicio.

    Example:
        >>> with get_session() as session:
        ...     GoalOptimizerService(session).perform_gap_analysis(goal_id)
    """
    session = SessionLocal()
    try:
        yield session
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def init_db(bind: Engine | None = None) -> None:
    """Crea las tablas del optimizador que no existan."""
    import goal_optimizer.models  # noqa: F401  (registra los modelos en la metadata)

    Base.metadata.create_all(bind=bind or engine)
    logger.info(f"Tablas listas: {', '.join(sorted(Base.metadata.tables))}")


def drop_db(bind: Engine | None = None) -> None:
    """
    Elimina las tablas del optimizador.

    Raises:
        RuntimeError: Si se ejecuta en producción
    """
    if settings.is_production():
        raise RuntimeError("drop_db no está permitido en producción")

    logger.warning("⚠️ Eliminando tablas del optimizador")
    Base.metadata.drop_all(bind=bind or engine)


__all__ = [
    "Base",
    "SessionLocal",
    "create_db_engine",
    "drop_db",
    "engine",
    "get_db",
    "get_session",
    "init_db",
]
