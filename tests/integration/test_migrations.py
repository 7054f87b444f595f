"""
Tests de integración para las migraciones de Alembic.

Aplican las revisiones sobre un SQLite en archivo y comparan el esquema
resultante con `Base.metadata`.
"""

from pathlib import Path

import pytest
from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect

import goal_optimizer.models  # noqa: F401
from goal_optimizer.core.database import Base


ALEMBIC_DIR = Path(__file__).resolve().parents[2] / "alembic"


@pytest.fixture
def alembic_config(tmp_path: Path) -> Config:
    config = Config()
    config.set_main_option("script_location", str(ALEMBIC_DIR))
    config.set_main_option("sqlalchemy.url", f"sqlite:///{tmp_path / 'migraciones.db'}")
    return config


def test_upgrade_creates_model_tables(alembic_config: Config) -> None:
    """Después de upgrade head existen las mismas tablas y columnas que en los modelos."""
    command.upgrade(alembic_config, "head")

    engine = create_engine(alembic_config.get_main_option("sqlalchemy.url"))
    inspector = inspect(engine)

    assert set(inspector.get_table_names()) - {"alembic_version"} == set(Base.metadata.tables)
    for name, table in Base.metadata.tables.items():
        columns = {c["name"] for c in inspector.get_columns(name)}
        assert columns == set(table.columns.keys()), name
    engine.dispose()


def test_percent_columns_are_wide(alembic_config: Config) -> None:
    """gap_percentage y deviation_from_plan se crean como NUMERIC(20, 4)."""
    command.upgrade(alembic_config, "head")

    engine = create_engine(alembic_config.get_main_option("sqlalchemy.url"))
    columns = {c["name"]: c["type"] for c in inspect(engine).get_columns("goal_gap_analysis")}
    engine.dispose()

    for name in ("gap_percentage", "deviation_from_plan"):
        assert (columns[name].precision, columns[name].scale) == (20, 4)


def test_downgrade_drops_tables(alembic_config: Config) -> None:
    """Downgrade a base deja solo la tabla de versiones."""
    command.upgrade(alembic_config, "head")
    command.downgrade(alembic_config, "base")

    engine = create_engine(alembic_config.get_main_option("sqlalchemy.url"))
    assert set(inspect(engine).get_table_names()) <= {"alembic_version"}
    engine.dispose()
