"""
Configuración centralizada del proyecto usando Pydantic Settings.

Este módulo maneja las variables de entorno del optimizador de metas
y expone los umbrales del motor de cálculo como estructuras con nombre,
para poder ajustarlos y testearlos sin tocar los algoritmos.
"""

from decimal import Decimal
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class RiskBand(BaseModel):
    """
    Banda de riesgo según horizonte restante.

    Una banda aplica cuando los meses restantes son >= `min_months`.
    Dentro de la banda el riesgo es LOW si gap% < `low_below`,
    MEDIUM si gap% < `medium_below` y HIGH en otro caso.
    """

    min_months: int = Field(..., ge=0, description="Meses restantes a partir de los cuales aplica")
    low_below: float = Field(..., description="Gap % por debajo del cual el riesgo es LOW")
    medium_below: float = Field(..., description="Gap % por debajo del cual el riesgo es MEDIUM")


class OptimizerSettings(BaseModel):
    """Umbrales y pesos del motor de optimización de metas."""

    # === Capital ===
    fallback_capital: Decimal = Field(
        default=Decimal("25000"),
        description="Capital usado cuando la valuación del portafolio no está disponible",
        ge=0,
    )

    # === Proyección ===
    projection_horizon_months: int = Field(
        default=600,
        description="Máximo de meses a simular (50 años)",
        ge=1,
    )
    days_per_month: int = Field(
        default=30,
        description="Días por mes usados para convertir fechas a meses",
        ge=1,
    )
    historical_volatility: float = Field(
        default=0.15,
        description="Volatilidad histórica anualizada de referencia",
    )

    # === Riesgo ===
    # Ordenadas de mayor a menor horizonte; la primera que aplique gana.
    # Sin fecha objetivo se usa siempre la primera banda.
    risk_bands: list[RiskBand] = Field(
        default_factory=lambda: [
            RiskBand(min_months=121, low_below=20, medium_below=50),
            RiskBand(min_months=61, low_below=15, medium_below=40),
            RiskBand(min_months=0, low_below=10, medium_below=30),
        ],
        description="Bandas de riesgo por horizonte (más de 10 años, 5-10 años, menos de 5)",
    )

    # === Score agregado ===
    score_base: float = Field(default=50, description="Score inicial")
    score_small_gap_threshold: float = Field(default=20, description="Gap % considerado pequeño")
    score_large_gap_threshold: float = Field(default=60, description="Gap % considerado grande")
    score_gap_adjustment: float = Field(default=15, description="Ajuste por tamaño del gap")
    score_risk_adjustment: float = Field(default=10, description="Ajuste por nivel de riesgo")
    score_per_strategy: float = Field(default=5, description="Puntos por estrategia")
    score_strategies_cap: float = Field(default=20, description="Máximo por estrategias")
    score_per_active_plan: float = Field(default=5, description="Puntos por plan activo")
    score_active_plans_cap: float = Field(default=10, description="Máximo por planes activos")
    score_milestones_weight: float = Field(default=20, description="Peso del progreso en hitos")

    max_next_actions: int = Field(
        default=5,
        description="Máximo de acciones recomendadas en el resumen",
        ge=1,
    )

    @field_validator("risk_bands")
    @classmethod
    def sort_risk_bands(cls, bands: list[RiskBand]) -> list[RiskBand]:
        """Ordena las bandas de mayor a menor horizonte."""
        if not bands:
            raise ValueError("Debe existir al menos una banda de riesgo")
        return sorted(bands, key=lambda band: band.min_months, reverse=True)


Environment = Literal["development", "production", "testing"]


class Settings(BaseSettings):
    """
    Configuración del optimizador.

    Se lee de variables de entorno o `.env`. Los umbrales del motor se
    anidan bajo `OPTIMIZER__*` (ej: `OPTIMIZER__FALLBACK_CAPITAL=40000`).
    """

    # === Base de datos ===
    database_url: str | None = Field(
        default=None,
        description="URL de SQLAlchemy; si falta se arma con los campos postgres_*",
    )
    postgres_host: str = Field(default="localhost")
    postgres_port: int = Field(default=5432, ge=1, le=65535)
    postgres_user: str = Field(default="optimizer")
    postgres_password: str = Field(default="optimizer_dev")
    postgres_db: str = Field(default="goal_optimizer")

    # === Entorno y logging ===
    environment: Environment = Field(
        default="development",
        description="development (consola legible), production (JSON) o testing (solo warnings)",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(default="INFO")
    log_rotation: str = Field(default="10 MB", description="Umbral de rotación de loguru")
    log_retention: str = Field(default="1 month", description="Retención de archivos rotados")
    logs_directory: Path = Field(default=Path("logs"))

    # === Motor de optimización ===
    optimizer: OptimizerSettings = Field(default_factory=OptimizerSettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    def get_database_url(self) -> str:
        """`database_url` si está definida; si no, la URL de PostgreSQL con psycopg."""
        if self.database_url:
            return self.database_url
        return (
            f"postgresql+psycopg://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    def is_development(self) -> bool:
        return self.environment == "development"

    def is_production(self) -> bool:
        return self.environment == "production"

    def is_testing(self) -> bool:
        return self.environment == "testing"


@lru_cache
def get_settings() -> Settings:
    """Settings cacheadas (una lectura del entorno por proceso)."""
    return Settings()


settings = get_settings()
