"""
Logging del optimizador con Loguru.

Sinks según el entorno:
- development: consola colorizada + archivos
- production: JSON por línea en stdout + archivos
- testing: solo warnings a stderr

Los archivos rotan por tamaño. El log de auditoría recibe únicamente
los registros emitidos con `log_optimizer_event`.
"""

import json
from pathlib import Path
import sys
from typing import TYPE_CHECKING, Any

from loguru import logger


if TYPE_CHECKING:
    from loguru import Logger, Record

from goal_optimizer.config.settings import settings


SERVICE_NAME = "goal-optimizer"

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{extra[name]}</cyan> | "
    "<level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{line} | {message}"
AUDIT_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {extra[optimizer_event]: <22} | {message}"

# Eventos de auditoría se guardan más tiempo que el log general
AUDIT_RETENTION = "6 months"


def _is_audit_record(record: "Record") -> bool:
    return "optimizer_event" in record["extra"]


def format_json_record(record: "Record") -> str:
    """
    Convierte un record de loguru en una línea JSON.

    Los extras (goal_id, optimizer_event, name) se copian al nivel raíz
    para poder filtrar por meta en el agregador de logs.
    """
    payload: dict[str, Any] = {
        "ts": record["time"].isoformat(),
        "level": record["level"].name,
        "service": SERVICE_NAME,
        "logger": record["extra"].get("name", record["name"]),
        "msg": record["message"],
    }
    payload.update({k: v for k, v in record["extra"].items() if k != "name"})

    exception = record["exception"]
    if exception is not None and exception.type is not None:
        payload["error"] = {"type": exception.type.__name__, "message": str(exception.value)}

    return json.dumps(payload, default=str, ensure_ascii=False)


def _stdout_json_sink(message: Any) -> None:
    sys.stdout.write(format_json_record(message.record) + "\n")
    sys.stdout.flush()


def _add_file_sinks(logs_dir: Path) -> None:
    logs_dir.mkdir(parents=True, exist_ok=True)

    common: dict[str, Any] = {
        "rotation": settings.log_rotation,
        "compression": "zip",
        "encoding": "utf-8",
    }

    logger.add(
        logs_dir / "goal_optimizer.log",
        format=FILE_FORMAT,
        level=settings.log_level,
        retention=settings.log_retention,
        **common,
    )
    logger.add(
        logs_dir / "errors.log",
        format=FILE_FORMAT + "\n{exception}",
        level="ERROR",
        retention=settings.log_retention,
        backtrace=True,
        **common,
    )
    logger.add(
        logs_dir / "optimizer_audit.log",
        format=AUDIT_FORMAT,
        level="INFO",
        retention=AUDIT_RETENTION,
        filter=_is_audit_record,
        **common,
    )


def setup_logging() -> None:
    """Reemplaza los handlers de loguru según el entorno actual."""
    logger.remove()
    logger.configure(extra={"name": "goal_optimizer"})

    if settings.is_testing():
        logger.add(sys.stderr, level="WARNING", backtrace=False, diagnose=False)
        return

    if settings.is_development():
        logger.add(sys.stdout, format=CONSOLE_FORMAT, level=settings.log_level, colorize=True)
    else:
        logger.add(_stdout_json_sink, level=settings.log_level, diagnose=False)

    _add_file_sinks(Path(settings.logs_directory))

    logger.debug(f"🔧 Logging listo ({settings.environment}, nivel {settings.log_level})")


def get_logger(name: str) -> "Logger":
    """
    Logger de loguru ligado al nombre del módulo.

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("Análisis de gap guardado")
    """
    return logger.bind(name=name)


def log_optimizer_event(event: str, goal_id: str, details: str = "") -> None:
    """
    Registra un evento del optimizador en el log de auditoría.

    Args:
        event: Tipo de evento (GAP_ANALYSIS, PLANS_GENERATED, PLAN_ACTIVATED, ...)
        goal_id: ID de la meta afectada
        details: Resumen del resultado
    """
    logger.bind(optimizer_event=event, goal_id=goal_id).info(f"meta={goal_id} {details}".rstrip())


setup_logging()

__all__ = ["get_logger", "log_optimizer_event", "logger", "setup_logging"]
