"""Módulo core con funcionalidades fundamentales del optimizador."""

from goal_optimizer.core.database import Base, get_session, init_db
from goal_optimizer.core.exceptions import (
    GoalOptimizerError,
    NotFoundError,
    PreconditionFailedError,
    ValidationError,
)
from goal_optimizer.core.logging import get_logger, log_optimizer_event


__all__ = [
    # Database
    "Base",
    "get_session",
    "init_db",
    # Exceptions
    "GoalOptimizerError",
    "NotFoundError",
    "PreconditionFailedError",
    "ValidationError",
    # Logging
    "get_logger",
    "log_optimizer_event",
]
