"""
Excepciones del optimizador de metas.

Cada excepción lleva un código legible por máquina (`META_NOT_FOUND`,
`GAP_ANALYSIS_REQUIRED`, `INVALID_PLAN_NAME`, ...) y detalles opcionales,
para que una capa HTTP pueda armar la respuesta sin parsear mensajes.
El núcleo no reintenta ni traduce errores: se propagan al llamador.
"""

from typing import Any, ClassVar


class GoalOptimizerError(Exception):
    """Excepción base del optimizador."""

    default_code: ClassVar[str] = "GOAL_OPTIMIZER_ERROR"

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.code = code or self.default_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Representación serializable (code, message, details)."""
        return {"code": self.code, "message": self.message, "details": self.details}


class NotFoundError(GoalOptimizerError):
    """
    Meta, estrategia, plan o hito inexistente.

    El código se deriva del recurso: `NotFoundError("Meta", id)` → `META_NOT_FOUND`.
    """

    def __init__(self, resource: str, resource_id: str | None = None) -> None:
        self.resource = resource
        self.resource_id = resource_id

        message = f"{resource} '{resource_id}' no existe" if resource_id else f"{resource} no existe"
        slug = "_".join(resource.upper().split())
        details = {"resource_id": resource_id} if resource_id else None

        super().__init__(message, code=f"{slug}_NOT_FOUND", details=details)


class PreconditionFailedError(GoalOptimizerError):
    """Falta un estado previo (análisis de gap, monto objetivo)."""

    default_code = "PRECONDITION_FAILED"


class ValidationError(GoalOptimizerError):
    """
    Datos del llamador inválidos.

    Con `field` el código es `INVALID_<FIELD>`; sin él, `VALIDATION_ERROR`.
    """

    default_code = "VALIDATION_ERROR"

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.field = field
        super().__init__(
            message,
            code=f"INVALID_{field.upper()}" if field else None,
            details=details,
        )


__all__ = [
    "GoalOptimizerError",
    "NotFoundError",
    "PreconditionFailedError",
    "ValidationError",
]
