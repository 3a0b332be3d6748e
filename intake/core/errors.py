from __future__ import annotations

from dataclasses import dataclass

CONNECTION_ERROR_LABEL = "Error de conexión: "


class IntakeError(RuntimeError):
    user_message: str = "Ocurrió un error inesperado."

    def __str__(self) -> str:
        return self.user_message


@dataclass(slots=True)
class ValidationError(IntakeError):
    user_message: str = "Los datos ingresados no son válidos."


@dataclass(slots=True)
class RequestError(IntakeError):
    user_message: str = "El servidor rechazó la solicitud."
    status: int | None = None


@dataclass(slots=True)
class TransportError(IntakeError):
    user_message: str = CONNECTION_ERROR_LABEL + "Unknown error"


@dataclass(slots=True)
class FormBusyError(IntakeError):
    user_message: str = "Ya hay un envío en curso. Espera a que termine."


@dataclass(slots=True)
class WizardStateError(IntakeError):
    user_message: str = "Esta acción no está disponible en el paso actual."


@dataclass(slots=True)
class GenerationError(IntakeError):
    user_message: str = "Error al generar tickets de prueba."
    completed_requests: int = 0


def transport_error(exc: BaseException) -> TransportError:
    detail = str(exc) or type(exc).__name__
    return TransportError(user_message=f"{CONNECTION_ERROR_LABEL}{detail}")
