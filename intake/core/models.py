from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from core.errors import ValidationError
from utils.constants import DEFAULT_PRIORITY_LEVEL, DEFAULT_TICKET_TYPE, PRIORITY_LEVELS, TICKET_TYPES


@dataclass(slots=True, frozen=True)
class Identity:
    id: int
    name: str
    email: str
    phone: str | None = None

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> Identity:
        return cls(
            id=int(payload["id"]),
            name=str(payload.get("nombre", "")),
            email=str(payload.get("correo", "")),
            phone=str(payload["telefono"]) if payload.get("telefono") else None,
        )


@dataclass(slots=True)
class AttachmentCandidate:
    name: str
    size_bytes: int
    content: bytes
    content_type: str | None = None


@dataclass(slots=True)
class SubmissionDraft:
    identity_id: int
    ticket_type: str = DEFAULT_TICKET_TYPE
    priority_level: str = DEFAULT_PRIORITY_LEVEL
    description: str = ""

    def update(
        self,
        *,
        ticket_type: str | None = None,
        priority_level: str | None = None,
        description: str | None = None,
    ) -> None:
        if ticket_type is not None:
            if ticket_type not in TICKET_TYPES:
                raise ValidationError(f"Tipo de solicitud desconocido: {ticket_type}")
            self.ticket_type = ticket_type
        if priority_level is not None:
            if priority_level not in PRIORITY_LEVELS:
                raise ValidationError(f"Nivel de prioridad desconocido: {priority_level}")
            self.priority_level = priority_level
        if description is not None:
            self.description = description

    def reset(self) -> None:
        self.ticket_type = DEFAULT_TICKET_TYPE
        self.priority_level = DEFAULT_PRIORITY_LEVEL
        self.description = ""

    def to_payload(self) -> dict[str, Any]:
        return {
            "tipo": self.ticket_type,
            "nivelPrioridad": self.priority_level,
            "usuarioId": self.identity_id,
            "descripcion": self.description or None,
        }


@dataclass(slots=True, frozen=True)
class IdentitySummary:
    id: int
    name: str
    email: str


@dataclass(slots=True, frozen=True)
class TicketAttachment:
    id: int
    original_name: str
    url: str


@dataclass(slots=True, frozen=True)
class Ticket:
    id: int
    ticket_type: str
    priority_level: str
    created_at: str
    identity_summary: IdentitySummary
    computed_priority: float | None = None
    description: str | None = None
    attachments: tuple[TicketAttachment, ...] = field(default_factory=tuple)

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> Ticket:
        user = dict(payload.get("usuario") or {})
        computed = payload.get("prioridadCalculada")
        return cls(
            id=int(payload["id"]),
            ticket_type=str(payload.get("tipo", "")),
            priority_level=str(payload.get("nivelPrioridad", "")),
            created_at=str(payload.get("fechaCreacion", "")),
            identity_summary=IdentitySummary(
                id=int(user.get("id", 0)),
                name=str(user.get("nombre", "")),
                email=str(user.get("correo", "")),
            ),
            computed_priority=computed if isinstance(computed, (int, float)) else None,
            description=payload.get("descripcion") or None,
            attachments=tuple(
                TicketAttachment(
                    id=int(row.get("id", 0)),
                    original_name=str(row.get("nombreOriginal", "")),
                    url=str(row.get("url", "")),
                )
                for row in list(payload.get("archivos") or [])
            ),
        )
