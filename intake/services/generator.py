from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from core.config import GeneratorConfig
from core.errors import GenerationError, IntakeError
from services.backend_client import BackendClient
from utils.constants import PRIORITY_LEVELS, SYNTHETIC_AGE_SCHEDULE, SYNTHETIC_ROSTER, TICKET_TYPES
from utils.time import shift_back, to_local_iso

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class SyntheticEntry:
    name: str
    email: str
    phone: str
    ticket_type: str
    priority_level: str
    description: str
    created_at: str

    def ticket_payload(self, identity_id: int) -> dict[str, Any]:
        return {
            "tipo": self.ticket_type,
            "nivelPrioridad": self.priority_level,
            "usuarioId": identity_id,
            "descripcion": self.description,
        }


@dataclass(slots=True)
class GenerationReport:
    identities_created: int = 0
    tickets_created: int = 0

    @property
    def completed_requests(self) -> int:
        return self.identities_created + self.tickets_created


def synthetic_phone(index: int) -> str:
    return f"+34 600 {index:06d}"


class SyntheticTicketGenerator:
    """Seeds the backend with ten aged tickets to exercise priority ordering.

    The backend adds one priority point per 48 hours of age, so tickets spread
    from ten days to two hours old should come back ranked by level plus age.
    Requests go out one at a time so each timestamp lands on a known ticket.
    A failure stops the run; whatever was already created stays.
    """

    def __init__(
        self,
        client: BackendClient,
        config: GeneratorConfig,
        roster: list[dict[str, str]] | None = None,
        schedule: list[tuple[int, int]] | None = None,
    ) -> None:
        self.client = client
        self.config = config
        self.roster = roster if roster is not None else SYNTHETIC_ROSTER
        self.schedule = schedule if schedule is not None else SYNTHETIC_AGE_SCHEDULE
        if len(self.schedule) < len(self.roster):
            raise ValueError("Age schedule must cover every roster entry")

    @property
    def reference(self) -> datetime:
        return datetime.fromisoformat(self.config.reference_instant)

    @property
    def total_requests(self) -> int:
        return len(self.roster) * 2

    def plan(self) -> list[SyntheticEntry]:
        reference = self.reference
        entries: list[SyntheticEntry] = []
        for index, person in enumerate(self.roster):
            days, hours = self.schedule[index]
            created = shift_back(reference, days=days, hours=hours, minute_mark=self.config.minute_mark)
            entries.append(
                SyntheticEntry(
                    name=person["name"],
                    email=person["email"],
                    phone=synthetic_phone(index),
                    ticket_type=TICKET_TYPES[index % len(TICKET_TYPES)],
                    priority_level=PRIORITY_LEVELS[index % len(PRIORITY_LEVELS)],
                    description=person["description"],
                    created_at=to_local_iso(created),
                )
            )
        return entries

    async def run(self) -> GenerationReport:
        report = GenerationReport()
        for entry in self.plan():
            try:
                identity = await self.client.create_identity(
                    entry.name,
                    entry.email,
                    entry.phone,
                    fallback="Error al crear usuario de prueba",
                )
                report.identities_created += 1
                await self.client.create_synthetic_ticket(
                    entry.ticket_payload(identity.id),
                    entry.created_at,
                    fallback="Error al crear solicitud de prueba",
                )
                report.tickets_created += 1
            except IntakeError as exc:
                LOGGER.warning(
                    "Synthetic generation aborted after %s of %s requests: %s",
                    report.completed_requests,
                    self.total_requests,
                    exc.user_message,
                )
                raise GenerationError(
                    user_message=f"Error al generar tickets de prueba: {exc.user_message}",
                    completed_requests=report.completed_requests,
                ) from exc
        LOGGER.info("Synthetic generation finished. tickets=%s", report.tickets_created)
        return report
