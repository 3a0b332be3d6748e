from __future__ import annotations

import logging

from core.config import AppConfig
from core.errors import FormBusyError, IntakeError
from core.models import Ticket
from services.backend_client import BackendClient
from services.generator import GenerationReport, SyntheticTicketGenerator
from services.messages import MessageSlot, StatusMessage
from utils.constants import LOAD_STATE_ERRORED, LOAD_STATE_IDLE, LOAD_STATE_LOADED, LOAD_STATE_LOADING

LOGGER = logging.getLogger(__name__)

LOAD_ERROR_PREFIX = "Error al cargar los tickets: "


class TicketWorkspace:
    def __init__(
        self,
        config: AppConfig,
        client: BackendClient,
        generator: SyntheticTicketGenerator | None = None,
    ) -> None:
        self.config = config
        self.client = client
        self.generator = generator or SyntheticTicketGenerator(client, config.generator)
        self.messages = MessageSlot(config.wizard.message_ttl_seconds)
        self.state = LOAD_STATE_IDLE
        self.tickets: list[Ticket] = []
        self.error: str | None = None
        self.generating = False
        self._expanded: set[int] = set()

    @property
    def message(self) -> StatusMessage | None:
        return self.messages.current

    @property
    def expanded_ids(self) -> frozenset[int]:
        return frozenset(self._expanded)

    async def load(self) -> bool:
        self.state = LOAD_STATE_LOADING
        self.error = None
        try:
            tickets = await self.client.list_ordered_tickets()
        except IntakeError as exc:
            LOGGER.warning("Ticket list failed to load: %s", exc.user_message)
            self.state = LOAD_STATE_ERRORED
            self.error = f"{LOAD_ERROR_PREFIX}{exc.user_message}"
            return False

        self.tickets = tickets
        if self.config.workspace.preserve_expansion_on_reload:
            present = {ticket.id for ticket in tickets}
            self._expanded &= present
        else:
            self._expanded.clear()
        self.state = LOAD_STATE_LOADED
        return True

    async def refresh(self) -> bool:
        return await self.load()

    async def retry(self) -> bool:
        if self.state != LOAD_STATE_ERRORED:
            return self.state == LOAD_STATE_LOADED
        return await self.load()

    def toggle(self, ticket_id: int) -> bool:
        if ticket_id in self._expanded:
            self._expanded.discard(ticket_id)
            return False
        self._expanded.add(ticket_id)
        return True

    def is_expanded(self, ticket_id: int) -> bool:
        return ticket_id in self._expanded

    async def generate_synthetic(self) -> GenerationReport | None:
        if self.generating:
            self.messages.show("error", FormBusyError().user_message)
            return None
        self.generating = True
        try:
            report = await self.generator.run()
        except IntakeError as exc:
            self.messages.show("error", exc.user_message)
            return None
        finally:
            self.generating = False

        await self.load()
        self.messages.show(
            "success",
            f"Se generaron {report.tickets_created} tickets de prueba exitosamente",
        )
        return report
