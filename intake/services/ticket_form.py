from __future__ import annotations

import logging
from typing import Any

from core.errors import FormBusyError
from core.models import Identity, SubmissionDraft
from services.attachments import AttachmentSet
from services.backend_client import BackendClient

LOGGER = logging.getLogger(__name__)


class TicketForm:
    """Ticket details for one identity, plus the files that go with them.

    The attachment set is owned by the caller; after a successful submission
    the form drops only the files that request carried.
    """

    def __init__(self, client: BackendClient, identity: Identity, attachments: AttachmentSet) -> None:
        self.client = client
        self.identity = identity
        self.attachments = attachments
        self.draft = SubmissionDraft(identity_id=identity.id)
        self.busy = False

    def update(
        self,
        *,
        ticket_type: str | None = None,
        priority_level: str | None = None,
        description: str | None = None,
    ) -> None:
        self.draft.update(ticket_type=ticket_type, priority_level=priority_level, description=description)

    async def submit(self) -> dict[str, Any]:
        if self.busy:
            raise FormBusyError()
        self.busy = True
        sent = self.attachments.items
        try:
            created = await self.client.create_ticket(self.draft.to_payload(), sent)
        finally:
            self.busy = False
        LOGGER.info(
            "Ticket form submitted. user=%s type=%s level=%s",
            self.identity.id,
            self.draft.ticket_type,
            self.draft.priority_level,
        )
        self.draft.reset()
        self.attachments.discard(sent)
        return created
