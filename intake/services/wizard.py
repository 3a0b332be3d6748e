from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable

from core.config import AppConfig
from core.errors import FormBusyError, IntakeError, WizardStateError
from core.models import AttachmentCandidate, Identity
from services.attachments import AttachmentSet
from services.backend_client import BackendClient
from services.contact_form import ContactForm
from services.messages import MessageSlot, StatusMessage
from services.ticket_form import TicketForm
from utils.constants import WIZARD_STEP_CONFIRMATION, WIZARD_STEP_CONTACT, WIZARD_STEP_TICKET

LOGGER = logging.getLogger(__name__)

IDENTITY_CREATED_MESSAGE = "Usuario creado exitosamente!"


class WizardController:
    """Sequences contact capture, ticket creation and confirmation.

    ``contact -> ticket`` only happens once an identity exists, and it is
    delayed by ``advance_delay_seconds`` so the success message can be read.
    ``ticket -> confirmation`` only happens after a successful submission.
    Every error ends up in the single message slot; none of them leave the
    wizard unusable.
    """

    def __init__(self, config: AppConfig, client: BackendClient) -> None:
        self.config = config
        self.client = client
        self.messages = MessageSlot(config.wizard.message_ttl_seconds)
        self.contact_form = ContactForm(client)
        self.ticket_form: TicketForm | None = None
        self.identity: Identity | None = None
        self._step = WIZARD_STEP_CONTACT
        self._advance_handle: asyncio.TimerHandle | None = None

    @property
    def step(self) -> str:
        return self._step

    @property
    def message(self) -> StatusMessage | None:
        return self.messages.current

    @property
    def advance_pending(self) -> bool:
        return self._advance_handle is not None

    @property
    def busy(self) -> bool:
        if self.contact_form.busy:
            return True
        return self.ticket_form is not None and self.ticket_form.busy

    def _require_step(self, step: str) -> None:
        if self._step != step:
            raise WizardStateError()

    def _active_ticket_form(self) -> TicketForm:
        self._require_step(WIZARD_STEP_TICKET)
        if self.ticket_form is None:
            raise WizardStateError()
        return self.ticket_form

    def _report(self, exc: IntakeError) -> None:
        self.messages.show("error", exc.user_message)

    async def submit_contact(self, name: str, email: str, phone: str = "") -> Identity | None:
        self._require_step(WIZARD_STEP_CONTACT)
        self.contact_form.update(name=name, email=email, phone=phone)
        try:
            identity = await self.contact_form.submit()
        except IntakeError as exc:
            LOGGER.warning("Contact submission failed: %s", exc.user_message)
            self._report(exc)
            return None

        self.identity = identity
        self.messages.show("success", IDENTITY_CREATED_MESSAGE)
        self._schedule_advance()
        return identity

    def _schedule_advance(self) -> None:
        self._cancel_advance()
        delay = self.config.wizard.advance_delay_seconds
        if delay <= 0:
            self._advance_to_ticket()
            return
        loop = asyncio.get_running_loop()
        self._advance_handle = loop.call_later(delay, self._advance_to_ticket)

    def _cancel_advance(self) -> None:
        if self._advance_handle is not None:
            self._advance_handle.cancel()
            self._advance_handle = None

    def _advance_to_ticket(self) -> None:
        self._advance_handle = None
        if self._step != WIZARD_STEP_CONTACT or self.identity is None:
            return
        self.ticket_form = TicketForm(self.client, self.identity, AttachmentSet(self.config.attachments))
        self._step = WIZARD_STEP_TICKET
        LOGGER.debug("Wizard moved to ticket step. user=%s", self.identity.id)

    def update_draft(
        self,
        *,
        ticket_type: str | None = None,
        priority_level: str | None = None,
        description: str | None = None,
    ) -> bool:
        form = self._active_ticket_form()
        try:
            form.update(ticket_type=ticket_type, priority_level=priority_level, description=description)
        except IntakeError as exc:
            self._report(exc)
            return False
        return True

    def add_attachments(self, candidates: Iterable[AttachmentCandidate]) -> bool:
        form = self._active_ticket_form()
        try:
            form.attachments.add(candidates)
        except IntakeError as exc:
            self._report(exc)
            return False
        return True

    def remove_attachment(self, index: int) -> bool:
        form = self._active_ticket_form()
        try:
            form.attachments.remove(index)
        except IntakeError as exc:
            self._report(exc)
            return False
        return True

    async def submit_ticket(self) -> bool:
        form = self._active_ticket_form()
        try:
            await form.submit()
        except IntakeError as exc:
            LOGGER.warning("Ticket submission failed: %s", exc.user_message)
            self._report(exc)
            return False
        if self._step != WIZARD_STEP_TICKET or self.ticket_form is not form:
            LOGGER.info("Ticket accepted after the wizard left the ticket step. user=%s", form.identity.id)
            return False
        self._step = WIZARD_STEP_CONFIRMATION
        return True

    def back(self) -> None:
        self._require_step(WIZARD_STEP_TICKET)
        if self.busy:
            raise FormBusyError()
        self.ticket_form = None
        self._step = WIZARD_STEP_CONTACT

    def start_over(self) -> None:
        self._require_step(WIZARD_STEP_CONFIRMATION)
        self._cancel_advance()
        self.messages.clear()
        self.identity = None
        self.ticket_form = None
        self._step = WIZARD_STEP_CONTACT
