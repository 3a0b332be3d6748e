from __future__ import annotations

import logging

from core.config import AppConfig
from services.backend_client import BackendClient
from services.generator import SyntheticTicketGenerator
from services.sessions import BrowserSession, SessionStore
from services.wizard import WizardController
from services.workspace import TicketWorkspace

LOGGER = logging.getLogger(__name__)


class IntakeApp:
    """Owns the backend client and the per-browser sessions built on top of it."""

    def __init__(self, config: AppConfig, client: BackendClient | None = None) -> None:
        self.config = config
        self.client = client or BackendClient(config.backend)
        self.sessions = SessionStore(self._build_session, ttl_seconds=config.sessions.ttl_seconds)

    def _build_session(self, session_id: str) -> BrowserSession:
        generator = SyntheticTicketGenerator(self.client, self.config.generator)
        return BrowserSession(
            id=session_id,
            wizard=WizardController(self.config, self.client),
            workspace=TicketWorkspace(self.config, self.client, generator),
        )

    async def start(self) -> None:
        await self.client.start()
        LOGGER.info("Intake client ready. backend=%s", self.config.backend.base_url)

    async def close(self) -> None:
        await self.sessions.close()
        await self.client.close()
        LOGGER.info("Intake client stopped")
