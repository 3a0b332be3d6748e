from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Sequence
from datetime import datetime
from typing import Any

import aiohttp

from core.config import BackendConfig
from core.errors import RequestError, transport_error
from core.models import AttachmentCandidate, Identity, Ticket
from utils.time import to_local_iso

LOGGER = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"


class BackendClient:
    """Thin async client for the request-intake backend.

    Every call raises ``RequestError`` for a non-2xx answer (using the backend's
    ``message`` field when it sends one) and ``TransportError`` when the backend
    cannot be reached at all.
    """

    def __init__(self, config: BackendConfig, session: aiohttp.ClientSession | None = None) -> None:
        self.config = config
        self.base_url = config.base_url.rstrip("/")
        self._session = session
        self._owns_session = session is None

    async def start(self) -> None:
        if self._session is None:
            timeout = aiohttp.ClientTimeout(total=self.config.timeout_seconds)
            self._session = aiohttp.ClientSession(timeout=timeout)
            self._owns_session = True

    async def close(self) -> None:
        if self._session is not None and self._owns_session:
            await self._session.close()
        self._session = None

    @property
    def session(self) -> aiohttp.ClientSession:
        if self._session is None:
            raise RuntimeError("BackendClient.start() must be awaited before issuing requests")
        return self._session

    def attachment_url(self, path: str) -> str:
        if path.startswith(("http://", "https://")):
            return path
        return f"{self.base_url}{path}"

    async def _request(self, method: str, path: str, *, fallback: str, **kwargs: Any) -> Any:
        url = f"{self.base_url}{path}"
        try:
            async with self.session.request(method, url, **kwargs) as response:
                raw = await response.text()
                status = response.status
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            LOGGER.warning(
                "Backend unreachable. %s %s error=%r", method, path, exc, extra={"backend_path": path}
            )
            raise transport_error(exc) from exc

        try:
            data = json.loads(raw) if raw else None
        except ValueError:
            data = None

        if not 200 <= status < 300:
            message = data.get("message") if isinstance(data, dict) else None
            LOGGER.warning(
                "Backend rejected request. %s %s -> %s",
                method,
                path,
                status,
                extra={"backend_path": path, "status": status},
            )
            raise RequestError(user_message=str(message) if message else fallback, status=status)

        if raw and data is None:
            LOGGER.warning(
                "Backend sent a non-JSON body. %s %s -> %s",
                method,
                path,
                status,
                extra={"backend_path": path, "status": status},
            )
            raise RequestError(user_message=fallback, status=status)
        return data

    async def create_identity(
        self,
        name: str,
        email: str,
        phone: str | None = None,
        *,
        fallback: str = "Error al crear usuario",
    ) -> Identity:
        body: dict[str, Any] = {"nombre": name, "correo": email}
        if phone:
            body["telefono"] = phone
        data = await self._request("POST", "/usuarios", json=body, fallback=fallback)
        if not isinstance(data, dict) or "id" not in data:
            raise RequestError(user_message=fallback)
        identity = Identity.from_payload(data)
        LOGGER.info("Identity created. id=%s", identity.id)
        return identity

    @staticmethod
    def build_ticket_form(payload: dict[str, Any], attachments: Sequence[AttachmentCandidate]) -> aiohttp.FormData:
        form = aiohttp.FormData()
        form.add_field(
            "solicitud",
            json.dumps(payload, ensure_ascii=False),
            content_type="application/json",
            filename="solicitud.json",
        )
        for attachment in attachments:
            form.add_field(
                "archivos",
                attachment.content,
                content_type=attachment.content_type or DEFAULT_CONTENT_TYPE,
                filename=attachment.name,
            )
        return form

    async def create_ticket(
        self,
        payload: dict[str, Any],
        attachments: Sequence[AttachmentCandidate] = (),
        *,
        fallback: str = "Error al crear solicitud",
    ) -> dict[str, Any]:
        # aiohttp writes the multipart Content-Type (with boundary) itself.
        form = self.build_ticket_form(payload, attachments)
        data = await self._request("POST", "/solicitudes", data=form, fallback=fallback)
        LOGGER.info(
            "Ticket submitted. user=%s attachments=%s",
            payload.get("usuarioId"),
            len(attachments),
        )
        return data if isinstance(data, dict) else {}

    async def create_synthetic_ticket(
        self,
        payload: dict[str, Any],
        created_at: datetime | str,
        *,
        fallback: str = "Error al crear solicitud de prueba",
    ) -> dict[str, Any]:
        stamp = created_at if isinstance(created_at, str) else to_local_iso(created_at)
        data = await self._request(
            "POST",
            "/solicitudes/prueba",
            params={"fechaCreacion": stamp},
            json=payload,
            fallback=fallback,
        )
        return data if isinstance(data, dict) else {}

    async def list_ordered_tickets(self, *, fallback: str = "Error al cargar tickets") -> list[Ticket]:
        data = await self._request("GET", "/solicitudes/ordenadas", fallback=fallback)
        if not isinstance(data, list):
            raise RequestError(user_message=fallback)
        try:
            return [Ticket.from_payload(row) for row in data]
        except (KeyError, TypeError, ValueError) as exc:
            LOGGER.warning("Backend sent a malformed ticket list. error=%r", exc)
            raise RequestError(user_message=fallback) from exc
