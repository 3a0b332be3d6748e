from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from core.config import AppConfig, WorkspaceConfig
from core.errors import GenerationError, RequestError, TransportError
from core.models import Ticket
from services.generator import GenerationReport
from services.workspace import TicketWorkspace
from utils.constants import LOAD_STATE_ERRORED, LOAD_STATE_IDLE, LOAD_STATE_LOADED
from views.workspace_page import render_workspace_page


def _ticket(ticket_id: int, level: str = "MEDIA", computed: float | None = None) -> Ticket:
    return Ticket.from_payload(
        {
            "id": ticket_id,
            "tipo": "INCIDENTE",
            "nivelPrioridad": level,
            "prioridadCalculada": computed,
            "fechaCreacion": "2026-01-13T10:35:00",
            "descripcion": f"ticket {ticket_id}",
            "usuario": {"id": 1, "nombre": "Juan Pérez", "correo": "juan@example.com"},
            "archivos": [{"id": 5, "nombreOriginal": "informe.pdf", "url": "/archivos/5"}],
        }
    )


def _client(tickets: list[Ticket]) -> MagicMock:
    client = MagicMock()
    client.list_ordered_tickets = AsyncMock(return_value=tickets)
    client.attachment_url = lambda path: f"http://backend{path}"
    return client


@pytest.mark.asyncio
async def test_load_keeps_backend_order_and_starts_collapsed() -> None:
    workspace = TicketWorkspace(AppConfig(), _client([_ticket(2, computed=5), _ticket(1, computed=3)]))
    assert workspace.state == LOAD_STATE_IDLE

    assert await workspace.load() is True

    assert workspace.state == LOAD_STATE_LOADED
    assert [ticket.id for ticket in workspace.tickets] == [2, 1]
    assert not workspace.is_expanded(2)
    assert not workspace.is_expanded(1)

    html = render_workspace_page(workspace, attachment_url=workspace.client.attachment_url)
    assert html.index("ticket-2") < html.index("ticket-1")
    assert "Total: 5" in html
    assert "informe.pdf" not in html


@pytest.mark.asyncio
async def test_toggle_twice_restores_and_ids_are_independent() -> None:
    workspace = TicketWorkspace(AppConfig(), _client([_ticket(2), _ticket(1)]))
    await workspace.load()

    assert workspace.toggle(2) is True
    assert workspace.is_expanded(2)
    assert not workspace.is_expanded(1)

    workspace.toggle(1)
    assert workspace.toggle(2) is False
    assert not workspace.is_expanded(2)
    assert workspace.is_expanded(1)

    html = render_workspace_page(workspace, attachment_url=workspace.client.attachment_url)
    assert "http://backend/archivos/5" in html
    assert "13 ene 2026, 10:35" in html


@pytest.mark.asyncio
async def test_refresh_preserves_expansion_for_surviving_ids() -> None:
    client = _client([_ticket(3), _ticket(2), _ticket(1)])
    workspace = TicketWorkspace(AppConfig(), client)
    await workspace.load()
    workspace.toggle(3)
    workspace.toggle(1)

    client.list_ordered_tickets = AsyncMock(return_value=[_ticket(1), _ticket(4)])
    await workspace.refresh()

    assert [ticket.id for ticket in workspace.tickets] == [1, 4]
    assert workspace.expanded_ids == frozenset({1})


@pytest.mark.asyncio
async def test_refresh_can_clear_expansion() -> None:
    config = AppConfig(workspace=WorkspaceConfig(preserve_expansion_on_reload=False))
    workspace = TicketWorkspace(config, _client([_ticket(1)]))
    await workspace.load()
    workspace.toggle(1)

    await workspace.refresh()

    assert workspace.expanded_ids == frozenset()


@pytest.mark.asyncio
async def test_load_failure_then_retry() -> None:
    client = _client([])
    client.list_ordered_tickets = AsyncMock(side_effect=RequestError(user_message="Error al cargar tickets"))
    workspace = TicketWorkspace(AppConfig(), client)

    assert await workspace.load() is False
    assert workspace.state == LOAD_STATE_ERRORED
    assert workspace.error == "Error al cargar los tickets: Error al cargar tickets"
    assert "Reintentar" in render_workspace_page(workspace, attachment_url=str)

    client.list_ordered_tickets = AsyncMock(return_value=[_ticket(1)])
    assert await workspace.retry() is True
    assert workspace.state == LOAD_STATE_LOADED
    assert workspace.error is None


@pytest.mark.asyncio
async def test_transport_failure_is_reported_with_connection_label() -> None:
    client = _client([])
    client.list_ordered_tickets = AsyncMock(side_effect=TransportError(user_message="Error de conexión: refused"))
    workspace = TicketWorkspace(AppConfig(), client)

    await workspace.load()

    assert workspace.error == "Error al cargar los tickets: Error de conexión: refused"


@pytest.mark.asyncio
async def test_generate_success_reloads_and_reports() -> None:
    client = _client([_ticket(1)])
    generator = MagicMock()
    generator.run = AsyncMock(return_value=GenerationReport(identities_created=10, tickets_created=10))
    workspace = TicketWorkspace(AppConfig(), client, generator)

    report = await workspace.generate_synthetic()

    assert report is not None and report.tickets_created == 10
    client.list_ordered_tickets.assert_awaited_once()
    assert workspace.state == LOAD_STATE_LOADED
    assert workspace.message is not None
    assert workspace.message.kind == "success"
    assert "10 tickets de prueba" in workspace.message.text
    assert workspace.generating is False


@pytest.mark.asyncio
async def test_generate_failure_uses_message_slot_without_reload() -> None:
    client = _client([])
    generator = MagicMock()
    generator.run = AsyncMock(
        side_effect=GenerationError(
            user_message="Error al generar tickets de prueba: Error al crear usuario de prueba",
            completed_requests=6,
        )
    )
    workspace = TicketWorkspace(AppConfig(), client, generator)

    assert await workspace.generate_synthetic() is None

    client.list_ordered_tickets.assert_not_awaited()
    assert workspace.message is not None
    assert workspace.message.kind == "error"
    assert workspace.message.text.startswith("Error al generar tickets de prueba")
    assert workspace.generating is False


@pytest.mark.asyncio
async def test_retry_only_reloads_after_a_failure() -> None:
    client = _client([_ticket(1)])
    workspace = TicketWorkspace(AppConfig(), client)
    await workspace.load()

    assert await workspace.retry() is True

    client.list_ordered_tickets.assert_awaited_once()
