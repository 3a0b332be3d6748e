from __future__ import annotations

from collections.abc import Callable

from core.models import Ticket
from services.workspace import TicketWorkspace
from utils.constants import LOAD_STATE_ERRORED, LOAD_STATE_IDLE, LOAD_STATE_LOADING
from utils.labels import priority_level_class, priority_level_label, ticket_type_label
from utils.time import format_display_date
from views.components import escape, message_banner, page, post_button

WORKSPACE_PATH = "/tickets"


def _format_priority(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return f"{value:g}"


def _ticket_body(ticket: Ticket, attachment_url: Callable[[str], str]) -> str:
    parts = [
        "<div class='ticket-body'><div class='ticket-usuario'>"
        f"<strong>{escape(ticket.identity_summary.name)}</strong>"
        f"<span class='ticket-email'>{escape(ticket.identity_summary.email)}</span></div>"
    ]
    if ticket.description:
        parts.append(f"<div class='ticket-descripcion'><p>{escape(ticket.description)}</p></div>")
    if ticket.attachments:
        links = "".join(
            f"<li><a href='{escape(attachment_url(item.url))}' target='_blank' rel='noopener noreferrer'>"
            f"{escape(item.original_name)}</a></li>"
            for item in ticket.attachments
        )
        parts.append(f"<div class='ticket-archivos'><strong>Archivos adjuntos:</strong><ul>{links}</ul></div>")
    parts.append("<div class='ticket-footer'></div></div>")
    return "".join(parts)


def render_ticket_card(ticket: Ticket, *, expanded: bool, attachment_url: Callable[[str], str]) -> str:
    computed = ""
    if ticket.computed_priority is not None:
        computed = (
            f"<div class='badge-prioridad-calculada'>Total: {_format_priority(ticket.computed_priority)}</div>"
        )
    header = (
        f"<form method='post' action='{WORKSPACE_PATH}/{ticket.id}/alternar'>"
        "<button type='submit' class='ticket-header-clickable'>"
        "<span class='ticket-header-content'>"
        f"<span class='ticket-id'>#{ticket.id}</span>"
        f"<span class='badge-tipo badge-{escape(ticket.ticket_type.lower())}'>"
        f"{escape(ticket_type_label(ticket.ticket_type))}</span>"
        f"<span class='badge-prioridad {priority_level_class(ticket.priority_level)}'>"
        f"{escape(priority_level_label(ticket.priority_level))}</span>"
        f"<span class='badge-fecha-header'>{escape(format_display_date(ticket.created_at))}</span>"
        f"{computed}</span>"
        f"<span class='ticket-expand-icon'>{'▼' if expanded else '▶'}</span>"
        "</button></form>"
    )
    body = _ticket_body(ticket, attachment_url) if expanded else ""
    return f"<div class='ticket-card' id='ticket-{ticket.id}'>{header}{body}</div>"


def _ticket_list(workspace: TicketWorkspace, attachment_url: Callable[[str], str]) -> str:
    if not workspace.tickets:
        return (
            "<div class='empty-state'><p>No hay tickets creados aún.</p>"
            "<a href='/solicitud' class='btn-primary'>Crear Primer Ticket</a></div>"
        )
    cards = "".join(
        render_ticket_card(
            ticket,
            expanded=workspace.is_expanded(ticket.id),
            attachment_url=attachment_url,
        )
        for ticket in workspace.tickets
    )
    return f"<div class='tickets-list'>{cards}</div>"


def render_workspace_page(workspace: TicketWorkspace, *, attachment_url: Callable[[str], str]) -> str:
    parts = [
        "<div class='header-section'><div><h1>Gestión de Tickets</h1>"
        "<p class='subtitle'>Lista de tickets ordenados por prioridad</p></div>"
        "<a href='/solicitud' class='btn-view-tickets'>Crear Solicitud</a></div>",
        message_banner(workspace.message),
        "<div class='tickets-container'>",
    ]

    if workspace.state in {LOAD_STATE_IDLE, LOAD_STATE_LOADING}:
        parts.append("<div class='loading-message'>Cargando tickets...</div>")
    elif workspace.state == LOAD_STATE_ERRORED:
        parts.append(f"<div class='error-message'>{escape(workspace.error or '')}</div>")
        parts.append(post_button(f"{WORKSPACE_PATH}/reintentar", "Reintentar"))
    else:
        generate_label = "Generando..." if workspace.generating else "Generar Tickets de Prueba"
        parts.append(
            "<div class='tickets-header'><h2>Lista de Tickets</h2><div class='tickets-actions'>"
            + post_button(f"{WORKSPACE_PATH}/generar", generate_label, "btn-generate", disabled=workspace.generating)
            + post_button(f"{WORKSPACE_PATH}/actualizar", "Actualizar", "btn-secondary")
            + "<a href='/solicitud' class='btn-primary'>Crear Nuevo Ticket</a>"
            + "</div></div>"
        )
        parts.append(_ticket_list(workspace, attachment_url))

    parts.append("</div>")
    return page("Gestión de Tickets", "".join(parts))
