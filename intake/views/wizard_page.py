from __future__ import annotations

from collections.abc import Callable

from services.ticket_form import TicketForm
from services.wizard import WizardController
from utils.constants import (
    PRIORITY_LEVELS,
    TICKET_TYPES,
    WIZARD_STEP_CONFIRMATION,
    WIZARD_STEP_CONTACT,
    WIZARD_STEP_TICKET,
)
from utils.labels import priority_level_label, size_in_mb, ticket_type_label
from views.components import escape, message_banner, page, post_button

WIZARD_PATH = "/solicitud"


def _step_indicator(step: str) -> str:
    contact_class = "active" if step == WIZARD_STEP_CONTACT else "completed"
    ticket_class = "active" if step == WIZARD_STEP_TICKET else ""
    return (
        "<div class='step-indicator'>"
        f"<div class='step {contact_class}'><div class='step-number'>1</div>"
        "<div class='step-label'>Informacion de contacto</div></div>"
        "<div class='step-line'></div>"
        f"<div class='step {ticket_class}'><div class='step-number'>2</div>"
        "<div class='step-label'>Crear Solicitud</div></div>"
        "</div>"
    )


def _contact_form(wizard: WizardController) -> str:
    form = wizard.contact_form
    label = "Creando..." if form.busy else "Crear solicitud"
    disabled = " disabled" if form.busy else ""
    return (
        "<div class='form-container'><h2>Informacion de contacto</h2>"
        f"<form method='post' action='{WIZARD_PATH}/contacto'>"
        "<div class='form-group'><label>Nombre <span class='required'>*</span></label>"
        f"<input type='text' name='nombre' value='{escape(form.name)}' required placeholder='Ej: Juan Pérez'></div>"
        "<div class='form-group'><label>Correo Electrónico <span class='required'>*</span></label>"
        f"<input type='email' name='correo' value='{escape(form.email)}' required "
        "placeholder='Ej: juan@example.com'></div>"
        "<div class='form-group'><label>Teléfono</label>"
        f"<input type='text' name='telefono' value='{escape(form.phone)}' placeholder='Ej: 123456789'></div>"
        f"<button type='submit' class='btn-primary'{disabled}>{label}</button>"
        "</form></div>"
    )


def _options(values: tuple[str, ...], selected: str, label: Callable[[str], str]) -> str:
    return "".join(
        f"<option value='{escape(value)}'{' selected' if value == selected else ''}>{escape(label(value))}</option>"
        for value in values
    )


def _attachment_list(form: TicketForm) -> str:
    if not len(form.attachments):
        return ""
    rows = "".join(
        "<div class='archivo-item'>"
        f"<span class='archivo-nombre'>{escape(item.name)}</span>"
        f"<span class='archivo-tamano'>{size_in_mb(item.size_bytes)}</span>"
        f"<button type='submit' formaction='{WIZARD_PATH}/adjuntos/{index}/eliminar' formnovalidate "
        "class='btn-remove-file'>✕</button>"
        "</div>"
        for index, item in enumerate(form.attachments)
    )
    return f"<div class='archivos-list'>{rows}</div>"


def _ticket_form(wizard: WizardController, accept: str) -> str:
    # One multipart form: every button posts the current draft fields so no edit is lost.
    form = wizard.ticket_form
    if form is None:
        return ""
    identity = form.identity
    draft = form.draft
    phone = f"<span class='usuario-phone'>Tel: {escape(identity.phone)}</span>" if identity.phone else ""
    label = "Creando..." if form.busy else "Crear Solicitud"
    disabled = " disabled" if form.busy else ""
    return (
        "<div class='form-container'><h2>Crear Solicitud</h2>"
        f"<form method='post' action='{WIZARD_PATH}/enviar' enctype='multipart/form-data'>"
        "<div class='form-group'><label>Usuario <span class='required'>*</span></label>"
        f"<div class='usuario-info'><strong>{escape(identity.name)}</strong> "
        f"<span class='usuario-email'>{escape(identity.email)}</span> {phone}</div></div>"
        "<div class='form-group'><label>Tipo de Solicitud <span class='required'>*</span></label>"
        f"<select name='tipo' required>{_options(TICKET_TYPES, draft.ticket_type, ticket_type_label)}</select></div>"
        "<div class='form-group'><label>Nivel de Prioridad <span class='required'>*</span></label>"
        f"<select name='nivelPrioridad' required>"
        f"{_options(PRIORITY_LEVELS, draft.priority_level, priority_level_label)}</select>"
        "<small class='form-hint'>Selecciona el nivel de prioridad de la solicitud</small></div>"
        "<div class='form-group'><label>Descripción</label>"
        "<textarea name='descripcion' rows='4' placeholder='Describe el problema o solicitud...'>"
        f"{escape(draft.description)}</textarea></div>"
        "<div class='form-group'><label>Archivos Adjuntos</label>"
        f"<input type='file' name='archivos' multiple accept='{escape(accept)}' class='file-input'>"
        "<small class='form-hint'>Máximo 10MB por archivo. "
        "Formatos permitidos: imágenes, PDF, Word, Excel, texto</small>"
        f"<button type='submit' formaction='{WIZARD_PATH}/adjuntos' class='btn-secondary'>Adjuntar</button>"
        f"{_attachment_list(form)}</div>"
        "<div class='button-group'>"
        f"<button type='submit' formaction='{WIZARD_PATH}/volver' formnovalidate class='btn-secondary'>"
        "← Volver</button>"
        f"<button type='submit' class='btn-primary'{disabled}>{label}</button>"
        "</div></form></div>"
    )


def _confirmation() -> str:
    return (
        "<div class='gracias-container'><div class='gracias-content'>"
        "<div class='gracias-icon'>✓</div><h2>¡Gracias!</h2>"
        "<p class='gracias-message'>Tu solicitud ha sido creada exitosamente.<br>"
        "Nos pondremos en contacto contigo pronto.</p>"
        + post_button(f"{WIZARD_PATH}/nueva", "Crear Nueva Solicitud")
        + "</div></div>"
    )


def render_wizard_page(wizard: WizardController, *, accept: str) -> str:
    parts = [
        "<div class='header-section'><div><h1>Sistema de Gestión de Solicitudes</h1>"
        "<p class='subtitle'>gestiona solicitudes con priorización automática</p></div>"
        "<a href='/tickets' class='btn-view-tickets'>Ver Tickets</a></div>",
        message_banner(wizard.message),
    ]
    if wizard.step != WIZARD_STEP_CONFIRMATION:
        parts.append(_step_indicator(wizard.step))
    if wizard.step == WIZARD_STEP_CONTACT:
        parts.append(_contact_form(wizard))
    elif wizard.step == WIZARD_STEP_TICKET:
        parts.append(_ticket_form(wizard, accept))
    else:
        parts.append(_confirmation())

    refresh = wizard.config.wizard.advance_delay_seconds if wizard.advance_pending else None
    return page("Crear Solicitud", "".join(parts), refresh_seconds=refresh)
