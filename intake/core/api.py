from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, RedirectResponse, Response
from starlette.datastructures import FormData, UploadFile

from core.app import IntakeApp
from core.errors import IntakeError
from core.models import AttachmentCandidate
from services.sessions import BrowserSession
from services.wizard import WizardController
from utils.constants import LOAD_STATE_IDLE
from views.wizard_page import WIZARD_PATH, render_wizard_page
from views.workspace_page import WORKSPACE_PATH, render_workspace_page

LOGGER = logging.getLogger(__name__)

KEEP_LIST_PARAM = "mantener"
WORKSPACE_KEPT_PATH = f"{WORKSPACE_PATH}?{KEEP_LIST_PARAM}=1"


def _field(form: FormData, key: str) -> str | None:
    value = form.get(key)
    return value if isinstance(value, str) else None


async def _read_candidates(form: FormData) -> list[AttachmentCandidate]:
    candidates: list[AttachmentCandidate] = []
    for upload in form.getlist("archivos"):
        # Browsers send an empty, nameless part when no file was picked.
        if not isinstance(upload, UploadFile) or not upload.filename:
            continue
        content = await upload.read()
        candidates.append(
            AttachmentCandidate(
                name=upload.filename,
                size_bytes=len(content),
                content=content,
                content_type=upload.content_type,
            )
        )
    return candidates


def _apply_draft(wizard: WizardController, form: FormData) -> bool:
    return wizard.update_draft(
        ticket_type=_field(form, "tipo"),
        priority_level=_field(form, "nivelPrioridad"),
        description=_field(form, "descripcion"),
    )


def create_web_app(app: IntakeApp) -> FastAPI:
    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        await app.start()
        try:
            yield
        finally:
            await app.close()

    web = FastAPI(title="Request Intake", version="1.0.0", lifespan=lifespan)
    cookie_name = app.config.sessions.cookie_name

    async def _session(request: Request) -> BrowserSession:
        return await app.sessions.get_or_create(request.cookies.get(cookie_name))

    def _bind(response: Response, session: BrowserSession) -> Response:
        response.set_cookie(cookie_name, session.id, httponly=True, samesite="lax")
        return response

    def _redirect(path: str, session: BrowserSession) -> Response:
        return _bind(RedirectResponse(path, status_code=303), session)

    def _report(session: BrowserSession, exc: IntakeError) -> None:
        LOGGER.info(
            "Rejected browser action. session=%s reason=%s",
            session.id,
            exc.user_message,
            extra={"session": session.id},
        )
        session.wizard.messages.show("error", exc.user_message)

    @web.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @web.get("/")
    async def root() -> RedirectResponse:
        return RedirectResponse(WIZARD_PATH, status_code=303)

    @web.get(WIZARD_PATH, response_class=HTMLResponse)
    async def wizard_page(request: Request) -> Response:
        session = await _session(request)
        body = render_wizard_page(session.wizard, accept=app.config.attachments.accept)
        return _bind(HTMLResponse(body), session)

    @web.post(f"{WIZARD_PATH}/contacto")
    async def submit_contact(request: Request) -> Response:
        session = await _session(request)
        form = await request.form()
        try:
            await session.wizard.submit_contact(
                _field(form, "nombre") or "",
                _field(form, "correo") or "",
                _field(form, "telefono") or "",
            )
        except IntakeError as exc:
            _report(session, exc)
        return _redirect(WIZARD_PATH, session)

    @web.post(f"{WIZARD_PATH}/adjuntos")
    async def add_attachments(request: Request) -> Response:
        session = await _session(request)
        form = await request.form()
        try:
            if _apply_draft(session.wizard, form):
                candidates = await _read_candidates(form)
                if candidates:
                    session.wizard.add_attachments(candidates)
                else:
                    session.wizard.messages.show("info", "Selecciona al menos un archivo.")
        except IntakeError as exc:
            _report(session, exc)
        return _redirect(WIZARD_PATH, session)

    @web.post(f"{WIZARD_PATH}/adjuntos/{{index}}/eliminar")
    async def remove_attachment(index: int, request: Request) -> Response:
        session = await _session(request)
        form = await request.form()
        try:
            if _apply_draft(session.wizard, form):
                session.wizard.remove_attachment(index)
        except IntakeError as exc:
            _report(session, exc)
        return _redirect(WIZARD_PATH, session)

    @web.post(f"{WIZARD_PATH}/enviar")
    async def submit_ticket(request: Request) -> Response:
        session = await _session(request)
        form = await request.form()
        try:
            if not _apply_draft(session.wizard, form):
                return _redirect(WIZARD_PATH, session)
            candidates = await _read_candidates(form)
            if candidates and not session.wizard.add_attachments(candidates):
                return _redirect(WIZARD_PATH, session)
            await session.wizard.submit_ticket()
        except IntakeError as exc:
            _report(session, exc)
        return _redirect(WIZARD_PATH, session)

    @web.post(f"{WIZARD_PATH}/volver")
    async def back(request: Request) -> Response:
        session = await _session(request)
        try:
            session.wizard.back()
        except IntakeError as exc:
            _report(session, exc)
        return _redirect(WIZARD_PATH, session)

    @web.post(f"{WIZARD_PATH}/nueva")
    async def start_over(request: Request) -> Response:
        session = await _session(request)
        try:
            session.wizard.start_over()
        except IntakeError as exc:
            _report(session, exc)
        return _redirect(WIZARD_PATH, session)

    @web.get(WORKSPACE_PATH, response_class=HTMLResponse)
    async def workspace_page(request: Request) -> Response:
        session = await _session(request)
        # Entering the view fetches the list; the redirect after a workspace action keeps it.
        if KEEP_LIST_PARAM not in request.query_params or session.workspace.state == LOAD_STATE_IDLE:
            await session.workspace.load()
        body = render_workspace_page(session.workspace, attachment_url=app.client.attachment_url)
        return _bind(HTMLResponse(body), session)

    @web.post(f"{WORKSPACE_PATH}/actualizar")
    async def refresh(request: Request) -> Response:
        session = await _session(request)
        await session.workspace.refresh()
        return _redirect(WORKSPACE_KEPT_PATH, session)

    @web.post(f"{WORKSPACE_PATH}/reintentar")
    async def retry(request: Request) -> Response:
        session = await _session(request)
        await session.workspace.retry()
        return _redirect(WORKSPACE_KEPT_PATH, session)

    @web.post(f"{WORKSPACE_PATH}/generar")
    async def generate(request: Request) -> Response:
        session = await _session(request)
        await session.workspace.generate_synthetic()
        return _redirect(WORKSPACE_KEPT_PATH, session)

    @web.post(f"{WORKSPACE_PATH}/{{ticket_id}}/alternar")
    async def toggle(ticket_id: int, request: Request) -> Response:
        session = await _session(request)
        session.workspace.toggle(ticket_id)
        return _redirect(f"{WORKSPACE_KEPT_PATH}#ticket-{ticket_id}", session)

    return web
