from __future__ import annotations

import json
from typing import Any

import pytest
from aiohttp import test_utils, web

from core.config import BackendConfig
from core.errors import RequestError, TransportError
from core.models import AttachmentCandidate
from services.backend_client import BackendClient


def _fake_backend(received: dict[str, Any]) -> web.Application:
    async def create_user(request: web.Request) -> web.Response:
        body = await request.json()
        received["usuario"] = body
        if body.get("correo") == "dup@example.com":
            return web.json_response({"message": "El correo ya existe"}, status=409)
        if body.get("correo") == "boom@example.com":
            return web.Response(status=500, text="<html>oops</html>")
        return web.json_response({"id": 42, **body}, status=201)

    async def create_ticket(request: web.Request) -> web.Response:
        received["content_type"] = request.headers.get("Content-Type", "")
        parts: list[tuple[str, str | None, str | None, bytes]] = []
        reader = await request.multipart()
        while True:
            part = await reader.next()
            if part is None:
                break
            parts.append((part.name, part.filename, part.headers.get("Content-Type"), await part.read()))
        received["parts"] = parts
        return web.json_response({"id": 7}, status=201)

    async def create_synthetic(request: web.Request) -> web.Response:
        received["fechaCreacion"] = request.query.get("fechaCreacion")
        received["prueba"] = await request.json()
        return web.Response(status=201)

    async def ordered(_: web.Request) -> web.Response:
        return web.json_response(
            [
                {
                    "id": 2,
                    "tipo": "CONSULTA",
                    "nivelPrioridad": "URGENCIA",
                    "prioridadCalculada": 9,
                    "fechaCreacion": "2026-01-03T10:35:00",
                    "usuario": {"id": 5, "nombre": "Ana", "correo": "ana@example.com"},
                    "archivos": [{"id": 1, "nombreOriginal": "foto.png", "url": "/archivos/1"}],
                },
                {
                    "id": 1,
                    "tipo": "INCIDENTE",
                    "nivelPrioridad": "BAJA",
                    "fechaCreacion": "2026-01-13T08:35:00",
                    "usuario": {"id": 6, "nombre": "Luis", "correo": "luis@example.com"},
                },
            ]
        )

    app = web.Application()
    app.router.add_post("/usuarios", create_user)
    app.router.add_post("/solicitudes", create_ticket)
    app.router.add_post("/solicitudes/prueba", create_synthetic)
    app.router.add_get("/solicitudes/ordenadas", ordered)
    return app


@pytest.mark.asyncio
async def test_create_identity_round_trip() -> None:
    received: dict[str, Any] = {}
    async with test_utils.TestServer(_fake_backend(received)) as server:
        client = BackendClient(BackendConfig(base_url=f"http://{server.host}:{server.port}"))
        await client.start()
        try:
            identity = await client.create_identity("Juan Pérez", "juan@example.com")
        finally:
            await client.close()

    assert identity.id == 42
    assert identity.name == "Juan Pérez"
    assert received["usuario"] == {"nombre": "Juan Pérez", "correo": "juan@example.com"}


@pytest.mark.asyncio
async def test_backend_message_and_fallback() -> None:
    async with test_utils.TestServer(_fake_backend({})) as server:
        client = BackendClient(BackendConfig(base_url=f"http://{server.host}:{server.port}"))
        await client.start()
        try:
            with pytest.raises(RequestError) as duplicate:
                await client.create_identity("Dup", "dup@example.com")
            with pytest.raises(RequestError) as broken:
                await client.create_identity("Boom", "boom@example.com")
        finally:
            await client.close()

    assert duplicate.value.user_message == "El correo ya existe"
    assert duplicate.value.status == 409
    assert broken.value.user_message == "Error al crear usuario"
    assert broken.value.status == 500


@pytest.mark.asyncio
async def test_create_ticket_sends_multipart_parts_in_order() -> None:
    received: dict[str, Any] = {}
    payload = {"tipo": "INCIDENTE", "nivelPrioridad": "ALTA", "usuarioId": 42, "descripcion": None}
    files = [
        AttachmentCandidate(name="a.pdf", size_bytes=3, content=b"%PD", content_type="application/pdf"),
        AttachmentCandidate(name="b.txt", size_bytes=2, content=b"hi"),
    ]
    async with test_utils.TestServer(_fake_backend(received)) as server:
        client = BackendClient(BackendConfig(base_url=f"http://{server.host}:{server.port}"))
        await client.start()
        try:
            created = await client.create_ticket(payload, files)
        finally:
            await client.close()

    assert created == {"id": 7}
    assert received["content_type"].startswith("multipart/form-data; boundary=")
    names = [part[0] for part in received["parts"]]
    assert names == ["solicitud", "archivos", "archivos"]
    solicitud = received["parts"][0]
    assert solicitud[2] == "application/json"
    assert json.loads(solicitud[3]) == payload
    assert [(part[1], part[3]) for part in received["parts"][1:]] == [("a.pdf", b"%PD"), ("b.txt", b"hi")]
    assert received["parts"][2][2] == "application/octet-stream"


@pytest.mark.asyncio
async def test_synthetic_ticket_and_ordered_list() -> None:
    received: dict[str, Any] = {}
    async with test_utils.TestServer(_fake_backend(received)) as server:
        client = BackendClient(BackendConfig(base_url=f"http://{server.host}:{server.port}"))
        await client.start()
        try:
            await client.create_synthetic_ticket(
                {"tipo": "CONSULTA", "nivelPrioridad": "ALTA", "usuarioId": 1, "descripcion": "x"},
                "2026-01-03T10:35:00",
            )
            tickets = await client.list_ordered_tickets()
        finally:
            await client.close()

    assert received["fechaCreacion"] == "2026-01-03T10:35:00"
    assert received["prueba"]["usuarioId"] == 1
    assert [ticket.id for ticket in tickets] == [2, 1]
    assert tickets[0].computed_priority == 9
    assert tickets[0].attachments[0].original_name == "foto.png"
    assert tickets[1].computed_priority is None
    assert tickets[1].attachments == ()


@pytest.mark.asyncio
async def test_unreachable_backend_raises_transport_error() -> None:
    client = BackendClient(BackendConfig(base_url="http://127.0.0.1:1", timeout_seconds=2))
    await client.start()
    try:
        with pytest.raises(TransportError) as excinfo:
            await client.list_ordered_tickets()
    finally:
        await client.close()

    assert excinfo.value.user_message.startswith("Error de conexión: ")


def test_attachment_url_joins_base() -> None:
    client = BackendClient(BackendConfig(base_url="http://localhost:8082/"))
    assert client.attachment_url("/archivos/3") == "http://localhost:8082/archivos/3"
    assert client.attachment_url("https://cdn.example.com/x") == "https://cdn.example.com/x"
