from __future__ import annotations

from core.errors import FormBusyError, ValidationError
from core.models import Identity
from services.backend_client import BackendClient


class ContactForm:
    def __init__(self, client: BackendClient) -> None:
        self.client = client
        self.name = ""
        self.email = ""
        self.phone = ""
        self.busy = False

    def update(self, *, name: str | None = None, email: str | None = None, phone: str | None = None) -> None:
        if name is not None:
            self.name = name
        if email is not None:
            self.email = email
        if phone is not None:
            self.phone = phone

    def clear(self) -> None:
        self.name = ""
        self.email = ""
        self.phone = ""

    def validate(self) -> None:
        if not self.name.strip():
            raise ValidationError("El nombre es obligatorio.")
        if not self.email.strip():
            raise ValidationError("El correo electrónico es obligatorio.")

    async def submit(self) -> Identity:
        if self.busy:
            raise FormBusyError()
        self.validate()
        self.busy = True
        try:
            identity = await self.client.create_identity(
                self.name.strip(),
                self.email.strip(),
                self.phone.strip() or None,
            )
        finally:
            self.busy = False
        self.clear()
        return identity
