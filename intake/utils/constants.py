from __future__ import annotations

WIZARD_STEP_CONTACT = "contact"
WIZARD_STEP_TICKET = "ticket"
WIZARD_STEP_CONFIRMATION = "confirmation"

LOAD_STATE_IDLE = "idle"
LOAD_STATE_LOADING = "loading"
LOAD_STATE_LOADED = "loaded"
LOAD_STATE_ERRORED = "errored"

MESSAGE_KINDS = ("success", "error", "info")

TICKET_TYPES = ("INCIDENTE", "REQUERIMIENTO", "CONSULTA")
PRIORITY_LEVELS = ("BAJA", "MEDIA", "ALTA", "URGENCIA")

DEFAULT_TICKET_TYPE = "INCIDENTE"
DEFAULT_PRIORITY_LEVEL = "MEDIA"

# Ten synthetic requesters used to exercise the backend's age-based priority boost.
SYNTHETIC_ROSTER = [
    {"name": "Pedro Pérez", "email": "pedro@example.com", "description": "Se daño el carro ñañaña"},
    {
        "name": "María González",
        "email": "maria@example.com",
        "description": "Necesito actualizar mi información de contacto",
    },
    {
        "name": "Juan Rodríguez",
        "email": "juan@example.com",
        "description": "¿Cómo puedo cambiar mi contraseña?",
    },
    {
        "name": "Ana Martínez",
        "email": "ana@example.com",
        "description": "El sistema no está funcionando correctamente",
    },
    {
        "name": "Carlos López",
        "email": "carlos@example.com",
        "description": "Solicito acceso a nuevos módulos",
    },
    {
        "name": "Laura Sánchez",
        "email": "laura@example.com",
        "description": "Tengo una pregunta sobre facturación",
    },
    {"name": "Diego Fernández", "email": "diego@example.com", "description": "Error al iniciar sesión"},
    {
        "name": "Sofía Ramírez",
        "email": "sofia@example.com",
        "description": "Necesito ayuda con la configuración",
    },
    {"name": "Luis Torres", "email": "luis@example.com", "description": "Problema con la impresora"},
    {
        "name": "Carmen Díaz",
        "email": "carmen@example.com",
        "description": "Consulta sobre políticas de la empresa",
    },
]

# (days, hours) before the reference instant, oldest first. All entries stay in the past.
SYNTHETIC_AGE_SCHEDULE = [
    (10, 0),
    (8, 0),
    (6, 0),
    (4, 0),
    (3, 0),
    (2, 0),
    (1, 0),
    (0, 12),
    (0, 6),
    (0, 2),
]
