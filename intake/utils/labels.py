from __future__ import annotations

TICKET_TYPE_LABELS = {
    "INCIDENTE": "Incidente",
    "REQUERIMIENTO": "Requerimiento",
    "CONSULTA": "Consulta",
}

PRIORITY_LEVEL_LABELS = {
    "BAJA": "Baja",
    "MEDIA": "Media",
    "ALTA": "Alta",
    "URGENCIA": "Urgencia",
}

PRIORITY_LEVEL_CLASSES = {
    "URGENCIA": "prioridad-5",
    "ALTA": "prioridad-4",
    "MEDIA": "prioridad-3",
    "BAJA": "prioridad-1",
}


def ticket_type_label(value: str) -> str:
    return TICKET_TYPE_LABELS.get(value, value)


def priority_level_label(value: str) -> str:
    return PRIORITY_LEVEL_LABELS.get(value, value)


def priority_level_class(value: str) -> str:
    return PRIORITY_LEVEL_CLASSES.get(value, "")


def size_in_mb(size_bytes: int) -> str:
    return f"{size_bytes / 1024 / 1024:.2f} MB"
