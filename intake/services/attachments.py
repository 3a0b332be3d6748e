from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

from core.config import AttachmentConfig
from core.errors import ValidationError
from core.models import AttachmentCandidate

LOGGER = logging.getLogger(__name__)

OVERSIZED_BATCH_MESSAGE = "Algunos archivos exceden el tamaño máximo permitido (10MB)"


class AttachmentSet:
    """Ordered files waiting to be sent with a ticket.

    Batches are accepted or rejected as a whole: a single file over the size
    ceiling leaves the set exactly as it was. There is no cap on how many files
    the set holds, and the ``accept`` hint is never enforced here.
    """

    def __init__(self, config: AttachmentConfig) -> None:
        self.config = config
        self._items: list[AttachmentCandidate] = []

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[AttachmentCandidate]:
        return iter(list(self._items))

    @property
    def items(self) -> list[AttachmentCandidate]:
        return list(self._items)

    @property
    def total_bytes(self) -> int:
        return sum(item.size_bytes for item in self._items)

    def add(self, candidates: Iterable[AttachmentCandidate]) -> None:
        batch = list(candidates)
        oversized = [item.name for item in batch if item.size_bytes > self.config.max_file_bytes]
        if oversized:
            LOGGER.info("Rejected attachment batch. files=%s oversized=%s", len(batch), oversized)
            raise ValidationError(OVERSIZED_BATCH_MESSAGE)
        self._items.extend(batch)

    def remove(self, index: int) -> AttachmentCandidate:
        if not 0 <= index < len(self._items):
            raise ValidationError(f"No existe el archivo adjunto #{index + 1}.")
        return self._items.pop(index)

    def discard(self, sent: Iterable[AttachmentCandidate]) -> None:
        """Drop exactly the given files, keeping any added after they were taken."""
        gone = {id(item) for item in sent}
        self._items = [item for item in self._items if id(item) not in gone]
