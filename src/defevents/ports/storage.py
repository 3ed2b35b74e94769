# defevents/ports/storage.py
from __future__ import annotations

from typing import Iterable, Protocol
from ..domain.models import Envelope


class EnvelopeStore(Protocol):
    """Port for a store that appends Envelopes and later returns all of them."""

    async def append(self, envelope: Envelope) -> None:
        """Persist a single envelope."""

    async def append_many(self, envelopes: Iterable[Envelope]) -> None:
        """Persist several envelopes, keeping their order."""

    async def load_all(self) -> list[Envelope]:
        """Return every stored envelope in append order (empty if nothing was stored)."""
