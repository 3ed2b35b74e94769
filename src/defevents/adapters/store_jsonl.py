from __future__ import annotations
import os, json, asyncio
from typing import Iterable
from ..ports.storage import EnvelopeStore
from ..domain.errors import StoreError
from ..domain.models import Envelope

class JSONLEnvelopeStore(EnvelopeStore):
    def __init__(self, path: str) -> None:
        self.path = path
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
        self._lock = asyncio.Lock()

    async def append(self, envelope: Envelope) -> None:
        await self.append_many([envelope])

    async def append_many(self, envelopes: Iterable[Envelope]) -> None:
        lines = "".join(json.dumps(e.to_json(), separators=(",", ":")) + "\n" for e in envelopes)
        if not lines:
            return
        async with self._lock:
            await asyncio.to_thread(self._write_lines, self.path, lines)

    async def load_all(self) -> list[Envelope]:
        async with self._lock:
            return await asyncio.to_thread(self._read_all, self.path)

    @staticmethod
    def _write_lines(path: str, lines: str) -> None:
        with open(path, "a", buffering=1) as f:
            f.write(lines); f.flush(); os.fsync(f.fileno())

    @staticmethod
    def _read_all(path: str) -> list[Envelope]:
        if not os.path.exists(path):
            return []
        out: list[Envelope] = []
        with open(path, "r") as f:
            for lineno, line in enumerate(f, start=1):
                line = line.strip()
                if not line:
                    continue
                try:
                    rec = json.loads(line)
                except json.JSONDecodeError as e:
                    raise StoreError(f"{path}:{lineno}: invalid JSON ({e.msg})") from e
                try:
                    out.append(Envelope.from_json(rec))
                except StoreError as e:
                    raise StoreError(f"{path}:{lineno}: {e}") from e
        return out
