from __future__ import annotations
import os, re, glob, asyncio, pyarrow as pa, pyarrow.parquet as pq
from typing import Iterable

from ..ports.storage import EnvelopeStore
from ..domain.errors import StoreError
from ..domain.models import Envelope

_PART_RE = re.compile(r"^part_(\d+)\.parquet$")

_SCHEMA = pa.schema([
    ("kind", pa.int64()),
    ("payload", pa.binary()),
    ("created_at", pa.int64()),
    ("contract_address", pa.string()),
])

def _envelopes_to_table(envelopes: Iterable[Envelope]) -> pa.Table:
    evs = list(envelopes)
    try:
        arrays = [
            pa.array([e.kind for e in evs], pa.int64()),
            pa.array([e.payload for e in evs], pa.binary()),
            pa.array([e.created_at for e in evs], pa.int64()),
            pa.array([e.contract_address for e in evs], pa.string()),
        ]
    except (pa.ArrowInvalid, pa.ArrowTypeError, OverflowError) as e:
        raise StoreError(f"envelope does not fit the parquet schema ({e})") from e
    return pa.Table.from_arrays(arrays, names=[f.name for f in _SCHEMA])

def _table_to_envelopes(table: pa.Table, path: str) -> list[Envelope]:
    missing = [f.name for f in _SCHEMA if f.name not in table.column_names]
    if missing:
        raise StoreError(f"{path}: missing column(s) {missing}")
    out: list[Envelope] = []
    for row in table.select([f.name for f in _SCHEMA]).to_pylist():
        if any(row[name] is None for name in row):
            raise StoreError(f"{path}: null value in envelope row")
        out.append(Envelope(
            kind=row["kind"],
            payload=bytes(row["payload"]),
            created_at=row["created_at"],
            contract_address=row["contract_address"],
        ))
    return out

class ParquetEnvelopeStore(EnvelopeStore):
    """
    One Parquet part file per append batch: <root>/part_00001.parquet, ...
    Parts are read back in index order.
    """
    def __init__(self, root_dir: str, codec: str = "zstd") -> None:
        self.root = root_dir
        self.codec = codec
        os.makedirs(self.root, exist_ok=True)
        self._lock = asyncio.Lock()

    def _indexed_parts(self) -> list[tuple[int, str]]:
        out: list[tuple[int, str]] = []
        for path in glob.glob(os.path.join(self.root, "part_*.parquet")):
            m = _PART_RE.match(os.path.basename(path))
            if m:
                out.append((int(m.group(1)), path))
        return sorted(out)  # numeric: part_100000 comes after part_99999

    def _parts(self) -> list[str]:
        return [path for _, path in self._indexed_parts()]

    def next_part_index(self) -> int:
        existing = self._indexed_parts()
        return existing[-1][0] + 1 if existing else 1

    def _write_part(self, table: pa.Table) -> str:
        path = os.path.join(self.root, f"part_{self.next_part_index():05d}.parquet")
        tmp  = path + ".tmp"
        pq.write_table(table, tmp, compression=self.codec)
        os.replace(tmp, path)
        return path

    async def append(self, envelope: Envelope) -> None:
        await self.append_many([envelope])

    async def append_many(self, envelopes: Iterable[Envelope]) -> None:
        table = _envelopes_to_table(envelopes)
        if len(table) == 0:
            return
        async with self._lock:
            await asyncio.to_thread(self._write_part, table)

    async def load_all(self) -> list[Envelope]:
        async with self._lock:
            return await asyncio.to_thread(self._read_all)

    def _read_all(self) -> list[Envelope]:
        out: list[Envelope] = []
        for path in self._parts():
            try:
                table = pq.read_table(path)
            except (OSError, pa.ArrowException) as e:
                raise StoreError(f"{path}: unreadable part ({e})") from e
            out.extend(_table_to_envelopes(table, path))
        return out
