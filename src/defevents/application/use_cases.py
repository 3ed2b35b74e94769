from __future__ import annotations
import os
import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Sequence

import pandas as pd

from defevents.adapters.store_jsonl import JSONLEnvelopeStore
from defevents.adapters.store_parquet import ParquetEnvelopeStore
from defevents.application.utils import _write_json_doc
from ..domain.envelope import envelope_from_payload, to_typed_view
from ..domain.errors import EnvelopeError
from ..domain.models import Envelope, TypedView
from ..domain.payloads import SwapPayload
from ..ports.storage import EnvelopeStore

log = logging.getLogger(__name__)

RAW_EVENT_FILE   = "raw_event.out.json"
TYPED_EVENT_FILE = "typed_event.out.json"
SAMPLE_CONTRACT  = "0xSomeContract"


def open_store(path: str) -> EnvelopeStore:
    """`*.jsonl` -> JSONL file store, anything else -> Parquet part directory."""
    if path.lower().endswith(".jsonl"):
        return JSONLEnvelopeStore(path)
    return ParquetEnvelopeStore(path)


# ---------------------------- driver ------------------------------------------

def sample_swap_payload() -> SwapPayload:
    return SwapPayload(
        sender="addr1",
        recipient="addr2",
        amount0_in=1.2,
        amount1_in=2.39,
        amount0_out=3.4,
        amount1_out=4.5,
    )


def sample_swap_envelope(timestamp: int | None = None) -> Envelope:
    return envelope_from_payload(sample_swap_payload(), SAMPLE_CONTRACT, timestamp)


def write_raw_event_json(path: str, envelope: Envelope) -> str:
    return _write_json_doc(path, envelope.to_json())


def write_typed_event_json(path: str, view: TypedView) -> str:
    return _write_json_doc(path, view.to_json())


async def run_demo(
    out_dir: str,
    *,
    store: EnvelopeStore | None = None,
    timestamp: int | None = None,
) -> dict[str, str]:
    """
    Build the sample Swap envelope, write its raw and typed JSON renderings
    into `out_dir`, and optionally append it to `store`.
    """
    evt = sample_swap_envelope(timestamp)
    raw_path = write_raw_event_json(os.path.join(out_dir, RAW_EVENT_FILE), evt)
    typed_path = write_typed_event_json(os.path.join(out_dir, TYPED_EVENT_FILE), to_typed_view(evt))
    log.info("wrote %s and %s", raw_path, typed_path)
    if store is not None:
        await store.append(evt)
        log.info("appended sample %s envelope to store", evt.kind_name)
    return {"raw": raw_path, "typed": typed_path}


# ---------------------------- batch decode ------------------------------------

@dataclass(slots=True)
class DecodeReport:
    views: list[TypedView] = field(default_factory=list)
    failures: list[tuple[int, EnvelopeError]] = field(default_factory=list)

    def summary(self) -> dict[str, int]:
        return {
            "processed_ok": len(self.views),
            "processed_failed": len(self.failures),
            "total": len(self.views) + len(self.failures),
        }


def decode_envelopes(envelopes: Iterable[Envelope], *, skip_invalid: bool = False) -> DecodeReport:
    """
    Convert envelopes to typed views in order.
    By default the first UnknownKind/DecodeError propagates; with
    `skip_invalid` each failure is recorded in `report.failures` instead.
    """
    report = DecodeReport()
    for i, env in enumerate(envelopes):
        try:
            report.views.append(to_typed_view(env))
        except EnvelopeError as e:
            if not skip_invalid:
                raise
            log.warning("envelope #%d (%s) skipped: %s", i, env.kind_name, e)
            report.failures.append((i, e))
    return report


async def decode_store(store: EnvelopeStore, *, skip_invalid: bool = False) -> DecodeReport:
    envelopes = await store.load_all()
    log.debug("loaded %d envelope(s)", len(envelopes))
    return decode_envelopes(envelopes, skip_invalid=skip_invalid)


# ---------------------------- export ------------------------------------------

def views_by_kind(views: Sequence[TypedView]) -> dict[str, list[dict[str, Any]]]:
    """Group views into flat rows per kind name, keeping input order."""
    out: dict[str, list[dict[str, Any]]] = {}
    for v in views:
        row = v.to_json()
        kind = row.pop("kind")
        out.setdefault(kind, []).append(row)
    return out


def export_views_parquet(views: Sequence[TypedView], out_dir: str) -> list[str]:
    """One `<Kind>.parquet` per kind present in `views`. Returns written paths."""
    os.makedirs(out_dir, exist_ok=True)
    written: list[str] = []
    for kind, rows in views_by_kind(views).items():
        path = os.path.join(out_dir, f"{kind}.parquet")
        tmp  = path + ".tmp"
        pd.DataFrame(rows).to_parquet(tmp, engine="pyarrow", index=False)
        os.replace(tmp, path)
        log.info("wrote %d %s row(s) -> %s", len(rows), kind, path)
        written.append(path)
    return written
