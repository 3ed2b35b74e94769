from __future__ import annotations
from dataclasses import dataclass
from typing import Any

from eth_utils import decode_hex, encode_hex

from .errors import StoreError
from .payloads import EventPayload
from .value_types import EventKind


@dataclass(slots=True, frozen=True)
class Envelope:
    """
    Storable event record. `payload` is opaque here: its shape is fixed by
    `kind` and only recovered through `domain.envelope.to_typed_view`.
    `kind` stays a raw int so out-of-range tags read from storage survive
    until conversion.
    """
    kind: int
    payload: bytes
    created_at: int                 # seconds since epoch
    contract_address: str

    @property
    def kind_name(self) -> str:
        try:
            return EventKind(self.kind).display_name
        except ValueError:
            return f"Unknown({self.kind})"

    def to_json(self) -> dict[str, Any]:
        return {
            "kind": int(self.kind),
            "payload": encode_hex(self.payload),
            "created_at": self.created_at,
            "contract_address": self.contract_address,
        }

    @classmethod
    def from_json(cls, obj: Any) -> "Envelope":
        if not isinstance(obj, dict):
            raise StoreError(f"Envelope record must be an object, got {type(obj).__name__}")
        try:
            kind, payload = obj["kind"], obj["payload"]
            created_at, contract = obj["created_at"], obj["contract_address"]
        except KeyError as e:
            raise StoreError(f"Envelope record is missing {e.args[0]!r}") from None
        if not isinstance(kind, int) or isinstance(kind, bool) or not isinstance(created_at, int):
            raise StoreError("Envelope 'kind' and 'created_at' must be integers")
        if not isinstance(payload, str) or not isinstance(contract, str):
            raise StoreError("Envelope 'payload' and 'contract_address' must be strings")
        try:
            raw = decode_hex(payload)
        except ValueError as e:
            raise StoreError(f"Envelope payload is not hex: {e}") from e
        return cls(kind=kind, payload=raw, created_at=created_at, contract_address=contract)


@dataclass(slots=True, frozen=True)
class TypedView:
    """Decoded, non-persistable projection of an Envelope."""
    payload: EventPayload
    contract_address: str

    @property
    def kind(self) -> EventKind:
        return type(self.payload).kind

    def to_json(self) -> dict[str, Any]:
        return {
            "kind": self.kind.display_name,
            **self.payload.to_json(),
            "contract_address": self.contract_address,
        }
