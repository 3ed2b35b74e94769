from __future__ import annotations
import logging
import time
from typing import Iterable

from .codec import decode, encode, kind_of, payload_type_for
from .errors import DecodeError
from .models import Envelope, TypedView
from .payloads import EventPayload

log = logging.getLogger(__name__)


def new_envelope(
    kind: int,
    encoded_payload: bytes,
    contract_address: str,
    timestamp: int | None = None,
) -> Envelope:
    """
    Wrap pre-encoded bytes. The payload is not checked against `kind`;
    callers must have produced it with the matching encoder.
    """
    ts = int(time.time()) if timestamp is None else int(timestamp)
    return Envelope(
        kind=int(kind),
        payload=bytes(encoded_payload),
        created_at=ts,
        contract_address=contract_address,
    )


def envelope_from_payload(
    payload: EventPayload,
    contract_address: str,
    timestamp: int | None = None,
) -> Envelope:
    return new_envelope(kind_of(payload), encode(payload), contract_address, timestamp)


def to_typed_view(envelope: Envelope) -> TypedView:
    """
    Dispatch on `envelope.kind` and decode the payload.
    Raises UnknownKind for tags outside EventKind, DecodeError for bad bytes.
    """
    cls = payload_type_for(envelope.kind)
    try:
        payload = decode(envelope.payload, cls)
    except DecodeError as e:
        raise DecodeError(
            f"{envelope.kind_name} envelope from {envelope.contract_address}: {e}",
            expected=e.expected,
        ) from e
    log.debug("decoded %s envelope from %s", envelope.kind_name, envelope.contract_address)
    return TypedView(payload=payload, contract_address=envelope.contract_address)


def to_typed_views(envelopes: Iterable[Envelope]) -> list[TypedView]:
    return [to_typed_view(e) for e in envelopes]
