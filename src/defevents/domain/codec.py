from __future__ import annotations
import io
from typing import TypeVar

from construct import ConstructError
from eth_utils import keccak

from .errors import DecodeError, EncodeError, UnknownKind
from .payloads import PAYLOAD_TYPES, EventPayload
from .value_types import EventKind


DISCRIMINATOR_SIZE = 8

P = TypeVar("P", bound=EventPayload)


def discriminator(name: str) -> bytes:
    """First 8 bytes of keccak256("event:<Name>"); prefixes every encoded payload."""
    return keccak(text=f"event:{name}")[:DISCRIMINATOR_SIZE]


# kind -> payload type; the single place a new variant gets wired in
REGISTRY: dict[EventKind, type] = {t.kind: t for t in PAYLOAD_TYPES}

_DISCRIMINATORS: dict[type, bytes] = {t: discriminator(t.kind.display_name) for t in PAYLOAD_TYPES}

_unregistered = set(EventKind) - set(REGISTRY)
if _unregistered:
    raise RuntimeError(f"No payload type registered for {sorted(k.name for k in _unregistered)}")


def payload_type_for(kind: int) -> type:
    try:
        return REGISTRY[EventKind(kind)]
    except (ValueError, KeyError):
        raise UnknownKind(kind) from None


def kind_of(payload: EventPayload) -> EventKind:
    return type(payload).kind


# ---------------------------- public API --------------------------------------

def encode(payload: EventPayload) -> bytes:
    cls = type(payload)
    if cls not in _DISCRIMINATORS:
        raise EncodeError(f"Not a registered payload type: {cls.__name__}")
    try:
        body = cls.layout.build(payload.to_encodable())
    except (ConstructError, AttributeError, TypeError, ValueError, UnicodeError) as e:
        raise EncodeError(f"{cls.__name__}: {e}") from e
    return _DISCRIMINATORS[cls] + body


def decode(data: bytes, expected: type[P]) -> P:
    """
    Decode `data` as an instance of `expected`.
    Rejects short input, a foreign discriminator, a truncated/corrupt body and
    trailing bytes; never returns a partially populated value.
    """
    name = expected.__name__
    want = _DISCRIMINATORS.get(expected)
    if want is None:
        raise DecodeError(f"Not a registered payload type: {name}", expected=name)

    data = bytes(data)
    if len(data) < DISCRIMINATOR_SIZE:
        raise DecodeError(f"{name}: {len(data)} bytes is shorter than the discriminator", expected=name)
    got = data[:DISCRIMINATOR_SIZE]
    if got != want:
        other = next((t.__name__ for t, d in _DISCRIMINATORS.items() if d == got), None)
        detail = f"bytes encode {other}" if other else f"unknown discriminator 0x{got.hex()}"
        raise DecodeError(f"{name}: {detail}", expected=name)

    stream = io.BytesIO(data[DISCRIMINATOR_SIZE:])
    try:
        obj = expected.layout.parse_stream(stream)
    except (ConstructError, UnicodeDecodeError) as e:
        raise DecodeError(f"{name}: malformed body ({e})", expected=name) from e
    trailing = len(data) - DISCRIMINATOR_SIZE - stream.tell()
    if trailing:
        raise DecodeError(f"{name}: {trailing} trailing byte(s) after body", expected=name)
    return expected.from_decoded(obj)
