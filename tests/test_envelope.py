"""Envelope construction and kind dispatch."""

from __future__ import annotations

import dataclasses
import time

import pytest

from defevents.domain.codec import encode
from defevents.domain.envelope import (
    envelope_from_payload,
    new_envelope,
    to_typed_view,
    to_typed_views,
)
from defevents.domain.errors import DecodeError, UnknownKind
from defevents.domain.payloads import SwapPayload
from defevents.domain.value_types import EventKind


def test_swap_envelope_dispatches_to_exact_values(swap) -> None:
    evt = new_envelope(EventKind.SWAP, encode(swap), "0xSomeContract", 1_700_000_000)
    view = to_typed_view(evt)

    assert isinstance(view.payload, SwapPayload)
    assert view.payload.sender == "addr1"
    assert view.payload.recipient == "addr2"
    assert view.payload.amount0_in == 1.2
    assert view.payload.amount1_in == 2.39
    assert view.payload.amount0_out == 3.4
    assert view.payload.amount1_out == 4.5
    assert view.contract_address == "0xSomeContract"
    assert view.kind is EventKind.SWAP


def test_every_variant_dispatches(any_payload) -> None:
    evt = envelope_from_payload(any_payload, "0x_contract", 1)
    assert evt.kind == int(type(any_payload).kind)
    assert to_typed_view(evt).payload == any_payload


@pytest.mark.parametrize("bad_kind", [5, 99, -3])
def test_unknown_kind_raises_instead_of_empty_view(swap, bad_kind: int) -> None:
    evt = new_envelope(bad_kind, encode(swap), "0x_contract", 1)
    with pytest.raises(UnknownKind) as exc:
        to_typed_view(evt)
    assert exc.value.kind == bad_kind


def test_kind_payload_mismatch_raises_decode_error(transfer) -> None:
    evt = new_envelope(EventKind.SWAP, encode(transfer), "0x_contract2", 1)
    with pytest.raises(DecodeError, match="0x_contract2") as exc:
        to_typed_view(evt)
    assert isinstance(exc.value.__cause__, DecodeError)
    assert exc.value.expected == "SwapPayload"


def test_truncated_payload_in_envelope_raises(swap) -> None:
    evt = new_envelope(EventKind.SWAP, encode(swap)[:-3], "0x_contract", 1)
    with pytest.raises(DecodeError):
        to_typed_view(evt)


def test_new_envelope_defaults_timestamp_to_now(swap) -> None:
    before = int(time.time())
    evt = new_envelope(EventKind.SWAP, encode(swap), "0x_contract")
    after = int(time.time())
    assert before <= evt.created_at <= after


def test_new_envelope_does_not_validate_payload() -> None:
    evt = new_envelope(EventKind.MINT, b"not a mint", "0x_contract", 5)
    assert evt.payload == b"not a mint"
    assert evt.created_at == 5


def test_envelope_is_immutable(swap) -> None:
    evt = envelope_from_payload(swap, "0x_contract", 1)
    with pytest.raises(dataclasses.FrozenInstanceError):
        evt.kind = int(EventKind.BURN)  # type: ignore[misc]


def test_to_typed_views_keeps_order_and_raises_on_first_error(swap, transfer) -> None:
    good = [envelope_from_payload(swap, "a", 1), envelope_from_payload(transfer, "b", 2)]
    views = to_typed_views(good)
    assert [v.contract_address for v in views] == ["a", "b"]

    bad = good + [new_envelope(7, b"", "c", 3)]
    with pytest.raises(UnknownKind):
        to_typed_views(bad)
