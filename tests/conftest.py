"""Shared payload fixtures."""

import pytest

from defevents.domain.payloads import (
    BurnPayload,
    MintPayload,
    PairCreatedPayload,
    SwapPayload,
    TransferPayload,
)


SWAP = SwapPayload(
    sender="addr1",
    recipient="addr2",
    amount0_in=1.2,
    amount1_in=2.39,
    amount0_out=3.4,
    amount1_out=4.5,
)
TRANSFER = TransferPayload(from_address="0x_addr1", to_address="0x_addr2", token="0x_tokenA")
PAIR_CREATED = PairCreatedPayload(token0="0x_tokenA", token1="0x_tokenB", pair="0x_pair", pair_index=17)
MINT = MintPayload(sender="0x_router", amount0=10.5, amount1=0.25)
BURN = BurnPayload(sender="0x_router", recipient="0x_lp", amount0=3.0, amount1=7.75)

ALL_PAYLOADS = [SWAP, TRANSFER, PAIR_CREATED, MINT, BURN]


@pytest.fixture
def swap() -> SwapPayload:
    return SWAP


@pytest.fixture
def transfer() -> TransferPayload:
    return TRANSFER


@pytest.fixture(params=ALL_PAYLOADS, ids=lambda p: type(p).__name__)
def any_payload(request):
    return request.param
