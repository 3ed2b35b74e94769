from __future__ import annotations
import typing
from dataclasses import dataclass

import borsh_construct as borsh
from construct import Container

from .value_types import EventKind


# ---------- JSON shapes --------------------------------------------------------

class SwapPayloadJSON(typing.TypedDict):
    sender: str
    recipient: str
    amount0_in: float
    amount1_in: float
    amount0_out: float
    amount1_out: float


# "from" is a keyword, hence the functional syntax
TransferPayloadJSON = typing.TypedDict(
    "TransferPayloadJSON", {"from": str, "to": str, "token": str}
)


class PairCreatedPayloadJSON(typing.TypedDict):
    token0: str
    token1: str
    pair: str
    pair_index: int


class MintPayloadJSON(typing.TypedDict):
    sender: str
    amount0: float
    amount1: float


class BurnPayloadJSON(typing.TypedDict):
    sender: str
    recipient: str
    amount0: float
    amount1: float


# ---------- variants (field order == wire order) --------------------------------

@dataclass(slots=True, frozen=True)
class SwapPayload:
    kind: typing.ClassVar[EventKind] = EventKind.SWAP
    layout: typing.ClassVar = borsh.CStruct(
        "sender" / borsh.String,
        "recipient" / borsh.String,
        "amount0_in" / borsh.F64,
        "amount1_in" / borsh.F64,
        "amount0_out" / borsh.F64,
        "amount1_out" / borsh.F64,
    )
    sender: str
    recipient: str
    amount0_in: float
    amount1_in: float
    amount0_out: float
    amount1_out: float

    @classmethod
    def from_decoded(cls, obj: Container) -> "SwapPayload":
        return cls(
            sender=obj.sender,
            recipient=obj.recipient,
            amount0_in=obj.amount0_in,
            amount1_in=obj.amount1_in,
            amount0_out=obj.amount0_out,
            amount1_out=obj.amount1_out,
        )

    def to_encodable(self) -> dict[str, typing.Any]:
        return {
            "sender": self.sender,
            "recipient": self.recipient,
            "amount0_in": self.amount0_in,
            "amount1_in": self.amount1_in,
            "amount0_out": self.amount0_out,
            "amount1_out": self.amount1_out,
        }

    def to_json(self) -> SwapPayloadJSON:
        return {
            "sender": self.sender,
            "recipient": self.recipient,
            "amount0_in": self.amount0_in,
            "amount1_in": self.amount1_in,
            "amount0_out": self.amount0_out,
            "amount1_out": self.amount1_out,
        }

    @classmethod
    def from_json(cls, obj: SwapPayloadJSON) -> "SwapPayload":
        return cls(
            sender=obj["sender"],
            recipient=obj["recipient"],
            amount0_in=float(obj["amount0_in"]),
            amount1_in=float(obj["amount1_in"]),
            amount0_out=float(obj["amount0_out"]),
            amount1_out=float(obj["amount1_out"]),
        )


@dataclass(slots=True, frozen=True)
class TransferPayload:
    kind: typing.ClassVar[EventKind] = EventKind.TRANSFER
    layout: typing.ClassVar = borsh.CStruct(
        "from_address" / borsh.String,
        "to_address" / borsh.String,
        "token" / borsh.String,
    )
    from_address: str
    to_address: str
    token: str

    @classmethod
    def from_decoded(cls, obj: Container) -> "TransferPayload":
        return cls(from_address=obj.from_address, to_address=obj.to_address, token=obj.token)

    def to_encodable(self) -> dict[str, typing.Any]:
        return {"from_address": self.from_address, "to_address": self.to_address, "token": self.token}

    def to_json(self) -> TransferPayloadJSON:
        return {"from": self.from_address, "to": self.to_address, "token": self.token}

    @classmethod
    def from_json(cls, obj: TransferPayloadJSON) -> "TransferPayload":
        return cls(from_address=obj["from"], to_address=obj["to"], token=obj["token"])


@dataclass(slots=True, frozen=True)
class PairCreatedPayload:
    kind: typing.ClassVar[EventKind] = EventKind.PAIR_CREATED
    layout: typing.ClassVar = borsh.CStruct(
        "token0" / borsh.String,
        "token1" / borsh.String,
        "pair" / borsh.String,
        "pair_index" / borsh.U64,
    )
    token0: str
    token1: str
    pair: str
    pair_index: int

    @classmethod
    def from_decoded(cls, obj: Container) -> "PairCreatedPayload":
        return cls(token0=obj.token0, token1=obj.token1, pair=obj.pair, pair_index=obj.pair_index)

    def to_encodable(self) -> dict[str, typing.Any]:
        return {"token0": self.token0, "token1": self.token1, "pair": self.pair, "pair_index": self.pair_index}

    def to_json(self) -> PairCreatedPayloadJSON:
        return {"token0": self.token0, "token1": self.token1, "pair": self.pair, "pair_index": self.pair_index}

    @classmethod
    def from_json(cls, obj: PairCreatedPayloadJSON) -> "PairCreatedPayload":
        return cls(token0=obj["token0"], token1=obj["token1"], pair=obj["pair"], pair_index=int(obj["pair_index"]))


@dataclass(slots=True, frozen=True)
class MintPayload:
    kind: typing.ClassVar[EventKind] = EventKind.MINT
    layout: typing.ClassVar = borsh.CStruct(
        "sender" / borsh.String,
        "amount0" / borsh.F64,
        "amount1" / borsh.F64,
    )
    sender: str
    amount0: float
    amount1: float

    @classmethod
    def from_decoded(cls, obj: Container) -> "MintPayload":
        return cls(sender=obj.sender, amount0=obj.amount0, amount1=obj.amount1)

    def to_encodable(self) -> dict[str, typing.Any]:
        return {"sender": self.sender, "amount0": self.amount0, "amount1": self.amount1}

    def to_json(self) -> MintPayloadJSON:
        return {"sender": self.sender, "amount0": self.amount0, "amount1": self.amount1}

    @classmethod
    def from_json(cls, obj: MintPayloadJSON) -> "MintPayload":
        return cls(sender=obj["sender"], amount0=float(obj["amount0"]), amount1=float(obj["amount1"]))


@dataclass(slots=True, frozen=True)
class BurnPayload:
    kind: typing.ClassVar[EventKind] = EventKind.BURN
    layout: typing.ClassVar = borsh.CStruct(
        "sender" / borsh.String,
        "recipient" / borsh.String,
        "amount0" / borsh.F64,
        "amount1" / borsh.F64,
    )
    sender: str
    recipient: str
    amount0: float
    amount1: float

    @classmethod
    def from_decoded(cls, obj: Container) -> "BurnPayload":
        return cls(sender=obj.sender, recipient=obj.recipient, amount0=obj.amount0, amount1=obj.amount1)

    def to_encodable(self) -> dict[str, typing.Any]:
        return {"sender": self.sender, "recipient": self.recipient, "amount0": self.amount0, "amount1": self.amount1}

    def to_json(self) -> BurnPayloadJSON:
        return {"sender": self.sender, "recipient": self.recipient, "amount0": self.amount0, "amount1": self.amount1}

    @classmethod
    def from_json(cls, obj: BurnPayloadJSON) -> "BurnPayload":
        return cls(
            sender=obj["sender"],
            recipient=obj["recipient"],
            amount0=float(obj["amount0"]),
            amount1=float(obj["amount1"]),
        )


EventPayload = typing.Union[SwapPayload, TransferPayload, PairCreatedPayload, MintPayload, BurnPayload]

PAYLOAD_TYPES: tuple[type, ...] = (SwapPayload, TransferPayload, PairCreatedPayload, MintPayload, BurnPayload)
