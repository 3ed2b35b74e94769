from __future__ import annotations
from enum import IntEnum


class EventKind(IntEnum):
    SWAP = 0
    TRANSFER = 1
    PAIR_CREATED = 2
    MINT = 3
    BURN = 4

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @classmethod
    def parse(cls, value: str | int) -> "EventKind":
        """Accepts 0..4, "swap", "Swap", "pair_created", "PairCreated"."""
        if isinstance(value, int):
            return cls(value)
        s = value.strip()
        if s.isdigit():
            return cls(int(s))
        key = s.replace("-", "").replace("_", "").lower()
        for kind in cls:
            if kind.display_name.lower() == key:
                return kind
        raise ValueError(f"Unknown event kind: {value!r}")


_DISPLAY_NAMES = {
    EventKind.SWAP: "Swap",
    EventKind.TRANSFER: "Transfer",
    EventKind.PAIR_CREATED: "PairCreated",
    EventKind.MINT: "Mint",
    EventKind.BURN: "Burn",
}
