"""Error taxonomy for envelope encoding, decoding and storage."""

from __future__ import annotations


class EnvelopeError(Exception):
    """Base class for every failure raised by defevents."""


class EncodeError(EnvelopeError):
    """A well-formed payload could not be turned into bytes.

    Only reachable through a programming or library defect (e.g. a field
    holding a value of the wrong type).
    """


class DecodeError(EnvelopeError, ValueError):
    """Bytes are malformed, truncated, or encode a different variant."""

    def __init__(self, message: str, *, expected: str | None = None) -> None:
        super().__init__(message)
        self.expected = expected


class UnknownKind(EnvelopeError, LookupError):
    """Discriminator value outside the closed set of event kinds."""

    def __init__(self, kind: object) -> None:
        super().__init__(f"Unknown event kind: {kind!r}")
        self.kind = kind


class StoreError(EnvelopeError):
    """A persisted record cannot be read back as an Envelope."""
