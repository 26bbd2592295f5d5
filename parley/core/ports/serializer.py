from typing import Protocol, Any


class Serializer(Protocol):
    """
    Encodes/decodes the Message envelopes carried inside the frames of
    the framed TCP transport. Framing itself (the length prefix) is the
    connection's job, not the serializer's.

    Implementations must be deterministic and must raise (rather than
    return garbage) when handed a payload they cannot decode, so that
    the connection can turn it into a discarded non-text unit.
    """

    def serialize(self, message: Any) -> bytes:
        """Encode a plain Python object into one frame payload."""

    def deserialize(self, data: bytes) -> Any:
        """Decode one frame payload back into a plain Python object."""
