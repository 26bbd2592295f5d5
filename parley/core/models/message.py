from dataclasses import dataclass, asdict
from typing import Any


@dataclass(frozen=True)
class Unit:
    """
    One discrete application-level unit received from a Connection.

    A unit is either a text payload, which the session renders, or a
    non-text frame (binary or otherwise meaningless to the session),
    which is received and discarded.
    """
    payload: str | bytes

    @property
    def is_text(self) -> bool:
        return isinstance(self.payload, str)


@dataclass
class Message:
    """
    Envelope exchanged over the framed TCP transport.
    The transport encodes/decodes messages via the Serializer, while the
    session only ever sees the Unit extracted from them.
    """
    type: str
    """
    type of message, e.g. "text"
    """

    data: dict[Any, Any]
    """
    A dictionary of serializable data
    """

    @classmethod
    def text(cls, payload: str) -> "Message":
        return cls(type="text", data={"text": payload})

    def to_dict(self) -> dict[str, Any]:
        """Return a plain dictionary representation of the message."""
        return asdict(self)

    def to_unit(self, raw: bytes) -> Unit:
        """
        Extract the unit carried by this message. Anything other than a
        well-formed text message becomes a non-text unit holding the raw
        frame.
        """
        text = None
        if self.type == "text" and isinstance(self.data, dict):
            text = self.data.get("text")
        if isinstance(text, str):
            return Unit(text)
        return Unit(bytes(raw))
