from dataclasses import dataclass
from enum import StrEnum


class SessionState(StrEnum):
    """Lifecycle of a SessionCoordinator."""
    IDLE = "idle"
    CONNECTING = "connecting"
    ACTIVE = "active"
    DRAINING = "draining"
    CLOSED = "closed"


@dataclass(frozen=True)
class SessionOutcome:
    """
    Terminal outcome of a session that ended cleanly.
    Failed sessions raise instead of returning an outcome.
    """
    reason: str
    """
    Why the outbound direction stopped: "exit" or "end-of-input".
    """

    sent: int = 0
    """
    Number of text payloads handed to the transport.
    """

    received: int = 0
    """
    Number of text payloads rendered to the output sink.
    """

    discarded: int = 0
    """
    Number of non-text units received and ignored.
    """
