class ParleyError(Exception):
    """Base class for every error raised by a parley session."""


class ConnectError(ParleyError):
    """
    The duplex channel could not be established: unreachable host,
    refused connection, invalid endpoint, timeout or failed protocol
    negotiation. Fatal, the session never starts.
    """


class ReceiveError(ParleyError):
    """
    A transport fault occurred while waiting for the next inbound unit.
    Only terminates the inbound direction.
    """


class EndOfStream(ParleyError):
    """The peer closed the channel in an orderly fashion."""


class SendError(ParleyError):
    """
    An outbound unit could not be handed to the transport because the
    connection is closed or faulted. Fatal for the session.
    """
