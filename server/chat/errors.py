"""
Error types raised inside the relay.

Every error is local to one session; none of them stops the listener.
"""


class RelayError(Exception):
    """Base class for relay errors."""


class NegotiationError(RelayError):
    """The first line did not contain a usable display name."""


class RoutingError(RelayError):
    """A command could not be routed; the message is the reply for the sender."""


class TransportError(RelayError):
    """Reading from or writing to a connection failed."""


class DeliveryFailure(RelayError):
    """A queued line could not be written to one recipient's connection."""


class InvalidTransition(RelayError):
    """A session was asked to move to an earlier lifecycle state."""
