"""Exceptions raised inside the relay core."""
from __future__ import annotations


class RelayError(Exception):
    """Base class for every error the relay raises on purpose."""


class ChannelClosed(RelayError):
    """Raised by ``Connection.send`` once the peer is no longer connected."""

    def __init__(self, connection_id: str):
        super().__init__(f"Connection {connection_id} is closed")
        self.connection_id = connection_id


class MalformedMessage(RelayError):
    """An inbound frame that is not a valid relay message."""


__all__ = ["RelayError", "ChannelClosed", "MalformedMessage"]
