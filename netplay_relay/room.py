from __future__ import annotations

from typing import List

from pydantic import BaseModel

from .connection import Connection, Role
from .errors import ChannelClosed
from .logging_config import get_logger

logger = get_logger(__name__)


class Room:
    """Runtime state of one relay session: its host plus joined members."""

    def __init__(self, code: str, host: Connection):
        self.code = code
        # Fixed for the lifetime of the room; there is no host migration.
        self.host = host
        self.players: List[Connection] = []
        self.spectators: List[Connection] = []

    def __repr__(self) -> str:
        return f"<Room {self.code} players={len(self.players)} spectators={len(self.spectators)}>"

    # -------------------- Membership -------------------- #

    def add(self, conn: Connection) -> None:
        if conn.role is Role.PLAYER:
            self.players.append(conn)
        elif conn.role is Role.SPECTATOR:
            self.spectators.append(conn)
        else:
            raise ValueError(f"Cannot add {conn!r} as a room member")

    def remove(self, conn: Connection) -> None:
        """Drop *conn* from whichever member list holds it."""
        self.players = [c for c in self.players if c.id != conn.id]
        self.spectators = [c for c in self.spectators if c.id != conn.id]

    def members(self) -> List[Connection]:
        """Players followed by spectators, i.e. everyone except the host."""
        return self.players + self.spectators

    def holds(self, conn: Connection) -> bool:
        """True if *conn* is this room's host or one of its members."""
        return conn is self.host or any(c.id == conn.id for c in self.members())

    # -------------------- Delivery -------------------- #

    def send_to_host(self, message: BaseModel) -> None:
        try:
            self.host.send(message)
        except ChannelClosed:
            logger.debug(f"Room {self.code}: host {self.host.id} is closed, message skipped")

    def broadcast(self, message: BaseModel) -> None:
        """Send *message* to every open member."""
        payload = message.model_dump(by_alias=True)
        for conn in self.members():
            try:
                conn.send(payload)
            except ChannelClosed:
                # Closed members are removed by the disconnect handler, not here.
                logger.debug(f"Room {self.code}: skipped closed member {conn.id}")

    def close_members(self) -> None:
        for conn in self.members():
            conn.room_code = None
            conn.close()


__all__ = ["Room"]
