"""Room registry: lifecycle, role assignment and relay routing.

Every handler here is synchronous and runs to completion on the event loop
thread, which makes the loop the single owner of all room state. Outbound
traffic only ever lands on ``Connection`` queues, so nothing in this module
waits on a peer.
"""
from __future__ import annotations

import random
from typing import Any, Callable, Dict, Optional, Union

from pydantic import ValidationError

from .connection import Connection, Role
from .constants import ROOM_CODE_ALPHABET, ROOM_CODE_LENGTH
from .errors import ChannelClosed, MalformedMessage
from .logging_config import get_logger
from .room import Room
from .schemas import (
    ErrorMessage,
    HostRequest,
    InputMessage,
    InputRelay,
    Joined,
    JoinRequest,
    PlayerJoined,
    RoomCreated,
    SpectateRequest,
    Spectating,
    StateRelay,
    inbound_adapter,
)

logger = get_logger(__name__)

ROOM_NOT_FOUND = "Room not found"
ALREADY_IN_ROOM = "Already in a room"


def random_room_code() -> str:
    return "".join(random.choices(ROOM_CODE_ALPHABET, k=ROOM_CODE_LENGTH))


class RoomRegistry:
    """Owns every live room, keyed by room code."""

    def __init__(self, code_factory: Optional[Callable[[], str]] = None):
        self.rooms: Dict[str, Room] = {}
        self._code_factory = code_factory or random_room_code

    def get(self, room_code: Optional[str]) -> Optional[Room]:
        if room_code is None:
            return None
        return self.rooms.get(room_code)

    def generate_code(self) -> str:
        """Return a code no live room is using, regenerating on collision."""
        code = self._code_factory()
        while code in self.rooms:
            logger.debug(f"Room code {code} already in use, regenerating")
            code = self._code_factory()
        return code

    # ---------------------------------------------------------------------
    # Inbound dispatch
    # ---------------------------------------------------------------------

    def parse(self, raw: Union[str, bytes]) -> Any:
        try:
            return inbound_adapter.validate_json(raw)
        except ValidationError as exc:
            raise MalformedMessage(str(exc)) from exc

    def handle_message(self, conn: Connection, raw: Union[str, bytes]) -> None:
        """Parse one inbound frame from *conn* and act on it.

        Frames that fail to parse are logged and dropped; the connection
        stays usable for whatever it sends next.
        """
        try:
            message = self.parse(raw)
        except MalformedMessage as exc:
            logger.warning(f"Ignoring malformed message from {conn.id}: {raw!r} ({exc})")
            return

        if isinstance(message, HostRequest):
            self.create_room(conn)
        elif isinstance(message, JoinRequest):
            self.join_as_player(conn, message.room_code)
        elif isinstance(message, SpectateRequest):
            self.join_as_spectator(conn, message.room_code)
        elif isinstance(message, InputMessage):
            if conn.role is Role.HOST:
                self.relay_input(conn, message.host_payload())
            else:
                self.relay_input(conn, message.input)

    # ---------------------------------------------------------------------
    # Room lifecycle
    # ---------------------------------------------------------------------

    def _reject_reassignment(self, conn: Connection) -> bool:
        """A connection takes a role once; later attempts get an error."""
        if conn.role is Role.UNASSIGNED:
            return False
        logger.info(f"Connection {conn.id} is already {conn.role.value} in room {conn.room_code}, request rejected")
        self._reply(conn, ErrorMessage(message=ALREADY_IN_ROOM))
        return True

    def create_room(self, conn: Connection) -> Optional[Room]:
        if self._reject_reassignment(conn):
            return None
        code = self.generate_code()
        room = Room(code, host=conn)
        self.rooms[code] = room
        conn.role = Role.HOST
        conn.room_code = code
        self._reply(conn, RoomCreated(room_code=code))
        logger.info(f"Room {code} created by host {conn.id}")
        return room

    def join_as_player(self, conn: Connection, room_code: str) -> Optional[Room]:
        room = self._lookup_for_join(conn, room_code)
        if room is None:
            return None
        conn.role = Role.PLAYER
        conn.room_code = room.code
        room.add(conn)
        self._reply(conn, Joined(room_code=room.code))
        room.send_to_host(PlayerJoined(id=conn.id))
        logger.info(f"Player {conn.id} joined room {room.code}")
        return room

    def join_as_spectator(self, conn: Connection, room_code: str) -> Optional[Room]:
        room = self._lookup_for_join(conn, room_code)
        if room is None:
            return None
        conn.role = Role.SPECTATOR
        conn.room_code = room.code
        room.add(conn)
        self._reply(conn, Spectating(room_code=room.code))
        logger.info(f"Spectator {conn.id} joined room {room.code}")
        return room

    def _lookup_for_join(self, conn: Connection, room_code: str) -> Optional[Room]:
        if self._reject_reassignment(conn):
            return None
        room = self.rooms.get(room_code)
        if room is None:
            logger.info(f"Connection {conn.id} asked for unknown room {room_code!r}")
            self._reply(conn, ErrorMessage(message=ROOM_NOT_FOUND))
        return room

    def delete_room(self, room_code: str) -> None:
        room = self.rooms.pop(room_code, None)
        if room is not None:
            logger.info(f"Room {room_code} deleted")

    # ---------------------------------------------------------------------
    # Relay
    # ---------------------------------------------------------------------

    def relay_input(self, conn: Connection, payload: Any) -> None:
        """Route *payload* according to the sender's role.

        Players reach the host only; the host reaches every player and
        spectator. Anyone else is ignored.
        """
        room = self.get(conn.room_code)
        if room is None or not room.holds(conn):
            logger.debug(f"Input from {conn.id} outside any room ignored")
            return

        if conn.role is Role.PLAYER:
            room.send_to_host(InputRelay(id=conn.id, input=payload))
        elif conn.role is Role.HOST:
            room.broadcast(StateRelay(state=payload))
        elif conn.role is Role.SPECTATOR:
            logger.debug(f"Spectator {conn.id} in room {room.code} cannot send input")

    # ---------------------------------------------------------------------
    # Disconnect
    # ---------------------------------------------------------------------

    def handle_disconnect(self, conn: Connection) -> None:
        room = self.get(conn.room_code)
        if room is None:
            return

        if conn.role is Role.HOST:
            # Host departure always ends the room; members are cut loose.
            room.close_members()
            self.delete_room(room.code)
        else:
            room.remove(conn)
            logger.info(f"{conn.role.value.capitalize()} {conn.id} left room {room.code}")

    # ---------------------------------------------------------------------
    # Helpers
    # ---------------------------------------------------------------------

    def _reply(self, conn: Connection, message: Any) -> None:
        try:
            conn.send(message)
        except ChannelClosed:
            logger.debug(f"Reply to closed connection {conn.id} dropped")


__all__ = ["RoomRegistry", "random_room_code", "ROOM_NOT_FOUND", "ALREADY_IN_ROOM"]
