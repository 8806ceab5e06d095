"""Per-socket session state and the bounded outbound queue behind it."""
from __future__ import annotations

import asyncio
import enum
import uuid
from typing import Optional, Union

from fastapi import WebSocket, WebSocketDisconnect
from pydantic import BaseModel

from .constants import OUTBOUND_QUEUE_SIZE
from .errors import ChannelClosed
from .logging_config import get_logger

logger = get_logger(__name__)

# Queued after the last real message when the server closes a connection.
_CLOSE = object()


class Role(enum.Enum):
    UNASSIGNED = "unassigned"
    HOST = "host"
    PLAYER = "player"
    SPECTATOR = "spectator"


class Connection:
    """One client socket as seen by the room registry.

    ``send`` never blocks: messages go onto a bounded queue that ``pump``
    drains onto the websocket. When the queue is full the oldest message is
    dropped so a stalled peer cannot hold up anyone else in its room.
    """

    def __init__(self, max_queue: int = OUTBOUND_QUEUE_SIZE):
        self.id = str(uuid.uuid4())
        self.role = Role.UNASSIGNED
        self.room_code: Optional[str] = None
        self.is_open = True
        self.dropped = 0
        self.outbox: asyncio.Queue = asyncio.Queue(maxsize=max_queue)

    def __repr__(self) -> str:
        return f"<Connection {self.id} role={self.role.value} room={self.room_code}>"

    # -------------------- Outbound -------------------- #

    def send(self, message: Union[BaseModel, dict]) -> None:
        """Queue *message* for delivery.

        Raises
        ------
        ChannelClosed
            If the connection has already been closed by either side.
        """
        if not self.is_open:
            raise ChannelClosed(self.id)
        if isinstance(message, BaseModel):
            message = message.model_dump(by_alias=True)
        self._enqueue(message)

    def _enqueue(self, item: object) -> None:
        if self.outbox.full():
            self.outbox.get_nowait()
            self.dropped += 1
            logger.warning(f"Outbound queue full for {self.id}, dropped oldest message ({self.dropped} total)")
        self.outbox.put_nowait(item)

    def close(self) -> None:
        """Server-side close: flush what is queued, then close the socket."""
        if not self.is_open:
            return
        self.is_open = False
        self._enqueue(_CLOSE)

    def detach(self) -> None:
        """The peer went away; nothing queued will ever be delivered."""
        self.is_open = False

    def drain(self) -> list:
        """Pop every queued message without sending it (close marker excluded)."""
        items = []
        while not self.outbox.empty():
            item = self.outbox.get_nowait()
            if item is not _CLOSE:
                items.append(item)
        return items

    # -------------------- Writer -------------------- #

    async def pump(self, ws: WebSocket) -> None:
        """Deliver queued messages to *ws* in order until closed."""
        try:
            while True:
                item = await self.outbox.get()
                if item is _CLOSE:
                    await ws.close(code=1000)
                    return
                await ws.send_json(item)
        except (WebSocketDisconnect, RuntimeError, OSError) as exc:
            # Peer vanished mid-send; the reader loop will report the disconnect.
            logger.debug(f"Writer for {self.id} stopped: {exc!r}")
            self.is_open = False


__all__ = ["Role", "Connection"]
