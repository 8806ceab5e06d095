from __future__ import annotations

import asyncio
import contextlib

from fastapi import APIRouter, WebSocket

from ..connection import Connection
from ..logging_config import get_logger
from ..registry import RoomRegistry

router = APIRouter(prefix="", tags=["ws"])

logger = get_logger(__name__)


@router.websocket("/")
@router.websocket("/ws")
async def relay_endpoint(ws: WebSocket):
    registry: RoomRegistry = ws.app.state.registry
    await ws.accept()
    conn = Connection()
    writer = asyncio.create_task(conn.pump(ws))
    logger.info(f"Client {conn.id} connected")

    try:
        while True:
            # Raw receive keeps working after the writer has closed our side.
            message = await ws.receive()
            if message["type"] == "websocket.disconnect":
                break
            raw = message.get("text")
            if raw is None:
                raw = message.get("bytes") or b""
            registry.handle_message(conn, raw)
    finally:
        conn.detach()
        registry.handle_disconnect(conn)
        writer.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await writer
        logger.info(f"Client {conn.id} disconnected")
