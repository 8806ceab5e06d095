from __future__ import annotations

from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .registry import RoomRegistry
from .routers import health as health_router
from .routers import websockets as ws_router

# -----------------------------
# FastAPI app factory
# -----------------------------


def create_app(registry: Optional[RoomRegistry] = None) -> FastAPI:
    """Build the relay app around *registry* (a fresh one if omitted)."""
    application = FastAPI(title="Netplay Relay")

    # Clients are emulator front-ends served from anywhere.
    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.include_router(health_router.router)
    application.include_router(ws_router.router)

    application.state.registry = registry or RoomRegistry()
    return application


app = create_app()

__all__ = ["app", "create_app"]
