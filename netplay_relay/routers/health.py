from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from ..constants import HEALTH_MESSAGE

router = APIRouter(prefix="", tags=["health"])


@router.get("/", response_class=PlainTextResponse)
async def health() -> str:
    return HEALTH_MESSAGE
