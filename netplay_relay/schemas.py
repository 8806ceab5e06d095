"""Pydantic models for every frame the relay reads or writes.

Inbound frames are validated through ``inbound_adapter``, a union keyed on
the ``type`` field. Outbound models are dumped with ``by_alias=True`` so the
wire keeps the camelCase names clients expect (``roomCode``).
"""
from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

# -----------------------------
# Inbound (client -> relay)
# -----------------------------


class HostRequest(BaseModel):
    type: Literal["host"]


class JoinRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: Literal["join"]
    room_code: str = Field(alias="roomCode")


class SpectateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: Literal["spectate"]
    room_code: str = Field(alias="roomCode")


class InputMessage(BaseModel):
    """Player input (``input``) or host state (``state``); both are opaque."""

    type: Literal["input"]
    input: Any = None
    state: Any = None

    def host_payload(self) -> Any:
        # Hosts normally send ``state``; an ``input``-only frame still relays.
        if "state" in self.model_fields_set:
            return self.state
        return self.input


InboundMessage = Annotated[
    Union[HostRequest, JoinRequest, SpectateRequest, InputMessage],
    Field(discriminator="type"),
]

inbound_adapter: TypeAdapter[InboundMessage] = TypeAdapter(InboundMessage)

# -----------------------------
# Outbound (relay -> client)
# -----------------------------


class RoomCreated(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: Literal["room_created"] = "room_created"
    room_code: str = Field(alias="roomCode")


class Joined(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: Literal["joined"] = "joined"
    room_code: str = Field(alias="roomCode")


class PlayerJoined(BaseModel):
    type: Literal["player_joined"] = "player_joined"
    id: str


class Spectating(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: Literal["spectating"] = "spectating"
    room_code: str = Field(alias="roomCode")


class ErrorMessage(BaseModel):
    type: Literal["error"] = "error"
    message: str


class InputRelay(BaseModel):
    type: Literal["input"] = "input"
    id: str
    input: Any = None


class StateRelay(BaseModel):
    type: Literal["state"] = "state"
    state: Any = None


__all__ = [
    # inbound
    "HostRequest",
    "JoinRequest",
    "SpectateRequest",
    "InputMessage",
    "InboundMessage",
    "inbound_adapter",
    # outbound
    "RoomCreated",
    "Joined",
    "PlayerJoined",
    "Spectating",
    "ErrorMessage",
    "InputRelay",
    "StateRelay",
]
