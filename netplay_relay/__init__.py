"""Websocket relay for host/player/spectator netplay rooms."""

__version__ = "1.0.0"
