import os
import string

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", 3000))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("LOG_FILE", None)

# Outbound messages buffered per connection before the oldest is dropped.
OUTBOUND_QUEUE_SIZE = int(os.getenv("OUTBOUND_QUEUE_SIZE", 256))

# Room codes are short base-36 strings, e.g. "k3x9qa".
ROOM_CODE_LENGTH = int(os.getenv("ROOM_CODE_LENGTH", 6))
ROOM_CODE_ALPHABET = string.digits + string.ascii_lowercase

HEALTH_MESSAGE = "Netplay relay server is running"

__all__ = [
    "HOST",
    "PORT",
    "LOG_LEVEL",
    "LOG_FILE",
    "OUTBOUND_QUEUE_SIZE",
    "ROOM_CODE_LENGTH",
    "ROOM_CODE_ALPHABET",
    "HEALTH_MESSAGE",
]
