"""
Helper Functions

Contains utility functions used throughout the application.
"""

import random
import string
import time
from typing import Optional

# No 0/O or 1/I so codes survive being read aloud
ROOM_CODE_ALPHABET = ''.join(c for c in string.ascii_uppercase + string.digits if c not in '0O1I')
ROOM_CODE_LENGTH = 5


def generate_room_code(length: int = ROOM_CODE_LENGTH) -> str:
    """
    Generate a random room code such as ``K7QXM``.

    Uniqueness is not checked here; the caller retries on collision.
    """
    return ''.join(random.choices(ROOM_CODE_ALPHABET, k=length))


def normalize_room_id(room_id) -> Optional[str]:
    """Room codes are case-insensitive on input."""
    if room_id is None:
        return None
    normalized = str(room_id).strip().upper()
    return normalized or None


def monotonic_ms() -> int:
    """Milliseconds from a clock that never goes backwards."""
    return int(time.monotonic() * 1000)
