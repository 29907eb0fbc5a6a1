"""
Utilities Package

Contains utility functions, decorators, and helper modules.
"""

from .decorators import require_auth
from .helpers import generate_room_code, normalize_room_id, monotonic_ms
from .game_logger import game_logger

__all__ = ['require_auth', 'generate_room_code', 'normalize_room_id', 'monotonic_ms', 'game_logger']
