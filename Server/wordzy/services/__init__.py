"""
Services Package

Contains all business logic and service classes.
"""

from .auth_service import AuthService, get_auth_service
from .game_service import GameService, GuessOutcome
from .room_service import RoomService, RoomOutbox, get_room_service
from .timer_service import RoundTimer

__all__ = [
    'AuthService', 'get_auth_service',
    'GameService', 'GuessOutcome',
    'RoomService', 'RoomOutbox', 'get_room_service',
    'RoundTimer'
]
