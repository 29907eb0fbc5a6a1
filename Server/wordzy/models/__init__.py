"""
Data Models Package

Contains all data models and schemas used throughout the application.
"""

from .event import Outgoing
from .game import (
    FeedbackCode, GameSession, LeaderboardEntry, PlayerSessionState, PlayerStatus, SessionStatus
)
from .room import Room, RoomStatus
from .user import Player, User

__all__ = [
    'Outgoing',
    'FeedbackCode', 'GameSession', 'LeaderboardEntry', 'PlayerSessionState',
    'PlayerStatus', 'SessionStatus',
    'Room', 'RoomStatus',
    'Player', 'User'
]
