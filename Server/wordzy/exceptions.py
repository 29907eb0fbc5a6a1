"""
Wordzy Exceptions

Business-rule failures raised by the services. Each carries a human-readable
``message`` that is sent back to the offending client as-is, either as a
Socket.IO ``error`` event or as the ``message`` field of a JSON error.
"""

from typing import Optional


class WordzyError(Exception):
    """Base class for every error surfaced to a client."""

    default_message = "Request could not be completed"
    status_code = 400

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


# ============ Identity ============

class AuthenticationFailure(WordzyError):
    """Missing, invalid or expired token, or an identity mismatch."""
    default_message = "Authentication required"
    status_code = 401


class RegistrationError(WordzyError):
    """Signup rejected (bad username/password or username taken)."""
    default_message = "Registration failed"


# ============ Room ============

class RoomNotFound(WordzyError):
    status_code = 404

    def __init__(self, room_id):
        self.room_id = room_id
        super().__init__(f"Room {room_id} not found")


class RoomFull(WordzyError):
    status_code = 409

    def __init__(self, room_id, capacity: int):
        self.room_id = room_id
        self.capacity = capacity
        super().__init__(f"Room {room_id} is full ({capacity} players max)")


class RoomAlreadyActive(WordzyError):
    """Late joins are disabled and a round is running."""
    default_message = "A round is already in progress in this room"
    status_code = 409


class PlayerNotInRoom(WordzyError):
    default_message = "You are not a member of this room"
    status_code = 403


class NotOwner(WordzyError):
    default_message = "Only the room owner can do that"
    status_code = 403


class InvalidRoomState(WordzyError):
    default_message = "That action is not available right now"
    status_code = 409


# ============ Round ============

class GameAlreadyActive(WordzyError):
    default_message = "A game is already in progress"
    status_code = 409


class InsufficientPlayers(WordzyError):
    def __init__(self, required: int, actual: int):
        self.required = required
        self.actual = actual
        super().__init__(f"At least {required} players are needed to start (currently {actual})")


class InvalidGuess(WordzyError):
    default_message = "Invalid guess"


# ============ Internal ============

class InternalError(WordzyError):
    """Reported to the client after an unexpected failure closed its room."""
    default_message = "Internal server error; the room has been closed"
    status_code = 500


class InvalidStateTransition(Exception):
    """Internal invariant violation: an illegal room or player status change."""
    pass
