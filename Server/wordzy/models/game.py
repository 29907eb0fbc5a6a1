"""
Game Data Models

Contains all round-related data structures and enums.
"""

import uuid
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Dict, List, Optional

from ..exceptions import InvalidStateTransition


class FeedbackCode(IntEnum):
    """Per-letter evaluation of a guess, serialized as its integer value."""
    ABSENT = 0
    PRESENT = 1
    CORRECT = 2


class PlayerStatus(Enum):
    """Outcome of one player within a round. Only ACTIVE can change."""
    ACTIVE = "active"
    SOLVED = "solved"
    FAILED = "failed"


class SessionStatus(Enum):
    ACTIVE = "active"
    ENDED = "ended"


@dataclass
class PlayerSessionState:
    """One player's guesses and outcome within a single round."""
    player_id: str
    username: str
    join_order: int
    guesses: List[str] = field(default_factory=list)
    feedbacks: List[List[int]] = field(default_factory=list)
    status: PlayerStatus = PlayerStatus.ACTIVE
    solve_attempts: Optional[int] = None
    solve_time_ms: Optional[int] = None
    failed_at_ms: Optional[int] = None
    fail_sequence: Optional[int] = None

    @property
    def attempts(self) -> int:
        return len(self.guesses)

    @property
    def is_active(self) -> bool:
        return self.status is PlayerStatus.ACTIVE

    def _require_active(self, action: str) -> None:
        if self.status is not PlayerStatus.ACTIVE:
            raise InvalidStateTransition(
                f"Cannot {action} for player {self.player_id} in status {self.status.value}"
            )

    def record_guess(self, word: str, feedback: List[int]) -> None:
        self._require_active("record a guess")
        self.guesses.append(word)
        self.feedbacks.append(list(feedback))

    def mark_solved(self, elapsed_ms: int) -> None:
        self._require_active("mark solved")
        self.status = PlayerStatus.SOLVED
        self.solve_attempts = len(self.guesses)
        self.solve_time_ms = elapsed_ms

    def mark_failed(self, elapsed_ms: int, sequence: int) -> None:
        self._require_active("mark failed")
        self.status = PlayerStatus.FAILED
        self.failed_at_ms = elapsed_ms
        self.fail_sequence = sequence

    def to_board(self) -> Dict:
        """The player's own board, sent only to that player."""
        return {
            'guesses': list(self.guesses),
            'feedbacks': [list(f) for f in self.feedbacks],
            'status': self.status.value,
            'attempts': self.attempts,
        }


@dataclass
class GameSession:
    """Server-side state of one timed round in a room."""
    room_id: str
    target_word: str
    time_limit_ms: int
    started_at_ms: int
    max_attempts: int
    players: Dict[str, PlayerSessionState] = field(default_factory=dict)
    session_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    status: SessionStatus = SessionStatus.ACTIVE
    ended_at_ms: Optional[int] = None
    fail_counter: int = 0

    @property
    def deadline_ms(self) -> int:
        return self.started_at_ms + self.time_limit_ms

    @property
    def is_active(self) -> bool:
        return self.status is SessionStatus.ACTIVE

    def elapsed_ms(self, now_ms: int) -> int:
        return max(0, now_ms - self.started_at_ms)

    def next_fail_sequence(self) -> int:
        self.fail_counter += 1
        return self.fail_counter

    def to_public_state(self) -> Dict:
        """Round description broadcast with ``game-started``; never includes the target."""
        return {
            'sessionId': self.session_id,
            'roomId': self.room_id,
            'status': self.status.value,
            'timeLimit': self.time_limit_ms,
            'maxAttempts': self.max_attempts,
            'wordLength': len(self.target_word),
            'players': [
                {'playerId': state.player_id, 'username': state.username}
                for state in self.players.values()
            ],
        }


@dataclass
class LeaderboardEntry:
    """Derived ranking row; rebuilt from PlayerSessionState on every change."""
    rank: int
    player_id: str
    username: str
    status: PlayerStatus
    attempts: int
    solve_attempts: Optional[int]
    solve_time_ms: Optional[int]
    time_formatted: Optional[str]

    def to_dict(self) -> Dict:
        return {
            'rank': self.rank,
            'playerId': self.player_id,
            'username': self.username,
            'status': self.status.value,
            'isSolved': self.status is PlayerStatus.SOLVED,
            'attempts': self.attempts,
            'solveAttempts': self.solve_attempts,
            'solveTime': self.solve_time_ms,
            'timeFormatted': self.time_formatted,
        }
