"""
Game Service

Contains the round state machine for simultaneous Wordle: target word
selection, guess validation and evaluation, and round completion.
"""

import random
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from .feedback_service import evaluate_guess
from ..config.game_settings import WORD_LIST, WORD_LENGTH, MAX_ATTEMPTS
from ..exceptions import InvalidGuess
from ..models.game import GameSession, PlayerSessionState, PlayerStatus, SessionStatus
from ..models.user import Player


@dataclass
class GuessOutcome:
    """Result of one accepted guess."""
    state: PlayerSessionState
    word: str
    feedback: List[int]
    solved: bool
    failed: bool


class GameService:
    """
    Core round engine.

    This class handles:
    - Word selection that avoids a room's recently used words
    - Guess validation and evaluation
    - Player status transitions (active -> solved / failed)
    - Round expiry and forced completion

    It holds no per-room state; every call receives the GameSession it acts
    on, and the caller is responsible for serializing calls per room.
    """

    def __init__(self,
                 time_limit_ms: int,
                 word_list: Optional[Sequence[str]] = None,
                 max_attempts: int = MAX_ATTEMPTS,
                 strict_dictionary: bool = False,
                 rng: Optional[random.Random] = None):
        self.time_limit_ms = time_limit_ms
        self.word_list = [w.upper() for w in (word_list if word_list is not None else WORD_LIST)]
        self.dictionary = set(self.word_list)
        self.max_attempts = max_attempts
        self.strict_dictionary = strict_dictionary
        self.rng = rng or random.Random()

    def pick_target_word(self, recent_words: Iterable[str] = ()) -> str:
        """
        Choose a target uniformly at random, skipping recently used words.

        Falls back to the whole list when every word has been used recently.
        """
        recent = set(recent_words)
        candidates = [w for w in self.word_list if w not in recent]
        return self.rng.choice(candidates or self.word_list)

    def start_round(self,
                    room_id: str,
                    players: Sequence[Player],
                    now_ms: int,
                    recent_words: Iterable[str] = ()) -> GameSession:
        """
        Creates a new active round with one PlayerSessionState per player.

        Args:
            room_id: Owning room
            players: Current members in join order
            now_ms: Start time on the room clock
            recent_words: Targets to avoid repeating

        Returns:
            GameSession with a fresh session id
        """
        session = GameSession(
            room_id=room_id,
            target_word=self.pick_target_word(recent_words),
            time_limit_ms=self.time_limit_ms,
            started_at_ms=now_ms,
            max_attempts=self.max_attempts,
        )
        for order, player in enumerate(players):
            session.players[player.id] = PlayerSessionState(
                player_id=player.id,
                username=player.username,
                join_order=order,
            )
        return session

    def normalize_guess(self, word) -> str:
        """Returns the uppercase guess or raises InvalidGuess."""
        if not word or not isinstance(word, str):
            raise InvalidGuess("Guess must be a valid string")

        normalized = word.strip().upper()

        if len(normalized) != WORD_LENGTH:
            raise InvalidGuess(f"Guess must be exactly {WORD_LENGTH} letters")

        if not normalized.isalpha():
            raise InvalidGuess("Guess must contain only letters")

        if self.strict_dictionary and normalized not in self.dictionary:
            raise InvalidGuess("Word not in word list")

        return normalized

    def submit_guess(self, session: GameSession, player_id: str, word, now_ms: int) -> GuessOutcome:
        """
        Processes a guess and updates the player's state.

        Raises:
            InvalidGuess: round not active, player not in this round, player
                already finished, attempts exhausted, or malformed word
        """
        if session.status is not SessionStatus.ACTIVE:
            raise InvalidGuess("The round is not active")

        state = session.players.get(player_id)
        if state is None:
            raise InvalidGuess("You are not playing in this round; wait for the next one")

        if state.status is PlayerStatus.SOLVED:
            raise InvalidGuess("You already solved this word")

        if state.status is PlayerStatus.FAILED or state.attempts >= self.max_attempts:
            raise InvalidGuess("You have no guesses left this round")

        normalized = self.normalize_guess(word)
        feedback = evaluate_guess(normalized, session.target_word)
        state.record_guess(normalized, feedback)

        solved = normalized == session.target_word
        failed = False
        if solved:
            state.mark_solved(session.elapsed_ms(now_ms))
        elif state.attempts >= self.max_attempts:
            state.mark_failed(session.elapsed_ms(now_ms), session.next_fail_sequence())
            failed = True

        return GuessOutcome(state=state, word=normalized, feedback=feedback, solved=solved, failed=failed)

    def time_left_ms(self, session: GameSession, now_ms: int) -> int:
        return max(0, session.deadline_ms - now_ms)

    def is_expired(self, session: GameSession, now_ms: int) -> bool:
        return now_ms >= session.deadline_ms

    def all_finished(self, session: GameSession) -> bool:
        return all(not state.is_active for state in session.players.values())

    def end_round(self, session: GameSession, now_ms: int) -> List[PlayerSessionState]:
        """
        Ends the round, failing every player still active.

        Players forced out together share one fail sequence number so the
        ranking falls back to join order among them.

        Returns:
            The states that were forced to failed
        """
        if session.status is SessionStatus.ENDED:
            return []

        forced = [state for state in session.players.values() if state.is_active]
        if forced:
            sequence = session.next_fail_sequence()
            elapsed = min(session.elapsed_ms(now_ms), session.time_limit_ms)
            for state in forced:
                state.mark_failed(elapsed, sequence)

        session.status = SessionStatus.ENDED
        session.ended_at_ms = now_ms
        return forced
