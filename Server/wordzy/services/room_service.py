"""
Room Service

Manages room membership, ownership and lifecycle, and drives rounds through
the GameService.

Every room has its own context (room, current round, recently used words,
lock, outbox). All mutations of a room happen while holding that room's lock
and return the server-to-client messages they caused. The same messages are
queued on the room's outbox, which the transport flushes in commit order
after the lock is released.
"""

import threading
from collections import deque
from contextlib import contextmanager
from typing import Callable, Deque, Dict, Iterator, List, Optional, Tuple

from flask import current_app

from .game_service import GameService
from .ranking_service import leaderboard_payload
from ..config.game_settings import ROOM_CAPACITY
from ..exceptions import (
    GameAlreadyActive, InsufficientPlayers, InvalidGuess, InvalidRoomState, NotOwner,
    PlayerNotInRoom, RoomAlreadyActive, RoomFull, RoomNotFound
)
from ..models.event import Outgoing
from ..models.game import GameSession
from ..models.room import Room, RoomStatus
from ..models.user import Player
from ..utils.game_logger import game_logger
from ..utils.helpers import generate_room_code, monotonic_ms, normalize_room_id


class RoomOutbox:
    """FIFO of committed messages for one room."""

    def __init__(self):
        self._queue: Deque[Outgoing] = deque()
        self._lock = threading.Lock()

    def put(self, events: List[Outgoing]) -> None:
        self._queue.extend(events)

    def pending(self) -> List[Outgoing]:
        return list(self._queue)

    def flush(self, deliver: Callable[[Outgoing], None]) -> int:
        """Deliver everything queued so far, oldest first."""
        delivered = 0
        with self._lock:
            while self._queue:
                deliver(self._queue.popleft())
                delivered += 1
        return delivered


class RoomContext:
    """Everything the server holds for one room."""

    def __init__(self, room: Room, recent_word_history: int):
        self.room = room
        self.session: Optional[GameSession] = None
        self.recent_words: Deque[str] = deque(maxlen=recent_word_history)
        self.lock = threading.RLock()
        self.outbox = RoomOutbox()
        self.closed = False


class RoomService:
    """
    Room manager.

    This class handles:
    - Room creation, joining, leaving and disbanding
    - Ownership transfer to the earliest-joined remaining member
    - Starting, restarting and ending rounds
    - Routing guesses to the GameService and publishing the results
    - Countdown ticks, ignoring ticks for superseded rounds
    """

    def __init__(self,
                 game_service: GameService,
                 timer=None,
                 capacity: int = ROOM_CAPACITY,
                 min_players: int = 2,
                 allow_late_join: bool = True,
                 recent_word_history: int = 10,
                 clock: Callable[[], int] = monotonic_ms,
                 code_factory: Callable[[], str] = generate_room_code):
        self.game_service = game_service
        self.timer = timer
        self.capacity = capacity
        self.min_players = min_players
        self.allow_late_join = allow_late_join
        self.recent_word_history = recent_word_history
        self._clock = clock
        self._code_factory = code_factory
        self._rooms: Dict[str, RoomContext] = {}
        self._registry_lock = threading.Lock()

    # ---- Registry ----

    def _lookup(self, room_id) -> Optional[RoomContext]:
        with self._registry_lock:
            return self._rooms.get(normalize_room_id(room_id))

    def _context(self, room_id) -> RoomContext:
        ctx = self._lookup(room_id)
        if ctx is None:
            raise RoomNotFound(normalize_room_id(room_id) or room_id)
        return ctx

    @contextmanager
    def _locked(self, room_id) -> Iterator[RoomContext]:
        ctx = self._context(room_id)
        with ctx.lock:
            # The room may have been disbanded while we waited for the lock
            if ctx.closed:
                raise RoomNotFound(ctx.room.room_id)
            yield ctx

    def _commit(self, ctx: RoomContext, events: List[Outgoing]) -> List[Outgoing]:
        ctx.outbox.put(events)
        return events

    def room_exists(self, room_id) -> bool:
        return self._lookup(room_id) is not None

    def find_outbox(self, room_id) -> Optional[RoomOutbox]:
        ctx = self._lookup(room_id)
        return ctx.outbox if ctx is not None else None

    def create_room(self, owner_id: str, username: str) -> str:
        """
        Creates a room whose first member and owner is the creator.

        Returns:
            str: The new 5-character room code
        """
        with self._registry_lock:
            room_id = self._code_factory()
            while room_id in self._rooms:
                game_logger.logger.warning(f"Room code collision detected, regenerating: {room_id}")
                room_id = self._code_factory()
            room = Room(room_id=room_id, owner_id=owner_id, capacity=self.capacity)
            room.add_member(Player(id=owner_id, username=username or owner_id))
            self._rooms[room_id] = RoomContext(room, self.recent_word_history)

        game_logger.log_game_event(room_id, 'room_created', owner_id, username=username)
        return room_id

    def get_room(self, room_id) -> Dict:
        with self._locked(room_id) as ctx:
            return ctx.room.to_dict()

    def get_session(self, room_id) -> Optional[GameSession]:
        with self._locked(room_id) as ctx:
            return ctx.session

    # ---- Membership ----

    def join(self, room_id, player_id: str, username: Optional[str] = None) -> List[Outgoing]:
        """
        Adds a player to a room, or re-announces the room to an existing member.

        A player rejoining while their round is still running gets their board
        back in ``room-joined``. Players joining mid-round sit out until the
        next round unless late joins are disabled.
        """
        with self._locked(room_id) as ctx:
            room = ctx.room
            is_new = not room.has_member(player_id)

            if is_new:
                if room.is_full:
                    raise RoomFull(room.room_id, room.capacity)
                session = ctx.session
                if (room.status is RoomStatus.ACTIVE and not self.allow_late_join
                        and (session is None or player_id not in session.players)):
                    raise RoomAlreadyActive()
                player = Player(id=player_id, username=username or player_id)
                room.add_member(player)
                game_logger.log_game_event(room.room_id, 'player_joined', player_id,
                                           username=player.username, members=len(room.members))

            events = [Outgoing.private(player_id, 'room-joined', self._join_payload(ctx, player_id))]
            if is_new:
                events.append(Outgoing.broadcast(room.member_ids(), 'player-joined', {
                    'room': room.to_dict(),
                    'playerId': player_id,
                    'username': room.members[player_id].username,
                }, exclude=player_id))
            return self._commit(ctx, events)

    def _join_payload(self, ctx: RoomContext, player_id: str) -> Dict:
        payload = {
            'room': ctx.room.to_dict(),
            'gameState': None,
            'board': None,
            'timeLeft': None,
        }
        session = ctx.session
        if session is None:
            return payload

        payload['gameState'] = session.to_public_state()
        payload.update(leaderboard_payload(session.players.values()))
        if session.is_active:
            payload['timeLeft'] = self.game_service.time_left_ms(session, self._clock())
        else:
            payload['targetWord'] = session.target_word

        state = session.players.get(player_id)
        if state is not None:
            payload['board'] = state.to_board()
        return payload

    def leave(self, room_id, player_id: str, disconnected: bool = False) -> List[Outgoing]:
        """
        Removes a member. Ownership passes to the earliest-joined remaining
        member; the last member leaving disbands the room.

        The leaver's round state is kept, so a reconnect can resume it.
        """
        with self._locked(room_id) as ctx:
            room = ctx.room
            if not room.has_member(player_id):
                raise PlayerNotInRoom()

            previous_owner = room.owner_id
            player = room.remove_member(player_id)
            game_logger.log_game_event(room.room_id,
                                       'player_disconnected' if disconnected else 'player_left',
                                       player_id, username=player.username, members=len(room.members))

            if room.is_empty:
                return self._commit(ctx, self._disband(ctx, 'empty'))

            members = room.member_ids()
            events = [Outgoing.broadcast(members, 'player-disconnected' if disconnected else 'player-left', {
                'room': room.to_dict(),
                'playerId': player_id,
                'username': player.username,
            })]

            if room.owner_id != previous_owner:
                new_owner = room.members[room.owner_id]
                game_logger.log_game_event(room.room_id, 'owner_changed', new_owner.id,
                                           previous_owner=previous_owner)
                events.append(Outgoing.broadcast(members, 'owner-changed', {
                    'newOwnerId': new_owner.id,
                    'newOwnerUsername': new_owner.username,
                    'room': room.to_dict(),
                }))
            return self._commit(ctx, events)

    def disband(self, room_id, player_id: Optional[str] = None, reason: str = 'disbanded') -> List[Outgoing]:
        """Tears a room down. When ``player_id`` is given it must be the owner."""
        with self._locked(room_id) as ctx:
            if player_id is not None:
                self._require_owner(ctx.room, player_id)
            return self._commit(ctx, self._disband(ctx, reason))

    def terminate(self, room_id, reason: str = 'internal-error') -> List[Outgoing]:
        """Force-closes a room after an unexpected failure. No-op if it is already gone."""
        ctx = self._lookup(room_id)
        if ctx is None:
            return []
        with ctx.lock:
            if ctx.closed:
                return []
            return self._commit(ctx, self._disband(ctx, reason))

    def _disband(self, ctx: RoomContext, reason: str) -> List[Outgoing]:
        room = ctx.room
        recipients = room.member_ids()

        session = ctx.session
        if session is not None and session.is_active:
            self.game_service.end_round(session, self._clock())
        self._cancel_timer(room.room_id)
        ctx.session = None
        ctx.closed = True

        with self._registry_lock:
            if self._rooms.get(room.room_id) is ctx:
                del self._rooms[room.room_id]

        game_logger.log_game_event(room.room_id, 'room_disbanded', None, reason=reason)
        return [Outgoing.broadcast(recipients, 'room-disbanded', {'roomId': room.room_id, 'reason': reason})]

    def _require_owner(self, room: Room, player_id: str) -> None:
        if not room.has_member(player_id):
            raise PlayerNotInRoom()
        if room.owner_id != player_id:
            raise NotOwner()

    # ---- Rounds ----

    def start_game(self, room_id, player_id: str) -> List[Outgoing]:
        """Owner starts the first round of a waiting room."""
        with self._locked(room_id) as ctx:
            room = ctx.room
            self._require_owner(room, player_id)
            if room.status is RoomStatus.ACTIVE:
                raise GameAlreadyActive()
            if room.status is RoomStatus.FINISHED:
                raise InvalidRoomState("This round has finished; use start again to play another")
            return self._commit(ctx, self._begin_round(ctx))

    def start_again(self, room_id, player_id: str) -> List[Outgoing]:
        """Owner starts a fresh round with whoever is in the room now."""
        with self._locked(room_id) as ctx:
            room = ctx.room
            self._require_owner(room, player_id)
            if room.status is RoomStatus.ACTIVE:
                raise GameAlreadyActive()
            if room.status is RoomStatus.WAITING:
                raise InvalidRoomState("No round has been played yet; use start game")
            self._check_player_count(room)
            room.transition(RoomStatus.WAITING)
            return self._commit(ctx, self._begin_round(ctx))

    def _check_player_count(self, room: Room) -> None:
        if len(room.members) < self.min_players:
            raise InsufficientPlayers(self.min_players, len(room.members))

    def _begin_round(self, ctx: RoomContext) -> List[Outgoing]:
        room = ctx.room
        self._check_player_count(room)

        session = self.game_service.start_round(
            room.room_id, list(room.members.values()), self._clock(), ctx.recent_words
        )
        ctx.session = session
        ctx.recent_words.append(session.target_word)
        room.transition(RoomStatus.ACTIVE)
        self._start_timer(room.room_id, session.session_id)

        game_logger.log_game_event(room.room_id, 'round_started', room.owner_id,
                                   session_id=session.session_id,
                                   players=len(session.players),
                                   time_limit_ms=session.time_limit_ms)
        return [Outgoing.broadcast(room.member_ids(), 'game-started', {'gameState': session.to_public_state()})]

    def submit_word(self, room_id, player_id: str, word) -> List[Outgoing]:
        """
        Scores a guess. The feedback letters go only to the guesser; everyone
        else learns that a guess happened and how the standings moved.
        """
        with self._locked(room_id) as ctx:
            room = ctx.room
            if not room.has_member(player_id):
                raise PlayerNotInRoom()

            session = ctx.session
            if room.status is not RoomStatus.ACTIVE or session is None or not session.is_active:
                raise InvalidGuess("No round is in progress")

            now = self._clock()
            if self.game_service.is_expired(session, now):
                self._commit(ctx, self._finish_round(ctx, now, 'time-up'))
                raise InvalidGuess("Time is up")

            outcome = self.game_service.submit_guess(session, player_id, word, now)
            state = outcome.state
            members = room.member_ids()

            game_logger.log_game_event(room.room_id, 'guess_submitted', player_id,
                                       attempts=state.attempts, status=state.status.value)

            events = [
                Outgoing.private(player_id, 'word-feedback', {
                    'word': outcome.word,
                    'feedback': outcome.feedback,
                    'attempts': state.attempts,
                    'status': state.status.value,
                }),
                Outgoing.broadcast(members, 'player-guess', {
                    'playerId': player_id,
                    'username': state.username,
                    'attempts': state.attempts,
                }, exclude=player_id),
            ]

            if outcome.solved:
                game_logger.log_game_event(room.room_id, 'player_solved', player_id,
                                           attempts=state.solve_attempts, solve_time_ms=state.solve_time_ms)
                events.append(Outgoing.broadcast(members, 'word-solved', {
                    'playerId': player_id,
                    'username': state.username,
                    'attempts': state.solve_attempts,
                    'solveTime': state.solve_time_ms,
                }))
            elif outcome.failed:
                game_logger.log_game_event(room.room_id, 'player_failed', player_id)
                events.append(Outgoing.broadcast(members, 'player-failed', {
                    'playerId': player_id,
                    'username': state.username,
                }))

            events.append(Outgoing.broadcast(members, 'leaderboard-update',
                                             leaderboard_payload(session.players.values())))

            if self.game_service.all_finished(session):
                events.extend(self._finish_round(ctx, now, 'all-finished'))
            return self._commit(ctx, events)

    def tick(self, room_id, session_id: str) -> Tuple[List[Outgoing], bool]:
        """
        One countdown step for the round ``session_id``.

        Returns:
            (events, keep_running). Ticks for a round that is no longer the
            room's current active round do nothing and stop the timer.
        """
        ctx = self._lookup(room_id)
        if ctx is None:
            return [], False

        with ctx.lock:
            session = ctx.session
            if ctx.closed or session is None or session.session_id != session_id or not session.is_active:
                game_logger.logger.debug(f"Ignoring stale timer tick for room {room_id} session {session_id}")
                return [], False

            now = self._clock()
            time_left = self.game_service.time_left_ms(session, now)
            events = [Outgoing.broadcast(ctx.room.member_ids(), 'timer-update', {'timeLeft': time_left})]
            if time_left <= 0:
                events.extend(self._finish_round(ctx, now, 'time-up'))
                return self._commit(ctx, events), False
            return self._commit(ctx, events), True

    def _finish_round(self, ctx: RoomContext, now: int, reason: str) -> List[Outgoing]:
        room = ctx.room
        session = ctx.session

        forced = self.game_service.end_round(session, now)
        room.transition(RoomStatus.FINISHED)
        self._cancel_timer(room.room_id)

        standings = leaderboard_payload(session.players.values())
        can_restart = room.owner_id is not None and room.has_member(room.owner_id)
        members = room.member_ids()

        game_logger.log_game_event(room.room_id, 'round_ended', None,
                                   session_id=session.session_id,
                                   reason=reason,
                                   target_word=session.target_word,
                                   forced_failures=len(forced))

        events = []
        if forced:
            events.append(Outgoing.broadcast(members, 'leaderboard-update', standings))
        events.append(Outgoing.broadcast(members, 'game-ended', {
            'leaderboard': standings['leaderboard'],
            'playerStatuses': standings['playerStatuses'],
            'targetWord': session.target_word,
            'canRestart': can_restart,
            'reason': reason,
        }))
        return events

    # ---- Timer ----

    def _start_timer(self, room_id: str, session_id: str) -> None:
        if self.timer is not None:
            self.timer.start(room_id, session_id)

    def _cancel_timer(self, room_id: str) -> None:
        if self.timer is not None:
            self.timer.cancel(room_id)


def get_room_service() -> RoomService:
    """Get the room service of the current application."""
    return current_app.extensions['wordzy'].room_service
