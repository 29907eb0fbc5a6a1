"""
Event Dispatcher

Maps each incoming realtime event to the room operation it triggers. The
dispatcher knows nothing about Socket.IO itself: it receives a socket id,
the event payload and a ``deliver`` callable for outgoing messages.
"""

from typing import Callable, Dict, List

from .connections import ConnectionRegistry
from ..exceptions import AuthenticationFailure, InternalError, WordzyError
from ..models.event import Outgoing
from ..models.user import Player
from ..utils.game_logger import game_logger
from ..utils.helpers import normalize_room_id


class EventDispatcher:
    """
    Single routing table for client-to-server events.

    Every event except ``authenticate`` requires an authenticated socket, and
    a ``playerId`` in the payload must match the authenticated player.
    Messages produced by a room operation are flushed from that room's outbox
    once the operation is over, whether it succeeded or not.
    """

    def __init__(self, room_service, auth_service, connections: ConnectionRegistry):
        self.room_service = room_service
        self.auth_service = auth_service
        self.connections = connections
        self._room_handlers: Dict[str, Callable] = {
            'join-room': self._join_room,
            'start-game': self._start_game,
            'submit-word': self._submit_word,
            'start-again': self._start_again,
            'leave-room': self._leave_room,
            'disband-room': self._disband_room,
        }

    def events(self) -> List[str]:
        return ['authenticate'] + list(self._room_handlers)

    def handle(self, sid: str, event: str, data, deliver: Callable[[Outgoing], None]) -> None:
        """
        Process one client event.

        Raises:
            WordzyError: Rejected request, to be reported to this socket only
        """
        if not isinstance(data, dict):
            data = {}

        if event == 'authenticate':
            self._authenticate(sid, data, deliver)
            return

        handler = self._room_handlers.get(event)
        if handler is None:
            raise WordzyError(f"Unknown event: {event}")

        player = self._require_player(sid, data)
        room_id = normalize_room_id(data.get('roomId'))
        if not room_id:
            raise WordzyError("Room ID is required")

        outbox = self.room_service.find_outbox(room_id)
        try:
            handler(sid, player, room_id, data)
        except WordzyError:
            raise
        except Exception as e:
            game_logger.log_error(e, event, room_id=room_id, player_id=player.id)
            self.room_service.terminate(room_id)
            raise InternalError() from e
        finally:
            if outbox is not None:
                outbox.flush(deliver)

    def disconnect(self, sid: str, deliver: Callable[[Outgoing], None]) -> None:
        """Treat a dropped socket as leaving every room it had entered."""
        player = self.connections.player_for(sid)
        if player is None:
            return

        rooms = self.connections.rooms_for(sid)
        current = self.connections.is_current(sid, player.id)
        self.connections.unbind(sid)

        if not current:
            # A newer socket of the same player has taken over
            game_logger.log_user_action('stale_disconnect', player_id=player.id, sid=sid)
            return

        game_logger.log_user_action('disconnect', player_id=player.id, rooms=rooms)

        for room_id in rooms:
            outbox = self.room_service.find_outbox(room_id)
            try:
                self.room_service.leave(room_id, player.id, disconnected=True)
            except WordzyError as e:
                game_logger.log_error(e, 'disconnect', room_id=room_id, player_id=player.id, expected=True)
            except Exception as e:
                game_logger.log_error(e, 'disconnect', room_id=room_id, player_id=player.id)
                self.room_service.terminate(room_id)
            finally:
                if outbox is not None:
                    outbox.flush(deliver)

    def _authenticate(self, sid: str, data: Dict, deliver: Callable[[Outgoing], None]) -> None:
        player = self.auth_service.verify_token(data.get('token'))

        claimed = data.get('playerId')
        if claimed is not None and claimed != player.id:
            raise AuthenticationFailure("Player id does not match the token")

        previous_sid = self.connections.bind(sid, player)
        game_logger.log_user_action('authenticate', player_id=player.id,
                                    username=player.username, replaced_socket=previous_sid is not None)
        deliver(Outgoing.private(player.id, 'authenticated', player.to_dict()))

    def _require_player(self, sid: str, data: Dict) -> Player:
        player = self.connections.player_for(sid)
        if player is None:
            raise AuthenticationFailure("Authenticate before sending room events")

        claimed = data.get('playerId')
        if claimed is not None and claimed != player.id:
            raise AuthenticationFailure("Player id does not match the authenticated player")
        return player

    # ---- Room events ----

    def _join_room(self, sid: str, player: Player, room_id: str, data: Dict) -> None:
        self.room_service.join(room_id, player.id, player.username)
        self.connections.track_room(sid, room_id)

    def _start_game(self, sid: str, player: Player, room_id: str, data: Dict) -> None:
        self.room_service.start_game(room_id, player.id)

    def _submit_word(self, sid: str, player: Player, room_id: str, data: Dict) -> None:
        self.room_service.submit_word(room_id, player.id, data.get('word'))

    def _start_again(self, sid: str, player: Player, room_id: str, data: Dict) -> None:
        self.room_service.start_again(room_id, player.id)

    def _leave_room(self, sid: str, player: Player, room_id: str, data: Dict) -> None:
        try:
            self.room_service.leave(room_id, player.id)
        finally:
            self.connections.untrack_room(sid, room_id)

    def _disband_room(self, sid: str, player: Player, room_id: str, data: Dict) -> None:
        self.room_service.disband(room_id, player.id, reason='disbanded')
        self.connections.untrack_room(sid, room_id)
