"""
WebSocket Event Handlers

Socket.IO glue for the realtime protocol. Handlers hand each event to the
EventDispatcher; the SocketGateway delivers what the rooms produce to the
current socket of every recipient.
"""

from flask import request
from flask_socketio import emit

from .connections import ConnectionRegistry
from .dispatcher import EventDispatcher
from ..exceptions import WordzyError
from ..models.event import Outgoing
from ..utils.game_logger import game_logger


class SocketGateway:
    """Emits Outgoing messages over Socket.IO."""

    def __init__(self, socketio, connections: ConnectionRegistry):
        self.socketio = socketio
        self.connections = connections

    def deliver(self, outgoing: Outgoing) -> None:
        for player_id in outgoing.recipients:
            sid = self.connections.sid_for(player_id)
            if sid is None:
                # Not connected; they catch up from room-joined on reconnect
                continue
            self.socketio.emit(outgoing.event, outgoing.payload, to=sid)


def register_websocket_handlers(socketio, dispatcher: EventDispatcher, gateway: SocketGateway):
    """Register all WebSocket event handlers."""

    def dispatch(event, data):
        try:
            dispatcher.handle(request.sid, event, data, gateway.deliver)
        except WordzyError as e:
            room_id = data.get('roomId') if isinstance(data, dict) else None
            player = dispatcher.connections.player_for(request.sid)
            game_logger.log_error(e, event, room_id=room_id,
                                  player_id=player.id if player else None,
                                  expected=True)
            emit('error', {'message': e.message})

    @socketio.on('connect')
    def handle_connect(auth=None):
        """Handle WebSocket connection."""
        game_logger.logger.debug(f"Socket connected: {request.sid}")

    @socketio.on('disconnect')
    def handle_disconnect(reason=None):
        """Handle WebSocket disconnection."""
        dispatcher.disconnect(request.sid, gateway.deliver)

    @socketio.on('authenticate')
    def handle_authenticate(data=None):
        dispatch('authenticate', data)

    @socketio.on('join-room')
    def handle_join_room(data=None):
        dispatch('join-room', data)

    @socketio.on('start-game')
    def handle_start_game(data=None):
        dispatch('start-game', data)

    @socketio.on('submit-word')
    def handle_submit_word(data=None):
        dispatch('submit-word', data)

    @socketio.on('start-again')
    def handle_start_again(data=None):
        dispatch('start-again', data)

    @socketio.on('leave-room')
    def handle_leave_room(data=None):
        dispatch('leave-room', data)

    @socketio.on('disband-room')
    def handle_disband_room(data=None):
        dispatch('disband-room', data)
