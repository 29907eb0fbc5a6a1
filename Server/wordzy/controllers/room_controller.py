"""
Room Controller

Handles the room bootstrap HTTP endpoints. Gameplay itself happens over
Socket.IO; these endpoints only create, join and inspect rooms.
"""

from flask import Blueprint, current_app, request, jsonify
from ..exceptions import WordzyError
from ..services.room_service import get_room_service
from ..utils.decorators import require_auth
from ..utils.game_logger import game_logger
from ..utils.helpers import normalize_room_id

rooms_bp = Blueprint('rooms', __name__)


def _error_response(error: WordzyError, action: str, room_id=None):
    game_logger.log_error(error, action, room_id=room_id, player_id=request.player.id, expected=True)
    return jsonify({
        'success': False,
        'message': error.message
    }), error.status_code


@rooms_bp.route('/rooms/create', methods=['POST'])
@require_auth
def create_room():
    """Create a room owned by the caller."""
    player = request.player
    room_service = get_room_service()

    room_id = room_service.create_room(player.id, player.username)
    game_logger.log_user_action('create_room', player_id=player.id, room_id=room_id, source='http')

    return jsonify({
        'success': True,
        'roomId': room_id,
        'room': room_service.get_room(room_id)
    }), 201


@rooms_bp.route('/rooms/join', methods=['POST'])
@require_auth
def join_room():
    """Join an existing room by its code."""
    player = request.player
    data = request.get_json(silent=True) or {}
    room_id = normalize_room_id(data.get('roomId'))
    if not room_id:
        return jsonify({
            'success': False,
            'message': 'Room ID is required'
        }), 400

    room_service = get_room_service()
    outbox = room_service.find_outbox(room_id)
    try:
        room_service.join(room_id, player.id, player.username)
    except WordzyError as e:
        return _error_response(e, 'join_room', room_id)
    finally:
        if outbox is not None:
            outbox.flush(current_app.extensions['wordzy'].gateway.deliver)

    game_logger.log_user_action('join_room', player_id=player.id, room_id=room_id, source='http')
    return jsonify({
        'success': True,
        'roomId': room_id,
        'room': room_service.get_room(room_id)
    })


@rooms_bp.route('/rooms/<room_id>', methods=['GET'])
@require_auth
def get_room(room_id):
    """Get the public view of a room."""
    try:
        room = get_room_service().get_room(room_id)
    except WordzyError as e:
        return _error_response(e, 'get_room', room_id)

    return jsonify({
        'success': True,
        'room': room
    })
