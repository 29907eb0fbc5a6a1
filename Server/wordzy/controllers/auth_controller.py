"""
Authentication Controller

Handles the identity bootstrap HTTP endpoints.
"""

from flask import Blueprint, request, jsonify
from ..exceptions import WordzyError
from ..services.auth_service import get_auth_service
from ..utils.decorators import require_auth
from ..utils.game_logger import game_logger

players_bp = Blueprint('players', __name__)


def _error_response(error: WordzyError, action: str):
    game_logger.log_error(error, action, expected=True)
    return jsonify({
        'success': False,
        'message': error.message
    }), error.status_code


@players_bp.route('/players/signup', methods=['POST'])
def signup():
    """Register a new player and return a token for them."""
    data = request.get_json(silent=True)
    if not data:
        return jsonify({
            'success': False,
            'message': 'Request body is required'
        }), 400

    auth_service = get_auth_service()
    try:
        user = auth_service.register_user(data.get('username'), data.get('password'))
    except WordzyError as e:
        return _error_response(e, 'signup')

    return jsonify({
        'success': True,
        'userId': user.id,
        'username': user.username,
        'token': auth_service.issue_token(user)
    }), 201


@players_bp.route('/players/login', methods=['POST'])
def login():
    """Login a player and return a JWT token."""
    data = request.get_json(silent=True)
    if not data:
        return jsonify({
            'success': False,
            'message': 'Request body is required'
        }), 400

    try:
        user, token = get_auth_service().login_user(data.get('username'), data.get('password'))
    except WordzyError as e:
        return _error_response(e, 'login')

    return jsonify({
        'success': True,
        'userId': user.id,
        'username': user.username,
        'token': token
    })


@players_bp.route('/players/verify', methods=['GET'])
@require_auth
def verify():
    """Verify the caller's token."""
    player = request.player
    return jsonify({
        'success': True,
        'userId': player.id,
        'username': player.username
    })
