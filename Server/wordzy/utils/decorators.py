"""
Authentication Decorators

Contains the decorator guarding authenticated HTTP endpoints.
"""

from functools import wraps
from flask import request, jsonify

from ..exceptions import AuthenticationFailure


def require_auth(f):
    """
    Decorator to require a Bearer token on protected HTTP endpoints.

    On success the verified ``Player`` is available as ``request.player``.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        from ..services.auth_service import get_auth_service

        auth_header = request.headers.get('Authorization')
        if not auth_header or not auth_header.startswith('Bearer '):
            return jsonify({
                'success': False,
                'message': 'Authorization token required'
            }), 401

        token = auth_header.split(' ', 1)[1]

        try:
            request.player = get_auth_service().verify_token(token)
        except AuthenticationFailure as e:
            return jsonify({
                'success': False,
                'message': e.message
            }), 401

        return f(*args, **kwargs)

    return decorated_function
