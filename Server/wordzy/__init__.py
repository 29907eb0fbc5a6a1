"""
Wordzy Game Server Application Package

Authoritative in-memory server for timed, simultaneous multiplayer Wordle.
Rooms, rounds and rankings live in the services layer; Flask blueprints
bootstrap identity and rooms over HTTP, and gameplay runs over Socket.IO.
"""

from types import SimpleNamespace

from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from .config import Config


def create_app(config_class=Config):
    """
    Application factory pattern for creating Flask app instances.

    Args:
        config_class: Configuration class to use

    Returns:
        (app, socketio) with all services wired into ``app.extensions['wordzy']``
    """
    app = Flask(__name__)
    app.config.from_object(config_class)

    from .utils.game_logger import game_logger
    game_logger.configure(
        log_dir=app.config['LOG_DIR'],
        level=app.config['LOG_LEVEL'],
        to_file=app.config['LOG_TO_FILE']
    )

    # Initialize extensions
    origins = app.config['CORS_ORIGINS']
    if origins != '*':
        origins = [origin.strip() for origin in origins.split(',') if origin.strip()]
    CORS(app, origins=origins)
    # async_handlers=False keeps each client's events in arrival order
    socketio = SocketIO(app, cors_allowed_origins=origins, async_handlers=False,
                        logger=False, engineio_logger=False)

    # Initialize services
    from .services.auth_service import AuthService
    from .services.game_service import GameService
    from .services.room_service import RoomService
    from .services.timer_service import RoundTimer
    from .websocket.connections import ConnectionRegistry
    from .websocket.dispatcher import EventDispatcher
    from .websocket.handlers import SocketGateway, register_websocket_handlers

    auth_service = AuthService(
        app.config['JWT_SECRET'],
        token_ttl_days=app.config['JWT_EXPIRATION_DAYS'],
        bcrypt_rounds=app.config['BCRYPT_ROUNDS']
    )
    game_service = GameService(
        time_limit_ms=app.config['ROUND_TIME_LIMIT_SECONDS'] * 1000,
        strict_dictionary=app.config['STRICT_DICTIONARY']
    )

    timer = None
    if app.config['ENABLE_ROUND_TIMER']:
        timer = RoundTimer(socketio.start_background_task, socketio.sleep,
                           interval_ms=app.config['TIMER_TICK_MS'])

    room_service = RoomService(
        game_service,
        timer=timer,
        min_players=app.config['MIN_PLAYERS'],
        allow_late_join=app.config['ALLOW_LATE_JOIN'],
        recent_word_history=app.config['RECENT_WORD_HISTORY']
    )

    connections = ConnectionRegistry()
    gateway = SocketGateway(socketio, connections)
    dispatcher = EventDispatcher(room_service, auth_service, connections)
    if timer is not None:
        timer.bind(room_service, gateway.deliver)

    app.extensions['wordzy'] = SimpleNamespace(
        auth_service=auth_service,
        game_service=game_service,
        room_service=room_service,
        timer=timer,
        connections=connections,
        gateway=gateway,
        dispatcher=dispatcher
    )

    # Register blueprints
    from .controllers.auth_controller import players_bp
    from .controllers.room_controller import rooms_bp

    app.register_blueprint(players_bp, url_prefix='/api')
    app.register_blueprint(rooms_bp, url_prefix='/api')

    # Register WebSocket handlers
    register_websocket_handlers(socketio, dispatcher, gateway)

    # Store socketio instance for use in other modules
    app.socketio = socketio

    game_logger.logger.info(f"Wordzy app created (round timer {'on' if timer else 'off'})")
    return app, socketio
