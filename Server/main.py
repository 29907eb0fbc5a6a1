"""
Wordzy Game Server - Main Entry Point

Creates the Flask-SocketIO application and starts serving.
"""

import os

from wordzy import create_app
from wordzy.config import config, validate_word_list_integrity
from wordzy.utils.game_logger import game_logger


def main():
    """Main function to validate settings and start the server."""
    config_class = config[os.getenv('WORDZY_ENV', 'default')]

    try:
        validate_word_list_integrity()

        app, socketio = create_app(config_class)

        game_logger.logger.info("Wordzy Server Starting")

        print(f"\nStarting Wordzy Game Server on {config_class.HOST}:{config_class.PORT}")
        print(f"Debug mode: {config_class.DEBUG}")
        print(f"Round time limit: {config_class.ROUND_TIME_LIMIT_SECONDS}s")
        print("=" * 50)

        # Start the server
        socketio.run(app, host=config_class.HOST, port=config_class.PORT,
                     debug=config_class.DEBUG, allow_unsafe_werkzeug=True)

    except KeyboardInterrupt:
        print("\nServer shutting down...")
        game_logger.logger.info("Wordzy Server shutting down (KeyboardInterrupt)")
    except Exception as e:
        print(f"Error starting server: {e}")
        game_logger.logger.error(f"Error starting server: {e}")
        raise


if __name__ == '__main__':
    main()
