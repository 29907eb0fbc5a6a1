"""
Game Logger Module for Wordzy Server

This module provides structured logging for player actions, room lifecycle
and round events. Each line is a pipe-separated header followed by a JSON
body so log files stay both greppable and machine-parseable.
"""

import logging
import json
from datetime import datetime
from typing import Dict, Any, Optional
from pathlib import Path


class GameLogger:
    """
    Centralized logging system for the Wordzy server.

    Features:
    - Player action tracking (socket and HTTP)
    - Room and round event logging
    - Error logging with room context
    - JSON structured logs for easy parsing

    The underlying ``wordzy`` logger has no handlers until ``configure`` runs,
    so importing the package never touches the filesystem.
    """

    def __init__(self, name: str = 'wordzy'):
        self.logger = logging.getLogger(name)
        self.log_dir: Optional[Path] = None

    def configure(self, log_dir: str = "logs", level: str = "INFO", to_file: bool = True) -> logging.Logger:
        """Attach the file and console handlers. Safe to call more than once."""
        logger = self.logger
        logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))

        # Prevent duplicate handlers
        if logger.handlers:
            logger.handlers.clear()

        if to_file:
            self.log_dir = Path(log_dir)
            self.log_dir.mkdir(parents=True, exist_ok=True)

            # Create log file with date
            log_file = self._log_file_path()
            file_handler = logging.FileHandler(log_file, encoding='utf-8')
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(logging.Formatter(
                '%(asctime)s | %(levelname)s | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            ))
            logger.addHandler(file_handler)

        # Console handler for only important messages (WARNING and above)
        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.WARNING)
        console_handler.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))
        logger.addHandler(console_handler)

        return logger

    def _log_file_path(self) -> Path:
        return self.log_dir / f"game_log_{datetime.now().strftime('%Y-%m-%d')}.log"

    def _create_log_entry(self,
                          event_type: str,
                          action: str,
                          actor: Dict[str, Optional[str]],
                          details: Dict[str, Any]) -> str:
        """Create a structured log entry."""
        log_entry = {
            'timestamp': datetime.now().isoformat(),
            'event_type': event_type,
            'action': action,
            'actor': actor,
            'details': details
        }
        return json.dumps(log_entry, ensure_ascii=False, default=str)

    def log_user_action(self,
                        action: str,
                        player_id: Optional[str] = None,
                        room_id: Optional[str] = None,
                        source: str = 'socket',
                        **kwargs):
        """
        Log player actions with full context.

        Args:
            action: Type of action (e.g., 'join-room', 'submit-word', 'signup')
            player_id: Acting player, if known
            room_id: Room identifier if applicable
            source: 'socket' or 'http'
            **kwargs: Additional details to log
        """
        details = {'room_id': room_id, 'source': source, **kwargs}
        self.logger.info(self._create_log_entry('USER_ACTION', action, {'player_id': player_id}, details))

    def log_game_event(self,
                       room_id: Optional[str],
                       event: str,
                       player_id: Optional[str] = None,
                       **kwargs):
        """
        Log room and round events (round start, solve, ownership change, ...).

        Args:
            room_id: Room identifier
            event: Type of game event (e.g., 'round_started', 'player_solved')
            player_id: Player the event is about, if any
            **kwargs: Additional game details
        """
        details = {'room_id': room_id, **kwargs}
        self.logger.info(self._create_log_entry('GAME_EVENT', event, {'player_id': player_id}, details))

    def log_error(self,
                  error: Exception,
                  action: str,
                  room_id: Optional[str] = None,
                  player_id: Optional[str] = None,
                  expected: bool = False):
        """
        Log errors with full context.

        Expected business-rule rejections are logged at WARNING; anything else
        at ERROR with the traceback attached.
        """
        details = {
            'room_id': room_id,
            'error_type': type(error).__name__,
            'error_message': str(error),
        }
        log_message = self._create_log_entry('ERROR', action, {'player_id': player_id}, details)
        if expected:
            self.logger.warning(log_message)
        else:
            self.logger.error(log_message, exc_info=error)


# Global logger instance
game_logger = GameLogger()
