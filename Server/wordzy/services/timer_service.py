"""
Round Timer

Runs one countdown per active round on Socket.IO background tasks. Each
tick asks the RoomService to advance the round and then flushes the room's
outbox, so timer messages are delivered in the same order as every other
message of that room.
"""

import threading
from typing import Callable, Dict, Optional

from ..utils.game_logger import game_logger


class RoundTimer:
    """
    Countdown driver.

    ``spawn`` and ``sleep`` are normally ``socketio.start_background_task``
    and ``socketio.sleep`` so the timer cooperates with whichever async mode
    the server runs in.
    """

    def __init__(self, spawn: Callable, sleep: Callable[[float], None], interval_ms: int = 1000):
        self._spawn = spawn
        self._sleep = sleep
        self.interval_ms = interval_ms
        self._active: Dict[str, str] = {}
        self._lock = threading.Lock()
        self._room_service = None
        self._deliver: Optional[Callable] = None

    def bind(self, room_service, deliver: Callable) -> None:
        self._room_service = room_service
        self._deliver = deliver

    def start(self, room_id: str, session_id: str) -> None:
        """Start ticking for a round; any earlier countdown of the room stops."""
        with self._lock:
            self._active[room_id] = session_id
        self._spawn(self._run, room_id, session_id)
        game_logger.logger.debug(f"Timer started for room {room_id} session {session_id}")

    def cancel(self, room_id: str, session_id: Optional[str] = None) -> None:
        with self._lock:
            current = self._active.get(room_id)
            if current is not None and (session_id is None or current == session_id):
                del self._active[room_id]

    def is_running(self, room_id: str, session_id: str) -> bool:
        with self._lock:
            return self._active.get(room_id) == session_id

    def active_count(self) -> int:
        with self._lock:
            return len(self._active)

    def _run(self, room_id: str, session_id: str) -> None:
        while True:
            self._sleep(self.interval_ms / 1000.0)
            if not self.is_running(room_id, session_id):
                return

            keep_running = self.tick_once(room_id, session_id)

            if not keep_running:
                self.cancel(room_id, session_id)
                return

    def tick_once(self, room_id: str, session_id: str) -> bool:
        """Advance one step and deliver what it produced. Returns whether to keep ticking."""
        outbox = self._room_service.find_outbox(room_id)
        try:
            _, keep_running = self._room_service.tick(room_id, session_id)
        except Exception as e:
            # Closes the room; a round that cannot tick never ends
            game_logger.log_error(e, 'timer_tick', room_id=room_id)
            self._room_service.terminate(room_id)
            keep_running = False
        finally:
            if outbox is not None and self._deliver is not None:
                outbox.flush(self._deliver)
        return keep_running
