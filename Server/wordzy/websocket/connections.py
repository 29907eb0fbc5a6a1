"""
Connection Registry

Tracks which socket belongs to which player and which rooms each socket
has entered.
"""

import threading
from typing import Dict, List, Optional, Set

from ..models.user import Player


class ConnectionRegistry:
    """
    sid <-> player bindings.

    A player has at most one current socket. When they reconnect, the new sid
    replaces the old one, and cleanup for the old sid must not touch the new
    binding.
    """

    def __init__(self):
        self._players_by_sid: Dict[str, Player] = {}
        self._sid_by_player: Dict[str, str] = {}
        self._rooms_by_sid: Dict[str, Set[str]] = {}
        self._lock = threading.Lock()

    def bind(self, sid: str, player: Player) -> Optional[str]:
        """
        Bind a socket to a player.

        Returns:
            The player's previous sid, if it was a different socket
        """
        with self._lock:
            previous_player = self._players_by_sid.get(sid)
            if previous_player is not None and previous_player.id != player.id:
                if self._sid_by_player.get(previous_player.id) == sid:
                    del self._sid_by_player[previous_player.id]
                self._rooms_by_sid.pop(sid, None)

            previous_sid = self._sid_by_player.get(player.id)
            self._players_by_sid[sid] = player
            self._sid_by_player[player.id] = sid
            self._rooms_by_sid.setdefault(sid, set())
            return previous_sid if previous_sid != sid else None

    def unbind(self, sid: str) -> Optional[Player]:
        """Forget a socket. Returns its player, if any."""
        with self._lock:
            player = self._players_by_sid.pop(sid, None)
            self._rooms_by_sid.pop(sid, None)
            if player is not None and self._sid_by_player.get(player.id) == sid:
                del self._sid_by_player[player.id]
            return player

    def player_for(self, sid: str) -> Optional[Player]:
        with self._lock:
            return self._players_by_sid.get(sid)

    def sid_for(self, player_id: str) -> Optional[str]:
        with self._lock:
            return self._sid_by_player.get(player_id)

    def is_current(self, sid: str, player_id: str) -> bool:
        with self._lock:
            return self._sid_by_player.get(player_id) == sid

    def track_room(self, sid: str, room_id: str) -> None:
        with self._lock:
            self._rooms_by_sid.setdefault(sid, set()).add(room_id)

    def untrack_room(self, sid: str, room_id: str) -> None:
        with self._lock:
            rooms = self._rooms_by_sid.get(sid)
            if rooms is not None:
                rooms.discard(room_id)

    def rooms_for(self, sid: str) -> List[str]:
        with self._lock:
            return sorted(self._rooms_by_sid.get(sid, ()))
