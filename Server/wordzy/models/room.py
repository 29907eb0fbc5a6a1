"""
Room Data Models

A room is the lobby a group of players shares across rounds.
"""

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from .user import Player
from ..exceptions import InvalidStateTransition


class RoomStatus(Enum):
    WAITING = "waiting"
    ACTIVE = "active"
    FINISHED = "finished"


# finished -> waiting only happens on an explicit restart
_ALLOWED_TRANSITIONS = {
    RoomStatus.WAITING: {RoomStatus.ACTIVE},
    RoomStatus.ACTIVE: {RoomStatus.FINISHED},
    RoomStatus.FINISHED: {RoomStatus.WAITING},
}


@dataclass
class Room:
    """Membership and ownership of one room. Members are kept in join order."""
    room_id: str
    owner_id: Optional[str]
    capacity: int
    members: Dict[str, Player] = field(default_factory=dict)
    status: RoomStatus = RoomStatus.WAITING
    created_at: float = field(default_factory=time.time)

    @property
    def is_full(self) -> bool:
        return len(self.members) >= self.capacity

    @property
    def is_empty(self) -> bool:
        return not self.members

    def has_member(self, player_id: str) -> bool:
        return player_id in self.members

    def member_ids(self) -> List[str]:
        return list(self.members)

    def add_member(self, player: Player) -> None:
        self.members[player.id] = player
        if self.owner_id is None:
            self.owner_id = player.id

    def remove_member(self, player_id: str) -> Player:
        """Remove a member, handing ownership to the earliest-joined remaining one."""
        player = self.members.pop(player_id)
        if self.owner_id == player_id:
            self.owner_id = next(iter(self.members), None)
        return player

    def transition(self, new_status: RoomStatus) -> None:
        if new_status not in _ALLOWED_TRANSITIONS[self.status]:
            raise InvalidStateTransition(
                f"Room {self.room_id}: {self.status.value} -> {new_status.value} is not allowed"
            )
        self.status = new_status

    def to_dict(self) -> Dict:
        """Room snapshot in the shape the browser client reads."""
        return {
            'id': self.room_id,
            'owner': self.owner_id,
            'players': [
                {'_id': player.id, 'username': player.username}
                for player in self.members.values()
            ],
            'status': self.status.value,
            'capacity': self.capacity,
        }
