"""
Outgoing Event Model

Server-to-client messages produced by room transitions. Recipients are
resolved against the room membership at the moment the transition commits,
so delivery never has to look at game state again.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional, Tuple


@dataclass(frozen=True)
class Outgoing:
    event: str
    payload: Dict[str, Any]
    recipients: Tuple[str, ...]

    @classmethod
    def private(cls, player_id: str, event: str, payload: Dict[str, Any]) -> "Outgoing":
        return cls(event=event, payload=payload, recipients=(player_id,))

    @classmethod
    def broadcast(cls,
                  member_ids: Iterable[str],
                  event: str,
                  payload: Dict[str, Any],
                  exclude: Optional[str] = None) -> "Outgoing":
        recipients = tuple(pid for pid in member_ids if pid != exclude)
        return cls(event=event, payload=payload, recipients=recipients)
