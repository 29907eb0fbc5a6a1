"""
User Data Models

Contains player identity and account data structures.
"""

from dataclasses import dataclass
from typing import Dict, Optional
from datetime import datetime


@dataclass(frozen=True)
class Player:
    """Opaque, stable identity issued by the identity service."""
    id: str
    username: str

    def to_dict(self) -> Dict:
        return {'playerId': self.id, 'username': self.username}


@dataclass
class User:
    """Account record held by the in-memory identity service."""
    id: str
    username: str
    password_hash: str
    created_at: Optional[datetime] = None
    last_login: Optional[datetime] = None

    def to_player(self) -> Player:
        return Player(id=self.id, username=self.username)
