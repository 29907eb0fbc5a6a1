"""
Authentication Service

Handles user registration, login, password hashing, and JWT token
management. Accounts live in process memory for the lifetime of the server.
"""

import bcrypt
import jwt
import datetime
import threading
import uuid
from typing import Dict, Optional, Tuple

from flask import current_app

from ..exceptions import AuthenticationFailure, RegistrationError
from ..models.user import Player, User
from ..utils.game_logger import game_logger


class AuthService:
    """
    Authentication service for handling user registration, login, and token management.
    """

    def __init__(self, jwt_secret: str, token_ttl_days: int = 7, bcrypt_rounds: int = 12):
        """
        Args:
            jwt_secret: Secret key for JWT token generation
            token_ttl_days: Token lifetime in days
            bcrypt_rounds: Work factor for password hashing
        """
        self.jwt_secret = jwt_secret
        self.token_ttl = datetime.timedelta(days=token_ttl_days)
        self.bcrypt_rounds = bcrypt_rounds
        self._users_by_name: Dict[str, User] = {}
        self._users_by_id: Dict[str, User] = {}
        self._lock = threading.Lock()

    def hash_password(self, password: str) -> str:
        """
        Hash a password using bcrypt.

        Args:
            password: Plain text password

        Returns:
            Hashed password as string
        """
        salt = bcrypt.gensalt(rounds=self.bcrypt_rounds)
        hashed = bcrypt.hashpw(password.encode('utf-8'), salt)
        return hashed.decode('utf-8')

    def verify_password(self, password: str, hashed_password: str) -> bool:
        return bcrypt.checkpw(password.encode('utf-8'), hashed_password.encode('utf-8'))

    def register_user(self, username: str, password: str) -> User:
        """
        Register a new user.

        Raises:
            RegistrationError: Missing fields, too-short username or password,
                or the username is taken
        """
        if not username or not password or not isinstance(username, str) or not isinstance(password, str):
            raise RegistrationError("Username and password are required")

        if len(username.strip()) < 3:
            raise RegistrationError("Username must be at least 3 characters long")

        if len(password) < 6:
            raise RegistrationError("Password must be at least 6 characters long")

        username = username.strip().lower()  # Normalize username
        hashed_password = self.hash_password(password)

        with self._lock:
            if username in self._users_by_name:
                raise RegistrationError("Username already exists")

            user = User(
                id=uuid.uuid4().hex,
                username=username,
                password_hash=hashed_password,
                created_at=datetime.datetime.now(datetime.timezone.utc),
            )
            self._users_by_name[username] = user
            self._users_by_id[user.id] = user

        game_logger.log_user_action('signup', player_id=user.id, source='http', username=username)
        return user

    def login_user(self, username: str, password: str) -> Tuple[User, str]:
        """
        Authenticate a user and generate a JWT token.

        Returns:
            (user, token)

        Raises:
            AuthenticationFailure: Unknown username or wrong password
        """
        if not username or not password or not isinstance(username, str) or not isinstance(password, str):
            raise AuthenticationFailure("Username and password are required")

        username = username.strip().lower()

        with self._lock:
            user = self._users_by_name.get(username)

        if user is None or not self.verify_password(password, user.password_hash):
            raise AuthenticationFailure("Invalid username or password")

        user.last_login = datetime.datetime.now(datetime.timezone.utc)
        token = self.issue_token(user)

        game_logger.log_user_action('login', player_id=user.id, source='http', username=username)
        return user, token

    def issue_token(self, user: User) -> str:
        token_payload = {
            "user_id": user.id,
            "username": user.username,
            "exp": datetime.datetime.now(datetime.timezone.utc) + self.token_ttl,
        }
        return jwt.encode(token_payload, self.jwt_secret, algorithm="HS256")

    def verify_token(self, token: str) -> Player:
        """
        Verify and decode a JWT token.

        Returns:
            The Player the token was issued to

        Raises:
            AuthenticationFailure: Missing, expired or invalid token, or an
                account this server does not know
        """
        if not token or not isinstance(token, str):
            raise AuthenticationFailure("Token is required")

        try:
            payload = jwt.decode(token, self.jwt_secret, algorithms=["HS256"])
        except jwt.ExpiredSignatureError:
            raise AuthenticationFailure("Token has expired")
        except jwt.InvalidTokenError:
            raise AuthenticationFailure("Invalid token")

        user_id = payload.get("user_id")
        if not user_id:
            raise AuthenticationFailure("Invalid token payload")

        user = self.get_user_by_id(user_id)
        if user is None:
            raise AuthenticationFailure("User not found")

        return user.to_player()

    def get_user_by_id(self, user_id: str) -> Optional[User]:
        with self._lock:
            return self._users_by_id.get(user_id)


def get_auth_service() -> AuthService:
    """Get the auth service of the current application."""
    return current_app.extensions['wordzy'].auth_service
