"""Credentials, users and password verification for HTTP Basic authentication.

The authentication filter depends on two collaborators defined here as
protocols:

- a ``UserLookup`` that turns a username into a ``User`` (loaded or not),
- a ``PasswordVerifier`` that checks a password against a loaded user.

``BcryptPasswordVerifier`` verifies bcrypt hashes. ``InMemoryUserLookup``
backs tests and embedded use; the SQLAlchemy-backed lookup lives in the
infrastructure layer.
"""

import base64
import binascii
from collections.abc import Iterable
from dataclasses import dataclass
from typing import NamedTuple, Protocol

import bcrypt
from loguru import logger

from restcore.core.constants import BASIC_AUTH_SCHEME

DEFAULT_BCRYPT_ROUNDS = 12


class Credentials(NamedTuple):
    """Username and password decoded from an Authorization header."""

    username: str
    password: str


@dataclass(frozen=True)
class User:
    """An account as seen by the dispatch pipeline.

    ``loaded`` is False for the placeholder returned when no account
    matches the requested username.
    """

    username: str
    password_hash: str = ""
    id: int | None = None
    loaded: bool = True

    @classmethod
    def not_found(cls, username: str) -> "User":
        """Placeholder for a username without an account."""
        return cls(username=username, loaded=False)


class UserLookup(Protocol):
    """Finds accounts by username."""

    def find_by_username(self, username: str) -> User:
        """Return the account, or a not-loaded placeholder."""
        ...


class PasswordVerifier(Protocol):
    """Checks a password against an account."""

    def verify(self, user: User, password: str) -> bool:
        """Return True when ``password`` belongs to ``user``."""
        ...


def parse_basic_credentials(header: str | None) -> Credentials | None:
    """Decode an ``Authorization: Basic`` header.

    The payload after the scheme is Base64-decoded and split on the first
    colon, so passwords may contain colons.

    Args:
        header: Raw Authorization header value.

    Returns:
        Credentials | None: The decoded pair, or None when the header is
            missing, uses another scheme, is not valid Base64/UTF-8 or
            carries an empty username.
    """
    if not header or not header.startswith(BASIC_AUTH_SCHEME):
        return None

    parts = header.split(None, 1)
    if len(parts) != 2:  # noqa: PLR2004
        return None

    try:
        decoded = base64.b64decode(parts[1].strip(), validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        return None

    username, _, password = decoded.partition(":")
    if not username:
        return None
    return Credentials(username, password)


def hash_password(password: str, rounds: int = DEFAULT_BCRYPT_ROUNDS) -> str:
    """Hash a password with bcrypt.

    Args:
        password: Plain text password.
        rounds: bcrypt cost factor.

    Returns:
        str: The bcrypt hash, ``$2b$...``.
    """
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("ascii")


class BcryptPasswordVerifier:
    """Verifies passwords against bcrypt hashes stored on the user."""

    def verify(self, user: User, password: str) -> bool:
        """Check ``password`` against ``user.password_hash``.

        Args:
            user: A loaded user.
            password: The password presented by the client.

        Returns:
            bool: True on match. Unloaded users, empty or malformed hashes
                never match.
        """
        if not user.loaded or not user.password_hash:
            return False
        try:
            return bcrypt.checkpw(
                password.encode("utf-8"), user.password_hash.encode("ascii")
            )
        except (ValueError, UnicodeEncodeError):
            logger.warning(
                "Stored password hash is not a valid bcrypt hash",
                username=user.username,
            )
            return False


class InMemoryUserLookup:
    """User lookup over a fixed set of accounts held in memory."""

    def __init__(self, users: Iterable[User] = ()) -> None:
        self._users = {user.username: user for user in users}

    def add_user(
        self, username: str, password: str, rounds: int = DEFAULT_BCRYPT_ROUNDS
    ) -> User:
        """Create (or replace) an account with a freshly hashed password."""
        user = User(
            username=username,
            password_hash=hash_password(password, rounds),
            id=len(self._users) + 1,
        )
        self._users[username] = user
        return user

    def find_by_username(self, username: str) -> User:
        """Return the account, or a not-loaded placeholder."""
        return self._users.get(username) or User.not_found(username)
