"""Database-backed user lookup for HTTP Basic authentication."""

from loguru import logger
from sqlalchemy.orm import Session, sessionmaker

from restcore.infrastructure.database.models import UserModel
from restcore.infrastructure.database.repository import UserRepository
from restcore.infrastructure.database.session import session_scope
from restcore.rest.auth import DEFAULT_BCRYPT_ROUNDS, User, hash_password


def _to_user(model: UserModel) -> User:
    return User(username=model.username, password_hash=model.password_hash, id=model.id)


class SqlAlchemyUserLookup:
    """Finds accounts in the ``users`` table.

    Args:
        session_factory: Factory for the sessions used by each lookup; the
            global one by default.
    """

    def __init__(self, session_factory: sessionmaker[Session] | None = None) -> None:
        self.session_factory = session_factory

    def find_by_username(self, username: str) -> User:
        """Return the account named ``username``.

        Returns:
            User: The account, or a not-loaded user if none matches.
        """
        with session_scope(self.session_factory) as session:
            model = UserRepository(session).get_by_username(username)
            if model is None:
                logger.debug("No user record for {}", username)
                return User.not_found(username)
            return _to_user(model)


def create_user(
    session: Session,
    username: str,
    password: str,
    rounds: int = DEFAULT_BCRYPT_ROUNDS,
) -> User:
    """Store a new account with a bcrypt-hashed password.

    Args:
        session: Session the account is added to; the caller commits.
        username: Unique username.
        password: Plain-text password, hashed before storing.
        rounds: bcrypt cost factor.

    Returns:
        User: The stored account.
    """
    model = UserRepository(session).create(
        UserModel(username=username, password_hash=hash_password(password, rounds))
    )
    logger.info("Created user {}", username)
    return _to_user(model)
