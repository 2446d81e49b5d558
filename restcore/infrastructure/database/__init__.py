"""Synchronous SQLAlchemy user store.

- **models**: Declarative base and the ``users`` table
- **session**: Engine and session management
- **repository**: Generic and user repositories
- **users**: ``UserLookup`` implementation backed by the ``users`` table
"""

from restcore.infrastructure.database.models import Base, BaseModel, UserModel
from restcore.infrastructure.database.repository import BaseRepository, UserRepository
from restcore.infrastructure.database.session import (
    check_database_connection,
    close_database,
    create_database_engine,
    get_engine,
    get_session_factory,
    init_schema,
    session_scope,
)
from restcore.infrastructure.database.users import SqlAlchemyUserLookup, create_user

__all__ = [
    "Base",
    "BaseModel",
    "BaseRepository",
    "SqlAlchemyUserLookup",
    "UserModel",
    "UserRepository",
    "check_database_connection",
    "close_database",
    "create_database_engine",
    "create_user",
    "get_engine",
    "get_session_factory",
    "init_schema",
    "session_scope",
]
