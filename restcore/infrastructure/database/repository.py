"""Repositories for database entities."""

from loguru import logger
from sqlalchemy import select
from sqlalchemy.orm import Session

from restcore.infrastructure.database.models import BaseModel, UserModel


class BaseRepository[T: BaseModel]:
    """Base repository class providing common operations.

    Args:
        session: The SQLAlchemy session to use for operations.
        model_class: The SQLAlchemy model class this repository manages.

    Example:
        class UserRepository(BaseRepository[UserModel]):
            def __init__(self, session: Session) -> None:
                super().__init__(session, UserModel)
    """

    def __init__(self, session: Session, model_class: type[T]) -> None:
        self.session = session
        self.model_class = model_class

    def get_by_id(self, entity_id: int) -> T | None:
        """Retrieve a model instance by its ID.

        Args:
            entity_id: The primary key ID of the model to retrieve.

        Returns:
            T | None: The model instance if found, None otherwise.
        """
        logger.debug("Fetching {} by ID: {}", self.model_class.__name__, entity_id)
        return self.session.get(self.model_class, entity_id)

    def create(self, obj: T) -> T:
        """Add a new model instance and flush it to obtain its ID.

        Args:
            obj: The model instance to create.

        Returns:
            T: The created model instance with populated ID.
        """
        self.session.add(obj)
        self.session.flush()
        self.session.refresh(obj)
        logger.debug("Created {} with ID: {}", self.model_class.__name__, obj.id)
        return obj


class UserRepository(BaseRepository[UserModel]):
    """Access to the ``users`` table."""

    def __init__(self, session: Session) -> None:
        super().__init__(session, UserModel)

    def get_by_username(self, username: str) -> UserModel | None:
        """Retrieve a user by exact username."""
        stmt = select(UserModel).where(UserModel.username == username)
        return self.session.execute(stmt).scalar_one_or_none()
