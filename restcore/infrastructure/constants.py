"""Infrastructure-related constants, particularly for the database."""

POOL_RECYCLE_SECONDS = 3600  # 1 hour

# Naming convention for constraints
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

USERNAME_MAX_LENGTH = 150
PASSWORD_HASH_MAX_LENGTH = 255
