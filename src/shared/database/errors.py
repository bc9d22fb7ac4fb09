"""Driver-independent inspection of database integrity errors."""
from sqlalchemy.exc import IntegrityError

POSTGRES_UNIQUE_VIOLATION = "23505"
SQLITE_UNIQUE_VIOLATION = "UNIQUE constraint failed"


def is_unique_violation(error: IntegrityError, column: str | None = None) -> bool:
    """
    Check whether an integrity error is a uniqueness conflict.

    PostgreSQL drivers expose the SQLSTATE on the wrapped DBAPI error, SQLite
    only reports it in the message text.

    Args:
        error: The IntegrityError raised by SQLAlchemy
        column: Optional column name the conflict must mention

    Returns:
        True when the error is a unique constraint violation (on ``column`` if given)
    """
    original = error.orig
    message = str(original)

    sqlstate = getattr(original, "sqlstate", None) or getattr(original, "pgcode", None)
    if sqlstate is not None:
        if sqlstate != POSTGRES_UNIQUE_VIOLATION:
            return False
    elif SQLITE_UNIQUE_VIOLATION not in message:
        return False

    if column is None:
        return True
    return column in message
