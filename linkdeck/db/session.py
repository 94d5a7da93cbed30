"""Session management for database operations.

This module provides utilities for handling SQLAlchemy async sessions
with proper lifecycle management, error handling, and transaction support.
"""

from typing import AsyncGenerator, Callable, Optional, TypeVar
import logging
import inspect
from functools import wraps

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError

from linkdeck.db.base import get_session

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for database sessions.

    Yields:
        AsyncSession: A SQLAlchemy async session object.
    """
    async with get_session() as session:
        try:
            yield session
        except SQLAlchemyError:
            logger.exception("Database error occurred")
            await session.rollback()
            raise
        except Exception:
            await session.rollback()
            raise


def _find_session_parameter(func: Callable, db_param_name: Optional[str]):
    """Locate the position and name of the AsyncSession parameter of ``func``."""
    parameters = inspect.signature(func).parameters
    for i, (param_name, param) in enumerate(parameters.items()):
        annotation = param.annotation
        is_async_session = (
            annotation is AsyncSession or
            (hasattr(annotation, "__origin__") and AsyncSession in getattr(annotation, "__args__", []))
        )
        if db_param_name and param_name == db_param_name:
            return i, param_name
        if is_async_session and db_param_name is None:
            return i, param_name

    logger.warning(f"Unable to find database session parameter in function '{func.__name__}'")
    return None, None


def db_transaction(db_param_name: Optional[str] = None) -> Callable:
    """Decorator to wrap functions in a database transaction.

    The session is found by name (``db_param_name``) or, failing that, by its
    ``AsyncSession`` annotation. The transaction commits when the wrapped
    coroutine returns and rolls back when it raises.

    Args:
        db_param_name: Optional name of the database session parameter.

    Returns:
        Callable: Decorator function

    Raises:
        ValueError: If no database session is passed to the wrapped function
    """
    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        db_param_pos, db_param_key = _find_session_parameter(func, db_param_name)

        @wraps(func)
        async def wrapper(*args, **kwargs):
            db = None
            if db_param_key is not None and db_param_key in kwargs:
                db = kwargs[db_param_key]
            elif db_param_pos is not None and len(args) > db_param_pos:
                db = args[db_param_pos]
            else:
                db = next(
                    (value for value in (*args, *kwargs.values()) if isinstance(value, AsyncSession)),
                    None,
                )

            if db is None:
                raise ValueError(
                    f"Database session not found in function arguments for '{func.__name__}'."
                )

            try:
                result = await func(*args, **kwargs)
                await db.commit()
                return result
            except Exception as e:
                await db.rollback()
                logger.debug(f"Transaction rolled back in '{func.__name__}': {e}")
                raise

        return wrapper
    return decorator

