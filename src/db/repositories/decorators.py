import asyncio
from collections.abc import Callable
import functools
import logging
from typing import Any, TypeVar, cast

from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError

from core.exceptions import CmsException, DatabaseError

logger = logging.getLogger(__name__)

T = TypeVar("T")
AsyncFunc = Callable[..., Any]
AsyncFuncT = Callable[..., T]

ENTITY_KEYS = ("id", "post_id", "type_id", "slug", "category_id", "media_id")


def with_retry(max_retries: int = 3, log_prefix: str = ""):
    """Decorator for retrying read operations on OperationalError.

    Args:
        max_retries: Maximum number of attempts
        log_prefix: Prefix for log messages
    """

    def decorator(func: AsyncFuncT) -> AsyncFuncT:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            action = log_prefix or getattr(func, "__name__", str(func))

            for attempt in range(max_retries):
                try:
                    return await func(*args, **kwargs)
                except CmsException:
                    raise
                except OperationalError as e:
                    entity_info = _extract_entity_info(args, kwargs)
                    if attempt < max_retries - 1:
                        logger.warning(
                            "OperationalError while %s %s (attempt %d): %s",
                            action,
                            entity_info,
                            attempt + 1,
                            e,
                        )
                        await asyncio.sleep(0.1 * (2**attempt))
                        continue
                    logger.error("Database error while %s %s: %s", action, entity_info, e)
                    raise DatabaseError(message="Database failure") from e
                except SQLAlchemyError as e:
                    logger.error("Database error while %s %s: %s", action, _extract_entity_info(args, kwargs), e)
                    raise DatabaseError(message="Database failure") from e
                except Exception as e:
                    logger.error("Unexpected error while %s %s: %s", action, _extract_entity_info(args, kwargs), e)
                    raise

            raise DatabaseError(message="Database failure")

        return cast(AsyncFuncT, wrapper)

    return decorator


def handle_db_errors(entity_name: str = ""):
    """Decorator for handling database errors without retries.

    Used for write operations. IntegrityError is re-raised untouched so the
    service layer can map it to a conflict.

    Args:
        entity_name: Entity name for logging
    """

    def decorator(func: AsyncFunc) -> AsyncFunc:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            func_name = getattr(func, "__name__", str(func))
            prefix = f"{entity_name} " if entity_name else ""

            try:
                return await func(*args, **kwargs)
            except (IntegrityError, CmsException):
                raise
            except SQLAlchemyError as e:
                logger.error("Database error while %s%s %s: %s", prefix, func_name, _extract_entity_info(args, kwargs), e)
                raise DatabaseError(message="Database failure") from e
            except Exception as e:
                logger.error("Unexpected error while %s%s %s: %s", prefix, func_name, _extract_entity_info(args, kwargs), e)
                raise

        return wrapper

    return decorator


def _extract_entity_info(args: tuple, kwargs: dict) -> str:
    """Best-effort identifier for log messages.

    The first positional argument is the session; the second is usually the
    entity id or the entity itself.
    """
    if len(args) > 1:
        candidate = args[1]
        if isinstance(candidate, int | str):
            return str(candidate)
        entity_id = getattr(candidate, "id", None)
        if entity_id is not None:
            return f"id={entity_id}"
        if candidate is not None and not isinstance(candidate, list | tuple | dict):
            return str(candidate)

    for key in ENTITY_KEYS:
        if key in kwargs:
            return f"{key}={kwargs[key]}"

    return ""
