import functools
import logging
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)

Result = dict[str, Any]


class OperationError(Exception):
    """Expected rejection (validation, uniqueness or integrity) of an operation."""


def ok(**data: Any) -> Result:
    return {"success": True, **data}


def fail(message: str, **data: Any) -> Result:
    return {"success": False, "message": message, **data}


def operation(func: Callable[..., Result]) -> Callable[..., Result]:
    """Turn every failure of ``func`` into a ``{"success": False}`` result."""

    name = func.__name__

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Result:
        try:
            return func(*args, **kwargs)
        except OperationError as exc:
            logger.info("%s rejected: %s", name, exc)
            return fail(str(exc))
        except Exception as exc:
            logger.exception("%s failed", name)
            return fail(f"{name} failed: {exc}")

    return wrapper
