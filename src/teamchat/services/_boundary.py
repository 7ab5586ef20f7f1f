from __future__ import annotations

import functools
import logging
from typing import Awaitable, Callable, ParamSpec, TypeVar

from teamchat.application.exceptions import AppError, UnexpectedError

logger = logging.getLogger(__name__)

P = ParamSpec("P")
R = TypeVar("R")


def service_boundary(fn: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
    """Let AppError through; anything else becomes UnexpectedError."""

    @functools.wraps(fn)
    async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        try:
            return await fn(*args, **kwargs)
        except AppError:
            raise
        except Exception as exc:
            logger.exception("Unhandled error in %s", fn.__qualname__)
            raise UnexpectedError("Internal server error") from exc

    return wrapper
