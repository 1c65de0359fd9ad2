"""Explicit success/failure values shared by the retrievers and extractors."""

from __future__ import annotations

import functools
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Generic, TypeVar, Union

from .errors import ScraperError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True

    @property
    def error(self) -> None:
        return None

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True, slots=True)
class Err:
    error: ScraperError

    @property
    def ok(self) -> bool:
        return False

    @property
    def kind(self) -> str:
        return self.error.kind

    @property
    def message(self) -> str:
        return self.error.message

    def unwrap(self) -> Any:
        """Re-raise the carried error so the enclosing operation aborts."""
        raise self.error


Result = Union[Ok[T], Err]


def returns_result(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[Result[T]]]:
    """Wrap an async operation so ``ScraperError`` becomes ``Err`` instead of escaping.

    Only scraper errors are converted; anything else is a bug and keeps
    propagating to the caller.
    """

    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Result[T]:
        try:
            return Ok(await func(*args, **kwargs))
        except ScraperError as exc:
            logger.debug(
                "result.err",
                extra={"operation": func.__qualname__, "kind": exc.kind, "error": exc.message},
            )
            return Err(exc)

    return wrapper
