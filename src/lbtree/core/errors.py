import inspect
import logging
from collections.abc import Callable, Iterator
from functools import wraps
from typing import Any, TypeVar

from botocore.exceptions import BotoCoreError, ClientError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class LbtreeError(Exception):
    """Base class for errors reported to the user."""


class AwsCallError(LbtreeError):
    """An AWS API call failed; carries what was being done when it failed."""

    def __init__(self, context: str, cause: Exception):
        self.context = context
        self.cause = cause
        super().__init__(f"{context}: {cause}")

    @property
    def error_code(self) -> str | None:
        if isinstance(self.cause, ClientError):
            return self.cause.response.get("Error", {}).get("Code")
        return None


class ResourceNotFoundError(LbtreeError):
    pass


class NoSelectionError(LbtreeError):
    pass


class PickerError(LbtreeError):
    pass


def aws_call(context: str) -> Callable:
    """
    Decorator to wrap botocore failures with the context of the call.
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        if inspect.isgeneratorfunction(func):
            # Paginated calls fail while being iterated, not when called.
            @wraps(func)
            def gen_wrapper(*args: Any, **kwargs: Any) -> Iterator[Any]:
                try:
                    yield from func(*args, **kwargs)
                except (ClientError, BotoCoreError) as e:
                    logger.debug(f"AWS Error in {func.__name__}: {e}")
                    raise AwsCallError(context, e) from e

            return gen_wrapper

        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> T:
            try:
                return func(*args, **kwargs)
            except (ClientError, BotoCoreError) as e:
                logger.debug(f"AWS Error in {func.__name__}: {e}")
                raise AwsCallError(context, e) from e

        return wrapper

    return decorator
