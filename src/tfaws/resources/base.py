"""Shared plumbing for resource lifecycle adapters."""

from __future__ import annotations

import time
from collections.abc import Callable, Collection, Iterator
from contextlib import contextmanager
from enum import Enum
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError

from ..client import AwsClient
from ..exceptions import ResourceNotFoundError, ResourceOperationError, ValidationError
from ..waiter import RefreshFunc, StateWaiter


def error_code(exc: BaseException) -> str | None:
    """Return the AWS error code of a botocore ``ClientError``, else ``None``."""
    if isinstance(exc, ClientError):
        return exc.response.get("Error", {}).get("Code")
    return None


class ResourceAdapter:
    """
    Base class for adapters mapping create/read/update/delete onto AWS calls.

    Subclasses set ``resource_type`` and implement the four lifecycle
    operations. ``clock`` and ``sleep`` are injectable so polling can be
    exercised without waiting.
    """

    resource_type: str = ""

    def __init__(
        self,
        client: AwsClient,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.client = client
        self.clock = clock
        self.sleep = sleep

    @contextmanager
    def api_error(self, operation: str, resource_id: str | None) -> Iterator[None]:
        """Wrap botocore errors with the resource type and identifier."""
        try:
            yield
        except (ClientError, BotoCoreError) as e:
            raise ResourceOperationError(operation, self.resource_type, resource_id, e) from e

    def require_in_place(self, old: Any, new: Any, *fields: str) -> None:
        """Reject changes to attributes that can only be set at creation."""
        for name in fields:
            if getattr(old, name) != getattr(new, name):
                raise ValidationError(
                    name,
                    getattr(new, name),
                    f"Cannot be changed on an existing {self.resource_type}; recreate it",
                )

    def waiter(
        self,
        resource_id: str,
        pending: Collection[Enum],
        target: Collection[Enum],
        refresh: RefreshFunc,
        timeout: float,
        delay: float,
    ) -> StateWaiter:
        return StateWaiter(
            resource_type=self.resource_type,
            resource_id=resource_id,
            pending=pending,
            target=target,
            refresh=refresh,
            timeout=timeout,
            delay=delay,
            poll_interval=delay,
            clock=self.clock,
            sleep=self.sleep,
        )

    def create(self, config: Any) -> Any:
        raise NotImplementedError

    def read(self, resource_id: str, *, is_new: bool = False) -> Any:
        raise NotImplementedError

    def update(self, resource_id: str, old: Any, new: Any) -> Any:
        raise NotImplementedError

    def delete(self, resource_id: str) -> None:
        raise NotImplementedError

    def apply(self, resource_id: str, config: Any) -> Any:
        """
        Converge an existing resource onto ``config``.

        The current remote state stands in for the previously declared
        configuration, so only attributes that differ are sent.

        Raises:
            ResourceNotFoundError: If the resource does not exist
        """
        current = self.read(resource_id)
        if current is None:
            raise ResourceNotFoundError(self.resource_type, resource_id)
        return self.update(resource_id, current.to_config(), config)
