"""Polling and retry helpers for eventually-consistent AWS resources."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Collection
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, TypeVar

from .exceptions import UnexpectedStateError, WaitTimeoutError

logger = logging.getLogger(__name__)

T = TypeVar("T")

RefreshFunc = Callable[[], tuple[Any, Enum]]


@dataclass
class StateWaiter:
    """
    Poll a resource until it reports one of the target statuses.

    ``refresh`` returns ``(obj, status)`` where ``status`` is a member of
    the resource kind's status enum. The waiter sleeps ``delay`` once,
    then refreshes every ``poll_interval`` seconds:

    - a status in ``target`` ends the wait and ``obj`` is returned;
    - a status in ``pending`` keeps polling;
    - any other status raises ``UnexpectedStateError``;
    - running past ``timeout`` (measured from the start of ``wait()``,
      initial delay included) raises ``WaitTimeoutError``.

    Exceptions raised by ``refresh`` propagate unchanged.
    """

    resource_type: str
    resource_id: str | None
    pending: Collection[Enum]
    target: Collection[Enum]
    refresh: RefreshFunc
    timeout: float
    delay: float = 0.0
    poll_interval: float = 5.0
    clock: Callable[[], float] = field(default=time.monotonic, repr=False)
    sleep: Callable[[float], None] = field(default=time.sleep, repr=False)

    def _expected(self) -> list[str]:
        return [s.value for s in self.target]

    def wait(self) -> Any:
        deadline = self.clock() + self.timeout
        if self.delay > 0:
            self.sleep(self.delay)

        while True:
            obj, status = self.refresh()
            logger.debug(
                "Waiting for %s (%s): status %s, target %s",
                self.resource_type,
                self.resource_id,
                status.value,
                self._expected(),
            )

            if status in self.target:
                return obj

            if status not in self.pending:
                raise UnexpectedStateError(
                    self.resource_type, self.resource_id, status.value, self._expected()
                )

            remaining = deadline - self.clock()
            if remaining <= 0:
                raise WaitTimeoutError(
                    self.resource_type,
                    self.resource_id,
                    self._expected(),
                    status.value,
                    self.timeout,
                )
            self.sleep(min(self.poll_interval, remaining))


def retry_until(
    fn: Callable[[], T],
    timeout: float,
    retryable: Callable[[Exception], bool],
    delay: float = 5.0,
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """
    Call ``fn`` until it succeeds, retrying errors that ``retryable`` accepts.

    Non-retryable errors propagate at once. Once ``timeout`` has elapsed,
    ``fn`` gets one final attempt whose outcome, success or error, is
    returned to the caller as-is.

    Args:
        fn: Zero-argument callable to attempt
        timeout: Seconds to keep retrying
        retryable: Predicate deciding whether an error is transient
        delay: Seconds to sleep between attempts
    """
    deadline = clock() + timeout
    while clock() < deadline:
        try:
            return fn()
        except Exception as e:
            if not retryable(e):
                raise
            logger.debug("Retrying after transient error: %s", e)
        remaining = deadline - clock()
        if remaining > 0:
            sleep(min(delay, remaining))
    return fn()
