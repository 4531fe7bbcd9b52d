"""Batch planning for capacity-limited parameter updates.

``ModifyDBParameterGroup`` and ``ResetDBParameterGroup`` accept at most
20 parameters per call, so a large update goes out as several calls.
The planner decides which parameters go into each call.

Parameters are prioritised so that the ones most likely to need
attention are sent first:

1. character-set parameters that apply immediately, since other
   parameters in some engines depend on them;
2. every other immediately-applied parameter, so errors on live
   settings surface before settings that only take effect on reboot;
3. everything else, in arrival order.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Sequence
from typing import TypeVar

from .models import Parameter

MAX_PARAMETERS_PER_CALL = 20

CHARACTER_SET_MARKER = "character_set"

T = TypeVar("T")


def _is_immediate_character_set(parameter: Parameter) -> bool:
    return CHARACTER_SET_MARKER in parameter.name and not parameter.pending_reboot


def _is_immediate(parameter: Parameter) -> bool:
    return not parameter.pending_reboot


def _any(parameter: Parameter) -> bool:
    return True


_PASSES: tuple[Callable[[Parameter], bool], ...] = (
    _is_immediate_character_set,
    _is_immediate,
    _any,
)


def plan_batch(
    parameters: Sequence[Parameter],
    max_size: int,
) -> tuple[list[Parameter], list[Parameter] | None]:
    """
    Split off the next batch of parameters to submit.

    Args:
        parameters: Parameters still to submit, in arrival order.
        max_size: Maximum number of parameters per call (>= 1).

    Returns:
        ``(batch, remainder)``. ``remainder`` is ``None`` once everything
        fits into ``batch``; otherwise it holds the parameters skipped by
        completed passes followed by the unscanned tail, in order.

    Raises:
        ValueError: If ``max_size`` is less than 1.
    """
    if max_size < 1:
        raise ValueError(f"max_size must be >= 1, got {max_size}")

    if len(parameters) <= max_size:
        return list(parameters), None

    batch: list[Parameter] = []
    pending = list(parameters)

    for selects in _PASSES:
        remainder: list[Parameter] = []
        for i, parameter in enumerate(pending):
            if len(batch) >= max_size:
                remainder.extend(pending[i:])
                return batch, remainder

            if selects(parameter):
                batch.append(parameter)
            else:
                remainder.append(parameter)
        pending = remainder

    return batch, pending or None


def iter_batches(parameters: Sequence[Parameter], max_size: int) -> Iterator[list[Parameter]]:
    """Yield successive non-empty batches until every parameter is planned."""
    remainder: list[Parameter] | None = list(parameters)
    while remainder is not None:
        batch, remainder = plan_batch(remainder, max_size)
        if batch:
            yield batch


def chunk(items: Sequence[T], size: int) -> Iterator[list[T]]:
    """Yield fixed-size slices of ``items`` with no reordering."""
    if size < 1:
        raise ValueError(f"size must be >= 1, got {size}")
    for start in range(0, len(items), size):
        yield list(items[start : start + size])
