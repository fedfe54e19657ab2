"""Concurrent per-member fan-out with panel-ordered fan-in."""

import asyncio
import logging
from typing import Awaitable, Callable, Iterable, TypeVar

from .models import PanelMember

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def gather_in_panel_order(
    members: Iterable[PanelMember],
    call: Callable[[PanelMember], Awaitable[T]],
) -> list[T]:
    """
    Run call(member) for every member concurrently.

    Results come back in the order of ``members``, not completion order.
    The first failure cancels the calls still in flight and is re-raised;
    if several calls have already failed, the earliest member's error wins.
    No partial result list is ever returned.

    Args:
        members: Panel members, in registry order
        call: Coroutine function producing one member's result

    Returns:
        One result per member, in member order
    """
    tasks = [
        asyncio.create_task(call(member), name=f"council-member-{member.id}")
        for member in members
    ]
    if not tasks:
        return []

    try:
        _, pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
    except asyncio.CancelledError:
        await _cancel_all(tasks)
        raise

    if pending:
        logger.debug(f"Cancelling {len(pending)} in-flight member calls after a failure")
        await _cancel_all(pending)

    # Retrieve every failure so none is reported as never retrieved
    errors = [
        (task.get_name(), task.exception())
        for task in tasks
        if not task.cancelled() and task.exception() is not None
    ]
    if errors:
        for name, error in errors[1:]:
            logger.debug(f"Additional failure in {name}: {type(error).__name__}: {error}")
        raise errors[0][1]

    return [task.result() for task in tasks]


async def _cancel_all(tasks: Iterable["asyncio.Task[T]"]) -> None:
    tasks = list(tasks)
    for task in tasks:
        task.cancel()
    await asyncio.gather(*tasks, return_exceptions=True)
