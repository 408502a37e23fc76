"""Tagged capability tasks and their concurrent join."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from routing_engine.models.domain import (
    Capability,
    CapabilityPayload,
    CapabilityResult,
    TaskOutcome,
)
from routing_engine.orchestration.deadline import Deadline


@dataclass(frozen=True)
class CapabilityTask:
    """One unit of fan-out work: a capability tag and the coroutine that serves it."""

    capability: Capability
    work: Callable[[], Awaitable[CapabilityPayload]]

    async def execute(self) -> CapabilityResult:
        payload = await self.work()
        return CapabilityResult(capability=self.capability, payload=payload)


async def _settle(task: CapabilityTask, index: int, settled: list[int]) -> CapabilityResult:
    try:
        return await task.execute()
    finally:
        settled.append(index)


async def join_all(tasks: list[CapabilityTask], deadline: Deadline) -> list[TaskOutcome]:
    """Run ``tasks`` concurrently and wait for every one to settle.

    A failing task never cancels its siblings; its exception becomes the
    outcome's ``error``. Outcomes are returned in scheduling order, each
    stamped with the order it settled in. On deadline expiry every unfinished
    task is cancelled and DeadlineExceeded is raised.
    """
    if not tasks:
        return []

    settled_indexes: list[int] = []
    settled = await deadline.run(
        asyncio.gather(
            *(_settle(t, i, settled_indexes) for i, t in enumerate(tasks)),
            return_exceptions=True,
        ),
        operation="capability join",
    )

    outcomes: list[TaskOutcome] = []
    for index, (task, result) in enumerate(zip(tasks, settled)):
        order = settled_indexes.index(index)
        if isinstance(result, Exception):
            outcomes.append(
                TaskOutcome(capability=task.capability, error=result, settled_order=order)
            )
        elif isinstance(result, BaseException):
            # Cancellation and interpreter exits are not task failures.
            raise result
        else:
            outcomes.append(
                TaskOutcome(capability=task.capability, result=result, settled_order=order)
            )
    return outcomes
