from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Dict, Optional, Sequence

from ..instances.registry import Instance
from .base import InstanceOutcome
from .errors import InstanceTimeout

logger = logging.getLogger(__name__)


async def race_batch(
    instances: Sequence[Instance],
    run: Callable[[Instance], Awaitable[InstanceOutcome]],
    *,
    timeout: float,
    on_failure: Callable[[InstanceOutcome], None],
) -> Optional[InstanceOutcome]:
    """Run one task per instance and return the first successful outcome.

    ``run`` must report failures as outcome values. ``on_failure`` is called
    for every task that finished with a failure before a winner was chosen,
    and for every task still pending when the batch deadline passes. Tasks
    cancelled because a sibling won are not reported.
    """
    if not instances:
        return None

    tasks: Dict[asyncio.Task, Instance] = {
        asyncio.create_task(run(inst), name=f"query:{inst.base_url}"): inst for inst in instances
    }
    pending = set(tasks)
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    winner: Optional[InstanceOutcome] = None

    try:
        while pending and winner is None:
            remaining = deadline - loop.time()
            if remaining <= 0:
                break
            done, pending = await asyncio.wait(pending, timeout=remaining, return_when=asyncio.FIRST_COMPLETED)
            for task in done:
                outcome = task.result()
                if outcome.ok and winner is None:
                    winner = outcome
                elif not outcome.ok:
                    on_failure(outcome)
    finally:
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

    if winner is None:
        for task in pending:
            inst = tasks[task]
            on_failure(InstanceOutcome(inst, error=InstanceTimeout(inst, f"no answer within {timeout:g}s")))
    elif pending:
        logger.debug("Cancelled %d slower instance(s) after %s won", len(pending), winner.instance)
    return winner
