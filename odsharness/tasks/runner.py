from __future__ import annotations

import logging
from collections.abc import Iterable

from odsharness.tasks.base import ExternalTask

logger = logging.getLogger(__name__)


async def run_external_tasks(tasks: Iterable[ExternalTask]) -> list[str]:
    """Execute *tasks* one after another in the given order.

    The first failure is logged and re-raised; later tasks do not run.
    Returns the names of the tasks that completed.
    """
    completed = []
    for task in tasks:
        logger.info("Running external task [%s]", task.name)
        try:
            await task.execute()
        except Exception:
            logger.exception("External task [%s] failed", task.name)
            raise
        completed.append(task.name)
    return completed
