"""External task capability: work run once at harness startup."""

from __future__ import annotations

from abc import ABC, abstractmethod

from odsharness.context import HarnessContext


class ExternalTask(ABC):
    """Base class for startup tasks that prepare external databases."""

    name: str = "external-task"

    def __init__(self, context: HarnessContext) -> None:
        self.context = context

    @abstractmethod
    async def execute(self) -> None:
        """Run the task.  Failures propagate to the caller."""
