"""Application creator capability."""

from __future__ import annotations

from abc import ABC, abstractmethod

from odsharness.context import HarnessContext
from odsharness.db.models import Application


class ApplicationCreator(ABC):
    """Creates the application a vendor gets when it has none configured."""

    def __init__(self, context: HarnessContext) -> None:
        self.context = context

    @abstractmethod
    async def find_or_create_default_application(self, vendor_id: int) -> Application:
        """Return the vendor's default application, creating it if missing."""

    @abstractmethod
    async def add_education_organizations(
        self, application_id: int, education_organization_ids: list[int],
    ) -> None:
        """Assign education organizations to an application (idempotent)."""
