"""Shared test fixtures for the ODS test harness."""

from __future__ import annotations

import pytest
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from odsharness.admin.base import ApplicationCreator
from odsharness.config import HarnessConfig
from odsharness.context import HarnessContext
from odsharness.db.session import Databases
from odsharness.tasks.base import ExternalTask


# --- Test doubles ---


class RecordingTask(ExternalTask):
    """Appends its name to a class-level log when executed."""

    log: list[str] = []
    name = "recording"

    async def execute(self) -> None:
        RecordingTask.log.append(self.name)


class SecondRecordingTask(RecordingTask):
    name = "second-recording"


class FailingTask(ExternalTask):
    name = "failing"

    async def execute(self) -> None:
        raise RuntimeError("database unreachable")


class StubApplicationCreator(ApplicationCreator):
    async def find_or_create_default_application(self, vendor_id):
        raise LookupError(f"Vendor {vendor_id} not found")

    async def add_education_organizations(self, application_id, education_organization_ids):
        return None


# --- Fixtures ---


def _memory_engine():
    return create_async_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)


@pytest.fixture
def harness_config(tmp_path):
    return HarnessConfig(**{
        "logging": {"dir": str(tmp_path / "logs")},
        "default_application": {
            "name": "Default Sandbox Application",
            "claim_set_name": "SIS Vendor",
            "education_organization_ids": [255901],
        },
        "vendors": [
            {
                "name": "Test Admin",
                "email": "testadmin@ed-fi.org",
                "namespace_prefixes": ["uri://ed-fi.org"],
                "applications": [
                    {
                        "name": "Test Admin Application",
                        "claim_set_name": "Ed-Fi Sandbox",
                        "clients": [
                            {
                                "name": "Admin Client",
                                "key": "testadminkey",
                                "secret": "testadminsecret",
                                "education_organization_ids": [255901, 255901001],
                            },
                            {
                                "name": "Generated Client",
                                "use_sandbox": True,
                                "education_organization_ids": [255901],
                            },
                        ],
                    },
                ],
            },
            {"name": "Empty Vendor"},
        ],
    })


@pytest.fixture
async def databases():
    """In-memory admin and security databases with tables created."""
    dbs = Databases(_memory_engine(), _memory_engine())
    await dbs.init()
    yield dbs
    await dbs.close()


@pytest.fixture
def context(harness_config, databases):
    return HarnessContext(config=harness_config, databases=databases)


@pytest.fixture(autouse=True)
def _reset_recording_log():
    RecordingTask.log = []
    yield
    RecordingTask.log = []
