"""Tests for the startup tasks and the task runner."""

from __future__ import annotations

import pytest
from sqlalchemy import func, select
from sqlalchemy.orm import selectinload

from odsharness.config import ApplicationConfig
from odsharness.db.models import (
    ApiClient,
    Application,
    ApplicationEducationOrganization,
    ClaimSet,
    SecurityApplication,
    User,
    Vendor,
)
from odsharness.tasks import (
    UpdateAdminDatabaseTask,
    UpdateSecurityDatabaseTask,
    run_external_tasks,
)

from conftest import FailingTask, RecordingTask, SecondRecordingTask


async def _count(session, model) -> int:
    result = await session.execute(select(func.count()).select_from(model))
    return result.scalar_one()


async def _clients(databases) -> dict[str, ApiClient]:
    async with databases.admin_session() as session:
        result = await session.execute(
            select(ApiClient).options(selectinload(ApiClient.education_organizations))
        )
        return {c.name: c for c in result.scalars().all()}


class TestUpdateAdminDatabaseTask:
    async def test_seeds_vendors_and_users(self, context):
        await UpdateAdminDatabaseTask(context).execute()
        async with context.databases.admin_session() as session:
            vendors = (await session.execute(select(Vendor).order_by(Vendor.name))).scalars().all()
            assert [v.name for v in vendors] == ["Empty Vendor", "Test Admin"]
            assert vendors[1].namespace_prefixes == ["uri://ed-fi.org"]
            users = (await session.execute(select(User))).scalars().all()
            assert [u.email for u in users] == ["testadmin@ed-fi.org"]

    async def test_seeds_application_and_clients(self, context):
        await UpdateAdminDatabaseTask(context).execute()
        async with context.databases.admin_session() as session:
            app = (await session.execute(select(Application))).scalar_one()
            assert app.name == "Test Admin Application"
            assert app.claim_set_name == "Ed-Fi Sandbox"

        clients = await _clients(context.databases)
        admin = clients["Admin Client"]
        assert admin.key == "testadminkey"
        assert admin.secret == "testadminsecret"
        assert admin.is_approved is True
        assert sorted(e.education_organization_id for e in admin.education_organizations) == [
            255901, 255901001,
        ]

        generated = clients["Generated Client"]
        assert generated.key and generated.key.isalnum()
        assert generated.secret
        assert generated.use_sandbox is True

    async def test_education_organizations_shared_per_application(self, context):
        await UpdateAdminDatabaseTask(context).execute()
        async with context.databases.admin_session() as session:
            assert await _count(session, ApplicationEducationOrganization) == 2

    async def test_rerun_is_idempotent(self, context):
        task = UpdateAdminDatabaseTask(context)
        await task.execute()
        first = await _clients(context.databases)
        await task.execute()
        second = await _clients(context.databases)

        assert {n: (c.key, c.secret) for n, c in first.items()} == {
            n: (c.key, c.secret) for n, c in second.items()
        }
        async with context.databases.admin_session() as session:
            assert await _count(session, Vendor) == 2
            assert await _count(session, User) == 1
            assert await _count(session, Application) == 1
            assert await _count(session, ApiClient) == 2
            assert await _count(session, ApplicationEducationOrganization) == 2

    async def test_config_changes_are_applied(self, context):
        await UpdateAdminDatabaseTask(context).execute()
        client_config = context.config.vendors[0].applications[0].clients[0]
        client_config.secret = "rotated"
        client_config.approved = False
        context.config.vendors[0].applications[0].claim_set_name = "SIS Vendor"

        await UpdateAdminDatabaseTask(context).execute()

        admin = (await _clients(context.databases))["Admin Client"]
        assert admin.secret == "rotated"
        assert admin.is_approved is False
        async with context.databases.admin_session() as session:
            app = (await session.execute(select(Application))).scalar_one()
            assert app.claim_set_name == "SIS Vendor"

    async def test_removed_education_organization_is_unassigned(self, context):
        await UpdateAdminDatabaseTask(context).execute()
        context.config.vendors[0].applications[0].clients[0].education_organization_ids = [255901]

        await UpdateAdminDatabaseTask(context).execute()

        admin = (await _clients(context.databases))["Admin Client"]
        assert [e.education_organization_id for e in admin.education_organizations] == [255901]

    async def test_client_moved_to_another_application(self, context):
        await UpdateAdminDatabaseTask(context).execute()
        first_app = context.config.vendors[0].applications[0]
        admin_config = first_app.clients.pop(0)
        admin_config.education_organization_ids = [999]
        context.config.vendors[0].applications.append(
            ApplicationConfig(name="Moved Application", clients=[admin_config])
        )

        await UpdateAdminDatabaseTask(context).execute()

        async with context.databases.admin_session() as session:
            moved = (await session.execute(
                select(Application).where(Application.name == "Moved Application")
            )).scalar_one()
        admin = (await _clients(context.databases))["Admin Client"]
        assert admin.application_id == moved.id
        assert [
            (e.education_organization_id, e.application_id) for e in admin.education_organizations
        ] == [(999, moved.id)]


class TestUpdateSecurityDatabaseTask:
    async def test_creates_application_and_claim_sets(self, context):
        await UpdateSecurityDatabaseTask(context).execute()
        async with context.databases.security_session() as session:
            app = (await session.execute(select(SecurityApplication))).scalar_one()
            assert app.name == "Ed-Fi ODS API"
            names = (await session.execute(select(ClaimSet.name).order_by(ClaimSet.name))).scalars().all()
            assert names == ["Ed-Fi Sandbox", "SIS Vendor"]

    async def test_rerun_is_idempotent(self, context):
        task = UpdateSecurityDatabaseTask(context)
        await task.execute()
        await task.execute()
        async with context.databases.security_session() as session:
            assert await _count(session, SecurityApplication) == 1
            assert await _count(session, ClaimSet) == 2

    async def test_keeps_existing_claim_sets(self, context):
        async with context.databases.security_session() as session:
            app = SecurityApplication(name="Ed-Fi ODS API")
            session.add(app)
            await session.flush()
            session.add(ClaimSet(name="Custom", application_id=app.id))

        await UpdateSecurityDatabaseTask(context).execute()
        async with context.databases.security_session() as session:
            names = set((await session.execute(select(ClaimSet.name))).scalars().all())
            assert names == {"Custom", "Ed-Fi Sandbox", "SIS Vendor"}

    async def test_independent_of_admin_database(self, context):
        await UpdateSecurityDatabaseTask(context).execute()
        async with context.databases.admin_session() as session:
            assert await _count(session, Application) == 0


class TestRunExternalTasks:
    async def test_runs_in_given_order(self, context):
        completed = await run_external_tasks(
            [SecondRecordingTask(context), RecordingTask(context)]
        )
        assert completed == ["second-recording", "recording"]
        assert RecordingTask.log == ["second-recording", "recording"]

    async def test_failure_propagates_and_stops(self, context):
        with pytest.raises(RuntimeError, match="database unreachable"):
            await run_external_tasks(
                [RecordingTask(context), FailingTask(context), SecondRecordingTask(context)]
            )
        assert RecordingTask.log == ["recording"]

    async def test_empty(self):
        assert await run_external_tasks([]) == []
