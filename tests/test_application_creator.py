"""Tests for DefaultApplicationCreator."""

from __future__ import annotations

import pytest
from sqlalchemy import func, select

from odsharness.admin import DefaultApplicationCreator
from odsharness.db.models import Application, ApplicationEducationOrganization, Vendor


@pytest.fixture
async def vendor_id(databases):
    async with databases.admin_session() as session:
        vendor = Vendor(name="Sandbox Vendor", namespace_prefixes=[])
        session.add(vendor)
        await session.flush()
        return vendor.id


@pytest.fixture
def creator(context):
    return DefaultApplicationCreator(context)


def _ed_org_ids(application: Application) -> list[int]:
    return sorted(e.education_organization_id for e in application.education_organizations)


class TestFindOrCreateDefaultApplication:
    async def test_creates_application(self, creator, vendor_id):
        app = await creator.find_or_create_default_application(vendor_id)
        assert app.id is not None
        assert app.name == "Default Sandbox Application"
        assert app.claim_set_name == "SIS Vendor"
        assert app.vendor_id == vendor_id
        assert _ed_org_ids(app) == [255901]

    async def test_reuses_existing(self, creator, vendor_id, databases):
        first = await creator.find_or_create_default_application(vendor_id)
        second = await creator.find_or_create_default_application(vendor_id)
        assert first.id == second.id
        async with databases.admin_session() as session:
            count = await session.execute(select(func.count()).select_from(Application))
            assert count.scalar_one() == 1
            count = await session.execute(
                select(func.count()).select_from(ApplicationEducationOrganization)
            )
            assert count.scalar_one() == 1

    async def test_uses_configured_names(self, creator, vendor_id, context):
        context.config.default_application.name = "Smoke Test App"
        context.config.default_application.claim_set_name = "Ed-Fi Sandbox"
        app = await creator.find_or_create_default_application(vendor_id)
        assert app.name == "Smoke Test App"
        assert app.claim_set_name == "Ed-Fi Sandbox"

    async def test_unknown_vendor(self, creator):
        with pytest.raises(LookupError, match="Vendor 999 not found"):
            await creator.find_or_create_default_application(999)


class TestAddEducationOrganizations:
    async def test_adds_missing_only(self, creator, vendor_id, databases):
        app = await creator.find_or_create_default_application(vendor_id)
        await creator.add_education_organizations(app.id, [255901, 255902, 255902])

        refreshed = await creator.find_or_create_default_application(vendor_id)
        assert _ed_org_ids(refreshed) == [255901, 255902]

    async def test_unknown_application(self, creator):
        with pytest.raises(LookupError, match="Application 42 not found"):
            await creator.add_education_organizations(42, [1])
