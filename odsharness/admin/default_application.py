"""Default application creation for sandbox vendors."""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from odsharness.admin.base import ApplicationCreator
from odsharness.db.models import Application, ApplicationEducationOrganization, Vendor

logger = logging.getLogger(__name__)


async def assign_education_organizations(
    session: AsyncSession,
    application: Application,
    education_organization_ids: list[int],
) -> list[ApplicationEducationOrganization]:
    """Attach any missing education organizations to *application*.

    The application must have ``education_organizations`` loaded.  Returns
    the rows matching *education_organization_ids*, existing or new.
    """
    existing = {
        eo.education_organization_id: eo for eo in application.education_organizations
    }
    rows = []
    for ed_org_id in dict.fromkeys(education_organization_ids):
        row = existing.get(ed_org_id)
        if row is None:
            row = ApplicationEducationOrganization(education_organization_id=ed_org_id)
            application.education_organizations.append(row)
            session.add(row)
            existing[ed_org_id] = row
        rows.append(row)
    return rows


class DefaultApplicationCreator(ApplicationCreator):
    """Finds or creates the configured default application for a vendor."""

    async def find_or_create_default_application(self, vendor_id: int) -> Application:
        settings = self.context.config.default_application
        async with self.context.databases.admin_session() as session:
            vendor = await session.get(Vendor, vendor_id)
            if vendor is None:
                raise LookupError(f"Vendor {vendor_id} not found")

            result = await session.execute(
                select(Application)
                .where(Application.vendor_id == vendor_id, Application.name == settings.name)
                .options(selectinload(Application.education_organizations))
            )
            application = result.scalar_one_or_none()
            if application is None:
                application = Application(
                    name=settings.name,
                    claim_set_name=settings.claim_set_name,
                    vendor_id=vendor_id,
                    education_organizations=[],
                )
                session.add(application)
                logger.info(
                    "Created default application [%s] for vendor [%s]",
                    settings.name, vendor.name,
                )
            else:
                application.claim_set_name = settings.claim_set_name

            await assign_education_organizations(
                session, application, settings.education_organization_ids
            )
            await session.flush()
            return application

    async def add_education_organizations(
        self, application_id: int, education_organization_ids: list[int],
    ) -> None:
        async with self.context.databases.admin_session() as session:
            result = await session.execute(
                select(Application)
                .where(Application.id == application_id)
                .options(selectinload(Application.education_organizations))
            )
            application = result.scalar_one_or_none()
            if application is None:
                raise LookupError(f"Application {application_id} not found")
            await assign_education_organizations(
                session, application, education_organization_ids
            )
