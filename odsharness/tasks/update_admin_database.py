"""Seed the admin database with the vendors and clients the tests log in as."""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from odsharness.admin.default_application import assign_education_organizations
from odsharness.config import ApiClientConfig, ApplicationConfig, VendorConfig
from odsharness.db.models import ApiClient, Application, User, Vendor
from odsharness.tasks.base import ExternalTask
from odsharness.utils import generate_client_key, generate_client_secret

logger = logging.getLogger(__name__)


class UpdateAdminDatabaseTask(ExternalTask):
    """Upserts configured vendors, applications and API clients.

    Vendors are matched by name, applications by vendor and name, clients
    by key.  Clients configured without a key or secret get generated
    ones on the first run; a keyless client is matched by name on later
    runs so its credentials stay stable.
    """

    name = "update-admin-database"

    async def execute(self) -> None:
        vendors = self.context.config.vendors
        async with self.context.databases.admin_session() as session:
            for vendor_config in vendors:
                await self._upsert_vendor(session, vendor_config)
        logger.info("Admin database updated: %d vendor(s)", len(vendors))

    async def _upsert_vendor(self, session: AsyncSession, config: VendorConfig) -> Vendor:
        result = await session.execute(
            select(Vendor)
            .where(Vendor.name == config.name)
            .options(selectinload(Vendor.users))
        )
        vendor = result.scalar_one_or_none()
        if vendor is None:
            vendor = Vendor(name=config.name, users=[])
            session.add(vendor)
            logger.info("Created vendor [%s]", config.name)
        vendor.namespace_prefixes = list(config.namespace_prefixes)

        if config.email and not any(u.email == config.email for u in vendor.users):
            vendor.users.append(User(email=config.email, full_name=config.name))
        await session.flush()

        for app_config in config.applications:
            await self._upsert_application(session, vendor, app_config)
        return vendor

    async def _upsert_application(
        self, session: AsyncSession, vendor: Vendor, config: ApplicationConfig,
    ) -> Application:
        result = await session.execute(
            select(Application)
            .where(Application.vendor_id == vendor.id, Application.name == config.name)
            .options(
                selectinload(Application.education_organizations),
                selectinload(Application.api_clients).selectinload(
                    ApiClient.education_organizations
                ),
            )
        )
        application = result.scalar_one_or_none()
        if application is None:
            application = Application(
                name=config.name,
                vendor_id=vendor.id,
                claim_set_name=config.claim_set_name,
                education_organizations=[],
                api_clients=[],
            )
            session.add(application)
            logger.info("Created application [%s] for vendor [%s]", config.name, vendor.name)
        application.claim_set_name = config.claim_set_name
        application.operational_context_uri = config.operational_context_uri

        for client_config in config.clients:
            await self._upsert_client(session, application, client_config)
        await session.flush()
        return application

    async def _upsert_client(
        self, session: AsyncSession, application: Application, config: ApiClientConfig,
    ) -> ApiClient:
        client = None
        if config.key:
            result = await session.execute(
                select(ApiClient)
                .where(ApiClient.key == config.key)
                .options(selectinload(ApiClient.education_organizations))
            )
            client = result.scalar_one_or_none()
        else:
            client = next((c for c in application.api_clients if c.name == config.name), None)

        if client is None:
            client = ApiClient(
                name=config.name,
                key=config.key or generate_client_key(),
                secret=config.secret or generate_client_secret(),
                education_organizations=[],
            )
            application.api_clients.append(client)
            session.add(client)
            logger.info("Created API client [%s] with key [%s]", config.name, client.key)
        elif client.application_id != application.id:
            client.application = application

        client.name = config.name
        if config.secret:
            client.secret = config.secret
        client.is_approved = config.approved
        client.use_sandbox = config.use_sandbox

        # Replaces the client's links, including any left over from a
        # previous application
        client.education_organizations = await assign_education_organizations(
            session, application, config.education_organization_ids
        )
        return client
