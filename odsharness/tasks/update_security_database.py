"""Make sure the security database knows every claim set the harness uses."""

from __future__ import annotations

import logging

from sqlalchemy import select

from odsharness.db.models import ClaimSet, SecurityApplication
from odsharness.tasks.base import ExternalTask

logger = logging.getLogger(__name__)


class UpdateSecurityDatabaseTask(ExternalTask):
    name = "update-security-database"

    async def execute(self) -> None:
        config = self.context.config
        claim_set_names = config.claim_set_names()

        async with self.context.databases.security_session() as session:
            result = await session.execute(
                select(SecurityApplication).where(
                    SecurityApplication.name == config.security.application_name
                )
            )
            application = result.scalar_one_or_none()
            if application is None:
                application = SecurityApplication(name=config.security.application_name)
                session.add(application)
                await session.flush()
                logger.info("Created security application [%s]", application.name)

            result = await session.execute(
                select(ClaimSet.name).where(ClaimSet.name.in_(claim_set_names))
            )
            existing = set(result.scalars().all())
            for name in claim_set_names:
                if name not in existing:
                    session.add(ClaimSet(name=name, application_id=application.id))
                    logger.info("Created claim set [%s]", name)

        logger.info("Security database updated: %d claim set(s)", len(claim_set_names))
