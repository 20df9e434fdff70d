from __future__ import annotations

from odsharness.admin.base import ApplicationCreator
from odsharness.admin.default_application import DefaultApplicationCreator
from odsharness.container.base import Module
from odsharness.container.builder import ContainerBuilder
from odsharness.tasks.base import ExternalTask
from odsharness.tasks.update_admin_database import UpdateAdminDatabaseTask
from odsharness.tasks.update_security_database import UpdateSecurityDatabaseTask


class UpdateAdminDatabaseModule(Module):
    """Registers the database preparation tasks and the default application creator."""

    def load(self, builder: ContainerBuilder) -> None:
        builder.register(UpdateAdminDatabaseTask, as_=ExternalTask)
        builder.register(UpdateSecurityDatabaseTask, as_=ExternalTask)
        builder.register(DefaultApplicationCreator, as_=ApplicationCreator)
