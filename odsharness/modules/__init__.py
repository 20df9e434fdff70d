"""Container modules loaded by the composition root."""

from odsharness.modules.update_admin_database import UpdateAdminDatabaseModule

DEFAULT_MODULES = (UpdateAdminDatabaseModule,)

__all__ = ["DEFAULT_MODULES", "UpdateAdminDatabaseModule"]
