"""External tasks run at harness startup."""

from odsharness.tasks.base import ExternalTask
from odsharness.tasks.runner import run_external_tasks
from odsharness.tasks.update_admin_database import UpdateAdminDatabaseTask
from odsharness.tasks.update_security_database import UpdateSecurityDatabaseTask

__all__ = [
    "ExternalTask",
    "UpdateAdminDatabaseTask",
    "UpdateSecurityDatabaseTask",
    "run_external_tasks",
]
