"""Database package."""

from odsharness.db.models import AdminBase, SecurityBase
from odsharness.db.session import Databases

__all__ = ["AdminBase", "Databases", "SecurityBase"]
