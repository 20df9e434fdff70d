"""Admin database services."""

from odsharness.admin.base import ApplicationCreator
from odsharness.admin.default_application import DefaultApplicationCreator

__all__ = ["ApplicationCreator", "DefaultApplicationCreator"]
