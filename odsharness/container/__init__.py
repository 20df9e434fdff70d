"""Container package."""

from odsharness.container.base import (
    Binding,
    ContainerError,
    Module,
    RegistrationError,
    ResolutionError,
)
from odsharness.container.builder import Container, ContainerBuilder

__all__ = [
    "Binding",
    "Container",
    "ContainerBuilder",
    "ContainerError",
    "Module",
    "RegistrationError",
    "ResolutionError",
]
