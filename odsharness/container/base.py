"""Container primitives: bindings, modules and container errors."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from odsharness.container.builder import ContainerBuilder


class ContainerError(Exception):
    """Base class for registration and resolution failures."""


class RegistrationError(ContainerError):
    """Raised when a binding cannot be recorded."""


class ResolutionError(ContainerError):
    """Raised when a capability has no binding to resolve."""

    def __init__(self, capability: type) -> None:
        self.capability = capability
        super().__init__(f"No implementation registered for {capability.__name__}")


@dataclass(frozen=True)
class Binding:
    """A capability bound to the class that implements it."""

    capability: type
    implementation: type
    singleton: bool = False

    def describe(self) -> dict[str, Any]:
        return {
            "capability": self.capability.__name__,
            "implementation": self.implementation.__name__,
            "singleton": self.singleton,
        }


class Module(ABC):
    """A group of registrations loaded into a builder at startup.

    Modules only declare bindings. They must not read the environment,
    touch the network or the filesystem, or branch on anything: loading
    the same module into two fresh builders yields the same bindings.
    """

    @abstractmethod
    def load(self, builder: ContainerBuilder) -> None:
        """Register this module's bindings with *builder*."""
