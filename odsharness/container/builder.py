"""Container builder and the container it produces."""

from __future__ import annotations

import inspect
import logging
from typing import Any, Generic, TypeVar

from odsharness.container.base import Binding, Module, RegistrationError, ResolutionError

logger = logging.getLogger(__name__)

T = TypeVar("T")
C = TypeVar("C")


class ContainerBuilder:
    """Accumulates bindings from modules before the container is built.

    Usage::

        builder = ContainerBuilder()
        builder.register_module(UpdateAdminDatabaseModule())
        container = builder.build(context)
        tasks = container.resolve_all(ExternalTask)
    """

    def __init__(self) -> None:
        self._bindings: list[Binding] = []

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register(
        self,
        implementation: type,
        as_: type,
        singleton: bool = False,
    ) -> Binding:
        """Bind *implementation* to the capability *as_*.

        Bindings are kept in registration order.  Registering the same
        pair again is allowed; the container sees both.
        """
        if not inspect.isclass(implementation) or not inspect.isclass(as_):
            raise RegistrationError(
                f"Cannot register {implementation!r} as {as_!r}: both must be classes"
            )
        if inspect.isabstract(implementation):
            raise RegistrationError(
                f"{implementation.__name__} is abstract and cannot be instantiated"
            )
        if not issubclass(implementation, as_):
            raise RegistrationError(
                f"{implementation.__name__} does not implement {as_.__name__}"
            )

        binding = Binding(capability=as_, implementation=implementation, singleton=singleton)
        if binding in self._bindings:
            logger.info(
                "Duplicate binding %s -> %s, keeping both",
                as_.__name__,
                implementation.__name__,
            )
        self._bindings.append(binding)
        logger.debug("Registered %s as %s", implementation.__name__, as_.__name__)
        return binding

    def register_module(self, module: Module) -> None:
        module.load(self)

    @property
    def bindings(self) -> tuple[Binding, ...]:
        return tuple(self._bindings)

    def build(self, context: C) -> Container[C]:
        return Container(self._bindings, context)


class Container(Generic[C]):
    """Resolves capabilities to instances built from their bindings.

    Every implementation is constructed as ``implementation(context)``.
    When a capability has several bindings, :meth:`resolve` returns the
    last one registered and :meth:`resolve_all` returns them all in
    registration order.
    """

    def __init__(self, bindings: list[Binding], context: C) -> None:
        self._bindings: tuple[Binding, ...] = tuple(bindings)
        self._context = context
        # Keyed by position so duplicate singleton bindings stay distinct
        self._singletons: dict[int, Any] = {}

    @property
    def context(self) -> C:
        return self._context

    def _positions_for(self, capability: type) -> list[int]:
        return [i for i, b in enumerate(self._bindings) if b.capability is capability]

    def _instantiate(self, position: int) -> Any:
        if position in self._singletons:
            return self._singletons[position]
        binding = self._bindings[position]
        instance = binding.implementation(self._context)
        if binding.singleton:
            self._singletons[position] = instance
        return instance

    def resolve(self, capability: type[T]) -> T:
        positions = self._positions_for(capability)
        if not positions:
            raise ResolutionError(capability)
        return self._instantiate(positions[-1])

    def resolve_all(self, capability: type[T]) -> list[T]:
        return [self._instantiate(i) for i in self._positions_for(capability)]

    def is_registered(self, capability: type) -> bool:
        return any(b.capability is capability for b in self._bindings)

    def capabilities(self) -> list[type]:
        """Return the bound capabilities, first-registered order."""
        return list(dict.fromkeys(b.capability for b in self._bindings))

    @property
    def bindings(self) -> tuple[Binding, ...]:
        return self._bindings
