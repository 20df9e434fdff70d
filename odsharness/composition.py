"""Composition root: turns container bindings into typed service slots."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from odsharness.admin.base import ApplicationCreator
from odsharness.container.base import Binding, Module
from odsharness.container.builder import ContainerBuilder
from odsharness.context import HarnessContext
from odsharness.modules import DEFAULT_MODULES
from odsharness.tasks.base import ExternalTask

logger = logging.getLogger(__name__)


@dataclass
class HarnessServices:
    """Everything the harness needs, resolved once at startup."""

    external_tasks: list[ExternalTask]
    application_creator: ApplicationCreator
    bindings: tuple[Binding, ...] = field(default_factory=tuple)


def compose(
    context: HarnessContext,
    modules: Iterable[Module] | None = None,
) -> HarnessServices:
    """Load *modules* (the defaults when omitted) and fill each service slot.

    Raises :class:`~odsharness.container.ResolutionError` if no module
    provides an :class:`ApplicationCreator`.
    """
    if modules is None:
        modules = [module_cls() for module_cls in DEFAULT_MODULES]

    builder = ContainerBuilder()
    for module in modules:
        builder.register_module(module)
    container = builder.build(context)

    services = HarnessServices(
        external_tasks=container.resolve_all(ExternalTask),
        application_creator=container.resolve(ApplicationCreator),
        bindings=container.bindings,
    )
    logger.info(
        "Composed harness: %d binding(s), %d external task(s)",
        len(services.bindings), len(services.external_tasks),
    )
    return services
