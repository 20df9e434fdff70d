"""FastAPI dependency helpers."""

from __future__ import annotations

from fastapi import Request

from odsharness.composition import HarnessServices
from odsharness.context import HarnessContext


def get_services(request: Request) -> HarnessServices:
    """Return the services composed during startup.

    Raises
    ------
    RuntimeError
        If the app lifespan has not run yet.
    """
    services = getattr(request.app.state, "services", None)
    if services is None:
        raise RuntimeError("Harness services not composed. Is the app lifespan running?")
    return services


def get_context(request: Request) -> HarnessContext:
    context = getattr(request.app.state, "context", None)
    if context is None:
        raise RuntimeError("Harness context not initialised. Is the app lifespan running?")
    return context
