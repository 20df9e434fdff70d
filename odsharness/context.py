"""Shared context handed to every container-built implementation."""

from __future__ import annotations

from dataclasses import dataclass

from odsharness.config import HarnessConfig
from odsharness.db.session import Databases


@dataclass(frozen=True)
class HarnessContext:
    config: HarnessConfig
    databases: Databases
