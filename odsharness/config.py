"""Configuration loading from harness.yaml with env var interpolation."""

from __future__ import annotations

import os
import re
from pathlib import Path

import yaml
from pydantic import BaseModel, Field


def _interpolate_env(value: str) -> str:
    """Replace ${ENV_VAR} patterns with environment variable values."""
    return re.sub(
        r"\$\{(\w+)\}",
        lambda m: os.environ.get(m.group(1), m.group(0)),
        value,
    )


def _walk_interpolate(obj):
    """Recursively interpolate env vars in a config dict."""
    if isinstance(obj, str):
        return _interpolate_env(obj)
    if isinstance(obj, dict):
        return {k: _walk_interpolate(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_walk_interpolate(v) for v in obj]
    return obj


class ServerConfig(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8765
    reload: bool = False


class DatabaseConfig(BaseModel):
    admin_url: str = "sqlite+aiosqlite:///harness_admin.db"
    security_url: str = "sqlite+aiosqlite:///harness_security.db"
    echo: bool = False


class LoggingConfig(BaseModel):
    level: str = "INFO"
    dir: str = "./logs"


class SecurityConfig(BaseModel):
    application_name: str = "Ed-Fi ODS API"


class DefaultApplicationConfig(BaseModel):
    name: str = "Default Sandbox Application"
    claim_set_name: str = "SIS Vendor"
    education_organization_ids: list[int] = Field(default_factory=list)


class ApiClientConfig(BaseModel):
    name: str
    key: str | None = None
    secret: str | None = None
    approved: bool = True
    use_sandbox: bool = False
    education_organization_ids: list[int] = Field(default_factory=list)


class ApplicationConfig(BaseModel):
    name: str
    claim_set_name: str = "SIS Vendor"
    operational_context_uri: str = "uri://ed-fi.org"
    clients: list[ApiClientConfig] = Field(default_factory=list)


class VendorConfig(BaseModel):
    name: str
    email: str = ""
    namespace_prefixes: list[str] = Field(default_factory=list)
    applications: list[ApplicationConfig] = Field(default_factory=list)


class HarnessConfig(BaseModel):
    server: ServerConfig = Field(default_factory=ServerConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    security: SecurityConfig = Field(default_factory=SecurityConfig)
    default_application: DefaultApplicationConfig = Field(
        default_factory=DefaultApplicationConfig
    )
    vendors: list[VendorConfig] = Field(default_factory=list)

    def claim_set_names(self) -> list[str]:
        """Claim sets referenced by seeded applications, first-seen order."""
        names = [self.default_application.claim_set_name]
        for vendor in self.vendors:
            for app in vendor.applications:
                names.append(app.claim_set_name)
        return list(dict.fromkeys(names))


def load_config(path: str | Path = "harness.yaml") -> HarnessConfig:
    """Load config from YAML file with env var interpolation."""
    path = Path(path)
    if path.exists():
        with open(path) as f:
            raw = yaml.safe_load(f) or {}
        raw = _walk_interpolate(raw)
    else:
        raw = {}
    return HarnessConfig(**raw)
