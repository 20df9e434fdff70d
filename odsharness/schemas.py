from __future__ import annotations

from pydantic import BaseModel, Field


class BindingOut(BaseModel):
    capability: str
    implementation: str
    singleton: bool = False


class HealthResponse(BaseModel):
    status: str
    completed_tasks: list[str] = Field(default_factory=list)
    bindings: list[BindingOut] = Field(default_factory=list)


class ApiClientOut(BaseModel):
    vendor: str
    application: str
    claim_set_name: str
    name: str
    key: str
    secret: str
    is_approved: bool
    use_sandbox: bool
    education_organization_ids: list[int] = Field(default_factory=list)


class ApplicationOut(BaseModel):
    id: int
    name: str
    claim_set_name: str
    vendor_id: int
    education_organization_ids: list[int] = Field(default_factory=list)
