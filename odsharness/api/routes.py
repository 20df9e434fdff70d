"""Harness API routes: health, seeded credentials and default applications."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy import select
from sqlalchemy.orm import selectinload

from odsharness.api.deps import get_context, get_services
from odsharness.composition import HarnessServices
from odsharness.context import HarnessContext
from odsharness.db.models import ApiClient, Application
from odsharness.schemas import ApiClientOut, ApplicationOut, BindingOut, HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["harness"])


@router.get("/health", response_model=HealthResponse)
async def health(request: Request, services: HarnessServices = Depends(get_services)):
    completed = getattr(request.app.state, "completed_tasks", [])
    expected = [task.name for task in services.external_tasks]
    return HealthResponse(
        status="ok" if completed == expected else "degraded",
        completed_tasks=completed,
        bindings=[BindingOut(**b.describe()) for b in services.bindings],
    )


@router.get("/clients", response_model=list[ApiClientOut])
async def list_clients(context: HarnessContext = Depends(get_context)):
    """List API client credentials seeded into the admin database."""
    async with context.databases.admin_session() as session:
        result = await session.execute(
            select(ApiClient)
            .options(
                selectinload(ApiClient.application).selectinload(Application.vendor),
                selectinload(ApiClient.education_organizations),
            )
            .order_by(ApiClient.id)
        )
        clients = result.scalars().all()
        return [
            ApiClientOut(
                vendor=c.application.vendor.name,
                application=c.application.name,
                claim_set_name=c.application.claim_set_name,
                name=c.name,
                key=c.key,
                secret=c.secret,
                is_approved=c.is_approved,
                use_sandbox=c.use_sandbox,
                education_organization_ids=sorted(
                    eo.education_organization_id for eo in c.education_organizations
                ),
            )
            for c in clients
        ]


@router.post("/vendors/{vendor_id}/default-application", response_model=ApplicationOut)
async def create_default_application(
    vendor_id: int,
    services: HarnessServices = Depends(get_services),
):
    try:
        application = await services.application_creator.find_or_create_default_application(
            vendor_id
        )
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return ApplicationOut(
        id=application.id,
        name=application.name,
        claim_set_name=application.claim_set_name,
        vendor_id=application.vendor_id,
        education_organization_ids=sorted(
            eo.education_organization_id for eo in application.education_organizations
        ),
    )
