# SPDX-FileCopyrightText: 2026 Andrew Grimberg <tykeal@bardicgrove.org>
# SPDX-License-Identifier: Apache-2.0
"""Operator maintenance endpoints for inventory and holds."""

from typing import Annotated, Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from src.database import get_db
from src.errors import PropertyNotFoundError
from src.repositories.property_repository import PropertyRepository
from src.services.maintenance_service import MaintenanceService

router = APIRouter(
    prefix="/api/properties/{property_id}/maintenance", tags=["Maintenance"]
)


class RangeRequest(BaseModel):
    """Request model for range-limited maintenance."""

    start: str = Field(description="First night (YYYY-MM-DD)")
    end: str = Field(description="Day after the last night (YYYY-MM-DD)")


class HoldReleaseRequest(BaseModel):
    """Request model for releasing holds; no range releases all."""

    start: str | None = Field(default=None, description="First night")
    end: str | None = Field(default=None, description="Day after the last night")


class MaintenanceResponse(BaseModel):
    """Response model for maintenance actions."""

    property_id: int = Field(description="Property ID")
    action: str = Field(description="Performed action")
    count: int = Field(description="Rows affected or nights occupied")


async def get_maintenance_service(
    property_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> MaintenanceService:
    """FastAPI dependency for the maintenance service of an existing property."""
    if await PropertyRepository(db).get_by_id(property_id) is None:
        raise PropertyNotFoundError(f"Property {property_id} not found")
    return MaintenanceService(db)


ServiceDep = Annotated[MaintenanceService, Depends(get_maintenance_service)]


@router.post("/rebuild-inventory", response_model=MaintenanceResponse)
async def rebuild_inventory(property_id: int, service: ServiceDep) -> dict[str, Any]:
    """Recreate the inventory ledger from approved bookings."""
    count = await service.rebuild_inventory_from_approved(property_id)
    return {"property_id": property_id, "action": "rebuild-inventory", "count": count}


@router.post("/clear-inventory", response_model=MaintenanceResponse)
async def clear_inventory(
    property_id: int, body: RangeRequest, service: ServiceDep
) -> dict[str, Any]:
    """Delete all inventory rows in a range."""
    count = await service.clear_inventory_range(property_id, body.start, body.end)
    return {"property_id": property_id, "action": "clear-inventory", "count": count}


@router.post("/release-holds", response_model=MaintenanceResponse)
async def release_holds(
    property_id: int, body: HoldReleaseRequest, service: ServiceDep
) -> dict[str, Any]:
    """Release public holds, optionally limited to a range."""
    count = await service.release_holds(property_id, body.start, body.end)
    return {"property_id": property_id, "action": "release-holds", "count": count}
