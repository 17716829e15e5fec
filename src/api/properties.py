# SPDX-FileCopyrightText: 2026 Andrew Grimberg <tykeal@bardicgrove.org>
# SPDX-License-Identifier: Apache-2.0
"""Property catalogue API endpoints: properties, seasons and tax bands."""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.config import get_settings
from src.database import get_db
from src.errors import (
    PropertyNotFoundError,
    SeasonNotFoundError,
    TaxBandNotFoundError,
)
from src.models.property import Property
from src.models.season import Season
from src.models.tourist_tax_band import TouristTaxBand
from src.repositories.property_repository import PropertyRepository
from src.schemas import (
    MonthDayRange,
    PropertyCreate,
    PropertyUpdate,
    SeasonCreate,
    TaxBandCreate,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/properties", tags=["Properties"])


class PropertyResponse(BaseModel):
    """Response model for a property."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(description="Property ID")
    name: str = Field(description="Property name")
    slug: str = Field(description="URL slug")
    currency: str = Field(description="ISO currency code")
    default_nightly_rate: Decimal = Field(description="Rate outside any season")
    cleaning_fee: Decimal = Field(description="Fee charged once per stay")
    max_guests: int = Field(description="Maximum number of guests")
    check_in_hour: int = Field(description="Check-in hour (local time)")
    check_out_hour: int = Field(description="Check-out hour (local time)")
    address: dict[str, Any] | None = Field(default=None, description="Postal address")
    description: str | None = Field(default=None, description="Free text")


class SeasonResponse(BaseModel):
    """Response model for a season."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(description="Season ID")
    property_id: int = Field(description="Property ID")
    name: str = Field(description="Season name")
    start_date: str = Field(description="First night (YYYY-MM-DD)")
    end_date: str = Field(description="Day after the last night (YYYY-MM-DD)")
    nightly_rate: Decimal = Field(description="Nightly rate")
    min_nights: int | None = Field(default=None, description="Minimum stay")
    created_at: datetime | None = Field(default=None, description="Creation time")


class TaxBandResponse(BaseModel):
    """Response model for a tourist-tax band."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(description="Band ID")
    property_id: int = Field(description="Property ID")
    zone: str = Field(description="Tax zone")
    label: str = Field(description="Band label")
    currency: str = Field(description="ISO currency code")
    rate: Decimal = Field(description="Tax per adult and night")
    ranges: list[MonthDayRange] = Field(description="Recurring MM-DD windows")


async def _require_property(repo: PropertyRepository, property_id: int) -> Property:
    prop = await repo.get_by_id(property_id)
    if prop is None:
        raise PropertyNotFoundError(f"Property {property_id} not found")
    return prop


@router.post("", response_model=PropertyResponse, status_code=status.HTTP_201_CREATED)
async def create_property(
    body: PropertyCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Property:
    """Create a property.

    Raises:
        HTTPException: 409 if the slug is already taken.
    """
    repo = PropertyRepository(db)
    try:
        prop = await repo.create(
            Property(
                name=body.name,
                slug=body.slug,
                currency=body.currency or get_settings().default_currency,
                default_nightly_rate=body.default_nightly_rate,
                cleaning_fee=body.cleaning_fee,
                max_guests=body.max_guests,
                check_in_hour=body.check_in_hour,
                check_out_hour=body.check_out_hour,
                address=body.address.model_dump(),
                description=body.description or None,
            )
        )
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Slug '{body.slug}' is already in use",
        ) from e

    logger.info("Created property %s (%s)", prop.id, prop.slug)
    return prop


@router.get("/{property_id}", response_model=PropertyResponse)
async def get_property(
    property_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Property:
    """Get a property by ID."""
    return await _require_property(PropertyRepository(db), property_id)


@router.get("/{property_id}/seasons", response_model=list[SeasonResponse])
async def list_seasons(
    property_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> list[Season]:
    """List a property's seasons ordered by start date."""
    repo = PropertyRepository(db)
    await _require_property(repo, property_id)
    return list(await repo.list_seasons(property_id))


@router.post(
    "/{property_id}/seasons",
    response_model=SeasonResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_season(
    property_id: int,
    body: SeasonCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Season:
    """Add a season to a property."""
    repo = PropertyRepository(db)
    await _require_property(repo, property_id)
    season = await repo.add_season(
        Season(
            property_id=property_id,
            name=body.name,
            start_date=body.start_date,
            end_date=body.end_date,
            nightly_rate=body.nightly_rate,
            min_nights=body.min_nights,
        )
    )
    await db.commit()
    logger.info(
        "Added season %s to property %s: %s..%s",
        season.id,
        property_id,
        season.start_date,
        season.end_date,
    )
    return season


@router.get("/{property_id}/tax-bands", response_model=list[TaxBandResponse])
async def list_tax_bands(
    property_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> list[TouristTaxBand]:
    """List a property's tourist-tax bands ordered by zone."""
    repo = PropertyRepository(db)
    await _require_property(repo, property_id)
    return list(await repo.list_tax_bands(property_id))


@router.post(
    "/{property_id}/tax-bands",
    response_model=TaxBandResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_tax_band(
    property_id: int,
    body: TaxBandCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TouristTaxBand:
    """Add a tourist-tax band to a property."""
    repo = PropertyRepository(db)
    prop = await _require_property(repo, property_id)
    band = await repo.add_tax_band(
        TouristTaxBand(
            property_id=property_id,
            zone=body.zone,
            label=body.label,
            currency=body.currency or prop.currency,
            rate=body.rate,
            ranges=[r.model_dump() for r in body.ranges],
        )
    )
    await db.commit()
    logger.info("Added tax band %s (%s) to property %s", band.id, band.label, property_id)
    return band


@router.put("/{property_id}", response_model=PropertyResponse)
async def update_property(
    property_id: int,
    body: PropertyUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Property:
    """Update a property; omitted fields keep their value.

    Rates changed here apply to future quotes only. Stored booking
    summaries are never recalculated.

    Raises:
        HTTPException: 409 if the new slug is already taken.
    """
    repo = PropertyRepository(db)
    prop = await _require_property(repo, property_id)

    changes = body.model_dump(exclude_unset=True, exclude_none=True)
    if "address" in changes:
        changes["address"] = body.address.model_dump() if body.address else None
    for field, value in changes.items():
        setattr(prop, field, value)

    try:
        await repo.update(prop)
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Slug '{body.slug}' is already in use",
        ) from e

    logger.info("Updated property %s (%s)", property_id, ", ".join(sorted(changes)))
    return prop


async def _require_season(
    repo: PropertyRepository, property_id: int, season_id: int
) -> Season:
    season = await repo.get_season(property_id, season_id)
    if season is None:
        raise SeasonNotFoundError(
            f"Season {season_id} not found for property {property_id}"
        )
    return season


@router.put("/{property_id}/seasons/{season_id}", response_model=SeasonResponse)
async def update_season(
    property_id: int,
    season_id: int,
    body: SeasonCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Season:
    """Replace a season's name, dates, rate and minimum stay."""
    repo = PropertyRepository(db)
    season = await _require_season(repo, property_id, season_id)
    season.name = body.name
    season.start_date = body.start_date
    season.end_date = body.end_date
    season.nightly_rate = body.nightly_rate
    season.min_nights = body.min_nights
    await repo.update(season)
    await db.commit()
    logger.info(
        "Updated season %s of property %s: %s..%s",
        season_id,
        property_id,
        season.start_date,
        season.end_date,
    )
    return season


@router.delete(
    "/{property_id}/seasons/{season_id}", status_code=status.HTTP_204_NO_CONTENT
)
async def delete_season(
    property_id: int,
    season_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> None:
    """Delete a season."""
    repo = PropertyRepository(db)
    season = await _require_season(repo, property_id, season_id)
    await repo.delete(season)
    await db.commit()
    logger.info("Deleted season %s of property %s", season_id, property_id)


async def _require_tax_band(
    repo: PropertyRepository, property_id: int, band_id: int
) -> TouristTaxBand:
    band = await repo.get_tax_band(property_id, band_id)
    if band is None:
        raise TaxBandNotFoundError(
            f"Tax band {band_id} not found for property {property_id}"
        )
    return band


@router.put("/{property_id}/tax-bands/{band_id}", response_model=TaxBandResponse)
async def update_tax_band(
    property_id: int,
    band_id: int,
    body: TaxBandCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TouristTaxBand:
    """Replace a tourist-tax band's zone, label, rate and windows."""
    repo = PropertyRepository(db)
    band = await _require_tax_band(repo, property_id, band_id)
    band.zone = body.zone
    band.label = body.label
    if body.currency:
        band.currency = body.currency
    band.rate = body.rate
    band.ranges = [r.model_dump() for r in body.ranges]
    await repo.update(band)
    await db.commit()
    logger.info(
        "Updated tax band %s (%s) of property %s", band_id, band.label, property_id
    )
    return band


@router.delete(
    "/{property_id}/tax-bands/{band_id}", status_code=status.HTTP_204_NO_CONTENT
)
async def delete_tax_band(
    property_id: int,
    band_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> None:
    """Delete a tourist-tax band."""
    repo = PropertyRepository(db)
    band = await _require_tax_band(repo, property_id, band_id)
    await repo.delete(band)
    await db.commit()
    logger.info("Deleted tax band %s of property %s", band_id, property_id)
