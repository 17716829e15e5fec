# SPDX-FileCopyrightText: 2026 Andrew Grimberg <tykeal@bardicgrove.org>
# SPDX-License-Identifier: Apache-2.0
"""Repository for Property, Season and TouristTaxBand database operations."""

from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.models.property import Property
from src.models.season import Season
from src.models.tourist_tax_band import TouristTaxBand


class PropertyRepository:
    """Repository for the property catalogue.

    Seasons and tax bands are always returned in a deterministic order, which
    is the order the ``first`` match policy relies on.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: Async SQLAlchemy session.
        """
        self._session = session

    async def get_by_id(self, property_id: int) -> Property | None:
        """Get property by ID.

        Args:
            property_id: Property primary key.

        Returns:
            Property if found, None otherwise.
        """
        return await self._session.get(Property, property_id)

    async def create(self, prop: Property) -> Property:
        """Create a new property.

        Args:
            prop: Property entity to create.

        Returns:
            Created property with ID.
        """
        self._session.add(prop)
        await self._session.flush()
        await self._session.refresh(prop)
        return prop

    async def list_seasons(self, property_id: int) -> Sequence[Season]:
        """Get seasons for a property ordered by start date.

        Args:
            property_id: Property ID to filter by.

        Returns:
            Seasons ordered by ``(start_date, id)``.
        """
        result = await self._session.execute(
            select(Season)
            .where(Season.property_id == property_id)
            .order_by(Season.start_date, Season.id)
        )
        return result.scalars().all()

    async def get_season(self, property_id: int, season_id: int) -> Season | None:
        """Get a season of a property by ID."""
        season = await self._session.get(Season, season_id)
        if season is None or season.property_id != property_id:
            return None
        return season

    async def add_season(self, season: Season) -> Season:
        """Create a season."""
        self._session.add(season)
        await self._session.flush()
        await self._session.refresh(season)
        return season

    async def list_tax_bands(self, property_id: int) -> Sequence[TouristTaxBand]:
        """Get tourist-tax bands for a property ordered by zone.

        Args:
            property_id: Property ID to filter by.

        Returns:
            Bands ordered by ``(zone, id)``.
        """
        result = await self._session.execute(
            select(TouristTaxBand)
            .where(TouristTaxBand.property_id == property_id)
            .order_by(TouristTaxBand.zone, TouristTaxBand.id)
        )
        return result.scalars().all()

    async def get_tax_band(
        self, property_id: int, band_id: int
    ) -> TouristTaxBand | None:
        """Get a tourist-tax band of a property by ID."""
        band = await self._session.get(TouristTaxBand, band_id)
        if band is None or band.property_id != property_id:
            return None
        return band

    async def add_tax_band(self, band: TouristTaxBand) -> TouristTaxBand:
        """Create a tourist-tax band."""
        self._session.add(band)
        await self._session.flush()
        await self._session.refresh(band)
        return band

    async def update(self, entity: Property | Season | TouristTaxBand) -> None:
        """Write pending changes of a catalogue entity.

        Args:
            entity: Property, season or tax band with updates applied.
        """
        await self._session.flush()
        await self._session.refresh(entity)

    async def delete(self, entity: Season | TouristTaxBand) -> None:
        """Delete a season or tax band.

        Args:
            entity: Entity to delete.
        """
        await self._session.delete(entity)
        await self._session.flush()
