"""
AssetVault Backend — Asset Store & Asset Service
==================================================

What:  `AssetStore` is the narrow persistence contract for assets;
       `AssetService` orchestrates validate → build → store → respond.
Why:   Routes stay thin, and the service never touches SQL. The store is the
       only code that knows assets live in SQLAlchemy rows.
How:   Both are constructed per request around the request's AsyncSession
       (see assetvault.dependencies). Neither holds state between requests.

Store contract:
    find_all()                        → list of Asset
    find_by_id(id)                    → Asset            | NotFoundError
    insert(asset)                     → Asset            | StoreError
    update_by_id(id, update_document) → Asset            | NotFoundError | StoreError
    delete_by_id(id)                  → None             | NotFoundError | StoreError

Orchestration Flow (PATCH /api/v1/assets/{id}):
    ┌──────────┐    ┌─────────────┐    ┌──────────────┐    ┌──────────┐
    │  Route   │───▶│  Validate   │───▶│   Flatten    │───▶│  Store   │
    │  (JSON)  │    │ (AssetUpdate)│   │ (update doc) │    │ (set)    │
    └──────────┘    └─────────────┘    └──────────────┘    └──────────┘

    A validation failure raises before the store is called, so an invalid
    body never causes a partial write.
"""

import logging
import time
import uuid
from typing import Any, List, Mapping

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from assetvault.exceptions import NotFoundError, StoreError
from assetvault.models.asset import Asset, AssetCategory, AssetType
from assetvault.schemas.asset import AssetResponse
from assetvault.services.update_document import PATH_SEPARATOR, apply_update
from assetvault.services.validation import (
    build_update_document,
    validate_asset_create,
    validate_asset_update,
)

logger = logging.getLogger(__name__)

# Columns whose values must be converted back from document form
_ENUM_FIELDS = {"type": AssetType, "category": AssetCategory}


def now_millis() -> int:
    return int(time.time() * 1000)


class AssetStore:
    """
    Async SQLAlchemy implementation of the asset persistence contract.

    Error Handling Strategy:
        NotFoundError propagates as-is. Any SQLAlchemyError is logged with
        full detail and re-raised as StoreError, which hides driver internals
        from the client.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def find_all(self) -> List[Asset]:
        try:
            result = await self.session.execute(
                select(Asset).order_by(Asset.added_at, Asset.id)
            )
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error listing assets: %s", str(e), exc_info=True)
            raise StoreError(
                message="Could not retrieve assets. Please try again.",
                context={"error_type": type(e).__name__},
            ) from e

    async def find_by_id(self, asset_id: str) -> Asset:
        try:
            result = await self.session.execute(select(Asset).where(Asset.id == asset_id))
            asset = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error fetching asset %s: %s", asset_id, str(e))
            raise StoreError(
                message="Could not retrieve the asset. Please try again.",
                context={"asset_id": asset_id, "error_type": type(e).__name__},
            ) from e

        if asset is None:
            raise NotFoundError(resource="asset", resource_id=asset_id)
        return asset

    async def insert(self, asset: Asset) -> Asset:
        try:
            self.session.add(asset)
            await self.session.flush()
        except SQLAlchemyError as e:
            logger.error("Database error inserting asset %s: %s", asset.id, str(e))
            raise StoreError(
                message="Could not save the asset. Please try again.",
                context={"asset_id": asset.id, "error_type": type(e).__name__},
            ) from e
        logger.info("Asset %s inserted", asset.id)
        return asset

    async def update_by_id(self, asset_id: str, update: Mapping[str, Any]) -> Asset:
        """
        Apply a flat dot-path update document to one asset.

        Each path's first segment must name a mutable field. Deeper paths are
        merged into that field's current value; absent fields are untouched.
        The whole document is checked before anything is assigned.
        """
        unknown = sorted(
            {path.split(PATH_SEPARATOR, 1)[0] for path in update} - set(Asset.MUTABLE_FIELDS)
        )
        if unknown:
            raise StoreError(
                message="Update document names fields that cannot be set",
                context={"fields": unknown},
            )

        asset = await self.find_by_id(asset_id)
        merged = apply_update(asset.to_document(), update)

        touched = {path.split(PATH_SEPARATOR, 1)[0] for path in update}
        try:
            for field in touched:
                value = merged[field]
                if field in _ENUM_FIELDS:
                    value = _ENUM_FIELDS[field](value)
                setattr(asset, Asset.MUTABLE_FIELDS[field], value)
            await self.session.flush()
        except ValueError as e:
            raise StoreError(
                message="Update document holds an invalid value",
                context={"asset_id": asset_id, "error": str(e)},
            ) from e
        except SQLAlchemyError as e:
            logger.error("Database error updating asset %s: %s", asset_id, str(e))
            raise StoreError(
                message="Could not update the asset. Please try again.",
                context={"asset_id": asset_id, "error_type": type(e).__name__},
            ) from e

        logger.info("Asset %s updated: %s", asset_id, ", ".join(sorted(update)))
        return asset

    async def delete_by_id(self, asset_id: str) -> None:
        try:
            result = await self.session.execute(delete(Asset).where(Asset.id == asset_id))
        except SQLAlchemyError as e:
            logger.error("Database error deleting asset %s: %s", asset_id, str(e))
            raise StoreError(
                message="Could not delete the asset. Please try again.",
                context={"asset_id": asset_id, "error_type": type(e).__name__},
            ) from e

        if result.rowcount == 0:
            raise NotFoundError(resource="asset", resource_id=asset_id)
        logger.info("Asset %s deleted", asset_id)


class AssetService:
    """
    Business logic for the asset routes.

    Responsibilities:
        - list_assets() / get_asset(): read and shape responses
        - create_asset(): validate, assign id + addedAt, insert
        - update_asset(): validate, flatten, update, re-read
        - delete_asset(): delete by id
    """

    def __init__(self, store: AssetStore):
        self.store = store

    async def list_assets(self) -> List[AssetResponse]:
        assets = await self.store.find_all()
        return [AssetResponse.model_validate(a.to_document()) for a in assets]

    async def get_asset(self, asset_id: str) -> AssetResponse:
        asset = await self.store.find_by_id(asset_id)
        return AssetResponse.model_validate(asset.to_document())

    async def create_asset(self, payload: Any) -> AssetResponse:
        """
        Validate a POST body and persist a new asset.

        Raises:
            ValidationError: body violates the asset schema (store not called)
            StoreError: insert failed
        """
        data = validate_asset_create(payload)

        asset = Asset(
            id=str(uuid.uuid4()),
            title=data.title,
            description=data.description,
            images=[image.model_dump(exclude_none=True) for image in data.images],
            type=data.type,
            tags=[tag.model_dump() for tag in data.tags],
            category=data.category,
            added_at=now_millis(),
        )
        await self.store.insert(asset)
        return AssetResponse.model_validate(asset.to_document())

    async def update_asset(self, asset_id: str, payload: Any) -> AssetResponse:
        """
        Validate a PATCH body and set exactly the fields it names.

        Raises:
            ValidationError: body violates the asset schema (store not called)
            NotFoundError: no asset with this id
            StoreError: update failed
        """
        update = validate_asset_update(payload)
        document = build_update_document(update)

        await self.store.update_by_id(asset_id, document)
        asset = await self.store.find_by_id(asset_id)
        return AssetResponse.model_validate(asset.to_document())

    async def delete_asset(self, asset_id: str) -> None:
        await self.store.delete_by_id(asset_id)
