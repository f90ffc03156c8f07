"""
AssetVault Backend — Asset Route Handlers
===========================================

What:  CRUD over /api/v1/assets.
Why:   The public surface of the asset catalogue.
How:   Every route sits behind the router-level `get_current_user`
       dependency, so a request without a valid bearer token is rejected
       with 401 before the handler (or the store) is touched. Bodies arrive
       as raw JSON and are validated by AssetService.
Who:   Called by authenticated API clients.

Failures are all 400 except auth (401); see assetvault.exceptions.
"""

import logging
from typing import Any, List

from fastapi import APIRouter, Body, Depends, status

from assetvault.dependencies import get_asset_service, get_current_user
from assetvault.schemas.asset import AssetResponse, DeleteResponse
from assetvault.schemas.common import ErrorResponse
from assetvault.services.asset_service import AssetService

logger = logging.getLogger(__name__)

# ── Router Configuration ──────────────────────────────────────────────────
router = APIRouter(
    prefix="/api/v1",
    tags=["Assets"],
    dependencies=[Depends(get_current_user)],
    responses={
        400: {"description": "Validation, lookup, or store failure", "model": ErrorResponse},
        401: {"description": "Missing or invalid bearer token", "model": ErrorResponse},
    },
)


@router.get(
    "/assets",
    response_model=List[AssetResponse],
    response_model_exclude_none=True,
    response_model_by_alias=True,
    summary="List all assets",
)
async def list_assets(
    asset_service: AssetService = Depends(get_asset_service),
) -> List[AssetResponse]:
    return await asset_service.list_assets()


@router.get(
    "/assets/{asset_id}",
    response_model=AssetResponse,
    response_model_exclude_none=True,
    response_model_by_alias=True,
    summary="Get one asset by id",
)
async def get_asset(
    asset_id: str,
    asset_service: AssetService = Depends(get_asset_service),
) -> AssetResponse:
    return await asset_service.get_asset(asset_id)


@router.post(
    "/assets",
    status_code=status.HTTP_201_CREATED,
    response_model=AssetResponse,
    response_model_exclude_none=True,
    response_model_by_alias=True,
    summary="Create an asset",
)
async def create_asset(
    payload: Any = Body(...),
    asset_service: AssetService = Depends(get_asset_service),
) -> AssetResponse:
    """
    Create an asset. `id` and `addedAt` are assigned by the server; any
    client-supplied values for them are ignored.
    """
    return await asset_service.create_asset(payload)


@router.patch(
    "/assets/{asset_id}",
    response_model=AssetResponse,
    response_model_exclude_none=True,
    response_model_by_alias=True,
    summary="Partially update an asset",
)
async def update_asset(
    asset_id: str,
    payload: Any = Body(...),
    asset_service: AssetService = Depends(get_asset_service),
) -> AssetResponse:
    """
    Set exactly the fields present in the body.

    Nested objects are applied as dot-path sets, so fields the body does not
    name keep their stored values. Arrays (`images`, `tags`) are replaced
    whole. `null` is rejected rather than treated as "unset".
    """
    return await asset_service.update_asset(asset_id, payload)


@router.delete(
    "/assets/{asset_id}",
    response_model=DeleteResponse,
    summary="Delete an asset",
)
async def delete_asset(
    asset_id: str,
    asset_service: AssetService = Depends(get_asset_service),
) -> DeleteResponse:
    await asset_service.delete_asset(asset_id)
    logger.info("Asset deleted: %s", asset_id)
    return DeleteResponse(id=asset_id)
