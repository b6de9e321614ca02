"""
Fauna API: Species Route Handlers
====================================

Endpoints:
    GET    /api/species        species_name, category_id, sort_by, sort_order, limit, skip
    GET    /api/species/{id}
    POST   /api/species        → 201
    PATCH  /api/species/{id}
    DELETE /api/species/{id}
"""

from typing import List

from fastapi import APIRouter, Depends
from pymongo.asynchronous.database import AsyncDatabase

from fauna_api.database import get_database
from fauna_api.schemas.common import ActionResponse, ErrorResponse
from fauna_api.schemas.query import ListParams, SpeciesFilter, list_params, species_filter
from fauna_api.schemas.species import SpeciesCreate, SpeciesResponse, SpeciesUpdate
from fauna_api.services.species_service import species_service

router = APIRouter(prefix="/api/species", tags=["Species"])

ERRORS = {
    400: {"description": "Malformed identifier or input", "model": ErrorResponse},
    500: {"description": "Server error", "model": ErrorResponse},
}
NOT_FOUND = {404: {"description": "Species not found", "model": ErrorResponse}}


@router.get(
    "",
    response_model=List[SpeciesResponse],
    response_model_exclude_none=True,
    responses=ERRORS,
    summary="List species",
    description="Filter by name substring and/or category ID; sorted, then paginated.",
)
async def list_species(
    filters: SpeciesFilter = Depends(species_filter),
    params: ListParams = Depends(list_params),
    db: AsyncDatabase = Depends(get_database),
) -> List[SpeciesResponse]:
    return await species_service.list_species(db, filters, params)


@router.get(
    "/{species_id}",
    response_model=SpeciesResponse,
    response_model_exclude_none=True,
    responses={**ERRORS, **NOT_FOUND},
    summary="Get a species by ID",
)
async def get_species(
    species_id: str,
    db: AsyncDatabase = Depends(get_database),
) -> SpeciesResponse:
    return await species_service.get_species(db, species_id)


@router.post(
    "",
    status_code=201,
    response_model=SpeciesResponse,
    response_model_exclude_none=True,
    responses=ERRORS,
    summary="Create a species",
)
async def create_species(
    payload: SpeciesCreate,
    db: AsyncDatabase = Depends(get_database),
) -> SpeciesResponse:
    return await species_service.create_species(db, payload)


@router.patch(
    "/{species_id}",
    response_model=ActionResponse,
    responses={**ERRORS, **NOT_FOUND},
    summary="Update a species",
)
async def update_species(
    species_id: str,
    payload: SpeciesUpdate,
    db: AsyncDatabase = Depends(get_database),
) -> ActionResponse:
    return await species_service.update_species(db, species_id, payload)


@router.delete(
    "/{species_id}",
    response_model=ActionResponse,
    responses=ERRORS,
    summary="Delete a species",
)
async def delete_species(
    species_id: str,
    db: AsyncDatabase = Depends(get_database),
) -> ActionResponse:
    return await species_service.delete(db, species_id)
