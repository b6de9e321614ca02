"""
Fauna API: Animal Route Handlers
===================================

What:  /api/animals list, detail, create, update and delete.
How:   Extracts path/query/body input, delegates to AnimalService, returns JSON.
       Identifier parsing, not-found and store errors are raised by the
       service and turned into responses by the global exception handlers.

Endpoints:
    GET    /api/animals        animal_name, species_name, category_name,
                               sort_by, sort_order, limit, skip
    GET    /api/animals/{id}
    POST   /api/animals        → 201
    PATCH  /api/animals/{id}
    DELETE /api/animals/{id}
"""

from typing import List

from fastapi import APIRouter, Depends
from pymongo.asynchronous.database import AsyncDatabase

from fauna_api.database import get_database
from fauna_api.schemas.animal import AnimalCreate, AnimalResponse, AnimalUpdate, AnimalView
from fauna_api.schemas.common import ActionResponse, ErrorResponse
from fauna_api.schemas.query import AnimalFilter, ListParams, animal_filter, list_params
from fauna_api.services.animal_service import animal_service

router = APIRouter(prefix="/api/animals", tags=["Animals"])

ERRORS = {
    400: {"description": "Malformed identifier or input", "model": ErrorResponse},
    500: {"description": "Server error", "model": ErrorResponse},
}


@router.get(
    "",
    response_model=List[AnimalView],
    response_model_exclude_none=True,
    responses=ERRORS,
    summary="List animals with species and category names",
    description=(
        "Returns animals joined with their species and category names. "
        "Name filters are case-insensitive substring matches; results are "
        "sorted (default: animal_name ascending), then skipped and limited."
    ),
)
async def list_animals(
    filters: AnimalFilter = Depends(animal_filter),
    params: ListParams = Depends(list_params),
    db: AsyncDatabase = Depends(get_database),
) -> List[AnimalView]:
    return await animal_service.list_animals(db, filters, params)


@router.get(
    "/{animal_id}",
    response_model=AnimalView,
    response_model_exclude_none=True,
    responses={**ERRORS, 404: {"description": "Animal not found", "model": ErrorResponse}},
    summary="Get an animal by ID",
)
async def get_animal(
    animal_id: str,
    db: AsyncDatabase = Depends(get_database),
) -> AnimalView:
    return await animal_service.get_animal(db, animal_id)


@router.post(
    "",
    status_code=201,
    response_model=AnimalResponse,
    response_model_exclude_none=True,
    responses=ERRORS,
    summary="Create an animal",
    description="Stores the animal as sent and returns it with its new _id.",
)
async def create_animal(
    payload: AnimalCreate,
    db: AsyncDatabase = Depends(get_database),
) -> AnimalResponse:
    return await animal_service.create_animal(db, payload)


@router.patch(
    "/{animal_id}",
    response_model=ActionResponse,
    responses={**ERRORS, 404: {"description": "Animal not found", "model": ErrorResponse}},
    summary="Update an animal",
    description="Writes only the fields present and non-empty in the body.",
)
async def update_animal(
    animal_id: str,
    payload: AnimalUpdate,
    db: AsyncDatabase = Depends(get_database),
) -> ActionResponse:
    return await animal_service.update_animal(db, animal_id, payload)


@router.delete(
    "/{animal_id}",
    response_model=ActionResponse,
    responses=ERRORS,
    summary="Delete an animal",
    description="Deletes the animal if it exists; unknown IDs also report success.",
)
async def delete_animal(
    animal_id: str,
    db: AsyncDatabase = Depends(get_database),
) -> ActionResponse:
    return await animal_service.delete(db, animal_id)
