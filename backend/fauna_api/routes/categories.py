"""
Fauna API: Category Route Handlers
=====================================

Endpoints:
    GET    /api/categories        category_name, sort_by, sort_order, limit, skip
    GET    /api/categories/{id}
    POST   /api/categories        → 201
    PATCH  /api/categories/{id}
    DELETE /api/categories/{id}
"""

from typing import List

from fastapi import APIRouter, Depends
from pymongo.asynchronous.database import AsyncDatabase

from fauna_api.database import get_database
from fauna_api.schemas.category import CategoryCreate, CategoryResponse, CategoryUpdate
from fauna_api.schemas.common import ActionResponse, ErrorResponse
from fauna_api.schemas.query import CategoryFilter, ListParams, category_filter, list_params
from fauna_api.services.category_service import category_service

router = APIRouter(prefix="/api/categories", tags=["Categories"])

ERRORS = {
    400: {"description": "Malformed identifier or input", "model": ErrorResponse},
    500: {"description": "Server error", "model": ErrorResponse},
}
NOT_FOUND = {404: {"description": "Category not found", "model": ErrorResponse}}


@router.get(
    "",
    response_model=List[CategoryResponse],
    response_model_exclude_none=True,
    responses=ERRORS,
    summary="List categories",
)
async def list_categories(
    filters: CategoryFilter = Depends(category_filter),
    params: ListParams = Depends(list_params),
    db: AsyncDatabase = Depends(get_database),
) -> List[CategoryResponse]:
    return await category_service.list_categories(db, filters, params)


@router.get(
    "/{category_id}",
    response_model=CategoryResponse,
    response_model_exclude_none=True,
    responses={**ERRORS, **NOT_FOUND},
    summary="Get a category by ID",
)
async def get_category(
    category_id: str,
    db: AsyncDatabase = Depends(get_database),
) -> CategoryResponse:
    return await category_service.get_category(db, category_id)


@router.post(
    "",
    status_code=201,
    response_model=CategoryResponse,
    response_model_exclude_none=True,
    responses=ERRORS,
    summary="Create a category",
)
async def create_category(
    payload: CategoryCreate,
    db: AsyncDatabase = Depends(get_database),
) -> CategoryResponse:
    return await category_service.create_category(db, payload)


@router.patch(
    "/{category_id}",
    response_model=ActionResponse,
    responses={**ERRORS, **NOT_FOUND},
    summary="Rename a category",
)
async def update_category(
    category_id: str,
    payload: CategoryUpdate,
    db: AsyncDatabase = Depends(get_database),
) -> ActionResponse:
    return await category_service.update_category(db, category_id, payload)


@router.delete(
    "/{category_id}",
    response_model=ActionResponse,
    responses=ERRORS,
    summary="Delete a category",
    description="Species that reference the category are left unchanged.",
)
async def delete_category(
    category_id: str,
    db: AsyncDatabase = Depends(get_database),
) -> ActionResponse:
    return await category_service.delete(db, category_id)
