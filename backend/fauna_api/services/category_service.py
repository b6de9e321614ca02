"""
Fauna API: Category Service
==============================

What:  List / get / create / update / delete for the `categories` collection.
Who:   Called by the /api/categories route handlers.

Categories are the root of the reference chain (species.category points
here). Deleting a category does not touch the species that reference it.
"""

from typing import List

from pymongo.asynchronous.database import AsyncDatabase

from fauna_api.database import CATEGORIES
from fauna_api.exceptions import ValidationError
from fauna_api.schemas.category import CategoryCreate, CategoryResponse, CategoryUpdate
from fauna_api.schemas.common import ActionResponse
from fauna_api.schemas.query import CategoryFilter, ListParams
from fauna_api.services.base import DocumentService
from fauna_api.services.query_builder import name_filters, parse_object_id

DEFAULT_SORT_FIELD = "category_name"


class CategoryService(DocumentService):
    collection = CATEGORIES
    resource = "Category"

    async def list_categories(
        self,
        db: AsyncDatabase,
        filters: CategoryFilter,
        params: ListParams,
    ) -> List[CategoryResponse]:
        """Categories whose name contains `category_name`, sorted and paginated."""
        if params.limit == 0:
            return []
        query = name_filters([("category_name", filters.category_name)])
        docs = await self._find(
            db,
            query,
            sort=params.sort_spec(DEFAULT_SORT_FIELD),
            skip=params.skip,
            limit=params.limit,
        )
        return [CategoryResponse.model_validate(doc) for doc in docs]

    async def get_category(self, db: AsyncDatabase, category_id: str) -> CategoryResponse:
        doc = await self._get_document(db, category_id)
        return CategoryResponse.model_validate(doc)

    async def create_category(self, db: AsyncDatabase, payload: CategoryCreate) -> CategoryResponse:
        doc = payload.model_dump(exclude_none=True)
        stored = await self._insert(db, doc)
        return CategoryResponse.model_validate(stored)

    async def update_category(
        self,
        db: AsyncDatabase,
        category_id: str,
        payload: CategoryUpdate,
    ) -> ActionResponse:
        """Rename a category; an empty or missing name is rejected."""
        oid = parse_object_id(category_id)
        fields = {}
        if payload.category_name:
            fields["category_name"] = payload.category_name
        if not fields:
            raise ValidationError(message="No fields to update")
        await self._set_fields(db, oid, fields)
        return ActionResponse(message="Category updated successfully")


category_service = CategoryService()
