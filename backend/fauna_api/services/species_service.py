"""
Fauna API: Species Service
=============================

What:  List / get / create / update / delete for the `species` collection.
Who:   Called by the /api/species route handlers.

Reference handling:
    `category` is stored as an ObjectId so the animal pipeline's
    $lookup into `categories` can match it. The client sends it as a
    24-hex string; a malformed value is rejected with 400 on create, update
    and in the `category_id` list filter.
"""

import logging
from typing import Any, Dict, List

from pymongo.asynchronous.database import AsyncDatabase

from fauna_api.database import SPECIES
from fauna_api.exceptions import ValidationError
from fauna_api.schemas.common import ActionResponse
from fauna_api.schemas.query import ListParams, SpeciesFilter
from fauna_api.schemas.species import SpeciesCreate, SpeciesResponse, SpeciesUpdate
from fauna_api.services.base import DocumentService, optional_reference
from fauna_api.services.query_builder import name_filters, parse_object_id

logger = logging.getLogger(__name__)

DEFAULT_SORT_FIELD = "species_name"
INVALID_CATEGORY = "Invalid category ID"


class SpeciesService(DocumentService):
    collection = SPECIES
    resource = "Species"

    async def list_species(
        self,
        db: AsyncDatabase,
        filters: SpeciesFilter,
        params: ListParams,
    ) -> List[SpeciesResponse]:
        """
        Species filtered by name substring and/or exact category id.

        Raises:
            ValidationError: category_id is not a valid ObjectId (→ 400)
        """
        query: Dict[str, Any] = name_filters([("species_name", filters.species_name)])
        if filters.category_id:
            query["category"] = parse_object_id(
                filters.category_id,
                message="Invalid category ID format",
                field="category_id",
            )
        if params.limit == 0:
            return []
        docs = await self._find(
            db,
            query,
            sort=params.sort_spec(DEFAULT_SORT_FIELD),
            skip=params.skip,
            limit=params.limit,
        )
        return [SpeciesResponse.model_validate(doc) for doc in docs]

    async def get_species(self, db: AsyncDatabase, species_id: str) -> SpeciesResponse:
        doc = await self._get_document(db, species_id)
        return SpeciesResponse.model_validate(doc)

    async def create_species(self, db: AsyncDatabase, payload: SpeciesCreate) -> SpeciesResponse:
        doc = payload.model_dump(exclude_none=True)
        category = optional_reference(payload.category, INVALID_CATEGORY, "category")
        if category is None:
            doc.pop("category", None)
        else:
            doc["category"] = category
        stored = await self._insert(db, doc)
        return SpeciesResponse.model_validate(stored)

    async def update_species(
        self,
        db: AsyncDatabase,
        species_id: str,
        payload: SpeciesUpdate,
    ) -> ActionResponse:
        """
        Set only the supplied, non-empty fields.

        location is applied only when it is a complete point (type plus two
        coordinates); an incomplete point is ignored.
        """
        oid = parse_object_id(species_id)
        fields: Dict[str, Any] = {}
        if payload.species_name:
            fields["species_name"] = payload.species_name
        if payload.image:
            fields["image"] = payload.image
        if payload.location is not None and payload.location.is_complete():
            fields["location"] = payload.location.model_dump()
        category = optional_reference(payload.category, INVALID_CATEGORY, "category")
        if category is not None:
            fields["category"] = category
        if not fields:
            raise ValidationError(message="No fields to update")
        logger.debug("Species %s update fields: %s", species_id, fields)
        await self._set_fields(db, oid, fields)
        return ActionResponse(message="Species updated successfully")


species_service = SpeciesService()
