"""
Fauna API: Animal Service
============================

What:  List / get / create / update / delete for the `animals` collection,
       with species and category names joined in on reads.
Who:   Called by the /api/animals route handlers.

Read path:
    Both list and detail go through the aggregation pipelines built in
    query_builder (left joins via $lookup + $unwind with
    preserveNullAndEmptyArrays). An animal whose species reference is
    missing or dangling is still returned, with `species` and `category`
    absent.

Write path:
    `species` is stored as an ObjectId; the client sends a 24-hex string.
"""

from typing import Any, Dict, List

from pymongo.asynchronous.database import AsyncDatabase

from fauna_api.database import ANIMALS
from fauna_api.exceptions import NotFoundError, ValidationError
from fauna_api.schemas.animal import AnimalCreate, AnimalResponse, AnimalUpdate, AnimalView
from fauna_api.schemas.common import ActionResponse
from fauna_api.schemas.query import AnimalFilter, ListParams
from fauna_api.services.base import DocumentService, optional_reference
from fauna_api.services.query_builder import (
    build_animal_detail_pipeline,
    build_animal_list_pipeline,
    name_filters,
    parse_object_id,
)

DEFAULT_SORT_FIELD = "animal_name"
INVALID_SPECIES = "Invalid species ID"


class AnimalService(DocumentService):
    """
    Business logic for animals.

    Responsibilities:
        - list_animals(): joined listing with name filters, sort, skip, limit
        - get_animal():   joined single record, 404 when absent
        - create_animal() / update_animal(): reference parsing and $set building
        - delete():       inherited, idempotent
    """

    collection = ANIMALS
    resource = "Animal"

    async def list_animals(
        self,
        db: AsyncDatabase,
        filters: AnimalFilter,
        params: ListParams,
    ) -> List[AnimalView]:
        """
        Joined animal listing.

        Filters apply to the animal name and to the joined species and
        category names (paths species_info.species_name and
        category_info.category_name before projection). Sort, skip and limit
        run after filtering, so `limit=0` is answered with an empty list
        without touching the store.
        """
        if params.limit == 0:
            return []
        match = name_filters(
            [
                ("animal_name", filters.animal_name),
                ("species_info.species_name", filters.species_name),
                ("category_info.category_name", filters.category_name),
            ]
        )
        pipeline = build_animal_list_pipeline(
            match,
            sort=params.sort_spec(DEFAULT_SORT_FIELD),
            skip=params.skip,
            limit=params.limit,
        )
        docs = await self._aggregate(db, pipeline)
        return [AnimalView.model_validate(doc) for doc in docs]

    async def get_animal(self, db: AsyncDatabase, animal_id: str) -> AnimalView:
        """
        Raises:
            ValidationError: animal_id is not a valid ObjectId (→ 400)
            NotFoundError:   no animal has that id (→ 404)
        """
        oid = parse_object_id(animal_id)
        docs = await self._aggregate(db, build_animal_detail_pipeline(oid))
        if not docs:
            raise NotFoundError(resource=self.resource, resource_id=animal_id)
        return AnimalView.model_validate(docs[0])

    async def create_animal(self, db: AsyncDatabase, payload: AnimalCreate) -> AnimalResponse:
        doc = payload.model_dump(exclude_none=True)
        species = optional_reference(payload.species, INVALID_SPECIES, "species")
        if species is None:
            doc.pop("species", None)
        else:
            doc["species"] = species
        stored = await self._insert(db, doc)
        return AnimalResponse.model_validate(stored)

    async def update_animal(
        self,
        db: AsyncDatabase,
        animal_id: str,
        payload: AnimalUpdate,
    ) -> ActionResponse:
        """Set only the supplied, non-empty fields (see SpeciesService.update_species)."""
        oid = parse_object_id(animal_id)
        fields: Dict[str, Any] = {}
        if payload.animal_name:
            fields["animal_name"] = payload.animal_name
        if payload.birthdate is not None:
            fields["birthdate"] = payload.birthdate
        if payload.location is not None and payload.location.is_complete():
            fields["location"] = payload.location.model_dump()
        species = optional_reference(payload.species, INVALID_SPECIES, "species")
        if species is not None:
            fields["species"] = species
        if not fields:
            raise ValidationError(message="No fields to update")
        await self._set_fields(db, oid, fields)
        return ActionResponse(message="Animal updated successfully")


animal_service = AnimalService()
