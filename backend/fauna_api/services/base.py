"""
Fauna API: Document Service Base Class
=========================================

What:  Shared store plumbing for the three resource services.
How:   Subclasses set `collection` and `resource`; the helpers here run each
       driver call under the request deadline, translate driver failures into
       DatabaseError, and translate "nothing matched" into NotFoundError.
Who:   AnimalService, SpeciesService, CategoryService.

Error Handling Strategy:
    pymongo.errors.PyMongoError → logged with the request ID and operation
    context, re-raised as DatabaseError (→ 500, generic message). Application
    exceptions (ValidationError, NotFoundError) propagate unchanged.

Design Decision:
    Services are stateless. The database handle is passed into every call by
    the route (which receives it from Depends(get_database)), so one module-
    level instance per service is shared by all requests.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from bson import ObjectId
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import PyMongoError

from fauna_api.database import operation_deadline
from fauna_api.exceptions import DatabaseError, NotFoundError
from fauna_api.middleware.request_id import request_id_var
from fauna_api.schemas.common import ActionResponse
from fauna_api.services.query_builder import parse_object_id

logger = logging.getLogger(__name__)


class DocumentService:
    """
    Base class for single-collection CRUD services.

    Attributes:
        collection: Collection name inside the configured database.
        resource:   Display name used in messages ("Species", "Category").
    """

    collection: str = ""
    resource: str = "Resource"

    # ── Error Translation ─────────────────────────────────────────────────

    def _store_failure(self, action: str, exc: PyMongoError, **context: Any) -> DatabaseError:
        rid = request_id_var.get("")
        logger.error(
            "[%s] %s %s failed: %s (%s)",
            rid,
            action,
            self.collection,
            str(exc),
            type(exc).__name__,
        )
        context.update({"collection": self.collection, "action": action, "error_type": type(exc).__name__})
        return DatabaseError(
            message=f"Could not {action} {self.resource.lower()} data. Please try again.",
            context=context,
        )

    # ── Reads ─────────────────────────────────────────────────────────────

    async def _find(
        self,
        db: AsyncDatabase,
        query: Dict[str, Any],
        sort: List[Tuple[str, int]],
        skip: int,
        limit: int,
    ) -> List[Dict[str, Any]]:
        """Filtered, sorted, paginated find. `limit` must be positive."""
        try:
            with operation_deadline():
                cursor = db[self.collection].find(query, sort=sort, skip=skip, limit=limit)
                return await cursor.to_list()
        except PyMongoError as e:
            raise self._store_failure("list", e, query=str(query)) from e

    async def _aggregate(self, db: AsyncDatabase, pipeline: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        try:
            with operation_deadline():
                cursor = await db[self.collection].aggregate(pipeline)
                return await cursor.to_list()
        except PyMongoError as e:
            raise self._store_failure("aggregate", e, stages=len(pipeline)) from e

    async def _get_document(self, db: AsyncDatabase, raw_id: str) -> Dict[str, Any]:
        """
        Point lookup by identifier.

        Raises:
            ValidationError: raw_id is not a valid ObjectId (→ 400)
            NotFoundError:   no document has that id (→ 404)
            DatabaseError:   the store call failed (→ 500)
        """
        oid = parse_object_id(raw_id)
        try:
            with operation_deadline():
                doc = await db[self.collection].find_one({"_id": oid})
        except PyMongoError as e:
            raise self._store_failure("retrieve", e, resource_id=raw_id) from e
        if doc is None:
            raise NotFoundError(resource=self.resource, resource_id=raw_id)
        return doc

    # ── Writes ────────────────────────────────────────────────────────────

    async def _insert(self, db: AsyncDatabase, doc: Dict[str, Any]) -> Dict[str, Any]:
        """Insert and return the document with its store-assigned `_id`."""
        try:
            with operation_deadline():
                result = await db[self.collection].insert_one(doc)
        except PyMongoError as e:
            raise self._store_failure("create", e) from e
        stored = {**doc, "_id": result.inserted_id}
        logger.info("Created %s %s", self.resource.lower(), result.inserted_id)
        return stored

    async def _set_fields(self, db: AsyncDatabase, oid: ObjectId, fields: Dict[str, Any]) -> None:
        """
        Apply a `$set` of the given fields to one document.

        Raises:
            NotFoundError: no document matched the id (→ 404)
        """
        try:
            with operation_deadline():
                result = await db[self.collection].update_one({"_id": oid}, {"$set": fields})
        except PyMongoError as e:
            raise self._store_failure("update", e, resource_id=str(oid)) from e
        if result.matched_count == 0:
            raise NotFoundError(resource=self.resource, resource_id=str(oid))
        logger.info(
            "Updated %s %s: fields=%s modified=%d",
            self.resource.lower(),
            oid,
            sorted(fields),
            result.modified_count,
        )

    async def delete(self, db: AsyncDatabase, raw_id: str) -> ActionResponse:
        """
        Delete at most one document by identifier.

        A missing document is not an error: deleting an unknown id reports
        success. References held by other collections are left untouched.
        """
        oid = parse_object_id(raw_id)
        try:
            with operation_deadline():
                result = await db[self.collection].delete_one({"_id": oid})
        except PyMongoError as e:
            raise self._store_failure("delete", e, resource_id=raw_id) from e
        logger.info("Deleted %s %s (deleted_count=%d)", self.resource.lower(), oid, result.deleted_count)
        return ActionResponse(message=f"{self.resource} deleted successfully")


def optional_reference(value: Optional[str], message: str, field: str) -> Optional[ObjectId]:
    """Parse a reference field that may be absent or empty."""
    if not value:
        return None
    return parse_object_id(value, message=message, field=field)
