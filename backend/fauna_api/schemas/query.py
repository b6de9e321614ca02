"""
Fauna API: List Query Parameters
===================================

What:  Typed models for the filter/sort/pagination query string of the list
       endpoints, plus the FastAPI dependencies that build them.
How:   Each list route declares `params: ListParams = Depends(list_params)`
       and one resource filter dependency. FastAPI validates the raw values
       (integers, non-negative pagination) before the handler runs; a bad
       value is answered with 400 by the global handler in main.py.

Query string (all optional):
    sort_by     Field to sort on (default: the resource's name field)
    sort_order  "desc" for descending; only applies together with sort_by
    limit       Maximum number of records (default 10, 0 returns nothing)
    skip        Number of records to skip (default 0)
"""

from typing import List, Optional, Tuple

from fastapi import Query
from pydantic import BaseModel, Field
from pymongo import ASCENDING, DESCENDING

DEFAULT_LIMIT = 10
DEFAULT_SKIP = 0


class ListParams(BaseModel):
    """Sorting and pagination shared by every list endpoint."""
    sort_by: Optional[str] = Field(default=None)
    sort_order: Optional[str] = Field(default=None)
    limit: int = Field(default=DEFAULT_LIMIT, ge=0)
    skip: int = Field(default=DEFAULT_SKIP, ge=0)

    @property
    def descending(self) -> bool:
        return (self.sort_order or "").strip().lower() == "desc"

    def sort_spec(self, default_field: str) -> List[Tuple[str, int]]:
        """
        Single-key sort specification in pymongo's (field, direction) form.

        sort_order only applies to an explicit sort_by; the default field is
        always ascending.
        """
        field = (self.sort_by or "").strip()
        if not field:
            return [(default_field, ASCENDING)]
        return [(field, DESCENDING if self.descending else ASCENDING)]


class AnimalFilter(BaseModel):
    """Substring filters for GET /api/animals (joined names included)."""
    animal_name: Optional[str] = None
    species_name: Optional[str] = None
    category_name: Optional[str] = None


class SpeciesFilter(BaseModel):
    """Filters for GET /api/species; category_id is parsed by the service."""
    species_name: Optional[str] = None
    category_id: Optional[str] = None


class CategoryFilter(BaseModel):
    """Filters for GET /api/categories."""
    category_name: Optional[str] = None


# ── FastAPI Dependencies ──────────────────────────────────────────────────

def list_params(
    sort_by: Optional[str] = Query(default=None, description="Field to sort on"),
    sort_order: Optional[str] = Query(
        default=None, description="'desc' for descending when sort_by is given"
    ),
    limit: int = Query(default=DEFAULT_LIMIT, ge=0, description="Maximum records to return"),
    skip: int = Query(default=DEFAULT_SKIP, ge=0, description="Records to skip"),
) -> ListParams:
    return ListParams(sort_by=sort_by, sort_order=sort_order, limit=limit, skip=skip)


def animal_filter(
    animal_name: Optional[str] = Query(default=None, description="Animal name contains (case-insensitive)"),
    species_name: Optional[str] = Query(default=None, description="Species name contains (case-insensitive)"),
    category_name: Optional[str] = Query(default=None, description="Category name contains (case-insensitive)"),
) -> AnimalFilter:
    return AnimalFilter(
        animal_name=animal_name,
        species_name=species_name,
        category_name=category_name,
    )


def species_filter(
    species_name: Optional[str] = Query(default=None, description="Species name contains (case-insensitive)"),
    category_id: Optional[str] = Query(default=None, description="Exact category ObjectId"),
) -> SpeciesFilter:
    return SpeciesFilter(species_name=species_name, category_id=category_id)


def category_filter(
    category_name: Optional[str] = Query(default=None, description="Category name contains (case-insensitive)"),
) -> CategoryFilter:
    return CategoryFilter(category_name=category_name)
