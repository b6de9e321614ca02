"""
Fauna API: Query and Pipeline Builders
=========================================

What:  Pure functions that turn parsed request input into MongoDB documents:
       ObjectId parsing, case-insensitive substring filters, and the animal
       aggregation pipeline.
Who:   Used by the resource services; unit-tested without a database.

Animal pipeline (list):

    animals
      │ $lookup species      (species → _id)              as species_info
      │ $unwind species_info (preserveNullAndEmptyArrays)
      │ $lookup categories   (species_info.category → _id) as category_info
      │ $unwind category_info (preserveNullAndEmptyArrays)
      │ $match               name / species / category filters
      │ $project             _id, animal_name, birthdate, species, category, location
      │ $sort → $skip → $limit
      ▼

    The detail pipeline puts `$match {_id}` first and stops after $project.
    Both unwinds preserve animals whose references resolve to nothing, so
    they still appear with `species` / `category` absent.
"""

import re
from typing import Any, Dict, List, Optional, Tuple

from bson import ObjectId

from fauna_api.database import CATEGORIES, SPECIES
from fauna_api.exceptions import ValidationError

Stage = Dict[str, Any]


def parse_object_id(value: Optional[str], message: str = "Invalid ID format", field: str = "id") -> ObjectId:
    """
    Parse a 24-hex-character identifier.

    Raises:
        ValidationError: value is missing, the wrong length, or not hex.
    """
    if not isinstance(value, str) or not ObjectId.is_valid(value):
        raise ValidationError(message=message, field=field, context={"value": value})
    return ObjectId(value)


def contains(text: str) -> Dict[str, str]:
    """Case-insensitive substring match; the text is matched literally."""
    return {"$regex": re.escape(text), "$options": "i"}


def name_filters(pairs: List[Tuple[str, Optional[str]]]) -> Dict[str, Any]:
    """Build a filter from (document path, user text) pairs, skipping blanks."""
    return {path: contains(text) for path, text in pairs if text}


# ── Animal Pipeline ───────────────────────────────────────────────────────

def animal_join_stages() -> List[Stage]:
    """Left-join species, then category through the species document."""
    return [
        {
            "$lookup": {
                "from": SPECIES,
                "localField": "species",
                "foreignField": "_id",
                "as": "species_info",
            }
        },
        {"$unwind": {"path": "$species_info", "preserveNullAndEmptyArrays": True}},
        {
            "$lookup": {
                "from": CATEGORIES,
                "localField": "species_info.category",
                "foreignField": "_id",
                "as": "category_info",
            }
        },
        {"$unwind": {"path": "$category_info", "preserveNullAndEmptyArrays": True}},
    ]


def animal_projection() -> Stage:
    return {
        "$project": {
            "_id": 1,
            "animal_name": 1,
            "birthdate": 1,
            "species": "$species_info.species_name",
            "category": "$category_info.category_name",
            "location": 1,
        }
    }


def build_animal_list_pipeline(
    match: Dict[str, Any],
    sort: List[Tuple[str, int]],
    skip: int,
    limit: int,
) -> List[Stage]:
    """
    Joined, filtered, projected and paginated animal listing.

    Sorting runs after the projection so `sort_by=species` / `sort_by=category`
    order by the joined names. Pagination runs last.
    """
    pipeline = animal_join_stages()
    pipeline.append({"$match": match})
    pipeline.append(animal_projection())
    pipeline.append({"$sort": dict(sort)})
    pipeline.append({"$skip": skip})
    pipeline.append({"$limit": limit})
    return pipeline


def build_animal_detail_pipeline(animal_id: ObjectId) -> List[Stage]:
    """Single animal by id with the same join and projection as the list."""
    return [{"$match": {"_id": animal_id}}, *animal_join_stages(), animal_projection()]
