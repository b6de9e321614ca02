"""
Fauna API: Animal Schemas
============================

What:  Request and response models for /api/animals.

Two response shapes exist:
    AnimalResponse  The stored document (species as an ObjectId string),
                    returned by POST.
    AnimalView      The joined projection produced by the aggregation
                    pipeline (species and category as names), returned by
                    the list and detail endpoints.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from fauna_api.schemas.common import ObjectIdStr, Point


class AnimalCreate(BaseModel):
    """Body of POST /api/animals. Omitted fields are not stored."""
    animal_name: Optional[str] = Field(default=None, description="Animal name")
    birthdate: Optional[datetime] = Field(default=None, description="Birth date (ISO 8601)")
    species: Optional[str] = Field(default=None, description="Species ObjectId (24 hex chars)")
    location: Optional[Point] = Field(default=None, description="Last known location")


class AnimalUpdate(BaseModel):
    """
    Body of PATCH /api/animals/{id}.

    Only fields that are present and non-empty are written; location is
    written only when it is a complete point.
    """
    animal_name: Optional[str] = None
    birthdate: Optional[datetime] = None
    species: Optional[str] = None
    location: Optional[Point] = None


class AnimalResponse(BaseModel):
    """Stored animal document, as echoed after creation."""
    model_config = ConfigDict(populate_by_name=True)

    id: ObjectIdStr = Field(alias="_id", description="Store-assigned ObjectId")
    animal_name: Optional[str] = None
    birthdate: Optional[datetime] = None
    species: Optional[ObjectIdStr] = Field(default=None, description="Species ObjectId")
    location: Optional[Point] = None


class AnimalView(BaseModel):
    """Animal flattened with its species and category names."""
    model_config = ConfigDict(populate_by_name=True)

    id: ObjectIdStr = Field(alias="_id", description="Animal ObjectId")
    animal_name: Optional[str] = None
    birthdate: Optional[datetime] = None
    species: Optional[str] = Field(default=None, description="Species name (absent when unresolved)")
    category: Optional[str] = Field(default=None, description="Category name (absent when unresolved)")
    location: Optional[Point] = None
