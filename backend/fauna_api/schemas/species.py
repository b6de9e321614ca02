"""
Fauna API: Species Schemas
=============================

What:  Request and response models for /api/species.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from fauna_api.schemas.common import ObjectIdStr, Point


class SpeciesCreate(BaseModel):
    """Body of POST /api/species. Omitted fields are not stored."""
    species_name: Optional[str] = Field(default=None, description="Species name")
    image: Optional[str] = Field(default=None, description="Image URL")
    category: Optional[str] = Field(default=None, description="Category ObjectId (24 hex chars)")
    location: Optional[Point] = Field(default=None, description="Habitat location")


class SpeciesUpdate(BaseModel):
    """Body of PATCH /api/species/{id}; empty fields are left unchanged."""
    species_name: Optional[str] = None
    image: Optional[str] = None
    category: Optional[str] = None
    location: Optional[Point] = None


class SpeciesResponse(BaseModel):
    """Stored species document."""
    model_config = ConfigDict(populate_by_name=True)

    id: ObjectIdStr = Field(alias="_id", description="Store-assigned ObjectId")
    species_name: Optional[str] = None
    image: Optional[str] = None
    category: Optional[ObjectIdStr] = Field(default=None, description="Category ObjectId")
    location: Optional[Point] = None
