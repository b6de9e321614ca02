"""
Fauna API: Category Schemas
==============================
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from fauna_api.schemas.common import ObjectIdStr


class CategoryCreate(BaseModel):
    """Body of POST /api/categories."""
    category_name: Optional[str] = Field(default=None, description="Category name")


class CategoryUpdate(BaseModel):
    """Body of PATCH /api/categories/{id}."""
    category_name: Optional[str] = None


class CategoryResponse(BaseModel):
    """Stored category document."""
    model_config = ConfigDict(populate_by_name=True)

    id: ObjectIdStr = Field(alias="_id", description="Store-assigned ObjectId")
    category_name: Optional[str] = None
