"""
Fauna API: Shared Pydantic Schemas
=====================================

What:  Types shared by all three resources: the ObjectId string type, the
       GeoJSON-like Point, and the generic success/error/health bodies.

Identifier rendering:
    Documents come back from the driver with bson.ObjectId values in `_id`
    and in reference fields. ObjectIdStr converts those to their 24-hex
    string form on validation, so response models can be built straight
    from driver documents.
"""

from typing import Annotated, Any, List

from bson import ObjectId
from pydantic import BaseModel, BeforeValidator, Field


def _stringify_object_id(value: Any) -> Any:
    if isinstance(value, ObjectId):
        return str(value)
    return value


ObjectIdStr = Annotated[str, BeforeValidator(_stringify_object_id)]


class Point(BaseModel):
    """
    GeoJSON-like point: {"type": "Point", "coordinates": [lng, lat]}.

    Only the shape check used by updates (is_complete) is applied; creation
    stores whatever the client sent.
    """
    type: str = Field(default="", description="Geometry type, normally 'Point'")
    coordinates: List[float] = Field(
        default_factory=list,
        description="Ordered coordinate pair",
    )

    def is_complete(self) -> bool:
        """True when the point has a type and exactly two coordinates."""
        return bool(self.type) and len(self.coordinates) == 2


class ActionResponse(BaseModel):
    """
    Acknowledgment returned by PATCH and DELETE.

    Example:
        {"success": "true", "message": "Species updated successfully"}
    """
    success: str = Field(default="true", description="Always the string 'true'")
    message: str = Field(description="Human-readable outcome")


class ErrorResponse(BaseModel):
    """
    Error body for every non-2xx response.

    Example:
        {"error": "Invalid ID format"}
    """
    error: str = Field(description="Human-readable error description")


class HealthResponse(BaseModel):
    """Health check response showing service and store status."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Store connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
