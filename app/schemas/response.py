from pydantic import BaseModel, Field
from typing import Generic, TypeVar, Optional, Any

from app.schemas.base import CamelModel

DataType = TypeVar("DataType")

class APIResponse(BaseModel, Generic[DataType]):
    """Generic API response model for consistent output."""
    success: bool = Field(True, description="Always true for successful responses.")
    message: Optional[str] = Field(None, description="A human-readable message about the response.")
    data: Optional[DataType] = Field(None, description="The actual data returned by the API, if any.")

class ErrorResponse(CamelModel):
    """Standardized error response model."""
    success: bool = Field(False, description="Always false for error responses")
    message: str = Field(..., description="Human-readable error message")
    code: str = Field(..., description="Error code for client handling")
    errors: Optional[Any] = Field(None, description="Field-level validation errors, if any")
    timestamp: str = Field(..., description="ISO 8601 timestamp of error")
    path: str = Field(..., description="Request path that caused the error")
    request_id: Optional[str] = Field(None, description="Unique request identifier for debugging")

class Pagination(CamelModel):
    current_page: int
    total_pages: int
    total_items: int
    items_per_page: int

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        return cls(
            current_page=page,
            total_pages=(total + limit - 1) // limit if limit else 0,
            total_items=total,
            items_per_page=limit,
        )
