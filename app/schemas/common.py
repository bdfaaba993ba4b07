from typing import Optional, List, Generic, TypeVar
from pydantic import BaseModel

T = TypeVar("T")


# Paginated response wrapper — used by admin list endpoints
class PaginatedResponse(BaseModel, Generic[T]):
    data: List[T]
    total: int
    page: int
    limit: int
    total_pages: int


# Error body produced by the exception handlers
class ErrorResponse(BaseModel):
    error: str
    details: Optional[list] = None


class MessageResponse(BaseModel):
    message: str
