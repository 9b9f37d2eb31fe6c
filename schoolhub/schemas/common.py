import math
from typing import Generic, List, Optional, TypeVar
from pydantic import BaseModel

T = TypeVar("T")


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        return cls(page=page, limit=limit, total=total, pages=math.ceil(total / limit) if limit else 0)


class ApiResponse(BaseModel, Generic[T]):
    """Standard response envelope used by every endpoint."""
    success: bool = True
    message: Optional[str] = None
    data: Optional[T] = None


class PaginatedResponse(BaseModel, Generic[T]):
    success: bool = True
    message: Optional[str] = None
    data: List[T]
    pagination: Pagination


class MessageResponse(BaseModel):
    success: bool = True
    message: str


class UserSummary(BaseModel):
    """Compact user shape embedded in other responses."""
    id: int
    first_name: str
    last_name: str
    email: str

    class Config:
        from_attributes = True
