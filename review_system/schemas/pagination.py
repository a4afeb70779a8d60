from typing import Generic, TypeVar

from review_system.schemas.common import CamelModel

T = TypeVar("T")


class PaginationMeta(CamelModel):
    """Pagination metadata (page is 0-based)"""
    page: int
    size: int
    total_elements: int
    total_pages: int
    has_more: bool

    @classmethod
    def build(cls, *, page: int, size: int, total: int) -> "PaginationMeta":
        total_pages = (total + size - 1) // size if size else 1
        return cls(
            page=page,
            size=size,
            total_elements=total,
            total_pages=total_pages,
            has_more=(page + 1) * size < total,
        )


class PaginatedResponse(CamelModel, Generic[T]):
    """Generic paginated response wrapper"""
    items: list[T]
    pagination: PaginationMeta
