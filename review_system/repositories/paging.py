from dataclasses import dataclass

from sqlalchemy.orm import Query

from review_system.core.errors import ValidationFailure


@dataclass(frozen=True)
class PageRequest:
    page: int = 0
    size: int = 10
    sort_by: str = "name"
    sort_dir: str = "asc"

    @property
    def offset(self) -> int:
        return self.page * self.size


def paginate(query: Query, request: PageRequest, sortable: dict) -> tuple[list, int]:
    """
    Apply sorting and offset/limit to `query`.

    `sortable` maps the public sort key (camelCase) to a column. Returns the
    page of rows and the total row count before paging.
    """
    column = sortable.get(request.sort_by)
    if column is None:
        raise ValidationFailure(
            f"Cannot sort by '{request.sort_by}'. Allowed: {sorted(sortable)}"
        )
    order = column.desc() if request.sort_dir.lower() == "desc" else column.asc()

    # Get total count before pagination
    total = query.order_by(None).count()

    rows = query.order_by(order).offset(request.offset).limit(request.size).all()
    return rows, total
