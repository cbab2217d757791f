from typing import List, Optional, Sequence

from storeit.backend.query import Query, Equal, Contains, Or, Limit, OrderAsc, OrderDesc
from storeit.constants import DEFAULT_SORT


def parse_sort(sort: Optional[str]) -> Query:
    """'size-asc' -> OrderAsc('size'); anything but '-asc' sorts descending."""
    parts = (sort or DEFAULT_SORT).split("-")
    sort_by = parts[0]
    order_by = parts[1] if len(parts) > 1 else ""
    return OrderAsc(sort_by) if order_by == "asc" else OrderDesc(sort_by)


def create_queries(
    current_user: dict,
    types: Sequence[str] = (),
    search_text: str = "",
    sort: Optional[str] = DEFAULT_SORT,
    limit: Optional[int] = None,
) -> List[Query]:
    # owned by the user or shared with their email
    queries: List[Query] = [
        Or((
            Equal("owner", [current_user["$id"]]),
            Contains("users", [current_user["email"]]),
        )),
    ]
    if types:
        queries.append(Equal("type", list(types)))
    if search_text:
        queries.append(Contains("name", [search_text]))
    if limit:
        queries.append(Limit(limit))
    # field names are not checked here; the backend rejects unknown ones
    queries.append(parse_sort(sort))
    return queries
