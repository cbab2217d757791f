from storeit.backend.query import Equal, Contains, Or, Limit, OrderAsc, OrderDesc, ORDERINGS
from storeit.files.queries import create_queries, parse_sort

USER = {"$id": "u1", "email": "ada@example.com"}

def test_default_queries_scope_to_owner_or_shared():
    qs = create_queries(USER)
    assert qs == [
        Or((Equal("owner", ["u1"]), Contains("users", ["ada@example.com"]))),
        OrderDesc("$createdAt"),
    ]

def test_all_filters_in_order():
    qs = create_queries(USER, ["video", "audio"], "trip", "size-asc", 10)
    assert qs[1:] == [
        Equal("type", ["video", "audio"]),
        Contains("name", ["trip"]),
        Limit(10),
        OrderAsc("size"),
    ]

def test_sort_tokens():
    assert parse_sort("size-asc") == OrderAsc("size")
    assert parse_sort("$createdAt-desc") == OrderDesc("$createdAt")
    assert parse_sort("name-desc") == OrderDesc("name")
    # empty token falls back to the default, a missing direction sorts descending
    assert parse_sort("") == OrderDesc("$createdAt")
    assert parse_sort("name") == OrderDesc("name")

def test_unknown_sort_field_is_forwarded():
    assert create_queries(USER, sort="colour-asc")[-1] == OrderAsc("colour")

def test_construction_is_idempotent_with_one_ordering():
    a = create_queries(USER, ["document"], "rep", "name-asc")
    b = create_queries(USER, ["document"], "rep", "name-asc")
    assert a == b
    assert sum(isinstance(q, ORDERINGS) for q in a) == 1
