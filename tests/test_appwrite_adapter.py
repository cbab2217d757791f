import json

import pytest
from appwrite.exception import AppwriteException

from storeit.backend.appwrite_ import _translated, compile_query
from storeit.backend.query import Equal, Contains, Or, Limit, OrderAsc, OrderDesc
from storeit.shared.errors import BackendError


@pytest.mark.parametrize("query, method, attribute", [
    (Equal("owner", ["u1"]), "equal", "owner"),
    (Contains("name", ["rep"]), "contains", "name"),
    (OrderAsc("size"), "orderAsc", "size"),
    (OrderDesc("$createdAt"), "orderDesc", "$createdAt"),
])
def test_compile_query(query, method, attribute):
    compiled = json.loads(compile_query(query))
    assert compiled["method"] == method
    assert compiled["attribute"] == attribute

def test_compile_limit_and_or():
    assert json.loads(compile_query(Limit(10)))["values"] == [10]

    compiled = json.loads(compile_query(Or((Equal("owner", ["u1"]), Contains("users", ["a@b.c"])))))
    assert compiled["method"] == "or"
    assert [q["method"] for q in compiled["values"]] == ["equal", "contains"]

def test_compile_rejects_unknown():
    with pytest.raises(TypeError):
        compile_query("equal(owner)")

def test_appwrite_errors_become_backend_errors():
    with pytest.raises(BackendError) as exc:
        with _translated():
            raise AppwriteException("Invalid token", 401, "user_invalid_token")
    assert exc.value.status == 401
    assert exc.value.code == "user_invalid_token"
    assert exc.value.message == "Invalid token"
