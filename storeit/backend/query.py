"""
Backend-neutral query predicates.

The action layer builds lists of these; each backend either compiles them to
its own query syntax (Appwrite) or evaluates them directly (local backend).
"""
from dataclasses import dataclass, field
from typing import Any, List, Sequence


@dataclass(frozen=True)
class Query:
    def attributes(self) -> List[str]:
        return []


@dataclass(frozen=True)
class Equal(Query):
    attribute: str
    values: Sequence[Any]

    def attributes(self):
        return [self.attribute]


@dataclass(frozen=True)
class Contains(Query):
    attribute: str
    values: Sequence[Any]

    def attributes(self):
        return [self.attribute]


@dataclass(frozen=True)
class Or(Query):
    queries: Sequence[Query] = field(default_factory=tuple)

    def attributes(self):
        return [a for q in self.queries for a in q.attributes()]


@dataclass(frozen=True)
class Limit(Query):
    value: int


@dataclass(frozen=True)
class OrderAsc(Query):
    attribute: str

    def attributes(self):
        return [self.attribute]


@dataclass(frozen=True)
class OrderDesc(Query):
    attribute: str

    def attributes(self):
        return [self.attribute]


ORDERINGS = (OrderAsc, OrderDesc)
