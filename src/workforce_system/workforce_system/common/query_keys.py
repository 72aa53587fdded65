"""Query keys and mutation results.

A query key is a tuple whose first item names the feature root. Mutations
return the set of keys whose cached reads went stale, and callers decide
whether to refetch them eagerly or lazily.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, FrozenSet, Generic, Iterable, Tuple, TypeVar

QueryKey = Tuple[Any, ...]
T = TypeVar("T")


@dataclass(frozen=True)
class MutationResult(Generic[T]):
    data: T
    invalidates: FrozenSet[QueryKey] = field(default_factory=frozenset)

    def affects(self, key: QueryKey) -> bool:
        """True when ``key`` equals, or lies under, an invalidated key."""
        key = tuple(key)
        return any(key[: len(stale)] == stale for stale in self.invalidates)


def mutation_result(data: T, keys: Iterable[QueryKey]) -> MutationResult[T]:
    return MutationResult(data=data, invalidates=frozenset(tuple(k) for k in keys))


class AttendanceKeys:
    all: QueryKey = ("attendance",)

    @staticmethod
    def today(user_id: int) -> QueryKey:
        return ("attendance", "today", user_id)

    @staticmethod
    def monthly(user_id: int, month: int, year: int) -> QueryKey:
        return ("attendance", "monthly", user_id, month, year)

    @staticmethod
    def detail(record_id: int) -> QueryKey:
        return ("attendance", "detail", record_id)


class BreakKeys:
    all: QueryKey = ("breaks",)

    @staticmethod
    def mine(user_id: int) -> QueryKey:
        return ("breaks", "mine", user_id)

    @staticmethod
    def pending() -> QueryKey:
        return ("breaks", "hr", "pending")

    @staticmethod
    def by_attendance(record_id: int) -> QueryKey:
        return ("breaks", "attendance", record_id)


class LeaveKeys:
    all: QueryKey = ("leave",)

    @staticmethod
    def mine(user_id: int) -> QueryKey:
        return ("leave", "list", user_id)

    @staticmethod
    def pending() -> QueryKey:
        return ("leave", "hr", "pending")

    @staticmethod
    def detail(request_id: int) -> QueryKey:
        return ("leave", "detail", request_id)


class SalaryKeys:
    all: QueryKey = ("salary",)

    @staticmethod
    def mine(user_id: int) -> QueryKey:
        return ("salary", "list", user_id)

    @staticmethod
    def latest(user_id: int) -> QueryKey:
        return ("salary", "latest", user_id)

    @staticmethod
    def month(user_id: int, month: int, year: int) -> QueryKey:
        return ("salary", "month", user_id, month, year)

    @staticmethod
    def history(user_id: int) -> QueryKey:
        return ("salary_history", "user", user_id)

    history_all: QueryKey = ("salary_history",)


class UserKeys:
    all: QueryKey = ("users",)

    @staticmethod
    def detail(user_id: int) -> QueryKey:
        return ("users", "detail", user_id)


class WiFiKeys:
    all: QueryKey = ("wifi",)

    @staticmethod
    def networks(organization_id: int) -> QueryKey:
        return ("wifi", "networks", organization_id)

    @staticmethod
    def requirement(user_id: int) -> QueryKey:
        return ("wifi", "required", user_id)


class OrganizationKeys:
    all: QueryKey = ("organization",)

    @staticmethod
    def detail(organization_id: int) -> QueryKey:
        return ("organization", "detail", organization_id)
