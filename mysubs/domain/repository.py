"""
Subscription repository contract

Two implementations live in mysubs.infrastructure.repositories:
in-memory and SQL (PostgreSQL). Use cases depend only on this protocol.
"""
from typing import Protocol

from mysubs.domain.subscription import Subscription
from mysubs.domain.year_month import YearMonth


class SubscriptionRepository(Protocol):
    """
    Storage for subscription records

    Every data method takes `timeout` - seconds left of the request
    deadline (None = unbounded). Implementations bound their own work
    with it where the backend allows and raise RepositoryTimeoutError
    when the backend cancels for time.

    Raises:
        SubscriptionNotFoundError: update/delete/get on an absent id
    """

    def ping(self, timeout: float | None = None) -> None:
        """Check the backing store is reachable; raise on failure"""
        ...

    def close(self) -> None:
        ...

    def add(self, sub: Subscription, timeout: float | None = None) -> Subscription:
        """Store a new record, assign its id and return the stored copy"""
        ...

    def update(self, sub: Subscription, timeout: float | None = None) -> None:
        ...

    def delete(self, subscription_id: str, timeout: float | None = None) -> None:
        ...

    def get(self, subscription_id: str, timeout: float | None = None) -> Subscription:
        ...

    def list_all(self, timeout: float | None = None) -> list[Subscription]:
        """All records in a stable order (creation order)"""
        ...

    def total_cost(
        self,
        service_name: str,
        user_id: str,
        start: YearMonth,
        end: YearMonth,
        timeout: float | None = None,
    ) -> int:
        """
        Sum of price over records overlapping [start, end] inclusive

        Empty service_name / user_id means no filter on that field.

        Raises:
            ValueError: end is before start
        """
        ...
