"""
In-memory subscription repository

Used for local runs (STORAGE_BACKEND=memory) and tests. Records live in a
dict keyed by id; dict order gives creation order for list_all().
"""
import logging
import threading
import uuid
from dataclasses import replace

from mysubs.domain.errors import SubscriptionNotFoundError
from mysubs.domain.subscription import Subscription
from mysubs.domain.year_month import YearMonth

logger = logging.getLogger(__name__)


class InMemorySubscriptionRepository:
    """Thread-safe dict-backed store; timeouts are ignored"""

    def __init__(self):
        self._lock = threading.RLock()
        self._items: dict[str, Subscription] = {}

    def ping(self, timeout: float | None = None) -> None:
        return None

    def close(self) -> None:
        with self._lock:
            self._items.clear()

    def add(self, sub: Subscription, timeout: float | None = None) -> Subscription:
        stored = replace(sub, id=str(uuid.uuid4()))
        with self._lock:
            self._items[stored.id] = stored
        logger.debug("subscription added id=%s", stored.id)
        return replace(stored)

    def update(self, sub: Subscription, timeout: float | None = None) -> None:
        with self._lock:
            if sub.id not in self._items:
                raise SubscriptionNotFoundError(sub.id)
            # replacing the value keeps the key's original position
            self._items[sub.id] = replace(sub)

    def delete(self, subscription_id: str, timeout: float | None = None) -> None:
        with self._lock:
            if subscription_id not in self._items:
                raise SubscriptionNotFoundError(subscription_id)
            del self._items[subscription_id]

    def get(self, subscription_id: str, timeout: float | None = None) -> Subscription:
        with self._lock:
            sub = self._items.get(subscription_id)
            if sub is None:
                raise SubscriptionNotFoundError(subscription_id)
            return replace(sub)

    def list_all(self, timeout: float | None = None) -> list[Subscription]:
        with self._lock:
            return [replace(s) for s in self._items.values()]

    def total_cost(
        self,
        service_name: str,
        user_id: str,
        start: YearMonth,
        end: YearMonth,
        timeout: float | None = None,
    ) -> int:
        if end < start:
            raise ValueError("invalid period: end before start")

        with self._lock:
            items = list(self._items.values())

        total = 0
        for sub in items:
            if service_name and sub.service_name != service_name:
                continue
            if user_id and sub.user_id != user_id:
                continue
            if sub.overlaps(start, end):
                total += sub.price
        return total
