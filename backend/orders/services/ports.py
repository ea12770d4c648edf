"""
Collaborators the order lifecycle talks to.

`OrderLifecycleService` only depends on these abstractions. The Django-backed
implementations live next to the data they own (menu, revenue, notifications,
orders.services.store) and are wired in as defaults.
"""
from abc import ABC, abstractmethod
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional, Sequence


class Catalog(ABC):
    """Read access to the live menu."""

    @abstractmethod
    def lookup(self, item_id):
        """Return the menu item with `id`, `name`, `price` and `category`, or raise MenuItemNotFound."""

    def lookup_many(self, item_ids: Sequence) -> dict:
        """Resolve several ids at once. Missing ids are simply absent from the result."""
        from orders.exceptions import MenuItemNotFound

        found = {}
        for item_id in item_ids:
            try:
                found[str(item_id)] = self.lookup(item_id)
            except MenuItemNotFound:
                continue
        return found

    def current_price(self, item_id) -> Decimal:
        return Decimal(str(self.lookup(item_id).price))


class OrderStore(ABC):
    """Persistence for orders, their line snapshots and their update history."""

    @abstractmethod
    def load(self, order_id, for_update: bool = False):
        """Return the order or raise OrderNotFound."""

    @abstractmethod
    def lines(self, order) -> list:
        """Current line snapshots of `order`, in display order."""

    @abstractmethod
    def create(self, order, lines: Sequence):
        """Persist a new order together with its priced lines."""

    @abstractmethod
    def save(self, order, fields: Optional[Iterable[str]] = None):
        pass

    @abstractmethod
    def replace_lines(self, order, lines: Sequence):
        pass

    @abstractmethod
    def append_history(self, order, actor: str, changes: dict, at):
        pass

    @abstractmethod
    def delete(self, order):
        pass


class RevenueLedger(ABC):
    """Day and day/category revenue buckets. Increments must happen in place."""

    @abstractmethod
    def increment_daily(self, day: date, amount: Decimal, count: int = 1):
        pass

    @abstractmethod
    def increment_category(
        self,
        day: date,
        category: str,
        revenue: Decimal,
        quantity: int,
        count: int = 1,
        display_name: Optional[str] = None,
    ):
        pass


class Notifier(ABC):
    """Fan-out of broadcast events to topic groups. Best effort, never raises."""

    @abstractmethod
    def publish(self, topics: Iterable[str], event):
        pass
