"""
Order and revenue broadcast events, one dataclass per event name.
"""
from dataclasses import dataclass, field
from typing import ClassVar, List, Optional

from notifications.events import BroadcastEvent, Topic


def order_snapshot(order) -> dict:
    from orders.serializers import OrderSerializer

    return dict(OrderSerializer(order).data)


def order_topics(table_numbers) -> tuple:
    """Staff groups plus one group per table the order is seated at."""
    return Topic.STAFF + tuple(Topic.table(n) for n in table_numbers or [])


@dataclass(frozen=True)
class OrderCreated(BroadcastEvent):
    event_name: ClassVar[str] = "order:new"

    order: dict


@dataclass(frozen=True)
class OrderUpdated(BroadcastEvent):
    event_name: ClassVar[str] = "order:update"

    order: dict
    changes: Optional[dict] = None


@dataclass(frozen=True)
class ItemsAdded(BroadcastEvent):
    event_name: ClassVar[str] = "order:items-added"

    order_id: str
    table_numbers: List[int]
    items: List[dict] = field(default_factory=list)


@dataclass(frozen=True)
class ItemsRemoved(BroadcastEvent):
    event_name: ClassVar[str] = "order:items-removed"

    order_id: str
    table_numbers: List[int]
    items: List[dict] = field(default_factory=list)


@dataclass(frozen=True)
class ItemsUpdated(BroadcastEvent):
    event_name: ClassVar[str] = "order:items-updated"

    order_id: str
    table_numbers: List[int]
    items: List[dict] = field(default_factory=list)


@dataclass(frozen=True)
class OrderCompleted(BroadcastEvent):
    event_name: ClassVar[str] = "order:completed"

    order: dict


@dataclass(frozen=True)
class RevenueChanged(BroadcastEvent):
    event_name: ClassVar[str] = "revenue:update"

    order_id: str
    amount: str
    business_date: str


@dataclass(frozen=True)
class OrderCancelled(BroadcastEvent):
    event_name: ClassVar[str] = "order:cancelled"

    order: dict


@dataclass(frozen=True)
class OrderDeleted(BroadcastEvent):
    event_name: ClassVar[str] = "order:delete"

    id: str
    table_numbers: List[int]


@dataclass(frozen=True)
class OrderAcknowledged(BroadcastEvent):
    event_name: ClassVar[str] = "order:acknowledged"

    id: str
    table_numbers: List[int]
