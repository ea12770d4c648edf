"""
Order lifecycle: create, update, complete, cancel, delete and acknowledge.

Every mutation runs in one transaction with the order row locked, raises a
typed `OrderError` before anything is written when the request is invalid, and
publishes its broadcast events once the work is committed.
"""
import logging
from dataclasses import dataclass
from datetime import timedelta
from decimal import Decimal
from typing import List, Optional, Sequence, Tuple

from django.db import transaction
from django.utils import timezone

from orders.config import order_settings
from orders.events import (
    ItemsAdded,
    ItemsRemoved,
    ItemsUpdated,
    OrderAcknowledged,
    OrderCancelled,
    OrderCompleted,
    OrderCreated,
    OrderDeleted,
    OrderUpdated,
    RevenueChanged,
    order_snapshot,
    order_topics,
)
from orders.exceptions import (
    AlreadyCancelled,
    AlreadyCompleted,
    CannotCancelCompleted,
    CannotCompleteCancelled,
    CannotDeleteCompleted,
    EmptyOrder,
    InvalidStatus,
    OrderMustHaveItems,
    StaleOrderVersion,
    TerminalOrderImmutable,
)
from orders.models import Order
from notifications.events import Topic

from .diff_service import OrderDiff, diff_lines
from .pricing import DEFAULT_CATEGORY, OrderPricingService, normalize_category, to_money
from .tables import normalize_table_numbers

logger = logging.getLogger(__name__)

UNSET = object()


@dataclass
class OrderResult:
    order: Order
    message: str
    changes: Optional[dict] = None


@dataclass(frozen=True)
class CategoryTotal:
    category: str
    display_name: str
    revenue: Decimal
    quantity: int


def summarize_by_category(lines) -> List[CategoryTotal]:
    """One bucket per distinct category, in order of first appearance."""
    buckets = {}
    for line in lines:
        label = (line.category or "").strip() or DEFAULT_CATEGORY
        key = normalize_category(label)
        revenue, quantity, display_name = buckets.get(key, (Decimal("0.00"), 0, label))
        buckets[key] = (revenue + line.unit_price * line.quantity, quantity + line.quantity, display_name)
    return [
        CategoryTotal(category=key, display_name=name, revenue=to_money(revenue), quantity=quantity)
        for key, (revenue, quantity, name) in buckets.items()
    ]


class OrderLifecycleService:
    """
    Drives an order through preparing -> completed | cancelled.

    Collaborators are injected; the defaults are the Django-backed
    implementations (menu catalog, order store, revenue ledger, Channels
    notifier).
    """

    def __init__(self, catalog=None, store=None, ledger=None, notifier=None, clock=None):
        if catalog is None:
            from menu.services import DjangoMenuCatalog

            catalog = DjangoMenuCatalog()
        if store is None:
            from .store import DjangoOrderStore

            store = DjangoOrderStore()
        if ledger is None:
            from revenue.services import RevenueLedgerService

            ledger = RevenueLedgerService()
        if notifier is None:
            from notifications.services import notifier as default_notifier

            notifier = default_notifier

        self.catalog = catalog
        self.store = store
        self.ledger = ledger
        self.notifier = notifier
        self.clock = clock or timezone.now
        self.pricing = OrderPricingService(catalog)

    # --- Commands ---

    def create_order(self, menu_items: Sequence, table_number=None, actor: str = "admin") -> OrderResult:
        """
        Price the requested lines and persist a new preparing order.

        Raises:
            EmptyOrder: no lines were requested
            MenuItemNotFound, InvalidQuantity: from pricing
        """
        if not menu_items:
            raise EmptyOrder()

        priced = self.pricing.price(menu_items)
        now = self.clock()

        with transaction.atomic():
            order = Order(
                status=Order.Status.PREPARING,
                total_price=priced.total_price,
                table_numbers=normalize_table_numbers(table_number),
                created_by=actor,
                created_at=now,
            )
            self.store.create(order, priced.lines)

        logger.info(
            f"Order {order.id} created by {actor}: {len(priced.lines)} line(s), "
            f"total {order.total_price}, {order.table_display_text}"
        )
        self._publish(order_topics(order.table_numbers), OrderCreated(order=order_snapshot(order)))
        return OrderResult(order=order, message="Order created successfully")

    def update_order(
        self,
        order_id,
        actor: str = "admin",
        menu_items=UNSET,
        table_number=UNSET,
        status: Optional[str] = None,
        expected_version: Optional[int] = None,
    ) -> OrderResult:
        """
        Apply any combination of new lines, new tables and a status change.

        A `completed` or `cancelled` status runs the same transition as
        `complete_order`/`cancel_order` after the other changes are applied.

        Raises:
            OrderNotFound, StaleOrderVersion, TerminalOrderImmutable,
            OrderMustHaveItems, InvalidStatus, MenuItemNotFound, InvalidQuantity
        """
        if status == "":
            status = None

        diff: Optional[OrderDiff] = None
        events: List[Tuple[tuple, object]] = []

        with transaction.atomic():
            order = self.store.load(order_id, for_update=True)
            self._check_version(order, expected_version)
            if order.status != Order.Status.PREPARING:
                raise TerminalOrderImmutable(order.status)
            if status is not None and status not in Order.Status.values:
                raise InvalidStatus(status)
            if menu_items is not UNSET and menu_items is not None and len(menu_items) == 0:
                raise OrderMustHaveItems()

            now = self.clock()
            if menu_items is not UNSET and menu_items is not None:
                priced = self.pricing.price(menu_items)
                diff = diff_lines(self.store.lines(order), priced.lines)

                order.total_price = priced.total_price
                order.added_items = diff.added_dicts()
                order.removed_items = diff.removed_dicts()
                order.updated_items = diff.updated_dicts()
                self.store.replace_lines(order, priced.lines)

                if diff.has_changes:
                    order.last_updated_at = now
                    self.store.append_history(order, actor, diff.to_history(), now)

            if table_number is not UNSET:
                order.table_numbers = normalize_table_numbers(table_number)

            order.version += 1
            self.store.save(order)

            if status == Order.Status.COMPLETED:
                events.extend(self._complete_locked(order, actor, now))
            elif status == Order.Status.CANCELLED:
                events.extend(self._cancel_locked(order, actor, None, now))

        changes = diff.to_summary() if diff is not None and diff.has_changes else None
        logger.info(
            f"Order {order.id} updated by {actor}"
            + (f": +{len(diff.added)} -{len(diff.removed)} ~{len(diff.updated)}" if changes else "")
        )

        topics = order_topics(order.table_numbers)
        self._publish(topics, OrderUpdated(order=order_snapshot(order), changes=changes))
        if diff is not None:
            order_id_str = str(order.id)
            tables = list(order.table_numbers)
            if diff.added:
                self._publish((Topic.KITCHEN,), ItemsAdded(order_id_str, tables, diff.added_dicts()))
            if diff.removed:
                self._publish((Topic.KITCHEN,), ItemsRemoved(order_id_str, tables, diff.removed_dicts()))
            if diff.updated:
                self._publish((Topic.KITCHEN,), ItemsUpdated(order_id_str, tables, diff.updated_dicts()))
        for event_topics, event in events:
            self._publish(event_topics, event)

        return OrderResult(order=order, message="Order updated successfully", changes=changes)

    def complete_order(self, order_id, actor: str = "admin", expected_version: Optional[int] = None) -> OrderResult:
        """
        Raises:
            OrderNotFound, StaleOrderVersion, AlreadyCompleted, CannotCompleteCancelled
        """
        with transaction.atomic():
            order = self.store.load(order_id, for_update=True)
            self._check_version(order, expected_version)
            events = self._complete_locked(order, actor, self.clock())

        for topics, event in events:
            self._publish(topics, event)
        return OrderResult(order=order, message="Order completed successfully")

    def cancel_order(
        self,
        order_id,
        actor: str = "admin",
        reason: Optional[str] = None,
        expected_version: Optional[int] = None,
    ) -> OrderResult:
        """
        Raises:
            OrderNotFound, StaleOrderVersion, CannotCancelCompleted, AlreadyCancelled
        """
        with transaction.atomic():
            order = self.store.load(order_id, for_update=True)
            self._check_version(order, expected_version)
            events = self._cancel_locked(order, actor, reason, self.clock())

        for topics, event in events:
            self._publish(topics, event)
        return OrderResult(order=order, message="Order cancelled successfully")

    def delete_order(self, order_id, actor: str = "admin") -> OrderResult:
        """
        Hard-delete an order that has not been completed.

        Raises:
            OrderNotFound, CannotDeleteCompleted
        """
        with transaction.atomic():
            order = self.store.load(order_id, for_update=True)
            if order.status == Order.Status.COMPLETED:
                raise CannotDeleteCompleted()
            deleted_id = str(order.id)
            tables = list(order.table_numbers)
            self.store.delete(order)

        logger.info(f"Order {deleted_id} deleted by {actor}")
        self._publish(order_topics(tables), OrderDeleted(id=deleted_id, table_numbers=tables))
        return OrderResult(order=order, message="Order deleted successfully")

    def acknowledge_order(self, order_id, actor: str = "admin") -> OrderResult:
        """
        Clear the pending change markers. Status, lines and version are untouched.

        Raises:
            OrderNotFound
        """
        with transaction.atomic():
            order = self.store.load(order_id, for_update=True)
            order.clear_change_tracking()
            self.store.save(
                order, fields=["added_items", "removed_items", "updated_items", "last_updated_at"]
            )

        logger.info(f"Order {order.id} changes acknowledged by {actor}")
        tables = list(order.table_numbers)
        self._publish(
            (Topic.KITCHEN, Topic.ADMIN),
            OrderAcknowledged(id=str(order.id), table_numbers=tables),
        )
        return OrderResult(order=order, message="Order changes acknowledged")

    # --- Transitions on a locked order ---

    def _complete_locked(self, order, actor, now):
        if order.status == Order.Status.COMPLETED:
            raise AlreadyCompleted()
        if order.status == Order.Status.CANCELLED:
            raise CannotCompleteCancelled()

        from revenue.timezone_utils import TimezoneUtils

        order.status = Order.Status.COMPLETED
        order.clear_change_tracking()
        order.completed_at = now
        order.completed_by = actor
        order.expires_at = self._expiry_for(now)
        order.version += 1
        self.store.save(order)

        business_date = TimezoneUtils.business_date(now)
        self.ledger.increment_daily(business_date, order.total_price, 1)
        for bucket in summarize_by_category(self.store.lines(order)):
            self.ledger.increment_category(
                business_date,
                bucket.category,
                bucket.revenue,
                bucket.quantity,
                1,
                display_name=bucket.display_name,
            )

        logger.info(f"Order {order.id} completed by {actor}, {order.total_price} posted to {business_date}")
        return [
            (order_topics(order.table_numbers), OrderCompleted(order=order_snapshot(order))),
            (
                (Topic.GLOBAL, Topic.ADMIN),
                RevenueChanged(
                    order_id=str(order.id),
                    amount=str(order.total_price),
                    business_date=business_date.isoformat(),
                ),
            ),
        ]

    def _cancel_locked(self, order, actor, reason, now):
        if order.status == Order.Status.COMPLETED:
            raise CannotCancelCompleted()
        if order.status == Order.Status.CANCELLED:
            raise AlreadyCancelled()

        order.status = Order.Status.CANCELLED
        order.clear_change_tracking()
        order.cancelled_at = now
        order.cancelled_by = actor
        order.cancellation_reason = (reason or "").strip() or order_settings.default_cancellation_reason
        order.version += 1
        self.store.save(order)

        logger.info(f"Order {order.id} cancelled by {actor}: {order.cancellation_reason}")
        return [(order_topics(order.table_numbers), OrderCancelled(order=order_snapshot(order)))]

    # --- Helpers ---

    @staticmethod
    def _check_version(order, expected_version):
        if expected_version is None:
            return
        if int(expected_version) != order.version:
            raise StaleOrderVersion(expected=expected_version, actual=order.version)

    @staticmethod
    def _expiry_for(now):
        """Next business midnight, or `now` plus RETENTION minutes when it is a number."""
        from revenue.timezone_utils import TimezoneUtils

        retention = order_settings.retention
        if retention in (None, "", "never"):
            return None
        if str(retention).strip().isdigit():
            return now + timedelta(minutes=int(retention))
        if retention != "midnight":
            logger.warning(f"Unknown order retention {retention!r}, using next midnight")
        return TimezoneUtils.next_midnight(now)

    def _publish(self, topics, event):
        try:
            self.notifier.publish(topics, event)
        except Exception as e:
            logger.error(f"Error publishing {event.event_name}: {e}")
