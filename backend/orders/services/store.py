import logging

from django.core.exceptions import ValidationError

from orders.exceptions import OrderNotFound
from orders.models import Order, OrderLine, OrderUpdateHistory
from orders.services.ports import OrderStore

logger = logging.getLogger(__name__)


class DjangoOrderStore(OrderStore):
    """`OrderStore` on the Django ORM. Callers own the surrounding transaction."""

    def load(self, order_id, for_update=False):
        queryset = Order.objects.all()
        if for_update:
            queryset = queryset.select_for_update()
        try:
            return queryset.get(pk=order_id)
        except (Order.DoesNotExist, ValidationError, ValueError):
            raise OrderNotFound(order_id)

    def lines(self, order):
        return list(order.lines.all())

    def create(self, order, lines):
        order.save(force_insert=True)
        self._insert_lines(order, lines)
        return order

    def save(self, order, fields=None):
        if fields is not None:
            order.save(update_fields=set(fields) | {"updated_at"})
        else:
            order.save()
        return order

    def replace_lines(self, order, lines):
        order.lines.all().delete()
        self._insert_lines(order, lines)

    def append_history(self, order, actor, changes, at):
        return OrderUpdateHistory.objects.create(
            order=order, updated_by=actor, changes=changes, updated_at=at
        )

    def delete(self, order):
        order.delete()

    def _insert_lines(self, order, lines):
        OrderLine.objects.bulk_create(
            [
                OrderLine(
                    order=order,
                    position=position,
                    menu_item_id=line.menu_item_id,
                    name=line.name,
                    unit_price=line.unit_price,
                    category=line.category,
                    quantity=line.quantity,
                )
                for position, line in enumerate(lines)
            ]
        )
