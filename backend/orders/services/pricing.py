"""
Validation and pricing of requested order lines against the live menu.

Every call re-resolves each line through the catalog, so editing an order
re-prices it while untouched orders keep the snapshot taken when they were
last priced.
"""
import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Mapping, Tuple

from orders.exceptions import InvalidQuantity, MenuItemNotFound

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")
DEFAULT_CATEGORY = "uncategorized"


def to_money(value) -> Decimal:
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def normalize_category(category) -> str:
    """Bucket key for revenue by category: trimmed, lower-cased, never blank."""
    return (category or "").strip().lower() or DEFAULT_CATEGORY


@dataclass(frozen=True)
class LineRequest:
    menu_item_id: str
    quantity: object = None

    @classmethod
    def coerce(cls, value) -> "LineRequest":
        if isinstance(value, cls):
            return value
        if isinstance(value, Mapping):
            item_id = value.get("menu_item_id", value.get("menuId"))
            return cls(
                menu_item_id=str(item_id) if item_id is not None else "",
                quantity=value.get("quantity"),
            )
        raise TypeError(f"Cannot build an order line from {type(value).__name__}")


@dataclass(frozen=True)
class PricedLine:
    """Snapshot of a menu item as it was priced into an order."""

    menu_item_id: str
    name: str
    unit_price: Decimal
    category: str
    quantity: int

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity


@dataclass(frozen=True)
class PricedOrder:
    lines: Tuple[PricedLine, ...]
    total_price: Decimal


def parse_quantity(value):
    """Return a positive int or None when `value` is not a usable quantity."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        quantity = value
    elif isinstance(value, float):
        if not value.is_integer():
            return None
        quantity = int(value)
    elif isinstance(value, Decimal):
        if not value.is_finite() or value != value.to_integral_value():
            return None
        quantity = int(value)
    elif isinstance(value, str):
        try:
            quantity = int(value.strip())
        except ValueError:
            return None
    else:
        return None
    return quantity if quantity >= 1 else None


class OrderPricingService:
    """Turns `{menu_item_id, quantity}` requests into priced line snapshots."""

    def __init__(self, catalog):
        self.catalog = catalog

    def price(self, requested: Iterable) -> PricedOrder:
        """
        Validate and price the requested lines.

        Lines are checked in request order: an unknown menu item is reported
        before a bad quantity on the same line. Repeated menu items are merged
        into one line at the position of their first occurrence.

        Raises:
            MenuItemNotFound: a requested id is not on the menu
            InvalidQuantity: a quantity is missing, not an integer, or below 1
        """
        requests = [LineRequest.coerce(value) for value in requested]
        found = self.catalog.lookup_many([r.menu_item_id for r in requests]) if requests else {}

        merged = {}
        for request in requests:
            item = found.get(request.menu_item_id)
            if item is None:
                raise MenuItemNotFound(request.menu_item_id)

            quantity = parse_quantity(request.quantity)
            if quantity is None:
                raise InvalidQuantity(item_name=item.name, quantity=request.quantity)

            # Different spellings of one id resolve to the same catalog item.
            key = str(item.id)
            existing = merged.get(key)
            if existing is not None:
                merged[key] = PricedLine(
                    menu_item_id=existing.menu_item_id,
                    name=existing.name,
                    unit_price=existing.unit_price,
                    category=existing.category,
                    quantity=existing.quantity + quantity,
                )
                continue

            merged[key] = PricedLine(
                menu_item_id=key,
                name=item.name,
                unit_price=to_money(item.price),
                category=(item.category or "").strip() or DEFAULT_CATEGORY,
                quantity=quantity,
            )

        lines = tuple(merged.values())
        total = sum((line.line_total for line in lines), Decimal("0"))
        logger.debug(f"Priced {len(lines)} line(s), total {total}")
        return PricedOrder(lines=lines, total_price=to_money(total))
