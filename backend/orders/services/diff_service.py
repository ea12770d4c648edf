"""
Line-level diff between two revisions of an order.
"""
from dataclasses import dataclass, field
from typing import Iterable, Tuple

INCREASED = "increased"
DECREASED = "decreased"


@dataclass(frozen=True)
class LineChange:
    menu_item_id: str
    name: str
    quantity: int
    category: str

    def to_dict(self) -> dict:
        return {
            "menu_item_id": self.menu_item_id,
            "name": self.name,
            "quantity": self.quantity,
            "category": self.category,
        }


@dataclass(frozen=True)
class QuantityChange:
    menu_item_id: str
    name: str
    old_quantity: int
    new_quantity: int
    category: str

    @property
    def change(self) -> int:
        return self.new_quantity - self.old_quantity

    @property
    def direction(self) -> str:
        return INCREASED if self.new_quantity > self.old_quantity else DECREASED

    def to_dict(self) -> dict:
        return {
            "menu_item_id": self.menu_item_id,
            "name": self.name,
            "old_quantity": self.old_quantity,
            "new_quantity": self.new_quantity,
            "change": self.change,
            "type": self.direction,
            "category": self.category,
        }


@dataclass(frozen=True)
class OrderDiff:
    added: Tuple[LineChange, ...] = field(default_factory=tuple)
    removed: Tuple[LineChange, ...] = field(default_factory=tuple)
    updated: Tuple[QuantityChange, ...] = field(default_factory=tuple)

    @property
    def has_changes(self) -> bool:
        return bool(self.added or self.removed or self.updated)

    def added_dicts(self):
        return [change.to_dict() for change in self.added]

    def removed_dicts(self):
        return [change.to_dict() for change in self.removed]

    def updated_dicts(self):
        return [change.to_dict() for change in self.updated]

    def to_history(self) -> dict:
        return {
            "added": self.added_dicts(),
            "removed": self.removed_dicts(),
            "updated": self.updated_dicts(),
        }

    def to_summary(self) -> dict:
        return {
            "items_added": self.added_dicts(),
            "items_removed": self.removed_dicts(),
            "items_updated": self.updated_dicts(),
        }


def _keyed(lines: Iterable) -> dict:
    keyed = {}
    for line in lines:
        keyed[str(line.menu_item_id)] = line
    return keyed


def diff_lines(old_lines: Iterable, new_lines: Iterable) -> OrderDiff:
    """
    Classify every menu item as added, removed or quantity-updated.

    Both sides only need `menu_item_id`, `name`, `quantity` and `category`, so
    stored `OrderLine` rows and freshly priced `PricedLine` snapshots can be
    compared directly. Added and updated entries follow the new order of lines,
    removed entries follow the old one.
    """
    old = _keyed(old_lines)
    new = _keyed(new_lines)

    added = []
    updated = []
    for key, line in new.items():
        previous = old.get(key)
        if previous is None:
            added.append(LineChange(key, line.name, line.quantity, line.category))
        elif previous.quantity != line.quantity:
            updated.append(
                QuantityChange(
                    menu_item_id=key,
                    name=line.name,
                    old_quantity=previous.quantity,
                    new_quantity=line.quantity,
                    category=line.category,
                )
            )

    removed = [
        LineChange(key, line.name, line.quantity, line.category)
        for key, line in old.items()
        if key not in new
    ]

    return OrderDiff(added=tuple(added), removed=tuple(removed), updated=tuple(updated))
