"""
Typed failures raised by the order lifecycle.

Each class carries the HTTP status class it maps to, so views can turn any of
them into the shared error envelope without a lookup table.
"""
from rest_framework import status

from pos_backend.exceptions import ServiceError


class OrderError(ServiceError):
    """Base exception for order-related errors."""

    code = "order_error"


# --- Input validation (400) ---

class EmptyOrder(OrderError):
    code = "empty_order"
    default_message = "Menu items are required"


class InvalidQuantity(OrderError):
    code = "invalid_quantity"

    def __init__(self, item_name=None, quantity=None, message=None):
        self.item_name = item_name
        self.quantity = quantity
        if message is None:
            target = item_name or "menu item"
            message = f"Invalid quantity for {target}"
        super().__init__(message)


class OrderMustHaveItems(OrderError):
    code = "order_must_have_items"
    default_message = "Order must have at least one item. Use delete instead."


class InvalidStatus(OrderError):
    code = "invalid_status"

    def __init__(self, value=None, message=None):
        self.value = value
        if message is None:
            message = "Invalid status. Use 'preparing', 'completed', or 'cancelled'"
        super().__init__(message)


# --- Not found (404) ---

class OrderNotFound(OrderError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "order_not_found"
    default_message = "Order not found"

    def __init__(self, order_id=None, message=None):
        self.order_id = order_id
        super().__init__(message)


class MenuItemNotFound(OrderError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "menu_item_not_found"

    def __init__(self, menu_item_id=None, message=None):
        self.menu_item_id = menu_item_id
        if message is None:
            message = f"Menu item not found: {menu_item_id}"
        super().__init__(message)


# --- State conflicts (400, except stale versions) ---

class OrderStateConflict(OrderError):
    code = "order_state_conflict"


class TerminalOrderImmutable(OrderStateConflict):
    code = "terminal_order_immutable"

    def __init__(self, current_status=None, message=None):
        self.current_status = current_status
        if message is None:
            message = f"Cannot update {current_status or 'a finished'} order"
        super().__init__(message)


class AlreadyCompleted(OrderStateConflict):
    code = "already_completed"
    default_message = "Order is already completed"


class CannotCompleteCancelled(OrderStateConflict):
    code = "cannot_complete_cancelled"
    default_message = "Cannot complete a cancelled order"


class CannotCancelCompleted(OrderStateConflict):
    code = "cannot_cancel_completed"
    default_message = "Cannot cancel completed order"


class AlreadyCancelled(OrderStateConflict):
    code = "already_cancelled"
    default_message = "Order is already cancelled"


class CannotDeleteCompleted(OrderStateConflict):
    code = "cannot_delete_completed"
    default_message = "Cannot delete completed orders. Revenue already recorded."


class StaleOrderVersion(OrderStateConflict):
    status_code = status.HTTP_409_CONFLICT
    code = "stale_order_version"

    def __init__(self, expected=None, actual=None, message=None):
        self.expected = expected
        self.actual = actual
        if message is None:
            message = (
                f"Order was modified by someone else (expected version {expected}, "
                f"current version {actual}). Reload and try again."
            )
        super().__init__(message)
