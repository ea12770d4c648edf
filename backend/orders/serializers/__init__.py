"""
Orders serializers package.
"""

from .order_item_serializers import OrderLineRequestSerializer, OrderLineSerializer
from .order_serializers import (
    OrderCreateSerializer,
    OrderHistorySerializer,
    OrderSerializer,
    OrderUpdateHistorySerializer,
    OrderUpdateSerializer,
)
from .status_serializers import CancelOrderSerializer, CompleteOrderSerializer

__all__ = [
    # Lines
    'OrderLineSerializer',
    'OrderLineRequestSerializer',
    # Orders
    'OrderSerializer',
    'OrderHistorySerializer',
    'OrderUpdateHistorySerializer',
    'OrderCreateSerializer',
    'OrderUpdateSerializer',
    # Status
    'CompleteOrderSerializer',
    'CancelOrderSerializer',
]
