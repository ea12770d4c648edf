"""
Root conftest.py for all backend tests.

This file makes fixtures available to all test files across all apps.
"""
from decimal import Decimal

import pytest
from django.core.cache import cache
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from orders.services.ports import Notifier


# ============================================================================
# AUTO-USE FIXTURES (Run automatically for every test)
# ============================================================================

@pytest.fixture(autouse=True)
def clear_cache_after_test():
    """
    Clear cache after each test so presence counters never leak between tests.
    """
    yield
    cache.clear()


# ============================================================================
# NOTIFICATIONS
# ============================================================================

class RecordingNotifier(Notifier):
    """Notifier that keeps every published event in memory."""

    def __init__(self):
        self.published = []

    def publish(self, topics, event):
        self.published.append((tuple(topics), event))

    @property
    def event_names(self):
        return [event.event_name for _, event in self.published]

    def events_named(self, name):
        return [event for _, event in self.published if event.event_name == name]

    def topics_for(self, name):
        return [topics for topics, event in self.published if event.event_name == name]


@pytest.fixture
def recording_notifier(monkeypatch):
    """
    Capture broadcast events, both for services built in the test and for the
    default notifier used by views.
    """
    notifier = RecordingNotifier()
    monkeypatch.setattr("notifications.services.notifier", notifier)
    return notifier


# ============================================================================
# USERS AND CLIENTS
# ============================================================================

@pytest.fixture
def api_client():
    """
    Unauthenticated DRF API client.

    Usage:
        def test_my_api(api_client):
            response = api_client.get('/api/health/')
    """
    return APIClient()


@pytest.fixture
def admin_user(db):
    from users.models import User

    return User.objects.create_user(
        email="admin@example.com",
        password="admin-pass-123",
        name="Admin",
        role=User.Role.ADMIN,
        is_approved=True,
    )


@pytest.fixture
def kitchen_user(db):
    from users.models import User

    return User.objects.create_user(
        email="kitchen@example.com",
        password="kitchen-pass-123",
        name="Kitchen",
        role=User.Role.KITCHEN,
        is_approved=True,
    )


@pytest.fixture
def pending_user(db):
    from users.models import User

    return User.objects.create_user(
        email="pending@example.com",
        password="pending-pass-123",
        role=User.Role.KITCHEN,
        is_approved=False,
    )


def _client_for(user):
    client = APIClient()
    token = RefreshToken.for_user(user).access_token
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")
    return client


@pytest.fixture
def admin_client(admin_user):
    """API client authenticated as an admin via a real JWT access token."""
    return _client_for(admin_user)


@pytest.fixture
def kitchen_client(kitchen_user):
    return _client_for(kitchen_user)


@pytest.fixture
def pending_client(pending_user):
    return _client_for(pending_user)


# ============================================================================
# MENU
# ============================================================================

@pytest.fixture
def make_menu_item(db):
    """Factory for menu items: make_menu_item("Burger", "50.00", category="mains")."""
    from menu.models import MenuItem

    def _make(name="Item", price="10.00", category="uncategorized", priority=False):
        return MenuItem.objects.create(
            name=name, price=Decimal(str(price)), category=category, priority=priority
        )

    return _make


@pytest.fixture
def burger(make_menu_item):
    return make_menu_item("Burger", "50.00", category="Mains")


@pytest.fixture
def fries(make_menu_item):
    return make_menu_item("Fries", "30.00", category="Sides")


@pytest.fixture
def soda(make_menu_item):
    return make_menu_item("Soda", "12.50", category="Drinks")


# ============================================================================
# ORDERS
# ============================================================================

@pytest.fixture
def lifecycle(recording_notifier):
    """OrderLifecycleService on the real catalog, store and ledger, recording notifications."""
    from orders.services.order_service import OrderLifecycleService

    return OrderLifecycleService(notifier=recording_notifier)


@pytest.fixture
def preparing_order(lifecycle, burger):
    """Scenario order: two burgers at table 4."""
    return lifecycle.create_order(
        [{"menu_item_id": str(burger.id), "quantity": 2}], table_number=4, actor="admin"
    ).order
