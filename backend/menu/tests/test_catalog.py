from decimal import Decimal

import pytest

from menu.models import MenuItem
from menu.services import DjangoMenuCatalog, MenuService
from orders.exceptions import MenuItemNotFound


@pytest.mark.django_db
class TestDjangoMenuCatalog:
    def test_lookup(self, burger):
        assert DjangoMenuCatalog().lookup(str(burger.id)) == burger

    @pytest.mark.parametrize("item_id", ["not-a-uuid", "00000000-0000-0000-0000-000000000000", None])
    def test_lookup_unknown(self, item_id):
        with pytest.raises(MenuItemNotFound):
            DjangoMenuCatalog().lookup(item_id)

    def test_current_price(self, fries):
        assert DjangoMenuCatalog().current_price(str(fries.id)) == Decimal("30.00")

    def test_lookup_many_is_keyed_by_requested_id(self, burger, fries):
        requested = [str(burger.id).upper(), str(fries.id), "missing"]

        found = DjangoMenuCatalog().lookup_many(requested)

        assert set(found) == {str(burger.id).upper(), str(fries.id)}
        assert found[str(fries.id)] == fries


@pytest.mark.django_db
class TestMenuServicePublishing:
    def test_publish_failure_does_not_roll_back(self):
        class BrokenNotifier:
            def publish(self, topics, event):
                raise RuntimeError("layer down")

        item = MenuService(notifier=BrokenNotifier()).create_item(name="Soup", price=Decimal("10.00"))

        assert item.pk is not None
        assert MenuItem.objects.filter(pk=item.pk).exists()
