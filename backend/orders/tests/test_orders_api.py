"""
Orders API Tests

End-to-end checks of the /api/orders/ endpoints: envelope shape, status codes,
role permissions and the read model used by the kitchen display.
"""
from datetime import timedelta
from decimal import Decimal

import pytest
from django.utils import timezone

from orders.models import Order
from revenue.models import RevenueDay

ORDERS_URL = "/api/orders/"


def order_url(order_id, suffix=""):
    return f"{ORDERS_URL}{order_id}/{suffix}"


def create(client, *lines, table_number=None):
    payload = {"menu_items": [{"menu_item_id": str(item.id), "quantity": qty} for item, qty in lines]}
    if table_number is not None:
        payload["table_number"] = table_number
    return client.post(ORDERS_URL, payload, format="json")


@pytest.mark.django_db
class TestOrderCommandsApi:
    def test_create_order(self, admin_client, admin_user, burger, recording_notifier):
        response = create(admin_client, (burger, 2), table_number="4, 5")

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Order created successfully"
        assert body["order"]["total_price"] == "100.00"
        assert body["order"]["status"] == "preparing"
        assert body["order"]["table_numbers"] == [4, 5]
        assert body["order"]["table_display_text"] == "Tables 4, 5"
        assert body["order"]["created_by"] == str(admin_user.pk)
        assert body["order"]["lines"][0]["name"] == "Burger"
        assert "order:new" in recording_notifier.event_names

    def test_client_total_is_ignored(self, admin_client, burger):
        response = admin_client.post(
            ORDERS_URL,
            {"menu_items": [{"menu_item_id": str(burger.id), "quantity": 1}], "total_price": "1.00"},
            format="json",
        )
        assert response.json()["order"]["total_price"] == "50.00"

    def test_create_empty_order(self, admin_client):
        response = admin_client.post(ORDERS_URL, {"menu_items": []}, format="json")

        assert response.status_code == 400
        assert response.json() == {
            "success": False,
            "message": "Menu items are required",
            "code": "empty_order",
        }
        assert not Order.objects.exists()

    def test_create_with_unknown_item(self, admin_client):
        response = admin_client.post(
            ORDERS_URL,
            {"menu_items": [{"menu_item_id": "missing", "quantity": 1}]},
            format="json",
        )
        assert response.status_code == 404
        assert response.json()["code"] == "menu_item_not_found"

    def test_create_with_bad_quantity(self, admin_client, burger):
        response = create(admin_client, (burger, 0))
        assert response.status_code == 400
        assert response.json()["code"] == "invalid_quantity"

    def test_malformed_payload_uses_envelope(self, admin_client):
        response = admin_client.post(
            ORDERS_URL, {"menu_items": [{"quantity": 1}]}, format="json"
        )
        body = response.json()
        assert response.status_code == 400
        assert body["success"] is False
        assert body["code"] == "validation_error"

    def test_update_returns_changes(self, admin_client, burger, fries):
        order_id = create(admin_client, (burger, 2)).json()["order"]["id"]

        response = admin_client.patch(
            order_url(order_id),
            {
                "menu_items": [
                    {"menu_item_id": str(burger.id), "quantity": 3},
                    {"menu_item_id": str(fries.id), "quantity": 1},
                ]
            },
            format="json",
        )

        assert response.status_code == 200
        body = response.json()
        assert body["order"]["total_price"] == "180.00"
        assert [i["name"] for i in body["changes"]["items_added"]] == ["Fries"]
        assert body["changes"]["items_updated"][0]["type"] == "increased"
        assert body["order"]["has_pending_changes"] is True

    def test_update_invalid_status(self, admin_client, burger):
        order_id = create(admin_client, (burger, 1)).json()["order"]["id"]
        response = admin_client.patch(order_url(order_id), {"status": "served"}, format="json")

        assert response.status_code == 400
        assert response.json()["code"] == "invalid_status"

    def test_update_stale_version(self, admin_client, burger):
        order_id = create(admin_client, (burger, 1)).json()["order"]["id"]
        admin_client.patch(order_url(order_id), {"table_number": 2, "expected_version": 1}, format="json")

        response = admin_client.patch(
            order_url(order_id), {"table_number": 3, "expected_version": 1}, format="json"
        )
        assert response.status_code == 409
        assert response.json()["code"] == "stale_order_version"

    def test_complete_then_update_conflicts(self, admin_client, burger):
        order_id = create(admin_client, (burger, 2)).json()["order"]["id"]

        response = admin_client.post(order_url(order_id, "complete/"))
        assert response.status_code == 200
        assert response.json()["order"]["status"] == "completed"
        assert RevenueDay.objects.get().amount == Decimal("100.00")

        response = admin_client.patch(order_url(order_id), {"table_number": 9}, format="json")
        assert response.status_code == 400
        assert response.json()["code"] == "terminal_order_immutable"

    def test_complete_twice(self, admin_client, burger):
        order_id = create(admin_client, (burger, 1)).json()["order"]["id"]
        admin_client.post(order_url(order_id, "complete/"))

        response = admin_client.post(order_url(order_id, "complete/"))
        assert response.status_code == 400
        assert response.json()["message"] == "Order is already completed"

    def test_cancel_with_reason(self, admin_client, burger):
        order_id = create(admin_client, (burger, 1)).json()["order"]["id"]

        response = admin_client.post(order_url(order_id, "cancel/"), {"reason": "Wrong table"}, format="json")
        assert response.status_code == 200
        assert response.json()["order"]["cancellation_reason"] == "Wrong table"

    def test_delete(self, admin_client, burger):
        order_id = create(admin_client, (burger, 1)).json()["order"]["id"]

        response = admin_client.delete(order_url(order_id))
        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Order deleted successfully"}
        assert not Order.objects.exists()

    def test_delete_completed(self, admin_client, burger):
        order_id = create(admin_client, (burger, 1)).json()["order"]["id"]
        admin_client.post(order_url(order_id, "complete/"))

        response = admin_client.delete(order_url(order_id))
        assert response.status_code == 400
        assert response.json()["code"] == "cannot_delete_completed"

    def test_unknown_order_is_404(self, admin_client):
        response = admin_client.post(order_url("00000000-0000-0000-0000-000000000000", "complete/"))
        assert response.status_code == 404
        assert response.json()["code"] == "order_not_found"


@pytest.mark.django_db
class TestOrderPermissions:
    def test_anonymous_is_rejected(self, api_client):
        response = api_client.get(f"{ORDERS_URL}current/")
        assert response.status_code == 401
        assert response.json()["success"] is False

    def test_kitchen_cannot_create(self, kitchen_client, burger):
        response = create(kitchen_client, (burger, 1))
        assert response.status_code == 403

    def test_unapproved_kitchen_cannot_read(self, pending_client):
        response = pending_client.get(f"{ORDERS_URL}current/")
        assert response.status_code == 403

    def test_kitchen_reads_and_acknowledges(self, admin_client, kitchen_client, kitchen_user, burger, fries):
        order_id = create(admin_client, (burger, 1)).json()["order"]["id"]
        admin_client.patch(
            order_url(order_id),
            {"menu_items": [{"menu_item_id": str(fries.id), "quantity": 1}]},
            format="json",
        )

        current = kitchen_client.get(f"{ORDERS_URL}current/").json()
        assert current["orders"][0]["has_pending_changes"] is True

        response = kitchen_client.post(order_url(order_id, "acknowledge/"))
        assert response.status_code == 200
        assert response.json()["order"]["has_pending_changes"] is False

    def test_kitchen_cannot_complete(self, admin_client, kitchen_client, burger):
        order_id = create(admin_client, (burger, 1)).json()["order"]["id"]
        response = kitchen_client.post(order_url(order_id, "complete/"))
        assert response.status_code == 403


@pytest.mark.django_db
class TestOrderQueriesApi:
    @pytest.fixture
    def seated_orders(self, admin_client, burger):
        ids = {}
        for label, tables in (("t4", 4), ("t45", "4,5"), ("t5", 5), ("t456", [4, 5, 6]), ("none", None)):
            ids[label] = create(admin_client, (burger, 1), table_number=tables).json()["order"]["id"]
        return ids

    def ids(self, response):
        return {order["id"] for order in response.json()["orders"]}

    def test_current_orders_default_to_preparing(self, admin_client, seated_orders):
        admin_client.post(order_url(seated_orders["t5"], "complete/"))

        response = admin_client.get(f"{ORDERS_URL}current/")
        assert response.status_code == 200
        assert seated_orders["t5"] not in self.ids(response)
        assert len(self.ids(response)) == 4

        everything = admin_client.get(f"{ORDERS_URL}current/", {"status": "all"})
        assert len(self.ids(everything)) == 5

    def test_current_orders_for_one_table(self, admin_client, seated_orders):
        response = admin_client.get(f"{ORDERS_URL}current/", {"table": 5})
        assert self.ids(response) == {seated_orders["t45"], seated_orders["t5"], seated_orders["t456"]}

    def test_by_tables_matches_any(self, admin_client, seated_orders):
        response = admin_client.get(f"{ORDERS_URL}by-tables/", {"tables": "4,6"})
        assert self.ids(response) == {seated_orders["t4"], seated_orders["t45"], seated_orders["t456"]}
        assert response.json()["tables"] == [4, 6]

    def test_by_combined_tables_matches_all(self, admin_client, seated_orders):
        response = admin_client.get(f"{ORDERS_URL}by-combined-tables/", {"tables": "5,4"})
        assert self.ids(response) == {seated_orders["t45"], seated_orders["t456"]}

    def test_by_exact_tables(self, admin_client, seated_orders):
        response = admin_client.get(f"{ORDERS_URL}by-exact-tables/", {"tables": "5, 4"})
        assert self.ids(response) == {seated_orders["t45"]}

    def test_table_number_is_not_a_substring_match(self, admin_client, burger, seated_orders):
        table_14 = create(admin_client, (burger, 1), table_number=14).json()["order"]["id"]
        response = admin_client.get(f"{ORDERS_URL}by-tables/", {"tables": "4"})
        assert table_14 not in self.ids(response)

    @pytest.mark.parametrize("query", [{}, {"tables": "x,y"}])
    def test_tables_parameter_is_required(self, admin_client, query):
        response = admin_client.get(f"{ORDERS_URL}by-tables/", query)
        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_retrieve(self, kitchen_client, seated_orders):
        response = kitchen_client.get(order_url(seated_orders["t45"]))
        assert response.status_code == 200
        assert response.json()["order"]["table_display_text"] == "Tables 4, 5"

    def test_history(self, admin_client, seated_orders, fries):
        order_id = seated_orders["t4"]
        admin_client.patch(
            order_url(order_id),
            {"menu_items": [{"menu_item_id": str(fries.id), "quantity": 2}]},
            format="json",
        )

        body = admin_client.get(order_url(order_id, "history/")).json()
        assert body["success"] is True
        assert body["table_display_text"] == "Table 4"
        assert len(body["update_history"]) == 1
        changes = body["update_history"][0]["changes"]
        assert [i["name"] for i in changes["added"]] == ["Fries"]
        assert [i["name"] for i in changes["removed"]] == ["Burger"]

    def test_admin_list_is_paginated(self, admin_client, seated_orders):
        response = admin_client.get(ORDERS_URL, {"limit": 2, "page": 2})
        body = response.json()

        assert response.status_code == 200
        assert body["total"] == 5
        assert body["page"] == 2
        assert body["total_pages"] == 3
        assert body["count"] == 2
        assert len(body["orders"]) == 2

    def test_admin_list_filters(self, admin_client, seated_orders):
        admin_client.post(order_url(seated_orders["t4"], "cancel/"))

        body = admin_client.get(ORDERS_URL, {"status": "cancelled"}).json()
        assert [o["id"] for o in body["orders"]] == [seated_orders["t4"]]

        body = admin_client.get(ORDERS_URL, {"table": 6}).json()
        assert [o["id"] for o in body["orders"]] == [seated_orders["t456"]]

    def test_admin_list_date_range(self, admin_client, seated_orders):
        Order.objects.filter(pk=seated_orders["t4"]).update(created_at=timezone.now() - timedelta(days=10))
        today = timezone.localdate()

        body = admin_client.get(ORDERS_URL, {"start_date": today.isoformat(), "end_date": today.isoformat()}).json()
        assert body["total"] == 4
        assert seated_orders["t4"] not in {o["id"] for o in body["orders"]}
