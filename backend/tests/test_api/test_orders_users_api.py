"""
API tests for /api/v1/orders, /api/v1/users and the root endpoints

Author: TM3
Date: 2025-10-24
"""
from decimal import Decimal
from unittest.mock import patch

import psycopg2
import pytest

from fakes import build_product


@pytest.fixture
def catalog(product_repository):
    product_repository.create(build_product(product_id="A", amount="6.00", weight="60"))
    product_repository.create(build_product(product_id="B", amount="5.00", weight="50"))
    product_repository.create(build_product(product_id="C", amount="1.00", weight="10"))
    return product_repository


class TestOrdersEndpoints:
    """Test order endpoints through the full stack"""

    def test_place_order(self, client, catalog):
        response = client.post("/api/v1/orders/", json={
            "order_id": "O-1",
            "customer_id": "C-1",
            "lines": [{"product_id": "A", "quantity": 1}, {"product_id": "C", "quantity": 2}],
        })

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["status"] == "draft"
        assert data["item_count"] == 2
        assert Decimal(data["total_weight"]) == Decimal("80")
        assert Decimal(data["total_price"]["amount"]) == Decimal("8.00")

    def test_weight_limit_is_400(self, client, catalog, order_repository):
        client.post("/api/v1/orders/", json={"order_id": "O-1", "lines": [{"product_id": "A", "quantity": 1}]})

        response = client.post("/api/v1/orders/O-1/lines", json={"product_id": "B", "quantity": 1})

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "weight_limit_exceeded"
        assert error["context"] == {"order_id": "O-1", "product_id": "B"}
        assert len(order_repository.find_by_id("O-1").line_items) == 1

    def test_unknown_product_is_404(self, client, catalog):
        response = client.post("/api/v1/orders/", json={"lines": [{"product_id": "missing", "quantity": 1}]})

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "unknown_product"

    def test_line_item_changes(self, client, catalog):
        client.post("/api/v1/orders/", json={"order_id": "O-1", "lines": [{"product_id": "C", "quantity": 1}]})

        response = client.patch("/api/v1/orders/O-1/lines/C", json={"quantity": 4})
        assert response.status_code == 200
        assert response.json()["data"]["line_items"][0]["quantity"] == 4

        response = client.delete("/api/v1/orders/O-1/lines/C")
        assert response.status_code == 200
        assert response.json()["data"]["item_count"] == 0

    def test_lifecycle(self, client, catalog):
        client.post("/api/v1/orders/", json={"order_id": "O-1", "lines": [{"product_id": "C", "quantity": 1}]})

        assert client.post("/api/v1/orders/O-1/confirm").json()["data"]["status"] == "confirmed"

        response = client.post("/api/v1/orders/O-1/lines", json={"product_id": "A", "quantity": 1})
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "order_not_editable"

        assert client.post("/api/v1/orders/O-1/cancel").json()["data"]["status"] == "cancelled"

    def test_list_get_delete(self, client, catalog):
        client.post("/api/v1/orders/", json={"order_id": "O-1", "lines": []})

        assert client.get("/api/v1/orders/").json()["count"] == 1
        assert client.get("/api/v1/orders/O-1").status_code == 200
        assert client.delete("/api/v1/orders/O-1").status_code == 200
        assert client.get("/api/v1/orders/O-1").status_code == 404


class TestUsersEndpoints:
    """Test user endpoints through the full stack"""

    def register(self, client, email="buyer@example.com", password="s3cretpass"):
        return client.post("/api/v1/users/", json={"email": email, "password": password, "name": "Buyer"})

    def test_register_user(self, client):
        response = self.register(client)

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["email"] == "buyer@example.com"
        assert "password" not in response.text
        assert "s3cretpass" not in response.text

    def test_weak_password_is_400(self, client):
        response = self.register(client, password="weakpass")

        assert response.status_code == 400
        assert response.json()["error"]["kind"] == "validation"
        assert "weakpass" not in response.text

    def test_email_taken_is_400(self, client):
        self.register(client)

        response = self.register(client)

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "email_taken"

    def test_account_changes(self, client):
        user_id = self.register(client).json()["data"]["id"]

        response = client.put(f"/api/v1/users/{user_id}/email", json={"email": "new@example.com"})
        assert response.json()["data"]["email"] == "new@example.com"

        response = client.put(
            f"/api/v1/users/{user_id}/password",
            json={"current_password": "s3cretpass", "new_password": "n3wpassword"}
        )
        assert response.status_code == 200

        response = client.post(f"/api/v1/users/{user_id}/deactivate")
        assert response.json()["data"]["is_active"] is False

        assert client.get(f"/api/v1/users/{user_id}").status_code == 200
        assert client.get("/api/v1/users/missing").status_code == 404


class TestRootEndpoints:

    def test_root(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert response.json()["status"] == "online"

    @patch('storefront.main.get_db_connection_with_retry')
    def test_health_degraded_without_database(self, mock_get_conn, client):
        mock_get_conn.side_effect = psycopg2.OperationalError("connection refused")

        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "degraded"
        assert response.json()["database"]["status"] == "disconnected"

    @patch('storefront.main.get_db_connection_with_retry')
    def test_health_connected(self, mock_get_conn, client):
        response = client.get("/health")

        assert response.json()["status"] == "healthy"
        mock_get_conn.return_value.close.assert_called_once()
