"""
Tests for API route endpoints.

Tests: health, order-status admin CRUD, payment settings, checkout flow, and the
error envelope produced by the DomainError handler.
"""

import os, sys
sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

import pytest


class TestHealthEndpoint:
    """Tests for GET /health."""

    @pytest.mark.api
    async def test_health_returns_200(self, test_client):
        response = await test_client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["database_connected"] is True


class TestOrderStatusEndpoints:
    """Tests for /admin/order-statuses."""

    @pytest.mark.api
    async def test_create_returns_201(self, test_client):
        response = await test_client.post(
            "/admin/order-statuses",
            json={"name": "  Quality Check ", "color": "#3B82F6", "position": 4},
        )
        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["data"]["name"] == "Quality Check"
        assert body["data"]["slug"] == "quality-check"
        assert isinstance(body["data"]["id"], str)

    @pytest.mark.api
    async def test_duplicate_name_is_conflict(self, test_client, pending_and_shipped):
        response = await test_client.post("/admin/order-statuses", json={"name": "Shipped"})
        assert response.status_code == 409
        body = response.json()
        assert body["success"] is False
        assert body["error"]["code"] == "conflict"
        assert body["error"]["message"] == "Order status with this name already exists"

    @pytest.mark.api
    async def test_bad_color_rejected(self, test_client):
        response = await test_client.post("/admin/order-statuses", json={"name": "X", "color": "blue"})
        assert response.status_code == 422

    @pytest.mark.api
    async def test_list_paginated(self, test_client, pending_and_shipped):
        response = await test_client.get("/admin/order-statuses", params={"page": 1, "per_page": 1})
        assert response.status_code == 200
        body = response.json()
        assert [s["name"] for s in body["data"]] == ["Pending"]
        assert body["meta"] == {"total": 2, "page": 1, "per_page": 1, "total_pages": 2}

    @pytest.mark.api
    async def test_patch_moves_default(self, test_client, pending_and_shipped):
        _, shipped = pending_and_shipped
        response = await test_client.patch(f"/admin/order-statuses/{shipped.id}", json={"is_default": True})
        assert response.status_code == 200
        assert response.json()["data"]["is_default"] is True

        listing = (await test_client.get("/admin/order-statuses")).json()["data"]
        assert [s["name"] for s in listing if s["is_default"]] == ["Shipped"]

    @pytest.mark.api
    async def test_patch_unknown_is_404(self, test_client):
        response = await test_client.patch("/admin/order-statuses/999", json={"name": "Ghost"})
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "notfound"

    @pytest.mark.api
    async def test_delete_default_is_conflict(self, test_client, pending_and_shipped):
        pending, _ = pending_and_shipped
        response = await test_client.delete(f"/admin/order-statuses/{pending.id}")
        assert response.status_code == 409
        assert response.json()["error"]["message"] == (
            "You must designate another default status before deleting this one."
        )

    @pytest.mark.api
    async def test_delete_non_default(self, test_client, pending_and_shipped):
        _, shipped = pending_and_shipped
        response = await test_client.delete(f"/admin/order-statuses/{shipped.id}")
        assert response.status_code == 200
        assert response.json()["success"] is True

    @pytest.mark.api
    async def test_bulk_delete_with_default_rejected(self, test_client, pending_and_shipped):
        pending, shipped = pending_and_shipped
        response = await test_client.post(
            "/admin/order-statuses/bulk-delete", json={"ids": [pending.id, shipped.id]}
        )
        assert response.status_code == 409
        assert response.json()["error"]["message"] == (
            "Cannot delete the default status. Please assign another default first."
        )

    @pytest.mark.api
    async def test_bulk_delete_reports_count(self, test_client, pending_and_shipped):
        _, shipped = pending_and_shipped
        response = await test_client.post("/admin/order-statuses/bulk-delete", json={"ids": [shipped.id]})
        assert response.status_code == 200
        assert response.json()["meta"] == {"deleted": 1}

    @pytest.mark.api
    async def test_bulk_delete_requires_ids(self, test_client):
        response = await test_client.post("/admin/order-statuses/bulk-delete", json={"ids": []})
        assert response.status_code == 422


class TestPaymentSettingsEndpoints:
    """Tests for /admin/settings/payments."""

    @pytest.mark.api
    async def test_get_masks_secrets(self, test_client, stripe_gateway, db_session):
        stripe_gateway.is_active = True
        await db_session.commit()

        response = await test_client.get("/admin/settings/payments")
        assert response.status_code == 200
        config = response.json()["data"]["gateway"]["config"]
        assert config["secret_key"] == "••••_456"
        assert "sk_test_456" not in response.text

    @pytest.mark.api
    async def test_put_updates_credentials(self, test_client, fake_gateway):
        response = await test_client.put(
            "/admin/settings/payments", json={"publishable_key": "pk_live_abc"}
        )
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["message"] == "Payment settings updated successfully"
        assert data["gateway"]["config"]["publishable_key"] == "pk_live_abc"


class TestCheckoutEndpoints:
    """Tests for /checkout/*."""

    @pytest.mark.api
    async def test_fake_checkout_flow(self, test_client, fake_gateway, sample_order):
        response = await test_client.post(f"/checkout/orders/{sample_order.id}/payment")
        assert response.status_code == 200
        payment = response.json()["data"]
        assert payment["gateway"] == "fake"
        assert payment["provider_reference"] == f"pi_fake_{sample_order.id}"

        response = await test_client.post(f"/checkout/payments/{payment['payment_id']}/finalize")
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["order_status"] == "pending"
        assert data["payment_status"] == "succeeded"

    @pytest.mark.api
    async def test_unknown_order_is_404(self, test_client, fake_gateway):
        response = await test_client.post("/checkout/orders/9999/payment")
        assert response.status_code == 404
        assert response.json()["error"]["message"] == "Order not found: 9999"

    @pytest.mark.api
    async def test_misconfigured_stripe_is_configuration_error(self, test_client, db_session, sample_order):
        from db_models import PaymentGateway

        db_session.add(PaymentGateway(name="Stripe", slug="stripe", driver="stripe", is_active=True, config={}))
        await db_session.commit()

        response = await test_client.post(f"/checkout/orders/{sample_order.id}/payment")
        assert response.status_code == 400
        body = response.json()
        assert body["error"]["code"] == "configuration"
        assert body["error"]["message"] == "Stripe secret key is not configured."
