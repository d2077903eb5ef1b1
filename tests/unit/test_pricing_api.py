"""Unit tests for quote and charge settings API endpoints."""
import pytest


BIRYANI_QUOTE = {
    "items": [{"name": "Biryani", "quantity": 2, "unit_price": "250.00"}],
    "order_type": "delivery",
}


class TestQuoteAPI:
    """Test POST /api/orders/quote."""

    def test_quote_delivery(self, test_client):
        """Test quote returns the full calculation."""
        response = test_client.post("/api/orders/quote", json=BIRYANI_QUOTE)

        assert response.status_code == 200
        data = response.json()
        assert data["subtotal"] == "500.00"
        assert data["gst_amount"] == "25.00"
        assert data["delivery_charges"] == "40.00"
        assert data["service_charges"] == "10.00"
        assert data["total"] == "575.00"
        assert data["formatted_total"] == "₹575.00"

    def test_quote_breakdown(self, test_client):
        """Test quote includes the receipt breakdown."""
        response = test_client.post("/api/orders/quote", json=BIRYANI_QUOTE)

        breakdown = response.json()["breakdown"]
        assert breakdown["items"] == [
            {"name": "Biryani", "quantity": 2, "unit_price": "250.00", "line_total": "500.00"}
        ]
        assert breakdown["charges"] == {"delivery": "40.00", "service": "10.00"}
        assert breakdown["tax"] == {"gst_rate": "5", "gst_amount": "25.00"}

    def test_quote_pickup_ignores_delivery_override(self, test_client):
        """Test pickup quote with a delivery override."""
        payload = {**BIRYANI_QUOTE, "order_type": "pickup", "delivery_override": "75"}

        response = test_client.post("/api/orders/quote", json=payload)

        assert response.status_code == 200
        data = response.json()
        assert data["delivery_charges"] == "0.00"
        assert data["total"] == "535.00"

    def test_quote_with_overrides(self, test_client):
        """Test both overrides on a delivery quote."""
        payload = {**BIRYANI_QUOTE, "delivery_override": 20, "service_override": 0}

        response = test_client.post("/api/orders/quote", json=payload)

        data = response.json()
        assert data["delivery_charges"] == "20.00"
        assert data["service_charges"] == "0.00"
        assert data["total"] == "545.00"

    def test_quote_empty_items(self, test_client):
        """Test that an empty order returns 400 naming the field."""
        response = test_client.post(
            "/api/orders/quote", json={"items": [], "order_type": "pickup"}
        )

        assert response.status_code == 400
        assert response.json()["detail"]["field"] == "items"

    def test_quote_zero_quantity(self, test_client):
        """Test that a zero quantity returns 400."""
        payload = {
            "items": [{"name": "Biryani", "quantity": 0, "unit_price": "250.00"}],
            "order_type": "pickup",
        }

        response = test_client.post("/api/orders/quote", json=payload)

        assert response.status_code == 400
        assert response.json()["detail"]["field"] == "items[0].quantity"

    def test_quote_negative_price(self, test_client):
        """Test that a negative price returns 400."""
        payload = {
            "items": [{"name": "Biryani", "quantity": 1, "unit_price": "-1"}],
            "order_type": "pickup",
        }

        response = test_client.post("/api/orders/quote", json=payload)

        assert response.status_code == 400
        assert response.json()["detail"]["field"] == "items[0].unit_price"

    def test_quote_amount_too_large(self, test_client):
        """Test that an out-of-range price returns 400 instead of failing."""
        payload = {
            "items": [{"name": "Banquet", "quantity": 1, "unit_price": "1e27"}],
            "order_type": "pickup",
        }

        response = test_client.post("/api/orders/quote", json=payload)

        assert response.status_code == 400
        assert response.json()["detail"]["field"] == "subtotal"

    def test_quote_unknown_order_type(self, test_client):
        """Test that an unknown order type fails request validation."""
        response = test_client.post(
            "/api/orders/quote", json={**BIRYANI_QUOTE, "order_type": "dine_in"}
        )

        assert response.status_code == 422


class TestGSTAPI:
    """Test GET /api/pricing/gst."""

    def test_gst_breakdown(self, test_client):
        """Test GST on a plain amount."""
        response = test_client.get("/api/pricing/gst", params={"amount": "33.33"})

        assert response.status_code == 200
        data = response.json()
        assert data["gst_amount"] == "1.67"
        assert data["total_with_gst"] == "35.00"

    def test_gst_negative_amount(self, test_client):
        """Test that negative amounts return 400."""
        response = test_client.get("/api/pricing/gst", params={"amount": "-1"})

        assert response.status_code == 400


class TestChargeSettingsAPI:
    """Test charge settings endpoints."""

    def test_get_charge_settings(self, test_client):
        """Test reading current settings without logging in."""
        response = test_client.get("/api/settings/charges")

        assert response.status_code == 200
        assert response.json() == {
            "gst_rate_percent": "5",
            "delivery_charge": "40",
            "service_charge": "10",
        }

    def test_update_requires_auth(self, test_client, clean_auth_sessions):
        """Test that updating settings needs an admin session."""
        response = test_client.put("/api/settings/charges", json={"gst_rate_percent": "18"})

        assert response.status_code == 401

    def test_update_charge_settings(self, authenticated_client):
        """Test partial update of settings."""
        response = authenticated_client.put(
            "/api/settings/charges", json={"gst_rate_percent": "18"}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["gst_rate_percent"] == "18"
        assert data["delivery_charge"] == "40"

    def test_update_applies_to_next_quote(self, authenticated_client):
        """Test that a rate change is used by the very next quote."""
        authenticated_client.put("/api/settings/charges", json={"gst_rate_percent": "18"})

        response = authenticated_client.post("/api/orders/quote", json=BIRYANI_QUOTE)

        data = response.json()
        assert data["gst_amount"] == "90.00"
        assert data["total"] == "640.00"

    def test_update_negative_value(self, authenticated_client):
        """Test that negative charges are rejected with 400."""
        response = authenticated_client.put(
            "/api/settings/charges", json={"delivery_charge": "-10"}
        )

        assert response.status_code == 400
        assert response.json()["detail"]["field"] == "delivery_charge"

        current = authenticated_client.get("/api/settings/charges").json()
        assert current["delivery_charge"] == "40"


class TestUnexpectedErrors:
    """Test that backend failures surface as 500 responses."""

    def test_quote_backend_failure(self, failing_settings_client):
        """Test quote returns 500 when settings cannot be read."""
        response = failing_settings_client.post("/api/orders/quote", json=BIRYANI_QUOTE)

        assert response.status_code == 500
        assert "database is down" in response.json()["detail"]

    def test_gst_backend_failure(self, failing_settings_client):
        """Test GST breakdown returns 500 when settings cannot be read."""
        response = failing_settings_client.get("/api/pricing/gst", params={"amount": "100"})

        assert response.status_code == 500

    def test_get_charge_settings_backend_failure(self, failing_settings_client):
        """Test reading settings returns 500 when the backend fails."""
        response = failing_settings_client.get("/api/settings/charges")

        assert response.status_code == 500
        assert response.json()["detail"].startswith("Error reading charge settings")
