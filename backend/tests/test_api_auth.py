"""
Authentication, authorization and staff management over HTTP.

Verifies:
- Protected endpoints return 401 without a token
- Roles are denied capabilities they do not hold (403)
- Login/logout lifecycle and staff management guards
"""

import pytest

from conftest import TEST_PASSWORD, auth_headers, get_auth_token


class TestUnauthenticatedAccess:

    @pytest.mark.parametrize(
        "method,path",
        [
            ("GET", "/api/auth/me"),
            ("GET", "/api/staff"),
            ("GET", "/api/members"),
            ("POST", "/api/members/1/deposit"),
            ("GET", "/api/products"),
            ("GET", "/api/pos/cart"),
            ("POST", "/api/pos/checkout"),
            ("GET", "/api/transactions"),
            ("GET", "/api/reports/dashboard"),
            ("GET", "/api/assistant/context"),
        ],
    )
    def test_requires_auth(self, client, method, path):
        resp = getattr(client, method.lower())(path)
        assert resp.status_code == 401, f"{method} {path} returned {resp.status_code}"

    def test_garbage_token(self, client):
        resp = client.get("/api/auth/me", headers=auth_headers("not-a-token"))
        assert resp.status_code == 401

    def test_health_is_public(self, client):
        assert client.get("/api/health").json["status"] == "ok"


class TestCapabilityDenials:

    @pytest.mark.parametrize(
        "method,path",
        [
            ("GET", "/api/pos/cart"),
            ("POST", "/api/members/1/deposit"),
            ("GET", "/api/members"),
            ("GET", "/api/transactions"),
            ("GET", "/api/staff"),
        ],
    )
    def test_inventory_role_denied(self, client, inventory_headers, method, path):
        resp = getattr(client, method.lower())(path, headers=inventory_headers)
        assert resp.status_code == 403
        assert "required_capability" in resp.json

    @pytest.mark.parametrize(
        "method,path",
        [
            ("POST", "/api/products"),
            ("PATCH", "/api/products/1"),
            ("GET", "/api/reports/daily-sales"),
            ("GET", "/api/staff"),
        ],
    )
    def test_sales_role_denied(self, client, sales_headers, method, path):
        resp = getattr(client, method.lower())(path, json={}, headers=sales_headers)
        assert resp.status_code == 403


class TestLoginLifecycle:

    def test_login_returns_token_and_capabilities(self, client, sales_user):
        resp = client.post("/api/auth/login", json={"username": "SALES", "password": TEST_PASSWORD})
        assert resp.status_code == 200
        assert resp.json["token"]
        assert "USE_POS" in resp.json["staff"]["capabilities"]
        assert "EDIT_INVENTORY" not in resp.json["staff"]["capabilities"]

    def test_wrong_password(self, client, sales_user):
        resp = client.post("/api/auth/login", json={"username": "sales", "password": "Wrong1234"})
        assert resp.status_code == 401

    def test_missing_fields(self, client):
        assert client.post("/api/auth/login", json={"username": "sales"}).status_code == 400

    def test_logout_revokes_token(self, client, sales_user):
        headers = auth_headers(get_auth_token(client, "sales"))
        assert client.get("/api/auth/me", headers=headers).json["staff"]["username"] == "sales"

        assert client.post("/api/auth/logout", headers=headers).status_code == 200
        assert client.get("/api/auth/me", headers=headers).status_code == 401

    def test_deactivated_staff_loses_session(self, client, admin_headers, sales_user):
        headers = auth_headers(get_auth_token(client, "sales"))
        resp = client.patch(f"/api/staff/{sales_user.id}", json={"is_active": False}, headers=admin_headers)
        assert resp.status_code == 200
        assert client.get("/api/auth/me", headers=headers).status_code == 401


class TestStaffManagement:

    def test_create_and_list(self, client, admin_headers):
        resp = client.post("/api/staff", json={
            "username": "Pablo", "name": "Pablo", "password": "Secret123", "role": "inventory",
        }, headers=admin_headers)
        assert resp.status_code == 201
        assert resp.json["staff"]["username"] == "pablo"
        assert resp.json["staff"]["role"] == "INVENTORY"

        usernames = [s["username"] for s in client.get("/api/staff", headers=admin_headers).json["items"]]
        assert set(usernames) == {"admin", "pablo"}

    @pytest.mark.parametrize("payload", [
        {"username": "x", "name": "X", "password": "short1", "role": "SALES"},
        {"username": "x", "name": "X", "password": "Secret123", "role": "JANITOR"},
        {"username": "admin", "name": "Dup", "password": "Secret123", "role": "SALES"},
    ])
    def test_create_rejects_bad_input(self, client, admin_headers, payload):
        assert client.post("/api/staff", json=payload, headers=admin_headers).status_code == 400

    def test_last_admin_is_protected(self, client, admin_headers, admin_user):
        resp = client.patch(f"/api/staff/{admin_user.id}", json={"role": "SALES"}, headers=admin_headers)
        assert resp.status_code == 400
        assert client.delete(f"/api/staff/{admin_user.id}", headers=admin_headers).status_code == 400

    def test_delete_staff(self, client, admin_headers, sales_user):
        assert client.delete(f"/api/staff/{sales_user.id}", headers=admin_headers).status_code == 200
        assert client.delete(f"/api/staff/{sales_user.id}", headers=admin_headers).status_code == 404

    def test_staff_with_ledger_history_is_deactivated(self, client, admin_headers, sales_user, pos, make_member):
        member = make_member()
        pos.wallet.deposit(member.id, "5", actor_staff_id=sales_user.id)

        assert client.delete(f"/api/staff/{sales_user.id}", headers=admin_headers).status_code == 200
        staff = {s["username"]: s for s in client.get("/api/staff", headers=admin_headers).json["items"]}
        assert staff["sales"]["is_active"] is False

    def test_update_unknown_fields(self, client, admin_headers, sales_user):
        resp = client.patch(f"/api/staff/{sales_user.id}", json={"username": "hacker"}, headers=admin_headers)
        assert resp.status_code == 400
