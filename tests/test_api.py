"""Tests for the HTTP surface."""
from datetime import timedelta
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from finance_copilot.api.deps import get_ledger, get_provider
from finance_copilot.core.errors import InternalError
from finance_copilot.core.sessions import SessionIssuer


def add_transaction(client, headers, **overrides):
    payload = {
        "description": "Paycheck",
        "amount": 100,
        "type": "income",
        "category": "salary",
        "date": "2024-01-01",
    }
    payload.update(overrides)
    return client.post("/api/transactions", json=payload, headers=headers)


class TestHealth:

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "success"
        assert "POST /api/chat" in data["endpoints"]

    def test_unknown_route(self, client):
        response = client.get("/api/nope")
        assert response.status_code == 404
        assert response.json() == {"error": "Endpoint not found"}


class TestAuthEndpoints:

    def test_register(self, client):
        response = client.post("/api/register", json={
            "username": "alice", "email": "alice@x.com", "password": "secret1",
        })

        assert response.status_code == 201
        data = response.json()
        assert data["token"]
        assert data["user"]["username"] == "alice"
        assert data["user"]["email"] == "alice@x.com"
        assert "password" not in data["user"]

    def test_register_missing_field(self, client):
        response = client.post("/api/register", json={"username": "alice", "email": "a@x.com"})

        assert response.status_code == 400
        assert response.json()["error"] == "All fields are required"

    def test_register_short_password(self, client):
        response = client.post("/api/register", json={
            "username": "alice", "email": "alice@x.com", "password": "123",
        })

        assert response.status_code == 400
        assert response.json()["field"] == "password"

    def test_register_duplicate_email(self, client, auth_headers):
        response = client.post("/api/register", json={
            "username": "alice2", "email": "alice@x.com", "password": "secret1",
        })

        assert response.status_code == 400
        assert response.json() == {"error": "Email already exists", "field": "email"}

    def test_register_duplicate_username(self, client, auth_headers):
        response = client.post("/api/register", json={
            "username": "alice", "email": "other@x.com", "password": "secret1",
        })

        assert response.status_code == 400
        assert response.json() == {"error": "Username already exists", "field": "username"}

    def test_login(self, client, auth_headers):
        response = client.post("/api/login", json={"email": "alice@x.com", "password": "secret1"})

        assert response.status_code == 200
        data = response.json()
        assert data["token"]
        assert data["user"]["username"] == "alice"

    def test_login_with_same_input_as_register(self, client):
        body = {"username": "al", "email": " al@x.com ", "password": "secret1"}

        registered = client.post("/api/register", json=body)
        login = client.post("/api/login", json={"email": body["email"], "password": body["password"]})

        assert registered.status_code == 201
        assert login.status_code == 200
        assert login.json()["user"]["id"] == registered.json()["user"]["id"]

    def test_login_failures_look_the_same(self, client, auth_headers):
        wrong_password = client.post("/api/login", json={"email": "alice@x.com", "password": "nope123"})
        unknown_email = client.post("/api/login", json={"email": "ghost@x.com", "password": "secret1"})

        assert wrong_password.status_code == unknown_email.status_code == 400
        assert wrong_password.json() == unknown_email.json() == {"error": "Invalid email or password"}

    def test_login_missing_fields(self, client):
        response = client.post("/api/login", json={"email": "alice@x.com"})

        assert response.status_code == 400
        assert response.json()["error"] == "Email and password are required"

    def test_malformed_body(self, client):
        response = client.post(
            "/api/login", content="{not json", headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 400


class TestTokenChecks:

    @pytest.mark.parametrize("method,path", [
        ("get", "/api/transactions"),
        ("post", "/api/transactions"),
        ("get", "/api/summary"),
        ("post", "/api/chat"),
    ])
    def test_missing_token(self, client, method, path):
        response = getattr(client, method)(path)

        assert response.status_code == 401
        assert response.json() == {"error": "Access token required"}

    def test_invalid_token(self, client):
        response = client.get("/api/summary", headers={"Authorization": "Bearer garbage"})

        assert response.status_code == 403
        assert response.json() == {"error": "Invalid token"}

    def test_expired_token(self, app, client, auth_headers):
        token = SessionIssuer(app.state.settings.jwt_secret_key).issue(1, "alice", expires_delta=timedelta(seconds=-5))

        response = client.get("/api/transactions", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 403


class TestTransactionEndpoints:

    def test_add_and_list(self, client, auth_headers):
        created = add_transaction(client, auth_headers)

        assert created.status_code == 201
        transaction = created.json()["transaction"]
        assert transaction["id"]
        assert transaction["amount"] == 100
        assert transaction["type"] == "income"

        listed = client.get("/api/transactions", headers=auth_headers)
        assert listed.status_code == 200
        assert [t["id"] for t in listed.json()["transactions"]] == [transaction["id"]]

    def test_empty_list(self, client, auth_headers):
        response = client.get("/api/transactions", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {"transactions": []}

    @pytest.mark.parametrize("overrides,field", [
        ({"amount": 0}, "amount"),
        ({"amount": -5}, "amount"),
        ({"type": "transfer"}, "type"),
        ({"description": ""}, "description"),
        ({"date": "yesterday"}, "date"),
        ({"amount": "lots"}, "amount"),
    ])
    def test_invalid_transaction(self, client, auth_headers, overrides, field):
        response = add_transaction(client, auth_headers, **overrides)

        assert response.status_code == 400
        assert response.json()["field"] == field
        assert client.get("/api/transactions", headers=auth_headers).json()["transactions"] == []

    def test_users_do_not_see_each_other(self, client, auth_headers):
        add_transaction(client, auth_headers)
        bob = client.post("/api/register", json={
            "username": "bob", "email": "bob@x.com", "password": "hunter22",
        }).json()
        bob_headers = {"Authorization": f"Bearer {bob['token']}"}

        assert client.get("/api/transactions", headers=bob_headers).json()["transactions"] == []
        assert client.get("/api/summary", headers=bob_headers).json()["summary"]["transactionCount"] == 0


class TestSummaryEndpoint:

    def test_empty_summary(self, client, auth_headers):
        response = client.get("/api/summary", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {"summary": {
            "totalIncome": 0, "totalExpenses": 0, "balance": 0, "transactionCount": 0,
        }}

    def test_register_add_and_summarize(self, client, auth_headers):
        assert add_transaction(client, auth_headers, amount=100, type="income",
                               category="salary", date="2024-01-01").status_code == 201
        assert add_transaction(client, auth_headers, description="Groceries", amount=40,
                               type="expense", category="food", date="2024-01-02").status_code == 201

        response = client.get("/api/summary", headers=auth_headers)

        assert response.json()["summary"] == {
            "totalIncome": 100, "totalExpenses": 40, "balance": 60, "transactionCount": 2,
        }


class TestChatEndpoint:

    def test_empty_message(self, client, auth_headers):
        response = client.post("/api/chat", json={"message": "   "}, headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["error"] == "Message is required"

    def test_fallback_without_api_key(self, client, auth_headers):
        response = client.post("/api/chat", json={"message": "how do I budget?"}, headers=auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert "50/30/20" in data["message"]
        assert "AI service temporarily unavailable" in data["message"]
        assert data["timestamp"]

    def test_provider_answer(self, app, client, auth_headers):
        provider = MagicMock()
        provider.complete.return_value = "Cut back on takeout."
        app.dependency_overrides[get_provider] = lambda: provider

        response = client.post("/api/chat", json={"message": "ideas?"}, headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["message"] == "Cut back on takeout."


class TestServerErrors:

    def test_storage_failure_is_generic(self, app, client, auth_headers):
        ledger = MagicMock()
        ledger.list_by_user.side_effect = InternalError("Failed to fetch transactions")
        app.dependency_overrides[get_ledger] = lambda: ledger

        response = client.get("/api/transactions", headers=auth_headers)

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to fetch transactions"}

    def test_unexpected_error_hides_details(self, app, auth_headers):
        ledger = MagicMock()
        ledger.list_by_user.side_effect = RuntimeError("disk /var/db exploded")
        app.dependency_overrides[get_ledger] = lambda: ledger

        with TestClient(app, raise_server_exceptions=False) as client:
            response = client.get("/api/transactions", headers=auth_headers)

        assert response.status_code == 500
        assert response.json() == {"error": "Internal server error"}
        assert "exploded" not in response.text

    def test_chat_storage_failure(self, app, client, auth_headers):
        ledger = MagicMock()
        ledger.list_by_user.side_effect = InternalError("Failed to fetch transactions")
        provider = MagicMock()
        app.dependency_overrides[get_ledger] = lambda: ledger
        app.dependency_overrides[get_provider] = lambda: provider

        response = client.post("/api/chat", json={"message": "ideas?"}, headers=auth_headers)

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to fetch transactions"}
        provider.complete.assert_not_called()

    def test_chat_provider_failure_falls_back(self, app, client, auth_headers):
        provider = MagicMock()
        provider.complete.side_effect = RuntimeError("upstream timed out")
        app.dependency_overrides[get_provider] = lambda: provider

        response = client.post("/api/chat", json={"message": "how should I save?"}, headers=auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert "AI service temporarily unavailable" in data["message"]
        assert "timed out" not in data["message"]
        provider.complete.assert_called_once()
