# app/services/api.py

import os
import requests

# Base URL of the Finance Copilot backend
FASTAPI_URL = os.getenv("FINANCE_API_URL", "http://localhost:3000")
REQUEST_TIMEOUT = 30


def _auth_headers(access_token):
    return {"Authorization": f"Bearer {access_token}"}


def _handle(response):
    try:
        data = response.json()
    except ValueError:
        data = {}
    if response.ok:
        return data
    return {"error": data.get("error") or f"Status {response.status_code}"}


def _request(method, path, **kwargs):
    try:
        response = requests.request(method, f"{FASTAPI_URL}{path}", timeout=REQUEST_TIMEOUT, **kwargs)
    except requests.RequestException as e:
        return {"error": f"Server unreachable: {e}"}
    return _handle(response)


# -------------------------------
# Authentication-related functions
# -------------------------------

def register_user(username, email, password):
    """
    Creates an account and returns {token, user} on success.
    """
    return _request("POST", "/api/register", json={
        "username": username,
        "email": email,
        "password": password,
    })


def login_user(email, password):
    """
    Logs in a user and returns {token, user} on success.
    """
    return _request("POST", "/api/login", json={"email": email, "password": password})


# -------------------------
# Transactions and Summary
# -------------------------

def list_transactions(access_token):
    data = _request("GET", "/api/transactions", headers=_auth_headers(access_token))
    if data.get("error"):
        return data
    return data.get("transactions", [])


def add_transaction(access_token, description, amount, type, category, date):
    """
    Records an income or expense. `date` is an ISO date string.
    """
    payload = {
        "description": description,
        "amount": amount,
        "type": type,
        "category": category,
        "date": date,
    }
    return _request("POST", "/api/transactions", json=payload, headers=_auth_headers(access_token))


def get_summary(access_token):
    data = _request("GET", "/api/summary", headers=_auth_headers(access_token))
    if data.get("error"):
        return data
    return data.get("summary", {})


# -------------------------
# AI Advisor
# -------------------------

def send_chat_message(access_token, message):
    """
    Sends a question to the advisor and returns {success, message, timestamp}.
    """
    return _request("POST", "/api/chat", json={"message": message}, headers=_auth_headers(access_token))
