import pytest
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient
from ordering.api.routes import dashboard_router, router
from ordering.domain import ordering

from shared.access import FakeTokenVerifier, set_verifier
from shared.access.port import Caller
from shared.errors import register_exception_handlers


@pytest.fixture()
def verifier():
    fake = FakeTokenVerifier()
    set_verifier(fake)
    return fake


@pytest.fixture()
def client(verifier):
    app = FastAPI()
    register_exception_handlers(app)

    @app.middleware("http")
    async def domain_context_middleware(request: Request, call_next):
        with ordering.domain_context():
            return await call_next(request)

    app.include_router(router)
    app.include_router(dashboard_router)
    return TestClient(app)


def _auth(verifier, caller):
    return {"Authorization": f"Bearer {verifier.issue(caller)}"}


@pytest.fixture()
def customer_headers(verifier):
    return _auth(verifier, Caller(id="user-001", email="jane@example.com", role_type="authenticated"))


@pytest.fixture()
def other_customer_headers(verifier):
    return _auth(verifier, Caller(id="user-002", email="john@example.com", role_type="authenticated"))


@pytest.fixture()
def admin_headers(verifier):
    return _auth(verifier, Caller(id="admin-001", role_type="admin", role_name="Admin"))


@pytest.fixture()
def operator_headers(verifier):
    return _auth(verifier, Caller(id="ops-001", role_type="authenticated", role_code="operator"))


@pytest.fixture()
def order_payload(items_data, shipping_address):
    return {
        "items": items_data,
        "shipping_address": shipping_address,
        "payment_method": "card",
    }


@pytest.fixture()
def create_order(client, customer_headers, order_payload):
    """Factory: POST /orders as the customer and return the order body."""

    def _create(**overrides):
        response = client.post("/orders", json={**order_payload, **overrides}, headers=customer_headers)
        assert response.status_code == 201
        return response.json()["data"]

    return _create


@pytest.fixture()
def app_client(verifier):
    """TestClient over the application as served, middleware included."""
    from app import app

    return TestClient(app)
