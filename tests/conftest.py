"""Shared test fixtures and the in-process fake API for the client test suite."""

from __future__ import annotations

import os
from collections import Counter
from pathlib import Path

import httpx
import pytest
from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from nexen_client.app import NexenClient
from nexen_client.cache.store import QueryCache
from nexen_client.config.invalidation_rules import InvalidationTable, load_invalidation_rules
from nexen_client.config.settings import ClientSettings
from nexen_client.integration.api_client import ApiClient
from nexen_client.session import SessionStore

BASE_URL = "http://testserver/api"
BUNDLED_RULES = Path(__file__).resolve().parents[1] / "nexen_client" / "config" / "invalidation_rules.yaml"
TOKEN = "tok-abc123"


# ---------------------------------------------------------------------------
# Ensure required env vars are set for ClientSettings in tests
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _set_test_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Set minimal env vars so ClientSettings can be instantiated in tests."""
    defaults = {
        "NEXEN_API_BASE_URL": BASE_URL,
        "NEXEN_SESSION_PATH": str(tmp_path / "session.json"),
    }
    for key, value in defaults.items():
        if key not in os.environ:
            monkeypatch.setenv(key, value)


# ---------------------------------------------------------------------------
# In-process fake API
# ---------------------------------------------------------------------------

def _ok(data: object = None, message: str | None = None, status_code: int = 200) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": True, "message": message, "data": data},
    )


def _fail(status_code: int, message: str, errors: dict | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message, "errors": errors},
    )


def _page(items: list) -> dict:
    return {
        "data": items,
        "current_page": 1,
        "last_page": 1,
        "per_page": 15,
        "total": len(items),
        "next_page_url": None,
    }


class FakeBackend:
    """Minimal stand-in for the REST API, served through ``httpx.ASGITransport``.

    ``hits`` counts requests per ``"METHOD /path"`` so tests can assert how
    many network calls the cache actually made.
    """

    def __init__(self) -> None:
        self.hits: Counter = Counter()
        self.suppliers: dict[int, dict] = {
            1: {"id": 1, "name": "Acme Supplies", "supplier_code": "SUP-001", "status": "active"},
            2: {"id": 2, "name": "Bolt Traders", "supplier_code": "SUP-002", "status": "active"},
            3: {"id": 3, "name": "Crane Wholesale", "supplier_code": "SUP-003", "status": "inactive"},
        }
        self.contacts: dict[int, dict] = {
            1: {"id": 1, "name": "Existing Customer", "email": "existing@example.com", "type": "customer"},
        }
        self.sales: list[dict] = []
        self.alerts = 0
        self.app = self._build_app()

    def transport(self) -> httpx.ASGITransport:
        return httpx.ASGITransport(app=self.app)

    def _build_app(self) -> FastAPI:
        app = FastAPI()
        router = APIRouter(prefix="/api")
        backend = self

        @app.middleware("http")
        async def count_hits(request: Request, call_next):
            backend.hits[f"{request.method} {request.url.path.removeprefix('/api')}"] += 1
            return await call_next(request)

        # --- auth -------------------------------------------------------

        @router.post("/login")
        async def login(request: Request) -> JSONResponse:
            body = await request.json()
            if body.get("password") != "secret":
                return _fail(401, "Invalid credentials")
            user = {"id": 7, "name": "Ada", "email": body.get("email")}
            return _ok({"user": user, "token": TOKEN}, "Login successful")

        @router.post("/logout")
        async def logout() -> JSONResponse:
            return _ok(None, "Logged out")

        @router.get("/user")
        async def me(request: Request) -> JSONResponse:
            if request.headers.get("authorization") != f"Bearer {TOKEN}":
                return _fail(401, "Unauthenticated.")
            return _ok({"user": {"id": 7, "name": "Ada"}})

        # --- suppliers --------------------------------------------------

        @router.get("/suppliers")
        async def list_suppliers(status: str | None = None) -> JSONResponse:
            items = [s for s in backend.suppliers.values() if status is None or s["status"] == status]
            return _ok(_page(items))

        @router.post("/suppliers")
        async def create_supplier(request: Request) -> JSONResponse:
            body = await request.json()
            if not body.get("name"):
                return _fail(422, "The given data was invalid.", {"name": ["The name field is required."]})
            new_id = max(backend.suppliers, default=0) + 1
            backend.suppliers[new_id] = {"id": new_id, "status": "active", **body}
            return _ok(backend.suppliers[new_id], "Supplier created", status_code=201)

        @router.get("/suppliers/export")
        async def export_suppliers(format: str = "csv") -> JSONResponse:
            return _ok({"content": "aWQsbmFtZQ==", "filename": f"suppliers.{format}"})

        @router.get("/suppliers/{supplier_id}")
        async def get_supplier(supplier_id: int) -> JSONResponse:
            if supplier_id not in backend.suppliers:
                return _fail(404, "Supplier not found")
            return _ok(backend.suppliers[supplier_id])

        @router.put("/suppliers/{supplier_id}")
        async def update_supplier(supplier_id: int, request: Request) -> JSONResponse:
            body = await request.json()
            if supplier_id not in backend.suppliers:
                return _fail(404, "Supplier not found")
            if "name" in body and not body["name"]:
                return _fail(422, "The given data was invalid.", {"name": ["The name field is required."]})
            backend.suppliers[supplier_id].update(body)
            return _ok(backend.suppliers[supplier_id], "Supplier updated")

        @router.delete("/suppliers/{supplier_id}")
        async def delete_supplier(supplier_id: int) -> JSONResponse:
            if backend.suppliers.pop(supplier_id, None) is None:
                return _fail(404, "Supplier not found")
            return _ok(None, "Supplier deleted")

        @router.post("/suppliers/bulk")
        async def bulk_suppliers(request: Request) -> JSONResponse:
            body = await request.json()
            for supplier_id in body["supplier_ids"]:
                if body["action"] == "delete":
                    backend.suppliers.pop(supplier_id, None)
                elif supplier_id in backend.suppliers:
                    backend.suppliers[supplier_id]["status"] = (
                        "active" if body["action"] == "activate" else "inactive"
                    )
            return _ok(None, "Bulk operation completed")

        # --- crm / sales ------------------------------------------------

        @router.get("/crm/contacts")
        async def list_contacts() -> JSONResponse:
            return _ok(_page(list(backend.contacts.values())))

        @router.get("/sales/transactions")
        async def list_sales() -> JSONResponse:
            return _ok(_page(backend.sales))

        @router.post("/sales/transactions")
        async def process_sale(request: Request) -> JSONResponse:
            body = await request.json()
            name = body.get("customer_name")
            contact = next((c for c in backend.contacts.values() if c["name"] == name), None)
            if name and contact is None:
                contact_id = max(backend.contacts, default=0) + 1
                contact = {"id": contact_id, "name": name, "type": "customer"}
                backend.contacts[contact_id] = contact
            sale = {
                "id": len(backend.sales) + 1,
                "transaction_number": f"TXN-{len(backend.sales) + 1:04d}",
                "customer_name": name,
                "total_amount": body.get("total_amount", 0),
                "status": "completed",
                "contact_id": contact["id"] if contact else None,
            }
            backend.sales.append(sale)
            return _ok(sale, "Transaction processed", status_code=201)

        # --- dashboard --------------------------------------------------

        @router.get("/dashboard/critical-alerts")
        async def critical_alerts() -> JSONResponse:
            backend.alerts += 1
            return _ok({"count": backend.alerts})

        # --- malformed responses ----------------------------------------

        @router.get("/malformed/list")
        async def malformed_list() -> JSONResponse:
            return JSONResponse(content=[1, 2, 3])

        @router.get("/malformed/text")
        async def malformed_text() -> PlainTextResponse:
            return PlainTextResponse("<html>gateway</html>")

        @router.get("/malformed/envelope")
        async def malformed_envelope() -> JSONResponse:
            return JSONResponse(content={"data": {"id": 1}})

        @router.get("/boom")
        async def boom() -> PlainTextResponse:
            return PlainTextResponse("upstream exploded", status_code=500)

        app.include_router(router)
        return app


# ---------------------------------------------------------------------------
# Component fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def settings(tmp_path: Path) -> ClientSettings:
    """Test settings with safe defaults."""
    return ClientSettings(
        api_base_url=BASE_URL,
        session_path=str(tmp_path / "session.json"),
        stale_time_seconds=300,
        gc_time_seconds=600,
    )


@pytest.fixture
def rules() -> InvalidationTable:
    return load_invalidation_rules(BUNDLED_RULES)


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def session(tmp_path: Path) -> SessionStore:
    return SessionStore(tmp_path / "session.json")


@pytest.fixture
def api(backend: FakeBackend, session: SessionStore) -> ApiClient:
    return ApiClient(BASE_URL, session=session, transport=backend.transport())


@pytest.fixture
def cache() -> QueryCache:
    return QueryCache(stale_time=300, gc_time=600)


@pytest.fixture
def nexen(settings: ClientSettings, backend: FakeBackend) -> NexenClient:
    return NexenClient.from_settings(settings, transport=backend.transport())


@pytest.fixture
def token() -> str:
    """Bearer token the fake API issues on a successful login."""
    return TOKEN
