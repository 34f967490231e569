import uuid
from datetime import datetime, timezone
from typing import Iterable, Optional

import pytest
from fastapi.testclient import TestClient

from storefront.core.config import Settings
from storefront.core.rate_limit import FixedWindowRateLimiter
from storefront.main import create_app
from storefront.models.product import Product
from storefront.services.backend import BackendError

ADMIN_PASSWORD = "s3cret-admin"


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class FakeBackend:
    """In-memory stand-in for BackendClient with the same coroutine surface"""

    def __init__(self, products: Iterable[Product] = ()):
        self.products = {product.id: product for product in products}
        self.orders: dict[str, dict] = {}
        self.order_items: list[dict] = []
        self.custom_requests: dict[str, dict] = {}
        self.files: list[dict] = []
        self.product_lookups: list[list[str]] = []
        self.deleted_orders: list[str] = []
        self.deleted_custom_requests: list[str] = []
        self.fail_order_items = False
        self.fail_files = False
        self.closed = False

    async def close(self) -> None:
        self.closed = True

    # Catalog

    async def fetch_active_products(self, category=None, in_stock=None) -> list[Product]:
        return [
            product for product in self.products.values()
            if product.is_active
            and (category is None or product.category == category)
            and (in_stock is None or product.in_stock == in_stock)
        ]

    async def fetch_product_by_slug(self, slug: str) -> Optional[Product]:
        return next((p for p in self.products.values() if p.slug == slug), None)

    async def fetch_products_by_ids(self, product_ids) -> list[Product]:
        ids = sorted(set(product_ids))
        self.product_lookups.append(ids)
        return [self.products[pid] for pid in ids if pid in self.products]

    def _check_slug(self, slug: Optional[str], product_id: Optional[str] = None) -> None:
        if any(p.slug == slug and p.id != product_id for p in self.products.values()):
            raise BackendError(
                "products insert failed",
                status_code=409,
                body='duplicate key value violates unique constraint "products_slug_key"',
            )

    async def insert_product(self, row: dict) -> Product:
        self._check_slug(row["slug"])
        product = Product.model_validate({**row, "id": str(uuid.uuid4()), "created_at": _now()})
        self.products[product.id] = product
        return product

    async def update_product(self, product_id: str, fields: dict) -> Optional[Product]:
        product = self.products.get(product_id)
        if not product:
            return None
        if "slug" in fields:
            self._check_slug(fields["slug"], product_id)
        updated = Product.model_validate({**product.model_dump(mode="json"), **fields})
        self.products[product_id] = updated
        return updated

    async def delete_product(self, product_id: str) -> bool:
        return self.products.pop(product_id, None) is not None

    # Orders

    async def insert_order(self, row: dict) -> dict:
        order = {**row, "id": str(uuid.uuid4()), "created_at": _now()}
        self.orders[order["id"]] = order
        return order

    async def insert_order_items(self, rows: list[dict]) -> list[dict]:
        if self.fail_order_items:
            raise BackendError("order_items insert failed", status_code=500)
        stored = [{**row, "id": str(uuid.uuid4()), "created_at": _now()} for row in rows]
        self.order_items.extend(stored)
        return stored

    async def delete_order(self, order_id: str) -> None:
        self.deleted_orders.append(order_id)
        self.orders.pop(order_id, None)

    async def find_order_by_lookup(self, order_number: str, lookup_token: str) -> Optional[dict]:
        return next(
            (
                order for order in self.orders.values()
                if order["order_number"] == order_number and order["lookup_token"] == lookup_token
            ),
            None,
        )

    async def list_orders(self, statuses=None, limit=20, offset=0) -> list[dict]:
        rows = [o for o in self.orders.values() if not statuses or o["status"] in statuses]
        rows.sort(key=lambda o: o["created_at"], reverse=True)
        return rows[offset:offset + limit]

    async def get_order(self, order_id: str) -> Optional[dict]:
        return self.orders.get(order_id)

    async def list_order_items(self, order_id: str) -> list[dict]:
        items = []
        for item in self.order_items:
            if item["order_id"] != order_id:
                continue
            product = self.products.get(item["product_id"])
            items.append({
                **item,
                "products": {"name": product.name, "slug": product.slug} if product else None,
            })
        return items

    async def update_order_status(self, order_id: str, status: str, updated_at: str) -> Optional[dict]:
        order = self.orders.get(order_id)
        if not order:
            return None
        order.update(status=status, updated_at=updated_at)
        return order

    # Custom requests

    async def insert_custom_request(self, row: dict) -> dict:
        request = {**row, "id": str(uuid.uuid4()), "created_at": _now()}
        self.custom_requests[request["id"]] = request
        return request

    async def insert_files(self, rows: list[dict]) -> list[dict]:
        if self.fail_files:
            raise BackendError("files insert failed", status_code=500)
        stored = [{**row, "id": str(uuid.uuid4()), "created_at": _now()} for row in rows]
        self.files.extend(stored)
        return stored

    async def delete_custom_request(self, request_id: str) -> None:
        self.deleted_custom_requests.append(request_id)
        self.custom_requests.pop(request_id, None)

    async def list_custom_requests(self, statuses=None, limit=20, offset=0) -> list[dict]:
        rows = [r for r in self.custom_requests.values() if not statuses or r["status"] in statuses]
        rows.sort(key=lambda r: r["created_at"], reverse=True)
        return rows[offset:offset + limit]

    async def get_custom_request(self, request_id: str) -> Optional[dict]:
        return self.custom_requests.get(request_id)

    async def list_files(self, owner_type: str, owner_id: str) -> list[dict]:
        return [
            f for f in self.files
            if f["owner_type"] == owner_type and f["owner_id"] == owner_id
        ]

    async def update_custom_request_status(
        self,
        request_id: str,
        status: str,
        updated_at: str,
    ) -> Optional[dict]:
        request = self.custom_requests.get(request_id)
        if not request:
            return None
        request.update(status=status, updated_at=updated_at)
        return request

    # Storage

    async def create_signed_upload_url(self, bucket, path, expires_in, content_type) -> str:
        return f"http://backend.test/storage/v1/object/upload/sign/{bucket}/{path}?token=up"

    async def create_signed_download_url(self, bucket, path, expires_in) -> str:
        return f"http://backend.test/storage/v1/object/sign/{bucket}/{path}?token=down"


class FakeNotifier:
    def __init__(self):
        self.messages: list[str] = []
        self.closed = False

    async def send(self, message: str) -> bool:
        self.messages.append(message)
        return True

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def products() -> list[Product]:
    return [
        Product(
            id="prod-tee",
            slug="kaos-polos",
            name="Kaos Polos",
            price_cents=85_000,
            category="kaos",
            sizes=["S", "M", "L", "XL"],
            colors=[{"code": "black", "name": "Hitam"}, {"code": "white", "name": "Putih"}],
            is_customizable=True,
        ),
        Product(
            id="prod-hoodie",
            slug="hoodie",
            name="Hoodie",
            price_cents=150_000,
            category="hoodie",
            sizes=["M", "L"],
            colors=[{"code": "navy", "name": "Navy"}],
        ),
        Product(
            id="prod-retired",
            slug="kaos-lama",
            name="Kaos Lama",
            price_cents=50_000,
            is_active=False,
        ),
    ]


@pytest.fixture
def backend(products) -> FakeBackend:
    return FakeBackend(products)


@pytest.fixture
def notifier() -> FakeNotifier:
    return FakeNotifier()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        supabase_url="http://backend.test",
        supabase_service_role_key="service-key",
        admin_password=ADMIN_PASSWORD,
        slack_webhook_url=None,
        rate_limit_enabled=True,
    )


@pytest.fixture
def app(settings, backend, notifier):
    return create_app(
        settings=settings,
        backend=backend,
        notifier=notifier,
        rate_limiter=FixedWindowRateLimiter(),
    )


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def admin_client(client):
    response = client.post("/api/admin/login", json={"password": ADMIN_PASSWORD})
    assert response.status_code == 200
    return client


@pytest.fixture
def filled_cart(client):
    """Cart holding 12 black M tees with a front design; returns (cart_id, key)"""
    cart_id = client.post("/api/cart").json()["cart"]["cart_id"]
    response = client.post(
        f"/api/cart/{cart_id}/items",
        json={
            "product_id": "prod-tee",
            "size": "M",
            "color": "black",
            "quantity": 12,
            "customization": {"parts": {"front": {"text": "KAOS EUY"}}},
        },
    )
    assert response.status_code == 200
    return cart_id, response.json()["cart"]["lines"][0]["key"]


@pytest.fixture
def checkout_body():
    def build(cart_id: str, keys: list[str], **overrides) -> dict:
        body = {
            "cart_id": cart_id,
            "selected_keys": keys,
            "order_type": "bulk",
            "contact": {"name": "Budi Santoso", "phone": "081234567890", "email": "budi@example.com"},
            "shipping_address": {"address_line1": "Jl. Braga No. 1", "city": "Bandung", "country": "ID"},
            "notes": "Kirim sebelum tanggal 20",
        }
        body.update(overrides)
        return body

    return build


@pytest.fixture
def placed_order(client, filled_cart, checkout_body) -> dict:
    cart_id, key = filled_cart
    response = client.post("/api/orders", json=checkout_body(cart_id, [key]))
    assert response.status_code == 201
    return response.json()
