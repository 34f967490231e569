"""
Backend API Client

HTTP client for the managed backend: PostgREST-style table access under
``/rest/v1`` and object storage under ``/storage/v1``. Every call is made
with the service credential, so this client must only run server-side.
"""

import logging
from typing import Any, Iterable, Optional
from urllib.parse import quote

import httpx

from ..models.product import Product

logger = logging.getLogger(__name__)

PRODUCT_COLUMNS = (
    "id,slug,name,description,price_cents,currency,images,sizes,colors,"
    "category,in_stock,is_active,is_customizable,created_at"
)
ORDER_COLUMNS = (
    "id,order_number,order_type,buyer_name,buyer_phone,buyer_email,shipping_address,"
    "notes,status,subtotal_cents,discount_cents,shipping_cents,total_cents,created_at"
)
CUSTOM_REQUEST_COLUMNS = (
    "id,request_number,requester_name,whatsapp,org_name,product_types,"
    "quantity_estimate,deadline_date,notes,status,created_at"
)


class BackendError(Exception):
    """Backend call failed or returned an unusable response"""

    def __init__(self, message: str, status_code: Optional[int] = None, body: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.body = body

    def __str__(self) -> str:
        parts = [self.args[0]]
        if self.status_code is not None:
            parts.append(f"status={self.status_code}")
        if self.body:
            parts.append(f"body={self.body}")
        return " ".join(parts)


def _in_filter(values: Iterable[str]) -> str:
    values = list(values)
    if len(values) == 1:
        return f"eq.{values[0]}"
    return f"in.({','.join(values)})"


class BackendClient:
    """
    Client for the managed backend.

    Usage:
        backend = BackendClient(url, service_key)
        products = await backend.fetch_active_products()
        await backend.close()
    """

    def __init__(
        self,
        base_url: str,
        service_key: str,
        timeout: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize backend client.

        Args:
            base_url: Project URL of the managed backend
            service_key: Service credential sent as apikey and bearer token
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.base_url = base_url.rstrip("/")
        self._http_client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
            headers={
                "apikey": service_key,
                "Authorization": f"Bearer {service_key}",
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
        )

    async def close(self) -> None:
        """Close HTTP client"""
        await self._http_client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        params: Optional[dict[str, str]] = None,
        body: Any = None,
        returning: bool = False,
    ) -> Any:
        """Make a request and decode the JSON response"""
        headers = {"Prefer": "return=representation"} if returning else None

        try:
            response = await self._http_client.request(
                method=method,
                url=path,
                params=params,
                json=body,
                headers=headers,
            )
        except httpx.HTTPError as e:
            logger.error(f"Backend request error: {method} {path} - {e}")
            raise BackendError(f"Backend request failed: {e}") from e

        if response.status_code >= 400:
            logger.error(f"Backend request failed: {response.status_code} - {response.text}")
            raise BackendError(
                "Backend request failed.",
                status_code=response.status_code,
                body=response.text,
            )

        if not response.content:
            return None
        return response.json()

    async def _rest(self, method: str, table: str, **kwargs) -> Any:
        return await self._request(method, f"/rest/v1/{table}", **kwargs)

    async def _storage(self, method: str, path: str, **kwargs) -> Any:
        return await self._request(method, f"/storage/v1/{path}", **kwargs)

    async def _insert(self, table: str, rows: Any) -> list[dict]:
        data = await self._rest("POST", table, body=rows, returning=True)
        if not data:
            raise BackendError(f"{table} insert returned no rows")
        return data

    # ==================== Catalog ====================

    async def fetch_active_products(
        self,
        category: Optional[str] = None,
        in_stock: Optional[bool] = None,
    ) -> list[Product]:
        """Active products, newest first, optionally narrowed by category and stock"""
        params = {
            "select": PRODUCT_COLUMNS,
            "is_active": "eq.true",
            "order": "created_at.desc",
        }
        if category:
            params["category"] = f"eq.{category}"
        if in_stock is not None:
            params["in_stock"] = f"eq.{str(in_stock).lower()}"
        rows = await self._rest("GET", "products", params=params)
        return [Product.model_validate(row) for row in rows or []]

    async def fetch_product_by_slug(self, slug: str) -> Optional[Product]:
        rows = await self._rest(
            "GET",
            "products",
            params={"select": PRODUCT_COLUMNS, "slug": f"eq.{slug}", "limit": "1"},
        )
        if not rows:
            return None
        return Product.model_validate(rows[0])

    async def fetch_products_by_ids(self, product_ids: Iterable[str]) -> list[Product]:
        ids = sorted(set(product_ids))
        if not ids:
            return []
        rows = await self._rest(
            "GET",
            "products",
            params={"select": PRODUCT_COLUMNS, "id": _in_filter(ids)},
        )
        return [Product.model_validate(row) for row in rows or []]

    async def insert_product(self, row: dict) -> Product:
        return Product.model_validate((await self._insert("products", row))[0])

    async def update_product(self, product_id: str, fields: dict) -> Optional[Product]:
        rows = await self._rest(
            "PATCH",
            "products",
            params={"id": f"eq.{product_id}", "select": PRODUCT_COLUMNS},
            body=fields,
            returning=True,
        )
        return Product.model_validate(rows[0]) if rows else None

    async def delete_product(self, product_id: str) -> bool:
        """Delete a product; False when no row had this id"""
        rows = await self._rest(
            "DELETE",
            "products",
            params={"id": f"eq.{product_id}", "select": "id"},
            returning=True,
        )
        return bool(rows)

    # ==================== Orders ====================

    async def insert_order(self, row: dict) -> dict:
        return (await self._insert("orders", row))[0]

    async def insert_order_items(self, rows: list[dict]) -> list[dict]:
        return await self._insert("order_items", rows)

    async def delete_order(self, order_id: str) -> None:
        await self._rest("DELETE", "orders", params={"id": f"eq.{order_id}"})

    async def find_order_by_lookup(self, order_number: str, lookup_token: str) -> Optional[dict]:
        rows = await self._rest(
            "GET",
            "orders",
            params={
                "select": ORDER_COLUMNS,
                "order_number": f"eq.{order_number}",
                "lookup_token": f"eq.{lookup_token}",
                "limit": "1",
            },
        )
        return rows[0] if rows else None

    async def list_orders(
        self,
        statuses: Optional[list[str]] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> list[dict]:
        params = {
            "select": "id,order_number,buyer_name,status,total_cents,created_at",
            "order": "created_at.desc",
            "limit": str(limit),
            "offset": str(offset),
        }
        if statuses:
            params["status"] = _in_filter(statuses)
        return await self._rest("GET", "orders", params=params) or []

    async def get_order(self, order_id: str) -> Optional[dict]:
        rows = await self._rest(
            "GET",
            "orders",
            params={"select": ORDER_COLUMNS, "id": f"eq.{order_id}", "limit": "1"},
        )
        return rows[0] if rows else None

    async def list_order_items(self, order_id: str) -> list[dict]:
        return await self._rest(
            "GET",
            "order_items",
            params={
                "select": (
                    "id,product_id,quantity,unit_price_cents,custom_fee_cents,"
                    "options,customization,products(name,slug)"
                ),
                "order_id": f"eq.{order_id}",
                "order": "created_at.asc",
            },
        ) or []

    async def update_order_status(self, order_id: str, status: str, updated_at: str) -> Optional[dict]:
        rows = await self._rest(
            "PATCH",
            "orders",
            params={"id": f"eq.{order_id}"},
            body={"status": status, "updated_at": updated_at},
            returning=True,
        )
        return rows[0] if rows else None

    # ==================== Custom requests ====================

    async def insert_custom_request(self, row: dict) -> dict:
        return (await self._insert("custom_requests", row))[0]

    async def insert_files(self, rows: list[dict]) -> list[dict]:
        return await self._insert("files", rows)

    async def delete_custom_request(self, request_id: str) -> None:
        await self._rest("DELETE", "custom_requests", params={"id": f"eq.{request_id}"})

    async def list_custom_requests(
        self,
        statuses: Optional[list[str]] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> list[dict]:
        params = {
            "select": "id,request_number,org_name,requester_name,quantity_estimate,status,created_at",
            "order": "created_at.desc",
            "limit": str(limit),
            "offset": str(offset),
        }
        if statuses:
            params["status"] = _in_filter(statuses)
        return await self._rest("GET", "custom_requests", params=params) or []

    async def get_custom_request(self, request_id: str) -> Optional[dict]:
        rows = await self._rest(
            "GET",
            "custom_requests",
            params={"select": CUSTOM_REQUEST_COLUMNS, "id": f"eq.{request_id}", "limit": "1"},
        )
        return rows[0] if rows else None

    async def list_files(self, owner_type: str, owner_id: str) -> list[dict]:
        return await self._rest(
            "GET",
            "files",
            params={
                "select": "id,bucket,path,original_name,mime_type,size_bytes,created_at",
                "owner_type": f"eq.{owner_type}",
                "owner_id": f"eq.{owner_id}",
                "order": "created_at.asc",
            },
        ) or []

    async def update_custom_request_status(
        self,
        request_id: str,
        status: str,
        updated_at: str,
    ) -> Optional[dict]:
        rows = await self._rest(
            "PATCH",
            "custom_requests",
            params={"id": f"eq.{request_id}"},
            body={"status": status, "updated_at": updated_at},
            returning=True,
        )
        return rows[0] if rows else None

    # ==================== Storage ====================

    def _absolute_storage_url(self, signed: Optional[dict]) -> str:
        signed = signed or {}
        url = signed.get("signedUrl") or signed.get("signedURL") or signed.get("url")
        if not url:
            raise BackendError("Storage did not return a signed URL")
        if url.startswith("/"):
            return f"{self.base_url}/storage/v1{url}"
        return url

    async def create_signed_upload_url(
        self,
        bucket: str,
        path: str,
        expires_in: int,
        content_type: str,
    ) -> str:
        signed = await self._storage(
            "POST",
            f"object/upload/sign/{bucket}/{quote(path)}",
            body={"expiresIn": expires_in, "contentType": content_type},
        )
        return self._absolute_storage_url(signed)

    async def create_signed_download_url(self, bucket: str, path: str, expires_in: int) -> str:
        signed = await self._storage(
            "POST",
            f"object/sign/{bucket}/{quote(path)}",
            body={"expiresIn": expires_in},
        )
        return self._absolute_storage_url(signed)
