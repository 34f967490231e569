"""Accessors for the services owned by the running application"""

from fastapi import Request

from ..core.config import Settings
from ..database.carts import CartStore
from ..services import (
    BackendClient,
    CustomRequestService,
    OrderService,
    UploadService,
)


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_backend(request: Request) -> BackendClient:
    return request.app.state.backend


def get_cart_store(request: Request) -> CartStore:
    return request.app.state.carts


def get_order_service(request: Request) -> OrderService:
    state = request.app.state
    return OrderService(backend=state.backend, notifier=state.notifier, carts=state.carts)


def get_custom_request_service(request: Request) -> CustomRequestService:
    state = request.app.state
    return CustomRequestService(backend=state.backend, notifier=state.notifier)


def get_upload_service(request: Request) -> UploadService:
    state = request.app.state
    return UploadService(backend=state.backend, bucket=state.settings.storage_bucket)
