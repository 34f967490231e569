"""Checkout and order lookup routes"""

from fastapi import APIRouter, Depends, Query

from ..core.errors import ApiError
from ..core.rate_limit import RateLimit
from ..models.order import CheckoutRequest, CreateOrderResponse, OrderLookupResponse
from ..services.orders import OrderService
from .deps import get_order_service

router = APIRouter(prefix="/api/orders", tags=["Orders"])


@router.post(
    "",
    response_model=CreateOrderResponse,
    status_code=201,
    dependencies=[Depends(RateLimit("orders", limit=5, window_seconds=60))],
)
async def place_order(
    request: CheckoutRequest,
    service: OrderService = Depends(get_order_service),
):
    """
    Place an order from the selected lines of a cart.

    Prices are recomputed from the catalog; a client-side total is only
    compared against the result, never stored.
    """
    return await service.place_order(request)


@router.get(
    "/lookup",
    response_model=OrderLookupResponse,
    dependencies=[Depends(RateLimit("orders-lookup", limit=30, window_seconds=60))],
)
async def lookup_order(
    order_number: str = Query(..., description="Order number, e.g. EUY-20260101-0042"),
    token: str = Query(..., description="Lookup token returned at checkout"),
    service: OrderService = Depends(get_order_service),
):
    """Look up an order's status"""
    order = await service.lookup_order(order_number, token)
    if not order:
        raise ApiError(status_code=404, code="NOT_FOUND", message="Order not found.")
    return order
