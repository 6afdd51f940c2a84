# market/api/routers/orders.py
from fastapi import APIRouter, Depends

from market.api.deps import get_current_principal, get_order_service, page_params
from market.domain.pagination import PageRequest
from market.domain.principal import Principal
from market.domain.schemas import CheckoutIn, CheckoutOut, OrderDetailOut, OrderListOut
from market.services.order_service import OrderService

router = APIRouter(prefix="/api/orders", tags=["orders"])


@router.get("", response_model=OrderListOut)
def list_orders(
    page: PageRequest = Depends(page_params),
    principal: Principal = Depends(get_current_principal),
    svc: OrderService = Depends(get_order_service),
):
    return svc.list_orders(principal, page)


@router.post("/checkout", response_model=CheckoutOut, status_code=201)
def checkout(
    payload: CheckoutIn,
    principal: Principal = Depends(get_current_principal),
    svc: OrderService = Depends(get_order_service),
):
    """
    Turns the caller's cart into a completed order: payment, library
    grants and cart cleanup happen together or not at all.
    """
    order = svc.checkout(principal, payload.payment_method)
    return {"message": "Order completed successfully", "order": order}


@router.get("/{order_id}", response_model=OrderDetailOut)
def get_order(
    order_id: int,
    principal: Principal = Depends(get_current_principal),
    svc: OrderService = Depends(get_order_service),
):
    return svc.get_order(principal, order_id)
