# storefront/api/routers/orders.py
from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from storefront.api.deps import get_notifier, get_publisher, require_admin
from storefront.data.database import get_db
from storefront.domain.errors import Forbidden
from storefront.domain.schemas import OrderOut, OrderStatusIn, PlaceOrderIn
from storefront.services.order_query_service import OrderQueryService
from storefront.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


def get_service(
    db: Session = Depends(get_db),
    publisher=Depends(get_publisher),
    notifier=Depends(get_notifier),
):
    return OrderService(db, publisher=publisher, notifier=notifier)


def get_query_service(db: Session = Depends(get_db)):
    return OrderQueryService(db)


@router.post("", response_model=OrderOut, status_code=201)
def place_order(
    payload: PlaceOrderIn,
    user_id: int = Query(...),
    svc: OrderService = Depends(get_service),
):
    """
    Tworzy zamowienie z koszyka (tylko za pobraniem).
    Wysyla powiadomienie asynchronicznie.
    """
    return svc.place_order(
        user_id,
        use_cash_on_delivery=payload.use_cash_on_delivery,
        coupon_applied=payload.coupon_applied,
    )


@router.get("", response_model=List[OrderOut])
def list_my_orders(user_id: int = Query(...), svc: OrderQueryService = Depends(get_query_service)):
    return svc.list_orders_for_user(user_id)


@router.get("/all", response_model=List[OrderOut])
def list_all_orders(
    _admin_id: int = Depends(require_admin),
    svc: OrderQueryService = Depends(get_query_service),
):
    return svc.list_all_orders()


@router.get("/{order_id}", response_model=OrderOut)
def get_order(
    order_id: int,
    user_id: int = Query(...),
    svc: OrderQueryService = Depends(get_query_service),
):
    """
    Pobiera szczegoly zamowienia.
    """
    try:
        return svc.get_order(order_id, user_id)
    except PermissionError as e:
        raise Forbidden(str(e))


@router.put("/{order_id}/status", response_model=OrderOut)
def update_order_status(
    order_id: int,
    payload: OrderStatusIn,
    _admin_id: int = Depends(require_admin),
    svc: OrderService = Depends(get_service),
):
    return svc.update_order_status(order_id, payload.order_status, payload.payment_status)
