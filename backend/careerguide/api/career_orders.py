"""Career order endpoints: place, review and delete school orders."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from ..database import get_session
from ..orders import CareerOrderService
from ..schemas import CareerOrderIn, OrderReviewIn
from ..utils.pagination import Pagination, get_pagination
from .common import require_id, respond

router = APIRouter()


@router.get("")
def list_orders(
    school_id: Optional[str] = None,
    order_status: Optional[str] = Query(None, alias="status"),
    paging: Pagination = Depends(get_pagination),
    db: Session = Depends(get_session),
):
    result = CareerOrderService(db).list(
        school_id=school_id, status=order_status, skip=paging.skip, limit=paging.limit
    )
    return respond("Get all career orders successfully", result["data"], paging.meta(result["meta"]))


@router.get("/{order_id}")
def get_order(order_id: str, db: Session = Depends(get_session)):
    require_id(order_id, "Career order")
    return respond("Get career order successfully", CareerOrderService(db).get(order_id))


@router.post("")
def create_order(payload: CareerOrderIn, db: Session = Depends(get_session)):
    order = CareerOrderService(db).create(payload.model_dump())
    return respond("Create career order successfully", order, status_code=status.HTTP_201_CREATED)


@router.put("/{order_id}/review")
def review_order(order_id: str, payload: OrderReviewIn, db: Session = Depends(get_session)):
    require_id(order_id, "Career order")
    order = CareerOrderService(db).review(order_id, payload.model_dump())
    return respond("Review career order successfully", order)


@router.delete("/{order_id}")
def delete_order(order_id: str, db: Session = Depends(get_session)):
    require_id(order_id, "Career order")
    result = CareerOrderService(db).delete(order_id)
    return respond(result["message"])
