"""System-admin overview statistics endpoints.

- GET /stats
- GET /orders/status
- GET /careers/top-purchased?limit=10
- GET /licenses/status
- GET /licenses/expiring?days=15
"""

from typing import Optional

from fastapi import APIRouter, Depends
from sqlmodel import Session

from ..database import get_session
from ..overview import OverviewService
from .common import positive_int_param, respond

router = APIRouter()


@router.get("/stats")
def system_stats(db: Session = Depends(get_session)):
    return respond("Get system stats successfully", OverviewService(db).system_stats())


@router.get("/orders/status")
def orders_status(db: Session = Depends(get_session)):
    return respond("Get orders status stats successfully", OverviewService(db).orders_status_stats())


@router.get("/careers/top-purchased")
def top_purchased_careers(limit: Optional[str] = None, db: Session = Depends(get_session)):
    n = positive_int_param(limit, "limit", default=10)
    return respond("Get top purchased careers successfully", OverviewService(db).top_purchased_careers(n))


@router.get("/licenses/status")
def licenses_status(db: Session = Depends(get_session)):
    return respond("Get licenses status stats successfully", OverviewService(db).licenses_status_stats())


@router.get("/licenses/expiring")
def expiring_licenses(days: Optional[str] = None, db: Session = Depends(get_session)):
    n = positive_int_param(days, "days", default=15)
    return respond("Get expiring licenses successfully", OverviewService(db).expiring_licenses(n))
