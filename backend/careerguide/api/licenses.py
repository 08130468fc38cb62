"""School career license endpoints.

- GET  /?order_id=...
- POST /                    issue licenses for every item of an order
- PUT  /{id}/activate
- PUT  /{id}/revoke
- PUT  /{id}/renew
"""

from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from ..database import get_session
from ..orders import LicenseService
from ..schemas import LicenseCreateIn, LicenseRenewIn
from ..utils.pagination import Pagination, get_pagination
from .common import require_id, respond

router = APIRouter()


@router.get("")
def list_licenses(
    order_id: Optional[str] = None,
    paging: Pagination = Depends(get_pagination),
    db: Session = Depends(get_session),
):
    result = LicenseService(db).list_by_order(order_id, skip=paging.skip, limit=paging.limit)
    return respond("Get licenses successfully", result["data"], paging.meta(result["meta"]))


@router.post("")
def create_licenses(payload: LicenseCreateIn, db: Session = Depends(get_session)):
    result = LicenseService(db).create(payload.model_dump())
    return respond(result["message"], result["data"], status_code=status.HTTP_201_CREATED)


@router.put("/{license_id}/activate")
def activate_license(license_id: str, db: Session = Depends(get_session)):
    require_id(license_id, "License")
    return respond("License activated successfully", LicenseService(db).activate(license_id))


@router.put("/{license_id}/revoke")
def revoke_license(license_id: str, db: Session = Depends(get_session)):
    require_id(license_id, "License")
    return respond("License revoked successfully", LicenseService(db).revoke(license_id))


@router.put("/{license_id}/renew")
def renew_license(license_id: str, payload: LicenseRenewIn, db: Session = Depends(get_session)):
    require_id(license_id, "License")
    return respond("License renewed successfully", LicenseService(db).renew(license_id, payload.expiry_date))
