"""Career management endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from .. import services
from ..database import get_session
from ..schemas import CareerIn
from ..utils.pagination import Pagination, get_pagination
from .common import bool_param, require_id, respond

router = APIRouter()


@router.get("")
def list_careers(
    search: Optional[str] = None,
    is_active: Optional[str] = None,
    paging: Pagination = Depends(get_pagination),
    db: Session = Depends(get_session),
):
    result = services.CareerService(db).list(
        search=search, is_active=bool_param(is_active), skip=paging.skip, limit=paging.limit
    )
    return respond("Get all careers successfully", result["data"], paging.meta(result["meta"]))


@router.get("/{career_id}")
def get_career(career_id: str, db: Session = Depends(get_session)):
    require_id(career_id, "Career")
    return respond("Get career successfully", services.CareerService(db).get(career_id))


@router.post("")
def create_career(payload: CareerIn, db: Session = Depends(get_session)):
    career = services.CareerService(db).create(payload.model_dump())
    return respond("Create career successfully", career, status_code=status.HTTP_201_CREATED)


@router.put("/{career_id}")
def update_career(career_id: str, payload: CareerIn, db: Session = Depends(get_session)):
    require_id(career_id, "Career")
    career = services.CareerService(db).update(career_id, payload.model_dump(exclude_unset=True))
    return respond("Update career successfully", career)


@router.delete("/{career_id}")
def delete_career(career_id: str, db: Session = Depends(get_session)):
    require_id(career_id, "Career")
    result = services.CareerService(db).delete(career_id)
    return respond(result["message"])
