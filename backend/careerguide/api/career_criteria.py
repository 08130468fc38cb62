"""Career criteria endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from .. import services
from ..database import get_session
from ..schemas import CareerCriteriaIn
from ..utils.pagination import Pagination, get_pagination
from .common import bool_param, require_id, respond

router = APIRouter()


@router.get("")
def list_criteria(
    search: Optional[str] = None,
    career_id: Optional[str] = None,
    is_active: Optional[str] = None,
    paging: Pagination = Depends(get_pagination),
    db: Session = Depends(get_session),
):
    result = services.CareerCriteriaService(db).list(
        search=search,
        career_id=career_id,
        is_active=bool_param(is_active),
        skip=paging.skip,
        limit=paging.limit,
    )
    return respond("Get all career criteria successfully", result["data"], paging.meta(result["meta"]))


@router.get("/{criteria_id}")
def get_criteria(criteria_id: str, db: Session = Depends(get_session)):
    require_id(criteria_id, "Career criteria")
    return respond("Get career criteria successfully", services.CareerCriteriaService(db).get(criteria_id))


@router.post("")
def create_criteria(payload: CareerCriteriaIn, db: Session = Depends(get_session)):
    criteria = services.CareerCriteriaService(db).create(payload.model_dump())
    return respond("Create career criteria successfully", criteria, status_code=status.HTTP_201_CREATED)


@router.put("/{criteria_id}/active")
def toggle_criteria(criteria_id: str, db: Session = Depends(get_session)):
    require_id(criteria_id, "Career criteria")
    result = services.CareerCriteriaService(db).toggle_active(criteria_id)
    return respond(result["message"])


@router.put("/{criteria_id}")
def update_criteria(criteria_id: str, payload: CareerCriteriaIn, db: Session = Depends(get_session)):
    require_id(criteria_id, "Career criteria")
    criteria = services.CareerCriteriaService(db).update(criteria_id, payload.model_dump(exclude_unset=True))
    return respond("Update career criteria successfully", criteria)


@router.delete("/{criteria_id}")
def delete_criteria(criteria_id: str, db: Session = Depends(get_session)):
    require_id(criteria_id, "Career criteria")
    result = services.CareerCriteriaService(db).delete(criteria_id)
    return respond(result["message"])
