"""Career category administration endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from .. import services
from ..database import get_session
from ..schemas import NameIn
from ..utils.pagination import Pagination, get_pagination
from .common import require_id, respond

router = APIRouter()


@router.get("")
def list_career_categories(
    search: Optional[str] = None,
    paging: Pagination = Depends(get_pagination),
    db: Session = Depends(get_session),
):
    result = services.CareerCategoryService(db).list(search=search, skip=paging.skip, limit=paging.limit)
    return respond("Get all career categories successfully", result["data"], paging.meta(result["meta"]))


@router.get("/{category_id}")
def get_career_category(category_id: str, db: Session = Depends(get_session)):
    require_id(category_id, "Career category")
    return respond("Get career category successfully", services.CareerCategoryService(db).get(category_id))


@router.post("")
def create_career_category(payload: NameIn, db: Session = Depends(get_session)):
    category = services.CareerCategoryService(db).create(payload.model_dump())
    return respond("Create career category successfully", category, status_code=status.HTTP_201_CREATED)


@router.put("/{category_id}")
def update_career_category(category_id: str, payload: NameIn, db: Session = Depends(get_session)):
    require_id(category_id, "Career category")
    category = services.CareerCategoryService(db).update(category_id, payload.model_dump(exclude_unset=True))
    return respond("Update career category successfully", category)


@router.delete("/{category_id}")
def delete_career_category(category_id: str, db: Session = Depends(get_session)):
    require_id(category_id, "Career category")
    result = services.CareerCategoryService(db).delete(category_id)
    return respond(result["message"])
