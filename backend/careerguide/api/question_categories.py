"""Question category endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from .. import services
from ..database import get_session
from ..schemas import QuestionCategoryIn
from ..utils.pagination import Pagination, get_pagination
from .common import require_id, respond

router = APIRouter()


@router.get("")
def list_question_categories(
    search: Optional[str] = None,
    paging: Pagination = Depends(get_pagination),
    db: Session = Depends(get_session),
):
    result = services.QuestionCategoryService(db).list(search=search, skip=paging.skip, limit=paging.limit)
    return respond("Get all question categories successfully", result["data"], paging.meta(result["meta"]))


@router.get("/{category_id}")
def get_question_category(category_id: str, db: Session = Depends(get_session)):
    require_id(category_id, "Question category")
    return respond("Get question category successfully", services.QuestionCategoryService(db).get(category_id))


@router.post("")
def create_question_category(payload: QuestionCategoryIn, db: Session = Depends(get_session)):
    category = services.QuestionCategoryService(db).create(payload.model_dump())
    return respond("Create question category successfully", category, status_code=status.HTTP_201_CREATED)


@router.put("/{category_id}")
def update_question_category(category_id: str, payload: QuestionCategoryIn, db: Session = Depends(get_session)):
    require_id(category_id, "Question category")
    category = services.QuestionCategoryService(db).update(category_id, payload.model_dump(exclude_unset=True))
    return respond("Update question category successfully", category)


@router.delete("/{category_id}")
def delete_question_category(category_id: str, db: Session = Depends(get_session)):
    require_id(category_id, "Question category")
    result = services.QuestionCategoryService(db).delete(category_id)
    return respond(result["message"])
