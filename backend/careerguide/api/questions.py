"""Question bank endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from .. import services
from ..database import get_session
from ..schemas import QuestionIn, QuestionOptionsIn
from ..utils.pagination import Pagination, get_pagination
from .common import bool_param, require_id, respond

router = APIRouter()


@router.get("")
def list_questions(
    search: Optional[str] = None,
    category_id: Optional[str] = None,
    career_criteria_id: Optional[str] = None,
    question_type: Optional[str] = None,
    difficulty_level: Optional[str] = None,
    is_active: Optional[str] = None,
    paging: Pagination = Depends(get_pagination),
    db: Session = Depends(get_session),
):
    """List questions newest first, with category, criteria and creator attached."""
    result = services.QuestionService(db).list(
        search=search,
        category_id=category_id,
        career_criteria_id=career_criteria_id,
        question_type=question_type,
        difficulty_level=difficulty_level,
        is_active=bool_param(is_active),
        skip=paging.skip,
        limit=paging.limit,
    )
    return respond("Get all questions successfully", result["data"], paging.meta(result["meta"]))


@router.get("/{question_id}")
def get_question(question_id: str, db: Session = Depends(get_session)):
    require_id(question_id, "Question")
    return respond("Get question successfully", services.QuestionService(db).get(question_id))


@router.post("")
def create_question(payload: QuestionIn, db: Session = Depends(get_session)):
    """Create a question together with its options in one transaction."""
    question = services.QuestionService(db).create(payload.model_dump())
    return respond("Create question successfully", question, status_code=status.HTTP_201_CREATED)


@router.put("/{question_id}")
def update_question(question_id: str, payload: QuestionIn, db: Session = Depends(get_session)):
    """Partially update a question; `options`, when sent, replace the existing ones."""
    require_id(question_id, "Question")
    question = services.QuestionService(db).update(question_id, payload.model_dump(exclude_unset=True))
    return respond("Update question successfully", question)


@router.put("/{question_id}/options")
def replace_question_options(question_id: str, payload: QuestionOptionsIn, db: Session = Depends(get_session)):
    require_id(question_id, "Question")
    options = [opt.model_dump() for opt in payload.options]
    result = services.QuestionService(db).replace_options(question_id, options)
    return respond(result["message"])


@router.delete("/{question_id}")
def delete_question(question_id: str, db: Session = Depends(get_session)):
    require_id(question_id, "Question")
    result = services.QuestionService(db).delete(question_id)
    return respond(result["message"])
