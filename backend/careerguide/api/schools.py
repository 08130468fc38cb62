"""School and class administration endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from .. import services
from ..database import get_session
from ..schemas import SchoolClassIn, SchoolIn
from ..utils.pagination import Pagination, get_pagination
from .common import optional_int_param, require_id, respond

router = APIRouter()
classes_router = APIRouter()


@router.get("")
def list_schools(
    search: Optional[str] = None,
    name: Optional[str] = None,
    paging: Pagination = Depends(get_pagination),
    db: Session = Depends(get_session),
):
    result = services.SchoolService(db).list(search=search, name=name, skip=paging.skip, limit=paging.limit)
    return respond("Get all schools successfully", result["data"], paging.meta(result["meta"]))


@router.get("/{school_id}")
def get_school(school_id: str, db: Session = Depends(get_session)):
    require_id(school_id, "School")
    return respond("Get school successfully", services.SchoolService(db).get(school_id))


@router.get("/{school_id}/classes")
def list_school_classes(
    school_id: str,
    paging: Pagination = Depends(get_pagination),
    db: Session = Depends(get_session),
):
    require_id(school_id, "School")
    result = services.SchoolService(db).list_classes(school_id, skip=paging.skip, limit=paging.limit)
    return respond("Get school classes successfully", result["data"], paging.meta(result["meta"]))


@router.post("")
def create_school(payload: SchoolIn, db: Session = Depends(get_session)):
    school = services.SchoolService(db).create(payload.model_dump())
    return respond("Create school successfully", school, status_code=status.HTTP_201_CREATED)


@router.put("/{school_id}")
def update_school(school_id: str, payload: SchoolIn, db: Session = Depends(get_session)):
    require_id(school_id, "School")
    school = services.SchoolService(db).update(school_id, payload.model_dump(exclude_unset=True))
    return respond("Update school successfully", school)


@router.delete("/{school_id}")
def delete_school(school_id: str, db: Session = Depends(get_session)):
    require_id(school_id, "School")
    result = services.SchoolService(db).delete(school_id)
    return respond(result["message"])


@classes_router.get("")
def list_classes(
    search: Optional[str] = None,
    name: Optional[str] = None,
    school_id: Optional[str] = None,
    grade_level: Optional[str] = None,
    paging: Pagination = Depends(get_pagination),
    db: Session = Depends(get_session),
):
    result = services.SchoolClassService(db).list(
        search=search,
        name=name,
        school_id=school_id,
        grade_level=optional_int_param(grade_level),
        skip=paging.skip,
        limit=paging.limit,
    )
    return respond("Get all classes successfully", result["data"], paging.meta(result["meta"]))


@classes_router.get("/{class_id}")
def get_class(class_id: str, db: Session = Depends(get_session)):
    require_id(class_id, "Class")
    return respond("Get class successfully", services.SchoolClassService(db).get(class_id))


@classes_router.post("")
def create_class(payload: SchoolClassIn, db: Session = Depends(get_session)):
    school_class = services.SchoolClassService(db).create(payload.model_dump())
    return respond("Create class successfully", school_class, status_code=status.HTTP_201_CREATED)


@classes_router.put("/{class_id}")
def update_class(class_id: str, payload: SchoolClassIn, db: Session = Depends(get_session)):
    require_id(class_id, "Class")
    school_class = services.SchoolClassService(db).update(class_id, payload.model_dump(exclude_unset=True))
    return respond("Update class successfully", school_class)


@classes_router.delete("/{class_id}")
def delete_class(class_id: str, db: Session = Depends(get_session)):
    require_id(class_id, "Class")
    result = services.SchoolClassService(db).delete(class_id)
    return respond(result["message"])
