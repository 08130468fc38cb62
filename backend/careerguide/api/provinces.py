"""Province administration endpoints, including the nested commune list."""

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
def list_provinces(
    search: Optional[str] = None,
    name: Optional[str] = None,
    paging: Pagination = Depends(get_pagination),
    db: Session = Depends(get_session),
):
    result = services.ProvinceService(db).list(search=search, name=name, skip=paging.skip, limit=paging.limit)
    return respond("Get all provinces successfully", result["data"], paging.meta(result["meta"]))


@router.get("/{province_id}")
def get_province(province_id: str, db: Session = Depends(get_session)):
    require_id(province_id, "Province")
    return respond("Get province successfully", services.ProvinceService(db).get(province_id))


@router.get("/{province_id}/communes")
def list_province_communes(
    province_id: str,
    paging: Pagination = Depends(get_pagination),
    db: Session = Depends(get_session),
):
    require_id(province_id, "Province")
    result = services.ProvinceService(db).list_communes(province_id, skip=paging.skip, limit=paging.limit)
    return respond("Get province communes successfully", result["data"], paging.meta(result["meta"]))


@router.post("")
def create_province(payload: NameIn, db: Session = Depends(get_session)):
    province = services.ProvinceService(db).create(payload.model_dump())
    return respond("Create province successfully", province, status_code=status.HTTP_201_CREATED)


@router.put("/{province_id}")
def update_province(province_id: str, payload: NameIn, db: Session = Depends(get_session)):
    require_id(province_id, "Province")
    province = services.ProvinceService(db).update(province_id, payload.model_dump(exclude_unset=True))
    return respond("Update province successfully", province)


@router.delete("/{province_id}")
def delete_province(province_id: str, db: Session = Depends(get_session)):
    require_id(province_id, "Province")
    result = services.ProvinceService(db).delete(province_id)
    return respond(result["message"])
