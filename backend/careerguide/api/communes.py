"""Commune administration endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from .. import services
from ..database import get_session
from ..schemas import CommuneIn
from ..utils.pagination import Pagination, get_pagination
from .common import require_id, respond

router = APIRouter()


@router.get("")
def list_communes(
    search: Optional[str] = None,
    name: Optional[str] = None,
    province_id: Optional[str] = None,
    paging: Pagination = Depends(get_pagination),
    db: Session = Depends(get_session),
):
    result = services.CommuneService(db).list(
        search=search, name=name, province_id=province_id, skip=paging.skip, limit=paging.limit
    )
    return respond("Get all communes successfully", result["data"], paging.meta(result["meta"]))


@router.get("/{commune_id}")
def get_commune(commune_id: str, db: Session = Depends(get_session)):
    require_id(commune_id, "Commune")
    return respond("Get commune successfully", services.CommuneService(db).get(commune_id))


@router.post("")
def create_commune(payload: CommuneIn, db: Session = Depends(get_session)):
    commune = services.CommuneService(db).create(payload.model_dump())
    return respond("Create commune successfully", commune, status_code=status.HTTP_201_CREATED)


@router.put("/{commune_id}")
def update_commune(commune_id: str, payload: CommuneIn, db: Session = Depends(get_session)):
    require_id(commune_id, "Commune")
    commune = services.CommuneService(db).update(commune_id, payload.model_dump(exclude_unset=True))
    return respond("Update commune successfully", commune)


@router.delete("/{commune_id}")
def delete_commune(commune_id: str, db: Session = Depends(get_session)):
    require_id(commune_id, "Commune")
    result = services.CommuneService(db).delete(commune_id)
    return respond(result["message"])
