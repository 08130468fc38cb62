"""Public (v2) read-only catalogue endpoints used by the landing page."""

from typing import Optional

from fastapi import APIRouter, Depends
from sqlmodel import Session

from ..database import get_session
from ..services import PublicCatalogService
from ..utils.pagination import Pagination, get_pagination
from .common import respond, split_ids

router = APIRouter()


@router.get("/career-categories")
def public_career_categories(db: Session = Depends(get_session)):
    return respond("Get all career categories successfully", PublicCatalogService(db).list_categories())


@router.get("/careers")
def public_careers(
    search: Optional[str] = None,
    category_ids: Optional[str] = None,
    paging: Pagination = Depends(get_pagination),
    db: Session = Depends(get_session),
):
    """Active careers, optionally restricted to `category_ids=a,b,c`."""
    result = PublicCatalogService(db).list_careers(
        search=search,
        category_ids=split_ids(category_ids) or None,
        skip=paging.skip,
        limit=paging.limit,
    )
    return respond("Get all careers successfully", result["data"], paging.meta(result["meta"]))
