"""Pydantic request schemas used by the API.

Every field is optional at the schema level: required-field checks live
in the services so that a missing name produces the same 400 envelope
as any other validation failure. Update handlers pass
`model_dump(exclude_unset=True)` to the services, which is how a field
that was not sent is told apart from an explicit `null`.
"""

from datetime import date
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class NameIn(BaseModel):
    """Payload for entities identified only by a name (provinces, categories)."""
    name: Optional[str] = None


class CommuneIn(BaseModel):
    name: Optional[str] = None
    province_id: Optional[str] = None


class SchoolIn(BaseModel):
    name: Optional[str] = None
    address: Optional[str] = None
    phone_number: Optional[str] = None
    contact_email: Optional[str] = None


class SchoolClassIn(BaseModel):
    name: Optional[str] = None
    grade_level: Optional[int] = None
    school_id: Optional[str] = None


class CareerIn(BaseModel):
    code: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    tags: Optional[str] = None
    is_active: Optional[bool] = None
    created_by_admin: Optional[str] = None
    career_category_ids: Optional[List[str]] = None


class QuestionOptionIn(BaseModel):
    """A single answer option; `order_index` defaults to its list position."""
    option_key: Optional[str] = None
    option_text: str
    is_correct: bool = False
    order_index: Optional[int] = None


class QuestionIn(BaseModel):
    content: Optional[str] = None
    question_type: Optional[str] = None
    difficulty_level: Optional[str] = None
    category_id: Optional[str] = None
    career_criteria_id: Optional[str] = None
    points: Optional[float] = None
    explanation: Optional[str] = None
    tags: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None
    is_active: Optional[bool] = None
    created_by: Optional[str] = None
    options: Optional[List[QuestionOptionIn]] = None


class QuestionOptionsIn(BaseModel):
    options: List[QuestionOptionIn] = Field(default_factory=list)


class CareerCriteriaIn(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    order_index: Optional[int] = None
    is_active: Optional[bool] = None
    career_id: Optional[str] = None


class QuestionCategoryIn(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    order_index: Optional[int] = None


class CareerOrderIn(BaseModel):
    """A school's order; one item is created per entry of `career_ids`."""
    school_id: Optional[str] = None
    create_by: Optional[str] = None
    note: Optional[str] = None
    career_ids: Optional[List[str]] = None


class OrderReviewIn(BaseModel):
    status: Optional[str] = None
    reviewed_by: Optional[str] = None
    note: Optional[str] = None


class LicenseCreateIn(BaseModel):
    order_id: Optional[str] = None
    month_rental: Optional[int] = None


class LicenseRenewIn(BaseModel):
    expiry_date: Optional[date] = None
