"""SQLModel data models.

This module defines the application's database tables using SQLModel.
Table names follow the relational schema shared with the rest of the
platform. Relations between tables are plain foreign key columns; the
services resolve referenced rows with batched lookups instead of ORM
relationships (see `careerguide.utils.lookup`).
"""

import uuid
from datetime import date, datetime, timezone
from enum import Enum
from typing import Optional

from sqlalchemy import JSON, Column, UniqueConstraint
from sqlmodel import Field, SQLModel


def new_id() -> str:
    return str(uuid.uuid4())


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class OrderStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class LicenseStatus(str, Enum):
    ACTIVE = "ACTIVE"
    EXPIRED = "EXPIRED"
    PENDING_ACTIVATION = "PENDING_ACTIVATION"
    REVOKED = "REVOKED"


class ObjectType(str, Enum):
    CAREER_THUMBS = "CAREER_THUMBS"
    CRITERIA_FILES = "CRITERIA_FILES"


class Province(SQLModel, table=True):
    """A province. Names are unique by convention only (checked by the service)."""
    __tablename__ = "province"

    id: str = Field(default_factory=new_id, primary_key=True)
    name: str = Field(index=True)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class Commune(SQLModel, table=True):
    """A commune, optionally attached to a `Province`."""
    __tablename__ = "commune"

    id: str = Field(default_factory=new_id, primary_key=True)
    name: str = Field(unique=True, index=True)
    province_id: Optional[str] = Field(default=None, foreign_key="province.id", index=True)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class CareerCategory(SQLModel, table=True):
    __tablename__ = "career_categories"

    id: str = Field(default_factory=new_id, primary_key=True)
    name: str = Field(unique=True, index=True)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class Career(SQLModel, table=True):
    """A career that schools can license for their students."""
    __tablename__ = "career"

    id: str = Field(default_factory=new_id, primary_key=True)
    code: str = Field(unique=True, index=True)
    name: str = Field(index=True)
    description: Optional[str] = None
    tags: Optional[str] = None
    is_active: bool = False
    created_by_admin: Optional[str] = None
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class CareerCareerCategory(SQLModel, table=True):
    """Many-to-many link between `Career` and `CareerCategory`."""
    __tablename__ = "career_career_category"
    __table_args__ = (UniqueConstraint("career_id", "career_category_id"),)

    id: str = Field(default_factory=new_id, primary_key=True)
    career_id: str = Field(foreign_key="career.id", ondelete="CASCADE", index=True)
    career_category_id: str = Field(foreign_key="career_categories.id", ondelete="CASCADE", index=True)


class CareerCriteria(SQLModel, table=True):
    __tablename__ = "career_criteria"

    id: str = Field(default_factory=new_id, primary_key=True)
    name: str
    description: Optional[str] = None
    order_index: Optional[int] = None
    career_id: str = Field(foreign_key="career.id", ondelete="CASCADE", index=True)
    is_active: bool = True
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class School(SQLModel, table=True):
    __tablename__ = "schools"

    id: str = Field(default_factory=new_id, primary_key=True)
    name: str = Field(index=True)
    address: Optional[str] = None
    phone_number: Optional[str] = None
    contact_email: Optional[str] = Field(default=None, index=True)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class SchoolClass(SQLModel, table=True):
    """A class (homeroom) inside a `School`."""
    __tablename__ = "classes"

    id: str = Field(default_factory=new_id, primary_key=True)
    name: str
    grade_level: Optional[int] = None
    school_id: str = Field(foreign_key="schools.id", index=True)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class User(SQLModel, table=True):
    """A platform account; question authors are users."""
    __tablename__ = "auth_base_user"

    id: str = Field(default_factory=new_id, primary_key=True)
    user_name: str = Field(unique=True, index=True)
    full_name: Optional[str] = None
    email: Optional[str] = None
    created_at: datetime = Field(default_factory=utc_now)


class SchoolUser(SQLModel, table=True):
    """A teacher/staff membership of a user in a school."""
    __tablename__ = "auth_impl_user_school"

    id: str = Field(default_factory=new_id, primary_key=True)
    user_id: str = Field(foreign_key="auth_base_user.id")
    school_id: str = Field(foreign_key="schools.id", index=True)
    description: Optional[str] = None


class Student(SQLModel, table=True):
    __tablename__ = "auth_impl_user_student"

    id: str = Field(default_factory=new_id, primary_key=True)
    user_id: str = Field(foreign_key="auth_base_user.id")
    school_id: str = Field(foreign_key="schools.id", index=True)
    class_id: Optional[str] = Field(default=None, foreign_key="classes.id")


class CareerOrder(SQLModel, table=True):
    """A school's purchase order for one or more careers."""
    __tablename__ = "career_orders"

    id: str = Field(default_factory=new_id, primary_key=True)
    school_id: Optional[str] = Field(default=None, foreign_key="schools.id")
    create_by: Optional[str] = Field(default=None, foreign_key="auth_base_user.id")
    status: Optional[str] = Field(default=OrderStatus.PENDING.value, index=True)
    note: Optional[str] = None
    created_at: datetime = Field(default_factory=utc_now)
    reviewed_by: Optional[str] = Field(default=None, foreign_key="auth_base_user.id")
    reviewed_at: Optional[datetime] = None
    updated_at: datetime = Field(default_factory=utc_now)


class CareerOrderItem(SQLModel, table=True):
    __tablename__ = "career_order_items"

    id: str = Field(default_factory=new_id, primary_key=True)
    order_id: Optional[str] = Field(default=None, foreign_key="career_orders.id", ondelete="CASCADE")
    career_id: str = Field(foreign_key="career.id", index=True)
    price: float = 0


class SchoolCareerLicense(SQLModel, table=True):
    """A school's right to use a career between `start_date` and `expiry_date`."""
    __tablename__ = "school_career_licenses"

    id: str = Field(default_factory=new_id, primary_key=True)
    school_id: str = Field(foreign_key="schools.id", index=True)
    career_id: str = Field(foreign_key="career.id", index=True)
    order_id: Optional[str] = Field(default=None, foreign_key="career_orders.id", index=True)
    order_item_id: Optional[str] = Field(default=None, foreign_key="career_order_items.id")
    status: Optional[str] = Field(default=LicenseStatus.PENDING_ACTIVATION.value, index=True)
    start_date: Optional[date] = None
    expiry_date: Optional[date] = Field(default=None, index=True)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class QuestionCategory(SQLModel, table=True):
    __tablename__ = "question_categories"

    id: str = Field(default_factory=new_id, primary_key=True)
    name: str
    description: Optional[str] = None
    order_index: Optional[int] = None
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class Question(SQLModel, table=True):
    """An assessment question, optionally tied to a career criterion.

    `question_metadata` is stored in the `metadata` column; the attribute
    name differs because `metadata` is reserved on declarative models.
    """
    __tablename__ = "questions"

    id: str = Field(default_factory=new_id, primary_key=True)
    content: str
    question_type: Optional[str] = Field(default=None, index=True)
    difficulty_level: Optional[str] = Field(default=None, index=True)
    category_id: Optional[str] = Field(default=None, foreign_key="question_categories.id", index=True)
    career_criteria_id: Optional[str] = Field(
        default=None, foreign_key="career_criteria.id", ondelete="SET NULL", index=True
    )
    points: Optional[float] = None
    explanation: Optional[str] = None
    tags: Optional[str] = None
    question_metadata: Optional[dict] = Field(default=None, sa_column=Column("metadata", JSON))
    is_active: bool = True
    created_by: Optional[str] = Field(default=None, foreign_key="auth_base_user.id")
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class QuestionOption(SQLModel, table=True):
    """A possible answer for a `Question`, ordered by `order_index`."""
    __tablename__ = "question_options"

    id: str = Field(default_factory=new_id, primary_key=True)
    question_id: str = Field(foreign_key="questions.id", ondelete="CASCADE", index=True)
    option_key: Optional[str] = None
    option_text: str
    is_correct: bool = False
    order_index: int = 0


class Exam(SQLModel, table=True):
    __tablename__ = "exams"

    id: str = Field(default_factory=new_id, primary_key=True)
    name: str
    created_at: datetime = Field(default_factory=utc_now)


class ExamQuestion(SQLModel, table=True):
    """Usage of a `Question` inside an `Exam`; blocks question deletion."""
    __tablename__ = "exam_questions"

    id: str = Field(default_factory=new_id, primary_key=True)
    exam_id: str = Field(foreign_key="exams.id", ondelete="CASCADE")
    question_id: str = Field(foreign_key="questions.id", index=True)


class StoredFile(SQLModel, table=True):
    """Metadata of a file kept in object storage, owned by (object_type, object_id)."""
    __tablename__ = "metadata"

    id: str = Field(default_factory=new_id, primary_key=True)
    file_name: str
    file_path: str
    bucket_name: str
    mime_type: Optional[str] = None
    file_size: int = 0
    object_type: str = Field(index=True)
    object_id: str = Field(index=True)
    created_at: datetime = Field(default_factory=utc_now)
