"""Repository classes encapsulating database operations.

Each repository is small and focused on a single aggregate (provinces,
communes, careers, schools, questions, ...). Repositories return
SQLModel objects and perform commits/refreshes where appropriate.
Constraint violations raised by the store on commit are rolled back
and re-raised as domain errors so that a lost check-then-write race
still produces a Conflict/NotFound answer instead of a 500.
"""

from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from sqlalchemy import delete as sa_delete
from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from . import models
from .errors import ConflictError, NotFoundError, ValidationError


def contains_any(term: Optional[str], *columns):
    """Return an OR of `column LIKE %term%` clauses, or None for an empty term."""
    if not term:
        return None
    return or_(*[col.contains(term) for col in columns])


class BaseRepository:
    """Shared CRUD helpers; subclasses set `model` and a human `label`."""
    model = None
    label = "Record"

    def __init__(self, session: Session):
        self.session = session

    def get(self, record_id: str):
        """Fetch a row by primary key or return `None`."""
        if record_id is None:
            return None
        return self.session.get(self.model, record_id)

    def find_first(self, *clauses):
        return self.session.exec(select(self.model).where(*clauses)).first()

    def exists(self, *clauses) -> bool:
        stmt = select(self.model.id).where(*clauses).limit(1)
        return self.session.exec(stmt).first() is not None

    def value_taken(self, column, value, exclude_id: Optional[str] = None) -> bool:
        """Return True if another row already holds `value` in `column`."""
        clauses = [column == value]
        if exclude_id is not None:
            clauses.append(self.model.id != exclude_id)
        return self.exists(*clauses)

    def missing_ids(self, ids: Iterable[str]) -> List[str]:
        """Return the ids in `ids` that do not exist."""
        wanted = set(ids)
        if not wanted:
            return []
        stmt = select(self.model.id).where(self.model.id.in_(wanted))
        found = set(self.session.exec(stmt).all())
        return sorted(wanted - found)

    def count(self, clauses: Sequence = ()) -> int:
        stmt = select(func.count()).select_from(self.model).where(*clauses)
        return self.session.exec(stmt).one()

    def page(self, clauses: Sequence = (), skip: int = 0, limit: int = 10, order_by: Sequence = ()) -> Tuple[list, int]:
        """Return `(rows, total)` for one page under the same filter.

        The count and the page are two statements; they are not wrapped
        in a transaction.
        """
        clauses = [c for c in clauses if c is not None]
        total = self.count(clauses)
        stmt = select(self.model).where(*clauses).order_by(*order_by).offset(skip).limit(limit)
        return self.session.exec(stmt).all(), total

    def create(self, obj):
        """Persist a new row and return the managed instance."""
        self.session.add(obj)
        self.commit()
        self.session.refresh(obj)
        return obj

    def update(self, obj, fields: Dict):
        """Apply only the supplied `fields` and bump `updated_at` when present."""
        for key, value in fields.items():
            setattr(obj, key, value)
        if hasattr(obj, "updated_at"):
            obj.updated_at = models.utc_now()
        self.session.add(obj)
        self.commit()
        self.session.refresh(obj)
        return obj

    def delete(self, obj) -> None:
        self.session.delete(obj)
        self.commit(action="delete")

    def commit(self, action: str = "save") -> None:
        self._guard(self.session.commit, action)

    def flush(self) -> None:
        """Flush pending rows (to obtain ids) inside the current transaction."""
        self._guard(self.session.flush, "save")

    def _guard(self, operation, action: str) -> None:
        try:
            operation()
        except IntegrityError as exc:
            self.session.rollback()
            raise self._constraint_error(exc, action) from exc

    def _constraint_error(self, exc: IntegrityError, action: str):
        text = str(exc.orig).lower()
        if action == "delete":
            return ConflictError(f"Cannot delete {self.label.lower()}. It is referenced by other records")
        if "not null" in text or "not-null" in text:
            return ValidationError(f"{self.label} is missing a required field")
        if "foreign key" in text:
            return NotFoundError("Referenced record not found")
        return ConflictError(f"{self.label} already exists")


class ProvinceRepository(BaseRepository):
    model = models.Province
    label = "Province"


class CommuneRepository(BaseRepository):
    model = models.Commune
    label = "Commune"


class CareerCategoryRepository(BaseRepository):
    model = models.CareerCategory
    label = "Career category"

    def list_all(self) -> List[models.CareerCategory]:
        """Return every category ordered by name."""
        stmt = select(models.CareerCategory).order_by(models.CareerCategory.name)
        return self.session.exec(stmt).all()


class CareerRepository(BaseRepository):
    model = models.Career
    label = "Career"

    def create_with_categories(self, career: models.Career, category_ids: Sequence[str]) -> models.Career:
        """Insert a career and its category links in one transaction."""
        self.session.add(career)
        self.flush()
        self._add_links(career.id, category_ids)
        self.commit()
        self.session.refresh(career)
        return career

    def update_with_categories(self, career: models.Career, fields: Dict, category_ids: Optional[Sequence[str]]) -> models.Career:
        """Apply a partial update and, when given, replace the category links."""
        for key, value in fields.items():
            setattr(career, key, value)
        career.updated_at = models.utc_now()
        self.session.add(career)
        if category_ids is not None:
            self.session.exec(
                sa_delete(models.CareerCareerCategory).where(models.CareerCareerCategory.career_id == career.id)
            )
            self._add_links(career.id, category_ids)
        self.commit()
        self.session.refresh(career)
        return career

    def _add_links(self, career_id: str, category_ids: Sequence[str]) -> None:
        for category_id in dict.fromkeys(category_ids):
            self.session.add(models.CareerCareerCategory(career_id=career_id, career_category_id=category_id))

    def ids_in_categories(self, category_ids: Sequence[str]) -> List[str]:
        """Return distinct career ids linked to any of `category_ids`."""
        link = models.CareerCareerCategory
        stmt = select(link.career_id).where(link.career_category_id.in_(set(category_ids))).distinct()
        return self.session.exec(stmt).all()

    def categories_by_career(self, career_ids: Sequence[str]) -> Dict[str, List[dict]]:
        """Return `{career_id: [{id, name}, ...]}` using one joined query."""
        out: Dict[str, List[dict]] = {cid: [] for cid in career_ids}
        if not career_ids:
            return out
        link = models.CareerCareerCategory
        cat = models.CareerCategory
        stmt = (
            select(link.career_id, cat.id, cat.name)
            .join(cat, cat.id == link.career_category_id)
            .where(link.career_id.in_(set(career_ids)))
            .order_by(cat.name)
        )
        for career_id, category_id, name in self.session.exec(stmt).all():
            out.setdefault(career_id, []).append({"id": category_id, "name": name})
        return out

    def active_criteria_counts(self, career_ids: Sequence[str]) -> Dict[str, int]:
        """Return `{career_id: count}` of active criteria, zero-filled."""
        out = {cid: 0 for cid in career_ids}
        if not career_ids:
            return out
        crit = models.CareerCriteria
        stmt = (
            select(crit.career_id, func.count(crit.id))
            .where(crit.career_id.in_(set(career_ids)), crit.is_active == True)  # noqa: E712
            .group_by(crit.career_id)
        )
        for career_id, n in self.session.exec(stmt).all():
            out[career_id] = n
        return out

    def first_files(self, object_type: str, object_ids: Sequence[str]) -> Dict[str, models.StoredFile]:
        """Return the oldest stored file per owner for `object_type`."""
        if not object_ids:
            return {}
        f = models.StoredFile
        stmt = (
            select(f)
            .where(f.object_type == object_type, f.object_id.in_(set(object_ids)))
            .order_by(f.object_id, f.created_at, f.id)
        )
        out: Dict[str, models.StoredFile] = {}
        for row in self.session.exec(stmt).all():
            out.setdefault(row.object_id, row)
        return out

    def in_use(self, career_id: str) -> bool:
        """Return True if orders or licenses reference the career."""
        item = select(models.CareerOrderItem.id).where(models.CareerOrderItem.career_id == career_id).limit(1)
        lic = select(models.SchoolCareerLicense.id).where(models.SchoolCareerLicense.career_id == career_id).limit(1)
        return self.session.exec(item).first() is not None or self.session.exec(lic).first() is not None


class CareerCriteriaRepository(BaseRepository):
    model = models.CareerCriteria
    label = "Career criteria"


class CareerOrderRepository(BaseRepository):
    """Orders and their items; both are written and deleted together."""
    model = models.CareerOrder
    label = "Career order"

    def create_with_items(self, order: models.CareerOrder, career_ids: Sequence[str]) -> models.CareerOrder:
        self.session.add(order)
        self.flush()
        for career_id in career_ids:
            self.session.add(models.CareerOrderItem(order_id=order.id, career_id=career_id, price=0))
        self.commit()
        self.session.refresh(order)
        return order

    def items_for(self, order_id: str) -> List[models.CareerOrderItem]:
        item = models.CareerOrderItem
        stmt = select(item).where(item.order_id == order_id).order_by(item.id)
        return self.session.exec(stmt).all()

    def delete(self, order: models.CareerOrder) -> None:
        """Delete the items and the order in one transaction."""
        def remove():
            self.session.exec(sa_delete(models.CareerOrderItem).where(models.CareerOrderItem.order_id == order.id))
            self.session.delete(order)
            self.session.commit()

        self._guard(remove, "delete")


class LicenseRepository(BaseRepository):
    model = models.SchoolCareerLicense
    label = "License"

    def create_many(self, licenses: List[models.SchoolCareerLicense]) -> List[models.SchoolCareerLicense]:
        """Insert every license in one commit."""
        self.session.add_all(licenses)
        self.commit()
        for lic in licenses:
            self.session.refresh(lic)
        return licenses


class SchoolRepository(BaseRepository):
    model = models.School
    label = "School"

    def dependents(self, school_id: str) -> Optional[str]:
        """Return the kind of the first row attached to the school, if any."""
        checks = (
            ("users", models.SchoolUser),
            ("students", models.Student),
            ("classes", models.SchoolClass),
        )
        for kind, model in checks:
            stmt = select(model.id).where(model.school_id == school_id).limit(1)
            if self.session.exec(stmt).first() is not None:
                return kind
        return None


class SchoolClassRepository(BaseRepository):
    model = models.SchoolClass
    label = "Class"


class QuestionCategoryRepository(BaseRepository):
    model = models.QuestionCategory
    label = "Question category"

    def question_count(self, category_id: str) -> int:
        stmt = select(func.count()).select_from(models.Question).where(models.Question.category_id == category_id)
        return self.session.exec(stmt).one()


class QuestionRepository(BaseRepository):
    """CRUD operations for `Question` and related `QuestionOption` records.

    Writes that touch both tables run in a single transaction: the
    question row is flushed to obtain its id and everything is committed
    once, so a failure leaves neither half behind.
    """
    model = models.Question
    label = "Question"

    def create(self, question: models.Question, options: List[models.QuestionOption]) -> models.Question:
        self.session.add(question)
        self.flush()
        for opt in options:
            opt.question_id = question.id
            self.session.add(opt)
        self.commit()
        self.session.refresh(question)
        return question

    def update(self, question: models.Question, fields: Dict, options: Optional[List[models.QuestionOption]] = None) -> models.Question:
        for key, value in fields.items():
            setattr(question, key, value)
        question.updated_at = models.utc_now()
        self.session.add(question)
        if options is not None:
            self._replace_options(question.id, options)
        self.commit()
        self.session.refresh(question)
        return question

    def replace_options(self, question_id: str, options: List[models.QuestionOption]) -> None:
        self._replace_options(question_id, options)
        self.commit()

    def _replace_options(self, question_id: str, options: List[models.QuestionOption]) -> None:
        self.session.exec(sa_delete(models.QuestionOption).where(models.QuestionOption.question_id == question_id))
        for opt in options:
            opt.question_id = question_id
            self.session.add(opt)

    def options_for(self, question_id: str) -> List[models.QuestionOption]:
        """List options of a question ordered by `order_index`."""
        stmt = (
            select(models.QuestionOption)
            .where(models.QuestionOption.question_id == question_id)
            .order_by(models.QuestionOption.order_index, models.QuestionOption.id)
        )
        return self.session.exec(stmt).all()

    def used_in_exam(self, question_id: str) -> bool:
        stmt = select(models.ExamQuestion.id).where(models.ExamQuestion.question_id == question_id).limit(1)
        return self.session.exec(stmt).first() is not None

    def delete(self, question: models.Question) -> None:
        """Delete the options and the question in one transaction."""
        self.session.exec(sa_delete(models.QuestionOption).where(models.QuestionOption.question_id == question.id))
        self.session.delete(question)
        self.commit(action="delete")


class StatsRepository:
    """Read-only aggregate queries for the system-admin overview."""
    def __init__(self, session: Session):
        self.session = session

    def system_counts(self) -> Dict[str, int]:
        """Run every dashboard count as one statement of scalar sub-queries."""
        def total(model, *clauses):
            return select(func.count()).select_from(model).where(*clauses).scalar_subquery()

        columns = {
            "schools": total(models.School),
            "students": total(models.Student),
            "users": total(models.User),
            "teachers": total(models.SchoolUser),
            "classes": total(models.SchoolClass),
            "careers": total(models.Career),
            "criteria": total(models.CareerCriteria),
            "orders": total(models.CareerOrder),
            "active_licenses": total(
                models.SchoolCareerLicense,
                models.SchoolCareerLicense.status == models.LicenseStatus.ACTIVE.value,
            ),
            "files": total(models.StoredFile),
            "file_bytes": select(func.coalesce(func.sum(models.StoredFile.file_size), 0)).scalar_subquery(),
        }
        stmt = select(*[expr.label(name) for name, expr in columns.items()])
        row = self.session.exec(stmt).one()
        return {name: int(value or 0) for name, value in zip(columns, row)}

    def count_by(self, column) -> List[Tuple[Optional[str], int]]:
        """Grouped count over `column` (one row per distinct value)."""
        stmt = select(column, func.count()).group_by(column)
        return self.session.exec(stmt).all()

    def top_order_careers(self, limit: int) -> List[Tuple[str, int]]:
        item = models.CareerOrderItem
        purchased = func.count(item.id)
        stmt = (
            select(item.career_id, purchased)
            .group_by(item.career_id)
            .order_by(purchased.desc(), item.career_id)
            .limit(limit)
        )
        return self.session.exec(stmt).all()

    def active_licenses_expiring(self, start, end) -> List[models.SchoolCareerLicense]:
        lic = models.SchoolCareerLicense
        stmt = (
            select(lic)
            .where(
                lic.status == models.LicenseStatus.ACTIVE.value,
                lic.expiry_date >= start,
                lic.expiry_date <= end,
            )
            .order_by(lic.expiry_date, lic.id)
        )
        return self.session.exec(stmt).all()
