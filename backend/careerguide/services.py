"""Business logic services used by HTTP controllers.

This module holds small service classes that coordinate repositories
and the lookup helper. Services are intentionally thin: they validate
input, run the uniqueness/reference pre-checks, persist through the
repositories and shape plain dict results for the envelope.

The pre-checks are advisory and not transactional with the write that
follows; the store's own unique/foreign key constraints are the final
word and are surfaced by the repositories as the same error classes.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence

from sqlmodel import Session

from . import models, repositories
from .config import settings
from .errors import ConflictError, NotFoundError, ValidationError
from .repositories import contains_any
from .utils import lookup

logger = logging.getLogger(__name__)


def _dump(obj) -> dict:
    return obj.model_dump()


def _paged(rows: Iterable[dict], total: int, skip: int, limit: int) -> dict:
    return {"data": list(rows), "meta": {"total": total, "skip": skip, "limit": limit}}


def _check_paging(skip: int, limit: int) -> None:
    if skip is None or skip < 0:
        raise ValidationError("skip must be a non-negative integer")
    if limit is None or limit <= 0:
        raise ValidationError("limit must be a positive integer")


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _require(value: Any, message: str) -> None:
    if _blank(value):
        raise ValidationError(message)


def _pick(fields: Dict[str, Any], allowed: Sequence[str]) -> Dict[str, Any]:
    """Keep only the updatable keys that were actually supplied."""
    return {k: v for k, v in fields.items() if k in allowed}


def _not_null(fields: Dict[str, Any], *keys: str) -> None:
    for key in keys:
        if key in fields and fields[key] is None:
            raise ValidationError(f"{key} cannot be null")


class CareerCategoryService:
    """CRUD for career categories; names are unique."""
    def __init__(self, session: Session):
        self.session = session
        self.repo = repositories.CareerCategoryRepository(session)

    def list(self, search: Optional[str] = None, skip: int = 0, limit: int = 10) -> dict:
        _check_paging(skip, limit)
        M = models.CareerCategory
        rows, total = self.repo.page([contains_any(search, M.name)], skip, limit, order_by=[M.name])
        return _paged((_dump(r) for r in rows), total, skip, limit)

    def get(self, category_id: str) -> dict:
        return _dump(self._get_or_404(category_id))

    def create(self, data: Dict[str, Any]) -> dict:
        name = data.get("name")
        _require(name, "Career category name is required")
        if self.repo.value_taken(models.CareerCategory.name, name):
            raise ConflictError("Career category name already exists")
        category = self.repo.create(models.CareerCategory(name=name))
        logger.info("career category created id=%s", category.id)
        return _dump(category)

    def update(self, category_id: str, fields: Dict[str, Any]) -> dict:
        category = self._get_or_404(category_id)
        fields = _pick(fields, ("name",))
        if "name" in fields:
            _require(fields["name"], "Career category name cannot be empty")
            if fields["name"] != category.name and self.repo.value_taken(
                models.CareerCategory.name, fields["name"], exclude_id=category.id
            ):
                raise ConflictError("Career category name already exists")
        return _dump(self.repo.update(category, fields))

    def delete(self, category_id: str) -> dict:
        category = self._get_or_404(category_id)
        self.repo.delete(category)
        logger.info("career category deleted id=%s", category_id)
        return {"message": "Delete career category successfully"}

    def _get_or_404(self, category_id: str) -> models.CareerCategory:
        category = self.repo.get(category_id)
        if not category:
            raise NotFoundError("Career category not found")
        return category


class ProvinceService:
    """CRUD for provinces plus the paged commune listing of one province.

    Province names are unique by convention only: the service checks
    before writing, the schema carries no unique index.
    """
    def __init__(self, session: Session):
        self.session = session
        self.repo = repositories.ProvinceRepository(session)
        self.communes = repositories.CommuneRepository(session)

    def list(self, search: Optional[str] = None, name: Optional[str] = None, skip: int = 0, limit: int = 10) -> dict:
        _check_paging(skip, limit)
        M = models.Province
        clauses = [contains_any(search, M.name), contains_any(name, M.name)]
        rows, total = self.repo.page(clauses, skip, limit, order_by=[M.name])
        return _paged((_dump(r) for r in rows), total, skip, limit)

    def get(self, province_id: str) -> dict:
        return _dump(self._get_or_404(province_id))

    def create(self, data: Dict[str, Any]) -> dict:
        name = data.get("name")
        _require(name, "Province name is required")
        if self.repo.value_taken(models.Province.name, name):
            raise ConflictError("Province name already exists")
        province = self.repo.create(models.Province(name=name))
        logger.info("province created id=%s", province.id)
        return _dump(province)

    def update(self, province_id: str, fields: Dict[str, Any]) -> dict:
        province = self._get_or_404(province_id)
        fields = _pick(fields, ("name",))
        if "name" in fields:
            _require(fields["name"], "Province name cannot be empty")
            if fields["name"] != province.name and self.repo.value_taken(
                models.Province.name, fields["name"], exclude_id=province.id
            ):
                raise ConflictError("Province name already exists")
        return _dump(self.repo.update(province, fields))

    def delete(self, province_id: str) -> dict:
        province = self._get_or_404(province_id)
        self.repo.delete(province)
        logger.info("province deleted id=%s", province_id)
        return {"message": "Delete province successfully"}

    def list_communes(self, province_id: str, skip: int = 0, limit: int = 10) -> dict:
        _check_paging(skip, limit)
        self._get_or_404(province_id)
        C = models.Commune
        rows, total = self.communes.page([C.province_id == province_id], skip, limit, order_by=[C.name])
        return _paged((_dump(r) for r in rows), total, skip, limit)

    def _get_or_404(self, province_id: str) -> models.Province:
        province = self.repo.get(province_id)
        if not province:
            raise NotFoundError("Province not found")
        return province


class CommuneService:
    """CRUD for communes; every result carries its `province` as `{id, name}`."""
    def __init__(self, session: Session):
        self.session = session
        self.repo = repositories.CommuneRepository(session)
        self.provinces = repositories.ProvinceRepository(session)

    def list(
        self,
        search: Optional[str] = None,
        name: Optional[str] = None,
        province_id: Optional[str] = None,
        skip: int = 0,
        limit: int = 10,
    ) -> dict:
        _check_paging(skip, limit)
        M = models.Commune
        clauses = [contains_any(search, M.name), contains_any(name, M.name)]
        if province_id:
            clauses.append(M.province_id == province_id)
        rows, total = self.repo.page(clauses, skip, limit, order_by=[M.name])
        data = self._with_province([_dump(r) for r in rows])
        return _paged(data, total, skip, limit)

    def get(self, commune_id: str) -> dict:
        return self._with_province([_dump(self._get_or_404(commune_id))])[0]

    def create(self, data: Dict[str, Any]) -> dict:
        name = data.get("name")
        province_id = data.get("province_id")
        _require(name, "Commune name is required")
        self._check_province(province_id)
        if self.repo.value_taken(models.Commune.name, name):
            raise ConflictError("Commune name already exists")
        commune = self.repo.create(models.Commune(name=name, province_id=province_id))
        logger.info("commune created id=%s province_id=%s", commune.id, province_id)
        return self._with_province([_dump(commune)])[0]

    def update(self, commune_id: str, fields: Dict[str, Any]) -> dict:
        commune = self._get_or_404(commune_id)
        fields = _pick(fields, ("name", "province_id"))
        if "province_id" in fields:
            self._check_province(fields["province_id"])
        if "name" in fields:
            _require(fields["name"], "Commune name cannot be empty")
            if fields["name"] != commune.name and self.repo.value_taken(
                models.Commune.name, fields["name"], exclude_id=commune.id
            ):
                raise ConflictError("Commune name already exists")
        commune = self.repo.update(commune, fields)
        return self._with_province([_dump(commune)])[0]

    def delete(self, commune_id: str) -> dict:
        commune = self._get_or_404(commune_id)
        self.repo.delete(commune)
        logger.info("commune deleted id=%s", commune_id)
        return {"message": "Delete commune successfully"}

    def _check_province(self, province_id: Optional[str]) -> None:
        if province_id is not None and not self.provinces.get(province_id):
            raise NotFoundError("Province not found")

    def _with_province(self, rows: List[dict]) -> List[dict]:
        return lookup.enrich(self.session, rows, "province_id", models.Province, "province")

    def _get_or_404(self, commune_id: str) -> models.Commune:
        commune = self.repo.get(commune_id)
        if not commune:
            raise NotFoundError("Commune not found")
        return commune


class SchoolService:
    """CRUD for schools; names and contact emails are unique."""
    UPDATABLE = ("name", "address", "phone_number", "contact_email")

    def __init__(self, session: Session):
        self.session = session
        self.repo = repositories.SchoolRepository(session)
        self.classes = repositories.SchoolClassRepository(session)

    def list(self, search: Optional[str] = None, name: Optional[str] = None, skip: int = 0, limit: int = 10) -> dict:
        _check_paging(skip, limit)
        M = models.School
        clauses = [contains_any(search, M.name, M.address, M.contact_email), contains_any(name, M.name)]
        rows, total = self.repo.page(clauses, skip, limit, order_by=[M.name])
        return _paged((_dump(r) for r in rows), total, skip, limit)

    def get(self, school_id: str) -> dict:
        return _dump(self._get_or_404(school_id))

    def create(self, data: Dict[str, Any]) -> dict:
        data = _pick(data, self.UPDATABLE)
        _require(data.get("name"), "School name is required")
        self._check_unique(data)
        school = self.repo.create(models.School(**data))
        logger.info("school created id=%s", school.id)
        return _dump(school)

    def update(self, school_id: str, fields: Dict[str, Any]) -> dict:
        school = self._get_or_404(school_id)
        fields = _pick(fields, self.UPDATABLE)
        if "name" in fields:
            _require(fields["name"], "School name cannot be empty")
        self._check_unique(fields, current=school)
        return _dump(self.repo.update(school, fields))

    def delete(self, school_id: str) -> dict:
        school = self._get_or_404(school_id)
        kind = self.repo.dependents(school_id)
        if kind:
            raise ConflictError(f"Cannot delete school. There are {kind} associated with this school")
        self.repo.delete(school)
        logger.info("school deleted id=%s", school_id)
        return {"message": "Delete school successfully"}

    def list_classes(self, school_id: str, skip: int = 0, limit: int = 10) -> dict:
        _check_paging(skip, limit)
        self._get_or_404(school_id)
        C = models.SchoolClass
        rows, total = self.classes.page([C.school_id == school_id], skip, limit, order_by=[C.grade_level, C.name])
        return _paged((_dump(r) for r in rows), total, skip, limit)

    def _check_unique(self, data: Dict[str, Any], current: Optional[models.School] = None) -> None:
        exclude = current.id if current else None
        name = data.get("name")
        if name and (current is None or name != current.name):
            if self.repo.value_taken(models.School.name, name, exclude_id=exclude):
                raise ConflictError("School name already exists")
        email = data.get("contact_email")
        if email and (current is None or email != current.contact_email):
            if self.repo.value_taken(models.School.contact_email, email, exclude_id=exclude):
                raise ConflictError("Contact email already exists")

    def _get_or_404(self, school_id: str) -> models.School:
        school = self.repo.get(school_id)
        if not school:
            raise NotFoundError("School not found")
        return school


class SchoolClassService:
    """CRUD for classes; results carry their `school` as `{id, name}`."""
    UPDATABLE = ("name", "grade_level", "school_id")

    def __init__(self, session: Session):
        self.session = session
        self.repo = repositories.SchoolClassRepository(session)
        self.schools = repositories.SchoolRepository(session)

    def list(
        self,
        search: Optional[str] = None,
        name: Optional[str] = None,
        school_id: Optional[str] = None,
        grade_level: Optional[int] = None,
        skip: int = 0,
        limit: int = 10,
    ) -> dict:
        _check_paging(skip, limit)
        M = models.SchoolClass
        clauses = [contains_any(search, M.name), contains_any(name, M.name)]
        if school_id:
            clauses.append(M.school_id == school_id)
        if grade_level is not None:
            clauses.append(M.grade_level == grade_level)
        rows, total = self.repo.page(clauses, skip, limit, order_by=[M.created_at.desc()])
        return _paged(self._with_school([_dump(r) for r in rows]), total, skip, limit)

    def get(self, class_id: str) -> dict:
        return self._with_school([_dump(self._get_or_404(class_id))])[0]

    def create(self, data: Dict[str, Any]) -> dict:
        data = _pick(data, self.UPDATABLE)
        _require(data.get("name"), "Class name is required")
        _require(data.get("school_id"), "School ID is required")
        self._check_grade(data.get("grade_level"))
        self._check_school(data["school_id"])
        school_class = self.repo.create(models.SchoolClass(**data))
        logger.info("class created id=%s school_id=%s", school_class.id, school_class.school_id)
        return self._with_school([_dump(school_class)])[0]

    def update(self, class_id: str, fields: Dict[str, Any]) -> dict:
        school_class = self._get_or_404(class_id)
        fields = _pick(fields, self.UPDATABLE)
        if "name" in fields:
            _require(fields["name"], "Class name cannot be empty")
        if "grade_level" in fields:
            self._check_grade(fields["grade_level"])
        if "school_id" in fields:
            _require(fields["school_id"], "School ID is required")
            self._check_school(fields["school_id"])
        school_class = self.repo.update(school_class, fields)
        return self._with_school([_dump(school_class)])[0]

    def delete(self, class_id: str) -> dict:
        school_class = self._get_or_404(class_id)
        self.repo.delete(school_class)
        return {"message": "Delete class successfully"}

    @staticmethod
    def _check_grade(grade_level: Optional[int]) -> None:
        if grade_level is not None and not 1 <= grade_level <= 12:
            raise ValidationError("Grade level must be a number between 1 and 12")

    def _check_school(self, school_id: str) -> None:
        if not self.schools.get(school_id):
            raise NotFoundError("School not found")

    def _with_school(self, rows: List[dict]) -> List[dict]:
        return lookup.enrich(self.session, rows, "school_id", models.School, "school")

    def _get_or_404(self, class_id: str) -> models.SchoolClass:
        school_class = self.repo.get(class_id)
        if not school_class:
            raise NotFoundError("Class not found")
        return school_class


class CareerService:
    """Career management: CRUD with category links kept in the same transaction."""
    UPDATABLE = ("code", "name", "description", "tags", "is_active", "created_by_admin")

    def __init__(self, session: Session):
        self.session = session
        self.repo = repositories.CareerRepository(session)
        self.categories = repositories.CareerCategoryRepository(session)

    def list(self, search: Optional[str] = None, is_active: Optional[bool] = None, skip: int = 0, limit: int = 10) -> dict:
        _check_paging(skip, limit)
        M = models.Career
        clauses = [contains_any(search, M.code, M.name, M.description, M.tags)]
        if is_active is not None:
            clauses.append(M.is_active == is_active)
        rows, total = self.repo.page(clauses, skip, limit, order_by=[M.created_at.desc(), M.name])
        data = [_dump(r) for r in rows]
        by_career = self.repo.categories_by_career([r["id"] for r in data])
        for row in data:
            row["categories"] = by_career.get(row["id"], [])
        return _paged(data, total, skip, limit)

    def get(self, career_id: str) -> dict:
        career = _dump(self._get_or_404(career_id))
        career["categories"] = self.repo.categories_by_career([career_id])[career_id]
        career["criteria_count"] = self.repo.active_criteria_counts([career_id])[career_id]
        return career

    def create(self, data: Dict[str, Any]) -> dict:
        category_ids = data.get("career_category_ids") or []
        fields = _pick(data, self.UPDATABLE)
        _require(fields.get("code"), "Career code is required")
        _require(fields.get("name"), "Career name is required")
        self._check_unique(fields)
        self._check_categories(category_ids)
        if fields.get("is_active") is None:
            fields["is_active"] = False
        career = self.repo.create_with_categories(models.Career(**fields), category_ids)
        logger.info("career created id=%s code=%s", career.id, career.code)
        return self.get(career.id)

    def update(self, career_id: str, fields: Dict[str, Any]) -> dict:
        career = self._get_or_404(career_id)
        category_ids = None
        if "career_category_ids" in fields:
            category_ids = fields["career_category_ids"] or []
        fields = _pick(fields, self.UPDATABLE)
        for key in ("code", "name"):
            if key in fields:
                _require(fields[key], f"Career {key} cannot be empty")
        _not_null(fields, "is_active")
        self._check_unique(fields, current=career)
        if category_ids is not None:
            self._check_categories(category_ids)
        self.repo.update_with_categories(career, fields, category_ids)
        return self.get(career_id)

    def delete(self, career_id: str) -> dict:
        career = self._get_or_404(career_id)
        if self.repo.in_use(career_id):
            raise ConflictError("Cannot delete career. It is referenced by orders or licenses")
        self.repo.delete(career)
        logger.info("career deleted id=%s", career_id)
        return {"message": "Delete career successfully"}

    def _check_unique(self, fields: Dict[str, Any], current: Optional[models.Career] = None) -> None:
        exclude = current.id if current else None
        for key, message in (("code", "Career code already exists"), ("name", "Career name already exists")):
            value = fields.get(key)
            if value and (current is None or value != getattr(current, key)):
                if self.repo.value_taken(getattr(models.Career, key), value, exclude_id=exclude):
                    raise ConflictError(message)

    def _check_categories(self, category_ids: Sequence[str]) -> None:
        missing = self.categories.missing_ids(category_ids)
        if missing:
            raise NotFoundError(f"Career category not found: {', '.join(missing)}")

    def _get_or_404(self, career_id: str) -> models.Career:
        career = self.repo.get(career_id)
        if not career:
            raise NotFoundError("Career not found")
        return career


class QuestionService:
    """Question bank management.

    A question and its options are written together: create, update with
    `options` and the options-only replacement each run in one
    transaction, and deleting a question removes its options with it.
    Questions referenced by an exam cannot be deleted.
    """
    UPDATABLE = (
        "content", "question_type", "difficulty_level", "category_id", "career_criteria_id",
        "points", "explanation", "tags", "metadata", "is_active",
    )

    def __init__(self, session: Session):
        self.session = session
        self.repo = repositories.QuestionRepository(session)
        self.categories = repositories.QuestionCategoryRepository(session)
        self.criteria = repositories.CareerCriteriaRepository(session)

    def list(
        self,
        search: Optional[str] = None,
        category_id: Optional[str] = None,
        career_criteria_id: Optional[str] = None,
        question_type: Optional[str] = None,
        difficulty_level: Optional[str] = None,
        is_active: Optional[bool] = None,
        skip: int = 0,
        limit: int = 10,
    ) -> dict:
        _check_paging(skip, limit)
        Q = models.Question
        clauses = [contains_any(search, Q.content, Q.tags)]
        equals = (
            (Q.category_id, category_id),
            (Q.career_criteria_id, career_criteria_id),
            (Q.question_type, question_type),
            (Q.difficulty_level, difficulty_level),
        )
        clauses += [column == value for column, value in equals if value]
        if is_active is not None:
            clauses.append(Q.is_active == is_active)
        rows, total = self.repo.page(clauses, skip, limit, order_by=[Q.created_at.desc(), Q.id])
        return _paged(self._enrich([self._to_dict(r) for r in rows]), total, skip, limit)

    def get(self, question_id: str) -> dict:
        question = self._get_or_404(question_id)
        data = self._enrich([self._to_dict(question)], criteria_columns=("id", "name", "career_id"))[0]
        data["options"] = [_dump(o) for o in self.repo.options_for(question_id)]
        return data

    def create(self, data: Dict[str, Any]) -> dict:
        _require(data.get("content"), "Question content is required")
        self._check_references(data)
        fields = self._columns(_pick(data, self.UPDATABLE))
        if fields.get("is_active") is None:
            fields["is_active"] = True
        question = models.Question(**fields, created_by=data.get("created_by"))
        options = self._build_options(data.get("options") or [])
        question = self.repo.create(question, options)
        logger.info("question created id=%s options=%d", question.id, len(options))
        return self._with_options(question)

    def update(self, question_id: str, fields: Dict[str, Any]) -> dict:
        question = self._get_or_404(question_id)
        options = None
        if "options" in fields:
            options = self._build_options(fields.get("options") or [])
        changes = _pick(fields, self.UPDATABLE)
        if "content" in changes:
            _require(changes["content"], "Question content cannot be empty")
        _not_null(changes, "is_active")
        self._check_references(changes)
        question = self.repo.update(question, self._columns(changes), options)
        return self._with_options(question)

    def replace_options(self, question_id: str, options: List[Dict[str, Any]]) -> dict:
        self._get_or_404(question_id)
        self.repo.replace_options(question_id, self._build_options(options or []))
        return {"message": "Question options updated successfully"}

    def delete(self, question_id: str) -> dict:
        question = self._get_or_404(question_id)
        if self.repo.used_in_exam(question_id):
            raise ConflictError("Cannot delete question. It is being used in exams")
        self.repo.delete(question)
        logger.info("question deleted id=%s", question_id)
        return {"message": "Question deleted successfully"}

    def _check_references(self, data: Dict[str, Any]) -> None:
        if data.get("category_id") is not None and not self.categories.get(data["category_id"]):
            raise NotFoundError("Question category not found")
        if data.get("career_criteria_id") is not None and not self.criteria.get(data["career_criteria_id"]):
            raise NotFoundError("Career criteria not found")
        creator = data.get("created_by")
        if creator is not None and not self.session.get(models.User, creator):
            raise NotFoundError("Creator not found")

    @staticmethod
    def _columns(fields: Dict[str, Any]) -> Dict[str, Any]:
        if "metadata" in fields:
            fields = dict(fields)
            fields["question_metadata"] = fields.pop("metadata")
        return fields

    @staticmethod
    def _build_options(options: Sequence[Dict[str, Any]]) -> List[models.QuestionOption]:
        built = []
        for idx, opt in enumerate(options):
            _require(opt.get("option_text"), "Option text is required")
            order_index = opt.get("order_index")
            built.append(
                models.QuestionOption(
                    option_key=opt.get("option_key"),
                    option_text=opt["option_text"],
                    is_correct=bool(opt.get("is_correct")),
                    order_index=idx if order_index is None else order_index,
                )
            )
        return built

    @staticmethod
    def _to_dict(question: models.Question) -> dict:
        data = question.model_dump()
        data["metadata"] = data.pop("question_metadata", None)
        return data

    def _with_options(self, question: models.Question) -> dict:
        data = self._to_dict(question)
        data["options"] = [_dump(o) for o in self.repo.options_for(question.id)]
        return data

    def _enrich(self, rows: List[dict], criteria_columns: Sequence[str] = ("id", "name")) -> List[dict]:
        lookup.enrich(self.session, rows, "category_id", models.QuestionCategory, "category")
        lookup.enrich(self.session, rows, "career_criteria_id", models.CareerCriteria, "career_criteria", criteria_columns)
        lookup.enrich(self.session, rows, "created_by", models.User, "creator", ("id", "full_name"))
        return rows

    def _get_or_404(self, question_id: str) -> models.Question:
        question = self.repo.get(question_id)
        if not question:
            raise NotFoundError("Question not found")
        return question


class PublicCatalogService:
    """Read-only catalogue for the public landing pages."""
    def __init__(self, session: Session):
        self.session = session
        self.categories = repositories.CareerCategoryRepository(session)
        self.careers = repositories.CareerRepository(session)

    def list_categories(self) -> List[dict]:
        return [{"id": c.id, "name": c.name} for c in self.categories.list_all()]

    def list_careers(
        self,
        search: Optional[str] = None,
        category_ids: Optional[Sequence[str]] = None,
        skip: int = 0,
        limit: int = 10,
    ) -> dict:
        """Return active careers with categories, criteria count and image.

        When `category_ids` is given and no career is linked to any of
        them, an empty page is returned without counting.
        """
        _check_paging(skip, limit)
        M = models.Career
        clauses = [M.is_active == True, contains_any(search, M.name, M.code)]  # noqa: E712
        if category_ids:
            career_ids = self.careers.ids_in_categories(category_ids)
            if not career_ids:
                return _paged([], 0, skip, limit)
            clauses.append(M.id.in_(career_ids))
        rows, total = self.careers.page(clauses, skip, limit, order_by=[M.name])
        ids = [r.id for r in rows]
        categories = self.careers.categories_by_career(ids)
        criteria = self.careers.active_criteria_counts(ids)
        images = self.careers.first_files(models.ObjectType.CAREER_THUMBS.value, ids)
        data = [
            {
                "id": r.id,
                "code": r.code,
                "name": r.name,
                "categories": categories.get(r.id, []),
                "criteria_count": criteria.get(r.id, 0),
                "image_url": self._file_url(images.get(r.id)),
            }
            for r in rows
        ]
        return _paged(data, total, skip, limit)

    @staticmethod
    def _file_url(stored: Optional[models.StoredFile]) -> Optional[str]:
        if stored is None:
            return None
        return f"{settings.FILE_BASE_URL}/{stored.bucket_name}/{stored.file_path.lstrip('/')}"


class CareerCriteriaService:
    """CRUD for the criteria of a career; names are unique within one career."""
    UPDATABLE = ("name", "description", "order_index", "is_active", "career_id")
    CAREER_COLUMNS = ("id", "name", "description", "tags", "is_active")

    def __init__(self, session: Session):
        self.session = session
        self.repo = repositories.CareerCriteriaRepository(session)
        self.careers = repositories.CareerRepository(session)

    def list(
        self,
        search: Optional[str] = None,
        career_id: Optional[str] = None,
        is_active: Optional[bool] = None,
        skip: int = 0,
        limit: int = 10,
    ) -> dict:
        _check_paging(skip, limit)
        M = models.CareerCriteria
        clauses = [contains_any(search, M.name, M.description)]
        if career_id:
            clauses.append(M.career_id == career_id)
        if is_active is not None:
            clauses.append(M.is_active == is_active)
        rows, total = self.repo.page(clauses, skip, limit, order_by=[M.order_index, M.name])
        return _paged(self._with_career([_dump(r) for r in rows]), total, skip, limit)

    def get(self, criteria_id: str) -> dict:
        return self._with_career([_dump(self._get_or_404(criteria_id))])[0]

    def create(self, data: Dict[str, Any]) -> dict:
        fields = _pick(data, self.UPDATABLE)
        _require(fields.get("name"), "Career criteria name is required")
        _require(fields.get("career_id"), "Career ID is required")
        self._check_career(fields["career_id"])
        self._check_unique(fields["name"], fields["career_id"])
        if fields.get("is_active") is None:
            fields["is_active"] = False
        criteria = self.repo.create(models.CareerCriteria(**fields))
        logger.info("career criteria created id=%s career_id=%s", criteria.id, criteria.career_id)
        return self.get(criteria.id)

    def update(self, criteria_id: str, fields: Dict[str, Any]) -> dict:
        criteria = self._get_or_404(criteria_id)
        fields = _pick(fields, self.UPDATABLE)
        if "name" in fields:
            _require(fields["name"], "Career criteria name cannot be empty")
        if "career_id" in fields:
            _require(fields["career_id"], "Career ID is required")
            if fields["career_id"] != criteria.career_id:
                self._check_career(fields["career_id"])
        _not_null(fields, "is_active")
        name = fields.get("name", criteria.name)
        career_id = fields.get("career_id", criteria.career_id)
        if name != criteria.name or career_id != criteria.career_id:
            self._check_unique(name, career_id, exclude_id=criteria.id)
        self.repo.update(criteria, fields)
        return self.get(criteria_id)

    def toggle_active(self, criteria_id: str) -> dict:
        criteria = self._get_or_404(criteria_id)
        self.repo.update(criteria, {"is_active": not criteria.is_active})
        return {"message": f"Update status to {str(criteria.is_active).lower()} successfully"}

    def delete(self, criteria_id: str) -> dict:
        criteria = self._get_or_404(criteria_id)
        self.repo.delete(criteria)
        logger.info("career criteria deleted id=%s", criteria_id)
        return {"message": "Career criteria deleted permanently"}

    def _check_career(self, career_id: str) -> None:
        if not self.careers.get(career_id):
            raise NotFoundError("Career not found")

    def _check_unique(self, name: str, career_id: str, exclude_id: Optional[str] = None) -> None:
        M = models.CareerCriteria
        clauses = [M.name == name, M.career_id == career_id]
        if exclude_id is not None:
            clauses.append(M.id != exclude_id)
        if self.repo.exists(*clauses):
            raise ConflictError("Career criteria name already exists in this career")

    def _with_career(self, rows: List[dict]) -> List[dict]:
        return lookup.enrich(self.session, rows, "career_id", models.Career, "career", self.CAREER_COLUMNS)

    def _get_or_404(self, criteria_id: str) -> models.CareerCriteria:
        criteria = self.repo.get(criteria_id)
        if not criteria:
            raise NotFoundError("Career criteria not found")
        return criteria


class QuestionCategoryService:
    """CRUD for question categories, the sections of an assessment."""
    UPDATABLE = ("name", "description", "order_index")

    def __init__(self, session: Session):
        self.session = session
        self.repo = repositories.QuestionCategoryRepository(session)

    def list(self, search: Optional[str] = None, skip: int = 0, limit: int = 10) -> dict:
        _check_paging(skip, limit)
        M = models.QuestionCategory
        rows, total = self.repo.page([contains_any(search, M.name)], skip, limit, order_by=[M.order_index, M.name])
        return _paged((_dump(r) for r in rows), total, skip, limit)

    def get(self, category_id: str) -> dict:
        return _dump(self._get_or_404(category_id))

    def create(self, data: Dict[str, Any]) -> dict:
        fields = _pick(data, self.UPDATABLE)
        _require(fields.get("name"), "Question category name is required")
        category = self.repo.create(models.QuestionCategory(**fields))
        logger.info("question category created id=%s", category.id)
        return _dump(category)

    def update(self, category_id: str, fields: Dict[str, Any]) -> dict:
        category = self._get_or_404(category_id)
        fields = _pick(fields, self.UPDATABLE)
        if "name" in fields:
            _require(fields["name"], "Question category name cannot be empty")
        return _dump(self.repo.update(category, fields))

    def delete(self, category_id: str) -> dict:
        category = self._get_or_404(category_id)
        in_use = self.repo.question_count(category_id)
        if in_use:
            raise ConflictError(
                f"Cannot delete category with {in_use} existing questions. Please reassign or delete questions first."
            )
        self.repo.delete(category)
        return {"message": "Question category deleted successfully"}

    def _get_or_404(self, category_id: str) -> models.QuestionCategory:
        category = self.repo.get(category_id)
        if not category:
            raise NotFoundError("Question category not found")
        return category
