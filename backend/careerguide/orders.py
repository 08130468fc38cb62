"""Career orders placed by schools and the licenses issued from them.

An order holds one item per ordered career and is reviewed once, to
APPROVED or REJECTED. Licenses are issued per order item with a rental
period counted in months from today; their status then moves between
PENDING_ACTIVATION, ACTIVE, EXPIRED and REVOKED. REVOKED is terminal.
"""

import calendar
import logging
from datetime import date
from typing import Any, Dict, List, Optional

from sqlmodel import Session

from . import models, repositories
from .errors import ConflictError, NotFoundError, ValidationError
from .services import _check_paging, _dump, _paged, _require
from .utils import lookup

logger = logging.getLogger(__name__)

USER_COLUMNS = ("id", "user_name", "full_name", "email")
REVIEW_STATUSES = (models.OrderStatus.APPROVED.value, models.OrderStatus.REJECTED.value)


def add_months(start: date, months: int) -> date:
    """Shift `start` by whole months, clamping the day to the month end."""
    index = start.month - 1 + months
    year, month = start.year + index // 12, index % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


class CareerOrderService:
    def __init__(self, session: Session):
        self.session = session
        self.repo = repositories.CareerOrderRepository(session)
        self.schools = repositories.SchoolRepository(session)
        self.careers = repositories.CareerRepository(session)

    def list(
        self,
        school_id: Optional[str] = None,
        status: Optional[str] = None,
        skip: int = 0,
        limit: int = 10,
    ) -> dict:
        _check_paging(skip, limit)
        M = models.CareerOrder
        clauses = []
        if school_id:
            clauses.append(M.school_id == school_id)
        if status:
            clauses.append(M.status == status)
        rows, total = self.repo.page(clauses, skip, limit, order_by=[M.created_at.desc(), M.id])
        return _paged(self._enrich([_dump(r) for r in rows]), total, skip, limit)

    def get(self, order_id: str) -> dict:
        order = self._enrich([_dump(self._get_or_404(order_id))])[0]
        items = [_dump(i) for i in self.repo.items_for(order_id)]
        order["items"] = lookup.enrich(self.session, items, "career_id", models.Career, "career")
        return order

    def create(self, data: Dict[str, Any]) -> dict:
        """Create the order and one zero-priced item per career, atomically."""
        school_id, create_by = data.get("school_id"), data.get("create_by")
        if not school_id or not create_by:
            raise ValidationError("school_id and create_by are required")
        career_ids = data.get("career_ids")
        if not isinstance(career_ids, list) or not career_ids:
            raise ValidationError("career_ids is required and must be a non-empty array")
        if not self.schools.get(school_id):
            raise NotFoundError("School not found")
        if not self.session.get(models.User, create_by):
            raise NotFoundError("User not found")
        if len(set(career_ids)) != len(career_ids):
            raise ValidationError("Duplicate career_ids found")
        if self.careers.missing_ids(career_ids):
            raise NotFoundError("Some careers not found")

        order = models.CareerOrder(
            school_id=school_id,
            create_by=create_by,
            note=data.get("note"),
            status=models.OrderStatus.PENDING.value,
        )
        order = self.repo.create_with_items(order, career_ids)
        logger.info("career order created id=%s school_id=%s items=%d", order.id, school_id, len(career_ids))
        return self.get(order.id)

    def review(self, order_id: str, data: Dict[str, Any]) -> dict:
        order = self._get_or_404(order_id)
        status = data.get("status")
        if status not in REVIEW_STATUSES:
            raise ValidationError("status must be APPROVED or REJECTED")
        _require(data.get("reviewed_by"), "reviewed_by is required")
        if not self.session.get(models.User, data["reviewed_by"]):
            raise NotFoundError("User not found")
        fields = {
            "status": status,
            "reviewed_by": data["reviewed_by"],
            "reviewed_at": models.utc_now(),
        }
        if data.get("note") is not None:
            fields["note"] = data["note"]
        self.repo.update(order, fields)
        logger.info("career order reviewed id=%s status=%s", order_id, status)
        return self.get(order_id)

    def delete(self, order_id: str) -> dict:
        order = self._get_or_404(order_id)
        if repositories.LicenseRepository(self.session).exists(models.SchoolCareerLicense.order_id == order_id):
            raise ConflictError("Cannot delete an order with issued licenses")
        self.repo.delete(order)
        logger.info("career order deleted id=%s", order_id)
        return {"message": "Career order deleted successfully"}

    def _enrich(self, rows: List[dict]) -> List[dict]:
        lookup.enrich(self.session, rows, "school_id", models.School, "school")
        users = lookup.fetch_map(
            self.session,
            models.User,
            [r.get("create_by") for r in rows] + [r.get("reviewed_by") for r in rows],
            USER_COLUMNS,
        )
        lookup.attach(rows, "create_by", "creator", users)
        return lookup.attach(rows, "reviewed_by", "reviewer", users)

    def _get_or_404(self, order_id: str) -> models.CareerOrder:
        order = self.repo.get(order_id)
        if not order:
            raise NotFoundError("Career order not found")
        return order


class LicenseService:
    """Issue and manage the career licenses of a school."""
    def __init__(self, session: Session):
        self.session = session
        self.repo = repositories.LicenseRepository(session)
        self.orders = repositories.CareerOrderRepository(session)
        self.schools = repositories.SchoolRepository(session)
        self.careers = repositories.CareerRepository(session)

    def list_by_order(self, order_id: Optional[str], skip: int = 0, limit: int = 10) -> dict:
        _check_paging(skip, limit)
        _require(order_id, "order_id is required")
        if not self.orders.get(order_id):
            raise NotFoundError("Career order not found")
        M = models.SchoolCareerLicense
        rows, total = self.repo.page([M.order_id == order_id], skip, limit, order_by=[M.created_at, M.id])
        return _paged(self._enrich([_dump(r) for r in rows]), total, skip, limit)

    def create(self, data: Dict[str, Any], today: Optional[date] = None) -> dict:
        """Issue one license per item of the order, all in one commit."""
        order_id, months = data.get("order_id"), data.get("month_rental")
        if not order_id or months is None:
            raise ValidationError("order_id and month_rental are required")
        if isinstance(months, bool) or not isinstance(months, int) or months <= 0:
            raise ValidationError("month_rental must be greater than 0")
        order = self.orders.get(order_id)
        if not order:
            raise NotFoundError("Career order not found")
        if not order.school_id or not self.schools.get(order.school_id):
            raise NotFoundError("School not found")
        items = self.orders.items_for(order_id)
        if not items:
            raise ValidationError("No items found in this order")
        if self.careers.missing_ids(i.career_id for i in items):
            raise NotFoundError("Some careers not found")
        if self.repo.exists(models.SchoolCareerLicense.order_id == order_id):
            raise ConflictError("Licenses for this order already exist")

        start = today or date.today()
        expiry = add_months(start, months)
        licenses = [
            models.SchoolCareerLicense(
                school_id=order.school_id,
                career_id=item.career_id,
                order_id=order_id,
                order_item_id=item.id,
                status=models.LicenseStatus.PENDING_ACTIVATION.value,
                start_date=start,
                expiry_date=expiry,
            )
            for item in items
        ]
        self.repo.create_many(licenses)
        logger.info("licenses created order_id=%s count=%d expiry=%s", order_id, len(licenses), expiry)
        return {
            "message": f"Created {len(licenses)} licenses successfully",
            "data": self._enrich([_dump(lic) for lic in licenses]),
        }

    def revoke(self, license_id: str) -> dict:
        lic = self._get_or_404(license_id)
        if lic.status == models.LicenseStatus.REVOKED.value:
            raise ConflictError("License is already revoked")
        return _dump(self.repo.update(lic, {"status": models.LicenseStatus.REVOKED.value}))

    def renew(self, license_id: str, expiry_date: Optional[date], today: Optional[date] = None) -> dict:
        if expiry_date is None:
            raise ValidationError("expiry_date is required")
        lic = self._get_or_404(license_id)
        if lic.status == models.LicenseStatus.REVOKED.value:
            raise ConflictError("Cannot renew a revoked license")
        if lic.start_date and expiry_date <= lic.start_date:
            raise ValidationError("expiry_date must be after start_date")
        fields: Dict[str, Any] = {"expiry_date": expiry_date}
        if lic.status == models.LicenseStatus.EXPIRED.value and expiry_date > (today or date.today()):
            fields["status"] = models.LicenseStatus.ACTIVE.value
        return _dump(self.repo.update(lic, fields))

    def activate(self, license_id: str, today: Optional[date] = None) -> dict:
        lic = self._get_or_404(license_id)
        if lic.status == models.LicenseStatus.REVOKED.value:
            raise ConflictError("Cannot activate a revoked license")
        if lic.status == models.LicenseStatus.ACTIVE.value:
            raise ConflictError("License is already active")
        if not lic.start_date or not lic.expiry_date:
            raise ValidationError("License must have start_date and expiry_date")
        today = today or date.today()
        if today < lic.start_date:
            raise ValidationError("Cannot activate license before start_date")
        if today > lic.expiry_date:
            raise ValidationError("Cannot activate license after expiry_date")
        return _dump(self.repo.update(lic, {"status": models.LicenseStatus.ACTIVE.value}))

    def _enrich(self, rows: List[dict]) -> List[dict]:
        lookup.enrich(self.session, rows, "school_id", models.School, "school")
        return lookup.enrich(self.session, rows, "career_id", models.Career, "career")

    def _get_or_404(self, license_id: str) -> models.SchoolCareerLicense:
        lic = self.repo.get(license_id)
        if not lic:
            raise NotFoundError("License not found")
        return lic
