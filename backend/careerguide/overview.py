"""System-admin dashboard statistics.

`OverviewService` exposes five read-only aggregates. Every operation is
stateless and tolerant of empty tables; a failing sub-query fails the
whole operation (the error propagates, no partial result is returned).
Status histograms are folded onto a fixed taxonomy: every known status
is always present, unknown values coming from the store are dropped.
"""

import logging
from datetime import date, timedelta
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple, Type

from sqlmodel import Session

from . import models, repositories
from .errors import ValidationError
from .utils import lookup

logger = logging.getLogger(__name__)


def fold_statuses(rows: Iterable[Tuple[Optional[str], int]], taxonomy: Type[Enum]) -> Dict[str, int]:
    """Fold grouped `(status, count)` rows onto the closed set `taxonomy`."""
    result = {member.value: 0 for member in taxonomy}
    for status, count in rows:
        if status in result:
            result[status] = int(count)
    return result


def _positive(value, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValidationError(f"Invalid {name} parameter")
    return value


class OverviewService:
    def __init__(self, session: Session):
        self.session = session
        self.stats = repositories.StatsRepository(session)

    def system_stats(self) -> dict:
        counts = self.stats.system_counts()
        return {
            "totalSchools": counts["schools"],
            "totalStudents": counts["students"],
            "totalUsers": counts["users"],
            "totalTeachers": counts["teachers"],
            "totalClasses": counts["classes"],
            "totalCareers": counts["careers"],
            "totalCriteria": counts["criteria"],
            "totalOrders": counts["orders"],
            "activeLicenses": counts["active_licenses"],
            "storage": {
                "totalFiles": counts["files"],
                "totalSizeBytes": counts["file_bytes"],
            },
        }

    def orders_status_stats(self) -> Dict[str, int]:
        return fold_statuses(self.stats.count_by(models.CareerOrder.status), models.OrderStatus)

    def licenses_status_stats(self) -> Dict[str, int]:
        return fold_statuses(self.stats.count_by(models.SchoolCareerLicense.status), models.LicenseStatus)

    def top_purchased_careers(self, limit: int = 10) -> List[dict]:
        """Most ordered careers, highest count first, names via one lookup."""
        _positive(limit, "limit")
        grouped = self.stats.top_order_careers(limit)
        names = lookup.fetch_map(self.session, models.Career, (career_id for career_id, _ in grouped))
        return [
            {
                "careerId": career_id,
                "careerName": lookup.name_of(names, career_id),
                "purchased": int(purchased),
            }
            for career_id, purchased in grouped
        ]

    def expiring_licenses(self, days: int = 15, today: Optional[date] = None) -> List[dict]:
        """Active licenses whose expiry date falls in `[today, today + days]`."""
        _positive(days, "days")
        start = today or date.today()
        end = start + timedelta(days=days)
        licenses = self.stats.active_licenses_expiring(start, end)
        schools = lookup.fetch_map(self.session, models.School, (lic.school_id for lic in licenses))
        careers = lookup.fetch_map(self.session, models.Career, (lic.career_id for lic in licenses))
        logger.debug("expiring licenses window=%s..%s found=%d", start, end, len(licenses))
        return [
            {
                "school": lookup.name_of(schools, lic.school_id),
                "career": lookup.name_of(careers, lic.career_id),
                "expiryDate": lic.expiry_date,
            }
            for lic in licenses
        ]
