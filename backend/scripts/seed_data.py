"""CLI script to seed reference data into the backend DB.

Usage: python scripts/seed_data.py [--file seed.json] [--skip-schools]

The seed file is JSON with optional `provinces` (each with `communes`),
`career_categories` and `schools` (each with `classes`) lists. Records
whose name already exists are skipped, so the script can be re-run.
"""
import sys
import argparse
import json
import pathlib
from typing import Optional

# Ensure `backend/` is on sys.path so `careerguide` imports work when running this script directly
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
from sqlmodel import Session, select
from careerguide import models, services
from careerguide.database import create_db_and_tables, engine
from careerguide.errors import AppError

DEFAULT_SEED = {
    "provinces": [
        {"name": "Hanoi", "communes": ["Ba Dinh", "Hoan Kiem", "Dong Da"]},
        {"name": "Ho Chi Minh City", "communes": ["Ben Nghe", "Ben Thanh"]},
        {"name": "Da Nang", "communes": ["Hai Chau", "Thanh Khe"]},
    ],
    "career_categories": ["Engineering", "Health", "Education", "Business", "Arts"],
    "schools": [
        {
            "name": "Nguyen Trai High School",
            "address": "Hanoi",
            "classes": [{"name": "10A1", "grade_level": 10}, {"name": "11A1", "grade_level": 11}],
        },
    ],
}


def _existing(session: Session, model, name: str):
    return session.exec(select(model).where(model.name == name)).first()


def seed(session: Session, data: dict, skip_schools: bool = False) -> dict:
    """Insert the records described by `data`; return created/skipped counters."""
    counts = {"created": 0, "skipped": 0}

    def track(found) -> bool:
        counts["skipped" if found else "created"] += 1
        return not found

    provinces = services.ProvinceService(session)
    communes = services.CommuneService(session)
    for entry in data.get("provinces", []):
        province = _existing(session, models.Province, entry["name"])
        if track(province):
            province_id = provinces.create({"name": entry["name"]})["id"]
        else:
            province_id = province.id
        for commune_name in entry.get("communes", []):
            if track(_existing(session, models.Commune, commune_name)):
                communes.create({"name": commune_name, "province_id": province_id})

    categories = services.CareerCategoryService(session)
    for name in data.get("career_categories", []):
        if track(_existing(session, models.CareerCategory, name)):
            categories.create({"name": name})

    if skip_schools:
        return counts
    schools = services.SchoolService(session)
    classes = services.SchoolClassService(session)
    for entry in data.get("schools", []):
        school = _existing(session, models.School, entry["name"])
        if track(school):
            school_id = schools.create({k: v for k, v in entry.items() if k != "classes"})["id"]
        else:
            school_id = school.id
        for item in entry.get("classes", []):
            found = session.exec(
                select(models.SchoolClass).where(
                    models.SchoolClass.school_id == school_id, models.SchoolClass.name == item["name"]
                )
            ).first()
            if track(found):
                classes.create({**item, "school_id": school_id})
    return counts


def main(seed_file: Optional[str] = None, skip_schools: bool = False):
    """Load the seed file (or the built-in defaults) and write it to the DB."""
    data = DEFAULT_SEED
    if seed_file:
        path = pathlib.Path(seed_file)
        if not path.exists():
            print(f'Seed file not found at {path}')
            return 1
        data = json.loads(path.read_text(encoding="utf-8"))
    create_db_and_tables()
    with Session(engine) as session:
        try:
            counts = seed(session, data, skip_schools=skip_schools)
        except AppError as e:
            print(f'Seeding failed: {e.message}')
            return 1
    print(f'Created {counts["created"]} records, skipped {counts["skipped"]} existing')
    return 0


if __name__ == '__main__':
    parser = argparse.ArgumentParser()
    parser.add_argument('--file', help='JSON seed file (defaults to a small built-in data set)')
    parser.add_argument('--skip-schools', action='store_true', help='Only seed provinces, communes and categories')
    args = parser.parse_args()
    sys.exit(main(seed_file=args.file, skip_schools=args.skip_schools))
