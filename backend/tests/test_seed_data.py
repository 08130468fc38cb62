import importlib.util
from pathlib import Path

from sqlmodel import select

from careerguide import models

_SCRIPT = Path(__file__).resolve().parents[1] / "scripts" / "seed_data.py"
_spec = importlib.util.spec_from_file_location("seed_data", _SCRIPT)
seed_data = importlib.util.module_from_spec(_spec)
_spec.loader.exec_module(seed_data)


def test_seed_is_idempotent(session):
    first = seed_data.seed(session, seed_data.DEFAULT_SEED)
    assert first["skipped"] == 0
    assert first["created"] > 0
    second = seed_data.seed(session, seed_data.DEFAULT_SEED)
    assert second == {"created": 0, "skipped": first["created"]}

    communes = session.exec(select(models.Commune)).all()
    hanoi = session.exec(select(models.Province).where(models.Province.name == "Hanoi")).one()
    assert {c.name for c in communes if c.province_id == hanoi.id} == {"Ba Dinh", "Hoan Kiem", "Dong Da"}


def test_seed_can_skip_schools(session):
    seed_data.seed(session, seed_data.DEFAULT_SEED, skip_schools=True)
    assert session.exec(select(models.School)).all() == []
    assert len(session.exec(select(models.CareerCategory)).all()) == 5
