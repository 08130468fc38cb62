import os

# every test runs against a private in-memory database
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("ENV", "test")
os.environ.setdefault("LEGACY_ERROR_STATUS", "false")

import pytest
from sqlmodel import Session

from careerguide.database import create_db_and_tables, drop_db_and_tables, engine


@pytest.fixture(autouse=True)
def reset_db():
    """Recreate every table around each test."""
    create_db_and_tables()
    yield
    drop_db_and_tables()


@pytest.fixture
def session():
    with Session(engine) as s:
        yield s


@pytest.fixture
def add(session):
    """Insert rows directly and return them refreshed."""
    def _add(*objs):
        for obj in objs:
            session.add(obj)
        session.commit()
        for obj in objs:
            session.refresh(obj)
        return objs[0] if len(objs) == 1 else objs
    return _add
