from sqlalchemy import event

from careerguide import models
from careerguide.config import settings
from careerguide.database import engine
from careerguide.utils import lookup
from careerguide.utils.pagination import parse_pagination


class _StatementCounter:
    def __init__(self):
        self.count = 0

    def __call__(self, *_args, **_kwargs):
        self.count += 1


def test_fetch_map_without_keys_issues_no_query(session):
    counter = _StatementCounter()
    event.listen(engine, "before_cursor_execute", counter)
    try:
        assert lookup.fetch_map(session, models.Province, [None, None]) == {}
        assert lookup.fetch_map(session, models.Province, []) == {}
    finally:
        event.remove(engine, "before_cursor_execute", counter)
    assert counter.count == 0


def test_enrich_uses_one_query_and_marks_missing(session, add):
    hanoi, hue = add(models.Province(name="Hanoi"), models.Province(name="Hue"))
    rows = [
        {"id": "a", "province_id": hanoi.id},
        {"id": "b", "province_id": hanoi.id},
        {"id": "c", "province_id": hue.id},
        {"id": "d", "province_id": "gone"},
        {"id": "e", "province_id": None},
    ]
    counter = _StatementCounter()
    event.listen(engine, "before_cursor_execute", counter)
    try:
        lookup.enrich(session, rows, "province_id", models.Province, "province")
    finally:
        event.remove(engine, "before_cursor_execute", counter)
    assert counter.count == 1
    assert rows[0]["province"] == {"id": hanoi.id, "name": "Hanoi"}
    assert rows[1]["province"] == rows[0]["province"]
    assert rows[1]["province"] is not rows[0]["province"]
    assert rows[2]["province"]["name"] == "Hue"
    assert rows[3]["province"] is None
    assert rows[4]["province"] is None


def test_name_of_falls_back_to_unknown():
    mapping = {"x": {"id": "x", "name": "Known"}, "y": {"id": "y", "name": None}}
    assert lookup.name_of(mapping, "x") == "Known"
    assert lookup.name_of(mapping, "y") == "Unknown"
    assert lookup.name_of(mapping, "z") == "Unknown"
    assert lookup.name_of(mapping, None) == "Unknown"


def test_parse_pagination_defaults_and_fallbacks():
    p = parse_pagination()
    assert (p.page, p.limit, p.skip) == (1, settings.DEFAULT_PAGE_SIZE, 0)
    p = parse_pagination("3", "20")
    assert (p.page, p.limit, p.skip) == (3, 20, 40)
    p = parse_pagination("abc", "-5")
    assert (p.page, p.limit) == (1, settings.DEFAULT_PAGE_SIZE)
    p = parse_pagination("0", "0")
    assert (p.page, p.limit) == (1, settings.DEFAULT_PAGE_SIZE)


def test_parse_pagination_caps_limit():
    p = parse_pagination("2", str(settings.MAX_PAGE_SIZE + 500))
    assert p.limit == settings.MAX_PAGE_SIZE
    assert p.meta({"total": 7, "skip": p.skip, "limit": p.limit})["page"] == 2
