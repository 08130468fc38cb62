"""Batched foreign-key resolution for service results.

Rows are plain dicts shaped by the services. Instead of one query per
row, the referenced keys are collected, fetched with a single
`SELECT ... WHERE id IN (...)` per referenced table, and the resulting
projection is attached to each row under a named field.
"""

from typing import Any, Dict, Iterable, List, Optional, Sequence

from sqlmodel import Session, select

UNKNOWN = "Unknown"


def fetch_map(session: Session, model, ids: Iterable[Any], columns: Sequence[str] = ("id", "name")) -> Dict[Any, dict]:
    """Return `{id: {column: value}}` for the referenced rows.

    `None` keys and duplicates are dropped before querying; no query is
    issued when nothing is left.
    """
    keys = {i for i in ids if i is not None}
    if not keys:
        return {}
    stmt = select(*[getattr(model, c) for c in columns]).where(model.id.in_(keys))
    out = {}
    for row in session.exec(stmt).all():
        item = dict(zip(columns, row))
        out[item["id"]] = item
    return out


def attach(rows: List[dict], fk_field: str, target_field: str, mapping: Dict[Any, dict]) -> List[dict]:
    """Attach `mapping[row[fk_field]]` under `target_field`, or `None` if unresolved."""
    for row in rows:
        key = row.get(fk_field)
        found = mapping.get(key) if key is not None else None
        row[target_field] = dict(found) if found is not None else None
    return rows


def enrich(
    session: Session,
    rows: List[dict],
    fk_field: str,
    model,
    target_field: str,
    columns: Sequence[str] = ("id", "name"),
) -> List[dict]:
    """Resolve `fk_field` against `model` for every row in one query."""
    if not rows:
        return rows
    mapping = fetch_map(session, model, (r.get(fk_field) for r in rows), columns)
    return attach(rows, fk_field, target_field, mapping)


def name_of(mapping: Dict[Any, dict], key: Any, default: Optional[str] = UNKNOWN, field: str = "name") -> Optional[str]:
    """Return the display name for `key` or `default` when it is unresolved."""
    found = mapping.get(key) if key is not None else None
    if not found or not found.get(field):
        return default
    return found[field]
