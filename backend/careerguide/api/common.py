"""Envelope and parameter helpers shared by the routers."""

from typing import Any, Dict, List, Optional

from fastapi import status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from ..errors import RequestError

_NO_DATA = object()


def respond(message: str, data: Any = _NO_DATA, meta: Optional[Dict] = None, status_code: int = status.HTTP_200_OK) -> JSONResponse:
    """Build the success envelope `{success, message, data?, meta?}`."""
    body: Dict[str, Any] = {"success": True, "message": message}
    if data is not _NO_DATA:
        body["data"] = data
    if meta is not None:
        body["meta"] = meta
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body))


def failure(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message})


def require_id(value: Optional[str], label: str) -> str:
    if value is None or not value.strip():
        raise RequestError(f"{label} ID is required")
    return value


def positive_int_param(raw: Optional[str], name: str, default: int) -> int:
    """Parse a strictly positive integer query parameter or raise `RequestError`."""
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except (TypeError, ValueError):
        raise RequestError(f"Invalid {name} parameter")
    if value <= 0:
        raise RequestError(f"Invalid {name} parameter")
    return value


def bool_param(raw: Optional[str]) -> Optional[bool]:
    """`"true"` → True, any other supplied value → False, absent → None."""
    if raw is None:
        return None
    return raw.lower() == "true"


def optional_int_param(raw: Optional[str]) -> Optional[int]:
    """Lenient integer filter: unparsable values are ignored."""
    try:
        return int(raw) if raw not in (None, "") else None
    except ValueError:
        return None


def split_ids(raw: Optional[str]) -> List[str]:
    """Split a comma separated id list, dropping blanks."""
    if not raw:
        return []
    return [part.strip() for part in raw.split(",") if part.strip()]
