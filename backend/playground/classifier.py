import json
import math
from typing import Any, Optional

from .schemas import ApiResponse, ResponseFacts, StatusCategory

_SIZE_UNITS = ("B", "KB", "MB", "GB")

# Parse failures: malformed text, plus nesting deep enough to hit the recursion limit.
_PARSE_ERRORS = (ValueError, RecursionError)


def status_category(status: int) -> StatusCategory:
    if 200 <= status <= 299:
        return StatusCategory.SUCCESS
    if 300 <= status <= 399:
        return StatusCategory.REDIRECT
    if 400 <= status <= 499:
        return StatusCategory.CLIENT_ERROR
    return StatusCategory.SERVER_ERROR


def _reject_constant(name: str) -> Any:
    # NaN / Infinity are not JSON
    raise ValueError(f"invalid JSON constant {name}")


def _parse_float(s: str) -> Optional[float]:
    # out-of-range numbers such as 1e400 render as null, not Infinity
    value = float(s)
    return value if math.isfinite(value) else None


def _parse_int(s: str) -> Any:
    try:
        return int(s)
    except ValueError:
        # longer than the interpreter's int digit limit
        return _parse_float(s)


def _parse(body: str) -> Any:
    return json.loads(
        body,
        parse_constant=_reject_constant,
        parse_float=_parse_float,
        parse_int=_parse_int,
    )


def is_json(body: str) -> bool:
    try:
        _parse(body)
    except _PARSE_ERRORS:
        return False
    return True


def pretty_print(body: str) -> str:
    try:
        return json.dumps(_parse(body), indent=2, ensure_ascii=False, allow_nan=False)
    except _PARSE_ERRORS:
        return body


def format_size(size: int) -> str:
    if size == 0:
        return "0 B"

    value = float(size)
    unit = 0
    while value >= 1024 and unit < len(_SIZE_UNITS) - 1:
        value /= 1024
        unit += 1
    return f"{value:.2f} {_SIZE_UNITS[unit]}"


def describe(response: ApiResponse) -> ResponseFacts:
    """Display facts for a response; the response itself is left untouched."""
    json_body = is_json(response.body)
    return ResponseFacts(
        category=status_category(response.status),
        is_json=json_body,
        pretty_body=pretty_print(response.body) if json_body else response.body,
        formatted_size=format_size(response.size),
        header_count=len(response.headers),
    )
