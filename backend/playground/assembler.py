"""
Turns a ``RequestConfig`` into the URL, headers and body that go on the wire.

Everything here is a pure function of the config: no I/O, no hidden state.
"""

from typing import Dict, Iterable, List, Optional
from urllib.parse import quote

from .schemas import BodyType, KeyValuePair, RequestConfig

# the same unreserved set as JavaScript's encodeURIComponent
_URI_COMPONENT_SAFE = "-_.!~*'()"


def active_pairs(pairs: Iterable[KeyValuePair]) -> List[KeyValuePair]:
    return [p for p in pairs if p.active]


def pairs_to_mapping(pairs: Iterable[KeyValuePair]) -> Dict[str, str]:
    """Flatten enabled pairs into a mapping; a repeated key keeps its last value."""
    return {p.key: p.value for p in active_pairs(pairs)}


def encode_component(s: str) -> str:
    return quote(s, safe=_URI_COMPONENT_SAFE)


def build_effective_url(config: RequestConfig) -> str:
    params = active_pairs(config.query_params)
    if not params:
        return config.url

    query = "&".join(f"{encode_component(p.key)}={encode_component(p.value)}" for p in params)
    sep = "&" if "?" in config.url else "?"
    return f"{config.url}{sep}{query}"


def build_effective_headers(config: RequestConfig) -> Dict[str, str]:
    # user headers, then auth, then body content-type; later writes win
    headers = pairs_to_mapping(config.headers)

    auth_header = config.auth.header()
    if auth_header is not None:
        name, value = auth_header
        headers[name] = value

    content_type = config.body.content_type
    if content_type is not None:
        headers["Content-Type"] = content_type

    return headers


def build_body(config: RequestConfig) -> Optional[str]:
    """The payload to attach, or None. GET and HEAD never carry one."""
    body = config.body
    if body.type == BodyType.NONE or not body.content:
        return None
    if not config.method.allows_body:
        return None
    return body.content
