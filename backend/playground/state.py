"""
Pure transitions over ``RequestConfig``.

Each function takes a config and returns a new one; the input is never
modified. ``kind`` selects which pair list to edit: ``"headers"`` or
``"query_params"``.
"""

from typing import Any, Literal

from .schemas import (
    AUTH_VARIANTS,
    BodyType,
    HttpMethod,
    KeyValuePair,
    RequestConfig,
    SavedRequest,
)

PairKind = Literal["headers", "query_params"]


def new_request() -> RequestConfig:
    return RequestConfig()


def set_method(config: RequestConfig, method: HttpMethod) -> RequestConfig:
    return config.model_copy(update={"method": HttpMethod(method)})


def set_url(config: RequestConfig, url: str) -> RequestConfig:
    return config.model_copy(update={"url": url})


def _pairs(config: RequestConfig, kind: PairKind):
    if kind not in ("headers", "query_params"):
        raise ValueError(f"unknown pair list {kind!r}")
    return getattr(config, kind)


def add_pair(config: RequestConfig, kind: PairKind) -> RequestConfig:
    pairs = _pairs(config, kind) + (KeyValuePair(),)
    return config.model_copy(update={kind: pairs})


def update_pair(config: RequestConfig, kind: PairKind, pair_id: str, **fields: Any) -> RequestConfig:
    unknown = set(fields) - {"key", "value", "enabled"}
    if unknown:
        raise ValueError(f"cannot update {', '.join(sorted(unknown))}")

    pairs = tuple(
        KeyValuePair(**{**p.model_dump(), **fields}) if p.id == pair_id else p
        for p in _pairs(config, kind)
    )
    return config.model_copy(update={kind: pairs})


def remove_pair(config: RequestConfig, kind: PairKind, pair_id: str) -> RequestConfig:
    pairs = tuple(p for p in _pairs(config, kind) if p.id != pair_id)
    return config.model_copy(update={kind: pairs})


def set_body_type(config: RequestConfig, body_type: BodyType) -> RequestConfig:
    # content survives a type switch
    body = config.body.model_copy(update={"type": BodyType(body_type)})
    return config.model_copy(update={"body": body})


def set_body_content(config: RequestConfig, content: str) -> RequestConfig:
    body = config.body.model_copy(update={"content": content})
    return config.model_copy(update={"body": body})


def switch_auth(config: RequestConfig, auth_type: str) -> RequestConfig:
    """Activate another auth variant. Fields of the previous variant are dropped."""
    try:
        variant = AUTH_VARIANTS[auth_type]
    except KeyError:
        raise ValueError(f"unknown auth type {auth_type!r}") from None
    return config.model_copy(update={"auth": variant()})


def update_auth(config: RequestConfig, **fields: Any) -> RequestConfig:
    auth = type(config.auth)(**{**config.auth.model_dump(), **fields})
    return config.model_copy(update={"auth": auth})


def load_saved_request(saved: SavedRequest) -> RequestConfig:
    """Rebuild an editable config from a saved request.

    Pairs get sequential ids and all come back enabled; disabled pairs were
    never saved in the first place.
    """
    headers = tuple(
        KeyValuePair(id=f"header-{i}", key=k, value=v, enabled=True)
        for i, (k, v) in enumerate(saved.headers.items())
    )
    params = tuple(
        KeyValuePair(id=f"param-{i}", key=k, value=v, enabled=True)
        for i, (k, v) in enumerate(saved.query_params.items())
    )
    return RequestConfig(
        method=saved.method,
        url=saved.url,
        headers=headers,
        query_params=params,
        body=saved.body,
        auth=saved.auth,
    )
