from __future__ import annotations

from playground.assembler import (
    build_body,
    build_effective_headers,
    build_effective_url,
    pairs_to_mapping,
)
from playground.schemas import (
    ApiKeyAuth,
    BasicAuth,
    BearerAuth,
    BodyConfig,
    BodyType,
    HttpMethod,
    KeyValuePair,
    RequestConfig,
)


def kv(key: str, value: str = "", enabled: bool = True) -> KeyValuePair:
    return KeyValuePair(key=key, value=value, enabled=enabled)


def test_url_unchanged_without_params() -> None:
    assert build_effective_url(RequestConfig(url="http://x")) == "http://x"


def test_url_unchanged_when_every_param_is_inactive() -> None:
    config = RequestConfig(url="http://x", query_params=(kv("a", "1", enabled=False), kv("", "2")))
    assert build_effective_url(config) == "http://x"


def test_url_appends_with_ampersand_when_query_present() -> None:
    config = RequestConfig(url="http://x?a=1", query_params=(kv("b", "2"),))
    assert build_effective_url(config) == "http://x?a=1&b=2"


def test_url_skips_inactive_params_and_keeps_order() -> None:
    config = RequestConfig(
        url="http://x/search",
        query_params=(kv("z", "1"), kv("off", "x", enabled=False), kv("", "y"), kv("a", "2"), kv("m", "3")),
    )
    assert build_effective_url(config) == "http://x/search?z=1&a=2&m=3"


def test_url_percent_encodes_keys_and_values() -> None:
    config = RequestConfig(url="http://x", query_params=(kv("q name", "a&b=c/é"), kv("safe", "-_.!~*'()")))
    assert build_effective_url(config) == "http://x?q%20name=a%26b%3Dc%2F%C3%A9&safe=-_.!~*'()"


def test_url_keeps_duplicate_param_keys() -> None:
    config = RequestConfig(url="http://x", query_params=(kv("tag", "a"), kv("tag", "b")))
    assert build_effective_url(config) == "http://x?tag=a&tag=b"


def test_headers_include_only_active_pairs() -> None:
    config = RequestConfig(headers=(kv("Accept", "text/plain"), kv("X-Off", "1", enabled=False), kv("", "v")))
    assert build_effective_headers(config) == {"Accept": "text/plain"}


def test_headers_last_duplicate_wins() -> None:
    config = RequestConfig(headers=(kv("X-Id", "1"), kv("X-Id", "2")))
    assert build_effective_headers(config) == {"X-Id": "2"}


def test_bearer_auth_sets_authorization() -> None:
    config = RequestConfig(auth=BearerAuth(token="abc"))
    assert build_effective_headers(config) == {"Authorization": "Bearer abc"}


def test_bearer_auth_without_token_adds_nothing() -> None:
    assert build_effective_headers(RequestConfig(auth=BearerAuth())) == {}


def test_basic_auth_encodes_credentials() -> None:
    config = RequestConfig(auth=BasicAuth(username="user", password="pass"))
    assert build_effective_headers(config) == {"Authorization": "Basic dXNlcjpwYXNz"}


def test_basic_auth_short_credentials() -> None:
    config = RequestConfig(auth=BasicAuth(username="u", password="p"))
    assert build_effective_headers(config)["Authorization"] == "Basic dTpw"


def test_basic_auth_needs_both_fields() -> None:
    assert build_effective_headers(RequestConfig(auth=BasicAuth(username="u"))) == {}


def test_api_key_overwrites_user_header() -> None:
    config = RequestConfig(
        headers=(kv("Authorization", "mine"),),
        auth=ApiKeyAuth(key="Authorization", value="theirs"),
    )
    assert build_effective_headers(config) == {"Authorization": "theirs"}


def test_api_key_needs_key_and_value() -> None:
    assert build_effective_headers(RequestConfig(auth=ApiKeyAuth(key="X-Api-Key"))) == {}


def test_json_body_overrides_user_content_type() -> None:
    config = RequestConfig(
        headers=(kv("Content-Type", "text/plain"),),
        body=BodyConfig(type=BodyType.JSON, content='{"a": 1}'),
    )
    assert build_effective_headers(config)["Content-Type"] == "application/json"


def test_body_content_types() -> None:
    expected = {
        BodyType.XML: "application/xml",
        BodyType.FORM: "application/x-www-form-urlencoded",
    }
    for body_type, content_type in expected.items():
        config = RequestConfig(body=BodyConfig(type=body_type, content="x"))
        assert build_effective_headers(config) == {"Content-Type": content_type}


def test_raw_and_empty_bodies_set_no_content_type() -> None:
    assert build_effective_headers(RequestConfig(body=BodyConfig(type=BodyType.RAW, content="x"))) == {}
    assert build_effective_headers(RequestConfig(body=BodyConfig(type=BodyType.JSON, content=""))) == {}


def test_builders_are_idempotent() -> None:
    config = RequestConfig(
        url="http://x",
        headers=(kv("A", "1"),),
        query_params=(kv("q", "v"),),
        auth=BearerAuth(token="t"),
        body=BodyConfig(type=BodyType.JSON, content="{}"),
    )
    assert build_effective_url(config) == build_effective_url(config)
    assert build_effective_headers(config) == build_effective_headers(config)
    assert config.headers == (config.headers[0],)


def test_get_and_head_never_carry_a_body() -> None:
    body = BodyConfig(type=BodyType.JSON, content='{"a": 1}')
    for method in (HttpMethod.GET, HttpMethod.HEAD):
        assert build_body(RequestConfig(method=method, body=body)) is None
    assert build_body(RequestConfig(method=HttpMethod.POST, body=body)) == '{"a": 1}'


def test_no_body_for_none_type_or_empty_content() -> None:
    assert build_body(RequestConfig(method=HttpMethod.POST, body=BodyConfig(type=BodyType.NONE, content="x"))) is None
    assert build_body(RequestConfig(method=HttpMethod.PUT, body=BodyConfig(type=BodyType.RAW, content=""))) is None
    assert build_body(RequestConfig(method=HttpMethod.PATCH, body=BodyConfig(type=BodyType.RAW, content="x"))) == "x"


def test_pairs_to_mapping() -> None:
    pairs = (kv("a", "1"), kv("b", "2", enabled=False), kv("a", "3"), kv("", "4"))
    assert pairs_to_mapping(pairs) == {"a": "3"}
