"""
Pydantic models shared by the assembler, executor, classifier and API.

Request-side models are frozen: every edit goes through the transition
functions in :mod:`playground.state` and yields a new ``RequestConfig``.
"""

import base64
import uuid
from datetime import datetime
from enum import Enum
from typing import Annotated, Dict, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field


class HttpMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    OPTIONS = "OPTIONS"
    HEAD = "HEAD"

    @property
    def allows_body(self) -> bool:
        return self not in (HttpMethod.GET, HttpMethod.HEAD)


class BodyType(str, Enum):
    NONE = "none"
    JSON = "json"
    XML = "xml"
    FORM = "form"
    RAW = "raw"

    @property
    def content_type(self) -> Optional[str]:
        return _BODY_CONTENT_TYPES.get(self)


_BODY_CONTENT_TYPES = {
    BodyType.JSON: "application/json",
    BodyType.XML: "application/xml",
    BodyType.FORM: "application/x-www-form-urlencoded",
}


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


def new_pair_id() -> str:
    return uuid.uuid4().hex


class KeyValuePair(_Frozen):
    id: str = Field(default_factory=new_pair_id)
    key: str = ""
    value: str = ""
    enabled: bool = True

    @property
    def active(self) -> bool:
        return self.enabled and bool(self.key)


class BodyConfig(_Frozen):
    type: BodyType = BodyType.NONE
    content: str = ""

    @property
    def content_type(self) -> Optional[str]:
        """Content-Type implied by the body, or None when nothing should be set."""
        if not self.content:
            return None
        return self.type.content_type


# Authentication variants. Each one yields the header it contributes, if any.

class NoAuth(_Frozen):
    type: Literal["none"] = "none"

    def header(self) -> Optional[Tuple[str, str]]:
        return None


class BearerAuth(_Frozen):
    type: Literal["bearer"] = "bearer"
    token: str = ""

    def header(self) -> Optional[Tuple[str, str]]:
        if not self.token:
            return None
        return "Authorization", f"Bearer {self.token}"


class ApiKeyAuth(_Frozen):
    type: Literal["apikey"] = "apikey"
    key: str = ""
    value: str = ""

    def header(self) -> Optional[Tuple[str, str]]:
        if not (self.key and self.value):
            return None
        return self.key, self.value


class BasicAuth(_Frozen):
    type: Literal["basic"] = "basic"
    username: str = ""
    password: str = ""

    def header(self) -> Optional[Tuple[str, str]]:
        if not (self.username and self.password):
            return None
        credentials = f"{self.username}:{self.password}".encode("utf-8")
        return "Authorization", "Basic " + base64.b64encode(credentials).decode("ascii")


AuthConfig = Annotated[
    Union[NoAuth, BearerAuth, ApiKeyAuth, BasicAuth],
    Field(discriminator="type"),
]

AUTH_VARIANTS = {
    "none": NoAuth,
    "bearer": BearerAuth,
    "apikey": ApiKeyAuth,
    "basic": BasicAuth,
}


class RequestConfig(_Frozen):
    method: HttpMethod = HttpMethod.GET
    url: str = ""
    headers: Tuple[KeyValuePair, ...] = ()
    query_params: Tuple[KeyValuePair, ...] = ()
    body: BodyConfig = BodyConfig()
    auth: AuthConfig = NoAuth()


class ApiResponse(BaseModel):
    """A normalized response. ``status == 0`` means the transport failed."""

    status: int
    status_text: str
    headers: Dict[str, str] = {}
    body: str = ""
    time: int = Field(ge=0)
    size: int = Field(ge=0)

    @property
    def is_network_error(self) -> bool:
        return self.status == 0


class StatusCategory(str, Enum):
    SUCCESS = "success"
    REDIRECT = "redirect"
    CLIENT_ERROR = "client-error"
    SERVER_ERROR = "server-error"


class ResponseFacts(BaseModel):
    category: StatusCategory
    is_json: bool
    pretty_body: str
    formatted_size: str
    header_count: int


class SendResult(BaseModel):
    response: ApiResponse
    facts: ResponseFacts


# Persisted shapes

class CollectionIn(BaseModel):
    name: str = Field(min_length=1)


class Collection(BaseModel):
    id: int
    name: str
    created_at: Optional[datetime] = None


class SavedRequestData(BaseModel):
    name: str
    collection_id: Optional[int] = None
    method: HttpMethod
    url: str
    headers: Dict[str, str] = {}
    query_params: Dict[str, str] = {}
    body: BodyConfig = BodyConfig()
    auth: AuthConfig = NoAuth()


class SavedRequest(SavedRequestData):
    id: int


class SaveRequest(BaseModel):
    name: str = Field(min_length=1)
    collection_id: Optional[int] = None
    current_request_id: Optional[int] = None
    config: RequestConfig


class HistoryRecord(BaseModel):
    method: HttpMethod
    url: str
    headers: Dict[str, str] = {}
    query_params: Dict[str, str] = {}
    body: BodyConfig = BodyConfig()
    auth: AuthConfig = NoAuth()
    response_status: int
    response_time: int
    response_size: int
    response_headers: Dict[str, str] = {}
    response_body: str = ""


class HistoryEntry(HistoryRecord):
    id: int
    created_at: Optional[datetime] = None
