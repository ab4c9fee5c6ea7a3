from __future__ import annotations

import base64
import binascii
import json
from collections.abc import Callable, Mapping
from typing import Any, Literal, TypedDict

from pydantic import BaseModel, ConfigDict, Field

EventKind = Literal["proxy", "native", "http_api"]


class Authorizer(TypedDict, total=False):
    principalId: str


class HttpContext(TypedDict, total=False):
    method: str
    path: str


class RequestContext(TypedDict, total=False):
    authorizer: Authorizer
    http: HttpContext


class ProxyEvent(TypedDict, total=False):
    path: str
    httpMethod: str
    headers: dict[str, str] | None
    queryStringParameters: dict[str, str] | None
    pathParameters: dict[str, str] | None
    body: str | None
    isBase64Encoded: bool
    requestContext: RequestContext


class HttpApiEvent(TypedDict, total=False):
    version: Literal["2.0"]
    rawPath: str
    headers: dict[str, str] | None
    queryStringParameters: dict[str, str] | None
    pathParameters: dict[str, str] | None
    body: str | None
    isBase64Encoded: bool
    requestContext: RequestContext


class NativeEvent(TypedDict, total=False):
    path: str
    method: str
    headers: dict[str, str] | None
    query: dict[str, str] | None
    params: dict[str, str] | None
    body: Any
    session: Any
    requestContext: RequestContext


class NormalizedEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    path: str = "/"
    method: str = "GET"
    headers: dict[str, str] = Field(default_factory=dict)
    query: dict[str, str] = Field(default_factory=dict)
    params: dict[str, str] = Field(default_factory=dict)
    body: Any = Field(default_factory=dict)
    session: Any = None


class EventParseError(ValueError):
    """A JSON-encoded field of the raw event could not be decoded."""

    def __init__(self, field: str, reason: str) -> None:
        super().__init__(f"Could not decode {field}: {reason}")
        self.field = field


def _str_map(value: Any) -> dict[str, str]:
    # API Gateway sends null instead of an empty object
    if not isinstance(value, Mapping):
        return {}
    return {str(k): str(v) for k, v in value.items() if v is not None}


def _text(*candidates: Any, default: str) -> str:
    for value in candidates:
        if isinstance(value, str) and value:
            return value
    return default


def _decode_json(field: str, raw: str) -> Any:
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise EventParseError(field, exc.msg) from exc


def _decode_body(event: Mapping[str, Any]) -> Any:
    body = event.get("body")
    if body is None or body == "":
        return {}
    if not isinstance(body, (str, bytes)):
        # already decoded by the caller
        return body
    if event.get("isBase64Encoded", False):
        try:
            body = base64.b64decode(body, validate=True).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError) as exc:
            raise EventParseError("body", f"invalid base64 payload ({exc})") from exc
        if not body:
            return {}
    return _decode_json("body", body)


def _section(parent: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = parent.get(key)
    return value if isinstance(value, Mapping) else {}


def _decode_claim(event: Mapping[str, Any]) -> Any:
    authorizer = _section(_section(event, "requestContext"), "authorizer")
    if not authorizer:
        return None
    claim = authorizer.get("principalId")
    if isinstance(claim, str):
        return _decode_json("requestContext.authorizer.principalId", claim)
    return claim


def _from_proxy(event: ProxyEvent) -> NormalizedEvent:
    return NormalizedEvent(
        path=_text(event.get("path"), default="/"),
        method=_text(event.get("httpMethod"), default="GET"),
        headers=_str_map(event.get("headers")),
        query=_str_map(event.get("queryStringParameters")),
        params=_str_map(event.get("pathParameters")),
        body=_decode_body(event),
        session=_decode_claim(event),
    )


def _from_http_api(event: HttpApiEvent) -> NormalizedEvent:
    http = _section(_section(event, "requestContext"), "http")
    return NormalizedEvent(
        path=_text(event.get("rawPath"), http.get("path"), default="/"),
        method=_text(http.get("method"), default="GET"),
        headers=_str_map(event.get("headers")),
        query=_str_map(event.get("queryStringParameters")),
        params=_str_map(event.get("pathParameters")),
        body=_decode_body(event),
        session=_decode_claim(event),
    )


def _from_native(event: NativeEvent) -> NormalizedEvent:
    return NormalizedEvent(
        path=_text(event.get("path"), default="/"),
        method=_text(event.get("method"), default="GET"),
        headers=_str_map(event.get("headers")),
        query=_str_map(event.get("query")),
        params=_str_map(event.get("params")),
        body=_decode_body(event),
        session=event["session"] if "session" in event else _decode_claim(event),
    )


_NATIVE_KEYS = ("method", "query", "params", "session")

_NORMALIZERS: dict[EventKind, Callable[[Any], NormalizedEvent]] = {
    "proxy": _from_proxy,
    "native": _from_native,
    "http_api": _from_http_api,
}


def classify(event: Mapping[str, Any]) -> EventKind:
    if event.get("version") == "2.0":
        return "http_api"
    if "httpMethod" not in event and any(key in event for key in _NATIVE_KEYS):
        return "native"
    return "proxy"


def normalize(event: Mapping[str, Any] | None) -> NormalizedEvent:
    """Convert a raw platform event into the shape handlers receive.

    Raises EventParseError when the body or the authorizer claim is not valid JSON.
    """
    if not isinstance(event, Mapping):
        event = {}
    return _NORMALIZERS[classify(event)](event)
