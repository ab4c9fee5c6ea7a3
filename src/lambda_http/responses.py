from __future__ import annotations

import json
import math
from typing import Any, TypedDict

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

INTERNAL_SERVER_ERROR = "Internal Server Error"

_payload_adapter: TypeAdapter[Any] = TypeAdapter(Any)


class Response(TypedDict):
    statusCode: int
    body: str
    headers: dict[str, str]


def _finite(value: Any) -> Any:
    # JSON has no NaN or Infinity; JSON.stringify writes them as null
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, dict):
        return {k: _finite(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_finite(v) for v in value]
    return value


def to_json(payload: Any) -> str:
    return json.dumps(
        _finite(_payload_adapter.dump_python(payload, mode="json")),
        separators=(",", ":"),
        ensure_ascii=False,
        allow_nan=False,
    )


class HttpSuccess(BaseModel):
    model_config = ConfigDict(frozen=True)

    status_code: int
    body: str
    headers: dict[str, str] = Field(default_factory=dict)

    def __init__(self, status_code: int, payload: Any = None, headers: dict[str, str] | None = None) -> None:
        super().__init__(status_code=status_code, body=to_json(payload), headers=dict(headers or {}))

    def to_response(self) -> Response:
        return {"statusCode": self.status_code, "body": self.body, "headers": dict(self.headers)}


class HttpException(Exception):
    """An HTTP failure a handler raises on purpose.

    The wrapper returns it unchanged, so ``status_code`` and ``message`` reach
    the caller as ``{"error": message}``.
    """

    def __init__(self, status_code: int, message: str, headers: dict[str, str] | None = None) -> None:
        super().__init__(message)
        self._status_code = status_code
        self._message = message
        self._body = to_json({"error": message})
        self._headers = dict(headers or {})

    @property
    def status_code(self) -> int:
        return self._status_code

    @property
    def message(self) -> str:
        return self._message

    @property
    def body(self) -> str:
        return self._body

    @property
    def headers(self) -> dict[str, str]:
        return dict(self._headers)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(status_code={self.status_code!r}, message={self.message!r})"

    def to_response(self) -> Response:
        return {"statusCode": self.status_code, "body": self.body, "headers": self.headers}
