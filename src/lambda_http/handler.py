from __future__ import annotations

import asyncio
import functools
import os
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from typing import Any, assert_never

from aws_lambda_powertools import Logger, Tracer
from aws_lambda_powertools.metrics import Metrics, MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext

from lambda_http.events import EventParseError, NormalizedEvent, normalize
from lambda_http.responses import INTERNAL_SERVER_ERROR, HttpException, HttpSuccess, Response

logger = Logger()
tracer = Tracer()
metrics = Metrics(namespace=os.environ.get("METRICS_NAMESPACE", "HttpHandlers"))

HandlerFunction = Callable[[NormalizedEvent], Awaitable[HttpSuccess]]
WrappedHandler = Callable[[Mapping[str, Any]], Awaitable[HttpSuccess | HttpException]]
LambdaHandler = Callable[[dict[str, Any], LambdaContext], Any]


@dataclass(frozen=True)
class Succeeded:
    response: HttpSuccess


@dataclass(frozen=True)
class KnownFailure:
    error: HttpException


@dataclass(frozen=True)
class UnknownFailure:
    error: Exception


Outcome = Succeeded | KnownFailure | UnknownFailure


async def settle(handle: HandlerFunction, raw_event: Mapping[str, Any]) -> Outcome:
    """Run one invocation and classify how it ended."""
    try:
        event = normalize(raw_event)
        return Succeeded(await handle(event))
    except HttpException as exc:
        return KnownFailure(exc)
    except Exception as exc:
        return UnknownFailure(exc)


def resolve(outcome: Outcome) -> HttpSuccess | HttpException:
    if isinstance(outcome, Succeeded):
        return outcome.response
    if isinstance(outcome, KnownFailure):
        logger.info(
            "Handler raised HTTP failure",
            extra={"status_code": outcome.error.status_code, "error": outcome.error.message},
        )
        return outcome.error
    if isinstance(outcome, UnknownFailure):
        extra: dict[str, Any] = {"error_type": type(outcome.error).__name__}
        if isinstance(outcome.error, EventParseError):
            extra["field"] = outcome.error.field
        logger.exception("Unhandled error in handler", exc_info=outcome.error, extra=extra)
        # the caller only ever sees the generic message
        return HttpException(500, INTERNAL_SERVER_ERROR)
    assert_never(outcome)


def wrap(handle: HandlerFunction) -> WrappedHandler:
    @functools.wraps(handle)
    async def wrapped(raw_event: Mapping[str, Any]) -> HttpSuccess | HttpException:
        return resolve(await settle(handle, raw_event))

    return wrapped


def _metric_name(response: Mapping[str, Any]) -> str:
    status = response.get("statusCode", 500)
    if isinstance(status, int) and status < 400:
        return "SuccessfulResponse"
    if isinstance(status, int) and status < 500:
        return "ClientError"
    return "ServerError"


def as_lambda_handler(handle: HandlerFunction) -> LambdaHandler:
    wrapped = wrap(handle)

    @metrics.log_metrics
    @tracer.capture_lambda_handler
    def lambda_handler(event: dict[str, Any], context: LambdaContext) -> Any:
        outcome = asyncio.run(wrapped(event))
        if not isinstance(outcome, (HttpSuccess, HttpException)):
            # handler broke its contract; hand back whatever it produced
            return outcome

        response: Response = outcome.to_response()
        metrics.add_metric(name=_metric_name(response), unit=MetricUnit.Count, value=1)
        logger.info(
            "Request completed",
            extra={
                "status_code": response["statusCode"],
                "request_id": getattr(context, "aws_request_id", None),
            },
        )
        return response

    return lambda_handler
