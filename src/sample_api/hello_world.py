from __future__ import annotations

import random

from lambda_http.events import NormalizedEvent
from lambda_http.handler import as_lambda_handler
from lambda_http.responses import HttpException, HttpSuccess


async def get(event: NormalizedEvent) -> HttpSuccess:
    if random.random() < 0.5:
        raise HttpException(500, "Unlucky!")
    return HttpSuccess(200, {"lucky": True})


lambda_handler = as_lambda_handler(get)
