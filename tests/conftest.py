from __future__ import annotations

import copy
import json
import os
from pathlib import Path
from typing import Any

import pytest

# Powertools and boto3 read these at import time
os.environ.setdefault("AWS_DEFAULT_REGION", "eu-west-1")
os.environ.setdefault("POWERTOOLS_SERVICE_NAME", "lambda-http-tests")
os.environ.setdefault("POWERTOOLS_TRACE_DISABLED", "true")
os.environ.setdefault("METRICS_NAMESPACE", "HttpHandlersTest")

_FIXTURES = Path(__file__).parent / "fixtures"


class FakeLambdaContext:
    function_name = "test-function"
    memory_limit_in_mb = 128
    invoked_function_arn = "arn:aws:lambda:eu-west-1:123456789012:function:test-function"
    aws_request_id = "req-123"

    def get_remaining_time_in_millis(self) -> int:
        return 30_000


@pytest.fixture()
def proxy_event() -> dict[str, Any]:
    return copy.deepcopy(json.loads((_FIXTURES / "event.json").read_text()))


@pytest.fixture()
def lambda_context() -> FakeLambdaContext:
    return FakeLambdaContext()
