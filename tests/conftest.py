import io
import json
import os
import sys

import pytest

ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

# boto3 clients are created at import time and need a region; fake
# credentials keep botocore from probing instance metadata.
os.environ.setdefault("AWS_DEFAULT_REGION", "us-east-1")
os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")
os.environ.pop("PARAMETER_PREFIX", None)

for layer in (
    "common/layers/common-utils/python",
    "common/layers/invocation-wrapper-layer/python",
):
    path = os.path.join(ROOT, layer)
    if path not in sys.path:
        sys.path.insert(0, path)


class FakeLambda:
    """Records ``invoke`` calls and replies with a canned payload."""

    def __init__(self, payload=None, raw_payload=None, error=None, extra=None):
        self.calls = []
        self.payload = payload if payload is not None else {}
        self.raw_payload = raw_payload
        self.error = error
        self.extra = extra or {}

    def invoke(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        body = self.raw_payload
        if body is None:
            body = json.dumps(self.payload).encode("utf-8")
        resp = {
            "StatusCode": 200,
            "ExecutedVersion": "$LATEST",
            "LogResult": "bG9ncw==",
            "Payload": io.BytesIO(body),
        }
        resp.update(self.extra)
        return resp

    def sent_payload(self, index=0):
        return json.loads(self.calls[index]["Payload"])


class FakeCloudWatch:
    def __init__(self, error=None):
        self.calls = []
        self.error = error

    def put_metric_data(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return {}


class FakeLogs:
    def __init__(self, error=None):
        self.calls = []
        self.error = error

    def create_log_group(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return {}


class FakeClock:
    """Return successive timestamps (in seconds) on each call."""

    def __init__(self, *values):
        self.values = list(values)

    def __call__(self):
        return self.values.pop(0)


@pytest.fixture
def lambda_stub():
    return FakeLambda(
        payload={"RequestId": "r2", "FunctionVersion": "2", "AdditionalData": "x"}
    )


@pytest.fixture
def cloudwatch_stub():
    return FakeCloudWatch()


@pytest.fixture
def logs_stub():
    return FakeLogs()


@pytest.fixture
def lambda_context():
    return {"functionName": "Wrapper", "awsRequestId": "r1", "functionVersion": "1"}


@pytest.fixture
def config(monkeypatch):
    """Enable Parameter Store lookups backed by a plain dict."""
    import common_utils.get_ssm as g

    g._SSM_CACHE.clear()
    params = {}
    monkeypatch.setenv("PARAMETER_PREFIX", "/parameters/lambda-wrapper")
    monkeypatch.setattr(g, "get_values_from_ssm", lambda name, decrypt=False: params.get(name))
    return params
