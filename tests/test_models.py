import types

import pytest

from models import (
    ExecutionContext,
    InvocationEvent,
    InvocationOutcome,
    LogGroupDescriptor,
    MetricPoint,
    correlation_for,
)


def test_event_from_dict_keeps_extra_fields():
    event = InvocationEvent.from_dict(
        {"FunctionName": "Target", "ProcessId": "p1", "Items": [1, 2]}
    )
    assert event.FunctionName == "Target"
    assert event.ProcessId == "p1"
    assert event.TransactionId is None
    assert event.extra == {"Items": [1, 2]}
    assert event.to_dict() == {"FunctionName": "Target", "ProcessId": "p1", "Items": [1, 2]}


@pytest.mark.parametrize("data", [{}, {"FunctionName": ""}, {"ProcessId": "p1"}, "Target", None])
def test_event_requires_function_name(data):
    with pytest.raises(ValueError):
        InvocationEvent.from_dict(data)


def test_split_target_builds_payload_without_name():
    event = InvocationEvent.from_dict(
        {"FunctionName": "Target", "TransactionId": "t1", "Note": None}
    )
    caller = ExecutionContext(function_name="Wrapper", aws_request_id="r1")

    target, payload = event.split_target(caller)

    assert target == "Target"
    assert payload == {
        "TransactionId": "t1",
        "Note": None,
        "Caller": {"FunctionName": "Wrapper", "RequestId": "r1"},
    }
    assert event.FunctionName == "Target"


def test_execution_context_from_camel_case_mapping():
    ctx = ExecutionContext.from_lambda_context(
        {"functionName": "Wrapper", "awsRequestId": "r1", "functionVersion": "1"}
    )
    assert ctx == ExecutionContext("Wrapper", "r1", "1")


def test_execution_context_from_runtime_object():
    obj = types.SimpleNamespace(function_name="W", aws_request_id="id", function_version="$LATEST")
    assert ExecutionContext.from_lambda_context(obj) == ExecutionContext("W", "id", "$LATEST")


def test_execution_context_from_empty_mapping():
    assert ExecutionContext.from_lambda_context({}) == ExecutionContext()


def test_metric_datum_shape():
    point = MetricPoint(value=5, timestamp="now", correlation=correlation_for("A", "B"))
    assert point.to_metric_datum() == {
        "MetricName": "Duration",
        "Timestamp": "now",
        "Unit": "Milliseconds",
        "Value": 5,
        "Dimensions": [{"Name": "Correlation", "Value": "A/B"}],
    }


def test_log_group_descriptor():
    assert LogGroupDescriptor.for_correlation("A/B").name == "/metric/lambda/correlation/A/B"
    assert LogGroupDescriptor.for_correlation("A/B", "/x/").name == "/x/A/B"


def test_outcome_succeeded():
    assert InvocationOutcome(response={}).succeeded
    assert not InvocationOutcome(error=RuntimeError("x")).succeeded


def test_null_correlation_ids_are_forwarded():
    event = InvocationEvent.from_dict(
        {"FunctionName": "Target", "ProcessId": None, "TransactionId": None, "Other": None}
    )

    _, payload = event.split_target(ExecutionContext(function_name="W", aws_request_id="r1"))

    assert "ProcessId" in payload and payload["ProcessId"] is None
    assert "TransactionId" in payload and payload["TransactionId"] is None
    assert payload["Other"] is None


def test_to_dict_keeps_present_null_keys():
    event = InvocationEvent.from_dict({"FunctionName": "Target", "ProcessId": None, "Note": None})

    assert event.to_dict() == {"FunctionName": "Target", "ProcessId": None, "Note": None}
