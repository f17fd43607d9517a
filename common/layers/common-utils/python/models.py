"""Shared dataclasses describing wrapped Lambda invocations."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Mapping, Optional, Tuple

DEFAULT_METRIC_NAMESPACE = "CUSTOM/Lambda"
DEFAULT_LOG_GROUP_PREFIX = "/metric/lambda/correlation/"


def correlation_for(wrapper_name: Optional[str], target_name: Optional[str]) -> str:
    """Return the ``wrapper/target`` value shared by metrics and log groups."""
    return f"{wrapper_name}/{target_name}"


@dataclass
class ExecutionContext:
    """Identity of the wrapper function handling the current invocation."""

    function_name: Optional[str] = None
    aws_request_id: Optional[str] = None
    function_version: Optional[str] = None

    @classmethod
    def from_lambda_context(cls, context: Any) -> "ExecutionContext":
        """Build from the Lambda runtime context or an equivalent mapping.

        Mappings may use the runtime's snake_case attribute names or the
        camelCase names used by the Node.js runtime.
        """
        if isinstance(context, ExecutionContext):
            return context
        if isinstance(context, Mapping):
            def pick(snake: str, camel: str) -> Any:
                return context.get(snake, context.get(camel))

            return cls(
                function_name=pick("function_name", "functionName"),
                aws_request_id=pick("aws_request_id", "awsRequestId"),
                function_version=pick("function_version", "functionVersion"),
            )
        return cls(
            function_name=getattr(context, "function_name", None),
            aws_request_id=getattr(context, "aws_request_id", None),
            function_version=getattr(context, "function_version", None),
        )

    def caller(self) -> Dict[str, Any]:
        """Return the ``Caller`` record attached to forwarded payloads."""
        return {"FunctionName": self.function_name, "RequestId": self.aws_request_id}


@dataclass
class InvocationEvent:
    """Event forwarded by the invocation wrapper to a target function."""

    FunctionName: str
    ProcessId: Optional[str] = None
    TransactionId: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)
    # optional keys that appeared in the source event, null or not
    present: Tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: Any) -> "InvocationEvent":
        if not isinstance(data, Mapping):
            raise ValueError("event must be a mapping")
        if not data.get("FunctionName"):
            raise ValueError("FunctionName missing from event")
        optional = ("ProcessId", "TransactionId")
        keys = {"FunctionName", *optional}
        extra = {k: v for k, v in data.items() if k not in keys}
        params = {k: data.get(k) for k in keys}
        params["extra"] = extra
        params["present"] = tuple(k for k in optional if k in data)
        return cls(**params)

    def to_dict(self) -> Dict[str, Any]:
        """Return the event as received, null values included."""
        data: Dict[str, Any] = {"FunctionName": self.FunctionName}
        for key in self.present:
            data[key] = getattr(self, key)
        data.update(self.extra)
        return data

    def split_target(self, caller: ExecutionContext) -> Tuple[str, Dict[str, Any]]:
        """Return ``(target_name, payload)`` for the downstream call.

        The payload carries every event field except ``FunctionName`` plus the
        ``Caller`` record describing the wrapper.
        """
        payload = self.to_dict()
        del payload["FunctionName"]
        payload["Caller"] = caller.caller()
        return self.FunctionName, payload


@dataclass
class MetricPoint:
    """Single CloudWatch data point for a wrapped invocation."""

    value: float
    timestamp: datetime
    correlation: str
    name: str = "Duration"
    unit: str = "Milliseconds"

    def to_metric_datum(self) -> Dict[str, Any]:
        return {
            "MetricName": self.name,
            "Timestamp": self.timestamp,
            "Unit": self.unit,
            "Value": self.value,
            "Dimensions": [{"Name": "Correlation", "Value": self.correlation}],
        }


@dataclass
class LogGroupDescriptor:
    """CloudWatch Logs group created for a wrapper/target pairing."""

    name: str

    @classmethod
    def for_correlation(
        cls, correlation: str, prefix: str = DEFAULT_LOG_GROUP_PREFIX
    ) -> "LogGroupDescriptor":
        return cls(name=f"{prefix}{correlation}")


@dataclass
class InvocationOutcome:
    """Result of one wrapped invocation."""

    response: Optional[Dict[str, Any]] = None
    error: Optional[BaseException] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


__all__ = [
    "DEFAULT_METRIC_NAMESPACE",
    "DEFAULT_LOG_GROUP_PREFIX",
    "correlation_for",
    "ExecutionContext",
    "InvocationEvent",
    "MetricPoint",
    "LogGroupDescriptor",
    "InvocationOutcome",
]
