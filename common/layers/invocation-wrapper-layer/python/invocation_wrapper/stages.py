"""Pipeline stages run by the invocation wrapper.

Each stage is a callable taking the accumulated :class:`PipelineContext` and
returning it. ``DispatchStage`` may raise; the two reporting stages absorb
their own failures so they never change the response handed back to the
caller.
"""

from __future__ import annotations

import json
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

from common_utils import configure_logger
from common_utils.error_utils import log_suppressed
from models import (
    ExecutionContext,
    InvocationEvent,
    LogGroupDescriptor,
    MetricPoint,
    correlation_for,
)

from .config import WrapperConfig

__all__ = [
    "PipelineContext",
    "DispatchStage",
    "PublishMetricStage",
    "EnsureLogGroupStage",
    "reshape_response",
]

logger = configure_logger(__name__)

_DROPPED_FIELDS = ("LogResult", "Payload")
_HOISTED_FIELDS = ("RequestId", "FunctionVersion", "AdditionalData")


@dataclass
class PipelineContext:
    """State accumulated while one event moves through the stages."""

    event: Any
    caller: ExecutionContext
    config: WrapperConfig
    target_name: Optional[str] = None
    request: Optional[Dict[str, Any]] = None
    response: Optional[Dict[str, Any]] = None
    start_ms: int = 0
    end_ms: int = 0
    duration_ms: int = 0
    metric: Optional[MetricPoint] = None
    log_group: Optional[LogGroupDescriptor] = None

    @property
    def correlation(self) -> str:
        return correlation_for(self.caller.function_name, self.target_name)


def _decode_payload(raw: Any) -> Any:
    if raw is None:
        return {}
    if isinstance(raw, (bytes, bytearray)):
        raw = raw.decode("utf-8")
    if isinstance(raw, str):
        return json.loads(raw) if raw.strip() else {}
    return raw


def reshape_response(raw: Dict[str, Any]) -> Dict[str, Any]:
    """Drop the raw log/payload fields and hoist the downstream identifiers.

    ``Payload`` must already be read into ``bytes`` or ``str``. A payload that
    is not valid JSON raises :class:`json.JSONDecodeError`.
    """
    payload = _decode_payload(raw.get("Payload"))
    if not isinstance(payload, dict):
        payload = {}
    response = {k: v for k, v in raw.items() if k not in _DROPPED_FIELDS}
    for key in _HOISTED_FIELDS:
        response[key] = payload.get(key)
    return response


class DispatchStage:
    """Invoke the target function synchronously and time the call."""

    def __init__(self, lambda_client: Any, clock: Callable[[], float] = time.time) -> None:
        self.lambda_client = lambda_client
        self.clock = clock

    def _now_ms(self) -> int:
        return int(round(self.clock() * 1000))

    def __call__(self, ctx: PipelineContext) -> PipelineContext:
        event = InvocationEvent.from_dict(ctx.event)
        target, payload = event.split_target(ctx.caller)
        ctx.target_name = target
        ctx.request = payload

        start = self._now_ms()
        raw = self.lambda_client.invoke(
            FunctionName=target,
            InvocationType="RequestResponse",
            LogType="Tail",
            Payload=json.dumps(payload).encode("utf-8"),
        )
        body = raw.get("Payload")
        if hasattr(body, "read"):
            raw = dict(raw, Payload=body.read())
        end = self._now_ms()

        ctx.start_ms = start
        ctx.end_ms = end
        ctx.duration_ms = max(end - start, 0)
        ctx.response = reshape_response(raw)

        if ctx.response.get("FunctionError"):
            logger.warning(
                "Function %s reported %s error", target, ctx.response["FunctionError"]
            )

        self._log_invocation(ctx, event)
        return ctx

    def _log_invocation(self, ctx: PipelineContext, event: InvocationEvent) -> None:
        caller = ctx.caller
        response = ctx.response or {}
        record = {
            "request": ctx.request,
            "response": response,
            "processId": event.ProcessId,
            "transactionId": event.TransactionId,
            "functionName": f"{caller.function_name}/{ctx.target_name}",
            "requestId": f"{caller.aws_request_id}/{response.get('RequestId')}",
            "version": f"{caller.function_version}/{response.get('FunctionVersion')}",
            "securityCommitHash": ctx.config.security_commit_hash,
            "applicationCommitHash": ctx.config.application_commit_hash,
            "startTime": ctx.start_ms,
            "endTime": ctx.end_ms,
            "duration": ctx.duration_ms,
        }
        logger.info(json.dumps(record, default=str))


class PublishMetricStage:
    """Publish the measured duration to CloudWatch, best effort."""

    def __init__(
        self,
        cloudwatch_client: Any,
        now: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ) -> None:
        self.cloudwatch_client = cloudwatch_client
        self.now = now

    def __call__(self, ctx: PipelineContext) -> PipelineContext:
        ctx.metric = MetricPoint(
            value=ctx.duration_ms,
            timestamp=self.now(),
            correlation=ctx.correlation,
        )
        try:
            self.cloudwatch_client.put_metric_data(
                Namespace=ctx.config.metric_namespace,
                MetricData=[ctx.metric.to_metric_datum()],
            )
        except Exception as exc:
            log_suppressed("Failed to publish duration metric", exc, logger)
        return ctx


class EnsureLogGroupStage:
    """Create the correlation log group; existing groups are not an error."""

    def __init__(self, logs_client: Any) -> None:
        self.logs_client = logs_client

    def __call__(self, ctx: PipelineContext) -> PipelineContext:
        correlation = ctx.metric.correlation if ctx.metric else ctx.correlation
        ctx.log_group = LogGroupDescriptor.for_correlation(
            correlation, ctx.config.log_group_prefix
        )
        try:
            self.logs_client.create_log_group(logGroupName=ctx.log_group.name)
        except Exception as exc:
            log_suppressed("Failed to create log group", exc, logger)
        return ctx
