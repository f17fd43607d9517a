"""Wrap a synchronous Lambda call with latency metrics and log group setup."""

from __future__ import annotations

import time
from typing import Any, Callable, Dict, Optional, Sequence

import boto3

from common_utils import configure_logger
from common_utils.error_utils import log_exception
from models import ExecutionContext, InvocationOutcome

from .config import WrapperConfig
from .stages import (
    DispatchStage,
    EnsureLogGroupStage,
    PipelineContext,
    PublishMetricStage,
)

__all__ = ["InvocationWrapper"]

logger = configure_logger(__name__)

Stage = Callable[[PipelineContext], PipelineContext]


class InvocationWrapper:
    """Forward events to a target function and record how long it took.

    The stages run strictly in order: dispatch, publish metric, ensure log
    group. Failures never escape :meth:`run` or :meth:`invoke`; a dispatch
    failure is logged and ends the pipeline, the reporting stages absorb
    their own errors.
    """

    def __init__(
        self,
        config: WrapperConfig | None = None,
        lambda_client: Any = None,
        cloudwatch_client: Any = None,
        logs_client: Any = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.config = config or WrapperConfig.from_env()
        self.lambda_client = lambda_client or boto3.client("lambda")
        self.cloudwatch_client = cloudwatch_client or boto3.client("cloudwatch")
        self.logs_client = logs_client or boto3.client("logs")
        self.stages: Sequence[Stage] = (
            DispatchStage(self.lambda_client, clock),
            PublishMetricStage(self.cloudwatch_client),
            EnsureLogGroupStage(self.logs_client),
        )

    def run(self, event: Any, context: Any) -> InvocationOutcome:
        """Run every stage for *event* and report how the pipeline ended."""
        try:
            ctx = PipelineContext(
                event=event,
                caller=ExecutionContext.from_lambda_context(context),
                config=self.config,
            )
            for stage in self.stages:
                ctx = stage(ctx)
        except Exception as exc:
            log_exception("Lambda log wrapper error", exc, logger)
            return InvocationOutcome(error=exc)
        return InvocationOutcome(response=ctx.response)

    def invoke(self, event: Any, context: Any) -> Optional[Dict[str, Any]]:
        """Return the reshaped downstream response, or ``None`` on failure."""
        return self.run(event, context).response
