"""Invocation wrapper recording latency metrics for downstream Lambdas."""

from .config import NOT_AVAILABLE, WrapperConfig
from .stages import (
    DispatchStage,
    EnsureLogGroupStage,
    PipelineContext,
    PublishMetricStage,
    reshape_response,
)
from .wrapper import InvocationWrapper

__all__ = [
    "NOT_AVAILABLE",
    "WrapperConfig",
    "DispatchStage",
    "EnsureLogGroupStage",
    "PipelineContext",
    "PublishMetricStage",
    "reshape_response",
    "InvocationWrapper",
]
