"""Configuration record for :class:`invocation_wrapper.InvocationWrapper`."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from common_utils.get_ssm import get_config
from models import DEFAULT_LOG_GROUP_PREFIX, DEFAULT_METRIC_NAMESPACE

__all__ = ["NOT_AVAILABLE", "WrapperConfig"]

NOT_AVAILABLE = "N/A"


def _setting(name: str, default: str) -> str:
    """Return ``name`` from SSM or the environment, falling back to ``default``."""
    value: Optional[str] = get_config(name) or os.environ.get(name)
    return value or default


@dataclass(frozen=True)
class WrapperConfig:
    """Process-wide settings resolved once when the wrapper is built."""

    security_commit_hash: str = NOT_AVAILABLE
    application_commit_hash: str = NOT_AVAILABLE
    metric_namespace: str = DEFAULT_METRIC_NAMESPACE
    log_group_prefix: str = DEFAULT_LOG_GROUP_PREFIX

    @classmethod
    def from_env(cls) -> "WrapperConfig":
        return cls(
            security_commit_hash=_setting("SECURITY_COMMIT_HASH", NOT_AVAILABLE),
            application_commit_hash=_setting("APP_COMMIT_HASH", NOT_AVAILABLE),
            metric_namespace=_setting("METRIC_NAMESPACE", DEFAULT_METRIC_NAMESPACE),
            log_group_prefix=_setting("LOG_GROUP_PREFIX", DEFAULT_LOG_GROUP_PREFIX),
        )
