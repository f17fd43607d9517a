"""Shared helpers for retrieving configuration from SSM Parameter Store."""

import logging
import os
from typing import Optional

import boto3
from botocore.exceptions import ClientError

__author__ = "Koushik Sinha"
__version__ = "1.1.0"
__modified_by__ = "Koushik Sinha"

logger = logging.getLogger(__name__)
_ssm_client = boto3.client("ssm")

# Simple in-memory cache so a warm Lambda container doesn't repeatedly hit SSM
_SSM_CACHE: dict[str, str] = {}


def get_values_from_ssm(name: str, decrypt: bool = False) -> Optional[str]:
    """Retrieve a parameter value from SSM with optional decryption.

    Returns ``None`` when the parameter does not exist.
    """
    if name in _SSM_CACHE:
        return _SSM_CACHE[name]
    try:
        resp = _ssm_client.get_parameter(Name=name, WithDecryption=decrypt)
    except ClientError as exc:
        if exc.response.get("Error", {}).get("Code") == "ParameterNotFound":
            logger.debug("Parameter %s not found", name)
            return None
        logger.error("Error retrieving parameter %s: %s", name, exc)
        raise
    value = resp["Parameter"]["Value"]
    _SSM_CACHE[name] = value
    logger.debug("Loaded parameter %s", name)
    return value


def get_environment_prefix() -> Optional[str]:
    """Return the SSM prefix for the current environment.

    ``None`` means Parameter Store lookups are disabled because
    ``PARAMETER_PREFIX`` is not set.
    """
    base = os.environ.get("PARAMETER_PREFIX")
    if not base:
        return None
    base = base.rstrip("/")
    env = os.environ.get("SERVER_ENV") or get_values_from_ssm(f"{base}/SERVER_ENV")
    if not env:
        raise RuntimeError("SERVER_ENV not set in environment or SSM")
    return f"{base}/{env}"


def get_config(name: str, decrypt: bool = False) -> Optional[str]:
    """Return configuration ``name`` from SSM under ``get_environment_prefix()``."""

    prefix = get_environment_prefix()
    if prefix is None:
        return None
    return get_values_from_ssm(f"{prefix}/{name}", decrypt)
