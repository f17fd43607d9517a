# ------------------------------------------------------------------------------
# app.py
# ------------------------------------------------------------------------------
"""
Lambda that forwards an event to the function named in ``FunctionName``.

The call is timed, the duration is published to CloudWatch under the
``wrapper/target`` correlation dimension and a matching log group is created
under ``/metric/lambda/correlation/``.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from common_utils import configure_logger
from invocation_wrapper import InvocationWrapper, WrapperConfig

# Module Metadata
__author__ = "Koushik Sinha"
__version__ = "1.0.0"
__modified_by__ = "Koushik Sinha"

logger = configure_logger(__name__)

wrapper = InvocationWrapper(WrapperConfig.from_env())


def lambda_handler(event: Dict[str, Any], context: Any) -> Optional[Dict[str, Any]]:
    """Entry point for wrapped invocations.

    1. Invokes the target function with the event, minus ``FunctionName`` and
       plus a ``Caller`` record.
    2. Publishes the ``Duration`` metric and ensures the correlation log group.

    Returns the downstream response with ``RequestId``, ``FunctionVersion``
    and ``AdditionalData`` hoisted from its payload, or ``None`` when the
    invocation failed.
    """
    logger.debug("Received event: %s", event)
    return wrapper.invoke(event, context)
