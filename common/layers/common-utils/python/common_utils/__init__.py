# Module Metadata
__author__ = "Koushik Sinha"
__version__ = "1.1.0"
__modified_by__ = "Koushik Sinha"

from .logging_utils import configure_logger
from .get_ssm import (
    get_values_from_ssm,
    get_environment_prefix,
    get_config,
)
from .error_utils import log_exception, log_suppressed

__all__ = [
    "get_values_from_ssm",
    "get_environment_prefix",
    "get_config",
    "configure_logger",
    "log_exception",
    "log_suppressed",
]
