"""Error taxonomy and error logging helpers."""

from .handling import categorize_error, log_error  # noqa: F401
from .internal import *  # noqa: F401,F403
from .internal import __all__ as _internal_all

__all__ = ["categorize_error", "log_error", *_internal_all]
