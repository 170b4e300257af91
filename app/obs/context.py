"""Request context helpers using ContextVars.

The request id is set by the observability middleware and picked up by
every log event emitted while that request is being served.
"""

from contextvars import ContextVar
from typing import Optional


request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
