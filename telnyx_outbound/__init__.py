"""Telnyx workflow activities."""

from .bindings import Binding
from .config import TelnyxOptions, load_options
from .context import ExecutionContext, InboundCall
from .dial import Dial, DialBuilder
from .exceptions import MissingCallControlAppId, ProviderRejected, TelnyxConfigError, WorkflowError
from .protocol import CallControlClient, DialOutcome, DialRequest

__all__ = [
    "Binding",
    "CallControlClient",
    "Dial",
    "DialBuilder",
    "DialOutcome",
    "DialRequest",
    "ExecutionContext",
    "InboundCall",
    "MissingCallControlAppId",
    "ProviderRejected",
    "TelnyxConfigError",
    "TelnyxOptions",
    "WorkflowError",
    "load_options",
]
