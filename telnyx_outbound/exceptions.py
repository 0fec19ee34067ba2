# telnyx_outbound/exceptions.py
"""Errors raised by Telnyx workflow activities."""


class TelnyxActivityError(Exception):
    """Base class for errors raised by Telnyx activities."""


class MissingCallControlAppId(TelnyxActivityError):
    """Raised when no Call Control ID was given and no default is configured."""


class WorkflowError(TelnyxActivityError):
    """An activity failure the host workflow engine should surface as a fault."""

    def __init__(self, message: str, cause: BaseException | None = None):
        super().__init__(message)
        self.message = message
        self.cause = cause


class ProviderRejected(WorkflowError):
    """Raised when Telnyx (or the transport in front of it) declines a command."""


class TelnyxConfigError(TelnyxActivityError):
    """Raised when the Telnyx configuration file is malformed."""
