# telnyx_outbound/protocol.py
"""
Dial Protocol Definitions

This module defines the data shapes and interfaces shared by the Dial activity
and the call-control clients it talks to. It establishes the contract between
the workflow-facing activity and any provider client implementation.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class AnsweringMachineDetection(str, Enum):
    """Answering machine detection modes accepted by Telnyx."""

    DISABLED = "disabled"
    DETECT = "detect"
    DETECT_BEEP = "detect_beep"
    DETECT_WORDS = "detect_words"
    GREETING_END = "greeting_end"


class WebhookUrlMethod(str, Enum):
    """HTTP method used for the webhook URL override."""

    GET = "GET"
    POST = "POST"


class Header(BaseModel):
    """A custom SIP header added to the INVITE."""

    model_config = ConfigDict(frozen=True)

    name: str
    value: str


class AnsweringMachineConfig(BaseModel):
    """Optional tuning parameters for answering machine detection."""

    model_config = ConfigDict(frozen=True)

    total_analysis_time_millis: int | None = None
    after_greeting_silence_millis: int | None = None
    between_words_silence_millis: int | None = None
    greeting_duration_millis: int | None = None
    initial_silence_millis: int | None = None
    maximum_number_of_words: int | None = None
    maximum_word_length_millis: int | None = None
    silence_threshold: int | None = None
    greeting_total_analysis_time_millis: int | None = None
    greeting_silence_duration_millis: int | None = None


@dataclass(frozen=True)
class DialParameters:
    """
    The resolved input of a single Dial execution.

    Attributes:
        connection_id: Call Control App ID (formerly connection ID) to dial from.
        to: The DID or SIP URI to dial.
        from_: Caller ID presented to the destination, in +E164 format.
        from_display_name: SIP From display name.
        answering_machine_detection: AMD mode.
        answering_machine_detection_config: AMD tuning parameters.
        command_id: Idempotency token; Telnyx ignores repeated command IDs.
        client_state: Base-64 state echoed on every subsequent webhook.
        custom_headers: Headers added to the SIP INVITE, in order.
        sip_auth_username: Username used for SIP challenges.
        sip_auth_password: Password used for SIP challenges.
        time_limit_secs: Maximum duration of the call control leg.
        timeout_secs: Seconds to wait for the destination to answer.
        webhook_url: Override for the webhook URL of this call.
        webhook_url_method: HTTP method used for webhook_url.
    """

    connection_id: str | None = None
    to: str | None = None
    from_: str | None = None
    from_display_name: str | None = None
    answering_machine_detection: AnsweringMachineDetection | str | None = None
    answering_machine_detection_config: AnsweringMachineConfig | None = None
    command_id: str | None = None
    client_state: str | None = None
    custom_headers: tuple[Header, ...] | None = None
    sip_auth_username: str | None = None
    sip_auth_password: str | None = None
    time_limit_secs: int | None = None
    timeout_secs: int | None = None
    webhook_url: str | None = None
    webhook_url_method: WebhookUrlMethod | str | None = None


class DialRequest(BaseModel):
    """Wire shape of the Telnyx `POST /calls` command."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    connection_id: str
    to: str | None = None
    from_: str | None = Field(default=None, alias="from")
    from_display_name: str | None = None
    answering_machine_detection: str | None = None
    answering_machine_detection_config: AnsweringMachineConfig | None = None
    command_id: str | None = None
    client_state: str | None = None
    custom_headers: tuple[Header, ...] | None = None
    sip_auth_username: str | None = None
    sip_auth_password: str | None = None
    time_limit_secs: int | None = None
    timeout_secs: int | None = None
    webhook_url: str | None = None
    webhook_url_method: str | None = None

    def to_payload(self) -> dict[str, Any]:
        """Serialize for the wire. Unset fields are omitted rather than zeroed."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


@dataclass(frozen=True)
class DialOutcome:
    """
    Result handed back to the host workflow engine.

    Attributes:
        data: The provider's response payload, forwarded unchanged.
        outcome: Name of the outcome the engine should follow.
    """

    data: dict[str, Any]
    outcome: str = "Done"


class CallControlApiError(Exception):
    """Raised by a call-control client when the provider or transport rejects a request."""

    def __init__(self, message: str, status: int | None = None, content: str | None = None):
        super().__init__(message)
        self.status = status
        self.content = content


class CallControlClient(ABC):
    """
    Abstract Base Class for call-control clients.

    The Dial activity only needs one operation from the provider, so tests can
    substitute a fake without any network access.
    """

    @abstractmethod
    async def dial(self, request: DialRequest) -> dict[str, Any]:
        """
        Dial a number or SIP URI.

        Args:
            request: The dial command to send.

        Returns:
            dict: The `data` object of the provider response.

        Raises:
            CallControlApiError: If the provider or the transport fails the request.
        """
        ...
