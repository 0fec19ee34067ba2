# telnyx_outbound/dial.py
"""
Dial Activity

Dials a number or SIP URI from a Telnyx Call Control App. Properties are
resolved when the activity executes, turned into a Telnyx dial command and
sent through the injected call-control client. Provider failures surface as
`ProviderRejected`; cancellation propagates as `asyncio.CancelledError`.
"""

import json
from collections.abc import Iterable, Mapping
from enum import Enum
from typing import Any

from loguru import logger

from .activity import Activity, ActivityBuilder, ActivityDescriptor, PropertyDescriptor
from .bindings import Bindable, Binding
from .config import TelnyxOptions
from .context import ExecutionContext
from .exceptions import MissingCallControlAppId, ProviderRejected
from .protocol import (
    AnsweringMachineConfig,
    AnsweringMachineDetection,
    CallControlApiError,
    CallControlClient,
    DialOutcome,
    DialParameters,
    DialRequest,
    Header,
    WebhookUrlMethod,
)

ADVANCED = "Advanced"
SIP_AUTHENTICATION = "SIP Authentication"

DIAL_DESCRIPTOR = ActivityDescriptor(
    type_name="Dial",
    display_name="Dial",
    description="Dial a number or SIP URI from a given connection.",
    properties=(
        PropertyDescriptor(
            "connection_id",
            "Call Control ID",
            "The ID of the Call Control App (formerly ID of the connection) to be used when dialing the destination.",
            category=ADVANCED,
        ),
        PropertyDescriptor("to", "To", "The DID or SIP URI to dial out and bridge to the given call."),
        PropertyDescriptor(
            "from_",
            "From",
            "The caller ID presented to the destination, in +E164 format. "
            "Defaults to the 'From' number of the original call if omitted.",
        ),
        PropertyDescriptor(
            "from_display_name",
            "From Display Name",
            "The caller ID name (SIP From Display Name) presented to the destination. "
            "Defaults to the number in the 'From' field if omitted.",
        ),
        PropertyDescriptor(
            "answering_machine_detection",
            "Answering Machine Detection",
            "Enables Answering Machine Detection.",
            options=tuple(m.value for m in AnsweringMachineDetection),
        ),
        PropertyDescriptor(
            "answering_machine_detection_config",
            "Answering Machine Detection Configuration",
            "Optional configuration parameters to modify answering machine detection performance.",
            category=ADVANCED,
        ),
        PropertyDescriptor(
            "command_id",
            "Command ID",
            "Use this field to avoid duplicate commands. Telnyx will ignore commands with the same Command ID.",
            category=ADVANCED,
        ),
        PropertyDescriptor(
            "client_state",
            "Client State",
            "State added to every subsequent webhook. It must be a valid Base-64 encoded string.",
            category=ADVANCED,
        ),
        PropertyDescriptor(
            "custom_headers", "Custom Headers", "Custom headers to be added to the SIP INVITE.", category=ADVANCED
        ),
        PropertyDescriptor(
            "sip_auth_username",
            "SIP Authentication Username",
            "SIP Authentication username used for SIP challenges.",
            category=SIP_AUTHENTICATION,
        ),
        PropertyDescriptor(
            "sip_auth_password",
            "SIP Authentication Password",
            "SIP Authentication password used for SIP challenges.",
            category=SIP_AUTHENTICATION,
        ),
        PropertyDescriptor(
            "time_limit_secs",
            "Time Limit",
            "Sets the maximum duration of a Call Control Leg in seconds.",
            category=ADVANCED,
        ),
        PropertyDescriptor(
            "timeout_secs",
            "Timeout",
            "The number of seconds Telnyx will wait for the call to be answered by the destination.",
            category=ADVANCED,
        ),
        PropertyDescriptor(
            "webhook_url",
            "Webhook URL",
            "Overrides the URL Telnyx sends subsequent webhooks for this call to.",
            category=ADVANCED,
        ),
        PropertyDescriptor(
            "webhook_url_method",
            "Webhook URL Method",
            "HTTP request type used for Webhook URL.",
            category=ADVANCED,
            options=tuple(m.value for m in WebhookUrlMethod),
        ),
    ),
)


def _is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


def _enum_value(value):
    return value.value if isinstance(value, Enum) else value


def _as_header(item) -> Header:
    if isinstance(item, Header):
        return item
    if isinstance(item, Mapping):
        return Header(name=item["name"], value=item["value"])
    name, value = item
    return Header(name=name, value=value)


def _as_headers(items: Iterable | None) -> tuple[Header, ...] | None:
    if items is None:
        return None
    return tuple(_as_header(item) for item in items)


def _as_amd_config(value) -> AnsweringMachineConfig | None:
    if value is None or isinstance(value, AnsweringMachineConfig):
        return value
    return AnsweringMachineConfig.model_validate(value)


def build_dial_request(
    params: DialParameters, options: TelnyxOptions, context: ExecutionContext
) -> DialRequest:
    """
    Turn resolved parameters into a Telnyx dial command.

    The connection falls back to the configured Call Control App ID, and the
    caller ID falls back to the 'From' number of the inbound call. All other
    fields are passed through; Telnyx validates them.

    Raises:
        MissingCallControlAppId: If neither the parameters nor the options name a Call Control App.
    """
    connection_id = params.connection_id
    if _is_blank(connection_id):
        connection_id = options.call_control_app_id
    if _is_blank(connection_id):
        raise MissingCallControlAppId("No Call Control ID specified and no default value configured")

    return DialRequest(
        connection_id=connection_id,
        to=params.to,
        from_=context.from_number(params.from_),
        from_display_name=params.from_display_name,
        answering_machine_detection=_enum_value(params.answering_machine_detection),
        answering_machine_detection_config=params.answering_machine_detection_config,
        command_id=params.command_id,
        client_state=params.client_state,
        custom_headers=params.custom_headers,
        sip_auth_username=params.sip_auth_username,
        sip_auth_password=params.sip_auth_password,
        time_limit_secs=params.time_limit_secs,
        timeout_secs=params.timeout_secs,
        webhook_url=params.webhook_url,
        webhook_url_method=_enum_value(params.webhook_url_method),
    )


def rejection_message(error: CallControlApiError) -> str:
    """
    Pick the most useful message out of a provider error.

    Prefers a structured `message` field, then the first `errors[]` detail or
    title, then the raw body, then the transport's own message.
    """
    content = error.content
    if not content:
        return str(error)

    try:
        body = json.loads(content)
    except ValueError:
        return content

    if isinstance(body, dict):
        message = body.get("message")
        if isinstance(message, str) and message:
            return message
        errors = body.get("errors")
        if isinstance(errors, list) and errors and isinstance(errors[0], dict):
            detail = errors[0].get("detail") or errors[0].get("title")
            if detail:
                return str(detail)
    return content


class Dial(Activity):
    """
    Dial a number or SIP URI from a given connection.

    The activity performs a single dial attempt per execution. It never
    retries; retry policy belongs to the workflow engine.
    """

    descriptor = DIAL_DESCRIPTOR

    def __init__(
        self,
        client: CallControlClient,
        options: TelnyxOptions,
        bindings: Mapping[str, Binding[Any]] | None = None,
    ):
        super().__init__(bindings)
        self.client = client
        self.options = options

    @classmethod
    def setup(cls, client: CallControlClient, options: TelnyxOptions) -> "DialBuilder":
        return DialBuilder(client, options)

    async def resolve_parameters(self, context: ExecutionContext) -> DialParameters:
        values = await self.resolve_properties(context)
        if "custom_headers" in values:
            values["custom_headers"] = _as_headers(values["custom_headers"])
        if "answering_machine_detection_config" in values:
            values["answering_machine_detection_config"] = _as_amd_config(
                values["answering_machine_detection_config"]
            )
        return DialParameters(**values)

    async def execute(self, context: ExecutionContext) -> DialOutcome:
        """
        Dial and return the Telnyx response payload.

        Args:
            context: The running activity's execution context.

        Returns:
            DialOutcome: The `Done` outcome carrying the provider's data.

        Raises:
            MissingCallControlAppId: No Call Control App could be determined.
            ProviderRejected: Telnyx or the transport rejected the command.
            asyncio.CancelledError: The execution was cancelled.
        """
        params = await self.resolve_parameters(context)
        request = build_dial_request(params, self.options, context)

        logger.info(
            f"Dialing {request.to} via {request.connection_id} "
            f"for workflow {context.workflow_instance_id}"
        )
        try:
            data = await context.guard(self.client.dial(request))
        except CallControlApiError as e:
            message = rejection_message(e)
            logger.warning(f"Telnyx rejected dial to {request.to}: {message}")
            raise ProviderRejected(message, e) from e

        return DialOutcome(data=data)


class DialBuilder(ActivityBuilder[Dial]):
    """Fluent setup for a Dial activity. Every `with_*` accepts any binding form."""

    def __init__(self, client: CallControlClient, options: TelnyxOptions):
        super().__init__(DIAL_DESCRIPTOR)
        self._client = client
        self._options = options

    def with_connection_id(self, value: Bindable[str | None]) -> "DialBuilder":
        return self.set("connection_id", value)

    def with_to(self, value: Bindable[str | None]) -> "DialBuilder":
        return self.set("to", value)

    def with_from(self, value: Bindable[str | None]) -> "DialBuilder":
        return self.set("from_", value)

    def with_from_display_name(self, value: Bindable[str | None]) -> "DialBuilder":
        return self.set("from_display_name", value)

    def with_answering_machine_detection(
        self, value: Bindable[AnsweringMachineDetection | str | None]
    ) -> "DialBuilder":
        return self.set("answering_machine_detection", value)

    def with_answering_machine_detection_config(
        self, value: Bindable[AnsweringMachineConfig | dict | None]
    ) -> "DialBuilder":
        return self.set("answering_machine_detection_config", value)

    def with_command_id(self, value: Bindable[str | None]) -> "DialBuilder":
        return self.set("command_id", value)

    def with_client_state(self, value: Bindable[str | None]) -> "DialBuilder":
        return self.set("client_state", value)

    def with_custom_headers(self, value: Bindable[Iterable | None]) -> "DialBuilder":
        return self.set("custom_headers", value)

    def with_sip_auth_username(self, value: Bindable[str | None]) -> "DialBuilder":
        return self.set("sip_auth_username", value)

    def with_sip_auth_password(self, value: Bindable[str | None]) -> "DialBuilder":
        return self.set("sip_auth_password", value)

    def with_time_limit_secs(self, value: Bindable[int | None]) -> "DialBuilder":
        return self.set("time_limit_secs", value)

    def with_timeout_secs(self, value: Bindable[int | None]) -> "DialBuilder":
        return self.set("timeout_secs", value)

    def with_webhook_url(self, value: Bindable[str | None]) -> "DialBuilder":
        return self.set("webhook_url", value)

    def with_webhook_url_method(self, value: Bindable[WebhookUrlMethod | str | None]) -> "DialBuilder":
        return self.set("webhook_url_method", value)

    def build(self) -> Dial:
        return Dial(self._client, self._options, self.bindings)
