import asyncio

import pytest

from telnyx_outbound.config import TelnyxOptions
from telnyx_outbound.context import ExecutionContext, InboundCall
from telnyx_outbound.protocol import CallControlApiError, CallControlClient


class FakeCallControlClient(CallControlClient):
    """Records dial commands instead of sending them."""

    def __init__(self, response=None, error=None, delay=0.0):
        self.response = response if response is not None else {"call_control_id": "v3:abc", "call_leg_id": "leg-1"}
        self.error = error
        self.delay = delay
        self.requests = []

    async def dial(self, request):
        self.requests.append(request)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def options():
    return TelnyxOptions(api_key="test_key", call_control_app_id="app_42")


@pytest.fixture
def options_without_default():
    return TelnyxOptions(api_key="test_key")


@pytest.fixture
def fake_client():
    return FakeCallControlClient()


@pytest.fixture
def inbound_call():
    return InboundCall(call_control_id="v3:inbound", from_number="+15550001111", to_number="+15550002222")


@pytest.fixture
def context():
    return ExecutionContext(workflow_instance_id="wf-1", activity_id="dial-1")


@pytest.fixture
def inbound_context(inbound_call):
    return ExecutionContext(
        workflow_instance_id="wf-2",
        activity_id="dial-1",
        variables={"destination": "+15557654321"},
        inbound_call=inbound_call,
    )


@pytest.fixture
def api_error():
    return CallControlApiError(
        "Telnyx responded with status 422",
        status=422,
        content='{"message":"invalid number"}',
    )


@pytest.fixture
def make_client():
    return FakeCallControlClient
