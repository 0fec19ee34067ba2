from telnyx_outbound.protocol import (
    AnsweringMachineConfig,
    DialOutcome,
    DialParameters,
    DialRequest,
    Header,
)


def test_dial_parameters_defaults():
    params = DialParameters(to="+15551234")
    assert params.to == "+15551234"
    assert params.connection_id is None
    assert params.from_ is None
    assert params.custom_headers is None
    assert params.timeout_secs is None


def test_dial_request_minimal_payload():
    req = DialRequest(connection_id="app_42", to="+15551234567")
    assert req.to_payload() == {"connection_id": "app_42", "to": "+15551234567"}


def test_dial_request_full_payload():
    req = DialRequest(
        connection_id="app_42",
        to="sip:bob@example.com",
        from_="+15550001111",
        from_display_name="Support",
        answering_machine_detection="detect_words",
        answering_machine_detection_config=AnsweringMachineConfig(total_analysis_time_millis=5000),
        command_id="cmd-1",
        client_state="c3RhdGU=",
        custom_headers=(Header(name="X-Ticket", value="42"), Header(name="X-Team", value="blue")),
        sip_auth_username="user",
        sip_auth_password="secret",
        time_limit_secs=600,
        timeout_secs=30,
        webhook_url="https://example.com/hooks",
        webhook_url_method="GET",
    )
    payload = req.to_payload()

    assert payload["from"] == "+15550001111"
    assert "from_" not in payload
    assert payload["answering_machine_detection_config"] == {"total_analysis_time_millis": 5000}
    assert payload["custom_headers"] == [
        {"name": "X-Ticket", "value": "42"},
        {"name": "X-Team", "value": "blue"},
    ]
    assert payload["time_limit_secs"] == 600
    assert payload["webhook_url_method"] == "GET"


def test_dial_request_keeps_zero_values():
    req = DialRequest(connection_id="app_42", to="+1", timeout_secs=0, client_state="")
    payload = req.to_payload()
    assert payload["timeout_secs"] == 0
    assert payload["client_state"] == ""


def test_dial_outcome_defaults():
    outcome = DialOutcome(data={"call_control_id": "v3:abc"})
    assert outcome.outcome == "Done"
    assert outcome.data == {"call_control_id": "v3:abc"}
