from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from twilio.base.exceptions import TwilioException

from agenda.core.errors import ExternalServiceError
from agenda.services.messaging.sms_service import SMSService


def test_send_returns_payloads():
    client = MagicMock()
    client.messages.create.return_value = SimpleNamespace(sid="SM42", status="queued")
    service = SMSService(client=client, from_number="+15550001111")

    request_payload, response_payload = service.send_sms("+595981111111", "Hola")

    client.messages.create.assert_called_once_with(body="Hola", from_="+15550001111", to="+595981111111")
    assert request_payload == {"to": "+595981111111", "from": "+15550001111", "body": "Hola"}
    assert response_payload == {"sid": "SM42", "status": "queued"}


def test_twilio_error_is_external_service_error():
    client = MagicMock()
    client.messages.create.side_effect = TwilioException("invalid number")
    service = SMSService(client=client, from_number="+15550001111")

    with pytest.raises(ExternalServiceError) as exc_info:
        service.send_sms("+595981111111", "Hola")
    assert exc_info.value.service == "twilio"
    assert exc_info.value.details["request"]["to"] == "+595981111111"


def test_unconfigured_client():
    service = SMSService(client=None, from_number=None)
    service.client = None

    with pytest.raises(ExternalServiceError):
        service.send_sms("+595981111111", "Hola")
