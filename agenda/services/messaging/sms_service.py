# agenda/services/messaging/sms_service.py
"""SMS sending for reminders"""
import logging
from typing import Any, Dict, Optional, Tuple

from twilio.base.exceptions import TwilioException
from twilio.rest import Client

from agenda.config.settings import get_settings
from agenda.core.errors import ExternalServiceError

logger = logging.getLogger(__name__)


class SMSService:
    def __init__(self, client: Optional[Client] = None, from_number: Optional[str] = None):
        settings = get_settings()
        if client is None and settings.TWILIO_ACCOUNT_SID:
            client = Client(settings.TWILIO_ACCOUNT_SID, settings.TWILIO_AUTH_TOKEN)
        self.client = client
        self.from_number = from_number or settings.TWILIO_FROM_NUMBER

    def send_sms(self, to_phone: str, message_body: str) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        """
        Send one SMS.

        Returns (request_payload, response_payload) for the reminder record.
        Raises ExternalServiceError("twilio") when the message was not accepted.
        """
        request_payload = {"to": to_phone, "from": self.from_number, "body": message_body}

        if not self.client or not self.from_number:
            logger.error("Twilio client not configured")
            raise ExternalServiceError("twilio", "client not configured", {"request": request_payload})

        try:
            twilio_message = self.client.messages.create(
                body=message_body,
                from_=self.from_number,
                to=to_phone
            )
        except TwilioException as e:
            logger.error(f"Twilio error sending SMS to {to_phone}: {str(e)}")
            raise ExternalServiceError("twilio", str(e), {"request": request_payload}) from e

        logger.info(f"SMS sent successfully to {to_phone}: {twilio_message.sid}")
        response_payload = {"sid": twilio_message.sid, "status": twilio_message.status}
        return request_payload, response_payload
