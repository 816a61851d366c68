"""Voximplant bot-service HTTP client.

Sends the feedback-request template message (WhatsApp/SMS channel configured
in Voximplant) for a single order line.
"""

import json
import logging
from typing import Optional

import httpx

from mb_feedback.config import get_settings
from mb_feedback.core.exceptions import BadStatusCodeError

settings = get_settings()
logger = logging.getLogger(__name__)

SEND_TEMPLATE_PATH = "/api/v3/botService/sendTemplateMessage"
DEFAULT_RATING = 5


class VoximplantClient:
    """Client for the Voximplant template message API."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        access_token: Optional[str] = None,
        domain: Optional[str] = None,
        template_id: Optional[str] = None,
        channel_id: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or settings.VOXIMPLANT_API_URL).rstrip("/")
        self.access_token = access_token if access_token is not None else settings.VOXIMPLANT_ACCESS_TOKEN
        self.domain = domain if domain is not None else settings.VOXIMPLANT_DOMAIN
        self.template_id = template_id if template_id is not None else settings.VOXIMPLANT_TEMPLATE_ID
        self.channel_id = channel_id if channel_id is not None else settings.VOXIMPLANT_CHANNEL_ID
        self._transport = transport

    def build_form(self, order_id: str, user_phone: str, user_name: str, product_code: str) -> dict:
        """Form fields of the template message for one order line."""
        return {
            "domain": self.domain,
            "client_id": user_phone,
            "message_template_id": self.template_id,
            "channel_id": self.channel_id,
            "access_token": self.access_token,
            "header_param_value": user_name,
            # Link behind the rating button
            "button_url_param_value": f"orderCode={order_id}&productCode={product_code}&rating={DEFAULT_RATING}",
            "text_param_values": json.dumps({"name2": user_name}, ensure_ascii=False),
        }

    async def send_notification(self, order_id: str, user_phone: str, user_name: str, product_code: str) -> None:
        """Send the feedback request. Raises on transport errors and non-200 replies."""
        url = f"{self.base_url}{SEND_TEMPLATE_PATH}"
        form = self.build_form(order_id, user_phone, user_name, product_code)

        async with httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT, transport=self._transport) as client:
            response = await client.post(url, data=form)

        if response.status_code != httpx.codes.OK:
            logger.error(
                f"Voximplant error for order {order_id}/{product_code}: "
                f"{response.status_code} - {response.text[:200]}"
            )
            raise BadStatusCodeError("voximplant", response.status_code, response.text)

        logger.info(f"Notification sent to {user_phone} for order {order_id}/{product_code}")
