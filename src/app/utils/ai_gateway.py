# File: src/app/utils/ai_gateway.py
import logging
from typing import Dict, List, Optional

import requests

from ..config.settings import Settings

logger = logging.getLogger(__name__)


# --- Gateway errors ---

class AIGatewayError(Exception):
    """Base class for failures talking to the chat-completion gateway."""

    status_code = 500
    message = "AI service unavailable"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)
        if message:
            self.message = message


class AINotConfiguredError(AIGatewayError):
    message = "AI service not configured"


class AIRateLimitError(AIGatewayError):
    status_code = 429
    message = "AI rate limit exceeded. Please try again later."


class AIPaymentRequiredError(AIGatewayError):
    status_code = 402
    message = "AI credits exhausted. Please add funds to continue."


class AIServiceUnavailableError(AIGatewayError):
    message = "AI service unavailable"


class AIEmptyResponseError(AIGatewayError):
    message = "No response from AI"


# --- Client ---

class AIGatewayClient:
    """
    Sends one chat-completion request per call and returns the message text.

    No retries and no state between calls: a 429 or 402 is handed straight back
    to the caller so the user can decide to wait or top up credits.
    """

    def __init__(self, settings: Settings, session: Optional[requests.Session] = None):
        self.url = settings.ai_gateway_url
        self.api_key = settings.ai_gateway_api_key
        self.model = settings.ai_model
        self.timeout = settings.ai_request_timeout
        self.session = session or requests.Session()

    def chat(self, messages: List[Dict[str, str]], temperature: float, seed: Optional[int] = None) -> str:
        if not self.api_key:
            logger.error("AI gateway API key is missing; refusing to call the gateway.")
            raise AINotConfiguredError()

        body = {
            "model": self.model,
            "messages": messages,
            "temperature": temperature,
        }
        if seed is not None:
            body["seed"] = seed
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        try:
            resp = self.session.post(self.url, json=body, headers=headers, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f"AI gateway request failed: {e}", exc_info=True)
            raise AIServiceUnavailableError()

        if resp.status_code == 429:
            logger.warning("AI gateway rate limit hit (429).")
            raise AIRateLimitError()
        if resp.status_code == 402:
            logger.warning("AI gateway reports credits exhausted (402).")
            raise AIPaymentRequiredError()
        if not resp.ok:
            logger.error(f"AI gateway error {resp.status_code}: {resp.text}")
            raise AIServiceUnavailableError()

        try:
            data = resp.json()
        except ValueError:
            logger.error(f"AI gateway returned a non-JSON body: {resp.text}")
            raise AIServiceUnavailableError()

        content = _first_message_content(data)
        if not content:
            logger.error(f"AI gateway returned no message content: {data}")
            raise AIEmptyResponseError()
        return content


def _first_message_content(data) -> Optional[str]:
    try:
        return data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        return None
