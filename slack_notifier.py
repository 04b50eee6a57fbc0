#!/usr/bin/env python3
"""
Slack incoming-webhook delivery
"""

from typing import Optional
from urllib.parse import urlsplit

import requests

from config import DEFAULT_REQUEST_TIMEOUT


class DispatchError(RuntimeError):
    """Raised when the Slack webhook call fails"""

    def __init__(self, status_code: Optional[int], body: str):
        self.status_code = status_code
        self.body = body
        if status_code is None:
            super().__init__(f"Slack webhook failed: {body}")
        else:
            super().__init__(f"Slack webhook failed with HTTP {status_code}: {body}")


class SlackNotifier:
    """Posts plain-text messages to a Slack incoming webhook"""

    def __init__(self, webhook_url: str, timeout: float = DEFAULT_REQUEST_TIMEOUT):
        self.webhook_url = webhook_url
        self.timeout = timeout

    def _mask(self, message: str) -> str:
        """Hide the webhook path, which is the credential, in error text"""
        path = urlsplit(self.webhook_url).path
        message = message.replace(self.webhook_url, '***')
        if path and path != '/':
            message = message.replace(path, '/***')
        return message

    def send(self, text: str) -> None:
        """POST {"text": text} to the webhook; raise DispatchError unless 2xx"""
        try:
            response = requests.post(self.webhook_url, json={'text': text}, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise DispatchError(None, self._mask(str(e))) from e

        if not 200 <= response.status_code < 300:
            raise DispatchError(response.status_code, response.text)
