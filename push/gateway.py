#Purpose: The push gateway "adapter/client".
#Sole responsibility: talk to the push gateway via HTTP and report whether a batch was accepted.
#Encapsulates gateway-specific details:
#URL + headers
#JSON body (one array of messages per request)
#timeouts
#mapping non-2xx responses to PushGatewayError
#It should not contain dispatch rules or batching.


from dotenv import load_dotenv
import logging
import os
from typing import Any, Dict, List, Optional, Sequence

import requests

from .messages import PushMessage

# Read gateway settings from environment
# Example in .env:
# PUSH_GATEWAY_URL=https://exp.host/--/api/v2/push/send
# PUSH_GATEWAY_TIMEOUT=10
load_dotenv()
DEFAULT_GATEWAY_URL = "https://exp.host/--/api/v2/push/send"
GATEWAY_URL = os.getenv("PUSH_GATEWAY_URL", DEFAULT_GATEWAY_URL)
GATEWAY_TIMEOUT = float(os.getenv("PUSH_GATEWAY_TIMEOUT", "10"))
GATEWAY_ACCESS_TOKEN = os.getenv("PUSH_GATEWAY_ACCESS_TOKEN")

logger = logging.getLogger(__name__)


class PushGatewayError(Exception):
    """Raised when the push gateway answers a batch with a non-2xx status."""

    def __init__(self, status_code: int, body: str = ""):
        super().__init__(f"Push gateway returned HTTP {status_code}: {body[:200]}")
        self.status_code = status_code
        self.body = body


class PushGatewayClient:
    """
    Push gateway Adapter / Client

    Sole responsibility:
    - POST a batch of messages to the gateway
    - Always bound the call with a timeout
    - Raise on rejection, return the parsed body on success

    """
    def __init__(self,
                 url: Optional[str] = None,
                 timeout: Optional[float] = None,
                 access_token: Optional[str] = None,
                 session: Optional[requests.Session] = None):
        self.url = url or GATEWAY_URL
        self.timeout = timeout if timeout is not None else GATEWAY_TIMEOUT #seconds to wait before giving up on a batch
        self.access_token = access_token or GATEWAY_ACCESS_TOKEN
        self.session = session

        if not self.url:
            raise ValueError("Push gateway URL not set. Please set PUSH_GATEWAY_URL in the .env file.")
        if self.timeout <= 0:
            raise ValueError("Push gateway timeout must be > 0")

    def headers(self) -> Dict[str, str]:
        headers = {
            "Accept": "application/json",
            "Accept-Encoding": "gzip, deflate",
            "Content-Type": "application/json",
        }
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        return headers

    def send(self, messages: Sequence[PushMessage]) -> Any:
        """
        Sends one batch. The gateway is fire-and-forget from our side: a 2xx only
        means the batch was accepted, not that any device received it.

        Raises:
            PushGatewayError: non-2xx response
            requests.RequestException: transport errors and timeouts
        """
        payload: List[Dict[str, Any]] = [message.to_payload() for message in messages]
        if not payload:
            return None

        post = self.session.post if self.session is not None else requests.post
        response = post(
            self.url,
            json=payload,
            headers=self.headers(),
            timeout=self.timeout,
        )

        if not 200 <= response.status_code < 300:
            raise PushGatewayError(response.status_code, response.text)

        try:
            return response.json()
        except ValueError:
            # Accepted but not JSON; the status code is all we need.
            return None
