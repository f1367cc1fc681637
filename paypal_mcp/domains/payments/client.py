"""
Thin async client for the PayPal REST API
"""

import logging
from typing import Any, Dict, Optional

import httpx

from ...errors import PayPalAPIError

logger = logging.getLogger(__name__)


def _upstream_message(error: httpx.HTTPError) -> str:
    """Prefer PayPal's own ``message`` field over the transport error text"""
    if isinstance(error, httpx.HTTPStatusError):
        try:
            body = error.response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and body.get('message'):
            return str(body['message'])
    return str(error)


class PayPalClient:
    """Issue a single request against the PayPal API

    One attempt per call: no retries and no timeout override beyond httpx's
    defaults. Any transport or HTTP status failure is raised as PayPalAPIError.
    """

    def __init__(self, api_base: str, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.api_base = api_base
        self.transport = transport

    async def request(self, method: str, path: str, bearer_token: str,
                      json_body: Optional[Dict[str, Any]] = None,
                      params: Optional[Dict[str, str]] = None) -> Any:
        headers = {
            'Authorization': f'Bearer {bearer_token}',
            'Content-Type': 'application/json',
        }

        try:
            async with httpx.AsyncClient(transport=self.transport) as client:
                response = await client.request(
                    method,
                    f"{self.api_base}{path}",
                    headers=headers,
                    json=json_body,
                    params=params,
                )
                response.raise_for_status()
        except httpx.HTTPError as e:
            status_code = e.response.status_code if isinstance(e, httpx.HTTPStatusError) else None
            message = _upstream_message(e)
            logger.warning("PayPal %s %s failed: %s", method, path, message)
            raise PayPalAPIError(message, status_code=status_code) from e

        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError:
            return response.text
