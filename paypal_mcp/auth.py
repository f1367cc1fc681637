"""
PayPal OAuth client-credentials token provider
"""

import base64
import logging
from typing import Optional

import httpx

from .errors import AuthenticationError

logger = logging.getLogger(__name__)

TOKEN_PATH = '/v1/oauth2/token'


class PayPalTokenProvider:
    """Fetch the PayPal access token once and reuse it for the process lifetime

    The token is never refreshed or expired here; a revoked token surfaces as
    an upstream error on a later call. There is no lock, so two concurrent
    first calls may both fetch a token.
    """

    def __init__(self, client_id: str, client_secret: str, api_base: str,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.client_id = client_id
        self.client_secret = client_secret
        self.api_base = api_base
        self.transport = transport
        self._access_token: Optional[str] = None

    @property
    def has_token(self) -> bool:
        return self._access_token is not None

    def _basic_auth_header(self) -> str:
        raw = f"{self.client_id}:{self.client_secret}".encode()
        return f"Basic {base64.b64encode(raw).decode()}"

    async def get_token(self) -> str:
        """Return the cached token, fetching it on first use"""
        if self._access_token:
            return self._access_token

        headers = {
            'Content-Type': 'application/x-www-form-urlencoded',
            'Authorization': self._basic_auth_header(),
        }

        logger.info("Requesting PayPal access token")
        try:
            async with httpx.AsyncClient(transport=self.transport) as client:
                response = await client.post(
                    f"{self.api_base}{TOKEN_PATH}",
                    content='grant_type=client_credentials',
                    headers=headers,
                )
                response.raise_for_status()
                token_result = response.json()
        except httpx.HTTPStatusError as e:
            raise AuthenticationError(
                f'PayPal token request failed (HTTP {e.response.status_code})'
            ) from e
        except httpx.HTTPError as e:
            raise AuthenticationError(f'Network error requesting PayPal token: {e}') from e
        except ValueError as e:
            raise AuthenticationError('PayPal token response was not valid JSON') from e

        access_token = token_result.get('access_token') if isinstance(token_result, dict) else None
        if not isinstance(access_token, str) or not access_token:
            raise AuthenticationError('Failed to obtain access token')

        self._access_token = access_token
        return access_token
