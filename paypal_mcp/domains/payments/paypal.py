"""
PayPal payments provider
"""

import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from ...auth import PayPalTokenProvider
from ...errors import PayPalAPIError
from ..base import BaseProvider, BaseTool, json_result, text_result
from . import schemas, validators
from .client import PayPalClient

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 10
DEFAULT_PAGE = 1


class PayPalProvider(BaseProvider):
    """PayPal REST API provider"""

    def __init__(self, client: PayPalClient, token_provider: PayPalTokenProvider):
        super().__init__(name="paypal")
        self.client = client
        self.token_provider = token_provider

    def get_tools(self) -> List[Dict[str, Any]]:
        """Return PayPal tool definitions"""
        return [
            {
                'name': 'create_payment_token',
                'tool_class': PayPalPostTool,
                'description': 'Create a payment token',
                'input_schema': schemas.PAYMENT_TOKEN_SCHEMA,
                'validator': validators.validate_payment_token,
                'path': '/v3/payment-tokens'
            },
            {
                'name': 'create_payment',
                'tool_class': PayPalPostTool,
                'description': 'Create a payment',
                'input_schema': schemas.PAYMENT_SCHEMA,
                'validator': validators.validate_payment,
                'path': '/v2/payments/payment'
            },
            {
                'name': 'create_payout',
                'tool_class': PayPalPostTool,
                'description': 'Create a batch payout',
                'input_schema': schemas.PAYOUT_SCHEMA,
                'validator': validators.validate_payout,
                'path': '/v1/payments/payouts'
            },
            {
                'name': 'create_referenced_payout',
                'tool_class': PayPalPostTool,
                'description': 'Create a referenced payout',
                'input_schema': schemas.REFERENCED_PAYOUT_SCHEMA,
                'validator': validators.validate_referenced_payout,
                'path': '/v1/payments/referenced-payouts'
            },
            {
                'name': 'create_order',
                'tool_class': PayPalPostTool,
                'description': 'Create a new order in PayPal',
                'input_schema': schemas.ORDER_SCHEMA,
                'validator': validators.validate_order,
                'path': '/v2/checkout/orders'
            },
            {
                'name': 'create_partner_referral',
                'tool_class': PayPalPostTool,
                'description': 'Create a partner referral',
                'input_schema': schemas.PARTNER_REFERRAL_SCHEMA,
                'validator': validators.validate_partner_referral,
                'path': '/v2/customer/partner-referrals'
            },
            {
                'name': 'create_web_profile',
                'tool_class': PayPalPostTool,
                'description': 'Create a web experience profile',
                'input_schema': schemas.WEB_PROFILE_SCHEMA,
                'validator': validators.validate_web_profile,
                'path': '/v1/payment-experience/web-profiles'
            },
            {
                'name': 'create_product',
                'tool_class': PayPalPostTool,
                'description': 'Create a new product in PayPal',
                'input_schema': schemas.PRODUCT_SCHEMA,
                'validator': validators.validate_product,
                'path': '/v1/catalogs/products'
            },
            {
                'name': 'list_products',
                'tool_class': PayPalListProductsTool,
                'description': 'List all products',
                'input_schema': schemas.PAGINATION_SCHEMA,
                'validator': validators.validate_pagination_params,
                'path': '/v1/catalogs/products'
            },
            {
                'name': 'get_dispute',
                'tool_class': PayPalGetDisputeTool,
                'description': 'Get details of a dispute',
                'input_schema': schemas.DISPUTE_SCHEMA,
                'validator': validators.validate_dispute_params,
                'path': '/v1/customer/disputes'
            },
            {
                'name': 'get_userinfo',
                'tool_class': PayPalGetUserInfoTool,
                'description': 'Get user info from identity token',
                'input_schema': schemas.USERINFO_SCHEMA,
                'validator': validators.validate_token_params,
                'path': '/v1/identity/oauth2/userinfo'
            },
            {
                'name': 'create_invoice',
                'tool_class': PayPalPostTool,
                'description': 'Create a new invoice',
                'input_schema': schemas.INVOICE_SCHEMA,
                'validator': validators.validate_invoice,
                'path': '/v2/invoicing/invoices'
            }
        ]


class PayPalTool(BaseTool):
    """A tool backed by one PayPal REST call

    Subclasses choose the method, path, query parameters and body. Upstream
    failures are reported in the result envelope rather than raised.
    """

    method = 'GET'

    def __init__(self, name: str, provider: PayPalProvider, description: str,
                 input_schema: Dict[str, Any], validator, path: str):
        super().__init__(name, provider, description, input_schema, validator)
        self.path = path

    def build_path(self, payload: Dict[str, Any]) -> str:
        return self.path

    def build_params(self, payload: Dict[str, Any]) -> Optional[Dict[str, str]]:
        return None

    def build_body(self, payload: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        return None

    async def get_bearer_token(self, payload: Dict[str, Any]) -> str:
        return await self.provider.token_provider.get_token()

    async def _execute_validated(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        bearer_token = await self.get_bearer_token(payload)
        try:
            data = await self.provider.client.request(
                self.method,
                self.build_path(payload),
                bearer_token,
                json_body=self.build_body(payload),
                params=self.build_params(payload),
            )
        except PayPalAPIError as e:
            return text_result(f"PayPal API error: {e.message}", is_error=True)

        logger.info("Tool %s completed", self.name)
        return json_result(data)


class PayPalPostTool(PayPalTool):
    """POST the validated payload as the JSON body"""

    method = 'POST'

    def build_body(self, payload: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        return payload


def _query_value(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value)


class PayPalListProductsTool(PayPalTool):
    """GET the product catalog with page_size and page query parameters"""

    def build_params(self, payload: Dict[str, Any]) -> Optional[Dict[str, str]]:
        return {
            'page_size': _query_value(payload.get('page_size', DEFAULT_PAGE_SIZE)),
            'page': _query_value(payload.get('page', DEFAULT_PAGE)),
        }


class PayPalGetDisputeTool(PayPalTool):
    """GET one dispute by its identifier"""

    def build_path(self, payload: Dict[str, Any]) -> str:
        return f"{self.path}/{quote(payload['dispute_id'], safe='')}"


class PayPalGetUserInfoTool(PayPalTool):
    """GET user info with the caller-supplied token instead of the cached one"""

    async def get_bearer_token(self, payload: Dict[str, Any]) -> str:
        return payload['access_token']
