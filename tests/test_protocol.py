"""
Tests for MCP message handling and tool dispatch
"""

import json

import httpx
import pytest

from conftest import ACCESS_TOKEN, request_json, run
from paypal_mcp.domain_registry import MCPDomainRegistry
from paypal_mcp.errors import ErrorCode

TOOL_NAMES = {
    "create_payment_token",
    "create_payment",
    "create_payout",
    "create_referenced_payout",
    "create_order",
    "create_partner_referral",
    "create_web_profile",
    "create_product",
    "list_products",
    "get_dispute",
    "get_userinfo",
    "create_invoice",
}

VALID_ARGUMENTS = {
    "create_payment_token": {"customer": {"id": "c-1"}, "payment_source": {}},
    "create_payment": {
        "intent": "sale",
        "payer": {"payment_method": "paypal"},
        "transactions": [{"amount": {"total": "1.00", "currency": "USD"}}],
    },
    "create_payout": {
        "sender_batch_header": {"sender_batch_id": "b-1"},
        "items": [{"recipient_type": "EMAIL", "amount": {"value": "1.00", "currency": "USD"},
                   "receiver": "r@example.com"}],
    },
    "create_referenced_payout": {
        "referenced_payouts": [{"reference_id": "r", "reference_type": "TRANSACTION_ID",
                                "payout_amount": {"currency_code": "USD", "value": "1.00"},
                                "payout_destination": "d"}],
    },
    "create_order": {
        "intent": "CAPTURE",
        "purchase_units": [{"amount": {"currency_code": "USD", "value": "10.00"}}],
    },
    "create_partner_referral": {
        "individual_owners": [],
        "business_entity": {"business_type": {"type": "INDIVIDUAL"}, "business_name": "Shop"},
        "email": "o@example.com",
    },
    "create_web_profile": {"name": "profile"},
    "create_product": {"name": "n", "description": "d", "type": "DIGITAL", "category": "SOFTWARE"},
    "create_invoice": {
        "detail": {"invoice_number": "1", "reference": "r", "currency_code": "USD"},
        "primary_recipients": [{"billing_info": {"email_address": "b@example.com"}}],
        "items": [{"name": "i", "quantity": "1", "unit_amount": {"currency_code": "USD", "value": "1.00"}}],
    },
}

POST_PATHS = {
    "create_payment_token": "/v3/payment-tokens",
    "create_payment": "/v2/payments/payment",
    "create_payout": "/v1/payments/payouts",
    "create_referenced_payout": "/v1/payments/referenced-payouts",
    "create_order": "/v2/checkout/orders",
    "create_partner_referral": "/v2/customer/partner-referrals",
    "create_web_profile": "/v1/payment-experience/web-profiles",
    "create_product": "/v1/catalogs/products",
    "create_invoice": "/v2/invoicing/invoices",
}


def result_text(response):
    return response["result"]["content"][0]["text"]


def test_initialize(protocol_handler):
    response = run(protocol_handler.handle_message({
        "jsonrpc": "2.0", "id": 0, "method": "initialize",
        "params": {"protocolVersion": "2024-11-05", "clientInfo": {"name": "test-client", "version": "1"}},
    }))

    result = response["result"]
    assert response["id"] == 0
    assert result["serverInfo"] == {"name": "paypal-server", "version": "0.1.0"}
    assert result["capabilities"] == {"tools": {}}
    assert protocol_handler.client_info["name"] == "test-client"


def test_ping(protocol_handler):
    response = run(protocol_handler.handle_message({"jsonrpc": "2.0", "id": "p", "method": "ping"}))
    assert response == {"jsonrpc": "2.0", "id": "p", "result": {}}


def test_notifications_get_no_response(protocol_handler):
    message = {"jsonrpc": "2.0", "method": "notifications/initialized"}
    assert run(protocol_handler.handle_message(message)) is None


def test_unknown_method(protocol_handler):
    response = run(protocol_handler.handle_message({"jsonrpc": "2.0", "id": 3, "method": "resources/list"}))
    assert response["error"]["code"] == ErrorCode.METHOD_NOT_FOUND


@pytest.mark.parametrize("message", [[1, 2], "tools/list", {"jsonrpc": "2.0", "id": 4}])
def test_invalid_request(protocol_handler, message):
    response = run(protocol_handler.handle_message(message))
    assert response["error"]["code"] == ErrorCode.INVALID_REQUEST


def test_list_tools_advertises_every_tool(protocol_handler):
    response = run(protocol_handler.handle_message({"jsonrpc": "2.0", "id": 1, "method": "tools/list"}))

    tools = response["result"]["tools"]
    assert {tool["name"] for tool in tools} == TOOL_NAMES
    assert len(tools) == len(TOOL_NAMES)
    for tool in tools:
        assert tool["description"]
        assert tool["inputSchema"]["type"] == "object"


def test_list_tools_schema_enums(protocol_handler):
    response = run(protocol_handler.handle_message({"jsonrpc": "2.0", "id": 1, "method": "tools/list"}))
    tools = {tool["name"]: tool for tool in response["result"]["tools"]}

    assert tools["create_order"]["inputSchema"]["properties"]["intent"]["enum"] == ["CAPTURE", "AUTHORIZE"]
    assert tools["create_product"]["inputSchema"]["properties"]["type"]["enum"] == ["PHYSICAL", "DIGITAL", "SERVICE"]
    assert tools["create_invoice"]["inputSchema"]["required"] == ["detail", "primary_recipients", "items"]


def test_every_advertised_tool_is_dispatchable(registry):
    for descriptor in registry.get_available_tools():
        assert registry.get_tool_by_name(descriptor["name"]) is not None


@pytest.mark.parametrize("arguments", [{}, {"intent": "CAPTURE"}, None])
def test_unknown_tool_is_method_not_found(call_tool, fake_paypal, arguments):
    response = call_tool("refund_everything", arguments)

    assert response["error"]["code"] == ErrorCode.METHOD_NOT_FOUND
    assert "refund_everything" in response["error"]["message"]
    assert fake_paypal.requests == []


def test_missing_arguments_is_invalid_params(call_tool, fake_paypal):
    response = call_tool("list_products")

    assert response["error"] == {"code": ErrorCode.INVALID_PARAMS, "message": "Arguments are required"}
    assert fake_paypal.requests == []


def test_validation_failure_makes_no_network_call(call_tool, fake_paypal):
    response = call_tool("get_dispute", {})

    assert response["error"]["code"] == ErrorCode.INVALID_PARAMS
    assert response["error"]["message"] == "Invalid dispute ID"
    assert fake_paypal.requests == []


def test_order_rejected_for_refund_intent(call_tool, fake_paypal):
    response = call_tool("create_order", {
        "intent": "REFUND",
        "purchase_units": [{"amount": {"currency_code": "USD", "value": "10.00"}}],
    })

    assert response["error"]["code"] == ErrorCode.INVALID_PARAMS
    assert fake_paypal.requests == []


@pytest.mark.parametrize("tool_name", sorted(POST_PATHS))
def test_post_tools_forward_validated_payload(call_tool, fake_paypal, tool_name):
    path = POST_PATHS[tool_name]
    fake_paypal.add("POST", path, status=201, json_body={"id": "created-1", "status": "CREATED"})
    arguments = dict(VALID_ARGUMENTS[tool_name], injected_field="should not be forwarded")

    response = call_tool(tool_name, arguments)

    assert response["result"]["isError"] is False
    assert json.loads(result_text(response)) == {"id": "created-1", "status": "CREATED"}
    request = fake_paypal.requests_to(path)[0]
    assert request.method == "POST"
    assert request.headers["Authorization"] == f"Bearer {ACCESS_TOKEN}"
    assert request.headers["Content-Type"] == "application/json"
    assert "injected_field" not in request_json(request)


def test_create_order_body_and_pretty_output(call_tool, fake_paypal):
    upstream = {"id": "5O190127TN364715T", "status": "CREATED"}
    fake_paypal.add("POST", "/v2/checkout/orders", status=201, json_body=upstream)

    response = call_tool("create_order", {
        "intent": "CAPTURE",
        "purchase_units": [{"amount": {"currency_code": "USD", "value": "10.00"}, "items": ["x"]}],
    })

    assert result_text(response) == json.dumps(upstream, indent=2)
    body = request_json(fake_paypal.requests_to("/v2/checkout/orders")[0])
    assert body == {
        "intent": "CAPTURE",
        "purchase_units": [{"amount": {"currency_code": "USD", "value": "10.00"}}],
    }


def test_list_products_uses_default_pagination(call_tool, fake_paypal):
    fake_paypal.add("GET", "/v1/catalogs/products", json_body={"products": []})

    response = call_tool("list_products", {"page_size": 500})

    assert response["result"]["isError"] is False
    request = fake_paypal.requests_to("/v1/catalogs/products")[0]
    assert request.method == "GET"
    assert request.url.params["page_size"] == "10"
    assert request.url.params["page"] == "1"
    assert request.content == b""


def test_list_products_passes_valid_pagination(call_tool, fake_paypal):
    fake_paypal.add("GET", "/v1/catalogs/products", json_body={"products": []})

    call_tool("list_products", {"page_size": 25, "page": 3})

    request = fake_paypal.requests_to("/v1/catalogs/products")[0]
    assert request.url.params["page_size"] == "25"
    assert request.url.params["page"] == "3"


def test_get_dispute_puts_id_in_path(call_tool, fake_paypal):
    fake_paypal.add("GET", "/v1/customer/disputes/PP-D-27803", json_body={"dispute_id": "PP-D-27803"})

    response = call_tool("get_dispute", {"dispute_id": "PP-D-27803"})

    assert json.loads(result_text(response)) == {"dispute_id": "PP-D-27803"}


def test_get_dispute_escapes_path_characters(call_tool, fake_paypal):
    call_tool("get_dispute", {"dispute_id": "../../v1/payments/payouts"})

    request = fake_paypal.api_requests[0]
    assert request.url.raw_path == b"/v1/customer/disputes/..%2F..%2Fv1%2Fpayments%2Fpayouts"


def test_get_userinfo_uses_caller_token(call_tool, fake_paypal):
    fake_paypal.add("GET", "/v1/identity/oauth2/userinfo", json_body={"user_id": "u-1"})

    response = call_tool("get_userinfo", {"access_token": "caller-token"})

    assert json.loads(result_text(response)) == {"user_id": "u-1"}
    request = fake_paypal.requests_to("/v1/identity/oauth2/userinfo")[0]
    assert request.headers["Authorization"] == "Bearer caller-token"
    assert fake_paypal.token_requests == []


def test_credential_is_fetched_once_across_calls(call_tool, fake_paypal):
    fake_paypal.add("GET", "/v1/catalogs/products", json_body={"products": []})

    call_tool("list_products", {}, request_id=1)
    call_tool("list_products", {}, request_id=2)

    assert len(fake_paypal.token_requests) == 1
    assert len(fake_paypal.requests_to("/v1/catalogs/products")) == 2


def test_upstream_error_is_reported_not_raised(call_tool, fake_paypal):
    fake_paypal.add("POST", "/v1/catalogs/products", status=400,
                    json_body={"name": "INVALID_REQUEST", "message": "Request is not well-formed"})

    response = call_tool("create_product", VALID_ARGUMENTS["create_product"])

    assert "error" not in response
    assert response["result"]["isError"] is True
    assert result_text(response) == "PayPal API error: Request is not well-formed"


def test_upstream_error_without_message_uses_transport_text(call_tool, fake_paypal):
    fake_paypal.add("GET", "/v1/customer/disputes/PP-D-1", error=httpx.ConnectError("connection reset"))

    response = call_tool("get_dispute", {"dispute_id": "PP-D-1"})

    assert response["result"]["isError"] is True
    assert result_text(response) == "PayPal API error: connection reset"


def test_upstream_error_body_without_message_field(call_tool, fake_paypal):
    fake_paypal.add("GET", "/v1/customer/disputes/PP-D-2", status=503, json_body={"name": "SERVICE_UNAVAILABLE"})

    response = call_tool("get_dispute", {"dispute_id": "PP-D-2"})

    assert response["result"]["isError"] is True
    assert result_text(response).startswith("PayPal API error: ")
    assert "503" in result_text(response)


def test_authentication_failure_is_internal_error(call_tool, fake_paypal):
    fake_paypal.add("POST", "/v1/oauth2/token", status=401, json_body={"error": "invalid_client"})

    response = call_tool("create_web_profile", {"name": "profile"})

    assert response["error"]["code"] == ErrorCode.INTERNAL_ERROR
    assert fake_paypal.api_requests == []


def test_unexpected_exception_is_internal_error(protocol_handler, registry, monkeypatch):
    tool = registry.get_tool_by_name("create_web_profile")

    async def explode(payload):
        raise RuntimeError("boom")

    monkeypatch.setattr(tool, "_execute_validated", explode)
    response = run(protocol_handler.handle_message({
        "jsonrpc": "2.0", "id": 9, "method": "tools/call",
        "params": {"name": "create_web_profile", "arguments": {"name": "p"}},
    }))

    assert response["id"] == 9
    assert response["error"] == {"code": ErrorCode.INTERNAL_ERROR, "message": "boom"}


def test_empty_success_body(call_tool, fake_paypal):
    fake_paypal.add("POST", "/v1/payments/payouts", status=204)

    response = call_tool("create_payout", VALID_ARGUMENTS["create_payout"])

    assert response["result"]["isError"] is False
    assert result_text(response) == "{}"


def test_payments_domain_registers_paypal_tools(registry):
    domain = registry.domains["payments"]
    provider = domain.providers["paypal"]

    assert list(domain.providers) == ["paypal"]
    assert set(domain.tools) == TOOL_NAMES
    assert all(tool.provider is provider for tool in domain.tools.values())


def test_duplicate_tool_names_across_domains_are_rejected(registry):
    provider = registry.domains["payments"].providers["paypal"]

    with pytest.raises(ValueError, match="create_order"):
        MCPDomainRegistry({"payments": [provider], "checkout": [provider]})


def test_list_products_ignores_non_finite_page(call_tool, fake_paypal):
    fake_paypal.add("GET", "/v1/catalogs/products", json_body={"products": []})

    call_tool("list_products", {"page": float("inf"), "page_size": float("nan")})

    request = fake_paypal.requests_to("/v1/catalogs/products")[0]
    assert request.url.params["page"] == "1"
    assert request.url.params["page_size"] == "10"
