"""
MCP Protocol Implementation
Handles the Model Context Protocol messages and responses
"""

import logging
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ValidationError

from . import __version__
from .domain_registry import MCPDomainRegistry
from .errors import (
    AuthenticationError,
    ErrorCode,
    InvalidParamsError,
    MCPProtocolError,
    MethodNotFoundError,
)

logger = logging.getLogger(__name__)

PROTOCOL_VERSION = "2024-11-05"


class MCPMessage(BaseModel):
    """Base MCP message structure"""
    jsonrpc: str = "2.0"
    id: Optional[Union[str, int]] = None
    method: Optional[str] = None
    params: Optional[Dict[str, Any]] = None


class MCPErrorBody(BaseModel):
    """MCP error structure"""
    code: int
    message: str
    data: Optional[Dict[str, Any]] = None


class MCPTool(BaseModel):
    """MCP tool definition"""
    name: str
    description: str
    inputSchema: Dict[str, Any]


class MCPServerInfo(BaseModel):
    """Server information for MCP initialization"""
    name: str = "paypal-server"
    version: str = __version__


class MCPProtocolHandler:
    """Handles MCP protocol messages and routing"""

    def __init__(self, registry: MCPDomainRegistry):
        self.registry = registry
        self.client_info: Dict[str, Any] = {}

    async def handle_message(self, message_data: Any) -> Optional[Dict[str, Any]]:
        """Handle one incoming JSON-RPC message

        Returns the response to send back, or None for notifications.
        """
        request_id = message_data.get('id') if isinstance(message_data, dict) else None
        try:
            message = MCPMessage.model_validate(message_data)
        except ValidationError:
            return self._create_error_response(request_id, ErrorCode.INVALID_REQUEST, "Invalid Request")

        if message.method is None:
            return self._create_error_response(message.id, ErrorCode.INVALID_REQUEST, "Invalid Request")

        is_notification = 'id' not in message_data
        try:
            if message.method == "initialize":
                result = self._handle_initialize(message)
            elif message.method == "ping":
                result = {}
            elif message.method == "tools/list":
                result = self._handle_list_tools()
            elif message.method == "tools/call":
                result = await self._handle_call_tool(message)
            elif message.method.startswith("notifications/"):
                return None
            else:
                raise MethodNotFoundError(f"Method not found: {message.method}")
        except MCPProtocolError as e:
            logger.info("Request %s failed: %s", message.method, e.message)
            if is_notification:
                return None
            return self._create_error_response(message.id, e.code, e.message)
        except Exception as e:
            logger.exception("Unexpected error handling %s", message.method)
            if is_notification:
                return None
            return self._create_error_response(
                message.id, ErrorCode.INTERNAL_ERROR, str(e) or "An unexpected error occurred"
            )

        if is_notification:
            return None
        return {
            "jsonrpc": "2.0",
            "id": message.id,
            "result": result
        }

    def _handle_initialize(self, message: MCPMessage) -> Dict[str, Any]:
        """Handle MCP initialize request"""
        self.client_info = message.params.get('clientInfo', {}) if message.params else {}
        logger.info("Client initialized: %s", self.client_info.get('name', 'unknown'))

        return {
            "protocolVersion": PROTOCOL_VERSION,
            "serverInfo": MCPServerInfo().model_dump(),
            "capabilities": {
                "tools": {}
            }
        }

    def _handle_list_tools(self) -> Dict[str, Any]:
        """Handle tools/list request"""
        tools = [MCPTool(**tool_data).model_dump() for tool_data in self.registry.get_available_tools()]
        return {"tools": tools}

    async def _handle_call_tool(self, message: MCPMessage) -> Dict[str, Any]:
        """Handle tools/call request

        Validation failures and unknown tools raise protocol errors; upstream
        PayPal failures come back inside the result with isError set.
        """
        params = message.params or {}
        tool_name = params.get('name')
        arguments = params.get('arguments')

        tool = self.registry.get_tool_by_name(tool_name) if isinstance(tool_name, str) else None
        if tool is None:
            raise MethodNotFoundError(f"Unknown tool: {tool_name}")

        if arguments is None:
            raise InvalidParamsError("Arguments are required")

        logger.info("Calling tool %s", tool_name)
        try:
            result = await tool.execute(arguments)
        except AuthenticationError as e:
            raise MCPProtocolError(ErrorCode.INTERNAL_ERROR, str(e)) from e

        if result.get("isError"):
            logger.warning("Tool %s reported an upstream error", tool_name)
        return result

    def _create_error_response(self, message_id: Optional[Union[str, int]], code: int,
                               message: str) -> Dict[str, Any]:
        """Create an error response"""
        return {
            "jsonrpc": "2.0",
            "id": message_id,
            "error": MCPErrorBody(code=int(code), message=message).model_dump(exclude_none=True)
        }
