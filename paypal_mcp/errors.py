"""
Error codes and exceptions for the PayPal MCP server
"""

from enum import IntEnum
from typing import Optional


class ErrorCode(IntEnum):
    """JSON-RPC error codes used by MCP"""
    PARSE_ERROR = -32700
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    INTERNAL_ERROR = -32603


class MCPProtocolError(Exception):
    """Fault reported to the caller as a JSON-RPC error response"""

    def __init__(self, code: ErrorCode, message: str):
        super().__init__(message)
        self.code = code
        self.message = message


class InvalidParamsError(MCPProtocolError):
    """Tool arguments failed validation"""

    def __init__(self, message: str):
        super().__init__(ErrorCode.INVALID_PARAMS, message)


class MethodNotFoundError(MCPProtocolError):
    """Unknown JSON-RPC method or tool name"""

    def __init__(self, message: str):
        super().__init__(ErrorCode.METHOD_NOT_FOUND, message)


class AuthenticationError(Exception):
    """PayPal OAuth token could not be obtained"""


class PayPalAPIError(Exception):
    """An upstream PayPal call failed"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
