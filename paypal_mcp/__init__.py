"""
PayPal MCP server: PayPal REST API operations exposed as MCP tools over stdio
"""

__version__ = "0.1.0"
