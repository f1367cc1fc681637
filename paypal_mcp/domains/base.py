"""
Base classes for domain providers and tools
"""

import json
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional


def text_result(text: str, is_error: bool = False) -> Dict[str, Any]:
    """Build a tools/call result envelope holding one text block"""
    return {
        "content": [
            {
                "type": "text",
                "text": text
            }
        ],
        "isError": is_error
    }


def json_result(data: Any) -> Dict[str, Any]:
    """Success envelope with ``data`` pretty-printed as JSON"""
    return text_result(json.dumps(data, indent=2))


class BaseProvider(ABC):
    """Base class for all domain providers"""

    def __init__(self, name: str):
        self.name = name

    @abstractmethod
    def get_tools(self) -> List[Dict[str, Any]]:
        """Return list of tool definitions provided by this provider"""
        pass


class BaseTool(ABC):
    """Base class for domain tools

    A tool pairs a validator with an action. ``execute`` runs the validator
    first, so invalid arguments never reach the action.
    """

    def __init__(self, name: str, provider: BaseProvider, description: str,
                 input_schema: Dict[str, Any], validator: Callable[[Any], Dict[str, Any]]):
        self.name = name
        self.provider = provider
        self.description = description
        self.input_schema = input_schema
        self.validator = validator

    def describe(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'description': self.description,
            'inputSchema': self.input_schema
        }

    async def execute(self, arguments: Any) -> Dict[str, Any]:
        """Validate ``arguments`` and run the tool, returning a result envelope"""
        payload = self.validator(arguments)
        return await self._execute_validated(payload)

    @abstractmethod
    async def _execute_validated(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Run the tool against an already validated payload"""
        pass


class DomainManager:
    """Manages providers and tools for a specific domain"""

    def __init__(self, domain_name: str):
        self.domain_name = domain_name
        self.providers: Dict[str, BaseProvider] = {}
        self.tools: Dict[str, BaseTool] = {}

    def register_provider(self, provider: BaseProvider):
        """Register a provider with this domain"""
        self.providers[provider.name] = provider

        for tool_config in provider.get_tools():
            options = dict(tool_config)
            tool_class = options.pop('tool_class')
            tool = tool_class(provider=provider, **options)
            if tool.name in self.tools:
                raise ValueError(f"Duplicate tool name in domain {self.domain_name}: {tool.name}")
            self.tools[tool.name] = tool

    def get_tool(self, name: str) -> Optional[BaseTool]:
        return self.tools.get(name)
