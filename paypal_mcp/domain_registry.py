"""
Domain registry for organizing and managing MCP tools by business domain
"""

from typing import Dict, List, Optional

from .domains.base import BaseProvider, BaseTool, DomainManager


class MCPDomainRegistry:
    """Registry for managing domain-based tools"""

    def __init__(self, providers: Dict[str, List[BaseProvider]]):
        self.domains: Dict[str, DomainManager] = {}
        self._initialize_domains(providers)

    def _initialize_domains(self, providers: Dict[str, List[BaseProvider]]):
        """Initialize all domains with their providers"""
        for domain_name, domain_providers in providers.items():
            domain = DomainManager(domain_name)
            for provider in domain_providers:
                domain.register_provider(provider)
            self.domains[domain_name] = domain

        seen = set()
        for domain in self.domains.values():
            duplicates = seen.intersection(domain.tools)
            if duplicates:
                raise ValueError(f"Tool names registered in more than one domain: {sorted(duplicates)}")
            seen.update(domain.tools)

    def get_available_tools(self) -> List[Dict]:
        """Get the descriptors of all tools across domains"""
        all_tools = []
        for domain_manager in self.domains.values():
            for tool in domain_manager.tools.values():
                all_tools.append(tool.describe())
        return all_tools

    def get_tool_by_name(self, tool_name: str) -> Optional[BaseTool]:
        """Get a specific tool by its name"""
        for domain_manager in self.domains.values():
            tool = domain_manager.get_tool(tool_name)
            if tool is not None:
                return tool
        return None
