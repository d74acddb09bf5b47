"""Process-wide registry of tool specs.

Tools are registered once at startup, then the registry is frozen and only
read from during conversations.
"""

from typing import Iterator

from ..exceptions import DuplicateToolNameError, RegistryFrozenError, ToolNotFoundError
from ..logging import get_logger
from ..types import ToolSpec
from .base import BaseTool

logger = get_logger(__name__)


class ToolRegistry:
    """Maps tool names to their specs.

    Example:
        registry = ToolRegistry()
        registry.register_tool(ListDirectoryTool())
        registry.freeze()
        spec = registry.lookup("list-directory")
    """

    def __init__(self, specs: list[ToolSpec] | None = None):
        self._specs: dict[str, ToolSpec] = {}
        self._frozen = False
        for spec in specs or []:
            self.register(spec)

    @classmethod
    def from_tools(cls, tools: list[BaseTool]) -> "ToolRegistry":
        """Build a registry from tool instances."""
        registry = cls()
        for tool in tools:
            registry.register_tool(tool)
        return registry

    def register(self, spec: ToolSpec) -> None:
        """Register a tool spec.

        Raises:
            DuplicateToolNameError: If the name is already registered.
            RegistryFrozenError: If the registry was frozen.
        """
        if self._frozen:
            raise RegistryFrozenError(spec.name)
        if spec.name in self._specs:
            raise DuplicateToolNameError(spec.name)
        self._specs[spec.name] = spec
        logger.debug(f"registered tool '{spec.name}'")

    def register_tool(self, tool: BaseTool) -> None:
        self.register(tool.to_spec())

    def freeze(self) -> "ToolRegistry":
        """Close the registration phase."""
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def lookup(self, name: str) -> ToolSpec:
        """Get a spec by name.

        Raises:
            ToolNotFoundError: If no tool has that name.
        """
        try:
            return self._specs[name]
        except KeyError:
            raise ToolNotFoundError(name) from None

    def get(self, name: str) -> ToolSpec | None:
        return self._specs.get(name)

    def specs(self) -> list[ToolSpec]:
        """All specs in registration order."""
        return list(self._specs.values())

    def names(self) -> list[str]:
        return list(self._specs)

    def __contains__(self, name: object) -> bool:
        return name in self._specs

    def __len__(self) -> int:
        return len(self._specs)

    def __iter__(self) -> Iterator[ToolSpec]:
        return iter(self.specs())
