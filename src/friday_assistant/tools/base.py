from abc import ABC, abstractmethod
from typing import Any

from ..types import ToolSpec


class BaseTool(ABC):
    """Abstract base class for all tools.

    A tool describes itself to the model (name, description, JSON schema)
    and does its work in ``execute``. Failures are reported by raising; the
    tool executor turns them into text for the model. Tools that shell out or
    hit the network should set ``TIMEOUT`` to their time budget.
    """

    # per-tool time budget in seconds, None uses the executor default
    TIMEOUT: float | None = None

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the tool name."""
        pass

    @property
    @abstractmethod
    def description(self) -> str:
        """Return the tool description."""
        pass

    @property
    @abstractmethod
    def parameters(self) -> dict[str, Any]:
        """Return the JSON schema for tool parameters."""
        pass

    @abstractmethod
    def execute(self, **kwargs) -> Any:
        """Execute the tool with the given arguments."""
        pass

    def to_spec(self) -> ToolSpec:
        """Freeze this tool into the immutable spec held by the registry."""
        return ToolSpec(
            name=self.name,
            description=self.description,
            parameters=self.parameters,
            invoke=self.execute,
            timeout=self.TIMEOUT,
        )
