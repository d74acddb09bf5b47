"""Tests for the tool registry."""

import pytest

from friday_assistant.exceptions import DuplicateToolNameError, RegistryFrozenError, ToolNotFoundError
from friday_assistant.tools.filesystem import ListDirectoryTool, ReadFileTool
from friday_assistant.tools.registry import ToolRegistry
from friday_assistant.types import ToolSpec


def _spec(name: str) -> ToolSpec:
    return ToolSpec(name=name, description=name, parameters={"type": "object"}, invoke=lambda: name)


class TestToolRegistry:

    def test_lookup_returns_registered_spec(self):
        registry = ToolRegistry([_spec("a"), _spec("b")])
        assert registry.lookup("b").name == "b"
        assert "a" in registry
        assert len(registry) == 2

    def test_lookup_unknown_raises(self):
        registry = ToolRegistry()
        with pytest.raises(ToolNotFoundError, match="Tool 'missing' not found"):
            registry.lookup("missing")
        assert registry.get("missing") is None

    def test_duplicate_name_rejected(self):
        registry = ToolRegistry([_spec("a")])
        with pytest.raises(DuplicateToolNameError):
            registry.register(_spec("a"))

    def test_specs_keep_registration_order(self):
        registry = ToolRegistry([_spec("z"), _spec("a"), _spec("m")])
        assert registry.names() == ["z", "a", "m"]
        assert [s.name for s in registry.specs()] == ["z", "a", "m"]

    def test_freeze_blocks_registration(self):
        registry = ToolRegistry([_spec("a")]).freeze()
        assert registry.frozen
        with pytest.raises(RegistryFrozenError):
            registry.register(_spec("b"))

    def test_from_tools_uses_tool_metadata(self):
        registry = ToolRegistry.from_tools([ReadFileTool(), ListDirectoryTool()])
        spec = registry.lookup("read-file")
        assert spec.parameters["required"] == ["filePath"]
        assert spec.description
