"""Core assistant components.

This module provides the building blocks of the orchestration loop:
- PromptBuilder: Renders the per-turn system prompt and builds messages
- ToolExecutor: Runs tool calls under validation and time budgets
- DecisionStep: Asks the model to answer or request tools
- window: Bounded views of the conversation history
"""

from . import window
from .decision import DecisionStep
from .prompt_builder import PromptBuilder
from .tool_executor import ToolExecutor

__all__ = ["DecisionStep", "PromptBuilder", "ToolExecutor", "window"]
