from typing import Any

from tavily import TavilyClient

from ..exceptions import ToolExecutionError
from .base import BaseTool


class TavilySearchTool(BaseTool):
    TIMEOUT = 30.0

    def __init__(self, api_key: str | None = None):
        # a missing key still lets the assistant start; the tool reports it when called
        self.client = TavilyClient(api_key=api_key) if api_key else None

    @property
    def name(self) -> str:
        return "web-search"

    @property
    def description(self) -> str:
        return (
            "Perform a web search for information. "
            "Use this tool to find up-to-date information, documentation, or answers to questions."
        )

    @property
    def parameters(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {"query": {"type": "string", "description": "The search query."}},
            "required": ["query"],
        }

    def execute(self, query: str) -> str:
        if not self.client:
            raise ToolExecutionError(self.name, "Web search failed: TAVILY_API_KEY is not configured.")

        try:
            response = self.client.search(query=query, search_depth="basic")
        except Exception as e:
            raise ToolExecutionError(self.name, f"Web search failed: {e}") from e

        results = response.get("results", [])
        if not results:
            return "No relevant results found."

        formatted_results = []
        for result in results:
            title = result.get("title", "No Title")
            url = result.get("url", "No URL")
            content = result.get("content", "No Content")
            formatted_results.append(f"Title: {title}\nURL: {url}\nContent: {content}\n")

        return "\n---\n".join(formatted_results)
