"""Network tools: generic HTTP, weather, news and opening URLs."""

import json
import webbrowser
from typing import Any
from urllib.parse import quote

import requests

from ..exceptions import ToolExecutionError
from .base import BaseTool

# seconds for a single outbound request
REQUEST_TIMEOUT = 15

WTTR_URL = "https://wttr.in/{city}?format=3"
NEWS_API_URL = "https://newsapi.org/v2/everything"


class HttpRequestTool(BaseTool):
    """Perform a generic HTTP request and return the response body."""

    TIMEOUT = REQUEST_TIMEOUT + 5

    @property
    def name(self) -> str:
        return "http-request"

    @property
    def description(self) -> str:
        return "Perform a generic HTTP request (GET/POST) to any API or website."

    @property
    def parameters(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "url": {"type": "string", "description": "URL to request."},
                "method": {"type": "string", "description": "HTTP method (GET, POST, etc.)."},
                "body": {"description": "Request body, sent as JSON for POST."},
            },
            "required": ["url"],
        }

    def execute(self, url: str, method: str = "GET", body: Any = None) -> str:
        method = method.upper()
        try:
            response = requests.request(
                method,
                url,
                json=body if method == "POST" else None,
                headers={"Content-Type": "application/json"},
                timeout=REQUEST_TIMEOUT,
            )
        except requests.RequestException as e:
            raise ToolExecutionError(self.name, f"HTTP request failed: {e}") from e
        return response.text


class WeatherTool(BaseTool):
    TIMEOUT = REQUEST_TIMEOUT + 5

    @property
    def name(self) -> str:
        return "get-weather"

    @property
    def description(self) -> str:
        return "Get current weather for a city."

    @property
    def parameters(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {"city": {"type": "string", "description": "City name."}},
            "required": ["city"],
        }

    def execute(self, city: str) -> str:
        try:
            response = requests.get(WTTR_URL.format(city=quote(city)), timeout=REQUEST_TIMEOUT)
            response.raise_for_status()
        except requests.RequestException as e:
            raise ToolExecutionError(self.name, f"Weather API failed: {e}") from e
        return response.text.strip()


class NewsTool(BaseTool):
    """Top three articles for a topic from NewsAPI."""

    TIMEOUT = REQUEST_TIMEOUT + 5

    def __init__(self, api_key: str | None = None):
        self.api_key = api_key

    @property
    def name(self) -> str:
        return "get-news"

    @property
    def description(self) -> str:
        return "Get latest news articles for a topic."

    @property
    def parameters(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {"topic": {"type": "string", "description": "News topic."}},
            "required": ["topic"],
        }

    def execute(self, topic: str) -> str:
        if not self.api_key:
            raise ToolExecutionError(self.name, "News API failed: NEWS_API_KEY is not configured.")
        try:
            response = requests.get(
                NEWS_API_URL,
                params={"q": topic, "apiKey": self.api_key},
                timeout=REQUEST_TIMEOUT,
            )
            response.raise_for_status()
            articles = response.json().get("articles") or []
        except (requests.RequestException, ValueError) as e:
            raise ToolExecutionError(self.name, f"News API failed: {e}") from e
        return json.dumps(articles[:3])


# common spellings mapped to the names webbrowser registers
BROWSER_ALIASES = {
    "chrome": "chrome",
    "google chrome": "chrome",
    "chromium": "chromium",
    "firefox": "firefox",
    "mozilla firefox": "firefox",
    "safari": "safari",
    "edge": "microsoft-edge",
    "microsoft edge": "microsoft-edge",
}


class OpenUrlTool(BaseTool):
    @property
    def name(self) -> str:
        return "open-url"

    @property
    def description(self) -> str:
        return "Open a URL in the specified web browser (Chrome or default)."

    @property
    def parameters(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "url": {"type": "string", "description": "The URL to open."},
                "browser": {"type": "string", "description": 'Browser to use (e.g., "chrome").'},
            },
            "required": ["url"],
        }

    def execute(self, url: str, browser: str | None = None) -> str:
        try:
            if browser:
                key = browser.strip().lower()
                controller = webbrowser.get(BROWSER_ALIASES.get(key, key))
            else:
                controller = webbrowser.get()
            opened = controller.open(url)
        except webbrowser.Error as e:
            raise ToolExecutionError(self.name, f"Error opening URL: {e}") from e
        if not opened:
            raise ToolExecutionError(self.name, f"Error opening URL: no browser accepted {url}")
        return f"URL opened in {browser or 'default browser'}."
