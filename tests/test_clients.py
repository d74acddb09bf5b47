"""Tests for the LLM clients and the provider factory."""

import json
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

from friday_assistant.clients.anthropic import AnthropicClient
from friday_assistant.clients.base import drop_orphan_tool_messages
from friday_assistant.clients.factory import create_client, get_available_providers, get_default_model
from friday_assistant.clients.groq import GROQ_BASE_URL, GroqClient
from friday_assistant.clients.openai import OpenAIClient
from friday_assistant.clients.openai_compat import parse_tool_arguments
from friday_assistant.config import Settings
from friday_assistant.exceptions import InvalidResponseError
from friday_assistant.types import FinishReason, MessageRole, ToolCall, UnifiedMessage


def _tool_exchange():
    return [
        UnifiedMessage(role=MessageRole.SYSTEM, content="old system"),
        UnifiedMessage(role=MessageRole.USER, content="status and log please"),
        UnifiedMessage(
            role=MessageRole.ASSISTANT,
            tool_calls=[
                ToolCall(id="c1", name="git-status", arguments={}),
                ToolCall(id="c2", name="git-log", arguments={}),
            ],
        ),
        UnifiedMessage(role=MessageRole.TOOL, content="clean", tool_call_id="c1", name="git-status"),
        UnifiedMessage(role=MessageRole.TOOL, content="abc123 init", tool_call_id="c2", name="git-log"),
        UnifiedMessage(role=MessageRole.SYSTEM, content="new system"),
        UnifiedMessage(role=MessageRole.USER, content="thanks"),
    ]


def _openai_response(content=None, tool_calls=None, finish_reason="stop"):
    return SimpleNamespace(
        choices=[SimpleNamespace(
            message=SimpleNamespace(content=content, tool_calls=tool_calls),
            finish_reason=finish_reason,
        )],
        usage=SimpleNamespace(prompt_tokens=12, completion_tokens=3, total_tokens=15),
    )


def _openai_tool_call(call_id, name, arguments):
    return SimpleNamespace(id=call_id, function=SimpleNamespace(name=name, arguments=arguments))


class TestDropOrphanToolMessages:

    def test_drops_results_without_their_request(self):
        window = _tool_exchange()[3:]
        kept = drop_orphan_tool_messages(window)
        assert [m.role for m in kept] == [MessageRole.SYSTEM, MessageRole.USER]

    def test_keeps_complete_exchanges(self):
        messages = _tool_exchange()
        assert drop_orphan_tool_messages(messages) == messages


class TestParseToolArguments:

    @pytest.mark.parametrize("raw, expected", [
        ('{"city": "Paris"}', {"city": "Paris"}),
        ("", {}),
        (None, {}),
        ("{not json", {}),
        ("[1, 2]", {}),
    ])
    def test_parse(self, raw, expected):
        assert parse_tool_arguments(raw) == expected


class TestOpenAICompatibleClients:

    @pytest.fixture
    def client(self):
        return OpenAIClient(api_key="sk-test")

    def test_converts_tool_exchange(self, client):
        converted = client._convert_messages(_tool_exchange())

        assert converted[2]["tool_calls"][0]["function"] == {"name": "git-status", "arguments": "{}"}
        assert converted[3] == {"role": "tool", "tool_call_id": "c1", "content": "clean"}
        assert converted[4]["tool_call_id"] == "c2"

    def test_parses_tool_calls(self, client):
        response = _openai_response(
            tool_calls=[
                _openai_tool_call("c1", "get-weather", '{"city": "Oslo"}'),
                _openai_tool_call("c2", "get-news", "not json"),
            ],
            finish_reason="tool_calls",
        )
        parsed = client._parse_response(response)

        assert parsed.finish_reason == FinishReason.TOOL_USE
        assert [tc.id for tc in parsed.message.tool_calls] == ["c1", "c2"]
        assert parsed.message.tool_calls[0].arguments == {"city": "Oslo"}
        assert parsed.message.tool_calls[1].arguments == {}
        assert parsed.usage.total_tokens == 15

    def test_parses_answer(self, client):
        parsed = client._parse_response(_openai_response(content="Sunny."))
        assert parsed.message.content == "Sunny."
        assert parsed.message.tool_calls is None

    def test_unparseable_response(self, client):
        with pytest.raises(InvalidResponseError):
            client._parse_response(SimpleNamespace(choices=[]))

    def test_generate_offers_tools(self, client, registry, sample_messages):
        client.client = MagicMock()
        client.client.chat.completions.create.return_value = _openai_response(content="hi")

        response = client.generate(sample_messages, registry.specs())

        kwargs = client.client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "gpt-4o"
        assert kwargs["tool_choice"] == "auto"
        assert [t["function"]["name"] for t in kwargs["tools"]] == registry.names()
        assert response.message.content == "hi"

    def test_generate_without_tools(self, client, sample_messages):
        client.client = MagicMock()
        client.client.chat.completions.create.return_value = _openai_response(content="hi")

        client.generate(sample_messages)

        kwargs = client.client.chat.completions.create.call_args.kwargs
        assert "tools" not in kwargs
        assert "tool_choice" not in kwargs

    def test_groq_defaults(self, sample_messages):
        client = GroqClient(api_key="gsk-test", client_config={"max_tokens": 256, "seed": 1})
        assert client.provider_name == "groq"
        assert client.model == "openai/gpt-oss-120b"
        assert str(client.client.base_url).rstrip("/") == GROQ_BASE_URL

        client.client = MagicMock()
        client.client.chat.completions.create.return_value = _openai_response(content="ok")
        client.generate(sample_messages)

        kwargs = client.client.chat.completions.create.call_args.kwargs
        assert kwargs["temperature"] == 0
        assert kwargs["max_tokens"] == 256
        assert "seed" not in kwargs


class TestAnthropicClient:

    @pytest.fixture
    def client(self):
        return AnthropicClient(api_key="sk-ant-test")

    def test_latest_system_message_wins(self, client):
        system, _ = client._convert_messages(_tool_exchange())
        assert system == "new system"

    def test_tool_results_are_folded(self, client):
        _, converted = client._convert_messages(_tool_exchange())

        assert [m["role"] for m in converted] == ["user", "assistant", "user", "user"]
        results = converted[2]["content"]
        assert [b["tool_use_id"] for b in results] == ["c1", "c2"]
        assert all(b["type"] == "tool_result" for b in results)

    def test_window_starts_with_plain_user_message(self, client):
        window = _tool_exchange()[2:]
        _, converted = client._convert_messages(window)
        assert converted == [{"role": "user", "content": "thanks"}]

    def test_parses_tool_use_blocks(self, client):
        response = SimpleNamespace(
            content=[
                SimpleNamespace(type="text", text="Checking."),
                SimpleNamespace(type="tool_use", id="t1", name="get-contacts", input={}),
            ],
            stop_reason="tool_use",
            usage=SimpleNamespace(input_tokens=20, output_tokens=5),
        )
        parsed = client._parse_response(response)

        assert parsed.message.content == "Checking."
        assert parsed.message.tool_calls[0].name == "get-contacts"
        assert parsed.finish_reason == FinishReason.TOOL_USE
        assert parsed.usage.total_tokens == 25

    def test_rejects_unknown_config(self):
        with pytest.raises(ValueError):
            AnthropicClient(api_key="k", client_config={"thinking": {"type": "enabled"}})

    def test_converts_tools(self, client, echo_spec):
        converted = client._convert_tools([echo_spec])
        assert converted == [{
            "name": "echo",
            "description": "Echo the given text.",
            "input_schema": echo_spec.parameters,
        }]
        assert json.loads(json.dumps(converted)) == converted


class TestFactory:

    def test_providers(self):
        assert get_available_providers() == ["groq", "openai", "anthropic", "together"]
        assert get_default_model("groq") == "openai/gpt-oss-120b"

    def test_unknown_provider(self):
        with pytest.raises(ValueError):
            create_client("nope", Settings(_env_file=None))
        with pytest.raises(ValueError):
            get_default_model("nope")

    def test_missing_key(self, monkeypatch):
        monkeypatch.delenv("GROQ_API_KEY", raising=False)
        with pytest.raises(ValueError, match="GROQ_API_KEY"):
            create_client("groq", Settings(_env_file=None))

    def test_key_comes_from_settings(self, monkeypatch):
        monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-ant-env")
        with patch("friday_assistant.clients.anthropic.Anthropic") as sdk:
            create_client("anthropic", Settings(_env_file=None))
        sdk.assert_called_once_with(api_key="sk-ant-env")

    def test_creates_client_with_defaults(self):
        settings = Settings(_env_file=None, groq_api_key="gsk-test")
        client = create_client("groq", settings, client_config={"temperature": 0.2})
        assert isinstance(client, GroqClient)
        assert client.model == "openai/gpt-oss-120b"
        assert client.client_config == {"temperature": 0.2}

    def test_model_override(self):
        settings = Settings(_env_file=None, openai_api_key="sk-test")
        with patch("friday_assistant.clients.openai.OpenAI"):
            client = create_client("openai", settings, model="gpt-4o-mini")
        assert client.model == "gpt-4o-mini"
