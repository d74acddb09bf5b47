"""Tests for session stores."""

import pytest

from friday_assistant.config import Settings
from friday_assistant.exceptions import SessionError, SessionNotFoundError
from friday_assistant.sessions import (
    InMemorySessionStore,
    JsonFileSessionStore,
    create_session_store,
)
from friday_assistant.types import MessageRole, ToolCall, UnifiedMessage


@pytest.fixture(params=["memory", "file"])
def any_store(request, tmp_path):
    if request.param == "memory":
        return InMemorySessionStore()
    return JsonFileSessionStore(tmp_path / "sessions")


class TestSessionStores:

    def test_create_and_get(self, any_store):
        session = any_store.create()
        assert session.id
        assert any_store.get(session.id).messages == []
        assert session.id in any_store.list_ids()

    def test_create_with_explicit_id(self, any_store):
        assert any_store.create("alice").id == "alice"
        with pytest.raises(SessionError):
            any_store.create("alice")

    def test_get_unknown_returns_none(self, any_store):
        assert any_store.get("ghost") is None
        assert "ghost" not in any_store

    def test_append_many_preserves_order(self, any_store, sample_messages):
        session = any_store.create()
        any_store.append_many(session.id, sample_messages[:2])
        any_store.append(session.id, sample_messages[2])
        assert any_store.get(session.id).messages == sample_messages

    def test_append_to_unknown_session(self, any_store, sample_messages):
        with pytest.raises(SessionNotFoundError):
            any_store.append("ghost", sample_messages[0])

    def test_returned_sessions_are_copies(self, any_store, sample_messages):
        session = any_store.create()
        any_store.get(session.id).messages.extend(sample_messages)
        assert any_store.get(session.id).messages == []

    def test_get_or_create(self, any_store):
        first = any_store.get_or_create("bob")
        second = any_store.get_or_create("bob")
        assert first.id == second.id == "bob"
        assert any_store.list_ids() == ["bob"]

    def test_delete(self, any_store):
        session = any_store.create()
        assert any_store.delete(session.id) is True
        assert any_store.delete(session.id) is False
        assert any_store.get(session.id) is None


class TestJsonFileSessionStore:

    def test_history_survives_restart(self, tmp_path):
        directory = tmp_path / "sessions"
        store = JsonFileSessionStore(directory)
        store.create("s1")
        store.append_many("s1", [
            UnifiedMessage(role=MessageRole.USER, content="What's on today?"),
            UnifiedMessage(
                role=MessageRole.ASSISTANT,
                tool_calls=[ToolCall(id="c1", name="get-events", arguments={"q": "standup"})],
            ),
            UnifiedMessage(role=MessageRole.TOOL, content="[]", tool_call_id="c1", name="get-events"),
        ])

        reopened = JsonFileSessionStore(directory)
        messages = reopened.get("s1").messages
        assert [m.role for m in messages] == [MessageRole.USER, MessageRole.ASSISTANT, MessageRole.TOOL]
        assert messages[1].tool_calls[0].arguments == {"q": "standup"}

    @pytest.mark.parametrize("bad_id", ["../escape", ".hidden", "a/b", ""])
    def test_rejects_unsafe_ids(self, tmp_path, bad_id):
        store = JsonFileSessionStore(tmp_path)
        with pytest.raises(SessionError):
            store.create(bad_id or "/")
        assert bad_id not in store

    def test_corrupt_file_raises_session_error(self, tmp_path):
        (tmp_path / "broken.json").write_text("{not json", encoding="utf-8")
        with pytest.raises(SessionError):
            JsonFileSessionStore(tmp_path).get("broken")


def test_create_session_store_follows_settings(tmp_path):
    memory = create_session_store(Settings(_env_file=None, session_store="memory"))
    files = create_session_store(
        Settings(_env_file=None, session_store="file", session_dir=str(tmp_path / "s"))
    )
    assert isinstance(memory, InMemorySessionStore)
    assert isinstance(files, JsonFileSessionStore)
    assert (tmp_path / "s").is_dir()
