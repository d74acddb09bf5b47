"""Main assistant implementation.

The Assistant orchestrates conversation turns between the user, the LLM
and the tools. It uses unified types for all interactions, making it
provider-agnostic.
"""

import threading

from .clients.base import BaseLLMClient
from .config import Settings
from .core import window
from .core.decision import DecisionStep
from .core.prompt_builder import PromptBuilder
from .core.tool_executor import ToolExecutor
from .exceptions import SessionNotFoundError
from .logging import get_logger
from .prompts import SYSTEM_PROMPT
from .sessions import InMemorySessionStore, SessionStore, create_session_store
from .tools.registry import ToolRegistry
from .types import (
    DecisionKind,
    MessageRole,
    ToolResult,
    TurnOutcome,
    TurnResult,
    TurnState,
    UnifiedMessage,
)

logger = get_logger(__name__)

MAX_ROUNDS_NOTICE = (
    "I stopped after {rounds} rounds of tool calls without reaching a final answer. "
    "Please narrow the request or tell me how to continue."
)


class Assistant:
    """Runs the tool-dispatch loop for conversation turns.

    Each turn moves through AWAITING_DECISION -> (EXECUTING_TOOLS ->
    AWAITING_DECISION)* -> DONE:
    1. Append a fresh system message and the user message
    2. Ask the model (on a bounded window of the history) what to do
    3. If it requests tools, execute them and append one result per call
    4. Repeat until it answers or the round cap is hit

    A turn's messages are committed to the session store only when the turn
    finishes; if the model becomes unavailable mid-turn nothing is stored
    and the error propagates. Turns on the same session are serialized.
    """

    def __init__(
        self,
        client: BaseLLMClient,
        registry: ToolRegistry,
        store: SessionStore | None = None,
        system_prompt: str = SYSTEM_PROMPT,
        timezone: str = "UTC",
        window_size: int = 10,
        max_rounds: int = 8,
        tool_timeout: float = 30.0,
        parallel_tools: bool = True,
        max_retries: int = 3,
        retry_delay: float = 1.0,
    ):
        """Initialize the assistant.

        Args:
            client: The LLM client to use (provider-agnostic)
            registry: Frozen registry of the tools the model may call
            store: Session storage; in-memory if not given
            system_prompt: Template with {current_datetime} and {timezone}
            timezone: IANA timezone announced to the model each turn
            window_size: Number of most recent messages sent to the model
            max_rounds: Tool-execution rounds allowed per turn
            tool_timeout: Default time budget for one tool call, in seconds
            parallel_tools: Run the calls of one round concurrently
            max_retries: Retries of a rate-limited or unavailable provider
            retry_delay: Initial backoff delay between those retries
        """
        if window_size <= 0:
            raise ValueError("window_size must be positive")
        if max_rounds <= 0:
            raise ValueError("max_rounds must be positive")

        self.client = client
        self.registry = registry
        self.store = store or InMemorySessionStore()
        self.window_size = window_size
        self.max_rounds = max_rounds

        self.prompt_builder = PromptBuilder(system_prompt, timezone)
        self.decision_step = DecisionStep(client, max_retries=max_retries, initial_delay=retry_delay)
        self.tool_executor = ToolExecutor(
            registry,
            default_timeout=tool_timeout,
            parallel=parallel_tools,
        )

        self._locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        client: BaseLLMClient,
        registry: ToolRegistry | None = None,
        store: SessionStore | None = None,
    ) -> "Assistant":
        """Build an assistant wired to the configured tools and session store."""
        if registry is None:
            from .tools import build_registry
            registry = build_registry(settings)

        return cls(
            client=client,
            registry=registry,
            store=store or create_session_store(settings),
            timezone=settings.resolve_timezone(),
            window_size=settings.window_size,
            max_rounds=settings.max_rounds,
            tool_timeout=settings.tool_timeout,
            parallel_tools=settings.parallel_tools,
        )

    # ==================== sessions ====================

    def new_session(self) -> str:
        """Create an empty session and return its id."""
        return self.store.create().id

    def history(self, session_id: str) -> list[UnifiedMessage]:
        """Get the full stored history of a session.

        Raises:
            SessionNotFoundError: If the session does not exist.
        """
        session = self.store.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session.messages

    def delete_session(self, session_id: str) -> bool:
        """Delete a session once any running turn on it has finished.

        Returns:
            False if the session did not exist.
        """
        try:
            with self._lock_for(session_id):
                return self.store.delete(session_id)
        finally:
            with self._locks_guard:
                self._locks.pop(session_id, None)

    def _lock_for(self, session_id: str) -> threading.Lock:
        with self._locks_guard:
            return self._locks.setdefault(session_id, threading.Lock())

    # ==================== turns ====================

    def run_turn(self, user_input: str, session_id: str | None = None) -> TurnResult:
        """Run one conversation turn.

        Args:
            user_input: The user's message
            session_id: Session to continue; a new one is created if None

        Returns:
            TurnResult with the outcome and the final text

        Raises:
            ModelUnavailableError: If the model could not be reached. The
                session is left exactly as it was before the turn.
        """
        session_id = session_id or self.new_session()

        with self._lock_for(session_id):
            session = self.store.get_or_create(session_id)
            staged = [
                self.prompt_builder.build_system_message(),
                self.prompt_builder.build_user_message(user_input),
            ]
            result = self._run_loop(session_id, session.messages, staged)

            # commit the whole turn at once
            self.store.append_many(session_id, staged)

        logger.info(
            f"turn on session {session_id} ended {result.outcome.name} after {result.rounds} round(s)"
        )
        return result

    def _run_loop(
        self,
        session_id: str,
        committed: list[UnifiedMessage],
        staged: list[UnifiedMessage],
    ) -> TurnResult:
        """Drive the state machine, appending this turn's messages to ``staged``."""
        specs = self.registry.specs()
        state = TurnState.AWAITING_DECISION
        rounds = 0
        tool_results: list[ToolResult] = []
        calls = []
        outcome = TurnOutcome.ANSWERED
        content = ""

        while state != TurnState.DONE:
            if state == TurnState.AWAITING_DECISION:
                view = window.windowed(committed + staged, self.window_size)
                decision = self.decision_step.decide(view, specs)

                if decision.kind == DecisionKind.ANSWER:
                    staged.append(decision.message)
                    content = decision.text
                    state = TurnState.DONE
                elif rounds >= self.max_rounds:
                    # the unanswered request is dropped so every stored call keeps its result
                    logger.warning(
                        f"session {session_id}: model still requesting tools after {rounds} rounds"
                    )
                    content = MAX_ROUNDS_NOTICE.format(rounds=rounds)
                    staged.append(UnifiedMessage(role=MessageRole.ASSISTANT, content=content))
                    outcome = TurnOutcome.MAX_ROUNDS_EXCEEDED
                    state = TurnState.DONE
                else:
                    staged.append(decision.message)
                    calls = decision.calls
                    state = TurnState.EXECUTING_TOOLS

            elif state == TurnState.EXECUTING_TOOLS:
                results = self.tool_executor.execute_batch(calls)
                for tool_result in results:
                    staged.append(self.prompt_builder.build_tool_result(tool_result))
                tool_results.extend(results)
                rounds += 1
                state = TurnState.AWAITING_DECISION

        return TurnResult(
            session_id=session_id,
            outcome=outcome,
            content=content,
            rounds=rounds,
            tool_results=tool_results,
        )
