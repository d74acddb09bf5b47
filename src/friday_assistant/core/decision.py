"""Decision step: one model call deciding between answering and using tools."""

from ..clients.base import BaseLLMClient, with_retry
from ..exceptions import ModelUnavailableError
from ..logging import get_logger
from ..types import Decision, DecisionKind, ToolSpec, UnifiedMessage

logger = get_logger(__name__)


class DecisionStep:
    """Asks the model what to do next given the conversation window.

    Rate-limit and provider-unavailable errors are retried with exponential
    backoff. Whatever still fails surfaces as ``ModelUnavailableError`` with
    the original error chained.

    Example:
        step = DecisionStep(client)
        decision = step.decide(window, registry.specs())
        if decision.kind == DecisionKind.TOOL_REQUEST:
            ...
    """

    def __init__(
        self,
        client: BaseLLMClient,
        max_retries: int = 3,
        initial_delay: float = 1.0,
    ):
        self.client = client
        self._generate = with_retry(max_retries=max_retries, initial_delay=initial_delay)(
            client.generate
        )

    def decide(self, window: list[UnifiedMessage], tools: list[ToolSpec]) -> Decision:
        """Run one decision step.

        Args:
            window: Messages sent to the model, oldest first.
            tools: Tool specs the model may request.

        Returns:
            An ANSWER decision, or a TOOL_REQUEST carrying the ordered calls.

        Raises:
            ModelUnavailableError: If the model could not be reached or its
                response could not be understood.
        """
        provider = getattr(self.client, "provider_name", None)
        try:
            response = self._generate(window, tools or None)
        except Exception as e:
            logger.error(f"decision step failed ({type(e).__name__}): {e}")
            raise ModelUnavailableError(f"Model unavailable: {e}", provider=provider) from e

        message = response.message
        if message.tool_calls:
            logger.debug(f"model requested tools: {[tc.name for tc in message.tool_calls]}")
            return Decision(kind=DecisionKind.TOOL_REQUEST, message=message)
        return Decision(kind=DecisionKind.ANSWER, message=message)
