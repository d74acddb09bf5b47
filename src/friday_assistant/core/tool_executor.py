"""Tool execution for the orchestration loop.

This module turns tool calls requested by the model into tool results. It
looks the tool up, validates the arguments against the tool's JSON schema,
runs the tool under a time budget and converts every failure into a result
the model can read. Nothing here raises to the caller.
"""

import json
import time
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FuturesTimeoutError
from typing import Any

from jsonschema import Draft7Validator

from ..exceptions import ToolExecutionError, ToolNotFoundError, ToolTimeoutError, ToolValidationError
from ..logging import get_logger
from ..tools.registry import ToolRegistry
from ..types import ToolCall, ToolErrorKind, ToolResult, ToolSpec

logger = get_logger(__name__)


def _schema_errors(spec: ToolSpec, arguments: Any) -> list[str]:
    validator = Draft7Validator(spec.parameters)
    errors = []
    for error in sorted(validator.iter_errors(arguments), key=lambda e: [str(p) for p in e.path]):
        location = "/".join(str(p) for p in error.path)
        errors.append(f"{location}: {error.message}" if location else error.message)
    return errors


def _declared_arguments(spec: ToolSpec, arguments: dict[str, Any]) -> dict[str, Any]:
    # keys the schema does not declare are dropped, not passed as keywords
    properties = spec.parameters.get("properties")
    if properties is None:
        return dict(arguments)
    return {key: value for key, value in arguments.items() if key in properties}


def _to_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    return str(value)


class ToolExecutor:
    """Executes tool calls against a frozen tool registry.

    Every call ends in a ``ToolResult``: unknown tools, schema violations,
    timeouts and exceptions raised by tools become results carrying a
    ``ToolErrorKind`` and a text for the model.

    Example:
        executor = ToolExecutor(registry, default_timeout=30)
        results = executor.execute_batch(decision.calls)
    """

    def __init__(
        self,
        registry: ToolRegistry,
        default_timeout: float = 30.0,
        parallel: bool = True,
        max_workers: int = 8,
    ):
        """Initialize the tool executor.

        Args:
            registry: Registry holding the available tools.
            default_timeout: Time budget in seconds for tools without their own.
            parallel: Run the calls of a batch concurrently.
            max_workers: Upper bound on concurrently running calls of a batch.
        """
        self.registry = registry
        self.default_timeout = default_timeout
        self.parallel = parallel
        self.max_workers = max_workers

    def execute(self, call: ToolCall) -> ToolResult:
        """Execute one tool call and return its result.

        Args:
            call: The tool call requested by the model.

        Returns:
            A ToolResult whose ``error`` is None on success.
        """
        started = time.perf_counter()
        result = self._execute(call)
        result.duration = time.perf_counter() - started

        if result.is_error:
            logger.warning(
                f"tool '{call.name}' (id={call.id}) failed in {result.duration:.2f}s "
                f"[{result.error.value}]: {result.content}"
            )
        else:
            logger.info(f"tool '{call.name}' (id={call.id}) finished in {result.duration:.2f}s")
        return result

    def execute_batch(self, calls: list[ToolCall]) -> list[ToolResult]:
        """Execute all calls, returning results in the order of ``calls``.

        A failing call never prevents its siblings from running.
        """
        if not calls:
            return []
        if not self.parallel or len(calls) == 1:
            return [self.execute(call) for call in calls]

        with ThreadPoolExecutor(max_workers=min(self.max_workers, len(calls))) as pool:
            return list(pool.map(self.execute, calls))

    def _execute(self, call: ToolCall) -> ToolResult:
        try:
            spec = self.registry.lookup(call.name)
        except ToolNotFoundError as e:
            return self._error(call, ToolErrorKind.NOT_FOUND, str(e))

        errors = _schema_errors(spec, call.arguments)
        if errors:
            return self._error(call, ToolErrorKind.SCHEMA_VIOLATION, str(ToolValidationError(spec.name, errors)))

        arguments = _declared_arguments(spec, call.arguments)
        ignored = sorted(set(call.arguments) - set(arguments))
        if ignored:
            logger.debug(f"tool '{spec.name}' (id={call.id}): ignoring undeclared arguments {ignored}")

        timeout = spec.timeout or self.default_timeout
        logger.debug(f"executing tool '{spec.name}' (id={call.id}) args={arguments}")
        try:
            value = self._invoke(spec, arguments, timeout)
        except ToolTimeoutError as e:
            # subprocess timeouts name the command; report the tool instead
            return self._error(call, ToolErrorKind.TIMEOUT, str(ToolTimeoutError(spec.name, e.timeout)))
        except ToolExecutionError as e:
            return self._error(call, ToolErrorKind.EXECUTION_FAILURE, str(e.cause))
        except Exception as e:
            return self._error(call, ToolErrorKind.EXECUTION_FAILURE, f"Tool execution failed: {e}")

        return ToolResult(tool_call_id=call.id, name=call.name, content=_to_text(value))

    def _invoke(self, spec: ToolSpec, arguments: dict[str, Any], timeout: float) -> Any:
        # a dedicated worker per call so a hung tool cannot starve later calls
        pool = ThreadPoolExecutor(max_workers=1, thread_name_prefix=f"tool-{spec.name}")
        future = pool.submit(spec.invoke, **arguments)
        try:
            return future.result(timeout=timeout)
        except FuturesTimeoutError:
            future.cancel()
            raise ToolTimeoutError(spec.name, timeout) from None
        finally:
            pool.shutdown(wait=False)

    @staticmethod
    def _error(call: ToolCall, kind: ToolErrorKind, content: str) -> ToolResult:
        return ToolResult(tool_call_id=call.id, name=call.name, content=content, error=kind)
