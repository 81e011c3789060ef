import json
import asyncio
import logging
from typing import Any, AsyncIterator, Dict, Iterable, List, Optional

from models import ChatOptions, PendingToolCall, StreamChunk, ToolExecutionResult, ToolResult
from tools import to_openai_tools
from config.settings import settings

relay_cfg = settings.relay

TOOL_FAILED = {"error": "Tool execution failed"}


class ToolCallAccumulator:
    """Rebuilds tool calls from streamed fragments.

    Fragments are keyed by their stream-local index; indices may arrive in
    any order and name/arguments pieces are concatenated in arrival order.
    """

    def __init__(self):
        self._calls: Dict[int, PendingToolCall] = {}

    def feed(self, fragments: Optional[Iterable[Any]]) -> None:
        for fragment in fragments or ():
            if fragment.index is None:
                continue
            call = self._calls.get(fragment.index)
            if call is None:
                call = self._calls[fragment.index] = PendingToolCall(index=fragment.index)
            if fragment.id and not call.id:
                call.id = fragment.id
            function = fragment.function
            if function is not None:
                if function.name:
                    call.function_name += function.name
                if function.arguments:
                    call.arguments_json += function.arguments

    def calls(self) -> List[PendingToolCall]:
        return [self._calls[i] for i in sorted(self._calls)]

    def __bool__(self) -> bool:
        return bool(self._calls)


class CompletionRelay:
    """Relays one chat exchange: stream, run requested tools, stream the follow-up.

    The provider is anything with ``async stream(messages, tools, options)``
    returning an async iterator of chat completion chunks with ``close()``.
    The executor is anything with a blocking ``execute_tool(name, args)``.
    """

    def __init__(self, provider, executor, tools: Optional[List[Dict[str, Any]]] = None,
                 max_tool_rounds: Optional[int] = None, timeout_seconds: Optional[float] = None,
                 request_id: str = "-"):
        self.provider = provider
        self.executor = executor
        self.tools = tools if tools is not None else to_openai_tools()
        self.max_tool_rounds = relay_cfg.max_tool_rounds if max_tool_rounds is None else max_tool_rounds
        self.timeout_seconds = relay_cfg.request_timeout_seconds if timeout_seconds is None else timeout_seconds
        self.request_id = request_id
        self.logger = logging.getLogger("app")

    def log(self, msg: str, level: str = "info"):
        extra = {"extra_data": {"request_id": self.request_id, "agent": "CompletionRelay"}}
        getattr(self.logger, level)(msg, extra=extra)

    async def _before(self, aw, deadline: float):
        remaining = deadline - asyncio.get_running_loop().time()
        if remaining <= 0:
            if asyncio.iscoroutine(aw):
                aw.close()
            raise asyncio.TimeoutError()
        return await asyncio.wait_for(aw, remaining)

    async def relay(self, messages: List[Dict[str, Any]], options: Optional[ChatOptions] = None) -> AsyncIterator[StreamChunk]:
        """Yield StreamChunks for one exchange; the last one always has is_complete set."""
        options = options or ChatOptions()
        deadline = asyncio.get_running_loop().time() + self.timeout_seconds
        history = list(messages)
        rounds = 0
        try:
            while True:
                stream = await self._before(self.provider.stream(history, self.tools, options), deadline)
                accumulator = ToolCallAccumulator()
                finish_reason = None
                try:
                    while finish_reason is None:
                        try:
                            chunk = await self._before(stream.__anext__(), deadline)
                        except StopAsyncIteration:
                            break
                        if not chunk.choices:
                            continue
                        choice = chunk.choices[0]
                        delta = choice.delta
                        if delta is not None:
                            accumulator.feed(delta.tool_calls)
                            if delta.content:
                                yield StreamChunk.delta(delta.content)
                        finish_reason = choice.finish_reason
                finally:
                    await stream.close()

                if finish_reason == "tool_calls" and accumulator and rounds < self.max_tool_rounds:
                    rounds += 1
                    calls = accumulator.calls()
                    self.log(f"Tool calls detected: {[c.function_name for c in calls]}")
                    results = await self._execute_tools(calls, deadline)
                    history = history + [
                        {"role": "assistant", "content": "", "tool_calls": [c.to_message() for c in calls]},
                        *[r.to_message() for r in results],
                    ]
                    self.log("Sending follow-up messages with tool results")
                    continue

                if finish_reason == "tool_calls":
                    self.log(f"Tool call limit of {self.max_tool_rounds} round(s) reached; ending exchange", level="warning")
                elif finish_reason is None:
                    self.log("Upstream stream ended without a finish reason", level="warning")
                yield StreamChunk.complete()
                return
        except asyncio.TimeoutError:
            self.log(f"Exchange exceeded {self.timeout_seconds}s", level="error")
            yield StreamChunk.failure("Request timed out")
        except Exception as e:
            self.log(f"Stream processing error: {e}", level="error")
            yield StreamChunk.failure(str(e) or "OpenAI API error")

    async def _execute_tools(self, calls: List[PendingToolCall], deadline: float) -> List[ToolResult]:
        results = []
        for call in calls:
            results.append(await self._execute_tool(call, deadline))
        return results

    async def _execute_tool(self, call: PendingToolCall, deadline: float) -> ToolResult:
        try:
            args = json.loads(call.arguments_json)
        except (ValueError, RecursionError) as e:
            self.log(f"Bad arguments for {call.function_name}: {e}", level="warning")
            return ToolResult(call.id, json.dumps(TOOL_FAILED))

        self.log(f"Executing tool: {call.function_name}")
        try:
            result = await self._before(
                asyncio.to_thread(self.executor.execute_tool, call.function_name, args), deadline
            )
        except asyncio.TimeoutError:
            raise
        except Exception as e:
            self.log(f"Tool execution error: {e}", level="warning")
            return ToolResult(call.id, json.dumps(TOOL_FAILED))

        if isinstance(result, ToolExecutionResult):
            payload = result.data if result.success and result.data is not None else result.model_dump(exclude_none=True)
        else:
            payload = result
        return ToolResult(call.id, json.dumps(payload, default=str))
