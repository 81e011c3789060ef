import asyncio
import copy
import json
import time
from typing import Any, Dict, List, Optional

from openai.types.chat import ChatCompletionChunk
from openai.types.chat.chat_completion_chunk import (
    Choice,
    ChoiceDelta,
    ChoiceDeltaToolCall,
    ChoiceDeltaToolCallFunction,
)


def _chunk(delta: ChoiceDelta, finish_reason: Optional[str] = None) -> ChatCompletionChunk:
    return ChatCompletionChunk(
        id="chatcmpl-test",
        object="chat.completion.chunk",
        created=0,
        model="gpt-4o-mini",
        choices=[Choice(index=0, delta=delta, finish_reason=finish_reason)],
    )


def text_chunk(text: str, finish_reason: Optional[str] = None) -> ChatCompletionChunk:
    return _chunk(ChoiceDelta(role="assistant", content=text), finish_reason)


def tool_chunk(index: int, call_id: Optional[str] = None, name: Optional[str] = None,
               arguments: Optional[str] = None) -> ChatCompletionChunk:
    fragment = ChoiceDeltaToolCall(
        index=index,
        id=call_id,
        type="function" if call_id else None,
        function=ChoiceDeltaToolCallFunction(name=name, arguments=arguments),
    )
    return _chunk(ChoiceDelta(tool_calls=[fragment]))


def finish_chunk(reason: str) -> ChatCompletionChunk:
    return _chunk(ChoiceDelta(), reason)


class FakeStream:
    def __init__(self, chunks, error: Optional[Exception] = None, delay: float = 0.0):
        self._chunks = list(chunks)
        self.error = error
        self.delay = delay
        self.closed = False

    def __aiter__(self):
        return self

    async def __anext__(self):
        if self.delay:
            await asyncio.sleep(self.delay)
        if self._chunks:
            return self._chunks.pop(0)
        if self.error is not None:
            raise self.error
        raise StopAsyncIteration

    async def close(self):
        self.closed = True


class FakeProvider:
    """Hands out prepared streams in order and records each request."""

    def __init__(self, *streams):
        self.streams = list(streams)
        self.calls: List[Dict[str, Any]] = []

    async def stream(self, messages, tools, options):
        self.calls.append({"messages": copy.deepcopy(messages), "tools": tools, "options": options})
        if not self.streams:
            raise RuntimeError("no stream prepared")
        stream = self.streams.pop(0)
        if isinstance(stream, Exception):
            raise stream
        return stream

    async def close(self):
        pass


class FakeExecutor:
    def __init__(self, results: Optional[Dict[str, Any]] = None, delay: float = 0.0):
        self.results = results or {}
        self.delay = delay
        self.calls: List[tuple] = []

    def execute_tool(self, name, args):
        self.calls.append((name, args))
        if self.delay:
            time.sleep(self.delay)
        result = self.results.get(name, {"ok": True})
        if isinstance(result, Exception):
            raise result
        return result


async def _collect(agen):
    return [chunk async for chunk in agen]


def run_relay(relay, messages, options=None):
    return asyncio.run(_collect(relay.relay(messages, options)))


def dump(chunks) -> List[Dict[str, Any]]:
    return [c.model_dump(by_alias=True, exclude_none=True) for c in chunks]


def parse_sse(body: str) -> List[Dict[str, Any]]:
    events = []
    for block in body.split("\n\n"):
        if block.startswith("data: "):
            events.append(json.loads(block[len("data: "):]))
    return events
