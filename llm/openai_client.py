import logging
from typing import Any, Dict, List, Optional
from openai import AsyncOpenAI
from openai import AsyncStream
from openai.types.chat import ChatCompletionChunk

from models import ChatOptions
from config.settings import settings

openai_cfg = settings.openai


class ChatCompletionProvider:
    """Opens streaming chat completions. Built once at start-up and shared by requests."""

    def __init__(self, client: Optional[AsyncOpenAI] = None):
        self.client = client or AsyncOpenAI(
            api_key=openai_cfg.api_key,
            base_url=openai_cfg.base_url,
            timeout=openai_cfg.request_timeout_seconds,
            max_retries=openai_cfg.max_retries,
        )
        self.logger = logging.getLogger("app")

    def request_params(self, options: ChatOptions) -> Dict[str, Any]:
        return {
            "model": options.model or openai_cfg.chat_model,
            "max_tokens": options.max_tokens or openai_cfg.max_tokens,
            "temperature": openai_cfg.temperature if options.temperature is None else options.temperature,
        }

    async def stream(self, messages: List[Dict[str, Any]], tools: List[Dict[str, Any]],
                     options: ChatOptions) -> AsyncStream[ChatCompletionChunk]:
        params = self.request_params(options)
        self.logger.debug(f"Opening completion stream with {len(messages)} messages on {params['model']}")
        return await self.client.chat.completions.create(
            messages=messages,
            tools=tools,
            tool_choice="auto",
            stream=True,
            **params,
        )

    async def close(self) -> None:
        await self.client.close()
