"""
LLM service - the text generation call used by the ReAct agent.

The agent only needs "system prompt + user prompt in, text out". `Oracle` is
that contract; `ChatOracle` implements it on an OpenAI-compatible chat
completions endpoint (OpenAI or OpenRouter, see config).
"""
import logging
from typing import Protocol

from openai import AsyncOpenAI

from promptlab.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()


class Oracle(Protocol):
    model: str

    async def generate(
        self,
        system_prompt: str,
        prompt: str,
        *,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> str:
        ...


class ChatOracle:
    """Oracle backed by chat completions."""

    def __init__(
        self,
        model: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
        client: AsyncOpenAI | None = None,
    ):
        self.model = model or settings.model_react
        self.temperature = settings.llm_temperature if temperature is None else temperature
        self.max_tokens = max_tokens or settings.react_max_tokens
        self.client = client or AsyncOpenAI(
            api_key=settings.llm_api_key,
            base_url=settings.llm_base_url
        )

    async def generate(
        self,
        system_prompt: str,
        prompt: str,
        *,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> str:
        response = await self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": prompt}
            ],
            temperature=self.temperature if temperature is None else temperature,
            max_tokens=max_tokens or self.max_tokens
        )

        if response.usage:
            logger.debug(f"[LLM] {self.model} tokens: prompt={response.usage.prompt_tokens}, "
                         f"completion={response.usage.completion_tokens}")

        content = response.choices[0].message.content if response.choices else None
        return content or ""
