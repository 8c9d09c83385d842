# projectinsight/services/llm_chain/llm_chains.py
from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Optional

import httpx
from openai import AsyncOpenAI

from projectinsight.config import ServiceConfigs
from projectinsight.utils.logger import get_logger
from .llm_utils import extract_assistant_text_chat

logger = get_logger(__name__)

HTTP_LIMITS = httpx.Limits(max_connections=10, max_keepalive_connections=5)


class LLMChains:
    """Thin async wrapper over the OpenAI Chat Completions API."""

    def __init__(
        self,
        model: str,
        *,
        client: Optional[AsyncOpenAI] = None,
        llm_base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        temperature: float = 0.7,
        max_tokens: int = 2000,
        request_timeout: float = 60.0,
        max_retries: int = 0,
    ):
        self.model = model
        self.temperature = float(temperature or 0.0)
        self.max_tokens = int(max_tokens) or 256
        self.request_timeout = float(request_timeout)
        self.client = client or AsyncOpenAI(
            base_url=llm_base_url,
            api_key=api_key,
            max_retries=max_retries,
            http_client=httpx.AsyncClient(
                timeout=httpx.Timeout(self.request_timeout), limits=HTTP_LIMITS
            ),
        )

    @classmethod
    def from_settings(
        cls, settings: ServiceConfigs, *, client: Optional[AsyncOpenAI] = None
    ) -> "LLMChains":
        return cls(
            settings.llm_model,
            client=client,
            llm_base_url=settings.llm_base_url,
            api_key=settings.api_key,
            temperature=settings.llm_temperature,
            max_tokens=settings.analysis_max_tokens,
            request_timeout=settings.llm_request_timeout,
            max_retries=settings.llm_max_retries,
        )

    # ====================================================
    # Low-level helper around the OpenAI SDK
    # ====================================================
    async def chat_completions(self, **kwargs) -> Any:
        return await asyncio.wait_for(
            self.client.chat.completions.create(**kwargs), timeout=self.request_timeout
        )

    # =====================================================
    # Generate text (no parsing)
    # =====================================================
    async def chat_completions_text(
        self,
        messages: List[Dict[str, Any]],
        *,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
    ) -> str:
        args: Dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": self.temperature if temperature is None else float(temperature),
            "max_tokens": max_tokens or self.max_tokens,
        }
        logger.debug(
            "[llm] chat.completions | model=%s | max_tokens=%s", self.model, args["max_tokens"]
        )
        resp = await self.chat_completions(**args)
        return extract_assistant_text_chat(resp)

    async def aclose(self) -> None:
        await self.client.close()
