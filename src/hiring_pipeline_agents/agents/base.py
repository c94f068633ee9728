"""Base agent with LLM calling and structured logging."""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

import structlog
from anthropic import AsyncAnthropic

if TYPE_CHECKING:
    from anthropic.types import Message

    from hiring_pipeline_core.config.settings import Settings

logger = structlog.get_logger()


class BaseAgent:
    """Base class for agents that call the reasoning service."""

    agent_name: str = "base"

    def __init__(self, settings: Settings, client: AsyncAnthropic | None = None) -> None:
        """Initialize with settings and an optional preconfigured client."""
        self.settings = settings
        self._client = client or AsyncAnthropic(
            api_key=settings.anthropic_api_key.get_secret_value(),
            timeout=settings.llm_timeout_seconds,
            max_retries=0,
        )

    def _log_start(self, context: dict[str, object] | None = None) -> None:
        """Log agent execution start."""
        logger.info(
            "agent_start",
            agent=self.agent_name,
            **(context or {}),
        )

    def _log_end(
        self, duration: float, context: dict[str, object] | None = None
    ) -> None:
        """Log agent execution end with duration."""
        logger.info(
            "agent_end",
            agent=self.agent_name,
            duration_seconds=round(duration, 2),
            **(context or {}),
        )

    async def _call_llm(
        self,
        messages: list[dict[str, str]],
        model: str,
        max_tokens: int,
        system: str | None = None,
    ) -> str:
        """Send one request and return the concatenated text blocks.

        Exactly one attempt is made; API errors propagate to the caller.
        """
        kwargs: dict[str, object] = {}
        if system:
            kwargs["system"] = system

        start = time.monotonic()
        response: Message = await self._client.messages.create(
            model=model,
            max_tokens=max_tokens,
            messages=messages,  # type: ignore[arg-type]
            **kwargs,  # type: ignore[arg-type]
        )
        elapsed = time.monotonic() - start

        usage = getattr(response, "usage", None)
        logger.debug(
            "llm_call_complete",
            agent=self.agent_name,
            model=model,
            duration=round(elapsed, 2),
            input_tokens=getattr(usage, "input_tokens", 0),
            output_tokens=getattr(usage, "output_tokens", 0),
        )
        return "".join(
            block.text for block in response.content if getattr(block, "type", None) == "text"
        )
