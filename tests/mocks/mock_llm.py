"""Fake Anthropic client returning canned text responses."""

from __future__ import annotations

import json
import types
from typing import Any
from unittest.mock import AsyncMock


def make_message(text: str, input_tokens: int = 1200, output_tokens: int = 300) -> object:
    """Build an object shaped like anthropic.types.Message with one text block."""
    return types.SimpleNamespace(
        content=[types.SimpleNamespace(type="text", text=text)],
        usage=types.SimpleNamespace(input_tokens=input_tokens, output_tokens=output_tokens),
    )


def make_verdict_text(
    score: object = 14,
    qualified: object = True,
    bullets: object | None = None,
    reasoning: str = "Scored against every criterion.",
    *,
    prefix: str = "",
    suffix: str = "",
) -> str:
    """Serialize a verdict object, optionally wrapped in surrounding prose."""
    data: dict[str, Any] = {
        "score": score,
        "qualified": qualified,
        "bullets": bullets
        if bullets is not None
        else [f"Point {i}" for i in range(1, 6)],
        "reasoning": reasoning,
    }
    return f"{prefix}{json.dumps(data)}{suffix}"


def make_anthropic_client(*responses: str, side_effect: Exception | None = None) -> Any:
    """Create a stand-in AsyncAnthropic whose messages.create yields the given texts."""
    client = types.SimpleNamespace(messages=types.SimpleNamespace())
    if side_effect is not None:
        client.messages.create = AsyncMock(side_effect=side_effect)
    elif len(responses) == 1:
        client.messages.create = AsyncMock(return_value=make_message(responses[0]))
    else:
        client.messages.create = AsyncMock(side_effect=[make_message(r) for r in responses])
    return client
