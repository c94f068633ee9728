"""Candidate scorer agent: rubric prompt in, sanitized verdict out."""

from __future__ import annotations

import json
import math
import time
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

import anthropic
import structlog

from hiring_pipeline_agents.agents.base import BaseAgent
from hiring_pipeline_agents.prompts.candidate_scorer import (
    DEFAULT_RUBRIC,
    SCREENING_SYSTEM,
    build_screening_prompt,
)
from hiring_pipeline_core.constants import BULLET_COUNT, BULLET_PLACEHOLDER
from hiring_pipeline_core.exceptions import (
    InvalidVerdictError,
    ScoringParseError,
    ScoringServiceError,
)
from hiring_pipeline_core.models.application import Evaluation
from hiring_pipeline_core.models.rubric import Rubric, load_rubric

if TYPE_CHECKING:
    from anthropic import AsyncAnthropic

    from hiring_pipeline_core.config.settings import Settings

logger = structlog.get_logger()


def extract_json_object(text: str) -> dict[str, Any]:
    """Parse the first top-level brace-delimited span in free-form text.

    Braces inside JSON strings are ignored while scanning, so a reasoning
    field containing "{" does not end the span early.
    """
    start = text.find("{")
    if start == -1:
        msg = "No JSON object found in scoring response"
        raise ScoringParseError(msg)

    depth = 0
    in_string = False
    escaped = False
    end = -1
    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                end = i
                break

    if end == -1:
        msg = "Unterminated JSON object in scoring response"
        raise ScoringParseError(msg)

    try:
        parsed = json.loads(text[start : end + 1])
    except json.JSONDecodeError as e:
        msg = f"Failed to parse scoring response JSON: {e}"
        raise ScoringParseError(msg) from e

    if not isinstance(parsed, dict):
        msg = "Scoring response JSON is not an object"
        raise ScoringParseError(msg)
    return parsed


def normalize_bullets(bullets: list[str]) -> list[str]:
    """Pad with the placeholder or truncate so exactly BULLET_COUNT remain."""
    cleaned = [b.strip() for b in bullets][:BULLET_COUNT]
    return cleaned + [BULLET_PLACEHOLDER] * (BULLET_COUNT - len(cleaned))


def parse_verdict(data: dict[str, Any], score_threshold: float) -> Evaluation:
    """Validate a parsed verdict and build the evaluation.

    The remote ``qualified`` flag is ignored: qualification is always
    recomputed as ``score >= score_threshold``.
    """
    score = data.get("score")
    if isinstance(score, bool) or not isinstance(score, (int, float)) or not math.isfinite(score):
        msg = f"Verdict score must be a number, got {score!r}"
        raise InvalidVerdictError(msg)

    bullets = data.get("bullets")
    if not isinstance(bullets, list) or not all(isinstance(b, str) for b in bullets):
        msg = "Verdict bullets must be a list of strings"
        raise InvalidVerdictError(msg)

    reasoning = data.get("reasoning")
    return Evaluation(
        score=score,
        qualified=score >= score_threshold,
        bullets=normalize_bullets(bullets),
        reasoning=reasoning if isinstance(reasoning, str) else "",
        evaluated_at=datetime.now(UTC),
    )


class CandidateScorerAgent(BaseAgent):
    """Score a candidate's normalized profile against the screening rubric."""

    agent_name = "candidate_scorer"

    def __init__(
        self,
        settings: Settings,
        client: AsyncAnthropic | None = None,
        rubric: Rubric | None = None,
    ) -> None:
        """Initialize with settings, optional client and optional rubric override."""
        super().__init__(settings, client)
        if rubric is not None:
            self.rubric = rubric
        elif settings.rubric_path is not None:
            self.rubric = load_rubric(settings.rubric_path)
        else:
            self.rubric = DEFAULT_RUBRIC

    async def evaluate(
        self,
        document: str,
        candidate_name: str,
        score_threshold: float,
    ) -> Evaluation:
        """Send one scoring request and return the sanitized verdict.

        Raises ScoringServiceError if the call fails, ScoringParseError if the
        response holds no parsable JSON object, InvalidVerdictError if the
        object lacks a numeric score or a bullet list.
        """
        self._log_start({"rubric_version": self.rubric.version})
        start = time.monotonic()

        prompt = build_screening_prompt(
            self.rubric,
            profile_markdown=document,
            candidate_name=candidate_name,
            score_threshold=score_threshold,
        )
        try:
            response_text = await self._call_llm(
                messages=[{"role": "user", "content": prompt}],
                model=self.settings.scoring_model,
                max_tokens=self.settings.scoring_max_tokens,
                system=SCREENING_SYSTEM.format(company_name=self.settings.company_name),
            )
        except anthropic.APIError as e:
            msg = f"Reasoning service call failed: {e}"
            raise ScoringServiceError(msg) from e

        try:
            data = extract_json_object(response_text)
        except ScoringParseError:
            logger.error(
                "scoring_response_unparsable",
                response_chars=len(response_text),
                response_head=response_text[:200],
            )
            raise

        evaluation = parse_verdict(data, score_threshold)
        remote_qualified = data.get("qualified")
        if isinstance(remote_qualified, bool) and remote_qualified != evaluation.qualified:
            logger.info(
                "scoring_qualified_overridden",
                score=evaluation.score,
                threshold=score_threshold,
                remote_qualified=remote_qualified,
            )

        self._log_end(
            time.monotonic() - start,
            {"score": evaluation.score, "qualified": evaluation.qualified},
        )
        return evaluation
