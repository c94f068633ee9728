"""Candidate screening prompt template (v1)."""

from __future__ import annotations

from hiring_pipeline_core.constants import BULLET_COUNT, SCREENING_PROMPT_VERSION
from hiring_pipeline_core.models.rubric import (
    Rubric,
    RubricCategory,
    RubricCriterion,
    ScoreBand,
)

DEFAULT_RUBRIC = Rubric(
    version=SCREENING_PROMPT_VERSION,
    categories=[
        RubricCategory(
            name="Education",
            max_points=6,
            criteria=[
                RubricCriterion(
                    description="Federal university (UFG, UFPE, UFCG, UFSC, UFSCar, UFMG, etc.)",
                    points=3,
                ),
                RubricCriterion(description="Inatel / ITA / Unicamp", points=3),
                RubricCriterion(
                    description="ETEC / Federal Institute (IFSP, IFPE, IFPB, etc.)",
                    points=3,
                ),
                RubricCriterion(
                    description="Took part in a social tech program (PROA, ONE, Generation, etc.)",
                    points=2,
                ),
            ],
        ),
        RubricCategory(
            name="Location",
            max_points=4,
            criteria=[
                RubricCriterion(
                    description=(
                        "Established inland tech hub "
                        "(Santa Rita do Sapucaí, São Carlos, Campina Grande)"
                    ),
                    points=4,
                ),
                RubricCriterion(description="Goiânia / inland Goiás", points=3),
                RubricCriterion(description="Recife / Florianópolis / Belo Horizonte", points=2),
                RubricCriterion(
                    description=(
                        "Smaller capital with a tech ecosystem "
                        "(Salvador, Curitiba, Porto Alegre, Fortaleza, Natal)"
                    ),
                    points=1,
                ),
            ],
        ),
        RubricCategory(
            name="Experience",
            max_points=7,
            criteria=[
                RubricCriterion(description="Angular + Node.js + TypeScript stack", points=2),
                RubricCriterion(description="Proven remote work experience", points=2),
                RubricCriterion(
                    description="Comes from a startup / small company (<200 employees)",
                    points=2,
                ),
                RubricCriterion(description="2-4 years of experience", points=1),
            ],
        ),
        RubricCategory(
            name="Proactivity",
            max_points=7,
            criteria=[
                RubricCriterion(description="Junior Enterprise (any position)", points=3),
                RubricCriterion(description="Undergraduate research", points=2),
                RubricCriterion(description="Documented personal projects", points=1),
                RubricCriterion(description="Open source contributions", points=1),
            ],
        ),
    ],
    bands=[
        ScoreBand(min_score=15, label="Ideal candidate"),
        ScoreBand(min_score=10, label="Strong potential"),
        ScoreBand(min_score=6, label="Could grow into the role"),
        ScoreBand(min_score=0, label="Outside the profile"),
    ],
    desired_stack=[
        "JavaScript/TypeScript",
        "Angular",
        "Node.js",
        "Firebase",
        "Playwright",
        "Test Automation / QA",
        "MongoDB",
    ],
    instructions=[
        "Analyze every criterion and add up the points",
        "Be fair but rigorous",
        "If a criterion cannot be determined, do not award its points",
        'Consider synonyms and context (e.g. "UFSC" = Universidade Federal de Santa Catarina)',
        '"Remote" or "Home Office" in an experience counts as remote experience',
    ],
)

SCREENING_SYSTEM = """\
You are a technical recruiter at {company_name}, a startup building AI test \
automation for mission-critical systems. Evaluate the candidate profile against \
the scorecard below.
"""

SCREENING_USER = """\
<scorecard version="{rubric_version}">
{scorecard}
</scorecard>

<desired_stack>
{desired_stack}
</desired_stack>

<instructions>
{instructions}
</instructions>

Return ONLY a valid JSON object in this format (no markdown, no code fences):
{{
  "score": <total points>,
  "qualified": <true if score >= {score_threshold}, false otherwise>,
  "bullets": [{bullet_slots}],
  "reasoning": "<detailed justification of the score, citing each criterion evaluated>"
}}

---

<candidate name="{candidate_name}">
{profile_markdown}
</candidate>
"""


def render_scorecard(rubric: Rubric) -> str:
    """Render rubric categories and bands as Markdown tables."""
    blocks: list[str] = []
    for category in rubric.categories:
        rows = "\n".join(f"| {c.description} | +{c.points} |" for c in category.criteria)
        blocks.append(
            f"### {category.name} (max {category.max_points} points)\n"
            f"| Criterion | Points |\n|---|---|\n{rows}"
        )
    if rubric.bands:
        rows = "\n".join(f"| {b.min_score}+ points | {b.label} |" for b in rubric.bands)
        blocks.append(f"### Classification\n| Score | Classification |\n|---|---|\n{rows}")
    return "\n\n".join(blocks)


def build_screening_prompt(
    rubric: Rubric,
    profile_markdown: str,
    candidate_name: str,
    score_threshold: int,
) -> str:
    """Build the user message for one screening call."""
    bullet_slots = ", ".join(
        f'"<strength or weakness {i}>"' for i in range(1, BULLET_COUNT + 1)
    )
    return SCREENING_USER.format(
        rubric_version=rubric.version,
        scorecard=render_scorecard(rubric),
        desired_stack="\n".join(f"- {item}" for item in rubric.desired_stack) or "- Any",
        instructions="\n".join(
            f"{i}. {text}" for i, text in enumerate(rubric.instructions, start=1)
        ),
        score_threshold=score_threshold,
        bullet_slots=bullet_slots,
        candidate_name=candidate_name,
        profile_markdown=profile_markdown,
    )
