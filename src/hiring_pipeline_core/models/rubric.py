"""Scoring rubric: category -> weighted criteria, plus classification bands."""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError, model_validator

from hiring_pipeline_core.exceptions import RubricError


class RubricCriterion(BaseModel):
    """A single criterion and the points it awards."""

    description: str = Field(description="What the candidate must show")
    points: int = Field(ge=0, description="Points awarded when met")


class RubricCategory(BaseModel):
    """A group of criteria with a points cap."""

    name: str = Field(description="Category name")
    max_points: int = Field(ge=0, description="Maximum points for the category")
    criteria: list[RubricCriterion] = Field(min_length=1, description="Scored criteria")


class ScoreBand(BaseModel):
    """Classification label for a score range."""

    min_score: int = Field(description="Inclusive lower bound")
    label: str = Field(description="Classification label")


class Rubric(BaseModel):
    """Versioned scoring policy sent verbatim to the reasoning service."""

    version: str = Field(description="Rubric version, bump on any change")
    categories: list[RubricCategory] = Field(min_length=1)
    bands: list[ScoreBand] = Field(default_factory=list)
    desired_stack: list[str] = Field(default_factory=list)
    instructions: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def sort_bands(self) -> Rubric:
        """Keep bands ordered from highest to lowest score."""
        self.bands = sorted(self.bands, key=lambda b: b.min_score, reverse=True)
        return self

    @property
    def max_score(self) -> int:
        """Sum of category caps."""
        return sum(c.max_points for c in self.categories)


def load_rubric(path: Path) -> Rubric:
    """Load a rubric from a JSON file."""
    try:
        return Rubric.model_validate(json.loads(path.read_text()))
    except (OSError, json.JSONDecodeError, ValidationError) as e:
        msg = f"Failed to load rubric from {path}: {e}"
        raise RubricError(msg) from e
