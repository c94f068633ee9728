"""Static role registry: slug -> display name, challenge link, active flag."""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from hiring_pipeline_core.exceptions import RoleRegistryError


class Role(BaseModel):
    """An open position candidates can apply to."""

    slug: str = Field(description="URL-safe role identifier")
    name: str = Field(description="Display name")
    challenge_url: str = Field(description="Link to the technical challenge")
    description: str = Field(default="", description="Short role description")
    active: bool = Field(default=True, description="Whether the role accepts applications")


DEFAULT_ROLES: dict[str, Role] = {
    role.slug: role
    for role in (
        Role(
            slug="sdet-jr",
            name="SDET Jr",
            challenge_url="https://github.com/voidr-co/sdet-jr-challenge",
            description="Software Development Engineer in Test - Junior",
        ),
        Role(
            slug="sdet-pleno",
            name="SDET Pleno",
            challenge_url="https://github.com/voidr-co/sdet-pleno-challenge",
            description="Software Development Engineer in Test - Mid-level",
        ),
        Role(
            slug="fullstack-jr",
            name="Full Stack Developer Jr",
            challenge_url="https://github.com/voidr-co/fullstack-jr-challenge",
            description="Full Stack Developer - Junior",
        ),
        Role(
            slug="fullstack-pleno",
            name="Full Stack Developer Pleno",
            challenge_url="https://github.com/voidr-co/fullstack-pleno-challenge",
            description="Full Stack Developer - Mid-level",
        ),
        Role(
            slug="frontend-jr",
            name="Frontend Developer Jr",
            challenge_url="https://github.com/voidr-co/frontend-jr-challenge",
            description="Frontend Developer - Junior",
        ),
        Role(
            slug="backend-jr",
            name="Backend Developer Jr",
            challenge_url="https://github.com/voidr-co/backend-jr-challenge",
            description="Backend Developer - Junior",
        ),
    )
}


class RoleRegistry:
    """Read-only lookup over the configured roles."""

    def __init__(self, roles: dict[str, Role] | None = None) -> None:
        """Initialize with a slug -> Role mapping (defaults to DEFAULT_ROLES)."""
        self._roles = dict(roles if roles is not None else DEFAULT_ROLES)

    @classmethod
    def from_file(cls, path: Path) -> RoleRegistry:
        """Load roles from a JSON list of role objects."""
        try:
            data = json.loads(path.read_text())
            roles = [Role(**item) for item in data]
        except (OSError, json.JSONDecodeError, TypeError, ValidationError) as e:
            msg = f"Failed to load roles from {path}: {e}"
            raise RoleRegistryError(msg) from e
        return cls({role.slug: role for role in roles})

    @classmethod
    def from_settings(cls, roles_path: Path | None) -> RoleRegistry:
        """Build the registry from an override file, or the built-in roles."""
        if roles_path is None:
            return cls()
        return cls.from_file(roles_path)

    def get(self, slug: str) -> Role | None:
        return self._roles.get(slug)

    def is_active(self, slug: str) -> bool:
        role = self._roles.get(slug)
        return role is not None and role.active

    def active_roles(self) -> list[Role]:
        """Return active roles in registry order."""
        return [role for role in self._roles.values() if role.active]
