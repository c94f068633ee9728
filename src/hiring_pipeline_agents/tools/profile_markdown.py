"""Deterministic Markdown rendering of scraped LinkedIn profiles."""

from __future__ import annotations

from hiring_pipeline_core.models.application import Education, Experience, LinkedInProfile
from hiring_pipeline_core.models.scrape import ScrapedProfile

_UNKNOWN = "Unknown"
_NOT_AVAILABLE = "N/A"
_DATE_RANGE_SEPARATOR = " - "


def _clean(value: str | None) -> str | None:
    """Strip a text field, mapping blank strings to None."""
    if value is None:
        return None
    value = value.strip()
    return value or None


def _distinct_skills(skills: list[str]) -> list[str]:
    """Drop blanks and duplicates, keeping first-seen order."""
    seen: set[str] = set()
    result: list[str] = []
    for skill in skills:
        cleaned = _clean(skill)
        if cleaned and cleaned not in seen:
            seen.add(cleaned)
            result.append(cleaned)
    return result


def render_profile_markdown(profile: ScrapedProfile) -> str:
    """Render a scraped profile into the normalized document used for scoring.

    Section order is fixed: name, headline, location, About, Experience,
    Education, Skills. Sections without data are left out entirely. The
    output depends only on the input, so identical profiles always render
    to identical text.
    """
    lines: list[str] = [f"# {_clean(profile.full_name) or _UNKNOWN}", ""]

    headline = _clean(profile.headline)
    if headline:
        lines += [f"**{headline}**", ""]

    location = _clean(profile.location)
    if location:
        lines += [f"Location: {location}", ""]

    summary = _clean(profile.summary)
    if summary:
        lines += ["## About", summary, ""]

    if profile.experience:
        lines.append("## Experience")
        for exp in profile.experience:
            title = _clean(exp.title) or _NOT_AVAILABLE
            company = _clean(exp.company_name) or _NOT_AVAILABLE
            lines.append(f"### {title} @ {company}")
            date_range = _clean(exp.date_range)
            if date_range:
                lines.append(f"Period: {date_range}")
            exp_location = _clean(exp.location)
            if exp_location:
                lines.append(f"Location: {exp_location}")
            description = _clean(exp.description)
            if description:
                lines += ["", description]
            lines.append("")

    if profile.education:
        lines.append("## Education")
        for edu in profile.education:
            lines.append(f"### {_clean(edu.school_name) or _NOT_AVAILABLE}")
            degree = " - ".join(
                part for part in (_clean(edu.degree_name), _clean(edu.field_of_study)) if part
            )
            if degree:
                lines.append(degree)
            date_range = _clean(edu.date_range)
            if date_range:
                lines.append(f"Period: {date_range}")
            lines.append("")

    skills = _distinct_skills(profile.skills)
    if skills:
        lines += ["## Skills", ", ".join(skills), ""]

    return "\n".join(lines)


def _split_date_range(date_range: str | None) -> tuple[str | None, str | None]:
    """Split 'Jan 2020 - Present' into its start and end parts."""
    cleaned = _clean(date_range)
    if cleaned is None:
        return None, None
    start, sep, end = cleaned.partition(_DATE_RANGE_SEPARATOR)
    return _clean(start), _clean(end) if sep else None


def build_linkedin_profile(profile: ScrapedProfile) -> LinkedInProfile:
    """Project a scraped profile into the structured form stored on the application."""
    experience: list[Experience] = []
    for exp in profile.experience:
        start_date, end_date = _split_date_range(exp.date_range)
        experience.append(
            Experience(
                company=_clean(exp.company_name) or _UNKNOWN,
                title=_clean(exp.title) or _UNKNOWN,
                location=_clean(exp.location),
                start_date=start_date,
                end_date=end_date,
                description=_clean(exp.description),
            )
        )

    education = [
        Education(
            school=_clean(edu.school_name) or _UNKNOWN,
            degree=_clean(edu.degree_name),
            field=_clean(edu.field_of_study),
            date_range=_clean(edu.date_range),
        )
        for edu in profile.education
    ]

    return LinkedInProfile(
        headline=_clean(profile.headline),
        location=_clean(profile.location),
        summary=_clean(profile.summary),
        education=education,
        experience=experience,
        skills=_distinct_skills(profile.skills),
        raw_markdown=render_profile_markdown(profile),
    )
