"""Map an employee profile onto the fixed one-pager placeholder vocabulary.

Tokens are written as ``{{name}}`` in the template slides. The extractor only
reads the profile; ordering of certifications, projects, languages and skills
is taken exactly as the profile provides it.
"""

from __future__ import annotations

from typing import List

from .models import EmployeeProfile, PlaceholderMap

DEFAULT_ANONYMIZED_NAME = "Capgemini Employee"

CERTIFICATION_SLOTS = 2
PROJECT_SLOTS = 4


def placeholder_token(name: str) -> str:
    return "{{" + name + "}}"


def placeholder_vocabulary() -> List[str]:
    """Every token the extractor may emit, in emission order."""
    names = ["fullName"]
    for index in range(CERTIFICATION_SLOTS):
        names.extend([f"since{index}", f"competence{index}"])
    for index in range(PROJECT_SLOTS):
        names.extend([f"projectRole{index}", f"projectIndustry{index}", f"projectName{index}"])
    names.extend(["languages", "skills"])
    return [placeholder_token(name) for name in names]


def extract_placeholders(
    profile: EmployeeProfile,
    *,
    external: bool = False,
    anonymized_name: str = DEFAULT_ANONYMIZED_NAME,
) -> PlaceholderMap:
    placeholders: PlaceholderMap = {
        placeholder_token("fullName"): anonymized_name if external else (profile.full_name or ""),
    }

    for index in range(CERTIFICATION_SLOTS):
        certification = profile.certifications[index] if index < len(profile.certifications) else None
        placeholders[placeholder_token(f"since{index}")] = (
            certification.valid_from if certification and certification.valid_from else ""
        )
        placeholders[placeholder_token(f"competence{index}")] = (
            certification.name if certification and certification.name else ""
        )

    # Missing project slots are left out so the template keeps its own text there.
    for index, project in enumerate(profile.projects[:PROJECT_SLOTS]):
        placeholders[placeholder_token(f"projectRole{index}")] = project.role or ""
        placeholders[placeholder_token(f"projectIndustry{index}")] = project.domain or ""
        placeholders[placeholder_token(f"projectName{index}")] = project.name or ""

    if profile.languages:
        placeholders[placeholder_token("languages")] = ", ".join(
            language.description or "" for language in profile.languages
        )
    if profile.skills:
        placeholders[placeholder_token("skills")] = "\n".join(skill.name or "" for skill in profile.skills)

    return placeholders
