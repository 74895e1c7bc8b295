"""
Pytest configuration and fixtures for the one-pager backend.
"""
from __future__ import annotations

import io
from pathlib import Path
import sys
import zipfile

import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from backend.src.config.settings import Settings, get_settings
from backend.src.services.profile_repository import InMemoryProfileRepository
from backend.src.templating.models import (
    Certification,
    EmployeeProfile,
    Language,
    ProjectAssignment,
    Skill,
)

AVATAR_PART = "ppt/media/image23.png"
TEMPLATE_AVATAR = b"\x89PNG\r\n\x1a\ntemplate-avatar"

SLIDE_ONE = (
    '<?xml version="1.0" encoding="UTF-8"?>'
    "<p:sld><a:t>{{fullName}}</a:t>"
    "<a:t>{{since0}} {{competence0}}</a:t>"
    "<a:t>{{since1}} {{competence1}}</a:t>"
    "<a:t>{{languages}}</a:t>"
    "<a:t>{{skills}}</a:t></p:sld>"
)
SLIDE_TWO = (
    '<?xml version="1.0" encoding="UTF-8"?>'
    "<p:sld>"
    + "".join(
        f"<a:t>{{{{projectRole{i}}}}} | {{{{projectIndustry{i}}}}} | {{{{projectName{i}}}}}</a:t>"
        for i in range(4)
    )
    + "</p:sld>"
)
SLIDE_STATIC = '<?xml version="1.0" encoding="UTF-8"?><p:sld><a:t>Static footer</a:t></p:sld>'


def build_template(parts=None) -> bytes:
    """Build a small zip package shaped like a presentation template."""
    if parts is None:
        parts = [
            ("[Content_Types].xml", b"<Types/>"),
            ("ppt/presentation.xml", b"<p:presentation>{{fullName}}</p:presentation>"),
            ("ppt/slides/slide1.xml", SLIDE_ONE.encode("utf-8")),
            ("ppt/slides/slide2.xml", SLIDE_TWO.encode("utf-8")),
            ("ppt/slides/slide3.xml", SLIDE_STATIC.encode("utf-8")),
            ("ppt/slides/_rels/slide1.xml.rels", b"<Relationships/>"),
            (AVATAR_PART, TEMPLATE_AVATAR),
        ]
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        for name, data in parts:
            zf.writestr(zipfile.ZipInfo(name, date_time=(2024, 1, 1, 0, 0, 0)), data)
    return buffer.getvalue()


def read_parts(data: bytes) -> dict:
    with zipfile.ZipFile(io.BytesIO(data)) as zf:
        return {name: zf.read(name) for name in zf.namelist()}


@pytest.fixture
def template_bytes() -> bytes:
    return build_template()


@pytest.fixture
def template_file(tmp_path, template_bytes) -> Path:
    path = tmp_path / "OP_template.pptx"
    path.write_bytes(template_bytes)
    return path


@pytest.fixture
def settings(template_file) -> Settings:
    return Settings(template_path=template_file)


@pytest.fixture
def jane_profile() -> EmployeeProfile:
    return EmployeeProfile(
        employee_id="E1",
        full_name="Jane Doe",
        certifications=(
            Certification(code="AZ-900", name="Azure Fundamentals", valid_from="2021-05"),
            Certification(code="PMP", name="Project Management Professional", valid_from="2019-02"),
        ),
        projects=(
            ProjectAssignment(role="Developer", domain="Retail", name="Shop Rewrite", start_date="2019-03-01"),
            ProjectAssignment(role="Architect", domain="Banking", name="Core Ledger", start_date="2023-01-15"),
        ),
        languages=(Language("English"), Language("German")),
        skills=(Skill("Python"), Skill("SAP")),
        has_avatar=True,
    )


@pytest.fixture
def sam_profile() -> EmployeeProfile:
    return EmployeeProfile(employee_id="E2", full_name="Sam Lee")


@pytest.fixture
def avatar_bytes() -> bytes:
    return b"\x89PNG\r\n\x1a\njane-avatar"


@pytest.fixture
def repository(jane_profile, sam_profile, avatar_bytes) -> InMemoryProfileRepository:
    return InMemoryProfileRepository([jane_profile, sam_profile], {"E1": avatar_bytes})


@pytest.fixture(autouse=True)
def _reset_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
