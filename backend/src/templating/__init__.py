"""One-pager templating: placeholder extraction, template rendering and packaging."""

from .container import DEFAULT_AVATAR_PART, TemplateContainer, TemplatePart, TemplateStore
from .errors import NotFoundError, OnePagerError, TemplateError, ValidationError
from .models import (
    MODE_EXTERNAL,
    MODE_INTERNAL,
    Certification,
    EmployeeProfile,
    GenerationRequest,
    GenerationResult,
    Language,
    ProjectAssignment,
    RenderedDocument,
    Skill,
)
from .packager import PRESENTATION_MIME_TYPE, ZIP_MIME_TYPE, pack_documents
from .placeholders import extract_placeholders, placeholder_token
from .renderer import render_document

__all__ = [
    "DEFAULT_AVATAR_PART",
    "MODE_EXTERNAL",
    "MODE_INTERNAL",
    "PRESENTATION_MIME_TYPE",
    "ZIP_MIME_TYPE",
    "Certification",
    "EmployeeProfile",
    "GenerationRequest",
    "GenerationResult",
    "Language",
    "NotFoundError",
    "OnePagerError",
    "ProjectAssignment",
    "RenderedDocument",
    "Skill",
    "TemplateContainer",
    "TemplateError",
    "TemplatePart",
    "TemplateStore",
    "ValidationError",
    "extract_placeholders",
    "pack_documents",
    "placeholder_token",
    "render_document",
]
