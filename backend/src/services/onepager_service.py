"""Generate employee one-pagers from the presentation template.

For every requested employee, in request order: fetch the profile, order its
projects by recency, extract placeholders, render the template (with the
avatar for internal one-pagers), then package the documents. Any failure
aborts the whole batch; no partial bundle is ever returned.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from ..config.settings import Settings, get_settings
from ..templating.container import TemplateContainer, TemplateStore
from ..templating.errors import NotFoundError, TemplateError
from ..templating.models import GenerationRequest, GenerationResult, RenderedDocument
from ..templating.packager import pack_documents
from ..templating.placeholders import extract_placeholders
from ..templating.renderer import render_document
from .profile_repository import ProfileRepository

logger = logging.getLogger(__name__)


class OnePagerService:
    """Batch one-pager generation over an explicit profile repository."""

    def __init__(
        self,
        repository: ProfileRepository,
        template_store: Optional[TemplateStore] = None,
        *,
        settings: Optional[Settings] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.repository = repository
        self.template_store = template_store or TemplateStore(self.settings.template_path)

    def generate(self, request: GenerationRequest) -> GenerationResult:
        logger.info(
            "Generating %d one-pager(s), type=%s", len(request.employee_ids), request.mode
        )
        template = self.template_store.load()

        documents: List[RenderedDocument] = []
        for employee_id in request.employee_ids:
            documents.append(self._render_employee(employee_id, template, external=request.is_external))

        result = pack_documents(documents, bundle_filename=self.settings.bundle_filename)
        logger.info("Generated %s (%d bytes)", result.filename, result.size_bytes)
        return result

    def _render_employee(
        self, employee_id: str, template: TemplateContainer, *, external: bool
    ) -> RenderedDocument:
        profile = self.repository.fetch_profile(employee_id)
        if profile is None:
            raise NotFoundError(employee_id)
        profile = profile.with_projects_by_recency()

        placeholders = extract_placeholders(
            profile,
            external=external,
            anonymized_name=self.settings.anonymized_name,
        )

        avatar = None if external else self._load_avatar(employee_id)
        content = render_document(
            template,
            placeholders,
            avatar,
            avatar_part=self.settings.avatar_part,
        )
        logger.debug(
            "Rendered one-pager for %s (%d placeholders, avatar=%s)",
            employee_id,
            len(placeholders),
            avatar is not None,
        )
        return RenderedDocument(employee_id=employee_id, content=content)

    def _load_avatar(self, employee_id: str) -> Optional[bytes]:
        avatar = self.repository.fetch_avatar_bytes(employee_id)
        if not avatar:
            return None
        if len(avatar) > self.settings.max_avatar_bytes:
            raise TemplateError(
                f"Avatar for employee {employee_id} exceeds {self.settings.max_avatar_bytes} bytes",
                "AVATAR_TOO_LARGE",
            )
        return avatar
