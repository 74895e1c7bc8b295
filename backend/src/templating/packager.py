from __future__ import annotations

import io
import logging
import zipfile
from typing import Sequence

from .errors import ValidationError
from .models import GenerationResult, RenderedDocument, is_safe_employee_id

PRESENTATION_MIME_TYPE = "application/vnd.openxmlformats-officedocument.presentationml.presentation"
ZIP_MIME_TYPE = "application/zip"
DEFAULT_EXTENSION = "pptx"
DEFAULT_BUNDLE_FILENAME = "OnePagers.zip"

logger = logging.getLogger(__name__)


def document_filename(employee_id: str, extension: str = DEFAULT_EXTENSION) -> str:
    if not employee_id or not is_safe_employee_id(employee_id):
        raise ValidationError(f"Employee ID '{employee_id}' cannot be used in a file name.")
    return f"OP_{employee_id}.{extension}"


def pack_documents(
    documents: Sequence[RenderedDocument],
    *,
    extension: str = DEFAULT_EXTENSION,
    bundle_filename: str = DEFAULT_BUNDLE_FILENAME,
) -> GenerationResult:
    """Return a single document as-is, or bundle several into one zip archive."""
    if not documents:
        raise ValidationError("Cannot package an empty set of documents.")

    employee_ids = tuple(doc.employee_id for doc in documents)
    if len(set(employee_ids)) != len(employee_ids):
        raise ValidationError("Each employee can only appear once in a bundle.")
    if len(documents) == 1:
        only = documents[0]
        return GenerationResult(
            content=only.content,
            content_type=PRESENTATION_MIME_TYPE,
            filename=document_filename(only.employee_id, extension),
            documents=1,
            employee_ids=employee_ids,
        )

    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, mode="w", compression=zipfile.ZIP_DEFLATED) as zf:
        for doc in documents:
            zf.writestr(document_filename(doc.employee_id, extension), doc.content)

    logger.debug("Bundled %d one-pagers into %s", len(documents), bundle_filename)
    return GenerationResult(
        content=buffer.getvalue(),
        content_type=ZIP_MIME_TYPE,
        filename=bundle_filename,
        documents=len(documents),
        employee_ids=employee_ids,
    )
