"""One-pager generation endpoint.

POST /api/onepager/generate renders one presentation per employee and
returns either the single .pptx or a zip bundle as a file download.
"""

from __future__ import annotations

import logging
from urllib.parse import quote

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import Response

from ..services.onepager_service import OnePagerService
from ..services.profile_repository import ProfileRepositoryError
from ..templating.errors import NotFoundError, TemplateError, ValidationError
from ..templating.models import GenerationRequest, GenerationResult
from .dependencies import get_onepager_service
from .models.onepager_models import ErrorResponse, GenerateOnePagerRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/onepager", tags=["OnePager"])


def content_disposition(filename: str) -> str:
    """Attachment header safe for any file name.

    Header values are sent as latin-1, so the plain ``filename`` carries an
    ASCII fallback and ``filename*`` carries the UTF-8 name (RFC 5987).
    """
    fallback = filename.encode("ascii", "replace").decode("ascii")
    fallback = "".join("_" if ch in '"\\?' or ord(ch) < 32 else ch for ch in fallback)
    if fallback == filename:
        return f'attachment; filename="{filename}"'
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename, safe='')}"


def dispatch_result(result: GenerationResult) -> Response:
    return Response(
        content=result.content,
        media_type=result.content_type,
        headers={"Content-Disposition": content_disposition(result.filename)},
    )


@router.post(
    "/generate",
    response_class=Response,
    responses={
        200: {
            "content": {
                "application/vnd.openxmlformats-officedocument.presentationml.presentation": {},
                "application/zip": {},
            },
            "description": "A single one-pager or a zip bundle of one-pagers",
        },
        400: {"model": ErrorResponse, "description": "Invalid request"},
        404: {"model": ErrorResponse, "description": "Employee not found"},
        500: {"model": ErrorResponse, "description": "Template unavailable"},
        502: {"model": ErrorResponse, "description": "Profile source failed"},
    },
)
def generate_onepager(
    payload: GenerateOnePagerRequest,
    service: OnePagerService = Depends(get_onepager_service),
) -> Response:
    try:
        request = GenerationRequest.build(payload.employee_ids, payload.mode)
        result = service.generate(request)
    except ValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"code": "invalid_request", "message": str(exc)},
        ) from exc
    except NotFoundError as exc:
        logger.warning("One-pager generation aborted: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"code": "employee_not_found", "message": str(exc)},
        ) from exc
    except TemplateError as exc:
        logger.exception("One-pager template failure")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"code": "template_error", "message": str(exc)},
        ) from exc
    except ProfileRepositoryError as exc:
        logger.exception("Profile source failure during one-pager generation")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail={"code": "profile_source_error", "message": str(exc)},
        ) from exc

    return dispatch_result(result)
