from __future__ import annotations

from functools import lru_cache
import logging

from fastapi import Depends, HTTPException, status

from ..config.settings import PROFILE_SOURCE_MEMORY, Settings, get_settings
from ..services.onepager_service import OnePagerService
from ..services.profile_repository import (
    InMemoryProfileRepository,
    ProfileRepository,
    ProfileRepositoryError,
    SupabaseProfileRepository,
)
from ..templating.container import TemplateStore

logger = logging.getLogger(__name__)


@lru_cache(maxsize=4)
def _template_store_for(path: str) -> TemplateStore:
    return TemplateStore(path)


def get_template_store(settings: Settings = Depends(get_settings)) -> TemplateStore:
    # One store per template path so the parsed template is shared across requests.
    return _template_store_for(str(settings.template_path))


def get_profile_repository(settings: Settings = Depends(get_settings)) -> ProfileRepository:
    try:
        if settings.profile_source == PROFILE_SOURCE_MEMORY:
            if settings.profiles_file is None:
                raise ProfileRepositoryError("ONEPAGER_PROFILES_FILE is required for the memory profile source.")
            return InMemoryProfileRepository.from_json_file(settings.profiles_file)
        return SupabaseProfileRepository(settings.supabase_url, settings.supabase_key)
    except ProfileRepositoryError as exc:
        logger.error("Failed to initialize profile repository: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail={"code": "service_unavailable", "message": str(exc)},
        )


def get_onepager_service(
    repository: ProfileRepository = Depends(get_profile_repository),
    template_store: TemplateStore = Depends(get_template_store),
    settings: Settings = Depends(get_settings),
) -> OnePagerService:
    return OnePagerService(repository, template_store, settings=settings)
