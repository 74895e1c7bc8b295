"""Runtime settings for the one-pager service, read from the environment.

A local ``.env`` file is honoured for development. ``get_settings()`` is
cached; tests that change the environment call ``get_settings.cache_clear()``.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

RESOURCES_DIR = Path(__file__).resolve().parent.parent / "res"
DEFAULT_TEMPLATE_PATH = RESOURCES_DIR / "opTemplate" / "OP_template.pptx"

PROFILE_SOURCE_SUPABASE = "supabase"
PROFILE_SOURCE_MEMORY = "memory"


@dataclass(frozen=True)
class Settings:
    template_path: Path = DEFAULT_TEMPLATE_PATH
    avatar_part: str = "ppt/media/image23.png"
    anonymized_name: str = "Capgemini Employee"
    bundle_filename: str = "OnePagers.zip"
    max_avatar_bytes: int = 5 * 1024 * 1024  # 5 MB
    profile_source: str = PROFILE_SOURCE_SUPABASE
    profiles_file: Optional[Path] = None
    supabase_url: Optional[str] = None
    supabase_key: Optional[str] = None
    cipher_seed: Optional[str] = None
    log_level: str = "INFO"


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def load_settings() -> Settings:
    load_dotenv()
    profiles_file = os.getenv("ONEPAGER_PROFILES_FILE")
    return Settings(
        template_path=Path(os.getenv("ONEPAGER_TEMPLATE_PATH") or DEFAULT_TEMPLATE_PATH),
        avatar_part=os.getenv("ONEPAGER_AVATAR_PART") or Settings.avatar_part,
        anonymized_name=os.getenv("ONEPAGER_ANONYMIZED_NAME") or Settings.anonymized_name,
        bundle_filename=os.getenv("ONEPAGER_BUNDLE_FILENAME") or Settings.bundle_filename,
        max_avatar_bytes=_int_env("ONEPAGER_MAX_AVATAR_BYTES", Settings.max_avatar_bytes),
        profile_source=(os.getenv("ONEPAGER_PROFILE_SOURCE") or PROFILE_SOURCE_SUPABASE).lower(),
        profiles_file=Path(profiles_file) if profiles_file else None,
        supabase_url=os.getenv("SUPABASE_URL"),
        supabase_key=(
            os.getenv("SUPABASE_KEY")
            or os.getenv("SUPABASE_SERVICE_ROLE_KEY")
            or os.getenv("SUPABASE_ANON_KEY")
        ),
        cipher_seed=os.getenv("ONEPAGER_CIPHER_SEED"),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()
