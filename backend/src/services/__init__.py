"""Service layer for the one-pager backend.

Holds the profile/avatar sources, the batch generation pipeline and the
seed-based cipher helper. Routes and the CLI build services from here.
"""

from .encryption import CipherError, SeedCipher, decrypt, derive_key, encrypt
from .onepager_service import OnePagerService
from .profile_repository import (
    InMemoryProfileRepository,
    ProfileRepository,
    ProfileRepositoryError,
    SupabaseProfileRepository,
)

__all__ = [
    "CipherError",
    "InMemoryProfileRepository",
    "OnePagerService",
    "ProfileRepository",
    "ProfileRepositoryError",
    "SeedCipher",
    "SupabaseProfileRepository",
    "decrypt",
    "derive_key",
    "encrypt",
]
