"""Employee profile and avatar sources for one-pager generation.

The generation pipeline only depends on the ``ProfileRepository`` protocol.
``SupabaseProfileRepository`` reads the employee graph from Supabase tables;
``InMemoryProfileRepository`` serves fixed records (tests, the CLI, demos).
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Protocol

try:  # pragma: no cover - enforced via tests with mocks
    from supabase import Client, create_client
    SUPABASE_AVAILABLE = True
except ImportError:  # pragma: no cover - dependency missing
    SUPABASE_AVAILABLE = False
    Client = None  # type: ignore[assignment]

from ..templating.models import Certification, EmployeeProfile, Language, ProjectAssignment, Skill

logger = logging.getLogger(__name__)

EMPLOYEE_SELECT = (
    "*, "
    "skills(*, skill(*)), "
    "certifications(*, certification(*)), "
    "projects(*, project(*)), "
    "languages(language(*)), "
    "avatar:avatars(employee_ID)"
)


class ProfileRepositoryError(Exception):
    """Raised when the profile source cannot be queried."""


class ProfileRepository(Protocol):
    def fetch_profile(self, employee_id: str) -> Optional[EmployeeProfile]:
        ...

    def fetch_avatar_bytes(self, employee_id: str) -> Optional[bytes]:
        ...


# ---------------------------------------------------------------------------
# Record mapping
# ---------------------------------------------------------------------------

def _first(record: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        value = record.get(key)
        if value is not None:
            return value
    return default


def _nested(record: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = record.get(key)
    return value if isinstance(value, Mapping) else {}


def _as_text(value: Any) -> str:
    return "" if value is None else str(value)


def _certification(entry: Mapping[str, Any]) -> Certification:
    details = _nested(entry, "certification")
    return Certification(
        code=_as_text(_first(details, "code") or _first(entry, "code", "certification_code")),
        name=_as_text(_first(details, "name") or _first(entry, "name")),
        valid_from=_as_text(_first(entry, "validFrom", "valid_from")),
    )


def _project(entry: Mapping[str, Any]) -> ProjectAssignment:
    details = _nested(entry, "project")
    start = _first(details, "startDate", "start_date") or _first(entry, "startDate", "start_date")
    return ProjectAssignment(
        role=_as_text(_first(entry, "role_code", "role")),
        domain=_as_text(_first(details, "domain_code", "domain") or _first(entry, "domain_code", "domain")),
        name=_as_text(_first(details, "name") or _first(entry, "name")),
        start_date=_as_text(start) or None,
    )


def _language(entry: Any) -> Language:
    if isinstance(entry, str):
        return Language(description=entry)
    details = _nested(entry, "language")
    return Language(description=_as_text(_first(details, "description", "name") or _first(entry, "description")))


def _skill(entry: Any) -> Skill:
    if isinstance(entry, str):
        return Skill(name=entry)
    details = _nested(entry, "skill")
    return Skill(name=_as_text(_first(details, "name") or _first(entry, "name")))


def _as_list(value: Any) -> List[Any]:
    if isinstance(value, list):
        return value
    return []


def profile_from_record(record: Mapping[str, Any], employee_id: Optional[str] = None) -> EmployeeProfile:
    """Build an EmployeeProfile from a nested employee row.

    Accepts both the Supabase/PostgREST shape (``certifications[].certification.name``)
    and the flat shape used by JSON profile files (``certifications[].name``).
    """
    avatar = record.get("avatar")
    return EmployeeProfile(
        employee_id=_as_text(_first(record, "ID", "id", "employee_id", default=employee_id)),
        full_name=_as_text(_first(record, "fullName", "full_name", "name")),
        certifications=tuple(_certification(e) for e in _as_list(record.get("certifications"))),
        projects=tuple(_project(e) for e in _as_list(record.get("projects"))),
        languages=tuple(_language(e) for e in _as_list(record.get("languages"))),
        skills=tuple(_skill(e) for e in _as_list(record.get("skills"))),
        has_avatar=bool(avatar) or bool(record.get("has_avatar")),
    )


def decode_binary(value: Any) -> Optional[bytes]:
    """Normalize a stored binary column into bytes.

    PostgREST returns ``bytea`` as a ``\\x``-prefixed hex string; other
    strings are treated as base64.
    """
    if value is None:
        return None
    if isinstance(value, (bytes, bytearray, memoryview)):
        data = bytes(value)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            if text.startswith("\\x"):
                data = bytes.fromhex(text[2:])
            else:
                data = base64.b64decode(text, validate=True)
        except (ValueError, binascii.Error) as exc:
            raise ProfileRepositoryError(f"Avatar data could not be decoded: {exc}") from exc
    else:
        raise ProfileRepositoryError(f"Unsupported avatar data type: {type(value).__name__}")
    return data or None


# ---------------------------------------------------------------------------
# Supabase
# ---------------------------------------------------------------------------

class SupabaseProfileRepository:
    """Read employee profiles and avatars from Supabase."""

    def __init__(
        self,
        supabase_url: Optional[str] = None,
        supabase_key: Optional[str] = None,
        *,
        client: Optional["Client"] = None,
        employees_table: str = "employees",
        avatars_table: str = "avatars",
    ) -> None:
        self.employees_table = employees_table
        self.avatars_table = avatars_table

        if client is not None:
            self.client = client
            return

        if not SUPABASE_AVAILABLE:
            raise ProfileRepositoryError("Supabase client not available. Install supabase-py.")

        self.supabase_url = supabase_url or os.getenv("SUPABASE_URL")
        self.supabase_key = (
            supabase_key
            or os.getenv("SUPABASE_KEY")
            or os.getenv("SUPABASE_SERVICE_ROLE_KEY")
            or os.getenv("SUPABASE_ANON_KEY")
        )
        if not self.supabase_url or not self.supabase_key:
            raise ProfileRepositoryError("Supabase credentials not configured.")

        try:
            self.client = create_client(self.supabase_url, self.supabase_key)
        except Exception as exc:  # pragma: no cover - client level errors hard to simulate
            raise ProfileRepositoryError(f"Failed to initialize Supabase client: {exc}") from exc

    def fetch_profile(self, employee_id: str) -> Optional[EmployeeProfile]:
        try:
            response = (
                self.client.table(self.employees_table)
                .select(EMPLOYEE_SELECT)
                .eq("ID", employee_id)
                .limit(1)
                .execute()
            )
        except Exception as exc:
            raise ProfileRepositoryError(f"Failed to load employee {employee_id}: {exc}") from exc

        rows = response.data or []
        if not rows:
            return None
        return profile_from_record(rows[0], employee_id=employee_id)

    def fetch_avatar_bytes(self, employee_id: str) -> Optional[bytes]:
        try:
            response = (
                self.client.table(self.avatars_table)
                .select("data")
                .eq("employee_ID", employee_id)
                .limit(1)
                .execute()
            )
        except Exception as exc:
            raise ProfileRepositoryError(f"Failed to load avatar for {employee_id}: {exc}") from exc

        rows = response.data or []
        if not rows:
            return None
        return decode_binary(rows[0].get("data"))


# ---------------------------------------------------------------------------
# In-memory
# ---------------------------------------------------------------------------

class InMemoryProfileRepository:
    """Serve profiles and avatars from plain dictionaries."""

    def __init__(
        self,
        profiles: Iterable[EmployeeProfile] = (),
        avatars: Optional[Mapping[str, bytes]] = None,
    ) -> None:
        self._profiles: Dict[str, EmployeeProfile] = {p.employee_id: p for p in profiles}
        self._avatars: Dict[str, bytes] = dict(avatars or {})

    def fetch_profile(self, employee_id: str) -> Optional[EmployeeProfile]:
        return self._profiles.get(employee_id)

    def fetch_avatar_bytes(self, employee_id: str) -> Optional[bytes]:
        return self._avatars.get(employee_id)

    @classmethod
    def from_json_file(cls, path: Path) -> "InMemoryProfileRepository":
        """Load ``{"employees": [...]}`` (or a bare list) of employee records.

        A record's ``avatar`` may be base64 data or a path relative to the
        JSON file pointing at an image.
        """
        path = Path(path)
        try:
            with path.open("r", encoding="utf-8") as fp:
                payload = json.load(fp)
        except FileNotFoundError as exc:
            raise ProfileRepositoryError(f"Profiles file not found: {path}") from exc
        except json.JSONDecodeError as exc:
            raise ProfileRepositoryError(f"Profiles file is not valid JSON: {exc}") from exc

        records = payload.get("employees", []) if isinstance(payload, dict) else payload
        if not isinstance(records, list):
            raise ProfileRepositoryError("Profiles file must contain a list of employees.")

        profiles: List[EmployeeProfile] = []
        avatars: Dict[str, bytes] = {}
        for record in records:
            if not isinstance(record, dict):
                raise ProfileRepositoryError("Each employee record must be an object.")
            avatar_bytes = _load_avatar_reference(record.get("avatar"), base_dir=path.parent)
            profile = profile_from_record({**record, "avatar": bool(avatar_bytes)})
            if not profile.employee_id:
                raise ProfileRepositoryError("Each employee record needs an ID.")
            profiles.append(profile)
            if avatar_bytes:
                avatars[profile.employee_id] = avatar_bytes

        logger.info("Loaded %d employee profiles from %s", len(profiles), path)
        return cls(profiles, avatars)


def _load_avatar_reference(value: Any, *, base_dir: Path) -> Optional[bytes]:
    if not value or not isinstance(value, str):
        return None
    candidate = base_dir / value
    if candidate.suffix and candidate.is_file():
        return candidate.read_bytes()
    return decode_binary(value)
