from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date
import sys
from typing import Dict, Iterable, Optional, Sequence, Tuple

from .errors import ValidationError

_DATACLASS_KWARGS = {"slots": True, "frozen": True} if sys.version_info >= (3, 10) else {"frozen": True}

MODE_INTERNAL = "internal"
MODE_EXTERNAL = "external"
GENERATION_MODES = (MODE_INTERNAL, MODE_EXTERNAL)

PlaceholderMap = Dict[str, str]

_UNSAFE_ID_FRAGMENTS = ("/", "\\", "..", "\x00")


def is_safe_employee_id(employee_id: str) -> bool:
    """IDs end up in file and archive entry names, so path syntax is refused."""
    return not any(fragment in employee_id for fragment in _UNSAFE_ID_FRAGMENTS)


@dataclass(**_DATACLASS_KWARGS)
class Certification:
    code: str
    name: str = ""
    valid_from: str = ""


@dataclass(**_DATACLASS_KWARGS)
class ProjectAssignment:
    role: str = ""
    domain: str = ""
    name: str = ""
    start_date: Optional[str] = None


@dataclass(**_DATACLASS_KWARGS)
class Language:
    description: str


@dataclass(**_DATACLASS_KWARGS)
class Skill:
    name: str


def _start_date_key(project: ProjectAssignment) -> Tuple[int, date]:
    # Undated or unparsable projects sort after every dated one.
    value = (project.start_date or "").strip()
    try:
        return 1, date.fromisoformat(value[:10])
    except ValueError:
        return 0, date.min


@dataclass(**_DATACLASS_KWARGS)
class EmployeeProfile:
    """Read-only snapshot of the employee data a one-pager is built from."""

    employee_id: str
    full_name: str = ""
    certifications: Tuple[Certification, ...] = ()
    projects: Tuple[ProjectAssignment, ...] = ()
    languages: Tuple[Language, ...] = ()
    skills: Tuple[Skill, ...] = ()
    has_avatar: bool = False

    def with_projects_by_recency(self) -> "EmployeeProfile":
        """Return a copy whose projects are ordered newest start date first."""
        ordered = sorted(self.projects, key=_start_date_key, reverse=True)
        return replace(self, projects=tuple(ordered))


@dataclass(**_DATACLASS_KWARGS)
class RenderedDocument:
    employee_id: str
    content: bytes


@dataclass(**_DATACLASS_KWARGS)
class GenerationRequest:
    employee_ids: Tuple[str, ...]
    mode: str = MODE_INTERNAL

    def __post_init__(self) -> None:
        if not self.employee_ids:
            raise ValidationError("There are no valid employee IDs in the request.")
        for employee_id in self.employee_ids:
            if not isinstance(employee_id, str) or not employee_id.strip():
                raise ValidationError("Employee IDs must be non-empty strings.")
            if not is_safe_employee_id(employee_id):
                raise ValidationError(f"Employee ID '{employee_id}' contains path characters.")
        duplicates = sorted({i for i in self.employee_ids if self.employee_ids.count(i) > 1})
        if duplicates:
            raise ValidationError(f"Duplicate employee IDs in the request: {', '.join(duplicates)}.")
        if self.mode not in GENERATION_MODES:
            raise ValidationError(
                f"Unsupported one-pager type '{self.mode}'. Expected one of: {', '.join(GENERATION_MODES)}."
            )

    @classmethod
    def build(cls, employee_ids: Optional[Iterable[str]], mode: str = MODE_INTERNAL) -> "GenerationRequest":
        ids: Sequence[str] = list(employee_ids or [])
        return cls(employee_ids=tuple(ids), mode=(mode or MODE_INTERNAL).lower())

    @property
    def is_external(self) -> bool:
        return self.mode == MODE_EXTERNAL


@dataclass(**_DATACLASS_KWARGS)
class GenerationResult:
    content: bytes
    content_type: str
    filename: str
    documents: int = 1
    employee_ids: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def is_bundle(self) -> bool:
        return self.documents > 1

    @property
    def size_bytes(self) -> int:
        return len(self.content)

