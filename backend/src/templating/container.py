"""Immutable view over a zip-based presentation template.

``TemplateContainer.from_bytes`` parses the package into an ordered tuple of
named parts. Nothing here mutates a parsed container: ``replace_parts``
returns a new container and ``to_bytes`` writes a fresh zip buffer, so a
cached parse can be shared across concurrent renders.
"""

from __future__ import annotations

from dataclasses import dataclass
import io
import logging
import os
from pathlib import Path, PurePosixPath
import threading
import zipfile
from typing import Dict, Iterator, Mapping, Optional, Tuple

from .errors import TemplateError
from .models import _DATACLASS_KWARGS

SLIDE_PART_MARKER = "ppt/slides/slide"
DEFAULT_AVATAR_PART = "ppt/media/image23.png"

logger = logging.getLogger(__name__)


def is_slide_part(name: str) -> bool:
    return SLIDE_PART_MARKER in name


@dataclass(**_DATACLASS_KWARGS)
class TemplatePart:
    name: str
    data: bytes
    info: zipfile.ZipInfo

    @property
    def is_slide(self) -> bool:
        return is_slide_part(self.name)


@dataclass(**_DATACLASS_KWARGS)
class TemplateContainer:
    parts: Tuple[TemplatePart, ...]

    @classmethod
    def from_bytes(cls, data: bytes) -> "TemplateContainer":
        if not data:
            raise TemplateError("Template is empty.", "TEMPLATE_CORRUPT")
        buffer = io.BytesIO(data)
        if not zipfile.is_zipfile(buffer):
            raise TemplateError("Template is not a zip-based presentation.", "TEMPLATE_CORRUPT")

        parts = []
        try:
            with zipfile.ZipFile(buffer) as zf:
                for info in zf.infolist():
                    if _normalize_part_name(info.filename) is None:
                        raise TemplateError(
                            f"Template contains an unsafe part name: {info.filename}", "TEMPLATE_CORRUPT"
                        )
                    parts.append(TemplatePart(name=info.filename, data=zf.read(info), info=info))
        except (
            zipfile.BadZipFile,
            zipfile.LargeZipFile,
            EOFError,
            OSError,
            NotImplementedError,
            RuntimeError,
        ) as exc:
            # Unsupported compression methods and encrypted entries land here too.
            raise TemplateError(f"Template is corrupted: {exc}", "TEMPLATE_CORRUPT") from exc

        if not parts:
            raise TemplateError("Template contains no parts.", "TEMPLATE_CORRUPT")
        return cls(parts=tuple(parts))

    def __iter__(self) -> Iterator[TemplatePart]:
        return iter(self.parts)

    def __len__(self) -> int:
        return len(self.parts)

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(part.name for part in self.parts)

    def get(self, name: str) -> Optional[TemplatePart]:
        for part in self.parts:
            if part.name == name:
                return part
        return None

    def slide_parts(self) -> Tuple[TemplatePart, ...]:
        return tuple(part for part in self.parts if part.is_slide)

    def replace_parts(self, replacements: Mapping[str, bytes]) -> "TemplateContainer":
        """Return a new container with the named parts' payloads swapped."""
        unknown = set(replacements) - set(self.names)
        if unknown:
            raise TemplateError(
                f"Template has no part named {', '.join(sorted(unknown))}", "AVATAR_PART_MISSING"
            )
        return TemplateContainer(
            parts=tuple(
                TemplatePart(name=part.name, data=replacements[part.name], info=part.info)
                if part.name in replacements
                else part
                for part in self.parts
            )
        )

    def to_bytes(self) -> bytes:
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, mode="w", compression=zipfile.ZIP_DEFLATED) as zf:
            for part in self.parts:
                # Copy the metadata so the shared source ZipInfo is never touched by writestr.
                info = zipfile.ZipInfo(part.name, date_time=part.info.date_time)
                info.compress_type = part.info.compress_type
                info.external_attr = part.info.external_attr
                info.create_system = part.info.create_system
                info.comment = part.info.comment
                zf.writestr(info, part.data)
        return buffer.getvalue()


def _normalize_part_name(filename: str) -> Optional[str]:
    # Reject absolute paths or traversal attempts inside the package.
    path = PurePosixPath(filename)
    if path.is_absolute():
        return None
    if any(part == ".." for part in path.parts):
        return None
    return path.as_posix()


class TemplateStore:
    """Loads the template asset from disk and caches its parsed form.

    The cache key includes the file's modification time and size, so
    replacing the asset on disk is picked up on the next ``load``.
    """

    def __init__(self, path: os.PathLike | str) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()
        self._cache: Dict[Tuple[str, int, int], TemplateContainer] = {}

    def load_template_bytes(self) -> bytes:
        try:
            return self.path.read_bytes()
        except FileNotFoundError as exc:
            raise TemplateError(f"Template not found: {self.path}", "TEMPLATE_MISSING") from exc
        except OSError as exc:
            raise TemplateError(f"Template could not be read: {exc}", "TEMPLATE_MISSING") from exc

    def load(self) -> TemplateContainer:
        try:
            stat = self.path.stat()
        except OSError as exc:
            raise TemplateError(f"Template not found: {self.path}", "TEMPLATE_MISSING") from exc

        key = (str(self.path.resolve()), stat.st_mtime_ns, stat.st_size)
        with self._lock:
            cached = self._cache.get(key)
            if cached is not None:
                return cached
            container = TemplateContainer.from_bytes(self.load_template_bytes())
            self._cache = {key: container}
            logger.info("Loaded one-pager template %s (%d parts)", self.path, len(container))
            return container
