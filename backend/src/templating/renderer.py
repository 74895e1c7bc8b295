from __future__ import annotations

import logging
from typing import Dict, Mapping, Optional, Union
from xml.sax.saxutils import escape

from .container import DEFAULT_AVATAR_PART, TemplateContainer
from .errors import TemplateError

logger = logging.getLogger(__name__)


def substitute_tokens(text: str, placeholders: Mapping[str, str], *, escape_values: bool = True) -> str:
    """Replace every token with its value using plain substring replacement.

    Slide parts are XML, so values are escaped unless told otherwise; the
    tokens themselves are matched literally and never treated as patterns.
    """
    for token, value in placeholders.items():
        if not token or token not in text:
            continue
        replacement = escape(value) if escape_values else value
        text = text.replace(token, replacement)
    return text


def render_document(
    template: Union[bytes, TemplateContainer],
    placeholders: Mapping[str, str],
    avatar_bytes: Optional[bytes] = None,
    *,
    avatar_part: str = DEFAULT_AVATAR_PART,
    escape_values: bool = True,
) -> bytes:
    container = template if isinstance(template, TemplateContainer) else TemplateContainer.from_bytes(template)

    replacements: Dict[str, bytes] = {}
    if avatar_bytes:
        if container.get(avatar_part) is None:
            raise TemplateError(f"Template has no avatar part {avatar_part}", "AVATAR_PART_MISSING")
        replacements[avatar_part] = bytes(avatar_bytes)

    for part in container.slide_parts():
        try:
            text = part.data.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise TemplateError(f"Slide part {part.name} is not valid UTF-8", "TEMPLATE_CORRUPT") from exc
        updated = substitute_tokens(text, placeholders, escape_values=escape_values)
        if updated != text:
            replacements[part.name] = updated.encode("utf-8")

    logger.debug(
        "Rendering template: %d slide parts, %d parts replaced, avatar=%s",
        len(container.slide_parts()),
        len(replacements),
        avatar_part in replacements,
    )
    return container.replace_parts(replacements).to_bytes()
