from __future__ import annotations

from typing import List, Tuple

from ..templating.models import GenerationResult


def format_bytes(size: int) -> str:
    """Represent file sizes with a readable binary unit."""
    step = 1024.0
    units = ["B", "KB", "MB", "GB", "TB", "PB"]
    value = float(size)
    for unit in units:
        if value < step or unit == units[-1]:
            return f"{value:.2f} {unit}"
        value /= step
    return f"{value:.2f} PB"


def result_rows(result: GenerationResult) -> List[Tuple[str, str]]:
    """Label/value pairs describing a generation result."""
    rows = [
        ("File", result.filename),
        ("Type", "zip bundle" if result.is_bundle else "presentation"),
        ("Documents", str(result.documents)),
        ("Size", format_bytes(result.size_bytes)),
    ]
    if result.employee_ids:
        rows.append(("Employees", ", ".join(result.employee_ids)))
    return rows
