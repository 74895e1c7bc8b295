from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Optional, Sequence

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..config.settings import PROFILE_SOURCE_MEMORY, get_settings
from ..services.onepager_service import OnePagerService
from ..services.profile_repository import (
    InMemoryProfileRepository,
    ProfileRepository,
    ProfileRepositoryError,
    SupabaseProfileRepository,
)
from ..templating.container import TemplateStore
from ..templating.errors import OnePagerError
from ..templating.models import MODE_EXTERNAL, MODE_INTERNAL, GenerationRequest
from .display import result_rows

console = Console()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="onepager-generate",
        description="Render employee one-pagers from the presentation template.",
    )
    parser.add_argument("employee_ids", nargs="+", help="Employee IDs, in output order")
    parser.add_argument(
        "--external",
        action="store_true",
        help="Anonymize the employee name and leave the avatar out",
    )
    parser.add_argument(
        "--profiles",
        type=Path,
        help="JSON file with employee records (defaults to Supabase, or ONEPAGER_PROFILES_FILE)",
    )
    parser.add_argument("--template", type=Path, help="Template .pptx to render (overrides settings)")
    parser.add_argument(
        "--output",
        type=Path,
        default=Path.cwd(),
        help="Directory the generated file is written to (default: current directory)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def _build_repository(profiles: Optional[Path]) -> ProfileRepository:
    settings = get_settings()
    if profiles is not None:
        return InMemoryProfileRepository.from_json_file(profiles)
    if settings.profile_source == PROFILE_SOURCE_MEMORY and settings.profiles_file is not None:
        return InMemoryProfileRepository.from_json_file(settings.profiles_file)
    return SupabaseProfileRepository(settings.supabase_url, settings.supabase_key)


def _render_summary(rows, output_path: Path) -> None:
    table = Table(box=box.SIMPLE, show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    for label, value in rows:
        table.add_row(label, value)
    table.add_row("Saved to", str(output_path))
    console.print(Panel.fit(table, title="[bold green]One-pager generated[/bold green]"))


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else get_settings().log_level)

    settings = get_settings()
    template_path = args.template or settings.template_path
    mode = MODE_EXTERNAL if args.external else MODE_INTERNAL

    try:
        repository = _build_repository(args.profiles)
        service = OnePagerService(repository, TemplateStore(template_path), settings=settings)
        result = service.generate(GenerationRequest.build(args.employee_ids, mode))
    except (OnePagerError, ProfileRepositoryError) as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        return 1

    output_dir = args.output
    output_dir.mkdir(parents=True, exist_ok=True)
    output_path = output_dir / result.filename
    output_path.write_bytes(result.content)

    _render_summary(result_rows(result), output_path)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
