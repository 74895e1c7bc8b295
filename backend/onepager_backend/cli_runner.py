from __future__ import annotations

from typing import Optional, Sequence


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Console-script entry point for ``onepager-generate``."""
    from backend.src.cli.generate_onepager import main as entrypoint

    return entrypoint(argv)


if __name__ == "__main__":
    raise SystemExit(main())
