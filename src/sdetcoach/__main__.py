"""Module entrypoint for `python -m sdetcoach`."""

from __future__ import annotations

from .main import main_entry


def main() -> None:
    """Start a session from the command line."""
    main_entry()


if __name__ == "__main__":  # pragma: no cover
    main()
