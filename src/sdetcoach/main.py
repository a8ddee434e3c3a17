"""CLI entrypoint for curriculum sessions."""

from __future__ import annotations

import argparse
import json
import logging
from collections.abc import Callable
from typing import cast

from . import __version__
from .config import SessionConfig
from .errors import CatalogError, SessionError, SessionIOError, UnclassifiedCategory
from .models import CurriculumComplete
from .service import SessionController, SessionStep
from .strategies import describe_strategy

InputFn = Callable[[str], str]
PrintFn = Callable[[str], None]
DONE_COMMANDS = {"done", "d", "y", "yes"}
QUIT_COMMANDS = {"q", ":q", "quit", ":quit"}

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_UNCLASSIFIED = 2
EXIT_IO = 3
EXIT_INVALID_CATALOG = 4


def _controller(config: SessionConfig) -> SessionController:
    """Create the session controller for a configuration."""
    return SessionController(config)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sdetcoach",
        description="Work through the SDET curriculum one topic at a time",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--home", help="directory holding the catalog, ledger, lessons and workspace")
    parser.add_argument("--catalog", help="catalog file (JSON or YAML)")
    parser.add_argument("--ledger", help="progress ledger file")
    parser.add_argument("--lessons", help="lesson content directory")
    parser.add_argument("--workspace", help="practice workspace root")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="more log output (repeatable)")
    parser.add_argument("command", nargs="?", default="next", choices=["next", "status", "config"])
    parser.add_argument(
        "--prepare-only",
        action="store_true",
        help="prepare the workspace for the next topic without waiting for confirmation",
    )
    return parser


def _configure_logging(config: SessionConfig, verbose: int) -> None:
    if verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.getLevelName(config.log_level)
        if not isinstance(level, int):
            level = logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def run(argv: list[str] | None = None, input_fn: InputFn = input, print_fn: PrintFn = print) -> int:
    """Run the CLI application."""
    args = _build_parser().parse_args(argv)
    config = SessionConfig.from_env(
        home=args.home,
        catalog_path=args.catalog,
        ledger_path=args.ledger,
        lessons_dir=args.lessons,
        workspace_root=args.workspace,
    )
    _configure_logging(config, args.verbose)

    if args.command == "config":
        print_fn(json.dumps(config.to_dict(), indent=2))
        return EXIT_OK

    try:
        controller = _controller(config)
        if args.command == "status":
            _status_flow(controller, print_fn)
            return EXIT_OK
        return next_step(controller, input_fn, print_fn, wait=not args.prepare_only)
    except UnclassifiedCategory as exc:
        print_fn(f"Error: {exc}")
        print_fn("Add the category to the strategy table before continuing.")
        return EXIT_UNCLASSIFIED
    except SessionIOError as exc:
        print_fn(f"Error: {exc}")
        return EXIT_IO
    except CatalogError as exc:
        print_fn(f"Invalid catalog: {exc}")
        return EXIT_INVALID_CATALOG
    except SessionError as exc:
        print_fn(f"Error: {exc}")
        return EXIT_ERROR


def next_step(controller: SessionController, input_fn: InputFn, print_fn: PrintFn, *, wait: bool = True) -> int:
    """Prepare the next topic and, when asked to, wait for the learner to finish it."""
    outcome = controller.step()
    if outcome is CurriculumComplete:
        print_fn("All topics in the curriculum are complete.")
        return EXIT_OK
    _print_step(cast(SessionStep, outcome), print_fn)
    if not wait:
        print_fn("\nWorkspace ready. Run again when you want to confirm completion.")
        return EXIT_OK

    while True:
        try:
            choice = input_fn("Type 'done' when you have finished the steps (q to stop): ").strip().lower()
        except EOFError:
            choice = "q"
        if choice in DONE_COMMANDS:
            entry = controller.confirm()
            print_fn(f"Recorded {entry.topic_id} as complete.")
            return EXIT_OK
        if choice in QUIT_COMMANDS:
            print_fn("Progress unchanged. Run again to pick up where you left off.")
            return EXIT_OK
        print_fn("Invalid choice.")


def _print_step(step: SessionStep, print_fn: PrintFn) -> None:
    topic = step.topic
    print_fn(f"\n=== {topic.id} ===")
    if topic.description:
        print_fn(topic.description)
    if topic.steps:
        print_fn("\nSteps:")
        for number, text in enumerate(topic.steps, start=1):
            print_fn(f"{number}. {text}")

    print_fn(f"\nWorkspace: {describe_strategy(step.strategy)}")
    changes = step.report.changes
    if changes:
        status_width = max(len(change.status) for change in changes)
        for change in changes:
            print_fn(f"  {change.status:<{status_width}} {change.path}")
    if step.report.conflicts:
        print_fn("Conflicting files were left as they are; compare them with the lesson by hand.")

    if step.has_lesson:
        print_fn(f"\nLesson: {step.lesson_path}")
    else:
        print_fn(f"\nNo lesson found at {step.lesson_path}")


def _status_flow(controller: SessionController, print_fn: PrintFn) -> None:
    """Print curriculum progress."""
    rows = controller.status()
    summary = controller.summary()
    print_fn("\n=== Curriculum Status ===")
    print_fn(f"Completed: {summary.completed}/{summary.total}")
    if not rows:
        print_fn("Catalog is empty.")
        return

    id_width = max(len("Topic"), max(len(row.topic.id) for row in rows))
    category_width = max(len("Category"), max(len(row.topic.category) for row in rows))
    state_width = len("pending")
    header = f"{'Topic':<{id_width}} {'Category':<{category_width}} {'State':<{state_width}} Description"
    print_fn(header)
    print_fn("-" * len(header))
    for row in rows:
        state = "done" if row.completed else ("next" if row.is_next else "pending")
        print_fn(f"{row.topic.id:<{id_width}} {row.topic.category:<{category_width}} {state:<{state_width}} "
                 f"{row.topic.description}")

    stale = controller.stale_topic_ids()
    if stale:
        print_fn(f"\nLedger entries not in the catalog (ignored): {', '.join(stale)}")
    ahead = controller.out_of_order_ids()
    if ahead:
        print_fn(f"Completed ahead of catalog order: {', '.join(ahead)}")


def main_entry() -> None:
    """Console script entrypoint."""
    raise SystemExit(run())


if __name__ == "__main__":  # pragma: no cover
    main_entry()
