"""CLI entrypoints for gitinspect commands."""

from __future__ import annotations

import argparse
import json
import re
import sys
from pathlib import Path

from dotenv import load_dotenv

from .config import ConfigError, load_config
from .logging import configure_logging
from .orchestrator import Orchestrator

_REPOSITORY_PATTERN = re.compile(r"^([A-Za-z0-9_.-]+)/([A-Za-z0-9_.-]+)$")


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gitinspect",
        description="Summarize GitHub repository architecture with a chat-completion model.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--config",
        default=None,
        help="Path to a .gitinspect.yml file or the directory holding it.",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also append log records (with timestamps) to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the web service.",
    )
    _add_verbose_option(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default=None, help="Interface to bind (default from config).")
    serve_parser.add_argument("--port", type=int, default=None, help="Port to bind (default from config).")

    inspect_parser = subparsers.add_parser(
        "inspect",
        help="Analyze one repository and print the result.",
    )
    _add_verbose_option(inspect_parser, suppress_default=True)
    inspect_parser.add_argument("repository", help="Repository identifier in owner/name form.")
    inspect_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the full inspection as JSON.",
    )

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for gitinspect commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    load_dotenv()
    try:
        config = load_config(Path(args.config) if args.config else None)
    except ConfigError as exc:
        parser.exit(1, f"{exc}\n")
    configure_logging(
        verbose=bool(args.verbose) or config.service.debug,
        log_file=args.log_file,
    )

    if args.command == "serve":
        from .service import run_service

        run_service(host=args.host, port=args.port, config=config)
    elif args.command == "inspect":
        match = _REPOSITORY_PATTERN.match(args.repository.strip().strip("/"))
        if match is None:
            parser.exit(1, f"Invalid repository identifier '{args.repository}'. Use owner/name.\n")
        owner, repo = match.groups()
        inspection = Orchestrator(config).inspect(owner, repo)
        if getattr(args, "json", False):
            print(json.dumps(inspection.to_dict(), indent=2))
            return
        analysis = inspection.analysis
        print(analysis.summary)
        print()
        print("Recommendations:")
        for recommendation in analysis.recommendations:
            print(f"- {recommendation}")
        if not analysis.diagram_source:
            print()
            print("(no architecture diagram generated)")
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


if __name__ == "__main__":
    main(sys.argv[1:])
