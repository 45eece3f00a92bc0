"""CLI entrypoints for dataroom commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import ConfigError, DataRoomConfig, load_config
from .locks import ProjectLockedError
from .logging import configure_logging
from .models import VISIBILITY_TIERS
from .pipeline import GenerationResult, Generator
from .watcher import SyncWatcher


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


def _add_workspace_options(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    parser.add_argument(
        "--root",
        default=argparse.SUPPRESS if suppress_default else ".",
        help="Workspace root holding .dataroom.yml and content (defaults to current directory).",
    )
    parser.add_argument(
        "--log-file",
        default=argparse.SUPPRESS if suppress_default else None,
        help="Also append log records to this file (overrides logging.file in .dataroom.yml).",
    )


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected a whole number of seconds, got {value!r}") from exc
    if number <= 0:
        raise argparse.ArgumentTypeError("interval must be greater than zero")
    return number


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dataroom",
        description="Generate data room sites from exported Google Drive files.",
    )
    _add_verbose_option(parser)
    _add_workspace_options(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate_parser = subparsers.add_parser(
        "generate",
        help="Classify a project's raw files and regenerate its data room pages.",
    )
    _add_verbose_option(generate_parser, suppress_default=True)
    _add_workspace_options(generate_parser, suppress_default=True)
    generate_parser.add_argument(
        "--drive",
        required=True,
        help="Google Drive folder id or folder URL.",
    )
    generate_parser.add_argument(
        "--slug",
        required=True,
        help="Project name; normalised to a URL-safe slug.",
    )
    generate_parser.add_argument(
        "--visibility",
        choices=VISIBILITY_TIERS,
        default=None,
        help="Access tier for the data room (defaults to the configured tier, investor).",
    )

    watch_parser = subparsers.add_parser(
        "watch",
        help="Poll projects and regenerate those whose raw files changed.",
    )
    _add_verbose_option(watch_parser, suppress_default=True)
    _add_workspace_options(watch_parser, suppress_default=True)
    watch_parser.add_argument(
        "--interval",
        type=_positive_int,
        default=None,
        help="Seconds between sync cycles (defaults to the configured interval, 300).",
    )
    watch_parser.add_argument(
        "--once",
        action="store_true",
        help="Run a single sync cycle and exit.",
    )

    serve_parser = subparsers.add_parser(
        "serve",
        help="Expose generation and sync over HTTP.",
    )
    _add_verbose_option(serve_parser, suppress_default=True)
    _add_workspace_options(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default=None, help="Bind address.")
    serve_parser.add_argument("--port", type=int, default=None, help="Bind port.")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for dataroom commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(Path(args.root))
    except ConfigError as exc:
        parser.exit(1, f"{exc}\n")

    log_file = Path(args.log_file) if args.log_file else config.logging.file
    configure_logging(verbose=bool(args.verbose), log_file=log_file)

    if args.command == "generate":
        if not args.drive.strip() or not args.slug.strip():
            parser.error("--drive and --slug must not be empty")
        try:
            result = Generator(config).run(args.drive, args.slug, args.visibility)
        except ProjectLockedError as exc:
            parser.exit(1, f"{exc}\n")
        except (ValueError, OSError) as exc:
            parser.exit(1, f"dataroom generate failed: {exc}\nRun with --verbose for more details.\n")
        _print_next_steps(result, config)
    elif args.command == "watch":
        watcher = SyncWatcher(config)
        if args.once:
            report = watcher.run_cycle()
            print(
                f"Synced {len(report.synced)}, unchanged {len(report.unchanged)}, "
                f"skipped {len(report.skipped)}, failed {len(report.failed)}"
            )
            if report.failed:
                parser.exit(1)
            return
        try:
            watcher.run_forever(args.interval)
        except KeyboardInterrupt:
            watcher.stop()
            print("Watcher stopped")
    elif args.command == "serve":
        from .service import run_service

        run_service(
            config,
            host=args.host or config.service.host,
            port=args.port or config.service.port,
        )
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _print_next_steps(result: GenerationResult, config: DataRoomConfig) -> None:
    slug = result.project.slug
    print(f'Done! Project "{slug}" generated ({result.project.file_count} documents, v{result.project.version}).')
    print("")
    print("Next steps:")
    print(f"  1. Place exported Drive files in: {_relativize(result.paths.raw_dir, config.root)}/")
    print("  2. Re-run this command to update the MDX pages")
    print(f"  3. Visit /projects/{slug} on the docs site")


def _relativize(path: Path, root: Path) -> str:
    try:
        return str(path.relative_to(root))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
