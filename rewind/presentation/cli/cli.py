"""
CLI Module

Architectural Intent:
- Command-line interface for rewind
- Delegates to the rollback use case via the composition root
- Supports --verbose/--debug flags for log level control

Commands:
- rollback NAME [REVISION]: roll a release back (REVISION 0 = previous)
- history NAME: list the stored revisions of a release
"""

import argparse
import asyncio
import logging
import sys
import traceback
from typing import Optional, Sequence
from rewind.application.dtos.rollback_dtos import RollbackConfiguration
from rewind.composition_root import create_container
from rewind.domain.errors import RewindError
from rewind.domain.value_objects.release_name import ReleaseName
from rewind.infrastructure.config import RewindConfig, load_config
from rewind.infrastructure.logging import configure_logging


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rewind",
        description="Rewind: roll cluster releases back to a previous revision",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable verbose output"
    )
    parser.add_argument(
        "--debug", action="store_true", help="Enable debug output with tracebacks"
    )
    parser.add_argument(
        "--config", "-c", default=None, help="Path to JSON config (default: rewind.json)"
    )
    parser.add_argument(
        "--json-logs", action="store_true", help="Emit logs as JSON lines"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    rollback_parser = subparsers.add_parser(
        "rollback", help="Roll a release back to a previous revision"
    )
    rollback_parser.add_argument("name", help="Release name")
    rollback_parser.add_argument(
        "revision",
        nargs="?",
        type=int,
        default=0,
        help="Revision to roll back to (default: the previous revision)",
    )
    rollback_parser.add_argument(
        "--timeout", type=float, default=None,
        help="Seconds to wait for hooks and readiness",
    )
    rollback_parser.add_argument(
        "--wait", action="store_true", help="Wait until resources are ready"
    )
    rollback_parser.add_argument(
        "--wait-for-jobs", action="store_true",
        help="With --wait, also wait for Jobs to complete",
    )
    rollback_parser.add_argument(
        "--no-hooks", action="store_true", help="Skip rollback hooks"
    )
    rollback_parser.add_argument(
        "--dry-run", action="store_true", help="Simulate without touching anything"
    )
    rollback_parser.add_argument(
        "--server-dry-run", action="store_true",
        help="Submit to the cluster as a server-side dry run",
    )
    rollback_parser.add_argument(
        "--recreate", action="store_true", help="Recreate pods of updated workloads"
    )
    rollback_parser.add_argument(
        "--force", action="store_true", help="Force resource updates by replacement"
    )
    rollback_parser.add_argument(
        "--cleanup-on-fail", action="store_true",
        help="Delete resources created by a failed rollback",
    )
    rollback_parser.add_argument(
        "--history-max", type=int, default=None,
        help="Maximum revisions kept per release (0 = unlimited)",
    )

    history_parser = subparsers.add_parser(
        "history", help="Show the revision history of a release"
    )
    history_parser.add_argument("name", help="Release name")

    return parser


def _rollback_configuration(
    args: argparse.Namespace, config: RewindConfig
) -> RollbackConfiguration:
    defaults = config.rollback
    return RollbackConfiguration(
        revision=args.revision,
        timeout=args.timeout if args.timeout is not None else defaults.timeout_seconds,
        wait=args.wait or defaults.wait,
        wait_for_jobs=args.wait_for_jobs or defaults.wait_for_jobs,
        disable_hooks=args.no_hooks,
        dry_run=args.dry_run,
        server_dry_run=args.server_dry_run,
        recreate=args.recreate,
        force=args.force,
        cleanup_on_fail=args.cleanup_on_fail or defaults.cleanup_on_fail,
        max_history=(
            args.history_max if args.history_max is not None else defaults.max_history
        ),
    )


async def _rollback(args: argparse.Namespace, config: RewindConfig, verbose: bool) -> None:
    container = create_container(config)
    try:
        rollback_config = _rollback_configuration(args, config)
        outcome = await container.rollback.run(args.name, rollback_config)
    except (RewindError, ValueError) as e:
        print(f"[-] Rollback failed: {e}")
        if verbose:
            traceback.print_exc()
        sys.exit(1)

    release = outcome.release
    if rollback_config.dry_run:
        print(
            f"[*] Dry run: {args.name} would become revision {release.revision} "
            f"({release.description})."
        )
        return
    if rollback_config.server_dry_run:
        print(f"[*] Server dry run of {args.name} accepted by the cluster.")
    else:
        print(
            f"[+] Rollback was a success: {args.name} is at revision "
            f"{release.revision} ({release.description})."
        )
    if outcome.result is not None and verbose:
        print(f"[*] Resources: {outcome.result.summary()}")


async def _history(args: argparse.Namespace, config: RewindConfig) -> None:
    try:
        name = ReleaseName(args.name)
    except ValueError as e:
        print(f"[-] {e}")
        sys.exit(1)

    container = create_container(config)
    releases = await container.release_store.history(str(name))
    if not releases:
        print(f"[-] Release not found: {args.name}")
        sys.exit(1)

    print(f"{'REVISION':<10}{'UPDATED':<27}{'STATUS':<18}{'CHART':<24}DESCRIPTION")
    for release in releases:
        updated = release.last_deployed.isoformat(timespec="seconds") if release.last_deployed else "-"
        chart = str(release.chart) if release.chart else "-"
        print(
            f"{release.revision:<10}{updated:<27}{str(release.status):<18}"
            f"{chart:<24}{release.description}"
        )


async def async_main(argv: Optional[Sequence[str]] = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)

    config = load_config(args.config)

    if args.debug:
        level = logging.DEBUG
    elif args.verbose:
        level = logging.INFO
    else:
        level = config.log_level
    configure_logging(level=level, json_format=args.json_logs or config.log_json)

    verbose = args.verbose or args.debug

    if args.command == "rollback":
        await _rollback(args, config, verbose)
        return

    if args.command == "history":
        await _history(args, config)
        return

    parser.print_help()


def main():
    asyncio.run(async_main())


if __name__ == "__main__":
    main()
