"""ghstatus -- entry point.

Commands that print one GitHub Status API response (``summary``,
``status``, ``components``, ``incidents``, ``scheduled-maintenances``) and
the long-running ``monitor`` command, which assembles:

    GitHubStatusProvider (shared httpx.AsyncClient)
        -> Monitor (tick, detect changes, keep last-known snapshot)
        -> notifiers resolved by name from the NotifierRegistry

The monitor runs until SIGINT/SIGTERM. Startup errors (no notifiers, unknown
or misconfigured notifier, duplicate names) exit with status 1.
"""
from __future__ import annotations

import argparse
import asyncio
import contextlib
import logging
import signal
import sys
from collections.abc import Sequence

import httpx

from core.errors import ConfigurationError, FetchError, GHStatusError
from core.log_setup import configure_logging
from core.render import FORMATS, render
from core.scheduler import DEFAULT_POLL_INTERVAL, FETCH_TIMEOUT_SECONDS, Monitor
from notifiers.base import Notifier
from notifiers.console import STDOUT
from notifiers.defaults import build_registry
from notifiers.settings import NotifierSettings
from providers.githubstatus import GitHubStatusProvider

log = logging.getLogger("ghstatus")

# command -> GitHubStatusProvider method
_INSPECT_COMMANDS = {
    "summary": "fetch_summary",
    "status": "fetch_status",
    "components": "fetch_components",
    ("incidents", "unresolved"): "fetch_unresolved_incidents",
    ("incidents", "all"): "fetch_all_incidents",
    ("scheduled-maintenances", "upcoming"): "fetch_upcoming_scheduled_maintenances",
    ("scheduled-maintenances", "active"): "fetch_active_scheduled_maintenances",
    ("scheduled-maintenances", "all"): "fetch_all_scheduled_maintenances",
}


def _add_format_flag(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-f", "--format", choices=FORMATS, default="yaml",
        help="Output format (default: yaml)",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ghstatus",
        description="Query and monitor the GitHub Status API.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    for command, help_text in (
        ("summary", "Print the summary"),
        ("status", "Print the status"),
        ("components", "Print the list of components"),
    ):
        p = sub.add_parser(command, help=help_text)
        _add_format_flag(p)
        p.set_defaults(method=_INSPECT_COMMANDS[command])

    incidents = sub.add_parser("incidents", help="Print incidents")
    incidents_sub = incidents.add_subparsers(dest="which", required=True)
    for which, help_text in (("unresolved", "Unresolved incidents"), ("all", "All incidents")):
        p = incidents_sub.add_parser(which, help=help_text)
        _add_format_flag(p)
        p.set_defaults(method=_INSPECT_COMMANDS[("incidents", which)])

    maintenances = sub.add_parser("scheduled-maintenances", help="Print scheduled maintenances")
    maintenances_sub = maintenances.add_subparsers(dest="which", required=True)
    for which, help_text in (
        ("upcoming", "Upcoming scheduled maintenances"),
        ("active", "Active scheduled maintenances"),
        ("all", "All scheduled maintenances"),
    ):
        p = maintenances_sub.add_parser(which, help=help_text)
        _add_format_flag(p)
        p.set_defaults(method=_INSPECT_COMMANDS[("scheduled-maintenances", which)])

    available = ", ".join(build_registry(NotifierSettings()).names())
    monitor = sub.add_parser(
        "monitor",
        help="Monitor the GitHub status and report changes",
        description=(
            "Monitor the GitHub Status and report changes to the configured "
            f"notifiers. Available notifiers: {available}."
        ),
    )
    monitor.add_argument(
        "-n", "--notifiers", action="append", default=None, metavar="NAME[,NAME...]",
        help=f"Notifier to use; repeatable (default: {STDOUT})",
    )
    monitor.add_argument(
        "--notify-on-first-run", action="store_true",
        help="Send notifications for the first observed snapshot",
    )
    monitor.add_argument(
        "--interval", type=float, default=DEFAULT_POLL_INTERVAL,
        help="Seconds between polls (default: %(default)g)",
    )
    monitor.add_argument("--fn-filepath", default=None, help="File for the file notifier [FN_FILEPATH]")
    monitor.add_argument("--slack-oauth-token", default=None, help="Slack OAuth token [SLACK_OAUTH_TOKEN]")
    monitor.add_argument("--slack-channel", default=None, help="Slack channel ID or #name [SLACK_CHANNEL]")
    monitor.add_argument(
        "--slack-join-channel", action="store_true", default=None,
        help="Join the Slack channel before posting [SLACK_JOIN_CHANNEL]",
    )
    return parser


def selected_notifiers(raw: Sequence[str] | None) -> list[str]:
    """Flatten repeated and comma-separated ``--notifiers`` values."""
    if raw is None:
        return [STDOUT]
    names: list[str] = []
    for value in raw:
        names.extend(part.strip().lower() for part in value.split(",") if part.strip())
    return names


async def inspect(method: str, fmt: str) -> int:
    async with httpx.AsyncClient() as client:
        provider = GitHubStatusProvider(client)
        try:
            resp = await asyncio.wait_for(getattr(provider, method)(), FETCH_TIMEOUT_SECONDS)
        except (FetchError, asyncio.TimeoutError) as exc:
            print(f"error getting response: {exc}", file=sys.stderr)
            return 1
    print(render(resp, fmt), end="")
    return 0


async def _cleanup(notifiers: Sequence[Notifier]) -> None:
    for notifier in notifiers:
        try:
            await notifier.cleanup()
        except Exception:
            log.exception("Error cleaning up notifier %s", notifier.name)


def _install_signal_handlers(stop: asyncio.Event) -> None:
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        with contextlib.suppress(NotImplementedError, RuntimeError):
            loop.add_signal_handler(sig, stop.set)


async def monitor(args: argparse.Namespace) -> int:
    names = selected_notifiers(args.notifiers)
    if not names:
        log.error("No notifiers configured")
        return 1
    if args.interval <= 0:
        log.error("Poll interval must be positive, got %g", args.interval)
        return 1

    settings = NotifierSettings.from_env().with_overrides(
        file_path=args.fn_filepath,
        slack_oauth_token=args.slack_oauth_token,
        slack_channel=args.slack_channel,
        slack_join_channel=args.slack_join_channel,
    )
    registry = build_registry(settings)

    async with httpx.AsyncClient() as client:
        mon = Monitor(
            GitHubStatusProvider(client),
            notify_on_first_run=args.notify_on_first_run,
        )

        built: list[Notifier] = []
        try:
            for name in names:
                notifier = registry.resolve(name)
                built.append(notifier)
                mon.register(notifier)
        except GHStatusError as exc:
            log.error("Error registering notifier %s: %s", name, exc)
            await _cleanup(built)
            return 1

        stop = asyncio.Event()
        _install_signal_handlers(stop)
        try:
            await mon.run(stop, args.interval)
        finally:
            await _cleanup(built)

    return 0


async def run(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        configure_logging()
    except ConfigurationError as exc:
        print(f"error creating logger: {exc}", file=sys.stderr)
        return 1

    if args.command == "monitor":
        return await monitor(args)
    return await inspect(args.method, args.format)


def main() -> None:
    try:
        code = asyncio.run(run())
    except KeyboardInterrupt:
        print("\nShutting down.")
        code = 0
    sys.exit(code)


if __name__ == "__main__":
    main()
