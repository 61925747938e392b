"""Command-line front door for ovhterm.

Loads and validates the configuration, sets up logging, checks the account
credentials against ``/me``, then starts the dashboard. ``--run`` executes
one menu command and prints its output instead.
"""

from __future__ import annotations

import argparse
import shutil
import sys

import structlog

from . import __version__
from .ansi import build_screen_lines
from .commands import CommandState
from .config import AccountConfig, AppConfig, ConfigError, load_config
from .errors import OvhTermError
from .format import highlight_json
from .logs import configure_logging
from .remote import OvhClient, RemoteError
from .remote import endpoints
from .runtime import build_session, locate_menu_item, run_app
from .runtime.app import stdio_is_tty
from .ui_theme import available_theme_names

logger = structlog.get_logger(__name__)


def _positive_int(value: str) -> int:
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be >= 1")
    return parsed


def _default_render_width() -> int:
    return max(1, shutil.get_terminal_size((80, 24)).columns)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ovhterm",
        description="Browse an OVHcloud account from the terminal.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--config", metavar="PATH", help="Config file (default: platform config dir or $OVHTERM_CONFIG).")
    parser.add_argument("--account", help="Account to use instead of general.default_account.")
    parser.add_argument(
        "--theme",
        default=None,
        help=f"UI theme name ({', '.join(available_theme_names())}).",
    )
    parser.add_argument("--style", default="monokai", help="Pygments style for the raw JSON view.")
    parser.add_argument("--no-color", action="store_true", help="Disable color output.")
    parser.add_argument("--run", metavar="TITLE", help="Run one menu command (e.g. 'My information') and print its output.")
    parser.add_argument("--raw", action="store_true", help="With --run, print the JSON payload instead of the report.")
    parser.add_argument(
        "--max-cols",
        type=_positive_int,
        default=None,
        help="Column width for --run output (default: terminal width).",
    )
    return parser


def connect(account: AccountConfig, timeout: float) -> OvhClient:
    return OvhClient(
        account.endpoint,
        account.app_key,
        account.app_secret,
        account.consumer_key,
        timeout=timeout,
    )


def validate_credentials(client: OvhClient) -> None:
    """Fetch ``/me`` once; any ``RemoteError`` propagates."""
    client.get(endpoints.ME)


def run_command(config: AppConfig, account: AccountConfig, client: OvhClient, args: argparse.Namespace) -> int:
    session = build_session(
        client,
        account=account.name,
        ui=config.ui,
        theme_name=args.theme,
        no_color=args.no_color,
        json_style=args.style,
        async_commands=False,
    )
    item = locate_menu_item(session.menu, args.run)
    if item is None or not session.facade.is_bound(item):
        sys.stderr.write(f"ovhterm: no runnable menu entry named {args.run!r}\n")
        return 2
    result = session.facade.execute(item)
    if args.raw and result.payload is not None:
        text = highlight_json(result.payload, style=args.style, no_color=args.no_color or not sys.stdout.isatty())
    else:
        text = result.output
    max_cols = args.max_cols if args.max_cols is not None else _default_render_width()
    sys.stdout.write("\n".join(build_screen_lines(text.rstrip("\n"), max_cols)) + "\n")
    return 0 if result.state is CommandState.COMPLETED else 1


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args.config)
        account = config.account(args.account)
    except ConfigError as exc:
        sys.stderr.write(f"ovhterm: {exc.user_message()}\n")
        return 1

    try:
        configure_logging(config.general.log_level, config.general.log_file)
    except (OSError, ValueError) as exc:
        sys.stderr.write(f"ovhterm: cannot open log file {config.general.log_file}: {exc}\n")
        return 1
    logger.info("startup", version=__version__, account=account.name, endpoint=account.endpoint)

    client = connect(account, config.ui.command_timeout)
    clients = {account.name: client}
    try:
        validate_credentials(client)
    except RemoteError as exc:
        logger.error("credential_check_failed", account=account.name, error=str(exc))
        sys.stderr.write(f"ovhterm: {exc.user_message()}\n")
        client.close()
        return 1

    try:
        if args.run is not None:
            return run_command(config, account, client, args)

        if not stdio_is_tty():
            sys.stderr.write("ovhterm: the dashboard needs an interactive terminal (use --run for scripts)\n")
            return 1

        def connect_account(name: str) -> OvhClient:
            if name not in clients:
                clients[name] = connect(config.account(name), config.ui.command_timeout)
            return clients[name]

        session = build_session(
            client,
            account=account.name,
            accounts=config.account_names(),
            connect_account=connect_account,
            ui=config.ui,
            keybindings=config.keybindings,
            theme_name=args.theme,
            no_color=args.no_color,
            json_style=args.style,
        )
        return run_app(session)
    except OvhTermError as exc:
        logger.error("fatal_error", error=str(exc))
        sys.stderr.write(f"ovhterm: {exc.user_message()}\n")
        return 1
    finally:
        for opened in clients.values():
            opened.close()


__all__ = ["build_parser", "connect", "main", "run_command", "validate_credentials"]
