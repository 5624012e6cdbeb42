"""CLI for gcal-cli - one calendar operation per session.

Usage:
    gcal-cli                                # Authorize, pick a calendar, run one operation
    gcal-cli --credentials ~/client.json    # Use a different OAuth client file
    gcal-cli --token ~/.config/gcal.json    # Cache the token somewhere else
    gcal-cli --time-zone Europe/Berlin      # Interpret entered times in another zone
    gcal-cli --status                       # Show cached token status and exit
"""

from __future__ import annotations

import argparse
import logging
import sys

from gcal_cli.calendar import OPERATIONS, CalendarClient, TimeParser, select_calendar
from gcal_cli.calendar.client import CalendarService
from gcal_cli.calendar.exceptions import InvalidOperationError
from gcal_cli.config import AppConfig, Settings, load_app_config
from gcal_cli.exceptions import GcalCliError
from gcal_cli.google import GoogleOAuth, TokenStoreError
from gcal_cli.prompt import Prompt, console_prompt

logger = logging.getLogger(__name__)


def print_menu() -> None:
    print("\nChoose an operation:")
    for number, (label, _) in OPERATIONS.items():
        print(f"{number}. {label}")


def run_operation(
    service: CalendarService, calendar_id: str, prompt: Prompt, parser: TimeParser
) -> None:
    """Show the menu, read a choice and run that operation.

    Raises:
        InvalidOperationError: If the choice is not on the menu.
    """
    print_menu()
    choice = prompt("\nEnter choice (1-5): ")
    if choice not in OPERATIONS:
        raise InvalidOperationError(choice)

    label, operation = OPERATIONS[choice]
    logger.debug(f"Running operation: {label}")
    operation(service, calendar_id, prompt, parser)


def run_session(
    app: AppConfig,
    settings: Settings,
    prompt: Prompt = console_prompt,
    open_browser: bool = False,
) -> None:
    """Authenticate, select a calendar and run one operation."""
    auth = GoogleOAuth(
        app, token_path=settings.token_path, prompt=prompt, open_browser=open_browser
    )
    transport = auth.obtain()
    service = CalendarClient(transport.build_service("calendar", "v3"))

    try:
        calendar_id = select_calendar(service, prompt)
        run_operation(
            service,
            calendar_id,
            prompt,
            TimeParser(time_format=settings.time_format, time_zone=settings.time_zone),
        )
    except Exception:
        # the session's own error is the one reported
        try:
            auth.persist_refreshed(transport)
        except TokenStoreError as e:
            logger.warning(f"Refreshed token not saved: {e}")
        raise

    auth.persist_refreshed(transport)


def show_status(app: AppConfig, settings: Settings) -> int:
    """Show cached token status."""
    info = GoogleOAuth(app, token_path=settings.token_path).get_token_info()

    if info["status"] == "no_token":
        print(f"No token found at {settings.token_path}")
        return 1

    print(f"Status        : {info['status']}")
    print(f"Scopes        : {', '.join(info.get('scopes', []))}")
    print(f"Expires in    : {info.get('expires_in', 'unknown')}")
    print(f"Refresh token : {'yes' if info['has_refresh_token'] else 'no'}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gcal-cli",
        description="Manage Google Calendar events from the terminal",
    )
    parser.add_argument(
        "--credentials",
        type=str,
        default=None,
        help="Path to OAuth client credentials (default: ./credentials.json)",
    )
    parser.add_argument(
        "--token",
        type=str,
        default=None,
        help="Path to the cached OAuth token (default: ~/token.json)",
    )
    parser.add_argument(
        "--time-zone",
        type=str,
        default=None,
        help="IANA zone used to interpret entered times (default: Asia/Kolkata)",
    )
    parser.add_argument(
        "--open-browser",
        action="store_true",
        help="Open the authorization URL in a browser",
    )
    parser.add_argument(
        "--status",
        action="store_true",
        help="Show cached token status and exit",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv: list[str] | None = None, prompt: Prompt = console_prompt) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv if argv is not None else sys.argv[1:])

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(name)s: %(levelname)s: %(message)s",
    )

    try:
        settings = Settings.from_env(
            credentials_path=args.credentials,
            token_path=args.token,
            time_zone=args.time_zone,
        )
        app = load_app_config(settings.credentials_path)

        if args.status:
            return show_status(app, settings)

        run_session(app, settings, prompt=prompt, open_browser=args.open_browser)
    except GcalCliError as e:
        logger.debug("Session aborted", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
