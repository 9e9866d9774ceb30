"""Command-line interface for hheat"""

import argparse
import json
import math
import re
import sys
from dataclasses import dataclass
from typing import List, Optional, Union

from dotenv import load_dotenv

from . import __version__
from .api import HiveAPI
from .auth import AuthSession
from .config import TokenStore, load_credentials
from .exceptions import (
    AuthExpiredError,
    ConfigError,
    DeviceError,
    HHeatError,
    InvalidCommandError,
    LoginError,
    MutationError,
    TokenStoreError,
)
from .models import MODE_MANUAL, MODE_OFF, MODE_SCHEDULE, HeatingDevice, find_heating_device

MODE_COMMANDS = {"off": MODE_OFF, "manual": MODE_MANUAL, "schedule": MODE_SCHEDULE}

FIRE = "🔥"

# Plain decimal or exponent notation; no underscores, inf or nan names
NUMBER_RE = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")

# Checked in order, so subclasses come before their bases
EXIT_CODES = [
    (InvalidCommandError, 2),
    (ConfigError, 3),
    (TokenStoreError, 4),
    (LoginError, 5),
    (AuthExpiredError, 6),
    (DeviceError, 7),
    (MutationError, 8),
]


@dataclass
class Command:
    """A parsed command-line action"""
    action: str
    value: Union[str, float, None] = None


def parse_command(argument: Optional[str]) -> Command:
    """
    Turn the command argument into an action.

    Args:
        argument: The positional argument, or None if it was omitted

    Returns:
        Command with action "status", "mode" (value is the API mode) or
        "target" (value is the temperature)

    Raises:
        InvalidCommandError: If the argument is neither a mode nor a number
    """
    if argument is None:
        return Command("status")
    if argument in MODE_COMMANDS:
        return Command("mode", MODE_COMMANDS[argument])

    if not NUMBER_RE.fullmatch(argument):
        raise InvalidCommandError(f"Invalid command: {argument!r} (use off, manual, schedule or a number)", argument)
    target = float(argument)
    if not math.isfinite(target):
        raise InvalidCommandError(f"Invalid target temperature: {argument!r}", argument)
    return Command("target", target)


def format_status(device: HeatingDevice) -> str:
    """Render the three-line status display."""
    indicator = FIRE if device.heating else ""
    return "\n".join([
        f"Mode          {device.mode.lower():>8}",
        f"Temperature   {device.temperature:>7.1f}°",
        f"Target        {device.target:>7.1f}° {indicator}",
    ])


def exit_code_for(error: HHeatError) -> int:
    for error_type, code in EXIT_CODES:
        if isinstance(error, error_type):
            return code
    return 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hheat",
        description="Hive heating control",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  hheat                 # Show mode, temperature and target
  hheat off             # Turn heating off
  hheat manual          # Switch to manual mode
  hheat schedule        # Follow the schedule
  hheat 20.5            # Set target (switches to manual if off)

Credentials are read from ~/.hheat/conf.toml:
  username = "you@example.com"
  password = "secret"

Set HHEAT_HOME (or put it in a .env file) to use another directory.
        """,
    )
    parser.add_argument("command", nargs="?", help="off, manual, schedule or a target temperature")
    parser.add_argument("--json", action="store_true", help="Print results as JSON")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log progress to stderr")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def run(args: argparse.Namespace) -> int:
    """
    Execute one invocation and return the process exit code.

    Errors are reported on stderr as "[-] <message>".
    """
    quiet = not args.verbose

    try:
        command = parse_command(args.command)
        credentials = load_credentials()

        api = HiveAPI(quiet=quiet)
        session = AuthSession(api, credentials, TokenStore())
        device = find_heating_device(session.fetch_products())

        if command.action == "status":
            if args.json:
                print(json.dumps(device.to_dict(), indent=2))
            else:
                print(format_status(device))

        elif command.action == "mode":
            api.set_mode(session.token, device, command.value)
            if args.json:
                print(json.dumps({"success": True, "mode": command.value}))

        else:
            api.set_target_temperature(session.token, device, command.value)
            if args.json:
                result = {"success": True, "target": command.value}
                if device.is_off:
                    result["mode"] = MODE_MANUAL
                print(json.dumps(result))

    except HHeatError as e:
        if args.json:
            print(json.dumps({"error": str(e)}))
        print(f"[-] {e}", file=sys.stderr)
        return exit_code_for(e)

    return 0


def split_negative_numbers(argv: List[str]) -> List[str]:
    """
    Move negative numbers behind "--" so argparse reads them as the command.

    argparse only recognises simple forms like "-1" as negative numbers;
    "-1e1" would otherwise be rejected as an unknown option.
    """
    numbers = [a for a in argv if a.startswith("-") and NUMBER_RE.fullmatch(a)]
    if not numbers or "--" in argv:
        return argv
    return [a for a in argv if a not in numbers] + ["--"] + numbers


def main(argv: Optional[List[str]] = None):
    """Main CLI entry point"""
    load_dotenv()
    if argv is None:
        argv = sys.argv[1:]
    args = build_parser().parse_args(split_negative_numbers(argv))
    sys.exit(run(args))


if __name__ == "__main__":
    main()
