import argparse
import os
from functools import lru_cache
from pathlib import Path

from parley.core.helpers.utils import LOG_LEVELS

DEFAULT_CONFIGFILE = "parley.yaml"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="parley",
        description=(
            "Open an interactive text session over a duplex connection.\n\n"
            "Messages received from the peer are printed as they arrive while\n"
            "every line typed is sent. Type 'exit' (or close the input) to leave."
        ),
        formatter_class=argparse.RawTextHelpFormatter
    )

    parser.add_argument(
        "url",
        nargs="?",
        help=(
            "Endpoint to connect to, overriding the configuration file.\n"
            "Supported schemes: ws, wss (websocket), tcp, tcps (framed TCP).\n\n"
            "Example:\n"
            "  ws://127.0.0.1:8765/chat"
        ),
    )

    parser.add_argument(
        "-c", "--config",
        type=str,
        help="Path to a parley configuration file"
    )

    parser.add_argument(
        "-l", "--log-level",
        type=str,
        default="WARNING",
        choices=LOG_LEVELS,
        help=(
            "Logging verbosity, written to stderr.\n"
            "Choose among: DEBUG, INFO, WARNING, ERROR, CRITICAL.\n\n"
            "DEBUG    → verbose output, useful for tracing the session.\n"
            "INFO     → connection lifecycle events.\n"
            "WARNING  → only warnings and errors (default).\n"
            "ERROR    → only errors.\n"
            "CRITICAL → only critical failures."
        ),
    )

    return parser


@lru_cache
def get_cli_args() -> argparse.Namespace:
    return build_parser().parse_args()


def find_configfile(raw: str | None) -> Path | None:
    # Priority: CLI > ENV > default file in current working directory
    raw = raw or os.getenv("PARLEYCONFIG")

    if raw is None:
        file = Path.cwd() / DEFAULT_CONFIGFILE
        return file if file.is_file() else None

    file = Path(raw)
    if not file.is_file():
        raise SystemExit(
            f"[config] Configuration file not found: '{file}'.\n"
            "  - Use --config <file.yaml>\n"
            "  - Or set the PARLEYCONFIG environment variable\n"
            f"  - Or place a '{DEFAULT_CONFIGFILE}' file in the current working directory."
        )

    return file


@lru_cache
def get_configfile() -> Path | None:
    return find_configfile(get_cli_args().config)
