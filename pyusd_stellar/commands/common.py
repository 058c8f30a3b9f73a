import argparse
import sys
from typing import Iterable, Optional

from pyusd_stellar.app_logger import setup_logger
from pyusd_stellar.config_reader import Config, load_config
from pyusd_stellar.core.domain.exceptions import PyusdError


class CommandParser(argparse.ArgumentParser):
    """ArgumentParser that exits with status 1 on bad usage, like every other fatal error."""

    def __init__(self, *args, example: Optional[str] = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.example = example

    def error(self, message):
        self.print_usage(sys.stderr)
        if self.example:
            print(f"Example: {self.example}", file=sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def add_env_file_argument(parser: argparse.ArgumentParser):
    parser.add_argument("--env-file", default=".env",
                        help="dotenv file with PRIVATE_KEY, WALLET_ADDRESS, ... (default: .env)")


def bootstrap(env_file: Optional[str]) -> Config:
    setup_logger()
    config = load_config(env_file)
    setup_logger(config.log_level, config.log_file)
    return config


def print_context(config: Config, account_label: str = "Account"):
    print(f"Network: {config.network.value.upper()}")
    print(f"{account_label}: {config.wallet_address}")


def print_asset(config: Config):
    print(f"Asset: {config.asset.to_string()}\n")


def print_error(ex: Exception, hints: Iterable[str] = ()):
    print(f"❌ Error: {ex}", file=sys.stderr)
    hint = getattr(ex, "hint", None) if isinstance(ex, PyusdError) else None
    # bullets sit under "Make sure:", so a repeated lead-in and duplicates are dropped
    bullets = {}
    for line in (h for h in [hint, *hints] if h):
        if line.startswith("Make sure "):
            line = line[len("Make sure "):]
        line = line[:1].upper() + line[1:].rstrip(".")
        bullets.setdefault(line.lower(), line)
    if not bullets:
        return
    if len(bullets) == 1 and hint:
        print(f"\n💡 {hint}", file=sys.stderr)
        return
    print("\n💡 Make sure:", file=sys.stderr)
    for line in bullets.values():
        print(f"   - {line}", file=sys.stderr)
