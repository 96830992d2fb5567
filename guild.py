#!/usr/bin/env python3
"""
Guild Roster - player and group management for a guild
Keeps the player list, the groups built from it and the rules tying them together.
"""

import argparse
import json
import logging
import os
import sys
import threading
from typing import Dict, Optional

from colorama import init, Fore, Style
from dotenv import load_dotenv

from roster.repositories import GroupRepository, PlayerRepository
from roster.services import (
    GroupService, ImportService, IntegrityService, PlayerService, class_catalog,
)

# Initialize colorama for cross-platform colored terminal output
init(autoreset=True)

# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------

def setup_logging(level: str = 'WARNING') -> logging.Logger:
    """Configure the root guild logger.

    Args:
        level: Log level string (DEBUG, INFO, WARNING, ERROR, CRITICAL).
               Defaults to WARNING so normal use is quiet.

    Returns:
        Configured logger instance.
    """
    numeric = getattr(logging, str(level).upper(), logging.WARNING)
    logger = logging.getLogger('guild')
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter('[%(levelname)s] %(name)s: %(message)s'))
        logger.addHandler(handler)
    logger.setLevel(numeric)
    return logger


logger = setup_logging()

# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

DEFAULT_CONFIG: Dict = {
    'log_level': 'WARNING',
    'host': '127.0.0.1',
    'port': 3000,
    'cors_origins': '*',
    'log_file': None,
    'max_upload_mb': 5,
}

# config key -> (environment variable, converter)
_ENV_OVERRIDES = {
    'log_level': ('GUILD_LOG_LEVEL', str),
    'host': ('GUILD_HOST', str),
    'port': ('GUILD_PORT', int),
    'cors_origins': ('GUILD_CORS_ORIGINS', str),
    'log_file': ('GUILD_LOG_FILE', str),
    'max_upload_mb': ('GUILD_MAX_UPLOAD_MB', int),
}


def load_config(config_path: str = 'config.json') -> Dict:
    """Load configuration with environment variable support.

    Values are layered: built-in defaults, then the JSON file at
    *config_path* (optional; a missing file just means defaults), then
    ``GUILD_*`` environment variables, which take precedence.  A ``.env``
    file in the working directory is read into the environment first.
    """
    load_dotenv()
    config = dict(DEFAULT_CONFIG)
    if config_path and os.path.exists(config_path):
        try:
            with open(config_path, 'r') as f:
                file_config = json.load(f)
            if isinstance(file_config, dict):
                config.update(file_config)
            else:
                logger.warning("Ignoring %s: top level must be a JSON object", config_path)
        except (json.JSONDecodeError, IOError) as e:
            logger.warning("Could not load config %s: %s", config_path, e)

    for key, (env_name, convert) in _ENV_OVERRIDES.items():
        raw = os.getenv(env_name)
        if not raw:
            continue
        try:
            config[key] = convert(raw)
        except ValueError:
            logger.warning("Ignoring %s=%r: expected %s", env_name, raw, convert.__name__)
    return config


def parse_origins(value) -> object:
    """Normalise the ``cors_origins`` setting to ``'*'`` or a list of origins."""
    if isinstance(value, (list, tuple)):
        return [str(v).strip() for v in value if str(v).strip()]
    text = str(value or '').strip()
    if not text or text == '*':
        return '*'
    return [o.strip() for o in text.split(',') if o.strip()]


# ---------------------------------------------------------------------------
# Integration point
# ---------------------------------------------------------------------------

class GuildRoster:
    """Owns the roster state and wires repositories to services.

    All services share one re-entrant lock, so every operation, including
    a player deletion and the group sweep it triggers, runs as one
    uninterrupted step.  Callers that need several service calls to be
    atomic (bulk import) can hold :attr:`lock` themselves.
    """

    def __init__(self, config: Optional[Dict] = None):
        self._log = logging.getLogger('guild.roster')
        self.config = dict(DEFAULT_CONFIG)
        if config:
            self.config.update(config)
        setup_logging(self.config.get('log_level', 'WARNING'))

        self.lock = threading.RLock()
        self.player_repository = PlayerRepository()
        self.group_repository = GroupRepository()

        self.integrity_service = IntegrityService(
            self.player_repository, self.group_repository, lock=self.lock)
        self.player_service = PlayerService(
            self.player_repository, lock=self.lock,
            on_removed=self.integrity_service.on_player_removed)
        self.group_service = GroupService(
            self.group_repository, self.player_repository, lock=self.lock)
        self.import_service = ImportService(self.player_service)
        self._log.debug("Roster initialised")

    def stats(self) -> Dict:
        """Return collection sizes, used by the health endpoint and CLI."""
        with self.lock:
            return {
                'players': len(self.player_repository),
                'groups': len(self.group_repository),
            }


# ---------------------------------------------------------------------------
# Command line
# ---------------------------------------------------------------------------

def print_classes() -> None:
    """Print the class catalog."""
    print(f"\n{Fore.CYAN}{Style.BRIGHT}Player classes")
    print(f"{Fore.GREEN}{'='*40}")
    for i, cls in enumerate(class_catalog.ALLOWED_CLASSES, 1):
        print(f"{Fore.YELLOW}{i:2d}. {Fore.WHITE}{cls}")
    print(f"{Fore.GREEN}{'='*40}\n")


def check_import(path: str) -> int:
    """Dry-run a spreadsheet import against an empty roster.

    Returns:
        Process exit status: 0 if every row would be imported, 1 otherwise.
    """
    import spreadsheet

    if not os.path.exists(path):
        print(f"{Fore.RED}Error: File '{path}' not found!")
        return 1
    try:
        with open(path, 'rb') as f:
            rows = spreadsheet.read_rows(f.read(), path)
    except spreadsheet.SpreadsheetError as e:
        print(f"{Fore.RED}Error: {e}")
        return 1

    roster = GuildRoster()
    report = roster.import_service.process(rows)

    print(f"\n{Fore.CYAN}{Style.BRIGHT}Import check: {os.path.basename(path)}")
    print(f"{Fore.GREEN}{'='*40}")
    print(f"{Fore.YELLOW}Rows read: {Fore.WHITE}{len(rows)}")
    print(f"{Fore.YELLOW}Players accepted: {Fore.WHITE}{report.added_count}")
    for player in report.added_players:
        print(f"  {Fore.GREEN}+ {Fore.WHITE}{player.name} ({player.player_class})")
    if report.errors:
        print(f"{Fore.YELLOW}Rows rejected: {Fore.WHITE}{len(report.errors)}")
        for error in report.errors:
            print(f"  {Fore.RED}- {error}")
    print(f"{Fore.GREEN}{'='*40}\n")
    return 1 if report.errors else 0


def main(argv=None) -> int:
    """Main entry point"""
    parser = argparse.ArgumentParser(
        description='Guild Roster - player and group management',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python3 guild.py classes                   # List the allowed player classes
  python3 guild.py check-import roster.xlsx  # Validate a spreadsheet before uploading
  python3 guild_server.py                    # Run the HTTP API
        """
    )
    parser.add_argument(
        '--log-level',
        default=None,
        help='Override the log level (DEBUG, INFO, WARNING, ...)'
    )
    subparsers = parser.add_subparsers(dest='command')
    subparsers.add_parser('classes', help='List the allowed player classes')
    check = subparsers.add_parser('check-import',
                                  help='Validate a .xlsx/.xlsm/.csv roster file')
    check.add_argument('file', help='Spreadsheet to check')

    args = parser.parse_args(argv)
    if args.log_level:
        setup_logging(args.log_level)

    if args.command == 'classes':
        print_classes()
        return 0
    if args.command == 'check-import':
        return check_import(args.file)

    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
