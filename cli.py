"""
NFL Stat Shell: interactive command line over the NFL statistics database.

Type a command, answer its prompts, get a table back. Type 'h' for the
command list, 'q' to quit.

Usage:
    python3 cli.py                       # reads ./auth.cfg
    python3 cli.py path/to/auth.cfg
    python3 cli.py --verbose             # log executed SQL to stderr
"""

import logging
import sys

import db
from config import load_settings
from console import Console
from data_pipeline.load_stats import load_sql_file
from errors import ConfigError, InputClosedError, QueryError, StoreConnectionError
from query_engine import CommandRouter, Outcome


LOGO = r"""
  _   _ _____ _
 | \ | |  ___| |
 |  \| | |_  | |
 | |\  |  _| | |___
 |_| \_|_|   |_____|
"""


def display_welcome(console: Console):
    console.say("=" * 60)
    console.say("  Welcome to NFL Database (2023-2024)")
    console.say(LOGO)
    console.say("  Type 'h' for help or 'q' to quit.")
    console.say("=" * 60)
    console.say()


def bootstrap(conn, script, console: Console):
    """Load the configured SQL script. Failures are reported, not fatal."""
    try:
        count = load_sql_file(conn, script)
    except FileNotFoundError:
        console.error(f"ERROR: The SQL file {script} was not found.")
        console.error("The program will continue, but the database may not be initialized correctly.")
    except (OSError, QueryError) as e:
        console.error(f"ERROR loading SQL file {script}: {e}")
    else:
        console.say(f"✅ Successfully executed {count} SQL statements from {script}")


def run(router: CommandRouter, console: Console) -> int:
    """The read-route loop. Returns the process exit code."""
    while True:
        try:
            line = console.ask("NFL > ")
        except InputClosedError:
            console.say("\nExiting NFL Database. Goodbye!")
            return 0

        outcome = router.route(line)
        if outcome is Outcome.QUIT:
            console.say("\nExiting NFL Database. Goodbye!")
            return 0
        if outcome is Outcome.DISCONNECTED:
            console.error("Lost connection to the database. Exiting.")
            return 1


def main(argv=None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    verbose = "--verbose" in args
    args = [a for a in args if a != "--verbose"]

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    console = Console()
    try:
        settings = load_settings(args[0] if args else None)
    except ConfigError as e:
        console.error(str(e))
        return 1

    try:
        conn = db.connect(settings.database)
    except StoreConnectionError as e:
        console.error(f"Database connection error: {e}")
        return 1

    executor = db.SqliteExecutor(conn)
    try:
        if settings.bootstrap_script:
            bootstrap(conn, settings.bootstrap_script, console)
        display_welcome(console)
        router = CommandRouter(executor, console, default_season=settings.default_season)
        return run(router, console)
    finally:
        executor.close()


if __name__ == "__main__":
    sys.exit(main())
