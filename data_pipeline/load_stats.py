"""
Data pipeline: create the NFL schema in SQLite and load data into it.

Data can come from a SQL script (INSERT statements, one per line or spread
over several lines, each ending with ';') and/or a directory of CSV exports
named after the tables (player.csv, game.csv, ...).

Usage:
    python3 -m data_pipeline.load_stats nfl_stats.db nfl.sql
    python3 -m data_pipeline.load_stats nfl_stats.db --csv exports/
    python3 -m data_pipeline.load_stats nfl_stats.db nfl.sql --csv exports/
"""

import os
import sqlite3
import sys

import pandas as pd

from errors import QueryError


STOP_MARKER = "-- --- STOP EXECUTION HERE ---"
COMMENT_PREFIXES = ("--", "/*", "*")

PLAYER_STAT_COLUMNS = """
            player_id TEXT NOT NULL,
            season INTEGER NOT NULL,
            passing_yards INTEGER DEFAULT 0,
            rushing_yards INTEGER DEFAULT 0,
            receiving_yards INTEGER DEFAULT 0,
            carries INTEGER DEFAULT 0,
            targets INTEGER DEFAULT 0,
            receptions INTEGER DEFAULT 0,
            passing_tds INTEGER DEFAULT 0,
            rushing_tds INTEGER DEFAULT 0,
            receiving_tds INTEGER DEFAULT 0,
            special_teams_tds INTEGER DEFAULT 0,
            passing_2pt_conversions INTEGER DEFAULT 0,
            rushing_2pt_conversions INTEGER DEFAULT 0,
            receiving_2pt_conversions INTEGER DEFAULT 0,
            sacks REAL DEFAULT 0,
            sack_fumbles INTEGER DEFAULT 0,
            interceptions INTEGER DEFAULT 0,
            FOREIGN KEY (player_id) REFERENCES player(player_id),
            UNIQUE(player_id, season)
"""

# Load order respects foreign keys
TABLES = (
    "team",
    "player",
    "roster",
    "reg_team_stat",
    "post_team_stat",
    "reg_player_stat",
    "post_player_stat",
    "stadium",
    "game",
    "played_in",
    "referee",
    "official",
)


def create_tables(conn):
    """Create the SQLite schema."""
    cursor = conn.cursor()

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS team (
            team_abbr TEXT PRIMARY KEY,
            team_name TEXT NOT NULL,
            team_division TEXT
        )
    """)

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS player (
            player_id TEXT PRIMARY KEY,
            display_name TEXT NOT NULL,
            position TEXT,
            jersey_number INTEGER
        )
    """)

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS roster (
            player_id TEXT NOT NULL,
            team TEXT NOT NULL,
            FOREIGN KEY (player_id) REFERENCES player(player_id),
            FOREIGN KEY (team) REFERENCES team(team_abbr),
            UNIQUE(player_id, team)
        )
    """)

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS reg_team_stat (
            team TEXT NOT NULL,
            season INTEGER NOT NULL,
            wins INTEGER DEFAULT 0,
            losses INTEGER DEFAULT 0,
            points_scored INTEGER DEFAULT 0,
            passing_yards INTEGER DEFAULT 0,
            penalties INTEGER DEFAULT 0,
            division_rank INTEGER,
            FOREIGN KEY (team) REFERENCES team(team_abbr),
            UNIQUE(team, season)
        )
    """)

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS post_team_stat (
            team TEXT NOT NULL,
            season INTEGER NOT NULL,
            points_scored INTEGER DEFAULT 0,
            passing_yards INTEGER DEFAULT 0,
            finish TEXT,
            FOREIGN KEY (team) REFERENCES team(team_abbr),
            UNIQUE(team, season)
        )
    """)

    cursor.execute(f"CREATE TABLE IF NOT EXISTS reg_player_stat ({PLAYER_STAT_COLUMNS})")
    cursor.execute(f"CREATE TABLE IF NOT EXISTS post_player_stat ({PLAYER_STAT_COLUMNS})")

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS stadium (
            stadium_id INTEGER PRIMARY KEY,
            stadium TEXT NOT NULL
        )
    """)

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS game (
            game_id TEXT PRIMARY KEY,
            season INTEGER NOT NULL,
            week INTEGER NOT NULL,
            game_type TEXT NOT NULL,
            home_team TEXT NOT NULL,
            away_team TEXT NOT NULL,
            home_score INTEGER,
            away_score INTEGER,
            FOREIGN KEY (home_team) REFERENCES team(team_abbr),
            FOREIGN KEY (away_team) REFERENCES team(team_abbr)
        )
    """)

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS played_in (
            game_id TEXT NOT NULL,
            stadium_id INTEGER NOT NULL,
            FOREIGN KEY (game_id) REFERENCES game(game_id),
            FOREIGN KEY (stadium_id) REFERENCES stadium(stadium_id),
            UNIQUE(game_id)
        )
    """)

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS referee (
            official_id INTEGER PRIMARY KEY,
            official_name TEXT NOT NULL
        )
    """)

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS official (
            game_id TEXT NOT NULL,
            official_id INTEGER NOT NULL,
            FOREIGN KEY (game_id) REFERENCES game(game_id),
            FOREIGN KEY (official_id) REFERENCES referee(official_id),
            UNIQUE(game_id, official_id)
        )
    """)

    cursor.execute("CREATE INDEX IF NOT EXISTS idx_player_name ON player(display_name)")
    cursor.execute("CREATE INDEX IF NOT EXISTS idx_reg_player_season ON reg_player_stat(season)")
    cursor.execute("CREATE INDEX IF NOT EXISTS idx_post_player_season ON post_player_stat(season)")
    cursor.execute("CREATE INDEX IF NOT EXISTS idx_game_season_week ON game(season, week)")
    cursor.execute("CREATE INDEX IF NOT EXISTS idx_official_game ON official(game_id)")

    conn.commit()


def read_statements(path):
    """Split a SQL script into (line number, statement) pairs.

    Comment lines are skipped, a statement ends at a line ending with ';', and
    reading stops at the STOP EXECUTION HERE marker.
    """
    statements = []
    current = []
    line_number = 0
    with open(path, encoding="utf-8") as f:
        for line_number, line in enumerate(f, start=1):
            trimmed = line.strip()
            if trimmed.lower() == STOP_MARKER.lower():
                print("⚠️ Stop marker reached. Ignoring the rest of the file.")
                break
            if not trimmed or trimmed.startswith(COMMENT_PREFIXES):
                continue

            current.append(line.rstrip("\n"))
            if trimmed.endswith(";"):
                sql = "\n".join(current).strip().rstrip(";").strip()
                if sql:
                    statements.append((line_number, sql))
                current = []

    # Last statement without a trailing ';'
    sql = "\n".join(current).strip()
    if sql:
        statements.append((line_number, sql))
    return statements


def load_sql_file(conn, path) -> int:
    """Run every statement of a SQL script in one transaction.

    On failure everything is rolled back and a QueryError names the line.
    Returns the number of statements executed.
    """
    if not os.path.isfile(path):
        raise FileNotFoundError(f"File not found: {path}")

    statements = read_statements(path)
    if conn.in_transaction:
        conn.commit()
    cursor = conn.cursor()
    cursor.execute("BEGIN")
    try:
        for line_number, sql in statements:
            try:
                cursor.execute(sql)
            except sqlite3.Error as e:
                raise QueryError(f"SQL error at line {line_number}: {e}\nFailed SQL statement:\n{sql}") from e
    except QueryError:
        conn.rollback()
        raise
    conn.commit()
    return len(statements)


def table_columns(conn, table):
    cursor = conn.cursor()
    cursor.execute(f"PRAGMA table_info({table})")
    return [row[1] for row in cursor.fetchall()]


def load_csv_dir(conn, directory) -> dict:
    """Append <table>.csv files from `directory` into their tables.

    Columns the table doesn't have are dropped. Returns {table: rows loaded}.
    """
    loaded = {}
    for filename in sorted(os.listdir(directory)):
        table, ext = os.path.splitext(filename)
        if ext.lower() == ".csv" and table not in TABLES:
            print(f"  Warning: No table named '{table}', skipping {filename}")

    for table in TABLES:
        path = os.path.join(directory, f"{table}.csv")
        if not os.path.isfile(path):
            continue

        data = pd.read_csv(path)
        columns = set(table_columns(conn, table))
        known = [c for c in data.columns if c in columns]
        dropped = [c for c in data.columns if c not in known]
        if dropped:
            print(f"  {table}: ignoring unknown columns {', '.join(dropped)}")

        try:
            data[known].to_sql(table, conn, if_exists="append", index=False)
        except (sqlite3.Error, ValueError) as e:
            conn.rollback()
            raise QueryError(f"Failed to load {path}: {e}") from e
        conn.commit()
        loaded[table] = len(data)
        print(f"  Loaded {len(data)} rows into {table}")
    return loaded


def load(db_path, script=None, csv_dir=None):
    """Create the schema and load whatever sources were given."""
    conn = sqlite3.connect(db_path)
    try:
        create_tables(conn)
        if script:
            print(f"Loading SQL script {script}...")
            count = load_sql_file(conn, script)
            print(f"  Executed {count} statements")
        if csv_dir:
            print(f"Loading CSV exports from {csv_dir}...")
            load_csv_dir(conn, csv_dir)
    finally:
        conn.close()
    print(f"\nDone! Database saved to: {db_path}")


def main(argv=None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    csv_dir = None
    if "--csv" in args:
        i = args.index("--csv")
        if i + 1 >= len(args):
            print("Usage: load_stats.py <database> [script.sql] [--csv DIR]")
            return 2
        csv_dir = args[i + 1]
        del args[i:i + 2]

    if not args:
        print("Usage: load_stats.py <database> [script.sql] [--csv DIR]")
        return 2

    try:
        load(args[0], args[1] if len(args) > 1 else None, csv_dir)
    except (OSError, QueryError) as e:
        print(f"❌ {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
