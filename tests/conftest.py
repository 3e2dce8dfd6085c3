import io
import sqlite3

import pytest

from console import Console, ScriptedInput
from data_pipeline.load_stats import create_tables
from db import SqliteExecutor, TableResult
from query_engine import CommandRouter


TEAMS = [
    ("KC", "Kansas City Chiefs", "AFC West"),
    ("SF", "San Francisco 49ers", "NFC West"),
    ("BUF", "Buffalo Bills", "AFC East"),
    ("LV", "Las Vegas Raiders", "AFC West"),
    ("DEN", "Denver Broncos", "AFC West"),
]

PLAYERS = [
    ("P001", "Patrick Mahomes", "QB", 15),
    ("P002", "Travis Kelce", "TE", 87),
    ("P003", "Christian McCaffrey", "RB", 23),
    ("P004", "Fred Warner", "LB", 54),
    ("P005", "Josh Allen", "QB", 17),
    ("P006", "Maxx Crosby", "DE", 98),
]

ROSTER = [("P001", "KC"), ("P002", "KC"), ("P003", "SF"), ("P004", "SF"), ("P005", "BUF"), ("P006", "LV")]

# team, season, wins, losses, points_scored, passing_yards, penalties, division_rank
REG_TEAM_STATS = [
    ("KC", 2023, 11, 6, 371, 3900, 100, 1),
    ("SF", 2023, 12, 5, 491, 4500, 95, 1),
    ("BUF", 2023, 11, 6, 451, 4200, 110, 1),
    ("LV", 2023, 8, 9, 332, 3300, 90, 2),
    ("DEN", 2023, 8, 9, 420, 3500, 105, 3),
]

# team, season, points_scored, passing_yards, finish
POST_TEAM_STATS = [
    ("KC", 2023, 94, 1100, "champ.win"),
    ("SF", 2023, 88, 1000, "champ.loss"),
    ("BUF", 2023, 41, 500, "div.loss"),
]

PLAYER_STAT_FIELDS = (
    "player_id", "season", "passing_yards", "rushing_yards", "receiving_yards", "carries",
    "targets", "receptions", "passing_tds", "rushing_tds", "receiving_tds", "special_teams_tds",
    "sacks", "sack_fumbles", "interceptions",
)

REG_PLAYER_STATS = [
    ("P001", 2023, 4183, 389, 0, 75, 0, 0, 27, 0, 0, 0, 0, 0, 0),
    ("P002", 2023, 0, 0, 984, 0, 121, 93, 0, 0, 5, 0, 0, 0, 0),
    ("P003", 2023, 0, 1459, 564, 272, 83, 67, 0, 14, 7, 0, 0, 0, 0),
    ("P004", 2023, 0, 0, 0, 0, 0, 0, 0, 0, 0, 1, 1, 1, 1),
    ("P005", 2023, 4306, 524, 0, 111, 0, 0, 29, 15, 0, 0, 0, 0, 0),
    ("P006", 2023, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 14.5, 0, 0),
]

POST_PLAYER_STATS = [
    ("P001", 2023, 1000, 100, 0, 20, 0, 0, 8, 0, 0, 0, 0, 0, 0),
    ("P002", 2023, 0, 0, 355, 0, 40, 32, 0, 0, 3, 0, 0, 0, 0),
    ("P003", 2023, 0, 250, 100, 50, 10, 8, 0, 2, 1, 0, 0, 0, 0),
]

STADIUMS = [(1, "GEHA Field at Arrowhead Stadium"), (2, "Allegiant Stadium")]

# game_id, season, week, game_type, home, away, home_score, away_score
GAMES = [
    ("G1", 2023, 1, "reg", "KC", "DEN", 20, 0),
    ("G2", 2023, 1, "reg", "SF", "BUF", 17, 24),
    ("G3", 2023, 2, "reg", "LV", "KC", 10, 17),
    ("G4", 2023, 19, "post", "KC", "BUF", 27, 24),
    ("G5", 2023, 22, "post", "SF", "KC", 22, 25),
]

PLAYED_IN = [("G1", 1), ("G3", 2), ("G4", 1), ("G5", 2)]
REFEREES = [(1, "Bill Vinovich"), (2, "Shawn Hochuli")]
OFFICIALS = [("G1", 2), ("G2", 1), ("G3", 1), ("G5", 2)]


def seed(conn):
    fields = ", ".join(PLAYER_STAT_FIELDS)
    marks = ", ".join("?" * len(PLAYER_STAT_FIELDS))
    conn.executemany("INSERT INTO team VALUES (?, ?, ?)", TEAMS)
    conn.executemany("INSERT INTO player VALUES (?, ?, ?, ?)", PLAYERS)
    conn.executemany("INSERT INTO roster VALUES (?, ?)", ROSTER)
    conn.executemany(
        "INSERT INTO reg_team_stat (team, season, wins, losses, points_scored, passing_yards, penalties, division_rank)"
        " VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
        REG_TEAM_STATS,
    )
    conn.executemany(
        "INSERT INTO post_team_stat (team, season, points_scored, passing_yards, finish) VALUES (?, ?, ?, ?, ?)",
        POST_TEAM_STATS,
    )
    conn.executemany(f"INSERT INTO reg_player_stat ({fields}) VALUES ({marks})", REG_PLAYER_STATS)
    conn.executemany(f"INSERT INTO post_player_stat ({fields}) VALUES ({marks})", POST_PLAYER_STATS)
    conn.executemany("INSERT INTO stadium VALUES (?, ?)", STADIUMS)
    conn.executemany("INSERT INTO game VALUES (?, ?, ?, ?, ?, ?, ?, ?)", GAMES)
    conn.executemany("INSERT INTO played_in VALUES (?, ?)", PLAYED_IN)
    conn.executemany("INSERT INTO referee VALUES (?, ?)", REFEREES)
    conn.executemany("INSERT INTO official VALUES (?, ?)", OFFICIALS)
    conn.commit()


class RecordingExecutor(SqliteExecutor):
    """SqliteExecutor that remembers every (template, params) it ran."""

    def __init__(self, conn):
        super().__init__(conn)
        self.calls = []

    def execute(self, template, params=()):
        self.calls.append((template, list(params)))
        return super().execute(template, params)


class StubExecutor:
    """Returns canned results in order, without a database."""

    def __init__(self, *results):
        self.results = list(results)
        self.calls = []

    def execute(self, template, params=()):
        self.calls.append((template, list(params)))
        if self.results:
            return self.results.pop(0)
        return TableResult([], [])


class Session:
    """A router wired to a scripted console, with captured output."""

    def __init__(self, executor, lines=()):
        self.source = ScriptedInput(lines)
        self.out = io.StringIO()
        self.err = io.StringIO()
        self.console = Console(self.source, out=self.out, err=self.err)
        self.executor = executor
        self.router = CommandRouter(executor, self.console)

    def route(self, line):
        return self.router.route(line)

    @property
    def stdout(self):
        return self.out.getvalue()

    @property
    def stderr(self):
        return self.err.getvalue()


@pytest.fixture
def conn():
    conn = sqlite3.connect(":memory:")
    create_tables(conn)
    seed(conn)
    yield conn
    conn.close()


@pytest.fixture
def executor(conn):
    return RecordingExecutor(conn)


@pytest.fixture
def session(executor):
    """Factory: session(*input_lines) -> Session over the seeded database."""

    def make(*lines):
        return Session(executor, lines)

    return make
