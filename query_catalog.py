"""
Catalog of the shell's commands.

Each command is a QueryDescriptor: its verb and aliases, the positional
arguments it takes from the command line, the values it prompts for, and the
SQL template those values are bound into. The catalog is built once at import
time and never changes.

All SQL targets the SQLite schema created by data_pipeline/load_stats.py.
"""

from dataclasses import dataclass
from typing import Any, Callable, Optional, Tuple

from errors import ValidationError


DEFAULT_TOP_TEAMS = 3
PLAYER_PAGE_SIZE = 20
TEAM_PAGE_SIZE = 10

INTEGER = "integer"
TEXT = "text"
CHOICE = "choice"

REGULAR_SEASON = 1
POST_SEASON = 2
SEASON_TYPES = ((REGULAR_SEASON, "Regular Season"), (POST_SEASON, "Post Season"))

# Largest value bound into an INTEGER placeholder
MAX_BOUND_INTEGER = 2**31 - 1
MAX_SEASON = 9999


@dataclass(frozen=True)
class ParamSpec:
    """One value a command needs, from the command line or from a prompt."""

    name: str
    kind: str = INTEGER
    prompt: str = ""
    default: Any = None
    choices: Tuple[Tuple[int, str], ...] = ()
    minimum: Optional[int] = None
    maximum: Optional[int] = None
    transform: Optional[Callable[[str], str]] = None
    required: bool = True
    lenient: bool = False  # Fall back to the default instead of rejecting bad input
    missing: str = ""
    invalid: str = ""

    def parse(self, raw: str):
        """Convert raw text to this parameter's value or raise ValidationError."""
        raw = raw.strip()
        if self.kind == TEXT:
            if not raw:
                raise ValidationError(self.missing or f"Missing {self.name}.")
            return self.transform(raw) if self.transform else raw

        if self.kind == CHOICE:
            for key, _ in self.choices:
                if raw == str(key):
                    return key
            keys = ", ".join(str(key) for key, _ in self.choices)
            raise ValidationError(self.invalid or f"Invalid choice. Please enter one of {keys}.")

        try:
            value = int(raw)
        except ValueError:
            raise ValidationError(self.invalid or f"{self.name} must be a whole number.") from None
        if self.minimum is not None and value < self.minimum:
            raise ValidationError(self.invalid or f"{self.name} must be at least {self.minimum}.")
        if self.maximum is not None and value > self.maximum:
            raise ValidationError(self.invalid or f"{self.name} must be no greater than {self.maximum}.")
        return value

    def label_for(self, key) -> str:
        return dict(self.choices).get(key, "")


@dataclass(frozen=True)
class ExistenceCheck:
    """Second query run when a lookup returns nothing.

    If it finds the identifier, the user sees "<found_label>: <name>" and the
    `empty` message; otherwise the `missing` message. Messages are formatted
    with the command's bound values.
    """

    template: str
    binds: Tuple[str, ...]
    found_label: str
    missing: str
    empty: str


@dataclass(frozen=True)
class QueryDescriptor:
    name: str
    label: str
    template: str = ""
    usage: str = ""
    aliases: Tuple[str, ...] = ()
    arguments: Tuple[ParamSpec, ...] = ()
    prompts: Tuple[ParamSpec, ...] = ()
    binds: Tuple[str, ...] = ()
    # (choice key, template) pairs, picked by the value of `variant_param`
    variants: Tuple[Tuple[int, str], ...] = ()
    variant_param: str = ""
    paged: bool = False
    page_size: int = 0
    noun: str = ""
    lookup: Optional[ExistenceCheck] = None
    default_season: Optional[int] = None

    @property
    def short_form(self) -> str:
        return self.aliases[0] if self.aliases else self.name

    @property
    def usage_line(self) -> str:
        return f"Usage: {self.usage or self.name}"

    def template_for(self, values: dict) -> str:
        if not self.variants:
            return self.template
        return dict(self.variants)[values[self.variant_param]]

    def bind(self, values: dict) -> list:
        """Parameters in placeholder order. A value may appear more than once."""
        missing = [name for name in self.binds if name not in values]
        if missing:
            raise ValidationError(f"Missing value for {', '.join(missing)}.")
        return [values[name] for name in self.binds]


class QueryCatalog:
    """Verb -> descriptor registry. Lookups are case-insensitive."""

    def __init__(self, descriptors):
        self._descriptors = tuple(descriptors)
        self._by_verb = {}
        for descriptor in self._descriptors:
            for verb in (descriptor.name,) + descriptor.aliases:
                key = verb.lower()
                if key in self._by_verb:
                    raise ValueError(f"Verb {verb!r} is declared twice")
                self._by_verb[key] = descriptor

    def lookup(self, verb: str) -> Optional[QueryDescriptor]:
        return self._by_verb.get(verb.strip().lower())

    def commands(self) -> Tuple[QueryDescriptor, ...]:
        return self._descriptors

    def __iter__(self):
        return iter(self._descriptors)

    def __len__(self):
        return len(self._descriptors)


def season(prompt: str = "Enter Season Year") -> ParamSpec:
    """The season-year prompt most commands share. Its default is the configured season."""
    return ParamSpec("season", INTEGER, prompt=prompt, minimum=1900, maximum=MAX_SEASON)


# --- Commands ---

ALL_PLAYERS = QueryDescriptor(
    name="all_players",
    aliases=("all_plys",),
    label="See all players and their IDs (paged).",
    template="SELECT player_id AS PLAYER_ID, display_name AS DISPLAY_NAME FROM player ORDER BY display_name",
    paged=True,
    page_size=PLAYER_PAGE_SIZE,
    noun="players",
)

ALL_TEAMS = QueryDescriptor(
    name="all_teams",
    aliases=("all_tms",),
    label="See all teams, abbreviations, and divisions (paged).",
    template="""
        SELECT team_abbr AS ABBR, team_name AS TEAM_NAME, team_division AS DIVISION
        FROM team
        ORDER BY team_name
    """,
    paged=True,
    page_size=TEAM_PAGE_SIZE,
    noun="teams",
)

WIN = QueryDescriptor(
    name="win",
    label="Find the Super Bowl winning team in a given season (prompts for year).",
    prompts=(season("Enter Season Year for Super Bowl winner"),),
    template="""
        SELECT t.team_name, p.season
        FROM post_team_stat p
        JOIN team t ON p.team = t.team_abbr
        WHERE p.finish = 'champ.win' AND p.season = ?
    """,
    binds=("season",),
)

TDS = QueryDescriptor(
    name="tds",
    usage="tds <player id>",
    label="Get player postseason touchdown score (prompts for year).",
    arguments=(
        ParamSpec("player_id", TEXT, missing="Missing player ID. Use 'all_players' to see IDs."),
    ),
    prompts=(season(),),
    template="""
        SELECT p.display_name,
               (pps.passing_tds + pps.receiving_tds + pps.rushing_tds + pps.special_teams_tds) AS TouchDowns
        FROM player p
        JOIN post_player_stat pps ON p.player_id = pps.player_id
        WHERE p.player_id = ? AND pps.season = ?
    """,
    binds=("player_id", "season"),
    lookup=ExistenceCheck(
        template="SELECT display_name FROM player WHERE player_id = ?",
        binds=("player_id",),
        found_label="Player",
        missing="Player ID '{player_id}' not found in the database.",
        empty="No Post Season touchdown statistics found for this player in season {season}.",
    ),
)

YPC = QueryDescriptor(
    name="ypc",
    usage="ypc <player name>",
    label="Get the regular season yards per carry of a specific player (prompts for year).",
    arguments=(ParamSpec("player_name", TEXT, missing="Missing player name."),),
    prompts=(season("Enter Season Year (Regular Season)"),),
    template="""
        SELECT p.display_name,
               CAST(rps.rushing_yards + rps.receiving_yards + rps.passing_yards AS REAL)
                   / NULLIF(rps.carries, 0) AS YPC
        FROM player p
        JOIN reg_player_stat rps ON p.player_id = rps.player_id
        WHERE p.display_name = ? AND rps.season = ?
    """,
    binds=("player_name", "season"),
    lookup=ExistenceCheck(
        template="SELECT display_name FROM player WHERE display_name = ?",
        binds=("player_name",),
        found_label="Player",
        missing="Player '{player_name}' not found. Use 'all_players' to see names.",
        empty="No regular season statistics found for this player in season {season}.",
    ),
)

SCORE = QueryDescriptor(
    name="score",
    usage="score <team name>",
    label="Get team total score in the postseason (prompts for year).",
    arguments=(ParamSpec("team_name", TEXT, missing="Missing team name."),),
    prompts=(season("Enter Season Year (Post Season)"),),
    template="""
        SELECT t.team_name, pts.points_scored
        FROM post_team_stat pts
        JOIN team t ON pts.team = t.team_abbr
        WHERE t.team_name = ? AND pts.season = ?
    """,
    binds=("team_name", "season"),
    lookup=ExistenceCheck(
        template="SELECT team_name FROM team WHERE team_name = ?",
        binds=("team_name",),
        found_label="Team",
        missing="Team '{team_name}' not found. Use 'all_teams' to see names.",
        empty="No Post Season games found for this team in season {season}.",
    ),
)

WIN_PCT = QueryDescriptor(
    name="win_pct",
    usage="win_pct <team name>",
    label="What was the regular season win percentage of a given team (prompts for year).",
    arguments=(
        ParamSpec("team_name", TEXT, missing="Missing team name. Use 'all_teams' to see names."),
    ),
    prompts=(season("Enter Season Year for Win Percentage"),),
    template="""
        SELECT t.team_abbr, CAST(rts.wins AS REAL) / NULLIF(rts.wins + rts.losses, 0) AS win_pct
        FROM team t
        JOIN reg_team_stat rts ON t.team_abbr = rts.team
        WHERE t.team_name = ? AND rts.season = ?
    """,
    binds=("team_name", "season"),
    lookup=ExistenceCheck(
        template="SELECT team_name FROM team WHERE team_name = ?",
        binds=("team_name",),
        found_label="Team",
        missing="Team '{team_name}' not found. Use 'all_teams' to see names.",
        empty="No regular season record found for this team in season {season}.",
    ),
)

HOST = QueryDescriptor(
    name="host",
    usage="host <stadium name>",
    label="Number of games hosted by a specific stadium in the postseason (prompts for year).",
    arguments=(ParamSpec("stadium", TEXT, missing="Missing stadium name."),),
    prompts=(season(),),
    template="""
        SELECT COUNT(g.game_id) AS gamesHosted
        FROM game g
        JOIN played_in pi ON g.game_id = pi.game_id
        JOIN stadium s ON pi.stadium_id = s.stadium_id
        WHERE g.game_type = 'post' AND s.stadium = ? AND g.season = ?
    """,
    binds=("stadium", "season"),
)

REF_PENALTIES = QueryDescriptor(
    name="ref_penalties",
    aliases=("ref_pen",),
    usage="ref_penalties <team abbr>",
    label="Get team penalties and their most frequent referee (prompts for year).",
    arguments=(
        ParamSpec(
            "team_abbr",
            TEXT,
            transform=str.upper,
            missing="Missing team abbreviation. Use 'all_teams' to see abbreviations.",
        ),
    ),
    prompts=(season("Enter Season Year for Penalty Stats"),),
    template="""
        WITH refOfficiated AS (
            SELECT r.official_id, r.official_name, COUNT(g.game_id) AS gamesOfficiated
            FROM referee r
            JOIN official o ON r.official_id = o.official_id
            JOIN game g ON o.game_id = g.game_id
            WHERE (g.home_team = ? OR g.away_team = ?) AND g.season = ?
            GROUP BY r.official_id, r.official_name
        ),
        targetRef AS (
            SELECT official_name, gamesOfficiated AS max_games
            FROM refOfficiated
            WHERE gamesOfficiated = (SELECT MAX(gamesOfficiated) FROM refOfficiated)
        )
        SELECT t.team_abbr, rts.penalties, tr.official_name, tr.max_games
        FROM reg_team_stat rts
        JOIN team t ON rts.team = t.team_abbr
        CROSS JOIN targetRef tr
        WHERE t.team_abbr = ? AND rts.season = ?
    """,
    binds=("team_abbr", "team_abbr", "season", "team_abbr", "season"),
    lookup=ExistenceCheck(
        template="SELECT team_name FROM team WHERE team_abbr = ?",
        binds=("team_abbr",),
        found_label="Team",
        missing="Team abbreviation '{team_abbr}' not found. Use 'all_teams' to see abbreviations.",
        empty="No penalty or officiating data found for this team in season {season}.",
    ),
)

TOP = QueryDescriptor(
    name="top",
    usage="top <no of teams>",
    label="Get top N teams in points scored (regular) or passing yards (post). Default N is 3.",
    arguments=(
        ParamSpec(
            "limit",
            INTEGER,
            default=DEFAULT_TOP_TEAMS,
            minimum=1,
            maximum=MAX_BOUND_INTEGER,
            required=False,
            lenient=True,
            invalid=f"Invalid number. Defaulting to {DEFAULT_TOP_TEAMS}.",
        ),
    ),
    prompts=(
        ParamSpec("season_type", CHOICE, prompt="Enter season type", choices=SEASON_TYPES),
        season("Enter Season Year ({season_type_label})"),
    ),
    variant_param="season_type",
    variants=(
        (REGULAR_SEASON, """
            SELECT t.team_name, ts.points_scored
            FROM reg_team_stat ts
            JOIN team t ON t.team_abbr = ts.team
            WHERE ts.season = ?
            ORDER BY ts.points_scored DESC
            LIMIT ?
        """),
        (POST_SEASON, """
            SELECT t.team_name, ts.passing_yards
            FROM post_team_stat ts
            JOIN team t ON t.team_abbr = ts.team
            WHERE ts.season = ?
            ORDER BY ts.passing_yards DESC
            LIMIT ?
        """),
    ),
    binds=("season", "limit"),
)

TDL = QueryDescriptor(
    name="tdl",
    label="Get touchdown leaders at every jersey number (prompts for year).",
    prompts=(season("Enter Season Year for Touchdown Leaders"),),
    template="""
        WITH MaxTDsPerJersey AS (
            SELECT p.jersey_number, MAX(rps.passing_tds + rps.rushing_tds + rps.receiving_tds) AS max_tds
            FROM reg_player_stat rps
            JOIN player p ON rps.player_id = p.player_id
            WHERE p.jersey_number IS NOT NULL AND rps.season = ?
            GROUP BY p.jersey_number
        )
        SELECT p.display_name, mtd.jersey_number, mtd.max_tds AS Touchdowns
        FROM MaxTDsPerJersey mtd
        JOIN player p ON mtd.jersey_number = p.jersey_number
        JOIN reg_player_stat rps ON p.player_id = rps.player_id
        WHERE mtd.max_tds = (rps.passing_tds + rps.rushing_tds + rps.receiving_tds) AND rps.season = ?
        ORDER BY mtd.jersey_number
    """,
    binds=("season", "season"),
)

TOP5_POST_TDS = QueryDescriptor(
    name="top5_post_tds",
    aliases=("top5_tds",),
    label="Get the top 5 players in total touchdowns scored in the post-season (prompts for year).",
    prompts=(season("Enter Season Year for Postseason TDs"),),
    template="""
        SELECT p.display_name,
               (pps.passing_tds + pps.receiving_tds + pps.rushing_tds + pps.special_teams_tds) AS Touchdowns
        FROM player p
        JOIN post_player_stat pps ON p.player_id = pps.player_id
        WHERE pps.season = ?
        ORDER BY Touchdowns DESC
        LIMIT 5
    """,
    binds=("season",),
)

DEF_TDS = QueryDescriptor(
    name="def_tds",
    label="Which defensive players had a touchdown in the regular season (prompts for year).",
    prompts=(season("Enter Season Year for Player Stats"),),
    template="""
        SELECT p.display_name, p.position,
               (rps.passing_tds + rps.receiving_tds + rps.rushing_tds + rps.special_teams_tds) AS defensive_tds
        FROM player p
        JOIN reg_player_stat rps ON p.player_id = rps.player_id
        WHERE p.position IN ('CB', 'S', 'LB', 'DE', 'DT')
          AND rps.season = ?
          AND (rps.passing_tds + rps.receiving_tds + rps.rushing_tds + rps.special_teams_tds) > 0
    """,
    binds=("season",),
)

DEFENSIVE_TRIFECTA = QueryDescriptor(
    name="defensive_trifecta",
    aliases=("dft",),
    label="Players who recorded a sack, fumble, and interception in the regular season (prompts for year).",
    prompts=(season("Enter Season Year for Stats"),),
    template="""
        SELECT p.display_name, p.position
        FROM player p
        JOIN reg_player_stat rps ON p.player_id = rps.player_id
        WHERE rps.sacks >= 1 AND rps.sack_fumbles >= 1 AND rps.interceptions >= 1 AND rps.season = ?
    """,
    binds=("season",),
)

LOW_TARGETS = QueryDescriptor(
    name="low_targets",
    aliases=("low_trgts",),
    label="Players with more targets than receptions in the regular season (prompts for year).",
    prompts=(season("Enter Season Year for Player Stats"),),
    template="""
        SELECT p.display_name, rps.targets, rps.receptions
        FROM player p
        JOIN reg_player_stat rps ON p.player_id = rps.player_id
        WHERE rps.targets > rps.receptions AND rps.season = ?
    """,
    binds=("season",),
)

TEAM_TOP_SCORER = QueryDescriptor(
    name="team_top_scorer",
    aliases=("top_scorer",),
    label="Get the #1 scoring player on each team in the regular season (prompts for year).",
    prompts=(season("Enter Season Year for Top Scorers"),),
    template="""
        WITH PlayerPoints AS (
            SELECT rps.player_id, p.display_name,
                   ((rps.receiving_tds + rps.passing_tds + rps.rushing_tds + rps.special_teams_tds) * 6)
                   + ((rps.rushing_2pt_conversions + rps.receiving_2pt_conversions
                       + rps.passing_2pt_conversions) * 2) AS player_points
            FROM reg_player_stat rps
            JOIN player p ON rps.player_id = p.player_id
            WHERE rps.season = ?
        ),
        MaxOutput AS (
            SELECT r.team, MAX(pp.player_points) AS max_points
            FROM roster r
            JOIN PlayerPoints pp ON r.player_id = pp.player_id
            GROUP BY r.team
        )
        SELECT r.team, pp.display_name, mo.max_points
        FROM roster r
        JOIN PlayerPoints pp ON r.player_id = pp.player_id
        JOIN MaxOutput mo ON r.team = mo.team AND pp.player_points = mo.max_points
        ORDER BY r.team
    """,
    binds=("season",),
)

TDP = QueryDescriptor(
    name="tdp",
    usage="tdp <week no.>",
    label="Get total regular season point differential of all games combined in a specific week (prompts for year).",
    arguments=(
        ParamSpec(
            "week",
            INTEGER,
            maximum=MAX_BOUND_INTEGER,
            missing="Missing week number.",
            invalid="Week number must be an integer.",
        ),
    ),
    prompts=(season("Enter Season Year for point differential"),),
    template="""
        SELECT SUM(home_score - away_score) AS Total_Point_Differential
        FROM game
        WHERE week = ? AND game_type = 'reg' AND season = ?
    """,
    binds=("week", "season"),
)

WEEK_SCORES = QueryDescriptor(
    name="week_scores",
    aliases=("wk_score",),
    label="Each regular season week's max and min points scored in a game (prompts for year).",
    prompts=(season("Enter Season Year for Week Scores"),),
    template="""
        WITH GameScores AS (
            SELECT week, home_score AS score FROM game WHERE game_type = 'reg' AND season = ?
            UNION ALL
            SELECT week, away_score AS score FROM game WHERE game_type = 'reg' AND season = ?
        )
        SELECT gs.week, MAX(gs.score) AS MaxScore, MIN(gs.score) AS MinScore
        FROM GameScores gs
        GROUP BY gs.week
        ORDER BY gs.week
    """,
    binds=("season", "season"),
)

SHUTOUTS = QueryDescriptor(
    name="shutouts",
    label="Teams shut-out (scored zero) in a game, along with the week(s) it happened (prompts for year).",
    prompts=(season("Enter Season Year for Shutouts"),),
    template="""
        SELECT t.team_abbr, g.week, g.season
        FROM team t
        JOIN game g ON (t.team_abbr = g.home_team AND g.home_score = 0)
                    OR (t.team_abbr = g.away_team AND g.away_score = 0)
        WHERE g.season = ?
        ORDER BY g.week, t.team_abbr
    """,
    binds=("season",),
)

REF_AWAY_WIN = QueryDescriptor(
    name="ref_away_win",
    aliases=("ref_win",),
    label="Referee who officiated the most games where the away team won (prompts for year).",
    prompts=(season("Enter Season Year for Referee Stats"),),
    template="""
        SELECT r.official_name, COUNT(o.game_id) AS gamesOfficiatedAwayWin
        FROM referee r
        JOIN official o ON r.official_id = o.official_id
        JOIN game g ON o.game_id = g.game_id
        WHERE g.away_score > g.home_score AND g.season = ?
        GROUP BY r.official_name
        ORDER BY gamesOfficiatedAwayWin DESC
        LIMIT 1
    """,
    binds=("season",),
)

PLYR_YDS = QueryDescriptor(
    name="plyr_yds",
    usage="plyr_yds <max yds> <division>",
    label="Players on a top 2 division team with total yards < max yards (prompts for year).",
    arguments=(
        ParamSpec(
            "max_yards",
            INTEGER,
            maximum=MAX_BOUND_INTEGER,
            invalid="Max yards must be a valid integer.",
        ),
        ParamSpec("division", TEXT, missing="Missing division name."),
    ),
    prompts=(season("Enter Season Year for player stats"),),
    template="""
        SELECT p.display_name, (rps.receiving_yards + rps.passing_yards + rps.rushing_yards) AS total_yds
        FROM reg_player_stat rps
        JOIN player p ON rps.player_id = p.player_id
        JOIN roster rstr ON p.player_id = rstr.player_id
        JOIN team t ON rstr.team = t.team_abbr
        JOIN reg_team_stat rts ON t.team_abbr = rts.team
        WHERE rts.division_rank IN (1, 2)
          AND t.team_division = ?
          AND rts.season = ?
          AND rps.season = rts.season
          AND (rps.receiving_yards + rps.passing_yards + rps.rushing_yards) < ?
        ORDER BY total_yds DESC
    """,
    binds=("division", "season", "max_yards"),
)

TOP_HALF_LOW_DIV = QueryDescriptor(
    name="top_half_low_div",
    aliases=("hld",),
    label="Teams in the top half of the league in points but in the bottom half of their division (prompts for year).",
    prompts=(season(),),
    template="""
        SELECT t.team_name
        FROM reg_team_stat rts
        JOIN team t ON rts.team = t.team_abbr
        WHERE rts.season = ?
          AND rts.points_scored > (SELECT AVG(points_scored) FROM reg_team_stat WHERE season = ?)
          AND rts.division_rank IN (3, 4)
    """,
    binds=("season", "season"),
)


# Help screen order
CATALOG = QueryCatalog([
    ALL_PLAYERS,
    ALL_TEAMS,
    WIN,
    TDS,
    YPC,
    SCORE,
    WIN_PCT,
    HOST,
    REF_PENALTIES,
    TOP,
    TDL,
    TOP5_POST_TDS,
    DEF_TDS,
    DEFENSIVE_TRIFECTA,
    LOW_TARGETS,
    TEAM_TOP_SCORER,
    TDP,
    WEEK_SCORES,
    SHUTOUTS,
    REF_AWAY_WIN,
    PLYR_YDS,
    TOP_HALF_LOW_DIV,
])
