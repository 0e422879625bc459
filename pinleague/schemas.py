"""Pydantic schemas for league records and the league data file."""

from typing import Any

from pydantic import BaseModel, Field, field_validator

from .constants import (
    DEFAULT_GAMES_PER_WEEK,
    DEFAULT_HANDICAP_BASE,
    DEFAULT_HANDICAP_PERCENT,
    DEFAULT_HCP_LOCK_FROM_WEEK,
    DEFAULT_HCP_LOCK_WEEKS,
    DEFAULT_MODE,
)
from .utils import to_int, to_number


class LeagueConfig(BaseModel):
    """
    Normalized league scoring configuration.

    Build these with normalize_league() rather than directly; the
    normalizer is what turns a loose league record into sane values.
    """

    id: int | None = None
    name: str = ''
    mode: str = Field(default=DEFAULT_MODE, pattern=r'^(handicap|scratch)$')
    handicap_base: float = Field(default=DEFAULT_HANDICAP_BASE, alias='handicapBase')
    handicap_percent: float = Field(default=DEFAULT_HANDICAP_PERCENT, alias='handicapPercent')
    games_per_week: int = Field(default=DEFAULT_GAMES_PER_WEEK, alias='gamesPerWeek')
    hcp_lock_from_week: float = Field(default=DEFAULT_HCP_LOCK_FROM_WEEK, alias='hcpLockFromWeek')
    hcp_lock_weeks: float = Field(default=DEFAULT_HCP_LOCK_WEEKS, alias='hcpLockWeeks')
    team_points_win: float = Field(default=0, alias='teamPointsWin')
    team_points_draw: float = Field(default=0, alias='teamPointsDraw')
    indiv_points_win: float = Field(default=0, alias='indivPointsWin')
    indiv_points_draw: float = Field(default=0, alias='indivPointsDraw')
    handicap_cap_adult: float = Field(default=0, alias='handicapCapAdult')
    handicap_cap_junior: float = Field(default=0, alias='handicapCapJunior')

    @property
    def is_scratch(self) -> bool:
        return self.mode == 'scratch'

    class Config:
        extra = 'allow'
        populate_by_name = True


class Player(BaseModel):
    """Bowler on the league's player list."""

    id: int
    name: str = ''
    average: float = 0
    hcp: int | None = None
    start_average: float | None = None
    junior: bool = False
    gender: str | None = None
    league_id: int | None = None

    @field_validator('average', mode='before')
    @classmethod
    def coerce_average(cls, v):
        """Missing or garbage averages read as 0."""
        number = to_number(v)
        return 0 if number is None else number

    @field_validator('hcp', mode='before')
    @classmethod
    def coerce_hcp(cls, v):
        """A blank or non-numeric handicap means none has been recorded."""
        return to_int(v)

    @field_validator('start_average', mode='before')
    @classmethod
    def coerce_start_average(cls, v):
        return to_number(v)

    @property
    def has_stored_hcp(self) -> bool:
        return self.hcp is not None and self.hcp >= 0

    class Config:
        extra = 'allow'


class Team(BaseModel):
    """Team in a league."""

    id: int
    name: str = 'Team'
    league_id: int | None = None

    @field_validator('name', mode='before')
    @classmethod
    def default_blank_name(cls, v):
        """A missing or blank team name reads as 'Team'."""
        if v is None or (isinstance(v, str) and not v.strip()):
            return 'Team'
        return v

    class Config:
        extra = 'allow'


class TeamMembership(BaseModel):
    """Link between a player and a team."""

    team_id: int
    player_id: int
    league_id: int | None = None

    class Config:
        extra = 'allow'


class Week(BaseModel):
    """A scheduled round of play."""

    week_number: int = Field(..., ge=0)
    date: str | None = None
    id: int | None = None

    class Config:
        extra = 'allow'


class BowlerRow(BaseModel):
    """One bowler's line on a match sheet."""

    player_id: int | None = Field(default=None, alias='playerId')
    g1: int | None = None
    g2: int | None = None
    g3: int | None = None
    hcp: int | None = None
    blind: bool = False

    @field_validator('player_id', 'g1', 'g2', 'g3', 'hcp', mode='before')
    @classmethod
    def coerce_numbers(cls, v):
        """Sheet cells arrive as numbers, numeric strings, or blanks."""
        return to_int(v)

    @field_validator('blind', mode='before')
    @classmethod
    def coerce_blind(cls, v):
        return bool(v)

    def game(self, key: str) -> int:
        """Scratch pins for a game column, 0 when blank."""
        return getattr(self, key) or 0

    @property
    def handicap(self) -> int:
        return self.hcp or 0

    class Config:
        extra = 'ignore'
        populate_by_name = True


class Sheet(BaseModel):
    """Bowler-by-bowler record of one match in one week."""

    week_number: int
    home_team_id: int = Field(..., alias='homeTeamId')
    away_team_id: int = Field(..., alias='awayTeamId')
    home_games: list[BowlerRow] = Field(default_factory=list, alias='homeGames')
    away_games: list[BowlerRow] = Field(default_factory=list, alias='awayGames')
    league_id: int | None = None
    saved_at: str | None = None

    @field_validator('home_games', 'away_games', mode='before')
    @classmethod
    def drop_empty_rows(cls, v):
        """Null entries in a side's list are skipped, not errors."""
        return [row for row in (v or []) if row]

    @property
    def key(self) -> tuple[int, int, int]:
        return (self.week_number, self.home_team_id, self.away_team_id)

    class Config:
        extra = 'ignore'
        populate_by_name = True


class Match(BaseModel):
    """Stored result of a saved sheet, scored once at save time."""

    week_number: int
    home_team_id: int
    away_team_id: int
    home_score: float = 0
    away_score: float = 0
    home_points: float = 0
    away_points: float = 0
    id: int | None = None

    @property
    def key(self) -> tuple[int, int, int]:
        return (self.week_number, self.home_team_id, self.away_team_id)

    class Config:
        extra = 'allow'


class LeagueData(BaseModel):
    """Complete league_<id>.json file structure."""

    league: LeagueConfig
    players: list[Player] = Field(default_factory=list)
    teams: list[Team] = Field(default_factory=list)
    team_players: list[TeamMembership] = Field(default_factory=list)
    weeks: list[Week] = Field(default_factory=list)
    matches: list[Match] = Field(default_factory=list)
    sheets: list[Sheet] = Field(default_factory=list)

    @field_validator('league', mode='before')
    @classmethod
    def normalize_league_record(cls, v: Any):
        """League records on disk may predate newer settings."""
        from .config import normalize_league

        return normalize_league(v)

    class Config:
        extra = 'forbid'
