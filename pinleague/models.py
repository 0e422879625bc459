"""Data models for derived league results."""

from dataclasses import dataclass, field


@dataclass
class PlayerStat:
    """A bowler's stats accumulated from sheets up to a week."""
    games_played: int = 0
    points: float = 0.0
    pins_scratch: int = 0
    pins_handicap: int = 0
    high_game_scratch: int = 0
    high_game_handicap: int = 0
    high_series_scratch: int = 0
    high_series_handicap: int = 0
    average: float = 0.0


@dataclass
class SideTotals:
    """Pin totals and highs for one side of a sheet."""
    scratch: int = 0
    handicap: int = 0
    high_game_scratch: int = 0
    high_game_handicap: int = 0
    high_series_scratch: int = 0
    high_series_handicap: int = 0


@dataclass
class SheetTotals:
    """Pin totals for both sides of a sheet."""
    home: SideTotals
    away: SideTotals

    def side(self, is_home: bool) -> SideTotals:
        return self.home if is_home else self.away


@dataclass
class MatchScore:
    """Points a sheet is worth to each side."""
    home_team_points: float = 0.0
    away_team_points: float = 0.0
    home_individual_points: float = 0.0
    away_individual_points: float = 0.0
    home_scratch: int = 0
    away_scratch: int = 0
    # Individual points per bowler row, by list position
    home_row_points: list[float] = field(default_factory=list)
    away_row_points: list[float] = field(default_factory=list)

    @property
    def home_points(self) -> float:
        return self.home_team_points + self.home_individual_points

    @property
    def away_points(self) -> float:
        return self.away_team_points + self.away_individual_points


@dataclass
class PlayerUpdate:
    """New cached average/handicap for a player after a sheet save."""
    average: float
    hcp: int | None


@dataclass
class PlayerStanding:
    """One row of the individual standings."""
    player_id: int
    name: str
    team_id: int | None
    team_name: str
    hcp: int
    stats: PlayerStat = field(default_factory=PlayerStat)


@dataclass
class TeamGroup:
    """A team and its bowlers, ordered for the individual standings."""
    team_id: int
    team_name: str
    players: list[PlayerStanding] = field(default_factory=list)


@dataclass
class TeamStanding:
    """One row of the team standings."""
    team_id: int
    name: str
    position: int = 0
    games: int = 0
    points: float = 0.0
    pins_scratch: int = 0
    pins_handicap: int = 0
    high_game_scratch: int = 0
    high_game_handicap: int = 0
    high_series_scratch: int = 0
    high_series_handicap: int = 0
