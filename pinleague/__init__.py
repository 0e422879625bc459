from .models import (
    MatchScore,
    PlayerStanding,
    PlayerStat,
    PlayerUpdate,
    SheetTotals,
    TeamGroup,
    TeamStanding,
)
from .schemas import (
    BowlerRow,
    LeagueConfig,
    LeagueData,
    Match,
    Player,
    Sheet,
    Team,
    TeamMembership,
    Week,
)
from .config import normalize_league
from .freeze import freeze_weeks, in_freeze, past_freeze
from .handicap import compute_from_average, display_handicap, handicap_for_week
from .scoring import blind_aware_outcome, outcome, score_sheet, sheet_totals, team_points
from .aggregator import compute_player_stats, entered_weeks, latest_entered_week
from .standings import (
    build_player_directory,
    build_player_standings,
    build_team_standings,
    resolve_player_teams,
)
from .recompute import apply_player_updates, recompute_after_save
from .league_store import LeagueStore

__all__ = [
    # Models
    'MatchScore',
    'PlayerStanding',
    'PlayerStat',
    'PlayerUpdate',
    'SheetTotals',
    'TeamGroup',
    'TeamStanding',
    # Records
    'BowlerRow',
    'LeagueConfig',
    'LeagueData',
    'Match',
    'Player',
    'Sheet',
    'Team',
    'TeamMembership',
    'Week',
    # Config and freeze window
    'normalize_league',
    'freeze_weeks',
    'in_freeze',
    'past_freeze',
    # Handicaps
    'compute_from_average',
    'display_handicap',
    'handicap_for_week',
    # Points
    'blind_aware_outcome',
    'outcome',
    'score_sheet',
    'sheet_totals',
    'team_points',
    # Stats and standings
    'compute_player_stats',
    'entered_weeks',
    'latest_entered_week',
    'build_player_directory',
    'build_player_standings',
    'build_team_standings',
    'resolve_player_teams',
    # Save path
    'apply_player_updates',
    'recompute_after_save',
    'LeagueStore',
]
