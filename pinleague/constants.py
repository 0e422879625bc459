"""Constants and defaults for league scoring."""

# League config defaults
DEFAULT_MODE = 'handicap'
SCRATCH_MODE = 'scratch'
DEFAULT_HANDICAP_BASE = 200
DEFAULT_HANDICAP_PERCENT = 90
DEFAULT_GAMES_PER_WEEK = 3
DEFAULT_HCP_LOCK_FROM_WEEK = 1
DEFAULT_HCP_LOCK_WEEKS = 0

# Game columns on a match sheet, in bowling order
GAME_KEYS = ('g1', 'g2', 'g3')

# A perfect game; anything above this on a sheet is a data-entry error
MAX_GAME_SCORE = 300

# Team label for players without a team membership
FREE_AGENT_LABEL = '— Sub / Free Agent —'

# Environment variable that overrides the league data directory
DATA_DIR_ENV = 'PINLEAGUE_DATA_DIR'
DEFAULT_DATA_DIR = 'data'
