"""Constants and default lookup tables for Coachbot.

The lookup tables here are only defaults. The running bot reads its tables
from data/league_config.json (see coachbot.config) so leagues and seasons can
change without touching code.
"""

from datetime import timedelta

# ESPN defaultPositionId -> position abbreviation
POSITION_CODES = {
    1: 'QB',
    2: 'RB',
    3: 'WR',
    4: 'TE',
    5: 'K',
    16: 'D/ST',
}

# ESPN proTeamId -> NFL team abbreviation
PRO_TEAM_CODES = {
    1: 'ATL', 2: 'BUF', 3: 'CHI', 4: 'CIN', 5: 'CLE', 6: 'DAL', 7: 'DEN', 8: 'DET',
    9: 'GB', 10: 'TEN', 11: 'IND', 12: 'KC', 13: 'LV', 14: 'LAR', 15: 'MIA', 16: 'MIN',
    17: 'NE', 18: 'NO', 19: 'NYG', 20: 'NYJ', 21: 'PHI', 22: 'ARI', 23: 'PIT', 24: 'LAC',
    25: 'SF', 26: 'SEA', 27: 'TB', 28: 'WSH', 29: 'CAR', 30: 'JAX', 33: 'BAL', 34: 'HOU',
}

# ESPN lineupSlotId -> lineup slot label
LINEUP_SLOTS = {
    0: 'QB',
    2: 'RB',
    4: 'WR',
    6: 'TE',
    16: 'D/ST',
    17: 'K',
    20: 'Bench',
    21: 'IR',
    23: 'FLEX',
}

STARTING_SLOT_IDS = [0, 2, 4, 6, 16, 17, 23]
IR_SLOT_ID = 21

# Starter display order on the roster report
STARTER_ORDER = ['QB', 'RB', 'WR', 'TE', 'FLEX', 'D/ST', 'K']

MONITOR_STATUSES = ('QUESTIONABLE', 'DOUBTFUL', 'OUT')

INJURY_ABBREVIATIONS = {
    'QUESTIONABLE': 'Q',
    'DOUBTFUL': 'D',
    'OUT': 'O',
}

UNKNOWN = 'Unknown'

# Matching / aggregation
PLAYER_MATCH_THRESHOLD = 0.7
TEAM_MATCH_THRESHOLD = 0.6
CLOSE_GAME_MARGIN = 16.0

METADATA_TTL = timedelta(hours=24)

# ESPN transport
ESPN_BASE_URL = 'https://lm-api-reads.fantasy.espn.com/apis/v3/games/ffl'
REQUEST_TIMEOUT = 10

DEFAULT_TIMEZONE = 'America/Chicago'

# Weekly pushes (id, report kind, weekdays, HH:MM times) in DEFAULT_TIMEZONE
DEFAULT_JOBS = [
    {'id': 'close_games', 'report': 'close_games', 'days': ['mon'], 'times': ['17:30']},
    {'id': 'scores_weekday', 'report': 'scores', 'days': ['mon', 'tue', 'fri'], 'times': ['07:30']},
    {'id': 'scores_sunday', 'report': 'scores', 'days': ['sun'], 'times': ['15:00', '19:00']},
    {'id': 'trophies', 'report': 'final_scores', 'days': ['tue'], 'times': ['07:30']},
    {'id': 'standings', 'report': 'standings', 'days': ['wed'], 'times': ['07:30']},
    {'id': 'matchups', 'report': 'matchups', 'days': ['thu'], 'times': ['18:30']},
    {'id': 'monitor', 'report': 'monitor', 'days': ['sun'], 'times': ['07:30']},
]
