from .models import (
    LeagueMetadata,
    TeamStanding,
    ScoreRecord,
    Matchup,
    Trophy,
    FinalScoreReport,
    CloseGame,
    PlayerCandidate,
    NameMatch,
    JobResult,
)
from .errors import (
    CoachbotError,
    ConfigError,
    SourceUnavailable,
    ReportError,
    DeliveryError,
    SchedulerMisuse,
)
from .name_matcher import resolve, similarity
from .cache import MetadataCache
from .scores import aggregate, find_close_games, rank_standings
from .service import FantasyService
from .scheduler import JobScheduler, ScheduledJob, build_report_jobs
from .espn import ESPNClient
from .telegram import TelegramBot
from .commands import CommandHandler

__all__ = [
    # Models
    'LeagueMetadata',
    'TeamStanding',
    'ScoreRecord',
    'Matchup',
    'Trophy',
    'FinalScoreReport',
    'CloseGame',
    'PlayerCandidate',
    'NameMatch',
    'JobResult',
    # Errors
    'CoachbotError',
    'ConfigError',
    'SourceUnavailable',
    'ReportError',
    'DeliveryError',
    'SchedulerMisuse',
    # Core
    'resolve',
    'similarity',
    'MetadataCache',
    'aggregate',
    'find_close_games',
    'rank_standings',
    'FantasyService',
    # Scheduling
    'JobScheduler',
    'ScheduledJob',
    'build_report_jobs',
    # Transports
    'ESPNClient',
    'TelegramBot',
    'CommandHandler',
]
