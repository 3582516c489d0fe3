"""Pydantic schemas for league configuration, credentials and ESPN payloads."""

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, Field, field_validator

from .constants import (
    CLOSE_GAME_MARGIN,
    DEFAULT_JOBS,
    DEFAULT_TIMEZONE,
    LINEUP_SLOTS,
    PLAYER_MATCH_THRESHOLD,
    POSITION_CODES,
    PRO_TEAM_CODES,
    STARTING_SLOT_IDS,
    TEAM_MATCH_THRESHOLD,
)

WEEKDAYS = ('mon', 'tue', 'wed', 'thu', 'fri', 'sat', 'sun')
REPORT_KINDS = ('scores', 'standings', 'final_scores', 'close_games', 'matchups', 'monitor')


# =============================================================================
# League configuration (data/league_config.json)
# =============================================================================


class JobConfig(BaseModel):
    """One recurring report push."""

    id: str = Field(..., min_length=1)
    report: str = Field(..., pattern=r'^(scores|standings|final_scores|close_games|matchups|monitor)$')
    days: list[str] = Field(..., min_length=1)
    times: list[str] = Field(..., min_length=1)

    @field_validator('days')
    @classmethod
    def validate_days(cls, v):
        """Ensure weekdays use three-letter cron names."""
        days = [d.lower() for d in v]
        for day in days:
            if day not in WEEKDAYS:
                raise ValueError(f'Invalid weekday: {day}')
        return days

    @field_validator('times')
    @classmethod
    def validate_times(cls, v):
        """Ensure times are HH:MM on a 24 hour clock."""
        for value in v:
            hour, sep, minute = value.partition(':')
            if not sep or not hour.isdigit() or not minute.isdigit():
                raise ValueError(f'Invalid time (expected HH:MM): {value}')
            if not (0 <= int(hour) <= 23 and 0 <= int(minute) <= 59):
                raise ValueError(f'Time out of range: {value}')
        return v

    class Config:
        extra = 'forbid'


class ScheduleConfig(BaseModel):
    """Scheduler time zone and job table."""

    timezone: str = DEFAULT_TIMEZONE
    jobs: list[JobConfig] = Field(default_factory=lambda: [JobConfig(**job) for job in DEFAULT_JOBS])

    @field_validator('timezone')
    @classmethod
    def validate_timezone(cls, v):
        """Ensure the zone name resolves in the tz database."""
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f'Unknown time zone: {v}') from e
        return v

    @field_validator('jobs')
    @classmethod
    def validate_unique_ids(cls, v):
        """Ensure job ids are unique."""
        ids = [job.id for job in v]
        duplicates = sorted({i for i in ids if ids.count(i) > 1})
        if duplicates:
            raise ValueError(f'Duplicate job ids: {", ".join(duplicates)}')
        return v

    class Config:
        extra = 'forbid'


class LeagueConfig(BaseModel):
    """League configuration settings and lookup tables."""

    league_name: str = ''
    team_names: dict[int, str]
    position_codes: dict[int, str] = Field(default_factory=lambda: dict(POSITION_CODES))
    pro_team_codes: dict[int, str] = Field(default_factory=lambda: dict(PRO_TEAM_CODES))
    lineup_slots: dict[int, str] = Field(default_factory=lambda: dict(LINEUP_SLOTS))
    starting_slot_ids: list[int] = Field(default_factory=lambda: list(STARTING_SLOT_IDS))
    player_match_threshold: float = Field(PLAYER_MATCH_THRESHOLD, gt=0, lt=1)
    team_match_threshold: float = Field(TEAM_MATCH_THRESHOLD, gt=0, lt=1)
    close_game_margin: float = Field(CLOSE_GAME_MARGIN, ge=0)
    metadata_ttl_hours: float = Field(24, gt=0)
    schedule: ScheduleConfig = Field(default_factory=ScheduleConfig)

    @field_validator('team_names')
    @classmethod
    def validate_team_names(cls, v):
        """Ensure every team has a non-empty display name."""
        for team_id, name in v.items():
            if not name or not name.strip():
                raise ValueError(f'Team {team_id} has an empty name')
        return v

    class Config:
        extra = 'forbid'


class Credentials(BaseModel):
    """Secrets and deployment settings read from the environment."""

    year: str = Field(..., min_length=4)
    league_id: str = Field(..., min_length=1)
    swid: str = Field(..., min_length=1)
    espn_s2: str = Field(..., min_length=1)
    telegram_token: str = Field(..., min_length=1)
    chat_id: int
    health_port: int = Field(80, ge=0, le=65535)

    class Config:
        extra = 'forbid'


# =============================================================================
# ESPN response shapes (only the fields Coachbot reads)
# =============================================================================


class _ESPNModel(BaseModel):
    class Config:
        extra = 'ignore'
        populate_by_name = True


class Ownership(_ESPNModel):
    percent_owned: float = Field(0.0, alias='percentOwned')


class Stat(_ESPNModel):
    stat_source_id: int = Field(0, alias='statSourceId')
    scoring_period_id: int = Field(0, alias='scoringPeriodId')
    applied_total: float = Field(0.0, alias='appliedTotal')


class Player(_ESPNModel):
    id: int = 0
    full_name: str = Field('', alias='fullName')
    default_position_id: int = Field(0, alias='defaultPositionId')
    pro_team_id: int = Field(0, alias='proTeamId')
    ownership: Ownership = Field(default_factory=Ownership)
    stats: list[Stat] = Field(default_factory=list)
    injury_status: str = Field('', alias='injuryStatus')


class PlayerPoolEntry(_ESPNModel):
    id: int = 0
    on_team_id: int = Field(0, alias='onTeamId')
    player: Player = Field(default_factory=Player)
    applied_stat_total: float = Field(0.0, alias='appliedStatTotal')


class RosterEntryPayload(_ESPNModel):
    player_pool_entry: PlayerPoolEntry = Field(default_factory=PlayerPoolEntry, alias='playerPoolEntry')
    lineup_slot_id: int = Field(0, alias='lineupSlotId')


class Roster(_ESPNModel):
    entries: list[RosterEntryPayload] = Field(default_factory=list)


class RecordDetails(_ESPNModel):
    wins: int = 0
    losses: int = 0
    ties: int = 0
    percentage: float = 0.0
    points_for: float = Field(0.0, alias='pointsFor')
    points_against: float = Field(0.0, alias='pointsAgainst')


class Record(_ESPNModel):
    overall: RecordDetails = Field(default_factory=RecordDetails)


class TeamPayload(_ESPNModel):
    id: int
    abbrev: str = ''
    name: str = ''
    playoff_seed: int = Field(0, alias='playoffSeed')
    roster: Roster = Field(default_factory=Roster)
    record: Record = Field(default_factory=Record)


class Status(_ESPNModel):
    current_matchup_period: int = Field(0, alias='currentMatchupPeriod')
    final_scoring_period: int = Field(0, alias='finalScoringPeriod')
    first_scoring_period: int = Field(0, alias='firstScoringPeriod')
    is_active: bool = Field(False, alias='isActive')


class Settings(_ESPNModel):
    name: str = ''
    size: int = 0


class LeagueResponse(_ESPNModel):
    id: int = 0
    scoring_period_id: int = Field(0, alias='scoringPeriodId')
    season_id: int = Field(0, alias='seasonId')
    status: Status = Field(default_factory=Status)
    teams: list[TeamPayload] = Field(default_factory=list)
    settings: Settings = Field(default_factory=Settings)


class TeamScorePayload(_ESPNModel):
    team_id: int = Field(0, alias='teamId')
    total_points: float = Field(0.0, alias='totalPoints')
    total_points_live: float = Field(0.0, alias='totalPointsLive')
    total_projected_points_live: float = Field(0.0, alias='totalProjectedPointsLive')


class MatchupPayload(_ESPNModel):
    id: int = 0
    home: TeamScorePayload = Field(default_factory=TeamScorePayload)
    away: TeamScorePayload = Field(default_factory=TeamScorePayload)
    winner: str = 'UNDECIDED'


class ScoreboardResponse(_ESPNModel):
    schedule: list[MatchupPayload] = Field(default_factory=list)


class ProTeam(_ESPNModel):
    id: int = 0
    abbrev: str = ''
    bye_week: int = Field(0, alias='byeWeek')
    name: str = ''


class ProSettings(_ESPNModel):
    pro_teams: list[ProTeam] = Field(default_factory=list, alias='proTeams')


class ProScheduleResponse(_ESPNModel):
    settings: ProSettings = Field(default_factory=ProSettings)
