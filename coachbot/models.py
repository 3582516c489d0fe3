"""Data models for Coachbot."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, List, Optional


@dataclass(frozen=True)
class LeagueMetadata:
    """Snapshot of slow-changing league state. Replaced wholesale on refresh."""
    league_id: int
    name: str
    current_week: int
    current_scoring_period: int
    season_id: int
    first_week: int
    last_week: int
    is_active: bool
    last_updated: Optional[datetime] = None


@dataclass
class TeamStanding:
    """One row of the league table. Rank is assigned by rank_standings()."""
    team_id: int
    name: str
    abbreviation: str = ''
    wins: int = 0
    losses: int = 0
    ties: int = 0
    points_for: float = 0.0
    points_against: float = 0.0
    win_percentage: float = 0.0
    playoff_seed: int = 0
    rank: int = 0


@dataclass
class ScoreRecord:
    """A single matchup as reported by the data source (team IDs, not names)."""
    match_id: int
    home_team_id: int
    away_team_id: int
    home_score: float = 0.0
    away_score: float = 0.0
    home_projected: float = 0.0
    away_projected: float = 0.0
    is_completed: bool = False


@dataclass
class Matchup:
    """A matchup with team names attached, ready for aggregation and display."""
    home_team: str
    away_team: str
    home_score: float = 0.0
    away_score: float = 0.0
    home_projected: float = 0.0
    away_projected: float = 0.0
    is_completed: bool = False

    @property
    def total(self) -> float:
        return self.home_score + self.away_score


@dataclass
class Trophy:
    category: str  # HighScore, LowScore, BiggestWin, ClosestWin
    team_name: str
    value: float


@dataclass
class FinalScoreReport:
    matchups: List[Matchup] = field(default_factory=list)
    trophies: List[Trophy] = field(default_factory=list)

    def trophy(self, category: str) -> Optional[Trophy]:
        for trophy in self.trophies:
            if trophy.category == category:
                return trophy
        return None


@dataclass
class CloseGame:
    home_team: str
    away_team: str
    home_score: float
    away_score: float
    margin: float


@dataclass
class PlayerCandidate:
    """A rostered player considered by the who-has lookup. Built fresh per lookup."""
    id: int
    full_name: str
    owned_by_team_id: int = 0  # 0 = free agent
    position: str = ''
    pro_team: str = ''
    percent_owned: float = 0.0
    lineup_slot: str = ''
    points: float = 0.0
    points_are_projected: bool = True
    injury_status: str = ''
    is_starter: bool = False

    @property
    def is_free_agent(self) -> bool:
        return not self.owned_by_team_id


@dataclass
class NameMatch:
    """Best fuzzy match returned by the name resolver."""
    name: str
    payload: Any
    similarity: float


@dataclass
class RosterEntry:
    """A player on a fantasy roster as reported by the data source."""
    name: str
    position: str
    pro_team_id: int
    lineup_slot_id: int
    lineup_slot: str
    is_starter: bool
    injury_status: str = ''
    actual_points: Optional[float] = None  # None until a real stat line exists
    points: float = 0.0


@dataclass
class RosterPlayer:
    """A roster line ready for display."""
    name: str
    position: str
    points_label: str
    is_starter: bool
    lineup_slot: str
    injury_status: str = ''


@dataclass
class TeamRoster:
    team_name: str
    players: List[RosterPlayer] = field(default_factory=list)

    @property
    def starters(self) -> List[RosterPlayer]:
        return [p for p in self.players if p.is_starter]

    @property
    def bench(self) -> List[RosterPlayer]:
        return [p for p in self.players if not p.is_starter]


@dataclass
class PlayerToMonitor:
    name: str
    position: str
    injury_status: str


@dataclass
class TeamMonitorReport:
    team_name: str
    players: List[PlayerToMonitor] = field(default_factory=list)


@dataclass
class JobResult:
    """Outcome of one scheduled job firing."""
    job_id: str
    ok: bool
    fired_at: datetime
    error: Optional[str] = None
