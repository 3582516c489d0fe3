"""ESPN fantasy football data source."""

import json
import logging
from typing import Optional, Tuple, TypeVar

import requests
from pydantic import BaseModel, ValidationError

from .constants import ESPN_BASE_URL, REQUEST_TIMEOUT, UNKNOWN
from .errors import SourceUnavailable
from .models import LeagueMetadata, PlayerCandidate, RosterEntry, ScoreRecord, TeamStanding
from .schemas import (
    Credentials,
    LeagueConfig,
    LeagueResponse,
    PlayerPoolEntry,
    ProScheduleResponse,
    ScoreboardResponse,
    TeamScorePayload,
)

T = TypeVar('T', bound=BaseModel)
logger = logging.getLogger('coachbot.espn')

ACTUAL_STATS = 0
PROJECTED_STATS = 1


def score_and_projection(team: TeamScorePayload) -> Tuple[float, float]:
    """Live score (falling back to the settled total) and live projection, 2 decimals."""
    score = team.total_points_live or team.total_points
    return round(score, 2), round(team.total_projected_points_live, 2)


def week_stat(entry: PlayerPoolEntry, week: int, source: int) -> Optional[float]:
    """Applied total of the stat line for (week, source), or None if ESPN has none."""
    for stat in entry.player.stats:
        if stat.scoring_period_id == week and stat.stat_source_id == source:
            return stat.applied_total
    return None


def player_points(entry: PlayerPoolEntry, week: int) -> Tuple[float, bool]:
    """
    Points for a player in a given week.

    Returns:
        (points, is_projected). Actual stats win over projections; with
        neither, the season applied total is returned as a projection.
    """
    actual = week_stat(entry, week, ACTUAL_STATS)
    if actual is not None:
        return actual, False
    projected = week_stat(entry, week, PROJECTED_STATS)
    if projected is not None:
        return projected, True
    return entry.applied_stat_total, True


def actual_points(entry: PlayerPoolEntry, week: int) -> Optional[float]:
    """Actual points for the week, or None when no real stat line exists yet."""
    return week_stat(entry, week, ACTUAL_STATS)


class ESPNClient:
    """
    Read-only client for one ESPN fantasy league.

    Every fetch is a single HTTP request with a fixed timeout. Failures are
    raised as SourceUnavailable and never retried here.
    """

    def __init__(
        self,
        year: str,
        league_id: str,
        swid: str,
        espn_s2: str,
        config: LeagueConfig,
        session: Optional[requests.Session] = None,
        timeout: float = REQUEST_TIMEOUT,
        base_url: str = ESPN_BASE_URL,
    ):
        self.year = year
        self.league_id = league_id
        self.config = config
        self.timeout = timeout
        self.base_url = base_url
        self.session = session or requests.Session()
        self.session.cookies.update({'SWID': swid, 'espn_s2': espn_s2})

    @classmethod
    def from_credentials(cls, credentials: Credentials, config: LeagueConfig) -> 'ESPNClient':
        return cls(
            year=credentials.year,
            league_id=credentials.league_id,
            swid=credentials.swid,
            espn_s2=credentials.espn_s2,
            config=config,
        )

    # ------------------------------------------------------------------ #
    # Transport
    # ------------------------------------------------------------------ #
    @property
    def league_endpoint(self) -> str:
        return f'/seasons/{self.year}/segments/0/leagues/{self.league_id}'

    def _get(
        self,
        endpoint: str,
        params: dict,
        schema: type[T],
        headers: Optional[dict] = None,
    ) -> T:
        url = f'{self.base_url}{endpoint}'
        logger.debug(f'GET {url} params={params}')
        try:
            response = self.session.get(url, params=params, headers=headers, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except requests.RequestException as e:
            logger.error(f'ESPN request failed ({endpoint}): {e}')
            raise SourceUnavailable(f'ESPN request failed: {e}') from e
        except ValueError as e:
            logger.error(f'ESPN returned invalid JSON ({endpoint}): {e}')
            raise SourceUnavailable(f'ESPN returned invalid JSON: {e}') from e

        try:
            return schema.model_validate(data)
        except ValidationError as e:
            logger.error(f'Unexpected ESPN response shape ({endpoint}): {e}')
            raise SourceUnavailable(f'unexpected ESPN response: {e.error_count()} invalid fields') from e

    @staticmethod
    def _matchup_filter(week: int) -> dict:
        filters = {'schedule': {'filterMatchupPeriodIds': {'value': [week]}}}
        return {'x-fantasy-filter': json.dumps(filters)}

    def _rosters(self, week: int) -> LeagueResponse:
        params = {'view': 'mRoster', 'scoringPeriodId': str(week)}
        return self._get(self.league_endpoint, params, LeagueResponse)

    # ------------------------------------------------------------------ #
    # Lookup tables
    # ------------------------------------------------------------------ #
    def team_name(self, team_id: int, fallback: str = UNKNOWN) -> str:
        return self.config.team_names.get(team_id, fallback)

    def position(self, position_id: int) -> str:
        return self.config.position_codes.get(position_id, UNKNOWN)

    def pro_team(self, pro_team_id: int) -> str:
        return self.config.pro_team_codes.get(pro_team_id, UNKNOWN)

    def lineup_slot(self, slot_id: int) -> str:
        return self.config.lineup_slots.get(slot_id, UNKNOWN)

    def is_starting_slot(self, slot_id: int) -> bool:
        return slot_id in self.config.starting_slot_ids

    # ------------------------------------------------------------------ #
    # Data source API
    # ------------------------------------------------------------------ #
    def fetch_league_metadata(self) -> LeagueMetadata:
        league = self._get(self.league_endpoint, {'view': 'mSettings'}, LeagueResponse)
        return LeagueMetadata(
            league_id=league.id,
            name=league.settings.name,
            current_week=league.status.current_matchup_period,
            current_scoring_period=league.scoring_period_id,
            season_id=league.season_id,
            first_week=league.status.first_scoring_period,
            last_week=league.status.final_scoring_period,
            is_active=league.status.is_active,
        )

    def fetch_standings(self) -> list[TeamStanding]:
        """Teams with their overall record, in ESPN order (unranked)."""
        league = self._get(self.league_endpoint, {'view': 'mTeam'}, LeagueResponse)
        standings = []
        for team in league.teams:
            overall = team.record.overall
            standings.append(
                TeamStanding(
                    team_id=team.id,
                    name=self.team_name(team.id, fallback=team.name or UNKNOWN),
                    abbreviation=team.abbrev,
                    wins=overall.wins,
                    losses=overall.losses,
                    ties=overall.ties,
                    points_for=overall.points_for,
                    points_against=overall.points_against,
                    win_percentage=overall.percentage,
                    playoff_seed=team.playoff_seed,
                )
            )
        return standings

    def fetch_scores(self, week: int) -> list[ScoreRecord]:
        scoreboard = self._get(
            self.league_endpoint,
            {'view': 'mScoreboard'},
            ScoreboardResponse,
            headers=self._matchup_filter(week),
        )
        records = []
        for match in scoreboard.schedule:
            home_score, home_projected = score_and_projection(match.home)
            away_score, away_projected = score_and_projection(match.away)
            records.append(
                ScoreRecord(
                    match_id=match.id,
                    home_team_id=match.home.team_id,
                    away_team_id=match.away.team_id,
                    home_score=home_score,
                    away_score=away_score,
                    home_projected=home_projected,
                    away_projected=away_projected,
                    is_completed=match.winner != 'UNDECIDED',
                )
            )
        return records

    def fetch_roster_candidates(self, week: int) -> list[PlayerCandidate]:
        """Every rostered player in the league, with week points and ownership."""
        league = self._rosters(week)
        candidates = []
        for team in league.teams:
            for entry in team.roster.entries:
                pool = entry.player_pool_entry
                player = pool.player
                points, projected = player_points(pool, week)
                candidates.append(
                    PlayerCandidate(
                        id=pool.id,
                        full_name=player.full_name,
                        owned_by_team_id=pool.on_team_id or team.id,
                        position=self.position(player.default_position_id),
                        pro_team=self.pro_team(player.pro_team_id),
                        percent_owned=player.ownership.percent_owned,
                        lineup_slot=self.lineup_slot(entry.lineup_slot_id),
                        points=points,
                        points_are_projected=projected,
                        injury_status=player.injury_status,
                        is_starter=self.is_starting_slot(entry.lineup_slot_id),
                    )
                )
        return candidates

    def fetch_team_roster(self, team_id: int, week: int) -> Optional[list[RosterEntry]]:
        """Roster entries for one team, or None if the league has no such team."""
        league = self._rosters(week)
        team = next((t for t in league.teams if t.id == team_id), None)
        if team is None:
            return None

        entries = []
        for entry in team.roster.entries:
            pool = entry.player_pool_entry
            player = pool.player
            points, _ = player_points(pool, week)
            entries.append(
                RosterEntry(
                    name=player.full_name,
                    position=self.position(player.default_position_id),
                    pro_team_id=player.pro_team_id,
                    lineup_slot_id=entry.lineup_slot_id,
                    lineup_slot=self.lineup_slot(entry.lineup_slot_id),
                    is_starter=self.is_starting_slot(entry.lineup_slot_id),
                    injury_status=player.injury_status,
                    actual_points=actual_points(pool, week),
                    points=points,
                )
            )
        return entries

    def fetch_bye_weeks(self) -> dict[int, int]:
        """Pro team ID -> bye week for the season."""
        schedule = self._get(
            f'/seasons/{self.year}',
            {'view': 'proTeamSchedules_wl'},
            ProScheduleResponse,
        )
        return {team.id: team.bye_week for team in schedule.settings.pro_teams if team.bye_week > 0}
