"""Report orchestration shared by chat commands and scheduled pushes."""

import logging
from datetime import timedelta
from typing import Callable, Optional, TypeVar

from .cache import MetadataCache
from .constants import UNKNOWN
from .errors import ReportError, SourceUnavailable
from .formatting import (
    format_close_games,
    format_final_scores,
    format_matchups,
    format_players_to_monitor,
    format_roster,
    format_scores,
    format_standings,
    format_team_not_found,
    format_who_has,
)
from .models import Matchup
from .name_matcher import resolve
from .rosters import build_team_roster, players_to_monitor
from .schemas import LeagueConfig
from .scores import aggregate, find_close_games, name_matchups, rank_standings

R = TypeVar('R')
logger = logging.getLogger('coachbot.service')

# Report kind (as used in the job table and on the command line) -> method
REPORT_METHODS = {
    'scores': 'get_current_scores',
    'standings': 'get_standings',
    'final_scores': 'get_final_score_report',
    'close_games': 'get_close_games',
    'matchups': 'get_matchups',
    'monitor': 'get_players_to_monitor',
}


class FantasyService:
    """
    Builds every report the bot can send.

    The data source is any object with the ESPNClient fetch_* methods. Each
    public report method returns finished text or raises ReportError with a
    short user-facing message. Lookups that find nothing return an
    informational message instead of raising.
    """

    def __init__(self, source, config: LeagueConfig, cache: Optional[MetadataCache] = None):
        self.source = source
        self.config = config
        self.cache = cache or MetadataCache(ttl=timedelta(hours=config.metadata_ttl_hours))

    @property
    def team_names(self) -> dict[int, str]:
        return self.config.team_names

    def _fetch(self, what: str, fn: Callable[..., R], *args) -> R:
        try:
            return fn(*args)
        except SourceUnavailable as e:
            logger.error(f'Failed fetching {what}: {e}')
            raise ReportError(what, e) from e

    def _matchups(self, week: int) -> list[Matchup]:
        records = self._fetch('current scores', self.source.fetch_scores, week)
        return name_matchups(records, self.team_names)

    # ------------------------------------------------------------------ #
    # Reports
    # ------------------------------------------------------------------ #
    def get_current_week(self) -> int:
        week = self._fetch('current week', self.cache.get_current_week, self.source.fetch_league_metadata)
        logger.info(f'Current week: {week}')
        return week

    def get_standings(self) -> str:
        standings = self._fetch('standings', self.source.fetch_standings)
        return format_standings(rank_standings(standings))

    def get_current_scores(self) -> str:
        week = self.get_current_week()
        return format_scores(week, self._matchups(week))

    def get_matchups(self) -> str:
        week = self.get_current_week()
        matchups = self._matchups(week)
        logger.info(f'Matchups: {len(matchups)}')
        return format_matchups(week, matchups)

    def get_final_score_report(self) -> str:
        week = self.get_current_week()
        return format_final_scores(aggregate(self._matchups(week)))

    def get_close_games(self) -> str:
        week = self.get_current_week()
        close_games = find_close_games(self._matchups(week), self.config.close_game_margin)
        return format_close_games(close_games)

    def get_players_to_monitor(self) -> str:
        week = self.get_current_week()
        candidates = self._fetch('players to monitor', self.source.fetch_roster_candidates, week)
        return format_players_to_monitor(week, players_to_monitor(candidates, self.team_names))

    def who_has(self, player_name: str) -> str:
        """Which fantasy team owns the player closest to player_name."""
        week = self.get_current_week()
        candidates = self._fetch('league rosters', self.source.fetch_roster_candidates, week)
        match = resolve(
            player_name,
            [(c.full_name, c) for c in candidates],
            self.config.player_match_threshold,
        )
        if match is None:
            logger.info(f'No player match for {player_name!r}')
            return format_who_has(player_name, None)

        player = match.payload
        team_name = self.team_names.get(player.owned_by_team_id, UNKNOWN)
        return format_who_has(player_name, player, team_name)

    def get_team_roster(self, team_name: str) -> str:
        """Roster of the fantasy team whose name is closest to team_name."""
        week = self.get_current_week()
        match = resolve(
            team_name,
            [(name, team_id) for team_id, name in self.team_names.items()],
            self.config.team_match_threshold,
        )
        if match is None:
            logger.info(f'No team match for {team_name!r}')
            return format_team_not_found(team_name)

        entries = self._fetch('team roster', self.source.fetch_team_roster, match.payload, week)
        if entries is None:
            return format_team_not_found(team_name)
        bye_weeks = self._fetch('pro schedule', self.source.fetch_bye_weeks)
        return format_roster(build_team_roster(match.name, entries, bye_weeks, week))

    def report(self, kind: str) -> str:
        """Generate a report by kind name (see REPORT_METHODS)."""
        try:
            method = REPORT_METHODS[kind]
        except KeyError:
            raise ValueError(f'Unknown report kind: {kind}') from None
        return getattr(self, method)()
