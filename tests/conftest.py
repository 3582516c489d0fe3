"""Shared fixtures for the Coachbot test suite."""

from collections import Counter
from datetime import datetime, timezone

import pytest

from coachbot.models import LeagueMetadata, PlayerCandidate, RosterEntry, ScoreRecord, TeamStanding
from coachbot.schemas import LeagueConfig


def make_metadata(week: int = 5, **overrides) -> LeagueMetadata:
    values = dict(
        league_id=123,
        name='Test League',
        current_week=week,
        current_scoring_period=week,
        season_id=2024,
        first_week=1,
        last_week=17,
        is_active=True,
    )
    values.update(overrides)
    return LeagueMetadata(**values)


class FakeSource:
    """
    In-memory stand-in for ESPNClient.

    Any attribute set to an exception instance is raised by the matching
    fetch method instead of being returned.
    """

    def __init__(self, metadata=None, standings=None, scores=None, candidates=None,
                 rosters=None, bye_weeks=None):
        self.metadata = metadata or make_metadata()
        self.standings = standings or []
        self.scores = scores or []
        self.candidates = candidates or []
        self.rosters = rosters or {}
        self.bye_weeks = bye_weeks or {}
        self.calls = Counter()
        self.weeks = []

    @staticmethod
    def _result(value):
        if isinstance(value, Exception):
            raise value
        return value

    def fetch_league_metadata(self):
        self.calls['metadata'] += 1
        return self._result(self.metadata)

    def fetch_standings(self):
        self.calls['standings'] += 1
        return self._result(self.standings)

    def fetch_scores(self, week):
        self.calls['scores'] += 1
        self.weeks.append(week)
        return self._result(self.scores)

    def fetch_roster_candidates(self, week):
        self.calls['candidates'] += 1
        self.weeks.append(week)
        return self._result(self.candidates)

    def fetch_team_roster(self, team_id, week):
        self.calls['roster'] += 1
        self.weeks.append(week)
        if isinstance(self.rosters, Exception):
            raise self.rosters
        return self.rosters.get(team_id)

    def fetch_bye_weeks(self):
        self.calls['bye_weeks'] += 1
        return self._result(self.bye_weeks)


class FakeClock:
    """Manually advanced UTC clock."""

    def __init__(self, start: datetime = datetime(2024, 10, 6, 12, 0, tzinfo=timezone.utc)):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta):
        self.now = self.now + delta


@pytest.fixture
def league_config():
    """League with four teams and default lookup tables."""
    return LeagueConfig(
        league_name='Test League',
        team_names={1: 'Coach Dad', 2: 'UGF Pandas', 3: 'Beyond Cursed', 4: 'Stairway to Evans'},
    )


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def score_records():
    """Two matchups for week 5: 1 vs 2 (close), 3 vs 4 (blowout)."""
    return [
        ScoreRecord(match_id=1, home_team_id=1, away_team_id=2, home_score=101.5, away_score=95.25,
                    home_projected=110.0, away_projected=104.3),
        ScoreRecord(match_id=2, home_team_id=3, away_team_id=4, home_score=140.0, away_score=80.0,
                    home_projected=142.0, away_projected=90.0, is_completed=True),
    ]


@pytest.fixture
def standings():
    return [
        TeamStanding(team_id=1, name='Coach Dad', wins=2, losses=3, points_for=500.0,
                     points_against=520.0, win_percentage=0.4),
        TeamStanding(team_id=2, name='UGF Pandas', wins=4, losses=1, points_for=610.5,
                     points_against=480.0, win_percentage=0.8),
        TeamStanding(team_id=3, name='Beyond Cursed', wins=2, losses=3, points_for=530.0,
                     points_against=500.0, win_percentage=0.4),
    ]


@pytest.fixture
def candidates():
    return [
        PlayerCandidate(id=1, full_name='Patrick Mahomes', owned_by_team_id=1, position='QB',
                        pro_team='KC', percent_owned=99.8, lineup_slot='QB', points=24.36,
                        points_are_projected=False, is_starter=True),
        PlayerCandidate(id=2, full_name='Josh Allen', owned_by_team_id=2, position='QB',
                        pro_team='BUF', percent_owned=99.9, lineup_slot='QB', points=21.0,
                        injury_status='QUESTIONABLE', is_starter=True),
        PlayerCandidate(id=3, full_name='Travis Kelce', owned_by_team_id=1, position='TE',
                        pro_team='KC', percent_owned=98.0, lineup_slot='Bench', points=0.0,
                        injury_status='OUT', is_starter=False),
        PlayerCandidate(id=4, full_name='Davante Adams', owned_by_team_id=3, position='WR',
                        pro_team='NYJ', percent_owned=97.1, lineup_slot='WR', points=12.5,
                        points_are_projected=False, injury_status='OUT', is_starter=True),
    ]


@pytest.fixture
def roster_entries():
    return [
        RosterEntry(name='Travis Kelce', position='TE', pro_team_id=12, lineup_slot_id=6,
                    lineup_slot='TE', is_starter=True, actual_points=8.4),
        RosterEntry(name='Patrick Mahomes', position='QB', pro_team_id=12, lineup_slot_id=0,
                    lineup_slot='QB', is_starter=True, actual_points=24.36),
        RosterEntry(name='Bijan Robinson', position='RB', pro_team_id=1, lineup_slot_id=2,
                    lineup_slot='RB', is_starter=True, injury_status='QUESTIONABLE'),
        RosterEntry(name='Christian McCaffrey', position='RB', pro_team_id=25, lineup_slot_id=21,
                    lineup_slot='IR', is_starter=False, injury_status='INJURY_RESERVE'),
        RosterEntry(name='Tyler Lockett', position='WR', pro_team_id=26, lineup_slot_id=20,
                    lineup_slot='Bench', is_starter=False, actual_points=4.1),
    ]
