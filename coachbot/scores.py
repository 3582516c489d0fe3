"""Weekly score aggregation: trophies, close games and standings order.

Everything in this module is a pure function of its inputs. Nothing reads
the clock or the network, and inputs are never mutated.
"""

import math
from dataclasses import replace
from typing import Iterable, List, Mapping, Sequence

from .constants import CLOSE_GAME_MARGIN, UNKNOWN
from .models import CloseGame, FinalScoreReport, Matchup, ScoreRecord, TeamStanding, Trophy

HIGH_SCORE = 'HighScore'
LOW_SCORE = 'LowScore'
BIGGEST_WIN = 'BiggestWin'
CLOSEST_WIN = 'ClosestWin'


def name_matchups(records: Iterable[ScoreRecord], team_names: Mapping[int, str]) -> List[Matchup]:
    """Attach display names to score records using the league's team directory."""
    return [
        Matchup(
            home_team=team_names.get(record.home_team_id, UNKNOWN),
            away_team=team_names.get(record.away_team_id, UNKNOWN),
            home_score=record.home_score,
            away_score=record.away_score,
            home_projected=record.home_projected,
            away_projected=record.away_projected,
            is_completed=record.is_completed,
        )
        for record in records
    ]


def margin(matchup: Matchup) -> float:
    """Absolute point difference, rounded to score precision (2 decimals)."""
    return round(abs(matchup.home_score - matchup.away_score), 2)


def winner(matchup: Matchup) -> str:
    """Team credited with the win. An exact tie is credited to the home team."""
    if matchup.home_score >= matchup.away_score:
        return matchup.home_team
    return matchup.away_team


def aggregate(matchups: Sequence[Matchup]) -> FinalScoreReport:
    """
    Build the final-score report for a week.

    Matchups are ordered by combined score, highest first. Trophies:
    - HighScore / LowScore: best and worst single-team score, home and away
    - BiggestWin / ClosestWin: largest and smallest winning margin

    With no matchups the trophies keep their sentinels (-inf / +inf) and an
    empty team name; callers should treat that as "nothing to report".

    Args:
        matchups: Named matchups for one week

    Returns:
        FinalScoreReport with ordered matchups and four trophies
    """
    high_score, high_team = -math.inf, ''
    low_score, low_team = math.inf, ''
    biggest_win, biggest_team = -math.inf, ''
    closest_win, closest_team = math.inf, ''

    for m in matchups:
        for team, score in ((m.home_team, m.home_score), (m.away_team, m.away_score)):
            if score > high_score:
                high_score, high_team = score, team
            if score < low_score:
                low_score, low_team = score, team

        diff = margin(m)
        if diff > biggest_win:
            biggest_win, biggest_team = diff, winner(m)
        if diff < closest_win:
            closest_win, closest_team = diff, winner(m)

    ordered = sorted(matchups, key=lambda m: m.total, reverse=True)
    return FinalScoreReport(
        matchups=ordered,
        trophies=[
            Trophy(category=HIGH_SCORE, team_name=high_team, value=high_score),
            Trophy(category=LOW_SCORE, team_name=low_team, value=low_score),
            Trophy(category=BIGGEST_WIN, team_name=biggest_team, value=biggest_win),
            Trophy(category=CLOSEST_WIN, team_name=closest_team, value=closest_win),
        ],
    )


def find_close_games(
    matchups: Iterable[Matchup],
    max_margin: float = CLOSE_GAME_MARGIN,
) -> List[CloseGame]:
    """
    Matchups still within reach, closest first.

    Args:
        matchups: Named matchups for one week
        max_margin: Largest margin (inclusive) that still counts as close

    Returns:
        CloseGame list sorted by ascending margin
    """
    close_games = [
        CloseGame(
            home_team=m.home_team,
            away_team=m.away_team,
            home_score=m.home_score,
            away_score=m.away_score,
            margin=margin(m),
        )
        for m in matchups
        if margin(m) <= max_margin
    ]
    return sorted(close_games, key=lambda g: g.margin)


def rank_standings(standings: Iterable[TeamStanding]) -> List[TeamStanding]:
    """
    Order the league table and assign ranks.

    Sorted by win percentage, then points for, both descending. Rank is the
    1-based position after sorting. Returns new objects; inputs are untouched.
    """
    ordered = sorted(standings, key=lambda t: (-t.win_percentage, -t.points_for))
    ranked = []
    for rank, team in enumerate(ordered, 1):
        ranked.append(replace(team, rank=rank))
    return ranked
