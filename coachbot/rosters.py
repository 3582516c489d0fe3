"""Roster views and the injured-starters monitor list."""

from typing import Iterable, List, Mapping, Sequence

from .constants import IR_SLOT_ID, MONITOR_STATUSES, STARTER_ORDER, UNKNOWN
from .models import PlayerCandidate, PlayerToMonitor, RosterEntry, RosterPlayer, TeamMonitorReport, TeamRoster


def points_label(entry: RosterEntry, bye_weeks: Mapping[int, int], week: int) -> str:
    """
    Text shown in the points column of the roster report.

    IR beats BYE beats actual points; a player with no stat line yet is TBD.
    """
    if entry.lineup_slot_id == IR_SLOT_ID or entry.injury_status == 'INJURY_RESERVE':
        return 'IR'
    if bye_weeks.get(entry.pro_team_id) == week:
        return 'BYE'
    if entry.actual_points is not None:
        return f'{entry.actual_points:.2f}'
    return 'TBD'


def _starter_sort_key(player: RosterPlayer) -> int:
    if player.position in STARTER_ORDER:
        return STARTER_ORDER.index(player.position)
    return len(STARTER_ORDER)


def build_team_roster(
    team_name: str,
    entries: Iterable[RosterEntry],
    bye_weeks: Mapping[int, int],
    week: int,
) -> TeamRoster:
    """
    Turn raw roster entries into the display roster for one team.

    Starters come first in QB, RB, WR, TE, FLEX, D/ST, K order (players at
    the same position keep their roster order), followed by the bench.

    Args:
        team_name: Display name of the fantasy team
        entries: Roster entries from the data source
        bye_weeks: Pro team ID -> bye week
        week: Week being reported

    Returns:
        TeamRoster with starters then bench
    """
    starters: List[RosterPlayer] = []
    bench: List[RosterPlayer] = []
    for entry in entries:
        player = RosterPlayer(
            name=entry.name,
            position=entry.position,
            points_label=points_label(entry, bye_weeks, week),
            is_starter=entry.is_starter,
            lineup_slot=entry.lineup_slot,
            injury_status=entry.injury_status,
        )
        (starters if entry.is_starter else bench).append(player)

    starters.sort(key=_starter_sort_key)
    return TeamRoster(team_name=team_name, players=starters + bench)


def players_to_monitor(
    candidates: Sequence[PlayerCandidate],
    team_names: Mapping[int, str],
) -> List[TeamMonitorReport]:
    """
    Starters listed as questionable, doubtful or out, grouped by fantasy team.

    Teams appear in the order their first player appears in candidates;
    teams with nobody to monitor are left out.
    """
    reports: dict[int, TeamMonitorReport] = {}
    for candidate in candidates:
        if not candidate.owned_by_team_id or not candidate.is_starter:
            continue
        if candidate.injury_status not in MONITOR_STATUSES:
            continue
        report = reports.setdefault(
            candidate.owned_by_team_id,
            TeamMonitorReport(team_name=team_names.get(candidate.owned_by_team_id, UNKNOWN)),
        )
        report.players.append(
            PlayerToMonitor(
                name=candidate.full_name,
                position=candidate.position,
                injury_status=candidate.injury_status,
            )
        )
    return list(reports.values())
