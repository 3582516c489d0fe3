"""Text rendering for every report the bot sends.

Each function takes plain data and returns a Telegram Markdown string. They
never touch the network or the clock, never raise on well-typed input, and
render a placeholder line when there is nothing to show.
"""

import math
from typing import Optional, Sequence, Union

from .constants import INJURY_ABBREVIATIONS
from .models import (
    CloseGame,
    FinalScoreReport,
    Matchup,
    PlayerCandidate,
    RosterPlayer,
    TeamMonitorReport,
    TeamRoster,
    TeamStanding,
)
from .scores import BIGGEST_WIN, CLOSEST_WIN, HIGH_SCORE, LOW_SCORE

DIVIDER = '━━━━━━━━━━━━━━━━'

TROPHY_LINES = {
    HIGH_SCORE: 'Highest Score: {team} ({value:.2f})',
    LOW_SCORE: 'Lowest Score: {team} ({value:.2f})',
    BIGGEST_WIN: 'Biggest Win: {team} (Margin: {value:.2f})',
    CLOSEST_WIN: 'Closest Win: {team} (Margin: {value:.2f})',
}


def format_standings(standings: Sequence[TeamStanding]) -> str:
    lines = ['🏆 *Current Standings*', '']
    if not standings:
        lines.append('No standings available.')
        return '\n'.join(lines)

    for team in standings:
        lines.append(f'{team.rank}. *{team.name}*')
        lines.append(f'   Record: {team.wins}-{team.losses}-{team.ties}')
        lines.append(f'   Points For: {team.points_for:.2f}')
        lines.append(f'   Points Against: {team.points_against:.2f}')
        lines.append('')
    return '\n'.join(lines)


def format_scores(week: int, matchups: Sequence[Matchup]) -> str:
    """Live scoreboard: current and projected score for every matchup."""
    lines = [f'🏈 *Week {week} Current Scores*', '']
    if not matchups:
        lines.append('No matchups found for this week.')
        return '\n'.join(lines)

    for m in matchups:
        lines.append(f'*{m.home_team}* vs *{m.away_team}*')
        lines.append(f'Current: {m.home_score:.2f} - {m.away_score:.2f}')
        lines.append(f'Projected: {m.home_projected:.2f} - {m.away_projected:.2f}')
        if m.is_completed:
            lines.append('(Final)')
        lines.append('')
    return '\n'.join(lines)


def format_matchups(week: int, matchups: Sequence[Matchup]) -> str:
    """Matchup preview. The current score only shows once someone has scored."""
    lines = [f'🏈 *Week {week} Matchups*', '']
    if not matchups:
        lines.append('No matchups found for this week.')
        return '\n'.join(lines)

    for m in matchups:
        lines.append(f'*{m.home_team}* vs *{m.away_team}*')
        lines.append(f'Projected: {m.home_projected:.2f} - {m.away_projected:.2f}')
        if m.home_score > 0 or m.away_score > 0:
            current = f'Current: {m.home_score:.2f} - {m.away_score:.2f}'
            if m.is_completed:
                current += ' (Final)'
            lines.append(current)
        lines.append('')
    return '\n'.join(lines)


def format_who_has(query: str, player: Optional[PlayerCandidate], team_name: str = '') -> str:
    """
    Who-has lookup result.

    Args:
        query: What the user typed
        player: Matched player, or None when nothing was close enough
        team_name: Display name of the owning team (ignored for free agents)
    """
    if player is None:
        return f"🔍 No player found matching '{query}'."

    lines = [f'*{player.full_name}* ({player.position} - {player.pro_team})', DIVIDER]
    if player.is_free_agent:
        lines.append('Free Agent')
    else:
        lines.append(f'*{team_name}*')
        lines.append(player.lineup_slot if player.lineup_slot in ('Bench', 'IR') else 'Starting')

    points = f'{player.points:.2f}' if player.points > 0 else 'TBD'
    points_line = f'{points} pts'
    if player.points_are_projected:
        points_line += ' (Projected)'
    lines.append('')
    lines.append(points_line)
    lines.append(f'{player.percent_owned:.1f}% Rostered')
    return '\n'.join(lines)


def format_players_to_monitor(week: int, teams: Sequence[TeamMonitorReport]) -> str:
    lines = [f'🚑 *Week {week} Players to Monitor*', '']
    if not teams:
        lines.append('No players to monitor at this time.')
        return '\n'.join(lines)

    for team in teams:
        lines.append(f'*{team.team_name}:*')
        for player in team.players:
            lines.append(f'  • {player.position} {player.name} - {player.injury_status}')
        lines.append('')
    return '\n'.join(lines)


def format_final_scores(report: FinalScoreReport) -> str:
    """Final scores ordered by combined points, followed by the week's trophies."""
    lines = ['📊 *Final Scores:*', '']
    if not report.matchups:
        lines.append('No scores available for this week.')
        return '\n'.join(lines)

    for m in report.matchups:
        lines.append(f'{m.home_team} {m.home_score:.2f} - {m.away_score:.2f} {m.away_team}')

    lines.append('')
    lines.append('🏆 *Trophies:*')
    for trophy in report.trophies:
        template = TROPHY_LINES.get(trophy.category)
        # Sentinel values mean no team qualified
        if template is None or not trophy.team_name or math.isinf(trophy.value):
            continue
        lines.append(template.format(team=trophy.team_name, value=trophy.value))
    return '\n'.join(lines)


def format_close_games(close_games: Sequence[CloseGame]) -> str:
    lines = ['🏈 *Monday Night Watch List*', '']
    if not close_games:
        lines.append('No close games this week. All outcomes are likely decided.')
        return '\n'.join(lines)

    for game in close_games:
        lines.append(
            f'{game.home_team} {game.home_score:.2f} - {game.away_score:.2f} '
            f'{game.away_team} (Margin: {game.margin:.2f})'
        )
    return '\n'.join(lines)


def _roster_line(player: RosterPlayer) -> str:
    points = player.points_label
    if points not in ('IR', 'BYE'):
        points += ' pts'

    injury = ''
    abbreviation = INJURY_ABBREVIATIONS.get(player.injury_status)
    if abbreviation:
        injury = f' ({abbreviation})'
    return f'▫️ {player.position} {player.name}{injury} - {points}'


def format_roster(roster: TeamRoster) -> str:
    lines = [f"📋 *{roster.team_name}'s Roster*", '', '*Starting Lineup:*']
    starters = roster.starters
    lines.extend(_roster_line(p) for p in starters)
    if not starters:
        lines.append('No starters set.')

    lines.append('')
    lines.append('*Bench:*')
    bench = roster.bench
    lines.extend(_roster_line(p) for p in bench)
    if not bench:
        lines.append('Nobody on the bench.')
    return '\n'.join(lines)


def format_team_not_found(query: str) -> str:
    return f"🔍 No team found matching '{query}'."


def format_error(action: str, error: Union[BaseException, str]) -> str:
    """Short user-facing failure message. Never includes a traceback."""
    return f'Error {action}: {error}'
