"""Chat command dispatch."""

import logging
from typing import Optional, Tuple

from .errors import ReportError
from .formatting import format_error

logger = logging.getLogger('coachbot.commands')

WELCOME_TEXT = 'Welcome to CoachBot! Use /help to see available commands.'
UNKNOWN_TEXT = 'Unknown command. Use /help to see available commands.'
HELP_TEXT = '\n'.join([
    'Available commands:',
    '/scores - Get current scores',
    '/standings - Get league standings',
    "/team <team> - View team's roster and points",
    '/whohas <player> - Check which team has a player',
    '/monitor - Get players to monitor',
    '/finalscore - Get final score report',
    '/mondaynight - Get close games for Monday night',
    '/matchup - Get matchups for this week',
])

# command -> (service method, action used in error messages)
REPORT_COMMANDS = {
    'scores': ('get_current_scores', 'fetching scores'),
    'standings': ('get_standings', 'fetching standings'),
    'monitor': ('get_players_to_monitor', 'fetching players to monitor'),
    'finalscore': ('get_final_score_report', 'generating final score report'),
    'mondaynight': ('get_close_games', 'generating Monday night close games report'),
    'matchup': ('get_matchups', 'generating matchups report'),
}

# command -> (service method, action, usage text)
LOOKUP_COMMANDS = {
    'whohas': (
        'who_has',
        'checking who has player',
        'Please provide a player name. Usage: /whohas <player name>',
    ),
    'team': (
        'get_team_roster',
        'getting team roster',
        'Please provide a team name. Usage: /team <team name>',
    ),
}


def parse_command(text: str) -> Optional[Tuple[str, str]]:
    """
    Split a chat message into (command, arguments).

    '/WhoHas@coachbot  Josh Allen ' -> ('whohas', 'Josh Allen'). Messages
    that are not commands return None.
    """
    text = (text or '').strip()
    if not text.startswith('/') or len(text) == 1:
        return None
    head, _, args = text[1:].partition(' ')
    command = head.split('@', 1)[0].lower()
    if not command:
        return None
    return command, args.strip()


class CommandHandler:
    """Turns a chat command into reply text using the reporting service."""

    def __init__(self, service):
        self.service = service

    def handle(self, command: str, args: str = '') -> str:
        command = command.lower()
        if command == 'start':
            return WELCOME_TEXT
        if command == 'help':
            return HELP_TEXT

        if command in REPORT_COMMANDS:
            method, action = REPORT_COMMANDS[command]
            return self._call(action, method)

        if command in LOOKUP_COMMANDS:
            method, action, usage = LOOKUP_COMMANDS[command]
            if not args.strip():
                return usage
            return self._call(action, method, args.strip())

        logger.info(f'Unknown command: /{command}')
        return UNKNOWN_TEXT

    def handle_text(self, text: str) -> Optional[str]:
        """Reply for a raw chat message, or None when it is not a command."""
        parsed = parse_command(text)
        if parsed is None:
            return None
        return self.handle(*parsed)

    def _call(self, action: str, method: str, *args) -> str:
        try:
            return getattr(self.service, method)(*args)
        except ReportError as e:
            return format_error(action, e)
        except Exception as e:
            logger.exception(f'Unexpected error {action}: {e}')
            return format_error(action, 'internal error')
