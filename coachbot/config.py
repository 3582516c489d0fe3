"""League configuration and credential loading."""

import os
from functools import lru_cache
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv
from pydantic import ValidationError

from .errors import ConfigError
from .schemas import Credentials, LeagueConfig
from .utils import load_json

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / 'data' / 'league_config.json'

# Credentials field -> environment variable
ENV_VARS = {
    'year': 'YEAR',
    'league_id': 'LEAGUE_ID',
    'swid': 'SWID',
    'espn_s2': 'ESPN_S2',
    'telegram_token': 'TELEGRAM_TOKEN',
    'chat_id': 'CHAT_ID',
    'health_port': 'HEALTH_PORT',
}


def config_path() -> Path:
    """Path of the league config file, honouring COACHBOT_CONFIG."""
    override = os.environ.get('COACHBOT_CONFIG')
    return Path(override) if override else DEFAULT_CONFIG_PATH


@lru_cache(maxsize=1)
def get_config() -> LeagueConfig:
    """
    Load league configuration from data/league_config.json.

    Configuration is cached after first load.

    Returns:
        LeagueConfig object with validated settings

    Raises:
        FileNotFoundError: If the config file doesn't exist
        ValueError: If config file has invalid structure

    Example:
        from coachbot.config import get_config
        config = get_config()
        print(config.schedule.timezone)
    """
    return load_json(config_path(), schema=LeagueConfig)


def clear_config_cache() -> None:
    """
    Clear the configuration cache.

    Use this if the config file is modified during runtime
    and you need to reload it.
    """
    get_config.cache_clear()


def load_credentials(
    environ: Optional[Mapping[str, str]] = None,
    dotenv_path: Optional[Path] = None,
) -> Credentials:
    """
    Read ESPN and Telegram credentials from the environment.

    A .env file is loaded first when present; variables already set in the
    process environment win.

    Args:
        environ: Mapping to read instead of os.environ (tests)
        dotenv_path: Explicit .env location (default: search upwards from cwd)

    Returns:
        Validated Credentials

    Raises:
        ConfigError: If a required variable is missing or malformed
    """
    if environ is None:
        load_dotenv(dotenv_path)
        environ = os.environ

    values = {field: environ[var] for field, var in ENV_VARS.items() if environ.get(var)}
    try:
        return Credentials(**values)
    except ValidationError as e:
        missing = [ENV_VARS[field] for field in Credentials.model_fields if field not in values
                   and Credentials.model_fields[field].is_required()]
        if missing:
            raise ConfigError(f'Missing required environment variables: {", ".join(missing)}') from e
        raise ConfigError(f'Invalid environment configuration:\n{e}') from e
