"""Tests for league configuration and credential loading."""

import json

import pytest

from coachbot.config import DEFAULT_CONFIG_PATH, clear_config_cache, get_config, load_credentials
from coachbot.errors import ConfigError
from coachbot.schemas import JobConfig, LeagueConfig, ScheduleConfig
from coachbot.utils import load_json

ENV = {
    'YEAR': '2024',
    'LEAGUE_ID': '123456',
    'SWID': '{ABC}',
    'ESPN_S2': 'cookie',
    'TELEGRAM_TOKEN': '123:abc',
    'CHAT_ID': '-1001234',
}


@pytest.fixture(autouse=True)
def fresh_config_cache():
    clear_config_cache()
    yield
    clear_config_cache()


@pytest.fixture
def config_file(tmp_path, monkeypatch):
    def write(data):
        path = tmp_path / 'league_config.json'
        path.write_text(json.dumps(data))
        monkeypatch.setenv('COACHBOT_CONFIG', str(path))
        return path
    return write


class TestLeagueConfig:
    """Tests for the league configuration file."""

    def test_shipped_config_is_valid(self):
        config = load_json(DEFAULT_CONFIG_PATH, schema=LeagueConfig)

        assert config.team_names[2] == 'Coach Dad'
        assert len(config.team_names) == 6
        assert config.schedule.timezone == 'America/Chicago'
        assert {job.id for job in config.schedule.jobs} >= {'close_games', 'trophies', 'monitor'}

    def test_override_path_and_cache(self, config_file):
        config_file({'team_names': {'1': 'Only Team'}})

        config = get_config()
        assert config.team_names == {1: 'Only Team'}
        assert get_config() is config

    def test_defaults_filled_in(self, config_file):
        config_file({'team_names': {'1': 'Only Team'}})
        config = get_config()

        assert config.position_codes[1] == 'QB'
        assert config.pro_team_codes[12] == 'KC'
        assert config.player_match_threshold == 0.7
        assert config.team_match_threshold == 0.6
        assert config.close_game_margin == 16.0
        assert len(config.schedule.jobs) == 7

    def test_unknown_field_rejected(self, config_file):
        config_file({'team_names': {'1': 'A'}, 'teem_names': {}})
        with pytest.raises(ValueError, match='Schema validation failed'):
            get_config()

    def test_empty_team_name_rejected(self, config_file):
        config_file({'team_names': {'1': '  '}})
        with pytest.raises(ValueError):
            get_config()

    def test_missing_file(self, monkeypatch, tmp_path):
        monkeypatch.setenv('COACHBOT_CONFIG', str(tmp_path / 'missing.json'))
        with pytest.raises(FileNotFoundError):
            get_config()


class TestScheduleConfig:
    """Tests for job table validation."""

    def test_days_lowercased(self):
        job = JobConfig(id='a', report='scores', days=['Mon', 'FRI'], times=['07:30'])
        assert job.days == ['mon', 'fri']

    @pytest.mark.parametrize('days, times', [
        (['monday'], ['07:30']),
        (['mon'], ['7.30']),
        (['mon'], ['24:00']),
        ([], ['07:30']),
    ])
    def test_invalid_job(self, days, times):
        with pytest.raises(ValueError):
            JobConfig(id='a', report='scores', days=days, times=times)

    def test_unknown_report(self):
        with pytest.raises(ValueError):
            JobConfig(id='a', report='weather', days=['mon'], times=['07:30'])

    def test_unknown_timezone(self):
        with pytest.raises(ValueError, match='Unknown time zone'):
            ScheduleConfig(timezone='Mars/Olympus_Mons')

    def test_duplicate_job_ids(self):
        job = {'id': 'a', 'report': 'scores', 'days': ['mon'], 'times': ['07:30']}
        with pytest.raises(ValueError, match='Duplicate job ids: a'):
            ScheduleConfig(jobs=[job, job])


class TestCredentials:
    """Tests for reading secrets from the environment."""

    def test_all_present(self):
        credentials = load_credentials(environ=ENV)

        assert credentials.year == '2024'
        assert credentials.chat_id == -1001234
        assert credentials.health_port == 80

    def test_health_port_override(self):
        credentials = load_credentials(environ={**ENV, 'HEALTH_PORT': '8080'})
        assert credentials.health_port == 8080

    def test_missing_variables_listed(self):
        env = {k: v for k, v in ENV.items() if k not in ('SWID', 'CHAT_ID')}
        with pytest.raises(ConfigError) as exc:
            load_credentials(environ=env)
        assert 'SWID' in str(exc.value)
        assert 'CHAT_ID' in str(exc.value)

    def test_empty_value_counts_as_missing(self):
        with pytest.raises(ConfigError, match='ESPN_S2'):
            load_credentials(environ={**ENV, 'ESPN_S2': ''})

    def test_malformed_value(self):
        with pytest.raises(ConfigError, match='Invalid environment configuration'):
            load_credentials(environ={**ENV, 'CHAT_ID': 'not-a-number'})
