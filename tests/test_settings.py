import pytest

from config.settings import (
    CONFIG_ENV_VAR, DEFAULT_SETTINGS, ConfigurationError,
    load_settings, get_config_file, is_tool_enabled, get_enabled_tools
)
from config.tools import TOOLS


def test_missing_file_gives_defaults(tmp_path):
    assert load_settings(tmp_path / 'missing.json') == DEFAULT_SETTINGS


def test_malformed_file_gives_defaults(tmp_path):
    config_file = tmp_path / 'config.json'
    config_file.write_text('{not json')
    assert load_settings(config_file) == DEFAULT_SETTINGS


def test_file_overrides_merge_per_section(write_config):
    settings = load_settings(write_config({
        'text_diff': {'lcs_line_threshold': 50},
        'logging': {'level': 'DEBUG'}
    }))
    assert settings['text_diff'] == {'lcs_line_threshold': 50, 'lookahead_window': 5}
    assert settings['cron_parser']['max_iterations'] == 10000
    assert settings['logging']['level'] == 'DEBUG'


def test_defaults_are_not_mutated(write_config):
    load_settings(write_config({'text_diff': {'lookahead_window': 9}}))
    assert DEFAULT_SETTINGS['text_diff']['lookahead_window'] == 5


@pytest.mark.parametrize('value', [0, -5, 'ten', 2.5, True])
def test_bad_tunable_raises(write_config, value):
    with pytest.raises(ConfigurationError):
        load_settings(write_config({'cron_parser': {'max_iterations': value}}))


def test_env_var_selects_file(write_config, monkeypatch):
    config_file = write_config({'cron_parser': {'default_execution_count': 3}})
    monkeypatch.setenv(CONFIG_ENV_VAR, str(config_file))
    assert get_config_file() == config_file
    assert load_settings()['cron_parser']['default_execution_count'] == 3


def test_tool_switches():
    settings = {'tools': {'text-diff': {'enabled': False}}}
    assert not is_tool_enabled(settings, 'text-diff')
    assert is_tool_enabled(settings, 'cron-parser')
    assert [tool['id'] for tool in get_enabled_tools(settings, TOOLS)] == ['cron-parser']


@pytest.mark.parametrize('tool_conf', [True, 'off', None])
def test_non_object_tool_entry_raises(write_config, tool_conf):
    with pytest.raises(ConfigurationError):
        load_settings(write_config({'tools': {'text-diff': tool_conf}}))
