"""
Application settings.
Engine tunables and tool switches are read from a JSON config file and
merged over built-in defaults.
"""

import copy
import json
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

CONFIG_ENV_VAR = 'DEVKIT_TOOLS_CONFIG'

app_root = Path(__file__).parent.parent.parent

DEFAULT_SETTINGS: Dict[str, Any] = {
    'tools': {},
    'text_diff': {
        'lcs_line_threshold': 1000,
        'lookahead_window': 5
    },
    'cron_parser': {
        'max_iterations': 10000,
        'default_execution_count': 5
    },
    'logging': {
        'level': 'INFO'
    }
}

# Keys that must hold positive integers
INTEGER_SETTINGS = [
    ('text_diff', 'lcs_line_threshold'),
    ('text_diff', 'lookahead_window'),
    ('cron_parser', 'max_iterations'),
    ('cron_parser', 'default_execution_count'),
]


class ConfigurationError(Exception):
    """Raised when a configuration value has the wrong type."""
    pass


def get_config_file() -> Path:
    """Get the config file path, honouring the environment override."""
    config_file = os.environ.get(CONFIG_ENV_VAR)
    if config_file:
        return Path(config_file)
    return app_root / "config" / "config.json"


def _read_config_file(config_file: Path) -> Dict[str, Any]:
    if config_file.exists():
        try:
            with open(config_file, 'r', encoding='utf-8') as f:
                config = json.load(f)
                if isinstance(config, dict):
                    return config
        except (json.JSONDecodeError, IOError):
            pass
    return {}


def load_settings(config_file: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    """
    Load settings from the config file.

    Args:
        config_file: Explicit path; defaults to get_config_file()

    Returns:
        Defaults with each section updated from the file. A missing or
        malformed file yields the defaults.

    Raises:
        ConfigurationError: If a numeric tunable is not a positive integer,
            or a tool entry is not an object
    """
    settings = copy.deepcopy(DEFAULT_SETTINGS)
    config = _read_config_file(Path(config_file) if config_file else get_config_file())

    for section, values in config.items():
        if isinstance(values, dict) and isinstance(settings.get(section), dict):
            settings[section].update(values)

    for section, key in INTEGER_SETTINGS:
        value = settings[section][key]
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            raise ConfigurationError(f"{section}.{key} must be a positive integer, got {value!r}")

    for tool_id, tool_conf in settings['tools'].items():
        if not isinstance(tool_conf, dict):
            raise ConfigurationError(f"tools.{tool_id} must be an object, got {tool_conf!r}")

    return settings


def is_tool_enabled(settings: Dict[str, Any], tool_id: str) -> bool:
    """Check if a tool is enabled in config. Defaults to True if not specified."""
    tool_conf = settings.get('tools', {}).get(tool_id, {})
    return tool_conf.get('enabled', True)


def get_enabled_tools(settings: Dict[str, Any], tools_list: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Filter tools list to only include enabled tools."""
    return [tool for tool in tools_list if is_tool_enabled(settings, tool.get('id', ''))]
