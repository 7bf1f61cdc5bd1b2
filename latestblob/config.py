import copy
import json
import os
import sys

DEFAULT_CONFIG = {
    "general": {
        "provider": "azure",
        "cache_dir": None,
        "text_only": True,
        "retries": 0,
        "delimiter": None,
        "chunk_size": 4 * 1024 * 1024,
        "verbose": False,
    }
}


def default_config_path():
    return os.path.join(os.path.expanduser("~"), ".latestblob", "config.json")


def load_config(config_path=None):
    """Load config from file, merge with defaults."""
    if config_path is None:
        config_path = default_config_path()

    config = copy.deepcopy(DEFAULT_CONFIG)

    if os.path.exists(config_path):
        try:
            with open(config_path, 'r') as f:
                user_config = json.load(f)
            if not isinstance(user_config, dict):
                raise ValueError("top level must be an object")
            # Merge user config over defaults
            for section, values in user_config.items():
                if section in config and isinstance(config[section], dict):
                    if isinstance(values, dict):
                        config[section].update(values)
                    else:
                        print(f"Warning: Ignoring non-object '{section}' section in {config_path}", file=sys.stderr)
                else:
                    config[section] = values
        except (json.JSONDecodeError, OSError, ValueError) as e:
            print(f"Warning: Could not load config from {config_path}: {e}", file=sys.stderr)

    return config


def get_setting(config, key):
    """Get a general setting, falling back to the built-in default."""
    section = config.get("general")
    if not isinstance(section, dict):
        section = {}
    return section.get(key, DEFAULT_CONFIG["general"].get(key))
