"""Configuration loader for pyportal."""
import importlib.util
from pathlib import Path
from typing import Any, Dict

DEFAULT_CONFIG_FILENAME = "pyportal.config.py"

# Uppercase config name -> CLI option name
CONFIG_KEYS = {
    "TEMPLATES_DIR": "templates_dir",
    "LAYOUT": "layout",
    "ROOT_PATH": "root_path",
    "STATIC_DIR": "static_dir",
    "STATIC_PATH": "static_path",
    "HOST": "host",
    "PORT": "port",
    "DEBUG": "debug",
}

PATH_KEYS = {"templates_dir", "static_dir"}


def load_config(path: Path | str | None = None) -> Dict[str, Any]:
    """
    Load configuration from a python file.

    If path is provided, loads from there.
    Otherwise, looks for pyportal.config.py in the current working directory.

    Returns a dictionary of CLI option names mapped from the uppercase
    variables found in the config module. Unknown names are ignored.
    """
    if path is None:
        path = Path.cwd() / DEFAULT_CONFIG_FILENAME
    else:
        path = Path(path)

    if not path.exists():
        return {}

    try:
        spec = importlib.util.spec_from_file_location("pyportal_config", path)
        if spec is None or spec.loader is None:
            return {}

        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)
    except Exception as e:
        print(f"Warning: Failed to load config from {path}: {e}")
        return {}

    mapped_config = {}
    for key, option in CONFIG_KEYS.items():
        if hasattr(module, key):
            value = getattr(module, key)
            # Path objects become strings, like the CLI would pass them
            if option in PATH_KEYS and value is not None:
                value = str(value)
            mapped_config[option] = value
    return mapped_config
