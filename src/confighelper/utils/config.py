import json
from pathlib import Path
from typing import Any, Dict, Optional

DEFAULT_CONFIG: Dict[str, Any] = {
    "project_name": "confighelper",
    # Command that rebuilds the host; its stderr becomes the diagnostics list
    "build_command": ["make"],
    "project_dir": ".",
    "cache_dir": "~/.cache/confighelper",
    # File whose saves trigger a recompile ("" disables watching)
    "watch_file": "",
    # [name, value] pairs; a null value unsets the variable
    "environment": [],
    # Empty means re-exec the current interpreter with the same arguments
    "restart_command": [],
    "tabstop": 8,
    "resync_diagnostics": False,
    "debounce_seconds": 0.5,
    "log_file": "/tmp/confighelper.log",
}


class ConfigManager:
    """
    Loads ~/.confighelper/config.json on top of DEFAULT_CONFIG.
    """

    def __init__(self, config_file: Optional[str] = None):
        if config_file:
            self.config_file = Path(config_file).expanduser()
            self.config_dir = self.config_file.parent
        else:
            self.config_dir = Path.home() / ".confighelper"
            self.config_file = self.config_dir / "config.json"
        self.config = self.load_config()

    def load_config(self) -> Dict[str, Any]:
        self.config_dir.mkdir(parents=True, exist_ok=True)
        config = DEFAULT_CONFIG.copy()
        if not self.config_file.exists():
            return config

        try:
            with open(self.config_file, "r") as f:
                user_config = json.load(f)
        except (json.JSONDecodeError, OSError):
            print(f"Warning: Could not read {self.config_file}, using defaults.")
            return config

        if isinstance(user_config, dict):
            config.update(user_config)
        return config

    def save_config(self):
        self.config_dir.mkdir(parents=True, exist_ok=True)
        with open(self.config_file, "w") as f:
            json.dump(self.config, f, indent=2)

    def get(self, key: str, default: Any = None) -> Any:
        return self.config.get(key, default)

    def set(self, key: str, value: Any):
        self.config[key] = value
        self.save_config()
