from pathlib import Path
from typing import Optional

import yaml

from rbstatus_core.client import DEFAULT_TIMEOUT
from rbstatus_core.patcher import DEFAULT_INSTALL_COMMAND, DEFAULT_RBT_COMMAND

DEFAULT_CONFIG: dict = {
    "store": "file",  # "file" | "sqlite" | "noop"
    "store_path": None,  # None = default path for the chosen store
    "timeout": DEFAULT_TIMEOUT,  # seconds; null in YAML disables the timeout
    "install_command": DEFAULT_INSTALL_COMMAND,
    "rbt_command": DEFAULT_RBT_COMMAND,
    "credentials": {},  # credential_id -> API token
}

DEFAULT_STORE_PATHS = {
    "file": ".rbstatus-servers.json",
    "sqlite": ".rbstatus.db",
}


def load_config(config_path: str = ".rbstatus.yml", cli_overrides: Optional[dict] = None) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .rbstatus.yml in the current directory
      3. CLI argument overrides
    """
    config = {**DEFAULT_CONFIG, "credentials": dict(DEFAULT_CONFIG["credentials"])}

    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            file_config = yaml.safe_load(f) or {}
        if not isinstance(file_config, dict):
            raise ValueError(f"{config_path} must contain a YAML mapping")
        config.update(file_config)

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    if config.get("credentials") is None:
        config["credentials"] = {}
    if not config.get("store_path"):
        config["store_path"] = DEFAULT_STORE_PATHS.get(config["store"])

    return config
