# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2025 Maurice Garcia

from __future__ import annotations

import json
import os
from typing import Any, TypeVar

T = TypeVar("T")


class ConfigManager:
    """
    Manages application configuration stored in JSON format.

    Resolution order for the configuration file:
        1) explicit ``config_path`` argument
        2) ``PYIFADMIN_CONFIG`` environment variable
        3) the packaged default: src/pyifadmin/settings/system.json
    """

    ENV_CONFIG_PATH = "PYIFADMIN_CONFIG"

    def __init__(self, config_path: str | None = None) -> None:

        CONFIG_NAME = "system.json"
        CONFIG_DIR = "settings"
        CONFIG_PATH = os.path.join(CONFIG_DIR, CONFIG_NAME)

        env_path = os.environ.get(self.ENV_CONFIG_PATH, "").strip()

        if config_path:
            self._config_path = config_path
        elif env_path:
            self._config_path = env_path
        else:
            # One folder up from this file
            current_dir = os.path.dirname(os.path.abspath(__file__))
            root_dir = os.path.abspath(os.path.join(current_dir, ".."))
            self._config_path = os.path.join(root_dir, CONFIG_PATH)

        self._config_data: dict[str, Any] = {}
        self._load()

    def get_config_path(self) -> str:
        """Returns the path to the configuration file."""
        return self._config_path

    def _load(self) -> None:
        """Loads the configuration JSON from disk."""
        actual_path = os.path.realpath(self._config_path)

        if not os.path.exists(actual_path):
            template = f"{actual_path}.template"
            if not os.path.exists(template):
                raise FileNotFoundError(f"Config file not found: {self._config_path}")
            actual_path = template

        with open(actual_path) as f:
            data = json.load(f)

        if not isinstance(data, dict):
            raise ValueError(f"Config file must contain a JSON object: {actual_path}")
        self._config_data = data

    def get(self, *keys: str, fallback: T | None = None) -> T | None:
        """
        Retrieves a deeply nested value from the config.

        Args:
            *keys (str): Sequence of keys to traverse the nested dictionary.
            fallback (Optional[Any]): A value to return if any key is not found.

        Example:
            config.get("SNMP", "timeout")
        """
        data: Any = self._config_data
        for key in keys:
            if not isinstance(data, dict) or key not in data:
                return fallback
            data = data[key]
        return data

    def reload(self) -> None:
        """Reloads the configuration from disk."""
        self._load()

    def as_dict(self) -> dict[str, Any]:
        """Returns the entire configuration as a dictionary."""
        return self._config_data.copy()

    def save(self, new_config: dict[str, Any]) -> None:
        """Overwrites and saves the entire config."""
        self._config_data = new_config
        with open(self._config_path, "w") as f:
            json.dump(self._config_data, f, indent=4)
