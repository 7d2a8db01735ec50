# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2025 Maurice Garcia

from __future__ import annotations

from pyifadmin.config.log_config import LoggerConfigurator
from pyifadmin.config.system_config_settings import SystemConfigSettings


class StartUp:
    """
    Class to handle the startup process of the PyIfAdmin job runner.
    It binds the system configuration and prepares logging.
    """

    @classmethod
    def initialize(cls,
                   config_path: str | None = None,
                   log_level: str | None = None,
                   to_console: bool | None = None,
                   engine_id: str | None = None) -> LoggerConfigurator:
        """
        Load configuration and set up logging.

        Arguments left as None fall back to the values in system.json.
        This method should be called once at the start of the process.
        """
        SystemConfigSettings.initialize(config_path)
        if engine_id:
            SystemConfigSettings.override_engine_id(engine_id)

        return LoggerConfigurator(SystemConfigSettings.log_dir(),
                                  SystemConfigSettings.log_filename(),
                                  log_level or SystemConfigSettings.log_level(),
                                  to_console=SystemConfigSettings.log_to_console() if to_console is None else to_console,
                                  rotate=SystemConfigSettings.log_rotate())
