# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2025 Maurice Garcia

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from pyifadmin.lib.types import FileNameStr, PathLike


class LoggerConfigurator:
    """
    Root logger setup for the job runner.

    Records go to ``<log_dir>/<log_filename>``, optionally rotated, and
    optionally mirrored to stderr. stdout is never touched: it carries the
    completion records.

    Configuring again replaces the handlers installed by the previous
    configuration instead of stacking them.
    """

    BANNER              = "==== PyIfAdmin Job Runner Starting ===="
    LOG_FORMAT          = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    ROTATE_MAX_BYTES    = 10 * 1024 * 1024
    ROTATE_BACKUPS      = 5

    _installed: list[logging.Handler] = []

    def __init__(self,
                 log_dir: PathLike,
                 log_filename: FileNameStr,
                 level: str = 'INFO', to_console: bool = False, rotate: bool = False
    ) -> None:
        """
        Args:
            log_dir (str): Directory for the log file; created if missing.
            log_filename (str): Log file name (e.g. 'pyifadmin.log').
            level (str): Level name ('debug', 'INFO', ...); unknown names mean INFO.
            to_console (bool): Also write records to stderr.
            rotate (bool): Rotate at 10MB keeping 5 backups.
        """
        self.log_dir = Path(log_dir)
        self.log_filename = log_filename
        self.level = logging.getLevelName(str(level).upper())
        if not isinstance(self.level, int):
            self.level = logging.INFO
        self.to_console = to_console
        self.rotate = rotate

        self._apply()

    @property
    def log_file(self) -> Path:
        return self.log_dir / self.log_filename

    def _build_handlers(self) -> list[logging.Handler]:
        self.log_dir.mkdir(parents=True, exist_ok=True)

        handlers: list[logging.Handler] = [
            RotatingFileHandler(self.log_file, maxBytes=self.ROTATE_MAX_BYTES, backupCount=self.ROTATE_BACKUPS)
            if self.rotate else logging.FileHandler(self.log_file)
        ]
        if self.to_console:
            handlers.append(logging.StreamHandler(sys.stderr))

        formatter = logging.Formatter(self.LOG_FORMAT)
        for handler in handlers:
            handler.setFormatter(formatter)
        return handlers

    def _apply(self) -> None:
        root = logging.getLogger()

        for old in LoggerConfigurator._installed:
            root.removeHandler(old)
            old.close()

        LoggerConfigurator._installed = self._build_handlers()
        for handler in LoggerConfigurator._installed:
            root.addHandler(handler)
        root.setLevel(self.level)

        root.info(self.BANNER)
