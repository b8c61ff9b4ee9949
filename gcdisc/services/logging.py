"""Logging setup: structlog events rendered through stdlib handlers.

Diagnostics never touch stdout, which carries command output only. The
console handler writes to stderr and is skipped in TUI mode; ``log_dir``
adds rotating JSON files.
"""

import logging
import logging.handlers
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import structlog

CONSOLE_FORMAT = "%(asctime)s [%(levelname)8s] %(name)s: %(message)s"

SHARED_PROCESSORS: tuple[Any, ...] = (
    structlog.stdlib.filter_by_level,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.stdlib.PositionalArgumentsFormatter(),
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.format_exc_info,
    structlog.processors.UnicodeDecoder(),
)


@dataclass(frozen=True)
class LogFile:
    """A rotating log file under ``log_dir``."""
    filename: str
    max_bytes: int
    backup_count: int
    min_level: int | None = None  # None = the configured level


LOG_FILES = (
    LogFile("app.log", max_bytes=10 * 1024 * 1024, backup_count=5),
    LogFile("error.log", max_bytes=5 * 1024 * 1024, backup_count=3, min_level=logging.ERROR),
)


def _is_development() -> bool:
    return os.getenv("ENVIRONMENT", "development") == "development"


class LoggingService:
    """Installs root handlers and the structlog processor chain."""

    def __init__(
        self,
        log_level: str = "INFO",
        log_dir: Path | None = None,
        tui_mode: bool = False,
        development: bool | None = None,
    ) -> None:
        """Collect settings; nothing is installed until ``configure``.

        Args:
            log_level: Minimum level name, case-insensitive
            log_dir: Directory for rotating log files, or None
            tui_mode: Skip the console handler so the TUI is not overdrawn
            development: Human-readable console output; defaults to
                ``ENVIRONMENT`` being unset or ``development``
        """
        self.log_level = log_level.upper()
        self.log_dir = log_dir
        self.tui_mode = tui_mode
        self.is_development = _is_development() if development is None else development

    @property
    def numeric_level(self) -> int:
        return getattr(logging, self.log_level, logging.INFO)

    def configure(self) -> None:
        root = logging.getLogger()
        root.handlers.clear()
        root.setLevel(self.numeric_level)
        for handler in self._build_handlers():
            root.addHandler(handler)

        structlog.configure(
            processors=[*SHARED_PROCESSORS, self._renderer()],
            context_class=dict,
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )

    def _build_handlers(self) -> list[logging.Handler]:
        handlers: list[logging.Handler] = []

        if not self.tui_mode:
            console = logging.StreamHandler(sys.stderr)
            console.setLevel(self.numeric_level)
            if self.is_development:
                console.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt="%H:%M:%S"))
            else:
                console.setFormatter(logging.Formatter("%(message)s"))
            handlers.append(console)

        if self.log_dir:
            self.log_dir.mkdir(parents=True, exist_ok=True)
            handlers.extend(self._file_handler(self.log_dir, spec) for spec in LOG_FILES)

        # With no handler at all, logging.lastResort would write over the TUI
        return handlers or [logging.NullHandler()]

    def _file_handler(self, log_dir: Path, spec: LogFile) -> logging.Handler:
        handler = logging.handlers.RotatingFileHandler(
            filename=log_dir / spec.filename,
            maxBytes=spec.max_bytes,
            backupCount=spec.backup_count,
            encoding="utf-8",
        )
        handler.setLevel(spec.min_level if spec.min_level is not None else self.numeric_level)
        handler.setFormatter(logging.Formatter("%(message)s"))
        return handler

    def _renderer(self) -> Any:
        # One chain feeds every handler, so files force JSON
        if self.is_development and not self.log_dir:
            return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
        return structlog.processors.JSONRenderer()


def setup_logging(
    log_level: str = "INFO",
    log_dir: Path | None = None,
    tui_mode: bool = False,
    development: bool | None = None,
) -> LoggingService:
    """Configure logging for the process and return the service."""
    service = LoggingService(
        log_level=log_level,
        log_dir=log_dir,
        tui_mode=tui_mode,
        development=development,
    )
    service.configure()
    return service
