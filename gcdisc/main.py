"""Command-line entry point for the GameCube disc inspector.

This module provides:
- Command-line argument parsing (info, ls, find, browse, config)
- Application context with lazily created services
- Error reporting and exit codes
"""

import argparse
import json
import sys
from collections.abc import Sequence
from dataclasses import asdict
from pathlib import Path

import structlog

from gcdisc.models import ReaderConfig
from gcdisc.services.config import ConfigurationService
from gcdisc.services.disc_image import DiscImage
from gcdisc.services.errors import AppError, get_error_service, handle_error
from gcdisc.services.logging import setup_logging
from gcdisc.services.report import disc_summary, format_entry_line


log = structlog.stdlib.get_logger()

VERSION = "0.1.0"
DEFAULT_LOG_LEVEL = "WARNING"


class ApplicationContext:
    """Container for application services and settings."""

    def __init__(self, config_path: Path | None = None) -> None:
        self._config_path: Path | None = config_path
        self._config_service: ConfigurationService | None = None
        self._config: ReaderConfig | None = None

    @property
    def config_service(self) -> ConfigurationService:
        """Get the configuration service (lazy initialization)."""
        if self._config_service is None:
            self._config_service = ConfigurationService(config_path=self._config_path)
        return self._config_service

    @property
    def config(self) -> ReaderConfig:
        """Get the current reader configuration."""
        if self._config is None:
            self._config = self.config_service.load_config()
        return self._config

    def update_config(self, config: ReaderConfig) -> None:
        """Validate and save a new configuration, then use it."""
        self.config_service.save_config(config)
        self._config = config

    def open_image(self, path: Path) -> DiscImage:
        return DiscImage.open(path, self.config)


class ParsedArgs:
    """Type-safe container for parsed command-line arguments."""

    def __init__(
        self,
        command: str,
        image: Path | None,
        config: Path | None,
        log_level: str | None,
        log_dir: Path | None,
        as_json: bool = False,
        files_only: bool = False,
        name: str | None = None,
        settings: list[str] | None = None,
    ) -> None:
        self.command: str = command
        self.image: Path | None = image
        self.config: Path | None = config
        self.log_level: str | None = log_level
        self.log_dir: Path | None = log_dir
        self.as_json: bool = as_json
        self.files_only: bool = files_only
        self.name: str | None = name
        self.settings: list[str] = settings or []


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gc-disc-inspector",
        description="Inspect and validate GameCube disc images",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  gc-disc-inspector info game.iso           Show header and banner details
  gc-disc-inspector ls game.iso             List FST entries in disc order
  gc-disc-inspector find game.iso start.dol Look up a file entry by name
  gc-disc-inspector browse game.iso         Open the interactive browser
  gc-disc-inspector config --set log_level=DEBUG
                                            Change a saved setting
        """
    )

    _ = parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    _ = parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file (default: ~/.config/gc-disc-inspector/config.json)"
    )
    _ = parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
        help="Set the logging level (default: from config, else WARNING)"
    )
    _ = parser.add_argument(
        "--log-dir",
        type=Path,
        default=None,
        help="Directory for log files (default: console only)"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    info = subparsers.add_parser("info", help="Show header, region and banner details")
    _ = info.add_argument("image", type=Path)
    _ = info.add_argument("--json", dest="as_json", action="store_true", help="Emit JSON")

    ls = subparsers.add_parser("ls", help="List FST entries in on-disk order")
    _ = ls.add_argument("image", type=Path)
    _ = ls.add_argument("--files-only", action="store_true", help="Skip directory records")

    find = subparsers.add_parser("find", help="Look up a file entry by exact name")
    _ = find.add_argument("image", type=Path)
    _ = find.add_argument("name")

    browse = subparsers.add_parser("browse", help="Open the interactive browser")
    _ = browse.add_argument("image", type=Path)

    config_cmd = subparsers.add_parser("config", help="Show or change the saved configuration")
    _ = config_cmd.add_argument(
        "--set",
        dest="settings",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Change a setting (repeatable)"
    )

    return parser


def parse_arguments(argv: Sequence[str] | None = None) -> ParsedArgs:
    """Parse command-line arguments."""
    ns = build_parser().parse_args(argv)

    return ParsedArgs(
        command=str(ns.command),
        image=getattr(ns, "image", None),
        config=ns.config,
        log_level=ns.log_level,
        log_dir=ns.log_dir,
        as_json=bool(getattr(ns, "as_json", False)),
        files_only=bool(getattr(ns, "files_only", False)),
        name=getattr(ns, "name", None),
        settings=list(getattr(ns, "settings", [])),
    )


def run_info(image: DiscImage, as_json: bool) -> int:
    summary = disc_summary(image.header, image.region, image.banner)
    if as_json:
        print(json.dumps(summary, indent=2, ensure_ascii=False))
        return 0

    banner = summary.pop("banner")
    for key, value in summary.items():
        print(f"{key:>16}: {value}")
    for key, value in banner.items():
        print(f"{'banner.' + key:>16}: {value}")
    return 0


def run_ls(image: DiscImage, files_only: bool) -> int:
    tree = image.list_entries()
    entries = tree.files() if files_only else list(tree)
    for entry in entries:
        print(format_entry_line(entry))
    log.info("Entries listed", total=len(tree), shown=len(entries))
    return 0


def run_find(image: DiscImage, name: str) -> int:
    print(format_entry_line(image.find_file(name)))
    return 0


def run_browse(image: DiscImage) -> int:
    from gcdisc.ui.app import DiscBrowserApp

    DiscBrowserApp(image).run()
    return 0


def run_config(context: ApplicationContext, settings: Sequence[str]) -> int:
    """Print the configuration, applying and saving any settings first."""
    if settings:
        config = context.config
        for setting in settings:
            config = context.config_service.apply_setting(config, setting)
        context.update_config(config)
        log.info("Configuration updated", settings=list(settings))

    print(json.dumps(asdict(context.config), indent=2, ensure_ascii=False))
    return 0


def run_command(args: ParsedArgs, context: ApplicationContext) -> int:
    """Open the image, run one command, and always close the image."""
    if args.command == "config":
        return run_config(context, args.settings)
    if args.image is None:
        raise ValueError(f"No image given for {args.command}")

    with context.open_image(args.image) as image:
        if args.command == "info":
            return run_info(image, args.as_json)
        elif args.command == "ls":
            return run_ls(image, args.files_only)
        elif args.command == "find":
            return run_find(image, args.name or "")
        elif args.command == "browse":
            return run_browse(image)
    raise ValueError(f"Unknown command: {args.command}")


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point for the application."""
    args = parse_arguments(argv)
    tui_mode = args.command == "browse"

    _ = setup_logging(
        log_level=args.log_level or DEFAULT_LOG_LEVEL,
        log_dir=args.log_dir,
        tui_mode=tui_mode,
    )

    context = ApplicationContext(config_path=args.config)
    # A saved config's level applies only when --log-level was not given
    if (
        args.log_level is None
        and context.config_service.config_path.exists()
        and context.config.log_level != DEFAULT_LOG_LEVEL
    ):
        _ = setup_logging(log_level=context.config.log_level, log_dir=args.log_dir, tui_mode=tui_mode)

    log.info("Starting gc-disc-inspector", version=VERSION, command=args.command, image=str(args.image or ""))

    try:
        exit_code = run_command(args, context)

    except KeyboardInterrupt:
        log.info("Interrupted by user")
        exit_code = 130

    except (AppError, OSError, ValueError) as e:
        user_error = handle_error(e, operation=args.command, component="cli", context={"path": str(args.image or "")})
        print(get_error_service().create_user_message(user_error), file=sys.stderr)
        exit_code = 1

    log.info("Exiting", exit_code=exit_code)
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
