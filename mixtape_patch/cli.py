from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

import yaml
from pydantic import ValidationError

from .clients import ByteSource, FileClient, HttpClient
from .config import Settings, find_config
from .errors import MixtapeError
from .ingester import Ingester

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(levelname).1s | %(name)s | %(message)s"

C_RESET = "\033[0m"
LEVEL_COLORS = {
    logging.DEBUG: "\033[36m",  # Cyan
    logging.INFO: "\033[37m",  # Light gray
    logging.WARNING: "\033[33m",  # Yellow
    logging.ERROR: "\033[31m",  # Red
    logging.CRITICAL: "\033[35m",  # Magenta
}


class ColorFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        color = LEVEL_COLORS.get(record.levelno)
        if not color:
            return message
        return f"{color}{message}{C_RESET}"


class WarningBufferHandler(logging.Handler):
    def __init__(self) -> None:
        super().__init__(level=logging.WARNING)
        self.records: list[str] = []

    def emit(self, record: logging.LogRecord) -> None:
        try:
            msg = self.format(record)
        except Exception:  # pragma: no cover
            msg = record.getMessage()
        self.records.append(msg)


def build_parser() -> argparse.ArgumentParser:
    defaults = Settings()
    parser = argparse.ArgumentParser(
        prog="mixtape-patch",
        description="Apply a list of playlist changes to a mixtape catalog and write the result.",
    )
    parser.add_argument(
        "-u",
        dest="url",
        metavar="URL",
        help=f"The input file URL, used when -p is empty (default: {defaults.input.url})",
    )
    parser.add_argument(
        "-p",
        dest="input_path",
        metavar="PATH",
        help="The input file path; takes precedence over -u",
    )
    parser.add_argument(
        "-c",
        dest="changes_path",
        metavar="PATH",
        help=f"The changes file (default: {defaults.changes_path})",
    )
    parser.add_argument(
        "-o",
        dest="output_path",
        metavar="PATH",
        help=f"The output file path (default: {defaults.output_path})",
    )
    parser.add_argument("--config", type=Path, help="Path to mixtape.yaml")
    parser.add_argument("--log-level", default=None, help="Python logging level (default: INFO)")
    return parser


def configure_logging(level_name: str) -> WarningBufferHandler:
    log_level = getattr(logging, level_name.upper(), logging.INFO)
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(log_level)

    stream_handler = logging.StreamHandler()
    if sys.stderr.isatty():
        stream_handler.setFormatter(ColorFormatter(LOG_FORMAT))
    else:
        stream_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root_logger.addHandler(stream_handler)

    warn_buffer = WarningBufferHandler()
    warn_buffer.setFormatter(logging.Formatter(LOG_FORMAT))
    root_logger.addHandler(warn_buffer)
    return warn_buffer


def load_settings(args: argparse.Namespace) -> Settings:
    try:
        config_path = find_config(args.config)
        settings = Settings.load(config_path) if config_path else Settings()
        return settings.with_overrides(
            url=args.url,
            input_path=args.input_path,
            changes_path=args.changes_path,
            output_path=args.output_path,
            log_level=args.log_level,
        )
    except (OSError, yaml.YAMLError, ValidationError) as exc:
        raise SystemExit(f"Error encountered. Invalid configuration. {exc}") from exc


def input_reader(settings: Settings) -> ByteSource:
    if settings.input.path:
        return FileClient(settings.input.path)
    return HttpClient(settings.input.url, settings.http)


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    settings = load_settings(args)
    warn_buffer = configure_logging(settings.log_level)

    ingester = Ingester(
        input_reader(settings),
        FileClient(settings.changes_path),
        FileClient(settings.output_path),
    )
    try:
        ingester.execute()
    except MixtapeError as exc:
        raise SystemExit(f"Error encountered. {exc}") from exc
    finally:
        if warn_buffer.records:
            print("\nWarnings summary:", file=sys.stderr)
            for line in warn_buffer.records:
                print(f" - {line}", file=sys.stderr)

    logger.info("The output file %s was successfully created.", settings.output_path)
